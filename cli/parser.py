"""Command parser for CLI input."""

import shlex

from cli.models import (
    CommandRequest,
    DeleteCommand,
    DownloadCommand,
    FailCommand,
    ListCommand,
    NodesCommand,
    RecoverCommand,
    UploadCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Upload/Download/Delete/List/Fail/Recover/Nodes)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0].lower()
    args = tokens[1:]

    if command_name == "upload":
        return UploadCommand(filename=_rest_as_filename(args, "upload <filename>"))
    elif command_name == "download":
        return _parse_download(args)
    elif command_name == "delete":
        return DeleteCommand(filename=_rest_as_filename(args, "delete <filename>"))
    elif command_name == "list":
        return ListCommand()
    elif command_name == "fail":
        return FailCommand(node_id=_parse_node_id(args, "fail <node_id>"))
    elif command_name == "recover":
        return RecoverCommand(node_id=_parse_node_id(args, "recover <node_id>"))
    elif command_name == "nodes":
        return NodesCommand()
    else:
        raise ParseError(f"Invalid command '{command_name}'. Type 'help' for usage.")


def _rest_as_filename(args: list[str], usage: str) -> str:
    """Return the rest of the line as one filename, or fail with a usage message."""
    filename = " ".join(args)
    if not filename:
        raise ParseError(f"Usage: {usage}")
    return filename


def _parse_download(args: list[str]) -> DownloadCommand:
    """Parse 'download <filename> [output_path]' command."""
    if len(args) not in (1, 2) or not args[0]:
        raise ParseError("Usage: download <filename> [output_path]")

    filename = args[0]
    output_path = args[1] if len(args) > 1 else None

    return DownloadCommand(filename=filename, output_path=output_path)


def _parse_node_id(args: list[str], usage: str) -> int:
    """Parse a single integer node id argument."""
    if len(args) != 1:
        raise ParseError(f"Usage: {usage}")
    try:
        return int(args[0])
    except ValueError:
        raise ParseError(f"Node id must be an integer, got '{args[0]}'")
