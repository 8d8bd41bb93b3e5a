"""REPL with prompt_toolkit for user interaction."""

import os
import sys
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from cli.commands import (
    get_config,
    get_engine,
    handle_delete,
    handle_download,
    handle_fail,
    handle_list,
    handle_nodes,
    handle_recover,
    handle_upload,
)
from cli.completer import DFSCompleter
from cli.constants import (
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.models import (
    DeleteCommand,
    DownloadCommand,
    FailCommand,
    ListCommand,
    NodesCommand,
    RecoverCommand,
    UploadCommand,
)
from cli.parser import ParseError, parse_command
from controller.replication_engine import ReplicationEngine


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome() -> None:
    """Display logo and command summary."""
    print(LOGO)
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def dispatch_command(cmd_obj, engine: ReplicationEngine) -> str:
    """Dispatch parsed command to appropriate handler."""
    if isinstance(cmd_obj, UploadCommand):
        return handle_upload(cmd_obj, engine)
    elif isinstance(cmd_obj, DownloadCommand):
        return handle_download(cmd_obj, engine, get_config().get_download_dir())
    elif isinstance(cmd_obj, DeleteCommand):
        return handle_delete(cmd_obj, engine)
    elif isinstance(cmd_obj, ListCommand):
        return handle_list(cmd_obj, engine)
    elif isinstance(cmd_obj, FailCommand):
        return handle_fail(cmd_obj, engine)
    elif isinstance(cmd_obj, RecoverCommand):
        return handle_recover(cmd_obj, engine)
    elif isinstance(cmd_obj, NodesCommand):
        return handle_nodes(cmd_obj, engine)
    else:
        return f"Unknown command type: {type(cmd_obj)}"


def repl_loop(engine: Optional[ReplicationEngine] = None) -> None:
    """Start interactive REPL with prompt_toolkit."""
    if engine is None:
        engine = get_engine()

    completer = DFSCompleter(
        source_root=get_config().get_source_root(),
        stored_files=lambda: [listing.filename for listing in engine.list_files()],
        node_ids=lambda: [status.node_id for status in engine.show_nodes()],
    )
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=completer, history=history, style=STYLE
    )

    show_welcome()

    while True:
        try:
            user_input = session.prompt([("class:prompt", PROMPT_TEXT)])

            if not user_input.strip():
                continue

            if user_input.strip() == "exit":
                print("Goodbye!")
                break

            if user_input.strip() == "help":
                print(HELP_TEXT)
                continue

            if user_input.strip() == "clear":
                clear_screen()
                show_welcome()
                continue

            cmd_obj = parse_command(user_input)
            result = dispatch_command(cmd_obj, engine)
            print(result)
            print()

        except ParseError as e:
            print(f"Error: {e}")
        except KeyboardInterrupt:
            continue
        except EOFError:
            print("\nGoodbye!")
            break
