"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class UploadCommand:
    """Upload a local file into the DFS."""

    filename: str
    command: Literal["upload"] = "upload"


@dataclass(frozen=True)
class DownloadCommand:
    """Download file by filename."""

    filename: str
    output_path: str | None = None
    command: Literal["download"] = "download"


@dataclass(frozen=True)
class DeleteCommand:
    """Delete a file from the DFS."""

    filename: str
    command: Literal["delete"] = "delete"


@dataclass(frozen=True)
class ListCommand:
    """List stored files with their replica nodes."""

    command: Literal["list"] = "list"


@dataclass(frozen=True)
class FailCommand:
    """Simulate a node failure."""

    node_id: int
    command: Literal["fail"] = "fail"


@dataclass(frozen=True)
class RecoverCommand:
    """Bring a failed node back."""

    node_id: int
    command: Literal["recover"] = "recover"


@dataclass(frozen=True)
class NodesCommand:
    """Show node status."""

    command: Literal["nodes"] = "nodes"


CommandRequest = (
    UploadCommand
    | DownloadCommand
    | DeleteCommand
    | ListCommand
    | FailCommand
    | RecoverCommand
    | NodesCommand
)
