"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import List, Optional

from common.constants import DOWNLOAD_PREFIX
from common.logging_config import get_logger
from cli.config import Config
from cli.constants import GREEN, RED, RESET, YELLOW
from cli.models import (
    DeleteCommand,
    DownloadCommand,
    FailCommand,
    ListCommand,
    NodesCommand,
    RecoverCommand,
    UploadCommand,
)
from cli.utils import format_file_size, format_node_ids
from controller.bootstrap import build_engine
from controller.exceptions import (
    AllReplicasUnavailableError,
    DFSException,
    FileNotFoundError,
    InsufficientNodesError,
    InvalidNodeIdError,
    NodeIOError,
    SourceNotFoundError,
)
from controller.replication_engine import ReplicationEngine
from controller.schemas import OperationResult, ReplicaHealthReport

logger = get_logger(__name__)


_config: Optional[Config] = None
_engine: Optional[ReplicationEngine] = None


def get_config() -> Config:
    """
    Get or create global Config instance.

    Returns:
        Config instance
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def set_config(config: Config) -> None:
    """Replace the global Config; the engine is rebuilt on next use."""
    global _config, _engine
    _config = config
    _engine = None


def get_engine() -> ReplicationEngine:
    """
    Get or create global ReplicationEngine instance from the CLI config.

    Returns:
        ReplicationEngine instance
    """
    global _engine
    if _engine is None:
        config = get_config()
        logger.debug("Creating new ReplicationEngine instance")
        _engine = build_engine(
            node_count=config.get_node_count(),
            storage_root=config.get_storage_root(),
            metadata_path=config.get_metadata_path(),
            source_root=config.get_source_root(),
        )
    return _engine


def format_error(error: DFSException) -> str:
    """Map an engine error to the message shown to the user."""
    if isinstance(error, SourceNotFoundError):
        return f"{RED}Error:{RESET} {error}. Nothing was uploaded."
    if isinstance(error, InsufficientNodesError):
        return (
            f"{RED}Error:{RESET} Not enough active nodes for {error.required} replicas! "
            f"({error.active} active)"
        )
    if isinstance(error, FileNotFoundError):
        return f"{RED}Error:{RESET} {error}."
    if isinstance(error, AllReplicasUnavailableError):
        return f"{RED}[ERROR]{RESET} All replicas are unavailable. File cannot be downloaded."
    if isinstance(error, InvalidNodeIdError):
        return f"{RED}Error:{RESET} Invalid node ID {error.node_id} (valid: 1..{error.node_count})."
    if isinstance(error, NodeIOError):
        return f"{RED}Error:{RESET} Storage failure on {error}"
    return f"{RED}Error:{RESET} {error}"


def _with_persistence_warning(lines: List[str], result: OperationResult) -> str:
    if result.persistence_error is not None:
        lines.append(f"{YELLOW}Warning:{RESET} Failed to save metadata: {result.persistence_error}")
    return "\n".join(lines)


def format_health_reports(reports: List[ReplicaHealthReport], replication_factor: int) -> List[str]:
    """Render health check findings and repair actions, one line per event."""
    lines = []
    for report in reports:
        lines.append(
            f"{YELLOW}WARNING:{RESET} File '{report.filename}' has only "
            f"{report.active_replicas} active replicas! Data loss risk!"
        )
        repair = report.repair
        if repair is None:
            lines.append(f"  Re-replication of '{report.filename}' failed.")
            continue
        if repair.source_node is None:
            lines.append(f"  No active replica of '{report.filename}' to copy from.")
            continue
        for node_id in repair.restored_nodes:
            lines.append(f"RE-REPLICATED: File '{report.filename}' restored to Node {node_id}.")
        for node_id in repair.added_nodes:
            lines.append(f"RE-REPLICATED: File '{report.filename}' added to Node {node_id}.")
        for node_id in repair.failed_nodes:
            lines.append(f"  Copy of '{report.filename}' to Node {node_id} failed.")
        if repair.active_replicas < replication_factor:
            lines.append(
                f"  '{report.filename}' still has {repair.active_replicas} of "
                f"{replication_factor} active replicas."
            )
    return lines


def handle_upload(cmd: UploadCommand, engine: Optional[ReplicationEngine] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with filename
        engine: Optional ReplicationEngine for dependency injection (testing)

    Returns:
        Success or error message
    """
    logger.info(f"Executing upload command: filename={cmd.filename}")
    if engine is None:
        engine = get_engine()
    result = engine.upload(cmd.filename)
    if not result.ok:
        return format_error(result.error)
    lines = [
        f"{GREEN}[UPLOAD SUCCESS]{RESET} File replicated to nodes: "
        f"{format_node_ids(result.value.replica_nodes)}"
    ]
    return _with_persistence_warning(lines, result)


def handle_download(
    cmd: DownloadCommand,
    engine: Optional[ReplicationEngine] = None,
    download_dir: Optional[Path] = None
) -> str:
    """
    Handle 'download' command.

    Args:
        cmd: DownloadCommand with filename and optional output_path
        engine: Optional ReplicationEngine for dependency injection (testing)
        download_dir: Directory for the default downloaded_<name> output

    Returns:
        Success or error message with download results
    """
    logger.info(f"Executing download command: filename={cmd.filename} output_path={cmd.output_path}")
    if engine is None:
        engine = get_engine()
    result = engine.download(cmd.filename)
    if not result.ok:
        return format_error(result.error)

    receipt = result.value
    if cmd.output_path:
        output = Path(cmd.output_path)
    else:
        if download_dir is None:
            download_dir = get_config().get_download_dir()
        output = Path(download_dir) / f"{DOWNLOAD_PREFIX}{Path(cmd.filename).name}"

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(receipt.data)
    except OSError as e:
        logger.error(f"Could not write download to {output}: {e}")
        return f"{RED}Error:{RESET} Could not write {output}: {e}"

    return (
        f"{GREEN}[DOWNLOAD SUCCESS]{RESET} File downloaded from Node {receipt.node_id} "
        f"-> {output} ({format_file_size(receipt.size)})"
    )


def handle_delete(cmd: DeleteCommand, engine: Optional[ReplicationEngine] = None) -> str:
    """
    Handle 'delete' command.

    Args:
        cmd: DeleteCommand with filename
        engine: Optional ReplicationEngine for dependency injection (testing)

    Returns:
        Success or error message
    """
    if engine is None:
        engine = get_engine()
    result = engine.delete(cmd.filename)
    if not result.ok:
        return format_error(result.error)
    return _with_persistence_warning([f"{GREEN}[DELETE SUCCESS]{RESET} File removed from DFS."], result)


def handle_list(cmd: ListCommand, engine: Optional[ReplicationEngine] = None) -> str:
    """
    Handle 'list' command.

    Returns:
        Formatted list of files and their replica nodes
    """
    if engine is None:
        engine = get_engine()
    listings = engine.list_files()
    if not listings:
        return "(Empty) No files stored."
    lines = ["FILES IN DFS:"]
    for listing in listings:
        lines.append(f" - {listing.filename} → Nodes: {format_node_ids(listing.replica_nodes)}")
    return "\n".join(lines)


def _handle_transition(result: OperationResult, engine: ReplicationEngine, header: str) -> str:
    if not result.ok:
        return format_error(result.error)
    lines = [header] + format_health_reports(result.value, engine.replication_factor)
    return _with_persistence_warning(lines, result)


def handle_fail(cmd: FailCommand, engine: Optional[ReplicationEngine] = None) -> str:
    """
    Handle 'fail' command.

    Returns:
        Node failure notice followed by any health warnings and repairs
    """
    logger.info(f"Executing fail command: node_id={cmd.node_id}")
    if engine is None:
        engine = get_engine()
    return _handle_transition(
        engine.fail_node(cmd.node_id), engine, f"[NODE FAILED] Node {cmd.node_id} is inactive."
    )


def handle_recover(cmd: RecoverCommand, engine: Optional[ReplicationEngine] = None) -> str:
    """
    Handle 'recover' command.

    Returns:
        Node recovery notice followed by any health warnings and repairs
    """
    logger.info(f"Executing recover command: node_id={cmd.node_id}")
    if engine is None:
        engine = get_engine()
    return _handle_transition(
        engine.recover_node(cmd.node_id), engine, f"[NODE RECOVERED] Node {cmd.node_id} is active."
    )


def handle_nodes(cmd: NodesCommand, engine: Optional[ReplicationEngine] = None) -> str:
    """
    Handle 'nodes' command.

    Returns:
        One status line per node
    """
    if engine is None:
        engine = get_engine()
    lines = ["NODE STATUS:"]
    for status in engine.show_nodes():
        state = f"{GREEN}Active{RESET}" if status.active else f"{RED}Failed{RESET}"
        lines.append(f"Node {status.node_id}: {state}")
    return "\n".join(lines)
