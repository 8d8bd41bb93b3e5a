"""Builds a replication engine backed by node directories on disk."""

from pathlib import Path
from typing import Optional, Union

from common.constants import NODE_DIR_PREFIX
from common.logging_config import get_logger
from controller import config
from controller.metadata_store import MetadataStore
from controller.replication_engine import ReplicationEngine
from storage_node.blob_storage import DirectoryBlobStore
from storage_node.node import Node

logger = get_logger(__name__)

PathLike = Union[str, Path]


def node_directory(storage_root: PathLike, node_id: int) -> Path:
    """Directory standing in for a node, e.g. ``<root>/node_3``."""
    return Path(storage_root) / f"{NODE_DIR_PREFIX}{node_id}"


def build_engine(
    node_count: Optional[int] = None,
    storage_root: Optional[PathLike] = None,
    metadata_path: Optional[PathLike] = None,
    source_root: Optional[PathLike] = None
) -> ReplicationEngine:
    """
    Create node directories, load metadata and return a ready engine.

    Args:
        node_count: Size of the node pool (default: DFS_NODE_COUNT)
        storage_root: Parent directory of node_<id> directories (default: DFS_STORAGE_ROOT)
        metadata_path: Metadata file (default: DFS_METADATA_PATH)
        source_root: Directory uploads are read from (default: DFS_SOURCE_ROOT)
    """
    node_count = config.NODE_COUNT if node_count is None else node_count
    storage_root = Path(config.STORAGE_ROOT if storage_root is None else storage_root)
    metadata_path = Path(config.METADATA_PATH if metadata_path is None else metadata_path)
    source_root = Path(config.SOURCE_ROOT if source_root is None else source_root)

    if node_count < 1:
        raise ValueError(f"Node count must be at least 1, got {node_count}")

    nodes = []
    for node_id in range(1, node_count + 1):
        store = DirectoryBlobStore(node_directory(storage_root, node_id))
        store.ensure_directory()
        nodes.append(Node(node_id, store))

    logger.debug(f"Node directories ready under {storage_root.resolve()}")

    return ReplicationEngine(
        nodes=nodes,
        metadata_store=MetadataStore(metadata_path),
        source=DirectoryBlobStore(source_root),
    )
