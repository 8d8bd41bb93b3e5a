"""Storage node: a numbered blob store with an active/failed flag."""

from common.logging_config import get_logger
from common.types import NodeStatus
from storage_node.blob_storage import BlobStore

logger = get_logger(__name__)


class Node:
    """
    A storage node in the simulated pool.

    The node does not check its own ``active`` flag on put/get/delete;
    callers decide whether an inactive node may be touched. Failing or
    recovering a node leaves its stored blobs untouched.
    """

    def __init__(self, node_id: int, store: BlobStore, active: bool = True):
        if node_id < 1:
            raise ValueError(f"Node id must be positive, got {node_id}")
        self.node_id = node_id
        self.store = store
        self.active = active

    def fail(self) -> None:
        self.active = False
        logger.info(f"Node {self.node_id} marked failed")

    def recover(self) -> None:
        self.active = True
        logger.info(f"Node {self.node_id} marked active")

    def put(self, name: str, data: bytes) -> None:
        self.store.put(name, data)

    def get(self, name: str) -> bytes:
        return self.store.get(name)

    def delete(self, name: str) -> bool:
        return self.store.delete(name)

    def exists(self, name: str) -> bool:
        return self.store.exists(name)

    def status(self) -> NodeStatus:
        return NodeStatus(node_id=self.node_id, active=self.active)

    def __repr__(self) -> str:
        state = "active" if self.active else "failed"
        return f"Node({self.node_id}, {state})"
