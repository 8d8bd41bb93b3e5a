"""Shared data type definitions (FileRecord, NodeStatus)."""

from dataclasses import dataclass, field
from typing import List


@dataclass
class FileRecord:
    """
    Placement of one stored file.

    ``replica_nodes`` keeps placement order and never holds duplicates.
    """
    filename: str
    replica_nodes: List[int] = field(default_factory=list)

    def add_node(self, node_id: int) -> bool:
        """Append a node id unless already listed. Returns True if appended."""
        if node_id in self.replica_nodes:
            return False
        self.replica_nodes.append(node_id)
        return True

    def copy(self) -> "FileRecord":
        return FileRecord(self.filename, list(self.replica_nodes))


@dataclass(frozen=True)
class NodeStatus:
    """Point-in-time view of a node's identity and availability."""
    node_id: int
    active: bool
