"""Report models returned by replication engine operations."""

from typing import List, Optional
from pydantic import BaseModel


class UploadReceipt(BaseModel):
    """Placement committed by a successful upload."""
    filename: str
    replica_nodes: List[int]


class DownloadReceipt(BaseModel):
    """Content served by a download and the node that served it."""
    filename: str
    node_id: int
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class FileListing(BaseModel):
    """One row of the file listing."""
    filename: str
    replica_nodes: List[int]


class RepairOutcome(BaseModel):
    """What a repair pass did for a single file."""
    filename: str
    source_node: Optional[int] = None
    restored_nodes: List[int] = []
    added_nodes: List[int] = []
    failed_nodes: List[int] = []
    active_replicas: int

    @property
    def changed(self) -> bool:
        return bool(self.restored_nodes or self.added_nodes)


class ReplicaHealthReport(BaseModel):
    """A file found below the healthy-replica threshold during a health check."""
    filename: str
    active_replicas: int
    repair: Optional[RepairOutcome] = None
