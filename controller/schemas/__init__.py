"""Pydantic schemas for engine operation results and reports."""

from controller.schemas.reports import (
    UploadReceipt,
    DownloadReceipt,
    FileListing,
    RepairOutcome,
    ReplicaHealthReport,
)
from controller.schemas.result import OperationResult

__all__ = [
    "UploadReceipt",
    "DownloadReceipt",
    "FileListing",
    "RepairOutcome",
    "ReplicaHealthReport",
    "OperationResult",
]
