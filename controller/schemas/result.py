"""Typed outcome returned across the engine/caller boundary."""

from dataclasses import dataclass
from typing import Any, Optional

from controller.exceptions import DFSException, MetadataPersistenceError


@dataclass
class OperationResult:
    """
    Outcome of a replication engine operation.

    ``error`` is set when the operation did not take effect. A
    ``persistence_error`` means the operation took effect in memory but
    the metadata file could not be rewritten.
    """
    value: Any = None
    error: Optional[DFSException] = None
    persistence_error: Optional[MetadataPersistenceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "OperationResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: DFSException) -> "OperationResult":
        return cls(error=error)

    def unwrap(self) -> Any:
        """Return the value, raising the carried error if the operation failed."""
        if self.error is not None:
            raise self.error
        return self.value
