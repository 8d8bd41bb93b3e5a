"""Blob storage backends for storage nodes: put/get/delete/exists of named byte blobs."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional


class BlobStore(ABC):
    """Storage capability behind a single node."""

    @abstractmethod
    def put(self, name: str, data: bytes) -> None:
        """
        Store a blob, overwriting any existing blob of the same name.

        Raises:
            OSError: If the write fails
        """

    @abstractmethod
    def get(self, name: str) -> bytes:
        """
        Read an entire blob.

        Raises:
            FileNotFoundError: If the blob does not exist
            OSError: If the read fails
        """

    @abstractmethod
    def delete(self, name: str) -> bool:
        """
        Delete a blob.

        Returns:
            True if the blob was deleted, False if it didn't exist
        """

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check if a blob exists."""

    @abstractmethod
    def list_blobs(self) -> List[str]:
        """List names of all stored blobs."""


class DirectoryBlobStore(BlobStore):
    """
    Blob store backed by a directory on disk (one file per blob).
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def ensure_directory(self) -> None:
        """Ensure the storage directory exists."""
        self.root.mkdir(parents=True, exist_ok=True)

    def get_blob_path(self, name: str) -> Path:
        """
        Get file path for a blob.

        Args:
            name: Blob name (the stored filename)

        Returns:
            Path object for blob file
        """
        return self.root / name

    def put(self, name: str, data: bytes) -> None:
        filepath = self.get_blob_path(name)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        filepath.write_bytes(data)

    def get(self, name: str) -> bytes:
        filepath = self.get_blob_path(name)
        if not filepath.is_file():
            raise FileNotFoundError(f"Blob {name} not found in {self.root}")
        return filepath.read_bytes()

    def delete(self, name: str) -> bool:
        filepath = self.get_blob_path(name)
        if filepath.is_file():
            filepath.unlink()
            return True
        return False

    def exists(self, name: str) -> bool:
        return self.get_blob_path(name).is_file()

    def get_blob_size(self, name: str) -> Optional[int]:
        """
        Get size of blob file in bytes.

        Returns:
            Size in bytes, or None if blob doesn't exist
        """
        filepath = self.get_blob_path(name)
        if filepath.is_file():
            return filepath.stat().st_size
        return None

    def list_blobs(self) -> List[str]:
        if not self.root.exists():
            return []
        return sorted(
            str(path.relative_to(self.root))
            for path in self.root.rglob("*")
            if path.is_file()
        )


class InMemoryBlobStore(BlobStore):
    """Blob store held in a dict. Used for tests and dry runs."""

    def __init__(self, blobs: Optional[Dict[str, bytes]] = None):
        self.blobs: Dict[str, bytes] = dict(blobs or {})

    def put(self, name: str, data: bytes) -> None:
        self.blobs[name] = bytes(data)

    def get(self, name: str) -> bytes:
        try:
            return self.blobs[name]
        except KeyError:
            raise FileNotFoundError(f"Blob {name} not found")

    def delete(self, name: str) -> bool:
        return self.blobs.pop(name, None) is not None

    def exists(self, name: str) -> bool:
        return name in self.blobs

    def list_blobs(self) -> List[str]:
        return sorted(self.blobs)
