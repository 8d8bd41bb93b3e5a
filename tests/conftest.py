"""Shared pytest fixtures for all tests."""

import pytest
from pathlib import Path

from cli.config import Config
from controller.metadata_store import MetadataStore
from controller.replication_engine import ReplicationEngine
from storage_node.blob_storage import InMemoryBlobStore
from storage_node.node import Node


class FlakyBlobStore(InMemoryBlobStore):
    """In-memory store whose writes, reads or deletes can be made to fail."""

    def __init__(self):
        super().__init__()
        self.fail_puts = False
        self.fail_gets = False
        self.fail_deletes = False

    def put(self, name: str, data: bytes) -> None:
        if self.fail_puts:
            raise OSError("disk full")
        super().put(name, data)

    def get(self, name: str) -> bytes:
        if self.fail_gets:
            raise OSError("read error")
        return super().get(name)

    def delete(self, name: str) -> bool:
        if self.fail_deletes:
            raise OSError("permission denied")
        return super().delete(name)


@pytest.fixture
def source():
    """
    Source store holding the files available for upload.

    Returns:
        InMemoryBlobStore with a.txt and b.txt
    """
    return InMemoryBlobStore({
        'a.txt': b'alpha contents',
        'b.txt': b'bravo contents',
    })


@pytest.fixture
def make_nodes():
    """
    Factory for pools of failure-injectable in-memory nodes.

    Returns:
        Callable taking a node count and returning nodes with ids 1..count
    """
    def _make(count):
        return [Node(node_id, FlakyBlobStore()) for node_id in range(1, count + 1)]
    return _make


@pytest.fixture
def nodes(make_nodes):
    """
    Four healthy in-memory nodes with ids 1..4.

    Returns:
        List of Node
    """
    return make_nodes(4)


@pytest.fixture
def metadata_path(tmp_path):
    """Path of the metadata file for one test."""
    return tmp_path / 'metadata.txt'


@pytest.fixture
def engine(nodes, source, metadata_path):
    """
    Replication engine over four in-memory nodes with R=3.

    Returns:
        ReplicationEngine
    """
    return ReplicationEngine(nodes, MetadataStore(metadata_path), source)


@pytest.fixture
def temp_config(tmp_path):
    """
    Create temporary CLI config instance pointing at tmp_path.

    Returns:
        Config instance with temp config file
    """
    config = Config(tmp_path / '.replica-fs' / 'config.json')
    config.data.update({
        'node_count': 4,
        'storage_root': str(tmp_path / 'storage'),
        'source_root': str(tmp_path / 'uploads'),
        'metadata_path': str(tmp_path / 'storage' / 'metadata.txt'),
        'download_dir': str(tmp_path / 'downloads'),
    })
    config.save()
    return config


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing file uploads.

    Returns:
        Path to sample text file inside tmp_path/uploads
    """
    uploads = tmp_path / 'uploads'
    uploads.mkdir(exist_ok=True)
    file_path = uploads / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path
