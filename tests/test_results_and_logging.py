"""Tests for operation results and logging setup."""

import logging

import pytest

from common.logging_config import get_logger, setup_logging
from controller.exceptions import FileNotFoundError, MetadataPersistenceError
from controller.schemas import OperationResult, RepairOutcome


class TestOperationResult:

    def test_success(self):
        result = OperationResult.success([1, 2, 3])
        assert result.ok
        assert result.unwrap() == [1, 2, 3]

    def test_failure_unwrap_raises(self):
        result = OperationResult.failure(FileNotFoundError("File 'x' not found in DFS"))
        assert not result.ok
        with pytest.raises(FileNotFoundError):
            result.unwrap()

    def test_persistence_error_still_ok(self):
        result = OperationResult(value=None, persistence_error=MetadataPersistenceError('ro'))
        assert result.ok


def test_repair_outcome_defaults_are_independent():
    first = RepairOutcome(filename='a.txt', active_replicas=1)
    second = RepairOutcome(filename='b.txt', active_replicas=1)
    first.added_nodes.append(4)
    assert second.added_nodes == []
    assert first.changed and not second.changed


def test_setup_logging_level_and_single_handler(monkeypatch):
    monkeypatch.setenv('LOG_LEVEL', 'debug')
    root = logging.getLogger()
    previous_level = root.level
    try:
        logger = setup_logging('cli')
        setup_logging('cli')
        ours = [h for h in root.handlers if getattr(h, '_replica_fs', False)]
        assert len(ours) == 1
        assert logger.level == logging.DEBUG
        assert get_logger('controller.replication_engine').getEffectiveLevel() == logging.DEBUG
    finally:
        for handler in [h for h in root.handlers if getattr(h, '_replica_fs', False)]:
            root.removeHandler(handler)
        root.setLevel(previous_level)
