"""Tests for the placement policy."""

import pytest

from common.types import FileRecord, NodeStatus
from controller.exceptions import InsufficientNodesError
from controller.placement import PlacementPolicy


def pool(*active_flags):
    """Node snapshot with ids 1..N and the given active flags."""
    return [NodeStatus(node_id=i, active=flag) for i, flag in enumerate(active_flags, start=1)]


@pytest.fixture
def policy():
    return PlacementPolicy(replication_factor=3)


class TestInitialPlacement:
    """choose_initial_placement"""

    def test_first_active_nodes_ascending(self, policy):
        assert policy.choose_initial_placement(pool(True, True, True, True)) == [1, 2, 3]

    def test_skips_inactive(self, policy):
        assert policy.choose_initial_placement(pool(True, False, True, True)) == [1, 3, 4]

    def test_input_order_does_not_matter(self, policy):
        nodes = list(reversed(pool(True, True, True, True)))
        assert policy.choose_initial_placement(nodes) == [1, 2, 3]

    def test_insufficient_nodes(self, policy):
        with pytest.raises(InsufficientNodesError) as exc_info:
            policy.choose_initial_placement(pool(True, False, False, True))
        assert exc_info.value.active == 2
        assert exc_info.value.required == 3

    def test_explicit_replication_factor(self, policy):
        assert policy.choose_initial_placement(pool(True, True, True), replication_factor=2) == [1, 2]


class TestRepairTargets:
    """choose_repair_targets"""

    def test_fully_replicated_needs_nothing(self, policy):
        record = FileRecord('a.txt', [1, 2, 3])
        assert policy.choose_repair_targets(record, pool(True, True, True, True)) == []

    def test_ghosts_first_then_growth(self, policy):
        record = FileRecord('a.txt', [1, 2, 3])
        assert policy.choose_repair_targets(record, pool(False, False, True, True)) == [1, 2, 4]

    def test_growth_lists_every_spare_node(self, policy):
        record = FileRecord('a.txt', [1, 2, 3])
        targets = policy.choose_repair_targets(record, pool(True, True, False, True, True, True))
        assert targets == [3, 4, 5, 6]

    def test_ghosts_in_ascending_order(self, policy):
        record = FileRecord('a.txt', [3, 1, 2])
        assert policy.choose_repair_targets(record, pool(False, False, True, False, False)) == [1, 2]

    def test_no_candidates_left(self, policy):
        record = FileRecord('a.txt', [1, 2, 3])
        assert policy.choose_repair_targets(record, pool(True, True, False)) == [3]


class TestReplicationFactorOverride:

    def test_zero_is_not_replaced_by_default(self, policy):
        assert policy.choose_initial_placement(pool(True, True, True), replication_factor=0) == []

    def test_zero_needs_no_repair(self, policy):
        record = FileRecord('a.txt', [1])
        assert policy.choose_repair_targets(record, pool(False, True, True), replication_factor=0) == []

    def test_none_uses_policy_default(self, policy):
        assert policy.choose_initial_placement(pool(True, True, True, True), replication_factor=None) == [1, 2, 3]
