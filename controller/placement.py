"""Replica placement for initial uploads and repair."""

from typing import Iterable, List, Optional, Protocol

from common.constants import REPLICATION_FACTOR
from common.logging_config import get_logger
from common.types import FileRecord
from controller.exceptions import InsufficientNodesError

logger = get_logger(__name__)


class NodeLike(Protocol):
    node_id: int
    active: bool


class PlacementPolicy:
    """
    Chooses which nodes should hold a file.

    All choices are by ascending node id, so identical operation sequences
    produce identical placements.
    """

    def __init__(self, replication_factor: int = REPLICATION_FACTOR):
        self.replication_factor = replication_factor

    def choose_initial_placement(
        self,
        nodes: Iterable[NodeLike],
        replication_factor: Optional[int] = None
    ) -> List[int]:
        """
        Select nodes for a new upload.

        Args:
            nodes: Current node pool snapshot
            replication_factor: Replicas required (defaults to the policy's)

        Returns:
            The first ``replication_factor`` active node ids, ascending

        Raises:
            InsufficientNodesError: If fewer active nodes exist than required.
                Nothing is selected in that case.
        """
        required = self.replication_factor if replication_factor is None else replication_factor
        active_ids = sorted(node.node_id for node in nodes if node.active)

        if len(active_ids) < required:
            raise InsufficientNodesError(active=len(active_ids), required=required)

        return active_ids[:required]

    def choose_repair_targets(
        self,
        record: FileRecord,
        nodes: Iterable[NodeLike],
        replication_factor: Optional[int] = None
    ) -> List[int]:
        """
        Select nodes to receive a copy of an under-replicated file.

        Listed nodes that are currently inactive come first (their content is
        restored for when they come back); they do not raise the active
        replica count. Then every active node not yet listed, ascending, so a
        failed copy can fall through to the next spare; the caller stops once
        the deficit is covered.

        Args:
            record: The file's current record
            nodes: Current node pool snapshot
            replication_factor: Replicas required (defaults to the policy's)

        Returns:
            Candidate node ids in copy order; empty if nothing is missing
        """
        required = self.replication_factor if replication_factor is None else replication_factor
        active_ids = {node.node_id for node in nodes if node.active}

        listed = record.replica_nodes
        deficit = required - sum(1 for node_id in listed if node_id in active_ids)
        if deficit <= 0:
            return []

        ghosts = sorted(node_id for node_id in listed if node_id not in active_ids)
        growth = sorted(node_id for node_id in active_ids if node_id not in listed)

        if len(growth) < deficit:
            logger.debug(
                f"Only {len(growth)} of {deficit} additional nodes available for '{record.filename}'"
            )

        return ghosts + growth
