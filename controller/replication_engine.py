"""Replication engine: owns the node pool and file metadata, keeps replicas consistent."""

from pathlib import PurePosixPath
from typing import Dict, List, Optional, Sequence, Tuple

from common.constants import MIN_HEALTHY_REPLICAS, REPLICATION_FACTOR
from common.logging_config import get_logger
from common.types import FileRecord, NodeStatus
from controller.exceptions import (
    AllReplicasUnavailableError,
    DFSException,
    FileNotFoundError,
    InvalidFilenameError,
    InvalidNodeIdError,
    MetadataPersistenceError,
    NodeIOError,
    SourceNotFoundError,
)
from controller.metadata_store import MetadataStore
from controller.placement import PlacementPolicy
from controller.schemas import (
    DownloadReceipt,
    FileListing,
    OperationResult,
    RepairOutcome,
    ReplicaHealthReport,
    UploadReceipt,
)
from storage_node.blob_storage import BlobStore
from storage_node.node import Node

logger = get_logger(__name__)


def validate_filename(filename: str) -> None:
    """
    Reject names that cannot be stored as a blob or a metadata line.

    Raises:
        InvalidFilenameError: If the name is empty, absolute, escapes the
            node directory or contains a line break
    """
    if not filename or not filename.strip():
        raise InvalidFilenameError("Filename must not be empty")
    if "\n" in filename or "\r" in filename:
        raise InvalidFilenameError(f"Filename must not contain line breaks: {filename!r}")
    path = PurePosixPath(filename)
    if path.is_absolute() or ".." in path.parts:
        raise InvalidFilenameError(f"Filename must be a relative name inside the DFS: {filename}")


class ReplicationEngine:
    """
    Coordinator for a fixed pool of storage nodes.

    Every operation runs synchronously to completion; the engine is not
    thread-safe and expects one caller at a time. Mutations of the
    file -> nodes mapping are written through the metadata store after the
    in-memory mapping is updated. Public operations never raise DFS errors;
    they return an ``OperationResult``.
    """

    def __init__(
        self,
        nodes: Sequence[Node],
        metadata_store: MetadataStore,
        source: BlobStore,
        placement: Optional[PlacementPolicy] = None,
        replication_factor: int = REPLICATION_FACTOR,
        min_healthy_replicas: int = MIN_HEALTHY_REPLICAS
    ):
        """
        Args:
            nodes: Node pool; ids must be exactly 1..N
            metadata_store: Backing store for file records
            source: Where uploads are read from
            placement: Placement policy (defaults to ascending-id placement)
            replication_factor: Distinct nodes each file should reference
            min_healthy_replicas: Health check repairs files with fewer active replicas
        """
        ordered = sorted(nodes, key=lambda n: n.node_id)
        expected = list(range(1, len(ordered) + 1))
        if [n.node_id for n in ordered] != expected:
            raise ValueError(f"Node ids must be 1..{len(ordered)}, got {[n.node_id for n in ordered]}")

        self.nodes: List[Node] = ordered
        self.metadata_store = metadata_store
        self.source = source
        self.replication_factor = replication_factor
        self.min_healthy_replicas = min_healthy_replicas
        self.placement = placement or PlacementPolicy(replication_factor)
        self.metadata: Dict[str, FileRecord] = {}

        logger.info(f"DFS initialized with {len(self.nodes)} nodes (replication factor {replication_factor})")
        self._load_metadata()

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    def _load_metadata(self) -> None:
        try:
            mapping = self.metadata_store.load()
        except MetadataPersistenceError as e:
            logger.warning(f"Failed to load metadata: {e}")
            return

        for filename, node_ids in mapping.items():
            known = [node_id for node_id in node_ids if 1 <= node_id <= self.node_count]
            if len(known) != len(node_ids):
                dropped = [node_id for node_id in node_ids if node_id not in known]
                logger.warning(f"Dropping unknown node id(s) {dropped} from record '{filename}'")
            if not known:
                continue
            self.metadata[filename] = FileRecord(filename, known)

    def _persist(self) -> Optional[MetadataPersistenceError]:
        """Write the current mapping. Failures are reported, never rolled back."""
        mapping = {name: list(record.replica_nodes) for name, record in self.metadata.items()}
        try:
            self.metadata_store.save(mapping)
        except MetadataPersistenceError as e:
            logger.error(f"Failed to save metadata: {e}")
            return e
        return None

    def _node(self, node_id: int) -> Node:
        return self.nodes[node_id - 1]

    def _check_node_id(self, node_id: int) -> Node:
        if isinstance(node_id, bool) or not isinstance(node_id, int) or not 1 <= node_id <= self.node_count:
            raise InvalidNodeIdError(node_id, self.node_count)
        return self._node(node_id)

    def _get_record(self, filename: str) -> FileRecord:
        record = self.metadata.get(filename)
        if record is None:
            raise FileNotFoundError(f"File '{filename}' not found in DFS")
        return record

    def _active_count(self, record: FileRecord) -> int:
        return sum(1 for node_id in record.replica_nodes if self._node(node_id).active)

    # Uploads

    def _upload(self, filename: str) -> FileRecord:
        validate_filename(filename)

        if not self.source.exists(filename):
            raise SourceNotFoundError(f"Source file '{filename}' not found")
        try:
            data = self.source.get(filename)
        except OSError as e:
            raise SourceNotFoundError(f"Source file '{filename}' could not be read: {e}") from e

        # Placement is decided before any byte is copied.
        placement = self.placement.choose_initial_placement(self.nodes, self.replication_factor)

        previous = self.metadata.get(filename)
        previous_nodes = set(previous.replica_nodes) if previous else set()
        # Content on nodes the current record lists, put back if this upload fails.
        originals = self._snapshot(filename, [n for n in placement if n in previous_nodes])
        written: List[int] = []

        for node_id in placement:
            try:
                self._node(node_id).put(filename, data)
            except OSError as e:
                logger.error(f"Error during file replication to Node {node_id}: {e}")
                touched = written + ([node_id] if node_id in originals else [])
                self._rollback_upload(filename, touched, originals)
                raise NodeIOError(node_id, f"write of '{filename}' failed: {e}") from e
            written.append(node_id)

        record = FileRecord(filename, placement)
        self.metadata[filename] = record
        logger.info(f"Uploaded '{filename}' ({len(data)} bytes) to nodes {placement}")
        return record

    def _snapshot(self, filename: str, node_ids: List[int]) -> Dict[int, bytes]:
        saved: Dict[int, bytes] = {}
        for node_id in node_ids:
            node = self._node(node_id)
            if not node.exists(filename):
                continue
            try:
                saved[node_id] = node.get(filename)
            except OSError as e:
                logger.warning(f"Could not read existing '{filename}' on Node {node_id}: {e}")
        return saved

    def _rollback_upload(self, filename: str, node_ids: List[int], originals: Dict[int, bytes]) -> None:
        """Restore replaced replicas and remove copies this upload created."""
        for node_id in node_ids:
            node = self._node(node_id)
            try:
                if node_id in originals:
                    node.put(filename, originals[node_id])
                else:
                    node.delete(filename)
            except OSError as e:
                logger.warning(f"Rollback of '{filename}' on Node {node_id} failed: {e}")

    def upload(self, filename: str) -> OperationResult:
        """
        Copy a source file onto ``replication_factor`` active nodes and record it.

        Re-uploading a filename replaces its record; blobs left on nodes the
        new placement no longer uses are not removed. If any copy fails, nodes
        the old record lists get their previous content back.

        Returns:
            OperationResult with an ``UploadReceipt``, or one of
            SourceNotFoundError, InsufficientNodesError, NodeIOError,
            InvalidFilenameError
        """
        try:
            record = self._upload(filename)
        except DFSException as e:
            logger.warning(f"Upload of '{filename}' failed: {e}")
            return OperationResult.failure(e)

        receipt = UploadReceipt(filename=filename, replica_nodes=list(record.replica_nodes))
        return OperationResult(value=receipt, persistence_error=self._persist())

    # Downloads

    def _download(self, filename: str) -> DownloadReceipt:
        record = self._get_record(filename)

        for node_id in record.replica_nodes:
            node = self._node(node_id)
            if not node.active:
                continue
            if not node.exists(filename):
                logger.warning(f"Node {node_id} is listed for '{filename}' but does not hold it")
                continue
            try:
                data = node.get(filename)
            except OSError as e:
                logger.warning(f"Read of '{filename}' from Node {node_id} failed: {e}")
                continue
            logger.info(f"Downloaded '{filename}' from Node {node_id}")
            return DownloadReceipt(filename=filename, node_id=node_id, data=data)

        raise AllReplicasUnavailableError(
            f"All replicas of '{filename}' are unavailable (nodes {record.replica_nodes})"
        )

    def download(self, filename: str) -> OperationResult:
        """
        Fetch a file from the first listed node that is active and holds it.

        Returns:
            OperationResult with a ``DownloadReceipt``, or FileNotFoundError /
            AllReplicasUnavailableError
        """
        try:
            return OperationResult.success(self._download(filename))
        except DFSException as e:
            logger.warning(f"Download of '{filename}' failed: {e}")
            return OperationResult.failure(e)

    # Deletes

    def _delete(self, filename: str) -> List[int]:
        record = self._get_record(filename)
        removed: List[int] = []

        for node_id in record.replica_nodes:
            node = self._node(node_id)
            if not node.active:
                logger.warning(f"Skipping delete of '{filename}' on inactive Node {node_id}")
                continue
            try:
                if node.delete(filename):
                    removed.append(node_id)
                else:
                    logger.warning(f"Node {node_id} did not hold '{filename}'")
            except OSError as e:
                logger.warning(f"Error during deletion of '{filename}' on Node {node_id}: {e}")

        del self.metadata[filename]
        logger.info(f"Deleted '{filename}' (removed from nodes {removed})")
        return removed

    def delete(self, filename: str) -> OperationResult:
        """
        Remove a file's blobs from its active nodes and drop its record.

        Inactive nodes are skipped and keep their copy.

        Returns:
            OperationResult with the ids of nodes the blob was removed from,
            or FileNotFoundError
        """
        try:
            removed = self._delete(filename)
        except DFSException as e:
            logger.warning(f"Delete of '{filename}' failed: {e}")
            return OperationResult.failure(e)
        return OperationResult(value=removed, persistence_error=self._persist())

    # Queries

    def list_files(self) -> List[FileListing]:
        """All file records, ordered by filename."""
        return [
            FileListing(filename=name, replica_nodes=list(self.metadata[name].replica_nodes))
            for name in sorted(self.metadata)
        ]

    def show_nodes(self) -> List[NodeStatus]:
        """Identity and availability of every node, ascending by id."""
        return [node.status() for node in self.nodes]

    def get_record(self, filename: str) -> Optional[FileRecord]:
        record = self.metadata.get(filename)
        return record.copy() if record else None

    def active_replica_count(self, filename: str) -> int:
        return self._active_count(self._get_record(filename))

    # Failure handling

    def fail_node(self, node_id: int) -> OperationResult:
        """
        Mark a node failed and run a health check.

        Returns:
            OperationResult with the health check's ``ReplicaHealthReport`` list,
            or InvalidNodeIdError
        """
        try:
            node = self._check_node_id(node_id)
        except InvalidNodeIdError as e:
            logger.warning(str(e))
            return OperationResult.failure(e)

        node.fail()
        reports, persistence_error = self._run_health_check()
        return OperationResult(value=reports, persistence_error=persistence_error)

    def recover_node(self, node_id: int) -> OperationResult:
        """
        Mark a node active and run a health check.

        Returns:
            OperationResult with the health check's ``ReplicaHealthReport`` list,
            or InvalidNodeIdError
        """
        try:
            node = self._check_node_id(node_id)
        except InvalidNodeIdError as e:
            logger.warning(str(e))
            return OperationResult.failure(e)

        node.recover()
        reports, persistence_error = self._run_health_check()
        return OperationResult(value=reports, persistence_error=persistence_error)

    def check_health(self) -> OperationResult:
        """Run a health check pass outside of a node transition."""
        reports, persistence_error = self._run_health_check()
        return OperationResult(value=reports, persistence_error=persistence_error)

    def _run_health_check(self) -> Tuple[List[ReplicaHealthReport], Optional[MetadataPersistenceError]]:
        """
        Warn about and repair every file below the healthy-replica threshold.

        The threshold is independent of the replication factor: a file with
        fewer than ``replication_factor`` but at least ``min_healthy_replicas``
        active replicas is left alone.
        """
        reports: List[ReplicaHealthReport] = []
        changed = False

        for filename in sorted(self.metadata):
            active = self._active_count(self.metadata[filename])
            if active >= self.min_healthy_replicas:
                continue

            logger.warning(f"File '{filename}' has only {active} active replicas! Data loss risk!")
            report = ReplicaHealthReport(filename=filename, active_replicas=active)
            try:
                report.repair = self._repair(filename)
                changed = changed or bool(report.repair.added_nodes)
            except DFSException as e:
                logger.error(f"Error during re-replication of '{filename}': {e}")
            reports.append(report)

        if not changed:
            return reports, None
        return reports, self._persist()

    # Repair

    def _repair(self, filename: str) -> RepairOutcome:
        record = self._get_record(filename)
        active = self._active_count(record)

        if active >= self.replication_factor:
            return RepairOutcome(filename=filename, active_replicas=active)

        source = next(
            (
                self._node(node_id)
                for node_id in record.replica_nodes
                if self._node(node_id).active and self._node(node_id).exists(filename)
            ),
            None,
        )
        if source is None:
            logger.warning(f"No active replica of '{filename}' to copy from; cannot repair")
            return RepairOutcome(filename=filename, active_replicas=active)

        try:
            data = source.get(filename)
        except OSError as e:
            raise NodeIOError(source.node_id, f"read of '{filename}' failed: {e}") from e

        outcome = RepairOutcome(filename=filename, source_node=source.node_id, active_replicas=active)

        for target_id in self.placement.choose_repair_targets(record, self.nodes, self.replication_factor):
            target = self._node(target_id)
            listed = target_id in record.replica_nodes
            if not listed and active >= self.replication_factor:
                break

            try:
                target.put(filename, data)
            except OSError as e:
                logger.error(f"Re-replication of '{filename}' to Node {target_id} failed: {e}")
                outcome.failed_nodes.append(target_id)
                continue

            if listed:
                outcome.restored_nodes.append(target_id)
                logger.info(f"RE-REPLICATED: File '{filename}' restored to Node {target_id}")
            else:
                record.add_node(target_id)
                outcome.added_nodes.append(target_id)
                active += 1
                logger.info(f"RE-REPLICATED: File '{filename}' added to Node {target_id}")

        outcome.active_replicas = active
        return outcome

    def repair(self, filename: str) -> OperationResult:
        """
        Copy a file from a surviving replica until it has ``replication_factor``
        active replicas or no candidate nodes remain.

        A file with no active replica is left untouched.

        Returns:
            OperationResult with a ``RepairOutcome``, or FileNotFoundError /
            NodeIOError
        """
        try:
            outcome = self._repair(filename)
        except DFSException as e:
            logger.warning(f"Repair of '{filename}' failed: {e}")
            return OperationResult.failure(e)

        persistence_error = self._persist() if outcome.added_nodes else None
        return OperationResult(value=outcome, persistence_error=persistence_error)
