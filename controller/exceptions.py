"""Custom exception classes for the Controller."""


class DFSException(Exception):
    """
    Base exception class for all DFS-related errors.
    """
    pass


class SourceNotFoundError(DFSException):
    """
    Raised when the file to upload does not exist in the source location.
    """
    pass


class InsufficientNodesError(DFSException):
    """
    Raised when fewer active nodes exist than the replication factor requires.
    """

    def __init__(self, active: int, required: int):
        super().__init__(
            f"Not enough active nodes for {required} replicas ({active} active)"
        )
        self.active = active
        self.required = required


class FileNotFoundError(DFSException):
    """
    Raised when a requested file has no record in the DFS.
    """
    pass


class AllReplicasUnavailableError(DFSException):
    """
    Raised when every node holding a file is inactive or missing the blob.
    """
    pass


class InvalidNodeIdError(DFSException):
    """
    Raised when a node id is outside the pool range 1..N.
    """

    def __init__(self, node_id: int, node_count: int):
        super().__init__(f"Invalid node ID {node_id} (valid: 1..{node_count})")
        self.node_id = node_id
        self.node_count = node_count


class NodeIOError(DFSException):
    """
    Raised when a node's storage fails during put/get/delete/copy.
    """

    def __init__(self, node_id: int, message: str):
        super().__init__(f"Node {node_id}: {message}")
        self.node_id = node_id


class MetadataPersistenceError(DFSException):
    """
    Raised when metadata cannot be written to its backing file.
    """
    pass


class InvalidFilenameError(DFSException):
    """
    Raised when a filename cannot be stored (empty, absolute, or escaping the node directory).
    """
    pass
