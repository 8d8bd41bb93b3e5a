"""Project-wide constants (replication factor, thresholds, file layout)."""

REPLICATION_FACTOR: int = 3  # distinct nodes every file record should reference
MIN_HEALTHY_REPLICAS: int = 2  # health check warns and repairs strictly below this

DEFAULT_NODE_COUNT: int = 4
DEFAULT_METADATA_FILE: str = "metadata.txt"

NODE_DIR_PREFIX: str = "node_"
DOWNLOAD_PREFIX: str = "downloaded_"
