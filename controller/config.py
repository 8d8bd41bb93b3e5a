"""Configuration settings for the replication controller."""

import os
from common.constants import DEFAULT_METADATA_FILE, DEFAULT_NODE_COUNT


NODE_COUNT = int(os.environ.get("DFS_NODE_COUNT", str(DEFAULT_NODE_COUNT)))

STORAGE_ROOT = os.environ.get("DFS_STORAGE_ROOT", ".")

SOURCE_ROOT = os.environ.get("DFS_SOURCE_ROOT", ".")

METADATA_PATH = os.environ.get(
    "DFS_METADATA_PATH", os.path.join(STORAGE_ROOT, DEFAULT_METADATA_FILE)
)
