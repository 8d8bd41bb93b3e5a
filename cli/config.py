"""Configuration management for the DFS CLI."""

import json
import shutil
import tempfile
from pathlib import Path

from common.logging_config import get_logger
from controller import config as controller_config

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / '.replica-fs' / 'config.json'


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "node_count": controller_config.NODE_COUNT,
        "storage_root": controller_config.STORAGE_ROOT,
        "source_root": controller_config.SOURCE_ROOT,
        "metadata_path": controller_config.METADATA_PATH,
        "download_dir": ".",
    }

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.replica-fs/config.json)
        """
        self.config_path = Path(config_path)
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            self.config_path = Path(tempfile.gettempdir()) / '.replica-fs' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("config root must be a JSON object")
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (ValueError, OSError) as e:
                logger.warning(f"Unreadable config {self.config_path}, using defaults: {e}")
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError as copy_error:
                    logger.warning(f"Could not back up config to {backup_path}: {copy_error}")
                return self.DEFAULT_CONFIG.copy()
        else:
            config = self.DEFAULT_CONFIG.copy()
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except OSError as e:
                logger.warning(f"Could not write default config to {self.config_path}: {e}")
            return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except OSError as e:
            logger.warning(f"Could not save config to {self.config_path}: {e}")

    def get_node_count(self) -> int:
        """
        Get number of storage nodes in the pool.

        Returns:
            Node count (at least 1)
        """
        return max(1, int(self.data.get('node_count', controller_config.NODE_COUNT)))

    def get_storage_root(self) -> Path:
        """
        Get directory holding the node_<id> directories.

        Returns:
            Storage root path
        """
        return Path(self.data.get('storage_root', controller_config.STORAGE_ROOT))

    def get_source_root(self) -> Path:
        """
        Get directory uploads are read from.

        Returns:
            Source root path
        """
        return Path(self.data.get('source_root', controller_config.SOURCE_ROOT))

    def get_metadata_path(self) -> Path:
        """
        Get path of the metadata file.

        Returns:
            Metadata file path
        """
        return Path(self.data.get('metadata_path', controller_config.METADATA_PATH))

    def get_download_dir(self) -> Path:
        """
        Get directory downloads are written to.

        Returns:
            Download directory path
        """
        return Path(self.data.get('download_dir', '.'))
