"""Tests for CLI configuration module."""

import json
from pathlib import Path

from cli.config import Config
from controller import config as controller_config


def test_config_creates_default_file(tmp_path):
    """Test that config file is created with defaults if missing."""
    config_path = tmp_path / '.replica-fs' / 'config.json'
    config = Config(config_path)

    assert config_path.exists()

    assert config.data['node_count'] == controller_config.NODE_COUNT
    assert config.data['storage_root'] == controller_config.STORAGE_ROOT
    assert config.data['metadata_path'] == controller_config.METADATA_PATH
    assert config.data['download_dir'] == '.'


def test_config_loads_existing_file(tmp_path):
    """Test loading existing config file."""
    config_path = tmp_path / '.replica-fs' / 'config.json'
    config_path.parent.mkdir(parents=True)

    with open(config_path, 'w') as f:
        json.dump({'node_count': 6, 'storage_root': '/srv/dfs'}, f)

    config = Config(config_path)

    assert config.get_node_count() == 6
    assert config.get_storage_root() == Path('/srv/dfs')
    assert config.data['download_dir'] == '.'


def test_config_handles_corrupted_file(tmp_path):
    """Test recovery from corrupted config file."""
    config_path = tmp_path / '.replica-fs' / 'config.json'
    config_path.parent.mkdir(parents=True)

    with open(config_path, 'w') as f:
        f.write('{ invalid json content')

    config = Config(config_path)
    assert config.data['node_count'] == controller_config.NODE_COUNT

    backup_path = config_path.with_suffix('.json.bak')
    assert backup_path.exists()


def test_config_rejects_non_object_json(tmp_path):
    config_path = tmp_path / 'config.json'
    config_path.write_text('[1, 2, 3]')

    config = Config(config_path)

    assert config.data == Config.DEFAULT_CONFIG


def test_config_save(temp_config):
    """Test saving changed values."""
    temp_config.data['node_count'] = 8
    temp_config.save()

    with open(temp_config.config_path, 'r') as f:
        data = json.load(f)
    assert data['node_count'] == 8
    assert Config(temp_config.config_path).get_node_count() == 8


def test_config_paths(temp_config, tmp_path):
    assert temp_config.get_storage_root() == tmp_path / 'storage'
    assert temp_config.get_source_root() == tmp_path / 'uploads'
    assert temp_config.get_metadata_path() == tmp_path / 'storage' / 'metadata.txt'
    assert temp_config.get_download_dir() == tmp_path / 'downloads'


def test_node_count_at_least_one(temp_config):
    temp_config.data['node_count'] = 0
    assert temp_config.get_node_count() == 1


def test_config_directory_created_if_missing(tmp_path):
    """Test that config directory is created if it doesn't exist."""
    config_path = tmp_path / 'nested' / 'deep' / '.replica-fs' / 'config.json'

    assert not config_path.parent.exists()

    Config(config_path)
    assert config_path.parent.exists()
    assert config_path.exists()
