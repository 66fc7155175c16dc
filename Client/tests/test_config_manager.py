"""
Tests for the configuration manager
"""

import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from managers import ConfigManager, DEFAULT_CONFIG


def test_load_creates_default_config(tmp_path):
    manager = ConfigManager(base_dir=tmp_path)
    config = manager.load_config()

    assert config == DEFAULT_CONFIG
    assert json.loads((tmp_path / "config.json").read_text()) == DEFAULT_CONFIG


def test_load_merges_missing_keys(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"log_level": "DEBUG"}))

    manager = ConfigManager(base_dir=tmp_path)
    manager.load_config()

    assert manager.get("log_level") == "DEBUG"
    assert manager.get("log_retention_days") == 30


def test_set_saves_to_file(tmp_path):
    manager = ConfigManager(base_dir=tmp_path)
    manager.load_config()
    manager.set("log_level", "WARNING")

    reloaded = ConfigManager(base_dir=tmp_path)
    reloaded.load_config()
    assert reloaded.get("log_level") == "WARNING"


def test_database_path_resolution(tmp_path):
    manager = ConfigManager(base_dir=tmp_path)
    manager.load_config()
    assert manager.get_database_path() == tmp_path / "nimbussync.db"

    absolute = tmp_path / "elsewhere" / "meta.db"
    manager.set("database_path", str(absolute))
    assert manager.get_database_path() == absolute
