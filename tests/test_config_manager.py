"""
Unit tests for ConfigManager.
"""

import json

import pytest

from countdown1356.utils.config_manager import ConfigManager


@pytest.fixture
def write_config(isolated_config):
    """Write a user config file and return a freshly loaded manager."""

    def _write(content):
        isolated_config.config_file.write_text(content, encoding="utf-8")
        ConfigManager._instance = None
        return ConfigManager.get_instance()

    return _write


def test_defaults_written_on_first_load(isolated_config):
    config = isolated_config

    assert config.get_config("SYSTEM_OPTIONS.LOG_LEVEL") == "INFO"
    assert config.get_config("DISPLAY.WINDOW_SIZE") == [480, 320]
    assert config.get_config("SURFACE.ENABLE_TRAY") is True
    assert config.config_file.exists()

    saved = json.loads(config.config_file.read_text(encoding="utf-8"))
    assert saved == ConfigManager.DEFAULT_CONFIG


def test_missing_path_returns_default(isolated_config):
    assert isolated_config.get_config("NOPE.MISSING", "fallback") == "fallback"
    assert isolated_config.get_config("SURFACE.TITLE.DEEPER", 3) == 3


def test_user_values_merge_with_defaults(write_config):
    config = write_config(json.dumps({"DISPLAY": {"HIDE_TO_TRAY": False}}))

    assert config.get_config("DISPLAY.HIDE_TO_TRAY") is False
    assert config.get_config("DISPLAY.WINDOW_SIZE") == [480, 320]
    assert config.get_config("SURFACE.TITLE") == "Countdown 1356"


def test_corrupt_config_falls_back_to_defaults(write_config):
    config = write_config("{oops")

    assert config.get_config("SURFACE.TITLE") == "Countdown 1356"


def test_default_prefs_dir_under_user_data(isolated_config, tmp_path):
    assert isolated_config.get_prefs_dir() == tmp_path.resolve() / "data" / "shared_prefs"


def test_custom_data_dir(write_config, tmp_path):
    custom = tmp_path / "custom"
    config = write_config(json.dumps({"SYSTEM_OPTIONS": {"DATA_DIR": str(custom)}}))

    assert config.get_prefs_dir() == custom
    assert config.get_config("SYSTEM_OPTIONS.LOG_LEVEL") == "INFO"


def test_singleton(isolated_config):
    assert ConfigManager.get_instance() is isolated_config
    assert ConfigManager() is isolated_config
