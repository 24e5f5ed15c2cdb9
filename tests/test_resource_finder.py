"""
Unit tests for resource location.
"""

from countdown1356.utils.resource_finder import (
    get_project_root,
    get_user_data_dir,
    resource_finder,
)


def test_project_root_holds_entry_point():
    assert (get_project_root() / "main.py").is_file()


def test_user_data_dir_override(tmp_path, monkeypatch):
    monkeypatch.setenv("COUNTDOWN1356_DATA_DIR", str(tmp_path / "data"))

    data_dir = get_user_data_dir()
    assert data_dir == (tmp_path / "data").resolve()
    assert data_dir.is_dir()


def test_user_data_dir_without_create(tmp_path, monkeypatch):
    monkeypatch.setenv("COUNTDOWN1356_DATA_DIR", str(tmp_path / "later"))

    assert get_user_data_dir(create=False) == (tmp_path / "later").resolve()
    assert not (tmp_path / "later").exists()


def test_config_dir_found_under_home_override(tmp_path, monkeypatch):
    (tmp_path / "config").mkdir()
    monkeypatch.setenv("COUNTDOWN1356_HOME", str(tmp_path))

    assert resource_finder.find_config_dir() == (tmp_path / "config").resolve()


def test_absolute_directory_lookup(tmp_path):
    assert resource_finder.find_directory(tmp_path) == tmp_path
    assert resource_finder.find_directory(tmp_path / "missing") is None
