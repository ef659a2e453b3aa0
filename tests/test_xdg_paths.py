"""Tests for txmux.xdg_paths module."""

from pathlib import Path
from unittest.mock import patch

import pytest

from txmux.xdg_paths import (
    ensure_directories,
    get_config_file_path,
    get_scripts_dir,
    get_workspaces_dir,
)


class TestPaths:
    """Tests for the default storage locations."""

    def test_follow_xdg_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should place config and descriptors under XDG_CONFIG_HOME, scripts under XDG_DATA_HOME."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        assert get_config_file_path() == tmp_path / "config" / "txmux" / "config.yaml"
        assert get_workspaces_dir() == tmp_path / "config" / "txmux" / "workspaces"
        assert get_scripts_dir() == tmp_path / "data" / "txmux" / "scripts"


class TestEnsureDirectories:
    """Tests for ensure_directories function."""

    def test_creates_nested(self, tmp_path: Path) -> None:
        """Should create every given directory."""
        ensure_directories(tmp_path / "a" / "b", tmp_path / "c")
        assert (tmp_path / "a" / "b").is_dir()
        assert (tmp_path / "c").is_dir()

    def test_failure_is_logged(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Should log and carry on when a directory cannot be created."""
        with patch.object(Path, "mkdir", side_effect=PermissionError("denied")):
            ensure_directories(tmp_path / "x")
        assert "Failed to create directory" in caplog.text
