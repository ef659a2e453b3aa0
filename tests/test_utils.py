"""Tests for txmux.utils module."""

import subprocess
from pathlib import Path
from unittest.mock import patch

from txmux.utils import compress_path, is_fzf_available, select_with_fzf


class TestCompressPath:
    """Tests for compress_path function."""

    def test_empty_path(self) -> None:
        """Should return empty string for empty input."""
        assert compress_path("") == ""

    def test_home_replaced_with_tilde(self) -> None:
        """Base directories under home should be shown with ~."""
        with patch.object(Path, "home", return_value=Path("/home/user")):
            assert compress_path("/home/user/projects/api") == "~/projects/api"
            assert compress_path("/home/user") == "~"

    def test_similar_prefix_not_replaced(self) -> None:
        """A sibling directory sharing the home prefix should stay untouched."""
        with patch.object(Path, "home", return_value=Path("/home/user")):
            assert compress_path("/home/username/src") == "/home/username/src"

    def test_long_path_truncated(self) -> None:
        """Long paths should keep their tail."""
        long_path = "/srv/" + "x" * 80 + "/app"
        result = compress_path(long_path, max_len=20)
        assert result.startswith("...")
        assert result.endswith("/app")
        assert len(result) == 20


class TestSelectWithFzf:
    """Tests for select_with_fzf function."""

    def test_empty_entries_returns_none(self) -> None:
        """Should not start fzf without entries."""
        with patch("txmux.utils.subprocess.run") as mock_run:
            assert select_with_fzf([]) is None
        mock_run.assert_not_called()

    def test_selection(self) -> None:
        """Should return the chosen workspace name."""
        mock_result = subprocess.CompletedProcess(args=["fzf"], returncode=0, stdout="web\n", stderr="")
        with patch("txmux.utils.subprocess.run", return_value=mock_result) as mock_run:
            assert select_with_fzf(["api", "web"], prompt="Workspace: ") == "web"
        args = mock_run.call_args[0][0]
        assert args[args.index("--prompt") + 1] == "Workspace: "
        assert mock_run.call_args[1]["input"] == "api\nweb"

    def test_cancelled(self) -> None:
        """Should return None when fzf is aborted."""
        mock_result = subprocess.CompletedProcess(args=["fzf"], returncode=130, stdout="", stderr="")
        with patch("txmux.utils.subprocess.run", return_value=mock_result):
            assert select_with_fzf(["api"]) is None

    def test_unknown_output_ignored(self) -> None:
        """Output that is not one of the entries should not be returned."""
        mock_result = subprocess.CompletedProcess(args=["fzf"], returncode=0, stdout="typed query\n", stderr="")
        with patch("txmux.utils.subprocess.run", return_value=mock_result):
            assert select_with_fzf(["api", "web"]) is None

    def test_not_installed(self) -> None:
        """Should return None when fzf is missing."""
        with patch("txmux.utils.subprocess.run", side_effect=FileNotFoundError):
            assert select_with_fzf(["api"]) is None


class TestIsFzfAvailable:
    """Tests for is_fzf_available function."""

    def test_available(self) -> None:
        """Should return True when fzf is on PATH."""
        with patch("txmux.utils.shutil.which", return_value="/usr/bin/fzf") as mock_which:
            assert is_fzf_available() is True
        mock_which.assert_called_once_with("fzf")

    def test_missing(self) -> None:
        """Should return False when fzf is not on PATH."""
        with patch("txmux.utils.shutil.which", return_value=None):
            assert is_fzf_available() is False
