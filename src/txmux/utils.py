"""Utility functions for txmux."""

import logging
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

FZF_OPTIONS = ("--height", "40%", "--reverse")


def is_fzf_available() -> bool:
    """Check whether fzf is on PATH."""
    return shutil.which("fzf") is not None


def select_with_fzf(entries: list[str], prompt: str = "Select: ") -> str | None:
    """Pick one of ``entries`` with fzf.

    Args:
        entries: Workspace names or other lines to choose from.
        prompt: The fzf prompt.

    Returns:
        The picked entry. None if there was nothing to pick, the picker was
        aborted, or fzf could not be started.
    """
    if not entries:
        return None

    try:
        result = subprocess.run(
            ["fzf", "--prompt", prompt, *FZF_OPTIONS],
            input="\n".join(entries),
            stdout=subprocess.PIPE,
            text=True,
            check=False,
        )
    except OSError as e:
        logger.debug("fzf failed to start: %s", e)
        return None

    # 1 = no match, 130 = aborted
    choice = result.stdout.strip()
    if result.returncode != 0 or choice not in entries:
        return None
    return choice


DEFAULT_PATH_MAX_LEN = 50


def compress_path(path: str, max_len: int = DEFAULT_PATH_MAX_LEN) -> str:
    """Compress a directory path for display.

    Replaces the home directory with ``~`` and truncates from the start.

    Args:
        path: The path to compress.
        max_len: Maximum length before truncation.

    Returns:
        Compressed path.
    """
    if not path:
        return ""

    home = str(Path.home())
    if path == home or path.startswith(home + "/"):
        path = "~" + path[len(home) :]

    if len(path) <= max_len:
        return path

    return "..." + path[-(max_len - 3) :]
