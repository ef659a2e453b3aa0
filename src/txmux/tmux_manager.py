"""Tmux and editor process management for txmux."""

import os
import shlex
import subprocess
from pathlib import Path

from txmux.config import Config
from txmux.errors import ChildProcessFailedError

DEFAULT_EDITOR = "vim"


def is_inside_tmux() -> bool:
    """Check if we're running inside a tmux session."""
    return os.environ.get("TMUX") is not None


def session_exists(session_name: str) -> bool:
    """Check if a tmux session with the given name exists.

    The name is matched exactly, not as a prefix of a longer session name.

    Args:
        session_name: The session name to check.

    Returns:
        True if the session exists, False otherwise.
    """
    try:
        result = subprocess.run(
            ["tmux", "has-session", "-t", f"={session_name}"],
            capture_output=True,
            check=False,
        )
    except FileNotFoundError:
        # tmux not installed
        return False
    return result.returncode == 0


def _run_foreground(cmd: list[str], what: str) -> None:
    """Run a command attached to the terminal and wait for it.

    Raises:
        ChildProcessFailedError: If the command cannot start or exits non-zero.
    """
    try:
        result = subprocess.run(cmd, check=False)
    except OSError as e:
        raise ChildProcessFailedError(f"Failed to start {what}: {e}") from e
    if result.returncode != 0:
        raise ChildProcessFailedError(f"{what} exited with code {result.returncode}", result.returncode)


def run_script(script_path: Path, shell: str = "bash", dry_run: bool = False) -> list[str]:
    """Run a workspace script in the foreground.

    Args:
        script_path: The generated workspace script.
        shell: Shell used to interpret the script.
        dry_run: If True, return the command without executing.

    Returns:
        List of commands that were (or would be) executed.

    Raises:
        ChildProcessFailedError: If the script cannot start or exits non-zero.
    """
    cmd = [shell, str(script_path)]
    if not dry_run:
        _run_foreground(cmd, shell)
    return [shlex.join(cmd)]


def resolve_editor(config: Config | None = None) -> str:
    """Return the editor command: $EDITOR, then the configured default, then vim."""
    editor = os.environ.get("EDITOR")
    if editor:
        return editor
    if config is not None and config.default_editor:
        return config.default_editor
    return DEFAULT_EDITOR


def open_editor(path: Path, editor: str) -> None:
    """Open a file or directory in an external editor and wait for it to exit.

    Args:
        path: File or directory to open.
        editor: Editor command, possibly with flags (e.g. ``code -w``).

    Raises:
        ChildProcessFailedError: If the editor cannot start or exits non-zero.
    """
    argv = shlex.split(editor)
    if not argv:
        raise ChildProcessFailedError("No editor configured")
    _run_foreground([*argv, str(path)], f"Editor '{argv[0]}'")
