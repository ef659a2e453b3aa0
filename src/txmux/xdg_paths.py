"""XDG-compliant path management for txmux."""

import logging
from pathlib import Path

from xdg_base_dirs import xdg_config_home, xdg_data_home

APP_NAME = "txmux"

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    return xdg_config_home() / APP_NAME


def get_data_dir() -> Path:
    """Get the data directory path."""
    return xdg_data_home() / APP_NAME


def get_config_file_path() -> Path:
    """Get the config.yaml file path."""
    return get_config_dir() / "config.yaml"


def get_scripts_dir() -> Path:
    """Get the default directory holding generated workspace scripts."""
    return get_data_dir() / "scripts"


def get_workspaces_dir() -> Path:
    """Get the default directory holding workspace JSON descriptors."""
    return get_config_dir() / "workspaces"


def ensure_directories(*directories: Path) -> None:
    """Create the given directories if they don't exist.

    Failures are logged and otherwise ignored; operations that need a missing
    directory report their own error later.

    Args:
        *directories: Directories to create.
    """
    for directory in directories:
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Failed to create directory %s: %s", directory, e)
