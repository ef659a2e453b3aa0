"""Interactive tmux workspace manager."""

__version__ = "0.1.0"
