"""Shared fixtures for txmux tests."""

from pathlib import Path

import pytest

from txmux.models import Pane, PaneResize, ResizeDimension, SplitDirection, Workspace
from txmux.store import WorkspaceStore


@pytest.fixture
def store(tmp_path: Path) -> WorkspaceStore:
    """A store rooted in a temporary directory."""
    return WorkspaceStore(tmp_path / "scripts", tmp_path / "workspaces")


@pytest.fixture
def dev_workspace() -> Workspace:
    """Two panes: a dev server and a test runner below it."""
    return Workspace(
        name="dev",
        base_dir="/proj",
        panes=[
            Pane(command="npm run dev"),
            Pane(split=SplitDirection.VERTICAL, command="npm test"),
        ],
    )


@pytest.fixture
def full_workspace() -> Workspace:
    """Four panes exercising every optional pane field."""
    return Workspace(
        name="full",
        base_dir="/home/user/project",
        panes=[
            Pane(command="vim .", resize=PaneResize(dimension=ResizeDimension.WIDTH, amount=120)),
            Pane(split=SplitDirection.HORIZONTAL, directory="/var/log", command="tail -f syslog"),
            Pane(
                split=SplitDirection.VERTICAL,
                resize=PaneResize(dimension=ResizeDimension.HEIGHT, amount=10),
            ),
            Pane(split=SplitDirection.HORIZONTAL, command="htop"),
        ],
    )
