"""Workspace operations behind the tx commands."""

import logging
from dataclasses import dataclass
from pathlib import Path

from txmux.compiler import compile_workspace
from txmux.errors import StorageError, WorkspaceExistsError, WorkspaceNotFoundError
from txmux.models import Workspace, validate_workspace_name
from txmux.store import DeleteResult, WorkspaceStore

logger = logging.getLogger(__name__)


@dataclass
class WorkspaceSummary:
    """One row of the workspace list."""

    name: str
    pane_count: int | None = None  # None when the descriptor is unavailable
    base_dir: str | None = None


def create_workspace(store: WorkspaceStore, workspace: Workspace) -> Path:
    """Compile and store a new workspace.

    Args:
        store: The workspace store.
        workspace: The new workspace.

    Returns:
        Path of the generated script.

    Raises:
        ValueError: If the name is invalid.
        WorkspaceExistsError: If the name is taken. Nothing is written.
    """
    validate_workspace_name(workspace.name)
    if store.exists(workspace.name):
        raise WorkspaceExistsError(workspace.name)
    return store.save(workspace, compile_workspace(workspace))


def update_workspace(store: WorkspaceStore, workspace: Workspace) -> Path:
    """Recompile and overwrite a stored workspace."""
    return store.save(workspace, compile_workspace(workspace))


def get_workspace(store: WorkspaceStore, name: str) -> Workspace:
    """Load a stored workspace.

    Raises:
        WorkspaceNotFoundError: If no descriptor exists for ``name``.
    """
    workspace = store.load(name)
    if workspace is None:
        raise WorkspaceNotFoundError(name)
    return workspace


def rename_workspace(store: WorkspaceStore, old_name: str, new_name: str) -> Workspace:
    """Rename a workspace and regenerate its script under the new name.

    Args:
        store: The workspace store.
        old_name: Current name.
        new_name: New name.

    Returns:
        The renamed workspace.

    Raises:
        ValueError: If ``new_name`` is invalid.
        WorkspaceNotFoundError: If ``old_name`` has no descriptor.
        WorkspaceExistsError: If ``new_name`` is taken.
    """
    validate_workspace_name(new_name)
    workspace = get_workspace(store, old_name)
    if store.exists(new_name):
        raise WorkspaceExistsError(new_name)

    if not store.rename(old_name, new_name):
        logger.info("Descriptor for %s was not moved; writing a fresh one", old_name)

    renamed = workspace.model_copy(update={"name": new_name})
    store.save(renamed, compile_workspace(renamed))
    return renamed


def delete_workspace(store: WorkspaceStore, name: str) -> DeleteResult:
    """Delete a stored workspace.

    Raises:
        WorkspaceNotFoundError: If ``name`` does not exist.
    """
    return store.delete(name)


def list_workspaces(store: WorkspaceStore) -> list[WorkspaceSummary]:
    """Summarize every stored workspace."""
    summaries: list[WorkspaceSummary] = []
    for name in store.list_names():
        try:
            workspace = store.load(name)
        except StorageError as e:
            logger.warning("%s", e)
            workspace = None
        if workspace is None:
            summaries.append(WorkspaceSummary(name=name))
        else:
            summaries.append(
                WorkspaceSummary(name=name, pane_count=len(workspace.panes), base_dir=workspace.base_dir)
            )
    return summaries
