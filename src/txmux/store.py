"""File-system storage for workspace scripts and descriptors."""

import json
import logging
from enum import StrEnum
from pathlib import Path

from pydantic import ValidationError

from txmux.errors import StorageError, WorkspaceExistsError, WorkspaceNotFoundError
from txmux.models import Workspace

logger = logging.getLogger(__name__)

SCRIPT_SUFFIX = ".sh"
DESCRIPTOR_SUFFIX = ".json"


class DeleteResult(StrEnum):
    """Outcome of deleting a workspace."""

    DELETED = "deleted"  # script and descriptor removed
    PARTIAL = "partial"  # script removed, descriptor missing or not removable


class WorkspaceStore:
    """Stores each workspace as a script file plus a JSON descriptor.

    The script file is authoritative: a workspace exists when its script does.
    Both directories are supplied by the caller.
    """

    def __init__(self, script_dir: Path, descriptor_dir: Path) -> None:
        self.script_dir = script_dir
        self.descriptor_dir = descriptor_dir

    def script_path(self, name: str) -> Path:
        return self.script_dir / f"{name}{SCRIPT_SUFFIX}"

    def descriptor_path(self, name: str) -> Path:
        return self.descriptor_dir / f"{name}{DESCRIPTOR_SUFFIX}"

    def list_names(self) -> list[str]:
        """Return the names of all stored workspaces, sorted."""
        if not self.script_dir.is_dir():
            return []
        return sorted(p.stem for p in self.script_dir.glob(f"*{SCRIPT_SUFFIX}") if p.is_file())

    def exists(self, name: str) -> bool:
        return self.script_path(name).is_file()

    def load(self, name: str) -> Workspace | None:
        """Load a workspace descriptor.

        Args:
            name: The workspace name.

        Returns:
            The workspace, named after its descriptor file, or None if no
            descriptor exists.

        Raises:
            StorageError: If the descriptor cannot be read or is invalid.
        """
        path = self.descriptor_path(name)
        if not path.is_file():
            return None
        try:
            workspace = Workspace.model_validate(json.loads(path.read_text(encoding="utf-8")))
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e
        except (json.JSONDecodeError, ValidationError) as e:
            raise StorageError(f"Invalid workspace descriptor {path}: {e}") from e

        # The file name is the workspace's identity
        if workspace.name != name:
            logger.warning("Descriptor %s is named '%s', using '%s'", path, workspace.name, name)
            workspace = workspace.model_copy(update={"name": name})
        return workspace

    def read_script(self, name: str) -> str:
        """Return the stored script text.

        Raises:
            WorkspaceNotFoundError: If the script does not exist.
            StorageError: If the script cannot be read.
        """
        path = self.script_path(name)
        if not path.is_file():
            raise WorkspaceNotFoundError(name)
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def save(self, workspace: Workspace, script: str) -> Path:
        """Write the executable script and the JSON descriptor of a workspace.

        Args:
            workspace: The workspace to store.
            script: The compiled script text.

        Returns:
            Path of the written script.

        Raises:
            StorageError: If either file cannot be written.
        """
        script_path = self.script_path(workspace.name)
        descriptor_path = self.descriptor_path(workspace.name)
        try:
            self.script_dir.mkdir(parents=True, exist_ok=True)
            self.descriptor_dir.mkdir(parents=True, exist_ok=True)
            script_path.write_text(script, encoding="utf-8")
            script_path.chmod(0o755)
            descriptor_path.write_text(
                json.dumps(workspace.to_descriptor(), indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            raise StorageError(f"Failed to save workspace '{workspace.name}': {e}") from e
        logger.debug("Saved workspace %s to %s", workspace.name, script_path)
        return script_path

    def delete(self, name: str) -> DeleteResult:
        """Delete a workspace's script and descriptor.

        Raises:
            WorkspaceNotFoundError: If the script does not exist. Nothing is touched.
            StorageError: If the script cannot be removed.
        """
        script_path = self.script_path(name)
        if not script_path.is_file():
            raise WorkspaceNotFoundError(name)
        try:
            script_path.unlink()
        except OSError as e:
            raise StorageError(f"Failed to delete {script_path}: {e}") from e

        try:
            self.descriptor_path(name).unlink()
        except OSError as e:
            logger.warning("Could not remove descriptor for %s: %s", name, e)
            return DeleteResult.PARTIAL
        return DeleteResult.DELETED

    def rename(self, old_name: str, new_name: str) -> bool:
        """Move a workspace's script and descriptor to a new name.

        The script move must succeed; the descriptor move is best effort.

        Returns:
            True if the descriptor was moved as well.

        Raises:
            WorkspaceNotFoundError: If ``old_name`` does not exist.
            WorkspaceExistsError: If ``new_name`` already exists.
            StorageError: If the script cannot be moved.
        """
        if not self.exists(old_name):
            raise WorkspaceNotFoundError(old_name)
        if self.exists(new_name):
            raise WorkspaceExistsError(new_name)

        old_script = self.script_path(old_name)
        try:
            old_script.rename(self.script_path(new_name))
        except OSError as e:
            raise StorageError(f"Failed to rename {old_script}: {e}") from e

        try:
            self.descriptor_path(old_name).rename(self.descriptor_path(new_name))
        except OSError as e:
            logger.warning("Could not move descriptor for %s: %s", old_name, e)
            return False
        return True
