"""Tests for txmux.store module."""

import json
import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from txmux.compiler import compile_workspace
from txmux.errors import StorageError, WorkspaceExistsError, WorkspaceNotFoundError
from txmux.models import Workspace
from txmux.store import DeleteResult, WorkspaceStore


class TestSaveAndLoad:
    """Tests for WorkspaceStore.save and load."""

    def test_round_trip(self, store: WorkspaceStore, full_workspace: Workspace) -> None:
        """Loading a saved workspace should give an equal workspace."""
        store.save(full_workspace, compile_workspace(full_workspace))
        assert store.load("full") == full_workspace

    def test_writes_executable_script(self, store: WorkspaceStore, dev_workspace: Workspace) -> None:
        """Should write the script with execute permission."""
        script = compile_workspace(dev_workspace)
        path = store.save(dev_workspace, script)
        assert path == store.script_path("dev")
        assert path.read_text(encoding="utf-8") == script
        assert path.stat().st_mode & stat.S_IXUSR

    def test_writes_json_descriptor(self, store: WorkspaceStore, dev_workspace: Workspace) -> None:
        """Should write the descriptor in the documented JSON shape."""
        store.save(dev_workspace, compile_workspace(dev_workspace))
        data = json.loads(store.descriptor_path("dev").read_text(encoding="utf-8"))
        assert data["name"] == "dev"
        assert data["baseDir"] == "/proj"
        assert data["panes"][1] == {"split": "vertical", "command": "npm test"}

    def test_creates_directories(self, tmp_path: Path, dev_workspace: Workspace) -> None:
        """Should create missing storage directories on save."""
        store = WorkspaceStore(tmp_path / "a" / "scripts", tmp_path / "b" / "json")
        store.save(dev_workspace, "#!/bin/bash\n")
        assert store.exists("dev")

    def test_load_missing_returns_none(self, store: WorkspaceStore) -> None:
        """Should return None when there is no descriptor."""
        assert store.load("nope") is None

    def test_load_invalid_json_raises(self, store: WorkspaceStore) -> None:
        """Should raise StorageError for a corrupt descriptor."""
        store.descriptor_dir.mkdir(parents=True)
        store.descriptor_path("bad").write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError, match="Invalid workspace descriptor"):
            store.load("bad")

    def test_load_invalid_layout_raises(self, store: WorkspaceStore) -> None:
        """Should raise StorageError when the descriptor breaks layout rules."""
        store.descriptor_dir.mkdir(parents=True)
        store.descriptor_path("bad").write_text(
            json.dumps({"name": "bad", "baseDir": "/", "panes": [{"split": "vertical"}]}),
            encoding="utf-8",
        )
        with pytest.raises(StorageError):
            store.load("bad")

    def test_load_uses_file_name(self, store: WorkspaceStore, dev_workspace: Workspace) -> None:
        """A descriptor whose name field disagrees with its file should load under the file name."""
        store.save(dev_workspace, "#!/bin/bash\n")
        data = json.loads(store.descriptor_path("dev").read_text(encoding="utf-8"))
        data["name"] = "other"
        store.descriptor_path("dev").write_text(json.dumps(data), encoding="utf-8")

        loaded = store.load("dev")
        assert loaded is not None
        assert loaded.name == "dev"
        assert loaded.panes == dev_workspace.panes

    def test_save_failure_raises_storage_error(self, store: WorkspaceStore, dev_workspace: Workspace) -> None:
        """Should wrap OS errors in StorageError."""
        with patch.object(Path, "write_text", side_effect=PermissionError("denied")):
            with pytest.raises(StorageError, match="denied"):
                store.save(dev_workspace, "#!/bin/bash\n")


class TestListAndExists:
    """Tests for WorkspaceStore.list_names and exists."""

    def test_missing_directory(self, store: WorkspaceStore) -> None:
        """Should return an empty list when the script directory is missing."""
        assert store.list_names() == []

    def test_lists_scripts_sorted(self, store: WorkspaceStore) -> None:
        """Should list .sh files only, sorted by name."""
        store.script_dir.mkdir(parents=True)
        for name in ["web", "api", "notes.txt"]:
            suffix = "" if "." in name else ".sh"
            (store.script_dir / f"{name}{suffix}").write_text("", encoding="utf-8")
        assert store.list_names() == ["api", "web"]
        assert store.exists("api")
        assert not store.exists("notes")

    def test_script_without_descriptor_exists(self, store: WorkspaceStore) -> None:
        """The script alone should make a workspace exist."""
        store.script_dir.mkdir(parents=True)
        store.script_path("hand").write_text("#!/bin/bash\n", encoding="utf-8")
        assert store.exists("hand")
        assert store.load("hand") is None

    def test_read_script(self, store: WorkspaceStore, dev_workspace: Workspace) -> None:
        """Should return the stored script, or raise NotFound."""
        script = compile_workspace(dev_workspace)
        store.save(dev_workspace, script)
        assert store.read_script("dev") == script
        with pytest.raises(WorkspaceNotFoundError):
            store.read_script("missing")


class TestDelete:
    """Tests for WorkspaceStore.delete."""

    def test_deletes_both_files(self, store: WorkspaceStore, dev_workspace: Workspace) -> None:
        """Should remove script and descriptor."""
        store.save(dev_workspace, "#!/bin/bash\n")
        assert store.delete("dev") is DeleteResult.DELETED
        assert not store.script_path("dev").exists()
        assert not store.descriptor_path("dev").exists()

    def test_missing_descriptor_is_partial(self, store: WorkspaceStore) -> None:
        """Should still succeed when only the script exists."""
        store.script_dir.mkdir(parents=True)
        store.script_path("hand").write_text("", encoding="utf-8")
        assert store.delete("hand") is DeleteResult.PARTIAL
        assert not store.exists("hand")

    def test_not_found_touches_nothing(self, store: WorkspaceStore) -> None:
        """Should raise NotFound without creating or removing anything."""
        with patch.object(Path, "unlink") as mock_unlink:
            with pytest.raises(WorkspaceNotFoundError):
                store.delete("ghost")
        mock_unlink.assert_not_called()
        assert not store.script_dir.exists()

    def test_script_unlink_failure(self, store: WorkspaceStore, dev_workspace: Workspace) -> None:
        """Should raise StorageError when the script cannot be removed."""
        store.save(dev_workspace, "#!/bin/bash\n")
        with patch.object(Path, "unlink", side_effect=PermissionError("busy")):
            with pytest.raises(StorageError, match="busy"):
                store.delete("dev")


class TestRename:
    """Tests for WorkspaceStore.rename."""

    def test_moves_both_files(self, store: WorkspaceStore, dev_workspace: Workspace) -> None:
        """Should move script and descriptor to the new name."""
        store.save(dev_workspace, "#!/bin/bash\n")
        assert store.rename("dev", "web") is True
        assert not store.exists("dev")
        assert store.exists("web")
        assert store.descriptor_path("web").exists()
        assert not store.descriptor_path("dev").exists()

    def test_descriptor_move_is_best_effort(self, store: WorkspaceStore) -> None:
        """Should succeed with only a script and report the descriptor was not moved."""
        store.script_dir.mkdir(parents=True)
        store.script_path("hand").write_text("", encoding="utf-8")
        assert store.rename("hand", "made") is False
        assert store.exists("made")
        assert not store.exists("hand")

    def test_conflict(self, store: WorkspaceStore, dev_workspace: Workspace) -> None:
        """Should refuse to overwrite an existing workspace."""
        store.save(dev_workspace, "one")
        store.save(dev_workspace.model_copy(update={"name": "web"}), "two")
        with pytest.raises(WorkspaceExistsError):
            store.rename("dev", "web")
        assert store.read_script("dev") == "one"
        assert store.read_script("web") == "two"

    def test_missing_source(self, store: WorkspaceStore) -> None:
        """Should raise NotFound for an unknown source."""
        with pytest.raises(WorkspaceNotFoundError):
            store.rename("ghost", "web")


@pytest.mark.skipif(os.geteuid() == 0, reason="root ignores file permissions")
class TestPermissions:
    """Tests that need real permission errors."""

    def test_unreadable_descriptor(self, store: WorkspaceStore, dev_workspace: Workspace) -> None:
        """Should raise StorageError when the descriptor cannot be read."""
        store.save(dev_workspace, "#!/bin/bash\n")
        store.descriptor_path("dev").chmod(0)
        try:
            with pytest.raises(StorageError, match="Failed to read"):
                store.load("dev")
        finally:
            store.descriptor_path("dev").chmod(0o644)
