"""State machine behind the interactive workspace editor.

The editor is a pure function ``transition(state, action) -> state``. The
prompt UI in ``txmux.interactive`` only turns user input into actions and
renders the resulting state, so every rule below can be tested without a
terminal.

Rules:
- pane 0 never gets a split and can never be removed
- a workspace always keeps at least one pane
- the name can only be set while collecting a new workspace
- ``Save``, ``Cancel`` and ``EditScript`` are terminal; no action applies afterwards
"""

from dataclasses import dataclass, replace
from enum import StrEnum

from txmux.errors import InvalidTransitionError
from txmux.models import Pane, PaneResize, SplitDirection, Workspace, validate_workspace_name


class EditorMode(StrEnum):
    COLLECTING = "collecting"  # building a new workspace (create)
    EDITING = "editing"  # changing a stored workspace (edit)


class EditorOutcome(StrEnum):
    ACTIVE = "active"
    SAVED = "saved"
    CANCELLED = "cancelled"
    EDIT_SCRIPT = "edit-script"  # hand the stored script to an external editor instead


@dataclass(frozen=True)
class EditorState:
    """Snapshot of the editor.

    ``pane_index`` is None at the top-level menu and holds the pane being
    edited otherwise.
    """

    mode: EditorMode
    workspace: Workspace
    pane_index: int | None = None
    outcome: EditorOutcome = EditorOutcome.ACTIVE

    @property
    def is_finished(self) -> bool:
        return self.outcome is not EditorOutcome.ACTIVE

    @property
    def can_save(self) -> bool:
        return bool(self.workspace.name)

    @property
    def current_pane(self) -> Pane | None:
        if self.pane_index is None:
            return None
        return self.workspace.panes[self.pane_index]


# Actions


@dataclass(frozen=True)
class SetName:
    name: str


@dataclass(frozen=True)
class SetBaseDir:
    base_dir: str


@dataclass(frozen=True)
class AddPane:
    split: SplitDirection
    directory: str | None = None
    command: str = ""
    resize: PaneResize | None = None


@dataclass(frozen=True)
class RemovePane:
    index: int
    confirmed: bool = False


@dataclass(frozen=True)
class SelectPane:
    index: int


@dataclass(frozen=True)
class SetSplit:
    split: SplitDirection


@dataclass(frozen=True)
class SetDirectory:
    directory: str | None


@dataclass(frozen=True)
class SetCommand:
    command: str


@dataclass(frozen=True)
class SetResize:
    resize: PaneResize | None


@dataclass(frozen=True)
class DonePane:
    pass


@dataclass(frozen=True)
class Save:
    pass


@dataclass(frozen=True)
class Cancel:
    pass


@dataclass(frozen=True)
class EditScript:
    pass


EditorAction = (
    SetName
    | SetBaseDir
    | AddPane
    | RemovePane
    | SelectPane
    | SetSplit
    | SetDirectory
    | SetCommand
    | SetResize
    | DonePane
    | Save
    | Cancel
    | EditScript
)

_PANE_ACTIONS = (SetSplit, SetDirectory, SetCommand, SetResize, DonePane)


def start_collecting(base_dir: str) -> EditorState:
    """Initial state for a brand-new workspace: no name, one root pane."""
    workspace = Workspace(name="", base_dir=base_dir, panes=[Pane()])
    return EditorState(mode=EditorMode.COLLECTING, workspace=workspace)


def start_editing(workspace: Workspace) -> EditorState:
    """Initial state for editing a stored workspace."""
    return EditorState(mode=EditorMode.EDITING, workspace=workspace.model_copy(deep=True))


def _with_panes(state: EditorState, panes: list[Pane]) -> EditorState:
    return replace(state, workspace=state.workspace.model_copy(update={"panes": panes}))


def _update_current_pane(state: EditorState, **changes: object) -> EditorState:
    assert state.pane_index is not None
    panes = list(state.workspace.panes)
    panes[state.pane_index] = panes[state.pane_index].model_copy(update=changes)
    return _with_panes(state, panes)


def _check_pane_index(state: EditorState, index: int) -> None:
    if not 0 <= index < len(state.workspace.panes):
        raise InvalidTransitionError(f"Pane {index} does not exist")


def transition(state: EditorState, action: EditorAction) -> EditorState:
    """Apply an action and return the new editor state.

    The input state is never modified.

    Args:
        state: The current state.
        action: The action to apply.

    Returns:
        The resulting state.

    Raises:
        InvalidTransitionError: If the action is not allowed in ``state``.
    """
    if state.is_finished:
        raise InvalidTransitionError(f"Editor is already {state.outcome}")

    if isinstance(action, _PANE_ACTIONS):
        if state.pane_index is None:
            raise InvalidTransitionError("No pane selected")
    elif state.pane_index is not None and not isinstance(action, Cancel):
        raise InvalidTransitionError(f"Finish editing pane {state.pane_index} first")

    match action:
        case SetName(name=name):
            if state.mode is not EditorMode.COLLECTING:
                raise InvalidTransitionError("Use rename to change the name of a stored workspace")
            try:
                validate_workspace_name(name)
            except ValueError as e:
                raise InvalidTransitionError(str(e)) from e
            return replace(state, workspace=state.workspace.model_copy(update={"name": name}))

        case SetBaseDir(base_dir=base_dir):
            if not base_dir:
                raise InvalidTransitionError("Base directory cannot be empty")
            return replace(state, workspace=state.workspace.model_copy(update={"base_dir": base_dir}))

        case AddPane(split=split, directory=directory, command=command, resize=resize):
            pane = Pane(split=split, directory=directory, command=command, resize=resize)
            return _with_panes(state, [*state.workspace.panes, pane])

        case RemovePane(index=index, confirmed=confirmed):
            _check_pane_index(state, index)
            if index == 0:
                raise InvalidTransitionError("Pane 0 cannot be removed")
            if not confirmed:
                return state
            panes = [p for i, p in enumerate(state.workspace.panes) if i != index]
            return _with_panes(state, panes)

        case SelectPane(index=index):
            _check_pane_index(state, index)
            return replace(state, pane_index=index)

        case SetSplit(split=split):
            if state.pane_index == 0:
                raise InvalidTransitionError("Pane 0 is the root pane and has no split")
            return _update_current_pane(state, split=split)

        case SetDirectory(directory=directory):
            if state.pane_index == 0:
                raise InvalidTransitionError("Pane 0 always starts in the base directory")
            return _update_current_pane(state, directory=directory or None)

        case SetCommand(command=command):
            return _update_current_pane(state, command=command)

        case SetResize(resize=resize):
            return _update_current_pane(state, resize=resize)

        case DonePane():
            return replace(state, pane_index=None)

        case Save():
            if not state.can_save:
                raise InvalidTransitionError("A workspace name is required")
            return replace(state, outcome=EditorOutcome.SAVED)

        case Cancel():
            return replace(state, outcome=EditorOutcome.CANCELLED, pane_index=None)

        case EditScript():
            if state.mode is not EditorMode.EDITING:
                raise InvalidTransitionError("Only stored workspaces have a script to edit")
            return replace(state, outcome=EditorOutcome.EDIT_SCRIPT)

    raise InvalidTransitionError(f"Unknown action: {action!r}")
