"""Compile a workspace layout into a replayable tmux bash script.

The compiler works in two steps. ``build_plan`` turns a workspace into an
ordered list of typed command records, and ``render_script`` serializes that
list into shell text. All quoting happens in the records' ``render`` methods.

Script layout::

    #!/bin/bash
    SESSION=...
    BASE_DIR=...

    <attach and exit if the session is already running>

    tmux new-session ...
    PANE_BASE=...              (index of the first pane)
    tmux split-window ...      (one per pane after the first)

    tmux select-pane ...       (resize phase, one pair per resized pane)
    tmux resize-pane ...

    tmux send-keys ...         (one per pane with a command)

    tmux select-pane -t <pane 0>
    <attach>
"""

import shlex
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from txmux.models import PaneResize, SplitDirection, Workspace

SESSION_VAR = "SESSION"
BASE_DIR_VAR = "BASE_DIR"
PANE_BASE_VAR = "PANE_BASE"

_SESSION_REF = f'"${SESSION_VAR}"'
# "=" makes tmux match the session name exactly instead of by prefix
_EXACT_SESSION_REF = f'"=${SESSION_VAR}"'
_BASE_DIR_REF = f'"${BASE_DIR_VAR}"'

# switch-client from inside tmux, attach-session otherwise
_ATTACH = (
    f'if [ -n "$TMUX" ]; then tmux switch-client -t {_EXACT_SESSION_REF}; '
    f"else tmux attach-session -t {_EXACT_SESSION_REF}; fi"
)


class Phase(IntEnum):
    """Script sections, in output order. Sections are separated by a blank line."""

    HEADER = 0
    GUARD = 1
    CREATE = 2
    RESIZE = 3
    COMMANDS = 4
    FINISH = 5


def quote_path(path: str) -> str:
    """Quote a directory for the shell, keeping a leading ``~`` expandable.

    Args:
        path: The directory as entered by the user.

    Returns:
        A single shell word.
    """
    if path == "~":
        return '"$HOME"'
    if path.startswith("~/"):
        return '"$HOME"/' + shlex.quote(path[2:])
    return shlex.quote(path)


def pane_target(index: int) -> str:
    """Target string for a pane of the workspace session by layout index.

    Layout indices start at 0; the script offsets them by the session's
    ``pane-base-index``, read into ``$PANE_BASE`` after the session is created.
    """
    if index == 0:
        return f'"${SESSION_VAR}:.${PANE_BASE_VAR}"'
    return f'"${SESSION_VAR}:.$(({PANE_BASE_VAR} + {index}))"'


@dataclass(frozen=True)
class ScriptLine:
    """A single line of the generated script."""

    phase: ClassVar[Phase]

    def render(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Shebang(ScriptLine):
    phase: ClassVar[Phase] = Phase.HEADER
    interpreter: str = "/bin/bash"

    def render(self) -> str:
        return f"#!{self.interpreter}"


@dataclass(frozen=True)
class SetVariable(ScriptLine):
    phase: ClassVar[Phase] = Phase.HEADER
    name: str
    value: str
    is_path: bool = False

    def render(self) -> str:
        value = quote_path(self.value) if self.is_path else shlex.quote(self.value)
        return f"{self.name}={value}"


@dataclass(frozen=True)
class AttachGuard(ScriptLine):
    """Attach to an already running session and stop."""

    phase: ClassVar[Phase] = Phase.GUARD

    def render(self) -> str:
        return f"tmux has-session -t {_EXACT_SESSION_REF} 2>/dev/null && {{ {_ATTACH}; exit; }}"


@dataclass(frozen=True)
class NewSession(ScriptLine):
    phase: ClassVar[Phase] = Phase.CREATE

    def render(self) -> str:
        return f"tmux new-session -d -s {_SESSION_REF} -c {_BASE_DIR_REF}"


@dataclass(frozen=True)
class ReadPaneBase(ScriptLine):
    """Store the index of the session's first pane, which is its pane-base-index."""

    phase: ClassVar[Phase] = Phase.CREATE

    def render(self) -> str:
        return f"{PANE_BASE_VAR}=$(tmux display-message -p -t {_EXACT_SESSION_REF} '#{{pane_index}}')"


@dataclass(frozen=True)
class SplitWindow(ScriptLine):
    """Split the session's active pane, which is always the newest pane."""

    phase: ClassVar[Phase] = Phase.CREATE
    direction: SplitDirection
    directory: str | None = None

    def render(self) -> str:
        directory = quote_path(self.directory) if self.directory else _BASE_DIR_REF
        return f"tmux split-window -t {_EXACT_SESSION_REF} {self.direction.flag} -c {directory}"


@dataclass(frozen=True)
class SelectPane(ScriptLine):
    phase: ClassVar[Phase] = Phase.RESIZE
    index: int

    def render(self) -> str:
        return f"tmux select-pane -t {pane_target(self.index)}"


@dataclass(frozen=True)
class FocusPane(SelectPane):
    """Final pane selection before attaching."""

    phase: ClassVar[Phase] = Phase.FINISH


@dataclass(frozen=True)
class ResizePane(ScriptLine):
    phase: ClassVar[Phase] = Phase.RESIZE
    index: int
    resize: PaneResize

    def render(self) -> str:
        return f"tmux resize-pane -t {pane_target(self.index)} {self.resize.dimension.flag} {self.resize.amount}"


@dataclass(frozen=True)
class SendKeys(ScriptLine):
    phase: ClassVar[Phase] = Phase.COMMANDS
    index: int
    keys: str

    def render(self) -> str:
        return f"tmux send-keys -t {pane_target(self.index)} {shlex.quote(self.keys)} C-m"


@dataclass(frozen=True)
class AttachSession(ScriptLine):
    phase: ClassVar[Phase] = Phase.FINISH

    def render(self) -> str:
        return _ATTACH


def build_plan(workspace: Workspace) -> list[ScriptLine]:
    """Build the ordered command records for a workspace.

    Args:
        workspace: A workspace satisfying the model invariants.

    Returns:
        Command records in script order.
    """
    plan: list[ScriptLine] = [
        Shebang(),
        SetVariable(SESSION_VAR, workspace.name),
        SetVariable(BASE_DIR_VAR, workspace.base_dir, is_path=True),
        AttachGuard(),
        NewSession(),
        ReadPaneBase(),
    ]

    # Pane 0 already exists once the session is created
    for pane in workspace.panes[1:]:
        assert pane.split is not None
        plan.append(SplitWindow(pane.split, pane.directory))

    for index, pane in enumerate(workspace.panes):
        if pane.resize is not None:
            plan.append(SelectPane(index))
            plan.append(ResizePane(index, pane.resize))

    for index, pane in enumerate(workspace.panes):
        if pane.command:
            plan.append(SendKeys(index, pane.command))

    plan.append(FocusPane(0))
    plan.append(AttachSession())
    return plan


def render_script(plan: list[ScriptLine]) -> str:
    """Serialize command records into script text.

    Args:
        plan: Command records in script order.

    Returns:
        The script, newline terminated.
    """
    lines: list[str] = []
    previous: Phase | None = None
    for record in plan:
        if previous is not None and record.phase != previous:
            lines.append("")
        lines.append(record.render())
        previous = record.phase
    return "\n".join(lines) + "\n"


def compile_workspace(workspace: Workspace) -> str:
    """Compile a workspace into its bash script.

    Args:
        workspace: The workspace to compile.

    Returns:
        The script text. Identical input always yields identical output.
    """
    return render_script(build_plan(workspace))
