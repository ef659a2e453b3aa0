"""Prompt-driven workspace editor.

Turns menu selections into ``txmux.editor_state`` actions and renders the
resulting state with Rich. All workspace rules live in the state machine.
"""

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from txmux.editor_state import (
    AddPane,
    Cancel,
    DonePane,
    EditorAction,
    EditorMode,
    EditorState,
    EditScript,
    RemovePane,
    Save,
    SelectPane,
    SetBaseDir,
    SetCommand,
    SetDirectory,
    SetName,
    SetResize,
    SetSplit,
    transition,
)
from txmux.errors import InvalidTransitionError
from txmux.models import Pane, PaneResize, ResizeDimension, SplitDirection, Workspace

BACK = "back"


def choose(console: Console, title: str, options: list[tuple[str, str]], default: str | None = None) -> str:
    """Show a numbered menu and return the value of the chosen option.

    Args:
        console: Rich console to render to.
        title: Menu heading.
        options: (value, label) pairs in display order.
        default: Value selected when the user just presses Enter.

    Returns:
        The chosen value.
    """
    console.print(f"[bold cyan]{title}[/]")
    for number, (_value, label) in enumerate(options, start=1):
        console.print(f"  [dim]{number:>2}[/] {label}")

    numbers = [str(n) for n in range(1, len(options) + 1)]
    default_number = next((str(n) for n, (v, _) in enumerate(options, start=1) if v == default), None)

    if default_number is None:
        answer = Prompt.ask("Select", choices=numbers, show_choices=False, console=console)
    else:
        answer = Prompt.ask("Select", choices=numbers, default=default_number, show_choices=False, console=console)
    return options[int(answer) - 1][0]


def describe_pane(index: int, pane: Pane) -> str:
    """One-line summary of a pane for menus."""
    parts = [f"Pane {index}"]
    if pane.split is not None:
        parts.append(pane.split.value)
    if pane.command:
        parts.append(f'cmd="{pane.command}"')
    if pane.directory:
        parts.append(f'dir="{pane.directory}"')
    if pane.resize is not None:
        parts.append(f"{pane.resize.dimension.value}={pane.resize.amount}")
    return ", ".join(parts)


def render_workspace(console: Console, workspace: Workspace) -> None:
    """Print the current workspace configuration."""
    table = Table(title=f"Workspace: {workspace.name or '(not set)'}", title_justify="left")
    table.add_column("Pane", style="cyan", justify="right")
    table.add_column("Split")
    table.add_column("Directory")
    table.add_column("Command")
    table.add_column("Resize", style="dim")

    for index, pane in enumerate(workspace.panes):
        table.add_row(
            str(index),
            pane.split.value if pane.split else "[dim]root[/]",
            pane.directory or "[dim](base)[/]",
            pane.command or "[dim](none)[/]",
            f"{pane.resize.dimension.value} {pane.resize.amount}" if pane.resize else "",
        )

    console.print(f"[dim]Base dir:[/] {workspace.base_dir}")
    console.print(table)


def ask_split(console: Console, current: SplitDirection | None = None) -> SplitDirection | None:
    """Ask for a split direction; None when the user backs out."""
    value = choose(
        console,
        "Split direction",
        [
            (SplitDirection.HORIZONTAL.value, "horizontal (side by side)"),
            (SplitDirection.VERTICAL.value, "vertical (stacked)"),
            (BACK, "[dim]← Cancel[/]"),
        ],
        default=current.value if current else None,
    )
    return None if value == BACK else SplitDirection(value)


def ask_amount(console: Console, default: int = 10) -> int:
    """Ask for a positive size in lines or columns."""
    while True:
        amount = IntPrompt.ask("Size (lines/columns)", default=default, console=console)
        if amount > 0:
            return amount
        console.print("[red]Size must be a positive number.[/]")


def ask_resize(console: Console, current: PaneResize | None = None) -> tuple[bool, PaneResize | None]:
    """Ask for a resize rule.

    Returns:
        (changed, resize). ``changed`` is False when the user backs out.
    """
    options = [
        (ResizeDimension.WIDTH.value, "width"),
        (ResizeDimension.HEIGHT.value, "height"),
        ("disable", "Disable custom size"),
        (BACK, "[dim]← Cancel[/]"),
    ]
    value = choose(console, "Resize by", options, default=current.dimension.value if current else None)
    if value == BACK:
        return False, current
    if value == "disable":
        return True, None
    amount = ask_amount(console, default=current.amount if current else 10)
    return True, PaneResize(dimension=ResizeDimension(value), amount=amount)


def ask_new_pane(console: Console, index: int) -> AddPane | None:
    """Collect the fields of a new pane."""
    split = ask_split(console)
    if split is None:
        return None
    directory = Prompt.ask(f"Pane {index} - Directory (empty = base)", default="", console=console)
    command = Prompt.ask(f"Pane {index} - Command", default="", console=console)
    resize = None
    if Confirm.ask(f"Pane {index} - Custom size?", default=False, console=console):
        _changed, resize = ask_resize(console)
    return AddPane(split=split, directory=directory or None, command=command, resize=resize)


def ask_pane_to(console: Console, state: EditorState, verb: str, include_root: bool) -> int | None:
    """Pick a pane index, or None to go back."""
    panes = state.workspace.panes
    options = [(str(i), describe_pane(i, p)) for i, p in enumerate(panes) if include_root or i > 0]
    options.append((BACK, "[dim]← Cancel[/]"))
    value = choose(console, f"Which pane to {verb}?", options)
    return None if value == BACK else int(value)


def ask_top_level(console: Console, state: EditorState) -> EditorAction | None:
    """Show the main menu and translate the selection into an action."""
    workspace = state.workspace
    options: list[tuple[str, str]] = []
    if state.mode is EditorMode.COLLECTING:
        options.append(("name", f"Name: {workspace.name or '[dim](required)[/]'}"))
    options.append(("base-dir", f"Base directory: {workspace.base_dir}"))
    options.append(("edit-pane", "Edit pane"))
    options.append(("add-pane", "[green]Add pane[/]"))
    if len(workspace.panes) > 1:
        options.append(("remove-pane", "[red]Remove pane[/]"))
    if state.mode is EditorMode.EDITING:
        options.append(("edit-script", "Edit script directly"))
    if state.can_save:
        label = "Create workspace" if state.mode is EditorMode.COLLECTING else "Save and exit"
        options.append(("save", f"[bold green]{label}[/]"))
    options.append(("cancel", "[dim]Cancel[/]"))

    choice = choose(console, "Select field to edit", options)

    match choice:
        case "name":
            return SetName(Prompt.ask("Workspace name", default=workspace.name, console=console).strip())
        case "base-dir":
            return SetBaseDir(Prompt.ask("Base directory", default=workspace.base_dir, console=console))
        case "edit-pane":
            index = ask_pane_to(console, state, "edit", include_root=True)
            return None if index is None else SelectPane(index)
        case "add-pane":
            return ask_new_pane(console, len(workspace.panes))
        case "remove-pane":
            index = ask_pane_to(console, state, "remove", include_root=False)
            if index is None:
                return None
            return RemovePane(index, confirmed=Confirm.ask(f"Remove pane {index}?", default=False, console=console))
        case "edit-script":
            return EditScript()
        case "save":
            return Save()
        case "cancel":
            if state.mode is EditorMode.EDITING and not Confirm.ask("Discard changes?", default=False, console=console):
                return None
            return Cancel()
    return None


def ask_pane_field(console: Console, state: EditorState) -> EditorAction | None:
    """Show the pane menu and translate the selection into an action."""
    index = state.pane_index
    pane = state.current_pane
    assert index is not None and pane is not None

    resize_label = f"{pane.resize.dimension.value} {pane.resize.amount}" if pane.resize else "(none)"
    options: list[tuple[str, str]] = []
    if index > 0:
        options.append(("split", f"Split: {pane.split.value if pane.split else ''}"))
        options.append(("directory", f"Directory: {pane.directory or '(base)'}"))
    options.append(("command", f"Command: {pane.command or '(none)'}"))
    options.append(("resize", f"Resize: {resize_label}"))
    options.append(("done", "[dim]← Done[/]"))

    choice = choose(console, f"Edit pane {index}", options)

    match choice:
        case "split":
            split = ask_split(console, pane.split)
            return None if split is None else SetSplit(split)
        case "directory":
            return SetDirectory(Prompt.ask("Directory (empty = base)", default=pane.directory or "", console=console))
        case "command":
            return SetCommand(Prompt.ask("Command", default=pane.command, console=console))
        case "resize":
            changed, resize = ask_resize(console, pane.resize)
            return SetResize(resize) if changed else None
        case "done":
            return DonePane()
    return None


def run_editor(console: Console, state: EditorState) -> EditorState:
    """Drive the editor until it reaches a terminal state.

    Args:
        console: Rich console for prompts and output.
        state: Initial editor state.

    Returns:
        The final state (saved, cancelled or edit-script).
    """
    while not state.is_finished:
        console.print()
        render_workspace(console, state.workspace)
        if state.pane_index is None:
            action = ask_top_level(console, state)
        else:
            action = ask_pane_field(console, state)
        if action is None:
            continue
        try:
            state = transition(state, action)
        except InvalidTransitionError as e:
            console.print(f"[red]Error:[/] {e}")
    return state
