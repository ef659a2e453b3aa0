"""CLI entry point for txmux."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, cast

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Confirm, Prompt
from rich.table import Table

from txmux import __version__
from txmux.config import Config, display_config_warnings, load_config, save_config
from txmux.editor_state import EditorOutcome, start_collecting, start_editing
from txmux.errors import ChildProcessFailedError, TxmuxError, WorkspaceExistsError, WorkspaceNotFoundError
from txmux.interactive import choose, run_editor
from txmux.manager import (
    create_workspace,
    delete_workspace,
    get_workspace,
    list_workspaces,
    rename_workspace,
    update_workspace,
)
from txmux.models import validate_workspace_name
from txmux.store import DeleteResult, WorkspaceStore
from txmux.tmux_manager import is_inside_tmux, open_editor, resolve_editor, run_script, session_exists
from txmux.utils import compress_path, is_fzf_available, select_with_fzf
from txmux.xdg_paths import ensure_directories, get_config_file_path

app = typer.Typer(
    name="tx",
    help="Interactive tmux workspace manager.",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("txmux")


@dataclass
class AppState:
    """Per-invocation state shared by all commands."""

    config: Config
    config_path: Path
    store: WorkspaceStore


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"txmux {__version__}")
        raise typer.Exit()


def _setup_logging(debug: bool) -> None:
    handler = RichHandler(console=err_console, show_path=False, show_time=debug)
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING, format="%(message)s", handlers=[handler])


@contextmanager
def _command_errors() -> Iterator[None]:
    """Turn txmux errors into a message and exit code 1, and Ctrl+C into a clean cancel."""
    try:
        yield
    except (TxmuxError, ValueError) as e:
        err_console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1) from None
    except (KeyboardInterrupt, EOFError):
        console.print("\n[yellow]Cancelled[/]")
        raise typer.Exit(0) from None


def _state(ctx: typer.Context) -> AppState:
    return cast(AppState, ctx.obj)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-C", help="Config file path."),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", "-D", help="Enable debug output."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version."),
    ] = None,
) -> None:
    """Create, load and manage named tmux workspaces."""
    _setup_logging(debug)

    config_file = config_path or get_config_file_path()
    config, config_warnings = load_config(config_file)
    if config_warnings:
        display_config_warnings(config_warnings, err_console)

    store = WorkspaceStore(config.resolved_script_dir(), config.resolved_workspace_dir())
    ensure_directories(store.script_dir, store.descriptor_dir)

    if debug:
        logger.debug("Config file: %s", config_file)
        logger.debug("Scripts: %s", store.script_dir)
        logger.debug("Descriptors: %s", store.descriptor_dir)

    ctx.obj = AppState(config=config, config_path=config_file, store=store)


@app.command()
def create(ctx: typer.Context) -> None:
    """Create a new tmux workspace interactively."""
    store = _state(ctx).store
    console.print("[bold blue]Create a new tmux workspace[/]")

    with _command_errors():
        state = run_editor(console, start_collecting(str(Path.cwd())))
        if state.outcome is not EditorOutcome.SAVED:
            console.print("[yellow]Cancelled[/]")
            return
        script_path = create_workspace(store, state.workspace)

    console.print(f"[green]✓[/] Workspace '{state.workspace.name}' created: {script_path}")
    console.print(f"[dim]Run: tx load {state.workspace.name}[/]")


def _load(app_state: AppState, name: str, dry_run: bool = False) -> None:
    store = app_state.store
    if not store.exists(name):
        raise WorkspaceNotFoundError(name)

    if session_exists(name):
        action = "Switching to" if is_inside_tmux() else "Attaching to"
        console.print(f"[blue]{action} running session:[/] {name}")
    else:
        console.print(f"[green]Loading workspace:[/] {name}")

    commands = run_script(store.script_path(name), shell=app_state.config.shell, dry_run=dry_run)
    if dry_run:
        console.print("[yellow]Command that would be executed:[/]")
        for cmd in commands:
            console.print(f"  {cmd}", markup=False, soft_wrap=True)


@app.command()
def load(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Workspace to load.")],
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Preview the command without executing."),
    ] = False,
) -> None:
    """Load a tmux workspace (attaches if it is already running)."""
    with _command_errors():
        _load(_state(ctx), name, dry_run=dry_run)


def list_command(
    ctx: typer.Context,
    interactive: Annotated[
        bool,
        typer.Option("--interactive/--no-interactive", help="Select a workspace to load."),
    ] = True,
) -> None:
    """List all workspaces."""
    app_state = _state(ctx)

    with _command_errors():
        summaries = list_workspaces(app_state.store)
        if not summaries:
            console.print("[yellow]No workspaces found[/]")
            return

        if not interactive:
            table = Table(title="Workspaces")
            table.add_column("Name", style="cyan")
            table.add_column("Panes", justify="right")
            table.add_column("Base directory", style="dim")
            for summary in summaries:
                table.add_row(
                    summary.name,
                    "" if summary.pane_count is None else str(summary.pane_count),
                    compress_path(summary.base_dir or ""),
                )
            console.print(table)
            return

        names = [s.name for s in summaries]
        if is_fzf_available():
            selected = select_with_fzf(names, prompt="Workspace: ")
        else:
            options = [
                (
                    s.name,
                    f"[cyan]{s.name}[/]"
                    + (f" [dim]({s.pane_count} panes) - {compress_path(s.base_dir or '')}[/]" if s.pane_count else ""),
                )
                for s in summaries
            ]
            options.append(("", "[dim]Cancel[/]"))
            selected = choose(console, "Select workspace to load", options) or None

        if not selected:
            console.print("[yellow]Cancelled[/]")
            return
        _load(app_state, selected)


app.command("list")(list_command)
app.command("ls", hidden=True)(list_command)


@app.command()
def edit(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Workspace to edit.")],
) -> None:
    """Edit a workspace's configuration."""
    app_state = _state(ctx)
    store = app_state.store

    with _command_errors():
        workspace = get_workspace(store, name)
        console.print(f"[bold blue]Edit workspace:[/] {name}")
        state = run_editor(console, start_editing(workspace))

        if state.outcome is EditorOutcome.EDIT_SCRIPT:
            open_editor(store.script_path(name), resolve_editor(app_state.config))
            console.print(f"[green]✓[/] Script for '{name}' edited.")
            return
        if state.outcome is not EditorOutcome.SAVED:
            console.print("[yellow]Cancelled[/]")
            return
        update_workspace(store, state.workspace)

    console.print(f"[green]✓[/] Workspace '{name}' updated.")


def rename_command(
    ctx: typer.Context,
    old_name: Annotated[str | None, typer.Argument(help="Workspace to rename.")] = None,
    new_name: Annotated[str | None, typer.Argument(help="New name.")] = None,
) -> None:
    """Rename a workspace."""
    store = _state(ctx).store

    with _command_errors():
        if old_name is None:
            names = store.list_names()
            if not names:
                console.print("[yellow]No workspaces found[/]")
                return
            old_name = choose(console, "Which workspace to rename?", [(n, n) for n in names])

        # Fails before any prompt when the workspace or its descriptor is missing
        get_workspace(store, old_name)
        if new_name is not None:
            validate_workspace_name(new_name)
            if store.exists(new_name):
                raise WorkspaceExistsError(new_name)

        while new_name is None:
            candidate = Prompt.ask("New name", console=console).strip()
            try:
                validate_workspace_name(candidate)
            except ValueError as e:
                err_console.print(f"[red]{e}[/]")
                continue
            if store.exists(candidate):
                err_console.print(f"[red]Workspace '{candidate}' already exists[/]")
                continue
            new_name = candidate

        console.print(f"[cyan]{old_name} → {new_name}[/]")
        if not Confirm.ask("Confirm rename?", default=True, console=console):
            console.print("[yellow]Cancelled[/]")
            return

        rename_workspace(store, old_name, new_name)

    console.print(f"[green]✓[/] Workspace renamed to '{new_name}'.")


app.command("rename")(rename_command)
app.command("mv", hidden=True)(rename_command)


def delete_command(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Workspace to delete.")],
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation."),
    ] = False,
) -> None:
    """Delete a workspace."""
    app_state = _state(ctx)
    store = app_state.store

    with _command_errors():
        if not store.exists(name):
            raise WorkspaceNotFoundError(name)

        if not yes and app_state.config.confirm_delete:
            if not Confirm.ask(f"[red]Delete workspace '{name}'?[/]", default=False, console=console):
                console.print("[yellow]Cancelled[/]")
                return

        result = delete_workspace(store, name)

    console.print(f"[green]✓[/] Workspace '{name}' deleted.")
    if result is DeleteResult.PARTIAL:
        console.print("[dim]No descriptor was removed.[/]")


app.command("delete")(delete_command)
app.command("rm", hidden=True)(delete_command)


@app.command()
def show(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Workspace to show.")],
) -> None:
    """Print the stored script of a workspace."""
    with _command_errors():
        script = _state(ctx).store.read_script(name)
    console.print(script, markup=False, highlight=False, soft_wrap=True, end="")


@app.command("config")
def config_command(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Argument(help="Workspace whose script to open.")] = None,
) -> None:
    """Open a workspace script, or the script directory, in $EDITOR."""
    app_state = _state(ctx)
    store = app_state.store
    editor = resolve_editor(app_state.config)

    with _command_errors():
        if name is not None and not store.exists(name):
            raise WorkspaceNotFoundError(name)
        target = store.script_path(name) if name is not None else store.script_dir
        try:
            open_editor(target, editor)
        except ChildProcessFailedError as e:
            err_console.print(f"[red]Error:[/] {e}")
            err_console.print(f"[yellow]Make sure EDITOR is set correctly. Current: {editor}[/]")
            err_console.print("[dim]Try: export EDITOR=vim  or  export EDITOR=nano[/]")
            raise typer.Exit(1) from None

    console.print("[green]✓[/] Done.")


@app.command()
def init_config(ctx: typer.Context) -> None:
    """Create default configuration file."""
    config_file = _state(ctx).config_path

    if config_file.exists():
        err_console.print(f"[yellow]Config file already exists:[/] {config_file}")
        raise typer.Exit(1)

    save_config(Config(), config_file)
    console.print(f"[green]✓[/] Created config file: {config_file}")


if __name__ == "__main__":
    app()
