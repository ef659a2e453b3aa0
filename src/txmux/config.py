"""Configuration management for txmux."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import cast

import yaml
from pydantic import BaseModel, ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from txmux.xdg_paths import get_config_file_path, get_scripts_dir, get_workspaces_dir


@dataclass
class ConfigWarning:
    """A config validation warning."""

    file: str
    field_name: str
    message: str
    value: object = field(default=None, repr=False)


class Config(BaseModel):
    """Configuration settings for txmux."""

    # Storage locations; None means the XDG defaults
    script_dir: Path | None = None
    workspace_dir: Path | None = None

    # Used when $EDITOR is not set
    default_editor: str = "vim"
    shell: str = "bash"
    confirm_delete: bool = True

    def resolved_script_dir(self) -> Path:
        """Directory for generated scripts, with ``~`` expanded."""
        return (self.script_dir or get_scripts_dir()).expanduser()

    def resolved_workspace_dir(self) -> Path:
        """Directory for JSON descriptors, with ``~`` expanded."""
        return (self.workspace_dir or get_workspaces_dir()).expanduser()


def _load_yaml_file(path: Path) -> tuple[dict[str, object], list[ConfigWarning]]:
    """Load a YAML file and return its contents as a dict with warnings.

    Args:
        path: Path to the YAML file.

    Returns:
        Tuple of (parsed dict, list of warnings). Empty dict on missing/invalid.
    """
    if not path.exists():
        return {}, []
    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
        if not isinstance(raw, dict):
            return {}, []
        return cast(dict[str, object], raw), []
    except yaml.YAMLError as e:
        return {}, [
            ConfigWarning(
                file=str(path),
                field_name="(file)",
                message=f"YAML parse error: {e}",
                value=None,
            )
        ]
    except OSError as e:
        return {}, [
            ConfigWarning(
                file=str(path),
                field_name="(file)",
                message=f"File read error: {e}",
                value=None,
            )
        ]


def load_config(config_path: Path | None = None) -> tuple[Config, list[ConfigWarning]]:
    """Load configuration from the user config file.

    Invalid fields are reported as warnings. The offending top-level keys are
    dropped and the rest of the file still applies.

    Args:
        config_path: Optional path to the config file. Uses default if None.

    Returns:
        Tuple of (loaded Config, list of ConfigWarnings).
    """
    path = config_path or get_config_file_path()
    data, warnings = _load_yaml_file(path)

    try:
        return Config.model_validate(data), warnings
    except ValidationError as e:
        for error in e.errors():
            field_path = ".".join(str(loc) for loc in error["loc"])
            warnings.append(
                ConfigWarning(
                    file=str(path),
                    field_name=field_path,
                    message=error["msg"],
                    value=error.get("input"),
                )
            )

        # Attempt partial recovery: remove bad fields and retry
        for error in e.errors():
            if error["loc"]:
                data.pop(str(error["loc"][0]), None)
        try:
            return Config.model_validate(data), warnings
        except ValidationError:
            return Config(), warnings


def display_config_warnings(warnings: list[ConfigWarning], console: Console) -> None:
    """Display config warnings using Rich formatting.

    Args:
        warnings: List of warnings to display.
        console: Rich console to output to.
    """
    if not warnings:
        return

    text = Text()
    for i, warning in enumerate(warnings):
        if i > 0:
            text.append("\n")
        text.append(f"  {warning.file}", style="dim")
        text.append(": ", style="dim")
        text.append(warning.field_name, style="bold")
        text.append(f": {warning.message}", style="yellow")
        if warning.value is not None:
            text.append(f" (got: {warning.value!r})", style="dim")

    console.print(Panel(text, title="[yellow]Config Warnings[/]", border_style="yellow"))


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to YAML file.

    Args:
        config: The configuration to save.
        config_path: Optional path to config file. Uses default if None.
    """
    path = config_path or get_config_file_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json")

    with path.open("w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False)
