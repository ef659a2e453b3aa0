"""Workspace layout model for txmux."""

import re
from enum import StrEnum
from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


class SplitDirection(StrEnum):
    """Direction of the split that created a pane."""

    HORIZONTAL = "horizontal"  # side-by-side (left/right)
    VERTICAL = "vertical"  # stacked (top/bottom)

    @property
    def flag(self) -> str:
        """The tmux split-window flag for this direction."""
        return "-h" if self is SplitDirection.HORIZONTAL else "-v"


class ResizeDimension(StrEnum):
    """Dimension a pane resize applies to."""

    WIDTH = "width"
    HEIGHT = "height"

    @property
    def flag(self) -> str:
        """The tmux resize-pane flag for this dimension."""
        return "-x" if self is ResizeDimension.WIDTH else "-y"


class PaneResize(BaseModel):
    """Explicit size applied to a pane after all panes exist."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    dimension: ResizeDimension = Field(alias="type")
    amount: int = Field(alias="value", gt=0)  # columns or lines


class Pane(BaseModel):
    """A single pane in a workspace layout."""

    model_config = ConfigDict(populate_by_name=True)

    split: SplitDirection | None = None  # None only for the root pane
    directory: str | None = None  # None means inherit the base directory
    command: str = ""
    resize: PaneResize | None = None

    @field_validator("directory")
    @classmethod
    def _empty_directory_is_none(cls, value: str | None) -> str | None:
        return value or None

    @field_validator("command", mode="before")
    @classmethod
    def _null_command_is_empty(cls, value: object) -> object:
        return "" if value is None else value


class Workspace(BaseModel):
    """A named tmux workspace: base directory plus ordered panes.

    Pane order is significant: position ``i`` is both the tmux pane index and
    the order in which the pane is split off.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str
    base_dir: str = Field(default_factory=lambda: str(Path.cwd()), alias="baseDir")
    panes: list[Pane] = Field(default_factory=lambda: [Pane()])

    @model_validator(mode="after")
    def _check_panes(self) -> Self:
        if not self.panes:
            raise ValueError("A workspace needs at least one pane")
        if self.panes[0].split is not None:
            raise ValueError("Pane 0 is the root pane and cannot have a split")
        for index, pane in enumerate(self.panes[1:], start=1):
            if pane.split is None:
                raise ValueError(f"Pane {index} is missing a split direction")
        return self

    def to_descriptor(self) -> dict[str, object]:
        """Return the JSON descriptor form of this workspace."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def validate_workspace_name(name: str) -> str:
    """Validate a workspace name.

    Names double as file stems and tmux session names, so they are limited to
    letters, digits, hyphens and underscores.

    Args:
        name: The workspace name to validate.

    Returns:
        The validated name.

    Raises:
        ValueError: If the name is empty or contains invalid characters.
    """
    if not name:
        raise ValueError("Workspace name cannot be empty")

    if not _NAME_PATTERN.match(name):
        raise ValueError(
            f"Workspace name '{name}' must start with a letter or digit and contain only letters, "
            "digits, '-' and '_'"
        )

    return name
