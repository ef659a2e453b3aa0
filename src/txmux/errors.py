"""Error types for txmux."""


class TxmuxError(Exception):
    """Base class for all txmux errors."""


class WorkspaceNotFoundError(TxmuxError):
    """Raised when a named workspace does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Workspace '{name}' not found")
        self.name = name


class WorkspaceExistsError(TxmuxError):
    """Raised when a workspace name is already taken."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Workspace '{name}' already exists")
        self.name = name


class StorageError(TxmuxError):
    """Raised when reading or writing workspace files fails."""


class ChildProcessFailedError(TxmuxError):
    """Raised when an external program fails to start or exits non-zero."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        super().__init__(message)
        self.returncode = returncode


class InvalidTransitionError(TxmuxError):
    """Raised when an editor action is not allowed in the current state."""
