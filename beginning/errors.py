"""Error taxonomy for the scaffolder.

Every failure the core can report derives from :class:`BeginningError` so the
CLI front-end can turn any of them into a readable message and a non-zero exit
status.  Library code only raises; nothing here is caught and retried.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path


class BeginningError(Exception):
    """Base class for all scaffolder errors."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class ConfigurationError(BeginningError):
    """Raised when the resolved values are missing or invalid.

    Always raised before any filesystem mutation takes place.
    """

    def __init__(self, message: str, field: str = "") -> None:
        self.field = field
        super().__init__(message)


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TemplateNotFoundError(BeginningError):
    """Raised when a requested template type does not exist in the repository."""

    def __init__(self, name: str, available: Iterable[str] = ()) -> None:
        self.name = name
        self.available = sorted(available)
        hint = f" (available: {', '.join(self.available)})" if self.available else ""
        super().__init__(f"Template type '{name}' not found{hint}")


class TemplateError(BeginningError):
    """Raised when a path or content template cannot be rendered."""

    def __init__(self, template_path: str, message: str) -> None:
        self.template_path = template_path
        super().__init__(f"{template_path}: {message}")


class DestinationConflictError(TemplateError):
    """Raised when two template entries resolve to the same destination path."""

    def __init__(self, template_path: str, other_path: str, destination: str) -> None:
        self.other_path = other_path
        self.destination = destination
        super().__init__(
            template_path,
            f"resolves to '{destination}', already produced by '{other_path}'",
        )


# ---------------------------------------------------------------------------
# Filesystem
# ---------------------------------------------------------------------------


class ScaffoldIOError(BeginningError):
    """Raised when a filesystem operation fails during scaffolding."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{path}: {message}")


class DestinationExistsError(ScaffoldIOError):
    """Raised when the destination root already exists and is not empty."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(path, "destination already exists and is not empty")


# ---------------------------------------------------------------------------
# Hooks
# ---------------------------------------------------------------------------


class HookExecutionError(BeginningError):
    """Raised when a post-generation hook cannot be spawned or fails."""

    def __init__(
        self,
        hook: str,
        command: str,
        returncode: int | None = None,
        detail: str = "",
    ) -> None:
        self.hook = hook
        self.command = command
        self.returncode = returncode
        reason = detail or f"exited with status {returncode}"
        super().__init__(f"Hook '{hook}' ({command}) failed: {reason}")
