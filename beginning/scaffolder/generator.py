"""Main scaffolding engine.

Takes a template type, a resolved ``Values`` set and a destination root, and
materialises the template tree there: every entry path is rendered, ``.tmpl``
files are rendered and written under their stripped names, and every other
file is copied byte-for-byte.

Failure policy: errors abort the walk immediately and nothing is rolled back.
A failure while writing leaves a partially populated destination for the
caller to inspect or remove.  Path rendering and conflict detection happen in
a planning pass before the destination is created, so those failures leave no
trace on disk.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

from rich.markup import escape

from ..config import Settings, Values, check_version
from ..errors import (
    ConfigurationError,
    DestinationConflictError,
    DestinationExistsError,
    ScaffoldIOError,
)
from ..utils import atomic_write_bytes, console, print_success
from .repository import TemplateEntry, TemplateRepository
from .templates import TemplateRenderer, strip_marker


# ---------------------------------------------------------------------------
# Plan
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PlannedEntry:
    """A template entry paired with its resolved, relative output path."""

    entry: TemplateEntry
    destination: str


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Materialises template trees from a :class:`TemplateRepository`.

    The generator keeps no state between runs except ``created``, the ordered
    list of filesystem nodes written by the most recent :meth:`generate` call.
    ``settings`` supplies the minimum version that :meth:`generate` enforces.
    """

    def __init__(
        self,
        repository: TemplateRepository | None = None,
        renderer: TemplateRenderer | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.repository = repository or TemplateRepository()
        self.renderer = renderer or TemplateRenderer()
        self.settings = settings or Settings()
        self.created: list[Path] = []

    # -- Public API --------------------------------------------------------

    def plan(self, template_type: str, values: Values) -> list[PlannedEntry]:
        """Resolve every entry of *template_type* to a relative output path.

        Pure: touches nothing on disk.

        Raises:
            TemplateNotFoundError: If the type does not exist.
            TemplateError: If an entry path cannot be rendered.
            DestinationConflictError: If two entries resolve to the same path.
        """
        context = values.context()
        planned: list[PlannedEntry] = []
        seen: dict[str, str] = {}

        for entry in self.repository.walk(template_type):
            rel = self.renderer.render_path(entry.path, context)
            if entry.templated:
                rel = strip_marker(rel)

            if rel in seen:
                raise DestinationConflictError(entry.path, seen[rel], rel)
            seen[rel] = entry.path
            planned.append(PlannedEntry(entry=entry, destination=rel))

        return planned

    async def generate(
        self,
        template_type: str,
        values: Values,
        destination: str | Path,
    ) -> Path:
        """Generate *template_type* into *destination*.

        Args:
            template_type: Name of a first-level directory of the template root.
            values: Validated parameter set.
            destination: Project root to create.  Must not exist, or be an
                empty directory.

        Returns:
            The absolute path of the materialised project root.

        Raises:
            ConfigurationError: If *values* lacks a module name, a repository
                name or a version at or above ``settings.min_go_version``.
                Nothing is created on disk.
        """
        self.created = []
        _require_resolved(values, self.settings)
        planned = self.plan(template_type, values)
        context = values.context()

        root = Path(destination).absolute()
        await asyncio.to_thread(_prepare_root, root)
        console.print(
            f"Scaffolding [bold]{escape(template_type)}[/bold] project in: {escape(str(root))}"
        )

        for item in planned:
            target = root / item.destination
            entry = item.entry
            if entry.is_dir:
                await asyncio.to_thread(_make_dir, target)
            elif entry.templated:
                data = self.renderer.render_content(entry.path, entry.content, context)
                await asyncio.to_thread(_write_file, target, data)
            else:
                await asyncio.to_thread(_write_file, target, entry.content)
            self.created.append(target)

        print_success(f"{escape(template_type.title())} project scaffolded: {escape(str(root))}")
        return root


async def scaffold(
    template_type: str,
    values: Values,
    destination: str | Path,
    repository: TemplateRepository | None = None,
    settings: Settings | None = None,
) -> Path:
    """Convenience wrapper around :meth:`ProjectGenerator.generate`."""
    generator = ProjectGenerator(repository, settings=settings)
    return await generator.generate(template_type, values, destination)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _require_resolved(values: Values, settings: Settings) -> None:
    if not values.module_name.strip():
        raise ConfigurationError("Module name is required", field="module_name")
    if not values.repo_name.strip():
        raise ConfigurationError("Repository name is required", field="repo_name")
    if not values.go_version.strip():
        raise ConfigurationError("Go version is required", field="go_version")
    check_version(values.go_version, settings.min_go_version)


def _prepare_root(root: Path) -> None:
    if root.exists():
        if not root.is_dir() or any(root.iterdir()):
            raise DestinationExistsError(root)
        return
    try:
        root.mkdir(parents=True)
    except OSError as exc:
        raise ScaffoldIOError(root, f"cannot create destination: {exc.strerror or exc}") from exc


def _make_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ScaffoldIOError(path, f"cannot create directory: {exc.strerror or exc}") from exc


def _write_file(path: Path, data: bytes) -> None:
    """Synchronous helper: create parent dirs and write content atomically."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write_bytes(path, data)
    except OSError as exc:
        raise ScaffoldIOError(path, f"cannot write file: {exc.strerror or exc}") from exc
