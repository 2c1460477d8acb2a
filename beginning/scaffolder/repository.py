"""Template repository: read-only store of named template trees.

A template root holds one first-level directory per template type.  The
repository walks a type's subtree in lexical pre-order (a directory always
precedes its children) and hands out immutable :class:`TemplateEntry` objects.

Where the trees live is abstracted behind :class:`TemplateSource`:

* :class:`DirectoryTemplateSource` -- an on-disk directory.
* :class:`PackageTemplateSource` -- the tree bundled inside the ``beginning``
  package, read through :mod:`importlib.resources`.

Tests can pass any other ``TemplateSource`` implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path

from ..errors import ScaffoldIOError, TemplateNotFoundError

TEMPLATE_MARKER = ".tmpl"

BUNDLED_PACKAGE = "beginning"
BUNDLED_DIRECTORY = "template"


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------


class EntryKind(str, Enum):
    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True)
class TemplateEntry:
    """One node of a template tree.

    ``path`` is relative to the template type root, uses ``/`` separators and
    may itself contain placeholders.  ``content`` is empty for directories.
    """

    path: str
    kind: EntryKind
    content: bytes = b""

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def templated(self) -> bool:
        """Whether the file's content must be rendered rather than copied."""
        return self.kind is EntryKind.FILE and self.name.endswith(TEMPLATE_MARKER)


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


class TemplateSource(ABC):
    @abstractmethod
    def list_types(self) -> set[str]:
        """Return the names of all template types."""

    @abstractmethod
    def walk(self, type_name: str) -> list[TemplateEntry]:
        """Return the entries of *type_name* in lexical pre-order.

        Raises:
            TemplateNotFoundError: If the type does not exist.
        """


class _TraversableSource(TemplateSource):
    """Shared walking logic for anything exposing the ``Traversable`` API."""

    def __init__(self, root: Traversable, label: str) -> None:
        self._root = root
        self._label = label

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._label!r})"

    def list_types(self) -> set[str]:
        try:
            if not self._root.is_dir():
                return set()
            return {child.name for child in self._root.iterdir() if child.is_dir()}
        except OSError as exc:
            raise ScaffoldIOError(self._label, f"cannot list template types: {exc}") from exc

    def walk(self, type_name: str) -> list[TemplateEntry]:
        available = self.list_types()
        if type_name not in available:
            raise TemplateNotFoundError(type_name, available)

        entries: list[TemplateEntry] = []
        self._walk_dir(self._root.joinpath(type_name), "", entries)
        return entries

    def _walk_dir(self, node: Traversable, prefix: str, entries: list[TemplateEntry]) -> None:
        try:
            children = sorted(node.iterdir(), key=lambda child: child.name)
        except OSError as exc:
            raise ScaffoldIOError(f"{self._label}/{prefix}", f"cannot read directory: {exc}") from exc

        for child in children:
            rel = f"{prefix}{child.name}"
            if child.is_dir():
                entries.append(TemplateEntry(path=rel, kind=EntryKind.DIRECTORY))
                self._walk_dir(child, f"{rel}/", entries)
                continue
            try:
                data = child.read_bytes()
            except OSError as exc:
                raise ScaffoldIOError(f"{self._label}/{rel}", f"cannot read template: {exc}") from exc
            entries.append(TemplateEntry(path=rel, kind=EntryKind.FILE, content=data))


class DirectoryTemplateSource(_TraversableSource):
    """Template trees stored in an on-disk directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        super().__init__(self.root, str(self.root))


class PackageTemplateSource(_TraversableSource):
    """Template trees bundled as package resources."""

    def __init__(
        self,
        package: str = BUNDLED_PACKAGE,
        directory: str = BUNDLED_DIRECTORY,
    ) -> None:
        root = resources.files(package).joinpath(directory)
        super().__init__(root, f"{package}:{directory}")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class TemplateRepository:
    """Caching, read-only facade over a :class:`TemplateSource`.

    Each type is walked at most once; later calls return the same immutable
    tuple of entries.
    """

    def __init__(self, source: TemplateSource | None = None) -> None:
        self.source = source or PackageTemplateSource()
        self._types: frozenset[str] | None = None
        self._entries: dict[str, tuple[TemplateEntry, ...]] = {}

    @classmethod
    def from_directory(cls, template_dir: str | Path | None) -> "TemplateRepository":
        """On-disk repository when *template_dir* is given, bundled otherwise."""
        if template_dir is None:
            return cls(PackageTemplateSource())
        return cls(DirectoryTemplateSource(template_dir))

    def list_types(self) -> set[str]:
        if self._types is None:
            self._types = frozenset(self.source.list_types())
        return set(self._types)

    def has_type(self, type_name: str) -> bool:
        return type_name in self.list_types()

    def walk(self, type_name: str) -> tuple[TemplateEntry, ...]:
        if type_name not in self._entries:
            if not self.has_type(type_name):
                raise TemplateNotFoundError(type_name, self.list_types())
            self._entries[type_name] = tuple(self.source.walk(type_name))
        return self._entries[type_name]
