"""Shared pytest fixtures for the Beginning test suite.

Provides reusable fixtures for:
- Resolved ``Values`` and default ``Settings``
- An in-memory ``TemplateSource`` fake
- An on-disk template root with a small ``service`` tree
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from beginning.config import Settings, Values
from beginning.errors import TemplateNotFoundError
from beginning.scaffolder.repository import (
    EntryKind,
    TemplateEntry,
    TemplateRepository,
    TemplateSource,
)


# ---------------------------------------------------------------------------
# Fake template source
# ---------------------------------------------------------------------------


class FakeTemplateSource(TemplateSource):
    """In-memory template source.

    ``trees`` maps a type name to ``{relative_path: content}``; a ``None``
    content marks a directory.  Entries are served in the insertion order of
    each mapping, so tests control the walk order exactly.
    """

    def __init__(self, trees: dict[str, dict[str, bytes | None]]) -> None:
        self.trees = trees
        self.walk_calls: list[str] = []

    def list_types(self) -> set[str]:
        return set(self.trees)

    def walk(self, type_name: str) -> list[TemplateEntry]:
        if type_name not in self.trees:
            raise TemplateNotFoundError(type_name, self.trees)
        self.walk_calls.append(type_name)
        entries: list[TemplateEntry] = []
        for path, content in self.trees[type_name].items():
            if content is None:
                entries.append(TemplateEntry(path=path, kind=EntryKind.DIRECTORY))
            else:
                entries.append(TemplateEntry(path=path, kind=EntryKind.FILE, content=content))
        return entries


def make_repository(trees: dict[str, dict[str, bytes | None]]) -> TemplateRepository:
    """Build a repository over a :class:`FakeTemplateSource`."""
    return TemplateRepository(FakeTemplateSource(trees))


@pytest.fixture
def repository_factory():
    """Factory fixture wrapping :func:`make_repository`."""
    return make_repository


# ---------------------------------------------------------------------------
# Values & settings
# ---------------------------------------------------------------------------


@pytest.fixture
def values() -> Values:
    """A fully-resolved parameter set."""
    return Values(
        module_name="github.com/acme/widget",
        repo_name="widget",
        go_version="1.24",
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Default settings pointing at a values file that does not exist."""
    return Settings(values_file=tmp_path / "values.yaml")


# ---------------------------------------------------------------------------
# Template trees
# ---------------------------------------------------------------------------


@pytest.fixture
def service_tree() -> dict[str, bytes | None]:
    """A small service template, already in pre-order."""
    return {
        "README.md.tmpl": b"# {{ repo_name }}\n",
        "bin": None,
        "bin/run.sh": b"#!/bin/sh\necho {{ not rendered }}\n",
        "cmd": None,
        "cmd/{{ repo_name }}": None,
        "cmd/{{ repo_name }}/main.go.tmpl": b"package main // {{ module_name }}\n",
        "gitignore.tmpl": b"*.out\n",
        "go.mod.tmpl": b"module {{ module_name }}\n\ngo {{ go_version }}\n",
    }


@pytest.fixture
def fake_repository(service_tree: dict[str, bytes | None]) -> TemplateRepository:
    """Repository with ``service`` and an empty ``library`` type."""
    return make_repository({"service": service_tree, "library": {}})


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """On-disk template root with ``service`` and ``library`` types."""
    root = tmp_path / "templates"
    service = root / "service"
    (service / "cmd" / "{{ repo_name }}").mkdir(parents=True)
    (service / "bin").mkdir()
    (service / "go.mod.tmpl").write_text(
        "module {{ module_name }}\n\ngo {{ go_version }}\n", encoding="utf-8"
    )
    (service / "gitignore.tmpl").write_text("*.out\n", encoding="utf-8")
    (service / "bin" / "run.sh").write_bytes(b"#!/bin/sh\necho hi\n")
    (service / "cmd" / "{{ repo_name }}" / "main.go.tmpl").write_text(
        textwrap.dedent(
            """\
            package main

            // {{ module_name }}
            func main() {}
            """
        ),
        encoding="utf-8",
    )
    (root / "library").mkdir()
    (root / "library" / "README.md").write_text("verbatim\n", encoding="utf-8")
    return root
