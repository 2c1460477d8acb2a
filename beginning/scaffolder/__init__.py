"""Beginning scaffolder -- materialises project trees from templates.

Quick usage::

    from beginning.scaffolder import HookRunner, ProjectGenerator, TemplateRepository

    repository = TemplateRepository.from_directory(None)  # bundled templates
    generator = ProjectGenerator(repository)
    project_path = await generator.generate("service", values, "/tmp/myapi")
    await HookRunner().run(project_path)
"""

from .generator import PlannedEntry, ProjectGenerator, scaffold
from .hooks import DEFAULT_HOOKS, HookRunner, HookSpec, run_hooks
from .repository import (
    TEMPLATE_MARKER,
    DirectoryTemplateSource,
    EntryKind,
    PackageTemplateSource,
    TemplateEntry,
    TemplateRepository,
    TemplateSource,
)
from .templates import RESERVED_NAMES, TemplateRenderer, destination_name, strip_marker

__all__ = [
    "DEFAULT_HOOKS",
    "RESERVED_NAMES",
    "TEMPLATE_MARKER",
    "DirectoryTemplateSource",
    "EntryKind",
    "HookRunner",
    "HookSpec",
    "PackageTemplateSource",
    "PlannedEntry",
    "ProjectGenerator",
    "TemplateEntry",
    "TemplateRenderer",
    "TemplateRepository",
    "TemplateSource",
    "destination_name",
    "run_hooks",
    "scaffold",
    "strip_marker",
]
