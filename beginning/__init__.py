"""Beginning -- scaffold new Go projects from parameterised template trees."""

from .config import Settings, Values, resolve_values
from .errors import (
    BeginningError,
    ConfigurationError,
    DestinationConflictError,
    DestinationExistsError,
    HookExecutionError,
    ScaffoldIOError,
    TemplateError,
    TemplateNotFoundError,
)
from .scaffolder import HookRunner, ProjectGenerator, TemplateRepository, run_hooks, scaffold

__version__ = "0.1.0"

__all__ = [
    "BeginningError",
    "ConfigurationError",
    "DestinationConflictError",
    "DestinationExistsError",
    "HookExecutionError",
    "HookRunner",
    "ProjectGenerator",
    "ScaffoldIOError",
    "Settings",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRepository",
    "Values",
    "resolve_values",
    "run_hooks",
    "scaffold",
]
