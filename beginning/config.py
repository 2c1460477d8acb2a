"""Beginning configuration.

Two layers live here:

* ``Settings`` -- tool-level knobs (where templates come from, the minimum
  target version, hook behaviour).  Built once by the CLI or by the caller and
  passed explicitly through the rest of the system.
* ``Values`` -- the parameter set substituted into template paths and
  contents.  Resolved by chaining :func:`load_values`, :func:`override_values`
  and :func:`validate_values`; validation is eager so nothing touches the
  filesystem with an incomplete parameter set.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from rich.markup import escape

from .errors import ConfigurationError
from .utils import console

DEFAULT_VALUES_FILE = Path("values.yaml")
DEFAULT_MIN_GO_VERSION = "1.24"
DEFAULT_GO_VERSION = "1.24"

_LEADING_DIGITS = re.compile(r"^(\d+)")
_NUMERIC_TAGS = frozenset({"tag:yaml.org,2002:int", "tag:yaml.org,2002:float"})


# ---------------------------------------------------------------------------
# Version handling
# ---------------------------------------------------------------------------


def parse_version(text: str) -> tuple[int, int]:
    """Parse a dotted version string into a ``(major, minor)`` pair.

    Each component may carry a trailing non-numeric suffix, so ``"1.24rc1"``
    and ``"1.24.1-rc"`` both parse as ``(1, 24)``.  Components beyond the
    minor are ignored.

    Raises:
        ConfigurationError: If the major or minor component has no leading
            integer.
    """
    parts = text.strip().split(".")
    numbers: list[int] = []
    for label, part in zip(("major", "minor"), parts + [""] * 2):
        match = _LEADING_DIGITS.match(part)
        if match is None:
            raise ConfigurationError(
                f"Invalid version '{text}': cannot parse {label} component",
                field="go_version",
            )
        numbers.append(int(match.group(1)))
    return numbers[0], numbers[1]


def check_version(text: str, minimum: str) -> tuple[int, int]:
    """Validate *text* against *minimum* and return the parsed pair.

    Majors are compared first; minors only matter when the majors are equal.
    """
    parsed = parse_version(text)
    floor = parse_version(minimum)
    if parsed < floor:
        raise ConfigurationError(
            f"Version {text} is below the minimum supported version {minimum}",
            field="go_version",
        )
    return parsed


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    """Tool-level configuration.

    Instances are created once (usually by the CLI entry point or
    :meth:`from_env`) and handed to every component that needs them; nothing
    reads configuration from ambient global state.
    """

    values_file: Path = Field(default=DEFAULT_VALUES_FILE)
    template_dir: Path | None = Field(
        default=None, description="On-disk template root; bundled templates when unset"
    )
    min_go_version: str = Field(default=DEFAULT_MIN_GO_VERSION)
    default_go_version: str = Field(default=DEFAULT_GO_VERSION)
    run_hooks: bool = Field(default=True)
    hook_timeout: int | None = Field(
        default=None, ge=1, description="Per-hook timeout in seconds; no timeout when unset"
    )

    @model_validator(mode="after")
    def _default_satisfies_minimum(self) -> "Settings":
        try:
            check_version(self.default_go_version, self.min_go_version)
        except ConfigurationError as exc:
            raise ValueError(str(exc)) from exc
        return self

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            BEGINNING_VALUES_FILE, BEGINNING_TEMPLATE_DIR,
            BEGINNING_MIN_GO_VERSION, BEGINNING_DEFAULT_GO_VERSION,
            BEGINNING_SKIP_HOOKS, BEGINNING_HOOK_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("BEGINNING_VALUES_FILE"):
            kwargs["values_file"] = Path(os.environ["BEGINNING_VALUES_FILE"])
        if os.environ.get("BEGINNING_TEMPLATE_DIR"):
            kwargs["template_dir"] = Path(os.environ["BEGINNING_TEMPLATE_DIR"])
        if os.environ.get("BEGINNING_MIN_GO_VERSION"):
            kwargs["min_go_version"] = os.environ["BEGINNING_MIN_GO_VERSION"]
        if os.environ.get("BEGINNING_DEFAULT_GO_VERSION"):
            kwargs["default_go_version"] = os.environ["BEGINNING_DEFAULT_GO_VERSION"]
        if os.environ.get("BEGINNING_SKIP_HOOKS", "").lower() in ("1", "true", "yes"):
            kwargs["run_hooks"] = False
        if os.environ.get("BEGINNING_HOOK_TIMEOUT"):
            kwargs["hook_timeout"] = int(os.environ["BEGINNING_HOOK_TIMEOUT"])
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# Values
# ---------------------------------------------------------------------------


class Values(BaseModel):
    """Parameter set substituted into template paths and contents.

    The values document uses the ``ModuleName`` / ``RepoName`` / ``GoVersion``
    keys; the snake_case field names are accepted as well.  Any other key is
    kept and exposed to templates as an extra variable.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    module_name: str = Field(default="", alias="ModuleName")
    repo_name: str = Field(default="", alias="RepoName")
    go_version: str = Field(default="", alias="GoVersion")

    @field_validator("module_name", "repo_name", "go_version", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: Any) -> Any:
        # Explicit parameters may arrive as numbers.
        if value is None:
            return ""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def context(self) -> dict[str, Any]:
        """Return the template context: declared fields plus extra keys."""
        return self.model_dump()


def _values_from_mapping(data: Mapping[str, Any], source: str) -> Values:
    try:
        return Values.model_validate(dict(data))
    except ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error.get("loc", ()))
        raise ConfigurationError(
            f"Invalid value for '{field}' in {source}: {error.get('msg', 'invalid')}",
            field=field,
        ) from exc


class _ValuesLoader(yaml.SafeLoader):
    """``SafeLoader`` that keeps numeric scalars as their source text.

    An unquoted ``GoVersion: 1.30`` must stay ``"1.30"``; read as a float it
    would come back as ``1.3``.
    """


_ValuesLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _NUMERIC_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_values(path: str | Path) -> Values:
    """Load ``Values`` from a YAML document.

    A missing file is not an error: it yields an empty ``Values`` so that
    explicit parameters and defaults can still fill it in.

    Raises:
        ConfigurationError: If the file cannot be read, is not valid YAML, or
            is not a mapping.
    """
    file_path = Path(path)
    if not file_path.exists():
        return Values()

    try:
        raw = file_path.read_text(encoding="utf-8")
        data = yaml.load(raw, Loader=_ValuesLoader)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read values file {file_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Values file {file_path} is not valid YAML: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Values file {file_path} must contain a mapping")

    values = _values_from_mapping(data, str(file_path))
    console.print(f"[dim]Loaded values from {escape(str(file_path))}[/dim]")
    return values


def override_values(base: Values, explicit: Mapping[str, Any] | None = None) -> Values:
    """Layer explicitly supplied parameters on top of *base*.

    Explicit parameters win over file-loaded values.  ``None`` and empty
    strings are treated as "not supplied" and never clear a loaded value.
    """
    merged = base.model_dump()
    for key, value in (explicit or {}).items():
        if value is None or value == "":
            continue
        merged[key] = value
    return _values_from_mapping(merged, "explicit parameters")


def validate_values(values: Values, settings: Settings | None = None) -> Values:
    """Enforce required fields and apply defaults.

    Returns:
        A new, fully-populated ``Values`` instance.

    Raises:
        ConfigurationError: If ``module_name`` or ``repo_name`` is empty, or
            the version is unparsable or below ``settings.min_go_version``.
    """
    settings = settings or Settings()

    if not values.module_name.strip():
        raise ConfigurationError(
            "Module name is required. Use -m flag or provide ModuleName in values.yaml",
            field="module_name",
        )
    if not values.repo_name.strip():
        raise ConfigurationError(
            "Repository name is required. Use -r flag or provide RepoName in values.yaml",
            field="repo_name",
        )

    go_version = values.go_version.strip()
    if not go_version:
        go_version = settings.default_go_version
        console.print(f"[dim]Using default Go version: {escape(go_version)}[/dim]")
    check_version(go_version, settings.min_go_version)

    return values.model_copy(update={"go_version": go_version})


def resolve_values(
    settings: Settings,
    explicit: Mapping[str, Any] | None = None,
) -> Values:
    """Load, override and validate in one step."""
    base = load_values(settings.values_file)
    return validate_values(override_values(base, explicit), settings)
