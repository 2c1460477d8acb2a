"""Jinja2 rendering for template paths and contents.

Provides the TemplateRenderer class, which renders both the relative path of a
template entry and the body of ``.tmpl`` files against the resolved
``Values``.  Undefined variables are errors rather than silent blanks, so a
typo in a placeholder surfaces as a ``TemplateError`` naming the entry.

Also home to the destination-name rules: the ``.tmpl`` marker is stripped
from rendered file names, and a small table of reserved names overrides the
plain stripping (``gitignore.tmpl`` becomes ``.gitignore``).
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Any

from jinja2 import Environment, StrictUndefined
from jinja2 import TemplateError as JinjaTemplateError

from ..errors import TemplateError
from .repository import TEMPLATE_MARKER

# Reserved template basenames and the destination name each one produces.
RESERVED_NAMES: dict[str, str] = {
    f"gitignore{TEMPLATE_MARKER}": ".gitignore",
}


# ---------------------------------------------------------------------------
# Destination names
# ---------------------------------------------------------------------------


def destination_name(basename: str) -> str:
    """Return the output file name for a templated file's *basename*.

    ``"x.y.tmpl"`` maps to ``"x.y"``; reserved names map through
    :data:`RESERVED_NAMES` instead.
    """
    if basename in RESERVED_NAMES:
        return RESERVED_NAMES[basename]
    if basename.endswith(TEMPLATE_MARKER):
        return basename[: -len(TEMPLATE_MARKER)]
    return basename


def strip_marker(rel_path: str) -> str:
    """Apply :func:`destination_name` to the last segment of *rel_path*."""
    head, _, basename = rel_path.rpartition("/")
    name = destination_name(basename)
    return f"{head}/{name}" if head else name


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders template paths and ``.tmpl`` contents with Jinja2.

    Rendering is a pure function of (template text, context): the same inputs
    always produce byte-identical output.
    """

    def __init__(self) -> None:
        self.env = Environment(
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        # Register custom filters
        self.env.filters["slugify"] = _slugify_filter
        self.env.filters["pascal_case"] = _pascal_case_filter
        self.env.filters["snake_case"] = _snake_case_filter
        self.env.filters["camel_case"] = _camel_case_filter

    def render_string(
        self,
        template_string: str,
        context: dict[str, Any],
        *,
        name: str = "<string>",
    ) -> str:
        """Render an inline template string with the provided context.

        Raises:
            TemplateError: On malformed syntax or an undefined variable.
        """
        try:
            template = self.env.from_string(template_string)
            return template.render(**context)
        except JinjaTemplateError as exc:
            raise TemplateError(name, exc.message or type(exc).__name__) from exc

    def render_path(self, rel_path: str, context: dict[str, Any]) -> str:
        """Render a relative entry path and normalise it.

        The result must be a non-empty relative path that stays inside the
        destination root.
        """
        rendered = self.render_string(rel_path, context, name=rel_path)
        parts = PurePosixPath(rendered).parts
        if not rendered.strip() or not parts:
            raise TemplateError(rel_path, "path renders to an empty string")
        if rendered.startswith("/") or ".." in parts:
            raise TemplateError(rel_path, f"path '{rendered}' escapes the destination root")
        if any(not part.strip() for part in rendered.split("/")):
            raise TemplateError(rel_path, f"path '{rendered}' contains an empty segment")
        return "/".join(parts)

    def render_content(self, rel_path: str, source: bytes, context: dict[str, Any]) -> bytes:
        """Render the UTF-8 template *source* and return the encoded result."""
        try:
            text = source.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TemplateError(rel_path, f"template is not valid UTF-8: {exc}") from exc
        return self.render_string(text, context, name=rel_path).encode("utf-8")


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def _slugify_filter(value: str) -> str:
    """Convert a string to a URL/filename-safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")


def _pascal_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", value)
    return "".join(word.capitalize() for word in parts if word)


def _snake_case_filter(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()


def _camel_case_filter(value: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``someThing``."""
    pascal = _pascal_case_filter(value)
    if pascal:
        return pascal[0].lower() + pascal[1:]
    return ""
