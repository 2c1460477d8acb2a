"""Tests for path/content rendering and destination-name rules.

Covers:
- destination_name / strip_marker, including the reserved gitignore rule
- TemplateRenderer.render_path (determinism, normalisation, escapes, errors)
- TemplateRenderer.render_content (determinism, undefined vars, bad UTF-8)
- Custom Jinja2 filters
"""

from __future__ import annotations

import pytest

from beginning.config import Values
from beginning.errors import TemplateError
from beginning.scaffolder.templates import (
    RESERVED_NAMES,
    TemplateRenderer,
    destination_name,
    strip_marker,
)


pytestmark = pytest.mark.unit


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


# ---------------------------------------------------------------------------
# Destination names
# ---------------------------------------------------------------------------


class TestDestinationName:
    def test_marker_stripped(self):
        assert destination_name("x.y.tmpl") == "x.y"

    def test_reserved_name_becomes_dotfile(self):
        assert destination_name("gitignore.tmpl") == ".gitignore"

    def test_reserved_table(self):
        assert RESERVED_NAMES == {"gitignore.tmpl": ".gitignore"}

    def test_reserved_only_on_exact_basename(self):
        assert destination_name("my.gitignore.tmpl") == "my.gitignore"

    def test_no_marker_unchanged(self):
        assert destination_name("Makefile") == "Makefile"

    def test_strip_marker_nested(self):
        assert strip_marker("cmd/app/main.go.tmpl") == "cmd/app/main.go"
        assert strip_marker("deploy/gitignore.tmpl") == "deploy/.gitignore"
        assert strip_marker("go.mod.tmpl") == "go.mod"


# ---------------------------------------------------------------------------
# Path rendering
# ---------------------------------------------------------------------------


class TestRenderPath:
    def test_renders_placeholders(self, renderer: TemplateRenderer, values: Values):
        assert renderer.render_path("cmd/{{ repo_name }}/main.go", values.context()) == "cmd/widget/main.go"

    def test_deterministic(self, renderer: TemplateRenderer, values: Values):
        path = "{{ repo_name }}/{{ module_name | slugify }}"
        first = renderer.render_path(path, values.context())
        second = TemplateRenderer().render_path(path, values.context())
        assert first == second == "widget/github-com-acme-widget"

    def test_filters(self, renderer: TemplateRenderer):
        context = {"repo_name": "my-cool-lib"}
        assert renderer.render_path("{{ repo_name | snake_case }}.go", context) == "my_cool_lib.go"

    def test_undefined_variable(self, renderer: TemplateRenderer, values: Values):
        with pytest.raises(TemplateError) as exc_info:
            renderer.render_path("{{ missing }}/x", values.context())
        assert exc_info.value.template_path == "{{ missing }}/x"

    def test_malformed_syntax(self, renderer: TemplateRenderer, values: Values):
        with pytest.raises(TemplateError):
            renderer.render_path("{{ repo_name /x", values.context())

    def test_empty_result(self, renderer: TemplateRenderer):
        with pytest.raises(TemplateError, match="empty"):
            renderer.render_path("{{ name }}", {"name": ""})

    def test_empty_segment(self, renderer: TemplateRenderer):
        with pytest.raises(TemplateError, match="empty segment"):
            renderer.render_path("cmd/{{ name }}/main.go", {"name": ""})

    def test_escape_rejected(self, renderer: TemplateRenderer):
        with pytest.raises(TemplateError, match="escapes"):
            renderer.render_path("{{ name }}/x", {"name": ".."})

    def test_absolute_rejected(self, renderer: TemplateRenderer):
        with pytest.raises(TemplateError, match="escapes"):
            renderer.render_path("{{ name }}x", {"name": "/etc/"})


# ---------------------------------------------------------------------------
# Content rendering
# ---------------------------------------------------------------------------


class TestRenderContent:
    def test_renders(self, renderer: TemplateRenderer, values: Values):
        out = renderer.render_content(
            "go.mod.tmpl", b"module {{ module_name }}\n\ngo {{ go_version }}\n", values.context()
        )
        assert out == b"module github.com/acme/widget\n\ngo 1.24\n"

    def test_byte_identical_across_renders(self, renderer: TemplateRenderer, values: Values):
        source = b"{% for i in range(3) %}\n{{ repo_name }}-{{ i }}\n{% endfor %}\n"
        first = renderer.render_content("f.tmpl", source, values.context())
        second = TemplateRenderer().render_content("f.tmpl", source, values.context())
        assert first == second
        assert first == b"widget-0\nwidget-1\nwidget-2\n"

    def test_keeps_trailing_newline(self, renderer: TemplateRenderer, values: Values):
        assert renderer.render_content("f.tmpl", b"x\n", values.context()) == b"x\n"

    def test_unicode(self, renderer: TemplateRenderer):
        out = renderer.render_content("f.tmpl", "héllo {{ n }}".encode(), {"n": "wörld"})
        assert out.decode("utf-8") == "héllo wörld"

    def test_undefined_names_template(self, renderer: TemplateRenderer, values: Values):
        with pytest.raises(TemplateError) as exc_info:
            renderer.render_content("cmd/main.go.tmpl", b"{{ nope }}", values.context())
        assert exc_info.value.template_path == "cmd/main.go.tmpl"
        assert "nope" in str(exc_info.value)

    def test_invalid_utf8(self, renderer: TemplateRenderer, values: Values):
        with pytest.raises(TemplateError, match="UTF-8"):
            renderer.render_content("bin.tmpl", b"\xff\xfe\x00", values.context())


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class TestFilters:
    @pytest.mark.parametrize(
        "expr, expected",
        [
            ("{{ 'My Service' | slugify }}", "my-service"),
            ("{{ 'my-service' | pascal_case }}", "MyService"),
            ("{{ 'MyService' | snake_case }}", "my_service"),
            ("{{ 'my_service' | camel_case }}", "myService"),
            ("{{ '' | camel_case }}", ""),
        ],
    )
    def test_filter(self, renderer: TemplateRenderer, expr: str, expected: str):
        assert renderer.render_string(expr, {}) == expected
