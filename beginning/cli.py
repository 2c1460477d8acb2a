"""Command-line front-end.

Thin layer over the core: parses flags into ``Settings`` and explicit
``Values`` parameters, then calls the generator and the hook runner.

Usage::

    beginning list
    beginning create -t service -r myapi -m github.com/company/myapi
    beginning create -t library -r myutils -o /path/to/output
    beginning create -v custom-values.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape

from .config import Settings, Values, resolve_values
from .errors import BeginningError
from .scaffolder import HookRunner, ProjectGenerator, TemplateRepository
from .utils import console, print_error, print_summary_table, print_warning


def build_parser() -> argparse.ArgumentParser:
    # --template-dir is accepted before or after the subcommand; the
    # subcommand copy is suppressed when absent so it never resets the
    # top-level value.
    template_dir = argparse.ArgumentParser(add_help=False)
    template_dir.add_argument(
        "--template-dir",
        default=argparse.SUPPRESS,
        help="Read templates from this directory instead of the bundled ones",
    )

    parser = argparse.ArgumentParser(
        prog="beginning",
        description="Beginning -- scaffold Go projects from predefined templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  beginning list\n"
            "  beginning create -t service -r myapi -m github.com/company/myapi\n"
            "  beginning create -t library -r mylib -o /path/to/output\n"
            "  beginning create -t service -r myapi -m m --template-dir ./templates\n"
        ),
    )
    parser.add_argument(
        "--template-dir",
        default=None,
        help="Read templates from this directory instead of the bundled ones",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", parents=[template_dir], help="List available template types")

    create = subparsers.add_parser(
        "create", parents=[template_dir], help="Create a new Go project from templates"
    )
    create.add_argument(
        "--values", "-v",
        default=None,
        help="Path to values.yaml (optional if using CLI flags; default: values.yaml)",
    )
    create.add_argument("--module", "-m", default="", help="Go module name (e.g. github.com/company/project)")
    create.add_argument("--repo", "-r", default="", help="Repository/project name")
    create.add_argument("--go-version", "-g", default="", help="Go version to use")
    create.add_argument(
        "--output", "-o",
        default="",
        help="Output directory (default: ./<repo-name>)",
    )
    create.add_argument("--type", "-t", default="service", help="Template type (default: service)")
    create.add_argument(
        "--skip-hooks",
        action="store_true",
        help="Do not run post-generation commands",
    )
    return parser


def _settings_from_args(args: argparse.Namespace) -> Settings:
    settings = Settings.from_env()
    update: dict[str, object] = {}
    if args.template_dir:
        update["template_dir"] = Path(args.template_dir)
    if getattr(args, "values", None):
        update["values_file"] = Path(args.values)
    if getattr(args, "skip_hooks", False):
        update["run_hooks"] = False
    return settings.model_copy(update=update)


def _list_templates(repository: TemplateRepository) -> int:
    console.print("Available template types:")
    for name in sorted(repository.list_types()):
        console.print(f"  - {escape(name)}")
    return 0


async def _create(
    settings: Settings,
    repository: TemplateRepository,
    template_type: str,
    values: Values,
    output: Path,
) -> Path:
    generator = ProjectGenerator(repository, settings=settings)
    project_root = await generator.generate(template_type, values, output)
    if settings.run_hooks:
        await HookRunner(timeout=settings.hook_timeout).run(project_root)
    else:
        print_warning("Skipping post-generation hooks")
    return project_root


def _create_project(args: argparse.Namespace, settings: Settings, repository: TemplateRepository) -> int:
    if not repository.has_type(args.type):
        print_error(f"Template type '{escape(args.type)}' not found!")
        console.print("Use 'beginning list' to see available template types")
        return 1

    values = resolve_values(
        settings,
        {"module_name": args.module, "repo_name": args.repo, "go_version": args.go_version},
    )
    output = Path(args.output or f"./{values.repo_name}").absolute()

    print_summary_table(
        {
            "Template": args.type,
            "Module": values.module_name,
            "Repository": values.repo_name,
            "Go version": values.go_version,
            "Output": str(output),
        },
        title="Project",
    )
    asyncio.run(_create(settings, repository, args.type, values, output))
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point for ``beginning`` / ``python -m beginning``."""
    args = build_parser().parse_args(argv)

    try:
        settings = _settings_from_args(args)
    except (ValidationError, ValueError) as exc:
        print_error(f"Invalid settings: {escape(str(exc))}")
        sys.exit(1)

    repository = TemplateRepository.from_directory(settings.template_dir)
    try:
        if args.command == "list":
            code = _list_templates(repository)
        else:
            code = _create_project(args, settings, repository)
    except BeginningError as exc:
        print_error(f"Error: {escape(str(exc))}")
        sys.exit(1)

    if code:
        sys.exit(code)
