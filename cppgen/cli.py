"""cppgen command-line interface.

Three modes:

* ``--list`` prints the template folders available for scan & replay.
* ``--generate NAME`` replays one template folder into ``--output``.
* ``--config FILE`` runs the config-driven generator against
  ``--template-dir`` (the bundled template set by default).

Usage::

    cppgen --list --templates ./templates
    cppgen --generate console-app --output ./hello --style at --style dollar_braces
    cppgen --config project.toml --output ./mylib
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from rich.markup import escape

from cppgen import __version__
from cppgen.config import GeneratorConfig
from cppgen.errors import CppgenError
from cppgen.scaffolder.generator import create_project_generator
from cppgen.scaffolder.placeholders import PlaceholderEngine, PlaceholderStyle
from cppgen.scaffolder.replay import ReplayGenerator
from cppgen.scaffolder.scanner import list_templates
from cppgen.scaffolder.writer import GenerationResult
from cppgen.utils import (
    console,
    error_console,
    format_duration,
    print_header,
    print_success,
    print_summary_table,
)

DEFAULT_SCAN_TEMPLATES = "templates"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cppgen",
        description="cppgen -- C++ project generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  cppgen --list --templates ./templates\n"
            "  cppgen --generate console-app --output ./hello\n"
            "  cppgen --config project.toml --output ./mylib\n"
        ),
    )
    parser.add_argument(
        "--list", "-l",
        action="store_true",
        help="List available templates",
    )
    parser.add_argument(
        "--generate", "-g",
        metavar="NAME",
        default=None,
        help="Generate a project by replaying the named template folder",
    )
    parser.add_argument(
        "--config", "-c",
        metavar="FILE",
        default=None,
        help="TOML project configuration",
    )
    parser.add_argument(
        "--output", "-o",
        default=".",
        help="Output directory (default: .)",
    )
    parser.add_argument(
        "--templates",
        metavar="DIR",
        default=DEFAULT_SCAN_TEMPLATES,
        help=f"Template folders for --list/--generate (default: {DEFAULT_SCAN_TEMPLATES}/)",
    )
    parser.add_argument(
        "--template-dir",
        metavar="DIR",
        default=None,
        help="Template set for --config (default: bundled templates)",
    )
    parser.add_argument(
        "--style",
        action="append",
        default=None,
        metavar="STYLE",
        help="Placeholder style, repeatable: at, hash, percent, braces, dollar, dollar_braces (default: at)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _fail(message: str) -> None:
    error_console.print(f"[bold red]Error:[/bold red] {escape(message)}", highlight=False)
    sys.exit(1)


def _engine(styles: list[str] | None) -> PlaceholderEngine:
    if not styles:
        return PlaceholderEngine()
    return PlaceholderEngine(PlaceholderStyle.from_name(name) for name in styles)


def _report(result: GenerationResult, title: str, started: float) -> None:
    print_summary_table(result.summary(), title=title)
    if result.success:
        print_success(f"Done in {format_duration(time.monotonic() - started)}.")
    else:
        _fail(f"{len(result.failed)} file(s) could not be written.")


def _run_list(args: argparse.Namespace) -> None:
    names = list_templates(args.templates)
    console.print("Available templates:")
    for name in names:
        console.print(f"  {name}", markup=False)


def _run_replay(args: argparse.Namespace, engine: PlaceholderEngine) -> None:
    started = time.monotonic()
    if args.config:
        generator = ReplayGenerator.from_config(GeneratorConfig.load(args.config), engine)
    else:
        generator = ReplayGenerator(engine)

    print_header(f"Replaying '{args.generate}'")
    console.print(
        f"Generating project from template '{args.generate}' into directory "
        f"'{args.output}' using base '{args.templates}'",
        markup=False,
    )
    result = generator.generate(args.generate, args.templates, args.output)
    _report(result, "Replay summary", started)


def _run_config(args: argparse.Namespace, engine: PlaceholderEngine) -> None:
    started = time.monotonic()
    generator = create_project_generator(args.config, args.template_dir, engine)
    name = generator.config.project_name or Path(args.output).resolve().name

    print_header(f"Generating '{name}'")
    result = generator.generate(args.output)
    _report(result, "Generation summary", started)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``cppgen`` / ``python -m cppgen.cli``."""
    parser = build_parser()
    raw = sys.argv[1:] if argv is None else argv
    if not raw:
        parser.print_help()
        return

    args = parser.parse_args(raw)

    try:
        engine = _engine(args.style)
        if args.list:
            _run_list(args)
        elif args.generate:
            _run_replay(args, engine)
        elif args.config:
            _run_config(args, engine)
        else:
            _fail("No valid command specified. Use --help for options.")
    except (CppgenError, ValueError) as exc:
        _fail(str(exc))


if __name__ == "__main__":
    main()
