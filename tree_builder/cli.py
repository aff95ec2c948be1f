"""
Command line interface for tree_builder.

    treebuild [CONFIG|-] [-p PREFIX] [-o OUTDIR] [-l LANGUAGE]
              [--settings FILE] [--dry-run] [--dump] [--list-languages] [-v]
"""

import argparse
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__, build_registry
from .codegen import (
    CodeGenerationDriver,
    GenerationResult,
    get_backend,
    list_all_language_info,
    load_config,
)
from .codegen.core.config import get_config_manager
from .dump import print_registry
from .errors import TreeBuildError
from .logging_config import get_logger, setup_logging, verbosity_to_level
from .utils import STDIN_SOURCE, read_config

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNEXPECTED = 2

DEFAULT_LANGUAGE = "perl"

# Initialize rich console
console = Console()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``treebuild`` command."""
    parser = argparse.ArgumentParser(
        prog="treebuild",
        description="Generate tree classes, an API and a visitor from a class configuration.",
    )

    parser.add_argument(
        "config",
        nargs="?",
        default=STDIN_SOURCE,
        metavar="CONFIG",
        help="Class configuration file ('-' or omitted reads stdin)",
    )

    parser.add_argument(
        "-p",
        "--prefix",
        metavar="PREFIX",
        help="Namespace prefix for every generated class (e.g. 'My::Ast')",
    )

    parser.add_argument(
        "-o",
        "--output-dir",
        metavar="OUTDIR",
        help="Root directory for generated files (default: current directory)",
    )

    parser.add_argument(
        "-l",
        "--language",
        metavar="LANGUAGE",
        default=DEFAULT_LANGUAGE,
        help=f"Target language (default: {DEFAULT_LANGUAGE}; see --list-languages)",
    )

    parser.add_argument(
        "--settings",
        metavar="FILE",
        help="JSON file with generation settings",
    )

    parser.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't write the generated-file banner",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render everything but only list the files that would be written",
    )

    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the resolved class hierarchy and exit",
    )

    parser.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported target languages and exit",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v info, -vv debug)",
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    return parser


def run(argv: Optional[List[str]] = None) -> int:
    """
    Run the command line front end.

    Args:
        argv: Arguments without the program name (defaults to sys.argv)

    Returns:
        Exit code: 0 on success, 1 on a tree_builder error, 2 otherwise
    """
    args = create_parser().parse_args(argv)
    setup_logging(verbosity_to_level(args.verbose))

    try:
        if args.list_languages:
            return _list_languages()
        return _build(args)

    except TreeBuildError as e:
        logger.error("%s", e)
        console.print(f"[red]✗ Error:[/red] {escape(str(e))}")
        return EXIT_ERROR
    except Exception as e:
        logger.debug("unexpected failure", exc_info=True)
        console.print(f"[red]✗ Unexpected error:[/red] {escape(str(e))}")
        return EXIT_UNEXPECTED


def _build(args: argparse.Namespace) -> int:
    source, text = read_config(args.config)
    registry = build_registry(text)

    if args.dump:
        print_registry(registry, title=source, console=console)
        return EXIT_OK

    overrides = {}
    if args.prefix is not None:
        overrides["prefix"] = args.prefix
    if args.output_dir is not None:
        overrides["output_dir"] = args.output_dir
    if args.no_comments:
        overrides["add_comments"] = False

    config = load_config(args.language, custom_config=overrides, config_file=args.settings)
    for warning in get_config_manager().validate_config(config):
        console.print(f"[yellow]⚠️  {escape(warning)}[/yellow]")

    backend = get_backend(args.language, config)
    driver = CodeGenerationDriver(backend, config)

    if args.dry_run:
        return _show_dry_run(driver.render(registry), config.output_dir)

    result = driver.generate(registry)
    _show_result(result)
    return EXIT_OK


def _show_dry_run(rendered: dict, output_dir: str) -> int:
    table = Table(
        title=f"Would write to {escape(output_dir)}",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Path", style="cyan", no_wrap=True)
    table.add_column("Lines", style="green", justify="right")

    for path, text in rendered.items():
        table.add_row(escape(path), str(text.count("\n")))

    console.print(table)
    return EXIT_OK


def _show_result(result: GenerationResult):
    unchanged = len(result.artifacts) - result.written_count
    summary = (
        f"[green]✓[/green] Generated {len(result.artifacts)} "
        f"{result.metadata['language']} files in "
        f"[cyan]{escape(str(result.metadata['output_dir']))}[/cyan]"
    )
    if unchanged:
        summary += f" [dim]({unchanged} unchanged)[/dim]"
    console.print(summary)

    for artifact in result.artifacts:
        marker = "[green]+[/green]" if artifact.written else "[dim]=[/dim]"
        console.print(f"  {marker} {escape(str(artifact.path))}", highlight=False)


def _list_languages() -> int:
    """List supported languages with details."""
    language_info = list_all_language_info()

    if not language_info:
        console.print("[yellow]⚠️ No backends available[/yellow]")
        return EXIT_OK

    table = Table(
        title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan"
    )

    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Backend Class", style="dim")
    table.add_column("Aliases", style="blue")

    for lang_name, info in sorted(language_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(lang_name, info["file_extension"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()

    console.print(
        Panel(
            "[bold]Usage:[/bold] treebuild [dim]classes.cfg[/dim] -l [cyan]LANGUAGE[/cyan] -o [dim]OUTDIR[/dim]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )

    return EXIT_OK
