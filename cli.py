#!/usr/bin/env python3
"""
Sticky Notes CLI.

Works directly on the notes file under the configured data directory, so
it can be used while no desktop session is running. Commands that move or
resize notes go through the same geometry and placement services the
desktop layer uses.

Usage:
    python cli.py --help

    python cli.py notes list [--visible-only]
    python cli.py notes count
    python cli.py notes show ID
    python cli.py notes new -c "text"
    python cli.py notes delete ID
    python cli.py notes clear --yes
    python cli.py notes backup [PATH]
    python cli.py notes resize ID WIDTH HEIGHT

    python cli.py system info
    python cli.py system config [SECTION]
    python cli.py system version

Global flags:
    -v / --verbose   INFO logs on stderr
    -d / --debug     DEBUG logs on stderr
"""

import sys
from pathlib import Path

import typer
from rich.console import Console

# Make the stickynotes package importable when run as a script
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from stickynotes.cli.commands import notes_app, system_app

app = typer.Typer(
    name="stickynotes",
    help="Sticky Notes CLI - inspect and maintain the note store.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
app.add_typer(notes_app, name="notes")
app.add_typer(system_app, name="system")

console = Console()


def _require_project_root() -> None:
    from stickynotes.core.config import find_project_root

    try:
        find_project_root()
    except RuntimeError:
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)


def _log_level(verbose: bool, debug: bool) -> str:
    if debug:
        return "DEBUG"
    return "INFO" if verbose else "WARNING"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log INFO and above to stderr"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Log DEBUG and above to stderr"),
) -> None:
    """Inspect, create, resize, back up and delete stored notes."""
    _require_project_root()

    from stickynotes.core.logging import setup_logging

    setup_logging(level=_log_level(verbose, debug), format_type="console")
    if debug:
        console.print("[dim]Debug mode enabled[/dim]")


if __name__ == "__main__":
    app()
