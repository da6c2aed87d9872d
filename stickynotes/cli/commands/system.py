"""
System Commands.

Commands for application information and configuration.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.tree import Tree

app = typer.Typer(help="System information commands")
console = Console()


@app.command()
def info() -> None:
    """
    Display application information.

    Shows app name, version and where notes are stored.
    """
    try:
        from stickynotes.core.config import get_app_config, get_data_dir

        app_config = get_app_config()
        application = app_config.application
        data_file = get_data_dir() / app_config.storage.file_name

        console.print(Panel(
            f"[bold]{application.name}[/bold]\n"
            f"Version: {application.version}\n"
            f"Description: {application.description}\n"
            f"Notes file: {data_file}",
            title="Application Info",
        ))

    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def config(
    section: Optional[str] = typer.Argument(None, help="Config section to show (application, storage, geometry, placement, logging)"),
) -> None:
    """
    Display configuration settings.

    Shows all configuration or a specific section.
    """
    try:
        from stickynotes.core.config import get_app_config

        app_config = get_app_config()
    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        raise typer.Exit(1)

    sections = app_config.sections()

    if section:
        if section not in sections:
            console.print(f"[red]Unknown section: {section}[/red]")
            console.print(f"Available sections: {', '.join(sections)}")
            raise typer.Exit(1)
        console.print(_config_tree(section, sections[section].model_dump()))
        return

    for name, schema in sections.items():
        console.print(_config_tree(name, schema.model_dump()))
        console.print()


def _config_tree(name: str, values: dict) -> Tree:
    """Render a validated config section; nested mappings become branches."""
    tree = Tree(f"[bold cyan]{name}[/bold cyan]")
    pending = [(tree, values)]
    while pending:
        node, mapping = pending.pop()
        for key, value in mapping.items():
            if isinstance(value, dict):
                pending.append((node.add(f"[cyan]{key}[/cyan]"), value))
            elif isinstance(value, list):
                node.add(f"[cyan]{key}[/cyan]: {', '.join(map(str, value)) or '[dim]none[/dim]'}")
            else:
                node.add(f"[cyan]{key}[/cyan]: {value}")
    return tree


@app.command()
def version() -> None:
    """Print the application version."""
    from stickynotes import __version__

    console.print(f"[bold]{__version__}[/bold]")
