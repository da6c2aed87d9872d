"""
Note Commands.

Inspect and maintain the note store from the command line.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from stickynotes.core.exceptions import NotFoundError, StorageInitError
from stickynotes.core.logging import get_logger, log_with_source
from stickynotes.models.note import Note
from stickynotes.repositories.note import NoteStore

app = typer.Typer(help="Note store commands")
console = Console()
logger = get_logger(__name__)

PREVIEW_LENGTH = 40


def _get_store() -> NoteStore:
    """Open the configured store, exiting with a message if it cannot be created."""
    try:
        return NoteStore.from_config()
    except StorageInitError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)


def _get_note(store: NoteStore, note_id: str) -> Note:
    """
    Fetch one stored note.

    Raises:
        NotFoundError: If no valid note has this id
    """
    note = store.load_all().get(note_id)
    if note is None:
        raise NotFoundError(f"Note not found: {note_id}")
    return note


def _preview(content: str) -> str:
    first_line = content.strip().splitlines()[0] if content.strip() else ""
    if len(first_line) > PREVIEW_LENGTH:
        return first_line[: PREVIEW_LENGTH - 1] + "…"
    return first_line


@app.command("list")
def list_notes(
    hidden: bool = typer.Option(True, "--hidden/--visible-only", help="Include hidden notes"),
) -> None:
    """
    List stored notes.

    Shows id, position, size, visibility and the first line of text.
    """
    notes = _get_store().load_all()
    if not hidden:
        notes = {note_id: note for note_id, note in notes.items() if note.is_visible}

    if not notes:
        console.print("[dim]No notes stored.[/dim]")
        return

    table = Table(title="Notes", show_header=True)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Position")
    table.add_column("Size")
    table.add_column("Visible")
    table.add_column("Updated", style="dim")
    table.add_column("Content")

    for note_id, note in sorted(notes.items(), key=lambda item: item[1].created_at):
        table.add_row(
            note_id,
            f"{note.x},{note.y}",
            f"{note.width}x{note.height}",
            "yes" if note.is_visible else "no",
            note.updated_at[:19].replace("T", " "),
            _preview(note.content),
        )

    console.print(table)


@app.command()
def count() -> None:
    """Print the number of stored notes."""
    console.print(str(_get_store().count()))


@app.command()
def show(note_id: str = typer.Argument(..., help="Note id")) -> None:
    """Display one note in full."""
    try:
        note = _get_note(_get_store(), note_id)
    except NotFoundError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    console.print(Panel(
        f"{note.content or '[dim](empty)[/dim]'}\n\n"
        f"[dim]Position: {note.x},{note.y}  Size: {note.width}x{note.height}  "
        f"Visible: {'yes' if note.is_visible else 'no'}\n"
        f"Created: {note.created_at}\nUpdated: {note.updated_at}[/dim]",
        title=note.id,
    ))


@app.command()
def new(
    content: str = typer.Option("", "--content", "-c", help="Initial note text"),
) -> None:
    """
    Create a note.

    The note is placed clear of the existing ones, as a new note on screen
    would be.
    """
    from stickynotes.services.coordinator import NoteCoordinator

    coordinator = NoteCoordinator.from_config(_get_store())
    coordinator.start()
    session = coordinator.create_note(content)

    if not coordinator.store.exists(session.note_id):
        console.print("[red]Failed to save the new note.[/red]")
        raise typer.Exit(1)

    note = session.note
    console.print(f"[green]Created[/green] {note.id} at {note.x},{note.y}")


@app.command()
def delete(note_id: str = typer.Argument(..., help="Note id")) -> None:
    """Delete one note."""
    if not _get_store().delete(note_id):
        console.print(f"[red]Note not found: {note_id}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Deleted[/green] {note_id}")


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Delete every note by removing the backing file."""
    store = _get_store()
    if not yes:
        typer.confirm(f"Delete all {store.count()} notes?", abort=True)

    if not store.clear_all():
        console.print("[red]Failed to clear notes.[/red]")
        raise typer.Exit(1)
    log_with_source(logger, "cli", "info", "Notes cleared", path=str(store.path))
    console.print("[green]All notes deleted.[/green]")


@app.command()
def backup(
    path: Optional[Path] = typer.Argument(None, help="Backup file (default: timestamped file in backup_dir)"),
) -> None:
    """Copy the backing file verbatim."""
    store = _get_store()

    if path is None:
        from stickynotes.core.config import get_backup_dir
        from stickynotes.core.utils import utc_now

        backup_dir = get_backup_dir()
        backup_dir.mkdir(parents=True, exist_ok=True)
        path = backup_dir / f"notes-{utc_now():%Y%m%dT%H%M%S}.json"

    if not store.backup(path):
        console.print("[red]Backup failed: no notes file yet, or destination not writable.[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Backup written to[/green] {path}")


@app.command()
def resize(
    note_id: str = typer.Argument(..., help="Note id"),
    width: int = typer.Argument(..., help="New width"),
    height: int = typer.Argument(..., help="New height"),
) -> None:
    """
    Resize a note within the configured size constraints.
    """
    from stickynotes.core.config import get_app_config
    from stickynotes.services.geometry import Bounds, GeometryController

    store = _get_store()
    try:
        note = _get_note(store, note_id)
    except NotFoundError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    results: list[bool] = []

    def persist(bounds: Bounds) -> None:
        note.width, note.height = bounds.width, bounds.height
        note.touch()
        results.append(store.save(note))

    controller = GeometryController.from_config(
        Bounds.from_note(note),
        get_app_config().geometry,
        on_commit=persist,
    )
    bounds = controller.resize_note(width, height)

    if not all(results):
        console.print(
            f"[red]Note rejected at {bounds.width}x{bounds.height}[/red] "
            "(notes must be at least 100x100)."
        )
        raise typer.Exit(1)
    console.print(f"[green]Resized[/green] {note_id} to {bounds.width}x{bounds.height}")
