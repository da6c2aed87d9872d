"""
Note Session.

One live note: the Note entity, the GeometryController driving its bounds,
and the debouncer that batches its saves.

Persistence triggers:
    content edits, drag/resize moves  - restart the quiet period
    gesture end, resize_note, clamps  - save immediately
    close                             - save immediately (marked invisible)
"""

import asyncio
from typing import TYPE_CHECKING

from stickynotes.core.logging import get_logger
from stickynotes.models.note import Note
from stickynotes.services.autosave import DEFAULT_QUIET_PERIOD, Debouncer
from stickynotes.services.geometry import Bounds, GeometryController

if TYPE_CHECKING:
    from stickynotes.core.config_schema import GeometrySchema
    from stickynotes.repositories.note import NoteStore

logger = get_logger(__name__)


class NoteSession:
    """Binds a Note to its geometry controller and to the store."""

    def __init__(
        self,
        note: Note,
        store: "NoteStore",
        *,
        geometry: "GeometrySchema | None" = None,
        quiet_period: float = DEFAULT_QUIET_PERIOD,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._note = note
        self._store = store
        self._autosave = Debouncer(quiet_period, self.save, loop=loop)

        bounds = Bounds.from_note(note)
        if geometry is None:
            self.controller = GeometryController(
                bounds,
                on_commit=self._on_commit,
                on_moved=self._on_moved,
            )
        else:
            self.controller = GeometryController.from_config(
                bounds,
                geometry,
                on_commit=self._on_commit,
                on_moved=self._on_moved,
            )

    @property
    def note_id(self) -> str:
        return self._note.id

    @property
    def note(self) -> Note:
        return self._note

    @property
    def is_visible(self) -> bool:
        return self._note.is_visible

    @property
    def save_pending(self) -> bool:
        return self._autosave.pending

    def edit_content(self, content: str) -> None:
        """Replace the note text and restart the autosave quiet period."""
        self._note.content = content
        self._note.touch()
        self._autosave.trigger()

    def set_visible(self, visible: bool) -> None:
        self._note.is_visible = visible
        self._note.touch()

    def snapshot(self) -> Note:
        """Copy the controller's bounds into the note and return it."""
        bounds = self.controller.current_bounds
        self._note.x = bounds.x
        self._note.y = bounds.y
        self._note.width = bounds.width
        self._note.height = bounds.height
        return self._note

    def save(self) -> bool:
        """
        Persist the note now, superseding any pending autosave.

        Returns:
            The store's result; False leaves the in-memory note unchanged
        """
        self._autosave.cancel()
        note = self.snapshot()
        note.touch()
        saved = self._store.save(note)
        if saved:
            logger.debug("Note auto-saved", extra={"note_id": note.id})
        else:
            logger.warning("Failed to save note", extra={"note_id": note.id})
        return saved

    def close(self) -> bool:
        """Hide the note and persist it."""
        self._autosave.cancel()
        self.set_visible(False)
        return self.save()

    def discard(self) -> None:
        """Drop any pending autosave without saving, e.g. when the note is deleted."""
        self._autosave.cancel()

    def _on_commit(self, bounds: Bounds) -> None:
        self.save()

    def _on_moved(self, bounds: Bounds) -> None:
        self._autosave.trigger()
