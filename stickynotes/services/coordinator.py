"""
Note Coordinator.

Owns the registry of live note sessions for one application run and turns
user actions (create, show all, hide all, delete all, exit) into store and
session calls.

Lifecycle:
    coordinator = NoteCoordinator.from_config()
    coordinator.start()       # adopt every stored note
    ...
    coordinator.shutdown()    # save every live note, clear the registry

or as a context manager:
    with NoteCoordinator.from_config() as coordinator:
        coordinator.create_note()

Save failures are logged and never raised; the in-memory notes survive them.

Autosave timers run on an asyncio loop. Pass one as `loop`, or drive
edits and pointer moves from inside a running loop; otherwise they raise
RuntimeError. Actions that save immediately (create, close, delete, resize)
need no loop.
"""

import asyncio
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from stickynotes.core.logging import get_logger
from stickynotes.models.note import Note
from stickynotes.services.autosave import DEFAULT_QUIET_PERIOD
from stickynotes.services.placement import PlacementPlanner
from stickynotes.services.session import NoteSession

if TYPE_CHECKING:
    from stickynotes.core.config_schema import GeometrySchema
    from stickynotes.repositories.note import NoteStore

logger = get_logger(__name__)


class NoteCoordinator:
    """Registry of live notes keyed by id."""

    def __init__(
        self,
        store: "NoteStore",
        planner: PlacementPlanner | None = None,
        *,
        geometry: "GeometrySchema | None" = None,
        quiet_period: float = DEFAULT_QUIET_PERIOD,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._store = store
        self._planner = planner or PlacementPlanner()
        self._geometry = geometry
        self._quiet_period = quiet_period
        self._loop = loop
        self._sessions: dict[str, NoteSession] = {}

    @classmethod
    def from_config(
        cls,
        store: "NoteStore | None" = None,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> "NoteCoordinator":
        """Build a coordinator (and, unless given, its store) from config/settings."""
        from stickynotes.core.config import get_app_config
        from stickynotes.repositories.note import NoteStore

        config = get_app_config()
        return cls(
            store or NoteStore.from_config(),
            PlacementPlanner.from_config(config.placement),
            geometry=config.geometry,
            quiet_period=config.storage.autosave.quiet_period_seconds,
            loop=loop,
        )

    def __enter__(self) -> "NoteCoordinator":
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------

    @property
    def store(self) -> "NoteStore":
        return self._store

    @property
    def sessions(self) -> Mapping[str, NoteSession]:
        """Read-only view of the live sessions."""
        return MappingProxyType(self._sessions)

    @property
    def note_count(self) -> int:
        return len(self._sessions)

    @property
    def visible_count(self) -> int:
        return sum(1 for session in self._sessions.values() if session.is_visible)

    def get(self, note_id: str) -> NoteSession | None:
        return self._sessions.get(note_id)

    def status_text(self) -> str:
        """Short summary of the live notes, e.g. for a tray tooltip."""
        count = self.note_count
        noun = "note" if count == 1 else "notes"
        return f"{count} {noun} ({self.visible_count} visible)"

    def _attach(self, note: Note) -> NoteSession:
        session = NoteSession(
            note,
            self._store,
            geometry=self._geometry,
            quiet_period=self._quiet_period,
            loop=self._loop,
        )
        self._sessions[note.id] = session
        return session

    # -------------------------------------------------------------------------
    # User actions
    # -------------------------------------------------------------------------

    def start(self) -> int:
        """Load stored notes into the registry. Returns the number adopted."""
        return self.load_saved_notes()

    def load_saved_notes(self) -> int:
        """Create a session for every stored note not already live."""
        adopted = 0
        for note_id, note in self._store.load_all().items():
            if note_id in self._sessions:
                continue
            self._attach(note)
            adopted += 1
        logger.info("Loaded saved notes", extra={"count": adopted})
        return adopted

    def create_note(self, content: str = "") -> NoteSession:
        """
        Create, place and persist a new note.

        Args:
            content: Initial text

        Returns:
            The live session for the new note
        """
        note = Note.create()
        note.content = content
        if self._geometry is not None:
            note.width = self._geometry.default_size.width
            note.height = self._geometry.default_size.height
        position = self._planner.next_position(
            session.controller.current_bounds.position
            for session in self._sessions.values()
        )
        note.x, note.y = position.x, position.y

        session = self._attach(note)
        if not session.save():
            logger.warning("New note was not persisted", extra={"note_id": note.id})
        logger.info("Created new note", extra={"note_id": note.id, "x": note.x, "y": note.y})
        return session

    def duplicate_note(self, note_id: str) -> NoteSession | None:
        """Copy a live note next to the original. None if the id is not live."""
        source = self._sessions.get(note_id)
        if source is None:
            logger.warning("Note not found for duplication", extra={"note_id": note_id})
            return None

        copy = source.snapshot().duplicate()
        session = self._attach(copy)
        session.save()
        logger.info("Duplicated note", extra={"note_id": note_id, "copy_id": copy.id})
        return session

    def show_all(self) -> int:
        """
        Show every live note, then adopt stored notes that are not live yet.

        Returns:
            Number of visible notes afterwards
        """
        for session in self._sessions.values():
            session.set_visible(True)
            session.save()

        for note_id, note in self._store.load_all().items():
            if note_id in self._sessions:
                continue
            note.is_visible = True
            session = self._attach(note)
            session.save()
            logger.debug("Adopted saved note", extra={"note_id": note_id})

        logger.info("All notes shown", extra={"count": self.note_count})
        return self.visible_count

    def hide_all(self) -> None:
        """Hide every live note and persist its visibility."""
        for session in self._sessions.values():
            session.set_visible(False)
            session.save()
        logger.info("All notes hidden", extra={"count": self.note_count})

    def close_note(self, note_id: str) -> bool:
        """
        Close a live note: hide it, save it and drop it from the registry.

        The note stays in the store.
        """
        session = self._sessions.pop(note_id, None)
        if session is None:
            return False
        session.close()
        logger.info("Note closed", extra={"note_id": note_id})
        return True

    def delete_note(self, note_id: str) -> bool:
        """Remove a note from the registry and from the store."""
        session = self._sessions.pop(note_id, None)
        if session is not None:
            session.discard()
        return self._store.delete(note_id)

    def delete_all(self) -> bool:
        """Delete every note, live or stored."""
        logger.info("Delete all notes requested")
        for session in self._sessions.values():
            session.discard()
        self._sessions.clear()
        cleared = self._store.clear_all()
        return cleared

    def shutdown(self) -> None:
        """Save every live note and clear the registry."""
        logger.info("Shutting down", extra={"count": self.note_count})
        for note_id, session in self._sessions.items():
            if not session.save():
                logger.error("Failed to save note during shutdown", extra={"note_id": note_id})
        self._sessions.clear()
