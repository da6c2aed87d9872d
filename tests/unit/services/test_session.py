"""
Unit Tests for NoteSession.

Checks which interactions save immediately and which go through the
autosave quiet period.
"""

import asyncio

import pytest

from stickynotes.models.note import Note
from stickynotes.services.geometry import Point
from stickynotes.services.session import NoteSession

QUIET = 0.02


@pytest.fixture
def note() -> Note:
    return Note.create("note-1")


class TestImmediateSaves:
    """Saves that bypass the quiet period."""

    def test_save_copies_bounds_into_note(self, note, mock_store):
        session = NoteSession(note, mock_store)
        session.controller.resize_note(300, 250)

        saved = mock_store.save.call_args.args[0]
        assert (saved.width, saved.height) == (300, 250)
        assert session.note.width == 300

    def test_save_returns_store_result(self, note, mock_store):
        mock_store.save.return_value = False
        assert NoteSession(note, mock_store).save() is False

    @pytest.mark.asyncio
    async def test_gesture_end_saves(self, note, mock_store):
        session = NoteSession(note, mock_store)
        session.controller.on_pointer_down(Point(150, 110))
        session.controller.on_pointer_up(Point(160, 120))

        mock_store.save.assert_called_once()
        assert (session.note.x, session.note.y) == (110, 110)

    def test_close_hides_and_saves(self, note, mock_store):
        session = NoteSession(note, mock_store)
        assert session.close() is True

        saved = mock_store.save.call_args.args[0]
        assert saved.is_visible is False
        assert not session.is_visible

    def test_set_visible_does_not_save(self, note, mock_store):
        session = NoteSession(note, mock_store)
        session.set_visible(False)
        mock_store.save.assert_not_called()
        assert not session.is_visible

    def test_uses_configured_geometry(self, note, mock_store):
        from stickynotes.core.config import get_app_config

        session = NoteSession(note, mock_store, geometry=get_app_config().geometry)
        assert session.controller.get_size_constraints() == (50, 50, 9999, 9999)


class TestDebouncedSaves:
    """Saves that wait for the quiet period."""

    @pytest.mark.asyncio
    async def test_edits_are_batched(self, note, mock_store):
        session = NoteSession(note, mock_store, quiet_period=QUIET)

        session.edit_content("h")
        session.edit_content("he")
        session.edit_content("hello")
        assert session.save_pending
        mock_store.save.assert_not_called()

        await asyncio.sleep(QUIET * 5)
        mock_store.save.assert_called_once()
        assert mock_store.save.call_args.args[0].content == "hello"
        assert not session.save_pending

    @pytest.mark.asyncio
    async def test_drag_moves_schedule_and_release_saves_once(self, note, mock_store):
        session = NoteSession(note, mock_store, quiet_period=QUIET)

        session.controller.on_pointer_down(Point(150, 110))
        session.controller.on_pointer_move(Point(200, 150))
        assert session.save_pending

        session.controller.on_pointer_up()
        assert not session.save_pending

        await asyncio.sleep(QUIET * 5)
        mock_store.save.assert_called_once()

    @pytest.mark.asyncio
    async def test_explicit_save_supersedes_pending(self, note, mock_store):
        session = NoteSession(note, mock_store, quiet_period=QUIET)

        session.edit_content("draft")
        session.save()

        await asyncio.sleep(QUIET * 5)
        mock_store.save.assert_called_once()

    @pytest.mark.asyncio
    async def test_discard_drops_pending_save(self, note, mock_store):
        session = NoteSession(note, mock_store, quiet_period=QUIET)

        session.edit_content("never saved")
        session.discard()

        await asyncio.sleep(QUIET * 5)
        mock_store.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_close_cancels_pending_and_saves_once(self, note, mock_store):
        session = NoteSession(note, mock_store, quiet_period=QUIET)

        session.edit_content("closing")
        session.close()

        await asyncio.sleep(QUIET * 5)
        mock_store.save.assert_called_once()
        assert mock_store.save.call_args.args[0].content == "closing"
