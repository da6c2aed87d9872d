"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Every test that touches storage gets its own temporary data directory, so
tests never read or write the project's data/ folder.
"""

from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from stickynotes.core.config import get_app_config, get_settings
from stickynotes.models.note import Note
from stickynotes.repositories.note import NoteStore


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _clear_config_cache() -> Generator[None, None, None]:
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Temporary data directory for one test."""
    return tmp_path / "data"


@pytest.fixture
def store(data_dir: Path) -> NoteStore:
    """
    Provide a NoteStore backed by a temporary directory.

    Usage:
        def test_save(store: NoteStore):
            assert store.save(Note.create())
    """
    return NoteStore(data_dir)


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """
    Factory for valid notes.

    Usage:
        def test_something(make_note):
            note = make_note(content="hello", x=250)
    """
    def _make(note_id: str | None = None, **fields) -> Note:
        note = Note.create(note_id)
        for name, value in fields.items():
            setattr(note, name, value)
        return note

    return _make
