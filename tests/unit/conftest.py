"""
Unit Test Fixtures.

Fixtures for unit tests - collaborators are mocked or recorded.
Unit tests should be fast and isolated.
"""

from unittest.mock import MagicMock

import pytest

from stickynotes.services.geometry import Bounds


# =============================================================================
# Callback Recorders
# =============================================================================


@pytest.fixture
def commits() -> list[Bounds]:
    """List that a GeometryController on_commit callback appends to."""
    return []


@pytest.fixture
def moves() -> list[Bounds]:
    """List that a GeometryController on_moved callback appends to."""
    return []


# =============================================================================
# Store Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_store() -> MagicMock:
    """
    Mock NoteStore whose saves always succeed.

    Usage:
        def test_session(mock_store):
            session = NoteSession(note, mock_store)
            session.save()
            mock_store.save.assert_called_once()
    """
    store = MagicMock()
    store.save = MagicMock(return_value=True)
    store.delete = MagicMock(return_value=True)
    store.clear_all = MagicMock(return_value=True)
    store.load_all = MagicMock(return_value={})
    return store
