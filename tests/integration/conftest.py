"""
Integration Test Fixtures.

Fixtures for integration tests - real files, real threads, no mocks.
These fixtures build on the root conftest.py storage fixtures.
"""

from pathlib import Path

import pytest

from stickynotes.repositories.note import NoteStore


@pytest.fixture
def store_pair(data_dir: Path) -> tuple[NoteStore, NoteStore]:
    """
    Two independent NoteStore instances on the same backing file.

    Usage:
        def test_shared_file(store_pair):
            first, second = store_pair
            first.save(note)
            assert second.exists(note.id)
    """
    return NoteStore(data_dir), NoteStore(data_dir)
