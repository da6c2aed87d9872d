"""Persistence layer."""

from stickynotes.repositories.note import NoteStore

__all__ = ["NoteStore"]
