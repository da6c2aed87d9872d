"""Domain models."""

from stickynotes.models.note import Note

__all__ = ["Note"]
