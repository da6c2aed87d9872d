"""
CLI Commands.

Organized by domain/feature area.
"""

from stickynotes.cli.commands.notes import app as notes_app
from stickynotes.cli.commands.system import app as system_app

__all__ = [
    "notes_app",
    "system_app",
]
