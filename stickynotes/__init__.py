"""
Sticky Notes Engine.

- core/: Configuration, logging, exceptions, shared utilities
- models/: The persisted Note entity
- repositories/: File-backed note storage
- services/: Geometry state machine, placement, autosave, live-note registry
- cli/: Management CLI commands (Typer + Rich)
"""

__version__ = "1.0.0"
