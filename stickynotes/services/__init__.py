"""Note services: geometry, placement, autosave and the live-note registry."""
