"""Management CLI (Typer + Rich)."""
