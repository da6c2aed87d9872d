"""
Core Utilities.

Shared utility functions used across the package.
All modules should import utilities from this module.
"""

import uuid
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_timestamp() -> str:
    """
    Return the current UTC time as an ISO 8601 string.

    The format is fixed-width (microseconds, explicit +00:00 offset) so that
    timestamps written by this package sort lexically in time order.

    Returns:
        Timestamp such as "2024-05-01T09:30:00.000000+00:00"
    """
    return utc_now().isoformat(timespec="microseconds")


def new_note_id() -> str:
    """Generate a new opaque note identifier."""
    return str(uuid.uuid4())
