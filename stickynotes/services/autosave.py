"""
Autosave Debouncer.

Collapses bursts of edits into one save: every trigger() restarts a quiet
period on the event loop, and the callback runs only once the period
elapses without another trigger.

Must be used from the event loop thread.

Usage:
    debouncer = Debouncer(2.0, session.save)
    debouncer.trigger()      # on every keystroke or move
    debouncer.flush()        # on close: run a pending save now
"""

import asyncio
from collections.abc import Callable
from typing import Any

from stickynotes.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_QUIET_PERIOD = 2.0


class Debouncer:
    """Quiet-period timer bound to an asyncio event loop."""

    def __init__(
        self,
        delay: float,
        callback: Callable[[], Any],
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """
        Args:
            delay: Quiet period in seconds
            callback: Called with no arguments when the period elapses
            loop: Loop to schedule on; the running loop if omitted
        """
        self.delay = delay
        self._callback = callback
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self) -> None:
        """
        Start or restart the quiet period.

        Raises:
            RuntimeError: If no loop was given and none is running
        """
        loop = self._loop or asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        """Drop the pending callback, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> bool:
        """
        Run a pending callback immediately.

        Returns:
            True if a callback was pending and has run
        """
        if self._handle is None:
            return False
        self.cancel()
        self._callback()
        return True

    def _fire(self) -> None:
        self._handle = None
        logger.debug("Quiet period elapsed", extra={"delay": self.delay})
        self._callback()
