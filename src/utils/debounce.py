# ========================
# src/utils/debounce.py
# ========================

"""
Debounce Primitive

Coalesces bursts of calls on the running asyncio loop so that only the last
call in a quiet window is delivered.
"""

import asyncio
import logging
from typing import Any, Callable, Optional, Tuple

logger = logging.getLogger(__name__)

class Debouncer:
    """
    Delays a callback until no new trigger has arrived for `delay` seconds.
    A newer trigger replaces the pending arguments; nothing needs cleaning up
    when a pending call is dropped.
    """

    def __init__(self, delay: float, callback: Callable[..., Any]):
        """
        Args:
            delay (float): Quiet window in seconds
            callback (callable): Called with the arguments of the last trigger
        """
        self.delay = delay
        self.callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._pending_args: Optional[Tuple[Any, ...]] = None

    def trigger(self, *args: Any) -> None:
        """Schedule the callback, superseding any pending call. Must run on a loop."""
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
            logger.debug("Superseded pending debounced call")
        self._pending_args = args
        self._handle = loop.call_later(self.delay, self._fire)

    def flush(self) -> bool:
        """
        Deliver the pending call immediately.

        Returns:
            bool: True if a pending call was delivered
        """
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending_args = None

    def _fire(self) -> None:
        args = self._pending_args or ()
        self._handle = None
        self._pending_args = None
        self.callback(*args)
