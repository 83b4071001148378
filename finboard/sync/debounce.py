"""
Single-slot debounce timer.

schedule() always cancels whatever is pending, so at most one delayed
callback per slot is ever outstanding. Callbacks may be plain functions
or coroutine functions; coroutines run as tasks on the current loop.
"""

import asyncio
import inspect
from typing import Any, Callable, Optional


_NOTHING = object()


class DebounceSlot:
    """One debounced input."""

    def __init__(self, delay: float, callback: Callable[[Any], Any]):
        """
        Args:
            delay: Default delay in seconds
            callback: Called with the last scheduled value
        """
        self._delay = delay
        self._callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._pending_value: Any = _NOTHING
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, value: Any, delay: Optional[float] = None) -> None:
        """Arm the slot with `value`, replacing any pending schedule."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._pending_value = value
        self._handle = loop.call_later(
            self._delay if delay is None else delay,
            self._fire,
        )

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending_value = _NOTHING

    def flush(self) -> None:
        """Fire the pending callback now, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._fire()

    def _fire(self) -> None:
        value = self._pending_value
        self._handle = None
        self._pending_value = _NOTHING
        if value is _NOTHING:
            return

        result = self._callback(value)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def join(self) -> None:
        """Wait for callbacks that have already fired to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
