"""Scheduler - defers every step invocation to a later event-loop turn.

WHY
───
Steps chain by calling their callback, and the callback starts the next
step.  Calling the next step directly would grow the Python stack by one
frame per step and let a step that raises unwind straight into whoever
called it.  Posting every invocation on the asyncio loop keeps the stack
flat, turns a synchronous raise into a loop-level error, and makes
state changes between steps observably sequential.

ARCHITECTURE
────────────
::

    schedule(step, *args)             ─ module-level entry point
      └── Scheduler.schedule()        ─ the configured default
            ├── delay == 0  → loop.call_soon(step, *args)
            └── delay  > 0  → loop.call_later(delay, step, *args)

    configure_scheduler(loop, delay)  ─ replace the default
    get_scheduler()                   ─ current default

Ordering is FIFO for equal delays, which is asyncio's own guarantee for
``call_soon``.  There is no cancellation: once scheduled, a step runs.

Related modules:
    context.py                   - the shared state steps receive
    orchestration/flows.py       - series / parallel built on schedule()
    orchestration/iterators.py   - each / n / times built on schedule()

Example::

    async def main():
        schedule(print, "runs on the next tick")
        await asyncio.sleep(0)
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

from flw.core.errors import SchedulerError
from flw.core.settings import get_settings


class Scheduler:
    """Posts callables onto an asyncio event loop.

    Parameters
    ----------
    loop : asyncio.AbstractEventLoop | None
        Loop to post on.  ``None`` resolves the running loop at each call.
    delay : float | None
        Seconds to defer.  ``None`` reads ``FLW_SCHEDULE_DELAY``.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        delay: float | None = None,
    ) -> None:
        if delay is not None and delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        self._loop = loop
        self._delay = delay

    @property
    def delay(self) -> float:
        if self._delay is None:
            return get_settings().schedule_delay
        return self._delay

    def _resolve_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            if self._loop.is_closed():
                raise SchedulerError("pinned event loop is closed")
            return self._loop
        try:
            return asyncio.get_running_loop()
        except RuntimeError as e:
            raise SchedulerError(
                "no running event loop; start flows from inside a coroutine "
                "or pin a loop with configure_scheduler(loop=...)",
                cause=e,
            ) from e

    def schedule(self, step: Callable[..., Any], *args: Any) -> asyncio.Handle:
        """Invoke ``step(*args)`` on a later loop turn, never synchronously.

        A pinned loop that is not running in the calling thread is posted
        to through ``call_soon_threadsafe``.
        """
        loop = self._resolve_loop()
        delay = self.delay
        if not _is_current_loop(loop):
            if delay > 0:
                return loop.call_soon_threadsafe(loop.call_later, delay, step, *args)
            return loop.call_soon_threadsafe(step, *args)
        if delay > 0:
            return loop.call_later(delay, step, *args)
        return loop.call_soon(step, *args)


def _is_current_loop(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False


_default_scheduler = Scheduler()


def get_scheduler() -> Scheduler:
    """Return the scheduler used by every flow."""
    return _default_scheduler


def configure_scheduler(
    loop: asyncio.AbstractEventLoop | None = None,
    delay: float | None = None,
) -> Scheduler:
    """Replace the default scheduler and return the new one.

    Calling with no arguments restores the default behaviour (running
    loop, delay from settings).
    """
    global _default_scheduler
    _default_scheduler = Scheduler(loop=loop, delay=delay)
    return _default_scheduler


def schedule(step: Callable[..., Any], *args: Any) -> asyncio.Handle:
    """Invoke ``step(*args)`` on the next tick of the default scheduler."""
    return _default_scheduler.schedule(step, *args)


__all__ = ["Scheduler", "schedule", "get_scheduler", "configure_scheduler"]
