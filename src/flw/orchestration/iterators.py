"""Bounded Iterators - apply one step to many items or indices.

::

    each(items, concurrency?, step, done)   step(item, cb)   windowed, completion order
    n(count, step, done)                    step(index, cb)  sequential, 0..count-1
    times(count, step, done)                step(cb)         sequential, no argument

All three collect results into a list and hand it to ``done(None, results)``.
The first error wins: ``done(error, None)`` is called once and nothing
further is dispatched.

.. note::
   ``each`` appends results in the order items *finish*, not the order
   they were given.  With ``concurrency=1`` the two coincide; with more,
   a step that needs positional results must tag them itself, e.g.
   ``cb(None, (item, value))``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from flw.core.errors import CallbackError
from flw.core.logging import get_logger
from flw.core.settings import get_settings
from flw.execution.scheduler import schedule

logger = get_logger(__name__)

Done = Callable[[Any, Any], Any]


def each(
    items: Iterable[Any],
    concurrency: int | Callable[..., Any] | None,
    step: Callable[..., Any] | Done | None = None,
    done: Done | None = None,
) -> None:
    """Call ``step(item, callback)`` for every item, ``concurrency`` at a time.

    ``each(items, step, done)`` uses the default concurrency
    (``FLW_DEFAULT_CONCURRENCY``, 3).  A concurrency below 1 is raised to 1.
    An empty ``items`` completes immediately with ``(None, [])``.
    """
    if done is None and callable(concurrency):
        concurrency, step, done = None, concurrency, step
    if not callable(done):
        raise CallbackError("each", received=done)
    if concurrency is None:
        concurrency = get_settings().default_concurrency
    if concurrency <= 0:
        concurrency = 1

    items = list(items)
    total = len(items)
    results: list[Any] = []
    dispatched = 0
    in_flight = 0
    finished = 0
    failed = False

    def next_items() -> None:
        nonlocal dispatched, in_flight
        if finished >= total:
            done(None, results)
            return

        while dispatched < total and in_flight < concurrency:
            item = items[dispatched]
            dispatched += 1
            in_flight += 1
            schedule(step, item, on_item_done)

    def on_item_done(error: Any = None, result: Any = None) -> None:
        nonlocal in_flight, finished, failed
        if failed:
            return
        if error:
            failed = True
            logger.debug("flow.each.error", finished=finished, in_flight=in_flight - 1, error=repr(error))
            done(error, None)
            return

        results.append(result)
        in_flight -= 1
        finished += 1
        next_items()

    next_items()


def n(count: int, step: Callable[..., Any], done: Done) -> None:
    """Call ``step(index, callback)`` for ``index`` in ``0..count-1``, one at a time."""
    if not callable(done):
        raise CallbackError("n", received=done)
    _repeat("n", count, step, done, with_index=True)


def times(count: int, step: Callable[..., Any], done: Done) -> None:
    """Call ``step(callback)`` ``count`` times, one at a time."""
    if not callable(done):
        raise CallbackError("times", received=done)
    _repeat("times", count, step, done, with_index=False)


def _repeat(flow: str, count: int, step: Callable[..., Any], done: Done, *, with_index: bool) -> None:
    results: list[Any] = []

    def next_call() -> None:
        if len(results) >= count:
            done(None, results)
            return
        if with_index:
            schedule(step, len(results), on_call_done)
        else:
            schedule(step, on_call_done)

    def on_call_done(error: Any = None, result: Any = None) -> None:
        if error:
            logger.debug(f"flow.{flow}.error", index=len(results), error=repr(error))
            done(error, None)
            return
        results.append(result)
        next_call()

    next_call()


__all__ = ["each", "n", "times"]
