"""Composition helpers - adapt plain callback functions and pre-bind flows.

``wrap(fn, args?, key?)``
    Turns ``fn(*args, callback)`` into a step ``(ctx, callback)``,
    optionally storing its result under ``ctx[key]``.

``make.series(steps)`` / ``make.parallel(steps)``
    Capture a step list now and return ``flow(ctx?, done)`` to run later.
    A made flow has the step signature, so flows nest::

        nightly = make.series([
            wrap(fetch_rates, ["EUR"], "rates"),
            make.parallel([publish_web, publish_mail]),
        ])
        nightly({"day": "2026-10-17"}, on_done)
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from types import SimpleNamespace
from typing import Any

from flw.core.errors import CallbackError
from flw.execution.context import Context, enrich
from flw.orchestration.flows import Done, Step, parallel, series


def wrap(
    fn: Callable[..., Any],
    args: Sequence[Any] | str | None = None,
    key: str | None = None,
) -> Step:
    """Adapt ``fn(*args, callback)`` into a flow step.

    ``wrap(fn, "key")`` is shorthand for ``wrap(fn, [], "key")``.  The
    step calls ``fn`` with a fresh copy of ``args`` plus its own callback;
    on success the result is stored under ``key`` (if given) and the
    flow continues, on error the error is forwarded.
    """
    if key is None and isinstance(args, str):
        key, args = args, None
    bound_args = list(args or [])

    def wrapper(context: Context, callback: Callable[..., Any]) -> Any:
        def on_wrapped_done(error: Any = None, result: Any = None) -> Any:
            if error:
                return callback(error)
            if key:
                context[key] = result
            return callback(None)

        return fn(*list(bound_args), on_wrapped_done)

    wrapper.__name__ = f"wrap({getattr(fn, '__name__', repr(fn))})"
    return wrapper


def _make(executor: Callable[..., None]) -> Callable[[Sequence[Step]], Callable[..., None]]:
    name = executor.__name__

    def made(steps: Sequence[Step]) -> Callable[..., None]:
        def flow(context: Mapping[str, Any] | Done | None = None, done: Done | None = None) -> None:
            if done is None and callable(context):
                done, context = context, None
            ctx = enrich(context)
            if not callable(done):
                raise CallbackError(f"make.{name}", received=done)
            return executor(steps, ctx, done)

        flow.__name__ = f"make.{name}"
        return flow

    made.__name__ = name
    return made


make = SimpleNamespace(
    series=_make(series),
    parallel=_make(parallel),
)


__all__ = ["wrap", "make"]
