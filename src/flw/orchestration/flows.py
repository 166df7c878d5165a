"""Flow Executors - run callback-style steps in series or in parallel.

WHY
───
A flow is a list of steps ``step(ctx, callback)`` sharing one context.
``series`` runs them one after another and is the only executor that
honours a cooperative stop; ``parallel`` launches all of them at once and
completes on the first error or when the last branch finishes.

ARCHITECTURE
────────────
::

    series(steps, ctx?, done)
      enrich(ctx) ─► step[0] ─► step[1] ─► … ─► done(None, ctx)
                       │ error                    ▲
                       └──────► done(err, ctx)    │ ctx.stopped:
                                                  └ skip the rest

    parallel(steps, ctx?, done)
      enrich(ctx) ─► step[0] ┐
                  ─► step[1] ├─► latch ─► done(err | None, ctx)  (once)
                  ─► step[n] ┘

Every step is posted through :func:`flw.execution.scheduler.schedule`,
so no step ever runs inside its caller's stack frame.

BEST PRACTICES
──────────────
- Pass data between steps through the context, not closures.
- Use ``ctx.store("key", cb)`` as the step's callback to keep a result.
- Parallel branches share one context; give each branch its own keys.

Related modules:
    iterators.py    - each / n / times over items or indices
    composition.py  - wrap() and make.series / make.parallel
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from flw.core.errors import CallbackError
from flw.core.logging import get_logger
from flw.execution.context import Context, enrich
from flw.execution.scheduler import schedule

logger = get_logger(__name__)

Step = Callable[[Context, Callable[..., Any]], Any]
Done = Callable[[Any, Any], Any]


def _resolve_args(
    flow: str,
    context: Mapping[str, Any] | Done | None,
    done: Done | None,
) -> tuple[Context, Done]:
    """Accept ``(ctx, done)`` or ``(done)``; enrich the context."""
    if done is None and callable(context):
        done, context = context, None
    if not callable(done):
        raise CallbackError(flow, received=done)
    return enrich(context), done


def series(
    steps: Sequence[Step],
    context: Mapping[str, Any] | Done | None = None,
    done: Done | None = None,
) -> None:
    """Run ``steps`` strictly in order over one shared context.

    Parameters
    ----------
    steps
        Callables ``step(ctx, callback)``.
    context
        Initial context mapping; omitted or ``None`` means ``{}``.  May be
        the completion handler itself when ``done`` is omitted.
    done
        ``done(error, ctx)``, called exactly once.

    The first error short-circuits to ``done(error, ctx)``.  Once
    ``ctx.stopped`` is set the remaining steps are skipped and the flow
    completes successfully.
    """
    ctx, done = _resolve_args("series", context, done)
    steps = list(steps)
    total = len(steps)

    if total == 0:
        schedule(done, None, ctx)
        return

    logger.debug("flow.series.start", steps=total)
    cursor = 0

    def call_step() -> None:
        if ctx.stopped:
            logger.debug("flow.series.stopped", reason=ctx.stopped, skipped=total - cursor)
            done(None, ctx)
            return
        schedule(steps[cursor], ctx, on_step_done)

    def on_step_done(error: Any = None, result: Any = None) -> None:
        nonlocal cursor
        if error:
            logger.debug("flow.series.error", step=cursor, error=repr(error))
            done(error, ctx)
            return

        cursor += 1
        if cursor >= total:
            done(None, ctx)
            return
        call_step()

    call_step()


def parallel(
    steps: Sequence[Step],
    context: Mapping[str, Any] | Done | None = None,
    done: Done | None = None,
) -> None:
    """Launch every step at once against one shared context.

    Completes with the first error reported by any branch, or with
    ``(None, ctx)`` once all branches succeed.  ``done`` fires at most
    once; later completions and errors are discarded.  The stop flag is
    not consulted: launched branches cannot be recalled.
    """
    ctx, done = _resolve_args("parallel", context, done)
    steps = list(steps)
    total = len(steps)

    if total == 0:
        schedule(done, None, ctx)
        return

    logger.debug("flow.parallel.start", steps=total)
    finished = 0
    completed = False

    def complete(error: Any) -> None:
        nonlocal completed
        if completed:
            logger.debug("flow.parallel.late_completion", error=repr(error) if error else None)
            return
        completed = True
        done(error or None, ctx)

    def on_branch_done(error: Any = None, result: Any = None) -> None:
        nonlocal finished
        if error:
            complete(error)
            return
        finished += 1
        if finished >= total:
            complete(None)
        elif completed:
            logger.debug("flow.parallel.late_completion", error=None)

    for step in steps:
        schedule(step, ctx, on_branch_done)


__all__ = ["series", "parallel", "Step", "Done"]
