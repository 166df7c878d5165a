"""
flw - callback-style flow control for asyncio.

Sequence or parallelize callback steps over one shared context, with
cooperative stop and per-step result capture.

Example::

    import flw

    def load(ctx, cb):
        cb(None, 5)

    def show(ctx, cb):
        print(ctx["x"])
        cb(None)

    async def main():
        flw.series([lambda ctx, cb: load(ctx, ctx.store("x", cb)), show], {}, on_done)
"""

__version__ = "0.1.0"

from flw.core.errors import (
    CallbackError,
    ConfigError,
    ErrorCategory,
    FlwError,
    SchedulerError,
)
from flw.core.logging import LogContext, configure_logging, get_logger
from flw.core.settings import FlwSettings, get_settings
from flw.execution.context import RESERVED_KEYS, Context, enrich
from flw.execution.scheduler import Scheduler, configure_scheduler, get_scheduler, schedule
from flw.orchestration.composition import make, wrap
from flw.orchestration.flows import parallel, series
from flw.orchestration.iterators import each, n, times

__all__ = [
    # Flows
    "series",
    "parallel",
    "each",
    "n",
    "times",
    "wrap",
    "make",
    # Context protocol
    "Context",
    "enrich",
    "RESERVED_KEYS",
    # Scheduling
    "Scheduler",
    "schedule",
    "get_scheduler",
    "configure_scheduler",
    # Ambient
    "FlwSettings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LogContext",
    # Errors
    "FlwError",
    "ConfigError",
    "CallbackError",
    "SchedulerError",
    "ErrorCategory",
]
