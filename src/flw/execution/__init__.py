"""flw execution: the scheduler primitive and the shared flow context.

::

    schedule(step, *args)   ─ post step(*args) on the next loop turn
    enrich(mapping)         ─ mapping → Context (stop / store / clean)
"""

from flw.execution.context import RESERVED_KEYS, Context, enrich
from flw.execution.scheduler import Scheduler, configure_scheduler, get_scheduler, schedule

__all__ = [
    "Context",
    "enrich",
    "RESERVED_KEYS",
    "Scheduler",
    "schedule",
    "get_scheduler",
    "configure_scheduler",
]
