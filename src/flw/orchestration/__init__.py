"""flw orchestration: executors, iterators and composition helpers.

MODULE MAP
──────────
1. flows.py        ─ series / parallel over one shared context
2. iterators.py    ─ each / n / times over items or indices
3. composition.py  ─ wrap() and make.series / make.parallel
"""

from flw.orchestration.composition import make, wrap
from flw.orchestration.flows import parallel, series
from flw.orchestration.iterators import each, n, times

__all__ = ["series", "parallel", "each", "n", "times", "wrap", "make"]
