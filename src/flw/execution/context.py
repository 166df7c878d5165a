"""Flow Context - the shared mutable mapping every step receives.

WHY
───
Steps in one flow are otherwise independent callables; the only channel
between them is the context they all receive.  A step writes
``ctx["user"] = user`` and a later step reads it.  On top of the data,
the context carries a small control protocol: cooperative stop, a
"store my result under this key" callback factory, and a clean copy of
the data for handing back to callers.

ARCHITECTURE
────────────
::

    Context  (MutableMapping view over the caller's dict)
      ├── [key] / .get() / len() / iter()   ─ data only
      ├── .stopped                           ─ None, or the stop reason
      ├── .stop(reason?, callback)           ─ set stopped, call callback()
      ├── .store(key, callback)              ─ (err, data) → ctx[key] = data
      ├── .clean()                           ─ plain dict without reserved keys
      └── .flw_store(key, callback)          ─ deprecated alias of store()

    enrich(mapping | Context | None) → Context   (idempotent)

The protocol methods live on the ``Context`` object.  The stop reason is
kept in the caller's mapping under ``"_stopped"``, so wrapping the same
mapping again still sees it; iterating the context, ``len()``,
``dict(ctx)`` and ``clean()`` skip the reserved keys.  Writes go straight
through to the mapping the caller passed in.

Example::

    def fetch_user(ctx, cb):
        load_user(ctx["user_id"], ctx.store("user", cb))

    def maybe_stop(ctx, cb):
        if ctx["user"] is None:
            return ctx.stop("no such user", cb)
        cb(None)
"""

from __future__ import annotations

import warnings
from collections.abc import Callable, Iterator, Mapping, MutableMapping
from typing import Any

from flw.core.errors import ConfigError
from flw.core.logging import get_logger
from flw.core.settings import get_settings

logger = get_logger(__name__)

Callback = Callable[..., Any]

# Bookkeeping names of the protocol; never returned by clean().
RESERVED_KEYS: frozenset[str] = frozenset({
    "_store",
    "_stop",
    "_stopped",
    "_clean",
    "_flw_store",  # deprecated
})


class Context(MutableMapping[str, Any]):
    """Shared flow state plus the stop / store / clean control protocol.

    Construct through :func:`enrich` rather than directly, so that an
    already-enriched context is reused instead of wrapped twice.
    """

    __slots__ = ("_data",)

    def __init__(self, data: MutableMapping[str, Any] | None = None) -> None:
        self._data: MutableMapping[str, Any] = {} if data is None else data

    # ── Mapping interface ────────────────────────────────────────────

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return (key for key in self._data if key not in RESERVED_KEYS)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        if self.stopped:
            return f"Context({self.clean()!r}, stopped={self.stopped!r})"
        return f"Context({self.clean()!r})"

    @property
    def data(self) -> MutableMapping[str, Any]:
        """The underlying mapping the caller supplied."""
        return self._data

    # ── Control protocol ─────────────────────────────────────────────

    @property
    def stopped(self) -> str | None:
        """``None`` while running, the stop reason once stopped."""
        return self._data.get("_stopped")

    def stop(self, reason: str | Callback | None = None, callback: Callback | None = None) -> Any:
        """Request a cooperative stop, then call ``callback()``.

        ``stop(cb)`` is accepted and records the default reason.  Only
        ``series`` honours the flag, before launching its next step;
        branches already running are not interrupted.
        """
        if callback is None and callable(reason):
            callback, reason = reason, None
        if reason is None:
            reason = get_settings().stop_reason
        self._data["_stopped"] = reason
        logger.debug("context.stop", reason=reason)
        return callback()

    def store(self, key: str, callback: Callback) -> Callback:
        """Return a callback that saves its result under ``key``.

        The returned ``fn(error, data=None)`` forwards ``error`` untouched;
        on success it sets ``self[key] = data`` and calls ``callback(None)``.
        """

        def _store(error: Any = None, data: Any = None) -> Any:
            if error:
                return callback(error)
            self[key] = data
            return callback(None)

        return _store

    def flw_store(self, key: str, callback: Callback) -> Callback:
        """Deprecated alias of :meth:`store`."""
        warnings.warn(
            "Context.flw_store() is deprecated, use Context.store()",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.store(key, callback)

    def clean(self) -> dict[str, Any]:
        """Shallow copy of the data without the protocol's reserved keys."""
        return {k: v for k, v in self._data.items() if k not in RESERVED_KEYS}


def enrich(context: Mapping[str, Any] | None = None) -> Context:
    """Return ``context`` as a :class:`Context`, enriching it at most once.

    - ``None`` → a fresh context over an empty dict
    - a ``Context`` → returned as-is (stop flag and data untouched)
    - any other mutable mapping → a ``Context`` viewing that same mapping,
      including a stop reason recorded by an earlier flow
    """
    if isinstance(context, Context):
        return context
    if context is None:
        return Context()
    if not isinstance(context, MutableMapping):
        raise ConfigError(f"context must be a mutable mapping, got {type(context).__name__}")
    return Context(context)


__all__ = ["Context", "enrich", "RESERVED_KEYS"]
