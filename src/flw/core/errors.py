"""
Structured error types for flw.

Flow failures reported by steps are plain values passed as the first
argument of a completion callback; the engine never wraps or raises them.
The classes here cover the other side: programmer misuse that must fail
fast and synchronously (a completion handler that is not callable, a flow
started with no event loop, a context that is not a mapping).

Every error carries:
- **Category:** What kind of error (config or internal)
- **Context:** Structured metadata (flow, step, custom fields)
- **Cause:** Chained underlying exception for root cause analysis

Architecture:
    ::

        ┌──────────────────────────────────────────────────────┐
        │                       FlwError                        │
        │            (category, context, cause)                 │
        ├──────────────────────────────────────────────────────┤
        │                                                       │
        │  ConfigError (CONFIG)                                 │
        │       ├── CallbackError                               │
        │       └── SchedulerError                              │
        └──────────────────────────────────────────────────────┘

Examples:
    >>> error = CallbackError("series", received=42)
    >>> error.category
    <ErrorCategory.CONFIG: 'CONFIG'>
    >>> error.context.flow
    'series'

    >>> ConfigError("bad step").with_context(step="load").to_dict()["context"]
    {'step': 'load'}

Tags:
    error-handling, exception-hierarchy, error-context, flw
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and logging."""

    CONFIG = "CONFIG"                # Misuse: bad callback, no loop, bad context
    INTERNAL = "INTERNAL"            # Bugs, unexpected state


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        flow: Name of the executor involved (``series``, ``each``, ...)
        step: Name or repr of the step involved
        metadata: Additional key-value pairs
    """

    flow: str | None = None
    step: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        for key in ["flow", "step"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class FlwError(Exception):
    """
    Base exception for all flw errors.

    Subclasses set ``default_category`` to classify themselves. Use
    :meth:`with_context` to attach metadata after construction and
    :meth:`to_dict` to serialise for structured logging.

    Examples:
        >>> error = FlwError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        >>> try:
        ...     raise RuntimeError("loop closed")
        ... except RuntimeError as e:
        ...     error = FlwError("scheduling failed", cause=e)
        >>> error.__cause__
        RuntimeError('loop closed')
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> FlwError:
        """
        Add context to this error (fluent API).

        Usage:
            raise CallbackError("parallel", received=None).with_context(branch=2)
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS (programmer misuse, raised synchronously)
# =============================================================================


class ConfigError(FlwError):
    """A flow was set up incorrectly."""

    default_category = ErrorCategory.CONFIG


class CallbackError(ConfigError):
    """Raised when a completion handler is not callable."""

    def __init__(self, flow: str, received: Any = None):
        self.received = received
        super().__init__(
            f"{flow}: completion callback must be callable, got {type(received).__name__}",
            context=ErrorContext(flow=flow),
        )


class SchedulerError(ConfigError):
    """Raised when a step is scheduled with no event loop to run it on."""

    def __init__(self, message: str = "no running event loop to schedule on", cause: Exception | None = None):
        super().__init__(message, cause=cause)


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "FlwError",
    "ConfigError",
    "CallbackError",
    "SchedulerError",
]
