"""
Shared pytest fixtures and configuration for flw tests.

This module provides:
- Settings / scheduler / structlog reset fixtures for test isolation
- ``DoneRecorder``: a completion callback that records every call and can
  be awaited until the flow has finished
- ``settle``: fixture returning a coroutine that lets pending loop callbacks drain

Usage:
    @pytest.mark.asyncio
    async def test_something(done):
        flw.series(steps, {}, done)
        error, ctx = await done.wait()
        assert done.count == 1
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Generator

import pytest
import structlog

# Ensure flw package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from flw.core.settings import clear_settings_cache
from flw.execution.scheduler import configure_scheduler


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_flw_state() -> Generator[None, None, None]:
    """
    Reset cached settings, the default scheduler and structlog config
    before and after each test.
    """
    clear_settings_cache()
    configure_scheduler()
    yield
    clear_settings_cache()
    configure_scheduler()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    logging.getLogger("flw").setLevel(logging.NOTSET)


# =============================================================================
# Completion Helpers
# =============================================================================


async def _settle(ticks: int = 20) -> None:
    """Give already-scheduled callbacks a few loop turns to run."""
    for _ in range(ticks):
        await asyncio.sleep(0)


class DoneRecorder:
    """Completion callback ``(error, result)`` that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, Any]] = []

    def __call__(self, error: Any, result: Any = None) -> None:
        self.calls.append((error, result))

    @property
    def count(self) -> int:
        return len(self.calls)

    async def wait(self, timeout: float = 2.0) -> tuple[Any, Any]:
        """Wait for the first completion, let stragglers settle, return it."""

        async def _poll() -> None:
            while not self.calls:
                await asyncio.sleep(0)

        await asyncio.wait_for(_poll(), timeout)
        await _settle()
        return self.calls[0]


@pytest.fixture
def done() -> DoneRecorder:
    return DoneRecorder()


@pytest.fixture
def settle():
    """Coroutine function draining pending loop callbacks: ``await settle()``."""
    return _settle


@pytest.fixture
def done_factory():
    """Build extra recorders when a test needs more than one flow."""
    return DoneRecorder
