"""
Tests for the logging module.

Tests verify:
- configure_logging installs the processor chain for JSON and console
- ECS field renaming and service metadata
- scoped context binding
- executors emit structured debug events
"""

import logging

import pytest
import structlog
from structlog.testing import capture_logs

from flw.core import logging as flw_logging
from flw.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)
from flw.orchestration.flows import parallel, series


class TestProcessors:

    def test_elasticsearch_compatible_renames(self):
        event = {"timestamp": "2026-10-17T00:00:00Z", "level": "info", "event": "x"}
        out = flw_logging._elasticsearch_compatible(None, "info", event)
        assert out == {"@timestamp": "2026-10-17T00:00:00Z", "log.level": "info", "event": "x"}

    def test_service_metadata_default(self):
        out = flw_logging._add_service_metadata(None, "info", {"event": "x"})
        assert out["service.name"] == "flw"


class TestConfigureLogging:

    def test_json_chain(self):
        configure_logging(level="DEBUG", json_format=True, service="billing")
        processors = structlog.get_config()["processors"]
        assert flw_logging._elasticsearch_compatible in processors
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert flw_logging._SERVICE_NAME == "billing"

    def test_console_chain(self):
        configure_logging(level="INFO", json_format=False)
        processors = structlog.get_config()["processors"]
        assert flw_logging._elasticsearch_compatible not in processors
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_json_format_from_settings(self, monkeypatch):
        monkeypatch.setenv("FLW_LOG_JSON", "true")
        configure_logging(level="INFO")
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_sets_library_logger_level(self):
        configure_logging(level="DEBUG", json_format=False)
        assert logging.getLogger("flw").level == logging.DEBUG

    def test_get_logger_returns_structlog_logger(self):
        logger = get_logger("flw.test")
        assert hasattr(logger, "debug")
        assert hasattr(logger, "bind")


class TestContextBinding:

    def test_bind_and_unbind(self):
        bind_context(flow="nightly")
        assert structlog.contextvars.get_contextvars()["flow"] == "nightly"
        unbind_context("flow")
        assert "flow" not in structlog.contextvars.get_contextvars()

    def test_log_context_scoped(self):
        with LogContext(run_id="abc123"):
            assert structlog.contextvars.get_contextvars()["run_id"] == "abc123"
        assert "run_id" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_log_context_async(self):
        async with LogContext(run_id="r1"):
            assert structlog.contextvars.get_contextvars()["run_id"] == "r1"
        assert "run_id" not in structlog.contextvars.get_contextvars()

    def test_clear_context(self):
        bind_context(a=1, b=2)
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}


class TestFlowEvents:

    @pytest.mark.asyncio
    async def test_series_emits_start_and_stop(self, done):
        with capture_logs() as logs:
            series([lambda ctx, cb: ctx.stop("enough", cb), lambda ctx, cb: cb(None)], {}, done)
            await done.wait()
        events = [entry["event"] for entry in logs]
        assert "flow.series.start" in events
        stopped = next(entry for entry in logs if entry["event"] == "flow.series.stopped")
        assert stopped["reason"] == "enough"
        assert stopped["skipped"] == 1

    @pytest.mark.asyncio
    async def test_parallel_logs_discarded_completion(self, done):
        with capture_logs() as logs:
            parallel([lambda ctx, cb: cb(ValueError("a")), lambda ctx, cb: cb(ValueError("b"))], {}, done)
            await done.wait()
        assert done.count == 1
        assert any(entry["event"] == "flow.parallel.late_completion" for entry in logs)


class TestUnconfigured:
    """Without configure_logging the library stays silent."""

    def test_library_logger_has_null_handler(self):
        handlers = logging.getLogger("flw").handlers
        assert any(isinstance(handler, logging.NullHandler) for handler in handlers)

    @pytest.mark.asyncio
    async def test_flows_write_nothing(self, capsys, done_factory):
        first, second = done_factory(), done_factory()
        series([lambda ctx, cb: ctx.stop("enough", cb), lambda ctx, cb: cb(None)], {}, first)
        await first.wait()
        parallel([lambda ctx, cb: cb(ValueError("a")), lambda ctx, cb: cb(ValueError("b"))], {}, second)
        await second.wait()
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""
