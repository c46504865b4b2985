"""Tests for relay logging: config, send context and formatters."""

import json
import logging
import sys

import httpx
import pytest

from src.logging_config.config import LogFormat, LoggingConfig, LogLevel
from src.logging_config.context import (
    SendContext,
    generate_batch_id,
    get_batch_id,
    get_context_dict,
)
from src.logging_config.setup import (
    ConsoleFormatter,
    StructuredFormatter,
    configure_logging,
)


def _record(msg="test", level=logging.INFO, name="test", exc_info=None):
    return logging.LogRecord(
        name=name, level=level, pathname="test.py",
        lineno=42, msg=msg, args=(), exc_info=exc_info,
    )


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestLoggingConfig:
    """Tests for logging configuration dataclasses."""

    def test_default_config_values(self):
        config = LoggingConfig()
        assert config.level == LogLevel.INFO
        assert config.format == LogFormat.JSON
        assert config.include_caller is True
        assert config.service_name == "fcm-relay"

    def test_log_format_enum_values(self):
        assert LogFormat.JSON.value == "json"
        assert LogFormat.CONSOLE.value == "console"


class TestSendContext:
    """Tests for send-scoped logging context."""

    def test_generate_batch_id_unique(self):
        ids = {generate_batch_id() for _ in range(100)}
        assert len(ids) == 100

    def test_context_sets_batch_id(self):
        with SendContext(batch_id="batch-1"):
            assert get_batch_id() == "batch-1"
        assert get_batch_id() == ""

    def test_auto_generates_batch_id(self):
        with SendContext() as ctx:
            assert ctx.batch_id != ""
            assert get_batch_id() == ctx.batch_id

    def test_extra_and_bind(self):
        with SendContext(batch_id="b1", target_count=3) as ctx:
            ctx.bind(target="tok1")
            d = get_context_dict()
            assert d == {"batch_id": "b1", "target_count": 3, "target": "tok1"}
            ctx.bind(target="tok2")
            assert get_context_dict()["target"] == "tok2"
        assert get_context_dict() == {}

    def test_nested_contexts_restore_outer(self):
        with SendContext(batch_id="outer"):
            with SendContext(batch_id="inner"):
                assert get_batch_id() == "inner"
            assert get_batch_id() == "outer"

    def test_elapsed_ms(self):
        with SendContext() as ctx:
            assert ctx.elapsed_ms >= 0


class TestStructuredFormatter:
    """Tests for JSON log formatting."""

    def test_formats_as_json(self):
        parsed = json.loads(StructuredFormatter().format(_record("hello")))
        assert parsed["message"] == "hello"
        assert parsed["level"] == "INFO"
        assert parsed["service"] == "fcm-relay"
        assert parsed["line"] == 42

    def test_excludes_caller_when_disabled(self):
        parsed = json.loads(StructuredFormatter(include_caller=False).format(_record()))
        assert "line" not in parsed
        assert "function" not in parsed

    def test_includes_send_context(self):
        formatter = StructuredFormatter()
        with SendContext(batch_id="b1") as ctx:
            ctx.bind(target="tok1")
            parsed = json.loads(formatter.format(_record()))
        assert parsed["batch_id"] == "b1"
        assert parsed["target"] == "tok1"

    def test_formats_exception(self):
        try:
            raise ValueError("test error")
        except ValueError:
            record = _record("failed", logging.ERROR, exc_info=sys.exc_info())
        parsed = json.loads(StructuredFormatter().format(record))
        assert parsed["exception"]["type"] == "ValueError"
        assert "test error" in parsed["exception"]["message"]

    def test_includes_extra_fields(self):
        record = _record()
        record.status_code = 404
        record.latency_ms = 12
        parsed = json.loads(StructuredFormatter().format(record))
        assert parsed["status_code"] == 404
        assert parsed["latency_ms"] == 12


class TestConsoleFormatter:
    """Tests for console log formatting."""

    def test_formats_readable_output(self):
        output = ConsoleFormatter().format(_record("hello", name="src.fcm_relay.client"))
        assert "src.fcm_relay.client" in output
        assert "hello" in output
        assert "INFO" in output

    def test_includes_context_info(self):
        with SendContext(batch_id="abc"):
            output = ConsoleFormatter().format(_record())
        assert "batch_id=abc" in output


class TestConfigureLogging:
    """Tests for the configure_logging setup function."""

    def test_json_format(self, restore_root_logger):
        configure_logging(LoggingConfig(format=LogFormat.JSON))
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)

    def test_console_format(self, restore_root_logger):
        configure_logging(LoggingConfig(format=LogFormat.CONSOLE))
        assert isinstance(restore_root_logger.handlers[0].formatter, ConsoleFormatter)

    def test_sets_log_level(self, restore_root_logger):
        configure_logging(LoggingConfig(level=LogLevel.DEBUG))
        assert restore_root_logger.level == logging.DEBUG

    def test_quiets_http_loggers(self, restore_root_logger):
        configure_logging()
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_env_var_overrides(self, restore_root_logger, monkeypatch):
        monkeypatch.setenv("FCM_RELAY_LOG_LEVEL", "error")
        monkeypatch.setenv("FCM_RELAY_LOG_FORMAT", "console")
        configure_logging(LoggingConfig(level=LogLevel.INFO, format=LogFormat.JSON))
        assert restore_root_logger.level == logging.ERROR
        assert isinstance(restore_root_logger.handlers[0].formatter, ConsoleFormatter)


class TestSendLogging:
    """Log lines emitted during a send carry the send context."""

    def test_failure_logged_with_target(self, client, handler):
        from src.fcm_relay.models import LegacyMessage

        handler.responses = [httpx.Response(503, text="unavailable")]
        seen = []

        class _Capture(logging.Handler):
            def emit(self, record):
                seen.append((record.getMessage(), get_context_dict()))

        capture = _Capture(level=logging.WARNING)
        logger = logging.getLogger("src.fcm_relay.client")
        logger.addHandler(capture)
        try:
            client.send_each(LegacyMessage(targets=["tok1"]), b"{}")
        finally:
            logger.removeHandler(capture)

        message, ctx = seen[0]
        assert "invalid status code 503" in message
        assert ctx["target"] == "tok1"
        assert ctx["target_count"] == 1

    def test_failure_record_carries_structured_fields(self, client, handler):
        from src.fcm_relay.models import LegacyMessage

        handler.responses = [httpx.Response(404, text="not found")]
        records = []

        class _Capture(logging.Handler):
            def emit(self, record):
                records.append(record)

        capture = _Capture(level=logging.WARNING)
        logger = logging.getLogger("src.fcm_relay.client")
        logger.addHandler(capture)
        try:
            client.send_each(LegacyMessage(targets=["tok1"]), b"{}")
        finally:
            logger.removeHandler(capture)

        parsed = json.loads(StructuredFormatter().format(records[0]))
        assert parsed["error_code"] == "PROTOCOL_ERROR"
        assert parsed["status_code"] == 404
        assert parsed["latency_ms"] >= 0
