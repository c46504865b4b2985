"""Logging Setup.

One-call configuration for relay logging. JSON output for production,
plain console lines for development.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional

from src.logging_config.config import DEFAULT_LOGGING_CONFIG, LogFormat, LoggingConfig, LogLevel
from src.logging_config.context import get_context_dict


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter.

    One JSON object per line: timestamp, level, logger, message, service,
    plus whatever the active SendContext has bound.
    """

    def __init__(self, service_name: str = "fcm-relay", include_caller: bool = True):
        super().__init__()
        self.service_name = service_name
        self.include_caller = include_caller

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
        }

        if self.include_caller:
            log_entry["module"] = record.module
            log_entry["function"] = record.funcName
            log_entry["line"] = record.lineno

        ctx = get_context_dict()
        if ctx:
            log_entry.update(ctx)

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        for key in ("status_code", "latency_ms", "error_code"):
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        return json.dumps(log_entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%H:%M:%S.%f")[:-3]

        ctx = get_context_dict()
        ctx_str = ""
        if ctx:
            parts = [f"{k}={v}" for k, v in ctx.items()]
            ctx_str = f" [{', '.join(parts)}]"

        line = f"{timestamp} {record.levelname:8s} {record.name}: {record.getMessage()}{ctx_str}"

        if record.exc_info and record.exc_info[0] is not None:
            line += "\n" + self.formatException(record.exc_info)

        return line


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """Configure logging for the relay.

    Call once at application startup.

    Args:
        config: Logging configuration. Uses defaults if not provided.
                Level can be overridden with FCM_RELAY_LOG_LEVEL,
                format with FCM_RELAY_LOG_FORMAT.
    """
    config = config or DEFAULT_LOGGING_CONFIG
    level = config.level
    fmt = config.format

    env_level = os.environ.get("FCM_RELAY_LOG_LEVEL", "").upper()
    if env_level and env_level in LogLevel.__members__:
        level = LogLevel(env_level)

    env_format = os.environ.get("FCM_RELAY_LOG_FORMAT", "").lower()
    if env_format and env_format in [f.value for f in LogFormat]:
        fmt = LogFormat(env_format)

    if fmt == LogFormat.JSON:
        formatter: logging.Formatter = StructuredFormatter(
            service_name=config.service_name,
            include_caller=config.include_caller,
        )
    else:
        formatter = ConsoleFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.value))

    # httpx logs every request at INFO; google-auth goes through urllib3
    for noisy in ("urllib3", "httpx", "httpcore", "google.auth"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
