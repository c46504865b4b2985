"""Structured logging for the FCM relay.

JSON or console output, with a per-send context that tags every
log line with the batch ID and the target being delivered.
"""

from src.logging_config.config import LogFormat, LoggingConfig, LogLevel
from src.logging_config.context import SendContext, generate_batch_id, get_context_dict
from src.logging_config.setup import configure_logging

__all__ = [
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "SendContext",
    "configure_logging",
    "generate_batch_id",
    "get_context_dict",
]
