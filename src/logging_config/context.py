"""Send Context Management.

contextvars-backed context binding a batch ID and the current target
to every log entry emitted while a send is in progress.
"""

import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any


_batch_id_var: ContextVar[str] = ContextVar("batch_id", default="")
_extra_context_var: ContextVar[dict] = ContextVar("extra_context", default={})


def generate_batch_id() -> str:
    """Generate a unique batch ID using UUID4."""
    return str(uuid.uuid4())


def get_batch_id() -> str:
    """Get the current batch ID from context."""
    return _batch_id_var.get()


def get_context_dict() -> dict[str, Any]:
    """Get all context variables as a dictionary for log binding."""
    ctx = {}
    batch_id = _batch_id_var.get()
    if batch_id:
        ctx["batch_id"] = batch_id
    extra = _extra_context_var.get()
    if extra:
        ctx.update(extra)
    return ctx


class SendContext:
    """Context manager for send-scoped logging context.

    Example:
        with SendContext(target_count=3) as ctx:
            ctx.bind(target="tok1")
            logger.info("posting")  # includes batch_id, target_count, target
    """

    def __init__(self, batch_id: str = "", **extra: Any):
        self.batch_id = batch_id or generate_batch_id()
        self.extra: dict[str, Any] = dict(extra)
        self.started_at = datetime.now(timezone.utc)
        self._tokens: list = []

    def __enter__(self) -> "SendContext":
        self._tokens = [
            _batch_id_var.set(self.batch_id),
            _extra_context_var.set(self.extra.copy()),
        ]
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        batch_token, extra_token = self._tokens
        _extra_context_var.reset(extra_token)
        _batch_id_var.reset(batch_token)
        self._tokens = []

    @property
    def elapsed_ms(self) -> float:
        """Milliseconds since context was created."""
        delta = datetime.now(timezone.utc) - self.started_at
        return delta.total_seconds() * 1000

    def bind(self, **kwargs: Any) -> None:
        """Add extra key-value pairs to the context."""
        current = _extra_context_var.get()
        _extra_context_var.set({**current, **kwargs})
        self.extra.update(kwargs)
