"""Legacy message validation."""

from typing import Optional
import json

from src.fcm_relay.config import DEFAULT_RELAY_CONFIG, RelayConfig
from src.fcm_relay.exceptions import ValidationError
from src.fcm_relay.models import LegacyMessage


def validate_message(
    message: Optional[LegacyMessage],
    config: Optional[RelayConfig] = None,
) -> None:
    """Check a message against the relay limits.

    Rules are checked in order and the first failure is raised.

    Raises:
        ValidationError: With ``field`` naming the offending attribute.
    """
    config = config or DEFAULT_RELAY_CONFIG

    if message is None:
        raise ValidationError("the message must not be None")

    if message.targets is None:
        raise ValidationError("the message's targets must not be None", field="targets")

    if isinstance(message.targets, (str, bytes)):
        raise ValidationError("the message's targets must be a sequence of strings", field="targets")

    if len(message.targets) == 0:
        raise ValidationError("the message must specify at least one target", field="targets")

    if len(message.targets) > config.max_targets:
        raise ValidationError(
            f"the message may specify at most {config.max_targets} targets",
            field="targets",
        )

    ttl = message.time_to_live
    if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl < 0 or ttl > config.max_time_to_live:
        raise ValidationError(
            f"the message's time_to_live must be an integer between 0 and "
            f"{config.max_time_to_live}",
            field="time_to_live",
        )

    if not isinstance(message.priority, str) or (
        message.priority and message.priority not in config.allowed_priorities
    ):
        raise ValidationError(
            f"priority must be one of {', '.join(config.allowed_priorities)}",
            field="priority",
        )

    if message.data is not None:
        try:
            json.dumps(message.data)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"message data is not JSON serializable: {e}", field="data") from e
