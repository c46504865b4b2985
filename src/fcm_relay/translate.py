"""Legacy to v1 message translation."""

from typing import Iterator
import json

from src.fcm_relay.exceptions import ValidationError
from src.fcm_relay.models import (
    AndroidConfig,
    AndroidNotification,
    LegacyMessage,
    WireMessage,
    WireNotification,
    wrap_message,
)


def translate(message: LegacyMessage, target: str) -> WireMessage:
    """Build the v1 message for one target.

    click_action and tag have no place in the v1 cross-platform
    notification, so they move into the android block along with priority.
    """
    return WireMessage(
        token=target,
        collapse_key=message.collapse_key,
        notification=WireNotification(
            title=message.notification.title,
            body=message.notification.body,
        ),
        data=message.data,
        delay_while_idle=message.delay_while_idle,
        time_to_live=message.time_to_live,
        restricted_package_name=message.restricted_package_name,
        dry_run=message.dry_run,
        android=AndroidConfig(
            notification=AndroidNotification(
                click_action=message.notification.click_action,
                tag=message.notification.tag,
            ),
            priority=message.priority,
        ),
    )


def translate_all(message: LegacyMessage) -> Iterator[WireMessage]:
    """Yield one v1 message per target, in target order."""
    for target in message.targets:
        yield translate(message, target)


def encode_message(message: WireMessage) -> bytes:
    """Serialize the enveloped message as a JSON request body."""
    try:
        return json.dumps(wrap_message(message)).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ValidationError(f"message data is not JSON serializable: {e}", field="data") from e
