"""Configuration for the FCM relay."""

from dataclasses import dataclass, field, replace
from enum import Enum
import os


# FCM HTTP v1 send endpoint, see
# https://firebase.google.com/docs/cloud-messaging/send-message
FCM_SEND_ENDPOINT_TEMPLATE = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"

# OAuth2 scope required to call the v1 send endpoint
FCM_SCOPE = "https://www.googleapis.com/auth/firebase.messaging"

MAX_TARGETS = 1000
MAX_TIME_TO_LIVE = 2419200  # 4 weeks


class Priority(str, Enum):
    """Delivery priority accepted by the legacy message format."""
    HIGH = "high"
    NORMAL = "normal"


@dataclass(frozen=True)
class RelayConfig:
    """Relay limits and transport settings."""

    # Validation limits
    max_targets: int = MAX_TARGETS
    max_time_to_live: int = MAX_TIME_TO_LIVE
    allowed_priorities: tuple[str, ...] = field(
        default_factory=lambda: tuple(p.value for p in Priority)
    )

    # Auth
    scope: str = FCM_SCOPE

    # Transport
    request_timeout: float = 30.0
    user_agent: str = "fcm-relay/0.1"

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """Build a config, applying FCM_RELAY_* environment overrides."""
        overrides: dict = {}
        timeout = os.environ.get("FCM_RELAY_REQUEST_TIMEOUT", "")
        if timeout:
            overrides["request_timeout"] = float(timeout)
        max_targets = os.environ.get("FCM_RELAY_MAX_TARGETS", "")
        if max_targets:
            overrides["max_targets"] = int(max_targets)
        scope = os.environ.get("FCM_RELAY_SCOPE", "")
        if scope:
            overrides["scope"] = scope
        return replace(cls(), **overrides)


DEFAULT_RELAY_CONFIG = RelayConfig()


def endpoint_for_project(project_id: str) -> str:
    """Return the v1 send endpoint for a Firebase project."""
    return FCM_SEND_ENDPOINT_TEMPLATE.format(project_id=project_id)
