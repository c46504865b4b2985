"""FCM Relay.

Relays legacy GCM/FCM push requests to the FCM HTTP v1 API:
- Legacy message validation
- Per-target translation to v1 messages
- Service-account bearer token exchange
- Sequential delivery with all-or-nothing or best-effort reporting
"""

from src.fcm_relay.config import (
    FCM_SCOPE,
    FCM_SEND_ENDPOINT_TEMPLATE,
    MAX_TARGETS,
    MAX_TIME_TO_LIVE,
    Priority,
    RelayConfig,
    DEFAULT_RELAY_CONFIG,
    endpoint_for_project,
)
from src.fcm_relay.exceptions import (
    RelayErrorCode,
    RelayError,
    ConfigError,
    ValidationError,
    AuthError,
    TransportError,
    ProtocolError,
)
from src.fcm_relay.models import (
    Notification,
    LegacyMessage,
    WireNotification,
    AndroidNotification,
    AndroidConfig,
    WireMessage,
    DeliveryResult,
    TargetOutcome,
    BearerToken,
    new_message,
    wrap_message,
)
from src.fcm_relay.validation import validate_message
from src.fcm_relay.translate import translate, translate_all, encode_message
from src.fcm_relay.auth import TokenProvider, ServiceAccountTokenProvider
from src.fcm_relay.client import FCMClient, new_client

__all__ = [
    # Config
    "FCM_SCOPE",
    "FCM_SEND_ENDPOINT_TEMPLATE",
    "MAX_TARGETS",
    "MAX_TIME_TO_LIVE",
    "Priority",
    "RelayConfig",
    "DEFAULT_RELAY_CONFIG",
    "endpoint_for_project",
    # Errors
    "RelayErrorCode",
    "RelayError",
    "ConfigError",
    "ValidationError",
    "AuthError",
    "TransportError",
    "ProtocolError",
    # Models
    "Notification",
    "LegacyMessage",
    "WireNotification",
    "AndroidNotification",
    "AndroidConfig",
    "WireMessage",
    "DeliveryResult",
    "TargetOutcome",
    "BearerToken",
    "new_message",
    "wrap_message",
    # Operations
    "validate_message",
    "translate",
    "translate_all",
    "encode_message",
    "TokenProvider",
    "ServiceAccountTokenProvider",
    "FCMClient",
    "new_client",
]
