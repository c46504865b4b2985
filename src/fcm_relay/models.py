"""Data models for the FCM relay."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from src.fcm_relay.exceptions import ValidationError


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ═══════════════════════════════════════════════════════════════════════
# Legacy (caller-facing) message
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Notification:
    """Display fields of a legacy notification."""

    title: str = ""
    body: str = ""
    click_action: str = ""
    tag: str = ""

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "Notification":
        data = data or {}
        return cls(
            title=data.get("title", ""),
            body=data.get("body", ""),
            click_action=data.get("click_action", ""),
            tag=data.get("tag", ""),
        )

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "body": self.body,
            "click_action": self.click_action,
            "tag": self.tag,
        }


@dataclass(frozen=True)
class LegacyMessage:
    """A multi-target push request in the legacy HTTP format.

    Built by the application and handed to ``FCMClient.send``, which
    validates it and fans it out into one ``WireMessage`` per target.
    """

    targets: Optional[Sequence[str]]
    collapse_key: str = ""
    notification: Notification = field(default_factory=Notification)
    data: Optional[dict[str, Any]] = None
    delay_while_idle: bool = False
    time_to_live: int = 0
    priority: str = ""
    restricted_package_name: str = ""
    dry_run: bool = False

    @classmethod
    def from_dict(cls, payload: dict) -> "LegacyMessage":
        """Parse a legacy HTTP JSON payload.

        Raises:
            ValidationError: If a field has the wrong JSON type.
        """
        targets = payload.get("registration_ids")
        if targets is not None and not (
            isinstance(targets, list) and all(isinstance(t, str) for t in targets)
        ):
            raise ValidationError("registration_ids must be a list of strings", field="targets")

        data = payload.get("data")
        if data is not None and not isinstance(data, dict):
            raise ValidationError("data must be a JSON object", field="data")

        time_to_live = payload.get("time_to_live", 0)
        if isinstance(time_to_live, bool) or not isinstance(time_to_live, int):
            raise ValidationError("time_to_live must be an integer", field="time_to_live")

        priority = payload.get("priority", "")
        if not isinstance(priority, str):
            raise ValidationError("priority must be a string", field="priority")

        return cls(
            targets=list(targets) if targets is not None else None,
            collapse_key=payload.get("collapse_key", ""),
            notification=Notification.from_dict(payload.get("notification")),
            data=data,
            delay_while_idle=payload.get("delay_while_idle", False),
            time_to_live=time_to_live,
            priority=priority,
            restricted_package_name=payload.get("restricted_package_name", ""),
            dry_run=payload.get("dry_run", False),
        )

    def to_dict(self) -> dict:
        """Render the legacy JSON payload, omitting empty optional fields."""
        payload: dict[str, Any] = {
            "registration_ids": list(self.targets) if self.targets is not None else None,
            "notification": self.notification.to_dict(),
        }
        if self.collapse_key:
            payload["collapse_key"] = self.collapse_key
        if self.data:
            payload["data"] = dict(self.data)
        if self.delay_while_idle:
            payload["delay_while_idle"] = True
        if self.time_to_live:
            payload["time_to_live"] = self.time_to_live
        if self.priority:
            payload["priority"] = self.priority
        if self.restricted_package_name:
            payload["restricted_package_name"] = self.restricted_package_name
        if self.dry_run:
            payload["dry_run"] = True
        return payload


def new_message(data: Optional[dict[str, Any]], *targets: str) -> LegacyMessage:
    """Return a message with the given payload and targets."""
    return LegacyMessage(targets=list(targets), data=data)


# ═══════════════════════════════════════════════════════════════════════
# Wire (v1, service-facing) message
# ═══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class WireNotification:
    """Cross-platform notification block; only title and body exist here."""

    title: str = ""
    body: str = ""

    def to_dict(self) -> dict:
        out = {}
        if self.title:
            out["title"] = self.title
        if self.body:
            out["body"] = self.body
        return out


@dataclass(frozen=True)
class AndroidNotification:
    click_action: str = ""
    tag: str = ""

    def to_dict(self) -> dict:
        out = {}
        if self.click_action:
            out["click_action"] = self.click_action
        if self.tag:
            out["tag"] = self.tag
        return out


@dataclass(frozen=True)
class AndroidConfig:
    """Android-specific block of a v1 message."""

    notification: AndroidNotification = field(default_factory=AndroidNotification)
    priority: str = ""

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"notification": self.notification.to_dict()}
        if self.priority:
            out["priority"] = self.priority
        return out


@dataclass(frozen=True)
class WireMessage:
    """A single-target message in the v1 format."""

    token: str
    collapse_key: str = ""
    notification: WireNotification = field(default_factory=WireNotification)
    data: Optional[dict[str, Any]] = None
    delay_while_idle: bool = False
    time_to_live: int = 0
    restricted_package_name: str = ""
    dry_run: bool = False
    android: AndroidConfig = field(default_factory=AndroidConfig)

    def to_dict(self) -> dict:
        out: dict[str, Any] = {"token": self.token}
        if self.collapse_key:
            out["collapse_key"] = self.collapse_key
        out["notification"] = self.notification.to_dict()
        if self.data:
            out["data"] = self.data
        if self.delay_while_idle:
            out["delay_while_idle"] = True
        if self.time_to_live:
            out["time_to_live"] = self.time_to_live
        if self.restricted_package_name:
            out["restricted_package_name"] = self.restricted_package_name
        if self.dry_run:
            out["dry_run"] = True
        out["android"] = self.android.to_dict()
        return out


def wrap_message(message: WireMessage) -> dict:
    """Wrap a wire message in the request envelope expected by the endpoint."""
    return {"message": message.to_dict()}


# ═══════════════════════════════════════════════════════════════════════
# Results
# ═══════════════════════════════════════════════════════════════════════


@dataclass
class DeliveryResult:
    """Decoded service response for one target."""

    target: str
    raw: Any = None

    @classmethod
    def from_api(cls, data: Any, target: str) -> "DeliveryResult":
        return cls(target=target, raw=data)

    @property
    def name(self) -> Optional[str]:
        """Message name assigned by the service, e.g. projects/x/messages/1."""
        if isinstance(self.raw, dict):
            return self.raw.get("name")
        return None

    def to_dict(self) -> dict:
        return {"target": self.target, "name": self.name, "raw": self.raw}


@dataclass
class TargetOutcome:
    """Per-target outcome of a best-effort send."""

    target: str
    success: bool
    result: Optional[DeliveryResult] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    status_code: Optional[int] = None
    latency_ms: Optional[int] = None
    timestamp: datetime = field(default_factory=_now)

    def to_dict(self) -> dict:
        return {
            "target": self.target,
            "success": self.success,
            "name": self.result.name if self.result else None,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "status_code": self.status_code,
            "latency_ms": self.latency_ms,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class BearerToken:
    """Short-lived OAuth2 access token."""

    access_token: str = field(repr=False)
    expiry: Optional[datetime] = None

    def authorization_header(self) -> str:
        return f"Bearer {self.access_token}"
