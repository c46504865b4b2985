"""Relay Exception Hierarchy.

Every failure surfaced by the relay is a ``RelayError`` carrying a
machine-readable ``error_code``, so callers can catch the whole family
with one handler or branch on the code.
"""

from enum import Enum
from typing import Optional


class RelayErrorCode(Enum):
    """Error codes for relay failures."""

    CONFIG_ERROR = "CONFIG_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    PROTOCOL_ERROR = "PROTOCOL_ERROR"


class RelayError(Exception):
    """Base exception for all relay errors."""

    def __init__(self, message: str, error_code: RelayErrorCode):
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class ConfigError(RelayError):
    """Raised when the client is constructed with invalid arguments."""

    def __init__(self, message: str = "Invalid client configuration"):
        super().__init__(message, RelayErrorCode.CONFIG_ERROR)


class ValidationError(RelayError):
    """Raised when a legacy message is malformed."""

    def __init__(self, message: str = "Validation failed", field: Optional[str] = None):
        super().__init__(message, RelayErrorCode.VALIDATION_ERROR)
        self.field = field


class AuthError(RelayError):
    """Raised when the credential blob cannot be exchanged for a token."""

    def __init__(self, message: str = "Credential exchange failed"):
        super().__init__(message, RelayErrorCode.AUTH_ERROR)


class TransportError(RelayError):
    """Raised when the request for a target fails at the connection level."""

    def __init__(self, message: str, target: Optional[str] = None):
        super().__init__(message, RelayErrorCode.TRANSPORT_ERROR)
        self.target = target


class ProtocolError(RelayError):
    """Raised on a non-200 response or an undecodable response body."""

    def __init__(
        self,
        message: str,
        target: Optional[str] = None,
        status_code: Optional[int] = None,
        body: str = "",
    ):
        super().__init__(message, RelayErrorCode.PROTOCOL_ERROR)
        self.target = target
        self.status_code = status_code
        self.body = body
