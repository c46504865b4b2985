"""Bearer token acquisition for the v1 send endpoint.

The relay never caches tokens: every send exchanges the caller's
service-account credential blob for a fresh access token.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional
import json
import logging

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from src.fcm_relay.config import FCM_SCOPE
from src.fcm_relay.exceptions import AuthError
from src.fcm_relay.models import BearerToken

logger = logging.getLogger(__name__)


class TokenProvider(ABC):
    """Exchanges a credential blob for a bearer token."""

    @abstractmethod
    def fetch_token(self, credentials: bytes) -> BearerToken:
        """Return a token for the configured scope.

        Raises:
            AuthError: If the exchange fails for any reason.
        """


class ServiceAccountTokenProvider(TokenProvider):
    """OAuth2 service-account flow backed by google-auth."""

    def __init__(self, scope: str = FCM_SCOPE, request: Optional[Any] = None):
        self.scope = scope
        self._request = request

    def fetch_token(self, credentials: bytes) -> BearerToken:
        try:
            info = json.loads(credentials)
        except (TypeError, ValueError) as e:
            raise AuthError(f"error reading credentials: {e}") from e

        if not isinstance(info, dict):
            raise AuthError("error reading credentials: expected a JSON object")

        try:
            creds = service_account.Credentials.from_service_account_info(
                info, scopes=[self.scope]
            )
        except (KeyError, ValueError) as e:
            raise AuthError(f"error getting credentials: {e}") from e

        try:
            creds.refresh(self._request or Request())
        except GoogleAuthError as e:
            raise AuthError(f"error getting token: {e}") from e

        if not creds.token:
            raise AuthError("error getting token: empty access token")

        logger.debug(f"Obtained access token for {info.get('client_email', 'unknown account')}")
        return BearerToken(access_token=creds.token, expiry=creds.expiry)
