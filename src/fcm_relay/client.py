"""FCM v1 delivery client.

Validates a legacy message, exchanges the caller's service-account
credentials for a bearer token, and posts one v1 message per target to
the send endpoint, strictly in target order.
"""

from typing import Optional
import logging
import time

import httpx

from src.fcm_relay.auth import ServiceAccountTokenProvider, TokenProvider
from src.fcm_relay.config import DEFAULT_RELAY_CONFIG, RelayConfig, endpoint_for_project
from src.fcm_relay.exceptions import ConfigError, ProtocolError, TransportError
from src.fcm_relay.models import (
    BearerToken,
    DeliveryResult,
    LegacyMessage,
    TargetOutcome,
    WireMessage,
)
from src.fcm_relay.translate import encode_message, translate_all
from src.fcm_relay.validation import validate_message
from src.logging_config.context import SendContext

logger = logging.getLogger(__name__)


class FCMClient:
    """Relays legacy push requests to the FCM v1 send endpoint.

    The api_key is kept for compatibility with legacy callers; requests are
    authorized with the bearer token obtained on every send.

    Example:
        with FCMClient.for_project("my-project", api_key="...") as client:
            results = client.send(new_message({"k": "v"}, "tok1"), credentials_json)
    """

    def __init__(
        self,
        endpoint_url: str,
        api_key: str,
        http_client: Optional[httpx.Client] = None,
        token_provider: Optional[TokenProvider] = None,
        config: Optional[RelayConfig] = None,
    ):
        if not endpoint_url:
            raise ConfigError("missing FCM endpoint url")
        if not api_key:
            raise ConfigError("missing API key")

        try:
            url = httpx.URL(endpoint_url)
        except httpx.InvalidURL as e:
            raise ConfigError(f"failed to parse URL {endpoint_url!r}: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ConfigError(f"failed to parse URL {endpoint_url!r}: expected an absolute http(s) URL")

        self._config = config or DEFAULT_RELAY_CONFIG
        self._endpoint_url = endpoint_url
        self._api_key = api_key
        self._owns_http = http_client is None
        self._http = http_client or httpx.Client(
            timeout=self._config.request_timeout,
            headers={"User-Agent": self._config.user_agent},
        )
        self._token_provider = token_provider or ServiceAccountTokenProvider(
            scope=self._config.scope
        )

    @classmethod
    def for_project(cls, project_id: str, api_key: str, **kwargs) -> "FCMClient":
        """Build a client for the v1 send endpoint of a Firebase project."""
        if not project_id:
            raise ConfigError("missing Firebase project id")
        return cls(endpoint_for_project(project_id), api_key, **kwargs)

    @property
    def endpoint_url(self) -> str:
        return self._endpoint_url

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def config(self) -> RelayConfig:
        return self._config

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "FCMClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ── Sending ──────────────────────────────────────────────────────

    def send(self, message: LegacyMessage, credentials: bytes) -> list[DeliveryResult]:
        """Send a message to every target, without retrying.

        Delivery stops at the first failing target and the error is raised;
        targets before it may already have received the message.

        Returns:
            One DeliveryResult per target, in target order.

        Raises:
            ValidationError: Before any network activity.
            AuthError: If the token exchange fails; nothing is posted.
            TransportError: On a connection failure for a target.
            ProtocolError: On a non-200 status or undecodable body.
        """
        validate_message(message, self._config)
        token = self._token_provider.fetch_token(credentials)

        results = []
        with SendContext(target_count=len(message.targets)) as ctx:
            for wire in translate_all(message):
                ctx.bind(target=wire.token)
                results.append(self._deliver(wire, token))
            logger.info(f"Delivered message to {len(results)} target(s) in {ctx.elapsed_ms:.0f}ms")
        return results

    def send_first(self, message: LegacyMessage, credentials: bytes) -> DeliveryResult:
        """Send to every target and return only the first target's result."""
        return self.send(message, credentials)[0]

    def send_each(self, message: LegacyMessage, credentials: bytes) -> list[TargetOutcome]:
        """Send to every target, recording per-target failures instead of stopping.

        Validation and token errors still raise, since they affect every
        target alike.
        """
        validate_message(message, self._config)
        token = self._token_provider.fetch_token(credentials)

        outcomes = []
        with SendContext(target_count=len(message.targets)) as ctx:
            for wire in translate_all(message):
                ctx.bind(target=wire.token)
                start_time = time.time()
                try:
                    result = self._deliver(wire, token)
                except (TransportError, ProtocolError) as e:
                    outcome = TargetOutcome(
                        target=wire.token,
                        success=False,
                        error_code=e.error_code.value,
                        error_message=e.message,
                        status_code=getattr(e, "status_code", None),
                        latency_ms=int((time.time() - start_time) * 1000),
                    )
                    logger.warning(
                        f"Delivery failed: {e.message}",
                        extra={
                            "error_code": outcome.error_code,
                            "status_code": outcome.status_code,
                            "latency_ms": outcome.latency_ms,
                        },
                    )
                    outcomes.append(outcome)
                    continue

                outcomes.append(
                    TargetOutcome(
                        target=wire.token,
                        success=True,
                        result=result,
                        latency_ms=int((time.time() - start_time) * 1000),
                    )
                )

            failed = sum(1 for o in outcomes if not o.success)
            logger.info(f"Delivered message to {len(outcomes) - failed}/{len(outcomes)} target(s)")
        return outcomes

    def _deliver(self, wire: WireMessage, token: BearerToken) -> DeliveryResult:
        """POST one v1 message and decode the response."""
        body = encode_message(wire)

        try:
            resp = self._http.post(
                self._endpoint_url,
                content=body,
                headers={
                    "Authorization": token.authorization_header(),
                    "Content-Type": "application/json",
                },
            )
        except httpx.RequestError as e:
            raise TransportError(f"request to {self._endpoint_url} failed: {e}", target=wire.token) from e

        if resp.status_code != 200:
            raise ProtocolError(
                f"invalid status code {resp.status_code}: {resp.reason_phrase}",
                target=wire.token,
                status_code=resp.status_code,
                body=resp.text,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise ProtocolError(
                f"undecodable response body: {e}",
                target=wire.token,
                status_code=resp.status_code,
                body=resp.text,
            ) from e

        logger.debug(f"Delivered to target, response: {data}")
        return DeliveryResult.from_api(data, wire.token)


def new_client(endpoint_url: str, api_key: str, **kwargs) -> FCMClient:
    """Return a client for the given endpoint and API key.

    Raises:
        ConfigError: If either argument is empty or the URL is malformed.
    """
    return FCMClient(endpoint_url, api_key, **kwargs)
