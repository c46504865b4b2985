"""Pytest configuration and shared fixtures."""

import json
import sys
from pathlib import Path

import httpx
import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.fcm_relay.auth import TokenProvider  # noqa: E402
from src.fcm_relay.exceptions import AuthError  # noqa: E402
from src.fcm_relay.models import BearerToken  # noqa: E402

ENDPOINT = "https://fcm.googleapis.com/v1/projects/x/messages:send"


class StubTokenProvider(TokenProvider):
    """Token provider returning a fixed token, or failing on demand."""

    def __init__(self, token: str = "test-token", fail: bool = False):
        self.token = token
        self.fail = fail
        self.calls: list[bytes] = []

    def fetch_token(self, credentials: bytes) -> BearerToken:
        self.calls.append(credentials)
        if self.fail:
            raise AuthError("error getting token: denied")
        return BearerToken(access_token=self.token)


class RecordingHandler:
    """httpx.MockTransport handler that records requests.

    ``responses`` is consumed in order; once exhausted every request gets
    a 200 with a generated message name.
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        return httpx.Response(200, json={"name": f"projects/x/messages/{len(self.requests)}"})

    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def token_provider():
    return StubTokenProvider()


@pytest.fixture
def handler():
    return RecordingHandler()


@pytest.fixture
def http_client(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    yield client
    client.close()


@pytest.fixture
def client(http_client, token_provider):
    from src.fcm_relay.client import FCMClient

    return FCMClient(ENDPOINT, "api-key", http_client=http_client, token_provider=token_provider)
