"""Shared test fixtures for all Bookshelf packages.

Provides:
  - Mock HTTP transport for httpx (intercepts all requests)
  - Settings pointing at fake endpoints, with zero stand-in delay
  - An ID token factory that mints Cognito-shaped JWTs
  - Singleton resets so no test leaks state into the next
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator

import httpx
import jwt as pyjwt
import pytest
from bookshelf_auth.state import reset_auth_state
from bookshelf_catalog.client import reset_catalog_client
from bookshelf_shared.config import Settings, reset_settings

TEST_SECRET = "test-signing-key-not-verified-client-side"


class MockTransport(httpx.AsyncBaseTransport):
    """Mock HTTP transport that returns preconfigured responses.

    Usage:
        transport.responses.append(httpx.Response(200, json={"items": [...]}))
        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get("https://example.com/api")

    Each call to handle_async_request pops the next response from the list.
    A response may also be an exception instance, which is raised instead.
    If the list is exhausted, returns a 500 error.
    """

    def __init__(self, responses: list[httpx.Response | Exception] | None = None) -> None:
        self.responses = list(responses or [])
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            response.stream = httpx.ByteStream(response.content)
            return response
        return httpx.Response(500, json={"error": "No more mock responses"})


@pytest.fixture
def transport() -> MockTransport:
    return MockTransport()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_base_url="https://api.test/prod",
        cognito_region="us-east-1",
        cognito_client_id="test-client-id",
        cognito_endpoint="https://cognito.test/",
        request_timeout=5.0,
        mock_delay_seconds=0.0,
    )


@pytest.fixture
def make_id_token() -> Callable[..., str]:
    """Factory: build a JWT with Cognito ID-token-shaped claims."""

    def _make(
        sub: str = "user-123",
        username: str = "reader@example.com",
        email: str = "reader@example.com",
        exp: int | None = None,
        **extra: object,
    ) -> str:
        payload: dict[str, object] = {
            "sub": sub,
            "cognito:username": username,
            "email": email,
            "exp": exp or int(time.time()) + 3600,
            "token_use": "id",
            **extra,
        }
        return pyjwt.encode(payload, TEST_SECRET, algorithm="HS256")

    return _make


@pytest.fixture(autouse=True)
def _reset_singletons() -> Iterator[None]:
    yield
    reset_settings()
    reset_auth_state()
    reset_catalog_client()
