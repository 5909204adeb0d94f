"""Fixtures for identity adapter tests."""

from __future__ import annotations

import time

import httpx
import pytest
from bookshelf_identity.cognito import CognitoIdentityProvider
from bookshelf_identity.local import LocalIdentityProvider


@pytest.fixture
async def cognito(settings, transport):
    """A Cognito adapter whose HTTP client goes through the mock transport."""
    provider = CognitoIdentityProvider(settings)
    provider._client = httpx.AsyncClient(
        transport=transport, base_url=settings.identity_endpoint
    )
    yield provider
    await provider.close()


@pytest.fixture
def local_identity() -> LocalIdentityProvider:
    return LocalIdentityProvider()


@pytest.fixture
def auth_result(make_id_token):
    """Factory: a Cognito AuthenticationResult body."""

    def _make(expires_in: int = 3600, refresh_token: str | None = "refresh-1", **claims):
        result = {
            "IdToken": make_id_token(exp=int(time.time()) + expires_in, **claims),
            "AccessToken": "access-token",
            "ExpiresIn": expires_in,
            "TokenType": "Bearer",
        }
        if refresh_token:
            result["RefreshToken"] = refresh_token
        return {"AuthenticationResult": result}

    return _make
