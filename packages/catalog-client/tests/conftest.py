"""Fixtures for catalog client tests.

The identity provider is an AsyncMock whose fetch_session returns a session
holding a fixed ID token; the HTTP client goes through the shared
MockTransport.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import httpx
import pytest
from bookshelf_catalog.client import CatalogClient
from bookshelf_shared.auth_models import AuthSession, AuthTokens

ID_TOKEN = "id-token-abc"


@pytest.fixture
def signed_in_identity():
    identity = AsyncMock()
    identity.fetch_session = AsyncMock(
        return_value=AuthSession(
            tokens=AuthTokens(
                id_token=ID_TOKEN,
                access_token="access",
                expires_at=datetime.now(UTC) + timedelta(hours=1),
            ),
            user_sub="sub-1",
        )
    )
    return identity


@pytest.fixture
async def catalog(settings, transport, signed_in_identity):
    client = CatalogClient(settings, signed_in_identity)
    client._client = httpx.AsyncClient(transport=transport, base_url=settings.api_base_url)
    yield client
    await client.close()


@pytest.fixture
def book_json() -> dict:
    return {
        "id": "b1",
        "title": "The Left Hand of Darkness",
        "author": "Ursula K. Le Guin",
        "genre": "Science Fiction",
        "description": "An envoy on the planet Gethen.",
        "coverImage": "https://img.test/lhod.jpg",
        "rating": 4.6,
        "publishedYear": 1969,
        "isbn": "9780441478125",
    }


@pytest.fixture
def reading_list_json() -> dict:
    return {
        "id": "rl1",
        "userId": "sub-1",
        "name": "Winter reads",
        "description": "Cold planets",
        "bookIds": ["b1"],
        "isPublic": False,
        "createdAt": "2024-12-01T08:00:00Z",
        "updatedAt": "2024-12-02T08:00:00Z",
    }
