"""Catalog API client: books, reading lists, reviews, recommendations.

Stateless request/response wrappers over one httpx AsyncClient rooted at the
configured base URL. Reading-list and recommendation calls carry the ID token
from the identity provider as a bearer token; book reads and updates do not.

Error handling is flat: any non-2xx status or transport failure
raises RequestFailedError with an operation-specific message. The response
body is not inspected. The one status special case is get_book's 404 → None.

Some operations have no backend endpoint yet (create_book, delete_book,
get_reviews, create_review). They return canned data after
settings.mock_delay_seconds so callers can be written against the final
signatures today.

Usage:
    from bookshelf_catalog.client import get_catalog_client

    client = get_catalog_client()
    books = await client.get_books()
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import UTC, datetime
from typing import Any

import httpx
from bookshelf_identity.base import IdentityProvider
from bookshelf_shared.catalog_models import (
    Book,
    BookDraft,
    BookUpdate,
    ReadingList,
    ReadingListDraft,
    ReadingListUpdate,
    Recommendation,
    Review,
    ReviewDraft,
)
from bookshelf_shared.config import Settings
from bookshelf_shared.errors import NoAuthTokenError, RequestFailedError

logger = logging.getLogger(__name__)


def _new_id() -> str:
    """Epoch milliseconds as a string: the stand-in endpoints' id scheme."""
    return str(int(time.time() * 1000))


class CatalogClient:
    """Client for the Bookshelf HTTP backend."""

    def __init__(self, settings: Settings, identity: IdentityProvider) -> None:
        self.settings = settings
        self.identity = identity
        self._client: httpx.AsyncClient | None = None
        logger.debug(f"Catalog API base URL: {settings.api_base_url}")

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client for the backend."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.api_base_url,
                timeout=self.settings.request_timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _auth_headers(self) -> dict[str, str]:
        """Bearer headers from the current session's ID token."""
        session = await self.identity.fetch_session()
        token = session.tokens.id_token if session.tokens else None
        if not token:
            raise NoAuthTokenError()
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }

    async def _send(
        self, method: str, url: str, failure_message: str, **kwargs: Any
    ) -> httpx.Response:
        """Send one request. Transport failures become RequestFailedError."""
        client = await self._get_client()
        try:
            return await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise RequestFailedError(failure_message) from e

    @staticmethod
    def _ensure_ok(response: httpx.Response, failure_message: str) -> httpx.Response:
        if not response.is_success:
            logger.error(
                f"{response.request.method} {response.request.url} "
                f"returned {response.status_code}"
            )
            raise RequestFailedError(failure_message, status_code=response.status_code)
        return response

    async def _request(
        self, method: str, url: str, failure_message: str, **kwargs: Any
    ) -> httpx.Response:
        response = await self._send(method, url, failure_message, **kwargs)
        return self._ensure_ok(response, failure_message)

    # ------------------------------------------------------------------
    # Books
    # ------------------------------------------------------------------

    async def get_books(self) -> list[Book]:
        """Get all books from the catalog."""
        response = await self._request("GET", "/books", "Failed to fetch books")
        return [Book.model_validate(item) for item in response.json()]

    async def get_book(self, book_id: str) -> Book | None:
        """Get a single book by id. A missing book is None, not an error."""
        message = "Failed to fetch book"
        response = await self._send("GET", f"/books/{book_id}", message)
        if response.status_code == 404:
            return None
        self._ensure_ok(response, message)
        return Book.model_validate(response.json())

    async def create_book(self, draft: BookDraft) -> Book:
        """Create a new book (admin only). Stand-in: no backend endpoint yet."""
        await asyncio.sleep(self.settings.mock_delay_seconds)
        return Book(**draft.model_dump(), id=_new_id())

    async def update_book(self, book_id: str, update: BookUpdate) -> Book:
        response = await self._request(
            "PUT",
            f"/books/{book_id}",
            "Failed to update book",
            json=update.to_payload(),
            headers={"Content-Type": "application/json"},
        )
        return Book.model_validate(response.json())

    async def delete_book(self, book_id: str) -> None:
        """Delete a book (admin only). Stand-in: no backend endpoint yet."""
        logger.debug(f"delete_book({book_id!r}) is not backed by the API yet")
        await asyncio.sleep(self.settings.mock_delay_seconds)

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    async def get_recommendations(self, query: str) -> Recommendation:
        """AI-powered book recommendations for a free-text query."""
        headers = await self._auth_headers()
        response = await self._request(
            "POST",
            "/recommendations",
            "Failed to fetch recommendations",
            json={"query": query},
            headers=headers,
        )
        return Recommendation.model_validate(response.json())

    # ------------------------------------------------------------------
    # Reading lists
    # ------------------------------------------------------------------

    async def get_reading_lists(self) -> list[ReadingList]:
        """Get the signed-in user's reading lists."""
        headers = await self._auth_headers()
        response = await self._request(
            "GET", "/reading-lists", "Failed to fetch reading lists", headers=headers
        )
        return [ReadingList.model_validate(item) for item in response.json()]

    async def create_reading_list(self, draft: ReadingListDraft) -> ReadingList:
        headers = await self._auth_headers()
        response = await self._request(
            "POST",
            "/reading-lists",
            "Failed to create reading list",
            json=draft.model_dump(mode="json", by_alias=True),
            headers=headers,
        )
        return ReadingList.model_validate(response.json())

    async def update_reading_list(self, list_id: str, update: ReadingListUpdate) -> ReadingList:
        headers = await self._auth_headers()
        response = await self._request(
            "PUT",
            f"/reading-lists/{list_id}",
            "Failed to update reading list",
            json=update.to_payload(),
            headers=headers,
        )
        return ReadingList.model_validate(response.json())

    async def delete_reading_list(self, list_id: str) -> None:
        headers = await self._auth_headers()
        await self._request(
            "DELETE",
            f"/reading-lists/{list_id}",
            "Failed to delete reading list",
            headers=headers,
        )

    # ------------------------------------------------------------------
    # Reviews: stand-ins until the reviews API exists
    # ------------------------------------------------------------------

    async def get_reviews(self, book_id: str) -> list[Review]:
        await asyncio.sleep(self.settings.mock_delay_seconds)
        return [
            Review(
                id="1",
                book_id=book_id,
                user_id="1",
                rating=5,
                comment="Absolutely loved this book! A must-read.",
                created_at=datetime(2024, 11, 1, 10, 0, tzinfo=UTC),
            )
        ]

    async def create_review(self, draft: ReviewDraft) -> Review:
        await asyncio.sleep(self.settings.mock_delay_seconds)
        return Review(**draft.model_dump(), id=_new_id(), created_at=datetime.now(UTC))


# ============================================================================
# Singleton management
# ============================================================================

_client: CatalogClient | None = None


def get_catalog_client() -> CatalogClient:
    """Return the shared CatalogClient."""
    if _client is None:
        raise RuntimeError("get_catalog_client() called before set_catalog_client()")
    return _client


def set_catalog_client(client: CatalogClient) -> None:
    """Install the shared client: called by application wiring and tests."""
    global _client
    _client = client


def reset_catalog_client() -> None:
    """Drop the shared client: used in tests."""
    global _client
    _client = None
