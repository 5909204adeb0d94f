"""Catalog boundary models: the contract between the API client and the backend.

Design choices:
  - The backend speaks camelCase JSON (coverImage, bookIds, createdAt). Models
    use snake_case attributes with camelCase aliases, and accept either name
    when parsing so tests and callers can construct them naturally.
  - Draft models are the payloads for create calls (no server-assigned fields).
    Update models have every field optional; only fields the caller set are
    sent, so a partial update never clobbers untouched fields.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CatalogModel(BaseModel):
    """Base for every model that crosses the HTTP boundary."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """Serialize for a request body: camelCase keys, unset fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


# ============================================================================
# Books
# ============================================================================


class BookDraft(CatalogModel):
    title: str
    author: str
    genre: str = ""
    description: str = ""
    cover_image: str = ""
    rating: float = 0.0
    published_year: int | None = None
    isbn: str = ""


class Book(BookDraft):
    id: str


class BookUpdate(CatalogModel):
    title: str | None = None
    author: str | None = None
    genre: str | None = None
    description: str | None = None
    cover_image: str | None = None
    rating: float | None = None
    published_year: int | None = None
    isbn: str | None = None


# ============================================================================
# Reading lists
# ============================================================================


class ReadingListDraft(CatalogModel):
    user_id: str
    name: str
    description: str = ""
    book_ids: list[str] = []
    is_public: bool = False


class ReadingList(ReadingListDraft):
    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReadingListUpdate(CatalogModel):
    name: str | None = None
    description: str | None = None
    book_ids: list[str] | None = None
    is_public: bool | None = None


# ============================================================================
# Reviews and recommendations
# ============================================================================


class ReviewDraft(CatalogModel):
    book_id: str
    user_id: str
    rating: int = Field(ge=1, le=5)
    comment: str = ""


class Review(ReviewDraft):
    id: str
    created_at: datetime


class Recommendation(CatalogModel):
    """AI-generated recommendations: free text from the backend."""

    recommendations: str
