"""Fixtures for view controller tests.

AuthState is replaced by an AsyncMock so each test decides which auth
operations succeed or fail; navigate and on_error are plain MagicMocks.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from bookshelf_web.signup import SignupDraft, SignupView


@pytest.fixture
def auth():
    state = AsyncMock()
    state.is_authenticated = False
    return state


@pytest.fixture
def navigate() -> MagicMock:
    return MagicMock()


@pytest.fixture
def on_error() -> MagicMock:
    return MagicMock()


@pytest.fixture
def valid_draft() -> SignupDraft:
    return SignupDraft(
        name="Ursula",
        email="existing@x.com",
        password="Secret123",
        confirm_password="Secret123",
    )


@pytest.fixture
def signup_view(auth, navigate, on_error, valid_draft) -> SignupView:
    view = SignupView(auth, navigate=navigate, on_error=on_error)
    view.draft = valid_draft
    return view
