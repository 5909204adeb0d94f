"""ID token handling for the identity adapters.

The provider issues JWTs; we never verify signatures locally (the backend's
authorizer does that). We only read claims (sub, cognito:username, email,
exp) to answer get_current_user, and enforce expiry while doing so.

TokenStore is the in-memory session storage. There is no on-disk
persistence: a new process starts signed out.
"""

from __future__ import annotations

from datetime import UTC, datetime

import jwt as pyjwt
from bookshelf_shared.auth_models import AuthTokens, TokenClaims


def read_token_claims(token: str, verify_exp: bool = True) -> TokenClaims:
    """Decode an ID token's claims without verifying its signature.

    Args:
        token: The raw JWT string issued by the identity provider.
        verify_exp: Reject expired tokens (default). fetch_session turns this
            off to read the subject of a token it is about to refresh.

    Returns:
        TokenClaims with user_id, username, email, and expiry.

    Raises:
        pyjwt.ExpiredSignatureError: Token has expired.
        pyjwt.MissingRequiredClaimError: sub or exp missing.
        pyjwt.DecodeError: Malformed token.
    """
    payload = pyjwt.decode(
        token,
        options={
            "verify_signature": False,
            "verify_exp": verify_exp,
            "require": ["exp", "sub"],
        },
    )

    return TokenClaims(
        user_id=payload["sub"],
        username=payload.get("cognito:username", payload["sub"]),
        email=payload.get("email", ""),
        exp=payload["exp"],
    )


class TokenStore:
    """Holds the current session's tokens in memory."""

    def __init__(self, tokens: AuthTokens | None = None) -> None:
        self._tokens = tokens

    def load(self) -> AuthTokens | None:
        return self._tokens

    def save(self, tokens: AuthTokens) -> None:
        self._tokens = tokens

    def clear(self) -> None:
        self._tokens = None

    def is_expired(self, now: datetime | None = None) -> bool:
        """True when tokens are held and past their expiry."""
        if self._tokens is None:
            return False
        return self._tokens.expires_at <= (now or datetime.now(UTC))
