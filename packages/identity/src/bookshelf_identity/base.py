"""Identity provider contract: the stable local interface over the provider.

The ABC lists the operations the auth state and API client consume:

  sign_up / confirm_sign_up / resend_sign_up_code: registration
  sign_in / sign_out                             : session lifecycle
  fetch_session / get_current_user               : session inspection

Both adapters keep tokens in a TokenStore, so the parts that only read the
held tokens (get_current_user, session assembly) live here. Every operation
is a single best-effort round trip: no retries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import jwt as pyjwt
from bookshelf_shared.auth_models import (
    AuthSession,
    AuthTokens,
    CodeDelivery,
    CurrentUser,
    SignInResult,
    SignUpResult,
    TokenClaims,
)
from bookshelf_shared.errors import NotSignedInError

from bookshelf_identity.tokens import TokenStore, read_token_claims


class IdentityProvider(ABC):
    """Abstract base for identity provider adapters."""

    def __init__(self, token_store: TokenStore | None = None) -> None:
        self.tokens = token_store or TokenStore()

    @abstractmethod
    async def sign_up(
        self, username: str, password: str, attributes: dict[str, str]
    ) -> SignUpResult:
        """Register a new account. The provider sends a confirmation code."""

    @abstractmethod
    async def confirm_sign_up(self, username: str, code: str) -> None:
        """Confirm a registration with the code the user received."""

    @abstractmethod
    async def resend_sign_up_code(self, username: str) -> CodeDelivery:
        """Ask the provider to send a fresh confirmation code."""

    @abstractmethod
    async def sign_in(self, username: str, password: str) -> SignInResult:
        """Authenticate and store the issued tokens."""

    @abstractmethod
    async def sign_out(self) -> None:
        """End the session. Local tokens are always cleared."""

    @abstractmethod
    async def fetch_session(self) -> AuthSession:
        """Return the current session; tokens is None when signed out."""

    async def get_current_user(self) -> CurrentUser:
        """Read the signed-in user's id and username from the held ID token."""
        tokens = self.tokens.load()
        if tokens is None:
            raise NotSignedInError()
        claims = self._claims(tokens.id_token)
        return CurrentUser(user_id=claims.user_id, username=claims.username)

    async def close(self) -> None:
        """Release network resources. No-op for adapters that hold none."""

    def _session_for(self, tokens: AuthTokens) -> AuthSession:
        claims = self._claims(tokens.id_token, verify_exp=False)
        return AuthSession(tokens=tokens, user_sub=claims.user_id)

    @staticmethod
    def _claims(token: str, verify_exp: bool = True) -> TokenClaims:
        try:
            return read_token_claims(token, verify_exp=verify_exp)
        except pyjwt.PyJWTError as e:
            raise NotSignedInError(f"Session token is not usable: {e}") from e
