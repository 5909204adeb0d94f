"""In-memory identity provider for local development.

Used when no Cognito app client is configured. Mirrors the Cognito error
names the rest of the code reacts to (UsernameExistsException,
CodeMismatchException, NotAuthorizedException, ...), so the sign-up flow
behaves the same against it.

Verification codes are not emailed: they are recorded in sent_codes,
keyed by username, so a developer (or a test) can read them back.
"""

from __future__ import annotations

import logging
import secrets
import time
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import jwt as pyjwt
from bookshelf_shared.auth_models import (
    AuthSession,
    AuthTokens,
    CodeDelivery,
    SignInResult,
    SignUpResult,
)
from bookshelf_shared.errors import IdentityProviderError

from bookshelf_identity.base import IdentityProvider
from bookshelf_identity.tokens import TokenStore

logger = logging.getLogger(__name__)

TOKEN_LIFETIME = timedelta(hours=1)


@dataclass
class LocalAccount:
    sub: str
    password: str
    attributes: dict[str, str] = field(default_factory=dict)
    confirmed: bool = False


class LocalIdentityProvider(IdentityProvider):
    """Identity provider that keeps accounts in a dict."""

    def __init__(
        self,
        token_store: TokenStore | None = None,
        signing_key: str = "local-dev-signing-key-not-for-production",
    ) -> None:
        super().__init__(token_store)
        self.accounts: dict[str, LocalAccount] = {}
        self.sent_codes: dict[str, str] = {}
        self._signing_key = signing_key

    def _send_code(self, username: str) -> CodeDelivery:
        code = f"{secrets.randbelow(1_000_000):06d}"
        self.sent_codes[username] = code
        logger.info(f"Local identity: verification code for '{username}' is {code}")
        return CodeDelivery(destination=username, delivery_medium="EMAIL", attribute_name="email")

    def _account(self, username: str) -> LocalAccount:
        account = self.accounts.get(username)
        if account is None:
            raise IdentityProviderError(
                "UserNotFoundException", "Username/client id combination not found."
            )
        return account

    async def sign_up(
        self, username: str, password: str, attributes: dict[str, str]
    ) -> SignUpResult:
        if username in self.accounts:
            raise IdentityProviderError("UsernameExistsException", "User already exists")
        if len(password) < 8:
            raise IdentityProviderError(
                "InvalidPasswordException", "Password did not conform with policy"
            )

        account = LocalAccount(
            sub=str(uuid.uuid4()), password=password, attributes=dict(attributes)
        )
        self.accounts[username] = account
        delivery = self._send_code(username)
        return SignUpResult(
            is_sign_up_complete=False,
            user_id=account.sub,
            delivery_destination=delivery.destination,
        )

    async def confirm_sign_up(self, username: str, code: str) -> None:
        account = self._account(username)
        if self.sent_codes.get(username) != code:
            raise IdentityProviderError(
                "CodeMismatchException", "Invalid verification code provided, please try again."
            )
        account.confirmed = True
        self.sent_codes.pop(username, None)

    async def resend_sign_up_code(self, username: str) -> CodeDelivery:
        account = self._account(username)
        if account.confirmed:
            raise IdentityProviderError("InvalidParameterException", "User is already confirmed.")
        return self._send_code(username)

    async def sign_in(self, username: str, password: str) -> SignInResult:
        account = self.accounts.get(username)
        if account is None or account.password != password:
            raise IdentityProviderError("NotAuthorizedException", "Incorrect username or password.")
        if not account.confirmed:
            raise IdentityProviderError("UserNotConfirmedException", "User is not confirmed.")

        self.tokens.save(self._issue_tokens(username, account))
        return SignInResult(is_signed_in=True)

    async def sign_out(self) -> None:
        self.tokens.clear()

    async def fetch_session(self) -> AuthSession:
        tokens = self.tokens.load()
        if tokens is None:
            return AuthSession()
        if self.tokens.is_expired():
            self.tokens.clear()
            return AuthSession()
        return self._session_for(tokens)

    def _issue_tokens(self, username: str, account: LocalAccount) -> AuthTokens:
        exp = int(time.time() + TOKEN_LIFETIME.total_seconds())
        claims = {
            "sub": account.sub,
            "cognito:username": username,
            "email": account.attributes.get("email", username),
            "exp": exp,
        }
        id_token = pyjwt.encode({**claims, "token_use": "id"}, self._signing_key, algorithm="HS256")
        access_token = pyjwt.encode(
            {**claims, "token_use": "access"}, self._signing_key, algorithm="HS256"
        )
        return AuthTokens(
            id_token=id_token,
            access_token=access_token,
            refresh_token=None,
            expires_at=datetime.fromtimestamp(exp, UTC),
        )
