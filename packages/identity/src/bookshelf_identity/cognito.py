"""Cognito adapter: user pool sign-up, confirmation, and sessions over HTTP.

Talks to the Cognito Identity Provider JSON API directly with httpx. The
calls used here are all unauthenticated at the AWS level (public app client,
no client secret), so no request signing is needed:

  SignUp, ConfirmSignUp, ResendConfirmationCode,
  InitiateAuth (USER_PASSWORD_AUTH, REFRESH_TOKEN_AUTH), RevokeToken

Protocol: POST / with X-Amz-Target: AWSCognitoIdentityProviderService.<Action>
and Content-Type: application/x-amz-json-1.1. Errors come back as 4xx with
{"__type": "UsernameExistsException", "message": "..."}: the __type may be
namespaced ("...#UsernameExistsException"), so we keep the last segment.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
from bookshelf_shared.auth_models import (
    AuthSession,
    AuthTokens,
    CodeDelivery,
    SignInResult,
    SignUpResult,
)
from bookshelf_shared.config import Settings
from bookshelf_shared.errors import IdentityProviderError

from bookshelf_identity.base import IdentityProvider
from bookshelf_identity.tokens import TokenStore

logger = logging.getLogger(__name__)

TARGET_PREFIX = "AWSCognitoIdentityProviderService"
CONTENT_TYPE = "application/x-amz-json-1.1"


def _provider_error(response: httpx.Response) -> IdentityProviderError:
    """Build an IdentityProviderError from a Cognito error response."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    error_type = body.get("__type") or response.headers.get("x-amzn-ErrorType", "")
    # Header form is "UsernameExistsException:http://internal.amazon.com/..."
    name = str(error_type).split(":", 1)[0].rsplit("#", 1)[-1] or "UnknownError"
    message = body.get("message") or body.get("Message") or f"HTTP {response.status_code}"
    return IdentityProviderError(name, message)


class CognitoIdentityProvider(IdentityProvider):
    """Identity provider backed by an Amazon Cognito user pool."""

    def __init__(self, settings: Settings, token_store: TokenStore | None = None) -> None:
        super().__init__(token_store)
        self.settings = settings
        self._client: httpx.AsyncClient | None = None

    @property
    def client_id(self) -> str:
        return self.settings.cognito_client_id

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client for the Cognito endpoint."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.settings.identity_endpoint,
                timeout=self.settings.request_timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _call(self, action: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Invoke one Cognito action and return the decoded JSON body."""
        client = await self._get_client()
        headers = {
            "Content-Type": CONTENT_TYPE,
            "X-Amz-Target": f"{TARGET_PREFIX}.{action}",
        }
        try:
            response = await client.post("/", content=json.dumps(payload), headers=headers)
        except httpx.HTTPError as e:
            raise IdentityProviderError("NetworkError", f"{action} request failed: {e}") from e

        if response.is_error:
            error = _provider_error(response)
            logger.info(f"Cognito {action} rejected: {error.name}: {error.message}")
            raise error
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise IdentityProviderError(
                "InvalidResponse", f"{action} returned a non-JSON body"
            ) from e

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def sign_up(
        self, username: str, password: str, attributes: dict[str, str]
    ) -> SignUpResult:
        data = await self._call(
            "SignUp",
            {
                "ClientId": self.client_id,
                "Username": username,
                "Password": password,
                "UserAttributes": [
                    {"Name": name, "Value": value} for name, value in attributes.items()
                ],
            },
        )
        confirmed = bool(data.get("UserConfirmed", False))
        delivery = data.get("CodeDeliveryDetails") or {}
        return SignUpResult(
            is_sign_up_complete=confirmed,
            user_id=data.get("UserSub"),
            next_step="DONE" if confirmed else "CONFIRM_SIGN_UP",
            delivery_destination=delivery.get("Destination"),
        )

    async def confirm_sign_up(self, username: str, code: str) -> None:
        await self._call(
            "ConfirmSignUp",
            {"ClientId": self.client_id, "Username": username, "ConfirmationCode": code},
        )

    async def resend_sign_up_code(self, username: str) -> CodeDelivery:
        data = await self._call(
            "ResendConfirmationCode",
            {"ClientId": self.client_id, "Username": username},
        )
        delivery = data.get("CodeDeliveryDetails") or {}
        return CodeDelivery(
            destination=delivery.get("Destination"),
            delivery_medium=delivery.get("DeliveryMedium"),
            attribute_name=delivery.get("AttributeName"),
        )

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def sign_in(self, username: str, password: str) -> SignInResult:
        data = await self._call(
            "InitiateAuth",
            {
                "AuthFlow": "USER_PASSWORD_AUTH",
                "ClientId": self.client_id,
                "AuthParameters": {"USERNAME": username, "PASSWORD": password},
            },
        )
        result = data.get("AuthenticationResult")
        if not result:
            # MFA, NEW_PASSWORD_REQUIRED, etc.: not signed in yet
            return SignInResult(
                is_signed_in=False, next_step=data.get("ChallengeName", "UNKNOWN")
            )

        self.tokens.save(self._tokens_from(result))
        return SignInResult(is_signed_in=True)

    async def sign_out(self) -> None:
        tokens = self.tokens.load()
        try:
            if tokens and tokens.refresh_token:
                await self._call(
                    "RevokeToken",
                    {"Token": tokens.refresh_token, "ClientId": self.client_id},
                )
        finally:
            self.tokens.clear()

    async def fetch_session(self) -> AuthSession:
        """Return the held session, refreshing an expired ID token on demand."""
        tokens = self.tokens.load()
        if tokens is None:
            return AuthSession()

        if self.tokens.is_expired():
            if not tokens.refresh_token:
                self.tokens.clear()
                return AuthSession()
            try:
                tokens = await self._refresh(tokens.refresh_token)
            except IdentityProviderError as e:
                logger.info(f"Session refresh failed ({e.name}): signing out locally")
                self.tokens.clear()
                return AuthSession()

        return self._session_for(tokens)

    async def _refresh(self, refresh_token: str) -> AuthTokens:
        data = await self._call(
            "InitiateAuth",
            {
                "AuthFlow": "REFRESH_TOKEN_AUTH",
                "ClientId": self.client_id,
                "AuthParameters": {"REFRESH_TOKEN": refresh_token},
            },
        )
        result = data.get("AuthenticationResult")
        if not result:
            raise IdentityProviderError("NotAuthorizedException", "Refresh returned no tokens")
        # Cognito does not rotate the refresh token on REFRESH_TOKEN_AUTH
        tokens = self._tokens_from(result, refresh_token=refresh_token)
        self.tokens.save(tokens)
        return tokens

    @staticmethod
    def _tokens_from(result: dict[str, Any], refresh_token: str | None = None) -> AuthTokens:
        expires_in = int(result.get("ExpiresIn", 3600))
        return AuthTokens(
            id_token=result["IdToken"],
            access_token=result["AccessToken"],
            refresh_token=result.get("RefreshToken", refresh_token),
            expires_at=datetime.now(UTC) + timedelta(seconds=expires_in),
        )
