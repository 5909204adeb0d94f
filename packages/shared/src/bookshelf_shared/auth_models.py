"""Auth domain models: shared between the identity adapter and auth state.

The identity adapter returns AuthSession/CurrentUser/SignInResult etc. from
provider responses; the auth state turns a successful session check into a
User and publishes it. User is frozen: only the auth state constructs or
replaces it, everything else reads it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

Role = Literal["user", "admin"]


class User(BaseModel):
    """The signed-in user as published by the auth state."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    name: str
    role: Role = "user"
    created_at: datetime


class AuthTokens(BaseModel):
    """Tokens issued by the identity provider for the current session."""

    id_token: str
    access_token: str
    refresh_token: str | None = None
    expires_at: datetime


class AuthSession(BaseModel):
    """Result of fetch_session: tokens is None when nobody is signed in."""

    tokens: AuthTokens | None = None
    user_sub: str | None = None


class CurrentUser(BaseModel):
    user_id: str
    username: str


class TokenClaims(BaseModel):
    """Decoded ID token claims."""

    user_id: str
    username: str
    email: str = ""
    exp: int


class SignUpResult(BaseModel):
    is_sign_up_complete: bool
    user_id: str | None = None
    next_step: str = "CONFIRM_SIGN_UP"  # CONFIRM_SIGN_UP, DONE
    delivery_destination: str | None = None


class SignInResult(BaseModel):
    is_signed_in: bool
    next_step: str = "DONE"  # DONE or the provider's challenge name


class CodeDelivery(BaseModel):
    """Where the provider sent a verification code."""

    destination: str | None = None
    delivery_medium: str | None = None  # EMAIL, SMS
    attribute_name: str | None = None
