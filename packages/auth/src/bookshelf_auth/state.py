"""Auth state provider: the session-scoped holder of the signed-in user.

One AuthState is constructed at application start and shared. It is the only
writer of the published state (user, is_loading); views and the API client
read it. Every operation is a single round trip through the identity
provider: no retries, no refresh scheduling.

Usage:
    from bookshelf_auth.state import init_auth_state

    auth = init_auth_state(provider)
    await auth.start()          # initial session check
    await auth.login(email, password)
    auth.user, auth.is_authenticated
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from bookshelf_identity.base import IdentityProvider
from bookshelf_shared.auth_models import User

logger = logging.getLogger(__name__)


class AuthState:
    """Holds the current user and exposes the auth operations."""

    def __init__(self, identity: IdentityProvider) -> None:
        self.identity = identity
        self._user: User | None = None
        self._is_loading = True

    @property
    def user(self) -> User | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def is_loading(self) -> bool:
        """True until the first session check has finished."""
        return self._is_loading

    async def start(self) -> None:
        """Run the initial session check."""
        await self.check_user()

    async def check_user(self) -> None:
        """Publish the user for the current session, or None if there isn't one.

        Role is always "user" and created_at is the time of the check; the
        provider's account data is not consulted for either.
        """
        try:
            await self.identity.fetch_session()
            current = await self.identity.get_current_user()
            self._user = User(
                id=current.user_id,
                email=current.username,
                name=current.username,
                role="user",
                created_at=datetime.now(UTC),
            )
        except Exception as e:
            logger.info(f"User not signed in: {e}")
            self._user = None
        finally:
            self._is_loading = False

    async def login(self, email: str, password: str) -> None:
        try:
            result = await self.identity.sign_in(email, password)
            if result.is_signed_in:
                await self.check_user()
            else:
                logger.info(f"Sign-in for '{email}' needs another step: {result.next_step}")
        except Exception as e:
            logger.error(f"Login failed: {e}")
            raise

    async def signup(self, email: str, password: str, name: str) -> None:
        try:
            await self.identity.sign_up(email, password, {"email": email, "name": name})
        except Exception as e:
            logger.error(f"Signup failed: {e}")
            raise

    async def verify_code(self, email: str, code: str) -> None:
        try:
            await self.identity.confirm_sign_up(email, code)
        except Exception as e:
            logger.error(f"Verification failed: {e}")
            raise

    async def resend_code(self, email: str) -> None:
        try:
            await self.identity.resend_sign_up_code(email)
        except Exception as e:
            logger.error(f"Resend code failed: {e}")
            raise

    async def logout(self) -> None:
        """Sign out and clear the user, even if the provider call fails."""
        try:
            await self.identity.sign_out()
        except Exception as e:
            logger.error(f"Logout failed: {e}")
        finally:
            self._user = None


# ============================================================================
# Singleton management
# ============================================================================

_auth_state: AuthState | None = None


def init_auth_state(identity: IdentityProvider) -> AuthState:
    """Create the session-scoped AuthState. Called once at application start."""
    global _auth_state
    _auth_state = AuthState(identity)
    return _auth_state


def get_auth_state() -> AuthState:
    """Return the session-scoped AuthState."""
    if _auth_state is None:
        raise RuntimeError("get_auth_state() called before init_auth_state()")
    return _auth_state


def reset_auth_state() -> None:
    """Drop the singleton: used in tests."""
    global _auth_state
    _auth_state = None
