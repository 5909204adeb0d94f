"""Sign-up view controller: the two-step sign-up / email verification flow.

Steps:

  SIGNUP        name, email, password, confirm password → auth.signup
  VERIFICATION  code → auth.verify_code, then navigate to /login

Transitions out of SIGNUP happen in exactly two cases: sign-up succeeded, or
sign-up failed because the account already exists unconfirmed. The second
case recovers users who abandoned an earlier sign-up: we move them to
VERIFICATION and send a fresh code automatically. If that automatic resend
fails (usually the provider's resend rate limit) nothing is shown: the user
can still resend by hand.

No session is established by verification; the user logs in afterwards.
A successful verification resets the view, dropping the typed password.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Literal

from bookshelf_auth.state import AuthState
from bookshelf_auth.validation import validate_email, validate_password, validate_required
from bookshelf_shared.errors import is_account_exists_error
from pydantic import BaseModel

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"

MSG_ACCOUNT_EXISTS = "User already exists. Please verify your email."
MSG_AUTO_RESENT = "A new verification code has been sent to your email."
MSG_RESENT = "New code sent successfully!"
MSG_RESEND_FAILED = "Cannot send multiple emails in a short time. Please try again later."
MSG_CODE_REQUIRED = "Verification code is required"
MSG_CODE_INVALID = "Invalid verification code"


class FlowStep(StrEnum):
    SIGNUP = "signup"
    VERIFICATION = "verification"


class SignupDraft(BaseModel):
    """Form values. Owned by the view, discarded with it."""

    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""
    verification_code: str = ""


class ResendStatus(BaseModel):
    message: str
    kind: Literal["success", "error"]


def validate_signup(draft: SignupDraft) -> dict[str, str]:
    """Field errors for the sign-up form; empty when the form is valid."""
    errors: dict[str, str] = {}
    if not validate_required(draft.name):
        errors["name"] = "Name is required"

    if not validate_required(draft.email):
        errors["email"] = "Email is required"
    elif not validate_email(draft.email):
        errors["email"] = "Invalid email format"

    if not validate_required(draft.password):
        errors["password"] = "Password is required"
    elif not validate_password(draft.password):
        errors["password"] = (
            "Password must be at least 8 characters with uppercase, lowercase, and number"
        )

    if not validate_required(draft.confirm_password):
        errors["confirm_password"] = "Please confirm your password"
    elif draft.password != draft.confirm_password:
        errors["confirm_password"] = "Passwords do not match"
    return errors


class SignupView:
    """State and handlers for the sign-up page."""

    def __init__(
        self,
        auth: AuthState,
        navigate: Callable[[str], None],
        on_error: Callable[[BaseException], object],
    ) -> None:
        self.auth = auth
        self.navigate = navigate
        self.on_error = on_error

        self.draft = SignupDraft()
        self.step = FlowStep.SIGNUP
        self.errors: dict[str, str] = {}
        self.is_loading = False
        self.resend_status: ResendStatus | None = None

    @property
    def title(self) -> str:
        return "Create Account" if self.step is FlowStep.SIGNUP else "Verify Email"

    @property
    def subtitle(self) -> str:
        if self.step is FlowStep.SIGNUP:
            return "Join us to discover your next favorite book"
        return f"We sent a code to {self.draft.email}"

    def _enter_verification(self) -> None:
        self.step = FlowStep.VERIFICATION

    async def submit_signup(self) -> None:
        if self.is_loading or self.step is not FlowStep.SIGNUP:
            return

        self.errors = validate_signup(self.draft)
        if self.errors:
            return

        email = self.draft.email
        self.is_loading = True
        self.resend_status = None
        try:
            await self.auth.signup(email, self.draft.password, self.draft.name)
            self._enter_verification()
        except Exception as e:
            if not is_account_exists_error(e):
                self.on_error(e)
                return

            self.errors = {"email": MSG_ACCOUNT_EXISTS}
            self._enter_verification()
            try:
                await self.auth.resend_code(email)
                self.resend_status = ResendStatus(message=MSG_AUTO_RESENT, kind="success")
            except Exception as resend_error:
                logger.info(f"Auto-resend skipped for '{email}': {resend_error}")
        finally:
            self.is_loading = False

    async def submit_verification(self) -> None:
        if self.is_loading or self.step is not FlowStep.VERIFICATION:
            return

        code = self.draft.verification_code
        if not code:
            self.errors = {"code": MSG_CODE_REQUIRED}
            return

        self.is_loading = True
        try:
            await self.auth.verify_code(self.draft.email, code)
        except Exception as e:
            self.on_error(e)
            self.errors = {"code": MSG_CODE_INVALID}
            return
        finally:
            self.is_loading = False

        self.errors = {}
        self.draft = SignupDraft()
        self.step = FlowStep.SIGNUP
        self.resend_status = None
        self.navigate(LOGIN_PATH)

    async def resend_code(self) -> None:
        self.resend_status = None
        try:
            await self.auth.resend_code(self.draft.email)
            self.resend_status = ResendStatus(message=MSG_RESENT, kind="success")
        except Exception as e:
            logger.info(f"Manual resend failed: {e}")
            self.resend_status = ResendStatus(message=MSG_RESEND_FAILED, kind="error")

    def back_to_signup(self) -> None:
        """Return to the sign-up form, keeping what was typed."""
        self.step = FlowStep.SIGNUP
