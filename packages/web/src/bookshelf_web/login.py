"""Login view controller."""

from __future__ import annotations

from collections.abc import Callable

from bookshelf_auth.state import AuthState
from bookshelf_auth.validation import validate_email, validate_required

HOME_PATH = "/"

MSG_LOGIN_FAILED = "Invalid email or password"


class LoginView:
    def __init__(
        self,
        auth: AuthState,
        navigate: Callable[[str], None],
        on_error: Callable[[BaseException], object],
    ) -> None:
        self.auth = auth
        self.navigate = navigate
        self.on_error = on_error

        self.email = ""
        self.password = ""
        self.errors: dict[str, str] = {}
        self.is_loading = False

    def validate(self) -> bool:
        errors: dict[str, str] = {}
        if not validate_required(self.email):
            errors["email"] = "Email is required"
        elif not validate_email(self.email):
            errors["email"] = "Invalid email format"
        if not validate_required(self.password):
            errors["password"] = "Password is required"
        self.errors = errors
        return not errors

    async def submit(self) -> None:
        if self.is_loading or not self.validate():
            return

        self.is_loading = True
        try:
            await self.auth.login(self.email, self.password)
        except Exception as e:
            self.on_error(e)
            self.errors = {"form": MSG_LOGIN_FAILED}
            return
        finally:
            self.is_loading = False

        # A challenge (MFA, new password) leaves us signed out on this page
        if self.auth.is_authenticated:
            self.navigate(HOME_PATH)
