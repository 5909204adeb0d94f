"""Exception taxonomy shared across packages.

Three kinds of failure reach callers:
  - Identity provider errors carry the provider's error name and message.
    They are classified along one axis only: "account already exists" vs
    everything else (see is_account_exists_error).
  - HTTP backend errors collapse to RequestFailedError. The response body is
    never parsed; status_code is kept for logging only.
  - NoAuthTokenError when an authenticated call is made without a session.

Local form validation never raises: field errors live on the views.
"""

from __future__ import annotations

ACCOUNT_EXISTS_NAME = "UsernameExistsException"


class BookshelfError(Exception):
    """Base for all errors raised by Bookshelf packages."""


class IdentityProviderError(BookshelfError):
    """An error reported by (or while talking to) the identity provider."""

    def __init__(self, name: str, message: str) -> None:
        super().__init__(message)
        self.name = name
        self.message = message

    @property
    def is_account_exists(self) -> bool:
        return self.name == ACCOUNT_EXISTS_NAME or "already exists" in self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, message={self.message!r})"


class NotSignedInError(IdentityProviderError):
    """Raised by get_current_user when no session is held."""

    def __init__(self, message: str = "User needs to be authenticated to call this API.") -> None:
        super().__init__("UserUnAuthenticatedException", message)


class RequestFailedError(BookshelfError):
    """Generic failure of a backend HTTP call (non-2xx or transport error)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NoAuthTokenError(BookshelfError):
    """An authenticated backend call was attempted without an ID token."""

    def __init__(self, message: str = "No auth token found") -> None:
        super().__init__(message)
        self.message = message


def is_account_exists_error(error: BaseException) -> bool:
    """True if the error means the account already exists (unconfirmed).

    Works on any exception: provider errors are checked by name, anything
    else falls back to the message text.
    """
    if isinstance(error, IdentityProviderError):
        return error.is_account_exists
    return getattr(error, "name", None) == ACCOUNT_EXISTS_NAME or "already exists" in str(error)
