"""Generic API-error handler shared by the views.

Views hand any error they don't handle themselves to an ApiErrorHandler. It
logs the error and turns it into a user-facing notification; the UI layer
decides how to display notifications.
"""

from __future__ import annotations

import logging

from bookshelf_shared.errors import (
    IdentityProviderError,
    NoAuthTokenError,
    RequestFailedError,
)

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "An unexpected error occurred. Please try again."


def error_message(error: BaseException) -> str:
    """The message to show a user for an error."""
    if isinstance(error, IdentityProviderError | RequestFailedError | NoAuthTokenError):
        return error.message
    return GENERIC_MESSAGE


class ApiErrorHandler:
    """Logs errors and collects notifications in arrival order."""

    def __init__(self) -> None:
        self.notifications: list[str] = []

    def __call__(self, error: BaseException) -> str:
        message = error_message(error)
        logger.error(f"API error ({type(error).__name__}): {error}")
        self.notifications.append(message)
        return message

    def clear(self) -> None:
        self.notifications.clear()
