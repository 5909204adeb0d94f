"""Identity client adapter: provider factory.

Environment detection (same shape as the settings singleton):
  - cognito_client_id configured → CognitoIdentityProvider
  - otherwise → LocalIdentityProvider (in-memory, codes logged locally)
"""

from __future__ import annotations

import logging

from bookshelf_shared.config import Settings

from bookshelf_identity.base import IdentityProvider
from bookshelf_identity.cognito import CognitoIdentityProvider
from bookshelf_identity.local import LocalIdentityProvider

logger = logging.getLogger(__name__)

__all__ = [
    "CognitoIdentityProvider",
    "IdentityProvider",
    "LocalIdentityProvider",
    "get_identity_provider",
]


def get_identity_provider(settings: Settings) -> IdentityProvider:
    """Instantiate the identity provider the settings call for."""
    if settings.cognito_client_id:
        return CognitoIdentityProvider(settings)
    logger.warning(
        "BOOKSHELF_COGNITO_CLIENT_ID not set, using the local in-memory identity provider"
    )
    return LocalIdentityProvider()
