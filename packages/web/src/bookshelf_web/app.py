"""Application wiring: builds the session-scoped objects once at startup.

    app = create_app()
    await app.start()                  # initial session check
    view = app.signup_view()
    ...
    await app.close()

Everything that must be shared lives on the app: one identity provider, one
AuthState, one CatalogClient, one error handler, one navigator. Views are
cheap and built per page.
"""

from __future__ import annotations

import logging

from bookshelf_auth.state import AuthState, init_auth_state
from bookshelf_catalog.client import CatalogClient, set_catalog_client
from bookshelf_identity import get_identity_provider
from bookshelf_identity.base import IdentityProvider
from bookshelf_shared.config import Settings, get_settings

from bookshelf_web.errors import ApiErrorHandler
from bookshelf_web.login import LoginView
from bookshelf_web.signup import SignupView

logger = logging.getLogger(__name__)


class Navigator:
    """Records the current location. Routing itself belongs to the UI layer."""

    def __init__(self, location: str = "/") -> None:
        self.location = location
        self.history: list[str] = [location]

    def __call__(self, path: str) -> None:
        logger.debug(f"Navigating {self.location} -> {path}")
        self.location = path
        self.history.append(path)


class BookshelfApp:
    def __init__(
        self,
        settings: Settings,
        identity: IdentityProvider,
        auth: AuthState,
        catalog: CatalogClient,
    ) -> None:
        self.settings = settings
        self.identity = identity
        self.auth = auth
        self.catalog = catalog
        self.errors = ApiErrorHandler()
        self.navigator = Navigator()

    async def start(self) -> None:
        await self.auth.start()
        who = self.auth.user.email if self.auth.user else "nobody"
        logger.info(f"Bookshelf client started, signed in as {who}")

    async def close(self) -> None:
        await self.catalog.close()
        await self.identity.close()

    def signup_view(self) -> SignupView:
        return SignupView(self.auth, navigate=self.navigator, on_error=self.errors)

    def login_view(self) -> LoginView:
        return LoginView(self.auth, navigate=self.navigator, on_error=self.errors)


def create_app(
    settings: Settings | None = None, identity: IdentityProvider | None = None
) -> BookshelfApp:
    """Construct the application and install its shared singletons."""
    settings = settings or get_settings()
    identity = identity or get_identity_provider(settings)
    auth = init_auth_state(identity)
    catalog = CatalogClient(settings, identity)
    set_catalog_client(catalog)
    return BookshelfApp(settings, identity, auth, catalog)
