"""Settings loaded from the environment.

One configured base URL for the HTTP backend, plus the Cognito user pool
client the identity adapter talks to:

  BOOKSHELF_API_BASE_URL       backend base URL (required)
  BOOKSHELF_COGNITO_REGION     user pool region (default us-east-1)
  BOOKSHELF_COGNITO_CLIENT_ID  app client id (no client secret: public client)
  BOOKSHELF_COGNITO_ENDPOINT   override the regional endpoint (local emulators)
  BOOKSHELF_REQUEST_TIMEOUT    httpx timeout in seconds (default 30)
  BOOKSHELF_MOCK_DELAY         delay for stand-in endpoints (default 0.5)

Usage:
    from bookshelf_shared.config import get_settings

    settings = get_settings()
"""

from __future__ import annotations

import os

from pydantic import BaseModel


class Settings(BaseModel):
    api_base_url: str
    cognito_region: str = "us-east-1"
    cognito_client_id: str = ""
    cognito_endpoint: str | None = None
    request_timeout: float = 30.0
    mock_delay_seconds: float = 0.5

    @property
    def identity_endpoint(self) -> str:
        """The Cognito endpoint, preferring the override over the regional default."""
        if self.cognito_endpoint:
            return self.cognito_endpoint
        return f"https://cognito-idp.{self.cognito_region}.amazonaws.com/"


def load_settings() -> Settings:
    """Build Settings from BOOKSHELF_* environment variables."""
    api_base_url = os.environ.get("BOOKSHELF_API_BASE_URL", "")
    if not api_base_url:
        raise RuntimeError(
            "BOOKSHELF_API_BASE_URL environment variable is not set. "
            "Set it to the base URL of the books API (e.g. https://api.example.com/prod)."
        )

    return Settings(
        api_base_url=api_base_url.rstrip("/"),
        cognito_region=os.environ.get("BOOKSHELF_COGNITO_REGION", "us-east-1"),
        cognito_client_id=os.environ.get("BOOKSHELF_COGNITO_CLIENT_ID", ""),
        cognito_endpoint=os.environ.get("BOOKSHELF_COGNITO_ENDPOINT") or None,
        request_timeout=float(os.environ.get("BOOKSHELF_REQUEST_TIMEOUT", "30")),
        mock_delay_seconds=float(os.environ.get("BOOKSHELF_MOCK_DELAY", "0.5")),
    )


# ============================================================================
# Singleton management
# ============================================================================

_settings: Settings | None = None


def get_settings() -> Settings:
    """Return lazily-loaded Settings."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop cached settings: used in tests after patching the environment."""
    global _settings
    _settings = None
