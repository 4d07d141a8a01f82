from __future__ import annotations

from typing import Protocol

import httpx

from wishlist_export.core.config import Settings
from wishlist_export.core.errors import AuthRequiredError
from wishlist_export.core.logging_config import get_logger


class TokenProvider(Protocol):
    async def get_token(self, interactive: bool = False) -> str: ...

    async def invalidate(self, token: str) -> None: ...


class StaticTokenProvider:
    """Serve a preconfigured access token until it is invalidated."""

    def __init__(self, token: str | None):
        self._token = token
        self._logger = get_logger(component="StaticTokenProvider")

    async def get_token(self, interactive: bool = False) -> str:
        if not self._token:
            raise AuthRequiredError("No authentication token found")
        return self._token

    async def invalidate(self, token: str) -> None:
        if token and token == self._token:
            self._logger.info("Discarding rejected access token")
            self._token = None


class RefreshTokenProvider:
    """Exchange a stored OAuth refresh token for short-lived access tokens.

    The last access token is cached until it is invalidated. Invalidation only
    drops that cached copy; the refresh grant itself stays usable.
    """

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self._client = client
        self._settings = settings
        self._access_token: str | None = None
        self._logger = get_logger(component="RefreshTokenProvider")

    async def get_token(self, interactive: bool = False) -> str:
        if self._access_token:
            return self._access_token

        settings = self._settings
        if not (settings.google_client_id and settings.google_refresh_token):
            raise AuthRequiredError("Authentication required. Please sign in with Google.")

        payload = {
            "grant_type": "refresh_token",
            "client_id": settings.google_client_id,
            "client_secret": settings.google_client_secret or "",
            "refresh_token": settings.google_refresh_token,
            "scope": " ".join(settings.google_scopes),
        }
        try:
            resp = await self._client.post(settings.google_token_url, data=payload)
        except httpx.HTTPError as exc:
            self._logger.warning("Token endpoint unreachable", error=str(exc))
            raise AuthRequiredError(f"Token refresh failed: {exc}") from exc

        if resp.status_code >= 400:
            self._logger.warning("Token refresh rejected", status=resp.status_code, body=resp.text[:200])
            raise AuthRequiredError("Authentication token expired", resp.status_code)

        try:
            token = resp.json().get("access_token")
        except ValueError as exc:
            self._logger.warning("Token endpoint returned malformed body", body=resp.text[:200])
            raise AuthRequiredError("No authentication token returned") from exc
        if not token:
            raise AuthRequiredError("No authentication token returned")
        self._logger.debug("Access token refreshed", interactive=interactive)
        self._access_token = token
        return token

    async def invalidate(self, token: str) -> None:
        if token and token == self._access_token:
            self._logger.info("Discarding rejected access token")
            self._access_token = None


def build_token_provider(client: httpx.AsyncClient, settings: Settings) -> TokenProvider:
    if settings.google_refresh_token:
        return RefreshTokenProvider(client, settings)
    return StaticTokenProvider(settings.google_access_token)
