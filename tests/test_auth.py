from __future__ import annotations

import httpx
import pytest
import respx

from wishlist_export.core.config import Settings
from wishlist_export.core.errors import AuthRequiredError
from wishlist_export.services.auth import RefreshTokenProvider, StaticTokenProvider, build_token_provider

TOKEN_URL = "https://oauth2.googleapis.com/token"


@pytest.fixture
def oauth_settings() -> Settings:
    return Settings(
        environment="test",
        google_client_id="client-id",
        google_client_secret="client-secret",
        google_refresh_token="refresh-me",
    )


@pytest.mark.anyio
async def test_static_provider_serves_until_invalidated() -> None:
    provider = StaticTokenProvider("tok")
    assert await provider.get_token() == "tok"
    await provider.invalidate("other")
    assert await provider.get_token(interactive=True) == "tok"
    await provider.invalidate("tok")
    with pytest.raises(AuthRequiredError):
        await provider.get_token()


@pytest.mark.anyio
async def test_refresh_provider_exchanges_refresh_token(oauth_settings: Settings) -> None:
    with respx.mock(assert_all_called=True) as mock:
        route = mock.post(TOKEN_URL).mock(
            return_value=httpx.Response(200, json={"access_token": "fresh", "expires_in": 3599})
        )
        async with httpx.AsyncClient() as client:
            token = await RefreshTokenProvider(client, oauth_settings).get_token()

    assert token == "fresh"
    body = route.calls.last.request.content.decode()
    assert "grant_type=refresh_token" in body
    assert "refresh_token=refresh-me" in body


@pytest.mark.anyio
async def test_refresh_provider_rejection_requires_auth(oauth_settings: Settings) -> None:
    with respx.mock(assert_all_called=True) as mock:
        mock.post(TOKEN_URL).mock(return_value=httpx.Response(400, json={"error": "invalid_grant"}))
        async with httpx.AsyncClient() as client:
            with pytest.raises(AuthRequiredError, match="expired"):
                await RefreshTokenProvider(client, oauth_settings).get_token()


@pytest.mark.anyio
async def test_refresh_provider_caches_until_invalidated(oauth_settings: Settings) -> None:
    with respx.mock(assert_all_called=True) as mock:
        route = mock.post(TOKEN_URL).mock(
            side_effect=[
                httpx.Response(200, json={"access_token": "fresh"}),
                httpx.Response(200, json={"access_token": "fresher"}),
            ]
        )
        async with httpx.AsyncClient() as client:
            provider = RefreshTokenProvider(client, oauth_settings)
            assert await provider.get_token() == "fresh"
            assert await provider.get_token() == "fresh"
            await provider.invalidate("fresh")
            assert await provider.get_token() == "fresher"

    # no revoke call: the refresh grant stays usable
    assert route.call_count == 2


@pytest.mark.anyio
async def test_refresh_provider_malformed_body_requires_auth(oauth_settings: Settings) -> None:
    with respx.mock(assert_all_called=True) as mock:
        mock.post(TOKEN_URL).mock(return_value=httpx.Response(200, text="<html>captive portal</html>"))
        async with httpx.AsyncClient() as client:
            with pytest.raises(AuthRequiredError, match="No authentication token"):
                await RefreshTokenProvider(client, oauth_settings).get_token()


@pytest.mark.anyio
async def test_build_token_provider_picks_refresh_flow(oauth_settings: Settings, settings: Settings) -> None:
    async with httpx.AsyncClient() as client:
        assert isinstance(build_token_provider(client, oauth_settings), RefreshTokenProvider)
        assert isinstance(build_token_provider(client, settings), StaticTokenProvider)
