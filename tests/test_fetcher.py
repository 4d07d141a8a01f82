from __future__ import annotations

import httpx
import pytest
import respx

from wishlist_export.core.config import Settings
from wishlist_export.core.errors import FetchError
from wishlist_export.scraper.fetcher import PageFetcher

WISHLIST_URL = "https://www.airbnb.com/wishlists/1234"


@pytest.mark.anyio
async def test_fetch_returns_complete_page(settings: Settings, wishlist_html: str) -> None:
    fetcher = PageFetcher(settings)
    try:
        with respx.mock(assert_all_called=True) as mock:
            mock.get(WISHLIST_URL).mock(
                return_value=httpx.Response(200, text=wishlist_html, headers={"Content-Type": "text/html"})
            )
            page = await fetcher.fetch(WISHLIST_URL)
    finally:
        await fetcher.aclose()

    assert page.ready_state == "complete"
    assert page.url == WISHLIST_URL
    assert len(page.css('[data-testid="card-container"]')) == 3


@pytest.mark.anyio
async def test_fetch_flags_block_page(settings: Settings) -> None:
    fetcher = PageFetcher(settings)
    try:
        with respx.mock(assert_all_called=True) as mock:
            mock.get(WISHLIST_URL).mock(
                return_value=httpx.Response(
                    200,
                    text="<html><title>Just a moment...</title><body>Attention required</body></html>",
                )
            )
            with pytest.raises(FetchError, match="blocked"):
                await fetcher.fetch(WISHLIST_URL)
    finally:
        await fetcher.aclose()


@pytest.mark.anyio
async def test_fetch_http_error_is_not_retried(settings: Settings) -> None:
    fetcher = PageFetcher(settings)
    try:
        with respx.mock(assert_all_called=True) as mock:
            route = mock.get(WISHLIST_URL).mock(return_value=httpx.Response(404, text="gone"))
            with pytest.raises(FetchError) as excinfo:
                await fetcher.fetch(WISHLIST_URL)
    finally:
        await fetcher.aclose()

    assert excinfo.value.status_code == 404
    assert route.call_count == 1


@pytest.mark.anyio
async def test_fetch_retries_transport_errors(settings: Settings) -> None:
    fetcher = PageFetcher(settings)
    try:
        with respx.mock(assert_all_called=True) as mock:
            route = mock.get(WISHLIST_URL).mock(side_effect=httpx.ConnectError("connection refused"))
            with pytest.raises(FetchError, match="connection refused"):
                await fetcher.fetch(WISHLIST_URL)
    finally:
        await fetcher.aclose()

    assert route.call_count == settings.http_retry_attempts


@pytest.mark.anyio
async def test_fetch_rejects_relative_url(settings: Settings) -> None:
    fetcher = PageFetcher(settings)
    try:
        with pytest.raises(FetchError, match="Invalid URL"):
            await fetcher.fetch("/wishlists/1234")
    finally:
        await fetcher.aclose()
