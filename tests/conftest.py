from __future__ import annotations

from pathlib import Path

import pytest

from wishlist_export.core.config import Settings
from wishlist_export.scraper.page import PageDocument

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="test",
        http_enable_http2=False,
        http_retry_backoff_seconds=0.0,
        google_access_token=None,
        google_refresh_token=None,
    )


@pytest.fixture
def wishlist_html() -> str:
    return load_fixture("wishlist.html")


@pytest.fixture
def wishlist_page(wishlist_html: str) -> PageDocument:
    return PageDocument(wishlist_html, url="https://www.airbnb.com/wishlists/1234")


@pytest.fixture
def fallback_page() -> PageDocument:
    return PageDocument(load_fixture("wishlist_fallback.html"), url="https://www.airbnb.com/wishlists/5678")


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
