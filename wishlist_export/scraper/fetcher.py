from __future__ import annotations

import asyncio
import random
from urllib.parse import urlparse, urlsplit

import httpx

from wishlist_export.core.config import Settings
from wishlist_export.core.errors import FetchError
from wishlist_export.core.logging_config import get_logger
from wishlist_export.scraper.page import PageDocument


class PageFetcher:
    """Load a wishlist page snapshot over HTTP with retry support."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None):
        self._settings = settings
        self._logger = get_logger(component="PageFetcher")
        self._base_headers = {
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
            "Cache-Control": "max-age=0",
            "Upgrade-Insecure-Requests": "1",
        }
        self._owns_client = client is None
        if client is None:
            http2_enabled = settings.http_enable_http2
            if http2_enabled:
                try:
                    import h2  # noqa: F401
                except ImportError:
                    self._logger.warning("h2 package missing; falling back to HTTP/1.1")
                    http2_enabled = False
            client = httpx.AsyncClient(
                follow_redirects=True,
                timeout=settings.http_timeout_seconds,
                headers=self._base_headers,
                http2=http2_enabled,
            )
        self._client = client

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, url: str) -> PageDocument:
        if not urlparse(url).scheme:
            raise FetchError(f"Invalid URL: {url}", url)
        backoff = self._settings.http_retry_backoff_seconds
        attempt = 0
        while True:
            try:
                response = await self._client.get(url, headers=self._prepare_headers(url))
                response.raise_for_status()
                block_reason = self._detect_antibot(response)
                if block_reason:
                    raise FetchError(f"{block_reason} [{url}]", url, response.status_code)
                return PageDocument(response.text, url=str(response.url), ready_state="complete")
            except httpx.HTTPStatusError as exc:
                self._logger.warning("HTTP request failed", url=url, status=exc.response.status_code)
                raise FetchError(
                    f"HTTP Error {exc.response.status_code} [{url}]", url, exc.response.status_code
                ) from exc
            except httpx.HTTPError as exc:
                if attempt + 1 >= self._settings.http_retry_attempts:
                    self._logger.warning("HTTP request failed", url=url, attempt=attempt + 1, error=str(exc))
                    raise FetchError(str(exc) or exc.__class__.__name__, url) from exc
                attempt += 1
                sleep_for = backoff * (self._settings.http_retry_backoff_factor ** (attempt - 1))
                self._logger.debug(
                    "Retrying HTTP request",
                    url=url,
                    attempt=attempt,
                    sleep=sleep_for,
                    error=str(exc),
                )
                await asyncio.sleep(sleep_for)

    def _prepare_headers(self, url: str) -> dict[str, str]:
        headers = dict(self._base_headers)
        agent_pool = self._settings.user_agent_pool or (self._settings.user_agent,)
        headers["User-Agent"] = random.choice(agent_pool)
        parsed = urlsplit(url)
        if parsed.scheme and parsed.netloc:
            headers["Referer"] = f"{parsed.scheme}://{parsed.netloc}/"
        return headers

    def _detect_antibot(self, response: httpx.Response) -> str | None:
        sample = response.text[:1500].lower()
        block_markers = (
            "just a moment",
            "enable javascript to continue",
            "attention required",
            "are you a human",
            "access denied",
        )
        if any(marker in sample for marker in block_markers):
            return "Request blocked by target site (anti-bot page detected)"
        return None
