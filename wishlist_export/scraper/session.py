from __future__ import annotations

from typing import Any

from wishlist_export.core.config import Settings
from wishlist_export.core.logging_config import get_logger
from wishlist_export.schemas import ExtractionResult
from wishlist_export.scraper.extractor import ListingExtractor
from wishlist_export.scraper.page import PageDocument
from wishlist_export.scraper.utils import node_text

UNKNOWN_EXTRACTION_ERROR = "Unknown error occurred during extraction"


class ExtractionSession:
    """Entry point for host requests: readiness probes and extraction runs.

    Nothing is kept between runs; every call builds a fresh ListingExtractor
    and converts any fault it raises into a failure result.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._logger = get_logger(component="ExtractionSession")

    async def handle(self, action: str, page: PageDocument | None = None) -> dict[str, Any]:
        self._logger.debug("Message received: {}", action)
        if action == "ping":
            return {"success": True}
        if action == "extract":
            if page is None:
                return ExtractionResult.failure("No page available for extraction").to_message()
            result = await self.extract(page)
            return result.to_message()
        return ExtractionResult.failure(f"Unknown action: {action}").to_message()

    async def extract(self, page: PageDocument) -> ExtractionResult:
        try:
            wishlist_name = self.resolve_wishlist_name(page)
            if page.ready_state == "loading":
                self._logger.info("Document still loading, waiting before extraction")
                await page.wait_until_loaded()
            result = ListingExtractor(page, wishlist_name, settings=self._settings).extract()
        except Exception as exc:  # noqa: BLE001
            self._logger.exception("Error extracting wishlist data", url=page.url)
            return ExtractionResult.failure(str(exc) or UNKNOWN_EXTRACTION_ERROR)

        if result.success:
            self._logger.info(
                "Extraction finished",
                wishlist=result.wishlistName,
                listings=len(result.data or []),
            )
        return result

    def resolve_wishlist_name(self, page: PageDocument) -> str:
        fallback = self._settings.default_wishlist_name
        try:
            name = node_text(page.css_first("h1")) or fallback
        except Exception as exc:  # noqa: BLE001
            self._logger.warning("Error extracting wishlist name", error=str(exc))
            return fallback
        self._logger.debug("Wishlist name: {}", name)
        return name
