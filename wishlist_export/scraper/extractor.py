from __future__ import annotations

from collections.abc import Sequence

from selectolax.lexbor import LexborNode

from wishlist_export.core.config import Settings, get_settings
from wishlist_export.core.logging_config import get_logger
from wishlist_export.schemas import ExtractionResult, ListingRecord
from wishlist_export.scraper.cards import CARD_SELECTORS, find_listing_cards
from wishlist_export.scraper.fields import FIELD_EXTRACTORS, ExtractionContext
from wishlist_export.scraper.page import PageDocument

NO_LISTINGS_MESSAGE = "No listing cards found. Please refresh the page and try again."


class ListingExtractor:
    """Turn every located listing card into a ListingRecord."""

    def __init__(
        self,
        page: PageDocument,
        wishlist_name: str,
        settings: Settings | None = None,
        card_selectors: Sequence[str] = CARD_SELECTORS,
    ):
        self.page = page
        self.wishlist_name = wishlist_name
        self._settings = settings or get_settings()
        self._card_selectors = card_selectors
        self._logger = get_logger(component="ListingExtractor", url=page.url)
        self._context = ExtractionContext(page=page, base_url=self._settings.listing_base_url)

    def extract(self) -> ExtractionResult:
        cards = find_listing_cards(self.page, self._card_selectors)
        if not cards:
            self._log_missing_cards()
            return ExtractionResult.failure(NO_LISTINGS_MESSAGE)

        self._logger.info("Found {} listing cards", len(cards))
        records = [self.extract_card(card, index, len(cards)) for index, card in enumerate(cards)]
        return ExtractionResult.ok(records, self.wishlist_name)

    def extract_card(self, card: LexborNode, index: int = 0, total: int = 1) -> ListingRecord:
        self._logger.debug("Processing card {}/{}", index + 1, total)
        if index == 0:
            self._logger.debug("First card HTML: {}", self._snippet(card.html))
        values = {field: extractor(card, self._context) for field, extractor in FIELD_EXTRACTORS}
        return ListingRecord(**values)

    def _log_missing_cards(self) -> None:
        self._logger.warning("No listing cards found with any selector")
        main = self.page.css_first("main")
        if main is not None:
            self._logger.debug("Wishlist area HTML structure: {}", self._snippet(main.html))

    def _snippet(self, html: str | None) -> str:
        limit = self._settings.main_snippet_length
        text = html or ""
        return text[:limit] + "..." if len(text) > limit else text
