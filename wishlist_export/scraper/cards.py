from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Generic, Optional, TypeVar

from selectolax.lexbor import LexborNode

from wishlist_export.core.logging_config import get_logger
from wishlist_export.scraper.page import PageDocument

T = TypeVar("T")

CARD_SELECTORS: tuple[str, ...] = (
    '[data-testid="card-container"]',
    '.cy5jw6o[role="group"]',
    ".wishlist-card",
    ".wishlistCard",
    'div[role="group"]',
)

_logger = get_logger(component="CardLocator")


class StrategyChain(Generic[T]):
    """Ordered alternative lookups, evaluated lazily until one yields a result.

    A strategy "succeeds" when its return value is truthy: a node, a non-empty
    list or a non-empty string.
    """

    def __init__(self, strategies: Iterable[tuple[str, Callable[[], Optional[T]]]]):
        self._strategies = list(strategies)

    def first(self) -> tuple[str | None, Optional[T]]:
        for label, strategy in self._strategies:
            result = strategy()
            if result:
                return label, result
        return None, None


def selector_chain(root: LexborNode | PageDocument, selectors: Sequence[str]) -> StrategyChain[list[LexborNode]]:
    return StrategyChain((selector, _css_all(root, selector)) for selector in selectors)


def first_match_chain(root: LexborNode | PageDocument, selectors: Sequence[str]) -> StrategyChain[LexborNode]:
    return StrategyChain((selector, _css_first(root, selector)) for selector in selectors)


def find_listing_cards(page: PageDocument, selectors: Sequence[str] = CARD_SELECTORS) -> list[LexborNode]:
    """Return the cards matched by the first selector that matches anything."""
    selector, cards = selector_chain(page, selectors).first()
    if not cards:
        _logger.debug("No card selector matched", tried=len(selectors))
        return []
    _logger.debug("Using card selector {} which found {} cards", selector, len(cards))
    return list(cards)


def _css_all(root: LexborNode | PageDocument, selector: str) -> Callable[[], list[LexborNode]]:
    return lambda: root.css(selector)


def _css_first(root: LexborNode | PageDocument, selector: str) -> Callable[[], Optional[LexborNode]]:
    return lambda: root.css_first(selector)
