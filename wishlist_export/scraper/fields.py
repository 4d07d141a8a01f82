from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from urllib.parse import urljoin

from selectolax.lexbor import LexborNode
from w3lib.url import url_query_cleaner

from wishlist_export.core.logging_config import get_logger
from wishlist_export.scraper.cards import first_match_chain
from wishlist_export.scraper.page import PageDocument
from wishlist_export.scraper.similarity import collapse_doubled_text
from wishlist_export.scraper.utils import (
    EDIT_LABEL_RE,
    RATING_RE,
    contains_currency,
    element_children,
    has_class,
    next_element_sibling,
    node_text,
    parse_listing_id,
    strip_price_labels,
)

NAME_SELECTORS = (
    '[data-testid="listing-card-subtitle"] span, .t6mzqp7',
    '[data-testid="listing-card-title"]',
)
RATING_SELECTOR = ".r4a59j5, [data-testid*='rating']"
DATE_SELECTOR = "button.c12tvzjc"
DETAILS_SELECTOR = ".g1qv1ctd"
BEDS_CHILD_INDEX = 2
PRICE_SELECTOR = "._tt122m, [class*='price'], [class*='total']"
PRICE_FALLBACK_SELECTOR = "div, span"
LINK_SELECTOR = 'a[href*="/rooms/"]'
COMMENT_WRAPPER_CLASS = "cpj3fk1"
COMMENT_TEXT_SELECTOR = "div.nzkbe2g"

_logger = get_logger(component="FieldExtractor")


@dataclass(slots=True, frozen=True)
class ExtractionContext:
    page: PageDocument
    base_url: str


FieldExtractor = Callable[[LexborNode, ExtractionContext], str]


def isolated_field(field_name: str) -> Callable[[FieldExtractor], FieldExtractor]:
    """Contain any fault raised while reading a single field.

    The wrapped extractor never raises: errors are logged and the field
    falls back to an empty string.
    """

    def decorator(func: FieldExtractor) -> FieldExtractor:
        @wraps(func)
        def wrapper(card: LexborNode, context: ExtractionContext) -> str:
            try:
                value = func(card, context)
            except Exception as exc:  # noqa: BLE001
                _logger.warning("Error extracting {}: {}", field_name, exc, field=field_name)
                return ""
            return value or ""

        wrapper.field_name = field_name  # type: ignore[attr-defined]
        return wrapper

    return decorator


@isolated_field("propertyName")
def extract_property_name(card: LexborNode, context: ExtractionContext) -> str:
    selector, node = first_match_chain(card, NAME_SELECTORS).first()
    if node is None:
        return ""
    name = node_text(node)
    _logger.debug("Found property name via {}: {}", selector, name)
    return name


@isolated_field("rating")
def extract_rating(card: LexborNode, context: ExtractionContext) -> str:
    container = card.css_first(RATING_SELECTOR)
    if container is None:
        return ""
    match = RATING_RE.search(node_text(container))
    return match.group(1) if match else ""


@isolated_field("date")
def extract_date(card: LexborNode, context: ExtractionContext) -> str:
    # Looked up on the whole page: every card shares the currently rendered date control.
    button = context.page.css_first(DATE_SELECTOR)
    return node_text(button)


@isolated_field("beds")
def extract_bed_info(card: LexborNode, context: ExtractionContext) -> str:
    details = card.css_first(DETAILS_SELECTOR)
    if details is None:
        return ""
    visible_divs = [
        child
        for child in element_children(details)
        if child.tag == "div" and child.attributes.get("aria-hidden") != "true"
    ]
    if len(visible_divs) <= BEDS_CHILD_INDEX:
        return ""
    full_text = node_text(visible_divs[BEDS_CHILD_INDEX])
    beds = collapse_doubled_text(full_text)
    if beds != full_text:
        _logger.debug("Detected duplicate bed text, using first half: {}", beds)
    return beds


@isolated_field("totalPrice")
def extract_price(card: LexborNode, context: ExtractionContext) -> str:
    price_node = card.css_first(PRICE_SELECTOR)
    if price_node is not None:
        return strip_price_labels(node_text(price_node))

    card_id = card.mem_id
    for candidate in card.css(PRICE_FALLBACK_SELECTOR):
        if candidate.mem_id == card_id:
            continue
        text = candidate.text(deep=True) or ""
        if contains_currency(text):
            return text.strip()
    return ""


def canonical_listing_url(href: str, base_url: str) -> str:
    listing_id = parse_listing_id(href)
    if listing_id:
        return f"{base_url.rstrip('/')}/rooms/{listing_id}"
    return url_query_cleaner(urljoin(base_url, href), (), remove=False)


@isolated_field("link")
def extract_link(card: LexborNode, context: ExtractionContext) -> str:
    anchor = card.css_first(LINK_SELECTOR)
    if anchor is None:
        return ""
    href = anchor.attributes.get("href")
    if not href:
        return ""
    return canonical_listing_url(href, context.base_url)


@isolated_field("comment")
def extract_comment(card: LexborNode, context: ExtractionContext) -> str:
    anchor = card.css_first(LINK_SELECTOR)
    listing_id = parse_listing_id(anchor.attributes.get("href")) if anchor is not None else None

    wrapper = next_element_sibling(card)
    if wrapper is None or not has_class(wrapper, COMMENT_WRAPPER_CLASS):
        _logger.debug("No comment found for listing {}", listing_id or "?")
        return ""
    comment_node = wrapper.css_first(COMMENT_TEXT_SELECTOR)
    if comment_node is None:
        return ""
    comment = EDIT_LABEL_RE.sub("", comment_node.text(deep=True) or "", count=1).strip()
    _logger.debug("Found comment for listing {}: {}", listing_id or "?", comment)
    return comment


FIELD_EXTRACTORS: tuple[tuple[str, FieldExtractor], ...] = (
    ("propertyName", extract_property_name),
    ("rating", extract_rating),
    ("date", extract_date),
    ("beds", extract_bed_info),
    ("totalPrice", extract_price),
    ("link", extract_link),
    ("comment", extract_comment),
)
