from __future__ import annotations

import re
from typing import Iterable, Optional

from selectolax.lexbor import LexborNode

RATING_RE = re.compile(r"(\d+[.,]\d+)")
LISTING_ID_RE = re.compile(r"/rooms/(\d+)")
CURRENCY_SYMBOLS = ("€", "$")
PRICE_LABEL_RES = (
    re.compile(r"^Total:\s*"),
    re.compile(r"^Gesamtpreis:\s*"),
    re.compile(r"^Insgesamt\s*"),
)
EDIT_LABEL_RE = re.compile(r"Bearbeiten", re.I)


def node_text(node: Optional[LexborNode]) -> str:
    """Trimmed text content of a node and all its descendants."""
    if node is None:
        return ""
    return (node.text(deep=True) or "").strip()


def is_element(node: Optional[LexborNode]) -> bool:
    if node is None:
        return False
    tag = node.tag or ""
    return bool(tag) and not tag.startswith(("-", "!", "_", "#"))


def next_element_sibling(node: LexborNode) -> Optional[LexborNode]:
    sibling = node.next
    while sibling is not None and not is_element(sibling):
        sibling = sibling.next
    return sibling


def element_children(node: LexborNode) -> Iterable[LexborNode]:
    for child in node.iter(include_text=False):
        if is_element(child):
            yield child


def has_class(node: LexborNode, class_name: str) -> bool:
    classes = (node.attributes.get("class") or "").split()
    return class_name in classes


def strip_price_labels(text: str) -> str:
    for pattern in PRICE_LABEL_RES:
        text = pattern.sub("", text)
    return text


def contains_currency(text: str) -> bool:
    return any(symbol in text for symbol in CURRENCY_SYMBOLS)


def parse_listing_id(href: str | None) -> str | None:
    if not href:
        return None
    match = LISTING_ID_RE.search(href)
    return match.group(1) if match else None
