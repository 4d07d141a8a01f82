"""DOM extraction engine for Airbnb wishlist pages."""

from .extractor import ListingExtractor
from .page import PageDocument
from .session import ExtractionSession

__all__ = [
    "ExtractionSession",
    "ListingExtractor",
    "PageDocument",
]
