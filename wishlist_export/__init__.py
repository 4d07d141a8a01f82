"""Export Airbnb wishlist pages to Google Sheets."""

__version__ = "0.1.0"
