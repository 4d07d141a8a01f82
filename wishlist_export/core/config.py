from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    environment: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"
    http_timeout_seconds: float = 20.0
    http_retry_attempts: int = 3
    http_retry_backoff_seconds: float = 0.75
    http_retry_backoff_factor: float = 2.0
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/118.0.0.0 Safari/537.36"
    )
    user_agent_pool: tuple[str, ...] = (
        user_agent,
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_5) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.4 Safari/605.1.15",
    )
    http_enable_http2: bool = True

    listing_base_url: str = "https://www.airbnb.com"
    default_wishlist_name: str = "Airbnb Wishlist"
    main_snippet_length: int = 500

    sheets_api_url: str = "https://sheets.googleapis.com/v4/spreadsheets"
    spreadsheet_url_template: str = "https://docs.google.com/spreadsheets/d/{doc_id}"
    sheet_clear_range: str = "A1:Z1000"
    document_title_prefix: str = "Airbnb Wishlist"
    default_sheet_name: str = "Wishlist"

    google_access_token: Optional[str] = None
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_refresh_token: Optional[str] = None
    google_token_url: str = "https://oauth2.googleapis.com/token"
    google_scopes: tuple[str, ...] = ("https://www.googleapis.com/auth/spreadsheets",)

    model_config = SettingsConfigDict(env_file=".env", env_prefix="WISHLIST_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
