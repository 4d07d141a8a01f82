from __future__ import annotations

from collections.abc import Sequence
from datetime import date

import httpx

from wishlist_export.core.config import Settings
from wishlist_export.core.errors import AuthRequiredError, SheetsApiError
from wishlist_export.core.logging_config import get_logger
from wishlist_export.schemas import SHEET_HEADERS, ExportResult, ListingRecord
from wishlist_export.services.auth import TokenProvider
from wishlist_export.services.sheets import SheetsClient, rows_range

AUTH_REQUIRED_MESSAGE = "Authentication required. Please sign in with Google."
NO_DATA_MESSAGE = "No valid wishlist data to save"
SAVE_FAILED_MESSAGE = "Error saving to Google Sheets"


def build_rows(records: Sequence[ListingRecord]) -> list[list[str]]:
    rows = [list(SHEET_HEADERS)]
    rows.extend(record.to_row() for record in records)
    return rows


class WishlistExporter:
    """Write an extracted wishlist into a freshly created spreadsheet."""

    def __init__(self, sheets: SheetsClient, tokens: TokenProvider, settings: Settings):
        self._sheets = sheets
        self._tokens = tokens
        self._settings = settings
        self._logger = get_logger(component="WishlistExporter")

    def document_title(self, wishlist_name: str | None, today: date | None = None) -> str:
        day = (today or date.today()).isoformat()
        return f"{self._settings.document_title_prefix}: {wishlist_name or 'Untitled'} - {day}"

    async def export(self, records: Sequence[ListingRecord], wishlist_name: str | None) -> ExportResult:
        if not records:
            self._logger.warning("No valid wishlist data received")
            return ExportResult(success=False, error=NO_DATA_MESSAGE)

        try:
            token = await self._tokens.get_token(interactive=False)
        except AuthRequiredError as exc:
            self._logger.info("Token unavailable, authorization needed", error=exc.message)
            return ExportResult(success=False, error=AUTH_REQUIRED_MESSAGE, needsAuth=True)

        rows = build_rows(records)
        sheet_name = wishlist_name or self._settings.default_sheet_name
        try:
            ref = await self._sheets.create_document(token, self.document_title(wishlist_name), sheet_name)
            sheet_title = await self._sheets.resolve_sheet_title(token, ref.doc_id, sheet_name)
            await self._sheets.clear_range(token, ref.doc_id, sheet_title)
            await self._sheets.write_rows(token, ref.doc_id, sheet_title, rows_range(rows), rows)
        except AuthRequiredError as exc:
            self._logger.warning("Sheets rejected the token", error=exc.message, status=exc.status_code)
            await self._tokens.invalidate(token)
            return ExportResult(success=False, error=AUTH_REQUIRED_MESSAGE, needsAuth=True)
        except SheetsApiError as exc:
            return ExportResult(success=False, error=exc.message or SAVE_FAILED_MESSAGE)
        except httpx.HTTPError as exc:
            self._logger.warning("Sheets request failed", error=str(exc))
            return ExportResult(success=False, error=str(exc) or SAVE_FAILED_MESSAGE)

        self._logger.info("Wishlist exported", doc_id=ref.doc_id, rows=len(rows) - 1)
        return ExportResult(success=True, spreadsheetId=ref.doc_id, spreadsheetUrl=ref.url)

    async def authorize(self) -> str:
        return await self._tokens.get_token(interactive=True)
