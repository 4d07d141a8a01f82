from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import quote

import httpx

from wishlist_export.core.config import Settings
from wishlist_export.core.errors import AuthRequiredError, SheetsApiError
from wishlist_export.core.logging_config import get_logger

AUTH_STATUS_CODES = {401, 403}
AUTH_MESSAGE_HINTS = ("401", "auth", "permission")


@dataclass(slots=True, frozen=True)
class SpreadsheetRef:
    doc_id: str
    url: str


def a1_range(sheet_name: str, cell_range: str) -> str:
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'!{cell_range}"


def column_letter(index: int) -> str:
    """1-based column index to A1 letters (1 -> A, 27 -> AA)."""
    letters = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def rows_range(rows: Sequence[Sequence[str]]) -> str:
    width = max((len(row) for row in rows), default=1)
    return f"A1:{column_letter(max(width, 1))}{max(len(rows), 1)}"


class SheetsClient:
    """Thin async wrapper over the Google Sheets v4 REST API."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self._client = client
        self._settings = settings
        self._base_url = settings.sheets_api_url.rstrip("/")
        self._logger = get_logger(component="SheetsClient")

    async def create_document(self, token: str, title: str, sheet_name: str) -> SpreadsheetRef:
        payload = {
            "properties": {"title": title},
            "sheets": [
                {
                    "properties": {
                        "title": sheet_name,
                        "gridProperties": {"frozenRowCount": 1},
                    }
                }
            ],
        }
        resp = await self._client.post(self._base_url, json=payload, headers=self._headers(token))
        data = self._handle_response(resp)
        doc_id = data.get("spreadsheetId")
        if not doc_id:
            raise SheetsApiError("Spreadsheet created without an id", resp.status_code)
        url = self._settings.spreadsheet_url_template.format(doc_id=doc_id)
        self._logger.info("Spreadsheet created", doc_id=doc_id, title=title)
        return SpreadsheetRef(doc_id=doc_id, url=url)

    async def resolve_sheet_title(self, token: str, doc_id: str, sheet_name: str | None) -> str:
        resp = await self._client.get(f"{self._base_url}/{doc_id}", headers=self._headers(token))
        data = self._handle_response(resp)
        for sheet in data.get("sheets") or []:
            properties = sheet.get("properties") or {}
            if sheet_name is not None and properties.get("title") == sheet_name:
                return sheet_name
            if sheet_name is None and properties.get("index") == 0:
                return properties.get("title") or "Sheet1"
        raise SheetsApiError(f"Sheet {sheet_name or 'Sheet1'} not found in the spreadsheet")

    async def clear_range(self, token: str, doc_id: str, sheet_name: str, cell_range: str | None = None) -> None:
        target = a1_range(sheet_name, cell_range or self._settings.sheet_clear_range)
        resp = await self._client.post(
            f"{self._base_url}/{doc_id}/values/{quote(target, safe='')}:clear",
            headers=self._headers(token),
        )
        self._handle_response(resp)
        self._logger.debug("Sheet cleared", doc_id=doc_id, sheet=sheet_name)

    async def write_rows(
        self,
        token: str,
        doc_id: str,
        sheet_name: str,
        cell_range: str | None,
        rows: Sequence[Sequence[str]],
    ) -> int:
        target = a1_range(sheet_name, cell_range or rows_range(rows))
        resp = await self._client.put(
            f"{self._base_url}/{doc_id}/values/{quote(target, safe='')}",
            params={"valueInputOption": "USER_ENTERED"},
            json={"values": [list(row) for row in rows]},
            headers=self._headers(token),
        )
        data = self._handle_response(resp)
        self._logger.debug("Sheet updated", doc_id=doc_id, sheet=sheet_name, rows=len(rows))
        return int(data.get("updatedRows") or len(rows))

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def _handle_response(self, resp: httpx.Response) -> dict:
        if resp.status_code < 400:
            try:
                return resp.json()
            except ValueError:
                return {}

        try:
            body = resp.json()
        except ValueError:
            body = None
        message = None
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                message = error.get("message")
        if not message:
            message = f"HTTP Error {resp.status_code}: {resp.reason_phrase}"

        self._logger.warning("Sheets API error", status=resp.status_code, error=message)
        lowered = message.lower()
        if resp.status_code in AUTH_STATUS_CODES or any(hint in lowered for hint in AUTH_MESSAGE_HINTS):
            raise AuthRequiredError(message, resp.status_code)
        raise SheetsApiError(message, resp.status_code)
