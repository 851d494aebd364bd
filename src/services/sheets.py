"""
Spreadsheet-backed configuration, email whitelist and audit log.

Nothing here is cached: every call reads the sheet again, so edits made
in the spreadsheet take effect on the next request.
"""

import json
import logging

from core.config import (
    GOOGLE_SHEET_ID,
    SHEET_CONFIG_RANGE,
    SHEET_LOGS_RANGE,
    SHEET_USERS_RANGE,
)
from core.dates import format_thai_datetime, local_now
from core.google_client import GOOGLE_API_ERRORS, execute, get_sheets_service

logger = logging.getLogger(__name__)


def parse_config_rows(rows: list[list[str]]) -> dict[str, str]:
    """[key, value] rows to a dict; rows missing either cell are ignored."""
    config = {}
    for row in rows:
        if len(row) < 2:
            continue
        key, value = str(row[0]).strip(), str(row[1]).strip()
        if key and value:
            config[key] = value
    return config


def parse_email_rows(rows: list[list[str]]) -> set[str]:
    return {str(row[0]).strip().lower() for row in rows if row and str(row[0]).strip()}


class SheetsStore:
    """Read-only config/whitelist access plus append-only audit rows."""

    def __init__(self, service, spreadsheet_id: str):
        self._service = service
        self.spreadsheet_id = spreadsheet_id

    async def _read_rows(self, range_: str) -> list[list[str]]:
        request = self._service.spreadsheets().values().get(
            spreadsheetId=self.spreadsheet_id, range=range_
        )
        response = await execute(request)
        return response.get("values") or []

    async def get_config(self) -> dict[str, str]:
        """
        Key/value pairs from the Config sheet.

        Raises:
            HttpError, OSError, asyncio.TimeoutError: if the sheet cannot be read
        """
        return parse_config_rows(await self._read_rows(SHEET_CONFIG_RANGE))

    async def get_allowed_emails(self) -> set[str]:
        """Whitelisted emails (trimmed, lower-cased); empty if the sheet is unreadable."""
        try:
            rows = await self._read_rows(SHEET_USERS_RANGE)
        except GOOGLE_API_ERRORS as e:
            logger.error(f"Error fetching allowed users: {e}")
            return set()
        return parse_email_rows(rows)

    async def is_email_allowed(self, email: str) -> bool:
        if not email:
            return False
        return email.strip().lower() in await self.get_allowed_emails()

    async def append_log(
        self,
        action: str,
        event_id: str = "-",
        summary: str = "-",
        start=None,
        end=None,
        performed_by: str = "System",
    ) -> None:
        """Append one audit row to the Logs sheet. Failures are logged, never raised."""
        row = [
            event_id or "-",
            action,
            performed_by,
            summary or "-",
            json.dumps(start, ensure_ascii=False) if start is not None else "-",
            json.dumps(end, ensure_ascii=False) if end is not None else "-",
            format_thai_datetime(local_now()),
        ]
        request = self._service.spreadsheets().values().append(
            spreadsheetId=self.spreadsheet_id,
            range=SHEET_LOGS_RANGE,
            valueInputOption="RAW",
            body={"values": [row]},
        )
        try:
            await execute(request)
        except GOOGLE_API_ERRORS as e:
            logger.error(f"Error logging to sheet: {e}")


_sheets_store: SheetsStore | None = None


def get_sheets_store() -> SheetsStore:
    """Get or create the sheets store (lazy initialization)."""
    global _sheets_store
    if _sheets_store is None:
        _sheets_store = SheetsStore(get_sheets_service(), GOOGLE_SHEET_ID)
    return _sheets_store
