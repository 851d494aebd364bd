"""
Daily summary entries in Google Calendar: lookup and idempotent upsert.
"""

import logging

from core.config import GOOGLE_API_TIMEOUT, GOOGLE_CALENDAR_ID, SUMMARY_MARKER
from core.exceptions import ReconcileError
from core.google_client import GOOGLE_API_ERRORS, execute, get_calendar_service
from models.cases import DaySummary, UpsertOutcome, UpsertResult

logger = logging.getLogger(__name__)


def build_summary_event(summary: DaySummary, start_iso: str, end_iso: str) -> dict:
    """All-day event body; `end_iso` is exclusive."""
    return {
        "summary": summary.title,
        "description": summary.description,
        "start": {"date": start_iso},
        "end": {"date": end_iso},
    }


class CalendarService:
    """Calendar reconciler for the auto-generated daily summary entries."""

    def __init__(self, service, calendar_id: str, timeout: float = GOOGLE_API_TIMEOUT):
        self._service = service
        self.calendar_id = calendar_id
        self._timeout = timeout

    async def _execute(self, request) -> dict:
        return await execute(request, timeout=self._timeout)

    async def find_daily_summary(self, date_iso: str) -> dict | None:
        """
        Find the summary entry for a day by date range and marker text.

        The first match wins. More than one match means two runs raced on
        the find-then-insert sequence; the extras are left alone.

        Raises:
            ReconcileError: if the list call fails
        """
        request = self._service.events().list(
            calendarId=self.calendar_id,
            timeMin=f"{date_iso}T00:00:00Z",
            timeMax=f"{date_iso}T23:59:59Z",
            q=SUMMARY_MARKER,
            singleEvents=True,
        )
        try:
            response = await self._execute(request)
        except GOOGLE_API_ERRORS as e:
            raise ReconcileError(f"Calendar lookup failed for {date_iso}: {e}") from e

        matches = [
            item for item in response.get("items", [])
            if SUMMARY_MARKER in (item.get("summary") or "")
        ]
        if len(matches) > 1:
            ids = ", ".join(item.get("id", "?") for item in matches)
            logger.warning(f"Duplicate summary entries for {date_iso}: {ids}")
        return matches[0] if matches else None

    async def upsert_daily_summary(
        self, start_iso: str, end_iso: str, summary: DaySummary
    ) -> UpsertResult:
        """
        Overwrite the day's summary entry if it exists, insert it otherwise.

        Raises:
            ReconcileError: on any Calendar API or transport failure
        """
        body = build_summary_event(summary, start_iso, end_iso)
        existing = await self.find_daily_summary(start_iso)

        try:
            if existing:
                response = await self._execute(
                    self._service.events().update(
                        calendarId=self.calendar_id, eventId=existing["id"], body=body
                    )
                )
                outcome = UpsertOutcome.UPDATED
            else:
                response = await self._execute(
                    self._service.events().insert(calendarId=self.calendar_id, body=body)
                )
                outcome = UpsertOutcome.CREATED
        except GOOGLE_API_ERRORS as e:
            raise ReconcileError(f"Calendar upsert failed for {start_iso}: {e}") from e

        event_id = response.get("id") or (existing or {}).get("id", "")
        logger.info(f"{outcome.value.capitalize()} summary for {start_iso}: {summary.title}")
        return UpsertResult(outcome=outcome, event_id=event_id)


_calendar: CalendarService | None = None


def get_calendar() -> CalendarService:
    """Get or create the calendar service (lazy initialization)."""
    global _calendar
    if _calendar is None:
        _calendar = CalendarService(get_calendar_service(), GOOGLE_CALENDAR_ID)
    return _calendar
