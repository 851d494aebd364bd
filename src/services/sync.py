"""
Rolling-window sync of case appointments into daily calendar summaries.

Each day runs fetch -> summarize -> upsert. A failed day is tallied and the
loop moves on; only a credential failure (or an unexpected exception) ends
the run early. Runs are serialized by a lock because the calendar lookup
and the insert that follows it are not atomic.
"""

import asyncio
import logging
from datetime import date

from core.config import SYNC_ACTOR, SYNC_DEFAULT_DAYS
from core.dates import (
    clamp_window_days,
    local_now,
    local_today,
    to_buddhist_date_string,
    to_iso_date_range,
    window_dates,
)
from core.exceptions import FetchError, NotifyConfigMissingError, ReconcileError, SyncInProgressError
from models.cases import DayWindow, FetchStatus, SyncResult, UpsertOutcome
from services.calendar import CalendarService, get_calendar
from services.cases import CaseApiClient, get_case_client
from services.notifier import ADMIN_CHANNEL, DEFAULT_CHANNEL, TelegramNotifier, get_notifier
from services.sheets import SheetsStore, get_sheets_store
from services.summary import format_error_message, format_sync_report, format_today_message, summarize

logger = logging.getLogger(__name__)

AUDIT_ACTIONS = {
    UpsertOutcome.CREATED: "DAILY-CREATE",
    UpsertOutcome.UPDATED: "DAILY-UPDATE",
}


def day_window(day: date) -> DayWindow:
    business_date = to_buddhist_date_string(day)
    start_iso, end_iso = to_iso_date_range(business_date)
    return DayWindow(day=day, business_date=business_date, start_iso=start_iso, end_iso=end_iso)


class SyncOrchestrator:
    """Drives one sync run at a time across the rolling window."""

    def __init__(
        self,
        cases: CaseApiClient,
        calendar: CalendarService,
        notifier: TelegramNotifier | None = None,
        store: SheetsStore | None = None,
    ):
        self.cases = cases
        self.calendar = calendar
        self.notifier = notifier
        self.store = store
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def run(
        self,
        window_days=SYNC_DEFAULT_DAYS,
        *,
        today: date | None = None,
        stop_event: asyncio.Event | None = None,
        notify: bool = True,
    ) -> SyncResult:
        """
        Sync `window_days` days starting at `today` (local date by default).

        Setting `stop_event` stops the run at the next day boundary; days not
        reached are counted as skipped. Upserts already applied are kept.

        Raises:
            SyncInProgressError: if another run holds the lock
            AuthError: if no case API credential can be obtained
        """
        if self._lock.locked():
            raise SyncInProgressError("A sync run is already in progress")
        async with self._lock:
            days = clamp_window_days(window_days)
            return await self._run(days, today or local_today(), stop_event, notify)

    async def _run(
        self, days: int, start: date, stop_event: asyncio.Event | None, notify: bool
    ) -> SyncResult:
        logger.info(f"Syncing daily summary ({days} days from {start.isoformat()})")
        await self.cases.ensure_credential()

        result = SyncResult()
        for index, day in enumerate(window_dates(start, days)):
            if stop_event is not None and stop_event.is_set():
                result.skipped += days - index
                logger.warning(f"Sync stopped before {day.isoformat()}, {days - index} days skipped")
                break
            await self._sync_day(day_window(day), result)

        logger.info(f"Sync completed for {days} days: {result.as_dict()}")
        if notify and self.notifier is not None:
            await self.notifier.notify(
                format_sync_report(days, result, local_now()), channel=ADMIN_CHANNEL
            )
        return result

    async def _sync_day(self, window: DayWindow, result: SyncResult) -> None:
        fetched = await self.cases.fetch_appointments(window.business_date)

        if fetched.status is FetchStatus.EMPTY:
            logger.debug(f"No hearings on {window.business_date}")
            return
        if fetched.status is FetchStatus.ERROR:
            result.errors += 1
            logger.error(f"Fetch failed for {window.business_date}: {fetched.error}")
            return

        summary = summarize(fetched.appointments, window.business_date, local_now())
        try:
            upsert = await self.calendar.upsert_daily_summary(
                window.start_iso, window.end_iso, summary
            )
        except ReconcileError as e:
            result.errors += 1
            logger.error(str(e))
            return

        if upsert.outcome is UpsertOutcome.CREATED:
            result.added += 1
        else:
            result.updated += 1

        if self.store is not None:
            await self.store.append_log(
                AUDIT_ACTIONS[upsert.outcome],
                event_id=upsert.event_id,
                summary=summary.title,
                start={"date": window.start_iso},
                end={"date": window.end_iso},
                performed_by=SYNC_ACTOR,
            )


async def notify_day(
    cases: CaseApiClient, notifier: TelegramNotifier, day: date | None = None
) -> int:
    """
    Send one day's hearing digest to the default chat.

    Returns:
        Number of hearings in the digest

    Raises:
        NotifyConfigMissingError: if the default channel is not configured
        FetchError: if the day's query failed (an error message is sent first)
        NotifyError: if Telegram delivery fails
    """
    day = day or local_today()
    target = await notifier.resolve_target(DEFAULT_CHANNEL)
    if target is None:
        raise NotifyConfigMissingError("Telegram config missing in Sheet")

    fetched = await cases.fetch_appointments(to_buddhist_date_string(day))
    if fetched.status is FetchStatus.ERROR:
        await notifier.notify(format_error_message("ดึงรายการนัดพิจารณา", fetched.error))
        raise FetchError(fetched.error)

    await notifier.send(target, format_today_message(day, fetched.appointments))
    logger.info(f"Sent notification: {len(fetched.appointments)} cases")
    return len(fetched.appointments)


_orchestrator: SyncOrchestrator | None = None


def get_orchestrator() -> SyncOrchestrator:
    """Get or create the process-wide orchestrator (one run lock per process)."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = SyncOrchestrator(
            get_case_client(), get_calendar(), get_notifier(), get_sheets_store()
        )
    return _orchestrator


def is_sync_running() -> bool:
    """True while the process-wide orchestrator holds its run lock."""
    return _orchestrator is not None and _orchestrator.running
