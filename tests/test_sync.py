"""
Tests for the sync orchestrator and single-day notifications.
"""

import asyncio
from datetime import date

import httpx
import pytest
from conftest import FakeCaseClient, FakeNotifier
from google.auth.exceptions import RefreshError, TransportError

from core.exceptions import AuthError, FetchError, NotifyConfigMissingError, SyncInProgressError
from models.cases import Appointment, FetchResult
from services.calendar import CalendarService
from services.notifier import TelegramNotifier
from services.sheets import SheetsStore
from services.sync import SyncOrchestrator, day_window, notify_day

TODAY = date(2026, 10, 19)
DAY_0, DAY_1, DAY_2 = "19/10/2569", "20/10/2569", "21/10/2569"


@pytest.fixture
def hearings(sample_appointments):
    return FetchResult.ok(sample_appointments)


def make_orchestrator(case_client, calendar_api, notifier=None, sheets_api=None):
    store = SheetsStore(sheets_api, "sheet-id") if sheets_api is not None else None
    return SyncOrchestrator(case_client, CalendarService(calendar_api, "cal"), notifier, store)


def test_day_window():
    window = day_window(date(2026, 12, 31))
    assert window.business_date == "31/12/2569"
    assert (window.start_iso, window.end_iso) == ("2026-12-31", "2027-01-01")


def test_only_day_with_hearings_is_created(calendar_api, hearings):
    cases = FakeCaseClient({DAY_2: hearings})
    orchestrator = make_orchestrator(cases, calendar_api)

    result = asyncio.run(orchestrator.run(3, today=TODAY, notify=False))

    assert result.as_dict() == {"added": 1, "updated": 0, "skipped": 0, "errors": 0}
    assert cases.fetched == [DAY_0, DAY_1, DAY_2]
    # days 0 and 1 never touch the calendar
    lookups = [kw["timeMin"][:10] for name, kw in calendar_api.events().calls if name == "list"]
    assert lookups == ["2026-10-21"]


def test_rerun_updates_instead_of_duplicating(calendar_api, hearings):
    cases = FakeCaseClient({DAY_0: hearings, DAY_1: hearings})
    orchestrator = make_orchestrator(cases, calendar_api)

    first = asyncio.run(orchestrator.run(2, today=TODAY, notify=False))
    second = asyncio.run(orchestrator.run(2, today=TODAY, notify=False))

    assert (first.added, first.updated) == (2, 0)
    assert (second.added, second.updated) == (0, 2)
    assert len(calendar_api.events().items) == 2


def test_empty_day_tallies_nothing(calendar_api):
    orchestrator = make_orchestrator(FakeCaseClient(), calendar_api)
    result = asyncio.run(orchestrator.run(1, today=TODAY, notify=False))

    assert result.as_dict() == {"added": 0, "updated": 0, "skipped": 0, "errors": 0}
    assert calendar_api.events().calls == []


def test_failed_days_are_counted_and_loop_continues(calendar_api, hearings):
    cases = FakeCaseClient({DAY_0: FetchResult.failed("HTTP 500"), DAY_2: hearings})
    orchestrator = make_orchestrator(cases, calendar_api)

    result = asyncio.run(orchestrator.run(3, today=TODAY, notify=False))

    assert result.errors == 1
    assert result.added == 1
    assert cases.fetched == [DAY_0, DAY_1, DAY_2]


def test_reconcile_error_is_counted(calendar_api, hearings):
    calendar_api.events().fail_on.add("insert")
    cases = FakeCaseClient({DAY_0: hearings, DAY_1: hearings})
    orchestrator = make_orchestrator(cases, calendar_api)

    result = asyncio.run(orchestrator.run(2, today=TODAY, notify=False))
    assert result.as_dict() == {"added": 0, "updated": 0, "skipped": 0, "errors": 2}


def test_window_is_clamped_to_ceiling(calendar_api):
    cases = FakeCaseClient()
    orchestrator = make_orchestrator(cases, calendar_api)

    asyncio.run(orchestrator.run(999, today=TODAY, notify=False))
    assert len(cases.fetched) == 90


def test_auth_error_aborts_before_any_fetch(calendar_api):
    cases = FakeCaseClient(auth_error=AuthError("login refused"))
    notifier = FakeNotifier()
    orchestrator = make_orchestrator(cases, calendar_api, notifier)

    with pytest.raises(AuthError):
        asyncio.run(orchestrator.run(3, today=TODAY))
    assert cases.fetched == []
    assert notifier.sent == []
    assert not orchestrator.running


def test_concurrent_run_is_rejected(calendar_api):
    class SlowCaseClient(FakeCaseClient):
        async def fetch_appointments(self, business_date):
            await asyncio.sleep(0.01)
            return await super().fetch_appointments(business_date)

    orchestrator = make_orchestrator(SlowCaseClient(), calendar_api)

    async def scenario():
        first = asyncio.create_task(orchestrator.run(3, today=TODAY, notify=False))
        await asyncio.sleep(0)
        assert orchestrator.running
        with pytest.raises(SyncInProgressError):
            await orchestrator.run(3, today=TODAY, notify=False)
        return await first

    result = asyncio.run(scenario())
    assert result.errors == 0
    assert not orchestrator.running


def test_stop_event_skips_remaining_days(calendar_api, hearings):
    stop = asyncio.Event()

    class StoppingCaseClient(FakeCaseClient):
        async def fetch_appointments(self, business_date):
            if business_date == DAY_1:
                stop.set()
            return await super().fetch_appointments(business_date)

    cases = StoppingCaseClient({DAY_0: hearings, DAY_1: hearings})
    orchestrator = make_orchestrator(cases, calendar_api)

    result = asyncio.run(orchestrator.run(5, today=TODAY, stop_event=stop, notify=False))

    # day 1 finishes its step; days 2-4 are never started
    assert result.as_dict() == {"added": 2, "updated": 0, "skipped": 3, "errors": 0}
    assert cases.fetched == [DAY_0, DAY_1]


def test_admin_tally_sent_after_run(calendar_api, hearings):
    notifier = FakeNotifier()
    orchestrator = make_orchestrator(FakeCaseClient({DAY_0: hearings}), calendar_api, notifier)

    asyncio.run(orchestrator.run(2, today=TODAY))

    channel, text = notifier.sent[0]
    assert channel == "admin"
    assert "(2 วัน)" in text
    assert "เพิ่ม: <b>1</b>" in text


def test_unconfigured_notifier_does_not_fail_sync(calendar_api, hearings):
    notifier = FakeNotifier(configured=False)
    orchestrator = make_orchestrator(FakeCaseClient({DAY_0: hearings}), calendar_api, notifier)

    result = asyncio.run(orchestrator.run(1, today=TODAY))
    assert result.added == 1


def test_calendar_token_refresh_failure_is_tallied_per_day(calendar_api, hearings):
    calendar_api.events().fail_on.add("list")
    calendar_api.events().failure = RefreshError("invalid_grant: Invalid JWT Signature.")
    cases = FakeCaseClient({DAY_0: hearings, DAY_1: hearings})
    orchestrator = make_orchestrator(cases, calendar_api)

    result = asyncio.run(orchestrator.run(2, today=TODAY, notify=False))
    assert result.as_dict() == {"added": 0, "updated": 0, "skipped": 0, "errors": 2}


def run_with_telegram(calendar_api, sheets_api, cases, handler, days=1):
    """Run a sync whose admin tally goes through a real TelegramNotifier."""

    async def main():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            store = SheetsStore(sheets_api, "sheet-id")
            notifier = TelegramNotifier(http, store, "https://tg.test")
            orchestrator = SyncOrchestrator(cases, CalendarService(calendar_api, "cal"), notifier)
            return await orchestrator.run(days, today=TODAY)

    return asyncio.run(main())


@pytest.mark.parametrize(
    "error",
    [TransportError("oauth2.googleapis.com unreachable"), RefreshError("invalid_grant")],
)
def test_unreadable_telegram_config_does_not_abort_sync(calendar_api, sheets_api, hearings, error):
    sheets_api.values.fail = True
    sheets_api.values.failure = error
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"ok": True})

    result = run_with_telegram(calendar_api, sheets_api, FakeCaseClient({DAY_0: hearings}), handler)

    assert result.added == 1
    assert requests == []


def test_telegram_delivery_failure_does_not_abort_sync(calendar_api, sheets_api, hearings):
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    result = run_with_telegram(
        calendar_api, sheets_api, FakeCaseClient({DAY_0: hearings, DAY_1: hearings}), handler, days=2
    )
    assert result.as_dict() == {"added": 2, "updated": 0, "skipped": 0, "errors": 0}


def test_telegram_error_response_does_not_abort_sync(calendar_api, sheets_api, hearings):
    def handler(request):
        return httpx.Response(403, json={"ok": False, "description": "bot was kicked"})

    result = run_with_telegram(calendar_api, sheets_api, FakeCaseClient({DAY_0: hearings}), handler)
    assert result.added == 1


def test_upserts_are_audited(calendar_api, sheets_api, hearings):
    orchestrator = make_orchestrator(
        FakeCaseClient({DAY_0: hearings}), calendar_api, sheets_api=sheets_api
    )

    asyncio.run(orchestrator.run(1, today=TODAY, notify=False))
    asyncio.run(orchestrator.run(1, today=TODAY, notify=False))

    actions = [values[0][1] for _, values in sheets_api.values.appended]
    actors = {values[0][2] for _, values in sheets_api.values.appended}
    assert actions == ["DAILY-CREATE", "DAILY-UPDATE"]
    assert actors == {"Auto-Bot"}


# =============================================================================
# SINGLE-DAY NOTIFICATION
# =============================================================================


def test_notify_day_sends_digest(sample_appointments):
    cases = FakeCaseClient({DAY_0: FetchResult.ok(sample_appointments)})
    notifier = FakeNotifier()

    count = asyncio.run(notify_day(cases, notifier, TODAY))

    assert count == 4
    _, text = notifier.sent[0]
    assert "รวมทั้งหมด: <b>4</b> คดี" in text


def test_notify_day_without_hearings():
    notifier = FakeNotifier()
    count = asyncio.run(notify_day(FakeCaseClient(), notifier, TODAY))

    assert count == 0
    assert "ไม่มีนัดพิจารณาคดีในวันนี้" in notifier.sent[0][1]


def test_notify_day_requires_config():
    with pytest.raises(NotifyConfigMissingError):
        asyncio.run(notify_day(FakeCaseClient(), FakeNotifier(configured=False), TODAY))


def test_notify_day_reports_fetch_error():
    cases = FakeCaseClient({DAY_0: FetchResult.failed("Database offline")})
    notifier = FakeNotifier()

    with pytest.raises(FetchError):
        asyncio.run(notify_day(cases, notifier, TODAY))
    assert "Database offline" in notifier.sent[0][1]


def test_appointments_from_api_items(appointment_items):
    appointments = [Appointment.from_api(item) for item in appointment_items]
    assert all(a.appoint_date == DAY_0 for a in appointments)
