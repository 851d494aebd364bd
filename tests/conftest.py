"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add src and the fixture generators to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent / "fixtures"))

from generate_appointments import generate_appointments  # noqa: E402

from models.cases import Appointment, FetchResult, TelegramTarget  # noqa: E402


# =============================================================================
# GOOGLE API FAKES (mimic googleapiclient's resource().method(...).execute())
# =============================================================================


class FakeRequest:
    def __init__(self, fn):
        self._fn = fn

    def execute(self):
        return self._fn()


class FakeEventsResource:
    """In-memory calendar events collection."""

    def __init__(self):
        self.items: dict[str, dict] = {}
        self.calls: list[tuple[str, dict]] = []
        self.fail_on: set[str] = set()
        self.failure: Exception | None = None  # raised instead of a timeout
        self._next_id = 1

    def _maybe_fail(self, method):
        if method in self.fail_on:
            raise self.failure or TimeoutError(f"{method} timed out")

    def list(self, **kwargs):
        self.calls.append(("list", kwargs))

        def run():
            self._maybe_fail("list")
            day = kwargs["timeMin"][:10]
            q = kwargs.get("q") or ""
            items = [
                item for item in self.items.values()
                if item["start"].get("date") == day and q in item.get("summary", "")
            ]
            return {"items": items}

        return FakeRequest(run)

    def insert(self, calendarId, body):
        self.calls.append(("insert", {"calendarId": calendarId, "body": body}))

        def run():
            self._maybe_fail("insert")
            event_id = f"evt{self._next_id}"
            self._next_id += 1
            self.items[event_id] = {"id": event_id, **body}
            return self.items[event_id]

        return FakeRequest(run)

    def update(self, calendarId, eventId, body):
        self.calls.append(("update", {"calendarId": calendarId, "eventId": eventId, "body": body}))

        def run():
            self._maybe_fail("update")
            self.items[eventId] = {"id": eventId, **body}
            return self.items[eventId]

        return FakeRequest(run)

    def methods_called(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeCalendarApi:
    def __init__(self):
        self._events = FakeEventsResource()

    def events(self):
        return self._events


class FakeValuesResource:
    def __init__(self, ranges: dict[str, list[list[str]]]):
        self.ranges = ranges
        self.appended: list[tuple[str, list]] = []
        self.fail = False
        self.failure: Exception | None = None

    def get(self, spreadsheetId, range):
        def run():
            if self.fail:
                raise self.failure or TimeoutError("sheet read timed out")
            return {"values": self.ranges.get(range, [])} if self.ranges.get(range) else {}

        return FakeRequest(run)

    def append(self, spreadsheetId, range, valueInputOption, body):
        def run():
            if self.fail:
                raise self.failure or TimeoutError("sheet append timed out")
            self.appended.append((range, body["values"]))
            return {"updates": {"updatedRows": len(body["values"])}}

        return FakeRequest(run)


class FakeSpreadsheets:
    def __init__(self, values: FakeValuesResource):
        self._values = values

    def values(self):
        return self._values


class FakeSheetsApi:
    def __init__(self, ranges: dict[str, list[list[str]]] | None = None):
        self.values = FakeValuesResource(ranges or {})

    def spreadsheets(self):
        return FakeSpreadsheets(self.values)


# =============================================================================
# PIPELINE FAKES
# =============================================================================


class FakeCaseClient:
    """Case API stand-in keyed by business date (DD/MM/YYYY, BE)."""

    def __init__(self, results: dict[str, FetchResult] | None = None, auth_error=None):
        self.results = results or {}
        self.auth_error = auth_error
        self.fetched: list[str] = []

    async def ensure_credential(self) -> str:
        if self.auth_error:
            raise self.auth_error
        return "token"

    async def fetch_appointments(self, business_date: str) -> FetchResult:
        self.fetched.append(business_date)
        return self.results.get(business_date, FetchResult.empty())


class FakeNotifier:
    def __init__(self, configured: bool = True, fail_send=None):
        self.configured = configured
        self.fail_send = fail_send
        self.sent: list[tuple[str, str]] = []  # (channel or chat id, text)

    async def resolve_target(self, channel="default"):
        return TelegramTarget(token="bot-token", chat_id=channel) if self.configured else None

    async def send(self, target, text):
        if self.fail_send:
            raise self.fail_send
        self.sent.append((target.chat_id, text))

    async def notify(self, text, channel="default"):
        if not self.configured:
            return False
        self.sent.append((channel, text))
        return True


@pytest.fixture
def calendar_api():
    return FakeCalendarApi()


@pytest.fixture
def sheets_api():
    return FakeSheetsApi(
        {
            "Config!A2:B": [
                ["TELEGRAM_TOKEN", " bot-default "],
                ["CHAT_ID", "-1001"],
                ["ADMIN_TELEGRAM_TOKEN", "bot-admin"],
                ["ADMIN_CHAT_ID", "-2002"],
                [],
                ["ORPHAN_KEY"],
            ],
            "Users!A2:A": [[" Clerk@Court.go.th "], [""], ["judge@court.go.th"]],
        }
    )


@pytest.fixture
def appointment_items():
    """Raw API items for one day, in random time order."""
    return generate_appointments("19/10/2569", 6, seed=42)


@pytest.fixture
def sample_appointments():
    """Hand-written appointments with a tie at 09.30 and a malformed time."""
    return [
        Appointment("พ.200/2568", "ฟังคำพิพากษา", "3", "13.30.00"),
        Appointment("อ.101/2568", "สืบพยานโจทก์", "1", "09.30.00"),
        Appointment("อ.102/2568", "ไกล่เกลี่ย", "2", "09.30.00"),
        Appointment("ย.5/2567", "สอบคำให้การ", "4", ""),
    ]
