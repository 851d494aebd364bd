"""
Data models for case appointments, calendar upserts and sync results.

Appointments come from the case API as camelCase dictionaries and are
converted once, at the fetcher boundary, into frozen dataclasses.
"""

from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum

from core.dates import minutes_since_midnight


@dataclass(frozen=True)
class Appointment:
    """One scheduled hearing."""

    case_id: str
    reason: str
    room: str
    time: str  # "HH.MM.SS"
    appoint_date: str = ""  # DD/MM/YYYY (BE), as sent by the API

    @classmethod
    def from_api(cls, item: dict) -> "Appointment":
        return cls(
            case_id=str(item.get("fullCaseId") or "").strip(),
            reason=str(item.get("reasonName") or "").strip(),
            room=str(item.get("roomName") or "").strip(),
            time=str(item.get("appointTime") or "").strip(),
            appoint_date=str(item.get("appointDate") or "").strip(),
        )

    @property
    def minutes(self) -> int:
        return minutes_since_midnight(self.time)


@dataclass(frozen=True)
class DaySummary:
    """Calendar title and description for one business date."""

    business_date: str
    title: str
    description: str
    appointments: tuple[Appointment, ...]

    @property
    def count(self) -> int:
        return len(self.appointments)


class FetchStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class FetchResult:
    """Tagged outcome of one appointment query: ok, empty or error."""

    status: FetchStatus
    appointments: tuple[Appointment, ...] = ()
    error: str | None = None

    @classmethod
    def ok(cls, appointments) -> "FetchResult":
        return cls(FetchStatus.OK, tuple(appointments))

    @classmethod
    def empty(cls) -> "FetchResult":
        return cls(FetchStatus.EMPTY)

    @classmethod
    def failed(cls, error: str) -> "FetchResult":
        return cls(FetchStatus.ERROR, error=error)


class UpsertOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


@dataclass(frozen=True)
class UpsertResult:
    outcome: UpsertOutcome
    event_id: str


@dataclass
class SyncResult:
    """Per-run tally, built up day by day."""

    added: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class TelegramTarget:
    token: str
    chat_id: str


@dataclass(frozen=True)
class Judge:
    judge_id: int | str
    name: str


@dataclass
class JudgeDuty:
    """Judge assigned to the duty pool for one day."""

    pool_date: str  # "DD/MM/YYYY 00:00:00" (BE)
    judge_id: int | str
    judge_name: str
    raw: dict = field(default_factory=dict)

    def as_dict(self) -> dict:
        return {**self.raw, "judgeId": self.judge_id, "judgeName": self.judge_name}


@dataclass(frozen=True)
class DayWindow:
    """One day of the rolling window in both calendar representations."""

    day: date
    business_date: str  # DD/MM/YYYY (BE)
    start_iso: str
    end_iso: str
