"""
Gregorian / Buddhist-era date conversion and date-range helpers.
"""

import re
from collections.abc import Iterator
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from core.config import BUDDHIST_ERA_OFFSET, LOCAL_TIMEZONE, SYNC_DEFAULT_DAYS, SYNC_MAX_DAYS

UNSPECIFIED_TIME = "ไม่ระบุ"

THAI_WEEKDAYS = ["วันจันทร์", "วันอังคาร", "วันพุธ", "วันพฤหัสบดี", "วันศุกร์", "วันเสาร์", "วันอาทิตย์"]
THAI_MONTHS = [
    "มกราคม", "กุมภาพันธ์", "มีนาคม", "เมษายน", "พฤษภาคม", "มิถุนายน",
    "กรกฎาคม", "สิงหาคม", "กันยายน", "ตุลาคม", "พฤศจิกายน", "ธันวาคม",
]

_BE_DATE_RE = re.compile(r"^\s*(\d{1,2})/(\d{1,2})/(\d{4})\s*$")
_TIME_SPLIT_RE = re.compile(r"[.:]")


# =============================================================================
# BUDDHIST ERA CONVERSION
# =============================================================================


def to_buddhist_date_string(d: date) -> str:
    """Format a Gregorian date as DD/MM/YYYY in the Buddhist era (year + 543)."""
    return f"{d.day:02d}/{d.month:02d}/{d.year + BUDDHIST_ERA_OFFSET}"


def from_buddhist_date_string(value: str) -> date:
    """
    Parse DD/MM/YYYY (Buddhist era) back into a Gregorian date.

    Raises:
        ValueError: if the string is not a valid BE date
    """
    match = _BE_DATE_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid Buddhist-era date: {value!r}")
    day, month, year = (int(part) for part in match.groups())
    return date(year - BUDDHIST_ERA_OFFSET, month, day)


def to_iso_date_range(be_date: str) -> tuple[str, str]:
    """
    Convert a BE business date to an all-day [start, end) range in ISO format.

    The end date is the following calendar day (exclusive), which is what the
    calendar API expects for all-day entries.
    """
    start = from_buddhist_date_string(be_date)
    end = start + timedelta(days=1)
    return start.isoformat(), end.isoformat()


# =============================================================================
# TIME OF DAY
# =============================================================================


def minutes_since_midnight(value: str | None) -> int:
    """
    Convert an appointment time ("HH.MM.SS", colons also accepted) to minutes.

    Malformed input returns 0, so unparseable times sort first.
    """
    if not value:
        return 0
    parts = _TIME_SPLIT_RE.split(value.strip())
    if len(parts) < 2:
        return 0
    try:
        hours, minutes = int(parts[0]), int(parts[1])
    except ValueError:
        return 0
    if not (0 <= hours <= 23 and 0 <= minutes <= 59):
        return 0
    return hours * 60 + minutes


def short_time(value: str | None) -> str:
    """Truncate "HH.MM.SS" to "HH.MM"."""
    if not value:
        return UNSPECIFIED_TIME
    return value.strip()[:5]


# =============================================================================
# LOCAL CLOCK AND DISPLAY
# =============================================================================


def local_now() -> datetime:
    """Current time in the court's timezone."""
    return datetime.now(ZoneInfo(LOCAL_TIMEZONE))


def local_today() -> date:
    return local_now().date()


def format_thai_datetime(dt: datetime) -> str:
    """Format as 'D/M/YYYY HH:MM:SS' with a BE year (th-TH locale style)."""
    return f"{dt.day}/{dt.month}/{dt.year + BUDDHIST_ERA_OFFSET} {dt:%H:%M:%S}"


def format_thai_long_date(d: date) -> str:
    """Format as e.g. 'วันจันทร์ที่ 19 ตุลาคม 2569'."""
    weekday = THAI_WEEKDAYS[d.weekday()]
    month = THAI_MONTHS[d.month - 1]
    return f"{weekday}ที่ {d.day} {month} {d.year + BUDDHIST_ERA_OFFSET}"


# =============================================================================
# SYNC WINDOW
# =============================================================================


def clamp_window_days(value) -> int:
    """
    Normalize a requested window size.

    Missing, non-numeric, zero or negative values fall back to the default;
    anything above the ceiling is clamped to it.
    """
    try:
        days = int(value)
    except (TypeError, ValueError):
        return SYNC_DEFAULT_DAYS
    if days <= 0:
        return SYNC_DEFAULT_DAYS
    return min(days, SYNC_MAX_DAYS)


def window_dates(start: date, days: int) -> Iterator[date]:
    """Yield `days` consecutive dates beginning at `start`."""
    for offset in range(days):
        yield start + timedelta(days=offset)
