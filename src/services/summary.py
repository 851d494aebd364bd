"""
Daily summaries and Telegram message formatting.
"""

from collections.abc import Iterable
from datetime import date, datetime
from html import escape

from core.config import SUMMARY_MARKER
from core.dates import format_thai_datetime, format_thai_long_date, short_time, to_buddhist_date_string
from models.cases import Appointment, DaySummary, JudgeDuty, SyncResult

SEPARATOR = "--------------------------------"


def sort_appointments(appointments: Iterable[Appointment]) -> list[Appointment]:
    """Sort by time of day; ties keep fetch order (sorted() is stable)."""
    return sorted(appointments, key=lambda a: a.minutes)


def summary_title(count: int) -> str:
    return f"⚖️ {SUMMARY_MARKER} {count} คดี"


def summarize(
    appointments: Iterable[Appointment], business_date: str, updated_at: datetime
) -> DaySummary:
    """
    Build the calendar title and description for one day.

    Args:
        appointments: the day's hearings, in fetch order
        business_date: DD/MM/YYYY (Buddhist era), shown in the heading
        updated_at: timestamp written on the last line

    Raises:
        ValueError: if there are no appointments
    """
    ordered = sort_appointments(appointments)
    if not ordered:
        raise ValueError("Cannot summarize a day without appointments")

    lines = [f"สรุปรายการนัดหมายประจำวันที่ {business_date}", "----------------------------"]
    for index, item in enumerate(ordered, start=1):
        lines.append(f"{index}. {item.case_id} ({item.reason})")
        lines.append(f"   ห้อง: {item.room} | เวลา: {short_time(item.time)} น.")
        lines.append("")
    lines.append(f"(Updated: {format_thai_datetime(updated_at)})")

    return DaySummary(
        business_date=business_date,
        title=summary_title(len(ordered)),
        description="\n".join(lines),
        appointments=tuple(ordered),
    )


# =============================================================================
# TELEGRAM MESSAGES (parse_mode=HTML)
# =============================================================================


def format_today_message(day: date, appointments: Iterable[Appointment]) -> str:
    """Digest of one day's hearings for the default chat."""
    ordered = sort_appointments(appointments)
    lines = [
        "📅 <b>รายการนัดพิจารณาประจำวัน</b>",
        format_thai_long_date(day),
        SEPARATOR,
    ]
    if not ordered:
        lines.append("✅ <i>ไม่มีนัดพิจารณาคดีในวันนี้</i>")
        return "\n".join(lines)

    for index, item in enumerate(ordered, start=1):
        lines.append(f"<b>{index}. {escape(item.case_id)}</b>")
        lines.append(f"   🕒 {escape(short_time(item.time))} น. | 🏛️ ห้อง {escape(item.room)}")
        lines.append(f"   📝 {escape(item.reason)}")
        lines.append("")
    lines.append(SEPARATOR)
    lines.append(f"รวมทั้งหมด: <b>{len(ordered)}</b> คดี")
    return "\n".join(lines)


def format_sync_report(days: int, result: SyncResult, finished_at: datetime) -> str:
    """Tally message for the admin chat."""
    lines = [
        f"🔄 <b>สรุปผลการซิงค์ข้อมูล ({days} วัน)</b>",
        SEPARATOR,
        f"✅ เพิ่ม: <b>{result.added}</b> วัน | ✏️ ปรับปรุง: <b>{result.updated}</b> วัน",
        f"⚠️ Error: <b>{result.errors}</b>",
    ]
    if result.skipped:
        lines.append(f"⏭️ ข้าม: <b>{result.skipped}</b> วัน")
    lines.append(f"⏰ เวลา: {format_thai_datetime(finished_at)}")
    return "\n".join(lines)


def format_error_message(context: str, error: str | Exception) -> str:
    return f"⚠️ <b>Error {escape(context)}:</b>\n{escape(str(error))}"


def format_judge_message(day: date, duty: JudgeDuty | None) -> str:
    """Judge-on-duty message; `duty` is None when the roster has no entry."""
    heading = f"⚖️ <b>เวรชี้ประจำวันที่ {to_buddhist_date_string(day)}</b>"
    if duty is None:
        return f"{heading}\n{SEPARATOR}\n❌ <i>ไม่พบข้อมูลเวรชี้ในระบบ</i>"
    return f"{heading}\n{SEPARATOR}\n👨‍⚖️ <b>{escape(duty.judge_name)}</b>"
