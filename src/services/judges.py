"""
Judge-on-duty lookup and announcement for a single day.
"""

import logging
from datetime import date

from core.dates import local_today, to_buddhist_date_string
from core.exceptions import FetchError, NotifyConfigMissingError
from models.cases import JudgeDuty
from services.cases import CaseApiClient
from services.notifier import DEFAULT_CHANNEL, TelegramNotifier
from services.summary import format_error_message, format_judge_message

logger = logging.getLogger(__name__)


def pool_date_key(day: date) -> str:
    """Roster key format: 'DD/MM/YYYY 00:00:00' with a BE year."""
    return f"{to_buddhist_date_string(day)} 00:00:00"


async def find_judge_on_duty(client: CaseApiClient, day: date) -> JudgeDuty | None:
    """
    Find the judge assigned to `day`, or None if the roster has no entry.

    Raises:
        FetchError: if the roster itself cannot be fetched
    """
    judges = await client.fetch_active_judges()
    roster = await client.fetch_judge_pool(day)

    target = pool_date_key(day)
    entry = next(
        (item for item in roster if isinstance(item, dict) and item.get("poolDate") == target),
        None,
    )
    if entry is None:
        return None

    judge_id = entry.get("judgeId")
    names = {judge.judge_id: judge.name for judge in judges}
    judge_name = names.get(judge_id) or f"Unknown ID: {judge_id}"
    return JudgeDuty(pool_date=target, judge_id=judge_id, judge_name=judge_name, raw=dict(entry))


async def announce_judge_on_duty(
    client: CaseApiClient, notifier: TelegramNotifier, day: date | None = None
) -> tuple[str, JudgeDuty | None]:
    """
    Look up the day's duty judge and post it to the default chat.

    Returns:
        Tuple of (roster date key, duty or None)

    Raises:
        NotifyConfigMissingError: if the default channel is not configured
        FetchError: if the roster cannot be fetched (an error message is sent first)
        NotifyError: if Telegram delivery fails
    """
    day = day or local_today()
    target = await notifier.resolve_target(DEFAULT_CHANNEL)
    if target is None:
        raise NotifyConfigMissingError("Telegram config missing in Sheet")

    logger.info(f"Checking schedule for: {pool_date_key(day)}")
    try:
        duty = await find_judge_on_duty(client, day)
    except FetchError as e:
        await notifier.notify(format_error_message("เช็คเวรชี้", e))
        raise

    await notifier.send(target, format_judge_message(day, duty))
    return pool_date_key(day), duty
