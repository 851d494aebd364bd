#!/usr/bin/env python3
"""
Send a day's hearing list (and optionally the duty judge) to Telegram.

Usage:
    uv run python src/scripts/notify_today.py
    uv run python src/scripts/notify_today.py --date 2025-11-07 --judge
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import LOG_LEVEL
from core.exceptions import AuthError, FetchError, NotifyError
from core.http_client import close_http_client
from services.cases import get_case_client
from services.judges import announce_judge_on_duty
from services.notifier import get_notifier
from services.sync import notify_day


async def main(date_str: str | None, judge: bool) -> int:
    day = datetime.strptime(date_str, "%Y-%m-%d").date() if date_str else None
    cases = get_case_client()
    notifier = get_notifier()

    try:
        count = await notify_day(cases, notifier, day)
        print(f"Sent hearing list: {count} case(s)")

        if judge:
            pool_date, duty = await announce_judge_on_duty(cases, notifier, day)
            name = duty.judge_name if duty else "no schedule"
            print(f"Sent duty judge for {pool_date}: {name}")
    except (AuthError, FetchError, NotifyError) as e:
        print(f"\nError: {e}")
        return 1
    finally:
        await close_http_client()

    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Send hearing notifications to Telegram")
    parser.add_argument("--date", help="Day to announce (YYYY-MM-DD). Defaults to today in Bangkok.")
    parser.add_argument("--judge", action="store_true", help="Also announce the duty judge.")
    args = parser.parse_args()

    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(asyncio.run(main(args.date, args.judge)))
