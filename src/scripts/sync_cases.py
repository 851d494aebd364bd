#!/usr/bin/env python3
"""
Sync court hearing appointments into daily Google Calendar summaries.

Meant to be run from cron (or any external scheduler). Fetches each day of
the window from the case system, upserts one all-day summary entry per day,
and posts the tally to the admin Telegram chat.

Usage:
    uv run python src/scripts/sync_cases.py --days 14
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import LOG_LEVEL, SYNC_DEFAULT_DAYS, SYNC_MAX_DAYS
from core.dates import clamp_window_days
from core.exceptions import AuthError
from core.http_client import close_http_client
from services.sync import get_orchestrator


async def main(days: int, start: str | None, notify: bool) -> int:
    window = clamp_window_days(days)
    today = datetime.strptime(start, "%Y-%m-%d").date() if start else None

    print(f"Syncing {window} day(s) of hearings...")
    try:
        result = await get_orchestrator().run(window, today=today, notify=notify)
    except AuthError as e:
        print(f"\nError: {e}")
        return 1
    finally:
        await close_http_client()

    print(
        f"\nDone! Added {result.added}, updated {result.updated}, "
        f"skipped {result.skipped}, errors {result.errors}"
    )
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Sync hearings into Google Calendar")
    parser.add_argument(
        "--days",
        type=int,
        default=SYNC_DEFAULT_DAYS,
        help=f"Days to sync starting today (max {SYNC_MAX_DAYS}). Defaults to {SYNC_DEFAULT_DAYS}.",
    )
    parser.add_argument("--start", help="First day (YYYY-MM-DD). Defaults to today in Bangkok.")
    parser.add_argument(
        "--no-notify", action="store_true", help="Do not send the admin Telegram summary."
    )
    args = parser.parse_args()

    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(asyncio.run(main(args.days, args.start, not args.no_notify)))
