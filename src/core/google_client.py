"""
Google Calendar / Sheets client setup with lazy initialization.
"""

import asyncio
import json

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from core.config import GOOGLE_API_TIMEOUT, GOOGLE_CREDENTIALS, GOOGLE_SCOPES

# Errors a Calendar/Sheets call can surface: API status, token refresh, transport, timeout
GOOGLE_API_ERRORS = (
    HttpError,
    GoogleAuthError,
    httplib2.HttpLib2Error,
    asyncio.TimeoutError,
    OSError,
)

_credentials: service_account.Credentials | None = None
_calendar_service = None
_sheets_service = None


def get_google_credentials() -> service_account.Credentials:
    """Build service-account credentials from the GOOGLE_CREDENTIALS JSON string."""
    global _credentials
    if _credentials is None:
        if not GOOGLE_CREDENTIALS:
            raise RuntimeError("GOOGLE_CREDENTIALS is not set")
        info = json.loads(GOOGLE_CREDENTIALS)
        _credentials = service_account.Credentials.from_service_account_info(
            info, scopes=GOOGLE_SCOPES
        )
    return _credentials


def get_calendar_service():
    """Get or create the Calendar v3 resource."""
    global _calendar_service
    if _calendar_service is None:
        _calendar_service = build(
            "calendar", "v3", credentials=get_google_credentials(), cache_discovery=False
        )
    return _calendar_service


def get_sheets_service():
    """Get or create the Sheets v4 resource."""
    global _sheets_service
    if _sheets_service is None:
        _sheets_service = build(
            "sheets", "v4", credentials=get_google_credentials(), cache_discovery=False
        )
    return _sheets_service


async def execute(request, timeout: float = GOOGLE_API_TIMEOUT) -> dict:
    """
    Run a blocking googleapiclient request off the event loop.

    Raises:
        asyncio.TimeoutError: if the call does not finish within `timeout` seconds
    """
    return await asyncio.wait_for(asyncio.to_thread(request.execute), timeout=timeout)
