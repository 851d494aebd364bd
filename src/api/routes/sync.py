"""Sync trigger endpoints."""

import logging

from fastapi import APIRouter, Depends, status

from api.dependencies import api_error, verify_api_key
from api.models.responses import ErrorCodes, SyncResponse, SyncSummary
from core.config import SYNC_DEFAULT_DAYS
from core.dates import clamp_window_days
from core.exceptions import AuthError, SyncInProgressError
from services.sync import SyncOrchestrator, get_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


async def _run_sync(days: str | int, orchestrator: SyncOrchestrator) -> SyncResponse:
    window = clamp_window_days(days)
    try:
        result = await orchestrator.run(window)
    except SyncInProgressError:
        raise api_error(
            status.HTTP_409_CONFLICT,
            "A sync run is already in progress",
            ErrorCodes.SYNC_IN_PROGRESS,
        )
    except AuthError as e:
        logger.error(f"Fatal sync error: {e}")
        raise api_error(
            status.HTTP_502_BAD_GATEWAY,
            "Cannot connect to Case System API",
            ErrorCodes.CASE_API_AUTH_FAILED,
            [str(e)],
        )

    return SyncResponse(
        message=f"Sync Completed for {window} days",
        days=window,
        summary=SyncSummary(**result.as_dict()),
    )


@router.get("/sync-cases", response_model=SyncResponse)
async def sync_cases_default(
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(verify_api_key),
):
    """Sync the default window (7 days from today)."""
    return await _run_sync(SYNC_DEFAULT_DAYS, orchestrator)


@router.get("/sync-cases/{days}", response_model=SyncResponse)
async def sync_cases(
    days: str,
    orchestrator: SyncOrchestrator = Depends(get_orchestrator),
    _api_key: str = Depends(verify_api_key),
):
    """
    Sync `days` days from today into the calendar.

    Non-numeric or non-positive values fall back to 7; values above 90 are
    clamped to 90. Days that fail are counted in `errors`; the response is
    still 200 unless the case API credential cannot be obtained.
    """
    return await _run_sync(days, orchestrator)
