"""Telegram notification endpoints."""

from fastapi import APIRouter, Depends, status

from api.dependencies import api_error, verify_api_key
from api.models.responses import CaseTodayResponse, ErrorCodes, JudgeScheduleResponse
from core.exceptions import AuthError, FetchError, NotifyConfigMissingError, NotifyError
from services.cases import CaseApiClient, get_case_client
from services.judges import announce_judge_on_duty
from services.notifier import TelegramNotifier, get_notifier
from services.sync import notify_day

router = APIRouter()


def _notification_error(exc: Exception):
    """Map a notification failure to an HTTPException."""
    if isinstance(exc, NotifyConfigMissingError):
        return api_error(
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Telegram config missing in Sheet",
            ErrorCodes.NOTIFY_CONFIG_MISSING,
        )
    if isinstance(exc, AuthError):
        return api_error(
            status.HTTP_502_BAD_GATEWAY,
            "Cannot connect to Case System API",
            ErrorCodes.CASE_API_AUTH_FAILED,
            [str(exc)],
        )
    if isinstance(exc, FetchError):
        return api_error(
            status.HTTP_502_BAD_GATEWAY,
            "Case System API request failed",
            ErrorCodes.CASE_API_ERROR,
            [str(exc)],
        )
    return api_error(
        status.HTTP_502_BAD_GATEWAY,
        "Telegram delivery failed",
        ErrorCodes.NOTIFY_FAILED,
        [str(exc)],
    )


@router.get("/casetoday", response_model=CaseTodayResponse)
async def case_today(
    cases: CaseApiClient = Depends(get_case_client),
    notifier: TelegramNotifier = Depends(get_notifier),
    _api_key: str = Depends(verify_api_key),
):
    """Send today's hearing list to the default Telegram chat."""
    try:
        count = await notify_day(cases, notifier)
    except (AuthError, FetchError, NotifyError) as e:
        raise _notification_error(e)
    return CaseTodayResponse(success=True, count=count)


@router.get("/judgeschedule", response_model=JudgeScheduleResponse)
async def judge_schedule(
    cases: CaseApiClient = Depends(get_case_client),
    notifier: TelegramNotifier = Depends(get_notifier),
    _api_key: str = Depends(verify_api_key),
):
    """Send today's duty judge to the default Telegram chat."""
    try:
        pool_date, duty = await announce_judge_on_duty(cases, notifier)
    except (AuthError, FetchError, NotifyError) as e:
        raise _notification_error(e)
    return JudgeScheduleResponse(
        success=True,
        date=pool_date,
        data=duty.as_dict() if duty else "No Schedule",
    )
