"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.models.responses import HealthResponse
from core import config
from services.sync import is_sync_running

router = APIRouter()


def _configured() -> dict[str, bool]:
    return {
        "calendar_configured": bool(config.GOOGLE_CALENDAR_ID and config.GOOGLE_CREDENTIALS),
        "sheet_configured": bool(config.GOOGLE_SHEET_ID and config.GOOGLE_CREDENTIALS),
        "case_api_configured": bool(
            config.CASE_API_URL and (config.CASE_API_TOKEN or config.CASE_API_USER)
        ),
    }


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns 200 if every integration is configured, 503 otherwise.
    """
    flags = _configured()
    timestamp = datetime.now(timezone.utc).isoformat()
    response = HealthResponse(
        status="healthy",
        version=config.API_VERSION,
        sync_running=is_sync_running(),
        timestamp=timestamp,
        **flags,
    )

    if all(flags.values()):
        return response

    missing = ", ".join(name.removesuffix("_configured") for name, ok in flags.items() if not ok)
    response.status = "unhealthy"
    response.error = f"Not configured: {missing}"
    return JSONResponse(status_code=503, content=response.model_dump())
