"""Pydantic response models for API endpoints."""

from typing import Any

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    calendar_configured: bool
    sheet_configured: bool
    case_api_configured: bool
    sync_running: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class SyncSummary(BaseModel):
    """Per-run tally."""

    added: int
    updated: int
    skipped: int
    errors: int


class SyncResponse(BaseModel):
    message: str
    days: int
    summary: SyncSummary


class CaseTodayResponse(BaseModel):
    success: bool
    count: int


class JudgeScheduleResponse(BaseModel):
    success: bool
    date: str
    data: dict[str, Any] | str  # roster entry, or "No Schedule"


class LoginRequest(BaseModel):
    token: str


class UserInfo(BaseModel):
    name: str | None = None
    email: str
    picture: str | None = None


class LoginResponse(BaseModel):
    success: bool
    user: UserInfo


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    CASE_API_AUTH_FAILED = "CASE_API_AUTH_FAILED"
    CASE_API_ERROR = "CASE_API_ERROR"
    SYNC_IN_PROGRESS = "SYNC_IN_PROGRESS"
    NOTIFY_CONFIG_MISSING = "NOTIFY_CONFIG_MISSING"
    NOTIFY_FAILED = "NOTIFY_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"
