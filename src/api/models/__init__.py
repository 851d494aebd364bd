"""API Pydantic models."""

from .responses import (
    CaseTodayResponse,
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    JudgeScheduleResponse,
    LoginRequest,
    LoginResponse,
    SyncResponse,
    SyncSummary,
    UserInfo,
)

__all__ = [
    "CaseTodayResponse",
    "ErrorCodes",
    "ErrorResponse",
    "HealthResponse",
    "JudgeScheduleResponse",
    "LoginRequest",
    "LoginResponse",
    "SyncResponse",
    "SyncSummary",
    "UserInfo",
]
