"""API route modules."""

from .auth import router as auth_router
from .health import router as health_router
from .notifications import router as notifications_router
from .sync import router as sync_router

__all__ = ["auth_router", "health_router", "notifications_router", "sync_router"]
