"""Google sign-in check against the spreadsheet whitelist."""

import logging

from fastapi import APIRouter, Depends, status

from api.dependencies import api_error
from api.models.responses import ErrorCodes, LoginRequest, LoginResponse, UserInfo
from services.access import check_login
from services.sheets import SheetsStore, get_sheets_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/google-login", response_model=LoginResponse)
async def google_login(
    body: LoginRequest,
    store: SheetsStore = Depends(get_sheets_store),
):
    """
    Verify a Google ID token and check the email whitelist.

    Returns 401 for an invalid token, 403 for an email not on the list.
    """
    try:
        user = await check_login(store, body.token)
    except ValueError as e:
        logger.warning(f"Login error: {e}")
        raise api_error(status.HTTP_401_UNAUTHORIZED, "Invalid Token", ErrorCodes.UNAUTHORIZED)

    if user is None:
        raise api_error(
            status.HTTP_403_FORBIDDEN, "Email not in whitelist.", ErrorCodes.FORBIDDEN
        )

    await store.append_log("LOGIN", summary="User Login", performed_by=user["email"])
    return LoginResponse(success=True, user=UserInfo(**user))
