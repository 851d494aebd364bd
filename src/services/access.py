"""
Google sign-in verification against the email whitelist.
"""

import asyncio
import logging

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from core.config import GOOGLE_CLIENT_ID
from services.sheets import SheetsStore

logger = logging.getLogger(__name__)


def verify_google_id_token(token: str, audience: str = GOOGLE_CLIENT_ID) -> dict:
    """
    Verify a Google ID token and return its claims.

    Raises:
        ValueError: if the token is invalid, expired or for another audience
    """
    return id_token.verify_oauth2_token(token, google_requests.Request(), audience)


async def check_login(store: SheetsStore, token: str, verifier=None) -> dict | None:
    """
    Verify the ID token and check its email against the whitelist.

    Returns:
        User info dict (name, email, picture) if whitelisted, None otherwise

    Raises:
        ValueError: if the token does not verify
    """
    claims = await asyncio.to_thread(verifier or verify_google_id_token, token)
    email = (claims.get("email") or "").strip().lower()
    if not email:
        raise ValueError("ID token carries no email claim")

    logger.info(f"Checking permission: {email}")
    if not await store.is_email_allowed(email):
        logger.warning(f"Login rejected, not whitelisted: {email}")
        return None

    logger.info(f"Login success: {email}")
    return {"name": claims.get("name"), "email": email, "picture": claims.get("picture")}
