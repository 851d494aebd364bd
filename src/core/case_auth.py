"""
Bearer credential for the case system API.

One credential slot per process. The first caller that finds the slot empty
logs in; callers arriving while that login is in flight wait on the lock
and reuse its token.
"""

import asyncio
import logging

import httpx

from core.config import CASE_API_VERSION, CASE_LOGIN_PATH
from core.exceptions import AuthError
from core.http_client import get_http_client

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class CaseCredentials:
    """Get-or-refresh provider for the case API bearer token."""

    def __init__(
        self,
        http: httpx.AsyncClient | None,
        base_url: str,
        username: str,
        password: str,
        token: str | None = None,
    ):
        self._http_client = http
        self._login_url = f"{base_url.rstrip('/')}{CASE_LOGIN_PATH}"
        self._username = username
        self._password = password
        self._token = token
        self._lock = asyncio.Lock()

    @property
    def _http(self) -> httpx.AsyncClient:
        return self._http_client if self._http_client is not None else get_http_client()

    @property
    def token(self) -> str | None:
        return self._token

    async def get(self) -> str:
        """
        Return the cached token, logging in first if there is none.

        Raises:
            AuthError: if the login call fails or returns no Authorization header
        """
        if self._token:
            return self._token
        async with self._lock:
            if not self._token:
                self._token = await self._login()
        return self._token

    def invalidate(self) -> None:
        """Drop the cached token so the next get() logs in again."""
        if self._token:
            logger.info("Case API credential invalidated")
        self._token = None

    async def _login(self) -> str:
        logger.info("Renewing token from case system")
        body = {"version": CASE_API_VERSION, "name": self._username, "passwords": self._password}
        try:
            response = await self._http.post(self._login_url, json=body)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise AuthError(f"Case API login failed: {e}") from e

        auth_header = response.headers.get("authorization")
        if not auth_header:
            raise AuthError("No Authorization header received from case API login")

        token = auth_header.removeprefix(BEARER_PREFIX).strip()
        if not token:
            raise AuthError("Empty bearer token received from case API login")
        logger.info("Case API token updated")
        return token
