"""
Appointment and judge lookups against the case system API.
"""

import logging
from datetime import date

import httpx

from core.case_auth import CaseCredentials
from core.config import (
    CASE_API_PASS,
    CASE_API_TOKEN,
    CASE_API_URL,
    CASE_API_USER,
    CASE_API_VERSION,
    CASE_JUDGE_POOL_PATH,
    CASE_JUDGES_PATH,
    CASE_NOT_FOUND_MESSAGES,
    CASE_PAGE_LIMIT,
    CASE_SEARCH_PATH,
)
from core.exceptions import FetchError
from core.http_client import get_http_client
from models.cases import Appointment, FetchResult, Judge

logger = logging.getLogger(__name__)

ACTIVE_JUDGE_STATUS = 1


def _json_or_none(response: httpx.Response):
    try:
        return response.json()
    except ValueError:
        return None


def is_not_found_payload(payload) -> bool:
    """True for a success=false body whose message says there is nothing to return."""
    if not isinstance(payload, dict) or payload.get("success") is not False:
        return False
    message = str(payload.get("message") or "").casefold()
    return any(marker.casefold() in message for marker in CASE_NOT_FOUND_MESSAGES)


class CaseApiClient:
    """Thin async client for the case system endpoints the bridge uses."""

    def __init__(
        self, http: httpx.AsyncClient | None, credentials: CaseCredentials, base_url: str
    ):
        self._http_client = http
        self.credentials = credentials
        self._base_url = base_url.rstrip("/")

    @property
    def _http(self) -> httpx.AsyncClient:
        # None: the shared client, resolved per request
        return self._http_client if self._http_client is not None else get_http_client()

    async def ensure_credential(self) -> str:
        return await self.credentials.get()

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        """
        Send an authorized request; on 401, log in again and retry once.

        Raises:
            AuthError: if a (re-)login is needed and fails
            httpx.HTTPError: on transport errors and timeouts
        """
        url = f"{self._base_url}{path}"
        token = await self.credentials.get()
        response = await self._http.request(
            method, url, headers={"Authorization": f"Bearer {token}"}, **kwargs
        )
        if response.status_code == httpx.codes.UNAUTHORIZED:
            logger.warning("Case API rejected the bearer token, logging in again")
            self.credentials.invalidate()
            token = await self.credentials.get()
            response = await self._http.request(
                method, url, headers={"Authorization": f"Bearer {token}"}, **kwargs
            )
        return response

    async def fetch_appointments(self, business_date: str) -> FetchResult:
        """
        Fetch all hearings for one business date (DD/MM/YYYY, Buddhist era).

        Returns a FetchResult that is ok (non-empty list), empty (no hearings
        that day) or error (anything else, with the original message).
        """
        body = {
            "version": CASE_API_VERSION,
            "appointDate": business_date,
            "offset": 0,
            "limit": CASE_PAGE_LIMIT,
        }
        try:
            response = await self._send("POST", CASE_SEARCH_PATH, json=body)
        except httpx.HTTPError as e:
            return FetchResult.failed(f"{type(e).__name__}: {e}")

        payload = _json_or_none(response)

        if response.is_error:
            if is_not_found_payload(payload):
                return FetchResult.empty()
            message = payload.get("message") if isinstance(payload, dict) else None
            return FetchResult.failed(f"HTTP {response.status_code}: {message or response.reason_phrase}")

        if not isinstance(payload, dict):
            return FetchResult.failed("Unexpected payload from case API")

        if payload.get("success") is True:
            data = payload.get("data")
            if not data:
                return FetchResult.empty()
            if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
                return FetchResult.failed("Unexpected 'data' shape from case API")
            return FetchResult.ok(Appointment.from_api(item) for item in data)

        if is_not_found_payload(payload):
            return FetchResult.empty()
        return FetchResult.failed(str(payload.get("message") or "Case API returned success=false"))

    async def fetch_active_judges(self) -> list[Judge]:
        """Active judges (judgeStatus == 1); an empty list if the lookup fails."""
        try:
            response = await self._send("GET", CASE_JUDGES_PATH)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Error fetching judges: {e}")
            return []

        judges = payload.get("data") if isinstance(payload, dict) else None
        if not judges:
            return []
        return [
            Judge(judge_id=item.get("id"), name=item.get("judgeName") or "")
            for item in judges
            if item.get("judgeStatus") == ACTIVE_JUDGE_STATUS
        ]

    async def fetch_judge_pool(self, day: date) -> list[dict]:
        """
        Fetch the month's judge duty roster containing `day`.

        Raises:
            FetchError: on transport errors or a payload without 'data'
        """
        path = CASE_JUDGE_POOL_PATH.format(month=f"{day.month:02d}", year=day.year)
        params = {"version": "1.0", "offset": 0, "limit": 100}
        try:
            response = await self._send("GET", path, params=params)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise FetchError(f"Judge schedule request failed: {e}") from e

        if not isinstance(payload, dict) or not payload.get("data"):
            raise FetchError("No schedule data from API")
        return payload["data"]


_case_client: CaseApiClient | None = None


def get_case_client() -> CaseApiClient:
    """Get or create the case API client (lazy initialization)."""
    global _case_client
    if _case_client is None:
        credentials = CaseCredentials(
            None, CASE_API_URL, CASE_API_USER, CASE_API_PASS, token=CASE_API_TOKEN
        )
        _case_client = CaseApiClient(None, credentials, CASE_API_URL)
    return _case_client
