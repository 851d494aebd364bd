"""
Shared httpx client with lazy initialization.
"""

import httpx

from core.config import CASE_API_TIMEOUT

_http_client: httpx.AsyncClient | None = None


def get_http_client() -> httpx.AsyncClient:
    """Get or create the shared async HTTP client (lazy initialization)."""
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(timeout=httpx.Timeout(CASE_API_TIMEOUT))
    return _http_client


async def close_http_client() -> None:
    """Close the shared client, if one was created."""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
