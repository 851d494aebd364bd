"""
Telegram notifications.

Destination (bot token + chat id) is read from the Config sheet on every
call. Delivery is best effort: nothing in here may abort a sync.
"""

import logging

import httpx

from core.config import TELEGRAM_API_URL, TELEGRAM_KEYS, TELEGRAM_TIMEOUT
from core.exceptions import NotifyError
from core.google_client import GOOGLE_API_ERRORS
from core.http_client import get_http_client
from models.cases import TelegramTarget
from services.sheets import SheetsStore, get_sheets_store

logger = logging.getLogger(__name__)

DEFAULT_CHANNEL = "default"
ADMIN_CHANNEL = "admin"


class TelegramNotifier:
    def __init__(
        self, http: httpx.AsyncClient | None, store: SheetsStore, api_url: str = TELEGRAM_API_URL
    ):
        self._http_client = http
        self._store = store
        self._api_url = api_url.rstrip("/")

    @property
    def _http(self) -> httpx.AsyncClient:
        return self._http_client if self._http_client is not None else get_http_client()

    async def resolve_target(self, channel: str = DEFAULT_CHANNEL) -> TelegramTarget | None:
        """
        Look up the bot token and chat id for a channel.

        Returns None (never raises) when the config sheet is unreadable or
        either value is missing.
        """
        token_key, chat_key = TELEGRAM_KEYS[channel]
        try:
            config = await self._store.get_config()
        except GOOGLE_API_ERRORS as e:
            logger.error(f"Error fetching Telegram config: {e}")
            return None

        token, chat_id = config.get(token_key), config.get(chat_key)
        if not token or not chat_id:
            logger.warning(f"Telegram config missing for '{channel}' channel")
            return None
        return TelegramTarget(token=token, chat_id=chat_id)

    async def send(self, target: TelegramTarget, text: str) -> None:
        """
        Deliver one HTML message.

        Raises:
            NotifyError: on transport errors or a non-OK Telegram response
        """
        url = f"{self._api_url}/bot{target.token}/sendMessage"
        payload = {"chat_id": target.chat_id, "text": text, "parse_mode": "HTML"}
        try:
            response = await self._http.post(url, json=payload, timeout=TELEGRAM_TIMEOUT)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NotifyError(
                f"Telegram returned {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise NotifyError(f"Telegram request failed: {type(e).__name__}") from e

    async def notify(self, text: str, channel: str = DEFAULT_CHANNEL) -> bool:
        """Send to a channel if it is configured. Returns True when delivered."""
        target = await self.resolve_target(channel)
        if target is None:
            return False
        try:
            await self.send(target, text)
        except NotifyError as e:
            logger.error(f"Telegram {channel} notification failed: {e}")
            return False
        logger.info(f"Telegram {channel} notification sent")
        return True


_notifier: TelegramNotifier | None = None


def get_notifier() -> TelegramNotifier:
    """Get or create the notifier (lazy initialization)."""
    global _notifier
    if _notifier is None:
        _notifier = TelegramNotifier(None, get_sheets_store())
    return _notifier
