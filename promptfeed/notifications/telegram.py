"""Telegram Bot API delivery."""

import logging
from typing import Any

import httpx

from promptfeed.config.settings import settings

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 4096


class TelegramNotifier:
    """Sends plain-text messages to a single chat."""

    def __init__(
        self,
        bot_token: str | None = None,
        chat_id: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if bot_token is None and settings.telegram_bot_token is not None:
            bot_token = settings.telegram_bot_token.get_secret_value()
        if not bot_token:
            raise ValueError("Telegram bot token is not configured")

        self.chat_id = chat_id or settings.telegram_chat_id
        self._url = f"{settings.telegram_api_url.rstrip('/')}/bot{bot_token}/sendMessage"
        self._http = client or httpx.AsyncClient(timeout=settings.http_timeout)

    async def send(self, text: str) -> dict[str, Any]:
        """Send ``text`` and return the API result payload.

        Raises:
            ValueError: ``text`` is longer than Telegram accepts
            httpx.HTTPStatusError: the Bot API rejected the request
        """
        if len(text) > MAX_MESSAGE_LENGTH:
            raise ValueError(
                f"Message of {len(text)} characters exceeds {MAX_MESSAGE_LENGTH}"
            )
        resp = await self._http.post(
            self._url,
            json={
                "chat_id": self.chat_id,
                "text": text,
                "disable_web_page_preview": True,
            },
        )
        resp.raise_for_status()
        logger.info(f"Sent message to chat {self.chat_id}")
        return resp.json().get("result", {})

    async def aclose(self) -> None:
        await self._http.aclose()
