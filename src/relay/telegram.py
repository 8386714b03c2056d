"""Telegram Bot API gateway.

Thin async client for the Bot API methods the relay uses: ``copyMessage``
for forwarding, ``setWebhook`` / ``deleteWebhook`` for installation.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from src.relay.models import CopyResult

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.telegram.org"
_DEFAULT_TIMEOUT_SECONDS = 30.0


class TelegramAPIError(Exception):
    """The Bot API answered with a body that is not a JSON object."""

    def __init__(self, method: str, status_code: int, body: str) -> None:
        self.method = method
        self.status_code = status_code
        super().__init__(
            f"Telegram {method} returned malformed response (HTTP {status_code}): {body[:200]}"
        )


class TelegramGateway:
    """Calls Telegram Bot API methods for one bot token."""

    def __init__(
        self,
        bot_token: str,
        api_base: str = DEFAULT_API_BASE,
        timeout: float = _DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._bot_token = bot_token
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout

    async def copy_message(
        self,
        chat_id: str | int,
        from_chat_id: str | int,
        message_id: int,
        reply_markup: dict[str, Any] | None = None,
    ) -> CopyResult:
        payload: dict[str, Any] = {
            "chat_id": chat_id,
            "from_chat_id": from_chat_id,
            "message_id": message_id,
        }
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup
        return await self._call("copyMessage", payload)

    async def set_webhook(self, url: str, secret_token: str) -> CopyResult:
        return await self._call("setWebhook", {
            "url": url,
            "allowed_updates": ["message"],
            "secret_token": secret_token,
        })

    async def delete_webhook(self) -> CopyResult:
        return await self._call("deleteWebhook", {})

    async def _call(self, method: str, payload: dict[str, Any]) -> CopyResult:
        """POST a Bot API method.

        ``ok`` requires both a 2xx status and ``"ok": true`` in the body.
        Transport errors propagate as ``httpx.HTTPError``.
        """
        url = f"{self._api_base}/bot{self._bot_token}/{method}"
        async with httpx.AsyncClient(verify=True, timeout=self._timeout) as client:
            resp = await client.post(url, json=payload)

        try:
            data = resp.json()
        except ValueError as e:
            raise TelegramAPIError(method, resp.status_code, resp.text) from e
        if not isinstance(data, dict):
            raise TelegramAPIError(method, resp.status_code, resp.text)

        ok = resp.is_success and data.get("ok") is True
        description = data.get("description")
        if not ok:
            logger.debug("Telegram %s rejected: %s", method, description)
        return CopyResult(
            ok=ok,
            description=str(description) if description is not None else None,
        )
