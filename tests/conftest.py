"""Shared test fixtures for wegram-relay."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.audit.logger import AuditLogger
from src.relay.models import CopyResult, TelegramMessage, TelegramUpdate

OWNER_ID = "1000"
SENDER_ID = 42
STRONG_SECRET = "Sup3rSecretToken42"


@pytest.fixture
def mock_audit_logger() -> MagicMock:
    return MagicMock(spec=AuditLogger)


@pytest.fixture
def gateway() -> AsyncMock:
    """Gateway double whose copy_message succeeds unless reconfigured."""
    gw = AsyncMock()
    gw.copy_message.return_value = CopyResult(ok=True)
    gw.set_webhook.return_value = CopyResult(ok=True)
    gw.delete_webhook.return_value = CopyResult(ok=True)
    return gw


# --- Factory functions for test data ---


def make_ticket_markup(sender_id: str = str(SENDER_ID)) -> dict[str, Any]:
    return {
        "inline_keyboard": [[{
            "text": f"\U0001f50f From: @alice ({sender_id})",
            "callback_data": sender_id,
        }]],
    }


def make_message_dict(
    sender_id: int = SENDER_ID,
    chat_id: int | None = None,
    message_id: int = 7,
    text: str | None = "hello",
    username: str | None = "alice",
    first_name: str | None = "Alice",
    last_name: str | None = None,
    reply_to: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Telegram ``Message`` JSON as it arrives in a webhook body."""
    sender: dict[str, Any] = {"id": sender_id, "is_bot": False}
    if username is not None:
        sender["username"] = username
    if first_name is not None:
        sender["first_name"] = first_name
    if last_name is not None:
        sender["last_name"] = last_name
    message: dict[str, Any] = {
        "message_id": message_id,
        "from": sender,
        "chat": {"id": chat_id if chat_id is not None else sender_id, "type": "private"},
        "date": 1700000000,
    }
    if text is not None:
        message["text"] = text
    if reply_to is not None:
        message["reply_to_message"] = reply_to
    return message


def make_owner_reply_dict(
    reply_markup: Any = None,
    text: str | None = "thanks!",
) -> dict[str, Any]:
    replied: dict[str, Any] = {
        "message_id": 3,
        "chat": {"id": int(OWNER_ID), "type": "private"},
        "text": "hello",
    }
    if reply_markup is not None:
        replied["reply_markup"] = reply_markup
    return make_message_dict(
        sender_id=int(OWNER_ID),
        message_id=11,
        text=text,
        username="owner",
        reply_to=replied,
    )


def make_update_dict(message: dict[str, Any] | None = None, update_id: int = 1) -> dict[str, Any]:
    update: dict[str, Any] = {"update_id": update_id}
    if message is not None:
        update["message"] = message
    return update


def make_message(**kwargs: Any) -> TelegramMessage:
    return TelegramMessage.model_validate(make_message_dict(**kwargs))


def make_update(message: dict[str, Any] | None = None) -> TelegramUpdate:
    return TelegramUpdate.model_validate(make_update_dict(message))
