"""Inbound message classification."""

from __future__ import annotations

from src.relay.models import MessageKind, TelegramMessage

START_COMMAND = "/start"


def classify(message: TelegramMessage, owner_id: str) -> MessageKind:
    """Classify a message; the reply-context check precedes the command check."""
    sender = message.from_user
    if (
        message.reply_to_message is not None
        and sender is not None
        and str(sender.id) == owner_id
    ):
        return MessageKind.OWNER_REPLY
    if message.text == START_COMMAND:
        return MessageKind.COMMAND
    return MessageKind.SENDER_MESSAGE
