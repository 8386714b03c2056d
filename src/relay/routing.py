"""Route extraction for owner replies."""

from __future__ import annotations

from src.relay.identity import extract_sender_id
from src.relay.models import TelegramMessage


def extract_destination(message: TelegramMessage) -> str | None:
    """Return the original sender's chat id for an owner reply.

    None when the replied-to message carries no relay ticket, e.g. the owner
    replying to one of their own messages.
    """
    reply = message.reply_to_message
    if reply is None:
        return None
    return extract_sender_id(reply.reply_markup)
