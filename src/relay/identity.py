"""Identity codec: sender identity to relay ticket and back.

The sender id travels through Telegram itself: it is stored as the
``callback_data`` of the first inline button on the copy sent to the owner,
and read back from ``reply_to_message.reply_markup`` when the owner replies.
"""

from __future__ import annotations

from typing import Any

from src.relay.models import RelayTicket, SenderIdentity, TelegramUser, TicketVariant

LOCKED_ICON = "\U0001f50f"  # 🔏
UNLOCKED_ICON = "\U0001f513"  # 🔓
PROFILE_URL_TEMPLATE = "tg://user?id={sender_id}"


def derive_display_name(sender: TelegramUser) -> str:
    """Return ``@username``, else the non-empty names joined by a space, else ``""``."""
    if sender.username:
        return f"@{sender.username}"
    return " ".join(name for name in (sender.first_name, sender.last_name) if name)


def identity_of(sender: TelegramUser) -> SenderIdentity:
    return SenderIdentity(id=str(sender.id), display_name=derive_display_name(sender))


def build_ticket(identity: SenderIdentity, revealed: bool) -> RelayTicket:
    icon = UNLOCKED_ICON if revealed else LOCKED_ICON
    label = f"{icon} From: {identity.display_name} ({identity.id})"
    if revealed:
        return RelayTicket(
            sender_id=identity.id,
            label=label,
            variant=TicketVariant.REVEALED,
            url=PROFILE_URL_TEMPLATE.format(sender_id=identity.id),
        )
    return RelayTicket(
        sender_id=identity.id,
        label=label,
        variant=TicketVariant.ANONYMOUS,
    )


def extract_sender_id(reply_markup: Any) -> str | None:
    """Read the sender id from entry [0][0] of an inline keyboard.

    Returns None for a missing, empty or malformed keyboard.
    """
    if not isinstance(reply_markup, dict):
        return None
    grid = reply_markup.get("inline_keyboard")
    if not isinstance(grid, list) or not grid:
        return None
    first_row = grid[0]
    if not isinstance(first_row, list) or not first_row:
        return None
    button = first_row[0]
    if not isinstance(button, dict):
        return None
    sender_id = button.get("callback_data")
    if not isinstance(sender_id, str) or not sender_id:
        return None
    return sender_id
