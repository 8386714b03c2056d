"""Data models for the anonymous relay protocol.

Telegram wire types are Pydantic models validated from the webhook body.
Everything derived from them (identities, tickets, outcomes) is a frozen
dataclass that lives for a single webhook request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# --- Telegram wire models ---


class TelegramUser(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    is_bot: bool = False
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class TelegramChat(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    type: str | None = None


class TelegramMessage(BaseModel):
    """Subset of a Telegram ``Message`` the relay inspects.

    ``reply_markup`` is kept as raw JSON: it is read back from platform state
    and may be anything, so it is parsed defensively by the identity codec
    instead of failing validation of the whole update.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    message_id: int
    chat: TelegramChat
    from_user: TelegramUser | None = Field(default=None, alias="from")
    text: str | None = None
    reply_to_message: TelegramMessage | None = None
    reply_markup: Any = None


class TelegramUpdate(BaseModel):
    model_config = ConfigDict(frozen=True)

    update_id: int
    message: TelegramMessage | None = None


# --- Relay models ---


class MessageKind(str, Enum):
    """Classification of an inbound message."""

    OWNER_REPLY = "owner_reply"
    COMMAND = "command"
    SENDER_MESSAGE = "sender_message"


class TicketVariant(str, Enum):
    """Presentation of a relay ticket on the owner's side."""

    REVEALED = "revealed"
    ANONYMOUS = "anonymous"


class RelayStatus(str, Enum):
    IGNORED = "ignored"
    ACKNOWLEDGED = "acknowledged"
    NO_ROUTE = "no_route"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass(frozen=True)
class SenderIdentity:
    id: str
    display_name: str


@dataclass(frozen=True)
class RelayTicket:
    """Inline keyboard attached to a copy forwarded to the owner.

    ``sender_id`` is the routing field (``callback_data``) and always holds
    the sender id verbatim; the variant only changes the label and link.
    """

    sender_id: str
    label: str
    variant: TicketVariant
    url: str | None = None

    def to_reply_markup(self) -> dict[str, Any]:
        button: dict[str, Any] = {"text": self.label, "callback_data": self.sender_id}
        if self.url is not None:
            button["url"] = self.url
        return {"inline_keyboard": [[button]]}


@dataclass(frozen=True)
class CopyResult:
    """Outcome of a ``copyMessage`` call."""

    ok: bool
    description: str | None = None


@dataclass(frozen=True)
class DeliveryOutcome:
    """What the relay engine did with one update."""

    status: RelayStatus
    kind: MessageKind | None = None
    destination: str | None = None
    attempts: tuple[TicketVariant, ...] = field(default_factory=tuple)
    description: str | None = None
