"""Relay engine, the only component that forwards messages.

Per update:
1. No message, or no attributable sender: acknowledge only
2. Classify (owner reply / command / sender message)
3. Owner reply: recover the destination from the relay ticket, single copy
4. Sender message: copy to the owner, trying each ticket variant in order
5. Audit the outcome (never the sender id)

The engine keeps no per-update state, so one instance serves concurrent
updates. Transport errors from the gateway are not caught here.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from src.models import AuditEvent, AuditEventType, RiskLevel
from src.relay.classifier import classify
from src.relay.identity import build_ticket, identity_of
from src.relay.models import (
    DeliveryOutcome,
    MessageKind,
    RelayStatus,
    TelegramMessage,
    TelegramUpdate,
    TelegramUser,
    TicketVariant,
)
from src.relay.routing import extract_destination

if TYPE_CHECKING:
    from src.audit.logger import AuditLogger
    from src.relay.telegram import TelegramGateway

logger = logging.getLogger(__name__)

# Some owner chats reject buttons with a profile link; the anonymous
# variant carries none and is tried second.
SENDER_ATTEMPTS: tuple[TicketVariant, ...] = (
    TicketVariant.REVEALED,
    TicketVariant.ANONYMOUS,
)


class RelayEngine:
    """Relays messages between anonymous senders and a single owner."""

    def __init__(
        self,
        gateway: TelegramGateway,
        owner_id: str,
        audit_logger: AuditLogger | None = None,
        sender_attempts: tuple[TicketVariant, ...] = SENDER_ATTEMPTS,
    ) -> None:
        self._gateway = gateway
        self._owner_id = owner_id
        self._audit = audit_logger
        self._sender_attempts = sender_attempts

    async def handle(self, update: TelegramUpdate) -> DeliveryOutcome:
        """Run one update through the relay protocol."""
        message = update.message
        if message is None:
            return DeliveryOutcome(status=RelayStatus.IGNORED)
        sender = message.from_user
        if sender is None:
            logger.debug("Ignoring update %s without sender", update.update_id)
            return DeliveryOutcome(status=RelayStatus.IGNORED)

        kind = classify(message, self._owner_id)
        if kind == MessageKind.OWNER_REPLY:
            outcome = await self.forward_to_sender(message)
        elif kind == MessageKind.COMMAND:
            outcome = DeliveryOutcome(status=RelayStatus.ACKNOWLEDGED, kind=kind)
        else:
            outcome = await self.forward_to_owner(message, sender)

        self._log_outcome(outcome)
        return outcome

    async def forward_to_sender(self, message: TelegramMessage) -> DeliveryOutcome:
        """Copy an owner reply to the sender named by the replied-to ticket.

        Single attempt: the owner can resend by hand.
        """
        destination = extract_destination(message)
        if destination is None:
            return DeliveryOutcome(
                status=RelayStatus.NO_ROUTE, kind=MessageKind.OWNER_REPLY,
            )

        result = await self._gateway.copy_message(
            chat_id=destination,
            from_chat_id=message.chat.id,
            message_id=message.message_id,
        )
        if not result.ok:
            logger.warning("Owner reply not delivered: %s", result.description)
        else:
            logger.debug("Owner reply routed to %s", destination)
        return DeliveryOutcome(
            status=RelayStatus.DELIVERED if result.ok else RelayStatus.FAILED,
            kind=MessageKind.OWNER_REPLY,
            destination=destination,
            description=result.description,
        )

    async def forward_to_owner(
        self, message: TelegramMessage, sender: TelegramUser,
    ) -> DeliveryOutcome:
        """Copy a sender message to the owner with a relay ticket attached."""
        identity = identity_of(sender)
        attempts: list[TicketVariant] = []
        description: str | None = None

        for variant in self._sender_attempts:
            ticket = build_ticket(identity, revealed=variant == TicketVariant.REVEALED)
            attempts.append(variant)
            result = await self._gateway.copy_message(
                chat_id=self._owner_id,
                from_chat_id=message.chat.id,
                message_id=message.message_id,
                reply_markup=ticket.to_reply_markup(),
            )
            if result.ok:
                return DeliveryOutcome(
                    status=RelayStatus.DELIVERED,
                    kind=MessageKind.SENDER_MESSAGE,
                    destination=self._owner_id,
                    attempts=tuple(attempts),
                )
            description = result.description
            logger.info("Copy with %s ticket rejected: %s", variant.value, description)

        logger.warning(
            "Sender message not delivered after %d attempts: %s",
            len(attempts), description,
        )
        return DeliveryOutcome(
            status=RelayStatus.FAILED,
            kind=MessageKind.SENDER_MESSAGE,
            destination=self._owner_id,
            attempts=tuple(attempts),
            description=description,
        )

    def _log_outcome(self, outcome: DeliveryOutcome) -> None:
        if not self._audit:
            return
        self._audit.log(AuditEvent(
            event_type=AuditEventType.RELAY,
            action=outcome.kind.value if outcome.kind else "none",
            result=outcome.status.value,
            risk_level=(
                RiskLevel.MEDIUM if outcome.status == RelayStatus.FAILED else RiskLevel.INFO
            ),
            details={"attempts": [v.value for v in outcome.attempts]},
        ))
