"""Shared Pydantic data models for wegram-relay."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

# --- Enums ---


class AuditEventType(str, Enum):
    WEBHOOK_INSTALL = "webhook_install"
    WEBHOOK_UNINSTALL = "webhook_uninstall"
    WEBHOOK_AUTH_FAILURE = "webhook_auth_failure"
    RELAY = "relay"


class RiskLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"


# --- Audit Models ---


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class AuditEvent(BaseModel):
    timestamp: str = Field(default_factory=_now_iso)
    event_type: AuditEventType
    source_ip: str | None = None
    action: str
    result: str  # "success" | "failure" | "delivered" | "no_route" | ...
    risk_level: RiskLevel
    details: dict[str, object] | None = None
