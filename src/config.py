"""Process configuration read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from src.relay.telegram import DEFAULT_API_BASE


@dataclass(frozen=True)
class RelayConfig:
    prefix: str = "public"
    secret_token: str = ""
    api_base: str = DEFAULT_API_BASE
    timeout_seconds: float = 30.0
    audit_log_path: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> RelayConfig:
        return cls(
            prefix=os.environ.get("PREFIX") or "public",
            secret_token=os.environ.get("SECRET_TOKEN", ""),
            api_base=os.environ.get("TELEGRAM_API_BASE", DEFAULT_API_BASE),
            timeout_seconds=float(os.environ.get("TELEGRAM_TIMEOUT_SECONDS", "30")),
            audit_log_path=os.environ.get("AUDIT_LOG_PATH") or None,
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )
