"""Webhook secret handling.

The same secret is registered with Telegram on install and echoed back by
Telegram in the ``X-Telegram-Bot-Api-Secret-Token`` header of every update.
"""

from __future__ import annotations

import hmac
from collections.abc import Mapping

SECRET_HEADER = "x-telegram-bot-api-secret-token"
WEAK_SECRET_MESSAGE = (
    "Secret token must be at least 16 characters and contain uppercase letters, "
    "lowercase letters, and numbers."
)
_MIN_SECRET_LENGTH = 16


def validate_secret_token(token: str) -> bool:
    """Return True if the secret is strong enough to register a webhook."""
    return (
        len(token) >= _MIN_SECRET_LENGTH
        and any(c.isascii() and c.isupper() for c in token)
        and any(c.isascii() and c.islower() for c in token)
        and any(c.isascii() and c.isdigit() for c in token)
    )


def verify_secret_header(headers: Mapping[str, str], expected: str) -> bool:
    """Constant-time check of the webhook secret header.

    A missing header never matches, even when no secret is configured.
    """
    provided = headers.get(SECRET_HEADER)
    if provided is None:
        return False
    return hmac.compare_digest(provided.encode(), expected.encode())
