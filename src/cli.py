"""Click CLI for running the relay and managing its Telegram webhook."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Coroutine
from typing import Any

import click
import httpx

from src.config import RelayConfig
from src.log_setup import configure_logging
from src.relay.guard import WEAK_SECRET_MESSAGE, validate_secret_token
from src.relay.models import CopyResult
from src.relay.telegram import TelegramAPIError, TelegramGateway


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Anonymous Telegram relay bot."""
    ctx.ensure_object(dict)
    config = RelayConfig.from_env()
    configure_logging(config.log_level)
    ctx.obj["config"] = config


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address.")
@click.option("--port", default=8000, type=int, help="Bind port.")
def serve(host: str, port: int) -> None:
    """Serve the webhook application with uvicorn."""
    import uvicorn

    uvicorn.run(
        "src.server.app:create_app_from_env",
        factory=True,
        host=host,
        port=port,
        log_config=None,
    )


@cli.command()
@click.argument("owner_uid")
@click.argument("bot_token")
@click.option("--base-url", required=True, help="Public https://host the webhook is served on.")
@click.pass_context
def install(ctx: click.Context, owner_uid: str, bot_token: str, base_url: str) -> None:
    """Register the relay webhook for BOT_TOKEN, relaying to OWNER_UID."""
    config: RelayConfig = ctx.obj["config"]
    _require_strong_secret(config)
    webhook_url = f"{base_url.rstrip('/')}/{config.prefix}/webhook/{owner_uid}/{bot_token}"
    gateway = _gateway(config, bot_token)
    _report(_run(gateway.set_webhook(webhook_url, config.secret_token)), "installed")


@cli.command()
@click.argument("bot_token")
@click.pass_context
def uninstall(ctx: click.Context, bot_token: str) -> None:
    """Remove the webhook registered for BOT_TOKEN."""
    config: RelayConfig = ctx.obj["config"]
    _require_strong_secret(config)
    _report(_run(_gateway(config, bot_token).delete_webhook()), "uninstalled")


def _gateway(config: RelayConfig, bot_token: str) -> TelegramGateway:
    return TelegramGateway(bot_token, api_base=config.api_base, timeout=config.timeout_seconds)


def _require_strong_secret(config: RelayConfig) -> None:
    if not validate_secret_token(config.secret_token):
        raise click.UsageError(f"SECRET_TOKEN: {WEAK_SECRET_MESSAGE}")


def _run(call: Coroutine[Any, Any, CopyResult]) -> CopyResult:
    try:
        return asyncio.run(call)
    except (httpx.HTTPError, TelegramAPIError) as e:
        raise click.ClickException(f"Telegram request failed: {e}") from e


def _report(result: CopyResult, verb: str) -> None:
    message = (
        f"Webhook successfully {verb}."
        if result.ok
        else f"Telegram rejected the request: {result.description}"
    )
    click.echo(json.dumps({"success": result.ok, "message": message}, indent=2))
    if not result.ok:
        raise SystemExit(1)
