"""FastAPI application exposing the relay's install, uninstall and webhook paths."""

from __future__ import annotations

import logging
from collections.abc import Callable

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from src.audit.logger import AuditLogger
from src.config import RelayConfig
from src.models import AuditEvent, AuditEventType, RiskLevel
from src.relay.engine import RelayEngine
from src.relay.guard import WEAK_SECRET_MESSAGE, validate_secret_token, verify_secret_header
from src.relay.models import TelegramUpdate
from src.relay.telegram import TelegramAPIError, TelegramGateway

logger = logging.getLogger(__name__)

GatewayFactory = Callable[[str], TelegramGateway]


def create_app_from_env() -> FastAPI:
    """Factory for uvicorn --factory: reads config from environment variables."""
    config = RelayConfig.from_env()
    audit_logger = (
        AuditLogger.from_env(config.audit_log_path) if config.audit_log_path else None
    )
    return create_app(config, audit_logger)


def create_app(
    config: RelayConfig,
    audit_logger: AuditLogger | None = None,
    gateway_factory: GatewayFactory | None = None,
) -> FastAPI:
    """Create the relay app; every route lives under ``/{config.prefix}``."""
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    prefix = config.prefix
    secret_token = config.secret_token

    def make_gateway(bot_token: str) -> TelegramGateway:
        if gateway_factory is not None:
            return gateway_factory(bot_token)
        return TelegramGateway(
            bot_token, api_base=config.api_base, timeout=config.timeout_seconds,
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.api_route(
        f"/{prefix}/install/{{owner_uid}}/{{bot_token}}", methods=["GET", "POST"],
    )
    async def install(request: Request, owner_uid: str, bot_token: str) -> Response:
        if not validate_secret_token(secret_token):
            return _result(False, WEAK_SECRET_MESSAGE, 400)

        base_url = f"{request.url.scheme}://{request.url.hostname}"
        webhook_url = f"{base_url}/{prefix}/webhook/{owner_uid}/{bot_token}"
        try:
            result = await make_gateway(bot_token).set_webhook(webhook_url, secret_token)
        except (httpx.HTTPError, TelegramAPIError) as e:
            logger.warning("setWebhook failed: %s", e)
            return _result(False, f"Error installing webhook: {e}", 500)

        _audit(audit_logger, request, AuditEventType.WEBHOOK_INSTALL, result.ok)
        if result.ok:
            return _result(True, "Webhook successfully installed.")
        return _result(False, f"Failed to install webhook: {result.description}", 400)

    @app.api_route(f"/{prefix}/uninstall/{{bot_token}}", methods=["GET", "POST"])
    async def uninstall(request: Request, bot_token: str) -> Response:
        if not validate_secret_token(secret_token):
            return _result(False, WEAK_SECRET_MESSAGE, 400)

        try:
            result = await make_gateway(bot_token).delete_webhook()
        except (httpx.HTTPError, TelegramAPIError) as e:
            logger.warning("deleteWebhook failed: %s", e)
            return _result(False, f"Error uninstalling webhook: {e}", 500)

        _audit(audit_logger, request, AuditEventType.WEBHOOK_UNINSTALL, result.ok)
        if result.ok:
            return _result(True, "Webhook successfully uninstalled.")
        return _result(False, f"Failed to uninstall webhook: {result.description}", 400)

    @app.post(f"/{prefix}/webhook/{{owner_uid}}/{{bot_token}}")
    async def webhook(request: Request, owner_uid: str, bot_token: str) -> Response:
        if not verify_secret_header(request.headers, secret_token):
            _audit(audit_logger, request, AuditEventType.WEBHOOK_AUTH_FAILURE, False)
            return PlainTextResponse("Unauthorized", status_code=401)

        # Any non-200 answer makes Telegram redeliver the whole update
        try:
            update = TelegramUpdate.model_validate_json(await request.body())
            engine = RelayEngine(make_gateway(bot_token), owner_uid, audit_logger)
            await engine.handle(update)
        except (ValidationError, httpx.HTTPError, TelegramAPIError):
            logger.exception("Error handling webhook")
            return PlainTextResponse("Internal Server Error", status_code=500)

        return PlainTextResponse("OK")

    return app


def _result(success: bool, message: str, status_code: int = 200) -> JSONResponse:
    return JSONResponse({"success": success, "message": message}, status_code=status_code)


def _audit(
    audit_logger: AuditLogger | None,
    request: Request,
    event_type: AuditEventType,
    ok: bool,
) -> None:
    if not audit_logger:
        return
    audit_logger.log(AuditEvent(
        event_type=event_type,
        source_ip=request.client.host if request.client else None,
        action=f"{request.method} {event_type.value}",
        result="success" if ok else "failure",
        risk_level=RiskLevel.INFO if ok else RiskLevel.HIGH,
    ))
