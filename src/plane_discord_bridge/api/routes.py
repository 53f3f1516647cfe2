"""HTTP routes for the bridge.

Endpoints:
- POST /: Receive a Plane webhook (also served at POST /webhook)
- GET /health: Plain-text health check for container orchestrators
- GET /info: Service metadata

The webhook route authenticates and renders synchronously, then schedules
delivery as a background task so the response never waits on Discord.

Usage:
    from plane_discord_bridge.api.routes import register_routes

    register_routes(app)
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from plane_discord_bridge import __version__
from plane_discord_bridge.api.models import APIInfo, ErrorResponse, WebhookAck
from plane_discord_bridge.core.engine import NotificationEmitter, TransformationEngine
from plane_discord_bridge.core.exceptions import AuthenticationError
from plane_discord_bridge.webhooks.signature import HEADER_SIGNATURE

logger = logging.getLogger(__name__)


def _get_engine(request: Request) -> TransformationEngine:
    engine: TransformationEngine = request.app.state.engine
    return engine


def _get_emitter(request: Request) -> NotificationEmitter:
    emitter: NotificationEmitter = request.app.state.emitter
    return emitter


# =============================================================================
# Webhook Router
# =============================================================================


def create_webhook_router() -> APIRouter:
    """Create router for the inbound webhook endpoint.

    Returns:
        APIRouter configured with the webhook endpoints.
    """
    router = APIRouter(tags=["Webhooks"])

    async def receive_webhook(request: Request, background_tasks: BackgroundTasks) -> JSONResponse:
        """Receive a Plane webhook and schedule its Discord notification.

        Returns 403 if the X-Plane-Signature header does not match the body,
        200 in every other case.
        """
        raw_body = await request.body()
        engine = _get_engine(request)

        try:
            result = engine.process(raw_body, request.headers.get(HEADER_SIGNATURE))
        except AuthenticationError:
            return JSONResponse(
                status_code=403,
                content=ErrorResponse(detail="Invalid signature").model_dump(),
            )

        if result.should_deliver:
            assert result.document is not None  # ensured by should_deliver
            background_tasks.add_task(_get_emitter(request).emit, result.document)

        ack = WebhookAck(outcome=result.outcome, reason=result.reason)
        return JSONResponse(status_code=200, content=ack.model_dump(mode="json"))

    for path in ("/", "/webhook"):
        router.add_api_route(
            path,
            receive_webhook,
            methods=["POST"],
            response_model=WebhookAck,
            responses={403: {"model": ErrorResponse}},
            summary="Receive Plane webhook",
        )

    return router


# =============================================================================
# Info Router
# =============================================================================


def create_info_router() -> APIRouter:
    """Create router for health and metadata endpoints."""
    router = APIRouter(tags=["General"])

    @router.get("/health", response_class=PlainTextResponse, summary="Health Check")
    async def get_health() -> str:
        """Health check endpoint for load balancers and container platforms."""
        return "OK"

    @router.get("/info", response_model=APIInfo, summary="Service Information")
    async def get_info(request: Request) -> APIInfo:
        """Get service metadata and which security/delivery features are active."""
        config = _get_engine(request).config
        return APIInfo(
            name="Plane Discord Bridge",
            version=__version__,
            workspace=config.workspace_name,
            signature_verification=config.verification_enabled,
            delivery_enabled=_get_emitter(request).enabled,
        )

    return router


def register_routes(app: FastAPI) -> None:
    """Register all routers with the app."""
    app.include_router(create_info_router())
    app.include_router(create_webhook_router())
    logger.debug("Registered webhook and info routes")


__all__ = [
    "create_info_router",
    "create_webhook_router",
    "register_routes",
]
