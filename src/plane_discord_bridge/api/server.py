"""FastAPI application factory for the bridge.

Key Features:
- App factory pattern for testability
- One TransformationEngine (and so one debounce state) per app
- Lifespan context logging the effective configuration

Usage:
    from plane_discord_bridge.api.server import create_app

    app = create_app()
    # uvicorn plane_discord_bridge.api.server:get_app --factory
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from plane_discord_bridge import __version__
from plane_discord_bridge.api.routes import register_routes
from plane_discord_bridge.core.config import BridgeConfig, get_config
from plane_discord_bridge.core.engine import NotificationEmitter, TransformationEngine
from plane_discord_bridge.core.suppressor import UpdateDebouncer
from plane_discord_bridge.webhooks.client import DiscordWebhookClient

logger = logging.getLogger(__name__)


def log_config(config: BridgeConfig) -> None:
    """Log the effective configuration, secrets masked."""
    safe = config.to_safe_dict()
    logger.info("=" * 50)
    logger.info("Bridge Configuration:")
    logger.info(f"  Workspace: {safe['workspace_name']}")
    logger.info(f"  App URL: {safe['app_url']}")
    logger.info(f"  Listen: {safe['host']}:{safe['port']}")
    logger.info(f"  Discord Webhook: {safe['discord_webhook_url'] or '(not set)'}")
    logger.info(f"  Debounce: {safe['debounce_seconds']}s")
    logger.info(f"  Signature Verification: {'enabled' if config.verification_enabled else 'disabled'}")
    logger.info("=" * 50)

    if not config.verification_enabled:
        logger.warning(
            "⚠️  WEBHOOK_SECRET is not set: signature verification is disabled and "
            "any caller can post notifications."
        )
    if not config.delivery_enabled:
        logger.warning("⚠️  DISCORD_WEBHOOK_URL is not set: notifications will be dropped.")


# =============================================================================
# Lifespan Context
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Record the start time and log startup/shutdown."""
    app.state.start_time = time.time()
    logger.info(f"Plane Discord Bridge v{__version__} starting up")
    log_config(app.state.engine.config)

    yield

    logger.info("Plane Discord Bridge shutting down")


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    config: BridgeConfig | None = None,
    debouncer: UpdateDebouncer | None = None,
    client: DiscordWebhookClient | None = None,
    include_docs: bool = False,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Bridge configuration. Defaults to the process configuration.
        debouncer: Debouncer for the engine. Defaults to a fresh one.
        client: Discord client. Defaults to one built from the configuration
            (None when no webhook URL is configured).
        include_docs: Whether to expose the OpenAPI docs.

    Returns:
        Configured FastAPI application instance.
    """
    config = config or get_config()

    if client is None and config.delivery_enabled:
        client = DiscordWebhookClient(
            url=config.discord_webhook_url,
            avatar_url=config.icon_url,
        )

    app = FastAPI(
        title="Plane Discord Bridge",
        description="Forwards Plane issue webhooks to a Discord channel.",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if include_docs else None,
        redoc_url=None,
        openapi_url="/openapi.json" if include_docs else None,
    )

    app.state.engine = TransformationEngine(config, debouncer=debouncer)
    app.state.emitter = NotificationEmitter(client)

    register_routes(app)
    return app


def get_app() -> FastAPI:
    """Create the app from the environment (uvicorn factory entry point)."""
    return create_app()


__all__ = [
    "create_app",
    "get_app",
    "lifespan",
    "log_config",
]
