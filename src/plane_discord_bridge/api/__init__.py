"""HTTP layer for the Plane to Discord bridge.

Endpoints:
- POST /, POST /webhook: Receive a Plane webhook
- GET /health: Health check
- GET /info: Service metadata

Usage:
    from plane_discord_bridge.api import create_app

    app = create_app()
"""

from plane_discord_bridge.api.models import APIInfo, ErrorResponse, WebhookAck
from plane_discord_bridge.api.routes import (
    create_info_router,
    create_webhook_router,
    register_routes,
)
from plane_discord_bridge.api.server import create_app, get_app

__all__ = [
    # Models
    "APIInfo",
    "ErrorResponse",
    "WebhookAck",
    # Routes
    "create_info_router",
    "create_webhook_router",
    "register_routes",
    # Server
    "create_app",
    "get_app",
]
