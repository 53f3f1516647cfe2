"""Pydantic response models for the bridge HTTP API.

Response Models:
- WebhookAck: Acknowledgement of an accepted webhook
- ErrorResponse: Standard error response
- APIInfo: Service metadata
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from plane_discord_bridge.core.engine import Outcome


class WebhookAck(BaseModel):
    """Acknowledgement returned for every authenticated webhook.

    The bridge acknowledges suppressed, unhandled and discarded webhooks the
    same way as delivered ones so that Plane never retries them.

    Attributes:
        status: Always "ok".
        outcome: What the engine did with the webhook.
        reason: Short machine-readable explanation.
    """

    status: str = "ok"
    outcome: Outcome
    reason: str = ""


class ErrorResponse(BaseModel):
    """Standard error response.

    Attributes:
        detail: Human-readable error message.
    """

    detail: str = Field(examples=["Invalid signature"])


class APIInfo(BaseModel):
    """Service metadata for the info endpoint.

    Attributes:
        name: Service name.
        version: Service version.
        workspace: Configured workspace display name.
        signature_verification: Whether inbound signatures are checked.
        delivery_enabled: Whether notifications are forwarded to Discord.
    """

    name: str
    version: str
    workspace: str
    signature_verification: bool
    delivery_enabled: bool


__all__ = [
    "APIInfo",
    "ErrorResponse",
    "WebhookAck",
]
