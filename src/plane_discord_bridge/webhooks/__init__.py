"""Webhook transport for the Plane to Discord bridge.

This package holds both ends of the bridge's wire surface:

- signature: HMAC-SHA256 verification of inbound Plane webhooks
- client: DiscordWebhookClient for posting notifications to Discord

Usage:
    from plane_discord_bridge.webhooks import DiscordWebhookClient, verify_signature

    if verify_signature(body, request.headers.get(HEADER_SIGNATURE), secret):
        await DiscordWebhookClient(url).send(document)
"""

from __future__ import annotations

from plane_discord_bridge.webhooks.client import (
    DeliveryConnectionError,
    DeliveryError,
    DeliveryResult,
    DeliveryTimeoutError,
    DiscordWebhookClient,
    build_message,
)
from plane_discord_bridge.webhooks.signature import (
    HEADER_SIGNATURE,
    generate_signature,
    verify_signature,
)

__all__ = [
    # Client
    "DiscordWebhookClient",
    "DeliveryConnectionError",
    "DeliveryError",
    "DeliveryResult",
    "DeliveryTimeoutError",
    "build_message",
    # Signature
    "HEADER_SIGNATURE",
    "generate_signature",
    "verify_signature",
]
