"""Transformation Engine - turns an inbound Plane webhook into a notification.

Flow per request:

    received → authenticated → classified → suppressed | normalized
             → rendered → emitted | discarded

Only a signature mismatch raises (AuthenticationError). Every other path
ends in a TransformResult whose outcome tells the caller whether there is a
document to deliver; the caller acknowledges the webhook either way.

Usage:
    engine = TransformationEngine(config)
    result = engine.process(raw_body, request.headers.get("X-Plane-Signature"))
    if result.document is not None:
        await emitter.emit(result.document)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ..webhooks.signature import verify_signature
from .exceptions import AuthenticationError
from .extractor import EventPayload, get_string, get_text
from .normalizer import normalize
from .renderer import (
    Action,
    EventKind,
    NotificationDocument,
    render_comment,
    render_issue_created,
    render_issue_deleted,
    render_issue_updated,
)
from .suppressor import FieldWhitelist, UpdateDebouncer

if TYPE_CHECKING:
    from ..webhooks.client import DiscordWebhookClient, DeliveryResult
    from .config import BridgeConfig

logger = logging.getLogger(__name__)


# =============================================================================
# Result Types
# =============================================================================


class Outcome(str, Enum):
    """Terminal states of a successfully authenticated webhook."""

    EMITTED = "emitted"  # A document is ready for delivery
    SUPPRESSED = "suppressed"  # Dropped by the field whitelist or debounce
    UNHANDLED = "unhandled"  # Event/action the bridge does not report
    DISCARDED = "discarded"  # Rendered, but with nothing to show

    def __str__(self) -> str:
        return self.value


@dataclass
class TransformResult:
    """Outcome of processing one webhook.

    Attributes:
        outcome: Terminal state reached.
        reason: Short machine-readable explanation.
        document: The rendered notification when outcome is EMITTED.
    """

    outcome: Outcome
    reason: str = ""
    document: NotificationDocument | None = None

    @property
    def should_deliver(self) -> bool:
        return self.outcome is Outcome.EMITTED and self.document is not None


# =============================================================================
# Engine
# =============================================================================


class TransformationEngine:
    """Authenticates, classifies, filters and renders Plane webhooks.

    The engine owns its debouncer, so each engine instance has its own
    debounce state. It is safe to share one engine between concurrent
    requests.

    Attributes:
        config: Bridge configuration (secret, workspace identity, app URL).
        debouncer: Per-issue update debouncer.
        whitelist: Allowed update fields.
    """

    def __init__(
        self,
        config: BridgeConfig,
        debouncer: UpdateDebouncer | None = None,
        whitelist: FieldWhitelist | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Bridge configuration.
            debouncer: Debouncer to use. Defaults to one using the configured
                window and ``clock``.
            whitelist: Field whitelist. Defaults to the standard set.
            clock: Time source for the default debouncer.
        """
        self.config = config
        if debouncer is None:
            debouncer = UpdateDebouncer(window_seconds=config.debounce_seconds)
            if clock is not None:
                debouncer.clock = clock
        self.debouncer = debouncer
        self.whitelist = whitelist or FieldWhitelist()

    def authenticate(self, raw_body: bytes, signature: str | None) -> None:
        """Verify the payload signature.

        Raises:
            AuthenticationError: If the signature does not match.
        """
        if not verify_signature(raw_body, signature, self.config.webhook_secret):
            logger.warning("Rejected webhook with invalid signature")
            raise AuthenticationError("signature_mismatch" if signature else "missing_signature")

    def process(self, raw_body: bytes, signature: str | None) -> TransformResult:
        """Run the full pipeline on a raw webhook body.

        Args:
            raw_body: The request body exactly as received.
            signature: Value of the X-Plane-Signature header.

        Returns:
            TransformResult for the webhook.

        Raises:
            AuthenticationError: If the signature does not match.
        """
        self.authenticate(raw_body, signature)
        return self.transform(EventPayload.from_bytes(raw_body))

    def transform(self, payload: EventPayload) -> TransformResult:
        """Classify, filter and render an already authenticated payload."""
        event = payload.event
        action = payload.action

        if event == EventKind.ISSUE:
            if action == Action.CREATED:
                logger.info("Issue created: %s", get_string(payload.data, "name"))
                return self._finish(render_issue_created(payload, self.config.identity), payload)
            if action == Action.DELETED:
                logger.info("Issue deleted: %s", get_text(payload.data, "id"))
                return self._finish(render_issue_deleted(payload, self.config.identity), payload)
            if action == Action.UPDATED:
                return self._transform_update(payload)
        elif event == EventKind.ISSUE_COMMENT:
            return self._finish(render_comment(payload, self.config.identity), payload)

        logger.debug("Ignoring unhandled webhook: event=%r action=%r", event, action)
        return TransformResult(Outcome.UNHANDLED, reason=f"unhandled:{event or '-'}:{action or '-'}")

    def _transform_update(self, payload: EventPayload) -> TransformResult:
        activity = payload.activity
        field_name = get_text(activity, "field")
        issue_id = get_text(payload.data, "id")

        if not self.whitelist.allows(field_name):
            logger.debug("Suppressed update of ignored field %r on issue %s", field_name, issue_id)
            return TransformResult(Outcome.SUPPRESSED, reason=f"field_ignored:{field_name}")

        if not self.debouncer.should_notify(issue_id):
            logger.debug("Suppressed update burst on issue %s", issue_id)
            return TransformResult(Outcome.SUPPRESSED, reason="debounced")

        change = normalize(
            field_name,
            get_text(activity, "old_value"),
            get_text(activity, "new_value"),
            payload.data,
            activity,
            base_url=self.config.app_url,
        )
        return self._finish(render_issue_updated(payload, change, self.config.identity), payload)

    def _finish(self, document: NotificationDocument, payload: EventPayload) -> TransformResult:
        if document.is_empty:
            logger.debug("Discarded empty notification for %r", payload)
            return TransformResult(Outcome.DISCARDED, reason="empty_document")
        return TransformResult(Outcome.EMITTED, reason=f"{payload.event}:{payload.action}", document=document)


# =============================================================================
# Notification Emitter
# =============================================================================


class NotificationEmitter:
    """Fire-and-forget delivery of rendered notifications.

    Failures are logged but never raised, so delivery problems cannot change
    how the inbound webhook is acknowledged.

    Attributes:
        client: The Discord client, or None when delivery is disabled.
    """

    def __init__(self, client: DiscordWebhookClient | None) -> None:
        self._client = client

    @property
    def enabled(self) -> bool:
        """Check if delivery is configured."""
        return self._client is not None

    async def emit(self, document: NotificationDocument) -> DeliveryResult | None:
        """Deliver a document asynchronously.

        Returns:
            The delivery result, or None if delivery is disabled or failed
            unexpectedly.
        """
        if self._client is None:
            logger.warning("No DISCORD_WEBHOOK_URL configured, dropping notification")
            return None

        try:
            result = await self._client.send(document)
        except Exception as e:
            # Delivery runs after the response; nothing upstream can handle it
            logger.warning("Failed to deliver notification: %s", e)
            return None

        self._log_result(document, result)
        return result

    def emit_sync(self, document: NotificationDocument) -> DeliveryResult | None:
        """Deliver a document synchronously (see emit())."""
        if self._client is None:
            logger.warning("No DISCORD_WEBHOOK_URL configured, dropping notification")
            return None

        try:
            result = self._client.send_sync(document)
        except Exception as e:
            logger.warning("Failed to deliver notification: %s", e)
            return None

        self._log_result(document, result)
        return result

    @staticmethod
    def _log_result(document: NotificationDocument, result: DeliveryResult) -> None:
        label = document.title or document.description[:60]
        if result.success:
            logger.info("Notification delivered: %s", label)
        else:
            logger.warning("Notification delivery failed: %s - %s", label, result.error)


__all__ = [
    "NotificationEmitter",
    "Outcome",
    "TransformResult",
    "TransformationEngine",
]
