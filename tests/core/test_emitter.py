"""Tests for NotificationEmitter fire-and-forget delivery."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from plane_discord_bridge.core.engine import NotificationEmitter
from plane_discord_bridge.core.renderer import NotificationDocument
from plane_discord_bridge.webhooks.client import DeliveryResult


@pytest.fixture
def document() -> NotificationDocument:
    """Provide a minimal document."""
    return NotificationDocument(title="Fix bug", description="desc")


def make_client(result: DeliveryResult | None = None, error: Exception | None = None) -> MagicMock:
    client = MagicMock()
    client.send = AsyncMock(return_value=result, side_effect=error)
    client.send_sync = MagicMock(return_value=result, side_effect=error)
    return client


class TestNotificationEmitter:
    """Tests for NotificationEmitter."""

    def test_enabled(self) -> None:
        """Test the enabled flag."""
        assert NotificationEmitter(make_client()).enabled is True
        assert NotificationEmitter(None).enabled is False

    @pytest.mark.asyncio
    async def test_emit_without_client(
        self, document: NotificationDocument, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that a missing client drops the document with a warning."""
        emitter = NotificationEmitter(None)

        with caplog.at_level(logging.WARNING):
            result = await emitter.emit(document)

        assert result is None
        assert "DISCORD_WEBHOOK_URL" in caplog.text

    @pytest.mark.asyncio
    async def test_emit_success(self, document: NotificationDocument, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a successful delivery is logged and returned."""
        delivered = DeliveryResult(success=True, status_code=204)
        client = make_client(result=delivered)
        emitter = NotificationEmitter(client)

        with caplog.at_level(logging.INFO):
            result = await emitter.emit(document)

        assert result is delivered
        client.send.assert_awaited_once_with(document)
        assert "Notification delivered: Fix bug" in caplog.text

    @pytest.mark.asyncio
    async def test_emit_failure_is_logged(
        self, document: NotificationDocument, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that a failed delivery is logged, not raised."""
        failed = DeliveryResult(success=False, status_code=500, error="Discord returned 500")
        emitter = NotificationEmitter(make_client(result=failed))

        with caplog.at_level(logging.WARNING):
            result = await emitter.emit(document)

        assert result is failed
        assert "Discord returned 500" in caplog.text

    @pytest.mark.asyncio
    async def test_emit_swallows_unexpected_errors(
        self, document: NotificationDocument, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that client exceptions never propagate."""
        emitter = NotificationEmitter(make_client(error=RuntimeError("boom")))

        with caplog.at_level(logging.WARNING):
            result = await emitter.emit(document)

        assert result is None
        assert "boom" in caplog.text

    def test_emit_sync(self, document: NotificationDocument) -> None:
        """Test synchronous delivery."""
        delivered = DeliveryResult(success=True, status_code=204)
        client = make_client(result=delivered)

        result = NotificationEmitter(client).emit_sync(document)

        assert result is delivered
        client.send_sync.assert_called_once_with(document)

    def test_emit_sync_swallows_errors(self, document: NotificationDocument) -> None:
        """Test that synchronous delivery errors never propagate."""
        emitter = NotificationEmitter(make_client(error=ValueError("bad")))

        assert emitter.emit_sync(document) is None

    def test_emit_sync_without_client(self, document: NotificationDocument) -> None:
        """Test synchronous delivery when disabled."""
        assert NotificationEmitter(None).emit_sync(document) is None
