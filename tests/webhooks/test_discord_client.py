"""Tests for the Discord webhook client.

Tests cover:
- Client initialization and URL validation
- Message building
- Async and sync delivery methods
- DeliveryResult and error classes
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from plane_discord_bridge.core.renderer import EmbedColor, NotificationDocument
from plane_discord_bridge.webhooks.client import (
    DEFAULT_TIMEOUT,
    DEFAULT_USERNAME,
    DeliveryConnectionError,
    DeliveryError,
    DeliveryResult,
    DeliveryTimeoutError,
    DiscordWebhookClient,
    build_message,
)

WEBHOOK_URL = "https://discord.com/api/webhooks/123/abc"
ICON = "https://plane.so/plane-icon.png"


@pytest.fixture
def document() -> NotificationDocument:
    """Provide a simple document."""
    return NotificationDocument(title="Fix bug", description="desc", color=EmbedColor.CREATED)


def mock_response(status_code: int, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


# =============================================================================
# Test: Client Initialization
# =============================================================================


class TestClientInit:
    """Tests for DiscordWebhookClient initialization."""

    def test_defaults(self) -> None:
        """Test default settings."""
        client = DiscordWebhookClient(WEBHOOK_URL)

        assert client.url == WEBHOOK_URL
        assert client.username == DEFAULT_USERNAME == "Plane"
        assert client.avatar_url == ""
        assert client.timeout == DEFAULT_TIMEOUT

    def test_empty_url_raises(self) -> None:
        """Test that an empty URL is rejected."""
        with pytest.raises(ValueError, match="cannot be empty"):
            DiscordWebhookClient("")

    def test_invalid_scheme_raises(self) -> None:
        """Test that non-http URLs are rejected."""
        with pytest.raises(ValueError, match="Invalid Discord webhook URL scheme"):
            DiscordWebhookClient("ftp://discord.com/api/webhooks/1")

    def test_repr_hides_url(self) -> None:
        """Test that the token-bearing URL is not shown."""
        assert "abc" not in repr(DiscordWebhookClient(WEBHOOK_URL))


# =============================================================================
# Test: Message Building
# =============================================================================


class TestBuildMessage:
    """Tests for Discord message construction."""

    def test_single_embed(self, document: NotificationDocument) -> None:
        """Test that the document becomes the sole embed."""
        message = build_message(document, avatar_url=ICON)

        assert message == {
            "username": "Plane",
            "avatar_url": ICON,
            "embeds": [{"color": 8184715, "title": "Fix bug", "description": "desc"}],
        }

    def test_avatar_omitted_when_empty(self, document: NotificationDocument) -> None:
        """Test that no avatar key is sent without an avatar."""
        assert "avatar_url" not in build_message(document)

    def test_client_payload(self, document: NotificationDocument) -> None:
        """Test that the client uses its own sender identity."""
        client = DiscordWebhookClient(WEBHOOK_URL, username="Bridge", avatar_url=ICON)

        payload = client.build_payload(document)

        assert payload["username"] == "Bridge"
        assert payload["avatar_url"] == ICON
        assert len(payload["embeds"]) == 1


# =============================================================================
# Test: Async Send
# =============================================================================


class TestAsyncSend:
    """Tests for async send method."""

    @pytest.mark.asyncio
    async def test_send_success(self, document: NotificationDocument) -> None:
        """Test successful delivery."""
        client = DiscordWebhookClient(WEBHOOK_URL, avatar_url=ICON)

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = mock_response(204)

            result = await client.send(document)

        assert result.success is True
        assert result.status_code == 204
        assert result.error is None
        mock_post.assert_awaited_once()
        args, kwargs = mock_post.call_args
        assert args[0] == WEBHOOK_URL
        assert kwargs["json"] == client.build_payload(document)
        assert kwargs["timeout"] == DEFAULT_TIMEOUT

    @pytest.mark.asyncio
    async def test_send_error_status(self, document: NotificationDocument) -> None:
        """Test that a non-2xx response is a failed result, not an exception."""
        client = DiscordWebhookClient(WEBHOOK_URL)

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = mock_response(400, '{"message": "Invalid Form Body"}')

            result = await client.send(document)

        assert result.success is False
        assert result.status_code == 400
        assert result.error is not None
        assert "Discord returned 400" in result.error
        assert "Invalid Form Body" in result.error

    @pytest.mark.asyncio
    async def test_send_is_not_retried(self, document: NotificationDocument) -> None:
        """Test that a server error is reported after a single attempt."""
        client = DiscordWebhookClient(WEBHOOK_URL)

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = mock_response(503)

            result = await client.send(document)

        assert result.success is False
        assert mock_post.await_count == 1

    @pytest.mark.asyncio
    async def test_send_timeout(self, document: NotificationDocument) -> None:
        """Test timeout handling."""
        client = DiscordWebhookClient(WEBHOOK_URL, timeout=1.5)

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.side_effect = httpx.ReadTimeout("timed out")

            result = await client.send(document)

        assert result.success is False
        assert result.status_code is None
        assert result.error is not None
        assert "timed out after 1.5s" in result.error

    @pytest.mark.asyncio
    async def test_send_connection_error(self, document: NotificationDocument) -> None:
        """Test connection error handling."""
        client = DiscordWebhookClient(WEBHOOK_URL)

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.side_effect = httpx.ConnectError("refused")

            result = await client.send(document)

        assert result.success is False
        assert result.error is not None
        assert "Failed to connect" in result.error

    @pytest.mark.asyncio
    async def test_send_request_error(self, document: NotificationDocument) -> None:
        """Test generic transport error handling."""
        client = DiscordWebhookClient(WEBHOOK_URL)

        with patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as mock_post:
            mock_post.side_effect = httpx.RemoteProtocolError("bad")

            result = await client.send(document)

        assert result.success is False
        assert result.error is not None
        assert "Request failed" in result.error


# =============================================================================
# Test: Sync Send
# =============================================================================


class TestSyncSend:
    """Tests for sync send method."""

    def test_send_sync_success(self, document: NotificationDocument) -> None:
        """Test successful synchronous delivery."""
        client = DiscordWebhookClient(WEBHOOK_URL)

        with patch.object(httpx.Client, "post") as mock_post:
            mock_post.return_value = mock_response(200, "ok")

            result = client.send_sync(document)

        assert result.success is True
        assert result.response_body == "ok"
        mock_post.assert_called_once()

    def test_send_sync_error_status(self, document: NotificationDocument) -> None:
        """Test failed synchronous delivery."""
        client = DiscordWebhookClient(WEBHOOK_URL)

        with patch.object(httpx.Client, "post") as mock_post:
            mock_post.return_value = mock_response(404, "Unknown Webhook")

            result = client.send_sync(document)

        assert result.success is False
        assert result.status_code == 404

    def test_send_sync_timeout(self, document: NotificationDocument) -> None:
        """Test synchronous timeout handling."""
        client = DiscordWebhookClient(WEBHOOK_URL)

        with patch.object(httpx.Client, "post") as mock_post:
            mock_post.side_effect = httpx.ConnectTimeout("timed out")

            result = client.send_sync(document)

        assert result.success is False
        assert result.error is not None
        assert "timed out" in result.error


# =============================================================================
# Test: Result and Error Types
# =============================================================================


class TestDeliveryResult:
    """Tests for DeliveryResult."""

    def test_to_dict(self) -> None:
        """Test conversion to a dictionary."""
        result = DeliveryResult(success=False, status_code=500, delivery_time_ms=12.5, error="boom")

        assert result.to_dict() == {
            "success": False,
            "status_code": 500,
            "delivery_time_ms": 12.5,
            "error": "boom",
        }


class TestDeliveryErrors:
    """Tests for delivery error classes."""

    def test_delivery_error_str(self) -> None:
        """Test the string form with a status code."""
        error = DeliveryError("Discord returned 500", url=WEBHOOK_URL, status_code=500)

        assert str(error) == "Discord returned 500 status=500"
        assert error.url == WEBHOOK_URL

    def test_timeout_error(self) -> None:
        """Test the timeout error."""
        error = DeliveryTimeoutError(WEBHOOK_URL, 10.0)

        assert isinstance(error, DeliveryError)
        assert error.timeout == 10.0
        assert "10.0s" in str(error)

    def test_connection_error(self) -> None:
        """Test the connection error."""
        original = OSError("refused")
        error = DeliveryConnectionError(WEBHOOK_URL, original)

        assert error.original_error is original
        assert "refused" in str(error)
