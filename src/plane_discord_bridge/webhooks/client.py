"""Discord incoming-webhook client.

Posts rendered notifications to a Discord webhook URL as a single embed,
under a fixed sender name and avatar. Each delivery is one attempt: failures
are reported through the returned DeliveryResult and logged, and it is up to
the caller to decide whether anything else should happen.

Example:
    >>> client = DiscordWebhookClient(
    ...     url="https://discord.com/api/webhooks/123/abc",
    ...     avatar_url="https://plane.so/plane-icon.png",
    ... )
    >>> result = await client.send(document)
    >>> result.success
    True
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from ..core.renderer import NotificationDocument

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0  # seconds
DEFAULT_USERNAME = "Plane"


# =============================================================================
# Exceptions
# =============================================================================


class DeliveryError(Exception):
    """Error during notification delivery.

    Attributes:
        url: The webhook URL that failed.
        status_code: HTTP status code if available.
        message: Error description.
        response_body: Response body if available.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.message = message
        self.response_body = response_body

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"status={self.status_code}")
        return " ".join(parts)


class DeliveryTimeoutError(DeliveryError):
    """Delivery did not complete within the timeout."""

    def __init__(self, url: str, timeout: float) -> None:
        super().__init__(f"Discord delivery timed out after {timeout}s", url=url)
        self.timeout = timeout


class DeliveryConnectionError(DeliveryError):
    """The Discord endpoint could not be reached."""

    def __init__(self, url: str, original_error: Exception) -> None:
        super().__init__(f"Failed to connect to Discord: {original_error}", url=url)
        self.original_error = original_error


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class DeliveryResult:
    """Result of a delivery attempt.

    Attributes:
        success: Whether Discord accepted the message (2xx response).
        status_code: HTTP status code from the response.
        response_body: Response body content.
        delivery_time_ms: Time taken for delivery in milliseconds.
        error: Error description when unsuccessful.
    """

    success: bool
    status_code: int | None = None
    response_body: str | None = None
    delivery_time_ms: float = 0.0
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for logging/serialization."""
        return {
            "success": self.success,
            "status_code": self.status_code,
            "delivery_time_ms": self.delivery_time_ms,
            "error": self.error,
        }


# =============================================================================
# Message Building
# =============================================================================


def build_message(
    document: NotificationDocument,
    username: str = DEFAULT_USERNAME,
    avatar_url: str = "",
) -> dict[str, Any]:
    """Build a Discord webhook message carrying one embed.

    Args:
        document: The rendered notification.
        username: Sender display name.
        avatar_url: Sender avatar; omitted when empty.

    Returns:
        JSON-serialisable message body.
    """
    message: dict[str, Any] = {
        "username": username,
        "embeds": [document.to_embed()],
    }
    if avatar_url:
        message["avatar_url"] = avatar_url
    return message


# =============================================================================
# DiscordWebhookClient
# =============================================================================


class DiscordWebhookClient:
    """HTTP client posting notifications to a Discord incoming webhook.

    Attributes:
        url: The Discord webhook URL.
        username: Sender display name shown in Discord.
        avatar_url: Sender avatar shown in Discord.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        url: str,
        username: str = DEFAULT_USERNAME,
        avatar_url: str = "",
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Raises:
            ValueError: If URL is empty or not http(s).
        """
        if not url:
            raise ValueError("Discord webhook URL cannot be empty")
        if not url.startswith(("http://", "https://")):
            raise ValueError(f"Invalid Discord webhook URL scheme: {url}")

        self.url = url
        self.username = username
        self.avatar_url = avatar_url
        self.timeout = timeout

    def build_payload(self, document: NotificationDocument) -> dict[str, Any]:
        """Wrap a document as the sole embed of a Discord webhook message."""
        return build_message(document, username=self.username, avatar_url=self.avatar_url)

    def _result_from_response(self, response: httpx.Response, start_time: float) -> DeliveryResult:
        delivery_time_ms = (time.time() - start_time) * 1000

        if 200 <= response.status_code < 300:
            logger.debug(
                "Discord notification delivered",
                extra={"status": response.status_code, "delivery_time_ms": delivery_time_ms},
            )
            return DeliveryResult(
                success=True,
                status_code=response.status_code,
                response_body=response.text,
                delivery_time_ms=delivery_time_ms,
            )

        error = DeliveryError(
            f"Discord returned {response.status_code}: {response.text[:200] if response.text else ''}",
            url=self.url,
            status_code=response.status_code,
            response_body=response.text,
        )
        logger.warning("Discord delivery failed: %s", error)
        return DeliveryResult(
            success=False,
            status_code=response.status_code,
            response_body=response.text,
            delivery_time_ms=delivery_time_ms,
            error=str(error),
        )

    def _failure(self, error: DeliveryError, start_time: float) -> DeliveryResult:
        logger.warning("Discord delivery failed: %s", error)
        return DeliveryResult(
            success=False,
            delivery_time_ms=(time.time() - start_time) * 1000,
            error=str(error),
        )

    async def send(self, document: NotificationDocument) -> DeliveryResult:
        """Post a document asynchronously.

        Args:
            document: The rendered notification.

        Returns:
            DeliveryResult describing the outcome. Never raises for HTTP or
            network failures.
        """
        payload = self.build_payload(document)
        start_time = time.time()

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(self.url, json=payload, timeout=self.timeout)
        except httpx.TimeoutException:
            return self._failure(DeliveryTimeoutError(self.url, self.timeout), start_time)
        except httpx.ConnectError as e:
            return self._failure(DeliveryConnectionError(self.url, e), start_time)
        except httpx.RequestError as e:
            return self._failure(DeliveryError(f"Request failed: {e}", url=self.url), start_time)

        return self._result_from_response(response, start_time)

    def send_sync(self, document: NotificationDocument) -> DeliveryResult:
        """Post a document synchronously.

        Synchronous version of send() for use in non-async contexts.
        """
        payload = self.build_payload(document)
        start_time = time.time()

        try:
            with httpx.Client() as client:
                response = client.post(self.url, json=payload, timeout=self.timeout)
        except httpx.TimeoutException:
            return self._failure(DeliveryTimeoutError(self.url, self.timeout), start_time)
        except httpx.ConnectError as e:
            return self._failure(DeliveryConnectionError(self.url, e), start_time)
        except httpx.RequestError as e:
            return self._failure(DeliveryError(f"Request failed: {e}", url=self.url), start_time)

        return self._result_from_response(response, start_time)

    def __repr__(self) -> str:
        # The webhook URL embeds its token, so it is not shown
        return f"DiscordWebhookClient(username={self.username!r}, timeout={self.timeout})"


__all__ = [
    "DEFAULT_TIMEOUT",
    "DEFAULT_USERNAME",
    "DeliveryConnectionError",
    "DeliveryError",
    "DeliveryResult",
    "DeliveryTimeoutError",
    "DiscordWebhookClient",
    "build_message",
]
