"""Exception hierarchy for the bridge core.

Only authentication failures and configuration problems are raised. Malformed
payloads, unknown events and suppressed notifications are ordinary outcomes
of the engine and never surface as exceptions.
"""

from __future__ import annotations


class BridgeError(Exception):
    """Base exception for all bridge errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.details:
            return f"{self.message}\n  Details: {self.details}"
        return self.message


class AuthenticationError(BridgeError):
    """Raised when an inbound payload fails signature verification."""

    def __init__(self, reason: str = "invalid_signature"):
        self.reason = reason
        super().__init__("Invalid signature", f"Reason: {reason}")


class ConfigurationError(BridgeError):
    """Raised when the bridge configuration cannot be loaded."""


__all__ = [
    "BridgeError",
    "AuthenticationError",
    "ConfigurationError",
]
