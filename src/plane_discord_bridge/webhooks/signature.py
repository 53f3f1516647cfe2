"""HMAC-SHA256 signature verification for inbound Plane webhooks.

Plane signs every webhook body with the shared secret configured for the
webhook and sends the hex digest in the ``X-Plane-Signature`` header.

Security:
    When no secret is configured verification is disabled and every payload
    is accepted. This keeps local setups simple but means anyone who can reach
    the endpoint can post notifications; always set ``WEBHOOK_SECRET`` on a
    publicly reachable deployment.

Example:
    >>> body = b'{"event": "issue"}'
    >>> signature = generate_signature(body, "secret123")
    >>> verify_signature(body, signature, "secret123")
    True
    >>> verify_signature(body, signature, "wrong")
    False
"""

from __future__ import annotations

import hashlib
import hmac

# Header carrying the hex digest
HEADER_SIGNATURE = "X-Plane-Signature"


def generate_signature(payload: bytes, secret: str) -> str:
    """Generate the hex-encoded HMAC-SHA256 signature for a payload.

    Args:
        payload: The raw payload bytes to sign.
        secret: The shared secret key.

    Returns:
        Hex-encoded HMAC-SHA256 digest (64 characters).
    """
    secret_bytes = secret.encode("utf-8") if isinstance(secret, str) else secret
    return hmac.new(secret_bytes, payload, hashlib.sha256).hexdigest()


def verify_signature(payload: bytes, signature: str | None, secret: str | None) -> bool:
    """Verify an inbound payload against its supplied signature.

    Uses constant-time comparison to prevent timing attacks.

    Args:
        payload: The raw request body exactly as received.
        signature: The hex digest supplied by the sender.
        secret: The shared secret. Empty or None disables verification.

    Returns:
        True if verification is disabled or the signature matches.
    """
    if not secret:
        return True

    if not signature:
        return False

    expected = generate_signature(payload, secret)
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))


__all__ = [
    "HEADER_SIGNATURE",
    "generate_signature",
    "verify_signature",
]
