"""Shared helpers for plane-discord-bridge tests."""

import json
from typing import Any

TEST_SECRET = "test-secret-12345"
TEST_DISCORD_URL = "https://discord.com/api/webhooks/123/abc"


class FakeClock:
    """Settable time source for debounce tests."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_update(field: str, old: Any = None, new: Any = None, issue_id: str = "42", **data: Any) -> dict[str, Any]:
    """Build an issue update webhook body."""
    return {
        "event": "issue",
        "action": "updated",
        "data": {"id": issue_id, "name": "Fix bug", **data},
        "activity": {"field": field, "old_value": old, "new_value": new},
    }


def encode(payload: dict[str, Any]) -> bytes:
    """Serialise a webhook body the way Plane sends it."""
    return json.dumps(payload).encode("utf-8")
