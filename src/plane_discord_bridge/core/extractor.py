"""Total accessors over loosely-typed webhook payloads.

Plane payloads are JSON documents whose keys may be missing, null or of an
unexpected type depending on the Plane version and event. Every accessor in
this module returns a usable value of the requested shape and never raises:
type mismatches are treated as data, not errors.

Usage:
    from plane_discord_bridge.core.extractor import EventPayload, get_str

    payload = EventPayload.from_bytes(raw_body)
    name = get_str(payload.data, "name")
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

# Textual form of an absent or null value, shared by every renderer call site
NONE_TEXT = "None"


def to_text(value: Any) -> str:
    """Render any JSON value as canonical text.

    Args:
        value: A value decoded from JSON (or anything else).

    Returns:
        ``"None"`` for null, ``"true"``/``"false"`` for booleans, integral
        floats without a fractional part, compact JSON for containers and
        ``str()`` for everything else.
    """
    if value is None:
        return NONE_TEXT
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (Mapping, list, tuple)):
        try:
            return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


def get_str(mapping: Any, key: str, default: str = "") -> str:
    """Get a value as text, or ``default`` if the key is absent.

    A present null renders as ``"None"``; non-string scalars render in their
    canonical textual form.
    """
    if not isinstance(mapping, Mapping) or key not in mapping:
        return default
    return to_text(mapping[key])


def get_string(mapping: Any, key: str) -> str:
    """Get a string value, or ``""`` when absent, null or not a string.

    Use this for free text that is shown as-is (names, bodies, avatars),
    where a null must read as nothing rather than as ``"None"``.
    """
    if not isinstance(mapping, Mapping):
        return ""
    value = mapping.get(key)
    return value if isinstance(value, str) else ""


def get_text(mapping: Any, key: str) -> str:
    """Get a value as display text where absence renders as ``"None"``."""
    return get_str(mapping, key, default=NONE_TEXT)


def get_mapping(mapping: Any, key: str) -> dict[str, Any]:
    """Get a nested object, or an empty dict on absence or type mismatch."""
    if not isinstance(mapping, Mapping):
        return {}
    value = mapping.get(key)
    if isinstance(value, Mapping):
        return dict(value)
    return {}


def get_list(mapping: Any, key: str) -> list[Any]:
    """Get a nested array, or an empty list on absence or type mismatch."""
    if not isinstance(mapping, Mapping):
        return []
    value = mapping.get(key)
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def get_path(mapping: Any, *keys: str, default: str = "") -> str:
    """Follow nested keys and return the leaf as text.

    A null leaf yields ``default``, like a missing one.

    Example:
        >>> get_path({"state": {"name": "Done"}}, "state", "name")
        'Done'
    """
    current: Any = mapping
    for key in keys:
        if not isinstance(current, Mapping) or key not in current:
            return default
        current = current[key]
    if current is None:
        return default
    return to_text(current)


def is_blank(value: str) -> bool:
    """Check whether a textual value carries no information.

    Covers the empty string, the null sentinel and empty JSON containers,
    which is how Plane reports "nothing was set" in activity records.
    """
    return value.strip() in ("", NONE_TEXT, "null", "[]", "{}")


class EventPayload:
    """A parsed webhook body with total accessors for its well-known parts.

    Attributes:
        raw: The decoded top-level object (empty when the body was not a
            JSON object).
    """

    def __init__(self, raw: Mapping[str, Any] | None = None) -> None:
        self.raw: dict[str, Any] = dict(raw) if isinstance(raw, Mapping) else {}

    @classmethod
    def from_bytes(cls, body: bytes | str | None) -> EventPayload:
        """Parse a request body, degrading to an empty payload on bad input."""
        if not body:
            return cls()
        try:
            decoded = json.loads(body)
        except (ValueError, RecursionError):
            logger.debug("Webhook body is not valid JSON, using empty payload")
            return cls()
        if not isinstance(decoded, Mapping):
            logger.debug("Webhook body is not a JSON object, using empty payload")
            return cls()
        return cls(decoded)

    @property
    def event(self) -> str:
        """The event name, e.g. ``issue`` or ``issue_comment``."""
        return get_str(self.raw, "event")

    @property
    def action(self) -> str:
        """The action name, e.g. ``created``, ``updated`` or ``deleted``."""
        return get_str(self.raw, "action")

    @property
    def data(self) -> dict[str, Any]:
        """Current field values of the entity."""
        return get_mapping(self.raw, "data")

    @property
    def activity(self) -> dict[str, Any]:
        """The field-change record attached to updates."""
        return get_mapping(self.raw, "activity")

    @property
    def actor(self) -> dict[str, Any]:
        """The acting user, from the activity or the entity's actor details."""
        actor = get_mapping(self.activity, "actor")
        if actor:
            return actor
        return get_mapping(self.data, "actor_detail")

    def __repr__(self) -> str:
        return f"EventPayload(event={self.event!r}, action={self.action!r})"


__all__ = [
    "NONE_TEXT",
    "EventPayload",
    "get_list",
    "get_mapping",
    "get_path",
    "get_str",
    "get_string",
    "get_text",
    "is_blank",
    "to_text",
]
