"""Field normalization for issue update notifications.

Maps the raw values of a Plane activity record (priority codes, state ids,
assignee id lists) to strings a Discord reader can make sense of. Special
cases are declared in ``FIELD_RULES`` so that supporting another field is a
table entry rather than a new branch.

Example:
    >>> change = normalize("priority", "low", "high", {}, {})
    >>> (change.display_field, change.old, change.new)
    ('priority', '🔵 Low', '🟠 High')
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .extractor import NONE_TEXT, get_list, get_path, get_string, is_blank

# =============================================================================
# Vocabulary
# =============================================================================

PRIORITIES: dict[str, str] = {
    "urgent": "🔴 Urgent!",
    "high": "🟠 High",
    "medium": "🟡 Medium",
    "low": "🔵 Low",
    "none": "⚫ None",
}

STATE_CHANGED_TEXT = "Changed"
PREVIOUSLY_SET_TEXT = "Previously set"


def priority_label(code: str) -> str:
    """Map a priority code to its display label (empty for unknown codes)."""
    return PRIORITIES.get(code, "")


def absolute_url(reference: str, base_url: str) -> str:
    """Resolve a root-relative asset path against the application URL.

    Absolute URLs and empty references are returned unchanged.

    Example:
        >>> absolute_url("/a.png", "https://plane.example.com")
        'https://plane.example.com/a.png'
    """
    if reference.startswith("/") and not reference.startswith("//"):
        return base_url.rstrip("/") + reference
    return reference


def avatar_of(user: Mapping[str, Any]) -> str:
    """Return a user's avatar reference, preferring ``avatar_url``."""
    return get_string(user, "avatar_url") or get_string(user, "avatar")


# =============================================================================
# Result and Rule Types
# =============================================================================


@dataclass(frozen=True)
class NormalizedChange:
    """Display form of a single field change.

    Attributes:
        display_field: Field name as shown to the reader.
        old: Display text of the previous value.
        new: Display text of the current value.
        thumbnail_url: Image to attach to the notification, if the field
            provides one.
    """

    display_field: str
    old: str
    new: str
    thumbnail_url: str | None = None


@dataclass(frozen=True)
class FieldContext:
    """Inputs available to a field rule besides the raw values."""

    data: Mapping[str, Any]
    activity: Mapping[str, Any]
    base_url: str = ""


ValueMapper = Callable[[str, FieldContext], str]
ThumbnailHook = Callable[[FieldContext], str | None]


def _passthrough(value: str, context: FieldContext) -> str:
    return value


def _priority(value: str, context: FieldContext) -> str:
    return priority_label(value)


def _changed_marker(value: str, context: FieldContext) -> str:
    # Prior state ids mean nothing to a reader
    return NONE_TEXT if is_blank(value) else STATE_CHANGED_TEXT


def _current_state_name(value: str, context: FieldContext) -> str:
    # The raw value is a state id; never shown
    for key in ("state", "state_detail"):
        name = get_path(context.data, key, "name")
        if name:
            return name
    return NONE_TEXT


def _previously_set_marker(value: str, context: FieldContext) -> str:
    return NONE_TEXT if is_blank(value) else PREVIOUSLY_SET_TEXT


def _assignees(context: FieldContext) -> list[dict[str, Any]]:
    people = get_list(context.data, "assignees") or get_list(context.data, "assignee_details")
    return [dict(person) for person in people if isinstance(person, Mapping)]


def _assignee_names(value: str, context: FieldContext) -> str:
    names = [get_string(person, "display_name") for person in _assignees(context)]
    names = [name for name in names if name]
    return ", ".join(names) if names else NONE_TEXT


def _first_assignee_avatar(context: FieldContext) -> str | None:
    assignees = _assignees(context)
    if not assignees:
        return None
    avatar = avatar_of(assignees[0])
    if not avatar:
        return None
    return absolute_url(avatar, context.base_url)


@dataclass(frozen=True)
class FieldRule:
    """How to present changes of one activity field.

    Attributes:
        display_name: Replacement field name, or None to keep the raw name.
        old_value: Mapper applied to the raw old value.
        new_value: Mapper applied to the raw new value.
        thumbnail: Optional hook producing the notification thumbnail.
    """

    display_name: str | None = None
    old_value: ValueMapper = _passthrough
    new_value: ValueMapper = _passthrough
    thumbnail: ThumbnailHook | None = None


_STATE_RULE = FieldRule(
    display_name="State",
    old_value=_changed_marker,
    new_value=_current_state_name,
)

FIELD_RULES: dict[str, FieldRule] = {
    "priority": FieldRule(old_value=_priority, new_value=_priority),
    "state": _STATE_RULE,
    "state_id": _STATE_RULE,
    "assignee_ids": FieldRule(
        display_name="Assignees",
        old_value=_previously_set_marker,
        new_value=_assignee_names,
        thumbnail=_first_assignee_avatar,
    ),
}

_DEFAULT_RULE = FieldRule()


# =============================================================================
# Entry Point
# =============================================================================


def normalize(
    field_name: str,
    raw_old: str,
    raw_new: str,
    entity_data: Mapping[str, Any],
    activity: Mapping[str, Any],
    base_url: str = "",
) -> NormalizedChange:
    """Convert a raw field change into its display form.

    Args:
        field_name: Raw activity field name (e.g. ``state_id``).
        raw_old: Textual form of the previous value.
        raw_new: Textual form of the new value.
        entity_data: Current field values of the issue.
        activity: The full activity record.
        base_url: Application URL used to absolutise avatar paths.

    Returns:
        The normalized change. Fields without a rule pass through unchanged.
    """
    rule = FIELD_RULES.get(field_name, _DEFAULT_RULE)
    context = FieldContext(
        data=entity_data if isinstance(entity_data, Mapping) else {},
        activity=activity if isinstance(activity, Mapping) else {},
        base_url=base_url,
    )

    return NormalizedChange(
        display_field=rule.display_name or field_name,
        old=rule.old_value(raw_old, context),
        new=rule.new_value(raw_new, context),
        thumbnail_url=rule.thumbnail(context) if rule.thumbnail else None,
    )


__all__ = [
    "FIELD_RULES",
    "PRIORITIES",
    "FieldRule",
    "NormalizedChange",
    "absolute_url",
    "avatar_of",
    "normalize",
    "priority_label",
]
