"""Notification documents and the renderers that build them.

A NotificationDocument is the platform-neutral form of a chat message card.
It serialises to a single Discord embed object via ``to_embed()``.

Renderers are pure functions of the classified payload, the normalized
change (for updates) and the workspace identity:

- issue/created: title, description and an inline Priority field
- issue/updated: title, "Field **X** changed." and a Change field
- issue/deleted: the issue id
- issue_comment: the comment body and an inline Issue ID field

Example:
    >>> identity = WorkspaceIdentity(name="Acme", app_url="https://plane.so")
    >>> doc = render_issue_created(EventPayload({"data": {"name": "Fix bug"}}), identity)
    >>> doc.title
    'Fix bug'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any

from .extractor import EventPayload, get_path, get_string, get_text
from .normalizer import NormalizedChange, absolute_url, avatar_of, priority_label

# =============================================================================
# Event Classification
# =============================================================================


class EventKind(str, Enum):
    """Plane webhook event names handled by the bridge."""

    ISSUE = "issue"
    ISSUE_COMMENT = "issue_comment"

    def __str__(self) -> str:
        return self.value


class Action(str, Enum):
    """Issue lifecycle actions handled by the bridge."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"

    def __str__(self) -> str:
        return self.value


class EmbedColor(IntEnum):
    """Accent colors per notification kind."""

    CREATED = 8184715
    DELETED = 16415088
    UPDATED = 4093438


ICON_PATH = "/plane-icon.png"

# =============================================================================
# Document Model
# =============================================================================


@dataclass
class EmbedAuthor:
    """Author block shown above the embed title."""

    name: str
    icon_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "icon_url": self.icon_url}


@dataclass
class EmbedFooter:
    """Footer line shown below the embed fields."""

    text: str
    icon_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "icon_url": self.icon_url}


@dataclass
class EmbedField:
    """A named value; inline fields are laid out side by side."""

    name: str
    value: str
    inline: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "value": self.value, "inline": self.inline}


@dataclass
class NotificationDocument:
    """Rendered notification, independent of the delivery transport.

    Attributes:
        title: Optional headline (the issue name).
        description: Optional body text.
        color: Accent color code.
        author: Author block (workspace or acting user).
        thumbnail_url: Optional image shown at the top right.
        footer: Optional footer line.
        fields: Ordered fields.
    """

    title: str = ""
    description: str = ""
    color: int = EmbedColor.UPDATED
    author: EmbedAuthor | None = None
    thumbnail_url: str | None = None
    footer: EmbedFooter | None = None
    fields: list[EmbedField] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when there is neither title nor description to show."""
        return not self.title.strip() and not self.description.strip()

    def add_field(self, name: str, value: str, inline: bool = False) -> None:
        """Append a field to the document."""
        self.fields.append(EmbedField(name=name, value=value, inline=inline))

    def to_embed(self) -> dict[str, Any]:
        """Serialise as a Discord embed object, omitting empty optional parts."""
        embed: dict[str, Any] = {"color": int(self.color)}
        if self.title:
            embed["title"] = self.title
        if self.description:
            embed["description"] = self.description
        if self.author is not None:
            embed["author"] = self.author.to_dict()
        if self.thumbnail_url:
            embed["thumbnail"] = {"url": self.thumbnail_url}
        if self.footer is not None:
            embed["footer"] = self.footer.to_dict()
        if self.fields:
            embed["fields"] = [f.to_dict() for f in self.fields]
        return embed


@dataclass(frozen=True)
class WorkspaceIdentity:
    """Who the notifications are posted on behalf of by default."""

    name: str
    app_url: str

    @property
    def icon_url(self) -> str:
        return absolute_url(ICON_PATH, self.app_url)


# =============================================================================
# Shared Pieces
# =============================================================================


def _base_document(identity: WorkspaceIdentity, color: EmbedColor) -> NotificationDocument:
    return NotificationDocument(
        color=color,
        author=EmbedAuthor(name=f"Update in {identity.name}", icon_url=identity.icon_url),
        footer=EmbedFooter(text=identity.name, icon_url=identity.icon_url),
    )


def _apply_actor(
    document: NotificationDocument,
    payload: EventPayload,
    identity: WorkspaceIdentity,
    phrase: str,
) -> bool:
    """Credit the acting user in the author block.

    Returns:
        True if an actor was present in the payload.
    """
    actor = payload.actor
    display_name = get_string(actor, "display_name")
    if not display_name:
        return False

    assert document.author is not None  # ensured by _base_document
    document.author.name = f"{display_name} {phrase}"
    avatar = avatar_of(actor)
    if avatar:
        document.author.icon_url = absolute_url(avatar, identity.app_url)
    return True


# =============================================================================
# Renderers
# =============================================================================


def render_issue_created(payload: EventPayload, identity: WorkspaceIdentity) -> NotificationDocument:
    """Render an issue creation."""
    data = payload.data
    document = _base_document(identity, EmbedColor.CREATED)
    document.title = get_string(data, "name")
    document.description = get_string(data, "description_stripped")
    document.add_field("Priority", priority_label(get_string(data, "priority")), inline=True)
    _apply_actor(document, payload, identity, "created an issue")
    return document


def render_issue_deleted(payload: EventPayload, identity: WorkspaceIdentity) -> NotificationDocument:
    """Render an issue deletion; only the id survives deletion."""
    document = _base_document(identity, EmbedColor.DELETED)
    document.description = f"ID: `{get_text(payload.data, 'id')}`"
    if not _apply_actor(document, payload, identity, "deleted an issue"):
        assert document.author is not None  # ensured by _base_document
        document.author.name = "Work item deleted"
    return document


def render_issue_updated(
    payload: EventPayload,
    change: NormalizedChange,
    identity: WorkspaceIdentity,
) -> NotificationDocument:
    """Render a single-field issue update."""
    document = _base_document(identity, EmbedColor.UPDATED)
    document.title = get_string(payload.data, "name")
    document.description = f"Field **{change.display_field}** changed."
    document.add_field("Change", f"`{change.old}` → `{change.new}`")
    document.thumbnail_url = change.thumbnail_url
    _apply_actor(document, payload, identity, "updated an issue")
    return document


def render_comment(payload: EventPayload, identity: WorkspaceIdentity) -> NotificationDocument:
    """Render a new issue comment."""
    data = payload.data
    document = _base_document(identity, EmbedColor.UPDATED)
    document.title = get_path(data, "issue_detail", "name")
    document.description = get_string(data, "comment_stripped")
    document.add_field("Issue ID", get_text(data, "issue"), inline=True)
    if not _apply_actor(document, payload, identity, "commented"):
        assert document.author is not None  # ensured by _base_document
        document.author.name = "New Comment"
    return document


__all__ = [
    "Action",
    "EmbedAuthor",
    "EmbedColor",
    "EmbedField",
    "EmbedFooter",
    "EventKind",
    "NotificationDocument",
    "WorkspaceIdentity",
    "render_comment",
    "render_issue_created",
    "render_issue_deleted",
    "render_issue_updated",
]
