"""Core module - exports the transformation engine and its building blocks."""

from plane_discord_bridge.core.config import (
    BridgeConfig,
    get_config,
    reload_config,
)
from plane_discord_bridge.core.engine import (
    NotificationEmitter,
    Outcome,
    TransformationEngine,
    TransformResult,
)
from plane_discord_bridge.core.exceptions import (
    AuthenticationError,
    BridgeError,
    ConfigurationError,
)
from plane_discord_bridge.core.extractor import NONE_TEXT, EventPayload
from plane_discord_bridge.core.normalizer import (
    FIELD_RULES,
    PRIORITIES,
    NormalizedChange,
    normalize,
)
from plane_discord_bridge.core.renderer import (
    Action,
    EmbedAuthor,
    EmbedColor,
    EmbedField,
    EmbedFooter,
    EventKind,
    NotificationDocument,
    WorkspaceIdentity,
)
from plane_discord_bridge.core.suppressor import (
    ALLOWED_UPDATE_FIELDS,
    FieldWhitelist,
    UpdateDebouncer,
)

__all__ = [
    # Config
    "BridgeConfig",
    "get_config",
    "reload_config",
    # Engine
    "NotificationEmitter",
    "Outcome",
    "TransformationEngine",
    "TransformResult",
    # Exceptions
    "AuthenticationError",
    "BridgeError",
    "ConfigurationError",
    # Extraction and normalization
    "NONE_TEXT",
    "EventPayload",
    "FIELD_RULES",
    "PRIORITIES",
    "NormalizedChange",
    "normalize",
    # Rendering
    "Action",
    "EmbedAuthor",
    "EmbedColor",
    "EmbedField",
    "EmbedFooter",
    "EventKind",
    "NotificationDocument",
    "WorkspaceIdentity",
    # Suppression
    "ALLOWED_UPDATE_FIELDS",
    "FieldWhitelist",
    "UpdateDebouncer",
]
