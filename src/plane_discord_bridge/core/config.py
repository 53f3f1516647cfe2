"""Bridge configuration with environment variable support.

The bridge is configured entirely from the environment, which is how it is
deployed in containers:

- WORKSPACE_NAME -> config.workspace_name
- WEBHOOK_SECRET -> config.webhook_secret (empty disables verification)
- DISCORD_WEBHOOK_URL -> config.discord_webhook_url (empty disables delivery)
- APP_URL -> config.app_url
- WEB_HOST -> config.host
- WEB_PORT -> config.port
- LOG_LEVEL -> config.log_level
- DEBOUNCE_SECONDS -> config.debounce_seconds

Usage:
    from plane_discord_bridge.core.config import get_config

    config = get_config()
    print(config.workspace_name)

    # Rebuild after changing the environment (mostly useful in tests)
    config = reload_config()
"""

from __future__ import annotations

import os
import threading
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .normalizer import absolute_url
from .renderer import ICON_PATH, WorkspaceIdentity

# =============================================================================
# Constants
# =============================================================================

DEFAULT_WORKSPACE_NAME = "Workspace"
DEFAULT_APP_URL = "https://plane.so"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "info"

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")

# Environment variable mappings
# Format: (env_var_name, config_field)
ENV_VAR_MAPPINGS: list[tuple[str, str]] = [
    ("WORKSPACE_NAME", "workspace_name"),
    ("WEBHOOK_SECRET", "webhook_secret"),
    ("DISCORD_WEBHOOK_URL", "discord_webhook_url"),
    ("APP_URL", "app_url"),
    ("WEB_HOST", "host"),
    ("WEB_PORT", "port"),
    ("LOG_LEVEL", "log_level"),
    ("DEBOUNCE_SECONDS", "debounce_seconds"),
]

_SECRET_FIELDS = ("webhook_secret", "discord_webhook_url")


# =============================================================================
# Config Model
# =============================================================================


class BridgeConfig(BaseModel):
    """Runtime configuration of the bridge.

    Attributes:
        workspace_name: Display name used in the default author block.
        webhook_secret: Shared secret for X-Plane-Signature verification.
        discord_webhook_url: Discord incoming webhook URL.
        app_url: Plane application URL used for icons and root-relative
            avatar paths.
        host: Interface the HTTP server binds to.
        port: Port the HTTP server listens on.
        log_level: Logging level name.
        debounce_seconds: Minimum spacing of update notifications per issue.
    """

    workspace_name: str = Field(default=DEFAULT_WORKSPACE_NAME)
    webhook_secret: str = Field(default="", repr=False)
    discord_webhook_url: str = Field(default="", repr=False)
    app_url: str = Field(default=DEFAULT_APP_URL)
    host: str = Field(default=DEFAULT_HOST)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    log_level: str = Field(default=DEFAULT_LOG_LEVEL)
    debounce_seconds: int = Field(default=2, ge=0, le=3600)

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("app_url")
    @classmethod
    def validate_app_url(cls, v: str) -> str:
        """Require an http(s) URL and drop the trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"APP_URL must start with http:// or https://, got: {v}")
        return v.rstrip("/")

    @field_validator("discord_webhook_url")
    @classmethod
    def validate_discord_url(cls, v: str) -> str:
        """Allow empty (delivery disabled) or an http(s) URL."""
        v = v.strip()
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("DISCORD_WEBHOOK_URL must start with http:// or https://")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {v}. Valid levels: {list(LOG_LEVELS)}")
        return v

    # =========================================================================
    # Derived Values
    # =========================================================================

    @property
    def verification_enabled(self) -> bool:
        """Whether inbound signatures are checked."""
        return bool(self.webhook_secret)

    @property
    def delivery_enabled(self) -> bool:
        """Whether notifications are forwarded to Discord."""
        return bool(self.discord_webhook_url)

    @property
    def icon_url(self) -> str:
        """Absolute URL of the Plane icon."""
        return absolute_url(ICON_PATH, self.app_url)

    @property
    def identity(self) -> WorkspaceIdentity:
        """Default author identity for rendered notifications."""
        return WorkspaceIdentity(name=self.workspace_name, app_url=self.app_url)

    def absolute_url(self, reference: str) -> str:
        """Resolve a root-relative path against ``app_url``."""
        return absolute_url(reference, self.app_url)

    # =========================================================================
    # Factory Methods
    # =========================================================================

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BridgeConfig:
        """Build the configuration from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Returns:
            Validated configuration.

        Raises:
            ConfigurationError: If any value is invalid.
        """
        return cls.from_dict(get_env_overrides(environ))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BridgeConfig:
        """Build the configuration from a dictionary of field values.

        Raises:
            ConfigurationError: If any value is invalid.
        """
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError("Invalid bridge configuration", str(e)) from e

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_safe_dict(self) -> dict[str, Any]:
        """Convert to a dictionary with secrets masked, for logging and display."""
        data = self.model_dump()
        for key in _SECRET_FIELDS:
            if data.get(key):
                data[key] = "***"
        return data


def get_env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Collect the config fields set in the environment.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        Dictionary of config field name to raw string value.
    """
    env = os.environ if environ is None else environ
    return {field: env[name] for name, field in ENV_VAR_MAPPINGS if name in env}


# =============================================================================
# Process-wide Instance
# =============================================================================

_config: BridgeConfig | None = None
_config_lock = threading.Lock()


def get_config() -> BridgeConfig:
    """Get the process configuration, loading it from the environment once."""
    global _config
    with _config_lock:
        if _config is None:
            _config = BridgeConfig.from_env()
        return _config


def reload_config() -> BridgeConfig:
    """Reload the process configuration from the environment."""
    global _config
    with _config_lock:
        _config = BridgeConfig.from_env()
        return _config


def set_config(config: BridgeConfig | None) -> None:
    """Replace the process configuration (None forces a reload on next use)."""
    global _config
    with _config_lock:
        _config = config


__all__ = [
    "BridgeConfig",
    "ENV_VAR_MAPPINGS",
    "get_config",
    "get_env_overrides",
    "reload_config",
    "set_config",
]
