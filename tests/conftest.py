"""Pytest configuration and fixtures for plane-discord-bridge tests."""

from collections.abc import Generator
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Any

import pytest

from plane_discord_bridge.core.config import BridgeConfig, set_config
from plane_discord_bridge.core.renderer import WorkspaceIdentity
from tests.helpers import TEST_DISCORD_URL, TEST_SECRET, FakeClock

# =============================================================================
# Directory Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_config() -> Generator[None, None, None]:
    """Make every test load the process configuration afresh."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def bridge_config() -> BridgeConfig:
    """Provide a configuration with verification and delivery enabled."""
    return BridgeConfig(
        workspace_name="Acme",
        webhook_secret=TEST_SECRET,
        discord_webhook_url=TEST_DISCORD_URL,
        app_url="https://plane.so",
    )


@pytest.fixture
def open_config() -> BridgeConfig:
    """Provide a configuration with verification and delivery disabled."""
    return BridgeConfig(workspace_name="Acme", app_url="https://plane.so")


@pytest.fixture
def identity() -> WorkspaceIdentity:
    """Provide the default workspace identity."""
    return WorkspaceIdentity(name="Acme", app_url="https://plane.so")


@pytest.fixture
def clock() -> FakeClock:
    """Provide a settable clock."""
    return FakeClock()


# =============================================================================
# Payload Fixtures
# =============================================================================


@pytest.fixture
def created_payload() -> dict[str, Any]:
    """Provide an issue creation webhook body."""
    return {
        "event": "issue",
        "action": "created",
        "data": {
            "id": "1",
            "name": "Fix bug",
            "description_stripped": "desc",
            "priority": "high",
        },
    }


@pytest.fixture
def assignee_update_payload() -> dict[str, Any]:
    """Provide an issue update webhook body for an assignee change."""
    return {
        "event": "issue",
        "action": "updated",
        "data": {
            "id": "42",
            "name": "Fix bug",
            "assignees": [{"display_name": "Ann", "avatar": "/a.png"}],
        },
        "activity": {
            "field": "assignee_ids",
            "old_value": "[]",
            "new_value": "[2]",
        },
    }


@pytest.fixture
def comment_payload() -> dict[str, Any]:
    """Provide an issue comment webhook body."""
    return {
        "event": "issue_comment",
        "action": "created",
        "data": {
            "id": "c-1",
            "issue": "42",
            "comment_stripped": "Looks good to me",
            "issue_detail": {"name": "Fix bug"},
        },
    }


@pytest.fixture
def deleted_payload() -> dict[str, Any]:
    """Provide an issue deletion webhook body."""
    return {"event": "issue", "action": "deleted", "data": {"id": "42"}}
