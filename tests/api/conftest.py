"""Shared fixtures for API tests.

Provides common fixtures for testing FastAPI endpoints including:
- TestClient wired to an app with a controllable debounce clock
- A mocked Discord client so no test leaves the process
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from plane_discord_bridge.api.server import create_app
from plane_discord_bridge.core.config import BridgeConfig
from plane_discord_bridge.core.suppressor import UpdateDebouncer
from plane_discord_bridge.webhooks.client import DeliveryResult
from tests.helpers import FakeClock

# =============================================================================
# FastAPI App Fixtures
# =============================================================================


@pytest.fixture
def discord_client() -> MagicMock:
    """Provide a mocked Discord client that always succeeds."""
    client = MagicMock()
    client.send = AsyncMock(return_value=DeliveryResult(success=True, status_code=204))
    return client


@pytest.fixture
def app(bridge_config: BridgeConfig, clock: FakeClock, discord_client: MagicMock) -> FastAPI:
    """Create an app with signature verification and a mocked delivery client."""
    return create_app(
        config=bridge_config,
        debouncer=UpdateDebouncer(clock=clock),
        client=discord_client,
    )


@pytest.fixture
def api_client(app: FastAPI) -> TestClient:
    """Provide a TestClient for the app."""
    return TestClient(app)


@pytest.fixture
def open_api_client(open_config: BridgeConfig) -> TestClient:
    """Provide a TestClient for an app without a secret or Discord URL."""
    return TestClient(create_app(config=open_config))
