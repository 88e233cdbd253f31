"""
Pytest configuration and shared fixtures.

The upstream ClickHouse Cloud API is simulated with httpx.MockTransport:
each test supplies a handler that builds the httpx.Response, and every
request the client sends is recorded for assertions.
"""

import sys
from pathlib import Path
from typing import Callable

import httpx
import pytest

# Add project root to Python path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from clickhouse_mcp.clients.clickhouse import ClickHouseApiClient  # noqa: E402
from clickhouse_mcp.core.config import Settings, get_settings  # noqa: E402
from clickhouse_mcp.models.domain import ApiCredentials  # noqa: E402
from clickhouse_mcp.tools.dispatcher import ToolDispatcher  # noqa: E402
from clickhouse_mcp.tools.registry import get_tool_registry, reset_tool_registry  # noqa: E402

TEST_BASE_URL = "https://api.clickhouse.test"

Handler = Callable[[httpx.Request], httpx.Response]


def pytest_configure(config):
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")


# =============================================================================
# Global state
# =============================================================================


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Give every test a fresh registry and settings cache."""
    reset_tool_registry()
    get_settings.cache_clear()
    yield
    reset_tool_registry()
    get_settings.cache_clear()


# =============================================================================
# Settings and credentials
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Settings with fake credentials, ignoring any local .env file."""
    return Settings(
        _env_file=None,
        api_key_id="test-key-id",
        api_secret="test-key-secret",
        api_base_url=TEST_BASE_URL,
    )


@pytest.fixture
def unconfigured_settings() -> Settings:
    """Settings without credentials."""
    return Settings(
        _env_file=None,
        api_key_id="",
        api_secret="",
        api_base_url=TEST_BASE_URL,
    )


@pytest.fixture
def credentials() -> ApiCredentials:
    return ApiCredentials(key_id="test-key-id", key_secret="test-key-secret")


@pytest.fixture
def organization_id() -> str:
    return "8b3b2c1e-4f5a-4d6b-9c7d-0e1f2a3b4c5d"


@pytest.fixture
def service_id() -> str:
    return "1f2e3d4c-5b6a-4978-8695-a4b3c2d1e0f9"


# =============================================================================
# Simulated upstream
# =============================================================================


class FakeUpstream:
    """
    Records requests and answers them with a configurable handler.

    The default handler returns 200 with an empty JSON object.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.handler: Handler = lambda request: httpx.Response(200, json={})

    def respond_with(self, handler: Handler) -> None:
        self.handler = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def api_client(upstream: FakeUpstream) -> ClickHouseApiClient:
    """ClickHouseApiClient whose HTTP traffic goes to the fake upstream."""
    http_client = httpx.AsyncClient(
        base_url=TEST_BASE_URL,
        transport=httpx.MockTransport(upstream),
    )
    return ClickHouseApiClient(http_client=http_client)


@pytest.fixture
def dispatcher(api_client: ClickHouseApiClient, test_settings: Settings) -> ToolDispatcher:
    return ToolDispatcher(
        registry=get_tool_registry(),
        api_client=api_client,
        settings=test_settings,
    )
