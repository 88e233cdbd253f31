"""
MCP Server Factory

Builds the low-level MCP server shared by the stdio and SSE transports:
list_tools serves the tool catalog, call_tool delegates to the dispatcher.

The SDK's own input validation is turned off so the registry's validator,
which reports every violated field, is the single source of argument errors.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Optional

from mcp import types
from mcp.server import Server

from clickhouse_mcp import __version__
from clickhouse_mcp.clients.clickhouse import ClickHouseApiClient
from clickhouse_mcp.core.config import Settings, get_settings
from clickhouse_mcp.observability.logging import get_logger
from clickhouse_mcp.tools.dispatcher import ToolDispatcher
from clickhouse_mcp.tools.registry import ToolRegistry, get_tool_registry

logger = get_logger(__name__)

SERVER_NAME = "mcp-server-clickhouse"

Cleanup = Callable[[], Awaitable[None]]


def create_dispatcher(
    settings: Optional[Settings] = None,
    api_client: Optional[ClickHouseApiClient] = None,
    registry: Optional[ToolRegistry] = None,
) -> ToolDispatcher:
    """Wire a dispatcher from settings, falling back to the global singletons."""
    settings = settings or get_settings()
    if api_client is None:
        api_client = ClickHouseApiClient(
            base_url=settings.api_base_url,
            timeout_seconds=settings.request_timeout_seconds,
        )
    return ToolDispatcher(
        registry=registry or get_tool_registry(),
        api_client=api_client,
        settings=settings,
    )


def create_server(
    settings: Optional[Settings] = None,
    api_client: Optional[ClickHouseApiClient] = None,
    registry: Optional[ToolRegistry] = None,
) -> tuple[Server, Cleanup]:
    """
    Create the MCP server and its cleanup hook.

    Args:
        settings: Settings to use (default: get_settings()).
        api_client: Optional pre-built API client (for testing).
        registry: Optional registry (default: the ClickHouse catalog).

    Returns:
        (server, cleanup) where cleanup closes the HTTP client.
    """
    dispatcher = create_dispatcher(settings, api_client, registry)
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return dispatcher.list_tools()

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        return await dispatcher.call_tool(name, arguments)

    async def cleanup() -> None:
        logger.info("ClickHouse MCP Server cleaning up")
        await dispatcher.api_client.close()

    return server, cleanup
