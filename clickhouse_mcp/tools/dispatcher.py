"""
Tool Dispatcher

This module turns MCP tool invocations into ClickHouse Cloud API calls.

Per invocation:
1. Resolve the API credentials (checked on every call).
2. Look up the tool definition in the registry.
3. Validate the arguments against the tool's schema.
4. Build the request path and body from the validated arguments.
5. Call the ClickHouse Cloud API.
6. Wrap the result as a single pretty-printed JSON text block.

Any failure in steps 1-5 is re-raised as ToolCallError naming the tool.
Nothing is retried.

Pattern: Command Executor with a declarative registry (no per-tool branches)
"""

import json
from typing import Any, Optional

from mcp import types

from clickhouse_mcp.clients.clickhouse import ClickHouseApiClient
from clickhouse_mcp.core.config import Settings
from clickhouse_mcp.core.exceptions import ClickHouseMCPError, ToolCallError
from clickhouse_mcp.models.domain import ToolInvocation
from clickhouse_mcp.observability.logging import get_logger
from clickhouse_mcp.tools.registry import ToolRegistry
from clickhouse_mcp.tools.schema import to_json_schema, validate_arguments

logger = get_logger(__name__)


class ToolDispatcher:
    """
    Dispatcher for ClickHouse tool invocations.

    Attributes:
        registry: The ToolRegistry to look up tools from.
        api_client: The HTTP call adapter for the upstream API.
        settings: Process-wide settings holding the API credentials.

    Example:
        >>> dispatcher = ToolDispatcher(get_tool_registry(), api_client, get_settings())
        >>> content = await dispatcher.call_tool("clickhouse_listOrganizations", {})
    """

    def __init__(
        self,
        registry: ToolRegistry,
        api_client: ClickHouseApiClient,
        settings: Settings,
    ) -> None:
        self.registry = registry
        self.api_client = api_client
        self.settings = settings

    def list_tools(self) -> list[types.Tool]:
        """Render the tool catalog for discovery."""
        return [
            types.Tool(
                name=definition.name,
                description=definition.description,
                inputSchema=to_json_schema(definition.input_schema),
            )
            for definition in self.registry.list_all()
        ]

    async def call_tool(
        self, name: str, arguments: Optional[dict[str, Any]] = None
    ) -> list[types.TextContent]:
        """
        Execute a tool call and return its MCP content.

        Args:
            name: Tool name.
            arguments: Raw tool arguments.

        Returns:
            A single TextContent holding the pretty-printed JSON result.

        Raises:
            ToolCallError: If configuration, lookup, validation or the
                upstream call fails.
        """
        invocation = ToolInvocation(name=name, arguments=arguments or {})
        result = await self.dispatch(invocation)
        return [
            types.TextContent(
                type="text",
                text=json.dumps(result, indent=2, ensure_ascii=False),
            )
        ]

    async def dispatch(self, invocation: ToolInvocation) -> Any:
        """
        Validate and route one invocation to the upstream API.

        Returns:
            The normalized API response.

        Raises:
            ToolCallError: Wrapping the underlying ClickHouseMCPError.
        """
        name = invocation.name
        try:
            credentials = self.settings.get_credentials()
            definition = self.registry.get(name)
            arguments = validate_arguments(definition.input_schema, invocation.arguments)

            path = definition.build_path(arguments)
            logger.info("dispatching tool", tool=name, method=definition.method.value, path=path)

            return await self.api_client.call(
                path,
                definition.method,
                credentials,
                body=definition.extract_body(arguments),
                extra_headers=definition.headers or None,
            )
        except ClickHouseMCPError as e:
            logger.error(
                "tool call failed",
                tool=name,
                error_type=type(e).__name__,
                error=e.message,
            )
            raise ToolCallError(name, e) from e
