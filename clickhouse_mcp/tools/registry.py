"""
Tool Registry

This module implements the registry of tools the server exposes.
The registry is filled once at startup and read-only afterwards; it
answers discovery requests (list_all) and dispatch lookups (get, describe).

Pattern: Service Registry (tool inventory keyed by name)
Pattern: Singleton for global registry access
"""

import logging
from typing import Optional

from clickhouse_mcp.core.exceptions import UnknownToolError
from clickhouse_mcp.models.domain import SchemaNode, ToolDefinition
from clickhouse_mcp.tools.definitions import CLICKHOUSE_TOOLS

logger = logging.getLogger(__name__)


# =============================================================================
# ToolRegistry Class
# =============================================================================


class ToolRegistry:
    """
    Registry of tool definitions keyed by name.

    Definitions are kept in registration order, which is the order
    clients see in the tool catalog.

    Attributes:
        _definitions: Dictionary mapping tool names to ToolDefinition instances.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(list_organizations)
        >>> registry.describe("clickhouse_listOrganizations")
    """

    def __init__(self, definitions: Optional[list[ToolDefinition]] = None) -> None:
        """
        Initialize the registry.

        Args:
            definitions: Optional definitions to register immediately.
        """
        self._definitions: dict[str, ToolDefinition] = {}
        for definition in definitions or []:
            self.register(definition)

    def register(self, definition: ToolDefinition) -> None:
        """
        Register a tool definition under its name.

        Args:
            definition: The ToolDefinition to register.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        if definition.name in self._definitions:
            raise ValueError(f"Tool already registered: {definition.name}")
        self._definitions[definition.name] = definition
        logger.debug(f"Registered tool: {definition.name}")

    def get(self, name: str) -> ToolDefinition:
        """
        Get a tool definition by name.

        Args:
            name: The name of the tool to retrieve.

        Returns:
            The ToolDefinition instance.

        Raises:
            UnknownToolError: If the tool is not registered.
        """
        if name not in self._definitions:
            raise UnknownToolError(name)
        return self._definitions[name]

    def describe(self, name: str) -> SchemaNode:
        """
        Get the input schema of a tool.

        Raises:
            UnknownToolError: If the tool is not registered.
        """
        return self.get(name).input_schema

    def list_all(self) -> list[ToolDefinition]:
        """Return all definitions in registration order."""
        return list(self._definitions.values())

    def has(self, name: str) -> bool:
        """Check if a tool is registered."""
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)


# =============================================================================
# Singleton Access
# =============================================================================

_registry: Optional[ToolRegistry] = None


def get_tool_registry() -> ToolRegistry:
    """
    Get the global tool registry, populated with the ClickHouse tools.

    Returns the same ToolRegistry instance on every call (singleton pattern).

    Returns:
        The global ToolRegistry instance.
    """
    global _registry
    if _registry is None:
        _registry = ToolRegistry(CLICKHOUSE_TOOLS)
        logger.info(f"Loaded {len(_registry)} tool definitions")
    return _registry


def reset_tool_registry() -> None:
    """
    Reset the global tool registry.

    Primarily used for testing to ensure a clean state.
    """
    global _registry
    _registry = None
