"""
Tools Package - Tool Registry, Schema Validation and Dispatch

This package provides the registry of ClickHouse tools, the schema
validator for their arguments and the dispatcher that routes tool calls
to the ClickHouse Cloud API.
"""

from clickhouse_mcp.tools.registry import (
    ToolRegistry,
    get_tool_registry,
    reset_tool_registry,
)
from clickhouse_mcp.tools.schema import to_json_schema, validate_arguments
from clickhouse_mcp.tools.dispatcher import ToolDispatcher

__all__ = [
    "ToolRegistry",
    "get_tool_registry",
    "reset_tool_registry",
    "to_json_schema",
    "validate_arguments",
    "ToolDispatcher",
]
