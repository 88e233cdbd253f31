"""
Core module for the ClickHouse MCP server.

This module contains configuration and the exception hierarchy.
"""

from clickhouse_mcp.core.config import Settings, get_settings
from clickhouse_mcp.core.exceptions import (
    ClickHouseMCPError,
    ConfigurationError,
    ErrorCode,
    ToolCallError,
    ToolValidationError,
    UnknownToolError,
    UpstreamError,
    Violation,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Exceptions
    "ErrorCode",
    "ClickHouseMCPError",
    "ConfigurationError",
    "ToolValidationError",
    "Violation",
    "UpstreamError",
    "UnknownToolError",
    "ToolCallError",
]
