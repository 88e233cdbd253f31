"""
Transports Package - stdio and SSE bindings for the MCP server.
"""

from clickhouse_mcp.transports.connection import ConnectionBusyError, ConnectionSlot

__all__ = ["ConnectionBusyError", "ConnectionSlot"]
