"""Domain models for tools, schemas and credentials."""

from clickhouse_mcp.models.domain import (
    ApiCredentials,
    HttpMethod,
    SchemaNode,
    ToolDefinition,
    ToolInvocation,
)

__all__ = [
    "ApiCredentials",
    "HttpMethod",
    "SchemaNode",
    "ToolDefinition",
    "ToolInvocation",
]
