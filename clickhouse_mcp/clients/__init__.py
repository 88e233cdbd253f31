"""
Clients Package - HTTP client setup and the ClickHouse Cloud API client.
"""

from clickhouse_mcp.clients.clickhouse import ClickHouseApiClient, basic_auth_header
from clickhouse_mcp.clients.http import DEFAULT_TIMEOUT_SECONDS, create_http_client

__all__ = [
    "ClickHouseApiClient",
    "basic_auth_header",
    "create_http_client",
    "DEFAULT_TIMEOUT_SECONDS",
]
