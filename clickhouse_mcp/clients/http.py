"""
HTTP Client Module

This module provides the HTTP client factory used by the ClickHouse Cloud
API client.

Connection-level retries are disabled: every tool call is a single
best-effort attempt.

Pattern: Factory pattern for creating configured HTTP clients
"""

from typing import Optional

import httpx

from clickhouse_mcp import __version__


# =============================================================================
# Default Configuration Constants
# =============================================================================


DEFAULT_TIMEOUT_SECONDS: float = 30.0
"""Default timeout for HTTP requests in seconds."""

USER_AGENT: str = f"mcp-server-clickhouse/{__version__}"


# =============================================================================
# HTTP Client Factory
# =============================================================================


def create_http_client(
    base_url: Optional[str] = None,
    timeout_seconds: Optional[float] = None,
    headers: Optional[dict[str, str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create a configured HTTP client.

    Args:
        base_url: Base URL for all requests (e.g., "https://api.clickhouse.cloud")
        timeout_seconds: Request timeout in seconds (default: 30.0)
        headers: Additional headers to include in all requests
        transport: Optional transport (e.g. httpx.MockTransport in tests)

    Returns:
        httpx.AsyncClient: Configured async HTTP client

    Example:
        >>> client = create_http_client(base_url="https://api.clickhouse.cloud")
        >>> async with client:
        ...     response = await client.get("/v1/organizations")
    """
    timeout = timeout_seconds if timeout_seconds is not None else DEFAULT_TIMEOUT_SECONDS

    default_headers = {
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    }
    if headers:
        default_headers.update(headers)

    return httpx.AsyncClient(
        base_url=base_url or "",
        timeout=httpx.Timeout(timeout),
        headers=default_headers,
        transport=transport or httpx.AsyncHTTPTransport(retries=0),
    )
