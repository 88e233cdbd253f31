"""
ClickHouse Cloud API Client

This module provides the HTTP call adapter for the ClickHouse Cloud REST API.
It performs one request per call and normalizes the response into either a
JSON value or a plain-text wrapper, raising UpstreamError on any failure.

Response handling, first match wins:
1. text/plain responses become {"plainTextResponse": <text>}.
2. 204 or Content-Length: 0 becomes a synthesized success value.
3. Bodies that are not JSON raise UpstreamError.
4. Non-2xx statuses raise UpstreamError; 2xx returns the parsed JSON.

Pattern: Client adapter for the upstream REST API
"""

import base64
import json
from typing import Any, Optional, Union

import httpx

from clickhouse_mcp.clients.http import create_http_client
from clickhouse_mcp.core.exceptions import UpstreamError
from clickhouse_mcp.models.domain import ApiCredentials, HttpMethod
from clickhouse_mcp.observability.logging import get_logger

logger = get_logger(__name__)

NO_CONTENT_MESSAGE = "Operation successful (No Content)"


def basic_auth_header(credentials: ApiCredentials) -> str:
    """Build the HTTP Basic Authorization header value for a key pair."""
    raw = f"{credentials.key_id}:{credentials.key_secret.get_secret_value()}"
    return "Basic " + base64.b64encode(raw.encode("utf-8")).decode("ascii")


class ClickHouseApiClient:
    """
    Client for the ClickHouse Cloud REST API.

    Credentials are passed on every call; the Authorization header is
    rebuilt each time so rotated keys take effect immediately.

    Example:
        >>> client = ClickHouseApiClient(base_url="https://api.clickhouse.cloud")
        >>> orgs = await client.call("/v1/organizations", HttpMethod.GET, credentials)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        """
        Initialize ClickHouseApiClient.

        Args:
            base_url: Base URL of the ClickHouse Cloud API
            http_client: Optional pre-configured HTTP client (for testing)
            timeout_seconds: Request timeout in seconds
        """
        if http_client is not None:
            self._client = http_client
            self._owns_client = False
        else:
            self._client = create_http_client(
                base_url=base_url,
                timeout_seconds=timeout_seconds,
            )
            self._owns_client = True

    async def close(self) -> None:
        """Close the HTTP client if owned by this instance."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ClickHouseApiClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def call(
        self,
        path: str,
        method: Union[HttpMethod, str],
        credentials: ApiCredentials,
        body: Optional[Any] = None,
        extra_headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """
        Perform one ClickHouse Cloud API call.

        Args:
            path: Request path relative to the API base URL
            method: HTTP method
            credentials: API key pair used for Basic auth
            body: JSON body; only sent for POST and PATCH
            extra_headers: Header overrides (e.g. Accept: text/plain)

        Returns:
            The parsed JSON value, {"plainTextResponse": ...} for plain text,
            or {"status", "message"} for responses without content.

        Raises:
            UpstreamError: On non-2xx status, unparsable body or transport failure.
        """
        method = HttpMethod(method)
        headers = {
            "Authorization": basic_auth_header(credentials),
            "Accept": "application/json",
        }
        if extra_headers:
            headers.update(extra_headers)

        content: Optional[bytes] = None
        if body is not None and method.carries_body:
            content = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        logger.debug("calling clickhouse api", method=method.value, path=path)

        try:
            response = await self._client.request(
                method.value, path, headers=headers, content=content
            )
        except httpx.HTTPError as e:
            logger.error(
                "clickhouse api request failed",
                method=method.value,
                path=path,
                error=str(e) or type(e).__name__,
            )
            raise UpstreamError(
                f"ClickHouse API Error ({method.value} {path}): {str(e) or type(e).__name__}",
                method=method.value,
                path=path,
            ) from e

        return self._handle_response(response, method.value, path)

    # =========================================================================
    # Response normalization
    # =========================================================================

    def _handle_response(self, response: httpx.Response, method: str, path: str) -> Any:
        status = response.status_code
        content_type = response.headers.get("content-type", "")

        if content_type.startswith("text/plain"):
            if not response.is_success:
                raise self._error(response, method, path, response.text or response.reason_phrase)
            return {"plainTextResponse": response.text}

        if status == 204 or response.headers.get("content-length") == "0":
            if not response.is_success:
                raise self._error(response, method, path, response.reason_phrase)
            return {"status": status, "message": NO_CONTENT_MESSAGE}

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                "clickhouse api returned unparsable body",
                method=method,
                path=path,
                status=status,
            )
            raise UpstreamError(
                f"ClickHouse API Error ({method} {path}): Failed to parse JSON response. "
                f"Status: {status}. Response text: {response.text or response.reason_phrase}",
                status_code=status,
                method=method,
                path=path,
            ) from e

        if not response.is_success:
            raise self._error(response, method, path, _extract_error_message(data, response))

        return data

    def _error(
        self, response: httpx.Response, method: str, path: str, message: str
    ) -> UpstreamError:
        logger.error(
            "clickhouse api error response",
            method=method,
            path=path,
            status=response.status_code,
            error=message,
        )
        return UpstreamError(
            f"ClickHouse API Error ({method} {path}): {response.status_code} {message}",
            status_code=response.status_code,
            method=method,
            path=path,
        )


def _extract_error_message(data: Any, response: httpx.Response) -> str:
    if isinstance(data, dict):
        for key in ("error", "message"):
            if data.get(key):
                value = data[key]
                return value if isinstance(value, str) else json.dumps(value)
    if data is not None:
        return json.dumps(data)
    return response.reason_phrase
