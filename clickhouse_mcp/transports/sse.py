"""
SSE transport: MCP over HTTP with server-sent events.

Endpoints:
- GET /sse: opens the event stream (one client at a time, else 409).
- POST /messages/: client-to-server messages for the active stream (404 if none).
- GET /health: liveness and whether a client is connected.

The HTTP client is closed on application shutdown; uvicorn handles
SIGINT/SIGTERM and runs the lifespan shutdown before exiting.
"""

import sys
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from mcp.server.sse import SseServerTransport
from pydantic import BaseModel
from starlette.types import Receive, Scope, Send

from clickhouse_mcp import __version__
from clickhouse_mcp.clients.clickhouse import ClickHouseApiClient
from clickhouse_mcp.core.config import Settings, get_settings
from clickhouse_mcp.observability.logging import (
    configure_logging,
    correlation_id_context,
    get_logger,
)
from clickhouse_mcp.server import create_server
from clickhouse_mcp.transports.connection import ConnectionBusyError, ConnectionSlot

logger = get_logger(__name__)

SSE_PATH = "/sse"
MESSAGE_PATH = "/messages/"


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str
    connected: bool


def create_app(
    settings: Optional[Settings] = None,
    api_client: Optional[ClickHouseApiClient] = None,
) -> FastAPI:
    """
    Build the SSE application.

    Args:
        settings: Settings to use (default: get_settings()).
        api_client: Optional pre-built API client (for testing).

    Returns:
        The FastAPI application.
    """
    settings = settings or get_settings()
    server, cleanup = create_server(settings, api_client)
    transport = SseServerTransport(MESSAGE_PATH)
    slot = ConnectionSlot()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if not settings.has_credentials:
            logger.error(
                "CLICKHOUSE_API_KEY_ID and CLICKHOUSE_API_SECRET environment variables must be set"
            )
            if settings.environment != "production":
                logger.warning(
                    "Consider using a .env file for local development (ensure it's in .gitignore)"
                )
        logger.info(
            "ClickHouse MCP SSE Server is running",
            port=settings.port,
            sse_endpoint=SSE_PATH,
            message_endpoint=MESSAGE_PATH,
        )
        yield
        logger.info("Shutting down ClickHouse MCP SSE Server")
        await cleanup()

    app = FastAPI(
        title="ClickHouse MCP SSE Server",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.connection_slot = slot

    @app.get(SSE_PATH)
    async def handle_sse(request: Request) -> Response:
        session = uuid.uuid4().hex
        try:
            slot.acquire(session)
        except ConnectionBusyError as e:
            logger.warning("SSE connection already established. Ignoring new request.")
            return PlainTextResponse(e.message, status_code=409)

        with correlation_id_context(session):
            logger.info("SSE client connected")
            try:
                async with transport.connect_sse(
                    request.scope, request.receive, request._send
                ) as (read_stream, write_stream):
                    await server.run(
                        read_stream, write_stream, server.create_initialization_options()
                    )
            finally:
                slot.release(session)
                logger.info("SSE client disconnected")
        return Response()

    async def handle_post_message(scope: Scope, receive: Receive, send: Send) -> None:
        if not slot.is_active:
            logger.error("Received POST message but no active SSE transport.")
            response = PlainTextResponse("No active SSE connection", status_code=404)
            await response(scope, receive, send)
            return
        with correlation_id_context(slot.session):
            await transport.handle_post_message(scope, receive, send)

    app.mount(MESSAGE_PATH, app=handle_post_message)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__, connected=slot.is_active)

    return app


def main() -> None:
    """Console script entry point: ``mcp-server-clickhouse-sse``."""
    try:
        settings = get_settings()
    except ValueError as e:
        configure_logging()
        logger.error("ClickHouse MCP SSE Server error", error=str(e))
        sys.exit(1)

    configure_logging(
        level=settings.log_level,
        json_logs=settings.log_format == "json",
        force=True,
    )
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
