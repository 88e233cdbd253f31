"""
stdio transport entry point.

Serves the MCP server over standard input/output. SIGINT and SIGTERM
trigger an orderly shutdown (cleanup, then exit 0); an unrecoverable
startup error exits with status 1.

While idle, the stdin reader is blocked in a worker thread that cannot be
cancelled, so a signal runs cleanup and ends the process directly instead
of unwinding the server task.
"""

import asyncio
import logging
import os
import signal
import sys

from mcp.server.stdio import stdio_server

from clickhouse_mcp.core.config import Settings, get_settings
from clickhouse_mcp.observability.logging import configure_logging, get_logger
from clickhouse_mcp.server import create_server

logger = get_logger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


async def serve_stdio(settings: Settings) -> None:
    """Run the MCP server over stdio until the client disconnects or a signal arrives."""
    server, cleanup = create_server(settings)

    loop = asyncio.get_running_loop()
    shutdown_tasks: list[asyncio.Task] = []

    async def shutdown(sig: signal.Signals) -> None:
        logger.info("Shutdown signal received", signal=sig.name)
        exit_code = 0
        try:
            await cleanup()
        except Exception as e:
            logger.exception("ClickHouse MCP Server cleanup failed", error=str(e))
            exit_code = 1
        logging.shutdown()
        os._exit(exit_code)

    def on_signal(sig: signal.Signals) -> None:
        if not shutdown_tasks:
            shutdown_tasks.append(loop.create_task(shutdown(sig)))

    for sig in SHUTDOWN_SIGNALS:
        loop.add_signal_handler(sig, on_signal, sig)

    logger.info("ClickHouse MCP Server running on stdio")
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
    finally:
        for sig in SHUTDOWN_SIGNALS:
            loop.remove_signal_handler(sig)
        if not shutdown_tasks:
            await cleanup()


def main() -> None:
    """Console script entry point: ``mcp-server-clickhouse``."""
    try:
        settings = get_settings()
    except ValueError as e:
        configure_logging()
        logger.error("ClickHouse MCP Server error", error=str(e))
        sys.exit(1)

    configure_logging(
        level=settings.log_level,
        json_logs=settings.log_format == "json",
        force=True,
    )
    if not settings.has_credentials:
        logger.warning(
            "CLICKHOUSE_API_KEY_ID and CLICKHOUSE_API_SECRET are not set; tool calls will fail"
        )

    try:
        asyncio.run(serve_stdio(settings))
    except Exception as e:
        logger.exception("ClickHouse MCP Server error", error=str(e))
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
