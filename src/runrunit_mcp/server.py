"""MCP server for runrunit-mcp.

Binds the tool registry to the MCP low-level server over stdio. The registry
owns argument validation and error reporting, so SDK-level input validation
is disabled and tool results are passed through unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

import httpx
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from runrunit_mcp.config import ServerConfig, get_config, mask_secret
from runrunit_mcp.core.errors import ConfigurationError
from runrunit_mcp.tools import build_registry

logger = logging.getLogger(__name__)


def create_server(
    config: Optional[ServerConfig] = None,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Server:
    """Create and configure the MCP server instance.

    Raises:
        ConfigurationError: If credentials are missing; the server is never
            created without them
    """

    if config is None:
        config = get_config()

    config.setup_logging()

    registry = build_registry(config, transport=transport)
    server: Server = Server(config.server_name, version=config.server_version)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return registry.to_mcp_tools()

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> CallToolResult:
        return await registry.dispatch(name, arguments)

    logger.info(
        "Server created: %s v%s (%d tools)",
        config.server_name,
        config.server_version,
        len(registry.names()),
    )
    return server


async def serve(server: Server) -> None:
    """Run the server over stdio until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


def main() -> None:
    """Main entry point for the runrunit-mcp server."""

    try:
        config = get_config()
        server = create_server(config)

        credentials = config.credentials()
        logger.info("Starting %s v%s on stdio", config.server_name, config.server_version)
        logger.info(
            "Config: AppKey: %s, UserToken: %s",
            mask_secret(credentials.app_key),
            mask_secret(credentials.user_token),
        )

        asyncio.run(serve(server))

    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        sys.exit(0)
    except ConfigurationError as exc:
        # Logging may not be configured yet when credentials are missing
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(1)
    except Exception as exc:
        logger.error("Server error: %s: %s", type(exc).__name__, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
