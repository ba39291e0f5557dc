"""MCP Server exposing the Ratchet PointCare tools.

Lets an LLM agent search patients, review visit history and document visits
in the PointCare EMR. In mock mode (the default when ``POINTCARE_API_URL`` is
not set) every call is served from realistic test data.

Usage:
    # Run as standalone MCP server (stdio transport)
    ratchet-mcp
    python -m ratchet

    # Or import and run programmatically
    from ratchet.tools.server import run_server
    await run_server(context)
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any

from dotenv import load_dotenv
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import CallToolResult, Tool

from .. import __version__
from ..config import RatchetConfig
from ..context import RatchetContext
from ..logger import configure_logging
from .registry import TOOL_REGISTRY

logger = logging.getLogger(__name__)

# Create MCP server instance
mcp_server = Server("ratchet-mcp", version=__version__)

# Runtime context shared by all tool calls
_context: RatchetContext | None = None


def get_context() -> RatchetContext:
    """Get the server's context, building one from the environment if unset."""
    global _context
    if _context is None:
        _context = RatchetContext.from_env()
    return _context


def set_context(context: RatchetContext | None) -> None:
    global _context
    _context = context


@mcp_server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available PointCare tools.

    Returns:
        Tool definitions with camelCase JSON schemas for the LLM.
    """
    logger.debug("Listing tools")
    return TOOL_REGISTRY.tools


@mcp_server.call_tool(validate_input=False)
async def call_tool(name: str, arguments: dict[str, Any] | None) -> CallToolResult:
    """Execute a tool by name with the given arguments.

    Args:
        name: The tool name to execute.
        arguments: Tool arguments matching the input schema (may be None).

    Returns:
        CallToolResult with a single text block. Failures are flagged with
        ``isError`` rather than raised.
    """
    return await TOOL_REGISTRY.execute(name, arguments, get_context())


async def run_server(context: RatchetContext) -> None:
    """Run the MCP server with stdio transport."""
    set_context(context)
    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Ratchet MCP server running on stdio")
            await mcp_server.run(
                read_stream,
                write_stream,
                mcp_server.create_initialization_options(),
            )
    finally:
        await context.aclose()
        set_context(None)


def main() -> None:
    """Entry point for running the MCP server."""
    load_dotenv()

    config = RatchetConfig.from_env()
    configure_logging(config.log_level)

    errors = config.validate()
    if errors and not config.mock_mode:
        logger.error("Configuration errors", extra={"data": {"errors": errors}})
        sys.exit(1)

    logger.info(
        "Starting Ratchet MCP server",
        extra={"data": {"version": __version__, "mockMode": config.mock_mode}},
    )
    if config.mock_mode:
        logger.warning("Running in MOCK MODE - no real API calls will be made")

    try:
        asyncio.run(run_server(RatchetContext(config=config)))
    except KeyboardInterrupt:
        logger.info("Shutting down")
    except Exception as e:
        logger.error("Fatal error", extra={"data": {"error": str(e) or type(e).__name__}})
        sys.exit(1)


if __name__ == "__main__":
    main()
