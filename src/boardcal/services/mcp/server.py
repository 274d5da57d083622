from __future__ import annotations

import logging

from fastmcp import FastMCP

from ...api import get_api_functions

INSTRUCTIONS = (
    "boardcal exposes the shared calendar: month layouts with lane packing, "
    "per-day item lists, and day shifts or edits of individual items."
)

logger = logging.getLogger(__name__)


def build_mcp_server() -> FastMCP:
    server = FastMCP(name="boardcal", instructions=INSTRUCTIONS)
    for api_function in get_api_functions():
        logger.debug("Registering MCP tool: %s", api_function.name)
        server.tool(
            api_function.func,
            name=api_function.name,
            description=api_function.description,
            tags=set(api_function.tags),
        )
    return server


def run_mcp_server(host: str = "127.0.0.1", port: int = 8765) -> None:
    import asyncio

    server = build_mcp_server()
    asyncio.run(server.run_streamable_http_async(host=host, port=port))
