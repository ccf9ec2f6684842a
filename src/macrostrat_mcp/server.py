"""
MCP server entry point for the Macrostrat gateway.
"""

import asyncio
import logging
import sys
from typing import Any

import mcp.server.stdio
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from pydantic import AnyUrl

from macrostrat_mcp.config import default_config
from macrostrat_mcp.core.catalog import GatewayConfig
from macrostrat_mcp.core.client import MacrostratClient
from macrostrat_mcp.dispatch import Content, Dispatcher

logger = logging.getLogger(__name__)


def _instructions(config: GatewayConfig) -> str:
    roots = "\n".join(f"- {root.name}: {root.uri} ({root.description})" for root in config.roots)
    return (
        "Query the Macrostrat geology database: stratigraphic columns, units, "
        "geologic map units, definitions, and map tiles.\n"
        f"Upstream roots:\n{roots}"
    )


def create_server(dispatcher: Dispatcher) -> Server:
    """
    Build an MCP server whose handlers delegate to ``dispatcher``.

    Parameters
    ----------
    dispatcher : Dispatcher
        Request router shared by all handlers

    Returns
    -------
    Server
        Low-level MCP server, ready to run on a transport
    """
    config = dispatcher.config
    server = Server(config.name, version=config.version, instructions=_instructions(config))

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return await dispatcher.list_tools()

    # Arguments are checked by the gateway's own validator
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[Content]:
        return await dispatcher.call_tool(name, arguments)

    @server.list_prompts()
    async def list_prompts() -> list[types.Prompt]:
        return await dispatcher.list_prompts()

    @server.get_prompt()
    async def get_prompt(name: str, arguments: dict[str, str] | None) -> types.GetPromptResult:
        return await dispatcher.get_prompt(name, arguments)

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        return await dispatcher.list_resources()

    @server.read_resource()
    async def read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
        return await dispatcher.read_resource(str(uri))

    return server


async def serve(config: GatewayConfig | None = None) -> None:
    """
    Run the gateway over stdio until the client disconnects.

    Parameters
    ----------
    config : GatewayConfig or None, optional
        Configuration to serve; defaults to the compiled-in one
    """
    config = config or default_config()
    async with MacrostratClient(config) as client:
        server = create_server(Dispatcher(config, client))
        async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
            logger.info("Macrostrat MCP server %s ready on stdio", config.version)
            await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    """
    Main server entry point.

    Logs go to stderr because stdout carries the MCP messages.

    Returns
    -------
    None
        The server runs until stdin closes or the process is interrupted
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )
    asyncio.run(serve())


if __name__ == "__main__":
    main()
