"""MCP adapter exposing the operation dispatcher and prompts.

Uses the low-level server of the ``mcp`` SDK so that tool schemas come
straight from the operation catalogue.
"""

import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from nixmcp.core.dispatch import OperationDispatcher
from nixmcp.core.errors import NixMCPError
from nixmcp.prompts import PROMPTS, render_prompt

logger = logging.getLogger(__name__)

SERVER_NAME = "nix-mcp"


class ToolCallError(NixMCPError):
    """Carries an error response to the SDK, which reports it as isError."""


def create_mcp_server(dispatcher: OperationDispatcher) -> Server:
    """Create an MCP server whose tools are the dispatcher's operations."""
    server: Server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(
                name=tool.name,
                description=tool.description,
                inputSchema=tool.input_schema,
            )
            for tool in dispatcher.list_tools()
        ]

    @server.call_tool()
    async def call_tool(
        name: str, arguments: dict[str, Any] | None
    ) -> list[types.TextContent]:
        response = await dispatcher.call(name, arguments)
        if response.is_error:
            raise ToolCallError(response.text)
        return [types.TextContent(type="text", text=response.text)]

    @server.list_prompts()
    async def list_prompts() -> list[types.Prompt]:
        return [
            types.Prompt(
                name=prompt.name,
                description=prompt.description,
                arguments=[
                    types.PromptArgument(
                        name=arg.name,
                        description=arg.description,
                        required=arg.required,
                    )
                    for arg in prompt.arguments
                ],
            )
            for prompt in PROMPTS
        ]

    @server.get_prompt()
    async def get_prompt(
        name: str, arguments: dict[str, str] | None
    ) -> types.GetPromptResult:
        text = render_prompt(name, arguments)
        return types.GetPromptResult(
            messages=[
                types.PromptMessage(
                    role="user",
                    content=types.TextContent(type="text", text=text),
                )
            ]
        )

    return server


async def serve_stdio(dispatcher: OperationDispatcher) -> None:
    """Serve the dispatcher over stdin/stdout until the client disconnects."""
    server = create_mcp_server(dispatcher)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("%s server running on stdio", SERVER_NAME)
        await server.run(
            read_stream, write_stream, server.create_initialization_options()
        )
