"""MCP stdio server exposing the tool registry."""

from typing import Any, Dict, List, Optional

import anyio
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from godotpilot.config import Settings
from godotpilot.constants import VERSION
from godotpilot.exceptions import GodotPilotError
from godotpilot.logger import get_logger
from godotpilot.session import ToolSession
from godotpilot.tools.dispatcher import ToolCall, ToolDispatcher

logger = get_logger()

SERVER_NAME = "godot-ai-builder"


def build_server(dispatcher: ToolDispatcher) -> Server:
    """
    Wire a dispatcher into a low-level MCP server.

    Argument validation is left to the dispatcher so that schema errors
    come back in the same format as every other failure.
    """
    server = Server(SERVER_NAME, version=VERSION)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return [
            types.Tool(name=name, description=spec.description, inputSchema=spec.input_schema())
            for name, spec in dispatcher.specs.items()
        ]

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
        call = ToolCall(name=name, arguments=arguments or {})
        # Handlers block on HTTP and disk; keep them off the event loop.
        response = await anyio.to_thread.run_sync(dispatcher.handle, call)
        if response.is_error:
            raise GodotPilotError(response.text)
        return [types.TextContent(type="text", text=item["text"]) for item in response.content]

    return server


async def _run(server: Server):
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def serve(settings: Settings) -> None:
    """Run the tool server on stdin/stdout until the client disconnects."""
    session = ToolSession.from_settings(settings)
    dispatcher = ToolDispatcher(session)
    logger.info(
        f"Serving {len(dispatcher.specs)} tools for {settings.project_root} "
        f"(bridge {session.bridge.base_url})"
    )
    anyio.run(_run, build_server(dispatcher))
