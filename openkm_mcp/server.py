"""MCP Server for an OpenKM document repository.

This module adapts the tool catalog and dispatcher to the Model Context
Protocol: ``list_tools`` enumerates the registry and ``call_tool`` dispatches
an invocation and converts its content blocks to MCP content. The server runs
over stdio (default) or HTTP SSE.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging

import httpx
import uvicorn
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.responses import PlainTextResponse
from starlette.responses import Response
from starlette.routing import Mount
from starlette.routing import Route

from . import __version__
from .config import Settings
from .config import load_settings
from .exceptions import UnknownToolError
from .logger_config import configure_console_logging
from .metrics_config import METRICS_ENABLED
from .metrics_config import ensure_metrics_initialized
from .metrics_config import get_metrics_export
from .metrics_config import shutdown_metrics
from .models import ContentBlock
from .models import ContentKind
from .models import ToolResponse
from .repository import RepositoryClient
from .tools import ToolContext
from .tools import ToolDispatcher
from .tools import build_registry

logger = logging.getLogger(__name__)

SERVER_NAME = "openkm-filesystem"

# HTTP SSE server configuration
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3001


class ToolFailure(Exception):
    """A tool-level error handed to the MCP SDK, which reports it with ``isError``."""


def to_mcp_content(block: ContentBlock) -> types.TextContent:
    """Convert a content block to MCP text content.

    Structured blocks are rendered as indented JSON. The block's MIME type,
    if any, travels in ``_meta.mimeType``.
    """
    text = json.dumps(block.data, indent=2, default=str) if block.kind is ContentKind.JSON else block.text or ""
    payload = {"type": "text", "text": text}
    if block.mime_type:
        payload["_meta"] = {"mimeType": block.mime_type}
    return types.TextContent.model_validate(payload)


def to_mcp_result(response: ToolResponse) -> list[types.TextContent]:
    """Convert a tool response to MCP content, raising for tool-level errors."""
    if response.is_error:
        raise ToolFailure("\n".join(block.text or "" for block in response.content))
    return [to_mcp_content(block) for block in response.content]


def create_dispatcher(settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> ToolDispatcher:
    """Wire the registry, repository client and dispatcher for ``settings``."""
    registry = build_registry(read_only=settings.read_only)
    client = RepositoryClient(settings, transport=transport)
    return ToolDispatcher(registry, ToolContext(client=client, settings=settings))


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Create the MCP server exposing the dispatcher's tool catalog."""
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def handle_list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=tool.name, description=tool.description, inputSchema=tool.input_schema)
            for tool in dispatcher.registry.list()
        ]

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: dict | None) -> list[types.TextContent]:
        return to_mcp_result(await dispatcher.dispatch(name, arguments))

    # The SDK turns any exception raised inside a call_tool handler into an
    # isError result, so unknown names are rejected before it runs.
    call_tool_handler = server.request_handlers[types.CallToolRequest]

    async def reject_unknown_tools(req: types.CallToolRequest):
        name = req.params.name
        if name not in dispatcher.registry:
            error = UnknownToolError(name, dispatcher.registry.names())
            logger.warning("Unknown tool requested: %s", name)
            raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=error.message, data=error.details))
        return await call_tool_handler(req)

    server.request_handlers[types.CallToolRequest] = reject_unknown_tools
    return server


async def run_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def create_sse_app(server: Server):
    """Build a Starlette app serving ``server`` over SSE, plus health and metrics."""
    sse = SseServerTransport("/messages/")

    async def handle_sse(request):
        async with sse.connect_sse(request.scope, request.receive, request._send) as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
        return Response()

    async def health(request):
        return JSONResponse({"status": "ok", "server": SERVER_NAME, "version": __version__})

    async def metrics(request):
        body, content_type = get_metrics_export()
        return PlainTextResponse(body, media_type=content_type)

    routes = [
        Route("/sse", endpoint=handle_sse, methods=["GET"]),
        Mount("/messages/", app=sse.handle_post_message),
        Route("/health", endpoint=health),
    ]
    if METRICS_ENABLED:
        routes.append(Route("/metrics", endpoint=metrics))
    return Starlette(routes=routes)


# --- Main Server Execution ---
def main():
    """Run the main entry point for the server with argument parsing."""
    parser = argparse.ArgumentParser(description="OpenKM MCP Server")
    parser.add_argument(
        "transport",
        choices=["sse", "stdio"],
        default="stdio",
        nargs="?",
        help="Transport: 'sse' for HTTP SSE or 'stdio' for standard I/O (default: stdio)",
    )
    parser.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help=f"Host to bind to for SSE transport (default: {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port to bind to for SSE transport (default: {DEFAULT_PORT})",
    )
    parser.add_argument(
        "--variant",
        choices=["full", "read-only"],
        default=None,
        help="Tool catalog to expose (default: OKM_TOOL_VARIANT or 'full')",
    )
    args = parser.parse_args()

    overrides = {"tool_variant": args.variant} if args.variant else {}
    settings = load_settings(**overrides)
    configure_console_logging(settings.log_level)
    ensure_metrics_initialized()

    dispatcher = create_dispatcher(settings)
    server = create_server(dispatcher)
    logger.info(
        "OpenKM MCP %s serving %d tools for %s (%s variant)",
        __version__,
        len(dispatcher.registry),
        settings.base_url,
        settings.tool_variant,
    )
    logger.info("Metrics: %s", "enabled" if METRICS_ENABLED else "disabled")

    try:
        if args.transport == "stdio":
            logger.info("OpenKM MCP ready (stdio transport)")
            asyncio.run(run_stdio(server))
        else:
            logger.info("OpenKM MCP ready (SSE transport) on http://%s:%d/sse", args.host, args.port)
            uvicorn.run(create_sse_app(server), host=args.host, port=args.port)
    finally:
        shutdown_metrics()


if __name__ == "__main__":
    main()
