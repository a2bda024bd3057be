"""Smoke-test client for the OpenKM MCP server.

Spawns the server over stdio, lists its tools and calls each read tool once,
printing the results. Useful to check a deployment's credentials and
connectivity end to end::

    python -m openkm_mcp.mcp_client --folder 0 --document /okm:root/mydoc.pdf --query invoice
"""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from typing import Any

from mcp import ClientSession
from mcp import StdioServerParameters
from mcp.client.stdio import stdio_client


def server_parameters(variant: str | None = None) -> StdioServerParameters:
    """Parameters that launch this package's server in a subprocess."""
    args = ["-m", "openkm_mcp.server", "stdio"]
    if variant:
        args += ["--variant", variant]
    return StdioServerParameters(command=sys.executable, args=args, env=dict(os.environ))


def render_result(result: Any) -> str:
    lines = [getattr(block, "text", repr(block)) for block in result.content]
    prefix = "[error] " if result.isError else ""
    return prefix + "\n".join(lines)


async def run_smoke_session(
    folder: str,
    document: str,
    query: str,
    page_range: str = "1-2",
    limit: int = 5,
    params: StdioServerParameters | None = None,
) -> dict[str, str]:
    """Call every read tool once and return the rendered results by tool name."""
    calls = [
        ("list_directory", {"path": folder}),
        ("read_file", {"docId": document, "page_range": page_range}),
        ("search_documents", {"query": query, "limit": limit}),
        ("get_metadata", {"nodeId": document}),
    ]
    results: dict[str, str] = {}
    async with stdio_client(params or server_parameters()) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()
            tools = await session.list_tools()
            results["tools"] = "\n".join(f"{tool.name}: {tool.description}" for tool in tools.tools)
            for name, arguments in calls:
                results[name] = render_result(await session.call_tool(name, arguments))
    return results


def main():
    parser = argparse.ArgumentParser(description="Call the OpenKM MCP read tools once each")
    parser.add_argument("--folder", default="/okm:root", help="Folder UUID or path for list_directory")
    parser.add_argument("--document", required=True, help="Document UUID or path for read_file and get_metadata")
    parser.add_argument("--query", default="invoice", help="Query for search_documents")
    parser.add_argument("--page-range", default="1-2", help="Page range for read_file")
    parser.add_argument("--limit", type=int, default=5, help="Hit limit for search_documents")
    args = parser.parse_args()

    results = asyncio.run(
        run_smoke_session(args.folder, args.document, args.query, page_range=args.page_range, limit=args.limit)
    )
    for name, text in results.items():
        print(f"\n=== {name} ===")
        print(text)


if __name__ == "__main__":
    main()
