"""Read tools: browse, read, search and inspect repository nodes.

This module registers the four tools of the read-only catalog:
- list_directory: Immediate children of a folder
- read_file: Document content as text (extracted from PDFs when possible)
- search_documents: Full-text search with client-side truncation
- get_metadata: Node properties, looked up by UUID then by path
"""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from ..exceptions import ExtractionError
from ..exceptions import LookupFallbackExhausted
from ..exceptions import TransportError
from ..logger_config import ErrorCategory
from ..logger_config import log_mcp_call
from ..logger_config import log_structured_error
from ..models import DirectoryEntry
from ..models import GetMetadataArgs
from ..models import ListDirectoryArgs
from ..models import ReadFileArgs
from ..models import RepositoryNode
from ..models import SearchDocumentsArgs
from ..models import SearchHit
from ..models import ToolResponse
from ..repository import FIND_BY_CONTENT
from ..repository import GET_CHILDREN
from ..repository import GET_CONTENT
from ..repository import GET_PROPERTIES
from ..repository import RepositoryClient
from ..utils.extraction import extract_text
from .base import ToolContext
from .base import ToolRegistry

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "application/octet-stream"


def _as_list(payload: Any) -> list[Any]:
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    return [payload]


def media_type(content_type: str | None) -> str:
    """The MIME type of a Content-Type header, without parameters."""
    if not content_type:
        return DEFAULT_MIME_TYPE
    return content_type.split(";", 1)[0].strip().lower() or DEFAULT_MIME_TYPE


def should_fall_back_to_path(error: TransportError, on_any_error: bool = False) -> bool:
    """Decide whether a failed UUID lookup is retried as a path lookup.

    The repository answering with an error status means the reference did not
    resolve as a UUID. A request that got no answer at all is a network fault
    and only falls back when ``on_any_error`` is set.
    """
    return on_any_error or error.has_response


async def lookup_properties(
    client: RepositoryClient, reference: str, fallback_on_any_error: bool = False
) -> httpx.Response:
    """Fetch node properties, first as ``docId`` then as ``docPath``.

    Raises:
        TransportError: The UUID lookup failed in a way that does not warrant
            a path lookup.
        LookupFallbackExhausted: Both lookups failed.
    """
    try:
        return await client.get(GET_PROPERTIES, {"docId": reference})
    except TransportError as uuid_error:
        if not should_fall_back_to_path(uuid_error, fallback_on_any_error):
            raise
        logger.info("UUID lookup of %r failed (%s), retrying as path", reference, uuid_error)
        try:
            return await client.get(GET_PROPERTIES, {"docPath": reference})
        except TransportError as path_error:
            raise LookupFallbackExhausted(reference, uuid_error, path_error) from path_error


def register_read_tools(registry: ToolRegistry) -> None:
    """Register the read tools with the registry."""

    @registry.tool(ListDirectoryArgs)
    @log_mcp_call
    async def list_directory(ctx: ToolContext, args: ListDirectoryArgs) -> ToolResponse:
        """List immediate children (files & folders) under an OpenKM repository path.
        Each item includes `name`, full `path`, and `isFolder`."""
        response = await ctx.client.get(GET_CHILDREN, {"fldId": args.path})
        nodes = [RepositoryNode.model_validate(item) for item in _as_list(response.json())]
        listing = [
            DirectoryEntry(name=node.name, path=node.path, is_folder=node.is_folder).model_dump(by_alias=True)
            for node in nodes
        ]
        return ToolResponse.from_json(listing)

    @registry.tool(ReadFileArgs)
    @log_mcp_call
    async def read_file(ctx: ToolContext, args: ReadFileArgs) -> ToolResponse:
        """Return the document contents of `docId`.
        • If it's a PDF, this server extracts and returns the UTF-8 text of the pages in `page_range`.
        • If it's other text, returns that text.
        • Else returns Base-64 (with MIME type) when text extraction is disabled."""
        response = await ctx.client.get(
            GET_CONTENT, {"docId": args.doc_id}, headers={"Accept": DEFAULT_MIME_TYPE}
        )
        mime = media_type(response.headers.get("content-type"))
        raw = response.content

        if mime.startswith("text/"):
            return ToolResponse.from_text(raw.decode("utf-8", errors="replace"))

        if not ctx.settings.pdf_extraction:
            return ToolResponse.from_text(base64.b64encode(raw).decode("ascii"), mime_type=mime)

        try:
            text = await extract_text(raw, args.page_range)
        except ExtractionError as e:
            log_structured_error(
                category=ErrorCategory.WARNING,
                message=f"Error extracting text from document (docId: {args.doc_id})",
                exception=e,
                operation="read_file",
                reference=args.doc_id,
                mime_type=mime,
            )
            return ToolResponse.from_error(
                f"Error extracting text from document (docId: {args.doc_id}). Details: {e.message}"
            )
        return ToolResponse.from_text(text, mime_type=mime)

    @registry.tool(SearchDocumentsArgs)
    @log_mcp_call
    async def search_documents(ctx: ToolContext, args: SearchDocumentsArgs) -> ToolResponse:
        """Full-text search across OpenKM. Returns up to `limit` hits with `path`,
        `docId`, and a short `excerpt` highlighting the match."""
        response = await ctx.client.get(FIND_BY_CONTENT, {"content": args.query})
        payload = response.json()
        results = _as_list(payload.get("queryResult") if isinstance(payload, dict) else payload)

        # The endpoint has no limit parameter; truncate the full result set here.
        hits = []
        for result in results[: args.limit]:
            node = result.get("node") or {}
            hits.append(SearchHit(path=node.get("path", ""), doc_id=node.get("uuid"), excerpt=result.get("excerpt")))

        if not hits:
            return ToolResponse.from_text(f'No documents found matching "{args.query}"')
        return ToolResponse.from_text("\n".join(hit.to_block() for hit in hits))

    @registry.tool(GetMetadataArgs)
    @log_mcp_call
    async def get_metadata(ctx: ToolContext, args: GetMetadataArgs) -> ToolResponse:
        """Retrieve metadata (size, author, created, modified, keywords, categories, etc.) for
        a document using its UUID or path."""
        response = await lookup_properties(
            ctx.client, args.node_id, fallback_on_any_error=ctx.settings.metadata_fallback_on_any_error
        )
        return ToolResponse.from_json(response.json())
