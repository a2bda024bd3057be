"""Metadata Management Tools.

This module registers the tools that edit node metadata:
- add_keyword / remove_keyword: Free-form keywords
- add_category: Link a node to a category folder
- add_property_group: Attach a property group to a node
- set_property_group: Set the values of a property group's fields
"""

from __future__ import annotations

from ..logger_config import log_mcp_call
from ..models import AddCategoryArgs
from ..models import AddPropertyGroupArgs
from ..models import KeywordArgs
from ..models import SetPropertyGroupArgs
from ..models import ToolResponse
from ..repository import ADD_CATEGORY
from ..repository import ADD_GROUP
from ..repository import ADD_KEYWORD
from ..repository import REMOVE_KEYWORD
from ..repository import SET_PROPERTIES_SIMPLE
from ..utils.xml_payload import build_simple_properties_xml
from .base import ToolContext
from .base import ToolRegistry


def register_metadata_tools(registry: ToolRegistry) -> None:
    """Register all metadata editing tools with the registry."""

    @registry.tool(KeywordArgs, read_only=False)
    @log_mcp_call
    async def add_keyword(ctx: ToolContext, args: KeywordArgs) -> ToolResponse:
        """Add a keyword to a document. Keywords help categorize and search for documents."""
        await ctx.client.post(ADD_KEYWORD, {"nodeId": args.node_id, "keyword": args.keyword})
        return ToolResponse.from_text(f'Successfully added keyword "{args.keyword}" to {args.node_id}')

    @registry.tool(KeywordArgs, read_only=False)
    @log_mcp_call
    async def remove_keyword(ctx: ToolContext, args: KeywordArgs) -> ToolResponse:
        """Remove a keyword from a document."""
        await ctx.client.delete(REMOVE_KEYWORD, {"nodeId": args.node_id, "keyword": args.keyword})
        return ToolResponse.from_text(f'Successfully removed keyword "{args.keyword}" from {args.node_id}')

    @registry.tool(AddCategoryArgs, read_only=False)
    @log_mcp_call
    async def add_category(ctx: ToolContext, args: AddCategoryArgs) -> ToolResponse:
        """Add a category to a document. Categories provide hierarchical organization."""
        await ctx.client.post(ADD_CATEGORY, {"nodeId": args.node_id, "catId": args.cat_id})
        return ToolResponse.from_text(f'Successfully added category "{args.cat_id}" to {args.node_id}')

    @registry.tool(AddPropertyGroupArgs, read_only=False)
    @log_mcp_call
    async def add_property_group(ctx: ToolContext, args: AddPropertyGroupArgs) -> ToolResponse:
        """Add a property group to a document. Property groups contain custom metadata fields."""
        await ctx.client.put(ADD_GROUP, {"nodeId": args.node_id, "grpName": args.grp_name})
        return ToolResponse.from_text(f'Successfully added property group "{args.grp_name}" to {args.node_id}')

    @registry.tool(SetPropertyGroupArgs, read_only=False)
    @log_mcp_call
    async def set_property_group(ctx: ToolContext, args: SetPropertyGroupArgs) -> ToolResponse:
        """Set values for properties in an existing property group on a document.
        Property keys are used as XML element names (e.g. okp:technology.type); values are escaped."""
        body = build_simple_properties_xml(args.properties)
        await ctx.client.put(SET_PROPERTIES_SIMPLE, {"nodeId": args.node_id, "grpName": args.grp_name}, body)
        return ToolResponse.from_text(f'Successfully set properties for group "{args.grp_name}" on {args.node_id}')
