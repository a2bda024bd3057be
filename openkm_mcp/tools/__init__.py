"""Tool catalog for the OpenKM MCP server.

Tools are grouped by capability:
- read_tools: list_directory, read_file, search_documents, get_metadata
- metadata_tools: add_keyword, remove_keyword, add_category,
  add_property_group, set_property_group

The read-only variant registers only the read tools.
"""

from .base import ToolContext
from .base import ToolDescriptor
from .base import ToolRegistry
from .dispatcher import ToolDispatcher
from .metadata_tools import register_metadata_tools
from .read_tools import register_read_tools


def build_registry(read_only: bool = False) -> ToolRegistry:
    """Build the frozen tool catalog for the chosen variant."""
    registry = ToolRegistry()
    register_read_tools(registry)
    if not read_only:
        register_metadata_tools(registry)
    return registry.freeze()


__all__ = [
    "ToolContext",
    "ToolDescriptor",
    "ToolDispatcher",
    "ToolRegistry",
    "build_registry",
    "register_metadata_tools",
    "register_read_tools",
]
