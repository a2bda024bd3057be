"""OpenKM MCP server.

Exposes an OpenKM document repository's REST API as Model Context Protocol tools.
"""

__version__ = "1.0.0"
