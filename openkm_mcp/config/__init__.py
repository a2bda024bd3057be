"""Configuration management for the OpenKM MCP server."""

from .settings import Settings
from .settings import load_settings

__all__ = ["Settings", "load_settings"]
