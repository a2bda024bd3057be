"""Centralized configuration for the OpenKM MCP server.

Settings are read from the environment (prefix ``OKM_``) and an optional
``.env`` file. A settings value is built once at startup by ``load_settings``
and handed to the repository client and dispatcher; it is immutable after
construction.
"""

from __future__ import annotations

from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic import SecretStr
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict

ToolVariant = Literal["full", "read-only"]


class Settings(BaseSettings):
    """Settings for the OpenKM MCP server."""

    # === Repository Connection ===
    base_url: str = Field(
        default="http://localhost:9090/OpenKM", description="Base address of the OpenKM web application"
    )
    user: str = Field(default="okmAdmin", description="OpenKM user for HTTP Basic authentication")
    password: SecretStr = Field(
        default=SecretStr("admin"),
        validation_alias="OKM_PASS",
        description="OpenKM password for HTTP Basic authentication",
    )
    http_timeout: float = Field(default=30.0, gt=0, description="Timeout for each repository call in seconds")

    # === Tool Catalog ===
    tool_variant: ToolVariant = Field(
        default="full", description="'full' for all nine tools, 'read-only' for the four read tools"
    )
    pdf_extraction: bool = Field(
        default=True, description="Extract text from paginated documents instead of returning Base64"
    )
    metadata_fallback_on_any_error: bool = Field(
        default=False,
        description="Retry get_metadata by path on any failure, including network errors",
    )

    # === Logging Configuration ===
    log_level: str = Field(default="INFO", description="Logging level for the console handler")

    model_config = SettingsConfigDict(
        env_prefix="OKM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Endpoint paths start with '/', so the base must not end with one."""
        return value.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def read_only(self) -> bool:
        """Check if only the read tools are exposed."""
        return self.tool_variant == "read-only"


def load_settings(**overrides) -> Settings:
    """Build a settings value from the environment, .env file and overrides."""
    load_dotenv()
    return Settings(**overrides)
