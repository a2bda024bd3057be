"""Pydantic models for the OpenKM MCP server.

This module contains the tool argument schemas, the repository entities the
tools read, and the content blocks a tool invocation returns.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from .utils.xml_payload import invalid_property_keys

DEFAULT_PAGE_RANGE = "1-10"
DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 100


# === Tool Argument Schemas ===
# Field aliases are the argument names exposed to MCP clients.


class ToolArguments(BaseModel):
    """Base class for tool argument schemas; unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


class ListDirectoryArgs(ToolArguments):
    path: str = Field(description="Folder UUID or repository path whose children are listed")


class ReadFileArgs(ToolArguments):
    doc_id: str = Field(
        alias="docId",
        description="The UUID or path of the document, with backslashes removed only forward slashes are allowed",
    )
    page_range: str = Field(
        default=DEFAULT_PAGE_RANGE,
        description="OpenKM page syntax e.g. 1,3-5,-1 (page range to extract from PDF, defaults to 1-10)",
    )

    @field_validator("doc_id")
    @classmethod
    def check_reference(cls, value: str) -> str:
        return check_node_reference(value)


class SearchDocumentsArgs(ToolArguments):
    query: str = Field(description="Full-text query")
    limit: int = Field(
        default=DEFAULT_SEARCH_LIMIT,
        gt=0,
        le=MAX_SEARCH_LIMIT,
        strict=True,
        description="Maximum number of hits to return (1-100)",
    )


class NodeArgs(ToolArguments):
    node_id: str = Field(alias="nodeId", description="Document UUID or path")

    @field_validator("node_id")
    @classmethod
    def check_reference(cls, value: str) -> str:
        return check_node_reference(value)


class GetMetadataArgs(NodeArgs):
    pass


class KeywordArgs(NodeArgs):
    keyword: str = Field(min_length=1, description="Keyword to add or remove")


class AddCategoryArgs(NodeArgs):
    cat_id: str = Field(
        alias="catId", min_length=1, description="Category UUID or path (e.g., /okm:categories/contracts)"
    )


class AddPropertyGroupArgs(NodeArgs):
    grp_name: str = Field(alias="grpName", min_length=1, description="Property group name (e.g., okg:technology)")


class SetPropertyGroupArgs(NodeArgs):
    grp_name: str = Field(alias="grpName", min_length=1, description="Property group name")
    properties: dict[str, Any] = Field(
        description="Properties as key-value pairs, e.g. {\"okp:technology.type\": \"manual\"}"
    )

    @field_validator("properties")
    @classmethod
    def check_property_keys(cls, value: dict[str, Any]) -> dict[str, Any]:
        invalid = invalid_property_keys(value)
        if invalid:
            raise ValueError(f"keys must be valid XML element names: {', '.join(invalid)}")
        return value


def check_node_reference(value: str) -> str:
    """Validate a node reference: a UUID or a slash-delimited repository path."""
    if not value.strip():
        raise ValueError("must be a non-empty UUID or repository path")
    if "\\" in value:
        raise ValueError("backslashes are not allowed, use forward slashes in repository paths")
    return value


# === Repository Entities ===


class RepositoryNode(BaseModel):
    """A folder or document as returned by the OpenKM REST API."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    path: str
    uuid: str | None = None
    title: str | None = None
    is_folder: bool = Field(default=False, alias="folder")

    @property
    def name(self) -> str:
        """Title if the repository supplies one, else the last path segment."""
        return self.title or self.path.rstrip("/").rsplit("/", 1)[-1]


class DirectoryEntry(BaseModel):
    """One child in a ``list_directory`` listing."""

    name: str
    path: str
    is_folder: bool = Field(serialization_alias="isFolder")


class SearchHit(BaseModel):
    """One full-text search result."""

    path: str
    doc_id: str | None = None
    excerpt: str | None = None

    def to_block(self) -> str:
        return f"path: {self.path}\ndocId: {self.doc_id}\nexcerpt: {self.excerpt}\n"


# === Tool Responses ===


class ContentKind(str, Enum):
    TEXT = "text"
    JSON = "json"


class ContentBlock(BaseModel):
    """One unit of a tool response."""

    kind: ContentKind
    text: str | None = None
    data: Any = None
    mime_type: str | None = None

    @classmethod
    def of_text(cls, text: str, mime_type: str | None = None) -> ContentBlock:
        return cls(kind=ContentKind.TEXT, text=text, mime_type=mime_type)

    @classmethod
    def of_json(cls, data: Any) -> ContentBlock:
        return cls(kind=ContentKind.JSON, data=data, mime_type="application/json")


class ToolResponse(BaseModel):
    """The result of one tool invocation.

    ``is_error`` marks a tool-level failure reported as ordinary output, as
    opposed to a protocol failure such as an unknown tool name.
    """

    content: list[ContentBlock]
    is_error: bool = False

    @classmethod
    def from_text(cls, text: str, mime_type: str | None = None) -> ToolResponse:
        return cls(content=[ContentBlock.of_text(text, mime_type)])

    @classmethod
    def from_json(cls, data: Any) -> ToolResponse:
        return cls(content=[ContentBlock.of_json(data)])

    @classmethod
    def from_error(cls, message: str) -> ToolResponse:
        return cls(content=[ContentBlock.of_text(message)], is_error=True)
