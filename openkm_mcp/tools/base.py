"""Tool catalog primitives.

A ``ToolDescriptor`` couples a tool name with its argument schema (a pydantic
model), its description and the coroutine that serves it. ``ToolRegistry``
holds the descriptors; it is filled once at startup and then frozen.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ..config import Settings
from ..exceptions import ValidationError
from ..models import ToolArguments
from ..models import ToolResponse
from ..repository import RepositoryClient


@dataclass(frozen=True)
class ToolContext:
    """Collaborators shared by every tool handler; read-only after startup."""

    client: RepositoryClient
    settings: Settings

    def __repr__(self) -> str:
        return f"ToolContext(base_url={self.client.base_url!r})"


ToolHandler = Callable[[ToolContext, Any], Awaitable[ToolResponse]]


@dataclass(frozen=True)
class ToolDescriptor:
    """A named, schema-described operation."""

    name: str
    description: str
    arguments: type[ToolArguments]
    handler: ToolHandler
    read_only: bool = True

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON schema of the arguments, using the client-facing field names."""
        return self.arguments.model_json_schema(by_alias=True)

    def validate(self, raw: Mapping[str, Any] | None) -> ToolArguments:
        """Validate raw arguments against the schema.

        Raises:
            ValidationError: Any field is missing, unknown or out of bounds.
        """
        try:
            return self.arguments.model_validate(dict(raw or {}))
        except PydanticValidationError as e:
            field_errors = [
                {"field": ".".join(str(part) for part in err["loc"]), "message": err["msg"]}
                for err in e.errors(include_url=False)
            ]
            summary = "; ".join(f"{fe['field'] or 'arguments'}: {fe['message']}" for fe in field_errors)
            raise ValidationError(
                f"Invalid arguments for tool '{self.name}': {summary}", field_errors=field_errors
            ) from e


class ToolRegistry:
    """Fixed catalog of tools, enumerated in registration order."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}
        self._frozen = False

    def register(self, descriptor: ToolDescriptor) -> ToolDescriptor:
        if self._frozen:
            raise RuntimeError("Tool registry is frozen")
        if descriptor.name in self._tools:
            raise ValueError(f"Tool '{descriptor.name}' is already registered")
        self._tools[descriptor.name] = descriptor
        return descriptor

    def tool(
        self,
        arguments: type[ToolArguments],
        name: str | None = None,
        description: str | None = None,
        read_only: bool = True,
    ):
        """Register the decorated coroutine as a tool.

        The name defaults to the function name and the description to its
        docstring.
        """

        def decorator(func: ToolHandler) -> ToolHandler:
            self.register(
                ToolDescriptor(
                    name=name or func.__name__,
                    description=description or inspect.cleandoc(func.__doc__ or ""),
                    arguments=arguments,
                    handler=func,
                    read_only=read_only,
                )
            )
            return func

        return decorator

    def freeze(self) -> ToolRegistry:
        self._frozen = True
        self._tools = MappingProxyType(self._tools)
        return self

    def list(self) -> list[ToolDescriptor]:
        return list(self._tools.values())

    def describe(self, name: str) -> ToolDescriptor | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
