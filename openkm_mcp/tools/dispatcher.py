"""Routes validated tool invocations to their handlers.

The dispatcher is the error boundary of a single invocation: any failure
after the tool has been found (bad arguments, repository errors, parse
errors) becomes a tool-level response with ``is_error`` set. Only an unknown
tool name escapes as an exception, for the protocol layer to report.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ..exceptions import OpenKMMCPError
from ..exceptions import UnknownToolError
from ..exceptions import ValidationError
from ..logger_config import ErrorCategory
from ..logger_config import log_structured_error
from ..models import ToolResponse
from .base import ToolContext
from .base import ToolRegistry

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """Stateless router from tool name and raw arguments to a response."""

    def __init__(self, registry: ToolRegistry, context: ToolContext):
        self.registry = registry
        self.context = context

    async def dispatch(self, name: str, arguments: Mapping[str, Any] | None) -> ToolResponse:
        """Validate ``arguments`` for tool ``name`` and run its handler.

        Raises:
            UnknownToolError: No tool with this name is registered.
        """
        descriptor = self.registry.describe(name)
        if descriptor is None:
            logger.warning("Unknown tool requested: %s", name)
            raise UnknownToolError(name, self.registry.names())

        try:
            args = descriptor.validate(arguments)
            return await descriptor.handler(self.context, args)
        except Exception as e:
            message = e.message if isinstance(e, OpenKMMCPError) else str(e)
            log_structured_error(
                category=ErrorCategory.WARNING if isinstance(e, ValidationError) else ErrorCategory.ERROR,
                message=f"Error in tool {name}: {message}",
                exception=e,
                operation="dispatch",
                tool_name=name,
                error_type=type(e).__name__,
            )
            return ToolResponse.from_error(f"Error: {message}")
