"""Logging setup for the OpenKM MCP server.

Two file-backed loggers are configured at import time:

- ``mcp_call_logger``: one line per tool call with its arguments and result.
- ``error_logger``: structured JSON records for failures, one object per line.

Both write to rotating files under ``OKM_MCP_LOG_DIR`` and never to stdout,
which belongs to the stdio transport. ``configure_console_logging`` adds a
stderr handler for interactive runs.
"""

from __future__ import annotations

import functools
import json
import logging
import os
import sys
import traceback
from datetime import datetime
from datetime import timezone
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from .metrics_config import record_tool_call_error
from .metrics_config import record_tool_call_start
from .metrics_config import record_tool_call_success

MAX_LOGGED_RESULT_CHARS = 2000

_RESERVED_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys() | {"message", "asctime"}
)


class ErrorCategory(Enum):
    """Severity classification for structured error records."""

    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


_CATEGORY_LEVELS = {
    ErrorCategory.CRITICAL: logging.CRITICAL,
    ErrorCategory.ERROR: logging.ERROR,
    ErrorCategory.WARNING: logging.WARNING,
    ErrorCategory.INFO: logging.INFO,
}


class StructuredLogFormatter(logging.Formatter):
    """Format log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            log_data["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_ATTRS and not key.startswith("_"):
                log_data[key] = value
        return json.dumps(log_data, default=str)


def _log_dir() -> Path:
    path = Path(os.environ.get("OKM_MCP_LOG_DIR", Path.home() / ".openkm_mcp" / "logs"))
    path.mkdir(parents=True, exist_ok=True)
    return path


def _rotating_handler(filename: str) -> RotatingFileHandler:
    # 10MB per file, 5 backups
    return RotatingFileHandler(_log_dir() / filename, maxBytes=10 * 1024 * 1024, backupCount=5)


# --- Logging Setup ---
mcp_call_logger = logging.getLogger("mcp_call_logger")
mcp_call_logger.setLevel(logging.INFO)
if not mcp_call_logger.handlers:
    _call_handler = _rotating_handler("mcp_calls.log")
    _call_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    mcp_call_logger.addHandler(_call_handler)
mcp_call_logger.propagate = False

error_logger = logging.getLogger("error_logger")
error_logger.setLevel(logging.INFO)
if not error_logger.handlers:
    _error_handler = _rotating_handler("errors.log")
    _error_handler.setFormatter(StructuredLogFormatter())
    error_logger.addHandler(_error_handler)
error_logger.propagate = False


def configure_console_logging(level: str = "INFO") -> None:
    """Mirror the server loggers to stderr at the given level."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    handler.setLevel(level)

    root = logging.getLogger("openkm_mcp")
    root.setLevel(level)
    root.addHandler(handler)
    mcp_call_logger.addHandler(handler)
    error_logger.addHandler(handler)


def log_structured_error(
    category: ErrorCategory,
    message: str,
    exception: BaseException | None = None,
    context: dict[str, Any] | None = None,
    **kwargs: Any,
) -> None:
    """Write a structured error record to ``error_logger``.

    Args:
        category: Severity of the failure.
        message: Human-readable summary.
        exception: The exception being reported, logged with its traceback.
        context: Extra fields merged into the record (tool name, reference, ...).
        **kwargs: Further fields merged into the record.
    """
    extra: dict[str, Any] = {"error_category": category.value}
    if context:
        extra.update(context)
    extra.update(kwargs)
    error_logger.log(
        _CATEGORY_LEVELS[category],
        message,
        exc_info=exception is not None,
        extra=extra,
    )


def _describe(value: Any) -> str:
    if hasattr(value, "model_dump_json"):
        return value.model_dump_json(exclude_none=True)
    return repr(value)


# --- Decorator for Logging MCP Calls with Metrics ---
def log_mcp_call(func):
    """Log and meter an async tool handler.

    The wrapped coroutine's arguments and result are written to
    ``mcp_call_logger``. Exceptions are logged there and re-raised unchanged;
    the dispatcher writes the structured error record.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        func_name = getattr(func, "__name__", "unknown_function")

        start_time = None
        try:
            start_time = record_tool_call_start(func_name)
        except Exception as e:
            mcp_call_logger.warning(f"Metrics recording failed for {func_name}: {e}")

        logged_args = [_describe(arg) for arg in args]
        logged_kwargs = {k: _describe(v) for k, v in kwargs.items()}
        mcp_call_logger.info(f"Calling tool: {func_name} with args={logged_args}, kwargs={logged_kwargs}")

        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            try:
                record_tool_call_error(func_name, start_time)
            except Exception as metrics_error:
                mcp_call_logger.warning(f"Metrics error recording failed for {func_name}: {metrics_error}")
            mcp_call_logger.error(f"Tool {func_name} raised exception: {e}", exc_info=True)
            raise

        try:
            record_tool_call_success(func_name, start_time)
        except Exception as e:
            mcp_call_logger.warning(f"Metrics success recording failed for {func_name}: {e}")

        result_str = _describe(result)
        if len(result_str) > MAX_LOGGED_RESULT_CHARS:
            result_str = f"{result_str[:MAX_LOGGED_RESULT_CHARS]}... ({len(result_str)} chars)"
        mcp_call_logger.info(f"Tool {func_name} returned: {result_str}")
        return result

    return wrapper
