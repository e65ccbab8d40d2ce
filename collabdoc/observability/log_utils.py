"""
Structured logging helpers.

Context values passed as `extra` are flattened to short strings so that
record attributes stay printable: ids and timestamps in canonical form,
enums by value, collections by size.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

MAX_VALUE_LENGTH = 500


def safe_log_value(value: Any, max_length: int = MAX_VALUE_LENGTH) -> str:
    """
    Render a context value for a log record, cut to max_length.

    >>> safe_log_value(["a", "b"])
    'list(2 items)'
    """
    if value is None:
        return "None"
    if isinstance(value, Enum):
        text = str(value.value)
    elif isinstance(value, datetime):
        text = value.isoformat()
    elif isinstance(value, (str, UUID)):
        text = str(value)
    elif isinstance(value, (list, tuple, set)):
        text = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        text = f"dict({len(value)} keys)"
    else:
        text = str(value)

    if len(text) > max_length:
        return f"{text[:max_length]}... (truncated, {len(text)} total)"
    return text


def _flatten(context: dict[str, Any]) -> dict[str, str]:
    return {key: safe_log_value(value) for key, value in context.items()}


def log_with_context(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """Log message at level with every keyword flattened into the record."""
    logger.log(level, message, extra=_flatten(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    **context: Any,
) -> None:
    """
    Log at ERROR with the active traceback.

    The exception class and text are added as error_type and error_msg.
    """
    logger.exception(
        message,
        extra={**_flatten(context), "error_type": type(exc).__name__, "error_msg": str(exc)},
    )
