"""
Structured logging helpers.

Context values are flattened to short strings before they reach a
handler: embeddings become an item count, UUIDs and enums their plain
value, floats are rounded and long text is clipped.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from enum import Enum
from typing import Any
from uuid import UUID

MAX_VALUE_LENGTH = 500
FLOAT_DIGITS = 4


def safe_log_value(value: Any, max_length: int = MAX_VALUE_LENGTH) -> str:
    """
    Render a context value as a bounded string.

    Args:
        value: Anything passed as logging context
        max_length: Longest string kept before clipping

    Returns:
        str: Loggable representation, never raising
    """
    try:
        if value is None:
            text = "None"
        elif isinstance(value, Enum):
            text = str(value.value)
        elif isinstance(value, UUID):
            text = str(value)
        elif isinstance(value, bool):
            text = str(value)
        elif isinstance(value, float):
            text = str(round(value, FLOAT_DIGITS))
        elif isinstance(value, (list, tuple, set, frozenset)):
            text = f"{type(value).__name__}({len(value)} items)"
        elif isinstance(value, dict):
            text = f"dict({len(value)} keys)"
        else:
            text = str(value)
    except Exception as exc:
        return f"<unloggable {type(value).__name__}: {type(exc).__name__}>"

    if len(text) > max_length:
        return f"{text[:max_length]}... (truncated, {len(text)} total)"
    return text


def _safe_context(context: dict[str, Any]) -> dict[str, str]:
    return {key: safe_log_value(value) for key, value in context.items()}


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    """Log `message` at `level` with every context value passed through safe_log_value()."""
    logger.log(level, message, extra=_safe_context(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    **context,
) -> None:
    """
    Log at ERROR with the traceback of `exc` attached.

    error_type and error_msg are added to the context.

    Args:
        logger: Target logger
        message: Log message
        exc: Exception whose traceback is recorded
        **context: Additional key-value context
    """
    extra = _safe_context(context)
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.error(message, exc_info=exc, extra=extra)
