"""Dispatch error codes (machine-readable).

Codes are part of the public error payload, so their values are the
SCREAMING_SNAKE_CASE names themselves.

Categories:
- Routing errors (INVALID_COMMAND_NAME, INVALID_ACTION_NAME)
- Validation errors (INVALID_PARAMS)
- Authorization errors (ACCESS_DENIED)
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Dispatch error codes."""

    # Routing errors
    INVALID_COMMAND_NAME = "INVALID_COMMAND_NAME"
    INVALID_ACTION_NAME = "INVALID_ACTION_NAME"

    # Validation errors
    INVALID_PARAMS = "INVALID_PARAMS"

    # Authorization errors
    ACCESS_DENIED = "ACCESS_DENIED"
