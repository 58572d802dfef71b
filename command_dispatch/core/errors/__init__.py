"""Core errors package.

Usage:
    from command_dispatch.core.errors import DispatchError, default_error_formatter
"""

from command_dispatch.core.errors.dispatch_error import (
    INVALID_PARAMS_MESSAGE,
    DispatchError,
    ErrorFormatter,
    default_error_formatter,
)

__all__ = [
    "INVALID_PARAMS_MESSAGE",
    "DispatchError",
    "ErrorFormatter",
    "default_error_formatter",
]
