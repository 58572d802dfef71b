"""Dispatch error type and the default error formatter.

DispatchError is the normalized error produced by the dispatch pipeline
(routing, validation and authorization failures). It flows back to the
caller inside a Failure, it is never raised.

Errors raised by external collaborators (access-control adapters,
handler code) are not DispatchErrors and are not reformatted.

Usage:
    from command_dispatch.core.errors import default_error_formatter
    from command_dispatch.core.enums import ErrorCode

    error = default_error_formatter(
        ErrorCode.ACCESS_DENIED,
        "This action not allowed for role GUEST.",
        {"currentRole": "GUEST"},
    )
    error.to_payload()
    # {"error": {"code": "ACCESS_DENIED", "message": "...", "details": {...}}}
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from command_dispatch.core.enums import ErrorCode

INVALID_PARAMS_MESSAGE = "Please send valid parameters."


@dataclass(frozen=True, slots=True, kw_only=True)
class DispatchError:
    """Normalized dispatch error (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code.
        message: Human-readable error message.
        details: Optional structured context (field violations, role, command).
    """

    code: ErrorCode
    message: str | None = None
    details: Mapping[str, Any] | None = None

    def to_payload(self) -> dict[str, Any]:
        """Render the public error payload.

        Empty message and details are omitted.

        Returns:
            ``{"error": {"code": ..., "message"?: ..., "details"?: ...}}``
        """
        error: dict[str, Any] = {"code": self.code.value}
        if self.message:
            error["message"] = self.message
        if self.details:
            error["details"] = dict(self.details)
        return {"error": error}

    def __str__(self) -> str:
        """String representation of error."""
        if self.message:
            return f"{self.code.value}: {self.message}"
        return self.code.value


# (code, message, details) -> error value carried by Failure
ErrorFormatter: TypeAlias = Callable[[ErrorCode, str | None, Mapping[str, Any] | None], Any]


def default_error_formatter(
    code: ErrorCode,
    message: str | None = None,
    details: Mapping[str, Any] | None = None,
) -> DispatchError:
    """Build a DispatchError.

    Args:
        code: Error code.
        message: Optional human-readable message.
        details: Optional structured context.

    Returns:
        DispatchError with the given fields.
    """
    return DispatchError(code=code, message=message, details=details)
