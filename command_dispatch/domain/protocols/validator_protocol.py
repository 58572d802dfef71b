"""Parameter validator protocol (port).

Validates a parameter mapping against a declarative constraint set and
returns either the normalized parameters or a formatted failure.

Implementations:
    - ConstraintValidator: pydantic-backed, accepts validate.js-style
      constraint mappings or pydantic models
"""

from collections.abc import Mapping
from typing import Any, Protocol

from command_dispatch.core.enums import ValidatorFormat
from command_dispatch.core.errors import ErrorFormatter
from command_dispatch.core.result import Result


class ValidatorProtocol(Protocol):
    """Protocol for parameter validators."""

    async def validate(
        self,
        params: Mapping[str, Any],
        constraints: Any,
        *,
        format: ValidatorFormat,
        error_formatter: ErrorFormatter,
    ) -> Result[dict[str, Any], Any]:
        """Validate ``params`` against ``constraints``.

        Args:
            params: Raw parameters supplied by the caller.
            constraints: Declarative constraint set.
            format: Output shape for failures.
            error_formatter: Builds the INVALID_PARAMS error when
                ``format`` is ERROR_FORMATTER.

        Returns:
            Success(normalized params) or Failure(formatted violations).
        """
        ...
