"""Composition root.

Application-scoped singletons shared by every Dispatcher, HandlerGroup and
Handler that is not given explicit collaborators:
- Logging (structlog console adapter)
- Parameter validation (pydantic constraint validator)

Tests call ``cache_clear()`` on these functions to force a rebuild.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from command_dispatch.core.config import get_settings

if TYPE_CHECKING:
    from command_dispatch.domain.protocols.logger_protocol import LoggerProtocol
    from command_dispatch.domain.protocols.validator_protocol import ValidatorProtocol


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Renderer selection follows the environment:
    - development: human-readable console output
    - testing/ci/production: JSON output

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from command_dispatch.infrastructure.logging.console_adapter import ConsoleAdapter

    settings = get_settings()
    return ConsoleAdapter(
        use_json=settings.use_json_logs,
        level=settings.log_level_number,
    )


@lru_cache()
def get_validator() -> "ValidatorProtocol":
    """Return the application-scoped parameter validator.

    Returns:
        ValidatorProtocol: Pydantic-backed constraint validator.
    """
    from command_dispatch.infrastructure.validation.constraint_validator import (
        ConstraintValidator,
    )

    return ConstraintValidator()
