"""LoggerProtocol definition for structured dispatch logging.

Dispatch components log snake_case event names with key/value context
(``command``, ``invocation_id``, ``role``), never interpolated strings.

Context Binding:
    The Dispatcher binds ``invocation_id`` and ``command`` once per
    invocation; HandlerGroup and Handler log through that bound logger so
    every line of one invocation correlates.

Security:
    - Never log raw command params; they may carry credentials
    - Log roles and command names only

Usage:
    from command_dispatch.core.container import get_logger

    logger = get_logger()
    scoped = logger.bind(invocation_id=str(descriptor.invocation_id))
    scoped.info("command_resolved", command="hello.say_hello")
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    Implementations may enrich logs with timestamp and level.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level event."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level event."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level event."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level event.

        Args:
            message: Event name.
            error: Optional exception; implementations add error_type and
                error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level event (same fields as error())."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a new logger with permanently bound context.

        The original logger is left unchanged.

        Example:
            scoped = logger.bind(invocation_id=str(invocation_id))
            scoped.info("access_granted", role="ADMIN")
        """
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for bind()."""
        ...
