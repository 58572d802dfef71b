"""ExecutionContext entity.

Ambient state threaded through one invocation: the opaque caller payload
(commonly a mapping carrying ``role`` or ``user``), the resolved
CommandDescriptor and the bulk marker.

The Dispatcher forks the context per invocation, so siblings in one bulk
batch never observe each other's descriptor.
"""

from dataclasses import dataclass, replace
from typing import Any

from command_dispatch.domain.entities.command_descriptor import CommandDescriptor


@dataclass(kw_only=True)
class ExecutionContext:
    """Per-invocation execution context.

    Attributes:
        caller: Opaque caller-supplied payload (identity holder).
        command: Descriptor attached by the Dispatcher.
        bulk: True when the invocation is part of execute_bulk().
    """

    caller: Any = None
    command: CommandDescriptor | None = None
    bulk: bool = False

    @classmethod
    def coerce(cls, context: "ExecutionContext | Any") -> "ExecutionContext":
        """Wrap a bare caller payload into an ExecutionContext.

        Example:
            >>> ExecutionContext.coerce({"role": "ADMIN"}).caller
            {'role': 'ADMIN'}
        """
        if isinstance(context, ExecutionContext):
            return context
        return cls(caller=context)

    def fork(self, **changes: Any) -> "ExecutionContext":
        """Shallow copy with the given fields replaced."""
        return replace(self, **changes)
