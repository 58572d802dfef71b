"""Per-invocation dispatch entities."""

from command_dispatch.domain.entities.command_descriptor import CommandDescriptor
from command_dispatch.domain.entities.execution_context import ExecutionContext

__all__ = ["CommandDescriptor", "ExecutionContext"]
