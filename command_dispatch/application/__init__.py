"""Application layer: options, handler pipeline and the dispatcher.

Exports:
    Dispatcher: Top-level command router
    BulkCommand: One entry of an execute_bulk() batch
    Handler: Base class for command handlers
    HandlerGroup: Base class for handler namespaces
    DispatchOptions: Layered per-invocation options snapshot
"""

from command_dispatch.application.dispatcher import BulkCommand, Dispatcher
from command_dispatch.application.field_filter import redact_fields
from command_dispatch.application.handlers import Handler, HandlerGroup
from command_dispatch.application.options import DispatchOptions
from command_dispatch.application.roles import default_role_lookup

__all__ = [
    "BulkCommand",
    "Dispatcher",
    "DispatchOptions",
    "Handler",
    "HandlerGroup",
    "default_role_lookup",
    "redact_fields",
]
