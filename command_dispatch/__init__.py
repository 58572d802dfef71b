"""Command dispatch: route ``namespace.operation`` commands to handlers.

Usage:
    from command_dispatch import Dispatcher, Handler, HandlerGroup, Success

    class SayBye(Handler):
        async def process(self, command):
            return Success(value="Bye")

    class HelloGroup(HandlerGroup):
        handlers = {"say_bye": SayBye}

    dispatcher = Dispatcher({"hello": HelloGroup})
    result = await dispatcher.execute({"role": "ADMIN"}, "hello.say_bye")
"""

from command_dispatch.application import (
    BulkCommand,
    Dispatcher,
    DispatchOptions,
    Handler,
    HandlerGroup,
    default_role_lookup,
    redact_fields,
)
from command_dispatch.core.enums import ErrorCode, ValidatorFormat
from command_dispatch.core.errors import DispatchError, default_error_formatter
from command_dispatch.core.result import Failure, Result, Success
from command_dispatch.domain.entities import CommandDescriptor, ExecutionContext
from command_dispatch.domain.value_objects import AliasEntry

__all__ = [
    "AliasEntry",
    "BulkCommand",
    "CommandDescriptor",
    "Dispatcher",
    "DispatchError",
    "DispatchOptions",
    "ErrorCode",
    "ExecutionContext",
    "Failure",
    "Handler",
    "HandlerGroup",
    "Result",
    "Success",
    "ValidatorFormat",
    "default_error_formatter",
    "default_role_lookup",
    "redact_fields",
]
