"""HandlerGroup: a named set of Handlers (one command namespace).

Flow for execute(context, handler_name, params):
1. get_handler_instance() - resolve the class, merge options, bind the
   descriptor, construct the Handler
2. before(handler)        - hook, default passthrough
3. check_access()         - group-level authorization (may deny before the
   handler's own check runs)
4. process(...)           - delegates to handler.execute()
5. after(result)          - hook, default passthrough

Handlers are declared on the class (``handlers``) and may be added per
instance with add_handler(); the last registration for a name wins.

Example:
    class HelloGroup(HandlerGroup):
        handlers = {"say_hello": SayHello, "say_bye": SayBye}

    result = await HelloGroup({"role": "ADMIN"}).execute(
        None, "say_hello", {"user_name": "John"}
    )
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, ClassVar

from command_dispatch.application.handlers.base import PipelineComponent, as_result
from command_dispatch.application.handlers.handler import Handler
from command_dispatch.application.options import DispatchOptions, OptionLayer
from command_dispatch.core.container import get_validator
from command_dispatch.core.enums import ErrorCode
from command_dispatch.core.result import Failure, Result, Success
from command_dispatch.domain.entities import ExecutionContext
from command_dispatch.domain.protocols.logger_protocol import LoggerProtocol
from command_dispatch.domain.protocols.validator_protocol import ValidatorProtocol


class HandlerGroup(PipelineComponent):
    """Base class for handler groups.

    Attributes:
        handlers: Class-level registry of handler name -> Handler class.
        default_options: Group-level options layer (above the Dispatcher's
            base options, below call-site options).
    """

    handlers: ClassVar[Mapping[str, type[Handler]]] = MappingProxyType({})
    default_options: ClassVar[Mapping[str, Any]] = MappingProxyType({})

    def __init__(
        self,
        context: ExecutionContext | Any = None,
        options: OptionLayer = None,
        *,
        base_options: OptionLayer = None,
        injected_options: OptionLayer = None,
        logger: LoggerProtocol | None = None,
        validator: ValidatorProtocol | None = None,
    ) -> None:
        super().__init__(
            context,
            DispatchOptions.resolve(
                base_options, type(self).default_options, options, injected_options
            ),
            logger=logger,
        )
        self.validator = validator or get_validator()
        self._handlers: dict[str, type[Handler]] = dict(type(self).handlers)

    def add_handler(self, name: str, handler_class: type[Handler]) -> None:
        """Register (or replace) a handler class under ``name``."""
        if not isinstance(name, str) or not name:
            raise ValueError("Handler name must be a non-empty string")
        self._handlers[name] = handler_class

    @property
    def registered_handlers(self) -> Mapping[str, type[Handler]]:
        """Read-only view of this instance's handler registry."""
        return MappingProxyType(self._handlers)

    async def get_handler_class(self, name: str) -> Result[type[Handler], Any]:
        """Resolve a handler class by name.

        Returns:
            Success(handler class) or Failure(INVALID_ACTION_NAME).
        """
        handler_class = self._handlers.get(name) if isinstance(name, str) else None
        if handler_class is None:
            self.logger.info(
                "handler_resolution_failed",
                group=type(self).__name__,
                handler=name,
            )
            return self.fail(
                ErrorCode.INVALID_ACTION_NAME,
                f"Action {name} not found.",
                {"actionName": name},
            )
        return Success(value=handler_class)

    async def get_handler_instance(
        self,
        name: str,
        context: ExecutionContext | Any = None,
        options: OptionLayer = None,
    ) -> Result[Handler, Any]:
        """Resolve and construct the handler for ``name``.

        Side Effects:
            Binds the group, handler class and handler instance onto the
            context's CommandDescriptor.
        """
        resolved = await self.get_handler_class(name)
        if isinstance(resolved, Failure):
            return resolved

        context = self.context if context is None else ExecutionContext.coerce(context)
        handler_class = resolved.value
        handler = handler_class(
            context,
            None,
            self.options.merge(options),
            group=self,
            logger=self.logger,
            validator=self.validator,
        )
        if context.command is not None:
            context.command.bind_handler(
                group=self, handler_class=handler_class, handler=handler
            )
        return Success(value=handler)

    async def before(self, handler: Handler) -> Any:
        return Success(value=handler)

    async def process(
        self,
        context: ExecutionContext,
        handler: Handler,
        params: Mapping[str, Any] | None,
        options: DispatchOptions | None = None,
    ) -> Result[Any, Any]:
        """Run the handler's own pipeline.

        Args:
            context: Execution context of this invocation.
            handler: Handler returned by before().
            params: Handler parameters.
            options: Resolved options snapshot for the handler (group and
                call-site layers); None keeps the handler's own.
        """
        return await handler.execute(context, params, options)

    async def after(self, result: Any) -> Any:
        return Success(value=result)

    async def execute(
        self,
        context: ExecutionContext | Any,
        handler_name: str,
        params: Mapping[str, Any] | None = None,
        options: OptionLayer = None,
    ) -> Result[Any, Any]:
        """Drive one handler invocation through the group lifecycle.

        Args:
            context: Execution context; None keeps the constructor's.
            handler_name: Registered handler name.
            params: Handler parameters.
            options: Call-site options layered over the group's.

        Returns:
            Success(result) or the first Failure produced by a stage.
        """
        if context is not None:
            self.context = ExecutionContext.coerce(context)

        instance = await self.get_handler_instance(handler_name, self.context, options)
        if isinstance(instance, Failure):
            return instance

        prepared = as_result(await self.before(instance.value))
        if isinstance(prepared, Failure):
            return prepared

        access = await self.check_access()
        if isinstance(access, Failure):
            return access

        processed = as_result(
            await self.process(
                self.context, prepared.value, params, instance.value.options
            )
        )
        if isinstance(processed, Failure):
            return processed

        return as_result(await self.after(processed.value))
