"""Handler: one operation's business logic inside the dispatch pipeline.

Flow (strictly sequential, first Failure short-circuits):
1. before()           - setup hook, default no-op
2. validate_params()  - opt-in, only when params_constraints is declared
3. check_access()     - ACL or role lists (memoized per invocation)
4. process(command)   - the operation itself; override this
5. after(result)      - output shaping hook, default passthrough

Hooks may return a Result or a plain value; plain values are wrapped in
Success. A plain False from validate_params() fails with INVALID_PARAMS.
Exceptions raised by hooks are not caught here.

Example:
    class SayHello(Handler):
        params_constraints = {"user_name": {"presence": True}}

        async def process(self, command):
            return Success(value=f"Hello {self.params['user_name']}.")

    result = await SayHello({"role": "ADMIN"}, {"user_name": "John"}).execute()
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from command_dispatch.application.handlers.base import PipelineComponent, as_result
from command_dispatch.application.options import DispatchOptions, OptionLayer
from command_dispatch.core.container import get_validator
from command_dispatch.core.enums import ErrorCode
from command_dispatch.core.errors import INVALID_PARAMS_MESSAGE
from command_dispatch.core.result import Failure, Result, Success
from command_dispatch.domain.entities import CommandDescriptor, ExecutionContext
from command_dispatch.domain.protocols.logger_protocol import LoggerProtocol
from command_dispatch.domain.protocols.validator_protocol import ValidatorProtocol

if TYPE_CHECKING:
    from command_dispatch.application.handlers.group import HandlerGroup


class Handler(PipelineComponent):
    """Base class for command handlers.

    Attributes:
        params_constraints: Declarative constraint set (or pydantic model);
            None disables validation.
        params: Parameters of the current invocation (normalized after
            validation).
        group: Owning HandlerGroup, when run through one.
    """

    params_constraints: ClassVar[Any] = None

    def __init__(
        self,
        context: ExecutionContext | Any = None,
        params: Mapping[str, Any] | None = None,
        options: DispatchOptions | OptionLayer = None,
        *,
        group: "HandlerGroup | None" = None,
        logger: LoggerProtocol | None = None,
        validator: ValidatorProtocol | None = None,
    ) -> None:
        super().__init__(context, options, logger=logger)
        self.params: dict[str, Any] = dict(params or {})
        self.group = group
        self.validator = validator or get_validator()

    @property
    def owner(self) -> "HandlerGroup | None":
        return self.group

    async def before(self) -> Any:
        return Success(value=True)

    async def validate_params(self) -> Result[bool, Any]:
        """Validate ``self.params`` against ``params_constraints``.

        Returns:
            Success(True) when valid or when no constraints are declared.
            Failure(formatted violations) otherwise.
        """
        constraints = self.params_constraints
        if constraints is None:
            return Success(value=True)

        result = await self.validator.validate(
            self.params,
            constraints,
            format=self.options.validator_format,
            error_formatter=self.options.error_formatter,
        )
        match result:
            case Success(value=params):
                self.params = params
                return Success(value=True)
            case Failure():
                self.logger.info(
                    "params_validation_failed", handler=type(self).__name__
                )
                return result

    async def process(self, command: CommandDescriptor | None) -> Any:
        """Run the operation. Default is a no-op returning True."""
        return Success(value=True)

    async def after(self, result: Any) -> Any:
        return Success(value=result)

    async def execute(
        self,
        context: ExecutionContext | Any = None,
        params: Mapping[str, Any] | None = None,
        options: DispatchOptions | OptionLayer = None,
    ) -> Result[Any, Any]:
        """Run the full pipeline.

        Arguments given here replace the ones passed to the constructor.

        Returns:
            Success(after() value) or the first Failure produced by a stage.
        """
        if context is not None:
            self.context = ExecutionContext.coerce(context)
        if params is not None:
            self.params = dict(params)
        if options is not None:
            self.options = self._snapshot(options)

        before = as_result(await self.before())
        if isinstance(before, Failure):
            return before

        validated = as_result(await self.validate_params())
        if isinstance(validated, Failure):
            return validated
        if validated.value is False:
            return self.fail(ErrorCode.INVALID_PARAMS, INVALID_PARAMS_MESSAGE)

        access = await self.check_access()
        if isinstance(access, Failure):
            return access

        processed = as_result(await self.process(access.value))
        if isinstance(processed, Failure):
            return processed

        return as_result(await self.after(processed.value))
