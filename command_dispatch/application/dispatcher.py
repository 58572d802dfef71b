"""Dispatcher: top-level command router.

Routes ``<namespace>.<operation>`` command strings to HandlerGroups,
optionally through aliases, and runs batches of independent commands.

Flow for execute(context, command, params, options):
1. Resolve: alias table first (handle_alias), otherwise parse_command_name
2. Fork the context and attach the fresh CommandDescriptor
3. Construct the HandlerGroup with layered options
4. HandlerGroup.execute() runs the handler pipeline
5. The result comes back unchanged

execute_bulk() fans out one isolated invocation per entry and never
fails as a whole: every slot holds a Success or a Failure, in input order.

Example:
    dispatcher = Dispatcher()
    dispatcher.add_group("hello", HelloGroup)
    dispatcher.add_alias("greetings.show", "hello.say_hello")

    result = await dispatcher.execute(
        {"user": {"role": "ADMIN"}}, "greetings.show", {"user_name": "John"}
    )
"""

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from command_dispatch.application.handlers.group import HandlerGroup
from command_dispatch.application.options import DispatchOptions, OptionLayer
from command_dispatch.core.container import get_logger, get_validator
from command_dispatch.core.enums import ErrorCode
from command_dispatch.core.errors import ErrorFormatter
from command_dispatch.core.result import Failure, Result, Success
from command_dispatch.domain.entities import CommandDescriptor, ExecutionContext
from command_dispatch.domain.protocols.logger_protocol import LoggerProtocol
from command_dispatch.domain.protocols.validator_protocol import ValidatorProtocol
from command_dispatch.domain.value_objects import AliasEntry


@dataclass(frozen=True, kw_only=True)
class BulkCommand:
    """One entry of an execute_bulk() batch.

    Attributes:
        command: Command or alias name.
        params: Handler parameters.
        options: Per-entry options layered over the batch options.
    """

    command: Any
    params: Mapping[str, Any] | None = None
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def coerce(cls, entry: "BulkCommand | Mapping[str, Any]") -> "BulkCommand":
        """Accept a BulkCommand or a ``{command, params?, options?}`` mapping."""
        if isinstance(entry, BulkCommand):
            return entry
        if not isinstance(entry, Mapping):
            return cls(command=entry)
        return cls(
            command=entry.get("command"),
            params=entry.get("params"),
            options=entry.get("options") or MappingProxyType({}),
        )


class Dispatcher:
    """Command router owning HandlerGroup classes and aliases.

    Registries are populated at setup time and read-only while commands
    execute.
    """

    def __init__(
        self,
        groups: Mapping[str, type[HandlerGroup]] | None = None,
        options: OptionLayer = None,
        *,
        logger: LoggerProtocol | None = None,
        validator: ValidatorProtocol | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            groups: Initial namespace -> HandlerGroup class registry.
            options: Base options layer for every invocation.
            logger: Structured logger (defaults to the container logger).
            validator: Parameter validator handed to every Handler.
        """
        self._groups: dict[str, type[HandlerGroup]] = {}
        self._aliases: dict[str, AliasEntry] = {}
        self._options: dict[str, Any] = dict(options or {})
        self._logger = logger or get_logger()
        self._validator = validator or get_validator()
        if groups:
            self.add_groups(groups)

    # =========================================================================
    # Registration
    # =========================================================================

    def add_group(self, name: str, group_class: type[HandlerGroup]) -> None:
        """Register ``group_class`` under namespace ``name`` (last write wins)."""
        if not isinstance(name, str) or not name:
            raise ValueError("Group name must be a non-empty string")
        self._groups[name] = group_class

    def add_groups(self, groups: Mapping[str, type[HandlerGroup]]) -> None:
        """Register every name -> class pair of ``groups``."""
        for name, group_class in groups.items():
            self.add_group(name, group_class)

    def add_group_instance(self, group: HandlerGroup) -> None:
        """Register the class of ``group`` under its class name."""
        self.add_group(type(group).__name__, type(group))

    def add_group_instances(self, groups: Iterable[HandlerGroup]) -> None:
        """Register the class of each group under its class name."""
        for group in groups:
            self.add_group_instance(group)

    def add_alias(self, name: str, target: str | Mapping[str, Any]) -> None:
        """Register alias ``name``.

        Args:
            name: Public command name.
            target: ``"ns.op"`` or ``{"command": "ns.op", **pass_through}``.
        """
        if not isinstance(name, str) or not name:
            raise ValueError("Alias name must be a non-empty string")
        self._aliases[name] = AliasEntry.from_target(name, target)

    @property
    def groups(self) -> Mapping[str, type[HandlerGroup]]:
        return MappingProxyType(self._groups)

    @property
    def aliases(self) -> Mapping[str, AliasEntry]:
        return MappingProxyType(self._aliases)

    # =========================================================================
    # Resolution
    # =========================================================================

    async def parse_command_name(
        self,
        command: Any,
        *,
        error_formatter: ErrorFormatter | None = None,
    ) -> Result[CommandDescriptor, Any]:
        """Resolve a concrete command string.

        Only the first two dot-separated segments are interpreted; any
        further segments stay in ``command`` untouched.

        Returns:
            Success(descriptor) or Failure(INVALID_COMMAND_NAME).
        """
        formatter = error_formatter or self._base_options().error_formatter

        if not isinstance(command, str):
            return Failure(
                error=formatter(
                    ErrorCode.INVALID_COMMAND_NAME,
                    'Argument "command" must be a string.',
                    None,
                )
            )

        parts = command.split(".")
        if len(parts) < 2:
            return Failure(
                error=formatter(
                    ErrorCode.INVALID_COMMAND_NAME,
                    "Command name must be a string in format <controller>.<action>.",
                    None,
                )
            )

        group_name, handler_name = parts[0], parts[1]
        group_class = self._groups.get(group_name)
        if group_class is None:
            return Failure(
                error=formatter(
                    ErrorCode.INVALID_COMMAND_NAME,
                    f"Not found handler for command {command}",
                    {
                        "command": command,
                        "controllerName": group_name,
                        "actionName": handler_name,
                    },
                )
            )

        return Success(
            value=CommandDescriptor(
                command=command,
                group_name=group_name,
                handler_name=handler_name,
                group_class=group_class,
            )
        )

    async def handle_alias(
        self,
        alias_name: str,
        *,
        error_formatter: ErrorFormatter | None = None,
    ) -> Result[CommandDescriptor, Any]:
        """Resolve an alias to its target and stamp the alias metadata.

        Aliases do not chain: the target is parsed as a concrete command.
        """
        entry = self._aliases.get(alias_name)
        if entry is None:
            return await self.parse_command_name(
                alias_name, error_formatter=error_formatter
            )

        resolved = await self.parse_command_name(
            entry.command, error_formatter=error_formatter
        )
        if isinstance(resolved, Success):
            descriptor = resolved.value
            descriptor.alias_name = entry.name
            descriptor.alias_options = entry.options
            descriptor.original_command = entry.name
            self._logger.debug(
                "alias_resolved", alias=entry.name, command=entry.command
            )
        return resolved

    # =========================================================================
    # Execution
    # =========================================================================

    async def execute(
        self,
        context: ExecutionContext | Any,
        command: Any,
        params: Mapping[str, Any] | None = None,
        options: OptionLayer = None,
    ) -> Result[Any, Any]:
        """Execute one command.

        Args:
            context: ExecutionContext or a bare caller payload. It is forked,
                never mutated.
            command: Command or alias name.
            params: Handler parameters.
            options: Call-site options.

        Returns:
            Success(handler result) or the first Failure of the pipeline.

        Raises:
            Exception: Errors raised by collaborators or handler code,
                unchanged.
        """
        formatter = self._base_options().merge(options).error_formatter
        if isinstance(command, str) and command in self._aliases:
            resolved = await self.handle_alias(command, error_formatter=formatter)
        else:
            resolved = await self.parse_command_name(command, error_formatter=formatter)

        if isinstance(resolved, Failure):
            self._logger.info(
                "command_resolution_failed",
                command=command if isinstance(command, str) else repr(command),
            )
            return resolved

        return await self._run(
            ExecutionContext.coerce(context), resolved.value, params, options
        )

    async def _run(
        self,
        context: ExecutionContext,
        descriptor: CommandDescriptor,
        params: Mapping[str, Any] | None,
        options: OptionLayer,
    ) -> Result[Any, Any]:
        logger = self._logger.bind(
            invocation_id=str(descriptor.invocation_id),
            command=descriptor.original_command,
        )
        logger.debug(
            "command_resolved",
            group=descriptor.group_name,
            handler=descriptor.handler_name,
        )

        invocation_context = context.fork(command=descriptor)
        group = descriptor.group_class(
            invocation_context,
            options,
            base_options=self._options,
            injected_options=dict(descriptor.alias_options),
            logger=logger,
            validator=self._validator,
        )
        return await group.execute(invocation_context, descriptor.handler_name, params)

    async def execute_bulk(
        self,
        context: ExecutionContext | Any,
        commands: Iterable[BulkCommand | Mapping[str, Any]],
        options: OptionLayer = None,
    ) -> list[Result[Any, Any]]:
        """Execute independent commands concurrently.

        Each entry runs with its own forked context and its options layered
        over ``options``. A failing entry (Failure or raised exception)
        only affects its own slot.

        Returns:
            One Success/Failure per entry, in input order.
        """
        context = ExecutionContext.coerce(context).fork(bulk=True)
        commands = list(commands)
        self._logger.info("bulk_execution_started", size=len(commands))

        results = await asyncio.gather(
            *(
                self._execute_isolated(context, index, entry, options)
                for index, entry in enumerate(commands)
            )
        )

        failed = sum(1 for result in results if isinstance(result, Failure))
        self._logger.info(
            "bulk_execution_completed", size=len(results), failed=failed
        )
        return list(results)

    async def _execute_isolated(
        self,
        context: ExecutionContext,
        index: int,
        raw_entry: BulkCommand | Mapping[str, Any],
        options: OptionLayer,
    ) -> Result[Any, Any]:
        command = (
            raw_entry.get("command")
            if isinstance(raw_entry, Mapping)
            else getattr(raw_entry, "command", raw_entry)
        )
        name = command if isinstance(command, str) else repr(command)
        try:
            entry = BulkCommand.coerce(raw_entry)
            merged = {**(options or {}), **entry.options}
            return await self.execute(context, entry.command, entry.params, merged)
        except Exception as e:
            self._logger.warning(
                "bulk_command_failed",
                index=index,
                command=name,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return Failure(error=e)

    def _base_options(self) -> DispatchOptions:
        return DispatchOptions.resolve(self._options)
