"""Shared pipeline component for HandlerGroup and Handler.

Holds the per-invocation context, the resolved options snapshot and the
logger, and implements the access-control stage both levels run.

Access control:
1. ACL adapter configured: query it once per invocation and memoize the
   decision on the CommandDescriptor (a later check on the same
   descriptor is a no-op).
2. No ACL adapter: static allow/deny role lists. Sources, in priority
   order: call options, the component's own class attribute, the owning
   HandlerGroup. An allow list wins over a deny list; neither means
   access is granted.
"""

from collections.abc import Mapping
from typing import Any, ClassVar

from command_dispatch.application.options import DispatchOptions, OptionLayer
from command_dispatch.core.container import get_logger
from command_dispatch.core.enums import ErrorCode
from command_dispatch.core.result import Failure, Result, Success
from command_dispatch.domain.entities import CommandDescriptor, ExecutionContext
from command_dispatch.domain.protocols.logger_protocol import LoggerProtocol


def as_result(value: Any) -> Result[Any, Any]:
    """Wrap a plain hook return value into Success; Results pass through."""
    if isinstance(value, (Success, Failure)):
        return value
    return Success(value=value)


class PipelineComponent:
    """Base for components that run inside one invocation.

    Attributes:
        allow_roles: Roles allowed when no ACL adapter is configured.
        deny_roles: Roles denied when no ACL adapter is configured.
    """

    allow_roles: ClassVar[tuple[str, ...] | None] = None
    deny_roles: ClassVar[tuple[str, ...] | None] = None

    def __init__(
        self,
        context: ExecutionContext | Any = None,
        options: DispatchOptions | OptionLayer = None,
        *,
        logger: LoggerProtocol | None = None,
    ) -> None:
        self.context = ExecutionContext.coerce(context)
        self.options = self._snapshot(options)
        self.logger = logger or get_logger()

    @staticmethod
    def _snapshot(options: DispatchOptions | OptionLayer) -> DispatchOptions:
        if isinstance(options, DispatchOptions):
            return options
        return DispatchOptions.resolve(options)

    @property
    def owner(self) -> "PipelineComponent | None":
        """Component whose role lists apply when this one declares none."""
        return None

    def pick_role(self) -> str:
        """Acting role for this invocation (falls back to ``default_role``)."""
        role = self.options.role_lookup(self.context.caller)
        return role or self.options.default_role

    def fail(
        self,
        code: ErrorCode,
        message: str | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> Failure[Any]:
        """Build a Failure through the configured error formatter."""
        return Failure(error=self.options.error_formatter(code, message, details))

    async def check_access(self) -> Result[CommandDescriptor | None, Any]:
        """Authorize the current invocation.

        Returns:
            Success(descriptor) when access is granted or not checked.
            Failure(ACCESS_DENIED) when the role is denied.

        Raises:
            Exception: Whatever the ACL adapter raises, unchanged.
        """
        descriptor = self.context.command
        acl = self.options.acl
        if acl is None:
            return self._check_role_lists(descriptor)
        if descriptor is None or descriptor.is_allowed is True:
            return Success(value=descriptor)

        role = self.pick_role()
        if descriptor.is_allowed is False:
            return self._access_denied(role, {"command": descriptor.to_dict()})

        resource, operation = descriptor.access_target(
            check_on_alias=self.options.check_access_on_aliases
        )
        try:
            allowed = await acl.query(role, resource, operation)
        except Exception as e:
            self.logger.error(
                "access_check_error",
                error=e,
                role=role,
                resource=resource,
                operation=operation,
            )
            raise

        descriptor.record_access(bool(allowed))
        if not allowed:
            return self._access_denied(
                role,
                {"command": descriptor.to_dict()},
                resource=resource,
                operation=operation,
            )

        self.logger.debug(
            "access_granted", role=role, resource=resource, operation=operation
        )
        return Success(value=descriptor)

    def _role_list(self, name: str) -> tuple[str, ...] | None:
        configured = getattr(self.options, name)
        if configured is not None:
            return configured
        declared = getattr(self, name)
        if declared is not None:
            return tuple(declared)
        owner = self.owner
        if owner is not None and getattr(owner, name) is not None:
            return tuple(getattr(owner, name))
        return None

    def _check_role_lists(
        self, descriptor: CommandDescriptor | None
    ) -> Result[CommandDescriptor | None, Any]:
        allow_roles = self._role_list("allow_roles")
        deny_roles = self._role_list("deny_roles")
        if allow_roles is None and deny_roles is None:
            return Success(value=descriptor)

        role = self.pick_role()
        if allow_roles is not None:
            if role in allow_roles:
                return Success(value=descriptor)
            return self._access_denied(
                role, {"currentRole": role, "allowRoles": list(allow_roles)}
            )

        if role in deny_roles:
            return self._access_denied(
                role, {"currentRole": role, "denyRoles": list(deny_roles)}
            )
        return Success(value=descriptor)

    def _access_denied(
        self, role: str, details: dict[str, Any], **log_context: Any
    ) -> Failure[Any]:
        self.logger.info("access_denied", role=role, **log_context)
        return self.fail(
            ErrorCode.ACCESS_DENIED,
            f"This action not allowed for role {role}.",
            {"currentRole": role, **details},
        )
