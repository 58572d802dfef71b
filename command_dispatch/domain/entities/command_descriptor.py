"""CommandDescriptor entity.

Resolved metadata for exactly one invocation. Created by the Dispatcher
during resolution, enriched once by the HandlerGroup with the resolved
handler, and carries the authorization memo for the rest of the
invocation.

Lifecycle:
1. Dispatcher.parse_command_name() creates it (command, group, handler names)
2. Dispatcher.handle_alias() stamps alias name and alias options
3. HandlerGroup.get_handler_instance() binds group and handler instances
4. check_access() records the access decision (single write)
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from uuid import UUID

from uuid_extensions import uuid7


@dataclass(kw_only=True)
class CommandDescriptor:
    """Resolved invocation metadata.

    Attributes:
        command: Concrete command string that was parsed (alias target for
            aliased invocations).
        group_name: Namespace segment (HandlerGroup registry key).
        handler_name: Operation segment (Handler registry key).
        group_class: HandlerGroup class registered under ``group_name``.
        original_command: Command string exactly as the caller sent it.
        alias_name: Alias the invocation was reached through, if any.
        alias_options: Pass-through fields stored with the alias.
        invocation_id: UUIDv7 correlating log lines of this invocation.
        group: HandlerGroup instance driving this invocation.
        handler_class: Resolved Handler class.
        handler: Handler instance executing this invocation.
    """

    command: str
    group_name: str
    handler_name: str
    group_class: type
    original_command: str | None = None
    alias_name: str | None = None
    alias_options: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType({})
    )
    invocation_id: UUID = field(default_factory=uuid7)
    group: Any = None
    handler_class: type | None = None
    handler: Any = None
    _is_allowed: bool | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.original_command is None:
            self.original_command = self.command

    @property
    def is_allowed(self) -> bool | None:
        """Memoized access decision (None until checked)."""
        return self._is_allowed

    @property
    def via_alias(self) -> bool:
        """True when the invocation was reached through an alias."""
        return self.alias_name is not None

    def record_access(self, allowed: bool) -> None:
        """Record the access decision for this invocation.

        Args:
            allowed: Decision returned by the access-control adapter.

        Raises:
            RuntimeError: If a decision was already recorded.
        """
        if self._is_allowed is not None:
            raise RuntimeError(
                f"Access decision already recorded for {self.original_command}"
            )
        self._is_allowed = allowed

    def bind_handler(self, *, group: Any, handler_class: type, handler: Any) -> None:
        """Attach the resolved group and handler for later stages and callers."""
        self.group = group
        self.handler_class = handler_class
        self.handler = handler

    def access_target(self, *, check_on_alias: bool) -> tuple[str, str]:
        """Resource/operation pair to authorize.

        Args:
            check_on_alias: Authorize against the alias name's own
                namespace/operation when reached through an alias.

        Returns:
            (resource, operation) tuple.
        """
        if check_on_alias and self.alias_name is not None:
            parts = self.alias_name.split(".")
            if len(parts) >= 2:
                return parts[0], parts[1]
        return self.group_name, self.handler_name

    def to_dict(self) -> dict[str, Any]:
        """Serializable view used in ACCESS_DENIED details and logs."""
        return {
            "command": self.command,
            "originalCommand": self.original_command,
            "controllerName": self.group_name,
            "actionName": self.handler_name,
            "aliasName": self.alias_name,
            "invocationId": str(self.invocation_id),
        }
