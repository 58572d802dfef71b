"""AliasEntry value object.

Maps a public command name to a concrete internal command. Extra fields
given at registration are carried verbatim onto the resolved descriptor.
Registered once at setup and read-only afterwards.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True, slots=True, kw_only=True)
class AliasEntry:
    """Registered alias.

    Attributes:
        name: Public command name.
        command: Concrete ``namespace.operation`` target. Aliases do not chain.
        options: Pass-through fields (read-only view).
    """

    name: str
    command: str
    options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_target(cls, name: str, target: "str | Mapping[str, Any]") -> "AliasEntry":
        """Build an entry from a command string or an options mapping.

        Args:
            name: Public alias name.
            target: ``"ns.op"`` or ``{"command": "ns.op", **extra}``.

        Returns:
            AliasEntry instance.

        Raises:
            ValueError: If the target carries no command string.
        """
        if isinstance(target, str):
            return cls(name=name, command=target)

        extra = dict(target)
        command = extra.pop("command", None)
        if not isinstance(command, str) or not command:
            raise ValueError(f"Alias {name!r} must define a 'command' string")
        return cls(name=name, command=command, options=MappingProxyType(extra))
