"""Layered per-invocation options.

Options are resolved once per invocation into an immutable snapshot:

    settings defaults < Dispatcher base < HandlerGroup < call site < injected

Each layer is a partial mapping. A key present in a higher layer wins,
including an explicit None. Unknown keys are kept in ``extra``. The
camelCase keys accepted by earlier releases are mapped onto their
snake_case fields.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, TypeAlias

from command_dispatch.application.roles import default_role_lookup
from command_dispatch.core.config import get_settings
from command_dispatch.core.enums import ValidatorFormat
from command_dispatch.core.errors import ErrorFormatter, default_error_formatter

if TYPE_CHECKING:
    from command_dispatch.domain.protocols.access_control_protocol import (
        AccessControlProtocol,
    )

OptionLayer: TypeAlias = Mapping[str, Any] | None

LEGACY_KEYS: dict[str, str] = {
    "validatorFormat": "validator_format",
    "defaultRole": "default_role",
    "errorFormater": "error_formatter",
    "errorFormatter": "error_formatter",
    "checkAccessOnAliases": "check_access_on_aliases",
    "allowRoles": "allow_roles",
    "denyRoles": "deny_roles",
    "roleLookup": "role_lookup",
}

# Format names used by earlier releases
LEGACY_FORMATS: dict[str, ValidatorFormat] = {
    "errorFormater": ValidatorFormat.ERROR_FORMATTER,
    "errorFormatter": ValidatorFormat.ERROR_FORMATTER,
}


def _coerce_format(value: Any) -> ValidatorFormat:
    if isinstance(value, ValidatorFormat):
        return value
    if value in LEGACY_FORMATS:
        return LEGACY_FORMATS[value]
    return ValidatorFormat(value)


def _coerce_roles(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True, kw_only=True)
class DispatchOptions:
    """Immutable options snapshot for one invocation.

    Attributes:
        validator_format: Output shape for validation failures.
        default_role: Role used when the context carries none.
        error_formatter: Builds pipeline errors from (code, message, details).
        acl: Access-control adapter; None disables ACL checks.
        check_access_on_aliases: Authorize aliased commands against the alias name.
        role_lookup: Reads the role from the caller payload.
        allow_roles: Static allow list (used when no ACL adapter is set).
        deny_roles: Static deny list (used when no ACL adapter is set).
        extra: Unrecognized keys, including alias pass-through fields.
    """

    validator_format: ValidatorFormat = ValidatorFormat.ERROR_FORMATTER
    default_role: str = "UNAUTHORIZED"
    error_formatter: ErrorFormatter = default_error_formatter
    acl: "AccessControlProtocol | None" = None
    check_access_on_aliases: bool = False
    role_lookup: Callable[[Any], str | None] = default_role_lookup
    allow_roles: tuple[str, ...] | None = None
    deny_roles: tuple[str, ...] | None = None
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def defaults(cls) -> "DispatchOptions":
        """Built-in defaults, seeded from settings."""
        settings = get_settings()
        return cls(
            validator_format=settings.validator_format,
            default_role=settings.default_role,
            check_access_on_aliases=settings.check_access_on_aliases,
        )

    @classmethod
    def resolve(cls, *layers: OptionLayer) -> "DispatchOptions":
        """Merge layers (lowest first) over the built-in defaults."""
        return cls.defaults().merge(*layers)

    def merge(self, *layers: OptionLayer) -> "DispatchOptions":
        """Return a new snapshot with ``layers`` applied in order.

        Args:
            *layers: Partial option mappings, lowest priority first. None
                layers are skipped.

        Returns:
            DispatchOptions: New snapshot; ``self`` is unchanged.
        """
        known = {f.name for f in fields(self)} - {"extra"}
        changes: dict[str, Any] = {}
        extra = dict(self.extra)

        for layer in _present(layers):
            for key, value in layer.items():
                name = LEGACY_KEYS.get(key, key)
                if name == "extra":
                    extra.update(value or {})
                elif name in known:
                    changes[name] = value
                else:
                    extra[key] = value

        if "validator_format" in changes:
            changes["validator_format"] = _coerce_format(changes["validator_format"])
        for name in ("allow_roles", "deny_roles"):
            if name in changes:
                changes[name] = _coerce_roles(changes[name])

        return replace(self, **changes, extra=MappingProxyType(extra))

    def as_layer(self) -> dict[str, Any]:
        """Snapshot as a mapping layer (for handing options down the pipeline)."""
        layer = {f.name: getattr(self, f.name) for f in fields(self)}
        layer["extra"] = dict(self.extra)
        return layer


def _present(layers: Iterable[OptionLayer]) -> Iterable[Mapping[str, Any]]:
    return (layer for layer in layers if layer)
