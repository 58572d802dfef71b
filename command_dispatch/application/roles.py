"""Role lookup against the opaque caller payload.

How a role is established is outside dispatch; the pipeline only reads
one. The lookup is pluggable through the ``role_lookup`` option.
"""

from collections.abc import Mapping
from typing import Any


def _read(source: Any, key: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(key)
    return getattr(source, key, None)


def default_role_lookup(caller: Any) -> str | None:
    """Read the acting role from the caller payload.

    Looks at ``caller.role`` first, then ``caller.user.role``; both
    mapping keys and attributes are accepted.

    Args:
        caller: Caller payload from the execution context.

    Returns:
        Role string, or None when the payload carries no role.

    Example:
        >>> default_role_lookup({"user": {"role": "ADMIN"}})
        'ADMIN'
    """
    if caller is None:
        return None

    role = _read(caller, "role")
    if role:
        return role

    user = _read(caller, "user")
    if user is None:
        return None
    return _read(user, "role") or None
