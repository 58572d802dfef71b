"""Field-visibility filtering by role.

Orthogonal to dispatch: handlers call ``redact_fields`` from their
``after()`` hook to shape output for the acting role.
"""

from collections.abc import Collection, Mapping
from typing import Any

# Role key applied when the acting role has no entry of its own
ANY_ROLE = "*"


def redact_fields(
    value: Any,
    role: str,
    visibility: Mapping[str, Collection[str]],
) -> Any:
    """Drop the fields ``role`` may not see.

    Args:
        value: Mapping, or list/tuple of mappings. Anything else is
            returned unchanged.
        role: Acting role.
        visibility: Role -> visible field names. ``"*"`` is the fallback
            entry. Without a matching entry the value is returned unchanged.

    Returns:
        Filtered copy of ``value``.

    Example:
        >>> redact_fields({"id": 1, "email": "a@b"}, "GUEST", {"GUEST": ["id"]})
        {'id': 1}
    """
    allowed = visibility.get(role, visibility.get(ANY_ROLE))
    if allowed is None:
        return value

    if isinstance(value, Mapping):
        return {key: item for key, item in value.items() if key in allowed}
    if isinstance(value, (list, tuple)):
        return type(value)(redact_fields(item, role, visibility) for item in value)
    return value
