"""Access-control protocol (port) consulted during authorization.

The dispatch pipeline only needs a yes/no answer for a
(role, resource, operation) triple. How roles and policies are stored is
owned by the adapter (Casbin, in-memory, a remote policy service).

Implementations:
    - CasbinAccessControl: Casbin enforcer with a model/policy pair
    - InMemoryAccessControl: static allow-set (testing, small setups)

Usage:
    allowed = await acl.query("ADMIN", "hello", "say_hello")
"""

from typing import Protocol


class AccessControlProtocol(Protocol):
    """Protocol for access-control engines.

    Error Handling:
        Adapters raise on backend failure. The pipeline does not catch or
        reformat these errors; they reach the caller unchanged.
    """

    async def query(self, role: str, resource: str, operation: str) -> bool:
        """Decide whether ``role`` may run ``operation`` on ``resource``.

        Args:
            role: Acting role, as resolved from the execution context.
            resource: Namespace segment of the command (HandlerGroup name).
            operation: Operation segment of the command (Handler name).

        Returns:
            bool: True if allowed, False if denied.
        """
        ...
