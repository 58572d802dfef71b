"""In-memory implementation of AccessControlProtocol.

Static allow-set of (role, resource, operation) rules; ``*`` matches any
resource or operation. Suited to tests and small setups without a policy
store. Every query is recorded in ``queries``.
"""

WILDCARD = "*"


class InMemoryAccessControl:
    """Allow-set access control.

    Example:
        acl = InMemoryAccessControl()
        acl.allow("ADMIN")
        acl.allow("USER", "hello", "say_hello")
        await acl.query("USER", "hello", "say_bye")  # False
    """

    def __init__(self, rules: set[tuple[str, str, str]] | None = None) -> None:
        self._rules: set[tuple[str, str, str]] = set(rules or ())
        self.queries: list[tuple[str, str, str]] = []

    def allow(
        self, role: str, resource: str = WILDCARD, operation: str = WILDCARD
    ) -> None:
        """Add an allow rule."""
        self._rules.add((role, resource, operation))

    def revoke(
        self, role: str, resource: str = WILDCARD, operation: str = WILDCARD
    ) -> None:
        """Remove an allow rule (no-op when absent)."""
        self._rules.discard((role, resource, operation))

    async def query(self, role: str, resource: str, operation: str) -> bool:
        self.queries.append((role, resource, operation))
        return any(
            rule_role == role
            and rule_resource in (resource, WILDCARD)
            and rule_operation in (operation, WILDCARD)
            for rule_role, rule_resource, rule_operation in self._rules
        )
