"""Access-control adapters implementing AccessControlProtocol."""

from command_dispatch.infrastructure.authorization.casbin_adapter import (
    MODEL_PATH,
    CasbinAccessControl,
)
from command_dispatch.infrastructure.authorization.in_memory_adapter import (
    InMemoryAccessControl,
)

__all__ = ["MODEL_PATH", "CasbinAccessControl", "InMemoryAccessControl"]
