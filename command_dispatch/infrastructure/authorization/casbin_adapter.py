"""Casbin implementation of AccessControlProtocol.

Maps a dispatch authorization query onto a Casbin request:

    role      -> r.sub (role inheritance through ``g`` rules)
    namespace -> r.obj
    operation -> r.act

The bundled ``model.conf`` allows ``*`` in policy objects and actions:

    p, ADMIN, *, *
    p, USER, hello, say_hello
    g, MANAGER, USER

Enforcer errors are NOT swallowed: they propagate to the dispatch
pipeline, which hands them to the caller unchanged.
"""

from pathlib import Path
from typing import TYPE_CHECKING

import casbin

from command_dispatch.core.config import get_settings
from command_dispatch.core.container import get_logger

if TYPE_CHECKING:
    from command_dispatch.domain.protocols.logger_protocol import LoggerProtocol

MODEL_PATH = Path(__file__).with_name("model.conf")


class CasbinAccessControl:
    """Casbin-based access-control adapter.

    Attributes:
        _enforcer: Casbin enforcer with model and policy loaded.
        _logger: Structured logger.
    """

    def __init__(
        self,
        enforcer: casbin.Enforcer,
        logger: "LoggerProtocol | None" = None,
    ) -> None:
        """Initialize adapter.

        Args:
            enforcer: Pre-loaded Casbin enforcer.
            logger: Structured logger (defaults to the container logger).
        """
        self._enforcer = enforcer
        self._logger = logger or get_logger()

    @classmethod
    def from_files(
        cls,
        policy_path: str | Path,
        model_path: str | Path | None = None,
        *,
        logger: "LoggerProtocol | None" = None,
    ) -> "CasbinAccessControl":
        """Build an adapter from a policy CSV and a model file.

        Args:
            policy_path: Casbin policy CSV.
            model_path: Casbin model; falls back to settings, then the
                bundled model.conf.
            logger: Structured logger.
        """
        model = model_path or get_settings().casbin_model_path or MODEL_PATH
        enforcer = casbin.Enforcer(str(model), str(policy_path))
        return cls(enforcer, logger=logger)

    @property
    def enforcer(self) -> casbin.Enforcer:
        return self._enforcer

    async def query(self, role: str, resource: str, operation: str) -> bool:
        """Check whether ``role`` may run ``operation`` on ``resource``.

        Note: enforce() is synchronous in Casbin.
        """
        allowed = bool(self._enforcer.enforce(role, resource, operation))
        self._logger.debug(
            "authorization_check",
            role=role,
            resource=resource,
            operation=operation,
            allowed=allowed,
        )
        return allowed
