"""Protocols (ports) for external collaborators.

Infrastructure adapters implement these structurally (PEP 544); nothing
inherits from them.
"""

from command_dispatch.domain.protocols.access_control_protocol import (
    AccessControlProtocol,
)
from command_dispatch.domain.protocols.logger_protocol import LoggerProtocol
from command_dispatch.domain.protocols.validator_protocol import ValidatorProtocol

__all__ = [
    "AccessControlProtocol",
    "LoggerProtocol",
    "ValidatorProtocol",
]
