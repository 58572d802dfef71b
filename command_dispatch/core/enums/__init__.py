"""Core enums package.

Exports all core-level enums for convenient importing.

Usage:
    from command_dispatch.core.enums import ErrorCode, Environment, ValidatorFormat
"""

from command_dispatch.core.enums.environment import Environment
from command_dispatch.core.enums.error_code import ErrorCode
from command_dispatch.core.enums.validator_format import ValidatorFormat

__all__ = ["ErrorCode", "Environment", "ValidatorFormat"]
