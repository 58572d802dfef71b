"""Parameter validation adapters."""

from command_dispatch.infrastructure.validation.constraint_validator import (
    ConstraintValidator,
    compile_constraints,
)

__all__ = ["ConstraintValidator", "compile_constraints"]
