"""Result types for railway-oriented dispatch.

Every pipeline stage (validation, access control, handler logic,
post-processing) returns a Result instead of raising. The first Failure
short-circuits the rest of the pipeline and travels back to the caller
unchanged.

Usage:
    result = await dispatcher.execute(context, "hello.say_hello", params)
    match result:
        case Success(value):
            print(f"Result: {value}")
        case Failure(error):
            print(f"Error: {error}")
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful stage or command result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed stage or command result.

    Attributes:
        error: The error that stopped the pipeline.
    """

    error: E


# Type alias for Result union
Result: TypeAlias = Success[T] | Failure[E]
