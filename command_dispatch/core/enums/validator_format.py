"""Output shapes for parameter validation failures."""

from enum import Enum


class ValidatorFormat(str, Enum):
    """Validation failure formats.

    - ERROR_FORMATTER: INVALID_PARAMS error built by the configured error formatter
    - GROUPED: {field: [messages]}
    - FLAT: [messages]
    - DETAILED: [{attribute, error, value}]
    """

    ERROR_FORMATTER = "error_formatter"
    GROUPED = "grouped"
    FLAT = "flat"
    DETAILED = "detailed"
