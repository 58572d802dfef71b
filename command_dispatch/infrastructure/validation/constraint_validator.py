"""Pydantic-backed parameter validator.

Accepts two constraint forms:
- A pydantic ``BaseModel`` subclass, validated as-is.
- A declarative mapping in the validate.js style, compiled once into a
  pydantic model with ``create_model``:

    {
        "user_name": {"presence": True, "type": "string", "length": {"maximum": 40}},
        "age": {"numericality": {"greater_than_or_equal_to": 0, "only_integer": True}},
        "color": {"inclusion": ["red", "green"]},
        "code": {"format": {"pattern": "[A-Z]{3}"}},
    }

Rules other than ``presence`` are skipped for absent or None values.
Parameters without constraints pass through untouched.
"""

import re
from collections.abc import Callable, Mapping, Sequence
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    create_model,
)
from pydantic_core import PydanticCustomError

from command_dispatch.core.enums import ErrorCode, ValidatorFormat
from command_dispatch.core.errors import INVALID_PARAMS_MESSAGE, ErrorFormatter
from command_dispatch.core.result import Failure, Result, Success

# validate.js type names -> pydantic types
TYPES: dict[str, Any] = {
    "string": StrictStr,
    "integer": StrictInt,
    "number": StrictInt | StrictFloat,
    "boolean": StrictBool,
    "array": list[Any],
    "object": dict[str, Any],
}

# validate.js regex flag letters; g, u and y have no effect on a full match
REGEX_FLAGS: dict[str, re.RegexFlag] = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "g": re.NOFLAG,
    "u": re.NOFLAG,
    "y": re.NOFLAG,
}

COMPARISONS: dict[str, tuple[Callable[[Any, Any], bool], str]] = {
    "greater_than": (lambda v, n: v > n, "must be greater than {}"),
    "greater_than_or_equal_to": (
        lambda v, n: v >= n,
        "must be greater than or equal to {}",
    ),
    "less_than": (lambda v, n: v < n, "must be less than {}"),
    "less_than_or_equal_to": (lambda v, n: v <= n, "must be less than or equal to {}"),
    "equal_to": (lambda v, n: v == n, "must be equal to {}"),
}


class _ConstraintModel(BaseModel):
    model_config = ConfigDict(extra="allow")


def _violation(reason: str) -> PydanticCustomError:
    return PydanticCustomError("constraint", "{reason}", {"reason": reason})


def _presence_check(allow_empty: bool) -> Callable[[Any], Any]:
    def check(value: Any) -> Any:
        if value is None:
            raise _violation("can't be blank")
        if not allow_empty and isinstance(value, (str, list, dict)):
            if not (value.strip() if isinstance(value, str) else value):
                raise _violation("can't be blank")
        return value

    return check


def _length_check(rule: Mapping[str, int]) -> Callable[[Any], Any]:
    exact = rule.get("is")
    minimum = rule.get("minimum")
    maximum = rule.get("maximum")

    def check(value: Any) -> Any:
        if value is None:
            return value
        if not hasattr(value, "__len__"):
            raise _violation("has an incorrect length")
        size = len(value)
        if exact is not None and size != exact:
            raise _violation(f"is the wrong length (should be {exact} characters)")
        if minimum is not None and size < minimum:
            raise _violation(f"is too short (minimum is {minimum} characters)")
        if maximum is not None and size > maximum:
            raise _violation(f"is too long (maximum is {maximum} characters)")
        return value

    return check


def _snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _numericality_check(rule: Mapping[str, Any]) -> Callable[[Any], Any]:
    rule = {_snake(key): value for key, value in rule.items()}
    only_integer = bool(rule.get("only_integer"))

    def check(value: Any) -> Any:
        if value is None:
            return value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise _violation("is not a number")
        if only_integer and not isinstance(value, int):
            raise _violation("must be an integer")
        for name, (compare, message) in COMPARISONS.items():
            if name in rule and not compare(value, rule[name]):
                raise _violation(message.format(rule[name]))
        return value

    return check


def _regex_flags(flags: int | str) -> int:
    if not isinstance(flags, str):
        return int(flags)
    compiled = re.NOFLAG
    for letter in flags:
        if letter not in REGEX_FLAGS:
            raise ValueError(f"Unsupported regex flag: {letter!r}")
        compiled |= REGEX_FLAGS[letter]
    return compiled


def _format_check(rule: str | Mapping[str, Any]) -> Callable[[Any], Any]:
    if isinstance(rule, str):
        rule = {"pattern": rule}
    pattern = re.compile(rule["pattern"], _regex_flags(rule.get("flags", 0)))
    message = rule.get("message", "is invalid")

    def check(value: Any) -> Any:
        if value is None:
            return value
        if not isinstance(value, str) or pattern.fullmatch(value) is None:
            raise _violation(message)
        return value

    return check


def _inclusion_check(allowed: Sequence[Any]) -> Callable[[Any], Any]:
    def check(value: Any) -> Any:
        if value is not None and value not in allowed:
            raise _violation(f"{value} is not included in the list")
        return value

    return check


def _field_definition(rules: Mapping[str, Any]) -> tuple[Any, Any]:
    base: Any = TYPES[rules["type"]] if "type" in rules else Any
    validators: list[Any] = []

    presence = rules.get("presence")
    if presence:
        allow_empty = True
        if isinstance(presence, Mapping):
            allow_empty = presence.get("allow_empty", presence.get("allowEmpty", True))
        validators.append(BeforeValidator(_presence_check(allow_empty)))

    if "length" in rules:
        validators.append(AfterValidator(_length_check(rules["length"])))
    if "numericality" in rules:
        rule = rules["numericality"]
        validators.append(
            AfterValidator(_numericality_check(rule if isinstance(rule, Mapping) else {}))
        )
    if "format" in rules:
        validators.append(AfterValidator(_format_check(rules["format"])))
    if "inclusion" in rules:
        validators.append(AfterValidator(_inclusion_check(tuple(rules["inclusion"]))))

    if presence:
        annotation = Annotated[base, *validators] if validators else base
        return annotation, ...
    optional = base | None if base is not Any else Any
    annotation = Annotated[optional, *validators] if validators else optional
    return annotation, None


def compile_constraints(constraints: Mapping[str, Mapping[str, Any]]) -> type[BaseModel]:
    """Compile a declarative constraint mapping into a pydantic model.

    Raises:
        KeyError: If a ``type`` rule names an unknown type.
        ValueError: If a ``format`` rule carries an unsupported flag letter.
    """
    fields = {
        name: _field_definition(rules or {}) for name, rules in constraints.items()
    }
    return create_model("ParamsConstraints", __base__=_ConstraintModel, **fields)


class ConstraintValidator:
    """Validate handler params against declarative constraints.

    Compiled models are cached per constraint object.
    """

    def __init__(self) -> None:
        self._compiled: dict[int, tuple[Any, type[BaseModel]]] = {}

    def model_for(self, constraints: Any) -> type[BaseModel]:
        """Return the pydantic model for ``constraints``."""
        if isinstance(constraints, type) and issubclass(constraints, BaseModel):
            return constraints

        cached = self._compiled.get(id(constraints))
        if cached is not None and cached[0] is constraints:
            return cached[1]

        model = compile_constraints(constraints)
        self._compiled[id(constraints)] = (constraints, model)
        return model

    async def validate(
        self,
        params: Mapping[str, Any],
        constraints: Any,
        *,
        format: ValidatorFormat,
        error_formatter: ErrorFormatter,
    ) -> Result[dict[str, Any], Any]:
        """Validate ``params``.

        Returns:
            Success(normalized params) or Failure(violations in ``format``).
        """
        model = self.model_for(constraints)
        declared = None if isinstance(constraints, type) else constraints
        try:
            validated = model.model_validate(dict(params or {}))
        except ValidationError as e:
            violations: list[dict[str, Any]] = []
            for error in e.errors():
                entry = _violation_entry(error, declared)
                if entry not in violations:
                    violations.append(entry)
            return Failure(error=_format(violations, format, error_formatter))
        return Success(value=validated.model_dump(exclude_unset=True))


def _violation_entry(
    error: Mapping[str, Any], declared: Mapping[str, Any] | None
) -> dict[str, Any]:
    attribute = str(error["loc"][0]) if error["loc"] else "params"
    kind = error["type"]
    if kind == "missing":
        text = "can't be blank"
    elif kind == "constraint":
        text = error.get("ctx", {}).get("reason", error["msg"])
    elif declared and "type" in (declared.get(attribute) or {}):
        text = f"must be of type {declared[attribute]['type']}"
    else:
        text = error["msg"]
    return {
        "attribute": attribute,
        "error": f"{attribute} {text}",
        "value": error.get("input") if kind != "missing" else None,
    }


def _format(
    violations: list[dict[str, Any]],
    format: ValidatorFormat,
    error_formatter: ErrorFormatter,
) -> Any:
    match format:
        case ValidatorFormat.FLAT:
            return [violation["error"] for violation in violations]
        case ValidatorFormat.DETAILED:
            return violations
        case ValidatorFormat.GROUPED:
            grouped: dict[str, list[str]] = {}
            for violation in violations:
                grouped.setdefault(violation["attribute"], []).append(violation["error"])
            return grouped
        case _:
            details: dict[str, str] = {}
            for violation in violations:
                details.setdefault(violation["attribute"], violation["error"])
            return error_formatter(
                ErrorCode.INVALID_PARAMS, INVALID_PARAMS_MESSAGE, details
            )
