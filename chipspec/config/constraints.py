"""
Value constraints for configuration options.

A constraint names a validator kind (``enumeration``, ``positive_integer``,
...) and its parameters. ``ConstraintValidator`` looks the kind up in a
registry and applies it to a concrete value, returning a
``ConstraintViolation`` instead of raising so callers can collect results.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from pydantic import Field, model_validator

from chipspec.errors import UnknownValidatorError
from chipspec.model.base import StrictModel
from chipspec.utils import parse_int

# (parameters, value) -> error message, or None if the value is accepted
CheckFunc = Callable[[Any, Any], Optional[str]]
DescribeFunc = Callable[[Any], str]


class ValidatorSpec(StrictModel):
    """``{validator: <kind>, value: <parameters>}`` as written in documents.

    Parameters of the built-in kinds are normalized here so malformed
    parameters are reported when the document is loaded. Unknown kinds are
    kept as-is and rejected when a value is validated.
    """

    validator: str = Field(..., description="Validator kind")
    value: Any = Field(default=None, description="Validator parameters")

    @model_validator(mode="before")
    @classmethod
    def normalize_parameters(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        kind = data.get("validator")
        params = data.get("value")
        if kind == "enumeration":
            if not isinstance(params, (list, tuple)) or not params:
                raise ValueError("enumeration requires a non-empty list of allowed values")
            data = {**data, "value": tuple(str(p) for p in params)}
        elif kind in ("range", "integer_in_range"):
            data = {**data, "value": _range_bounds(params)}
        return data

    def __str__(self) -> str:
        if self.value is None:
            return self.validator
        return f"{self.validator}({self.value})"


def _range_bounds(params: Any) -> tuple:
    if isinstance(params, dict):
        if "min" in params:
            low, high = params.get("min"), params.get("max")
        else:
            low, high = params.get("start"), params.get("end")
    elif isinstance(params, (list, tuple)) and len(params) == 2:
        low, high = params
    else:
        raise ValueError("range requires [min, max] or {min, max}")
    low, high = parse_int(low), parse_int(high)
    if not all(isinstance(b, int) and not isinstance(b, bool) for b in (low, high)):
        raise ValueError(f"range bounds must be integers, got {low!r} and {high!r}")
    if low > high:
        raise ValueError(f"range minimum {low} is greater than maximum {high}")
    return (low, high)


@dataclass(frozen=True)
class ConstraintViolation:
    """A value rejected by its validator."""

    validator: str
    value: Any
    message: str
    expected: str


@dataclass(frozen=True)
class Validator:
    name: str
    check: CheckFunc
    describe: DescribeFunc


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_enumeration(allowed: Any, value: Any) -> Optional[str]:
    if str(value) not in allowed:
        return f"'{value}' is not an allowed value"
    return None


def _describe_enumeration(allowed: Any) -> str:
    return "one of: " + ", ".join(f"'{a}'" for a in allowed)


def _check_positive_integer(_: Any, value: Any) -> Optional[str]:
    if not _is_int(value) or value <= 0:
        return f"{value!r} is not a positive integer"
    return None


def _check_non_negative_integer(_: Any, value: Any) -> Optional[str]:
    if not _is_int(value) or value < 0:
        return f"{value!r} is not a non-negative integer"
    return None


def _check_range(bounds: Any, value: Any) -> Optional[str]:
    low, high = bounds
    if not _is_int(value) or not low <= value <= high:
        return f"{value!r} is outside the allowed range"
    return None


def _describe_range(bounds: Any) -> str:
    return f"an integer in [{bounds[0]}, {bounds[1]}]"


BUILTIN_VALIDATORS = (
    Validator("enumeration", _check_enumeration, _describe_enumeration),
    Validator("positive_integer", _check_positive_integer, lambda _: "an integer > 0"),
    Validator(
        "non_negative_integer", _check_non_negative_integer, lambda _: "an integer >= 0"
    ),
    Validator("range", _check_range, _describe_range),
    Validator("integer_in_range", _check_range, _describe_range),
)


class ConstraintValidator:
    """Registry-backed validator for resolved option values."""

    def __init__(self, validators: Optional[Dict[str, Validator]] = None):
        if validators is None:
            validators = {v.name: v for v in BUILTIN_VALIDATORS}
        self._validators: Dict[str, Validator] = dict(validators)

    def register(self, name: str, check: CheckFunc, describe: DescribeFunc) -> None:
        """Add or replace a validator kind."""
        self._validators[name] = Validator(name, check, describe)

    def _get(self, kind: str) -> Validator:
        try:
            return self._validators[kind]
        except KeyError:
            raise UnknownValidatorError(kind, self._validators) from None

    def describe(self, spec: ValidatorSpec) -> str:
        """Human-readable statement of what the validator expects."""
        return self._get(spec.validator).describe(spec.value)

    def validate(self, spec: ValidatorSpec, value: Any) -> Optional[ConstraintViolation]:
        """
        Apply a validator to a value.

        Returns:
            None if the value is accepted, otherwise the violation

        Raises:
            UnknownValidatorError: If the validator kind is not registered
        """
        validator = self._get(spec.validator)
        message = validator.check(spec.value, value)
        if message is None:
            return None
        return ConstraintViolation(
            validator=spec.validator,
            value=value,
            message=message,
            expected=validator.describe(spec.value),
        )
