"""
Configuration options and their resolution.

For condition expressions, use chipspec.expr.
"""

from .constraints import ConstraintValidator, ConstraintViolation, Validator, ValidatorSpec
from .option import (
    ConditionalConstraint,
    ConditionalValue,
    ConfigDocument,
    ConfigOption,
    Stability,
    ValueType,
)
from .overrides import collect_overrides, env_prefix, parse_override
from .resolver import OptionResolver, Resolution, ResolutionStatus

__all__ = [
    # Constraints
    "ConstraintValidator",
    "ConstraintViolation",
    "Validator",
    "ValidatorSpec",
    # Options
    "ConfigOption",
    "ConfigDocument",
    "ConditionalValue",
    "ConditionalConstraint",
    "Stability",
    "ValueType",
    # Resolution
    "OptionResolver",
    "Resolution",
    "ResolutionStatus",
    # Overrides
    "collect_overrides",
    "env_prefix",
    "parse_override",
]
