"""
Configuration option models.

An option carries ordered default rules, ordered constraint rules, an
optional activation condition and a stability marker. Rule order is
significant: the first rule whose condition holds wins, so rules are kept
in tuples exactly as authored.
"""

from enum import Enum
from typing import Any, Optional, Tuple, Union

from pydantic import Field, field_validator, model_validator

from chipspec.errors import ExpressionSyntaxError
from chipspec.expr import Expression, coerce_expression, parse_literal
from chipspec.model.base import StrictModel

from .constraints import ValidatorSpec

Value = Union[bool, int, str]


class Stability(str, Enum):
    """Whether an option's interface is finalized."""

    STABLE = "Stable"
    UNSTABLE = "Unstable"


class ValueType(str, Enum):
    """Type of an option's values, inferred from its defaults."""

    BOOL = "bool"
    INTEGER = "integer"
    STRING = "string"

    @classmethod
    def of(cls, value: Any) -> "ValueType":
        # bool is checked first because it is a subclass of int
        if isinstance(value, bool):
            return cls.BOOL
        if isinstance(value, int):
            return cls.INTEGER
        if isinstance(value, str):
            return cls.STRING
        raise ValueError(f"Unsupported option value {value!r}")

    def accepts(self, value: Any) -> bool:
        try:
            return ValueType.of(value) == self
        except ValueError:
            return False


class ConditionModel(StrictModel):
    """Base for rule entries with an optional ``if`` condition."""

    model_config = {
        **StrictModel.model_config,
        "arbitrary_types_allowed": True,
    }

    condition: Optional[Expression] = Field(
        default=None, alias="if", description="Absent means always"
    )

    @field_validator("condition", mode="before")
    @classmethod
    def parse_condition(cls, v: Any) -> Any:
        if v is None:
            return None
        try:
            return coerce_expression(v)
        except ExpressionSyntaxError as e:
            raise ValueError(e.reason) from e

    @property
    def is_unconditional(self) -> bool:
        return self.condition is None or self.condition.is_trivially_true


class ConditionalValue(ConditionModel):
    """One entry of the ``default`` list."""

    value: Value = Field(..., description="Typed literal")

    @field_validator("value", mode="before")
    @classmethod
    def unquote_literal(cls, v: Any) -> Any:
        """Turn ``'"generic"'`` into ``'generic'``; other values pass through."""
        if isinstance(v, str) and len(v) >= 2 and v.startswith('"') and v.endswith('"'):
            try:
                return parse_literal(v)
            except ExpressionSyntaxError as e:
                raise ValueError(e.reason) from e
        return v


class ConditionalConstraint(ConditionModel):
    """One entry of the ``constraints`` list."""

    validator: ValidatorSpec = Field(..., alias="type", description="Validator to apply")


class ConfigOption(StrictModel):
    """
    Named build-time configuration option.

    The value type is inferred from the default values, which must all
    share one type.
    """

    model_config = {
        **StrictModel.model_config,
        "arbitrary_types_allowed": True,
    }

    name: str = Field(..., description="Option name, e.g. 'timer-queue'")
    description: str = Field(default="", description="Option description")
    defaults: Tuple[ConditionalValue, ...] = Field(
        ..., alias="default", min_length=1, description="Ordered default rules"
    )
    constraints: Tuple[ConditionalConstraint, ...] = Field(
        default=(), description="Ordered constraint rules"
    )
    stability: Stability = Field(default=Stability.STABLE, description="Stability marker")
    active: Optional[Expression] = Field(
        default=None, description="Condition under which the option exists"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Option name cannot be empty")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def normalize_description(cls, v: Any) -> Any:
        if isinstance(v, str):
            return " ".join(v.split())
        return v

    @field_validator("active", mode="before")
    @classmethod
    def parse_active(cls, v: Any) -> Any:
        if v is None:
            return None
        try:
            return coerce_expression(v)
        except ExpressionSyntaxError as e:
            raise ValueError(e.reason) from e

    @model_validator(mode="after")
    def check_default_types(self) -> "ConfigOption":
        types = {ValueType.of(entry.value) for entry in self.defaults}
        if len(types) > 1:
            found = ", ".join(sorted(t.value for t in types))
            raise ValueError(f"Default values of '{self.name}' mix types: {found}")
        return self

    @property
    def value_type(self) -> ValueType:
        return ValueType.of(self.defaults[0].value)

    @property
    def is_unstable(self) -> bool:
        return self.stability == Stability.UNSTABLE

    @property
    def has_unconditional_default(self) -> bool:
        return any(entry.is_unconditional for entry in self.defaults)

    def env_var(self, crate: str) -> str:
        """Environment variable that overrides this option for ``crate``."""
        return f"{crate}_CONFIG_{self.name}".upper().replace("-", "_")


class ConfigDocument(StrictModel):
    """A set of options declared together, usually by one crate."""

    crate: Optional[str] = Field(default=None, description="Owning crate name")
    options: Tuple[ConfigOption, ...] = Field(default=(), description="Declared options")

    def option(self, name: str) -> Optional[ConfigOption]:
        return next((o for o in self.options if o.name == name), None)
