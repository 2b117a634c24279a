"""
Option resolution.

Resolving an option under a feature context:

1. An inactive option (``active`` evaluates false) yields INACTIVE.
2. The first default rule whose condition holds supplies the value.
3. The first constraint rule whose condition holds supplies the validator.
4. The value (or a caller-supplied override) is type-checked and validated.

Constraint selection is exclusive: only the first matching constraint
applies, later matching entries are ignored. The shipped documents only use
mutually exclusive constraint conditions, so this is an assumption rather
than an observed requirement.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

from chipspec.errors import Diagnostic, DiagnosticKind, Diagnostics
from chipspec.expr import ConditionEvaluator, FeatureContext
from chipspec.utils import enum_value

from .constraints import ConstraintValidator, ValidatorSpec
from .option import ConfigOption, Stability

logger = logging.getLogger(__name__)


class ResolutionStatus(str, Enum):
    RESOLVED = "resolved"
    INACTIVE = "inactive"
    FAILED = "failed"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one option."""

    option: str
    status: ResolutionStatus
    stability: Stability = Stability.STABLE
    value: Any = None
    default_index: Optional[int] = None
    constraint_index: Optional[int] = None
    constraint: Optional[ValidatorSpec] = None
    overridden: bool = False
    diagnostics: Tuple[Diagnostic, ...] = field(default=())

    @property
    def ok(self) -> bool:
        return self.status != ResolutionStatus.FAILED

    @property
    def is_active(self) -> bool:
        return self.status != ResolutionStatus.INACTIVE

    @property
    def is_unstable(self) -> bool:
        return self.stability == Stability.UNSTABLE


class OptionResolver:
    """Resolves ``ConfigOption`` values against a ``FeatureContext``."""

    def __init__(
        self,
        evaluator: Optional[ConditionEvaluator] = None,
        validator: Optional[ConstraintValidator] = None,
    ):
        self.evaluator = evaluator or ConditionEvaluator()
        self.validator = validator or ConstraintValidator()

    def is_active(self, option: ConfigOption, context: FeatureContext) -> bool:
        return self.evaluator.evaluate(option.active, context)

    def select_default(self, option: ConfigOption, context: FeatureContext) -> Optional[int]:
        """Index of the first default rule that applies, or None."""
        for index, entry in enumerate(option.defaults):
            if self.evaluator.evaluate(entry.condition, context):
                return index
        return None

    def select_constraint(self, option: ConfigOption, context: FeatureContext) -> Optional[int]:
        """Index of the first constraint rule that applies, or None."""
        for index, entry in enumerate(option.constraints):
            if self.evaluator.evaluate(entry.condition, context):
                return index
        return None

    def resolve(
        self,
        option: ConfigOption,
        context: FeatureContext,
        override: Any = None,
        diagnostics: Optional[Diagnostics] = None,
    ) -> Resolution:
        """
        Resolve one option.

        Args:
            option: Option to resolve
            context: Enabled features and mode switches
            override: Value to validate instead of the default, if any
            diagnostics: Shared accumulator that also receives the problems

        Returns:
            Resolution; problems are recorded in ``Resolution.diagnostics``

        Raises:
            UnknownPredicateError: If a condition uses an unregistered predicate
            UnknownValidatorError: If a constraint uses an unregistered validator
        """
        found = Diagnostics()
        result = self._resolve(option, context, override, found)
        if diagnostics is not None:
            diagnostics.extend(found)
        logger.debug(
            "Option '%s' under %s: %s %r", option.name, context, result.status.value, result.value
        )
        return result

    def _resolve(
        self,
        option: ConfigOption,
        context: FeatureContext,
        override: Any,
        found: Diagnostics,
    ) -> Resolution:
        name = option.name

        if not self.is_active(option, context):
            return Resolution(name, ResolutionStatus.INACTIVE, option.stability)

        default_index = self.select_default(option, context)
        if default_index is None:
            conditions = ", ".join(str(entry.condition) for entry in option.defaults)
            found.add(
                DiagnosticKind.UNRESOLVED_DEFAULT,
                name,
                "default",
                f"No default rule applies under features {context}",
                expected=f"one of the conditions to hold: {conditions}",
            )
            return self._failed(option, found)

        value = option.defaults[default_index].value if override is None else override

        if not option.value_type.accepts(value):
            found.add(
                DiagnosticKind.CONSTRAINT,
                name,
                "value",
                f"Value does not match the option type ({enum_value(option.value_type)})",
                value=value,
                expected=f"{enum_value(option.value_type)} value",
            )
            return self._failed(option, found, default_index)

        constraint_index = None
        spec = None
        if option.constraints:
            constraint_index = self.select_constraint(option, context)
            if constraint_index is None:
                found.add(
                    DiagnosticKind.SCHEMA,
                    name,
                    "constraints",
                    f"No constraint rule applies under features {context}",
                    expected="at least one applicable constraint while the option is active",
                )
                return self._failed(option, found, default_index)

            spec = option.constraints[constraint_index].validator
            violation = self.validator.validate(spec, value)
            if violation is not None:
                found.add(
                    DiagnosticKind.CONSTRAINT,
                    name,
                    f"constraints[{constraint_index}]",
                    f"{violation.message} ({violation.validator})",
                    value=value,
                    expected=violation.expected,
                )
                return self._failed(option, found, default_index, constraint_index)

        return Resolution(
            option=name,
            status=ResolutionStatus.RESOLVED,
            stability=option.stability,
            value=value,
            default_index=default_index,
            constraint_index=constraint_index,
            constraint=spec,
            overridden=override is not None,
        )

    @staticmethod
    def _failed(
        option: ConfigOption,
        found: Diagnostics,
        default_index: Optional[int] = None,
        constraint_index: Optional[int] = None,
    ) -> Resolution:
        return Resolution(
            option=option.name,
            status=ResolutionStatus.FAILED,
            stability=option.stability,
            default_index=default_index,
            constraint_index=constraint_index,
            diagnostics=tuple(found),
        )
