"""
Predicate registry and condition evaluator.

Predicates are plain functions ``func(context, *args) -> bool`` looked up
by name, so new predicates can be added without touching the grammar.
"""

import inspect
import logging
from typing import Callable, Dict, Iterator, Mapping, Optional, Union

from chipspec.errors import PredicateArgumentError, UnknownPredicateError

from .context import FeatureContext
from .grammar import parse_expression
from .nodes import Call, Expression

logger = logging.getLogger(__name__)

Predicate = Callable[..., bool]


def cargo_feature(context: FeatureContext, name: str) -> bool:
    """True if the named build feature is enabled."""
    if not isinstance(name, str):
        raise PredicateArgumentError(f"cargo_feature() expects a string, got {name!r}")
    return context.has_feature(name)


def ignore_feature_gates(context: FeatureContext) -> bool:
    """True when feature gates are being ignored."""
    return context.ignoring_feature_gates()


class PredicateRegistry:
    """Lookup table of predicate name to predicate function."""

    def __init__(self, predicates: Optional[Mapping[str, Predicate]] = None):
        self._predicates: Dict[str, Predicate] = dict(predicates or {})

    def register(self, name: str, func: Optional[Predicate] = None):
        """Register ``func`` under ``name``; usable as a decorator."""

        def decorator(f: Predicate) -> Predicate:
            self._predicates[name] = f
            return f

        if func is not None:
            return decorator(func)
        return decorator

    def get(self, name: str) -> Predicate:
        try:
            return self._predicates[name]
        except KeyError:
            raise UnknownPredicateError(name, self._predicates) from None

    def copy(self) -> "PredicateRegistry":
        return PredicateRegistry(self._predicates)

    def names(self) -> Iterator[str]:
        return iter(sorted(self._predicates))

    def __contains__(self, name: object) -> bool:
        return name in self._predicates


def default_registry() -> PredicateRegistry:
    """Registry with the predicates used by configuration documents."""
    registry = PredicateRegistry()
    registry.register("cargo_feature", cargo_feature)
    registry.register("has_feature", cargo_feature)
    registry.register("ignore_feature_gates", ignore_feature_gates)
    return registry


class ConditionEvaluator:
    """
    Evaluates condition expressions against a ``FeatureContext``.

    Evaluation is pure. Every predicate referenced by an expression is
    checked before evaluation starts, so an unknown predicate is reported
    even when short-circuiting would never reach it.
    """

    def __init__(self, registry: Optional[PredicateRegistry] = None):
        self.registry = registry if registry is not None else default_registry()

    def check(self, expression: Union[Expression, str]) -> Expression:
        """Verify all referenced predicates are registered.

        Raises:
            UnknownPredicateError: For the first unregistered predicate.
        """
        if isinstance(expression, str):
            expression = parse_expression(expression)
        for name in expression.predicates():
            self.registry.get(name)
        return expression

    def evaluate(
        self, expression: Union[Expression, str, None], context: FeatureContext
    ) -> bool:
        """Evaluate an expression; ``None`` (absent condition) is always true."""
        if expression is None:
            return True
        expression = self.check(expression)
        result = expression.evaluate(lambda call: self._invoke(call, context))
        logger.debug("Condition %s under %s -> %s", expression, context, result)
        return result

    def _invoke(self, call: Call, context: FeatureContext) -> bool:
        func = self.registry.get(call.name)
        try:
            inspect.signature(func).bind(context, *call.args)
        except TypeError as e:
            raise PredicateArgumentError(f"Bad arguments for {call}: {e}") from e
        return bool(func(context, *call.args))
