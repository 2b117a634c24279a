"""
Boolean feature-condition expressions.

Parses condition strings such as
``cargo_feature("executors") || ignore_feature_gates()`` and evaluates
them against a ``FeatureContext`` through a pluggable predicate registry.
"""

from .context import FeatureContext
from .evaluator import ConditionEvaluator, PredicateRegistry, default_registry
from .grammar import coerce_expression, parse_expression, parse_literal
from .nodes import And, BoolLiteral, Call, Expression, Not, Or

__all__ = [
    "FeatureContext",
    "ConditionEvaluator",
    "PredicateRegistry",
    "default_registry",
    "parse_expression",
    "parse_literal",
    "coerce_expression",
    # Nodes
    "Expression",
    "BoolLiteral",
    "Call",
    "Not",
    "And",
    "Or",
]
