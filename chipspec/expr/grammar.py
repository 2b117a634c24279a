"""
Condition expression grammar built with pyparsing.

Supported forms::

    true / false
    cargo_feature("executors")
    ignore_feature_gates()
    !expr, not expr
    a && b, a and b
    a || b, a or b
    ( expr )

Precedence is not > and > or. The same literal grammar is used to read
typed default values such as ``'"generic"'``, ``64`` or ``true``.
"""

from functools import lru_cache
from typing import Any, Union

from pyparsing import (
    DelimitedList,
    Group,
    Keyword,
    Literal,
    OpAssoc,
    Opt,
    ParseBaseException,
    ParserElement,
    QuotedString,
    Regex,
    Suppress,
    Word,
    alphanums,
    alphas,
    infix_notation,
)

from chipspec.errors import ExpressionSyntaxError

from .nodes import And, BoolLiteral, Call, Expression, Not, Or

# Enable packrat parsing for better performance
ParserElement.enable_packrat()

_TRUE = Keyword("true").set_parse_action(lambda: BoolLiteral(True))
_FALSE = Keyword("false").set_parse_action(lambda: BoolLiteral(False))

_STRING = QuotedString('"', esc_char="\\")
_INTEGER = Regex(r"-?(?:0[xX][0-9a-fA-F_]+|[1-9][0-9_]*|0)").set_parse_action(
    lambda t: int(t[0], 0)
)
_IDENTIFIER = Word(alphas + "_", alphanums + "_")

_CALL = (
    _IDENTIFIER("name")
    + Suppress("(")
    + Group(Opt(DelimitedList(_STRING | _INTEGER)))("args")
    + Suppress(")")
).set_parse_action(lambda t: Call(t.name, tuple(t.args)))

_NOT = Literal("!") | Keyword("not")
_AND = Literal("&&") | Keyword("and")
_OR = Literal("||") | Keyword("or")


def _make_not(tokens):
    return Not(tokens[0][1])


def _make_and(tokens):
    return And(tuple(tokens[0][0::2]))


def _make_or(tokens):
    return Or(tuple(tokens[0][0::2]))


EXPRESSION = infix_notation(
    _TRUE | _FALSE | _CALL,
    [
        (_NOT, 1, OpAssoc.RIGHT, _make_not),
        (_AND, 2, OpAssoc.LEFT, _make_and),
        (_OR, 2, OpAssoc.LEFT, _make_or),
    ],
)

LITERAL = (
    Keyword("true").set_parse_action(lambda: True)
    | Keyword("false").set_parse_action(lambda: False)
    | _STRING
    | _INTEGER
)


@lru_cache(maxsize=1024)
def parse_expression(text: str) -> Expression:
    """Parse a condition string into an expression tree.

    Raises:
        ExpressionSyntaxError: If the text is not a well-formed expression.
    """
    if not isinstance(text, str) or not text.strip():
        raise ExpressionSyntaxError(str(text), "expression is empty")
    try:
        return EXPRESSION.parse_string(text, parse_all=True)[0]
    except ParseBaseException as e:
        raise ExpressionSyntaxError(text, e.msg, e.col) from e


def parse_literal(text: str) -> Union[bool, int, str]:
    """Parse a typed literal (``"text"``, ``42``, ``0x10``, ``true``).

    Raises:
        ExpressionSyntaxError: If the text is not a single literal.
    """
    try:
        return LITERAL.parse_string(text.strip(), parse_all=True)[0]
    except ParseBaseException as e:
        raise ExpressionSyntaxError(text, e.msg, e.col) from e


def coerce_expression(value: Any) -> Expression:
    """Accept an already parsed ``Expression``, a bool or a string.

    Raises:
        ExpressionSyntaxError: For any other type, or a malformed string.
    """
    if isinstance(value, Expression):
        return value
    if isinstance(value, bool):
        return BoolLiteral(value)
    if not isinstance(value, str):
        raise ExpressionSyntaxError(
            repr(value), f"expected a condition string, got {type(value).__name__}"
        )
    return parse_expression(value)
