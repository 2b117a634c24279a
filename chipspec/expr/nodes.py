"""
Expression tree nodes for feature conditions.

Nodes are frozen dataclasses so parsed expressions can be cached and
shared between options, devices and worker threads.
"""

from dataclasses import dataclass
from typing import Callable, Iterator, Tuple, Union

ArgValue = Union[str, int]
Invoke = Callable[["Call"], bool]


class Expression:
    """Base class for condition expression nodes."""

    def evaluate(self, invoke: Invoke) -> bool:
        """Evaluate the node, delegating predicate calls to ``invoke``."""
        raise NotImplementedError

    def calls(self) -> Iterator["Call"]:
        """Yield every predicate call in the tree, left to right."""
        raise NotImplementedError

    def predicates(self) -> Tuple[str, ...]:
        """Names of all predicates referenced by this expression."""
        return tuple(dict.fromkeys(call.name for call in self.calls()))

    @property
    def is_trivially_true(self) -> bool:
        return False


@dataclass(frozen=True)
class BoolLiteral(Expression):
    value: bool

    def evaluate(self, invoke: Invoke) -> bool:
        return self.value

    def calls(self) -> Iterator["Call"]:
        return iter(())

    @property
    def is_trivially_true(self) -> bool:
        return self.value

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Call(Expression):
    """Predicate call such as ``cargo_feature("executors")``."""

    name: str
    args: Tuple[ArgValue, ...] = ()

    def evaluate(self, invoke: Invoke) -> bool:
        return invoke(self)

    def calls(self) -> Iterator["Call"]:
        yield self

    def __str__(self) -> str:
        rendered = ", ".join(f'"{a}"' if isinstance(a, str) else str(a) for a in self.args)
        return f"{self.name}({rendered})"


@dataclass(frozen=True)
class Not(Expression):
    operand: Expression

    def evaluate(self, invoke: Invoke) -> bool:
        return not self.operand.evaluate(invoke)

    def calls(self) -> Iterator["Call"]:
        return self.operand.calls()

    def __str__(self) -> str:
        return f"!{_wrap(self.operand)}"


@dataclass(frozen=True)
class And(Expression):
    operands: Tuple[Expression, ...]

    def evaluate(self, invoke: Invoke) -> bool:
        return all(operand.evaluate(invoke) for operand in self.operands)

    def calls(self) -> Iterator["Call"]:
        for operand in self.operands:
            yield from operand.calls()

    @property
    def is_trivially_true(self) -> bool:
        return all(operand.is_trivially_true for operand in self.operands)

    def __str__(self) -> str:
        return " && ".join(_wrap(operand) for operand in self.operands)


@dataclass(frozen=True)
class Or(Expression):
    operands: Tuple[Expression, ...]

    def evaluate(self, invoke: Invoke) -> bool:
        return any(operand.evaluate(invoke) for operand in self.operands)

    def calls(self) -> Iterator["Call"]:
        for operand in self.operands:
            yield from operand.calls()

    @property
    def is_trivially_true(self) -> bool:
        return any(operand.is_trivially_true for operand in self.operands)

    def __str__(self) -> str:
        return " || ".join(_wrap(operand) for operand in self.operands)


def _wrap(node: Expression) -> str:
    if isinstance(node, (And, Or)):
        return f"({node})"
    return str(node)
