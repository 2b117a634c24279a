"""
Exceptions and diagnostic records shared by every chipspec component.

Two mechanisms exist on purpose:
    Exceptions are raised for problems that abort a whole document
    (``SchemaError``) or indicate a tooling bug (``UnknownPredicateError``,
    ``UnknownValidatorError``).
    ``Diagnostic`` records are collected into a ``Diagnostics`` accumulator
    for per-entity problems, so one pass reports every violation.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Optional, Sequence


class ChipSpecError(Exception):
    """Base class for all chipspec exceptions."""


class SchemaError(ChipSpecError):
    """Structurally malformed document or model."""

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        line: Optional[int] = None,
        field_path: Optional[str] = None,
    ):
        self.file_path = file_path
        self.line = line
        self.field_path = field_path
        self.reason = message
        super().__init__(self._format_message(message))

    def _format_message(self, message: str) -> str:
        """Format error message with file, line and field information."""
        parts = []
        if self.file_path:
            parts.append(f"File: {self.file_path}")
        if self.line is not None:
            parts.append(f"Line: {self.line}")
        if self.field_path:
            parts.append(f"Field: {self.field_path}")
        parts.append(message)
        return " | ".join(parts)


class ExpressionSyntaxError(SchemaError):
    """A condition expression string could not be parsed."""

    def __init__(self, text: str, detail: str, column: Optional[int] = None):
        self.text = text
        self.column = column
        location = f" at column {column}" if column is not None else ""
        super().__init__(f"Invalid expression '{text}'{location}: {detail}")


class UnknownPredicateError(ChipSpecError):
    """An expression references a predicate that is not registered."""

    def __init__(self, name: str, known: Iterable[str] = ()):
        self.name = name
        self.known = sorted(known)
        message = f"Unknown predicate '{name}()'"
        if self.known:
            message += f" (known: {', '.join(self.known)})"
        super().__init__(message)


class PredicateArgumentError(ChipSpecError):
    """A predicate was called with the wrong number or type of arguments."""


class UnknownValidatorError(ChipSpecError):
    """A constraint references a validator kind that is not registered."""

    def __init__(self, kind: str, known: Iterable[str] = ()):
        self.kind = kind
        self.known = sorted(known)
        message = f"Unknown validator '{kind}'"
        if self.known:
            message += f" (known: {', '.join(self.known)})"
        super().__init__(message)


class DiagnosticKind(str, Enum):
    """Taxonomy of collected (non-raised) problems."""

    SCHEMA = "SchemaError"
    REFERENCE = "ReferenceError"
    DUPLICATE = "DuplicateError"
    REGION = "RegionError"
    UNRESOLVED_DEFAULT = "UnresolvedDefaultError"
    CONSTRAINT = "ConstraintViolation"


@dataclass(frozen=True)
class Diagnostic:
    """One reported problem with enough context to fix it."""

    kind: DiagnosticKind
    entity: str  # device or option name, or the document source
    location: str  # field path, e.g. 'gpio.instances[0].pins[3].pin'
    message: str
    value: Any = None
    expected: str = ""
    severity: str = "error"  # 'error' or 'warning'

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def format(self) -> str:
        """Render as a single report line."""
        line = f"[{self.kind.value}] {self.entity}: {self.location}: {self.message}"
        if self.value is not None:
            line += f" (got {self.value!r})"
        if self.expected:
            line += f"; expected {self.expected}"
        return line


@dataclass
class Diagnostics:
    """Append-only accumulator threaded through every check."""

    items: List[Diagnostic] = field(default_factory=list)

    def add(
        self,
        kind: DiagnosticKind,
        entity: str,
        location: str,
        message: str,
        value: Any = None,
        expected: str = "",
        severity: str = "error",
    ) -> Diagnostic:
        diagnostic = Diagnostic(
            kind=kind,
            entity=entity,
            location=location,
            message=message,
            value=value,
            expected=expected,
            severity=severity,
        )
        self.items.append(diagnostic)
        return diagnostic

    def extend(self, other: Iterable[Diagnostic]) -> None:
        self.items.extend(other)

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.items if d.is_error]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.items if not d.is_error]

    def of_kind(self, kind: DiagnosticKind) -> List[Diagnostic]:
        return [d for d in self.items if d.kind == kind]

    def for_entity(self, entity: str) -> List[Diagnostic]:
        return [d for d in self.items if d.entity == entity]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)

    def format(self) -> str:
        return "\n".join(d.format() for d in self.items)


class BatchError(ChipSpecError):
    """Raised by ``BatchReport.raise_for_errors`` when errors were collected."""

    def __init__(self, report: Any, errors: Sequence[Diagnostic]):
        self.report = report
        self.errors = list(errors)
        lines = [f"{len(self.errors)} error(s) found:"]
        lines.extend(f"  {d.format()}" for d in self.errors)
        super().__init__("\n".join(lines))
