from pathlib import Path

from chipspec.errors import (
    Diagnostic,
    DiagnosticKind,
    Diagnostics,
    ExpressionSyntaxError,
    SchemaError,
    UnknownPredicateError,
    UnknownValidatorError,
)


class TestSchemaError:
    def test_message_with_location(self):
        error = SchemaError("Missing required field", Path("esp32c2.toml"), 12, "device.trm")
        assert str(error) == "File: esp32c2.toml | Line: 12 | Field: device.trm | Missing required field"
        assert error.reason == "Missing required field"

    def test_message_without_location(self):
        assert str(SchemaError("Root element must be a table")) == "Root element must be a table"

    def test_expression_syntax_error(self):
        error = ExpressionSyntaxError("a() ||", "Expected end of text", 5)
        assert isinstance(error, SchemaError)
        assert error.text == "a() ||"
        assert error.reason == "Invalid expression 'a() ||' at column 5: Expected end of text"


def test_unknown_names_list_known_ones():
    assert "known: cargo_feature" in str(UnknownPredicateError("chip", ["cargo_feature"]))
    assert str(UnknownValidatorError("regex")) == "Unknown validator 'regex'"


class TestDiagnostics:
    def test_format(self):
        diagnostic = Diagnostic(
            DiagnosticKind.DUPLICATE,
            "esp32c2",
            "gpio.instances[0].pins[5].pin",
            "Pin 10 is declared twice",
            value=10,
            expected="unique pin numbers",
        )
        assert diagnostic.format() == (
            "[DuplicateError] esp32c2: gpio.instances[0].pins[5].pin: "
            "Pin 10 is declared twice (got 10); expected unique pin numbers"
        )

    def test_accumulator(self):
        diagnostics = Diagnostics()
        assert not diagnostics

        diagnostics.add(DiagnosticKind.REGION, "esp32c2", "memory[1]", "inverted")
        diagnostics.add(
            DiagnosticKind.CONSTRAINT, "timer-queue", "value", "odd", severity="warning"
        )

        assert len(diagnostics) == 2
        assert [d.entity for d in diagnostics.errors] == ["esp32c2"]
        assert [d.entity for d in diagnostics.warnings] == ["timer-queue"]
        assert diagnostics.of_kind(DiagnosticKind.REGION)[0].location == "memory[1]"
        assert diagnostics.for_entity("timer-queue")[0].message == "odd"
        assert diagnostics.format().count("\n") == 1
