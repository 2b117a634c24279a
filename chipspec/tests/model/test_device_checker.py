"""
Tests for device consistency checks.
"""

import copy
import logging

import pytest

from chipspec.errors import DiagnosticKind, Diagnostics
from chipspec.model import DeviceChecker, check_device
from chipspec.parser import DeviceParser


def gpio_pins(tree):
    return tree["device"]["gpio"]["instances"][0]["pins"]


@pytest.fixture
def tree(esp32c2_tree):
    return copy.deepcopy(esp32c2_tree)


def check(tree):
    return check_device(DeviceParser().parse_data(tree))


class TestCleanDevice:
    def test_reference_device_is_consistent(self, esp32c2):
        diagnostics = check_device(esp32c2)
        assert len(diagnostics) == 0, diagnostics.format()

    def test_check_all_returns_true(self, esp32c2):
        assert DeviceChecker(esp32c2).check_all() is True


class TestPinRules:
    def test_duplicate_pin_number(self, tree):
        gpio_pins(tree).append({"pin": 10, "kind": ["input"]})
        diagnostics = check(tree)

        (dup,) = diagnostics.of_kind(DiagnosticKind.DUPLICATE)
        assert dup.entity == "esp32c2"
        assert dup.location == "gpio.instances[0].pins[5].pin"
        assert dup.value == 10
        assert "entries 3, 5" in dup.message

    def test_same_number_in_different_instances_is_allowed(self, tree):
        tree["device"]["gpio"]["instances"].append(
            {"name": "gpio", "pins": [{"pin": 0, "kind": ["input"]}]}
        )
        diagnostics = check(tree)
        assert not any(d.location.endswith(".pin") for d in diagnostics)

    def test_duplicate_af_slot_per_direction(self, tree):
        gpio_pins(tree).append(
            {
                "pin": 21,
                "af_output": [
                    {"slot": 0, "signal": "U0TXD"},
                    {"slot": 0, "signal": "U1TXD"},
                ],
            }
        )
        (dup,) = check(tree).of_kind(DiagnosticKind.DUPLICATE)
        assert dup.location == "gpio.instances[0].pins[5].af_output"
        assert dup.value == 0
        assert "U0TXD, U1TXD" in dup.message

    def test_same_slot_in_both_directions_is_allowed(self, esp32c2):
        # GPIO2 uses slot 2 for FSPIQ both as input and as output
        pin = esp32c2.pin(2)
        assert pin.input_signal(2) == pin.output_signal(2) == "FSPIQ"
        assert not check_device(esp32c2).of_kind(DiagnosticKind.DUPLICATE)

    def test_lowercase_signal_name(self, tree):
        gpio_pins(tree)[0]["af_input"] = {"1": "fspiq"}
        (bad,) = check(tree).of_kind(DiagnosticKind.SCHEMA)
        assert bad.location == "gpio.instances[0].pins[0].af_input.1"
        assert bad.value == "fspiq"


class TestRegionRules:
    @pytest.mark.parametrize(
        "start, end",
        [(0x200, 0x100), (0x100, 0x100)],
    )
    def test_empty_or_inverted_region(self, tree, start, end):
        tree["device"]["memory"].append({"name": "iram", "start": start, "end": end})
        (err,) = check(tree).of_kind(DiagnosticKind.REGION)
        assert err.location == "memory[1]"
        assert err.value == (start, end)

    def test_same_name_overlap(self, tree):
        tree["device"]["memory"].append(
            {"name": "dram", "start": "0x3FCD_0000", "end": "0x3FCF_0000"}
        )
        (err,) = check(tree).of_kind(DiagnosticKind.REGION)
        assert err.location == "memory[1]"
        assert "overlaps memory[0]" in err.message

    def test_adjacent_regions_do_not_overlap(self, tree):
        tree["device"]["memory"].append(
            {"name": "dram", "start": 0x3FCE_0000, "end": 0x3FCF_0000}
        )
        assert not check(tree).of_kind(DiagnosticKind.REGION)

    def test_different_names_may_overlap(self, tree):
        tree["device"]["memory"].append(
            {"name": "dram2", "start": 0x3FCA_0000, "end": 0x3FCB_0000}
        )
        assert not check(tree).of_kind(DiagnosticKind.REGION)


class TestDriverRules:
    def test_unknown_instance_reference(self, tree):
        tree["device"]["spi_master"]["instances"].append({"name": "spi3"})
        (ref,) = check(tree).of_kind(DiagnosticKind.REFERENCE)
        assert ref.location == "spi_master.instances[1].name"
        assert ref.value == "spi3"

    def test_symbol_reference_is_accepted(self, tree):
        tree["device"]["dma"] = {"instances": [{"name": "gdma"}]}
        assert not check(tree).of_kind(DiagnosticKind.REFERENCE)

    def test_duplicate_instance_name(self, tree):
        tree["device"]["i2c_master"]["instances"].append({"name": "i2c0"})
        (dup,) = check(tree).of_kind(DiagnosticKind.DUPLICATE)
        assert dup.location == "i2c_master.instances[1].name"

    def test_unknown_support_status(self, tree):
        tree["device"]["uart"]["support_status"] = "experimental"
        (bad,) = check(tree).of_kind(DiagnosticKind.SCHEMA)
        assert bad.location == "uart.support_status"
        assert "not_supported" in bad.expected


class TestNameSetRules:
    def test_duplicate_within_list(self, tree):
        tree["device"]["peripherals"].append("uart0")
        (dup,) = check(tree).of_kind(DiagnosticKind.DUPLICATE)
        assert dup.location == "peripherals[10]"
        assert dup.value == "uart0"

    def test_overlap_across_lists(self, tree):
        tree["device"]["symbols"].append("adc1")
        (dup,) = check(tree).of_kind(DiagnosticKind.DUPLICATE)
        assert dup.location == "symbols"
        assert "virtual_peripherals and symbols" in dup.message


class TestAggregation:
    def test_all_rules_run_together(self, tree):
        """A duplicate pin does not hide the other violations of the device."""
        gpio_pins(tree).append({"pin": 10, "kind": ["input", "output"]})
        tree["device"]["memory"].append({"name": "rtc", "start": 0x10, "end": 0x0})
        tree["device"]["timergroup"]["instances"].append({"name": "timg1"})
        tree["device"]["adc"]["support_status"] = "yes"

        diagnostics = check(tree)

        kinds = sorted(d.kind.value for d in diagnostics)
        assert kinds == [
            "DuplicateError",
            "ReferenceError",
            "RegionError",
            "SchemaError",
        ]
        assert all(d.entity == "esp32c2" for d in diagnostics)

    def test_shared_accumulator(self, esp32c2, tree):
        tree["device"]["name"] = "esp32c2-broken"
        gpio_pins(tree).append({"pin": 0})
        broken = DeviceParser().parse_data(tree)

        diagnostics = Diagnostics()
        check_device(esp32c2, diagnostics)
        result = check_device(broken, diagnostics)

        assert result is diagnostics
        assert len(diagnostics) == 1
        assert diagnostics.for_entity("esp32c2-broken")

    def test_check_all_reports_only_its_own_errors(self, esp32c2, tree):
        gpio_pins(tree).append({"pin": 0})
        diagnostics = check(tree)
        assert DeviceChecker(esp32c2, diagnostics).check_all() is True

    def test_checker_is_repeatable(self, tree):
        gpio_pins(tree).append({"pin": 2})
        device = DeviceParser().parse_data(tree)
        first = check_device(device).format()
        assert check_device(device).format() == first

    def test_debug_log(self, esp32c2, caplog):
        with caplog.at_level(logging.DEBUG, logger="chipspec.model.checker"):
            check_device(esp32c2)
        assert "Device 'esp32c2': 0 consistency error(s)" in caplog.text
