"""
Consistency checks for device models.

Provides validation rules beyond basic Pydantic validation: cross-field
and cross-table rules that make a chip's capability model internally
non-contradictory. Every rule runs; violations are collected, never raised.
"""

import logging
import re
from itertools import combinations
from typing import Optional, Sequence

from chipspec.errors import DiagnosticKind, Diagnostics
from chipspec.utils import find_duplicates

from .base import SupportStatus
from .device import Device
from .drivers import AlternateFunction, GpioDriverSpec, Pin

logger = logging.getLogger(__name__)

SIGNAL_NAME = re.compile(r"[A-Z][A-Z0-9_]*")
VALID_STATUSES = ", ".join(s.value for s in SupportStatus)


class DeviceChecker:
    """
    Device consistency checker.

    Appends one diagnostic per violated rule instance to ``diagnostics``,
    which may be shared with other checks.
    """

    def __init__(self, device: Device, diagnostics: Optional[Diagnostics] = None):
        self.device = device
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def check_all(self) -> bool:
        """
        Run all checks.

        Returns:
            True if this run added no errors
        """
        before = len(self.diagnostics.errors)

        self.check_name_sets()
        self.check_gpio_pins()
        self.check_memory_regions()
        self.check_driver_instances()
        self.check_support_status()

        added = len(self.diagnostics.errors) - before
        logger.debug("Device '%s': %d consistency error(s)", self.device.name, added)
        return added == 0

    def _add(self, kind: DiagnosticKind, location: str, message: str, **kwargs) -> None:
        self.diagnostics.add(kind, self.device.name, location, message, **kwargs)

    # --- Declared names ---

    def check_name_sets(self) -> None:
        """Names are unique within, and disjoint across, the three name lists."""
        name_sets = {
            "peripherals": self.device.peripherals,
            "virtual_peripherals": self.device.virtual_peripherals,
            "symbols": self.device.symbols,
        }
        for label, names in name_sets.items():
            for name, indices in find_duplicates(names):
                self._add(
                    DiagnosticKind.DUPLICATE,
                    f"{label}[{indices[1]}]",
                    f"'{name}' is declared {len(indices)} times in {label}",
                    value=name,
                )

        for (label1, names1), (label2, names2) in combinations(name_sets.items(), 2):
            for name in sorted(set(names1) & set(names2)):
                self._add(
                    DiagnosticKind.DUPLICATE,
                    label2,
                    f"'{name}' is declared in both {label1} and {label2}",
                    value=name,
                    expected="peripherals, virtual_peripherals and symbols to be disjoint",
                )

    # --- GPIO ---

    def check_gpio_pins(self) -> None:
        """Pin numbers unique per instance; AF slots unique per direction."""
        gpio = self.device.gpio
        if not isinstance(gpio, GpioDriverSpec):
            return

        for i, instance in enumerate(gpio.instances):
            base = f"gpio.instances[{i}]"
            numbers = [pin.number for pin in instance.pins]
            for number, indices in find_duplicates(numbers):
                self._add(
                    DiagnosticKind.DUPLICATE,
                    f"{base}.pins[{indices[1]}].pin",
                    f"Pin {number} is declared {len(indices)} times in GPIO instance "
                    f"'{instance.name}' (entries {', '.join(map(str, indices))})",
                    value=number,
                    expected="unique pin numbers per GPIO instance",
                )

            for j, pin in enumerate(instance.pins):
                self._check_pin(pin, f"{base}.pins[{j}]")

    def _check_pin(self, pin: Pin, location: str) -> None:
        for direction, entries in (
            ("af_input", pin.alt_function_input),
            ("af_output", pin.alt_function_output),
        ):
            self._check_alternate_functions(pin, direction, entries, location)

    def _check_alternate_functions(
        self,
        pin: Pin,
        direction: str,
        entries: Sequence[AlternateFunction],
        location: str,
    ) -> None:
        for slot, indices in find_duplicates(af.slot for af in entries):
            signals = ", ".join(entries[k].signal for k in indices)
            self._add(
                DiagnosticKind.DUPLICATE,
                f"{location}.{direction}",
                f"GPIO{pin.number} assigns {direction} slot {slot} more than once ({signals})",
                value=slot,
                expected=f"unique {direction} slots per pin",
            )
        for af in entries:
            if not SIGNAL_NAME.fullmatch(af.signal):
                self._add(
                    DiagnosticKind.SCHEMA,
                    f"{location}.{direction}.{af.slot}",
                    f"GPIO{pin.number} has an invalid signal name",
                    value=af.signal,
                    expected="an uppercase signal name such as 'FSPICLK'",
                )

    # --- Memory ---

    def check_memory_regions(self) -> None:
        """``start < end`` for every region; same-name regions do not overlap."""
        valid = []
        for i, region in enumerate(self.device.memory_regions):
            if region.start >= region.end:
                self._add(
                    DiagnosticKind.REGION,
                    f"memory[{i}]",
                    f"Region '{region.name}' is empty or inverted {region.hex_range}",
                    value=(region.start, region.end),
                    expected="start < end",
                )
            else:
                valid.append((i, region))

        for (i, r1), (j, r2) in combinations(valid, 2):
            if r1.name == r2.name and r1.overlaps(r2):
                self._add(
                    DiagnosticKind.REGION,
                    f"memory[{j}]",
                    f"Region '{r2.name}' {r2.hex_range} overlaps memory[{i}] {r1.hex_range}",
                    expected="regions sharing a name not to overlap",
                )

    # --- Drivers ---

    def check_driver_instances(self) -> None:
        """Instance names are unique per driver and refer to declared names."""
        declared = self.device.declared_names
        for driver_name, spec in self.device.drivers.items():
            for name, indices in find_duplicates(spec.instance_names):
                self._add(
                    DiagnosticKind.DUPLICATE,
                    f"{driver_name}.instances[{indices[1]}].name",
                    f"Instance '{name}' is declared {len(indices)} times",
                    value=name,
                )
            for i, instance in enumerate(spec.instances):
                if instance.name not in declared:
                    self._add(
                        DiagnosticKind.REFERENCE,
                        f"{driver_name}.instances[{i}].name",
                        f"Driver '{driver_name}' references unknown peripheral "
                        f"'{instance.name}'",
                        value=instance.name,
                        expected="a name from peripherals, virtual_peripherals or symbols",
                    )

    def check_support_status(self) -> None:
        for driver_name, spec in self.device.drivers.items():
            if spec.status is None:
                self._add(
                    DiagnosticKind.SCHEMA,
                    f"{driver_name}.support_status",
                    f"Driver '{driver_name}' has an unknown support status",
                    value=spec.support_status,
                    expected=f"one of {VALID_STATUSES}",
                )


def check_device(device: Device, diagnostics: Optional[Diagnostics] = None) -> Diagnostics:
    """
    Convenience function to check a device.

    Args:
        device: Device to check
        diagnostics: Accumulator to append to (a new one by default)

    Returns:
        The accumulator holding every violation found
    """
    checker = DeviceChecker(device, diagnostics)
    checker.check_all()
    return checker.diagnostics
