"""
Device metadata parser.

Turns a structured tree of the form ``{"device": {...}}`` (as produced by a
TOML or YAML parser) into a validated ``Device`` model. Scalar keys of the
``device`` table are device fields; every nested table is a driver table.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from chipspec.errors import SchemaError
from chipspec.model import Device, DriverSpec, driver_spec_class
from chipspec.utils import filter_none

from .base import DocumentParser

logger = logging.getLogger(__name__)

DEVICE_KEYS = (
    "name",
    "arch",
    "cores",
    "trm",
    "peripherals",
    "virtual_peripherals",
    "symbols",
    "memory",
)


class DeviceParser(DocumentParser):
    """Parser for device metadata documents (one hardware variant each)."""

    def parse_file(self, file_path: Union[str, Path]) -> Device:
        """
        Parse a device metadata file.

        Args:
            file_path: Path to a ``.toml`` or ``.yml`` device document

        Returns:
            Device: Validated (but not yet consistency-checked) device model

        Raises:
            SchemaError: If loading or validation fails
        """
        tree = self.load_tree(file_path)
        return self.parse_data(tree, self._current_file)

    def parse_data(self, tree: Any, file_path: Optional[Path] = None) -> Device:
        """Build a ``Device`` from an already parsed tree."""
        if not isinstance(tree, dict):
            raise SchemaError("Root element must be a table/dictionary", file_path)

        table = tree.get("device")
        if not isinstance(table, dict):
            raise SchemaError("Missing required table: device", file_path, field_path="device")

        problems: List[Tuple[str, str]] = []
        for key in tree:
            if key != "device":
                problems.append((key, "Unknown top-level table"))

        fields: Dict[str, Any] = {}
        raw_drivers: Dict[str, Any] = {}
        for key, value in table.items():
            if key in DEVICE_KEYS:
                fields[key] = value
            elif isinstance(value, dict):
                raw_drivers[key] = value
            else:
                problems.append((f"device.{key}", "Unknown device field"))

        drivers = self._parse_drivers(raw_drivers, problems)
        device = self._validate(Device, {**fields, "drivers": drivers}, "device", problems)

        self._raise_problems(problems, file_path)
        logger.info(
            "Parsed device '%s' (%d driver tables)", device.name, len(device.drivers)
        )
        return device

    def _parse_drivers(
        self, raw: Dict[str, Dict[str, Any]], problems: List[Tuple[str, str]]
    ) -> Dict[str, DriverSpec]:
        """Parse driver tables; an empty table means partial support."""
        drivers = {}
        for kind, data in raw.items():
            spec = self._validate(
                driver_spec_class(kind), filter_none(data), f"device.{kind}", problems
            )
            if spec is not None:
                drivers[kind] = spec
        return drivers
