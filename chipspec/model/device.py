"""Device model - the capability description of one hardware variant."""

from typing import Any, Dict, FrozenSet, Iterator, List, Optional, Tuple

from pydantic import Field, SerializeAsAny, field_validator

from chipspec.utils import enum_value, parse_int

from .base import Architecture, StrictModel
from .drivers import DriverSpec, GpioDriverSpec, Pin, build_driver_spec


class Region(StrictModel):
    """
    Named memory region ``[start, end)``.

    ``start < end`` and same-name overlap are checked by the consistency
    checker rather than here, so every region problem of a device is
    reported in one pass.
    """

    name: str = Field(..., description="Region name (e.g. 'dram')")
    start: int = Field(..., ge=0, description="First address")
    end: int = Field(..., ge=0, description="One past the last address")

    @field_validator("start", "end", mode="before")
    @classmethod
    def parse_address(cls, v: Any) -> Any:
        """Accept hexadecimal literals such as ``"0x3FC8_8000"``."""
        return parse_int(v)

    @property
    def size(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Region") -> bool:
        return self.start < other.end and other.start < self.end

    def contains_address(self, address: int) -> bool:
        """Check if address is within this region."""
        return self.start <= address < self.end

    @property
    def hex_range(self) -> str:
        """Get range as hex string."""
        return f"[{hex(self.start)} : {hex(self.end)}]"


class Device(StrictModel):
    """
    Complete capability model of one chip.

    This is the canonical representation the device parser produces and
    code generators consume:
    - Identity (name, architecture, core count, reference manual)
    - Declared names (peripherals, virtual peripherals, symbols)
    - Memory regions
    - Driver tables keyed by driver name
    """

    name: str = Field(..., description="Chip name (e.g. 'esp32c2')")
    architecture: Architecture = Field(..., alias="arch", description="CPU architecture")
    core_count: int = Field(..., alias="cores", gt=0, description="Number of CPU cores")
    reference_manual_url: str = Field(..., alias="trm", description="Technical reference manual")

    peripherals: Tuple[str, ...] = Field(default=(), description="Peripherals from the PAC")
    virtual_peripherals: Tuple[str, ...] = Field(
        default=(), description="Peripherals modelled in software only"
    )
    symbols: Tuple[str, ...] = Field(default=(), description="Additional capability symbols")
    memory_regions: Tuple[Region, ...] = Field(
        default=(), alias="memory", description="Memory regions"
    )
    drivers: Dict[str, SerializeAsAny[DriverSpec]] = Field(
        default_factory=dict, description="Driver tables keyed by driver name"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Device name cannot be empty")
        return v

    @field_validator("drivers", mode="before")
    @classmethod
    def build_drivers(cls, v: Any) -> Any:
        """Turn raw driver tables into their registered ``DriverSpec`` variant."""
        if not isinstance(v, dict):
            return v
        return {
            kind: spec if isinstance(spec, DriverSpec) else build_driver_spec(kind, spec)
            for kind, spec in v.items()
        }

    # --- Convenience accessors ---

    @property
    def declared_names(self) -> FrozenSet[str]:
        """Every name a driver instance may refer to."""
        return frozenset(self.peripherals) | frozenset(self.virtual_peripherals) | frozenset(
            self.symbols
        )

    def has_peripheral(self, name: str) -> bool:
        return name in self.peripherals or name in self.virtual_peripherals

    def driver(self, name: str) -> Optional[DriverSpec]:
        """Get driver table by name."""
        return self.drivers.get(name)

    @property
    def gpio(self) -> Optional[GpioDriverSpec]:
        spec = self.drivers.get("gpio")
        return spec if isinstance(spec, GpioDriverSpec) else None

    def gpio_pins(self) -> Iterator[Pin]:
        """All pins of all GPIO instances, in declaration order."""
        if self.gpio is None:
            return
        for instance in self.gpio.instances:
            yield from instance.pins

    def pin(self, number: int) -> Optional[Pin]:
        """Get the first pin declared with the given GPIO number."""
        return next((p for p in self.gpio_pins() if p.number == number), None)

    def regions(self, name: str) -> List[Region]:
        """Get all memory regions with the given name."""
        return [r for r in self.memory_regions if r.name == name]

    # --- Computed properties ---

    @property
    def is_multi_core(self) -> bool:
        return self.core_count > 1

    def supported_drivers(self) -> List[str]:
        return [name for name, spec in self.drivers.items() if spec.is_supported]

    def all_symbols(self) -> List[str]:
        """
        Conditional-compilation symbols for this chip.

        Ordered as: chip name, architecture, core layout, peripherals,
        virtual peripherals, symbols, then one ``<driver>_driver_supported``
        per driver marked as supported.
        """
        core_symbol = "multi_core" if self.is_multi_core else "single_core"
        result = [self.name, enum_value(self.architecture), core_symbol]
        result.extend(self.peripherals)
        result.extend(self.virtual_peripherals)
        result.extend(self.symbols)
        result.extend(f"{name}_driver_supported" for name in self.supported_drivers())
        return list(dict.fromkeys(result))

    def driver_properties(self) -> Dict[str, Any]:
        """Driver flags and values flattened as ``<driver>_<field>`` constants."""
        props = {}
        for driver_name, spec in self.drivers.items():
            for key, value in spec.properties().items():
                props[f"{driver_name}_{key}"] = value
        return props
