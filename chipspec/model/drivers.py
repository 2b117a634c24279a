"""
Driver capability tables.

Each ``[device.<driver>]`` table maps onto one ``DriverSpec`` variant,
selected by the table name. Tables with no registered variant use the
base ``DriverSpec`` (support status and instances only). An empty table
means partial support with no instances.
"""

from typing import Any, ClassVar, Dict, FrozenSet, Optional, Tuple, Type

from pydantic import Field, field_validator

from chipspec.utils import parse_int

from .base import PinCapability, StrictModel, SupportStatus

DEFAULT_SUPPORT_STATUS = SupportStatus.PARTIAL.value


class Instance(StrictModel):
    """One hardware instance driven by a driver (e.g. ``i2c0``)."""

    name: str = Field(..., description="Peripheral name the instance refers to")


class DriverSpec(StrictModel):
    """
    Shared minimal interface of every driver table.

    ``support_status`` is kept as authored; ``status`` returns the parsed
    enum member, or None when the value is not one of the known statuses.
    """

    kind: ClassVar[str] = ""

    support_status: str = Field(
        default=DEFAULT_SUPPORT_STATUS, description="supported, partial or not_supported"
    )
    instances: Tuple[Instance, ...] = Field(default=(), description="Driver instances")

    @property
    def status(self) -> Optional[SupportStatus]:
        return SupportStatus.parse(self.support_status)

    @property
    def is_supported(self) -> bool:
        return self.status == SupportStatus.SUPPORTED

    @property
    def instance_names(self) -> Tuple[str, ...]:
        return tuple(instance.name for instance in self.instances)

    def properties(self) -> Dict[str, Any]:
        """Kind-specific flags and values that are set, in declaration order."""
        props = {}
        for name in type(self).model_fields:
            if name in ("support_status", "instances"):
                continue
            value = getattr(self, name)
            if value is None or value is False:
                continue
            props[name] = value
        return props


class AlternateFunction(StrictModel):
    """Signal routable through a pin on a given function slot."""

    slot: int = Field(..., ge=0, description="Function select slot")
    signal: str = Field(..., description="Signal name, e.g. 'FSPICLK'")

    @field_validator("slot", mode="before")
    @classmethod
    def parse_slot(cls, v: Any) -> Any:
        return parse_int(v)


class Pin(StrictModel):
    """GPIO pin with its capabilities and alternate functions.

    Alternate functions are kept as ordered sequences so slot duplicates
    authored in list form are preserved for the consistency checker.
    Mapping form (``{2 = "FSPIQ"}``) is accepted as well.
    """

    number: int = Field(..., alias="pin", ge=0, description="GPIO number")
    capability_kinds: FrozenSet[PinCapability] = Field(
        default=frozenset(), alias="kind", description="Capabilities of the pin"
    )
    alt_function_input: Tuple[AlternateFunction, ...] = Field(
        default=(), alias="af_input", description="Input alternate functions"
    )
    alt_function_output: Tuple[AlternateFunction, ...] = Field(
        default=(), alias="af_output", description="Output alternate functions"
    )

    @field_validator("alt_function_input", "alt_function_output", mode="before")
    @classmethod
    def normalize_alternate_functions(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return [{"slot": slot, "signal": signal} for slot, signal in v.items()]
        return v

    def has_capability(self, kind: PinCapability) -> bool:
        return kind in self.capability_kinds

    @property
    def is_input(self) -> bool:
        return self.has_capability(PinCapability.INPUT)

    @property
    def is_output(self) -> bool:
        return self.has_capability(PinCapability.OUTPUT)

    @property
    def is_analog(self) -> bool:
        return self.has_capability(PinCapability.ANALOG)

    @property
    def is_rtc(self) -> bool:
        return self.has_capability(PinCapability.RTC)

    def input_signal(self, slot: int) -> Optional[str]:
        """Signal on the given input slot (first declaration wins)."""
        return next((af.signal for af in self.alt_function_input if af.slot == slot), None)

    def output_signal(self, slot: int) -> Optional[str]:
        """Signal on the given output slot (first declaration wins)."""
        return next((af.signal for af in self.alt_function_output if af.slot == slot), None)


class GpioInstance(Instance):
    pins: Tuple[Pin, ...] = Field(default=(), description="Pins of this GPIO block")


class GpioDriverSpec(DriverSpec):
    kind: ClassVar[str] = "gpio"

    instances: Tuple[GpioInstance, ...] = Field(default=(), description="GPIO blocks")
    has_bank_1: bool = Field(default=False, description="Second interrupt status bank")


class I2cMasterSpec(DriverSpec):
    kind: ClassVar[str] = "i2c_master"

    has_fsm_timeouts: bool = False
    has_hw_bus_clear: bool = False
    ll_intr_mask: Optional[int] = None
    fifo_size: Optional[int] = Field(default=None, gt=0)
    has_bus_timeout_enable: bool = False
    max_bus_timeout: Optional[int] = None
    can_estimate_nack_reason: bool = False
    has_conf_update: bool = False
    has_arbitration_en: bool = False
    has_tx_fifo_watermark: bool = False
    bus_timeout_is_exponential: bool = False


class SpiMasterSpec(DriverSpec):
    kind: ClassVar[str] = "spi_master"


class AdcSpec(DriverSpec):
    kind: ClassVar[str] = "adc"


class UartSpec(DriverSpec):
    kind: ClassVar[str] = "uart"


class TimerGroupSpec(DriverSpec):
    kind: ClassVar[str] = "timergroup"

    timg_has_timer1: bool = Field(default=False, description="Each group has a second timer")


class InterruptsSpec(DriverSpec):
    kind: ClassVar[str] = "interrupts"

    status_registers: Optional[int] = Field(default=None, gt=0)


class RmtSpec(DriverSpec):
    kind: ClassVar[str] = "rmt"

    ram_start: Optional[int] = Field(default=None, ge=0)
    channel_ram_size: Optional[int] = Field(default=None, gt=0)


DRIVER_SPECS: Dict[str, Type[DriverSpec]] = {
    cls.kind: cls
    for cls in (
        GpioDriverSpec,
        I2cMasterSpec,
        SpiMasterSpec,
        AdcSpec,
        UartSpec,
        TimerGroupSpec,
        InterruptsSpec,
        RmtSpec,
    )
}


def driver_spec_class(kind: str) -> Type[DriverSpec]:
    """Variant registered for a driver table name, or the base spec."""
    return DRIVER_SPECS.get(kind, DriverSpec)


def build_driver_spec(kind: str, data: Optional[Dict[str, Any]]) -> DriverSpec:
    """Validate one driver table. ``None`` or ``{}`` yields the defaults."""
    return driver_spec_class(kind).model_validate(data or {})
