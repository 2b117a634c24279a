"""
Base models and enumerations for chip capability metadata.

Provides shared base models with centralized configuration for all
schema classes, so ``model_config`` is not repeated everywhere.

Architecture Decision:
    Every model is frozen: a device or option is built once per
    generation pass and never mutated afterwards.
    StrictModel (extra="forbid") is used for all metadata tables, since
    an unknown key in a device or driver table is almost always a typo.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class ChipSpecBaseModel(BaseModel):
    """Base model with shared configuration for all chipspec schema models.

    Allows field population by either the document key (alias) or the
    Python name.
    """

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }


class StrictModel(ChipSpecBaseModel):
    """Base model that forbids unknown fields."""

    model_config = {
        **ChipSpecBaseModel.model_config,
        "extra": "forbid",
    }


class Architecture(str, Enum):
    """CPU architecture of a hardware variant."""

    XTENSA = "xtensa"
    RISCV = "riscv"


class SupportStatus(str, Enum):
    """Maturity of a driver implementation for a given chip."""

    SUPPORTED = "supported"
    PARTIAL = "partial"
    NOT_SUPPORTED = "not_supported"

    @classmethod
    def parse(cls, value: Any) -> Optional["SupportStatus"]:
        """Return the matching member, or None for an unknown value."""
        try:
            return cls(value)
        except ValueError:
            return None


class PinCapability(str, Enum):
    """Capability kinds a GPIO pin can carry."""

    INPUT = "input"
    OUTPUT = "output"
    ANALOG = "analog"
    RTC = "rtc"
