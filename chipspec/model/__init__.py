"""
Pydantic-based data models for chip capability metadata.

This module provides the typed representation of one hardware variant
(peripherals, pins, alternate functions, memory regions and driver tables)
together with the consistency checker run on it.
"""

from .base import Architecture, ChipSpecBaseModel, PinCapability, StrictModel, SupportStatus
from .checker import DeviceChecker, check_device
from .device import Device, Region
from .drivers import (
    DRIVER_SPECS,
    AdcSpec,
    AlternateFunction,
    DriverSpec,
    GpioDriverSpec,
    GpioInstance,
    I2cMasterSpec,
    Instance,
    InterruptsSpec,
    Pin,
    RmtSpec,
    SpiMasterSpec,
    TimerGroupSpec,
    UartSpec,
    build_driver_spec,
    driver_spec_class,
)

__all__ = [
    # Base
    "ChipSpecBaseModel",
    "StrictModel",
    "Architecture",
    "SupportStatus",
    "PinCapability",
    # Device
    "Device",
    "Region",
    # Drivers
    "DriverSpec",
    "Instance",
    "GpioDriverSpec",
    "GpioInstance",
    "Pin",
    "AlternateFunction",
    "I2cMasterSpec",
    "SpiMasterSpec",
    "AdcSpec",
    "UartSpec",
    "TimerGroupSpec",
    "InterruptsSpec",
    "RmtSpec",
    "DRIVER_SPECS",
    "driver_spec_class",
    "build_driver_spec",
    # Checks
    "DeviceChecker",
    "check_device",
]
