"""
chipspec - chip capability metadata and build-time configuration resolution.

Device documents describe what a hardware variant provides (peripherals,
pins, alternate functions, memory regions, driver tables); configuration
documents declare options whose values depend on enabled features. Both are
validated in one pass, with every problem collected into a single report.
"""

from .batch import BatchReport, BatchRunner
from .config import ConfigDocument, ConfigOption, ConstraintValidator, OptionResolver
from .errors import Diagnostic, DiagnosticKind, Diagnostics, SchemaError
from .expr import ConditionEvaluator, FeatureContext
from .model import Device, check_device
from .parser import load_config_file, load_device_file

__all__ = [
    "BatchRunner",
    "BatchReport",
    "ConfigDocument",
    "ConfigOption",
    "ConstraintValidator",
    "OptionResolver",
    "ConditionEvaluator",
    "FeatureContext",
    "Device",
    "check_device",
    "Diagnostic",
    "DiagnosticKind",
    "Diagnostics",
    "SchemaError",
    "load_device_file",
    "load_config_file",
]
