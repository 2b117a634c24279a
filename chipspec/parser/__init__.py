"""
Parsers for device metadata and configuration option documents.
"""

from pathlib import Path
from typing import Union

from chipspec.config import ConfigDocument
from chipspec.errors import SchemaError
from chipspec.model import Device

from .config_parser import ConfigParser
from .device_parser import DeviceParser


def load_device_file(file_path: Union[str, Path]) -> Device:
    """Parse one device metadata file (``.toml`` or ``.yml``)."""
    return DeviceParser().parse_file(file_path)


def load_config_file(file_path: Union[str, Path]) -> ConfigDocument:
    """Parse one configuration option file."""
    return ConfigParser().parse_file(file_path)


__all__ = ["DeviceParser", "ConfigParser", "SchemaError", "load_device_file", "load_config_file"]
