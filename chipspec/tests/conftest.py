import os
import sys
import tomllib

import pytest
import yaml

# Add the project root to sys.path so that chipspec is importable
# without installing it (flat layout)
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from chipspec.config import ConfigDocument  # noqa: E402
from chipspec.parser import ConfigParser, DeviceParser  # noqa: E402

ESP32C2_TOML = """
# Empty [`device.driver`] tables imply `partial` support status.

[device]
name  = "esp32c2"
arch  = "riscv"
cores = 1
trm   = "https://www.espressif.com/sites/default/files/documentation/esp8684_technical_reference_manual_en.pdf"

peripherals = [
    "apb_saradc",
    "dma",
    "gpio",
    "i2c0",
    "io_mux",
    "spi2",
    "systimer",
    "timg0",
    "uart0",
    "uart1",
]

virtual_peripherals = ["adc1"]

symbols = ["gdma", "phy", "rom_crc_le", "pm_support_wifi_wakeup"]

memory = [{ name = "dram", start = 0x3FCA_0000, end = 0x3FCE_0000 }]

[device.adc]
support_status = "partial"
instances = [{ name = "adc1" }]

[device.gpio]
support_status = "supported"
instances = [
    { name = "gpio", pins = [
        { pin =  0, kind = ["input", "output", "analog", "rtc"] },
        { pin =  2, kind = ["input", "output", "analog", "rtc"], af_input = { 2 = "FSPIQ" },   af_output = { 2 = "FSPIQ" } },
        { pin =  6, kind = ["input", "output"],                  af_input = { 2 = "FSPICLK" }, af_output = { 2 = "FSPICLK_MUX" } },
        { pin = 10, kind = ["input", "output"],                  af_input = { 2 = "FSPICS0" }, af_output = { 2 = "FSPICS0" } },
        { pin = 20, kind = ["input", "output"],                  af_input = { 0 = "U0RXD" } },
    ] },
]

[device.i2c_master]
support_status = "supported"
instances = [{ name = "i2c0" }]
has_fsm_timeouts = true
ll_intr_mask = 0x3ffff
fifo_size = 16
max_bus_timeout = 0x1F

[device.interrupts]
support_status = "partial"
status_registers = 2

[device.spi_master]
support_status = "supported"
instances = [{ name = "spi2" }]

[device.timergroup]
instances = [{ name = "timg0" }]

[device.uart]
support_status = "supported"

[device.dma]
[device.systimer]
[device.wifi]
"""

EMBASSY_CONFIG_YAML = """
crate: esp-hal-embassy

options:
- name: low-power-wait
  description: "Enables the lower-power wait if no tasks are ready to run on the
               thread-mode executor."
  default:
    - value: true

- name: timer-queue
  description: "The flavour of the timer queue provided by this crate."
  default:
    - if: 'ignore_feature_gates()'
      value: '"single-integrated"'
    - if: 'cargo_feature("executors")'
      value: '"single-integrated"'
    - if: 'true'
      value: '"generic"'
  constraints:
    - if: 'cargo_feature("executors") || ignore_feature_gates()'
      type:
        validator: enumeration
        value:
        - 'generic'
        - 'single-integrated'
        - 'multiple-integrated'
    - if: 'true'
      type:
        validator: enumeration
        value:
        - 'generic'
  stability: Unstable
  active: 'cargo_feature("executors") || ignore_feature_gates()'

- name: generic-queue-size
  description: The capacity of the queue when the `generic` timer queue flavour is selected.
  default:
    - value: 64
  constraints:
    - type:
        validator: positive_integer
"""


@pytest.fixture
def esp32c2_toml():
    return ESP32C2_TOML


@pytest.fixture
def embassy_yaml():
    return EMBASSY_CONFIG_YAML


@pytest.fixture
def esp32c2_tree():
    return tomllib.loads(ESP32C2_TOML)


@pytest.fixture
def esp32c2(esp32c2_tree):
    return DeviceParser().parse_data(esp32c2_tree)


@pytest.fixture
def embassy_tree():
    return yaml.safe_load(EMBASSY_CONFIG_YAML)


@pytest.fixture
def embassy_config(embassy_tree) -> ConfigDocument:
    return ConfigParser().parse_data(embassy_tree)


@pytest.fixture
def minimal_device_tree():
    """Smallest valid device document, as a plain tree."""
    return {
        "device": {
            "name": "testchip",
            "arch": "xtensa",
            "cores": 2,
            "trm": "https://example.com/trm.pdf",
            "peripherals": ["gpio", "i2c0"],
        }
    }
