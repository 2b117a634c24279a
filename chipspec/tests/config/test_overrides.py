import logging

import pytest

from chipspec.config import ConfigDocument, ValueType, collect_overrides, env_prefix, parse_override
from chipspec.errors import DiagnosticKind, Diagnostics

ENVIRON = {
    "ESP_HAL_EMBASSY_CONFIG_TIMER_QUEUE": "multiple-integrated",
    "ESP_HAL_EMBASSY_CONFIG_GENERIC_QUEUE_SIZE": "0x80",
    "ESP_HAL_EMBASSY_CONFIG_LOW_POWER_WAIT": "no",
    "ESP_HAL_EMBASSY_CONFIG_STACK_SIZE": "4096",
    "ESP_HAL_CONFIG_PLACE_SPI_DRIVER_IN_RAM": "true",
    "PATH": "/usr/bin",
}


def test_env_prefix():
    assert env_prefix("esp-hal-embassy") == "ESP_HAL_EMBASSY_CONFIG_"


@pytest.mark.parametrize(
    "raw, value_type, expected",
    [
        ("true", ValueType.BOOL, True),
        (" FALSE ", ValueType.BOOL, False),
        ("64", ValueType.INTEGER, 64),
        ("0x40", ValueType.INTEGER, 64),
        ("1_000", ValueType.INTEGER, 1000),
        ('"generic"', ValueType.STRING, "generic"),
        ("generic", ValueType.STRING, "generic"),
        ("", ValueType.STRING, ""),
        (128, ValueType.INTEGER, 128),
        (True, ValueType.BOOL, True),
    ],
)
def test_parse_override(raw, value_type, expected):
    assert parse_override(raw, value_type) == expected


@pytest.mark.parametrize(
    "raw, value_type",
    [("yes", ValueType.BOOL), ("1", ValueType.BOOL), ("sixty", ValueType.INTEGER), ("", ValueType.INTEGER)],
)
def test_parse_override_rejects(raw, value_type):
    with pytest.raises(ValueError):
        parse_override(raw, value_type)


class TestCollectOverrides:
    def test_matching_variables(self, embassy_config):
        overrides = collect_overrides(embassy_config, ENVIRON)
        assert overrides == {"timer-queue": "multiple-integrated", "generic-queue-size": 128}

    def test_problems_are_reported(self, embassy_config):
        diagnostics = Diagnostics()
        collect_overrides(embassy_config, ENVIRON, diagnostics)

        bad_value, unknown = diagnostics
        assert bad_value.kind == DiagnosticKind.CONSTRAINT
        assert bad_value.entity == "low-power-wait"
        assert bad_value.location == "ESP_HAL_EMBASSY_CONFIG_LOW_POWER_WAIT"
        assert bad_value.value == "no"
        assert bad_value.expected == "bool value"

        assert unknown.kind == DiagnosticKind.REFERENCE
        assert unknown.entity == "esp-hal-embassy"
        assert unknown.location == "ESP_HAL_EMBASSY_CONFIG_STACK_SIZE"

    def test_other_crates_are_ignored(self, embassy_config):
        diagnostics = Diagnostics()
        collect_overrides(embassy_config, ENVIRON, diagnostics)
        assert not any("PLACE_SPI" in d.location for d in diagnostics)

    def test_document_without_crate(self, embassy_config):
        document = ConfigDocument(options=embassy_config.options)
        assert collect_overrides(document, ENVIRON) == {}

    def test_applied_overrides_are_logged(self, embassy_config, caplog):
        with caplog.at_level(logging.INFO, logger="chipspec.config.overrides"):
            collect_overrides(embassy_config, ENVIRON)
        assert (
            "Option 'timer-queue' overridden by ESP_HAL_EMBASSY_CONFIG_TIMER_QUEUE"
            in caplog.text
        )
