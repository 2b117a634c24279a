"""
Tests for configuration option models.
"""

import pytest
from pydantic import ValidationError

from chipspec.config import ConfigOption, Stability, ValueType
from chipspec.expr import BoolLiteral, Call, Or


def make_option(**overrides):
    data = {"name": "opt", "default": [{"value": 1}]}
    data.update(overrides)
    return ConfigOption.model_validate(data)


class TestEmbassyOptions:
    def test_option_order(self, embassy_config):
        assert embassy_config.crate == "esp-hal-embassy"
        assert [o.name for o in embassy_config.options] == [
            "low-power-wait",
            "timer-queue",
            "generic-queue-size",
        ]

    def test_bool_option(self, embassy_config):
        option = embassy_config.option("low-power-wait")
        assert option.value_type == ValueType.BOOL
        assert option.stability == Stability.STABLE
        assert option.active is None
        assert option.constraints == ()
        assert option.description == (
            "Enables the lower-power wait if no tasks are ready to run on the "
            "thread-mode executor."
        )

    def test_string_option(self, embassy_config):
        option = embassy_config.option("timer-queue")
        assert option.value_type == ValueType.STRING
        assert option.is_unstable
        assert [d.value for d in option.defaults] == [
            "single-integrated",
            "single-integrated",
            "generic",
        ]
        assert option.defaults[0].condition == Call("ignore_feature_gates")
        assert option.defaults[2].is_unconditional
        assert not option.defaults[1].is_unconditional
        assert option.has_unconditional_default
        assert option.active == Or(
            (Call("cargo_feature", ("executors",)), Call("ignore_feature_gates"))
        )

    def test_constraints_keep_order(self, embassy_config):
        option = embassy_config.option("timer-queue")
        first, second = option.constraints
        assert first.validator.validator == "enumeration"
        assert first.validator.value == ("generic", "single-integrated", "multiple-integrated")
        assert second.validator.value == ("generic",)
        assert second.is_unconditional

    def test_integer_option(self, embassy_config):
        option = embassy_config.option("generic-queue-size")
        assert option.value_type == ValueType.INTEGER
        assert option.defaults[0].value == 64
        assert option.defaults[0].condition is None
        assert option.constraints[0].condition is None
        assert option.constraints[0].validator.validator == "positive_integer"

    def test_env_var(self, embassy_config):
        option = embassy_config.option("timer-queue")
        assert option.env_var("esp-hal-embassy") == "ESP_HAL_EMBASSY_CONFIG_TIMER_QUEUE"

    def test_missing_option(self, embassy_config):
        assert embassy_config.option("stack-size") is None


class TestConfigOptionValidation:
    def test_plain_string_default_is_kept(self):
        option = make_option(default=[{"value": "generic"}])
        assert option.defaults[0].value == "generic"

    def test_boolean_condition(self):
        option = make_option(default=[{"if": True, "value": 1}])
        assert option.defaults[0].condition == BoolLiteral(True)

    def test_mixed_default_types_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            make_option(default=[{"if": "false", "value": 1}, {"value": '"one"'}])
        assert "mix types" in str(exc_info.value)

    @pytest.mark.parametrize("default", [[], None])
    def test_default_is_required(self, default):
        with pytest.raises(ValidationError):
            make_option(default=default)

    def test_malformed_condition_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            make_option(active='cargo_feature("executors") ||')
        assert "Invalid expression" in str(exc_info.value)

    def test_unknown_key_rejected(self):
        with pytest.raises(ValidationError):
            make_option(default_value=3)

    def test_unknown_stability_rejected(self):
        with pytest.raises(ValidationError):
            make_option(stability="Experimental")

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            make_option(name=" ")

    def test_float_default_rejected(self):
        with pytest.raises(ValidationError):
            make_option(default=[{"value": 1.5}])

    def test_option_is_frozen(self):
        option = make_option()
        with pytest.raises(ValidationError):
            option.name = "other"
