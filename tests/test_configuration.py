# SPDX-License-Identifier: MIT

import logging

import pytest

from chronolane.configuration import (
    PARAMETER_CONSTRAINTS,
    format_range,
    get_default_configuration,
    load_configuration,
    validate_configuration,
    validate_parameter,
)


def write_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


def test_defaults_match_the_constraints():
    defaults = get_default_configuration()

    assert set(defaults) == set(PARAMETER_CONSTRAINTS)
    for name, constraints in PARAMETER_CONSTRAINTS.items():
        assert defaults[name] == constraints["default"]


def test_missing_file_yields_defaults(tmp_path):
    result = load_configuration(tmp_path / "missing.yaml")

    assert result["configuration"] == get_default_configuration()
    assert result["errors"] == []
    assert result["warnings"] == []


def test_empty_file_yields_defaults(tmp_path):
    result = load_configuration(write_config(tmp_path, ""))

    assert result["configuration"] == get_default_configuration()


def test_valid_values_are_used(tmp_path):
    result = load_configuration(
        write_config(tmp_path, "day_width: 50\nbuffer_days: 3\nscroll_throttle_ms: 4.0e+1\n")
    )
    config = result["configuration"]

    assert config["day_width"] == 50.0
    assert isinstance(config["day_width"], float)
    assert config["buffer_days"] == 3
    assert config["scroll_throttle_ms"] == 40
    assert isinstance(config["scroll_throttle_ms"], int)
    assert result["errors"] == [] and result["warnings"] == []


def test_out_of_range_values_fall_back_with_a_warning(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        result = load_configuration(write_config(tmp_path, "row_height: 100\n"))

    assert result["configuration"]["row_height"] == 30.0
    assert [w["parameter"] for w in result["warnings"]] == ["row_height"]
    assert result["warnings"][0]["message"] == "outside range 20.0 - 60.0"
    assert "Configuration row_height" in caplog.text


@pytest.mark.parametrize("value", ["many", "2.5", "true", "[1, 2]"])
def test_wrong_types_are_errors(tmp_path, value):
    result = load_configuration(write_config(tmp_path, f"buffer_days: {value}\n"))

    assert result["configuration"]["buffer_days"] == 5
    assert [e["parameter"] for e in result["errors"]] == ["buffer_days"]
    assert result["errors"][0]["message"] == "expected int"


def test_unknown_keys_are_warnings(tmp_path):
    result = load_configuration(write_config(tmp_path, "colour: blue\n"))

    assert result["warnings"] == [
        {
            "severity": "warning",
            "parameter": "colour",
            "value": "blue",
            "message": "unknown parameter",
        }
    ]


def test_margin_must_stay_below_width():
    result = validate_configuration({"day_width": 20, "day_margin": 20})

    assert result["configuration"]["day_width"] == 45.0
    assert result["configuration"]["day_margin"] == 5.0
    assert result["errors"][0]["message"] == "must be smaller than day_width"


def test_invalid_yaml_yields_defaults(tmp_path, caplog):
    with caplog.at_level(logging.ERROR):
        result = load_configuration(write_config(tmp_path, "day_width: [1, 2\n"))

    assert result["configuration"] == get_default_configuration()
    assert "Could not parse" in caplog.text


def test_non_mapping_yields_defaults(tmp_path):
    result = load_configuration(write_config(tmp_path, "- 1\n- 2\n"))

    assert result["configuration"] == get_default_configuration()


def test_validate_parameter():
    constraints = PARAMETER_CONSTRAINTS["buffer_rows"]

    assert validate_parameter("buffer_rows", 0, constraints) is None
    assert validate_parameter("buffer_rows", 4.0, constraints) is None
    assert validate_parameter("buffer_rows", 21, constraints)["severity"] == "warning"
    assert validate_parameter("buffer_rows", float("nan"), constraints)["severity"] == "error"
    assert validate_parameter("buffer_rows", False, constraints)["severity"] == "error"


def test_format_range():
    assert format_range({"type": "int", "min": 1, "max": 20, "default": 5}) == "1 - 20"
    assert format_range({"type": "int", "min": 1, "max": None, "default": 5}) == ">= 1"
    assert format_range({"type": "int", "min": None, "max": 20, "default": 5}) == "<= 20"
    assert format_range({"type": "int", "min": None, "max": None, "default": 5}) is None
