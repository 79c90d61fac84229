# SPDX-License-Identifier: MIT

import logging
from pathlib import Path
from typing import Any, Literal, Optional, TypedDict

import platformdirs
from yaml import YAMLError, load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]

logger = logging.getLogger(__name__)

APP_NAME = "chronolane"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"


class TimelineConfiguration(TypedDict):
    day_width: float
    day_margin: float
    dates_height: float
    timeline_height: float
    row_height: float
    row_margin: float
    buffer_days: int
    buffer_rows: int
    scroll_throttle_ms: int
    auto_scroll_debounce_ms: int
    animation_duration_ms: int


class ParameterConstraints(TypedDict):
    type: Literal["float", "int"]
    min: Optional[float]
    max: Optional[float]
    default: float | int


class ValidationIssue(TypedDict):
    severity: Literal["error", "warning"]
    parameter: str
    value: Any
    message: str


class ValidationResult(TypedDict):
    configuration: TimelineConfiguration
    errors: list[ValidationIssue]
    warnings: list[ValidationIssue]


PARAMETER_CONSTRAINTS: dict[str, ParameterConstraints] = {
    "day_width": {"type": "float", "min": 20.0, "max": 100.0, "default": 45.0},
    "day_margin": {"type": "float", "min": 0.0, "max": 20.0, "default": 5.0},
    "dates_height": {"type": "float", "min": 40.0, "max": 100.0, "default": 65.0},
    "timeline_height": {
        "type": "float",
        "min": 100.0,
        "max": 1000.0,
        "default": 300.0,
    },
    "row_height": {"type": "float", "min": 20.0, "max": 60.0, "default": 30.0},
    "row_margin": {"type": "float", "min": 0.0, "max": 10.0, "default": 3.0},
    "buffer_days": {"type": "int", "min": 1, "max": 20, "default": 5},
    "buffer_rows": {"type": "int", "min": 0, "max": 20, "default": 2},
    "scroll_throttle_ms": {"type": "int", "min": 8, "max": 100, "default": 16},
    "auto_scroll_debounce_ms": {
        "type": "int",
        "min": 0,
        "max": 1000,
        "default": 100,
    },
    "animation_duration_ms": {"type": "int", "min": 100, "max": 500, "default": 220},
}


def get_default_configuration() -> TimelineConfiguration:
    return {
        "day_width": 45.0,
        "day_margin": 5.0,
        "dates_height": 65.0,
        "timeline_height": 300.0,
        "row_height": 30.0,
        "row_margin": 3.0,
        "buffer_days": 5,
        "buffer_rows": 2,
        "scroll_throttle_ms": 16,
        "auto_scroll_debounce_ms": 100,
        "animation_duration_ms": 220,
    }


def format_range(constraints: ParameterConstraints) -> Optional[str]:
    if constraints["min"] is not None and constraints["max"] is not None:
        return f"{constraints['min']} - {constraints['max']}"
    if constraints["min"] is not None:
        return f">= {constraints['min']}"
    if constraints["max"] is not None:
        return f"<= {constraints['max']}"
    return None


def validate_parameter(
    name: str, value: Any, constraints: ParameterConstraints
) -> Optional[ValidationIssue]:
    """Return the issue with a single value, or None when it is usable."""
    is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
    is_whole = isinstance(value, int) or (
        isinstance(value, float) and value.is_integer()
    )
    if not is_number or (constraints["type"] == "int" and not is_whole):
        return {
            "severity": "error",
            "parameter": name,
            "value": value,
            "message": f"expected {constraints['type']}",
        }

    too_low = constraints["min"] is not None and value < constraints["min"]
    too_high = constraints["max"] is not None and value > constraints["max"]
    if too_low or too_high:
        return {
            "severity": "warning",
            "parameter": name,
            "value": value,
            "message": f"outside range {format_range(constraints)}",
        }

    return None


def validate_configuration(raw: Optional[dict[str, Any]]) -> ValidationResult:
    """
    Validate a raw configuration mapping.

    Missing parameters take their default. Wrong-typed values (errors) and
    out-of-range values (warnings) are replaced by the default and reported.
    Unknown keys are reported as warnings and ignored.
    """
    configuration = get_default_configuration()
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []

    if raw is None:
        return {"configuration": configuration, "errors": errors, "warnings": warnings}

    for name, constraints in PARAMETER_CONSTRAINTS.items():
        if name not in raw:
            continue
        value = raw[name]
        issue = validate_parameter(name, value, constraints)
        if issue is None:
            if constraints["type"] == "int":
                configuration[name] = int(value)  # type: ignore[literal-required]
            else:
                configuration[name] = float(value)  # type: ignore[literal-required]
        elif issue["severity"] == "error":
            errors.append(issue)
        else:
            warnings.append(issue)

    for name in raw:
        if name not in PARAMETER_CONSTRAINTS:
            warnings.append(
                {
                    "severity": "warning",
                    "parameter": name,
                    "value": raw[name],
                    "message": "unknown parameter",
                }
            )

    if configuration["day_margin"] >= configuration["day_width"]:
        errors.append(
            {
                "severity": "error",
                "parameter": "day_margin",
                "value": configuration["day_margin"],
                "message": "must be smaller than day_width",
            }
        )
        configuration["day_width"] = PARAMETER_CONSTRAINTS["day_width"]["default"]
        configuration["day_margin"] = PARAMETER_CONSTRAINTS["day_margin"]["default"]

    for issue in errors + warnings:
        log = logger.error if issue["severity"] == "error" else logger.warning
        log(
            "Configuration %s: %r %s, using default",
            issue["parameter"],
            issue["value"],
            issue["message"],
        )

    return {"configuration": configuration, "errors": errors, "warnings": warnings}


def load_configuration(path: Optional[Path] = None) -> ValidationResult:
    """
    Load and validate the configuration file.

    Defaults to the user config path. A missing file, an empty file or a
    file that is not valid YAML yields the default configuration.
    """
    config_path = path if path is not None else APP_CONFIG_PATH

    if not config_path.is_file():
        logger.debug("No configuration at %s, using defaults", config_path)
        return validate_configuration(None)

    try:
        raw = load(config_path.read_text(), Loader=Loader)
    except YAMLError as e:
        logger.error("Could not parse %s: %s", config_path, e)
        return validate_configuration(None)

    if raw is not None and not isinstance(raw, dict):
        logger.error("Configuration in %s is not a mapping", config_path)
        return validate_configuration(None)

    return validate_configuration(raw)
