"""Configuration loading with YAML parsing and validation."""

from pathlib import Path
from typing import Any

import pydantic_yaml

from .schema import ReportConfig


def load_config(config_path: Path | str) -> ReportConfig:
    """
    Load and validate report configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated ReportConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If config is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        yaml_content = f.read()

    return pydantic_yaml.parse_yaml_raw_as(ReportConfig, yaml_content)


def load_config_with_overrides(
    config_path: Path | str,
    overrides: dict[str, Any],
) -> ReportConfig:
    """
    Load config from YAML and apply dictionary overrides.

    Used by CLI flags that override config file values. Keys may be
    dotted paths into nested sections, e.g. "cooccurrence.max_records".
    Overrides whose value is None are ignored so unset CLI options
    leave the file value in place.

    Args:
        config_path: Path to YAML configuration file
        overrides: Dictionary of values to override (nested keys supported)

    Returns:
        Validated ReportConfig with overrides applied

    Raises:
        FileNotFoundError: If config file doesn't exist
        pydantic.ValidationError: If final config is invalid
    """
    config = load_config(config_path)
    config_dict = config.model_dump()

    for key, value in overrides.items():
        if value is None:
            continue
        if "." in key:
            parts = key.split(".")
            target = config_dict
            for part in parts[:-1]:
                target = target[part]
            target[parts[-1]] = value
        else:
            config_dict[key] = value

    return ReportConfig.model_validate(config_dict)
