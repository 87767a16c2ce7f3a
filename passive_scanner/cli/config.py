"""
Configuration loader for YAML-based scanner settings.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..exceptions import ConfigurationError, ValidationError
from ..findings import Severity

DEFAULT_CONFIG: Dict[str, Any] = {
    "scanner": {
        "max_workers": 8,
    },
    "report": {
        "path": "passive_scan_report.json",
    },
    "console": {
        "min_severity": "info",
    },
    "logging": {
        "level": "INFO",
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file on top of DEFAULT_CONFIG.

    Args:
        config_path: Path to YAML configuration file, or None for defaults

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If config file doesn't exist
        ValidationError: If config format is invalid

    Example:
        >>> config = load_config("passive-scanner.yaml")
        >>> print(config["scanner"]["max_workers"])
    """
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    config_file = Path(config_path)
    if not config_file.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}\n"
            f"Create a config file using: passive-scanner init-config"
        )

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in config file: {e}")

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ValidationError("Config file must contain a YAML dictionary")

    merged = _merge(DEFAULT_CONFIG, config)
    validate_config(merged)
    return merged


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and values.

    Raises:
        ValidationError: If configuration is invalid
    """
    for section in ("scanner", "report", "console", "logging"):
        if section in config and not isinstance(config[section], dict):
            raise ValidationError(f"'{section}' must be a mapping")

    workers = config.get("scanner", {}).get("max_workers")
    if workers is not None:
        if isinstance(workers, bool) or not isinstance(workers, int) or workers <= 0:
            raise ValidationError("scanner.max_workers must be a positive integer")

    report_path = config.get("report", {}).get("path")
    if report_path is not None and not isinstance(report_path, str):
        raise ValidationError("report.path must be a string")

    min_severity = config.get("console", {}).get("min_severity")
    if min_severity is not None:
        Severity.from_label(min_severity)

    level = config.get("logging", {}).get("level")
    if level is not None and not isinstance(logging.getLevelName(str(level).upper()), int):
        raise ValidationError(f"logging.level '{level}' is not a valid logging level")

    return True


def create_default_config(output_path: str = "passive-scanner.yaml") -> Path:
    """
    Create a default configuration file with all options.

    Args:
        output_path: Where to save the config file

    Example:
        >>> create_default_config("my-config.yaml")
    """
    path = Path(output_path)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(DEFAULT_CONFIG, f, default_flow_style=False, sort_keys=False)
    return path
