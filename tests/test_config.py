"""
Unit tests for YAML configuration loading and validation.
"""

import tempfile
from pathlib import Path

import pytest
import yaml
from passive_scanner.cli.config import (
    DEFAULT_CONFIG,
    create_default_config,
    load_config,
    validate_config,
)
from passive_scanner.exceptions import ConfigurationError, ValidationError


def test_defaults_without_file():
    """Test load_config(None) returns a copy of the defaults."""
    config = load_config(None)
    assert config == DEFAULT_CONFIG
    config["scanner"]["max_workers"] = 99
    assert DEFAULT_CONFIG["scanner"]["max_workers"] == 8


def test_partial_file_merged_with_defaults():
    """Test keys missing from the file fall back to defaults."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        path.write_text("scanner:\n  max_workers: 2\n", encoding="utf-8")

        config = load_config(str(path))

    assert config["scanner"]["max_workers"] == 2
    assert config["report"]["path"] == "passive_scan_report.json"
    assert config["console"]["min_severity"] == "info"


def test_empty_file_uses_defaults():
    """Test an empty YAML document is accepted."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(str(path)) == DEFAULT_CONFIG


def test_missing_file():
    """Test a missing config file raises ConfigurationError."""
    with pytest.raises(ConfigurationError):
        load_config("/nonexistent/config.yaml")


def test_invalid_yaml():
    """Test malformed YAML raises ValidationError."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        path.write_text("scanner: [unclosed", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(str(path))


def test_non_mapping_yaml():
    """Test a YAML list is rejected."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "config.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(str(path))


@pytest.mark.parametrize("config", [
    {"scanner": {"max_workers": 0}},
    {"scanner": {"max_workers": "four"}},
    {"scanner": {"max_workers": True}},
    {"console": {"min_severity": "critical"}},
    {"logging": {"level": "LOUD"}},
    {"report": {"path": 42}},
    {"scanner": "fast"},
])
def test_validate_rejects_bad_values(config):
    """Test invalid values raise ValidationError."""
    with pytest.raises(ValidationError):
        validate_config(config)


def test_validate_accepts_defaults():
    """Test the default configuration is valid."""
    assert validate_config(DEFAULT_CONFIG) is True


def test_create_default_config_round_trip():
    """Test the generated file loads back to the defaults."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = create_default_config(str(Path(tmpdir) / "passive-scanner.yaml"))
        with open(path, encoding="utf-8") as f:
            assert yaml.safe_load(f) == DEFAULT_CONFIG
        assert load_config(str(path)) == DEFAULT_CONFIG
