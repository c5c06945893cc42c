"""Unit tests for configuration management."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

import pytest

from svglint.config import (
    LogLevel,
    SvgLintConfig,
    coerce_config,
    create_default_config,
    find_config_file,
    load_config,
)


class TestSvgLintConfig:
    """Test SvgLintConfig model."""

    def test_minimal_config(self):
        config = SvgLintConfig()
        assert config.rules == {}
        assert config.logging.level == LogLevel.INFO.value

    def test_config_from_dict(self):
        config = SvgLintConfig(**{
            "rules": {
                "elm": {"svg": True},
                "attr": [{"role": True}, {"id": False}],
            },
            "logging": {"level": "debug"},
        })
        assert config.rules["elm"] == {"svg": True}
        assert len(config.rules["attr"]) == 2
        assert config.logging.level == "debug"

    def test_config_extra_fields_forbidden(self):
        with pytest.raises(ValueError):
            SvgLintConfig(rules={}, invalid_field="should-fail")

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            SvgLintConfig(logging={"level": "loud"})

    def test_empty_rule_name(self):
        with pytest.raises(ValueError, match="rule names"):
            SvgLintConfig(rules={" ": {}})

    def test_config_is_frozen(self):
        config = SvgLintConfig()
        with pytest.raises(ValueError):
            config.rules = {"elm": {}}

    def test_coerce_config(self):
        config = SvgLintConfig(rules={"elm": {"svg": True}})
        assert coerce_config(config) is config
        assert coerce_config(None).rules == {}
        assert coerce_config({"rules": {"elm": {}}}).rules == {"elm": {}}


class TestConfigFileOperations:
    """Test configuration file loading and discovery."""

    def test_load_config_with_file(self):
        with TemporaryDirectory() as temp_dir:
            config_file = Path(temp_dir) / ".svglint.json"
            with open(config_file, "w") as f:
                json.dump({"rules": {"elm": {"svg": True}}}, f)

            config = load_config(config_file)
            assert config.rules == {"elm": {"svg": True}}

    def test_load_config_file_not_found(self):
        with TemporaryDirectory() as temp_dir:
            config = load_config(Path(temp_dir) / "nonexistent.json")
            assert config.rules == {}

    def test_load_config_invalid_json(self):
        with TemporaryDirectory() as temp_dir:
            config_file = Path(temp_dir) / ".svglint.json"
            config_file.write_text("{invalid json")

            with pytest.raises(ValueError, match="Invalid JSON"):
                load_config(config_file)

    def test_load_config_invalid_structure(self):
        with TemporaryDirectory() as temp_dir:
            config_file = Path(temp_dir) / ".svglint.json"
            with open(config_file, "w") as f:
                json.dump({"invalid": "structure"}, f)

            with pytest.raises(ValueError, match="Failed to load config"):
                load_config(config_file)

    def test_find_config_file_parent_dir(self):
        with TemporaryDirectory() as temp_dir:
            temp_path = Path(temp_dir)
            config_file = temp_path / ".svglint.json"
            config_file.touch()

            sub_dir = temp_path / "a" / "b"
            sub_dir.mkdir(parents=True)

            assert find_config_file(sub_dir) == config_file.resolve()

    def test_find_config_file_not_found(self):
        with TemporaryDirectory() as temp_dir:
            assert find_config_file(Path(temp_dir)) is None

    def test_zero_config_operation(self):
        with patch("svglint.config.find_config_file", return_value=None):
            config = load_config()
            assert config == create_default_config()
