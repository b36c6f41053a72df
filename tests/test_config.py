# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2025 The Script Updater Authors

"""
Script Updater Configuration Tests

Tests for configuration loading and validation.
Run with: pytest tests/test_config.py -v
"""

import logging
from pathlib import Path

import pytest


def test_config_loads_defaults():
    """Test configuration loads with default values."""
    from script_updater.config import Config
    from script_updater.schemas import UpdateCheckInterval

    config = Config()

    assert config.script.name == "script"
    assert config.updater.interval == UpdateCheckInterval.DAILY
    assert config.updater.current_version == "0.0.0"
    assert config.updater.temp_directory is None
    assert config.logging.level == "WARNING"


def test_config_from_yaml(tmp_path):
    """Test configuration loads from YAML file."""
    from script_updater.config import load_config
    from script_updater.schemas import UpdateCheckInterval

    config_file = tmp_path / "script_updater.yaml"
    config_file.write_text("""
script:
  name: widget
  directory: /opt/scripts/widget

updater:
  manifest_url: https://updates.example.com/version.json
  interval: weekly
  current_version: 1.4.2

storage:
  cache_file: /var/cache/widget.json

logging:
  level: DEBUG
""")

    config = load_config(str(config_file))

    assert config.script.name == "widget"
    assert config.script.directory == Path("/opt/scripts/widget")
    assert config.updater.manifest_url == "https://updates.example.com/version.json"
    assert config.updater.interval == UpdateCheckInterval.WEEKLY
    assert config.updater.current_version == "1.4.2"
    assert config.storage.cache_file == Path("/var/cache/widget.json")
    assert config.logging.level == "DEBUG"


def test_config_interval_with_space(tmp_path):
    """Test the "every time" interval parses from YAML."""
    from script_updater.config import load_config
    from script_updater.schemas import UpdateCheckInterval

    config_file = tmp_path / "script_updater.yaml"
    config_file.write_text('updater:\n  interval: "every time"\n')

    assert load_config(str(config_file)).updater.interval == UpdateCheckInterval.EVERY_TIME


def test_config_path_conversion():
    """Test configuration converts paths correctly."""
    from script_updater.config import Config

    config = Config()

    assert isinstance(config.script.directory, Path)
    assert isinstance(config.storage.cache_file, Path)


def test_config_rejects_invalid_current_version():
    """Test the running version must be dotted-numeric."""
    from pydantic import ValidationError
    from script_updater.config import UpdaterConfig

    with pytest.raises(ValidationError):
        UpdaterConfig(current_version="1.0-beta")


def test_config_invalid_values_use_defaults(tmp_path):
    """Test an invalid value in the file falls back to defaults."""
    from script_updater.config import load_config

    config_file = tmp_path / "script_updater.yaml"
    config_file.write_text("updater:\n  interval: hourly\n")

    config = load_config(str(config_file))

    assert config.updater.interval.value == "daily"


def test_config_invalid_yaml(tmp_path):
    """Test configuration handles invalid YAML gracefully."""
    from script_updater.config import load_config

    config_file = tmp_path / "script_updater.yaml"
    config_file.write_text("invalid: yaml: content: [")

    config = load_config(str(config_file))

    assert config.script.name == "script"


def test_config_missing_file():
    """Test configuration handles missing file gracefully."""
    from script_updater.config import load_config

    config = load_config("/nonexistent/script_updater.yaml")

    assert config.updater.current_version == "0.0.0"


def test_config_env_var(tmp_path, monkeypatch):
    """Test SCRIPT_UPDATER_CONFIG selects the config file."""
    from script_updater.config import load_config

    config_file = tmp_path / "custom.yaml"
    config_file.write_text("script:\n  name: from-env\n")
    monkeypatch.setenv("SCRIPT_UPDATER_CONFIG", str(config_file))

    assert load_config().script.name == "from-env"


def test_config_partial_yaml(tmp_path):
    """Test configuration merges partial YAML with defaults."""
    from script_updater.config import load_config

    config_file = tmp_path / "script_updater.yaml"
    config_file.write_text("updater:\n  current_version: '2.0'\n")

    config = load_config(str(config_file))

    assert config.updater.current_version == "2.0"
    assert config.updater.request_timeout == 300
    assert config.script.name == "script"


def test_setup_logging_with_file(tmp_path):
    """Test file logging creates the log directory."""
    from script_updater.config import LoggingConfig, setup_logging

    log_file = tmp_path / "logs" / "updater.log"
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(LoggingConfig(level="INFO", file=log_file))
        logging.getLogger("script_updater.test").info("hello")
        for handler in root.handlers:
            handler.flush()
        assert "hello" in log_file.read_text()
    finally:
        for handler in root.handlers:
            if handler not in saved_handlers:
                handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
