# SPDX-License-Identifier: GPL-3.0-only
# SPDX-FileCopyrightText: Copyright (c) 2025 Andrew Wyatt (Fewtarius)

"""
Script Updater Configuration Module

Handles loading updater settings from YAML files.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from .schemas import UpdateCheckInterval
from .version import is_valid_version

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "./script_updater.yaml"
CONFIG_ENV_VAR = "SCRIPT_UPDATER_CONFIG"


class ScriptConfig(BaseModel):
    """Identity of the script being kept up to date."""
    name: str = Field(default="script", min_length=1, description="Script name, scopes the update cache")
    directory: Path = Field(default=Path("."), description="Live directory of the script")


class UpdaterConfig(BaseModel):
    """Update check and download settings."""
    manifest_url: str = Field(default="", description="URL of the version manifest (JSON array)")
    interval: UpdateCheckInterval = Field(default=UpdateCheckInterval.DAILY, description="How often the manifest is fetched")
    current_version: str = Field(default="0.0.0", description="Version of the running script")
    temp_directory: Optional[Path] = Field(default=None, description="Directory for the archive and staging files (null = system temp)")
    request_timeout: int = Field(default=300, ge=1, description="HTTP request timeout in seconds")

    @field_validator("current_version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        if not is_valid_version(value):
            raise ValueError(f"current_version is not a version: {value!r}")
        return value


class StorageConfig(BaseModel):
    """Update cache storage."""
    cache_file: Path = Field(default=Path("./data/update_cache.json"), description="JSON file holding the update cache")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="WARNING", description="Log level (WARNING, INFO, DEBUG)")
    file: Optional[Path] = Field(default=None, description="Log file path (null = console only)")


class Config(BaseModel):
    """Main configuration container."""
    script: ScriptConfig = Field(default_factory=ScriptConfig)
    updater: UpdaterConfig = Field(default_factory=UpdaterConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: Optional[str] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses SCRIPT_UPDATER_CONFIG env var
              or defaults to ./script_updater.yaml

    Returns:
        Config object with loaded settings
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)

    config_path = Path(path)

    if config_path.exists():
        logger.info("Loading configuration from: %s", config_path)
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}

            return Config(
                script=ScriptConfig(**data.get("script", {})),
                updater=UpdaterConfig(**data.get("updater", {})),
                storage=StorageConfig(**data.get("storage", {})),
                logging=LoggingConfig(**data.get("logging", {})),
            )
        except Exception as e:
            logger.warning("Failed to load config file: %s. Using defaults.", e)
            return Config()
    else:
        logger.info("Config file not found at %s. Using defaults.", config_path)
        return Config()


def setup_logging(config: LoggingConfig) -> None:
    """
    Configure logging based on configuration.

    Args:
        config: Logging configuration settings
    """
    level = getattr(logging, config.level.upper(), logging.INFO)

    handlers = [logging.StreamHandler()]

    if config.file:
        try:
            config.file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(config.file))
        except Exception as e:
            # If file logging fails, continue with console-only logging
            print(f"Warning: Could not setup file logging: {e}", file=sys.stderr)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )

    if config.file:
        logger.info("Logging configured: level=%s, file=%s", config.level, config.file)
    else:
        logger.info("Logging configured: level=%s (console only)", config.level)
