#!/usr/bin/env python3
"""
Configuration management for gamedata-insight.

Supports:
- YAML configuration files
- Environment variable overrides
- Default values
- Validation
"""
from __future__ import annotations

import os
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import (
    DEFAULT_GRAPH_MAX_DEPTH,
    DEFAULT_LOG_LEVEL,
    DEFAULT_OUTPUT_FORMAT,
    OUTPUT_FORMATS,
    SAMPLE_RECORD_LIMIT,
)
from .exceptions import ConfigurationError
from .logging_config import get_logger

logger = get_logger(__name__)

COLOR_MODES = ("auto", "always", "never")


@dataclass(frozen=True)
class Config:
    color_enabled: bool = True
    sample_record_limit: int = SAMPLE_RECORD_LIMIT
    check_database_sync: bool = False
    default_max_depth: int = DEFAULT_GRAPH_MAX_DEPTH

    # derived ANSI codes (empty strings if color disabled)
    def colors(self):
        if not self.color_enabled:
            return "", "", "", "", ""
        return "\033[91m", "\033[92m", "\033[93m", "\033[96m", "\033[0m"


@dataclass
class InsightConfig:
    """User-facing settings with defaults, loaded from YAML and environment."""

    # Output settings
    color_mode: str = "auto"  # auto, always, never
    output_format: str = DEFAULT_OUTPUT_FORMAT

    # Analysis settings
    sample_record_limit: int = SAMPLE_RECORD_LIMIT
    check_database_sync: bool = False
    default_max_depth: int = DEFAULT_GRAPH_MAX_DEPTH

    # Logging
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[str] = None

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "InsightConfig":
        """Load configuration from file and environment.

        An explicit ``config_path`` that does not exist is an error; a
        discovered file is optional.
        """
        config = cls()

        if config_path and not Path(config_path).exists():
            raise ConfigurationError(
                f"Config file not found: {config_path}", config_key="config_path"
            )

        config_file = config_path or cls._find_config_file()
        if config_file:
            config._load_from_file(config_file)

        config._load_from_env()
        config.validate()
        return config

    @staticmethod
    def _find_config_file() -> Optional[str]:
        """Find config file in standard locations."""
        candidates = [
            "gamedata-insight.yml",
            "gamedata-insight.yaml",
            ".gamedata-insight.yml",
            ".gamedata-insight.yaml",
            os.path.expanduser("~/.gamedata-insight.yml"),
            os.path.expanduser("~/.gamedata-insight.yaml"),
            os.path.expanduser("~/.config/gamedata-insight/config.yml"),
            os.path.expanduser("~/.config/gamedata-insight/config.yaml"),
        ]

        for candidate in candidates:
            if Path(candidate).exists():
                return candidate
        return None

    def _load_from_file(self, config_path: str) -> None:
        """Load configuration from YAML file."""
        import yaml

        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Invalid YAML in {config_path}", config_key="config_path", cause=e
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Config file {config_path} must contain a mapping",
                config_key="config_path",
                config_value=type(data).__name__,
            )

        # Update fields that exist in the dataclass
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                logger.warning("Ignoring unknown config key %r in %s", key, config_path)

        logger.debug("Loaded configuration from %s", config_path)

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        env_mapping = {
            "GAMEDATA_INSIGHT_COLOR": "color_mode",
            "GAMEDATA_INSIGHT_FORMAT": "output_format",
            "GAMEDATA_INSIGHT_SAMPLE_LIMIT": "sample_record_limit",
            "GAMEDATA_INSIGHT_CHECK_DB_SYNC": "check_database_sync",
            "GAMEDATA_INSIGHT_MAX_DEPTH": "default_max_depth",
            "GAMEDATA_INSIGHT_LOG_LEVEL": "log_level",
            "GAMEDATA_INSIGHT_LOG_FILE": "log_file",
        }

        for env_var, attr_name in env_mapping.items():
            value: Any = os.getenv(env_var)
            if value is None:
                continue
            # Type conversion
            if attr_name == "check_database_sync":
                value = value.lower() in ("true", "1", "yes", "on")
            elif attr_name in ("sample_record_limit", "default_max_depth"):
                try:
                    value = int(value)
                except ValueError as e:
                    raise ConfigurationError(
                        f"{env_var} must be an integer",
                        config_key=attr_name,
                        config_value=value,
                        cause=e,
                    ) from e

            setattr(self, attr_name, value)

    def validate(self) -> None:
        if self.color_mode not in COLOR_MODES:
            raise ConfigurationError(
                f"color_mode must be one of {', '.join(COLOR_MODES)}",
                config_key="color_mode",
                config_value=self.color_mode,
            )
        if self.output_format not in OUTPUT_FORMATS:
            raise ConfigurationError(
                f"output_format must be one of {', '.join(OUTPUT_FORMATS)}",
                config_key="output_format",
                config_value=self.output_format,
            )
        for key in ("sample_record_limit", "default_max_depth"):
            value = getattr(self, key)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ConfigurationError(
                    f"{key} must be a non-negative integer",
                    config_key=key,
                    config_value=value,
                )

    def color_enabled(self, stream=None) -> bool:
        if self.color_mode == "always":
            return True
        if self.color_mode == "never":
            return False
        stream = stream or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def to_config(self, color_enabled: Optional[bool] = None) -> Config:
        """Freeze the settings the analysis needs."""
        if color_enabled is None:
            color_enabled = self.color_enabled()
        return Config(
            color_enabled=color_enabled,
            sample_record_limit=self.sample_record_limit,
            check_database_sync=bool(self.check_database_sync),
            default_max_depth=self.default_max_depth,
        )

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def save(self, config_path: str) -> None:
        """Save current configuration to file."""
        import yaml

        # Convert to dict, excluding None values
        data = {key: value for key, value in self.as_dict().items() if value is not None}

        Path(config_path).parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=True)


__all__ = ["Config", "InsightConfig", "COLOR_MODES"]
