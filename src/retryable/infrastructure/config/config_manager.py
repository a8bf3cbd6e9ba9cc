"""Configuration manager for loading and validating .retryable.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from retryable.domain.config import AppConfig, RetryConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".retryable.yml"


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


def _format_validation_error(e: ValidationError) -> str:
    errors = []
    for error in e.errors():
        field = ".".join(str(x) for x in error["loc"])
        msg = error["msg"]
        errors.append(f"  - {field}: {msg}")
    return "Configuration validation failed:\n" + "\n".join(errors)


class ConfigManager:
    """Loads default retry settings from .retryable.yml and environment variables

    Configuration priority:
    1. Default values (defined in Pydantic models)
    2. .retryable.yml file (searched from current directory upwards)
    3. Environment variables (RETRYABLE_*)
    4. Overrides passed to get_retry_config()
    """

    DEFAULT_CONFIG = {
        "retry": {
            "max_attempts": 3,
            "on": ["Exception"],
            "base_delay": 1.0,
            "backoff": "linear",
            "jitter": False,
            "max_delay": None,
        },
    }

    ENV_OVERRIDES = {
        "RETRYABLE_MAX_ATTEMPTS": "max_attempts",
        "RETRYABLE_BASE_DELAY": "base_delay",
        "RETRYABLE_BACKOFF": "backoff",
        "RETRYABLE_JITTER": "jitter",
        "RETRYABLE_MAX_DELAY": "max_delay",
    }

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """Initialize config manager

        Args:
            config_path: Path to .retryable.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            raise ConfigurationError(_format_validation_error(e)) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .retryable.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> AppConfig:
        """Load configuration from file and validate with Pydantic

        Raises:
            ValidationError: If configuration is invalid
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
                config_dict = self._merge_config(config_dict, file_config)
                logger.info(f"Loaded configuration from {self.config_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                logger.info("Using default configuration")

        config_dict = self._apply_env_overrides(config_dict)

        return AppConfig(**config_dict)

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries

        Retry option aliases are folded into field names first so that
        "on" in a file replaces the default "on" instead of sitting next to it.
        """
        result = base.copy()
        for key, value in override.items():
            if key == "retry" and isinstance(value, dict):
                value = RetryConfig.canonical_options(value)
                result[key] = RetryConfig.canonical_options(result.get(key) or {})
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply RETRYABLE_* environment variable overrides

        Values are passed as strings; Pydantic coerces them.
        """
        retry = config.setdefault("retry", {})
        for env_name, field in self.ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                retry[field] = value
        return config

    def get_retry_config(self, **overrides: Any) -> RetryConfig:
        """Get retry configuration

        Args:
            **overrides: Per-call option overrides (max_attempts, on, ...)

        Returns:
            Retry configuration model

        Raises:
            ConfigurationError: If an override is invalid
        """
        if not overrides:
            return self.config.retry
        try:
            return self.config.retry.merged(**overrides)
        except ValidationError as e:
            raise ConfigurationError(_format_validation_error(e)) from e
