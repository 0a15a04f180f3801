"""
Configuration manager for loading and managing system configuration.

This module provides the ConfigManager class that handles loading configuration
from environment variables, files, and default values with proper validation.
"""

import os
import json
import logging
from typing import Dict, Optional, Any
from pathlib import Path

from .models import SystemConfig, ModelSettings, BrowserSettings, NewsSourceSettings
from .timeouts import TimeoutConfig
from .validation import validate_configuration
from .defaults import apply_configuration_defaults, get_default_system_config


logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "news_agent.json"


def _env_bool(value: str) -> bool:
    return value.lower() in ("true", "1", "yes")


class ConfigManager:
    """Manages system configuration loading and validation."""

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            config_dir: Optional directory path for configuration files
        """
        self.config_dir = Path(config_dir) if config_dir else Path("config")
        self._system_config: Optional[SystemConfig] = None

    def load_configuration(self) -> SystemConfig:
        """
        Load complete system configuration from all sources.

        Returns:
            SystemConfig object with all loaded settings
        """
        if self._system_config is None:
            self._system_config = self._build_system_config()
        return self._system_config

    def _build_system_config(self) -> SystemConfig:
        """Build system configuration from all sources."""
        try:
            system_config = SystemConfig(
                model_settings=self._load_model_settings(),
                browser_settings=self._load_browser_settings(),
                news_settings=self._load_news_settings(),
                timeouts=TimeoutConfig.from_environment()
            )

            self._apply_environment_overrides(system_config)

            # File values override environment values
            file_config = self._load_config_file()
            if file_config:
                self._update_from_dict(system_config, file_config)

            system_config = apply_configuration_defaults(system_config)

            validation_errors = validate_configuration(system_config, raise_on_error=False)
            if validation_errors:
                # Log validation errors but don't fail - defaults were applied
                logger.warning(f"Configuration validation warnings: {len(validation_errors)} issues found")
                for error in validation_errors[:5]:
                    logger.warning(f"  - {error}")
                if len(validation_errors) > 5:
                    logger.warning(f"  ... and {len(validation_errors) - 5} more")

            return system_config

        except (ValueError, TypeError) as e:
            # If configuration loading fails completely, return safe defaults
            logger.warning(f"Configuration loading failed: {e}. Using default configuration.")
            return get_default_system_config()

    def _load_model_settings(self) -> ModelSettings:
        """Load model backend settings from environment variables."""
        settings = ModelSettings()

        if region := os.getenv("AWS_REGION"):
            settings.region = region

        if model_id := os.getenv("BEDROCK_MODEL_ID"):
            settings.model_id = model_id

        if max_tokens := os.getenv("BEDROCK_MAX_TOKENS"):
            try:
                settings.max_tokens = int(max_tokens)
            except ValueError:
                pass  # Keep default

        if temperature := os.getenv("BEDROCK_TEMPERATURE"):
            try:
                settings.temperature = float(temperature)
            except ValueError:
                pass  # Keep default

        if max_retries := os.getenv("MODEL_MAX_RETRIES"):
            try:
                settings.max_retries = int(max_retries)
            except ValueError:
                pass  # Keep default

        return settings

    def _load_browser_settings(self) -> BrowserSettings:
        """Load browser settings from environment variables."""
        settings = BrowserSettings()

        if backend := os.getenv("BROWSER_BACKEND"):
            settings.backend = backend.lower()

        if headless := os.getenv("BROWSER_HEADLESS"):
            settings.headless = _env_bool(headless)

        if user_agent := os.getenv("BROWSER_USER_AGENT"):
            settings.user_agent = user_agent

        return settings

    def _load_news_settings(self) -> NewsSourceSettings:
        """Load news query defaults from environment variables."""
        settings = NewsSourceSettings()

        if language := os.getenv("NEWS_DEFAULT_LANGUAGE"):
            settings.default_language = language

        if country := os.getenv("NEWS_DEFAULT_COUNTRY"):
            settings.default_country = country.upper()

        if cap := os.getenv("NEWS_MAX_ARTICLES_CAP"):
            try:
                settings.max_articles_cap = int(cap)
            except ValueError:
                pass

        return settings

    def _apply_environment_overrides(self, config: SystemConfig) -> None:
        """Apply environment-specific configuration overrides."""
        if log_level := os.getenv("LOG_LEVEL"):
            config.log_level = log_level.upper()

        if structured := os.getenv("STRUCTURED_LOGGING"):
            config.structured_logging = _env_bool(structured)

    def _load_config_file(self) -> Dict[str, Any]:
        """Load the optional JSON configuration file."""
        config_file = self.config_dir / CONFIG_FILE_NAME
        if not config_file.exists():
            return {}

        try:
            with open(config_file, 'r') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable configuration file {config_file}: {e}")
            return {}

        return data if isinstance(data, dict) else {}

    def _update_from_dict(self, config: SystemConfig, config_dict: Dict[str, Any]) -> None:
        """Update configuration sections from dictionary data."""
        sections = {
            "model": config.model_settings,
            "browser": config.browser_settings,
            "news": config.news_settings,
            "timeouts": config.timeouts,
        }

        for section_name, target in sections.items():
            values = config_dict.get(section_name)
            if not isinstance(values, dict):
                continue
            for key, value in values.items():
                if not hasattr(target, key):
                    continue
                current = getattr(target, key)
                try:
                    if isinstance(current, bool):
                        value = value if isinstance(value, bool) else _env_bool(str(value))
                    elif isinstance(current, (int, float)):
                        value = type(current)(value)
                except (TypeError, ValueError):
                    continue  # Keep current value
                setattr(target, key, value)

        if "log_level" in config_dict:
            config.log_level = str(config_dict["log_level"]).upper()
        if "structured_logging" in config_dict:
            config.structured_logging = bool(config_dict["structured_logging"])
