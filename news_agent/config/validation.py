"""
Configuration validation utilities.

This module provides validation functions and error classes for configuration
management, ensuring that all configuration values are valid and complete.
"""

from typing import List, Any
import re

from .models import (
    ModelSettings, BrowserSettings, NewsSourceSettings, SystemConfig,
    SUPPORTED_BROWSER_BACKENDS
)
from .sites import GOOGLE_NEWS_CONFIG


VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigurationError(Exception):
    """Base exception for configuration-related errors."""
    pass


class ValidationError(ConfigurationError):
    """Exception raised when configuration validation fails."""

    def __init__(self, field: str, message: str, value: Any = None):
        self.field = field
        self.message = message
        self.value = value
        super().__init__(f"Validation error for '{field}': {message}")


class ConfigValidator:
    """Validates configuration objects and provides detailed error reporting."""

    @staticmethod
    def validate_model_settings(settings: ModelSettings) -> List[ValidationError]:
        """
        Validate ModelSettings object.

        Args:
            settings: ModelSettings to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not settings.region or not settings.region.strip():
            errors.append(ValidationError("region", "AWS region cannot be empty"))
        elif not ConfigValidator._is_valid_aws_region(settings.region):
            errors.append(ValidationError("region", "Invalid AWS region format", settings.region))

        if not settings.model_id or not settings.model_id.strip():
            errors.append(ValidationError("model_id", "Model ID cannot be empty"))

        if settings.max_tokens <= 0:
            errors.append(ValidationError("max_tokens", "Max tokens must be positive", settings.max_tokens))

        if not 0.0 <= settings.temperature <= 1.0:
            errors.append(ValidationError(
                "temperature",
                "Temperature must be between 0.0 and 1.0",
                settings.temperature
            ))

        if settings.max_retries < 0:
            errors.append(ValidationError("max_retries", "Max retries must be non-negative", settings.max_retries))
        elif settings.max_retries > 10:
            errors.append(ValidationError("max_retries", "Max retries should not exceed 10", settings.max_retries))

        if settings.timeout_seconds <= 0:
            errors.append(ValidationError("timeout_seconds", "Timeout must be positive", settings.timeout_seconds))

        return errors

    @staticmethod
    def validate_browser_settings(settings: BrowserSettings) -> List[ValidationError]:
        """Validate BrowserSettings object."""
        errors = []

        if settings.backend not in SUPPORTED_BROWSER_BACKENDS:
            errors.append(ValidationError(
                "backend",
                f"Backend must be one of {', '.join(SUPPORTED_BROWSER_BACKENDS)}",
                settings.backend
            ))

        if not settings.user_agent or not settings.user_agent.strip():
            errors.append(ValidationError("user_agent", "User agent cannot be empty"))

        if settings.viewport_width <= 0 or settings.viewport_height <= 0:
            errors.append(ValidationError(
                "viewport",
                "Viewport dimensions must be positive",
                (settings.viewport_width, settings.viewport_height)
            ))

        return errors

    @staticmethod
    def validate_news_settings(settings: NewsSourceSettings) -> List[ValidationError]:
        """Validate NewsSourceSettings object."""
        errors = []

        if not ConfigValidator._is_valid_language_tag(settings.default_language):
            errors.append(ValidationError(
                "default_language",
                "Invalid language tag format",
                settings.default_language
            ))
        elif settings.default_language not in GOOGLE_NEWS_CONFIG.languages:
            errors.append(ValidationError(
                "default_language",
                "Language edition is not supported",
                settings.default_language
            ))

        if not re.match(r'^[A-Z]{2}$', settings.default_country or ""):
            errors.append(ValidationError(
                "default_country",
                "Country code must be two upper-case letters",
                settings.default_country
            ))

        if settings.default_max_articles <= 0:
            errors.append(ValidationError(
                "default_max_articles",
                "Default max articles must be positive",
                settings.default_max_articles
            ))

        if settings.max_articles_cap < settings.default_max_articles:
            errors.append(ValidationError(
                "max_articles_cap",
                "Article cap must not be below the default max articles",
                settings.max_articles_cap
            ))

        return errors

    @staticmethod
    def validate_system_config(config: SystemConfig) -> List[ValidationError]:
        """
        Validate complete SystemConfig object.

        Args:
            config: SystemConfig to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        for error in ConfigValidator.validate_model_settings(config.model_settings):
            error.field = f"model_settings.{error.field}"
            errors.append(error)

        for error in ConfigValidator.validate_browser_settings(config.browser_settings):
            error.field = f"browser_settings.{error.field}"
            errors.append(error)

        for error in ConfigValidator.validate_news_settings(config.news_settings):
            error.field = f"news_settings.{error.field}"
            errors.append(error)

        try:
            config.timeouts.validate()
        except ValueError as e:
            errors.append(ValidationError("timeouts", str(e)))

        if config.log_level not in VALID_LOG_LEVELS:
            errors.append(ValidationError(
                "log_level",
                f"Log level must be one of {', '.join(VALID_LOG_LEVELS)}",
                config.log_level
            ))

        return errors

    @staticmethod
    def _is_valid_aws_region(region: str) -> bool:
        """Check if AWS region format is valid."""
        pattern = r'^[a-z]{2}(-gov)?-[a-z]+-\d+$'
        return bool(re.match(pattern, region))

    @staticmethod
    def _is_valid_language_tag(tag: str) -> bool:
        """Check that a language tag looks like 'en' or 'en-US'."""
        if not tag:
            return False
        return bool(re.match(r'^[a-z]{2,3}(-[A-Z]{2})?$', tag))


def validate_configuration(config: SystemConfig, raise_on_error: bool = False) -> List[ValidationError]:
    """
    Validate system configuration and optionally raise on errors.

    Args:
        config: SystemConfig to validate
        raise_on_error: If True, raise ConfigurationError on validation failure

    Returns:
        List of validation errors

    Raises:
        ConfigurationError: If validation fails and raise_on_error is True
    """
    errors = ConfigValidator.validate_system_config(config)

    if errors and raise_on_error:
        error_messages = [str(error) for error in errors]
        raise ConfigurationError("Configuration validation failed:\n" + "\n".join(error_messages))

    return errors
