"""
Default configuration values and factory functions.

This module provides default configurations and factory functions for creating
configuration objects with sensible defaults when values are missing or invalid.
"""

import os

from .models import (
    ModelSettings, BrowserSettings, NewsSourceSettings, SystemConfig,
    SUPPORTED_BROWSER_BACKENDS
)
from .timeouts import TimeoutConfig
from .validation import VALID_LOG_LEVELS


def get_default_model_settings() -> ModelSettings:
    """
    Get default model settings with environment-aware region.

    Returns:
        ModelSettings with sensible defaults
    """
    default_region = "us-east-1"
    if aws_region := os.getenv("AWS_DEFAULT_REGION"):
        default_region = aws_region
    elif aws_region := os.getenv("AWS_REGION"):
        default_region = aws_region

    return ModelSettings(
        region=default_region,
        model_id="anthropic.claude-3-haiku-20240307-v1:0",
        max_tokens=1000,
        temperature=0.1,
        max_retries=3,
        timeout_seconds=30
    )


def get_default_system_config() -> SystemConfig:
    """
    Get complete default system configuration.

    Returns:
        SystemConfig with all default values
    """
    return SystemConfig(
        model_settings=get_default_model_settings(),
        browser_settings=BrowserSettings(),
        news_settings=NewsSourceSettings(),
        timeouts=TimeoutConfig(),
        log_level="INFO",
        structured_logging=True
    )


def apply_configuration_defaults(config: SystemConfig) -> SystemConfig:
    """
    Apply default values to missing or invalid configuration fields.

    Args:
        config: SystemConfig to apply defaults to

    Returns:
        SystemConfig with defaults applied
    """
    defaults = get_default_system_config()

    # Model settings
    if not config.model_settings.region:
        config.model_settings.region = defaults.model_settings.region

    if not config.model_settings.model_id:
        config.model_settings.model_id = defaults.model_settings.model_id

    if config.model_settings.max_tokens <= 0:
        config.model_settings.max_tokens = defaults.model_settings.max_tokens

    if not 0.0 <= config.model_settings.temperature <= 1.0:
        config.model_settings.temperature = defaults.model_settings.temperature

    if config.model_settings.max_retries < 0:
        config.model_settings.max_retries = defaults.model_settings.max_retries

    if config.model_settings.timeout_seconds <= 0:
        config.model_settings.timeout_seconds = defaults.model_settings.timeout_seconds

    # Browser settings
    if config.browser_settings.backend not in SUPPORTED_BROWSER_BACKENDS:
        config.browser_settings.backend = defaults.browser_settings.backend

    if not config.browser_settings.user_agent:
        config.browser_settings.user_agent = defaults.browser_settings.user_agent

    # News defaults
    if config.news_settings.default_max_articles <= 0:
        config.news_settings.default_max_articles = defaults.news_settings.default_max_articles

    if config.news_settings.max_articles_cap < config.news_settings.default_max_articles:
        config.news_settings.max_articles_cap = max(
            defaults.news_settings.max_articles_cap,
            config.news_settings.default_max_articles
        )

    if not config.news_settings.default_language:
        config.news_settings.default_language = defaults.news_settings.default_language

    if not config.news_settings.default_country:
        config.news_settings.default_country = defaults.news_settings.default_country

    # Page loading bounds
    if config.timeouts.navigation_timeout_ms <= 0:
        config.timeouts.navigation_timeout_ms = defaults.timeouts.navigation_timeout_ms

    if config.timeouts.readiness_timeout_ms <= 0:
        config.timeouts.readiness_timeout_ms = defaults.timeouts.readiness_timeout_ms

    if config.timeouts.grace_delay_ms < 0:
        config.timeouts.grace_delay_ms = defaults.timeouts.grace_delay_ms

    if not config.log_level or config.log_level not in VALID_LOG_LEVELS:
        config.log_level = defaults.log_level

    return config


def create_test_config() -> SystemConfig:
    """Create configuration optimized for testing."""
    config = get_default_system_config()
    config.model_settings.region = "us-east-1"
    config.model_settings.max_retries = 0
    config.browser_settings.backend = "http"
    config.timeouts.navigation_timeout_ms = 1000
    config.timeouts.readiness_timeout_ms = 500
    config.timeouts.grace_delay_ms = 0
    config.log_level = "CRITICAL"  # Minimal logging during tests
    config.structured_logging = False
    return config
