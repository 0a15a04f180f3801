"""
Configuration management module for the News Agent.

This module provides configuration management capabilities including:
- Model backend (AWS Bedrock) settings
- Browser session settings and page loading timeouts
- News query defaults and the site selector tables
- Environment variable and file-based configuration loading
- Configuration validation and defaults
"""

from .models import ModelSettings, BrowserSettings, NewsSourceSettings, SystemConfig
from .timeouts import TimeoutConfig
from .manager import ConfigManager
from .sites import (
    GOOGLE_NEWS_CONFIG,
    NewsSiteConfig,
    get_available_categories,
    get_available_languages
)
from .validation import (
    ConfigValidator,
    ValidationError,
    ConfigurationError,
    validate_configuration
)
from .defaults import (
    get_default_model_settings,
    get_default_system_config,
    apply_configuration_defaults,
    create_test_config
)

__all__ = [
    # Data models
    "ModelSettings",
    "BrowserSettings",
    "NewsSourceSettings",
    "SystemConfig",
    "TimeoutConfig",

    # Configuration manager
    "ConfigManager",

    # Site configuration
    "GOOGLE_NEWS_CONFIG",
    "NewsSiteConfig",
    "get_available_categories",
    "get_available_languages",

    # Validation
    "ConfigValidator",
    "ValidationError",
    "ConfigurationError",
    "validate_configuration",

    # Defaults
    "get_default_model_settings",
    "get_default_system_config",
    "apply_configuration_defaults",
    "create_test_config"
]
