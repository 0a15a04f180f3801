"""
Configuration data models for the News Agent.

This module defines the core data structures used for configuration management,
including model backend settings, browser session settings and the defaults
applied to news queries.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .timeouts import TimeoutConfig


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

SUPPORTED_BROWSER_BACKENDS = ("playwright", "http")


@dataclass
class ModelSettings:
    """Configuration for the Bedrock model backend."""

    region: str = "us-east-1"
    model_id: str = "anthropic.claude-3-haiku-20240307-v1:0"
    max_tokens: int = 1000
    temperature: float = 0.1
    max_retries: int = 3
    timeout_seconds: int = 30

    def __post_init__(self):
        """Validate model settings after initialization."""
        if not self.region:
            raise ValueError("AWS region cannot be empty")
        if not self.model_id:
            raise ValueError("Model ID cannot be empty")
        if self.max_retries < 0:
            raise ValueError("Max retries must be non-negative")
        if self.timeout_seconds <= 0:
            raise ValueError("Timeout must be positive")


@dataclass
class BrowserSettings:
    """Configuration for the browser session used to load news pages."""

    backend: str = "playwright"
    headless: bool = True
    viewport_width: int = 1920
    viewport_height: int = 1080
    user_agent: str = DEFAULT_USER_AGENT
    launch_args: List[str] = field(default_factory=lambda: [
        "--no-sandbox",
        "--disable-setuid-sandbox",
        "--disable-dev-shm-usage",
        "--disable-accelerated-2d-canvas",
        "--no-first-run",
        "--no-zygote",
        "--disable-gpu",
    ])

    def __post_init__(self):
        """Validate browser settings."""
        if self.backend not in SUPPORTED_BROWSER_BACKENDS:
            raise ValueError(f"Unsupported browser backend: {self.backend}")
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            raise ValueError("Viewport dimensions must be positive")


@dataclass
class NewsSourceSettings:
    """Defaults applied to news queries issued by the model."""

    default_language: str = "en-US"
    default_country: str = "US"
    default_max_articles: int = 10
    max_articles_cap: int = 50

    def __post_init__(self):
        """Validate news source defaults."""
        if self.default_max_articles <= 0:
            raise ValueError("Default max articles must be positive")
        if self.max_articles_cap < self.default_max_articles:
            raise ValueError("Article cap must not be below the default max articles")


@dataclass
class SystemConfig:
    """Overall system configuration combining all settings."""

    model_settings: ModelSettings = field(default_factory=ModelSettings)
    browser_settings: BrowserSettings = field(default_factory=BrowserSettings)
    news_settings: NewsSourceSettings = field(default_factory=NewsSourceSettings)
    timeouts: TimeoutConfig = field(default_factory=TimeoutConfig)

    log_level: str = "INFO"
    structured_logging: bool = True

    def to_summary(self) -> Dict[str, Optional[str]]:
        """Short, credential-free summary used in startup logs."""
        return {
            "region": self.model_settings.region,
            "model_id": self.model_settings.model_id,
            "browser_backend": self.browser_settings.backend,
            "log_level": self.log_level,
        }
