"""
Timeout configuration for all external calls.

This module centralizes the bounds used while loading news pages (navigation,
content readiness, grace delay), for the static HTTP backend, and for calls to
the Bedrock model backend.
"""

from dataclasses import dataclass
import os


@dataclass
class TimeoutConfig:
    """Timeout configuration for all external operations."""

    # Browser page loading
    navigation_timeout_ms: int = 30000   # Wait for network quiescence
    readiness_timeout_ms: int = 15000    # Wait for any sign of article content
    grace_delay_ms: int = 3000           # Extra wait when readiness times out

    # Static HTTP backend
    http_connect_timeout: int = 10   # Read bound is the navigation timeout

    # Bedrock model calls
    model_connect_timeout: int = 10
    model_read_timeout: int = 60

    # Model call retry backoff
    retry_base_delay: float = 1.0
    retry_max_delay: float = 30.0
    retry_exponential_base: float = 2.0

    @classmethod
    def from_environment(cls) -> 'TimeoutConfig':
        """Create timeout configuration from environment variables."""
        return cls(
            navigation_timeout_ms=int(os.getenv('NAVIGATION_TIMEOUT_MS', '30000')),
            readiness_timeout_ms=int(os.getenv('READINESS_TIMEOUT_MS', '15000')),
            grace_delay_ms=int(os.getenv('GRACE_DELAY_MS', '3000')),

            http_connect_timeout=int(os.getenv('HTTP_CONNECT_TIMEOUT', '10')),

            model_connect_timeout=int(os.getenv('MODEL_CONNECT_TIMEOUT', '10')),
            model_read_timeout=int(os.getenv('MODEL_READ_TIMEOUT', '60')),

            retry_base_delay=float(os.getenv('RETRY_BASE_DELAY', '1.0')),
            retry_max_delay=float(os.getenv('RETRY_MAX_DELAY', '30.0')),
            retry_exponential_base=float(os.getenv('RETRY_EXPONENTIAL_BASE', '2.0'))
        )

    def validate(self) -> None:
        """Validate timeout configuration values."""
        if self.navigation_timeout_ms <= 0:
            raise ValueError("Navigation timeout must be positive")
        if self.readiness_timeout_ms <= 0:
            raise ValueError("Readiness timeout must be positive")
        if self.readiness_timeout_ms > self.navigation_timeout_ms:
            raise ValueError("Readiness timeout must not exceed navigation timeout")
        if self.grace_delay_ms < 0:
            raise ValueError("Grace delay must be non-negative")

        if self.http_connect_timeout <= 0:
            raise ValueError("HTTP connect timeout must be positive")

        if self.model_connect_timeout <= 0:
            raise ValueError("Model connect timeout must be positive")
        if self.model_read_timeout <= 0:
            raise ValueError("Model read timeout must be positive")

        if self.retry_base_delay < 0:
            raise ValueError("Retry base delay must be non-negative")
        if self.retry_max_delay < self.retry_base_delay:
            raise ValueError("Retry max delay must be greater than or equal to base delay")
        if self.retry_exponential_base <= 1:
            raise ValueError("Retry exponential base must be greater than 1")
