"""
Error handling utilities for the Bedrock model backend.

This module provides error classification and the retry policy used by the
model client. Retries are transport level: one model call either eventually
succeeds or raises a single ModelCallError to the dialogue loop.
"""

from dataclasses import dataclass
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError, ConnectTimeoutError, ReadTimeoutError

from ..config.timeouts import TimeoutConfig


@dataclass
class RetryConfig:
    """Configuration for retry logic."""

    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0

    @classmethod
    def from_timeouts(cls, timeouts: TimeoutConfig, max_retries: int) -> 'RetryConfig':
        """Build the retry policy from the configured backoff bounds."""
        return cls(
            max_retries=max_retries,
            base_delay=timeouts.retry_base_delay,
            max_delay=timeouts.retry_max_delay,
            exponential_base=timeouts.retry_exponential_base
        )

    def delay_for(self, attempt: int) -> float:
        """Exponential backoff delay in seconds for a 0-based attempt."""
        return min(self.base_delay * (self.exponential_base ** attempt), self.max_delay)


class ModelCallError(Exception):
    """Base exception for failures of the model call."""

    def __init__(self, message: str, error_code: Optional[str] = None, retryable: bool = False):
        super().__init__(message)
        self.error_code = error_code
        self.retryable = retryable


class ModelTimeoutError(ModelCallError):
    """Exception for model call timeouts."""

    def __init__(self, message: str = "Model request timed out"):
        super().__init__(message, error_code="TIMEOUT", retryable=True)


class ModelRateLimitError(ModelCallError):
    """Exception for model rate limit errors."""

    def __init__(self, message: str = "Model rate limit exceeded"):
        super().__init__(message, error_code="RATE_LIMIT", retryable=True)


class ModelServiceError(ModelCallError):
    """Exception for model service errors."""

    def __init__(self, message: str, error_code: str, retryable: bool = False):
        super().__init__(message, error_code=error_code, retryable=retryable)


RETRYABLE_SERVICE_CODES = (
    'InternalServerException',
    'InternalServerError',
    'ServiceUnavailableException',
    'ModelNotReadyException',
)

THROTTLING_CODES = ('ThrottlingException', 'TooManyRequestsException')


def classify_model_error(error: Exception) -> ModelCallError:
    """
    Classify AWS errors into model call error types.

    Args:
        error: Original exception from the AWS SDK or response handling

    Returns:
        Classified ModelCallError with retry information
    """
    if isinstance(error, ModelCallError):
        return error

    if isinstance(error, (ReadTimeoutError, ConnectTimeoutError)):
        return ModelTimeoutError("Request timed out")

    if isinstance(error, ClientError):
        error_info = error.response.get('Error', {})
        error_code = error_info.get('Code', 'Unknown')
        error_message = error_info.get('Message', str(error))

        if error_code in THROTTLING_CODES:
            return ModelRateLimitError(f"Rate limit: {error_message}")

        if error_code == 'ModelTimeoutException':
            return ModelTimeoutError(f"Model timeout: {error_message}")

        if error_code in RETRYABLE_SERVICE_CODES:
            return ModelServiceError(
                f"Service error: {error_message}",
                error_code=error_code,
                retryable=True
            )

        if error_code in ['ValidationException', 'AccessDeniedException', 'ResourceNotFoundException']:
            return ModelServiceError(
                f"Client error: {error_message}",
                error_code=error_code,
                retryable=False
            )

        return ModelServiceError(
            f"Unknown client error: {error_message}",
            error_code=error_code,
            retryable=False
        )

    if isinstance(error, BotoCoreError):
        return ModelServiceError(
            f"SDK error: {str(error)}",
            error_code="SDK_ERROR",
            retryable=True
        )

    return ModelServiceError(
        f"Unknown error: {str(error)}",
        error_code="UNKNOWN",
        retryable=False
    )
