"""Core module for taskgpt.

Provides the error taxonomy, retry configuration and structured logging.
"""

from taskgpt.core.errors import (
    ApiError,
    AuthenticationError,
    ClientError,
    InvalidAudioError,
    InvalidImageError,
    InvalidInputError,
    MalformedResponseError,
    NetworkError,
    RateLimitError,
    ServerError,
    TaskGptError,
    ValidationError,
)
from taskgpt.core.logging import get_logger
from taskgpt.core.retry_config import ErrorCategory, RetryConfig

__all__ = [
    # Errors
    "TaskGptError",
    "ApiError",
    "RateLimitError",
    "AuthenticationError",
    "ClientError",
    "ServerError",
    "MalformedResponseError",
    "NetworkError",
    "ValidationError",
    "InvalidImageError",
    "InvalidAudioError",
    "InvalidInputError",
    # Retry
    "ErrorCategory",
    "RetryConfig",
    # Logging
    "get_logger",
]
