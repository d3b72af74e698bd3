"""taskgpt: task-specific clients for an OpenAI-compatible LLM API.

Packages:
- client: HTTP dispatcher with retry and error classification
- validators: image and audio pre-flight checks
- services: OCR, mathematics, programming, chat and speech facades
"""

from taskgpt.client import ApiClient
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
from taskgpt.core.retry_config import ErrorCategory, RetryConfig
from taskgpt.factory import ServiceFactory
from taskgpt.validators import AudioValidator, ImageValidator

__version__ = "0.1.0"

__all__ = [
    "ApiClient",
    "ServiceFactory",
    "AudioValidator",
    "ImageValidator",
    "ErrorCategory",
    "RetryConfig",
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
]
