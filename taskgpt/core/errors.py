"""Error taxonomy for taskgpt.

Every failure surfaced to callers is a ``TaskGptError`` tagged with an
``ErrorCategory``. API errors additionally carry the HTTP status code.
"""

from typing import Optional

from taskgpt.core.retry_config import ErrorCategory


class TaskGptError(Exception):
    """Base class for all taskgpt errors."""

    category: ErrorCategory

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class ApiError(TaskGptError):
    """The remote API answered with a failure status or an unusable body."""

    category = ErrorCategory.CLIENT_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.status_code = status_code


class RateLimitError(ApiError):
    """429 Too Many Requests."""

    category = ErrorCategory.RATE_LIMIT

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = 429,
        retry_after: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, status_code, cause)
        # Epoch seconds at which the limit resets, when the server told us.
        self.retry_after = retry_after


class AuthenticationError(ApiError):
    """401 Unauthorized."""

    category = ErrorCategory.AUTHENTICATION


class ClientError(ApiError):
    """4xx other than 401 and 429."""

    category = ErrorCategory.CLIENT_ERROR


class ServerError(ApiError):
    """5xx after all attempts were used."""

    category = ErrorCategory.SERVER_ERROR


class MalformedResponseError(ApiError):
    """Success status, but the body could not be used."""

    category = ErrorCategory.MALFORMED_RESPONSE


class NetworkError(TaskGptError):
    """No response was received after all attempts were used."""

    category = ErrorCategory.NETWORK


class ValidationError(TaskGptError):
    """Input rejected locally, before any request was made."""

    category = ErrorCategory.VALIDATION


class InvalidImageError(ValidationError):
    pass


class InvalidAudioError(ValidationError):
    pass


class InvalidInputError(ValidationError):
    pass
