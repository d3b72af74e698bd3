"""Error classifier for taskgpt.

Classifies failed HTTP responses into categories and builds the matching
exception for callers.
"""

import time
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional

import requests

from taskgpt.core.errors import (
    ApiError,
    AuthenticationError,
    ClientError,
    RateLimitError,
    ServerError,
)
from taskgpt.core.retry_config import ErrorCategory

DEFAULT_MESSAGES = {
    ErrorCategory.RATE_LIMIT: "Rate limit exceeded",
    ErrorCategory.AUTHENTICATION: "Authentication failed",
    ErrorCategory.CLIENT_ERROR: "API request failed",
    ErrorCategory.SERVER_ERROR: "API request failed",
}


class ErrorClassifier:
    """Classifies failed responses into categories for retry decisions.

    Static methods for stateless classification.
    """

    @staticmethod
    def categorize(status_code: int) -> ErrorCategory:
        """Categorize a non-success HTTP status code.

        Args:
            status_code: HTTP status of the response

        Returns:
            ErrorCategory enum value
        """
        if status_code == 429:
            return ErrorCategory.RATE_LIMIT
        if status_code == 401:
            return ErrorCategory.AUTHENTICATION
        if 500 <= status_code < 600:
            return ErrorCategory.SERVER_ERROR
        return ErrorCategory.CLIENT_ERROR

    @staticmethod
    def parse_body(response: requests.Response) -> Dict[str, Any]:
        """Decode the response body as a JSON object, or return {} if it is not one."""
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def error_details(body: Dict[str, Any]) -> Dict[str, Any]:
        """Return the ``error`` object of an error body, falling back to the body itself."""
        error = body.get("error")
        if isinstance(error, dict):
            return error
        if isinstance(error, str):
            return {"message": error}
        return body

    @staticmethod
    def extract_retry_after(
        response: requests.Response,
        body: Dict[str, Any],
        now: Optional[float] = None,
    ) -> Optional[int]:
        """Find when a rate limit resets, as epoch seconds.

        The body field ``retry_after`` wins; otherwise the ``Retry-After``
        header is read as seconds from now (or as an HTTP date).

        Args:
            response: The 429 response
            body: Decoded response body ({} when not JSON)
            now: Current epoch time, for tests

        Returns:
            Epoch seconds, or None when the server gave no hint
        """
        details = ErrorClassifier.error_details(body)
        for source in (details, body):
            value = source.get("retry_after")
            if value is None:
                continue
            try:
                return int(value)
            except (TypeError, ValueError):
                continue

        header = response.headers.get("Retry-After")
        if not header:
            return None

        current = time.time() if now is None else now
        try:
            return int(current) + int(header.strip())
        except ValueError:
            pass

        try:
            return int(parsedate_to_datetime(header).timestamp())
        except (TypeError, ValueError):
            return None

    @staticmethod
    def build_error(
        response: requests.Response,
        cause: Optional[BaseException] = None,
    ) -> ApiError:
        """Build the classified exception for a failed response.

        Args:
            response: Response with a non-success status
            cause: Underlying exception, if any

        Returns:
            ApiError subclass matching the status category
        """
        status_code = response.status_code
        category = ErrorClassifier.categorize(status_code)
        body = ErrorClassifier.parse_body(response)
        message = ErrorClassifier.error_details(body).get("message")
        if not isinstance(message, str) or not message.strip():
            message = DEFAULT_MESSAGES[category]

        if category == ErrorCategory.RATE_LIMIT:
            return RateLimitError(
                message,
                status_code,
                retry_after=ErrorClassifier.extract_retry_after(response, body),
                cause=cause,
            )
        if category == ErrorCategory.AUTHENTICATION:
            return AuthenticationError(message, status_code, cause)
        if category == ErrorCategory.SERVER_ERROR:
            return ServerError(message, status_code, cause)
        return ClientError(message, status_code, cause)
