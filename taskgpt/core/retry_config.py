"""Retry configuration for taskgpt.

Immutable configuration for dispatcher retry behavior.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class ErrorCategory(str, Enum):
    """Error categories for classification and retry decisions.

    - RATE_LIMIT: 429, never retried, may carry a retry-after timestamp
    - AUTHENTICATION: 401
    - CLIENT_ERROR: other 4xx
    - SERVER_ERROR: 5xx (retried while attempts remain)
    - NETWORK: no response received (retried while attempts remain)
    - MALFORMED_RESPONSE: success status with an unparseable body
    - VALIDATION: rejected locally before any request was made
    """

    RATE_LIMIT = "rate_limit"
    AUTHENTICATION = "authentication"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    NETWORK = "network"
    MALFORMED_RESPONSE = "malformed_response"
    VALIDATION = "validation"


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    Backoff is linear in the attempt number: the n-th retry waits
    ``n * base_delay`` seconds.
    """

    max_attempts: int = 3
    base_delay: float = 1.0  # seconds
    retry_on: Tuple[ErrorCategory, ...] = field(
        default=(ErrorCategory.NETWORK, ErrorCategory.SERVER_ERROR)
    )

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay cannot be negative")

    def should_retry(self, category: ErrorCategory, attempt: int) -> bool:
        """Whether a failure of ``category`` on ``attempt`` (1-based) gets another try."""
        return category in self.retry_on and attempt < self.max_attempts

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after failed ``attempt`` (1-based) before the next one."""
        return self.base_delay * attempt
