"""Request dispatcher for taskgpt.

Provides the HTTP client and the response error classifier.
"""

from taskgpt.client.api_client import ApiClient
from taskgpt.client.error_classifier import ErrorClassifier

__all__ = ["ApiClient", "ErrorClassifier"]
