"""Configuration management for taskgpt.

Centralizes all environment variable access for better testability and maintainability.
"""

import os
from typing import Optional


DEFAULT_BASE_URL = "https://api.openai.com/v1/"
DEFAULT_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"


class Config:
    """Client configuration loaded from environment variables."""

    # Remote API
    @staticmethod
    def api_key() -> Optional[str]:
        """Get API key from environment."""
        return os.getenv("TASKGPT_API_KEY") or os.getenv("OPENAI_API_KEY")

    @staticmethod
    def base_url() -> str:
        """Get API base URL, always with a trailing slash so endpoints join under it."""
        url = os.getenv("TASKGPT_BASE_URL") or DEFAULT_BASE_URL
        return url if url.endswith("/") else url + "/"

    @staticmethod
    def timeout() -> float:
        """Get per-request timeout in seconds."""
        raw = os.getenv("TASKGPT_TIMEOUT")
        if not raw:
            return DEFAULT_TIMEOUT
        try:
            value = float(raw)
        except ValueError:
            raise ValueError(f"TASKGPT_TIMEOUT must be a number, got {raw!r}")
        if value <= 0:
            raise ValueError(f"TASKGPT_TIMEOUT must be positive, got {value}")
        return value

    # Logging
    @staticmethod
    def log_level() -> str:
        """Get log level name (DEBUG, INFO, WARNING, ERROR)."""
        return (os.getenv("TASKGPT_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()

    # Helper methods
    @staticmethod
    def is_configured() -> bool:
        """Check if all required configuration is present."""
        return all([
            Config.api_key(),
        ])

    @staticmethod
    def get_missing_config() -> list[str]:
        """Get list of missing required configuration keys."""
        missing = []
        if not Config.api_key():
            missing.append("TASKGPT_API_KEY or OPENAI_API_KEY")
        return missing


# Singleton instance for easy access
config = Config()
