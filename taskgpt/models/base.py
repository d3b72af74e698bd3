"""Base Pydantic models for service configuration.

These base models are inherited by service-specific configs to avoid field duplication.
"""

from pydantic import BaseModel, ConfigDict, Field


class BaseServiceConfig(BaseModel):
    """Base config shared by every chat-completions service."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model: str = Field(..., min_length=1, description="Model name sent with each request")
    max_tokens: int = Field(..., gt=0, description="Upper bound on generated tokens")


class BaseSamplingConfig(BaseServiceConfig):
    """Base config for services that also send a sampling temperature."""

    temperature: float = Field(..., ge=0.0, le=2.0, description="Sampling temperature (0.0-2.0)")
