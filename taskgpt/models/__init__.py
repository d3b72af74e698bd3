"""Pydantic models for taskgpt.

All models are organized by domain:
- base: Base models for inheritance
- services: Per-service configuration
- chat: Chat conversation results
"""

# Base models
from taskgpt.models.base import BaseSamplingConfig, BaseServiceConfig

# Service configs
from taskgpt.models.services import (
    ChatBotConfig,
    MathematicsConfig,
    OcrConfig,
    ProgrammingConfig,
    SpeechConfig,
)

# Chat models
from taskgpt.models.chat import ChatTurn

__all__ = [
    # Base models
    "BaseServiceConfig",
    "BaseSamplingConfig",
    # Service configs
    "OcrConfig",
    "MathematicsConfig",
    "ProgrammingConfig",
    "ChatBotConfig",
    "SpeechConfig",
    # Chat models
    "ChatTurn",
]
