"""Per-service configuration models.

All configs are immutable; construct a new one to change a setting.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskgpt.models.base import BaseSamplingConfig, BaseServiceConfig


class OcrConfig(BaseServiceConfig):
    """Config for OcrService."""

    model: str = Field(default="gpt-4o", min_length=1)
    detail: Literal["low", "high", "auto"] = Field(
        default="high",
        description="Image detail level requested from the vision model",
    )
    max_tokens: int = Field(default=300, gt=0)


class MathematicsConfig(BaseSamplingConfig):
    """Config for MathematicsService."""

    model: str = Field(default="gpt-4", min_length=1)
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, gt=0)


class ProgrammingConfig(BaseSamplingConfig):
    """Config for ProgrammingService."""

    model: str = Field(default="gpt-4", min_length=1)
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, gt=0)
    default_language: Optional[str] = Field(
        default=None,
        description="Language assumed for code generation when none is given",
    )
    code_style: Optional[str] = Field(
        default=None,
        description="Free-form style guide appended to the system prompt",
    )


class ChatBotConfig(BaseSamplingConfig):
    """Config for ChatBotService.

    Out-of-range temperatures are clamped to [0.0, 2.0] instead of rejected.
    """

    model: str = Field(default="gpt-4", min_length=1)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1000, gt=0)
    system_prompt: Optional[str] = None
    max_history: int = Field(default=20, ge=0, description="Most recent messages kept in history")

    @field_validator("temperature", mode="before")
    @classmethod
    def clamp_temperature(cls, value):
        if isinstance(value, (int, float)):
            return max(0.0, min(2.0, float(value)))
        return value


class SpeechConfig(BaseModel):
    """Config for SpeechToTextService and TextToSpeechService."""

    model_config = ConfigDict(frozen=True)

    # Speech-to-text
    stt_model: str = Field(default="whisper-1", min_length=1)
    stt_language: Optional[str] = Field(default=None, description="ISO-639-1 language hint")
    stt_response_format: Literal["json", "verbose_json"] = "json"
    stt_temperature: float = Field(default=0.0, ge=0.0, le=1.0)

    # Text-to-speech
    tts_model: str = Field(default="tts-1", min_length=1)
    tts_voice: str = "alloy"
    tts_speed: float = Field(default=1.0, ge=0.25, le=4.0)
    tts_format: str = "mp3"
