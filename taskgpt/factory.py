"""Service factory for taskgpt.

Builds each task service around its own ApiClient from a single API key.
"""

from typing import Optional

from taskgpt.client.api_client import ApiClient
from taskgpt.config import Config
from taskgpt.core.retry_config import RetryConfig
from taskgpt.models.services import (
    ChatBotConfig,
    MathematicsConfig,
    OcrConfig,
    ProgrammingConfig,
    SpeechConfig,
)
from taskgpt.services import (
    ChatBotService,
    MathematicsService,
    OcrService,
    ProgrammingService,
    SpeechToTextService,
    TextToSpeechService,
)


class ServiceFactory:
    """Creates service instances that share connection settings."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        """Initialize the factory.

        Args:
            api_key: Optional API key. If not provided, reads from environment.
            base_url: API root override
            timeout: Per-request timeout override, in seconds
            retry_config: Retry policy override

        Raises:
            ValueError: If no API key is given or configured
        """
        if api_key is None:
            api_key = Config.api_key()

        if not api_key:
            raise ValueError(
                "API key required. Set TASKGPT_API_KEY or OPENAI_API_KEY environment variable."
            )

        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.retry_config = retry_config

    def create_api_client(self) -> ApiClient:
        return ApiClient(
            self.api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            retry_config=self.retry_config,
        )

    def create_ocr_service(self, config: Optional[OcrConfig] = None) -> OcrService:
        return OcrService(self.create_api_client(), config)

    def create_mathematics_service(self, config: Optional[MathematicsConfig] = None) -> MathematicsService:
        return MathematicsService(self.create_api_client(), config)

    def create_programming_service(self, config: Optional[ProgrammingConfig] = None) -> ProgrammingService:
        return ProgrammingService(self.create_api_client(), config)

    def create_chatbot_service(self, config: Optional[ChatBotConfig] = None) -> ChatBotService:
        return ChatBotService(self.create_api_client(), config)

    def create_speech_to_text_service(self, config: Optional[SpeechConfig] = None) -> SpeechToTextService:
        return SpeechToTextService(self.create_api_client(), config)

    def create_text_to_speech_service(self, config: Optional[SpeechConfig] = None) -> TextToSpeechService:
        return TextToSpeechService(self.create_api_client(), config)
