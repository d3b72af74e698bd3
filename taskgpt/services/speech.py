"""Speech services: transcription (speech-to-text) and synthesis (text-to-speech)."""

import io
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional

from taskgpt.client.api_client import ApiClient
from taskgpt.core.errors import InvalidInputError, MalformedResponseError
from taskgpt.core.logging import logger
from taskgpt.models.services import SpeechConfig
from taskgpt.services.base import require_text
from taskgpt.utils.types import MultipartPart
from taskgpt.validators.audio import AudioValidator
from taskgpt.validators.common import PathLike

TRANSCRIPTIONS_ENDPOINT = "audio/transcriptions"
SPEECH_ENDPOINT = "audio/speech"

MAX_SPEECH_INPUT_LENGTH = 4096  # characters
MIN_SPEED = 0.25
MAX_SPEED = 4.0


class SpeechToTextService:
    """Transcribes audio files or base64 audio payloads."""

    def __init__(
        self,
        api_client: ApiClient,
        config: Optional[SpeechConfig] = None,
        validator: Optional[AudioValidator] = None,
    ):
        self.api_client = api_client
        self.config = config or SpeechConfig()
        self.validator = validator or AudioValidator()

    def transcribe_from_file(self, path: PathLike) -> str:
        """Transcribe an audio file.

        Args:
            path: Path to an mp3, wav, m4a, mp4, mpeg, mpga or webm file

        Returns:
            Transcribed text

        Raises:
            InvalidAudioError: If the file fails validation
            TaskGptError: If the API call fails
        """
        self.validator.validate_file(path)
        file_path = Path(path)
        with file_path.open("rb") as audio:
            return self._transcribe(audio, file_path.name)

    def transcribe_from_base64(self, data: str, filename: str = "audio.mp3") -> str:
        """Transcribe base64 audio, uploaded from memory under ``filename``.

        The filename extension tells the API which audio format to expect.
        """
        self.validator.validate_filename(filename)
        audio = self.validator.decode_base64(data)
        return self._transcribe(io.BytesIO(audio), filename)

    def build_parts(self, audio: BinaryIO, filename: str) -> List[MultipartPart]:
        parts: List[MultipartPart] = [
            {"name": "file", "contents": audio, "filename": filename},
            {"name": "model", "contents": self.config.stt_model},
            {"name": "response_format", "contents": self.config.stt_response_format},
            {"name": "temperature", "contents": str(self.config.stt_temperature)},
        ]
        if self.config.stt_language is not None:
            parts.append({"name": "language", "contents": self.config.stt_language})
        return parts

    def _transcribe(self, audio: BinaryIO, filename: str) -> str:
        response = self.api_client.send_multipart(TRANSCRIPTIONS_ENDPOINT, self.build_parts(audio, filename))
        return self._extract_text(response)

    @staticmethod
    def _extract_text(response: Dict[str, Any]) -> str:
        text = response.get("text")
        if not isinstance(text, str):
            raise MalformedResponseError("Invalid API response: missing text field")
        return text


class TextToSpeechService:
    """Synthesizes speech audio from text."""

    def __init__(
        self,
        api_client: ApiClient,
        config: Optional[SpeechConfig] = None,
        validator: Optional[AudioValidator] = None,
    ):
        self.api_client = api_client
        self.config = config or SpeechConfig()
        self.validator = validator or AudioValidator()

    def synthesize(
        self,
        text: str,
        voice: Optional[str] = None,
        output_format: Optional[str] = None,
        speed: Optional[float] = None,
    ) -> bytes:
        """Convert text to audio.

        Args:
            text: Text to speak (1-4096 characters)
            voice: Voice override; defaults to config.tts_voice
            output_format: mp3, opus, aac or flac; defaults to config.tts_format
            speed: 0.25-4.0; defaults to config.tts_speed

        Returns:
            Encoded audio bytes

        Raises:
            InvalidInputError: If text or speed is out of range
            InvalidAudioError: If voice or output_format is unsupported
            TaskGptError: If the API call fails
        """
        self.validate_text(text)

        voice = voice or self.config.tts_voice
        output_format = output_format or self.config.tts_format
        speed = self.config.tts_speed if speed is None else speed

        self.validator.validate_voice(voice)
        self.validator.validate_output_format(output_format)
        if not MIN_SPEED <= speed <= MAX_SPEED:
            raise InvalidInputError(f"Speed must be between {MIN_SPEED} and {MAX_SPEED}, got {speed}")

        return self.api_client.send_binary(
            SPEECH_ENDPOINT,
            {
                "model": self.config.tts_model,
                "input": text,
                "voice": voice.lower(),
                "response_format": output_format.lower(),
                "speed": speed,
            },
        )

    def synthesize_to_file(
        self,
        text: str,
        output_path: PathLike,
        voice: Optional[str] = None,
        output_format: Optional[str] = None,
        speed: Optional[float] = None,
    ) -> Path:
        """Synthesize and write the audio to ``output_path``; returns the path written."""
        audio = self.synthesize(text, voice, output_format, speed)
        path = Path(output_path)
        path.write_bytes(audio)
        logger.info("speech_saved", path=str(path), size_bytes=len(audio))
        return path

    @staticmethod
    def validate_text(text: str) -> None:
        require_text(text, "Text input cannot be empty")
        if len(text) > MAX_SPEECH_INPUT_LENGTH:
            raise InvalidInputError(
                f"Text input exceeds maximum length of {MAX_SPEECH_INPUT_LENGTH} characters"
            )
