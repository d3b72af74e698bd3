"""Audio input validation for speech-to-text and text-to-speech.

Audio content is not sniffed: the format is trusted from the file extension
or data URI prefix.
"""

from taskgpt.core.errors import InvalidAudioError
from taskgpt.validators.common import (
    PathLike,
    check_extension,
    check_readable_file,
    check_size,
    decode_base64,
    file_size,
    reject,
    strip_data_uri,
)

EVENT = "audio_validation_failed"


class AudioValidator:
    """Validates audio uploads and speech synthesis options."""

    SUPPORTED_INPUT_FORMATS = ("mp3", "wav", "m4a", "mp4", "mpeg", "mpga", "webm")
    SUPPORTED_OUTPUT_FORMATS = ("mp3", "opus", "aac", "flac")
    SUPPORTED_VOICES = ("alloy", "echo", "fable", "onyx", "nova", "shimmer")
    MAX_FILE_SIZE = 25 * 1024 * 1024  # 25MB transcription upload limit

    @staticmethod
    def validate_file(path: PathLike) -> None:
        """Validate an audio file for transcription.

        Args:
            path: Path to the audio file

        Raises:
            InvalidAudioError: If missing, unreadable, unsupported or too large
        """
        file_path = check_readable_file(path, InvalidAudioError, "Audio", EVENT)
        AudioValidator.validate_filename(file_path)
        size = file_size(file_path, InvalidAudioError, EVENT)
        check_size(size, AudioValidator.MAX_FILE_SIZE, InvalidAudioError, "Audio file size", EVENT)

    @staticmethod
    def validate_filename(filename: PathLike) -> None:
        """Check only the extension of an upload filename."""
        check_extension(filename, AudioValidator.SUPPORTED_INPUT_FORMATS, InvalidAudioError, "Audio", EVENT)

    @staticmethod
    def validate_base64(data: str) -> None:
        """Validate a base64-encoded audio payload.

        Raises:
            InvalidAudioError: If empty, malformed, undecodable or too large
        """
        AudioValidator.decode_base64(data)

    @staticmethod
    def decode_base64(data: str) -> bytes:
        """Validate a base64 audio payload and return the decoded bytes."""
        decoded = decode_base64(strip_data_uri(data, "audio"), InvalidAudioError, EVENT)
        check_size(len(decoded), AudioValidator.MAX_FILE_SIZE, InvalidAudioError, "Audio size", EVENT)
        return decoded

    @staticmethod
    def validate_output_format(output_format: str) -> None:
        """Raises InvalidAudioError unless output_format is a supported synthesis format."""
        normalized = output_format.lower()
        if normalized not in AudioValidator.SUPPORTED_OUTPUT_FORMATS:
            raise reject(
                InvalidAudioError,
                f"Unsupported output format: {normalized}. "
                f"Supported formats: {', '.join(AudioValidator.SUPPORTED_OUTPUT_FORMATS)}",
                EVENT,
            )

    @staticmethod
    def validate_voice(voice: str) -> None:
        """Raises InvalidAudioError unless voice is a known synthesis voice."""
        normalized = voice.lower()
        if normalized not in AudioValidator.SUPPORTED_VOICES:
            raise reject(
                InvalidAudioError,
                f"Invalid voice: {normalized}. Valid voices: {', '.join(AudioValidator.SUPPORTED_VOICES)}",
                EVENT,
            )
