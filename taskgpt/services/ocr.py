"""OCR service: extract text from images with a vision model."""

import base64
from pathlib import Path
from typing import Optional

from taskgpt.client.api_client import ApiClient
from taskgpt.core.errors import InvalidImageError
from taskgpt.models.services import OcrConfig
from taskgpt.services.base import ChatCompletionService
from taskgpt.validators.common import PathLike, strip_data_uri
from taskgpt.validators.image import ImageValidator

EXTRACTION_PROMPT = (
    "Extract all text from this image. "
    "Return only the extracted text without any additional explanation."
)


class OcrService(ChatCompletionService):
    """Extracts text from image files or base64 payloads."""

    def __init__(
        self,
        api_client: ApiClient,
        config: Optional[OcrConfig] = None,
        validator: Optional[ImageValidator] = None,
    ):
        super().__init__(api_client, config or OcrConfig())
        self.validator = validator or ImageValidator()

    def extract_from_file(self, path: PathLike) -> str:
        """Extract text from an image file.

        Args:
            path: Path to a JPEG, PNG, GIF or WebP image

        Returns:
            Extracted text

        Raises:
            InvalidImageError: If the file fails validation or cannot be read
            TaskGptError: If the API call fails
        """
        self.validator.validate_file(path)
        try:
            image_bytes = Path(path).read_bytes()
        except OSError as e:
            raise InvalidImageError(f"Failed to read image file: {path}", cause=e)
        return self._extract(image_bytes, base64.b64encode(image_bytes).decode("ascii"))

    def extract_from_base64(self, data: str) -> str:
        """Extract text from a base64 image, with or without a data URI prefix."""
        self.validator.validate_base64(data)
        encoded = strip_data_uri(data, "image")
        return self._extract(base64.b64decode(encoded), encoded)

    def _extract(self, image_bytes: bytes, encoded: str) -> str:
        mime_type = self.validator.mime_type(self.validator.detect_format(image_bytes))
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": EXTRACTION_PROMPT},
                    {
                        "type": "image_url",
                        "image_url": {
                            "url": f"data:{mime_type};base64,{encoded}",
                            "detail": self.config.detail,
                        },
                    },
                ],
            },
        ]
        return self._complete(messages, max_tokens=self.config.max_tokens)
