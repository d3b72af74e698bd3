"""Image input validation.

Rejects missing, oversized, unsupported or non-image inputs before they are
sent for OCR. Content is identified by its header with Pillow, so a file whose
extension lies about its contents is still rejected.
"""

import io
import threading
from typing import BinaryIO, Union

from PIL import Image, UnidentifiedImageError

from taskgpt.core.errors import InvalidImageError
from taskgpt.core.logging import logger
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

EVENT = "image_validation_failed"

# Pillow names some variants after their container; these are reported as the base format.
FORMAT_ALIASES = {
    "MPO": "JPEG",
}

_pixel_limit_lock = threading.Lock()


class ImageValidator:
    """Validates image files and base64 payloads."""

    SUPPORTED_EXTENSIONS = ("jpeg", "jpg", "png", "gif", "webp")
    SUPPORTED_FORMATS = ("JPEG", "PNG", "GIF", "WEBP")
    MAX_FILE_SIZE = 20 * 1024 * 1024  # 20MB

    MIME_TYPES = {
        "JPEG": "image/jpeg",
        "PNG": "image/png",
        "GIF": "image/gif",
        "WEBP": "image/webp",
    }

    @staticmethod
    def validate_file(path: PathLike) -> None:
        """Validate an image file.

        Checks, in order: existence, regular file, readability, extension,
        size, then the decoded header.

        Args:
            path: Path to the image file

        Raises:
            InvalidImageError: On the first failed check
        """
        file_path = check_readable_file(path, InvalidImageError, "Image", EVENT)
        check_extension(file_path, ImageValidator.SUPPORTED_EXTENSIONS, InvalidImageError, "Image", EVENT)
        size = file_size(file_path, InvalidImageError, EVENT)
        check_size(size, ImageValidator.MAX_FILE_SIZE, InvalidImageError, "Image file size", EVENT)

        with file_path.open("rb") as fp:
            ImageValidator._sniff(fp, f"File is not a valid image: {path}")

    @staticmethod
    def validate_base64(data: str) -> None:
        """Validate a base64-encoded image, with or without a data URI prefix.

        Args:
            data: Base64 string, optionally prefixed with ``data:image/...;base64,``

        Raises:
            InvalidImageError: If empty, malformed, undecodable, not an image, or too large
        """
        decoded = decode_base64(strip_data_uri(data, "image"), InvalidImageError, EVENT)
        ImageValidator._sniff(io.BytesIO(decoded), "Decoded base64 string is not a valid image")
        check_size(len(decoded), ImageValidator.MAX_FILE_SIZE, InvalidImageError, "Image size", EVENT)

    @staticmethod
    def detect_format(data: bytes) -> str:
        """Return the Pillow format name (JPEG, PNG, GIF, WEBP) of image bytes.

        Raises:
            InvalidImageError: If the bytes are not a supported image
        """
        return ImageValidator._sniff(io.BytesIO(data), "Data is not a valid image")

    @staticmethod
    def mime_type(image_format: str) -> str:
        return ImageValidator.MIME_TYPES[image_format]

    @staticmethod
    def _sniff(fp: Union[BinaryIO, io.BytesIO], not_image_message: str) -> str:
        try:
            image_format = ImageValidator._identify(fp)
        except (UnidentifiedImageError, OSError, ValueError) as e:
            logger.info(EVENT, reason=not_image_message, error=str(e))
            raise InvalidImageError(not_image_message, cause=e)

        image_format = FORMAT_ALIASES.get(image_format, image_format)
        if image_format not in ImageValidator.SUPPORTED_FORMATS:
            raise reject(InvalidImageError, "Unsupported image type", EVENT, image_format=image_format)
        return image_format

    @staticmethod
    def _identify(fp: Union[BinaryIO, io.BytesIO]) -> str:
        """Return the format Pillow reads from the header.

        Only the header is parsed, so Pillow's decompression-bomb pixel limit
        is lifted while opening; the byte-size cap still applies.
        """
        with _pixel_limit_lock:
            max_pixels = Image.MAX_IMAGE_PIXELS
            Image.MAX_IMAGE_PIXELS = None
            try:
                with Image.open(fp) as image:
                    return image.format
            finally:
                Image.MAX_IMAGE_PIXELS = max_pixels
