"""Checks shared by the image and audio validators."""

import base64
import binascii
import os
import re
from pathlib import Path
from typing import Iterable, Type, Union

from taskgpt.core.errors import ValidationError
from taskgpt.core.logging import logger

PathLike = Union[str, os.PathLike]

BASE64_PATTERN = re.compile(r"[A-Za-z0-9+/]*={0,2}")


def reject(error_cls: Type[ValidationError], message: str, event: str, **context) -> ValidationError:
    """Log a validation failure and return the exception to raise."""
    logger.info(event, reason=message, **context)
    return error_cls(message)


def strip_data_uri(data: str, media_type: str) -> str:
    """Remove a leading ``data:<media_type>/...;base64,`` prefix, if any."""
    return re.sub(rf"^data:{media_type}/[^;]+;base64,", "", data, count=1)


def decode_base64(data: str, error_cls: Type[ValidationError], event: str) -> bytes:
    """Check the base64 alphabet, then decode.

    Raises:
        ValidationError: If data is empty, malformed or undecodable
    """
    if not data:
        raise reject(error_cls, "Base64 string is empty", event)

    if not BASE64_PATTERN.fullmatch(data):
        raise reject(error_cls, "Invalid base64 string format", event)

    # Unpadded input is accepted; padding is restored before decoding.
    padded = data + "=" * (-len(data) % 4)
    try:
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.info(event, reason="Failed to decode base64 string", error=str(e))
        raise error_cls("Failed to decode base64 string", cause=e)


def check_readable_file(path: PathLike, error_cls: Type[ValidationError], kind: str, event: str) -> Path:
    """Ensure ``path`` names an existing, readable regular file."""
    file_path = Path(path)
    if not file_path.exists():
        raise reject(error_cls, f"{kind} file does not exist: {path}", event, path=str(path))
    if not file_path.is_file():
        raise reject(error_cls, f"{kind} path is not a file: {path}", event, path=str(path))
    if not os.access(file_path, os.R_OK):
        raise reject(error_cls, f"{kind} file is not readable: {path}", event, path=str(path))
    return file_path


def check_extension(
    filename: PathLike,
    supported: Iterable[str],
    error_cls: Type[ValidationError],
    kind: str,
    event: str,
) -> str:
    """Ensure the lowercased extension of ``filename`` is in ``supported``."""
    supported = tuple(supported)
    extension = Path(filename).suffix.lower().lstrip(".")
    if extension not in supported:
        raise reject(
            error_cls,
            f"Unsupported {kind.lower()} format: {extension}. Supported formats: {', '.join(supported)}",
            event,
            path=str(filename),
        )
    return extension


def check_size(
    size: int,
    max_size: int,
    error_cls: Type[ValidationError],
    label: str,
    event: str,
) -> None:
    """Ensure ``size`` bytes does not exceed ``max_size``."""
    if size > max_size:
        raise reject(
            error_cls,
            f"{label} ({size} bytes) exceeds maximum allowed size ({max_size} bytes)",
            event,
            size_bytes=size,
        )


def file_size(file_path: Path, error_cls: Type[ValidationError], event: str) -> int:
    try:
        return file_path.stat().st_size
    except OSError as e:
        logger.info(event, reason="Cannot determine file size", path=str(file_path), error=str(e))
        raise error_cls(f"Cannot determine file size: {file_path}", cause=e)
