"""Input validators for taskgpt.

Pre-flight checks that reject bad image and audio inputs before any request
is made.
"""

from taskgpt.validators.audio import AudioValidator
from taskgpt.validators.image import ImageValidator

__all__ = ["AudioValidator", "ImageValidator"]
