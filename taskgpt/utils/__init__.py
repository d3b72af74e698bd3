"""Utility modules for taskgpt."""

from taskgpt.utils.types import ChatMessage, ChatRole, MultipartPart, PartContents

__all__ = [
    "ChatMessage",
    "ChatRole",
    "MultipartPart",
    "PartContents",
]
