"""Type definitions for request payloads.

Provides TypedDict classes for the dict shapes passed to the dispatcher and
the chat facade. These replace Dict[str, Any] for better type safety.
"""

from typing import BinaryIO, Literal, NotRequired, TypedDict, Union


# Multipart Types


PartContents = Union[bytes, bytearray, BinaryIO, str, int, float]


class MultipartPart(TypedDict):
    """One field of a multipart/form-data upload."""

    name: str
    contents: PartContents
    filename: NotRequired[str]


# Chat Types


ChatRole = Literal["system", "user", "assistant"]


class ChatMessage(TypedDict):
    """One role/content pair of a conversation."""

    role: ChatRole
    content: str
