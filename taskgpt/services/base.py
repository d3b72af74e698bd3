"""Shared plumbing for the chat-completions services."""

from typing import Any, Dict, List

from taskgpt.client.api_client import ApiClient
from taskgpt.core.errors import InvalidInputError, MalformedResponseError
from taskgpt.models.base import BaseServiceConfig

CHAT_COMPLETIONS_ENDPOINT = "chat/completions"


def extract_message_content(response: Dict[str, Any]) -> str:
    """Return ``choices[0].message.content``, stripped.

    Raises:
        MalformedResponseError: If the path is missing or not a string
    """
    try:
        content = response["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponseError("Invalid API response: missing content", cause=e)

    if not isinstance(content, str):
        raise MalformedResponseError("Invalid API response: missing content")
    return content.strip()


def require_text(value: str, message: str) -> None:
    """Raise InvalidInputError(message) if value is empty or whitespace."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(message)


class ChatCompletionService:
    """Base for services that post to chat/completions and return the reply text."""

    def __init__(self, api_client: ApiClient, config: BaseServiceConfig):
        self.api_client = api_client
        self.config = config

    def _complete(self, messages: List[Dict[str, Any]], **params: Any) -> str:
        payload = {
            "model": self.config.model,
            "messages": messages,
            **params,
        }
        response = self.api_client.send_json(CHAT_COMPLETIONS_ENDPOINT, payload)
        return extract_message_content(response)
