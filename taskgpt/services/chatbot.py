"""Chat service: multi-turn conversation with caller-owned history.

The service keeps no conversation state. Each ``chat`` call takes the history
so far and returns it extended with the new exchange.
"""

from typing import Any, Dict, List, Optional, Sequence

from taskgpt.client.api_client import ApiClient
from taskgpt.core.errors import InvalidInputError
from taskgpt.models.chat import ChatTurn
from taskgpt.models.services import ChatBotConfig
from taskgpt.services.base import ChatCompletionService, require_text
from taskgpt.utils.types import ChatMessage

MAX_MESSAGE_LENGTH = 400_000  # characters
VALID_ROLES = ("user", "assistant", "system")


class ChatBotService(ChatCompletionService):
    """Conversational assistant."""

    def __init__(self, api_client: ApiClient, config: Optional[ChatBotConfig] = None):
        super().__init__(api_client, config or ChatBotConfig())

    def chat(self, message: str, history: Sequence[ChatMessage] = ()) -> ChatTurn:
        """Send a message in the context of ``history``.

        Args:
            message: The user's message
            history: Earlier role/content pairs, oldest first

        Returns:
            ChatTurn with the reply and the updated history

        Raises:
            InvalidInputError: If the message or history is invalid
            TaskGptError: If the API call fails
        """
        self.validate_message(message)
        self.validate_history(history)

        reply = self._complete(
            self.build_messages(message, history),
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )

        updated = [{"role": item["role"], "content": item["content"]} for item in history]
        updated.append({"role": "user", "content": message})
        updated.append({"role": "assistant", "content": reply})
        return ChatTurn(reply=reply, history=self.limit_history(updated))

    def build_messages(self, message: str, history: Sequence[ChatMessage]) -> List[Dict[str, Any]]:
        messages: List[Dict[str, Any]] = []
        if self.config.system_prompt is not None:
            messages.append({"role": "system", "content": self.config.system_prompt})
        for item in self.limit_history(history):
            messages.append({"role": item["role"], "content": item["content"]})
        messages.append({"role": "user", "content": message})
        return messages

    def limit_history(self, history: Sequence[Any]) -> List[Any]:
        """Keep only the most recent ``config.max_history`` entries."""
        max_history = self.config.max_history
        if max_history == 0:
            return []
        return list(history)[-max_history:]

    @staticmethod
    def validate_message(message: str) -> None:
        require_text(message, "Message cannot be empty")
        if len(message) > MAX_MESSAGE_LENGTH:
            raise InvalidInputError(
                f"Message length ({len(message)} characters) exceeds maximum allowed length "
                f"({MAX_MESSAGE_LENGTH} characters)"
            )

    @staticmethod
    def validate_history(history: Sequence[Any]) -> None:
        """Check that every history item is a role/content mapping with a known role.

        Raises:
            InvalidInputError: On the first malformed item
        """
        for item in history:
            if not isinstance(item, dict):
                raise InvalidInputError("Conversation history items must be mappings")
            if "role" not in item or "content" not in item:
                raise InvalidInputError('Conversation history items must have "role" and "content" keys')
            if item["role"] not in VALID_ROLES:
                raise InvalidInputError(f"Invalid role in conversation history: {item['role']}")
            if not isinstance(item["content"], str):
                raise InvalidInputError("Conversation history content must be a string")
