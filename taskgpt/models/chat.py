"""Chat conversation models."""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict


class ChatTurn(BaseModel):
    """Result of one ChatBotService.chat call.

    ``history`` is the caller's history plus this exchange, trimmed to the
    configured maximum. Pass it back in to continue the conversation.
    """

    model_config = ConfigDict(frozen=True)

    reply: str
    history: List[Dict[str, str]]
