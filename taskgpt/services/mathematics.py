"""Mathematics service: step-by-step problem solving."""

from typing import Optional

from taskgpt.client.api_client import ApiClient
from taskgpt.models.services import MathematicsConfig
from taskgpt.services.base import ChatCompletionService, require_text

SYSTEM_PROMPT = (
    "You are a mathematics expert. "
    "Solve mathematical problems step by step and provide clear explanations."
)


class MathematicsService(ChatCompletionService):
    """Solves mathematical problems."""

    def __init__(self, api_client: ApiClient, config: Optional[MathematicsConfig] = None):
        super().__init__(api_client, config or MathematicsConfig())

    def solve(self, problem: str) -> str:
        """Solve a problem or equation and return the worked solution.

        Raises:
            InvalidInputError: If problem is empty
            TaskGptError: If the API call fails
        """
        require_text(problem, "Mathematical problem cannot be empty")
        return self._complete(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": problem},
            ],
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )
