"""Programming service: code generation, analysis and debugging."""

from typing import Optional

from taskgpt.client.api_client import ApiClient
from taskgpt.models.services import ProgrammingConfig
from taskgpt.services.base import ChatCompletionService, require_text

TASK_INSTRUCTIONS = {
    "generate": "Generate clean, well-documented code based on the user's requirements.",
    "analyze": "Analyze code for bugs, improvements, and provide clear explanations.",
    "debug": "Debug code issues and provide fixes with explanations.",
}

# First match wins; the generic "->" / "::" markers come last.
LANGUAGE_INDICATORS = (
    ("php", ("<?php",)),
    ("csharp", ("using system", "namespace ")),
    ("java", ("public static void main", "public class")),
    ("python", ("def ", "import ", "print(", "if __name__")),
    ("javascript", ("function", "=>", "const ", "let ", "var ")),
    ("php", ("->", "::")),
)


class ProgrammingService(ChatCompletionService):
    """Generates, analyzes and debugs code."""

    def __init__(self, api_client: ApiClient, config: Optional[ProgrammingConfig] = None):
        super().__init__(api_client, config or ProgrammingConfig())

    def generate_code(self, description: str, language: Optional[str] = None) -> str:
        """Generate code from a description.

        Args:
            description: What the code should do
            language: Target language; defaults to config.default_language

        Returns:
            Generated code with explanation
        """
        require_text(description, "Description cannot be empty")
        language = language or self.config.default_language
        return self._request(self.build_system_prompt(language, "generate"), description)

    def analyze_code(self, code: str, language: Optional[str] = None) -> str:
        """Analyze a snippet for bugs and improvements."""
        require_text(code, "Code input cannot be empty")
        language = language or self.detect_language(code)
        prompt = f"Analyze the following code:\n\n```{language or ''}\n{code}\n```"
        return self._request(self.build_system_prompt(language, "analyze"), prompt)

    def debug_code(
        self,
        code: str,
        error_message: Optional[str] = None,
        language: Optional[str] = None,
    ) -> str:
        """Suggest fixes for failing code, optionally given the error it raised."""
        require_text(code, "Code input cannot be empty")
        language = language or self.detect_language(code)
        prompt = "Debug the following code"
        if error_message:
            prompt += f" with error: {error_message}"
        prompt += f":\n\n```{language or ''}\n{code}\n```"
        return self._request(self.build_system_prompt(language, "debug"), prompt)

    def build_system_prompt(self, language: Optional[str], task: str) -> str:
        prompt = "You are an expert programming assistant. "
        if language:
            prompt += f"Specialize in {language} programming. "
        prompt += TASK_INSTRUCTIONS[task]
        if self.config.code_style:
            prompt += f" Follow this code style: {self.config.code_style}"
        return prompt

    @staticmethod
    def detect_language(code: str) -> Optional[str]:
        """Guess the language of a snippet from keyword indicators, or None."""
        lowered = code.lower()
        for language, indicators in LANGUAGE_INDICATORS:
            if any(indicator in lowered for indicator in indicators):
                return language
        return None

    def _request(self, system_prompt: str, user_prompt: str) -> str:
        return self._complete(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )
