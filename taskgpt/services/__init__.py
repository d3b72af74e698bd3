"""Task services for taskgpt.

Each service maps domain inputs to one dispatcher call and extracts the
relevant output field.
"""

from taskgpt.services.chatbot import ChatBotService
from taskgpt.services.mathematics import MathematicsService
from taskgpt.services.ocr import OcrService
from taskgpt.services.programming import ProgrammingService
from taskgpt.services.speech import SpeechToTextService, TextToSpeechService

__all__ = [
    "ChatBotService",
    "MathematicsService",
    "OcrService",
    "ProgrammingService",
    "SpeechToTextService",
    "TextToSpeechService",
]
