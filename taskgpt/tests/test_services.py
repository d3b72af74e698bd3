"""Unit tests for the task services, run against a stub API client."""

import base64

import pytest
from pydantic import ValidationError as PydanticValidationError

from taskgpt.core.errors import InvalidAudioError, InvalidImageError, InvalidInputError, MalformedResponseError
from taskgpt.models.services import ChatBotConfig, OcrConfig, ProgrammingConfig, SpeechConfig
from taskgpt.services.chatbot import ChatBotService
from taskgpt.services.mathematics import SYSTEM_PROMPT, MathematicsService
from taskgpt.services.ocr import EXTRACTION_PROMPT, OcrService
from taskgpt.services.programming import ProgrammingService
from taskgpt.services.speech import SpeechToTextService, TextToSpeechService


class TestOcrService:
    """Test OcrService request building."""

    def test_extract_from_file(self, tmp_path, stub_client, completion, make_image):
        """Test the image is sent as a data URI with its sniffed MIME type."""
        data = make_image("JPEG")
        path = tmp_path / "receipt.jpg"
        path.write_bytes(data)
        stub_client.json_response = completion("  TOTAL 12.50\n")

        text = OcrService(stub_client).extract_from_file(path)

        assert text == "TOTAL 12.50"
        endpoint, payload = stub_client.json_calls[0]
        assert endpoint == "chat/completions"
        assert payload["model"] == "gpt-4o"
        assert payload["max_tokens"] == 300
        text_part, image_part = payload["messages"][0]["content"]
        assert text_part == {"type": "text", "text": EXTRACTION_PROMPT}
        encoded = base64.b64encode(data).decode()
        assert image_part["image_url"] == {"url": f"data:image/jpeg;base64,{encoded}", "detail": "high"}

    def test_extract_from_base64_with_prefix(self, stub_client, completion, make_image):
        """Test a data URI prefix is not duplicated in the request."""
        encoded = base64.b64encode(make_image("PNG")).decode()
        stub_client.json_response = completion("hello")

        service = OcrService(stub_client, OcrConfig(detail="low", max_tokens=50))
        assert service.extract_from_base64(f"data:image/png;base64,{encoded}") == "hello"

        payload = stub_client.json_calls[0][1]
        image_part = payload["messages"][0]["content"][1]
        assert image_part["image_url"] == {"url": f"data:image/png;base64,{encoded}", "detail": "low"}
        assert payload["max_tokens"] == 50

    def test_invalid_image_never_reaches_api(self, tmp_path, stub_client):
        """Test validation failures stop before any request."""
        with pytest.raises(InvalidImageError):
            OcrService(stub_client).extract_from_file(tmp_path / "missing.png")

        assert stub_client.json_calls == []

    def test_missing_content_is_malformed(self, stub_client, make_image):
        """Test a reply without choices[0].message.content is rejected."""
        stub_client.json_response = {"choices": []}

        with pytest.raises(MalformedResponseError, match="missing content"):
            OcrService(stub_client).extract_from_base64(base64.b64encode(make_image("PNG")).decode())


class TestMathematicsService:
    """Test MathematicsService."""

    def test_solve(self, stub_client, completion):
        """Test the system prompt and sampling settings are sent."""
        stub_client.json_response = completion("x = 2")

        assert MathematicsService(stub_client).solve("2x = 4") == "x = 2"

        payload = stub_client.json_calls[0][1]
        assert payload == {
            "model": "gpt-4",
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": "2x = 4"},
            ],
            "temperature": 0.3,
            "max_tokens": 1000,
        }

    @pytest.mark.parametrize("problem", ["", "   "])
    def test_empty_problem(self, stub_client, problem):
        """Test blank problems are rejected locally."""
        with pytest.raises(InvalidInputError, match="Mathematical problem cannot be empty"):
            MathematicsService(stub_client).solve(problem)

        assert stub_client.json_calls == []

    def test_non_string_content_is_malformed(self, stub_client):
        """Test a null content field is rejected."""
        stub_client.json_response = {"choices": [{"message": {"content": None}}]}

        with pytest.raises(MalformedResponseError):
            MathematicsService(stub_client).solve("1 + 1")


class TestProgrammingService:
    """Test ProgrammingService prompts and language detection."""

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("<?php echo 'hi'; ?>", "php"),
            ("using System;\nclass A {}", "csharp"),
            ("public class Main { public static void main(String[] a) {} }", "java"),
            ("def add(a, b):\n    return a + b", "python"),
            ("const add = (a, b) => a + b;", "javascript"),
            ("$user->save();", "php"),
            ("SELECT 1;", None),
        ],
    )
    def test_detect_language(self, code, expected):
        """Test keyword-based detection picks the first matching language."""
        assert ProgrammingService.detect_language(code) == expected

    def test_generate_code_uses_default_language_and_style(self, stub_client, completion):
        """Test configured language and style reach the system prompt."""
        stub_client.json_response = completion("print('hi')")
        config = ProgrammingConfig(default_language="python", code_style="PEP 8")

        assert ProgrammingService(stub_client, config).generate_code("say hi") == "print('hi')"

        payload = stub_client.json_calls[0][1]
        system, user = payload["messages"]
        assert "Specialize in python programming." in system["content"]
        assert system["content"].endswith("Follow this code style: PEP 8")
        assert user == {"role": "user", "content": "say hi"}
        assert payload["temperature"] == 0.2
        assert payload["max_tokens"] == 2000

    def test_analyze_code_detects_language(self, stub_client, completion):
        """Test analyze wraps the code in a fenced block tagged with the detected language."""
        stub_client.json_response = completion("looks fine")
        code = "def f():\n    return 1"

        ProgrammingService(stub_client).analyze_code(code)

        system, user = stub_client.json_calls[0][1]["messages"]
        assert "Specialize in python programming." in system["content"]
        assert user["content"] == f"Analyze the following code:\n\n```python\n{code}\n```"

    def test_debug_code_includes_error(self, stub_client, completion):
        """Test the error message is included in the debug prompt."""
        stub_client.json_response = completion("fixed")

        ProgrammingService(stub_client).debug_code("x = 1 / 0", error_message="ZeroDivisionError", language="python")

        user = stub_client.json_calls[0][1]["messages"][1]
        assert user["content"] == "Debug the following code with error: ZeroDivisionError:\n\n```python\nx = 1 / 0\n```"

    def test_unknown_language_has_no_specialization(self, stub_client, completion):
        """Test undetected languages leave the system prompt generic."""
        stub_client.json_response = completion("ok")

        ProgrammingService(stub_client).analyze_code("SELECT 1;")

        system = stub_client.json_calls[0][1]["messages"][0]
        assert "Specialize" not in system["content"]

    @pytest.mark.parametrize("method", ["analyze_code", "debug_code"])
    def test_empty_code(self, stub_client, method):
        """Test blank code is rejected by analysis and debugging."""
        with pytest.raises(InvalidInputError, match="Code input cannot be empty"):
            getattr(ProgrammingService(stub_client), method)(" ")

    def test_empty_description(self, stub_client):
        """Test a blank description is reported as a description, not code."""
        with pytest.raises(InvalidInputError, match="Description cannot be empty"):
            ProgrammingService(stub_client).generate_code(" ")

        assert stub_client.json_calls == []


class TestChatBotService:
    """Test ChatBotService with caller-owned history."""

    def test_chat_returns_extended_history(self, stub_client, completion):
        """Test the reply is returned with the new exchange appended."""
        stub_client.json_response = completion("Hi there!")
        history = [{"role": "user", "content": "Hello"}, {"role": "assistant", "content": "Hey"}]

        turn = ChatBotService(stub_client).chat("How are you?", history)

        assert turn.reply == "Hi there!"
        assert turn.history == history + [
            {"role": "user", "content": "How are you?"},
            {"role": "assistant", "content": "Hi there!"},
        ]
        assert len(history) == 2

    def test_system_prompt_leads_messages(self, stub_client, completion):
        """Test the configured system prompt is sent first."""
        stub_client.json_response = completion("ok")

        ChatBotService(stub_client, ChatBotConfig(system_prompt="Be brief.")).chat("hi")

        messages = stub_client.json_calls[0][1]["messages"]
        assert messages == [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "hi"},
        ]

    def test_history_is_trimmed(self, stub_client, completion):
        """Test only the most recent max_history entries are sent and returned."""
        stub_client.json_response = completion("reply")
        history = [{"role": "user", "content": str(i)} for i in range(5)]

        turn = ChatBotService(stub_client, ChatBotConfig(max_history=2)).chat("next", history)

        sent = stub_client.json_calls[0][1]["messages"]
        assert [m["content"] for m in sent] == ["3", "4", "next"]
        assert turn.history == [
            {"role": "user", "content": "next"},
            {"role": "assistant", "content": "reply"},
        ]

    def test_zero_history(self, stub_client, completion):
        """Test max_history=0 keeps no history at all."""
        stub_client.json_response = completion("reply")

        turn = ChatBotService(stub_client, ChatBotConfig(max_history=0)).chat(
            "hi", [{"role": "user", "content": "old"}]
        )

        assert stub_client.json_calls[0][1]["messages"] == [{"role": "user", "content": "hi"}]
        assert turn.history == []

    @pytest.mark.parametrize(
        "history,message",
        [
            (["hello"], "must be mappings"),
            ([{"role": "user"}], '"role" and "content"'),
            ([{"role": "robot", "content": "x"}], "Invalid role in conversation history: robot"),
            ([{"role": "user", "content": 5}], "content must be a string"),
        ],
    )
    def test_invalid_history(self, stub_client, history, message):
        """Test malformed history items are rejected before any request."""
        with pytest.raises(InvalidInputError, match=message):
            ChatBotService(stub_client).chat("hi", history)

        assert stub_client.json_calls == []

    def test_empty_message(self, stub_client):
        """Test blank messages are rejected."""
        with pytest.raises(InvalidInputError, match="Message cannot be empty"):
            ChatBotService(stub_client).chat("  ")

    def test_message_too_long(self, stub_client):
        """Test overlong messages are rejected."""
        with pytest.raises(InvalidInputError, match="exceeds maximum allowed length"):
            ChatBotService(stub_client).chat("x" * 400_001)

    def test_temperature_is_clamped(self):
        """Test out-of-range temperatures are clamped rather than rejected."""
        assert ChatBotConfig(temperature=5).temperature == 2.0
        assert ChatBotConfig(temperature=-1).temperature == 0.0


class TestSpeechToTextService:
    """Test SpeechToTextService uploads."""

    def test_transcribe_from_file(self, tmp_path, stub_client):
        """Test the file is uploaded under its own name with model settings."""
        path = tmp_path / "memo.m4a"
        path.write_bytes(b"audio-bytes")
        stub_client.json_response = {"text": "hello world"}

        assert SpeechToTextService(stub_client).transcribe_from_file(path) == "hello world"

        endpoint, parts = stub_client.multipart_calls[0]
        assert endpoint == "audio/transcriptions"
        assert parts == [
            {"name": "file", "contents": b"audio-bytes", "filename": "memo.m4a"},
            {"name": "model", "contents": "whisper-1"},
            {"name": "response_format", "contents": "json"},
            {"name": "temperature", "contents": "0.0"},
        ]

    def test_language_hint(self, tmp_path, stub_client):
        """Test a configured language is sent as an extra part."""
        path = tmp_path / "memo.wav"
        path.write_bytes(b"RIFF")
        stub_client.json_response = {"text": "hallo"}

        SpeechToTextService(stub_client, SpeechConfig(stt_language="de")).transcribe_from_file(path)

        parts = stub_client.multipart_calls[0][1]
        assert parts[-1] == {"name": "language", "contents": "de"}

    def test_transcribe_from_base64(self, stub_client):
        """Test base64 audio is decoded in memory and uploaded under the given name."""
        stub_client.json_response = {"text": "ok"}
        encoded = base64.b64encode(b"wave-data").decode()

        result = SpeechToTextService(stub_client).transcribe_from_base64(
            f"data:audio/wav;base64,{encoded}", filename="clip.wav"
        )

        assert result == "ok"
        file_part = stub_client.multipart_calls[0][1][0]
        assert file_part == {"name": "file", "contents": b"wave-data", "filename": "clip.wav"}

    def test_base64_filename_must_be_supported(self, stub_client):
        """Test the upload filename extension is validated."""
        with pytest.raises(InvalidAudioError):
            SpeechToTextService(stub_client).transcribe_from_base64("AAAA", filename="clip.ogg")

    def test_missing_text_is_malformed(self, tmp_path, stub_client):
        """Test a reply without a text field is rejected."""
        path = tmp_path / "memo.mp3"
        path.write_bytes(b"ID3")
        stub_client.json_response = {"duration": 1.0}

        with pytest.raises(MalformedResponseError, match="missing text field"):
            SpeechToTextService(stub_client).transcribe_from_file(path)

    def test_response_format_is_restricted(self):
        """Test only JSON response formats are accepted."""
        with pytest.raises(PydanticValidationError):
            SpeechConfig(stt_response_format="text")


class TestTextToSpeechService:
    """Test TextToSpeechService synthesis."""

    def test_synthesize_defaults(self, stub_client):
        """Test default voice, format and speed are sent."""
        stub_client.binary_response = b"mp3-bytes"

        assert TextToSpeechService(stub_client).synthesize("Hello") == b"mp3-bytes"

        endpoint, payload = stub_client.binary_calls[0]
        assert endpoint == "audio/speech"
        assert payload == {
            "model": "tts-1",
            "input": "Hello",
            "voice": "alloy",
            "response_format": "mp3",
            "speed": 1.0,
        }

    def test_overrides_are_normalized(self, stub_client):
        """Test voice and format overrides are lowercased."""
        TextToSpeechService(stub_client).synthesize("Hi", voice="NOVA", output_format="FLAC", speed=1.5)

        payload = stub_client.binary_calls[0][1]
        assert payload["voice"] == "nova"
        assert payload["response_format"] == "flac"
        assert payload["speed"] == 1.5

    @pytest.mark.parametrize("speed", [0.1, 4.5])
    def test_speed_out_of_range(self, stub_client, speed):
        """Test speeds outside 0.25-4.0 are rejected."""
        with pytest.raises(InvalidInputError, match="Speed must be between"):
            TextToSpeechService(stub_client).synthesize("Hi", speed=speed)

    def test_invalid_voice(self, stub_client):
        """Test unknown voices are rejected before any request."""
        with pytest.raises(InvalidAudioError, match="Invalid voice"):
            TextToSpeechService(stub_client).synthesize("Hi", voice="robot")

        assert stub_client.binary_calls == []

    def test_text_limits(self, stub_client):
        """Test empty and overlong text is rejected."""
        service = TextToSpeechService(stub_client)

        with pytest.raises(InvalidInputError, match="Text input cannot be empty"):
            service.synthesize("")
        with pytest.raises(InvalidInputError, match="maximum length of 4096"):
            service.synthesize("a" * 4097)
        service.synthesize("a" * 4096)

    def test_synthesize_to_file(self, tmp_path, stub_client):
        """Test audio bytes are written to the target path."""
        stub_client.binary_response = b"opus-bytes"
        target = tmp_path / "out.opus"

        written = TextToSpeechService(stub_client).synthesize_to_file("Hi", target, output_format="opus")

        assert written == target
        assert target.read_bytes() == b"opus-bytes"
