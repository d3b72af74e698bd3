"""Shared fixtures: an in-process HTTP session double, a stub API client and image bytes."""

import io
import json

import pytest
import requests
from PIL import Image

from taskgpt.client.api_client import ApiClient
from taskgpt.core.retry_config import RetryConfig

BASE_URL = "https://api.test/v1/"
API_KEY = "sk-test"


def build_response(status_code=200, json_body=None, content=None, headers=None):
    """Build a real requests.Response with the given status, body and headers."""
    response = requests.Response()
    response.status_code = status_code
    if json_body is not None:
        content = json.dumps(json_body).encode("utf-8")
    response._content = content if content is not None else b""
    response.encoding = "utf-8"
    response.headers.update(headers or {})
    response.url = BASE_URL
    return response


class FakeSession:
    """Replays queued responses (or raises queued exceptions) and records every call.

    Multipart stream contents are read at call time, like a real transport.
    """

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def request(self, method, url, **kwargs):
        call = {"method": method, "url": url, **kwargs}
        if "files" in kwargs:
            call["uploaded"] = [
                (name, filename, value.read() if hasattr(value, "read") else value)
                for name, (filename, value) in kwargs["files"]
            ]
        self.calls.append(call)

        if not self.outcomes:
            raise AssertionError("FakeSession received more requests than expected")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class SleepRecorder:
    """Stands in for time.sleep and remembers every requested delay."""

    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


class StubApiClient:
    """Returns preset results for each dispatcher operation and records payloads."""

    def __init__(self, json_response=None, binary_response=b""):
        self.json_response = json_response if json_response is not None else {}
        self.binary_response = binary_response
        self.json_calls = []
        self.multipart_calls = []
        self.binary_calls = []

    def send_json(self, endpoint, json_body):
        self.json_calls.append((endpoint, json_body))
        return self.json_response

    def send_multipart(self, endpoint, parts):
        snapshot = []
        for part in parts:
            contents = part["contents"]
            value = contents.read() if hasattr(contents, "read") else contents
            snapshot.append({**part, "contents": value})
        self.multipart_calls.append((endpoint, snapshot))
        return self.json_response

    def send_binary(self, endpoint, json_body):
        self.binary_calls.append((endpoint, json_body))
        return self.binary_response


def chat_completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def image_bytes(image_format="PNG", size=(4, 4)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def make_client(sleep_recorder):
    """Build an ApiClient wired to a FakeSession replaying ``outcomes``."""

    def factory(outcomes, retry_config=None):
        session = FakeSession(outcomes)
        client = ApiClient(
            API_KEY,
            base_url=BASE_URL,
            timeout=5.0,
            retry_config=retry_config or RetryConfig(),
            session=session,
            sleep=sleep_recorder,
        )
        return client, session

    return factory


@pytest.fixture
def response():
    return build_response


@pytest.fixture
def stub_client():
    return StubApiClient()


@pytest.fixture
def completion():
    return chat_completion


@pytest.fixture
def make_image():
    return image_bytes
