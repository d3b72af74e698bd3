"""HTTP dispatcher for taskgpt.

Sends JSON, multipart and binary-response requests to the remote API with
retry on transient failures and classified errors for everything else.
"""

import os
import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urljoin

import requests

from taskgpt.client.error_classifier import ErrorClassifier
from taskgpt.config import Config
from taskgpt.core.errors import MalformedResponseError, NetworkError
from taskgpt.core.logging import logger
from taskgpt.core.retry_config import ErrorCategory, RetryConfig
from taskgpt.utils.types import MultipartPart

RequestKwargs = Dict[str, Any]


class ApiClient:
    """Unified client for the remote LLM API endpoints.

    Each call runs at most ``retry_config.max_attempts`` sequential attempts.
    Network failures and 5xx responses are retried with linear backoff; every
    other failure is raised immediately as a classified ``TaskGptError``.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        retry_config: Optional[RetryConfig] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the client.

        Args:
            api_key: Bearer token for the remote API
            base_url: API root; defaults to ``Config.base_url()``
            timeout: Per-request timeout in seconds; defaults to ``Config.timeout()``
            retry_config: Retry policy; defaults to 3 attempts, 1s linear backoff
            session: HTTP session to send requests through
            sleep: Blocking wait used between attempts

        Raises:
            ValueError: If api_key is empty
        """
        if not api_key:
            raise ValueError("API key required")

        self._api_key = api_key
        self.base_url = base_url or Config.base_url()
        if not self.base_url.endswith("/"):
            self.base_url += "/"
        self.timeout = timeout if timeout is not None else Config.timeout()
        self.retry_config = retry_config or RetryConfig()
        self.session = session or requests.Session()
        self._sleep = sleep

    def send_json(self, endpoint: str, json_body: Dict[str, Any]) -> Dict[str, Any]:
        """POST a JSON body and return the decoded JSON response.

        Args:
            endpoint: Path relative to the base URL (e.g. "chat/completions")
            json_body: Request payload

        Returns:
            Decoded response object

        Raises:
            TaskGptError: Classified failure (see ``taskgpt.core.errors``)
        """
        response = self._dispatch(
            endpoint,
            lambda: {
                "json": json_body,
                "headers": {"Content-Type": "application/json"},
            },
        )
        return self._parse_json(endpoint, response)

    def send_multipart(self, endpoint: str, parts: Sequence[MultipartPart]) -> Dict[str, Any]:
        """POST multipart/form-data and return the decoded JSON response.

        Stream contents are rewound to where they started before each attempt,
        so a retried upload sends the whole file again.

        Args:
            endpoint: Path relative to the base URL (e.g. "audio/transcriptions")
            parts: Ordered form fields

        Returns:
            Decoded response object

        Raises:
            TaskGptError: Classified failure
        """
        start_positions = {
            index: part["contents"].tell()
            for index, part in enumerate(parts)
            if _is_seekable(part["contents"])
        }

        def build() -> RequestKwargs:
            for index, position in start_positions.items():
                parts[index]["contents"].seek(position)
            return {"files": _multipart_fields(parts)}

        response = self._dispatch(endpoint, build)
        return self._parse_json(endpoint, response)

    def send_binary(self, endpoint: str, json_body: Dict[str, Any]) -> bytes:
        """POST a JSON body and return the raw response bytes.

        Args:
            endpoint: Path relative to the base URL (e.g. "audio/speech")
            json_body: Request payload

        Returns:
            Response body, unparsed

        Raises:
            TaskGptError: Classified failure
        """
        response = self._dispatch(
            endpoint,
            lambda: {
                "json": json_body,
                "headers": {"Content-Type": "application/json"},
            },
        )
        return response.content

    def _dispatch(self, endpoint: str, build: Callable[[], RequestKwargs]) -> requests.Response:
        """Run the attempt loop and return the first 2xx response.

        The last attempt never continues, so the loop always returns or raises.
        """
        url = urljoin(self.base_url, endpoint.lstrip("/"))
        max_attempts = self.retry_config.max_attempts

        for attempt in range(1, max_attempts + 1):
            kwargs = build()
            headers = {"Authorization": f"Bearer {self._api_key}"}
            headers.update(kwargs.pop("headers", {}))

            logger.debug("api_request_started", endpoint=endpoint, attempt=attempt, max_attempts=max_attempts)

            try:
                response = self.session.request(
                    "POST",
                    url,
                    headers=headers,
                    timeout=self.timeout,
                    **kwargs,
                )
            except requests.RequestException as e:
                if self.retry_config.should_retry(ErrorCategory.NETWORK, attempt):
                    self._wait(endpoint, attempt, reason=type(e).__name__)
                    continue
                logger.error(
                    "api_network_error",
                    endpoint=endpoint,
                    attempts=attempt,
                    error=str(e),
                )
                raise NetworkError(f"Network error: {e}", cause=e)

            status_code = response.status_code
            if 200 <= status_code < 300:
                logger.info("api_request_succeeded", endpoint=endpoint, status_code=status_code, attempts=attempt)
                return response

            category = ErrorClassifier.categorize(status_code)
            if self.retry_config.should_retry(category, attempt):
                self._wait(endpoint, attempt, reason=str(status_code))
                continue

            error = ErrorClassifier.build_error(response)
            logger.warning(
                "api_request_failed",
                endpoint=endpoint,
                status_code=status_code,
                category=category.value,
                attempts=attempt,
                error=error.message,
            )
            raise error

    def _wait(self, endpoint: str, attempt: int, reason: str) -> None:
        delay = self.retry_config.delay_for(attempt)
        logger.warning(
            "api_request_retry",
            endpoint=endpoint,
            attempt=attempt,
            delay_seconds=delay,
            reason=reason,
        )
        self._sleep(delay)

    @staticmethod
    def _parse_json(endpoint: str, response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            logger.error("api_malformed_response", endpoint=endpoint, status_code=response.status_code)
            raise MalformedResponseError(f"Invalid JSON response: {e}", response.status_code, e)

        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Invalid JSON response: expected an object, got {type(data).__name__}",
                response.status_code,
            )
        return data


def _is_seekable(contents: Any) -> bool:
    if not hasattr(contents, "seek") or not hasattr(contents, "tell"):
        return False
    seekable = getattr(contents, "seekable", None)
    return seekable() if callable(seekable) else True


def _multipart_fields(parts: Sequence[MultipartPart]) -> List[Tuple[str, Tuple[Optional[str], Any]]]:
    """Convert parts to the ``files`` list accepted by requests.

    Streams become file fields; scalars become plain form fields (no filename).
    """
    fields = []
    for part in parts:
        name = part["name"]
        contents = part["contents"]
        filename = part.get("filename")

        if hasattr(contents, "read"):
            if filename is None:
                stream_name = getattr(contents, "name", None)
                filename = (os.path.basename(stream_name) if isinstance(stream_name, str) else "") or name
            fields.append((name, (filename, contents)))
        elif isinstance(contents, (bytes, bytearray)):
            fields.append((name, (filename, bytes(contents))))
        else:
            fields.append((name, (filename, str(contents))))
    return fields
