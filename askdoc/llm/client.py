"""Transport client for OpenAI-compatible chat completions.

Architectural role:
    Executes one HTTP request per completion against the configured endpoint
    and returns the first choice's text.

Model invocation flow:
    `engine.answer_question` / `cli.InteractiveSession` ->
    `CompletionClient.complete(model, messages)` -> POST `{model, messages}` ->
    `choices[0].message.content`.

Retry behavior:
    No retry loop is implemented. Each call is attempted once.

Failure handling model:
    Transport errors, non-2xx responses and malformed bodies are raised as a
    single `ApiError`, carrying the upstream error code/message when the body
    provides them.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests

from askdoc.core.content_types import PromptMessage
from askdoc.core.errors import ApiError


logger = logging.getLogger(__name__)


def _parse_error_body(response: requests.Response) -> Tuple[Optional[str], Optional[str]]:
    """Return `(code, message)` from an OpenAI-style error body, if present."""
    try:
        data = response.json()
    except ValueError:
        return None, None

    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        code = error.get("code") or error.get("type")
        return (str(code) if code else None), error.get("message")
    if isinstance(error, str):
        return None, error
    return None, None


class CompletionClient:
    """Synchronous client for a chat-completions endpoint.

    Args:
        url: Full chat-completions URL.
        api_key: Bearer credential; omitted from headers when `None`.
        timeout: Request timeout in seconds, `None` for no client-side limit.
        session: Optional `requests.Session` (tests inject a mock).
    """

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def complete(self, model: str, messages: List[PromptMessage]) -> str:
        """Send one completion request and return the first choice's text.

        Raises:
            ApiError: on any transport, HTTP or response-shape failure.
        """
        payload: Dict[str, Any] = {"model": model, "messages": messages}

        logger.debug("Calling %s with model=%s messages=%d", self.url, model, len(messages))

        try:
            response = self.session.post(
                self.url,
                headers=self._headers(),
                json=payload,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as err:
            raise ApiError(f"Completion request failed: {err}") from err

        if not 200 <= response.status_code < 300:
            code, message = _parse_error_body(response)
            raise ApiError(
                message or f"Completion API returned HTTP {response.status_code}",
                code=code,
                http_status=response.status_code,
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as err:
            raise ApiError("Malformed completion response", http_status=response.status_code) from err

        if not isinstance(content, str):
            raise ApiError("Completion response carried no text", http_status=response.status_code)

        return content.strip()
