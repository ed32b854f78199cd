"""
Unit tests for CompletionClient.

Uses a mock `requests.Session` to avoid network access.
"""

from unittest.mock import MagicMock

import pytest
import requests

from askdoc.core.errors import ApiError
from askdoc.llm.client import CompletionClient


URL = "https://llm.example/v1/chat/completions"
MESSAGES = [{"role": "user", "content": "hello"}]


def _response(status_code=200, json_data=None, json_error=None):
    response = MagicMock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


class TestComplete:
    """Test cases for `CompletionClient.complete`."""

    def test_returns_first_choice_text(self, session) -> None:
        session.post.return_value = _response(json_data={
            "choices": [
                {"message": {"role": "assistant", "content": " first answer \n"}},
                {"message": {"role": "assistant", "content": "second"}},
            ]
        })
        client = CompletionClient(URL, api_key="sk-test", timeout=30, session=session)

        assert client.complete("gpt-4o", MESSAGES) == "first answer"

        session.post.assert_called_once_with(
            URL,
            headers={"Content-Type": "application/json", "Authorization": "Bearer sk-test"},
            json={"model": "gpt-4o", "messages": MESSAGES},
            timeout=30,
        )

    def test_no_authorization_header_without_key(self, session) -> None:
        session.post.return_value = _response(json_data={
            "choices": [{"message": {"content": "ok"}}]
        })
        client = CompletionClient(URL, session=session)

        client.complete("local-model", MESSAGES)

        headers = session.post.call_args.kwargs["headers"]
        assert "Authorization" not in headers
        assert session.post.call_args.kwargs["timeout"] is None

    def test_http_error_carries_upstream_details(self, session) -> None:
        session.post.return_value = _response(401, json_data={
            "error": {"code": "invalid_api_key", "message": "Incorrect API key provided"}
        })
        client = CompletionClient(URL, api_key="bad", session=session)

        with pytest.raises(ApiError) as exc_info:
            client.complete("gpt-4o", MESSAGES)

        err = exc_info.value
        assert err.code == "invalid_api_key"
        assert err.upstream_message == "Incorrect API key provided"
        assert err.http_status == 401
        assert err.status_code == 500

    def test_rate_limit_uses_error_type_when_code_missing(self, session) -> None:
        session.post.return_value = _response(429, json_data={
            "error": {"type": "rate_limit_exceeded", "message": "Slow down"}
        })
        client = CompletionClient(URL, session=session)

        with pytest.raises(ApiError) as exc_info:
            client.complete("gpt-4o", MESSAGES)

        assert exc_info.value.code == "rate_limit_exceeded"

    def test_http_error_with_non_json_body(self, session) -> None:
        session.post.return_value = _response(502, json_error=ValueError("not json"))
        client = CompletionClient(URL, session=session)

        with pytest.raises(ApiError) as exc_info:
            client.complete("gpt-4o", MESSAGES)

        assert exc_info.value.code is None
        assert "502" in exc_info.value.upstream_message

    def test_transport_failure(self, session) -> None:
        session.post.side_effect = requests.exceptions.ConnectionError("connection refused")
        client = CompletionClient(URL, session=session)

        with pytest.raises(ApiError) as exc_info:
            client.complete("gpt-4o", MESSAGES)

        assert isinstance(exc_info.value.__cause__, requests.exceptions.ConnectionError)

    @pytest.mark.parametrize(
        "body",
        [
            {"choices": []},
            {"unexpected": True},
            {"choices": [{"message": {"content": None}}]},
            ["not", "an", "object"],
        ],
    )
    def test_malformed_body(self, session, body) -> None:
        session.post.return_value = _response(json_data=body)
        client = CompletionClient(URL, session=session)

        with pytest.raises(ApiError):
            client.complete("gpt-4o", MESSAGES)

    def test_no_retry(self, session) -> None:
        session.post.return_value = _response(500, json_data={"error": "boom"})
        client = CompletionClient(URL, session=session)

        with pytest.raises(ApiError):
            client.complete("gpt-4o", MESSAGES)

        assert session.post.call_count == 1
