"""Tests for the LLM client protocol, mock client and HTTP adapter."""
import io
import json
import time
import urllib.error
from unittest import mock

import pytest

from citysim_director.client import (
    LLMClient,
    LLMError,
    MockClient,
    OpenAICompatibleClient,
    extract_content,
    validate_endpoint,
)


class _FakeResponse(io.BytesIO):
    """Context-manager body returned by the patched urlopen."""

    def __init__(self, payload: bytes, status: int = 200) -> None:
        super().__init__(payload)
        self.status = status


def _completion(content: str) -> bytes:
    return json.dumps({"choices": [{"message": {"content": content}}]}).encode()


class TestLLMClientProtocol:
    def test_mock_client_conforms_to_protocol(self):
        assert isinstance(MockClient(responses={}), LLMClient)

    def test_http_client_conforms_to_protocol(self):
        client = OpenAICompatibleClient("key", "model", "http://localhost/v1")
        assert isinstance(client, LLMClient)


class TestMockClient:
    def test_dict_responses(self):
        client = MockClient(responses={("sys", "usr"): "hello"})
        assert client.query("sys", "usr") == "hello"
        assert client.calls == 1

    def test_missing_key_returns_empty_json(self):
        client = MockClient(responses={})
        assert client.query("a", "b") == "{}"

    def test_callable_responses(self):
        client = MockClient(responses=lambda s, u: f"{s}|{u}")
        assert client.query("x", "y") == "x|y"

    def test_latency(self):
        client = MockClient(responses={}, latency=0.02)
        start = time.monotonic()
        client.query("a", "b")
        assert time.monotonic() - start >= 0.02

    def test_error_rate_one_always_raises(self):
        client = MockClient(responses={}, error_rate=1.0)
        with pytest.raises(LLMError, match="mock error"):
            client.query("a", "b")

    def test_custom_error_exception(self):
        client = MockClient(responses={}, error_rate=1.0, error_exception=TimeoutError("slow"))
        with pytest.raises(TimeoutError):
            client.query("a", "b")


class TestOpenAICompatibleClient:
    def test_requires_api_key(self):
        with pytest.raises(LLMError):
            OpenAICompatibleClient("", "model", "http://localhost/v1")

    def test_query_posts_chat_completion(self):
        client = OpenAICompatibleClient("secret", "gpt-oss-120b", "http://host/v1/")
        with mock.patch(
            "urllib.request.urlopen", return_value=_FakeResponse(_completion('{"instructions": []}'))
        ) as urlopen:
            result = client.query("system text", "user text")

        assert result == '{"instructions": []}'
        req = urlopen.call_args.args[0]
        assert req.full_url == "http://host/v1/chat/completions"
        assert req.get_method() == "POST"
        assert req.get_header("Authorization") == "Bearer secret"
        body = json.loads(req.data)
        assert body["model"] == "gpt-oss-120b"
        assert body["temperature"] == 0.7
        assert body["max_tokens"] == 2000
        assert body["messages"] == [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ]

    def test_http_error_raises_llm_error(self):
        client = OpenAICompatibleClient("secret", "m", "http://host/v1")
        error = urllib.error.HTTPError(
            "http://host/v1/chat/completions", 429, "Too Many", {}, io.BytesIO(b"slow down"),
        )
        with mock.patch("urllib.request.urlopen", side_effect=error):
            with pytest.raises(LLMError, match="429"):
                client.query("s", "u")

    def test_unreachable_raises_llm_error(self):
        client = OpenAICompatibleClient("secret", "m", "http://host/v1")
        with mock.patch("urllib.request.urlopen", side_effect=urllib.error.URLError("refused")):
            with pytest.raises(LLMError, match="unreachable"):
                client.query("s", "u")


class TestExtractContent:
    def test_legacy_text_field(self):
        assert extract_content({"choices": [{"text": "hi"}]}) == "hi"

    @pytest.mark.parametrize("body", [{}, {"choices": []}, {"choices": [{"message": {}}]}])
    def test_missing_content_raises(self, body):
        with pytest.raises(LLMError):
            extract_content(body)


class TestValidateEndpoint:
    def test_reachable(self):
        client = OpenAICompatibleClient("secret", "m", "http://host/v1")
        with mock.patch("urllib.request.urlopen", return_value=_FakeResponse(b"{}")) as urlopen:
            assert validate_endpoint(client) is True
        req = urlopen.call_args.args[0]
        assert req.full_url == "http://host/v1/models"
        assert req.get_method() == "GET"

    def test_unreachable(self):
        client = OpenAICompatibleClient("secret", "m", "http://host/v1")
        with mock.patch("urllib.request.urlopen", side_effect=urllib.error.URLError("down")):
            assert validate_endpoint(client) is False
