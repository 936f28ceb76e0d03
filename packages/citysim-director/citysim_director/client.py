"""LLM client protocol, mock implementation, and OpenAI-compatible adapter."""
from __future__ import annotations

import json
import random as _random_mod
import time
import urllib.error
import urllib.request
from typing import Any, Callable, Protocol, runtime_checkable


class LLMError(Exception):
    """Exception raised by LLM client operations."""


@runtime_checkable
class LLMClient(Protocol):
    """Protocol for planner backends.

    Implementations make blocking calls (invoked inside a thread pool worker).
    Any exception may be raised on failure -- the Director system catches it
    and reports it through its error callbacks.
    """

    def query(self, system_prompt: str, user_message: str) -> str:
        """Send a prompt to an LLM and return the response string."""
        ...


class MockClient:
    """Deterministic LLM client for testing.

    Args:
        responses: A dict mapping (system_prompt, user_message) tuples to
            response strings, OR a callable (str, str) -> str for dynamic
            responses.
        latency: Simulated delay in seconds before returning (default 0.0).
        error_rate: Probability of raising an exception (0.0--1.0, default 0.0).
        error_exception: The exception instance to raise on simulated error.
            Defaults to LLMError("mock error") if None.
    """

    def __init__(
        self,
        responses: dict[tuple[str, str], str] | Callable[[str, str], str],
        latency: float = 0.0,
        error_rate: float = 0.0,
        error_exception: BaseException | None = None,
    ) -> None:
        self._responses = responses
        self._latency = latency
        self._error_rate = error_rate
        self._error_exception = (
            error_exception if error_exception is not None else LLMError("mock error")
        )
        # Per-instance RNG for thread safety (no shared state).
        self._rng = _random_mod.Random()
        self.calls = 0

    def query(self, system_prompt: str, user_message: str) -> str:
        """Return a mock response, optionally simulating latency and errors."""
        self.calls += 1
        if self._error_rate > 0.0 and self._rng.random() < self._error_rate:
            raise self._error_exception

        if self._latency > 0.0:
            time.sleep(self._latency)

        if callable(self._responses) and not isinstance(self._responses, dict):
            return self._responses(system_prompt, user_message)

        return self._responses.get((system_prompt, user_message), "{}")


class OpenAICompatibleClient:
    """Client for any OpenAI-compatible ``/chat/completions`` endpoint.

    Uses bearer-token auth and stdlib urllib. HTTP and transport failures are
    raised as ``LLMError``.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 30.0,
    ) -> None:
        if not api_key:
            raise LLMError("No API key configured for the Director endpoint")
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout

    @property
    def model(self) -> str:
        return self._model

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def query(self, system_prompt: str, user_message: str) -> str:
        """Send a chat completion request and return the response text."""
        payload = json.dumps({
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_message},
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }).encode("utf-8")

        req = urllib.request.Request(
            f"{self._base_url}/chat/completions",
            data=payload,
            headers=self._headers(),
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                body = json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")
            raise LLMError(f"Director LLM HTTP {exc.code}: {detail}") from exc
        except urllib.error.URLError as exc:
            raise LLMError(f"Director LLM unreachable: {exc.reason}") from exc

        return extract_content(body)


def extract_content(body: dict[str, Any]) -> str:
    """Pull the completion text out of a chat or legacy completion body."""
    choices = body.get("choices") or []
    if not choices:
        raise LLMError("Director LLM returned no choices")
    first = choices[0]
    message = first.get("message") or {}
    content = message.get("content") or first.get("text") or ""
    if not content:
        raise LLMError("Director LLM returned an empty completion")
    return content


def validate_endpoint(client: OpenAICompatibleClient, timeout: float = 5.0) -> bool:
    """Check that the endpoint answers ``GET /models`` with a 2xx status."""
    req = urllib.request.Request(
        f"{client.base_url}/models",
        headers=client._headers(),
        method="GET",
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            return 200 <= resp.status < 300
    except urllib.error.URLError:
        return False
