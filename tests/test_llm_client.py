"""Tests for the Gemini generation client.

Two seams are used, neither of which touches the network:
- `GenerationClient._post` patched at class level (slots-safe) to check the
  request shape and the response extraction;
- `urllib.request.urlopen` patched to exercise HTTP / network error mapping.
"""

from __future__ import annotations

import io
import json
import urllib.error
import urllib.request
from collections.abc import Iterator
from email.message import Message
from typing import Any

import pytest

from quizely.core.errors import GenerationError, MalformedResponseError
from quizely.core.settings import load_settings
from quizely.llm.client import GenerationClient
from quizely.llm.models import DEFAULT_ALIAS, GEMINI_BASE_URL, get_model


@pytest.fixture  # type: ignore[misc]
def fresh_settings() -> Iterator[None]:
    """Rebuild settings around each test that mutates the environment."""
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


class _FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> _FakeResponse:
        return self

    def __exit__(self, *exc: object) -> None:
        return None


def _http_error(code: int, reason: str, body: bytes) -> urllib.error.HTTPError:
    return urllib.error.HTTPError(
        "https://example.test", code, reason, Message(), io.BytesIO(body)
    )


# --------------------------------------------------------------------------- #
# Request shape
# --------------------------------------------------------------------------- #


def test_endpoint_without_key_has_no_query_string() -> None:
    client = GenerationClient()
    assert client.endpoint() == (
        f"{GEMINI_BASE_URL}/models/gemini-2.0-flash:generateContent"
    )


def test_endpoint_attaches_key_as_query_parameter() -> None:
    client = GenerationClient(api_key="abc 123", base_url="https://gemini.example.com/v1beta/")
    assert client.endpoint() == (
        "https://gemini.example.com/v1beta/models/gemini-2.0-flash:generateContent?key=abc+123"
    )


def test_generate_sends_single_user_prompt_and_returns_first_part(monkeypatch: Any) -> None:
    captured: dict[str, Any] = {}

    def fake_post(
        self: GenerationClient,
        *,
        url: str,
        headers: dict[str, str],
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        captured["url"] = url
        captured["headers"] = headers
        captured["payload"] = payload
        return {
            "candidates": [
                {"content": {"parts": [{"text": "Part A."}, {"text": "Part B."}]}},
                {"content": {"parts": [{"text": "Other candidate."}]}},
            ]
        }

    monkeypatch.setattr(GenerationClient, "_post", fake_post)

    client = GenerationClient(model_alias="lite")
    text = client.generate('Provide a concise definition for the term "x".')

    assert text == "Part A."
    assert captured["url"].endswith(f"/models/{get_model('lite').name}:generateContent")
    assert captured["headers"] == {"Content-Type": "application/json"}
    assert captured["payload"] == {
        "contents": [
            {
                "role": "user",
                "parts": [{"text": 'Provide a concise definition for the term "x".'}],
            }
        ]
    }


def test_unknown_alias_is_used_as_model_id() -> None:
    client = GenerationClient(model_alias="gemini-9-ultra")
    assert "/models/gemini-9-ultra:generateContent" in client.endpoint()


def test_from_settings_reads_environment(monkeypatch: Any, fresh_settings: None) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setenv("GEMINI_API_BASE_URL", "https://proxy.example.com/v1beta")
    monkeypatch.setenv("QUIZELY_REQUEST_TIMEOUT", "5")
    monkeypatch.delenv("QUIZELY_MODEL", raising=False)

    client = GenerationClient.from_settings()

    assert client.api_key == "secret"
    assert client.base_url == "https://proxy.example.com/v1beta"
    assert client.timeout_seconds == 5.0
    assert client.model_alias == DEFAULT_ALIAS


# --------------------------------------------------------------------------- #
# Response extraction
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize(  # type: ignore[misc]
    "response",
    [
        {},
        {"candidates": []},
        {"candidates": [{}]},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"content": {"parts": [{}]}}]},
        {"candidates": [{"content": {"parts": [{"text": ""}]}}]},
        {"candidates": ["not-an-object"]},
    ],
)
def test_malformed_payloads_raise(response: dict[str, Any]) -> None:
    with pytest.raises(MalformedResponseError):
        GenerationClient._extract_text(response)


# --------------------------------------------------------------------------- #
# Transport
# --------------------------------------------------------------------------- #


def test_post_decodes_json_body(monkeypatch: Any) -> None:
    seen: dict[str, Any] = {}

    def fake_urlopen(request: urllib.request.Request, timeout: float) -> _FakeResponse:
        seen["method"] = request.get_method()
        seen["body"] = json.loads(request.data)  # type: ignore[arg-type]
        seen["timeout"] = timeout
        body = {"candidates": [{"content": {"parts": [{"text": "A test definition."}]}}]}
        return _FakeResponse(json.dumps(body).encode("utf-8"))

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

    client = GenerationClient(timeout_seconds=7.5)
    assert client.generate("prompt") == "A test definition."
    assert seen["method"] == "POST"
    assert seen["body"]["contents"][0]["parts"][0]["text"] == "prompt"
    assert seen["timeout"] == 7.5


def test_http_error_uses_api_error_message(monkeypatch: Any) -> None:
    body = json.dumps({"error": {"code": 400, "message": "API key not valid."}}).encode()

    def fake_urlopen(request: urllib.request.Request, timeout: float) -> _FakeResponse:
        raise _http_error(400, "Bad Request", body)

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

    with pytest.raises(GenerationError) as excinfo:
        GenerationClient().generate("prompt")
    assert str(excinfo.value) == "API error: API key not valid."
    assert not isinstance(excinfo.value, MalformedResponseError)


def test_http_error_falls_back_to_reason(monkeypatch: Any) -> None:
    def fake_urlopen(request: urllib.request.Request, timeout: float) -> _FakeResponse:
        raise _http_error(503, "Service Unavailable", b"<html>down</html>")

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

    with pytest.raises(GenerationError, match="API error: Service Unavailable"):
        GenerationClient().generate("prompt")


def test_network_error_is_reported(monkeypatch: Any) -> None:
    def fake_urlopen(request: urllib.request.Request, timeout: float) -> _FakeResponse:
        raise urllib.error.URLError("connection refused")

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

    with pytest.raises(GenerationError, match="Network error: connection refused"):
        GenerationClient().generate("prompt")


def test_non_json_success_body_is_malformed(monkeypatch: Any) -> None:
    def fake_urlopen(request: urllib.request.Request, timeout: float) -> _FakeResponse:
        return _FakeResponse(b"not json")

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)

    with pytest.raises(MalformedResponseError):
        GenerationClient().generate("prompt")
