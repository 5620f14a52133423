# -----------------------------------------------------------------------------
# This module provides the small, synchronous client for the Gemini
# "generateContent" endpoint, the only wire interface Quizely has:
#
#   POST {base_url}/models/{model}:generateContent[?key=...]
#   {"contents": [{"role": "user", "parts": [{"text": "<prompt>"}]}]}
#
# The client sends exactly one user-role prompt and returns the text of the
# first part of the first candidate. Every failure is raised as a
# GenerationError (or its MalformedResponseError subclass) so callers can turn
# it into a message without crashing.
#
# The implementation uses only the Python standard library (`urllib.request`).
# Unit tests mock the internal `_post()` method, or `urlopen` itself, so that
# no real HTTP calls are made during CI.
# -----------------------------------------------------------------------------
from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from quizely.core.errors import GenerationError, MalformedResponseError
from quizely.core.settings import Settings, get_logger, load_settings

from .models import DEFAULT_ALIAS, ModelConfig, get_model

logger = get_logger(__name__)


@dataclass(slots=True)
class GenerationClient:
    """Gemini client exposing a single ``generate(prompt) -> str`` call.

    Parameters
    ----------
    api_key:
        Optional API key. The slot is empty by default; when set, the key is
        attached as the ``key`` query parameter of the request URL.
    model_alias:
        Registry alias or concrete model ID, resolved via :func:`get_model`.
    base_url:
        Optional override of the model's API root.
    timeout_seconds:
        Network timeout for the underlying HTTP request in seconds.
    """

    api_key: str = ""
    model_alias: str = DEFAULT_ALIAS
    base_url: str | None = None
    timeout_seconds: float = 30.0

    # --------------------------------------------------------------------- #
    # Constructors
    # --------------------------------------------------------------------- #
    @classmethod
    def from_settings(cls, config: Settings | None = None) -> GenerationClient:
        """Build a client from :class:`Settings` (the cached instance by default)."""
        config = config or load_settings()
        return cls(
            api_key=config.gemini_api_key,
            model_alias=config.model_alias,
            base_url=config.gemini_base_url,
            timeout_seconds=config.request_timeout,
        )

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #
    @property
    def model(self) -> ModelConfig:
        return get_model(self.model_alias)

    def endpoint(self) -> str:
        """Return the full request URL, including the key query parameter if any."""
        config = self.model
        root = (self.base_url or config.base_url).rstrip("/")
        url = f"{root}/models/{config.name}:generateContent"
        if self.api_key:
            url += "?" + urllib.parse.urlencode({"key": self.api_key})
        return url

    def generate(self, prompt: str) -> str:
        """Send ``prompt`` as a single user turn and return the generated text.

        Raises
        ------
        GenerationError
            If the request fails at the network layer or the service answers
            with a non-success status.
        MalformedResponseError
            If the service answers successfully but the payload lacks
            ``candidates[0].content.parts[0].text``.
        """
        payload: dict[str, Any] = {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": prompt}],
                }
            ]
        }
        headers = {"Content-Type": "application/json"}

        logger.debug("Requesting generation from model %s", self.model.name)
        response = self._post(url=self.endpoint(), headers=headers, payload=payload)
        return self._extract_text(response)

    # --------------------------------------------------------------------- #
    # Internal helpers (test seams)
    # --------------------------------------------------------------------- #
    def _post(
        self,
        *,
        url: str,
        headers: Mapping[str, str],
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Perform the HTTP POST and decode the JSON response body.

        Non-2xx answers are reported using the service's ``error.message``
        when the body carries one, falling back to the HTTP reason phrase.
        """
        body = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(
            url=url,
            data=body,
            headers=dict(headers),
            method="POST",
        )

        try:
            with urllib.request.urlopen(request, timeout=self.timeout_seconds) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as exc:
            detail = _api_error_message(exc.read()) or exc.reason or f"HTTP {exc.code}"
            raise GenerationError(f"API error: {detail}") from exc
        except urllib.error.URLError as exc:
            raise GenerationError(f"Network error: {exc.reason}") from exc
        except TimeoutError as exc:
            raise GenerationError("Network error: request timed out") from exc

        try:
            decoded = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MalformedResponseError("response body is not valid JSON") from exc

        if not isinstance(decoded, dict):
            raise MalformedResponseError("response body is not a JSON object")
        return decoded

    @staticmethod
    def _extract_text(response: Mapping[str, Any]) -> str:
        """Extract ``candidates[0].content.parts[0].text`` from a Gemini payload.

        .. code-block:: json

            {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}
        """
        candidates = response.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            raise MalformedResponseError("response has no candidates")

        first = candidates[0]
        content = first.get("content") if isinstance(first, Mapping) else None
        if not isinstance(content, Mapping):
            raise MalformedResponseError("candidates[0].content is missing")

        parts = content.get("parts")
        if not isinstance(parts, list) or not parts:
            raise MalformedResponseError("candidates[0].content.parts is empty")

        part = parts[0]
        text = part.get("text") if isinstance(part, Mapping) else None
        if not isinstance(text, str) or not text:
            raise MalformedResponseError("candidates[0].content.parts[0].text is empty")

        return text


def _api_error_message(raw: bytes) -> str | None:
    """Return ``error.message`` from an error body, or None if there is none."""
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return None
    if not isinstance(data, Mapping):
        return None
    error = data.get("error")
    if not isinstance(error, Mapping):
        return None
    message = error.get("message")
    if isinstance(message, str) and message:
        return message
    return None


__all__ = ["GenerationClient"]
