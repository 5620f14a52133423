"""Shared fixtures: a scripted stand-in for the Gemini client."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from quizely.core.session import FlashcardSession


class FakeGenerator:
    """Records prompts and answers with a fixed text or raises a fixed error."""

    def __init__(self, text: str = "A test definition.", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.prompts: list[str] = []
        self.on_call: Callable[[], None] | None = None

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.on_call is not None:
            self.on_call()
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture  # type: ignore[misc]
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture  # type: ignore[misc]
def session(generator: FakeGenerator) -> FlashcardSession:
    return FlashcardSession(generator)
