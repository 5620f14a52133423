# tests/test_api.py
"""
Integration tests for the Quizely HTTP API.

Focus
-----
These tests verify the HTTP contract and the session transitions behind it.
They never reach Gemini: each app is built around a session whose generator
is a `FakeGenerator`.

Scenarios
---------
1. **Health Check**: Verify service is up and reports its version.
2. **Editing Flow**: Draft -> add -> view -> delete.
3. **Generation**: Submit -> 202 -> Poll (completed), plus rejections and failures.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from quizely import __version__ as PKG_VERSION
from quizely.api.app import create_app
from quizely.core.errors import GenerationError
from quizely.core.session import (
    MISSING_FIELDS_MESSAGE,
    MISSING_TERM_MESSAGE,
    FlashcardSession,
    definition_prompt,
)

from .conftest import FakeGenerator


@pytest.fixture  # type: ignore[misc]
def client(session: FlashcardSession) -> Generator[TestClient, None, None]:
    """A fresh app and client around the per-test session."""
    app = create_app(session=session)
    with TestClient(app) as c:
        yield c


def _add(client: TestClient, term: str, definition: str) -> dict:
    client.put("/session/draft", json={"term": term, "definition": definition})
    resp = client.post("/session/flashcards")
    assert resp.status_code == 200
    return resp.json()


def test_health_check(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["environment"] in {"dev", "test", "prod"}
    assert data["version"] == PKG_VERSION


def test_initial_state(client: TestClient) -> None:
    data = client.get("/session").json()
    assert data == {
        "flashcards": [],
        "draft_term": "",
        "draft_definition": "",
        "active_view": "create",
        "generation_in_flight": False,
        "error_message": None,
    }


def test_partial_draft_update_leaves_other_field(client: TestClient) -> None:
    client.put("/session/draft", json={"term": "t", "definition": "d"})
    data = client.put("/session/draft", json={"term": "new term"}).json()
    assert data["draft_term"] == "new term"
    assert data["draft_definition"] == "d"


def test_add_view_and_delete_flow(client: TestClient) -> None:
    for term in ("A", "B", "C"):
        data = _add(client, term, f"def {term}")
    assert [c["term"] for c in data["flashcards"]] == ["A", "B", "C"]
    assert data["draft_term"] == ""

    data = client.put("/session/view", json={"view": "view"}).json()
    assert data["active_view"] == "view"

    data = client.delete("/session/flashcards/1").json()
    assert [c["term"] for c in data["flashcards"]] == ["A", "C"]

    data = client.delete("/session/flashcards/99").json()
    assert [c["term"] for c in data["flashcards"]] == ["A", "C"]
    assert data["error_message"] is None

    card_id = data["flashcards"][0]["id"]
    data = client.delete(f"/session/flashcards/id/{card_id}").json()
    assert [c["term"] for c in data["flashcards"]] == ["C"]


def test_add_with_blank_term_reports_error_in_state(client: TestClient) -> None:
    client.put("/session/draft", json={"term": " ", "definition": "something"})
    resp = client.post("/session/flashcards")

    assert resp.status_code == 200
    data = resp.json()
    assert data["flashcards"] == []
    assert data["error_message"] == MISSING_FIELDS_MESSAGE

    data = client.put("/session/view", json={"view": "create"}).json()
    assert data["error_message"] is None


def test_unknown_view_is_rejected(client: TestClient) -> None:
    resp = client.put("/session/view", json={"view": "settings"})
    assert resp.status_code == 422


def test_generate_submit_and_poll(client: TestClient, generator: FakeGenerator) -> None:
    client.put("/session/draft", json={"term": "photon"})

    resp = client.post("/session/generate")
    assert resp.status_code == 202
    assert resp.json()["generation_in_flight"] is True

    # TestClient runs BackgroundTasks before returning, so the call has resolved.
    data = client.get("/session").json()
    assert data["generation_in_flight"] is False
    assert data["draft_definition"] == "A test definition."
    assert data["error_message"] is None
    assert data["flashcards"] == []
    assert generator.prompts == [definition_prompt("photon")]


def test_generate_without_term_is_rejected(client: TestClient, generator: FakeGenerator) -> None:
    resp = client.post("/session/generate")

    assert resp.status_code == 200
    assert resp.json()["error_message"] == MISSING_TERM_MESSAGE
    assert generator.prompts == []


def test_generate_failure_is_reported_in_state(
    client: TestClient, generator: FakeGenerator
) -> None:
    generator.error = GenerationError("API error: quota exceeded")
    client.put("/session/draft", json={"term": "photon", "definition": "mine"})

    assert client.post("/session/generate").status_code == 202

    data = client.get("/session").json()
    assert data["error_message"] == "Failed to generate definition: API error: quota exceeded"
    assert data["draft_definition"] == "mine"
    assert data["generation_in_flight"] is False
