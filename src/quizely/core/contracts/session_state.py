"""Read-only snapshot of a flashcard session.

`SessionState` is what presentation layers render: the terminal studio
prints it, and the HTTP API returns it as the body of every session route.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .flashcard import Flashcard


class ActiveView(str, Enum):
    """The two views of the editor."""

    CREATE = "create"
    VIEW = "view"


class SessionState(BaseModel):
    """Point-in-time copy of every field owned by a session."""

    model_config = ConfigDict(frozen=True)

    flashcards: list[Flashcard] = Field(default_factory=list)
    draft_term: str = ""
    draft_definition: str = ""
    active_view: ActiveView = ActiveView.CREATE
    generation_in_flight: bool = False
    error_message: str | None = None


__all__ = ["ActiveView", "SessionState"]
