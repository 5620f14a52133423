"""
Request/response schemas for the Quizely HTTP API.

Every session route answers with :class:`SessionState` (re-exported here),
so clients always see the full editor state after their action, including
any validation message in ``error_message``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from quizely.core.contracts.session_state import ActiveView, SessionState


class ViewRequest(BaseModel):
    """Body of `PUT /session/view`."""

    view: ActiveView


class DraftRequest(BaseModel):
    """Body of `PUT /session/draft`. Omitted fields are left untouched."""

    term: str | None = Field(default=None, description="New draft term, verbatim")
    definition: str | None = Field(default=None, description="New draft definition, verbatim")


class HealthInfo(BaseModel):
    status: str = "ok"
    environment: str
    version: str


__all__ = ["ViewRequest", "DraftRequest", "HealthInfo", "SessionState", "ActiveView"]
