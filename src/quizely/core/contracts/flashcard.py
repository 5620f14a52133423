"""Flashcard — one term/definition pair held by a session.

Cards are immutable once created. Both fields must contain something other
than whitespace, but the stored values are kept exactly as typed (no trimming).
Each card also gets an opaque identifier at creation time so callers can
delete by identity instead of by position.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _new_card_id() -> str:
    return uuid.uuid4().hex


class Flashcard(BaseModel):
    """A committed term/definition pair."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_card_id, description="Opaque stable identifier")
    term: str = Field(description="Term as typed by the user (untrimmed)")
    definition: str = Field(description="Definition as typed or generated (untrimmed)")

    @field_validator("term", "definition")
    @classmethod
    def _must_not_be_blank(cls, v: str) -> str:
        """Reject values that are empty after trimming, but keep the raw text."""
        if not v.strip():
            raise ValueError("flashcard fields must not be blank")
        return v


__all__ = ["Flashcard"]
