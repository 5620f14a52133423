"""Exception hierarchy for Quizely.

The generation client raises these; the session catches them and turns them
into a user-visible ``error_message``. Nothing here ever aborts a session.
"""

from __future__ import annotations


class QuizelyError(Exception):
    """Base class for all Quizely errors."""


class GenerationError(QuizelyError):
    """The generation call failed at the network or API level."""


class MalformedResponseError(GenerationError):
    """The service answered successfully but without the expected text payload."""


__all__ = ["QuizelyError", "GenerationError", "MalformedResponseError"]
