"""
Flashcard session: the state machine behind the editor.

A :class:`FlashcardSession` owns every piece of mutable state of one editor:

- the ordered list of committed :class:`Flashcard` objects,
- the draft term and draft definition being typed,
- the active view (create / view),
- whether a definition generation is in flight,
- the single error message currently shown to the user.

Presentation layers (the terminal studio, the HTTP API) construct a session
explicitly and call its operations; they never mutate state directly.

Generation
----------
``generate_definition()`` is ``begin_generation()`` followed by
``complete_generation(prompt)``. The split lets the HTTP API admit a request
on the request path and run the network call as a background task, while the
terminal studio simply calls ``generate_definition()`` under a spinner.

At most one generation runs at a time; a second attempt is rejected with an
error message. A result is always applied when it arrives, even if the user
has since switched view or changed the draft term.

Failures
--------
Every failure is local: it sets ``error_message`` and leaves the flashcard
list untouched. Nothing is retried.
"""

from __future__ import annotations

import threading
from typing import Protocol

from quizely.core.contracts.flashcard import Flashcard
from quizely.core.contracts.session_state import ActiveView, SessionState
from quizely.core.errors import GenerationError
from quizely.core.settings import get_logger

logger = get_logger(__name__)

MISSING_FIELDS_MESSAGE = "Please enter both a term and a definition."
MISSING_TERM_MESSAGE = "Please enter a term before generating a definition."
ALREADY_GENERATING_MESSAGE = "A definition is already being generated."
GENERATION_FAILED_PREFIX = "Failed to generate definition: "


class DefinitionGenerator(Protocol):
    """Anything that turns a prompt into generated text (or raises)."""

    def generate(self, prompt: str) -> str: ...


def definition_prompt(term: str) -> str:
    """Build the prompt for ``term``; the term is interpolated verbatim."""
    return f'Provide a concise definition for the term "{term}".'


class FlashcardSession:
    """
    In-memory flashcard editor state with explicit, logged transitions.

    Parameters
    ----------
    generator:
        Collaborator used by :meth:`generate_definition`, typically a
        :class:`quizely.llm.client.GenerationClient`.

    Notes
    -----
    Mutations are serialized with a lock because the HTTP API completes
    generations on a worker thread. The network call itself runs outside the
    lock, so every other operation stays available while it is in flight.
    """

    def __init__(self, generator: DefinitionGenerator) -> None:
        self._generator = generator
        self._lock = threading.Lock()
        self._flashcards: list[Flashcard] = []
        self._draft_term = ""
        self._draft_definition = ""
        self._active_view = ActiveView.CREATE
        self._in_flight = False
        self._error_message: str | None = None

    # ------------------------------------------------------------------ #
    # Read access
    # ------------------------------------------------------------------ #
    @property
    def flashcards(self) -> tuple[Flashcard, ...]:
        return tuple(self._flashcards)

    @property
    def draft_term(self) -> str:
        return self._draft_term

    @property
    def draft_definition(self) -> str:
        return self._draft_definition

    @property
    def active_view(self) -> ActiveView:
        return self._active_view

    @property
    def generation_in_flight(self) -> bool:
        return self._in_flight

    @property
    def error_message(self) -> str | None:
        return self._error_message

    def snapshot(self) -> SessionState:
        """Return an immutable copy of the whole session state."""
        with self._lock:
            return SessionState(
                flashcards=list(self._flashcards),
                draft_term=self._draft_term,
                draft_definition=self._draft_definition,
                active_view=self._active_view,
                generation_in_flight=self._in_flight,
                error_message=self._error_message,
            )

    # ------------------------------------------------------------------ #
    # View and draft transitions
    # ------------------------------------------------------------------ #
    def switch_view(self, target: ActiveView | str) -> None:
        """Activate ``target`` and clear any pending error message."""
        view = ActiveView(target)
        with self._lock:
            self._active_view = view
            self._error_message = None
        logger.debug("Switched to %s view", view.value)

    def edit_draft_term(self, text: str) -> None:
        with self._lock:
            self._draft_term = text

    def edit_draft_definition(self, text: str) -> None:
        with self._lock:
            self._draft_definition = text

    # ------------------------------------------------------------------ #
    # Flashcard list
    # ------------------------------------------------------------------ #
    def add_flashcard(self) -> Flashcard | None:
        """Commit the drafts as a new card.

        Returns the new card, or ``None`` (with ``error_message`` set) when
        either draft is blank after trimming. Stored values are untrimmed.
        """
        with self._lock:
            if not (self._draft_term.strip() and self._draft_definition.strip()):
                self._error_message = MISSING_FIELDS_MESSAGE
                return None

            card = Flashcard(term=self._draft_term, definition=self._draft_definition)
            self._flashcards.append(card)
            self._draft_term = ""
            self._draft_definition = ""
            self._error_message = None
            count = len(self._flashcards)

        logger.info("Added flashcard %r (%d total)", card.term, count)
        return card

    def delete_flashcard(self, index: int) -> bool:
        """Remove the card at ``index``; out-of-range indexes are a no-op."""
        with self._lock:
            if not 0 <= index < len(self._flashcards):
                logger.debug("Ignoring delete of out-of-range index %d", index)
                return False
            removed = self._flashcards.pop(index)

        logger.info("Deleted flashcard %r at position %d", removed.term, index)
        return True

    def delete_flashcard_by_id(self, card_id: str) -> bool:
        """Remove the card whose identifier is ``card_id``; unknown ids are a no-op."""
        with self._lock:
            for index, card in enumerate(self._flashcards):
                if card.id == card_id:
                    del self._flashcards[index]
                    break
            else:
                logger.debug("Ignoring delete of unknown card id %s", card_id)
                return False

        logger.info("Deleted flashcard %r (id=%s)", card.term, card_id)
        return True

    # ------------------------------------------------------------------ #
    # Definition generation
    # ------------------------------------------------------------------ #
    def generate_definition(self) -> None:
        """Fill the draft definition from the generator, blocking until it resolves."""
        prompt = self.begin_generation()
        if prompt is not None:
            self.complete_generation(prompt)

    def begin_generation(self) -> str | None:
        """Admit a generation request and mark it in flight.

        Returns the prompt to send, or ``None`` when the request is rejected
        (blank draft term, or a generation already in flight). Rejections
        set ``error_message`` and never reach the network.
        """
        with self._lock:
            if not self._draft_term.strip():
                self._error_message = MISSING_TERM_MESSAGE
                return None
            if self._in_flight:
                self._error_message = ALREADY_GENERATING_MESSAGE
                return None

            self._in_flight = True
            self._error_message = None
            return definition_prompt(self._draft_term)

    def complete_generation(self, prompt: str) -> None:
        """Run an admitted generation and apply its outcome.

        The in-flight flag is released on every exit path.
        """
        try:
            text = self._generator.generate(prompt)
        except GenerationError as exc:
            logger.warning("Definition generation failed: %s", exc)
            self._fail(str(exc))
        except Exception as exc:
            logger.exception("Unexpected error while generating a definition")
            self._fail(str(exc))
        else:
            with self._lock:
                self._draft_definition = text
                self._error_message = None
            logger.info("Generated a definition (%d chars)", len(text))
        finally:
            with self._lock:
                self._in_flight = False

    def _fail(self, detail: str) -> None:
        with self._lock:
            self._error_message = GENERATION_FAILED_PREFIX + detail


__all__ = [
    "FlashcardSession",
    "DefinitionGenerator",
    "definition_prompt",
    "MISSING_FIELDS_MESSAGE",
    "MISSING_TERM_MESSAGE",
    "ALREADY_GENERATING_MESSAGE",
    "GENERATION_FAILED_PREFIX",
]
