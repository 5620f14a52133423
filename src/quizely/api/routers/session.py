"""
API routes for the flashcard session.

Endpoints
---------
- `GET /session`: Current editor state.
- `PUT /session/view`: Switch between the create and view views.
- `PUT /session/draft`: Edit the draft term and/or definition.
- `POST /session/flashcards`: Commit the drafts as a new card.
- `DELETE /session/flashcards/{index}`: Delete by position (no-op if out of range).
- `DELETE /session/flashcards/id/{card_id}`: Delete by stable identifier.
- `POST /session/generate`: Start a definition generation (Async).

Design Decisions
----------------
- **State as the response**: every route returns the full `SessionState`.
  Validation problems are reported in `error_message`, not as HTTP errors,
  exactly as the terminal studio shows them.
- **Asynchronous Handoff**: `POST /session/generate` admits the request,
  returns 202 Accepted immediately and completes the network call as a
  background task. Clients poll `GET /session` until
  `generation_in_flight` is false.
"""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response, status

from quizely.api.schemas import DraftRequest, SessionState, ViewRequest
from quizely.core.session import FlashcardSession

router = APIRouter(prefix="/session", tags=["Session"])


def get_session(request: Request) -> FlashcardSession:
    """Dependency returning the session owned by the running application."""
    session: FlashcardSession = request.app.state.session
    return session


@router.get("", response_model=SessionState, summary="Get the editor state")
async def read_session(session: FlashcardSession = Depends(get_session)) -> SessionState:
    return session.snapshot()


@router.put("/view", response_model=SessionState, summary="Switch the active view")
async def switch_view(
    body: ViewRequest,
    session: FlashcardSession = Depends(get_session),
) -> SessionState:
    session.switch_view(body.view)
    return session.snapshot()


@router.put("/draft", response_model=SessionState, summary="Edit the draft fields")
async def edit_draft(
    body: DraftRequest,
    session: FlashcardSession = Depends(get_session),
) -> SessionState:
    if body.term is not None:
        session.edit_draft_term(body.term)
    if body.definition is not None:
        session.edit_draft_definition(body.definition)
    return session.snapshot()


@router.post("/flashcards", response_model=SessionState, summary="Add a flashcard")
async def add_flashcard(session: FlashcardSession = Depends(get_session)) -> SessionState:
    session.add_flashcard()
    return session.snapshot()


@router.delete(
    "/flashcards/{index}",
    response_model=SessionState,
    summary="Delete a flashcard by position",
)
async def delete_flashcard(
    index: int,
    session: FlashcardSession = Depends(get_session),
) -> SessionState:
    session.delete_flashcard(index)
    return session.snapshot()


@router.delete(
    "/flashcards/id/{card_id}",
    response_model=SessionState,
    summary="Delete a flashcard by identifier",
)
async def delete_flashcard_by_id(
    card_id: str,
    session: FlashcardSession = Depends(get_session),
) -> SessionState:
    session.delete_flashcard_by_id(card_id)
    return session.snapshot()


@router.post(
    "/generate",
    response_model=SessionState,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Generate a definition for the draft term",
)
async def generate_definition(
    response: Response,
    background_tasks: BackgroundTasks,
    session: FlashcardSession = Depends(get_session),
) -> SessionState:
    """
    Admit a generation and schedule the network call.

    Returns 202 with `generation_in_flight` set when admitted, or 200 with
    `error_message` set when the draft term is blank or a generation is
    already running.
    """
    prompt = session.begin_generation()
    if prompt is None:
        response.status_code = status.HTTP_200_OK
        return session.snapshot()

    # Sync callables run in FastAPI's thread pool after the response is sent.
    background_tasks.add_task(session.complete_generation, prompt)
    return session.snapshot()


__all__ = ["router", "get_session"]
