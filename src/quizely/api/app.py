"""
FastAPI Application Factory & Configuration.

This module initializes the FastAPI application instance. It is responsible for:
1.  **Middleware Setup**: CORS (Cross-Origin Resource Sharing) for frontend access.
2.  **Exception Handling**: Global handlers to ensure all errors return structured JSON.
3.  **Routing**: Mounting the session router and the health probe.
4.  **Ownership**: Holding the one `FlashcardSession` the routes operate on.

Design Pattern
--------------
We use an **Application Factory** pattern (`create_app`). This allows for:
-   Easy testing (each test builds an app around its own session and a fake
    generator).
-   Explicit ownership: the session is constructed here (or injected) and
    stored on `app.state`; there is no module-level singleton.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quizely import __version__
from quizely.api.routers import session as session_routes
from quizely.api.schemas import HealthInfo
from quizely.core.session import FlashcardSession
from quizely.core.settings import get_logger, load_settings
from quizely.llm.client import GenerationClient

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """ASGI lifespan: log startup and shutdown of the editor service."""
    logger.info("Quizely API starting (model=%s)", load_settings().model_alias)
    yield
    logger.info(
        "Quizely API shutting down; %d flashcards discarded",
        len(app.state.session.flashcards),
    )


def create_app(session: FlashcardSession | None = None) -> FastAPI:
    """
    Construct and configure the Quizely FastAPI application.

    Parameters
    ----------
    session:
        Session the routes operate on. When omitted, a fresh session is built
        around a :class:`GenerationClient` configured from settings.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    app = FastAPI(
        title="Quizely API",
        description="Flashcard editor with generated definitions",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.session = session or FlashcardSession(GenerationClient.from_settings())

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, restrict this to specific domains.
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Global Exception Handlers
    # -----------------------------------------------------------------------
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Return structured JSON instead of a generic 500 page."""
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        """Map Python ValueErrors to HTTP 400 Bad Request."""
        return JSONResponse(
            status_code=400,
            content={
                "error": "Bad Request",
                "detail": str(exc),
            },
        )

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    app.include_router(session_routes.router)

    @app.get("/health", response_model=HealthInfo, tags=["System"])
    async def health_check() -> HealthInfo:
        """Simple liveness probe."""
        return HealthInfo(environment=load_settings().environment, version=__version__)

    return app


__all__ = ["create_app"]
