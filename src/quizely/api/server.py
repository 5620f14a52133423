"""
ASGI Entry Point for the Quizely API.

This module exposes the `app` object required by ASGI servers (Uvicorn/Gunicorn).
It loads environment variables from `.env` first so that the settings used to
build the generation client are available before the factory runs.

Usage
-----
Run via the console script:
    $ quizely-api

Or via uvicorn directly:
    $ uvicorn quizely.api.server:app --reload
"""

from __future__ import annotations

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

load_dotenv(dotenv_path=Path(".env"))

from quizely.api.app import create_app  # noqa: E402
from quizely.core.settings import get_logger, load_settings  # noqa: E402

logger = get_logger(__name__)

# Factory invocation
app = create_app()


def main() -> None:
    """Run the API server locally for development."""
    config = load_settings()
    if config.gemini_api_key:
        logger.info("GEMINI_API_KEY loaded (%s...)", config.gemini_api_key[:4])
    else:
        logger.info("GEMINI_API_KEY not set; requests are sent without a key")

    uvicorn.run(
        "quizely.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=config.is_dev,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
