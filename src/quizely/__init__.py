"""Quizely: a flashcard editor with LLM-assisted definitions.

The package is organised in three layers:

- ``quizely.core``: session state machine, contracts, settings.
- ``quizely.llm``: model registry and the Gemini ``generateContent`` client.
- ``quizely.cli`` / ``quizely.api``: terminal studio and HTTP surface.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.1.0"
