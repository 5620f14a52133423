"""Core package initializer for Quizely.

Downstream code imports from the submodules directly:
    from quizely.core.session import FlashcardSession
    from quizely.core.settings import settings, load_settings, get_logger
"""

from __future__ import annotations

__all__ = ["__doc__"]
