from __future__ import annotations

from .client import GenerationClient
from .models import (
    DEFAULT_ALIAS,
    GEMINI_BASE_URL,
    MODEL_REGISTRY,
    ModelConfig,
    all_models,
    get_model,
)

__all__ = [
    "ModelConfig",
    "MODEL_REGISTRY",
    "DEFAULT_ALIAS",
    "GEMINI_BASE_URL",
    "get_model",
    "all_models",
    "GenerationClient",
]
