# -----------------------------------------------------------------------------
# This module defines a tiny, in-process model registry used by the
# generation client. It maps human-friendly aliases to concrete Gemini model
# IDs and the API root they are served from.
#
# The registry gives us a single place to:
#   - declare aliases (e.g. "definition", "lite")
#   - pin them to concrete provider model IDs
#   - attach a base URL when a model is served from a different root
#
# The implementation is pure-Python so it can be imported anywhere (CLI,
# API handlers, tests) without side effects.
# -----------------------------------------------------------------------------
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

#: Root of the public Gemini REST API.
GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"


@dataclass(frozen=True, slots=True)
class ModelConfig:
    """Configuration for a single generation model.

    Parameters
    ----------
    name:
        Provider-specific model identifier, e.g. ``"gemini-2.0-flash"``.
    base_url:
        API root the model is served from. The client builds
        ``{base_url}/models/{name}:generateContent`` from it. Callers may
        override it via ``GEMINI_API_BASE_URL``.
    """

    name: str
    base_url: str = GEMINI_BASE_URL


# --------------------------------------------------------------------------- #
# Registry
# --------------------------------------------------------------------------- #

#: Logical aliases → model configs. Application code should prefer these
#: aliases over hard-coded model IDs.
MODEL_REGISTRY: dict[str, ModelConfig] = {
    # Default for definitions: fast, keyless-friendly model.
    "definition": ModelConfig(name="gemini-2.0-flash"),
    # Cheaper variant for bulk or offline-ish use.
    "lite": ModelConfig(name="gemini-2.0-flash-lite"),
}

#: Default logical alias used when callers do not explicitly choose a model.
DEFAULT_ALIAS: str = "definition"


def get_model(alias_or_name: str) -> ModelConfig:
    """Return a :class:`ModelConfig` for the given alias or model name.

    Registered aliases resolve to their config; anything else is treated as a
    concrete Gemini model ID served from :data:`GEMINI_BASE_URL`.
    """
    if alias_or_name in MODEL_REGISTRY:
        return MODEL_REGISTRY[alias_or_name]
    return ModelConfig(name=alias_or_name)


def all_models() -> Mapping[str, ModelConfig]:
    """Return a shallow copy of the registry for diagnostics and tests."""
    return dict(MODEL_REGISTRY)


__all__ = [
    "ModelConfig",
    "MODEL_REGISTRY",
    "DEFAULT_ALIAS",
    "GEMINI_BASE_URL",
    "get_model",
    "all_models",
]
