"""Centralized application configuration using Pydantic Settings (v2).

This module exposes a single, cached `settings` instance that reads from:
- Real environment variables (highest precedence)
- `.env` files at the repository root: .env, .env.local, .env.dev/.env.test/.env.prod

Only the edges (CLI, API server) read settings to build the generation
client; the session state machine itself never looks at the environment.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class Settings(BaseSettings):
    """Typed application configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `QUIZELY_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    gemini_api_key : str
        Key attached as the `key` query parameter of generation requests.
        Empty by default, in which case no key is sent. Maps from `GEMINI_API_KEY`.
    gemini_base_url : Optional[str]
        Override for the Gemini API root; maps from `GEMINI_API_BASE_URL`.
    model_alias : str
        Registry alias (or concrete model id) used for definitions; maps from `QUIZELY_MODEL`.
    request_timeout : float
        Network timeout in seconds; maps from `QUIZELY_REQUEST_TIMEOUT`.
    """

    environment: EnvName = Field(default="dev", alias="QUIZELY_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    gemini_api_key: str = Field(default="", alias="GEMINI_API_KEY")
    gemini_base_url: str | None = Field(default=None, alias="GEMINI_API_BASE_URL")
    model_alias: str = Field(default="definition", alias="QUIZELY_MODEL")
    request_timeout: float = Field(default=30.0, gt=0, alias="QUIZELY_REQUEST_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    @property
    def is_test(self) -> bool:
        """Return True if running in the test environment."""
        return self.environment == "test"

    @property
    def is_prod(self) -> bool:
        """Return True if running in the production environment."""
        return self.environment == "prod"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    We keep this behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("QUIZELY_ENV", "dev")
    return Settings()


# Export a ready-to-use singleton (import-time read of env / .env files).
settings: Settings = load_settings()


def get_logger(name: str = "quizely") -> logging.Logger:
    """Return a process-global logger configured to the current `LOG_LEVEL`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger


__all__ = ["Settings", "load_settings", "settings", "get_logger"]
