"""
Settings for the oracle connection and the game service.

Values come from the environment; a ``.env`` file in the working directory is
loaded first. Nothing in the game engine reads these directly.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable

from dotenv import load_dotenv

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:5174"


def _get(name: str, default: Any, cast: Callable[[Any], Any] | None = None) -> Any:
    env = os.getenv(name)
    if env is None or env == "":
        return default
    return cast(env) if cast else env


@dataclass(frozen=True)
class Settings:
    # OpenAI-compatible endpoint
    llm_api_key: str
    llm_base_url: str | None
    llm_model: str

    # Oracle call policy
    oracle_timeout_s: float
    oracle_retries: int

    board_size: int
    win_length: int
    cors_origins: list[str]


def load_settings() -> Settings:
    load_dotenv()
    origins = _get("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return Settings(
        llm_api_key=_get("GOMER_LLM_API_KEY", ""),
        llm_base_url=_get("GOMER_LLM_BASE_URL", None),
        llm_model=_get("GOMER_LLM_MODEL", "deepseek-chat"),
        oracle_timeout_s=_get("GOMER_ORACLE_TIMEOUT_S", 30.0, cast=float),
        oracle_retries=_get("GOMER_ORACLE_RETRIES", 2, cast=int),
        board_size=_get("GOMER_BOARD_SIZE", 15, cast=int),
        win_length=_get("GOMER_WIN_LENGTH", 5, cast=int),
        cors_origins=[o.strip() for o in origins.split(",")],
    )
