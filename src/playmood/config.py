"""Centralised engine settings loaded from environment / .env file."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """All runtime configuration for the recommendation engine.

    Values are read from ``PLAYMOOD_*`` environment variables first, then
    from a *.env* file located at the project root.  The settings only
    seed the immutable config objects handed to each engine instance;
    nothing here is mutated at runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="PLAYMOOD_",
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ───────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool | None = None  # None → JSON unless stderr is a TTY

    # ── Mood inference ────────────────────────────────────────
    significance_threshold: float = 0.3  # secondary mood / weak-signal cut-off
    weight_adjustment_rate: float = 0.1  # per-feedback step, scaled by confidence
    weight_floor: float = 0.1  # minimum weight after a wrong prediction

    # ── Recommendation scoring ────────────────────────────────
    random_seed: int | None = None  # None → fresh entropy per engine
    target_size: int = 10  # exploit + explore slots per request
    exploitation_window: int = 25  # exploit picks come from the best N
    include_debug_scores: bool = False


@lru_cache
def get_settings() -> Settings:
    """Return a cached :class:`Settings` instance."""
    return Settings()
