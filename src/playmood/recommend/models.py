"""Pydantic models for taste profiling and recommendation scoring.

These models represent:
- The caller-owned taste profile built from library history
- Per-candidate score breakdowns and the public recommendation record
- The request / result envelope exchanged with the request layer
- Immutable scoring configuration
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from playmood.models import (
    CandidateItem,
    CollaboratorModel,
    OwnedItem,
    SessionRecord,
    coerce_number,
)
from playmood.mood.models import BehaviorCounters, MoodWeightTable

# ── Taste profile ─────────────────────────────────────────────


def _top_keys(weights: dict[str, float], n: int) -> list[str]:
    # sorted() is stable, so ties keep first-encountered order
    ranked = sorted(weights.items(), key=lambda kv: kv[1], reverse=True)
    return [key for key, _ in ranked[: max(0, n)]]


class TasteProfile(BaseModel):
    """Accumulated mood and genre weights for one user.

    Weights only grow as more history is folded in.  An empty
    ``TasteProfile()`` is the reset state.
    """

    mood_weights: dict[str, float] = Field(default_factory=dict)
    genre_weights: dict[str, float] = Field(default_factory=dict)
    item_count: int = 0

    def top_moods(self, n: int = 6) -> list[str]:
        return _top_keys(self.mood_weights, n)

    def top_genres(self, n: int = 6) -> list[str]:
        return _top_keys(self.genre_weights, n)


# ── Scoring output ────────────────────────────────────────────


class ScoreBreakdown(BaseModel):
    """Additive components of a candidate's relevance score."""

    mood_match: float = 0.0
    mood_overlap: float = 0.0
    genre_overlap: float = 0.0
    quality: float = 0.0
    discovery_boost: float = 0.0
    total: float = 0.0


class ScoredCandidate(BaseModel):
    """A candidate with derived moods, score and display reasons."""

    item: CandidateItem
    moods: list[str] = Field(default_factory=list)
    score: float = 0.0
    breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    reasons: list[str] = Field(default_factory=list)


class Recommendation(BaseModel):
    """Public, serialisable recommendation record."""

    id: str
    title: str
    genres: list[str] = Field(default_factory=list)
    moods: list[str] = Field(default_factory=list)
    quality_score: float = 0.0
    description: str = ""
    reasons: list[str] = Field(default_factory=list)
    score: float | None = Field(None, description="Only populated in debug mode.")


class RecommendationResult(BaseModel):
    """Ranked, deduplicated and explained recommendations."""

    recommendations: list[Recommendation] = Field(default_factory=list)
    total_found: int = 0
    genres_searched: list[str] = Field(default_factory=list)
    exploration_rate: float = 0.0
    debug: dict[str, ScoreBreakdown] | None = None


# ── Request ───────────────────────────────────────────────────


class RecommendationRequest(CollaboratorModel):
    """Everything the request layer hands over for one recommendation call.

    Mood identifiers stay as raw strings here; they are validated by the
    engine so that an unknown mood surfaces as
    :class:`~playmood.exceptions.InvalidMoodIdentifier`.
    """

    candidates: list[CandidateItem] = Field(default_factory=list)
    owned_items: list[OwnedItem] = Field(default_factory=list)
    sessions: list[SessionRecord] = Field(default_factory=list)
    counters: BehaviorCounters | None = None
    weights: dict[str, float] | None = None
    selected_mood: str | None = None
    secondary_mood: str | None = None
    intensity: float = 0.5
    time_budget: str | None = None
    category: str | None = None
    debug: bool = False

    @field_validator("candidates", "owned_items", "sessions", mode="before")
    @classmethod
    def _list_or_empty(cls, v: Any) -> Any:
        return v if isinstance(v, (list, tuple)) else []

    @field_validator("weights", mode="before")
    @classmethod
    def _weights(cls, v: Any) -> dict[str, float] | None:
        # Same bounding as a caller-held MoodWeightTable
        if isinstance(v, MoodWeightTable):
            return dict(v.weights)
        if not isinstance(v, Mapping):
            return None
        return dict(MoodWeightTable(weights=v).weights)

    @field_validator("selected_mood", "secondary_mood", "time_budget", "category", mode="before")
    @classmethod
    def _text_or_none(cls, v: Any) -> str | None:
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("intensity", mode="before")
    @classmethod
    def _intensity(cls, v: Any) -> float:
        return max(0.0, min(1.0, coerce_number(v, default=0.5)))


# ── Configuration ─────────────────────────────────────────────


class ScoringConfig(BaseModel):
    """Immutable scoring constants.  Tests inject their own instance."""

    model_config = ConfigDict(frozen=True)

    target_size: int = Field(10, ge=1)
    exploitation_window: int = Field(25, ge=1)
    min_exploration: int = Field(2, ge=0)

    mood_match_weight: float = 0.55
    overlap_divisor: float = 25.0
    mood_overlap_cap: float = 0.25
    genre_overlap_cap: float = 0.20
    quality_weight: float = 0.20

    discovery_gem_boost: float = 0.08
    discovery_indie_boost: float = 0.04
    discovery_quality_ceiling: float = 90.0

    max_reasons: int = 2
