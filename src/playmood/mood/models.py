"""Pydantic models for the mood inference subsystem.

These models represent:
- Raw behavioural counters handed over by the signal collectors
- The normalised feature vector and the caller-owned weight table
- Mood vectors, dominant-mood summaries and validation reports
- Feedback used for weight adaptation
- Static hybrid-mood combination rules and the request-layer selection
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from playmood.models import CollaboratorModel, MoodId, coerce_non_negative, coerce_number, parse_mood

# ── Feature catalogue ─────────────────────────────────────────

FEATURE_NAMES: tuple[str, ...] = (
    "engagement_volatility",
    "challenge_seeking",
    "social_openness",
    "exploration_bias",
    "focus_stability",
)

# Signed deviation from a neutral 0: -1 = strongly absent, +1 = strongly present.
FEATURE_RANGES: dict[str, tuple[float, float]] = {name: (-1.0, 1.0) for name in FEATURE_NAMES}


# ── Inputs ────────────────────────────────────────────────────


class BehaviorCounters(CollaboratorModel):
    """Raw behavioural counters for one user, aggregated by the collectors.

    Every field is optional.  Values that are not numbers (or are NaN,
    infinite or negative) are treated as 0 instead of failing validation.
    """

    session_durations: list[float] = Field(default_factory=list)
    intense_sessions: int = 0
    social_sessions: int = 0
    main_sessions: int = 0
    completed_sessions: int = 0
    social_interactions: int = 0
    integration_events: int = 0
    genre_switches: int = 0
    challenging_genre_switches: int = 0
    distinct_genres: int = 0
    platform_switches: int = 0
    playtime_consistency: float | None = None

    @field_validator("session_durations", mode="before")
    @classmethod
    def _durations(cls, v: Any) -> list[float]:
        if not isinstance(v, (list, tuple)):
            return []
        return [coerce_non_negative(d) for d in v]

    @field_validator(
        "intense_sessions",
        "social_sessions",
        "main_sessions",
        "completed_sessions",
        "social_interactions",
        "integration_events",
        "genre_switches",
        "challenging_genre_switches",
        "distinct_genres",
        "platform_switches",
        mode="before",
    )
    @classmethod
    def _count(cls, v: Any) -> int:
        return int(coerce_non_negative(v))

    @field_validator("playtime_consistency", mode="before")
    @classmethod
    def _ratio(cls, v: Any) -> float | None:
        if v is None:
            return None
        return max(0.0, min(1.0, coerce_number(v)))


class NormalizedFeatureVector(BaseModel):
    """Bounded behavioural features; the only input to mood inference."""

    model_config = ConfigDict(frozen=True)

    engagement_volatility: float = Field(0.0, ge=-1.0, le=1.0)
    challenge_seeking: float = Field(0.0, ge=-1.0, le=1.0)
    social_openness: float = Field(0.0, ge=-1.0, le=1.0)
    exploration_bias: float = Field(0.0, ge=-1.0, le=1.0)
    focus_stability: float = Field(0.0, ge=-1.0, le=1.0)

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in FEATURE_NAMES}


class MoodWeightTable(BaseModel):
    """Per-feature importance weights, owned and persisted by the caller."""

    model_config = ConfigDict(frozen=True)

    weights: dict[str, float] = Field(default_factory=dict)

    @field_validator("weights", mode="before")
    @classmethod
    def _bounded(cls, v: Any) -> dict[str, float]:
        if not isinstance(v, Mapping):
            return {}
        return {str(k): max(0.0, min(1.0, coerce_number(w))) for k, w in v.items()}

    @classmethod
    def default(cls) -> MoodWeightTable:
        """The static default weight table."""
        from playmood.mood.tables import DEFAULT_WEIGHTS

        return DEFAULT_WEIGHTS

    def get(self, feature: str, default: float = 0.0) -> float:
        return self.weights.get(feature, default)

    def total(self) -> float:
        return sum(self.weights.values())


class MoodFeedback(BaseModel):
    """Externally observed outcome of an earlier prediction."""

    predicted_mood: MoodId
    actual_mood: MoodId
    confidence: float = Field(0.0, ge=0.0, le=1.0)

    @classmethod
    def parse(cls, data: MoodFeedback | Mapping[str, Any]) -> MoodFeedback:
        """Build feedback from raw request data.

        Mood identifiers are checked up front so an unknown mood surfaces
        as :class:`~playmood.exceptions.InvalidMoodIdentifier` rather than
        a generic validation error.
        """
        if isinstance(data, MoodFeedback):
            return data
        predicted = data.get("predicted_mood", data.get("predictedMood"))
        actual = data.get("actual_mood", data.get("actualMood"))
        confidence = coerce_number(data.get("confidence"))
        return cls(
            predicted_mood=parse_mood(predicted),
            actual_mood=parse_mood(actual),
            confidence=max(0.0, min(1.0, confidence)),
        )


# ── Outputs ───────────────────────────────────────────────────


class MoodVector(BaseModel):
    """One score per mood category.  A new vector is produced per call."""

    model_config = ConfigDict(frozen=True)

    scores: dict[MoodId, float] = Field(default_factory=dict)

    def top(self) -> list[tuple[MoodId, float]]:
        """Mood/score pairs, highest first; ties keep canonical mood order."""
        return sorted(self.scores.items(), key=lambda kv: kv[1], reverse=True)

    def max_score(self) -> float:
        return max(self.scores.values(), default=0.0)

    def __getitem__(self, mood: MoodId) -> float:
        return self.scores[mood]


class DominantMood(BaseModel):
    """Top mood plus an optional runner-up above the significance threshold."""

    mood: MoodId
    confidence: float = Field(ge=0.0, le=1.0)
    secondary_mood: MoodId | None = None
    secondary_confidence: float | None = None


class MoodVectorValidation(BaseModel):
    """Result of :meth:`MoodInference.validate_mood_vector`.

    ``issues`` are hard problems (scores out of range) and make the vector
    invalid.  ``warnings`` such as a weak signal are advisory only.
    """

    is_valid: bool
    issues: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class MoodInferenceResult(BaseModel):
    """Complete output of one mood analysis, ready for serialisation."""

    mood_vector: MoodVector
    confidence: float = Field(ge=0.0, le=1.0)
    dominant_mood: MoodId
    dominant_score: float = Field(ge=0.0, le=1.0)
    secondary_mood: MoodId | None = None
    secondary_confidence: float | None = None
    features: NormalizedFeatureVector = Field(default_factory=NormalizedFeatureVector)
    warnings: list[str] = Field(default_factory=list)


class MoodDescription(BaseModel):
    """Human-facing summary of a mood category."""

    mood: MoodId
    label: str
    description: str
    traits: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


# ── Hybrid moods ──────────────────────────────────────────────


class MoodCombinationRule(BaseModel):
    """A curated primary/secondary pairing and how well the two blend."""

    model_config = ConfigDict(frozen=True)

    primary: MoodId
    secondary: MoodId
    compatibility: float = Field(ge=0.0, le=1.0)
    context: str = ""


class CombinationCheck(BaseModel):
    """Outcome of validating a primary/secondary mood pair."""

    primary: MoodId
    secondary: MoodId
    compatible: bool
    compatibility: float = Field(ge=0.0, le=1.0)
    context: str = ""


class MoodSelection(BaseModel):
    """An explicit, validated mood choice from the request layer."""

    primary: MoodId
    secondary: MoodId | None = None
    intensity: float = Field(0.5, ge=0.0, le=1.0)
    compatibility: float | None = None
