"""Pydantic models for persona synthesis.

These models represent:
- Aggregate signals derived from a user's library and sessions
- Bounded personality-style traits computed from those signals
- The combined persona profile handed to the request layer
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# Declared order; also the tie-break order for dominant traits
TRAIT_NAMES: tuple[str, ...] = (
    "explorer",
    "specialist",
    "competitor",
    "completionist",
    "strategist",
    "adventurer",
)


class PersonaSignals(BaseModel):
    """Aggregates over ownership and session history."""

    genre_affinity: dict[str, float] = Field(
        default_factory=dict,
        description="Accumulated hours per genre token (unplayed items count 1).",
    )
    completion_rate: float = Field(
        0.0,
        ge=0.0,
        le=1.0,
        description="Share of owned items with at least one unlocked achievement.",
    )
    session_pattern: float = Field(
        0.0,
        ge=0.0,
        description="Mean session length in minutes.",
    )
    playtime_distribution: list[float] = Field(
        default_factory=list,
        description="Per-item hours, largest first.",
    )
    multiplayer_ratio: float = Field(
        0.0,
        ge=0.0,
        le=1.0,
        description="Share of owned items tagged multiplayer.",
    )


class PersonaTraits(BaseModel):
    """Six traits, each independently clamped to [0, 1]."""

    explorer: float = Field(0.0, ge=0.0, le=1.0)
    specialist: float = Field(0.0, ge=0.0, le=1.0)
    competitor: float = Field(0.0, ge=0.0, le=1.0)
    completionist: float = Field(0.0, ge=0.0, le=1.0)
    strategist: float = Field(0.0, ge=0.0, le=1.0)
    adventurer: float = Field(0.0, ge=0.0, le=1.0)

    def as_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in TRAIT_NAMES}

    def dominant(self, n: int = 2) -> list[str]:
        """Names of the *n* strongest non-zero traits."""
        ranked = sorted(self.as_dict().items(), key=lambda kv: kv[1], reverse=True)
        return [name for name, value in ranked[:n] if value > 0]


class PersonaProfile(BaseModel):
    """Signals, traits and a short summary for one user."""

    signals: PersonaSignals = Field(default_factory=PersonaSignals)
    traits: PersonaTraits = Field(default_factory=PersonaTraits)
    dominant_traits: list[str] = Field(default_factory=list)
    item_count: int = 0
    session_count: int = 0
