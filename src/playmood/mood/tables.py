"""Static configuration for mood inference.

Nothing in this module is computed or mutated at runtime.  The tables are
grouped into :class:`MoodModelConfig` so tests and callers can inject an
alternative model without touching the inference code.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from playmood.models import MoodId
from playmood.mood.models import MoodCombinationRule, MoodDescription, MoodWeightTable

# ── Feature → mood coefficients ──────────────────────────────

# Each mood is a signed blend of the five features.  Values sit roughly in
# [-1, 1]; a positive coefficient means "more of this feature → more of
# this mood".
MOOD_COEFFICIENTS: dict[MoodId, dict[str, float]] = {
    # Low volatility, high focus stability
    MoodId.CALM: {
        "engagement_volatility": -0.8,
        "challenge_seeking": -0.3,
        "social_openness": -0.2,
        "exploration_bias": -0.1,
        "focus_stability": 0.9,
    },
    # High challenge seeking, low social openness
    MoodId.COMPETITIVE: {
        "engagement_volatility": 0.2,
        "challenge_seeking": 0.9,
        "social_openness": -0.4,
        "exploration_bias": -0.2,
        "focus_stability": 0.3,
    },
    # High exploration bias, moderate social openness
    MoodId.CURIOUS: {
        "engagement_volatility": 0.3,
        "challenge_seeking": 0.4,
        "social_openness": 0.3,
        "exploration_bias": 0.8,
        "focus_stability": -0.1,
    },
    # High social openness, moderate exploration
    MoodId.SOCIAL: {
        "engagement_volatility": 0.1,
        "challenge_seeking": -0.2,
        "social_openness": 0.9,
        "exploration_bias": 0.4,
        "focus_stability": -0.2,
    },
    # High focus stability, low volatility
    MoodId.FOCUSED: {
        "engagement_volatility": -0.6,
        "challenge_seeking": 0.3,
        "social_openness": -0.3,
        "exploration_bias": -0.4,
        "focus_stability": 0.8,
    },
}

DEFAULT_WEIGHTS = MoodWeightTable(
    weights={
        "engagement_volatility": 0.15,
        "challenge_seeking": 0.25,
        "social_openness": 0.20,
        "exploration_bias": 0.20,
        "focus_stability": 0.20,
    }
)

# ── Descriptions ──────────────────────────────────────────────

MOOD_DESCRIPTIONS: dict[MoodId, MoodDescription] = {
    MoodId.CALM: MoodDescription(
        mood=MoodId.CALM,
        label="Calm",
        description="Relaxed and peaceful state, ideal for low-stress gaming",
        traits=["Patient", "Methodical", "Steady", "Reflective"],
        suggestions=["Puzzle games", "Simulation games", "Creative sandbox games", "Story-rich adventures"],
    ),
    MoodId.COMPETITIVE: MoodDescription(
        mood=MoodId.COMPETITIVE,
        label="Competitive",
        description="Achievement-oriented and challenge-seeking state",
        traits=["Driven", "Strategic", "Goal-focused", "Performance-minded"],
        suggestions=["Competitive multiplayer", "Ranked matches", "Speedrun challenges", "Tournament play"],
    ),
    MoodId.CURIOUS: MoodDescription(
        mood=MoodId.CURIOUS,
        label="Curious",
        description="Exploratory and discovery-oriented state",
        traits=["Inquisitive", "Experimental", "Open-minded", "Adventurous"],
        suggestions=["Open-world games", "New genres", "Indie titles", "Creative tools"],
    ),
    MoodId.SOCIAL: MoodDescription(
        mood=MoodId.SOCIAL,
        label="Social",
        description="Community-oriented and interactive state",
        traits=["Collaborative", "Communicative", "Team-player", "Community-focused"],
        suggestions=["Co-op campaigns", "Guild activities", "Social hubs", "Party games"],
    ),
    MoodId.FOCUSED: MoodDescription(
        mood=MoodId.FOCUSED,
        label="Focused",
        description="Concentrated and goal-directed state",
        traits=["Attentive", "Determined", "Methodical", "Immersed"],
        suggestions=["Strategy games", "Complex puzzles", "Skill-based challenges", "Deep story experiences"],
    ),
}

# ── Hybrid mood combinations ─────────────────────────────────

MOOD_COMBINATIONS: tuple[MoodCombinationRule, ...] = (
    MoodCombinationRule(
        primary=MoodId.CALM, secondary=MoodId.CURIOUS,
        compatibility=0.8, context="Relaxed exploration",
    ),
    MoodCombinationRule(
        primary=MoodId.COMPETITIVE, secondary=MoodId.SOCIAL,
        compatibility=0.8, context="Team-based competition",
    ),
    MoodCombinationRule(
        primary=MoodId.FOCUSED, secondary=MoodId.COMPETITIVE,
        compatibility=0.8, context="Ranked, high-concentration play",
    ),
    MoodCombinationRule(
        primary=MoodId.CALM, secondary=MoodId.FOCUSED,
        compatibility=0.7, context="Unhurried problem solving",
    ),
    MoodCombinationRule(
        primary=MoodId.CURIOUS, secondary=MoodId.SOCIAL,
        compatibility=0.7, context="Exploring worlds together",
    ),
    MoodCombinationRule(
        primary=MoodId.CURIOUS, secondary=MoodId.FOCUSED,
        compatibility=0.6, context="Deep world exploration",
    ),
    MoodCombinationRule(
        primary=MoodId.SOCIAL, secondary=MoodId.CALM,
        compatibility=0.5, context="Cozy co-op sessions",
    ),
    MoodCombinationRule(
        primary=MoodId.COMPETITIVE, secondary=MoodId.CURIOUS,
        compatibility=0.5, context="Experimental challenge runs",
    ),
    MoodCombinationRule(
        primary=MoodId.FOCUSED, secondary=MoodId.SOCIAL,
        compatibility=0.3, context="Coordinated squad play",
    ),
    MoodCombinationRule(
        primary=MoodId.CALM, secondary=MoodId.COMPETITIVE,
        compatibility=0.2, context="Low-stakes competition",
    ),
)


# ── Model bundle ──────────────────────────────────────────────


class MoodModelConfig(BaseModel):
    """Everything the inference module needs besides the caller's weights."""

    model_config = ConfigDict(frozen=True)

    coefficients: dict[MoodId, dict[str, float]] = Field(
        default_factory=lambda: MOOD_COEFFICIENTS,
    )
    default_weights: MoodWeightTable = DEFAULT_WEIGHTS
    descriptions: dict[MoodId, MoodDescription] = Field(
        default_factory=lambda: MOOD_DESCRIPTIONS,
    )
    significance_threshold: float = 0.3
    adjustment_rate: float = 0.1
    weight_floor: float = 0.1


DEFAULT_MOOD_MODEL = MoodModelConfig()
