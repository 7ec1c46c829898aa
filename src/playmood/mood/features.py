"""Feature normalisation — raw behavioural counters → bounded features.

This module turns the counters collected from play sessions, genre
switching, platform switching and social integrations into a
:class:`NormalizedFeatureVector` for the mood inference engine.

Key responsibilities
--------------------
1. **Totality**: every feature is always present.  A feature with no
   supporting data is 0 (neutral) and malformed counters count as 0.
2. **Component blending**: each feature is a weighted average of the
   ratios that actually have data, so a user with sessions but no genre
   history is not dragged toward neutral by the missing half.
3. **Bounding**: the [0, 1] blend is re-centred to a signed [-1, 1]
   deviation and clamped to the declared feature range.
"""

from __future__ import annotations

import statistics
from typing import Any, Mapping

import structlog

from playmood.mood.models import FEATURE_RANGES, BehaviorCounters, NormalizedFeatureVector

logger = structlog.get_logger(__name__)

# ── Constants ─────────────────────────────────────────────────

# Volatility needs a few sessions before the spread means anything
_MIN_SESSIONS_FOR_VOLATILITY = 3

# Ten platform switches saturate the platform component
_PLATFORM_SWITCH_SATURATION = 10


# ── Component helpers ─────────────────────────────────────────


def _ratio(part: int | float, whole: int | float) -> float | None:
    """Return part / whole capped to [0, 1], or ``None`` when there is no data."""
    if whole <= 0:
        return None
    return max(0.0, min(1.0, part / whole))


def _blend(components: list[tuple[float | None, float]]) -> float | None:
    """Weighted average of the components that have data."""
    present = [(value, weight) for value, weight in components if value is not None]
    if not present:
        return None
    total_weight = sum(weight for _, weight in present)
    return sum(value * weight for value, weight in present) / total_weight


def _to_signed(name: str, blended: float | None) -> float:
    """Map a [0, 1] blend onto the feature's signed range; ``None`` → 0."""
    lo, hi = FEATURE_RANGES[name]
    if blended is None:
        return max(lo, min(hi, 0.0))
    return max(lo, min(hi, 2.0 * blended - 1.0))


# ── Individual features ───────────────────────────────────────


def _engagement_volatility(c: BehaviorCounters) -> float | None:
    durations = [d for d in c.session_durations if d > 0]
    if len(durations) < _MIN_SESSIONS_FOR_VOLATILITY:
        return None
    mean = statistics.fmean(durations)
    # Coefficient of variation: spread relative to typical session length
    return min(1.0, statistics.pstdev(durations) / mean)


def _challenge_seeking(c: BehaviorCounters) -> float | None:
    sessions = len(c.session_durations)
    return _blend([
        (_ratio(c.intense_sessions, sessions), 0.6),
        (_ratio(c.challenging_genre_switches, c.genre_switches), 0.4),
    ])


def _social_openness(c: BehaviorCounters) -> float | None:
    sessions = len(c.session_durations)
    return _blend([
        (_ratio(c.social_sessions, sessions), 0.6),
        (_ratio(c.social_interactions, c.integration_events), 0.4),
    ])


def _exploration_bias(c: BehaviorCounters) -> float | None:
    variety = _ratio(c.distinct_genres, c.genre_switches * 2)
    platform = (
        min(1.0, c.platform_switches / _PLATFORM_SWITCH_SATURATION)
        if c.platform_switches > 0
        else None
    )
    return _blend([(variety, 0.6), (platform, 0.4)])


def _focus_stability(c: BehaviorCounters) -> float | None:
    sessions = len(c.session_durations)
    return _blend([
        (_ratio(c.completed_sessions, sessions), 0.4),
        (c.playtime_consistency, 0.3),
        (_ratio(c.main_sessions, sessions), 0.3),
    ])


_FEATURE_BUILDERS = {
    "engagement_volatility": _engagement_volatility,
    "challenge_seeking": _challenge_seeking,
    "social_openness": _social_openness,
    "exploration_bias": _exploration_bias,
    "focus_stability": _focus_stability,
}


# ── Public API ────────────────────────────────────────────────


def normalize_features(
    counters: BehaviorCounters | Mapping[str, Any] | None,
) -> NormalizedFeatureVector:
    """Build a :class:`NormalizedFeatureVector` from raw behavioural counters.

    Parameters
    ----------
    counters
        A :class:`BehaviorCounters` record, or a plain mapping with the
        same keys (camelCase or snake_case).  ``None`` yields the neutral
        vector.

    Returns
    -------
    NormalizedFeatureVector
        Every feature present and clamped to its declared range.  The
        same input always produces the same output.
    """
    if counters is None:
        counters = BehaviorCounters()
    elif not isinstance(counters, BehaviorCounters):
        counters = BehaviorCounters.model_validate(dict(counters))

    values = {
        name: _to_signed(name, builder(counters))
        for name, builder in _FEATURE_BUILDERS.items()
    }
    features = NormalizedFeatureVector(**values)

    logger.debug(
        "mood.features_normalized",
        sessions=len(counters.session_durations),
        **{k: round(v, 3) for k, v in values.items()},
    )
    return features
