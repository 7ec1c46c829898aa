"""Static lookup tables for recommendation scoring."""

from __future__ import annotations

from typing import Callable

from playmood.models import CandidateItem, MoodId, RecommendationCategory, TimeBudget

# ── Genre → mood ──────────────────────────────────────────────

# Keys are normalised genre tokens.  A genre may imply several moods.
GENRE_TO_MOODS: dict[str, tuple[MoodId, ...]] = {
    "puzzle": (MoodId.FOCUSED, MoodId.CALM),
    "strategy": (MoodId.FOCUSED, MoodId.COMPETITIVE),
    "simulation": (MoodId.CALM,),
    "casual": (MoodId.CALM,),
    "rpg": (MoodId.CURIOUS, MoodId.FOCUSED),
    "adventure": (MoodId.CURIOUS,),
    "indie": (MoodId.CURIOUS,),
    "sandbox": (MoodId.CURIOUS, MoodId.CALM),
    "open-world": (MoodId.CURIOUS,),
    "action": (MoodId.COMPETITIVE,),
    "fps": (MoodId.COMPETITIVE,),
    "shooter": (MoodId.COMPETITIVE,),
    "racing": (MoodId.COMPETITIVE,),
    "sports": (MoodId.COMPETITIVE,),
    "fighting": (MoodId.COMPETITIVE,),
    "moba": (MoodId.COMPETITIVE, MoodId.SOCIAL),
    "multiplayer": (MoodId.SOCIAL, MoodId.COMPETITIVE),
    "mmo": (MoodId.SOCIAL,),
    "mmorpg": (MoodId.SOCIAL, MoodId.CURIOUS),
    "party": (MoodId.SOCIAL,),
    "co-op": (MoodId.SOCIAL,),
    "roguelike": (MoodId.COMPETITIVE, MoodId.CURIOUS),
    "platformer": (MoodId.COMPETITIVE, MoodId.FOCUSED),
    "survival": (MoodId.FOCUSED,),
}


def moods_for_genres(genres: list[str]) -> list[str]:
    """Union of the moods implied by *genres*, in first-seen order."""
    moods: list[str] = []
    for genre in genres:
        for mood in GENRE_TO_MOODS.get(genre, ()):
            if mood.value not in moods:
                moods.append(mood.value)
    return moods


# ── Exploration ───────────────────────────────────────────────

EXPLORATION_RATES: dict[TimeBudget, float] = {
    TimeBudget.SHORT: 0.35,
    TimeBudget.MEDIUM: 0.42,
    TimeBudget.LONG: 0.50,
}

DEFAULT_TIME_BUDGET = TimeBudget.MEDIUM


# ── Category pre-filters ──────────────────────────────────────


def _by_quality(items: list[CandidateItem]) -> list[CandidateItem]:
    return sorted(items, key=lambda c: c.quality_score, reverse=True)


def _top_rated(items: list[CandidateItem]) -> list[CandidateItem]:
    return _by_quality(items)[:20]


def _underrated(items: list[CandidateItem]) -> list[CandidateItem]:
    kept = [c for c in items if c.quality_score >= 85 and c.popularity_score <= 40]
    return _by_quality(kept)[:15]


def _hidden_gems(items: list[CandidateItem]) -> list[CandidateItem]:
    kept = [c for c in items if c.popularity_score <= 30]
    return _by_quality(kept)[:15]


CATEGORY_FILTERS: dict[RecommendationCategory, Callable[[list[CandidateItem]], list[CandidateItem]]] = {
    RecommendationCategory.TOP_RATED: _top_rated,
    RecommendationCategory.UNDERRATED: _underrated,
    RecommendationCategory.HIDDEN_GEMS: _hidden_gems,
}
