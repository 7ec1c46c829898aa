"""Taste profile builder — playtime-weighted mood and genre preferences."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import structlog

from playmood.models import OwnedItem, coerce_non_negative
from playmood.recommend.models import TasteProfile

logger = structlog.get_logger(__name__)

_MIN_ITEM_WEIGHT = 1.0
_MAX_ITEM_WEIGHT = 6.0
_HOURS_PER_WEIGHT_STEP = 10.0


def item_weight(hours: Any) -> float:
    """Weight of one owned item: ``clamp(1 + hours / 10, 1, 6)``.

    Non-numeric or negative hours count as 0, so the result is always in
    [1, 6] and never decreases as hours grow.
    """
    value = 1.0 + coerce_non_negative(hours) / _HOURS_PER_WEIGHT_STEP
    return max(_MIN_ITEM_WEIGHT, min(_MAX_ITEM_WEIGHT, value))


def extend_profile(
    profile: TasteProfile,
    owned_items: Iterable[OwnedItem | Mapping[str, Any]] | None,
) -> TasteProfile:
    """Fold *owned_items* into a copy of *profile*.

    The input profile is left untouched and no existing weight decreases.
    """
    moods = dict(profile.mood_weights)
    genres = dict(profile.genre_weights)
    count = profile.item_count

    for raw in owned_items or ():
        item = raw if isinstance(raw, OwnedItem) else OwnedItem.model_validate(raw)
        weight = item_weight(item.hours_played)
        for mood in item.moods:
            moods[mood] = moods.get(mood, 0.0) + weight
        for genre in item.genres:
            genres[genre] = genres.get(genre, 0.0) + weight
        count += 1

    return TasteProfile(mood_weights=moods, genre_weights=genres, item_count=count)


def build_profile(
    owned_items: Iterable[OwnedItem | Mapping[str, Any]] | None,
) -> TasteProfile:
    """Build a fresh :class:`TasteProfile` from the user's library."""
    profile = extend_profile(TasteProfile(), owned_items)
    logger.debug(
        "taste.profile_built",
        items=profile.item_count,
        top_moods=profile.top_moods(),
        top_genres=profile.top_genres(),
    )
    return profile
