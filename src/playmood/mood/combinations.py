"""Hybrid mood combinations — primary/secondary compatibility checks.

The request layer may pair a primary mood with a secondary one.  Pairs are
looked up (in either order) in the static :data:`MOOD_COMBINATIONS` table;
pairs the table does not list are treated as neutral.
"""

from __future__ import annotations

from typing import Any, Iterable

import structlog

from playmood.models import MoodId, coerce_number, parse_mood
from playmood.mood.models import CombinationCheck, MoodCombinationRule, MoodSelection
from playmood.mood.tables import MOOD_COMBINATIONS

logger = structlog.get_logger(__name__)

NEUTRAL_COMPATIBILITY = 0.5
COMPATIBILITY_THRESHOLD = 0.5


def _find_rule(
    primary: MoodId,
    secondary: MoodId,
    rules: Iterable[MoodCombinationRule],
) -> MoodCombinationRule | None:
    for rule in rules:
        if {rule.primary, rule.secondary} == {primary, secondary}:
            return rule
    return None


def validate_combination(
    primary: Any,
    secondary: Any,
    rules: Iterable[MoodCombinationRule] = MOOD_COMBINATIONS,
) -> CombinationCheck:
    """Check whether two moods blend well enough to be selected together.

    Parameters
    ----------
    primary, secondary
        Mood identifiers (``MoodId`` or their string values).
    rules
        Combination table; defaults to :data:`MOOD_COMBINATIONS`.

    Raises
    ------
    InvalidMoodIdentifier
        If either identifier is not a known mood.
    """
    first = parse_mood(primary)
    second = parse_mood(secondary)

    if first == second:
        return CombinationCheck(
            primary=first,
            secondary=second,
            compatible=False,
            compatibility=0.0,
            context="A mood cannot be combined with itself",
        )

    rule = _find_rule(first, second, rules)
    compatibility = rule.compatibility if rule else NEUTRAL_COMPATIBILITY
    return CombinationCheck(
        primary=first,
        secondary=second,
        compatible=compatibility >= COMPATIBILITY_THRESHOLD,
        compatibility=compatibility,
        context=rule.context if rule else "",
    )


def suggest_combinations(
    primary: Any,
    rules: Iterable[MoodCombinationRule] = MOOD_COMBINATIONS,
    limit: int = 3,
) -> list[CombinationCheck]:
    """Best secondary moods for *primary*, most compatible first."""
    first = parse_mood(primary)
    rules = tuple(rules)
    checks = [
        validate_combination(first, other, rules)
        for other in MoodId
        if other != first
    ]
    # Stable sort keeps canonical mood order on ties
    checks.sort(key=lambda c: c.compatibility, reverse=True)
    return checks[: max(0, limit)]


def build_selection(
    primary: Any,
    secondary: Any = None,
    intensity: Any = 0.5,
    rules: Iterable[MoodCombinationRule] = MOOD_COMBINATIONS,
) -> MoodSelection:
    """Validate a request-layer mood choice into a :class:`MoodSelection`.

    An incompatible secondary mood is dropped (and logged) rather than
    failing the whole request; unknown identifiers still raise.
    """
    first = parse_mood(primary)
    level = max(0.0, min(1.0, coerce_number(intensity, default=0.5)))

    if secondary is None or secondary == "":
        return MoodSelection(primary=first, intensity=level)

    check = validate_combination(first, secondary, rules)
    if not check.compatible:
        logger.warning(
            "mood.combination_rejected",
            primary=first.value,
            secondary=check.secondary.value,
            compatibility=check.compatibility,
        )
        return MoodSelection(primary=first, intensity=level, compatibility=check.compatibility)

    return MoodSelection(
        primary=first,
        secondary=check.secondary,
        intensity=level,
        compatibility=check.compatibility,
    )
