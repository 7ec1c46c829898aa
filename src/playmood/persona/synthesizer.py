"""Persona synthesis — library and session history → signals → traits.

Every function here is total: an empty history yields the documented
defaults (empty maps, zero rates, zero traits) instead of raising.
Malformed playtime has already been sanitised by the record validators.
"""

from __future__ import annotations

import statistics
from typing import Any, Iterable, Mapping

import structlog

from playmood.models import OwnedItem, SessionRecord
from playmood.persona.models import PersonaProfile, PersonaSignals, PersonaTraits

logger = structlog.get_logger(__name__)

# ── Constants ─────────────────────────────────────────────────

_EXPLORER_GENRE_SATURATION = 10  # distinct genres for a full explorer score
_STRATEGIST_SESSION_MINUTES = 180  # three-hour sessions saturate strategist
_ADVENTURER_MAX_HOURS = 5.0  # "sampled" items have at most this many hours
_UNPLAYED_AFFINITY = 1.0  # owned-but-unplayed items still count toward a genre


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _as_owned(records: Iterable[OwnedItem | Mapping[str, Any]] | None) -> list[OwnedItem]:
    return [
        r if isinstance(r, OwnedItem) else OwnedItem.model_validate(r)
        for r in records or ()
    ]


def _as_sessions(records: Iterable[SessionRecord | Mapping[str, Any]] | None) -> list[SessionRecord]:
    return [
        r if isinstance(r, SessionRecord) else SessionRecord.model_validate(r)
        for r in records or ()
    ]


# ── Signals ───────────────────────────────────────────────────


def build_signals(
    ownership_records: Iterable[OwnedItem | Mapping[str, Any]] | None,
    session_records: Iterable[SessionRecord | Mapping[str, Any]] | None,
) -> PersonaSignals:
    """Aggregate library and session history into :class:`PersonaSignals`."""
    items = _as_owned(ownership_records)
    sessions = _as_sessions(session_records)

    genre_affinity: dict[str, float] = {}
    for item in items:
        hours = item.hours_played if item.hours_played is not None else _UNPLAYED_AFFINITY
        for genre in item.genres:
            genre_affinity[genre] = genre_affinity.get(genre, 0.0) + hours

    n_items = len(items)
    completed = sum(1 for item in items if item.achievements_unlocked >= 1)
    multiplayer = sum(1 for item in items if item.is_multiplayer)
    durations = [s.effective_minutes() for s in sessions]

    return PersonaSignals(
        genre_affinity=genre_affinity,
        completion_rate=completed / n_items if n_items else 0.0,
        session_pattern=statistics.fmean(durations) if durations else 0.0,
        playtime_distribution=sorted(
            (item.hours_played or 0.0 for item in items), reverse=True
        ),
        multiplayer_ratio=multiplayer / n_items if n_items else 0.0,
    )


# ── Traits ────────────────────────────────────────────────────


def build_traits(signals: PersonaSignals) -> PersonaTraits:
    """Derive the six bounded traits from *signals*."""
    affinity = signals.genre_affinity
    total_playtime = sum(affinity.values())
    n_items = len(signals.playtime_distribution)
    sampled = sum(1 for h in signals.playtime_distribution if h <= _ADVENTURER_MAX_HOURS)

    return PersonaTraits(
        explorer=_clamp(len(affinity) / _EXPLORER_GENRE_SATURATION),
        specialist=_clamp(max(affinity.values()) / total_playtime) if total_playtime > 0 else 0.0,
        competitor=_clamp(signals.multiplayer_ratio),
        completionist=_clamp(signals.completion_rate),
        strategist=_clamp(signals.session_pattern / _STRATEGIST_SESSION_MINUTES),
        adventurer=_clamp(sampled / n_items) if n_items else 0.0,
    )


# ── Profile ───────────────────────────────────────────────────


def synthesize_persona(
    ownership_records: Iterable[OwnedItem | Mapping[str, Any]] | None,
    session_records: Iterable[SessionRecord | Mapping[str, Any]] | None,
) -> PersonaProfile:
    """Build signals and traits in one pass and summarise the result.

    Parameters
    ----------
    ownership_records
        Owned items from the account adapter (records or raw mappings).
    session_records
        Play sessions (records or raw mappings).
    """
    items = _as_owned(ownership_records)
    sessions = _as_sessions(session_records)
    signals = build_signals(items, sessions)
    traits = build_traits(signals)

    profile = PersonaProfile(
        signals=signals,
        traits=traits,
        dominant_traits=traits.dominant(),
        item_count=len(items),
        session_count=len(sessions),
    )
    logger.info(
        "persona.synthesized",
        items=profile.item_count,
        sessions=profile.session_count,
        dominant=profile.dominant_traits,
    )
    return profile
