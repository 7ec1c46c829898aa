"""Recommendation scorer — exploit/explore selection over a candidate pool.

Pipeline
--------
1. Drop candidates the user already owns (by id or case-insensitive title).
2. Apply the optional category pre-filter.
3. Derive candidate moods from genres and score each candidate.
4. Take the exploitation set from the best-ranked window and sample the
   exploration set uniformly from everything ranked below it.
5. Deduplicate titles, narrow to the selected mood when possible, attach
   reasons and shuffle the presentation order.

All randomness comes from the injected :class:`random.Random`, so a fixed
seed reproduces the exact output order.
"""

from __future__ import annotations

import math
import random
from typing import Any, Iterable, Mapping

import structlog

from playmood.models import (
    CandidateItem,
    MoodId,
    OwnedItem,
    RecommendationCategory,
    TimeBudget,
    normalize_token,
    parse_mood,
)
from playmood.recommend.models import (
    Recommendation,
    RecommendationResult,
    ScoreBreakdown,
    ScoredCandidate,
    ScoringConfig,
    TasteProfile,
)
from playmood.recommend.tables import (
    CATEGORY_FILTERS,
    DEFAULT_TIME_BUDGET,
    EXPLORATION_RATES,
    moods_for_genres,
)

logger = structlog.get_logger(__name__)


def _title_key(title: str) -> str:
    return title.strip().casefold()


def _format_percent(value: float) -> str:
    return f"{value:g}"


def parse_time_budget(value: Any) -> TimeBudget:
    """Resolve a time-budget hint; anything unrecognised means medium."""
    if isinstance(value, TimeBudget):
        return value
    try:
        return TimeBudget(normalize_token(value))
    except ValueError:
        return DEFAULT_TIME_BUDGET


def parse_category(value: Any) -> RecommendationCategory | None:
    """Resolve a category filter; unknown or empty values disable filtering."""
    if value is None or isinstance(value, RecommendationCategory):
        return value
    token = normalize_token(value).replace("-", "_")
    try:
        return RecommendationCategory(token)
    except ValueError:
        logger.warning("recommend.unknown_category", category=value)
        return None


class RecommendationScorer:
    """Score and select candidates for one user.

    Parameters
    ----------
    config : ScoringConfig
        Scoring constants.  Defaults to the built-in values.
    rng : random.Random
        Source of all randomness (exploration sampling and the final
        shuffle).  Pass a seeded instance for reproducible output.
    """

    def __init__(
        self,
        config: ScoringConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._config = config or ScoringConfig()
        self._rng = rng or random.Random()

    @property
    def config(self) -> ScoringConfig:
        return self._config

    # ── Planning ─────────────────────────────────────────────

    def exploration_plan(self, time_budget: Any = None) -> tuple[float, int, int]:
        """Return ``(rate, exploit_count, explore_count)`` for a time budget."""
        rate = EXPLORATION_RATES[parse_time_budget(time_budget)]
        target = self._config.target_size
        # Half-up rounding: 10 × 0.35 = 3.5 → 4
        explore = max(self._config.min_exploration, math.floor(target * rate + 0.5))
        explore = min(explore, target)
        return rate, target - explore, explore

    # ── Scoring ──────────────────────────────────────────────

    def score_candidate(
        self,
        item: CandidateItem,
        profile: TasteProfile,
        selected_mood: MoodId | None = None,
    ) -> ScoredCandidate:
        """Score one candidate against the taste profile and selected mood."""
        cfg = self._config
        moods = moods_for_genres(item.genres)

        mood_match = (
            cfg.mood_match_weight
            if selected_mood is not None and selected_mood.value in moods
            else 0.0
        )
        mood_overlap = sum(profile.mood_weights.get(m, 0.0) for m in moods)
        genre_overlap = sum(profile.genre_weights.get(g, 0.0) for g in item.genres)

        breakdown = ScoreBreakdown(
            mood_match=mood_match,
            mood_overlap=min(mood_overlap / cfg.overlap_divisor, cfg.mood_overlap_cap),
            genre_overlap=min(genre_overlap / cfg.overlap_divisor, cfg.genre_overlap_cap),
            quality=cfg.quality_weight * max(0.0, min(1.0, item.quality_score / 100)),
            discovery_boost=self._discovery_boost(item),
        )
        breakdown.total = (
            breakdown.mood_match
            + breakdown.mood_overlap
            + breakdown.genre_overlap
            + breakdown.quality
            + breakdown.discovery_boost
        )
        return ScoredCandidate(item=item, moods=moods, score=breakdown.total, breakdown=breakdown)

    def _discovery_boost(self, item: CandidateItem) -> float:
        if "indie" not in item.genres:
            return 0.0
        if 0 < item.quality_score < self._config.discovery_quality_ceiling:
            return self._config.discovery_gem_boost
        return self._config.discovery_indie_boost

    # ── Selection ────────────────────────────────────────────

    def recommend(
        self,
        candidates: Iterable[CandidateItem | Mapping[str, Any]] | None,
        profile: TasteProfile | None = None,
        *,
        owned_items: Iterable[OwnedItem | Mapping[str, Any]] = (),
        selected_mood: Any = None,
        inferred_mood: Any = None,
        time_budget: Any = None,
        category: Any = None,
        debug: bool = False,
    ) -> RecommendationResult:
        """Select, explain and order recommendations for one request.

        *inferred_mood* only feeds the mood-match score, and only when no
        mood was selected.  Mood narrowing and the mood reason are tied to
        the user's own *selected_mood*.

        Raises
        ------
        InvalidMoodIdentifier
            If either mood is given but is not a known mood.
        """
        mood = parse_mood(selected_mood) if selected_mood not in (None, "") else None
        scoring_mood = mood
        if scoring_mood is None and inferred_mood not in (None, ""):
            scoring_mood = parse_mood(inferred_mood)
        profile = profile or TasteProfile()
        rate, exploit_count, explore_count = self.exploration_plan(time_budget)

        pool = self._eligible(candidates, owned_items)
        category_filter = parse_category(category)
        if category_filter is not None:
            pool = CATEGORY_FILTERS[category_filter](pool)

        if not pool:
            logger.info("recommend.empty_pool", category=category_filter)
            return RecommendationResult(exploration_rate=rate, debug={} if debug else None)

        scored = [self.score_candidate(item, profile, scoring_mood) for item in pool]
        # Stable: equal scores keep pool order
        ranked = sorted(scored, key=lambda s: s.score, reverse=True)

        window = self._config.exploitation_window
        exploitation = ranked[:window][:exploit_count]
        remainder = ranked[window:]
        exploration = self._rng.sample(remainder, min(explore_count, len(remainder)))

        selected = self._dedupe(exploitation + exploration)
        if mood is not None:
            matching = [s for s in selected if mood.value in s.moods]
            if matching:
                selected = matching

        for entry in selected:
            entry.reasons = self._reasons(entry, mood)
        self._rng.shuffle(selected)

        genres_searched: list[str] = []
        for entry in selected:
            for genre in entry.item.genres:
                if genre not in genres_searched:
                    genres_searched.append(genre)

        result = RecommendationResult(
            recommendations=[self._to_public(s, debug) for s in selected],
            total_found=len(selected),
            genres_searched=genres_searched,
            exploration_rate=rate,
            debug={s.item.id: s.breakdown for s in selected} if debug else None,
        )
        logger.info(
            "recommend.ranked",
            pool=len(pool),
            exploit=len(exploitation),
            explore=len(exploration),
            returned=result.total_found,
            mood=mood.value if mood else None,
            scoring_mood=scoring_mood.value if scoring_mood else None,
            rate=rate,
        )
        return result

    # ── Internals ────────────────────────────────────────────

    @staticmethod
    def _eligible(
        candidates: Iterable[CandidateItem | Mapping[str, Any]] | None,
        owned_items: Iterable[OwnedItem | Mapping[str, Any]],
    ) -> list[CandidateItem]:
        owned = [
            o if isinstance(o, OwnedItem) else OwnedItem.model_validate(o)
            for o in owned_items or ()
        ]
        owned_ids = {o.id for o in owned if o.id}
        owned_titles = {_title_key(o.title) for o in owned if o.title.strip()}

        pool: list[CandidateItem] = []
        for raw in candidates or ():
            item = raw if isinstance(raw, CandidateItem) else CandidateItem.model_validate(raw)
            if item.id in owned_ids or _title_key(item.title) in owned_titles:
                continue
            pool.append(item)
        return pool

    @staticmethod
    def _dedupe(entries: list[ScoredCandidate]) -> list[ScoredCandidate]:
        seen: set[str] = set()
        unique: list[ScoredCandidate] = []
        for entry in entries:
            key = _title_key(entry.item.title)
            if not key or key in seen:
                continue
            seen.add(key)
            unique.append(entry)
        return unique

    def _reasons(self, entry: ScoredCandidate, mood: MoodId | None) -> list[str]:
        reasons: list[str] = []
        if mood is not None and mood.value in entry.moods:
            reasons.append(f"Matches your {mood.value} mood")
        reasons.append(f"Highly rated: {_format_percent(entry.item.quality_score)}%")
        if entry.breakdown.discovery_boost > 0:
            reasons.append("Discovery pick: boosting smaller/indie gems")
        return reasons[: self._config.max_reasons]

    @staticmethod
    def _to_public(entry: ScoredCandidate, debug: bool) -> Recommendation:
        return Recommendation(
            id=entry.item.id,
            title=entry.item.title,
            genres=entry.item.genres,
            moods=entry.moods,
            quality_score=entry.item.quality_score,
            description=entry.item.description,
            reasons=entry.reasons,
            score=round(entry.score, 4) if debug else None,
        )
