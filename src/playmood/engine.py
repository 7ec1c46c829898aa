"""Engine orchestrator — ties mood inference, persona synthesis and scoring.

This module provides :class:`MoodPersonaEngine`, the entry point used by
the request layer and the CLI.  It coordinates:

1. Normalising behavioural counters and inferring the current mood
2. Applying prediction feedback to the caller's weight table
3. Synthesising the long-horizon persona
4. Building the taste profile and scoring the candidate pool

An engine holds only immutable configuration and its own random source.
Construct one per request or per user session; weight tables and taste
profiles stay with the caller between calls.
"""

from __future__ import annotations

import random
from typing import Any, Iterable, Mapping

import structlog

from playmood.config import Settings, get_settings
from playmood.exceptions import DegenerateWeightTable
from playmood.models import MoodId, OwnedItem, SessionRecord
from playmood.mood.combinations import build_selection
from playmood.mood.features import normalize_features
from playmood.mood.inference import MoodInference
from playmood.mood.models import (
    BehaviorCounters,
    MoodFeedback,
    MoodInferenceResult,
    MoodSelection,
    MoodWeightTable,
)
from playmood.mood.tables import MoodModelConfig
from playmood.persona.models import PersonaProfile
from playmood.persona.synthesizer import synthesize_persona
from playmood.recommend.models import (
    RecommendationRequest,
    RecommendationResult,
    ScoringConfig,
    TasteProfile,
)
from playmood.recommend.scorer import RecommendationScorer
from playmood.recommend.taste import build_profile

logger = structlog.get_logger(__name__)


class MoodPersonaEngine:
    """Per-session orchestrator for the recommendation core.

    Parameters
    ----------
    settings : Settings
        Runtime settings; defaults to :func:`get_settings`.
    rng : random.Random
        Random source for exploration sampling and shuffling.  Defaults to
        ``random.Random(settings.random_seed)``.
    mood_model : MoodModelConfig
        Inference tables and thresholds; built from *settings* if omitted.
    scoring_config : ScoringConfig
        Scoring constants; built from *settings* if omitted.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        rng: random.Random | None = None,
        mood_model: MoodModelConfig | None = None,
        scoring_config: ScoringConfig | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._rng = rng or random.Random(self._settings.random_seed)
        self._inference = MoodInference(
            mood_model
            or MoodModelConfig(
                significance_threshold=self._settings.significance_threshold,
                adjustment_rate=self._settings.weight_adjustment_rate,
                weight_floor=self._settings.weight_floor,
            )
        )
        self._scorer = RecommendationScorer(
            scoring_config
            or ScoringConfig(
                target_size=self._settings.target_size,
                exploitation_window=self._settings.exploitation_window,
            ),
            self._rng,
        )

    @property
    def inference(self) -> MoodInference:
        return self._inference

    @property
    def scorer(self) -> RecommendationScorer:
        return self._scorer

    # ── Mood ─────────────────────────────────────────────────

    def analyze_mood(
        self,
        counters: BehaviorCounters | Mapping[str, Any] | None,
        weights: MoodWeightTable | Mapping[str, float] | None = None,
    ) -> MoodInferenceResult:
        """Normalise *counters* and run the full mood analysis."""
        features = normalize_features(counters)
        return self._inference.analyze(features, weights)

    def apply_feedback(
        self,
        weights: MoodWeightTable | Mapping[str, float],
        feedback: MoodFeedback | Mapping[str, Any],
    ) -> MoodWeightTable:
        """Adjust the caller's weight table from an observed outcome.

        A table that cannot be renormalised is replaced by the default
        table.  An unknown mood in *feedback* still raises.
        """
        try:
            return self._inference.adjust_weights(weights, feedback)
        except DegenerateWeightTable as exc:
            logger.warning("mood.weights_reset", weights=exc.weights)
            return self._inference.default_weights()

    # ── Persona & taste ──────────────────────────────────────

    def synthesize_persona(
        self,
        owned: Iterable[OwnedItem | Mapping[str, Any]] | None,
        sessions: Iterable[SessionRecord | Mapping[str, Any]] | None = None,
    ) -> PersonaProfile:
        return synthesize_persona(owned, sessions)

    def build_taste_profile(
        self,
        owned: Iterable[OwnedItem | Mapping[str, Any]] | None,
    ) -> TasteProfile:
        return build_profile(owned)

    # ── Recommendation ───────────────────────────────────────

    def resolve_selection(self, request: RecommendationRequest) -> MoodSelection | None:
        """Explicit mood choice, else the inferred dominant mood, else none.

        :meth:`recommend` scores with an inferred selection but does not
        narrow results to it or name it in reasons.

        Raises
        ------
        InvalidMoodIdentifier
            If the request names a mood outside the fixed set.
        """
        if request.selected_mood is not None:
            return build_selection(
                request.selected_mood,
                request.secondary_mood,
                request.intensity,
            )
        if request.counters is not None:
            inferred = self.analyze_mood(request.counters, request.weights)
            return MoodSelection(
                primary=inferred.dominant_mood,
                secondary=inferred.secondary_mood,
                intensity=request.intensity,
            )
        return None

    def recommend(
        self,
        request: RecommendationRequest | Mapping[str, Any],
    ) -> RecommendationResult:
        """Run one recommendation request end to end."""
        if not isinstance(request, RecommendationRequest):
            request = RecommendationRequest.model_validate(request)

        selection = self.resolve_selection(request)
        primary: MoodId | None = selection.primary if selection else None
        explicit = request.selected_mood is not None
        profile = build_profile(request.owned_items)

        logger.debug(
            "engine.recommend_start",
            candidates=len(request.candidates),
            owned=len(request.owned_items),
            mood=primary.value if primary else None,
            inferred=primary is not None and not explicit,
            secondary=selection.secondary.value if selection and selection.secondary else None,
        )
        return self._scorer.recommend(
            request.candidates,
            profile,
            owned_items=request.owned_items,
            selected_mood=primary if explicit else None,
            inferred_mood=None if explicit else primary,
            time_budget=request.time_budget,
            category=request.category,
            debug=request.debug or self._settings.include_debug_scores,
        )
