"""Mood inference engine — weighted heuristic scoring of mood categories.

This module maps a :class:`NormalizedFeatureVector` to a
:class:`MoodVector` and derives the confidence, dominant mood and
validation report that make up a :class:`MoodInferenceResult`.

Design principles
-----------------
- **Explicit state**: the weight table is owned by the caller and passed
  in on every call.  :class:`MoodInference` only holds immutable model
  configuration, so one instance can serve any number of users.
- **Bounded**: each mood score is a logistic squash of a weighted dot
  product and is clamped to [0, 1] afterwards.
- **Explainable**: confidence is a fixed blend of mood strength, mood
  clarity and input consistency, so every number can be traced back.

Confidence blend
----------------
==========================  ======
Component                   Weight
==========================  ======
Strongest mood score        0.4
1 − ambiguity (top gap)     0.4
Feature consistency         0.2
==========================  ======
"""

from __future__ import annotations

import math
import statistics
from typing import Any, Mapping

import structlog

from playmood.exceptions import DegenerateWeightTable
from playmood.models import MoodId
from playmood.mood.models import (
    DominantMood,
    MoodDescription,
    MoodFeedback,
    MoodInferenceResult,
    MoodVector,
    MoodVectorValidation,
    MoodWeightTable,
    NormalizedFeatureVector,
)
from playmood.mood.tables import DEFAULT_MOOD_MODEL, MoodModelConfig

logger = structlog.get_logger(__name__)

_STRENGTH_WEIGHT = 0.4
_CLARITY_WEIGHT = 0.4
_CONSISTENCY_WEIGHT = 0.2


class MoodInference:
    """Stateless mood inference over an injectable model configuration.

    Parameters
    ----------
    config : MoodModelConfig
        Coefficient tables, default weights and thresholds.  Defaults to
        the built-in model.
    """

    def __init__(self, config: MoodModelConfig | None = None) -> None:
        self._config = config or DEFAULT_MOOD_MODEL

    @property
    def config(self) -> MoodModelConfig:
        return self._config

    def default_weights(self) -> MoodWeightTable:
        return self._config.default_weights

    # ── Scoring ──────────────────────────────────────────────

    def infer_mood(
        self,
        features: NormalizedFeatureVector,
        weights: MoodWeightTable | Mapping[str, float] | None = None,
    ) -> MoodVector:
        """Score every mood category for *features*.

        Custom weights are merged over the default table, so a partial
        table only overrides the features it names.
        """
        merged = self._merge_weights(weights)
        values = features.as_dict()

        scores: dict[MoodId, float] = {}
        for mood, coefficients in self._config.coefficients.items():
            raw = sum(
                value * coefficients.get(name, 0.0) * merged.get(name, 0.0)
                for name, value in values.items()
            )
            scores[mood] = max(0.0, min(1.0, _sigmoid(raw)))
        return MoodVector(scores=scores)

    def get_inference_confidence(
        self,
        features: NormalizedFeatureVector,
        mood_vector: MoodVector,
    ) -> float:
        """Confidence in [0, 1] that *mood_vector* reflects a clear state."""
        if not mood_vector.scores:
            return 0.0
        strength = mood_vector.max_score()
        ambiguity = _mood_ambiguity(mood_vector)
        consistency = _feature_consistency(features)
        confidence = (
            strength * _STRENGTH_WEIGHT
            + (1 - ambiguity) * _CLARITY_WEIGHT
            + consistency * _CONSISTENCY_WEIGHT
        )
        return max(0.0, min(1.0, confidence))

    def get_dominant_mood(self, mood_vector: MoodVector) -> DominantMood:
        """Return the top mood and, if significant, the runner-up.

        The runner-up is only reported when its score is strictly above
        the significance threshold.
        """
        ranked = mood_vector.top()
        if not ranked:
            return DominantMood(mood=MoodId.CALM, confidence=0.0)
        mood, score = ranked[0]
        dominant = DominantMood(mood=mood, confidence=score)
        if len(ranked) > 1 and ranked[1][1] > self._config.significance_threshold:
            dominant.secondary_mood = ranked[1][0]
            dominant.secondary_confidence = ranked[1][1]
        return dominant

    def describe_mood(self, mood_vector: MoodVector) -> MoodDescription:
        """Human-readable summary of the dominant mood."""
        dominant = self.get_dominant_mood(mood_vector)
        descriptions = self._config.descriptions
        return descriptions.get(dominant.mood) or descriptions[MoodId.CALM]

    # ── Feedback ─────────────────────────────────────────────

    def adjust_weights(
        self,
        weights: MoodWeightTable | Mapping[str, float],
        feedback: MoodFeedback | Mapping[str, Any],
    ) -> MoodWeightTable:
        """Nudge every weight after a prediction outcome is observed.

        A correct prediction raises each weight by ``rate × confidence``
        (capped at 1); a wrong one lowers each weight by the same amount
        (floored).  The table is then renormalised to sum to 1.  Credit is
        spread uniformly rather than assigned to individual features.

        Raises
        ------
        DegenerateWeightTable
            If the adjusted weights sum to zero.
        """
        table = _as_table(weights)
        feedback = MoodFeedback.parse(feedback)
        step = self._config.adjustment_rate * feedback.confidence
        correct = feedback.predicted_mood == feedback.actual_mood

        if correct:
            adjusted = {k: min(1.0, w + step) for k, w in table.weights.items()}
        else:
            adjusted = {
                k: max(self._config.weight_floor, w - step)
                for k, w in table.weights.items()
            }

        total = sum(adjusted.values())
        if total <= 0:
            raise DegenerateWeightTable(adjusted)

        result = MoodWeightTable(weights={k: w / total for k, w in adjusted.items()})
        logger.info(
            "mood.weights_adjusted",
            correct=correct,
            predicted=feedback.predicted_mood.value,
            actual=feedback.actual_mood.value,
            step=round(step, 4),
        )
        return result

    # ── Validation ───────────────────────────────────────────

    def validate_mood_vector(
        self,
        vector: MoodVector | Mapping[Any, float],
    ) -> MoodVectorValidation:
        """Check a mood vector for out-of-range scores and weak signals."""
        scores = vector.scores if isinstance(vector, MoodVector) else dict(vector)
        issues: list[str] = []
        warnings: list[str] = []

        for key, value in scores.items():
            name = key.value if isinstance(key, MoodId) else str(key)
            if not isinstance(value, (int, float)) or math.isnan(value) or not 0.0 <= value <= 1.0:
                issues.append(f"{name} is out of range [0,1]: {value}")

        numeric = [v for v in scores.values() if isinstance(v, (int, float)) and not math.isnan(v)]
        if numeric and max(numeric) < self._config.significance_threshold:
            warnings.append("All mood values are low - possible weak signal")

        return MoodVectorValidation(is_valid=not issues, issues=issues, warnings=warnings)

    # ── Full analysis ────────────────────────────────────────

    def analyze(
        self,
        features: NormalizedFeatureVector,
        weights: MoodWeightTable | Mapping[str, float] | None = None,
    ) -> MoodInferenceResult:
        """Run inference, confidence, dominance and validation in one pass."""
        vector = self.infer_mood(features, weights)
        confidence = self.get_inference_confidence(features, vector)
        dominant = self.get_dominant_mood(vector)
        validation = self.validate_mood_vector(vector)

        result = MoodInferenceResult(
            mood_vector=vector,
            confidence=round(confidence, 4),
            dominant_mood=dominant.mood,
            dominant_score=dominant.confidence,
            secondary_mood=dominant.secondary_mood,
            secondary_confidence=dominant.secondary_confidence,
            features=features,
            warnings=validation.issues + validation.warnings,
        )

        logger.info(
            "mood.inference_complete",
            dominant=dominant.mood.value,
            score=round(dominant.confidence, 3),
            secondary=dominant.secondary_mood.value if dominant.secondary_mood else None,
            confidence=round(confidence, 3),
            n_warnings=len(result.warnings),
        )
        return result

    # ── Internals ────────────────────────────────────────────

    def _merge_weights(
        self,
        weights: MoodWeightTable | Mapping[str, float] | None,
    ) -> dict[str, float]:
        merged = dict(self._config.default_weights.weights)
        if weights is not None:
            merged.update(_as_table(weights).weights)
        return merged


# ── Helpers ───────────────────────────────────────────────────


def _as_table(weights: MoodWeightTable | Mapping[str, float]) -> MoodWeightTable:
    if isinstance(weights, MoodWeightTable):
        return weights
    return MoodWeightTable(weights=dict(weights))


def _sigmoid(x: float) -> float:
    """Logistic sigmoid mapping R → (0, 1)."""
    try:
        return 1.0 / (1.0 + math.exp(-x))
    except OverflowError:
        return 0.0 if x < 0 else 1.0


def _mood_ambiguity(mood_vector: MoodVector) -> float:
    """1 − (top − second): high when the two strongest moods are close."""
    ranked = [score for _, score in mood_vector.top()]
    top = ranked[0] if ranked else 0.0
    second = ranked[1] if len(ranked) > 1 else 0.0
    return 1 - (top - second)


def _feature_consistency(features: NormalizedFeatureVector) -> float:
    """1 − population variance of the feature values, floored at 0.

    The variance is not rescaled by the feature range.
    """
    values = list(features.as_dict().values())
    if not values:
        return 0.0
    return max(0.0, 1 - statistics.pvariance(values))
