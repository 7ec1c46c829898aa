"""Tests for the mood inference engine."""

from __future__ import annotations

import itertools

import pytest

from playmood.exceptions import DegenerateWeightTable, InvalidMoodIdentifier
from playmood.models import MoodId
from playmood.mood.inference import MoodInference
from playmood.mood.models import (
    MoodFeedback,
    MoodVector,
    MoodWeightTable,
    NormalizedFeatureVector,
)
from playmood.mood.tables import DEFAULT_WEIGHTS, MoodModelConfig


def _vector(**scores: float) -> MoodVector:
    return MoodVector(scores={MoodId(k): v for k, v in scores.items()})


# ── Scoring ──────────────────────────────────────────────────


class TestInferMood:
    def test_calm_scenario(self, inference, calm_features):
        vector = inference.infer_mood(calm_features)
        assert vector.top()[0][0] == MoodId.CALM
        assert vector[MoodId.CALM] > vector[MoodId.COMPETITIVE] + 0.05

    def test_every_mood_scored(self, inference, neutral_features):
        vector = inference.infer_mood(neutral_features)
        assert set(vector.scores) == set(MoodId)

    def test_neutral_features_score_one_half(self, inference, neutral_features):
        vector = inference.infer_mood(neutral_features)
        assert all(v == pytest.approx(0.5) for v in vector.scores.values())

    def test_scores_bounded_for_extreme_features(self, inference):
        for signs in itertools.product((-1.0, 1.0), repeat=5):
            features = NormalizedFeatureVector(
                engagement_volatility=signs[0],
                challenge_seeking=signs[1],
                social_openness=signs[2],
                exploration_bias=signs[3],
                focus_stability=signs[4],
            )
            for score in inference.infer_mood(features).scores.values():
                assert 0.0 <= score <= 1.0

    def test_partial_weights_merge_over_defaults(self, inference, calm_features):
        default = inference.infer_mood(calm_features)
        muted = inference.infer_mood(calm_features, {"focus_stability": 0.0})
        assert muted[MoodId.CALM] < default[MoodId.CALM]
        assert muted[MoodId.CALM] > 0.5

    def test_returns_new_vector_each_call(self, inference, calm_features):
        first = inference.infer_mood(calm_features)
        second = inference.infer_mood(calm_features)
        assert first == second
        assert first is not second

    def test_large_inputs_do_not_overflow(self):
        config = MoodModelConfig(
            coefficients={MoodId.CALM: {"focus_stability": 1e6}},
            default_weights=MoodWeightTable(weights={"focus_stability": 1.0}),
        )
        engine = MoodInference(config)
        low = engine.infer_mood(NormalizedFeatureVector(focus_stability=-1.0))
        high = engine.infer_mood(NormalizedFeatureVector(focus_stability=1.0))
        assert low[MoodId.CALM] == 0.0
        assert high[MoodId.CALM] == 1.0


class TestConfidence:
    def test_neutral_confidence(self, inference, neutral_features):
        vector = inference.infer_mood(neutral_features)
        # 0.4 × 0.5 strength + 0.4 × 0 clarity + 0.2 × 1 consistency
        assert inference.get_inference_confidence(neutral_features, vector) == pytest.approx(0.4)

    def test_confidence_bounded(self, inference, calm_features):
        vector = inference.infer_mood(calm_features)
        assert 0.0 <= inference.get_inference_confidence(calm_features, vector) <= 1.0

    def test_clear_winner_is_more_confident(self, inference, neutral_features):
        clear = _vector(calm=0.9, competitive=0.1, curious=0.1, social=0.1, focused=0.1)
        tied = _vector(calm=0.9, competitive=0.9, curious=0.1, social=0.1, focused=0.1)
        assert inference.get_inference_confidence(
            neutral_features, clear
        ) > inference.get_inference_confidence(neutral_features, tied)

    def test_empty_vector_has_zero_confidence(self, inference, neutral_features):
        assert inference.get_inference_confidence(neutral_features, MoodVector()) == 0.0


class TestDominantMood:
    def test_secondary_requires_score_above_threshold(self, inference):
        dominant = inference.get_dominant_mood(
            _vector(calm=0.9, competitive=0.3, curious=0.2, social=0.1, focused=0.0)
        )
        assert dominant.mood == MoodId.CALM
        assert dominant.secondary_mood is None
        assert dominant.secondary_confidence is None

    def test_secondary_reported_when_significant(self, inference):
        dominant = inference.get_dominant_mood(
            _vector(calm=0.2, competitive=0.8, curious=0.31, social=0.1, focused=0.0)
        )
        assert dominant.mood == MoodId.COMPETITIVE
        assert dominant.secondary_mood == MoodId.CURIOUS
        assert dominant.secondary_confidence == pytest.approx(0.31)

    def test_ties_keep_canonical_order(self, inference, neutral_features):
        dominant = inference.get_dominant_mood(inference.infer_mood(neutral_features))
        assert dominant.mood == MoodId.CALM
        assert dominant.secondary_mood == MoodId.COMPETITIVE

    def test_calm_scenario_secondary_is_focused(self, inference, calm_features):
        dominant = inference.get_dominant_mood(inference.infer_mood(calm_features))
        assert dominant.secondary_mood == MoodId.FOCUSED


# ── Feedback ─────────────────────────────────────────────────


class TestAdjustWeights:
    @pytest.mark.parametrize("actual", ["calm", "social"])
    @pytest.mark.parametrize("confidence", [0.0, 0.4, 1.0])
    def test_adjusted_table_sums_to_one(self, inference, actual, confidence):
        feedback = {"predictedMood": "calm", "actualMood": actual, "confidence": confidence}
        adjusted = inference.adjust_weights(DEFAULT_WEIGHTS, feedback)
        assert adjusted.total() == pytest.approx(1.0)

    def test_correct_prediction_raises_before_normalising(self, inference):
        table = MoodWeightTable(weights={"a": 0.2, "b": 0.6})
        feedback = MoodFeedback(predicted_mood=MoodId.CALM, actual_mood=MoodId.CALM, confidence=1.0)
        adjusted = inference.adjust_weights(table, feedback)
        # (0.3, 0.7) / 1.0
        assert adjusted.get("a") == pytest.approx(0.3)
        assert adjusted.get("b") == pytest.approx(0.7)

    def test_wrong_prediction_respects_floor(self, inference):
        table = MoodWeightTable(weights={"a": 0.12, "b": 0.9})
        feedback = {"predicted_mood": "calm", "actual_mood": "social", "confidence": 1.0}
        adjusted = inference.adjust_weights(table, feedback)
        # (0.1, 0.8) / 0.9
        assert adjusted.get("a") == pytest.approx(0.1 / 0.9)
        assert adjusted.get("b") == pytest.approx(0.8 / 0.9)

    def test_input_table_is_not_mutated(self, inference):
        before = dict(DEFAULT_WEIGHTS.weights)
        inference.adjust_weights(
            DEFAULT_WEIGHTS, {"predictedMood": "calm", "actualMood": "calm", "confidence": 1}
        )
        assert DEFAULT_WEIGHTS.weights == before

    def test_confidence_is_clamped(self, inference):
        feedback = MoodFeedback.parse({"predictedMood": "calm", "actualMood": "calm", "confidence": 7})
        assert feedback.confidence == 1.0

    def test_empty_table_is_degenerate(self, inference):
        with pytest.raises(DegenerateWeightTable):
            inference.adjust_weights({}, {"predictedMood": "calm", "actualMood": "calm", "confidence": 1})

    def test_zero_table_without_confidence_is_degenerate(self, inference):
        zeros = {"a": 0.0, "b": 0.0}
        with pytest.raises(DegenerateWeightTable) as exc_info:
            inference.adjust_weights(zeros, {"predictedMood": "calm", "actualMood": "calm", "confidence": 0})
        assert exc_info.value.weights == zeros

    def test_unknown_mood_in_feedback(self, inference):
        with pytest.raises(InvalidMoodIdentifier) as exc_info:
            inference.adjust_weights(
                DEFAULT_WEIGHTS, {"predictedMood": "angry", "actualMood": "calm", "confidence": 1}
            )
        assert exc_info.value.value == "angry"


# ── Validation & description ─────────────────────────────────


class TestValidateMoodVector:
    def test_valid_vector(self, inference, calm_features):
        report = inference.validate_mood_vector(inference.infer_mood(calm_features))
        assert report.is_valid
        assert report.issues == []
        assert report.warnings == []

    def test_out_of_range_is_an_issue(self, inference):
        report = inference.validate_mood_vector({"calm": 1.5, "social": 0.4})
        assert not report.is_valid
        assert len(report.issues) == 1
        assert "calm" in report.issues[0]

    def test_weak_signal_is_only_a_warning(self, inference):
        report = inference.validate_mood_vector({"calm": 0.1, "social": 0.2})
        assert report.is_valid
        assert report.issues == []
        assert len(report.warnings) == 1


class TestDescribeAndAnalyze:
    def test_describe_dominant_mood(self, inference, calm_features):
        description = inference.describe_mood(inference.infer_mood(calm_features))
        assert description.mood == MoodId.CALM
        assert description.label == "Calm"
        assert description.suggestions

    def test_analyze_bundles_everything(self, inference, calm_features):
        result = inference.analyze(calm_features)
        assert result.dominant_mood == MoodId.CALM
        assert result.secondary_mood == MoodId.FOCUSED
        assert 0.0 <= result.confidence <= 1.0
        assert result.features == calm_features
        assert result.warnings == []

    def test_default_table_classmethod(self):
        assert MoodWeightTable.default() == DEFAULT_WEIGHTS
        assert MoodWeightTable.default().total() == pytest.approx(1.0)
