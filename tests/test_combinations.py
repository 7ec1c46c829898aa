"""Tests for hybrid mood combination rules."""

from __future__ import annotations

import pytest

from playmood.exceptions import InvalidMoodIdentifier
from playmood.models import MoodId
from playmood.mood.combinations import build_selection, suggest_combinations, validate_combination
from playmood.mood.tables import MOOD_COMBINATIONS


class TestValidateCombination:
    def test_listed_pair(self):
        check = validate_combination("calm", "curious")
        assert check.compatible
        assert check.compatibility == pytest.approx(0.8)
        assert check.context

    def test_lookup_is_symmetric(self):
        forward = validate_combination(MoodId.FOCUSED, MoodId.COMPETITIVE)
        backward = validate_combination(MoodId.COMPETITIVE, MoodId.FOCUSED)
        assert forward.compatibility == backward.compatibility

    def test_low_compatibility_rejected(self):
        check = validate_combination("calm", "competitive")
        assert not check.compatible
        assert check.compatibility == pytest.approx(0.2)

    def test_identical_moods_rejected(self):
        check = validate_combination("social", "social")
        assert not check.compatible
        assert check.compatibility == 0.0

    def test_unlisted_pair_is_neutral(self):
        check = validate_combination("calm", "curious", rules=())
        assert check.compatible
        assert check.compatibility == pytest.approx(0.5)

    def test_identifiers_are_normalised(self):
        assert validate_combination(" Calm ", "CURIOUS").primary == MoodId.CALM

    @pytest.mark.parametrize("primary,secondary", [("calm", "sleepy"), ("angry", "calm"), (None, "calm")])
    def test_unknown_mood_raises(self, primary, secondary):
        with pytest.raises(InvalidMoodIdentifier):
            validate_combination(primary, secondary)

    def test_table_covers_only_known_moods(self):
        for rule in MOOD_COMBINATIONS:
            assert rule.primary != rule.secondary
            assert 0.0 <= rule.compatibility <= 1.0


class TestSuggestCombinations:
    def test_best_partners_first(self):
        suggestions = suggest_combinations("calm")
        assert [s.secondary for s in suggestions] == [MoodId.CURIOUS, MoodId.FOCUSED, MoodId.SOCIAL]

    def test_limit(self):
        assert len(suggest_combinations("social", limit=1)) == 1
        assert suggest_combinations("social", limit=0) == []

    def test_never_suggests_itself(self):
        assert all(s.secondary != MoodId.FOCUSED for s in suggest_combinations("focused", limit=10))


class TestBuildSelection:
    def test_primary_only(self):
        selection = build_selection("focused")
        assert selection.primary == MoodId.FOCUSED
        assert selection.secondary is None
        assert selection.intensity == 0.5

    def test_compatible_secondary_kept(self):
        selection = build_selection("competitive", "social", intensity=0.9)
        assert selection.secondary == MoodId.SOCIAL
        assert selection.compatibility == pytest.approx(0.8)

    def test_incompatible_secondary_dropped(self):
        selection = build_selection("calm", "competitive")
        assert selection.secondary is None
        assert selection.compatibility == pytest.approx(0.2)

    @pytest.mark.parametrize("raw,expected", [(2, 1.0), (-1, 0.0), ("0.25", 0.25), ("loud", 0.5)])
    def test_intensity_clamped(self, raw, expected):
        assert build_selection("calm", intensity=raw).intensity == pytest.approx(expected)

    def test_unknown_secondary_raises(self):
        with pytest.raises(InvalidMoodIdentifier):
            build_selection("calm", "grumpy")
