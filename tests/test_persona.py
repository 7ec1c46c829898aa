"""Tests for persona synthesis."""

from __future__ import annotations

from datetime import datetime

import pytest

from playmood.models import OwnedItem, SessionRecord
from playmood.persona.models import PersonaSignals, PersonaTraits
from playmood.persona.synthesizer import build_signals, build_traits, synthesize_persona


class TestEmptyHistory:
    def test_signals_default(self):
        signals = build_signals([], [])
        assert signals.genre_affinity == {}
        assert signals.completion_rate == 0.0
        assert signals.session_pattern == 0.0
        assert signals.playtime_distribution == []
        assert signals.multiplayer_ratio == 0.0

    def test_traits_default(self):
        assert build_traits(build_signals(None, None)) == PersonaTraits()

    def test_profile_default(self):
        profile = synthesize_persona([], [])
        assert profile.item_count == 0
        assert profile.session_count == 0
        assert profile.dominant_traits == []


class TestSignals:
    def test_aggregates(self, owned_items):
        sessions = [{"durationMinutes": 90}, {"durationMinutes": 270}]
        signals = build_signals(owned_items, sessions)
        assert signals.genre_affinity == {
            "rpg": 100.0,
            "strategy": 100.0,
            "puzzle": 2.0,
            "indie": 2.0,
            "sports": 1.0,  # unplayed item counts once
        }
        assert signals.completion_rate == pytest.approx(1 / 3)
        assert signals.session_pattern == pytest.approx(180.0)
        assert signals.playtime_distribution == [100.0, 2.0, 0.0]
        assert signals.multiplayer_ratio == pytest.approx(1 / 3)

    def test_session_length_from_timestamps(self):
        session = SessionRecord(
            started_at=datetime(2026, 3, 1, 20, 0),
            ended_at=datetime(2026, 3, 1, 21, 30),
        )
        assert build_signals([], [session]).session_pattern == pytest.approx(90.0)

    def test_iso_string_timestamps(self):
        session = {"startedAt": "2026-03-01T20:00:00Z", "endedAt": "2026-03-01T21:30:00Z"}
        assert build_signals([], [session]).session_pattern == pytest.approx(90.0)

    def test_unparseable_timestamp_is_dropped(self):
        signals = build_signals([], [{"startedAt": "not-a-date", "durationMinutes": 30}])
        assert signals.session_pattern == pytest.approx(30.0)

    @pytest.mark.parametrize("value", ["not-a-date", 10**30, True, {"at": 1}, None])
    def test_malformed_timestamps_become_none(self, value):
        session = SessionRecord.model_validate({"itemId": 7, "startedAt": value, "endedAt": value})
        assert session.item_id == "7"
        assert session.started_at is None
        assert session.effective_minutes() == 0.0

    def test_negative_playtime_sanitised(self):
        item = OwnedItem(id="x", genres=["rpg"], hours_played=-40)
        assert item.hours_played == 0.0
        assert build_signals([item], []).genre_affinity == {"rpg": 0.0}

    def test_accepts_raw_mappings(self):
        signals = build_signals([{"id": 1, "genres": [{"id": "Action"}], "hoursPlayed": "12"}], [])
        assert signals.genre_affinity == {"action": 12.0}


class TestTraits:
    def test_traits_from_history(self, owned_items):
        sessions = [{"durationMinutes": 90}, {"durationMinutes": 270}]
        traits = build_traits(build_signals(owned_items, sessions))
        assert traits.explorer == pytest.approx(0.5)
        assert traits.specialist == pytest.approx(100 / 205)
        assert traits.competitor == pytest.approx(1 / 3)
        assert traits.completionist == pytest.approx(1 / 3)
        assert traits.strategist == 1.0
        assert traits.adventurer == pytest.approx(2 / 3)

    def test_explorer_saturates(self):
        signals = PersonaSignals(genre_affinity={f"g{i}": 1.0 for i in range(25)})
        assert build_traits(signals).explorer == 1.0

    def test_strategist_saturates_at_three_hours(self):
        assert build_traits(PersonaSignals(session_pattern=600)).strategist == 1.0
        assert build_traits(PersonaSignals(session_pattern=90)).strategist == pytest.approx(0.5)

    def test_specialist_zero_without_playtime(self):
        signals = PersonaSignals(genre_affinity={"rpg": 0.0, "puzzle": 0.0})
        assert build_traits(signals).specialist == 0.0

    def test_all_traits_bounded(self, owned_items):
        traits = build_traits(build_signals(owned_items * 20, [{"durationMinutes": 10_000}]))
        assert all(0.0 <= v <= 1.0 for v in traits.as_dict().values())


class TestProfile:
    def test_dominant_traits(self, owned_items):
        profile = synthesize_persona(owned_items, [{"durationMinutes": 200}])
        assert profile.dominant_traits == ["strategist", "adventurer"]
        assert profile.item_count == 3
        assert profile.session_count == 1

    def test_dominant_ties_follow_declared_order(self):
        traits = PersonaTraits(competitor=0.5, explorer=0.5, adventurer=0.5)
        assert traits.dominant() == ["explorer", "competitor"]
