"""Shared pytest fixtures."""

from __future__ import annotations

import logging
import random

import pytest
import structlog

from playmood.config import Settings
from playmood.engine import MoodPersonaEngine
from playmood.models import CandidateItem, OwnedItem
from playmood.mood.inference import MoodInference
from playmood.mood.models import NormalizedFeatureVector
from playmood.recommend.scorer import RecommendationScorer


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    # Captured streams are closed between tests; keep structlog off them.
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
        cache_logger_on_first_use=False,
    )
    monkeypatch.setattr("playmood.main.setup_logging", lambda *args, **kwargs: None)


@pytest.fixture
def calm_features() -> NormalizedFeatureVector:
    return NormalizedFeatureVector(
        engagement_volatility=-0.8,
        challenge_seeking=-0.3,
        social_openness=-0.2,
        exploration_bias=-0.1,
        focus_stability=0.9,
    )


@pytest.fixture
def neutral_features() -> NormalizedFeatureVector:
    return NormalizedFeatureVector()


@pytest.fixture
def inference() -> MoodInference:
    return MoodInference()


@pytest.fixture
def settings() -> Settings:
    return Settings(random_seed=11)


@pytest.fixture
def engine(settings) -> MoodPersonaEngine:
    return MoodPersonaEngine(settings)


@pytest.fixture
def scorer() -> RecommendationScorer:
    return RecommendationScorer(rng=random.Random(42))


@pytest.fixture
def owned_items() -> list[OwnedItem]:
    return [
        OwnedItem(
            id="1",
            title="Divinity: Original Sin 2",
            genres=["RPG", "Strategy"],
            moods=["curious"],
            hours_played=100,
            achievements_unlocked=3,
        ),
        OwnedItem(id="2", title="Tetris Effect", genres=["Puzzle", "Indie"], hours_played=2),
        OwnedItem(id="3", title="Rocket League", genres=["Sports"], tags=["Multiplayer"]),
    ]


@pytest.fixture
def small_pool() -> list[CandidateItem]:
    return [
        CandidateItem(id="10", title="Dota 2", genres=["moba", "multiplayer"], quality_score=82, popularity_score=85),
        CandidateItem(id="11", title="Baba Is You", genres=["puzzle", "indie"], quality_score=97, popularity_score=20),
        CandidateItem(id="12", title="Counter-Strike 2", genres=["fps"], quality_score=88, popularity_score=90),
        CandidateItem(id="13", title="Stardew Valley", genres=["simulation", "indie"], quality_score=80, popularity_score=25),
        CandidateItem(id="14", title="Hades", genres=["action", "roguelike"], quality_score=98, popularity_score=80),
    ]


def _make_pool(n: int, genres: list[str] | None = None) -> list[CandidateItem]:
    return [
        CandidateItem(
            id=f"c{i}",
            title=f"Game {i}",
            genres=genres or ["action"],
            quality_score=100 - i,
            popularity_score=50,
        )
        for i in range(n)
    ]


@pytest.fixture
def make_pool():
    """Factory: *n* candidates with distinct titles and strictly decreasing quality."""
    return _make_pool


@pytest.fixture
def large_pool() -> list[CandidateItem]:
    return _make_pool(30)
