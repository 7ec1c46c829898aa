"""Recommendation — taste profiling and exploit/explore candidate scoring.

Architecture
------------
1. **Taste profile** (`taste.py`)
   - Playtime-weighted mood and genre preferences, capped per item

2. **Scorer** (`scorer.py`)
   - Mood match, profile overlap, quality and discovery components
   - Exploitation from the best-ranked window, seeded exploration sampling
   - Title dedupe, mood narrowing, reasons and shuffled presentation
"""

from playmood.recommend.models import (
    Recommendation,
    RecommendationRequest,
    RecommendationResult,
    ScoreBreakdown,
    ScoredCandidate,
    ScoringConfig,
    TasteProfile,
)

__all__ = [
    "Recommendation",
    "RecommendationRequest",
    "RecommendationResult",
    "ScoreBreakdown",
    "ScoredCandidate",
    "ScoringConfig",
    "TasteProfile",
]
