"""Mood inference — heuristic estimation of a player's current mood.

This package turns raw behavioural counters into a score per mood
category and keeps the per-user weight table adaptable through feedback.

Architecture
------------
1. **Feature normalisation** (`features.py`)
   - Session, genre, platform and social counters → five signed features
   - Missing data resolves to the neutral value 0

2. **Inference engine** (`inference.py`)
   - Logistic scoring of each mood from weighted feature/coefficient sums
   - Confidence from mood strength, clarity and feature consistency
   - Dominant / secondary mood selection
   - Uniform weight adaptation from prediction feedback

3. **Combinations** (`combinations.py`)
   - Primary/secondary compatibility lookups for hybrid mood selection

Limitations
-----------
- Coefficients are hand-tuned, not learned.
- Weight feedback nudges every feature equally; it does not attribute
  credit to the features that drove a wrong prediction.
"""

from playmood.mood.models import (
    FEATURE_NAMES,
    BehaviorCounters,
    CombinationCheck,
    DominantMood,
    MoodCombinationRule,
    MoodDescription,
    MoodFeedback,
    MoodInferenceResult,
    MoodSelection,
    MoodVector,
    MoodVectorValidation,
    MoodWeightTable,
    NormalizedFeatureVector,
)

__all__ = [
    "FEATURE_NAMES",
    "BehaviorCounters",
    "CombinationCheck",
    "DominantMood",
    "MoodCombinationRule",
    "MoodDescription",
    "MoodFeedback",
    "MoodInferenceResult",
    "MoodSelection",
    "MoodVector",
    "MoodVectorValidation",
    "MoodWeightTable",
    "NormalizedFeatureVector",
]
