"""playmood — mood- and persona-aware game recommendation engine."""

from playmood.engine import MoodPersonaEngine
from playmood.exceptions import DegenerateWeightTable, InvalidMoodIdentifier, PlaymoodError
from playmood.models import CandidateItem, MoodId, OwnedItem, SessionRecord

__version__ = "0.1.0"

__all__ = [
    "CandidateItem",
    "DegenerateWeightTable",
    "InvalidMoodIdentifier",
    "MoodId",
    "MoodPersonaEngine",
    "OwnedItem",
    "PlaymoodError",
    "SessionRecord",
]
