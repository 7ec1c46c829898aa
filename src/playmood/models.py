"""Shared Pydantic models and enums used across the engine.

Records in this module are supplied by external collaborators (account
adapters, catalogue sources, the request layer).  They accept camelCase or
snake_case keys and sanitize malformed values on the way in, so the rest
of the engine can work with well-typed data and never has to probe
object shapes.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from playmood.exceptions import InvalidMoodIdentifier

# ── Enums ─────────────────────────────────────────────────────


class MoodId(str, Enum):
    """The fixed set of mood categories the engine reasons about."""

    CALM = "calm"
    COMPETITIVE = "competitive"
    CURIOUS = "curious"
    SOCIAL = "social"
    FOCUSED = "focused"


class TimeBudget(str, Enum):
    """How much time the user has for the next session."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class RecommendationCategory(str, Enum):
    """Optional catalogue slice applied before scoring."""

    TOP_RATED = "top_rated"
    UNDERRATED = "underrated"
    HIDDEN_GEMS = "hidden_gems"


# ── Sanitizers ────────────────────────────────────────────────

_TOKEN_SEPARATORS = re.compile(r"[\s_]+")


def coerce_number(value: Any, default: float = 0.0) -> float:
    """Return *value* as a finite float, or *default* when it is not numeric."""
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def coerce_non_negative(value: Any) -> float:
    """Numeric coercion that also floors negatives at zero."""
    return max(0.0, coerce_number(value))


def coerce_text(value: Any) -> str:
    """Return *value* as a string; ``None`` becomes ``""``."""
    return "" if value is None else str(value)


def coerce_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or epoch seconds; anything else is ``None``."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    return None


def normalize_token(value: Any) -> str:
    """Lower-case, trim and hyphenate a genre / mood / tag label."""
    text = str(value or "").strip().lower()
    return _TOKEN_SEPARATORS.sub("-", text)


def normalize_tokens(value: Any) -> list[str]:
    """Normalise a list of labels, dropping blanks and duplicates.

    Platform adapters send genres either as plain strings or as objects
    such as ``{"id": "Action", "description": "..."}``; both are accepted.
    """
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        value = [value]
    tokens: list[str] = []
    for raw in value:
        if isinstance(raw, dict):
            raw = raw.get("name") or raw.get("id") or raw.get("description") or ""
        token = normalize_token(raw)
        if token and token not in tokens:
            tokens.append(token)
    return tokens


def parse_mood(value: Any) -> MoodId:
    """Resolve *value* to a :class:`MoodId` or raise :class:`InvalidMoodIdentifier`."""
    if isinstance(value, MoodId):
        return value
    if isinstance(value, str):
        try:
            return MoodId(normalize_token(value))
        except ValueError:
            pass
    raise InvalidMoodIdentifier(value)


class CollaboratorModel(BaseModel):
    """Base for records that arrive as JSON from outside the engine."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ── Account / platform records ───────────────────────────────


class OwnedItem(CollaboratorModel):
    """A game in the user's library, as reported by a platform adapter."""

    id: str
    title: str = ""
    genres: list[str] = Field(default_factory=list)
    moods: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    hours_played: float | None = None
    achievements_unlocked: int = 0

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v: Any) -> str:
        return str(v) if v is not None else ""

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator("genres", "moods", "tags", mode="before")
    @classmethod
    def _tokens(cls, v: Any) -> list[str]:
        return normalize_tokens(v)

    @field_validator("hours_played", mode="before")
    @classmethod
    def _hours(cls, v: Any) -> float | None:
        if v is None:
            return None
        return coerce_non_negative(v)

    @field_validator("achievements_unlocked", mode="before")
    @classmethod
    def _achievements(cls, v: Any) -> int:
        return int(coerce_non_negative(v))

    @property
    def is_multiplayer(self) -> bool:
        return "multiplayer" in self.genres or "multiplayer" in self.tags


class SessionRecord(CollaboratorModel):
    """A single play session."""

    item_id: str | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None
    duration_minutes: float | None = None

    @field_validator("item_id", mode="before")
    @classmethod
    def _item_id(cls, v: Any) -> str | None:
        return str(v) if v is not None else None

    @field_validator("started_at", "ended_at", mode="before")
    @classmethod
    def _timestamp(cls, v: Any) -> datetime | None:
        return coerce_timestamp(v)

    @field_validator("duration_minutes", mode="before")
    @classmethod
    def _duration(cls, v: Any) -> float | None:
        if v is None:
            return None
        return coerce_non_negative(v)

    def effective_minutes(self) -> float:
        """Session length in minutes, derived from timestamps when needed."""
        if self.duration_minutes is not None:
            return self.duration_minutes
        if self.started_at is not None and self.ended_at is not None:
            try:
                seconds = (self.ended_at - self.started_at).total_seconds()
            except TypeError:  # naive vs aware timestamps
                return 0.0
            return max(0.0, seconds / 60)
        return 0.0


# ── Catalogue records ─────────────────────────────────────────


class CandidateItem(CollaboratorModel):
    """A not-yet-owned catalogue item offered for scoring."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    genres: list[str] = Field(default_factory=list)
    quality_score: float = 0.0
    popularity_score: float = 0.0
    description: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v: Any) -> str:
        return str(v) if v is not None else ""

    @field_validator("title", "description", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return coerce_text(v)

    @field_validator("genres", mode="before")
    @classmethod
    def _tokens(cls, v: Any) -> list[str]:
        return normalize_tokens(v)

    @field_validator("quality_score", "popularity_score", mode="before")
    @classmethod
    def _percent(cls, v: Any) -> float:
        return max(0.0, min(100.0, coerce_number(v)))
