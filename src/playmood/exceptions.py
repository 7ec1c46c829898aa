"""Explicit failure conditions raised by the engine.

Everything else (missing counters, NaN playtime, out-of-range scores) is
sanitized where it enters the engine, so these are the only errors a
caller needs to handle.
"""

from __future__ import annotations

from typing import Any


class PlaymoodError(Exception):
    """Base class for engine errors."""


class InvalidMoodIdentifier(PlaymoodError, ValueError):
    """A mood identifier outside the fixed mood set was supplied."""

    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(f"Unknown mood identifier: {value!r}")


class DegenerateWeightTable(PlaymoodError, ValueError):
    """A weight table whose weights sum to zero cannot be renormalised.

    The safe recovery is to fall back to the default weight table.
    """

    def __init__(self, weights: dict[str, float]) -> None:
        self.weights = dict(weights)
        super().__init__(f"Weight table cannot be normalised: {self.weights!r}")
