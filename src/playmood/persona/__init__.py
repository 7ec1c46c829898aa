"""Persona synthesis — long-horizon play-style traits from library history."""

from playmood.persona.models import TRAIT_NAMES, PersonaProfile, PersonaSignals, PersonaTraits

__all__ = [
    "TRAIT_NAMES",
    "PersonaProfile",
    "PersonaSignals",
    "PersonaTraits",
]
