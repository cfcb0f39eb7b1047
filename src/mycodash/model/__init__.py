"""Data model for agent status replies."""

from .snapshot import (
    UNKNOWN_PERSONA,
    Baseline,
    Metrics,
    PersonaOverride,
    PersonaOverrideList,
    Policy,
    StatusSnapshot,
)

__all__ = [
    "UNKNOWN_PERSONA",
    "Baseline",
    "Metrics",
    "PersonaOverride",
    "PersonaOverrideList",
    "Policy",
    "StatusSnapshot",
]
