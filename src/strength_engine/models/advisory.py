"""Read-only advisory outputs: recovery warnings and substitution suggestions."""

from __future__ import annotations

from dataclasses import dataclass, field

from strength_engine.models.exercise import Exercise


@dataclass(frozen=True)
class SraWarning:
    """A muscle targeted today that has not finished recovering."""

    muscle: str
    hours_since: float
    sra_hours: float
    recovery_percent: int


@dataclass(frozen=True)
class SubstitutionCandidate:
    exercise: Exercise
    score: float


@dataclass(frozen=True)
class SubstitutionSuggestion:
    exercise_id: str
    reason: str
    alternatives: tuple[SubstitutionCandidate, ...] = field(default_factory=tuple)
