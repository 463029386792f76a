"""Logged training history: read-only input ordered by recency."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Mapping

from strength_engine.models.enums import BodyPart, SessionIntent, SessionStatus


def _check_readiness(value: int | None) -> None:
    if value is not None and not 1 <= value <= 5:
        raise ValueError(f"readiness must be 1-5, got {value}")


def _check_pain_flags(flags: Mapping[BodyPart, int]) -> None:
    for part, severity in flags.items():
        if not 0 <= severity <= 3:
            raise ValueError(f"pain severity for {part.value} must be 0-3, got {severity}")


@dataclass(frozen=True)
class SetLog:
    """One performed set."""

    reps: int
    rpe: float | None = None
    load: float | None = None


@dataclass(frozen=True)
class PerformedExercise:
    exercise_id: str
    sets: tuple[SetLog, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class WorkoutHistoryEntry:
    """A past session as logged by the user."""

    date: datetime
    status: SessionStatus = SessionStatus.COMPLETED
    exercises: tuple[PerformedExercise, ...] = field(default_factory=tuple)
    readiness: int | None = None
    pain_flags: Mapping[BodyPart, int] = field(default_factory=dict)
    soreness_notes: str = ""
    intent: SessionIntent | None = None

    def __post_init__(self) -> None:
        _check_readiness(self.readiness)
        _check_pain_flags(self.pain_flags)

    @property
    def completed(self) -> bool:
        return self.status == SessionStatus.COMPLETED

    def exercise_ids(self) -> frozenset[str]:
        return frozenset(e.exercise_id for e in self.exercises)

    def total_reps(self) -> int:
        return sum(s.reps for e in self.exercises for s in e.sets)


@dataclass(frozen=True)
class SessionCheckIn:
    """Pre-session self report. Overrides history for readiness and pain.

    ``pain_flags`` of None means the user did not answer; an empty mapping
    means no pain today.
    """

    date: datetime
    readiness: int
    pain_flags: Mapping[BodyPart, int] | None = None
    notes: str = ""

    def __post_init__(self) -> None:
        _check_readiness(self.readiness)
        if self.pain_flags is not None:
            _check_pain_flags(self.pain_flags)


def most_recent_first(
    history: Iterable[WorkoutHistoryEntry],
) -> tuple[WorkoutHistoryEntry, ...]:
    """Return history sorted newest first without touching the caller's sequence."""
    return tuple(sorted(history, key=lambda entry: entry.date, reverse=True))


def completed_most_recent_first(
    history: Iterable[WorkoutHistoryEntry],
) -> tuple[WorkoutHistoryEntry, ...]:
    return tuple(e for e in most_recent_first(history) if e.completed)
