"""Stimulus-recovery-adaptation (SRA) warnings for today's target muscles.

Reference:
    Israetel, Hoffmann & Smith (2019). Scientific Principles of
    Hypertrophy Training: muscle-specific recovery windows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Mapping

from strength_engine.math.rounding import round_half_up
from strength_engine.models.advisory import SraWarning
from strength_engine.models.enums import FULL_RECOVERY_PERCENT
from strength_engine.models.exercise import Exercise
from strength_engine.models.history import WorkoutHistoryEntry
from strength_engine.models.volume import DEFAULT_VOLUME_LANDMARKS, VolumeLandmarks

logger = logging.getLogger(__name__)

_SECONDS_PER_HOUR = 3600.0


@dataclass(frozen=True)
class MuscleRecoveryState:
    muscle: str
    hours_since: float | None
    sra_hours: float
    recovery_percent: int

    @property
    def is_recovered(self) -> bool:
        return self.recovery_percent >= FULL_RECOVERY_PERCENT


def last_trained(
    history: Iterable[WorkoutHistoryEntry],
    catalog: Iterable[Exercise],
    now: datetime,
) -> dict[str, datetime]:
    """Most recent completed session date per primary muscle, ignoring future entries."""
    by_id = {e.id: e for e in catalog}
    latest: dict[str, datetime] = {}
    for entry in history:
        if not entry.completed or entry.date > now:
            continue
        for performed in entry.exercises:
            exercise = by_id.get(performed.exercise_id)
            if exercise is None:
                continue
            for muscle in exercise.primary_muscles:
                if muscle not in latest or entry.date > latest[muscle]:
                    latest[muscle] = entry.date
    return latest


def build_recovery_map(
    history: Iterable[WorkoutHistoryEntry],
    catalog: Iterable[Exercise],
    now: datetime,
    landmarks: Mapping[str, VolumeLandmarks] = DEFAULT_VOLUME_LANDMARKS,
) -> dict[str, MuscleRecoveryState]:
    """Recovery state for every muscle in the landmark table.

    recovery_percent = min(100, round(hours_since / sra_hours x 100));
    a muscle never trained counts as fully recovered.
    """
    latest = last_trained(history, catalog, now)
    states = {}
    for muscle, landmark in landmarks.items():
        trained_at = latest.get(muscle)
        hours_since = None
        percent = FULL_RECOVERY_PERCENT
        if trained_at is not None:
            hours_since = (now - trained_at).total_seconds() / _SECONDS_PER_HOUR
            percent = min(
                FULL_RECOVERY_PERCENT,
                round_half_up(hours_since / landmark.sra_hours * FULL_RECOVERY_PERCENT),
            )
        states[muscle] = MuscleRecoveryState(
            muscle=muscle,
            hours_since=hours_since,
            sra_hours=float(landmark.sra_hours),
            recovery_percent=percent,
        )
    return states


def generate_sra_warnings(
    history: Iterable[WorkoutHistoryEntry],
    catalog: Iterable[Exercise],
    target_muscles: Iterable[str],
    now: datetime,
    landmarks: Mapping[str, VolumeLandmarks] = DEFAULT_VOLUME_LANDMARKS,
) -> tuple[SraWarning, ...]:
    """Warnings for target muscles still inside their recovery window.

    Args:
        history: Logged sessions.
        catalog: Exercise catalog used to resolve muscles.
        target_muscles: Primary muscles trained by the emerging plan.
        now: Reference time.
        landmarks: Per-muscle recovery windows.

    Returns:
        One SraWarning per under-recovered muscle, in target order.
    """
    recovery = build_recovery_map(history, catalog, now, landmarks)
    warnings = []
    for muscle in dict.fromkeys(target_muscles):
        state = recovery.get(muscle)
        if state is None or state.hours_since is None or state.is_recovered:
            continue
        warnings.append(
            SraWarning(
                muscle=muscle,
                hours_since=round(state.hours_since, 1),
                sra_hours=state.sra_hours,
                recovery_percent=state.recovery_percent,
            )
        )
    if warnings:
        logger.info(
            "Under-recovered: %s",
            ", ".join(f"{w.muscle} ({w.recovery_percent}%)" for w in warnings),
        )
    return tuple(warnings)


def sra_note(warnings: Iterable[SraWarning]) -> str | None:
    """Plan note listing under-recovered muscles, or None when all are recovered."""
    parts = [f"{w.muscle} ({w.recovery_percent}%)" for w in warnings]
    if not parts:
        return None
    return "Under-recovered: " + ", ".join(parts)
