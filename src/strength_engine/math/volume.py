"""Weekly volume accounting against per-muscle volume landmarks.

References:
    - Israetel, Hoffmann & Smith (2019): MV / MEV / MAV / MRV landmarks
    - Schoenfeld et al. (2017): weekly set dose-response, fractional
      counting of indirect (secondary muscle) sets
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable

import numpy as np
import pandas as pd

from strength_engine.config import DEFAULT_CONFIG, EngineConfig
from strength_engine.models.exercise import Exercise
from strength_engine.models.history import WorkoutHistoryEntry
from strength_engine.models.volume import (
    MesocyclePosition,
    MuscleVolumeState,
    VolumeContext,
    VolumeLandmarks,
)

logger = logging.getLogger(__name__)

_RECENT = "recent"
_PREVIOUS = "previous"
_DIRECT = "direct"
_INDIRECT = "indirect"
_COLUMNS = ["window", "kind", "muscle", "sets"]


def credited_sets_frame(
    history: Iterable[WorkoutHistoryEntry],
    catalog: Iterable[Exercise],
    now: datetime,
    config: EngineConfig = DEFAULT_CONFIG,
) -> pd.DataFrame:
    """One row per (window, kind, muscle) credit from completed history.

    Primary muscles earn one set per logged set in either window; secondary
    muscles earn ``indirect_set_multiplier`` sets, recent window only.
    Entries in the future or older than the previous window are ignored.
    """
    by_id = {e.id: e for e in catalog}
    recent_start = now - timedelta(days=config.recent_window_days)
    previous_start = now - timedelta(days=config.previous_window_days)

    rows: list[tuple[str, str, str, float]] = []
    for entry in history:
        if not entry.completed or entry.date > now:
            continue
        if entry.date >= recent_start:
            window = _RECENT
        elif entry.date >= previous_start:
            window = _PREVIOUS
        else:
            continue

        for performed in entry.exercises:
            exercise = by_id.get(performed.exercise_id)
            if exercise is None:
                logger.debug("Skipping unknown exercise %s in history", performed.exercise_id)
                continue
            set_count = float(len(performed.sets))
            if set_count == 0:
                continue
            for muscle in exercise.primary_muscles:
                rows.append((window, _DIRECT, muscle, set_count))
            if window == _RECENT:
                for muscle in exercise.secondary_muscles:
                    if muscle in exercise.primary_muscles:
                        continue
                    rows.append(
                        (window, _INDIRECT, muscle, set_count * config.indirect_set_multiplier)
                    )

    return pd.DataFrame(rows, columns=_COLUMNS)


def _sum_by_muscle(frame: pd.DataFrame, window: str, kinds: tuple[str, ...]) -> dict[str, float]:
    subset = frame[(frame["window"] == window) & (frame["kind"].isin(kinds))]
    if subset.empty:
        return {}
    totals = subset.groupby("muscle")["sets"].sum()
    return {str(muscle): float(sets) for muscle, sets in totals.items()}


def build_volume_context(
    history: Iterable[WorkoutHistoryEntry],
    catalog: Iterable[Exercise],
    now: datetime,
    mesocycle: MesocyclePosition | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> VolumeContext:
    """Aggregate history into recent / previous weekly sets per muscle.

    Both windows hold direct (primary-muscle) sets only. Secondary credit is
    tracked per muscle on the enhanced context's MuscleVolumeState.

    Args:
        history: Logged sessions (any order).
        catalog: Exercise catalog used to resolve muscles.
        now: Reference time for the 7-day and 7-14-day windows.
        mesocycle: When supplied, the context also carries a
            MuscleVolumeState for every muscle in the landmark table.
        config: Rule tables (landmarks, windows, indirect weight).

    Returns:
        A VolumeContext; enhanced only if ``mesocycle`` was given.
    """
    frame = credited_sets_frame(history, catalog, now, config)
    recent = _sum_by_muscle(frame, _RECENT, (_DIRECT,))
    previous = _sum_by_muscle(frame, _PREVIOUS, (_DIRECT,))

    if mesocycle is None:
        return VolumeContext(recent=recent, previous=previous)

    indirect = _sum_by_muscle(frame, _RECENT, (_INDIRECT,))
    muscle_volume = {
        muscle: MuscleVolumeState(
            muscle=muscle,
            weekly_direct_sets=recent.get(muscle, 0.0),
            weekly_indirect_sets=indirect.get(muscle, 0.0),
            landmarks=landmarks,
        )
        for muscle, landmarks in config.landmarks.items()
    }
    logger.debug(
        "Built enhanced volume context for week %d/%d (%d muscles with recent sets)",
        mesocycle.week,
        mesocycle.length,
        len(recent),
    )
    return VolumeContext(
        recent=recent,
        previous=previous,
        muscle_volume=muscle_volume,
        mesocycle=mesocycle,
    )


def target_volume(landmarks: VolumeLandmarks, week: int, length: int) -> float:
    """Weekly set target ramping linearly from MEV to MAV across a mesocycle.

    target = MEV + (MAV - MEV) * week / (length - 1), with ``week`` clamped
    to the block. A one-week mesocycle returns MAV outright.

    Raises:
        ValueError: If ``length`` is below 1.
    """
    if length < 1:
        raise ValueError(f"mesocycle length must be >= 1, got {length}")
    if length == 1:
        return float(landmarks.mav)
    progress = float(np.clip(week, 0, length - 1)) / (length - 1)
    return float(landmarks.mev + (landmarks.mav - landmarks.mev) * progress)


def volume_cap(muscle: str, context: VolumeContext, config: EngineConfig = DEFAULT_CONFIG) -> float | None:
    """Weekly set ceiling for ``muscle``, or None when no ceiling applies.

    Enhanced contexts use the muscle's MRV; otherwise (or for muscles
    outside the landmark table) the ceiling is a fixed multiple of last
    week's sets, and only when last week had any.
    """
    if context.muscle_volume is not None:
        state = context.muscle_volume.get(muscle)
        if state is not None:
            return float(state.landmarks.mrv)
    previous = context.previous_sets(muscle)
    if previous > 0:
        return previous * config.volume_cap_fallback_multiplier
    return None


def session_primary_sets(planned: Iterable[tuple[Exercise, int]]) -> dict[str, float]:
    """Sets this session adds to each primary muscle."""
    totals: dict[str, float] = {}
    for exercise, sets in planned:
        for muscle in exercise.primary_muscles:
            totals[muscle] = totals.get(muscle, 0.0) + sets
    return totals


def project_weekly_sets(
    context: VolumeContext, planned: Iterable[tuple[Exercise, int]]
) -> dict[str, float]:
    """Recent weekly sets plus this session's sets, for every muscle the session trains."""
    session = session_primary_sets(planned)
    return {muscle: context.recent_sets(muscle) + sets for muscle, sets in session.items()}
