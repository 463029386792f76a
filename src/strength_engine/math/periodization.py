"""Mesocycle periodization: weekly set/effort ramps, RIR bands and deload triggers.

References:
    - Israetel, Hoffmann & Smith (2019): volume ramp MEV → MAV across a block
    - Zourdos et al. (2016): RIR-based RPE scale (RPE = 10 - RIR)
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from strength_engine.models.enums import (
    BACK_OFF_MULTIPLIER_BY_GOAL,
    BLOCK_LENGTH_WEEKS,
    DEFAULT_BACK_OFF_MULTIPLIER,
    DELOAD_BACK_OFF_MULTIPLIER,
    DELOAD_RPE_OFFSET,
    DELOAD_SET_MULTIPLIER,
    GENERIC_RPE_OFFSETS,
    LIFECYCLE_DELOAD_WEEK,
    LIFECYCLE_RIR_BANDS,
    LOW_READINESS_STREAK_FOR_DELOAD,
    LOW_READINESS_THRESHOLD,
    MESOCYCLE_SET_RAMP,
    NEUTRAL_READINESS,
    PLATEAU_SESSIONS_FOR_DELOAD,
    RPE_OFFSETS_BY_TRAINING_AGE,
    Goal,
    TrainingAge,
)
from strength_engine.models.history import WorkoutHistoryEntry, most_recent_first
from strength_engine.models.periodization import PeriodizationModifiers, RirBand


def back_off_multiplier(goal: Goal) -> float:
    """Load ratio for sets after the top set."""
    return BACK_OFF_MULTIPLIER_BY_GOAL.get(goal, DEFAULT_BACK_OFF_MULTIPLIER)


def block_progress(week: int, total_weeks: int) -> float:
    """Fraction of the accumulation block completed, in [0, 1].

    A single-week block sits at the midpoint.
    """
    total = max(1, total_weeks)
    if total <= 1:
        return 0.5
    return float(np.clip(week / (total - 1), 0.0, 1.0))


def _rpe_offset(progress: float, training_age: TrainingAge | None) -> float:
    if training_age is None:
        for upper, offset in GENERIC_RPE_OFFSETS:
            if progress <= upper:
                return offset
        return GENERIC_RPE_OFFSETS[-1][1]

    early, middle, late = RPE_OFFSETS_BY_TRAINING_AGE[training_age]
    if progress <= 0.25:
        return early
    if progress <= 0.75:
        return middle
    return late


def periodization_for_week(
    week: int,
    total_weeks: int,
    goal: Goal,
    training_age: TrainingAge | None = None,
    is_deload: bool = False,
) -> PeriodizationModifiers:
    """Modifiers for a zero-indexed week of an accumulation block.

    Sets ramp from 1.0x to 1.3x across the block and RPE offsets climb from
    conservative to aggressive. A deload halves sets, drops RPE by 2 and
    eases back-off sets to 75%.

    Args:
        week: Zero-indexed week within the accumulation block.
        total_weeks: Accumulation weeks (excluding any deload).
        goal: Primary goal, selects the standard back-off ratio.
        training_age: Selects training-age RPE offsets; None uses the
            generic ramp.
        is_deload: Whether this is the deload week.

    Returns:
        PeriodizationModifiers for the week.
    """
    if is_deload:
        return PeriodizationModifiers(
            set_multiplier=DELOAD_SET_MULTIPLIER,
            rpe_offset=DELOAD_RPE_OFFSET,
            back_off_multiplier=DELOAD_BACK_OFF_MULTIPLIER,
            is_deload=True,
        )

    progress = block_progress(week, total_weeks)
    return PeriodizationModifiers(
        set_multiplier=1.0 + MESOCYCLE_SET_RAMP * progress,
        rpe_offset=_rpe_offset(progress, training_age),
        back_off_multiplier=back_off_multiplier(goal),
        is_deload=False,
    )


def modifiers_for_block_week(
    week_in_block: int,
    goal: Goal,
    training_age: TrainingAge | None = None,
) -> PeriodizationModifiers:
    """Modifiers for a fixed 4-week block (weeks 1-3 accumulate, week 4 deloads).

    Raises:
        ValueError: If ``week_in_block`` is below 1.
    """
    if week_in_block < 1:
        raise ValueError(f"week_in_block is 1-based, got {week_in_block}")
    week_index = min(week_in_block - 1, BLOCK_LENGTH_WEEKS - 1)
    is_deload = week_index >= BLOCK_LENGTH_WEEKS - 1
    return periodization_for_week(
        week=min(week_index, BLOCK_LENGTH_WEEKS - 2),
        total_weeks=BLOCK_LENGTH_WEEKS - 1,
        goal=goal,
        training_age=training_age,
        is_deload=is_deload,
    )


def lifecycle_rir_band(week: int) -> RirBand:
    """RIR band for a 1-based mesocycle week; weeks past the table use the deload band."""
    if week < 1:
        raise ValueError(f"mesocycle week is 1-based, got {week}")
    low, high = LIFECYCLE_RIR_BANDS[min(week, LIFECYCLE_DELOAD_WEEK)]
    return RirBand(min=low, max=high)


def should_deload(history: Sequence[WorkoutHistoryEntry]) -> bool:
    """Whether accumulated fatigue or stagnation warrants a deload.

    Triggers on a streak of 4 sessions at readiness <= 2, or on 5 completed
    sessions in which total reps never improved session over session.
    """
    if len(history) < 2:
        return False

    chronological = most_recent_first(history)[::-1]

    streak = chronological[-LOW_READINESS_STREAK_FOR_DELOAD:]
    if len(streak) >= LOW_READINESS_STREAK_FOR_DELOAD and all(
        (e.readiness if e.readiness is not None else NEUTRAL_READINESS) <= LOW_READINESS_THRESHOLD
        for e in streak
    ):
        return True

    window = chronological[-PLATEAU_SESSIONS_FOR_DELOAD:]
    if len(window) < PLATEAU_SESSIONS_FOR_DELOAD or not all(e.completed for e in window):
        return False
    totals = np.array([e.total_reps() for e in window], dtype=float)
    return not bool(np.any(np.diff(totals) > 0))
