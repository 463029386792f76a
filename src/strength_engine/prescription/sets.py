"""Set count, rep range and effort (RPE/RIR) resolution.

References:
    - Zourdos et al. (2016): RIR-based RPE scale (RPE = 10 - RIR)
    - Schoenfeld et al. (2017): weekly set dose-response by training status
"""

from __future__ import annotations

from strength_engine.config import DEFAULT_CONFIG, EngineConfig
from strength_engine.math.rounding import round_half_up
from strength_engine.models.athlete import FatigueState
from strength_engine.models.enums import (
    ACCESSORY_RIR_BAND_POSITION,
    BASE_SETS_ACCESSORY,
    BASE_SETS_MAIN,
    COMPOUND_RIR_BAND_POSITION,
    DELOAD_RPE_CAP,
    GOAL_SET_MULTIPLIER,
    HYPERTROPHY_RPE_BY_TRAINING_AGE,
    ISOLATION_RPE_BUMP,
    LOW_READINESS_THRESHOLD,
    MAX_TARGET_RPE,
    MIN_ACCESSORY_REP_SPAN,
    MIN_BASELINE_SETS,
    MIN_TARGET_RPE,
    MIN_WORKING_SETS,
    SET_MODIFIER_BY_TRAINING_AGE,
    ExerciseRole,
    Goal,
    TrainingAge,
)
from strength_engine.models.exercise import Exercise
from strength_engine.models.periodization import NEUTRAL_MODIFIERS, PeriodizationModifiers

LOW_READINESS_RPE_REDUCTION = 0.5


def has_recovery_penalty(fatigue: FatigueState) -> bool:
    return fatigue.readiness <= LOW_READINESS_THRESHOLD or fatigue.missed_last_session


def resolve_set_count(
    role: ExerciseRole,
    training_age: TrainingAge,
    fatigue: FatigueState,
    goal: Goal,
    modifiers: PeriodizationModifiers = NEUTRAL_MODIFIERS,
) -> int:
    """Working sets for one exercise.

    Base 4 (main) or 3 (accessory) scaled by training age, minus one when
    readiness is low or the last session was skipped, then scaled by the
    week's set multiplier and the goal multiplier. Never below 1.
    """
    base = BASE_SETS_MAIN if role == ExerciseRole.MAIN else BASE_SETS_ACCESSORY
    baseline = max(
        MIN_BASELINE_SETS,
        round_half_up(base * SET_MODIFIER_BY_TRAINING_AGE[training_age]),
    )
    if has_recovery_penalty(fatigue):
        baseline = max(MIN_BASELINE_SETS, baseline - 1)
    scaled = baseline * modifiers.set_multiplier * GOAL_SET_MULTIPLIER.get(goal, 1.0)
    return max(MIN_WORKING_SETS, round_half_up(scaled))


def goal_rep_band(
    goal: Goal, role: ExerciseRole, config: EngineConfig = DEFAULT_CONFIG
) -> tuple[int, int]:
    main, accessory = config.rep_ranges[goal]
    return main if role == ExerciseRole.MAIN else accessory


def exercise_rep_bounds(exercise: Exercise, fallback: tuple[int, int]) -> tuple[int, int]:
    """The exercise's own rep range, filling missing bounds from ``fallback``."""
    low = exercise.rep_range_min if exercise.rep_range_min is not None else fallback[0]
    high = exercise.rep_range_max if exercise.rep_range_max is not None else max(low, fallback[1])
    return low, max(low, high)


def overlaps_main_band(exercise: Exercise, goal: Goal, config: EngineConfig = DEFAULT_CONFIG) -> bool:
    """Whether the exercise's declared rep range intersects the goal's main-lift band."""
    band = goal_rep_band(goal, ExerciseRole.MAIN, config)
    if not exercise.has_rep_bounds():
        return True
    low, high = exercise_rep_bounds(exercise, band)
    return max(low, band[0]) <= min(high, band[1])


def can_be_main_lift(exercise: Exercise, goal: Goal, config: EngineConfig = DEFAULT_CONFIG) -> bool:
    return exercise.is_main_lift_eligible and overlaps_main_band(exercise, goal, config)


def clamp_rep_range(band: tuple[int, int], exercise: Exercise) -> tuple[int, int]:
    """Goal band clamped to the exercise's bounds; invalid results fall back to the exercise's range."""
    if not exercise.has_rep_bounds():
        return band
    own = exercise_rep_bounds(exercise, band)
    low = max(band[0], own[0])
    high = min(band[1], own[1])
    if low > high:
        return own
    return low, high


def widen_accessory_range(rep_range: tuple[int, int], exercise: Exercise) -> tuple[int, int]:
    """Give accessories room to progress: at least a 2-rep span inside the exercise's range."""
    low, high = rep_range
    if high - low >= MIN_ACCESSORY_REP_SPAN or not exercise.has_rep_bounds():
        return low, high
    own_low, own_high = exercise_rep_bounds(exercise, rep_range)
    high = max(high, min(own_high, low + MIN_ACCESSORY_REP_SPAN))
    if high - low >= MIN_ACCESSORY_REP_SPAN:
        return low, high
    low = min(low, max(own_low, high - MIN_ACCESSORY_REP_SPAN))
    return low, high


def resolve_rep_range(
    exercise: Exercise,
    role: ExerciseRole,
    goal: Goal,
    config: EngineConfig = DEFAULT_CONFIG,
) -> tuple[int, int]:
    rep_range = clamp_rep_range(goal_rep_band(goal, role, config), exercise)
    if role == ExerciseRole.ACCESSORY:
        rep_range = widen_accessory_range(rep_range, exercise)
    return rep_range


def base_target_rpe(goal: Goal, training_age: TrainingAge, config: EngineConfig = DEFAULT_CONFIG) -> float:
    if goal == Goal.HYPERTROPHY:
        return HYPERTROPHY_RPE_BY_TRAINING_AGE[training_age]
    return config.target_rpe[goal]


def resolve_effort(
    goal: Goal,
    training_age: TrainingAge,
    role: ExerciseRole,
    fatigue: FatigueState,
    modifiers: PeriodizationModifiers = NEUTRAL_MODIFIERS,
    is_isolation: bool = False,
    config: EngineConfig = DEFAULT_CONFIG,
) -> tuple[float, float | None]:
    """Target RPE and, when a lifecycle band applies, target RIR.

    Without a lifecycle band the RPE is the goal baseline, eased by 0.5 at
    low readiness, bumped by 0.5 for hypertrophy isolation accessories and
    shifted by the week's offset. With a band, compounds sit near its
    low-RIR end and accessories near its high-RIR end. Deloads cap RPE at 6.

    Returns:
        (target_rpe, target_rir or None).
    """
    target_rir: float | None = None
    band = modifiers.lifecycle_rir_target
    if band is not None:
        position = (
            COMPOUND_RIR_BAND_POSITION
            if role == ExerciseRole.MAIN
            else ACCESSORY_RIR_BAND_POSITION
        )
        target_rir = band.min + position * band.span
        rpe = 10.0 - target_rir
    else:
        rpe = base_target_rpe(goal, training_age, config)
        if fatigue.readiness <= LOW_READINESS_THRESHOLD:
            rpe -= LOW_READINESS_RPE_REDUCTION
        if goal == Goal.HYPERTROPHY and is_isolation and role == ExerciseRole.ACCESSORY:
            rpe += ISOLATION_RPE_BUMP
        rpe += modifiers.rpe_offset

    if modifiers.is_deload:
        rpe = min(rpe, DELOAD_RPE_CAP)
        if target_rir is not None:
            target_rir = max(target_rir, 10.0 - rpe)
    rpe = min(MAX_TARGET_RPE, max(MIN_TARGET_RPE, rpe))
    return round(rpe, 2), target_rir
