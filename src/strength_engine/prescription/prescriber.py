"""Turns a selected exercise into an ordered list of load-free working sets."""

from __future__ import annotations

import logging

from strength_engine.config import DEFAULT_CONFIG, EngineConfig
from strength_engine.math.periodization import back_off_multiplier
from strength_engine.models.athlete import FatigueState
from strength_engine.models.enums import DEMOTED_MAIN_SETS, ExerciseRole, Goal, TrainingAge
from strength_engine.models.exercise import Exercise
from strength_engine.models.periodization import NEUTRAL_MODIFIERS, PeriodizationModifiers
from strength_engine.models.workout import WorkoutExercise, WorkoutSet
from strength_engine.prescription.rest import resolve_rest_seconds
from strength_engine.prescription.sets import (
    overlaps_main_band,
    resolve_effort,
    resolve_rep_range,
    resolve_set_count,
)
from strength_engine.prescription.warmup import build_warmup_ramp

logger = logging.getLogger(__name__)

DEMOTION_NOTE = "Rep range does not fit the goal's main-lift band; prescribed as accessory"


def resolve_role(
    exercise: Exercise,
    requested: ExerciseRole,
    goal: Goal,
    config: EngineConfig = DEFAULT_CONFIG,
) -> tuple[ExerciseRole, bool]:
    """Final role for ``exercise`` and whether it was demoted from MAIN."""
    if requested == ExerciseRole.MAIN and not overlaps_main_band(exercise, goal, config):
        return ExerciseRole.ACCESSORY, True
    return requested, False


def prescribe_exercise(
    exercise: Exercise,
    role: ExerciseRole,
    order_index: int,
    goal: Goal,
    training_age: TrainingAge,
    fatigue: FatigueState,
    modifiers: PeriodizationModifiers = NEUTRAL_MODIFIERS,
    set_count: int | None = None,
    superset_group: int | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> WorkoutExercise:
    """Prescribe sets, reps, effort, rest and back-off ratios for one exercise.

    A MAIN request whose rep range cannot meet the goal's main band is
    demoted to accessory treatment (3 sets, accessory rep band) unless an
    explicit ``set_count`` is given.

    Args:
        exercise: Catalog exercise.
        role: Requested role (MAIN or ACCESSORY).
        order_index: Position in the session.
        goal: Primary training goal.
        training_age: Drives set counts and warm-up ramps.
        fatigue: Per-call readiness snapshot.
        modifiers: Week-level periodization modifiers.
        set_count: Pre-planned working set count, if the selector set one.
        superset_group: Shared group id for paired accessories.
        config: Rule tables.

    Returns:
        A frozen WorkoutExercise.
    """
    final_role, demoted = resolve_role(exercise, role, goal, config)
    if set_count is None:
        if demoted:
            set_count = DEMOTED_MAIN_SETS
        else:
            set_count = resolve_set_count(final_role, training_age, fatigue, goal, modifiers)
    if demoted:
        logger.info("Demoted %s from main lift to accessory", exercise.name)

    is_main = final_role == ExerciseRole.MAIN
    low, high = resolve_rep_range(exercise, final_role, goal, config)
    rpe, rir = resolve_effort(
        goal,
        training_age,
        final_role,
        fatigue,
        modifiers,
        is_isolation=exercise.is_isolation,
        config=config,
    )
    rest = resolve_rest_seconds(exercise, is_main, low)
    back_off = (
        modifiers.back_off_multiplier
        if modifiers.back_off_multiplier is not None
        else back_off_multiplier(goal)
    )

    sets = []
    for index in range(max(1, set_count)):
        if modifiers.is_deload:
            load = back_off
        elif is_main and index > 0:
            load = back_off
        else:
            load = 1.0
        sets.append(
            WorkoutSet(
                set_index=index + 1,
                target_reps=low,
                target_rep_range=None if is_main else (low, high),
                target_rpe=rpe,
                target_rir=rir,
                rest_seconds=rest,
                role=final_role,
                load_multiplier=load,
            )
        )

    return WorkoutExercise(
        exercise=exercise,
        order_index=order_index,
        role=final_role,
        sets=tuple(sets),
        warmup_sets=build_warmup_ramp(training_age) if is_main else (),
        superset_group=superset_group,
        notes=DEMOTION_NOTE if demoted else ("Primary movement" if is_main else ""),
    )
