"""Warm-up ramp sets for main lifts and single-set warm-up exercises."""

from __future__ import annotations

from strength_engine.models.enums import (
    REST_WARMUP,
    WARMUP_EXERCISE_REPS,
    WARMUP_RAMP_BEGINNER,
    WARMUP_RAMP_DEFAULT,
    ExerciseRole,
    TrainingAge,
)
from strength_engine.models.exercise import Exercise
from strength_engine.models.workout import WorkoutExercise, WorkoutSet


def build_warmup_ramp(training_age: TrainingAge) -> tuple[WorkoutSet, ...]:
    """Ramp-up sets preceding a main lift's first working set.

    Beginners take two ramp sets (60%, 80%); everyone else three (50%, 70%, 85%).
    """
    ramp = WARMUP_RAMP_BEGINNER if training_age == TrainingAge.BEGINNER else WARMUP_RAMP_DEFAULT
    return tuple(
        WorkoutSet(
            set_index=index,
            target_reps=reps,
            rest_seconds=rest,
            role=ExerciseRole.WARMUP,
            load_multiplier=fraction,
        )
        for index, (fraction, reps, rest) in enumerate(ramp, start=1)
    )


def build_warmup_exercise(exercise: Exercise, order_index: int) -> WorkoutExercise:
    """A mobility / prehab drill performed once before the session."""
    return WorkoutExercise(
        exercise=exercise,
        order_index=order_index,
        role=ExerciseRole.WARMUP,
        sets=(
            WorkoutSet(
                set_index=1,
                target_reps=WARMUP_EXERCISE_REPS,
                rest_seconds=REST_WARMUP,
                role=ExerciseRole.WARMUP,
            ),
        ),
        notes="Warmup / prep",
    )
