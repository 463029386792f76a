"""Generated session output: sets, exercises and the assembled plan."""

from __future__ import annotations

from dataclasses import dataclass, field

from strength_engine.models.enums import ExerciseRole
from strength_engine.models.exercise import Exercise


@dataclass(frozen=True)
class WorkoutSet:
    """A single prescribed set.

    Targets are load-free: ``load_multiplier`` is the ratio of the top
    set's load this set should use (1.0 for the top set).
    """

    set_index: int
    target_reps: int | None
    target_rep_range: tuple[int, int] | None = None
    target_rpe: float | None = None
    target_rir: float | None = None
    rest_seconds: int | None = None
    role: ExerciseRole = ExerciseRole.ACCESSORY
    load_multiplier: float = 1.0


@dataclass(frozen=True)
class WorkoutExercise:
    exercise: Exercise
    order_index: int
    role: ExerciseRole
    sets: tuple[WorkoutSet, ...] = field(default_factory=tuple)
    warmup_sets: tuple[WorkoutSet, ...] = field(default_factory=tuple)
    superset_group: int | None = None
    notes: str = ""

    @property
    def is_main_lift(self) -> bool:
        return self.role == ExerciseRole.MAIN

    @property
    def exercise_id(self) -> str:
        return self.exercise.id


@dataclass(frozen=True)
class WorkoutPlan:
    """Final artifact of a generation call."""

    warmup: tuple[WorkoutExercise, ...] = field(default_factory=tuple)
    main_lifts: tuple[WorkoutExercise, ...] = field(default_factory=tuple)
    accessories: tuple[WorkoutExercise, ...] = field(default_factory=tuple)
    estimated_minutes: int = 0
    notes: tuple[str, ...] = field(default_factory=tuple)

    def all_exercises(self) -> tuple[WorkoutExercise, ...]:
        return self.warmup + self.main_lifts + self.accessories

    def exercise_ids(self) -> tuple[str, ...]:
        return tuple(e.exercise_id for e in self.main_lifts + self.accessories)
