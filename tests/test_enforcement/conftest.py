"""Builders for hand-made prescribed exercises with exact set timings."""

from __future__ import annotations

from typing import Callable

import pytest

from strength_engine.models.enums import ExerciseRole
from strength_engine.models.workout import WorkoutExercise, WorkoutSet


def make_item(
    exercise,
    order_index: int,
    role: ExerciseRole = ExerciseRole.ACCESSORY,
    sets: int = 3,
    reps: int | None = 10,
    rest: int | None = 60,
    superset_group: int | None = None,
) -> WorkoutExercise:
    return WorkoutExercise(
        exercise=exercise,
        order_index=order_index,
        role=role,
        sets=tuple(
            WorkoutSet(set_index=i + 1, target_reps=reps, rest_seconds=rest, role=role)
            for i in range(sets)
        ),
        superset_group=superset_group,
    )


@pytest.fixture
def item_factory() -> Callable[..., WorkoutExercise]:
    """Usage: item_factory(catalog_by_id["bench_press"], 0, ExerciseRole.MAIN, sets=4)"""
    return make_item
