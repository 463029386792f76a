"""Accessory retention scoring shared by the volume-cap and time-budget trims.

An accessory is worth keeping when it is cheap in fatigue and covers
muscles no main lift reaches; it is worth less when other accessories
already hit the same muscles.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Sequence

from strength_engine.models.exercise import Exercise
from strength_engine.models.workout import WorkoutExercise

UNCOVERED_MUSCLE_WEIGHT = 2


def main_covered_muscles(main_lifts: Iterable[WorkoutExercise]) -> frozenset[str]:
    return frozenset(m for item in main_lifts for m in item.exercise.primary_muscles)


def accessory_muscle_counts(accessories: Iterable[WorkoutExercise]) -> Counter:
    """How many of the given accessories list each primary muscle."""
    counts: Counter = Counter()
    for item in accessories:
        counts.update(set(item.exercise.primary_muscles))
    return counts


def retention_score(
    exercise: Exercise,
    main_covered: frozenset[str],
    accessory_counts: Counter,
) -> float:
    """fatigue_cost + 2 x uncovered primaries - sum(max(0, count - 1)).

    ``accessory_counts`` includes the exercise itself, so a muscle only
    it covers contributes no redundancy penalty.
    """
    primary = set(exercise.primary_muscles)
    uncovered = len(primary - main_covered)
    redundancy = sum(max(0, accessory_counts[m] - 1) for m in primary)
    return exercise.fatigue_cost + UNCOVERED_MUSCLE_WEIGHT * uncovered - redundancy


def lowest_retention(
    accessories: Sequence[WorkoutExercise],
    main_lifts: Iterable[WorkoutExercise],
) -> WorkoutExercise:
    """The accessory to drop next; ties go to the one placed later in the session.

    Raises:
        ValueError: If ``accessories`` is empty.
    """
    if not accessories:
        raise ValueError("no accessories to score")
    covered = main_covered_muscles(main_lifts)
    counts = accessory_muscle_counts(accessories)
    return min(
        accessories,
        key=lambda item: (retention_score(item.exercise, covered, counts), -item.order_index),
    )
