"""Rest interval lookup keyed by role, compound status, fatigue cost and reps.

Reference:
    de Salles et al. (2009). Rest interval between sets in strength
    training. Sports Med 39(9):765-777.
"""

from __future__ import annotations

from strength_engine.models.enums import (
    COMPOUND_ACCESSORY_LOW_REP_THRESHOLD,
    HEAVY_REP_THRESHOLD,
    HIGH_FATIGUE_ISOLATION,
    HIGH_FATIGUE_MAIN,
    REST_COMPOUND_ACCESSORY,
    REST_COMPOUND_ACCESSORY_LOW_REP,
    REST_ISOLATION,
    REST_ISOLATION_HIGH_FATIGUE,
    REST_MAIN,
    REST_MAIN_HEAVY,
    REST_MAIN_HEAVY_HIGH_FATIGUE,
    REST_MAIN_HIGH_FATIGUE,
)
from strength_engine.models.exercise import Exercise

# Reps assumed when a set has no rep target
_DEFAULT_REPS_MAIN = 5
_DEFAULT_REPS_ACCESSORY = 10


def resolve_rest_seconds(exercise: Exercise, is_main_lift: bool, reps: int | None = None) -> int:
    """Rest after a working set; heavier, lower-rep work rests longer."""
    if reps is None:
        reps = _DEFAULT_REPS_MAIN if is_main_lift else _DEFAULT_REPS_ACCESSORY
    fatigue = exercise.fatigue_cost

    if is_main_lift and reps <= HEAVY_REP_THRESHOLD:
        return REST_MAIN_HEAVY_HIGH_FATIGUE if fatigue >= HIGH_FATIGUE_MAIN else REST_MAIN_HEAVY
    if is_main_lift:
        return REST_MAIN_HIGH_FATIGUE if fatigue >= HIGH_FATIGUE_MAIN else REST_MAIN
    if exercise.is_compound:
        if reps <= COMPOUND_ACCESSORY_LOW_REP_THRESHOLD:
            return REST_COMPOUND_ACCESSORY_LOW_REP
        return REST_COMPOUND_ACCESSORY
    return REST_ISOLATION_HIGH_FATIGUE if fatigue >= HIGH_FATIGUE_ISOLATION else REST_ISOLATION
