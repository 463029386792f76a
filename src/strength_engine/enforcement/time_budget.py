"""Session duration estimate and accessory trimming to fit a minutes budget.

Each set costs work time plus rest. Two accessories sharing a superset
group trade their independent rests for one shorter shared rest per
round. Main lifts are never trimmed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from strength_engine.enforcement.retention import (
    accessory_muscle_counts,
    main_covered_muscles,
    retention_score,
)
from strength_engine.math.rounding import round_half_up
from strength_engine.models.enums import (
    FALLBACK_WORK_SECONDS_ACCESSORY,
    FALLBACK_WORK_SECONDS_MAIN,
    MAX_WARMUP_WORK_SECONDS,
    MAX_WORK_SECONDS,
    MIN_WORK_SECONDS,
    REST_WARMUP,
    SECONDS_PER_REP,
    SET_SETUP_SECONDS,
    SUPERSET_SHARED_REST_FLOOR_SECONDS,
    SUPERSET_SHARED_REST_MULTIPLIER,
    ExerciseRole,
)
from strength_engine.models.workout import WorkoutExercise, WorkoutSet
from strength_engine.prescription.rest import resolve_rest_seconds

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BudgetResult:
    kept: tuple[WorkoutExercise, ...]
    removed: tuple[str, ...] = field(default_factory=tuple)
    estimated_minutes: int = 0
    note: str | None = None


# ---------------------------------------------------------------------------
# Estimation
# ---------------------------------------------------------------------------

def work_seconds(reps: int | None, fallback: float) -> float:
    """clamp(reps x 2 + 10, 20, 90), or ``fallback`` when reps are undefined."""
    if reps is None:
        return float(fallback)
    seconds = reps * SECONDS_PER_REP + SET_SETUP_SECONDS
    return float(max(MIN_WORK_SECONDS, min(MAX_WORK_SECONDS, seconds)))


def set_timing(item: WorkoutExercise, workout_set: WorkoutSet, is_warmup: bool) -> tuple[float, float]:
    """(work_seconds, rest_seconds) for one set of ``item``."""
    fallback = item.exercise.time_per_set_sec
    if fallback is None:
        fallback = FALLBACK_WORK_SECONDS_MAIN if item.is_main_lift else FALLBACK_WORK_SECONDS_ACCESSORY
    work = work_seconds(workout_set.target_reps, fallback)
    if is_warmup:
        work = min(MAX_WARMUP_WORK_SECONDS, work)

    rest = workout_set.rest_seconds
    if rest is None:
        if is_warmup or workout_set.role == ExerciseRole.WARMUP:
            rest = REST_WARMUP
        else:
            rest = resolve_rest_seconds(item.exercise, item.is_main_lift, workout_set.target_reps)
    return work, float(rest)


def shared_rest_seconds(rest_a: float, rest_b: float) -> float:
    """One rest per superset round: 60% of the longer rest, floored at 60 s.

    The floor applies even when both standalone rests are shorter.
    """
    longest = max(rest_a, rest_b)
    return float(max(SUPERSET_SHARED_REST_FLOOR_SECONDS, round_half_up(longest * SUPERSET_SHARED_REST_MULTIPLIER)))


def exercise_seconds(item: WorkoutExercise) -> float:
    """Warm-up ramp plus working sets, each with its own rest."""
    total = 0.0
    for workout_set in item.warmup_sets:
        work, rest = set_timing(item, workout_set, is_warmup=True)
        total += work + rest
    is_warmup_item = item.role == ExerciseRole.WARMUP
    for workout_set in item.sets:
        work, rest = set_timing(item, workout_set, is_warmup=is_warmup_item)
        total += work + rest
    return total


def superset_pair_seconds(first: WorkoutExercise, second: WorkoutExercise) -> float:
    """Working time for two paired accessories with one shared rest per round."""
    total = 0.0
    for item in (first, second):
        for workout_set in item.warmup_sets:
            work, rest = set_timing(item, workout_set, is_warmup=True)
            total += work + rest

    rounds = max(len(first.sets), len(second.sets))
    for index in range(rounds):
        rests = []
        for item in (first, second):
            if index < len(item.sets):
                work, rest = set_timing(item, item.sets[index], is_warmup=False)
                total += work
                rests.append(rest)
        total += shared_rest_seconds(max(rests), min(rests))
    return total


def superset_pairs(exercises: Iterable[WorkoutExercise]) -> list[tuple[WorkoutExercise, WorkoutExercise]]:
    """Groups of exactly two non-main exercises sharing a superset id."""
    groups: dict[int, list[WorkoutExercise]] = {}
    for item in exercises:
        if item.superset_group is None or item.is_main_lift or item.role == ExerciseRole.WARMUP:
            continue
        groups.setdefault(item.superset_group, []).append(item)
    return [(items[0], items[1]) for items in groups.values() if len(items) == 2]


def estimate_seconds(exercises: Sequence[WorkoutExercise]) -> float:
    pairs = superset_pairs(exercises)
    paired_ids = {item.exercise_id for pair in pairs for item in pair}
    total = sum(superset_pair_seconds(a, b) for a, b in pairs)
    total += sum(exercise_seconds(e) for e in exercises if e.exercise_id not in paired_ids)
    return total


def estimate_minutes(exercises: Sequence[WorkoutExercise]) -> int:
    """Estimated session length in whole minutes (half up)."""
    return round_half_up(estimate_seconds(exercises) / 60.0)


# ---------------------------------------------------------------------------
# Enforcement
# ---------------------------------------------------------------------------

def _trim_units(
    accessories: Sequence[WorkoutExercise],
) -> list[tuple[WorkoutExercise, ...]]:
    """Accessories grouped so a superset pair is trimmed as one unit."""
    paired = {}
    for a, b in superset_pairs(accessories):
        paired[a.exercise_id] = (a, b)
        paired[b.exercise_id] = (a, b)
    units: list[tuple[WorkoutExercise, ...]] = []
    seen: set[str] = set()
    for item in accessories:
        if item.exercise_id in seen:
            continue
        unit = paired.get(item.exercise_id, (item,))
        seen.update(e.exercise_id for e in unit)
        units.append(unit)
    return units


def _lowest_unit(
    accessories: Sequence[WorkoutExercise],
    mains: Sequence[WorkoutExercise],
) -> tuple[WorkoutExercise, ...]:
    covered = main_covered_muscles(mains)
    counts = accessory_muscle_counts(accessories)
    return min(
        _trim_units(accessories),
        key=lambda unit: (
            min(retention_score(e.exercise, covered, counts) for e in unit),
            -max(e.order_index for e in unit),
        ),
    )


def enforce_time_budget(exercises: Sequence[WorkoutExercise], budget_minutes: float) -> BudgetResult:
    """Trim accessories, lowest retention first, until the session fits.

    Main lifts and warm-up items are fixed. When the fixed items alone
    exceed the budget nothing is trimmed and the result carries a note
    telling the caller what to change.

    Args:
        exercises: Warm-up items, main lifts and accessories in session order.
        budget_minutes: Available session length.

    Returns:
        BudgetResult with the kept exercises in their original order.
    """
    estimated = estimate_minutes(exercises)
    if estimated <= budget_minutes:
        return BudgetResult(kept=tuple(exercises), estimated_minutes=estimated)

    fixed = [e for e in exercises if e.is_main_lift or e.role == ExerciseRole.WARMUP]
    fixed_minutes = estimate_minutes(fixed)
    if fixed_minutes > budget_minutes:
        note = (
            f"Main lifts alone need about {fixed_minutes} minutes, over the "
            f"{budget_minutes:g}-minute budget; this session requires more time "
            f"or fewer main lifts"
        )
        logger.warning(note)
        return BudgetResult(kept=tuple(exercises), estimated_minutes=estimated, note=note)

    mains = [e for e in exercises if e.is_main_lift]
    accessories = [e for e in exercises if not e.is_main_lift and e.role != ExerciseRole.WARMUP]
    removed: list[str] = []
    while accessories and estimated > budget_minutes:
        unit = _lowest_unit(accessories, mains)
        for item in unit:
            accessories.remove(item)
            removed.append(item.exercise_id)
        kept_ids = {e.exercise_id for e in fixed + accessories}
        estimated = estimate_minutes([e for e in exercises if e.exercise_id in kept_ids])
        logger.info(
            "Time budget: removed %s, estimate now %d/%g min",
            "+".join(e.exercise_id for e in unit),
            estimated,
            budget_minutes,
        )

    kept_ids = {e.exercise_id for e in fixed + accessories}
    return BudgetResult(
        kept=tuple(e for e in exercises if e.exercise_id in kept_ids),
        removed=tuple(removed),
        estimated_minutes=estimated,
    )
