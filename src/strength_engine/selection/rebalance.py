"""Full-body soft rebalancing of set totals across push / pull / lower buckets.

A post-hoc fairness pass, not a hard filter: while the largest bucket's
total exceeds ``ratio`` times the smallest non-zero bucket's total, one set
moves from the largest bucket's biggest exercise to the smallest bucket's
smallest exercise. Either side may be missing (donors at the 1-set floor,
receivers at the ceiling); the pass stops only when both are.
"""

from __future__ import annotations

import logging
from typing import Mapping

from strength_engine.models.enums import (
    BALANCED_BUCKETS,
    BUCKET_IMBALANCE_RATIO,
    MIN_WORKING_SETS,
    PATTERN_BUCKETS,
    REBALANCE_MAX_ITERATIONS,
    MovementBucket,
)
from strength_engine.models.exercise import Exercise

logger = logging.getLogger(__name__)


def balance_bucket(exercise: Exercise) -> MovementBucket | None:
    """The first push / pull / lower bucket among the exercise's patterns."""
    for pattern in exercise.movement_patterns:
        bucket = PATTERN_BUCKETS[pattern]
        if bucket in BALANCED_BUCKETS:
            return bucket
    return None


def bucket_totals(
    set_targets: Mapping[str, int], exercises: Mapping[str, Exercise]
) -> dict[MovementBucket, int]:
    totals = {bucket: 0 for bucket in BALANCED_BUCKETS}
    for exercise_id, sets in set_targets.items():
        bucket = balance_bucket(exercises[exercise_id])
        if bucket is not None:
            totals[bucket] += sets
    return totals


def rebalance_full_body(
    set_targets: Mapping[str, int],
    exercises: Mapping[str, Exercise],
    max_sets: int,
    ratio: float = BUCKET_IMBALANCE_RATIO,
    max_iterations: int = REBALANCE_MAX_ITERATIONS,
) -> dict[str, int]:
    """Nudge per-exercise set targets until no bucket dominates.

    Args:
        set_targets: Exercise id → planned working sets.
        exercises: Exercise id → catalog exercise for every key of set_targets.
        max_sets: Per-exercise ceiling a receiving exercise may not exceed.
        ratio: Largest bucket may be at most ``ratio`` x the smallest non-zero one.
        max_iterations: Guard against oscillation.

    Returns:
        A new id → sets mapping; the input is not modified.
    """
    targets = dict(set_targets)
    members: dict[MovementBucket, list[str]] = {bucket: [] for bucket in BALANCED_BUCKETS}
    for exercise_id in targets:
        bucket = balance_bucket(exercises[exercise_id])
        if bucket is not None:
            members[bucket].append(exercise_id)

    for _ in range(max_iterations):
        totals = bucket_totals(targets, exercises)
        nonzero = {b: t for b, t in totals.items() if t > 0}
        if len(nonzero) < 2:
            break
        largest = max(nonzero, key=lambda b: (nonzero[b], -b.value))
        smallest = min(nonzero, key=lambda b: (nonzero[b], b.value))
        if nonzero[largest] <= ratio * nonzero[smallest]:
            break

        donors = [i for i in members[largest] if targets[i] > MIN_WORKING_SETS]
        receivers = [i for i in members[smallest] if targets[i] < max_sets]
        if not donors and not receivers:
            logger.debug("No donor or receiver left; stopping rebalance")
            break

        if donors:
            donor = max(donors, key=lambda i: (targets[i], i))
            targets[donor] -= 1
            logger.debug("Moved one set out of %s (%s)", largest.name, donor)
        if receivers:
            receiver = min(receivers, key=lambda i: (targets[i], i))
            targets[receiver] += 1
            logger.debug("Moved one set into %s (%s)", smallest.name, receiver)

    return targets
