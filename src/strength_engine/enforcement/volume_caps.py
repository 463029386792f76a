"""Weekly volume cap enforcement.

Projects this week's sets per muscle (recent window plus this session)
and drops accessories one at a time, lowest retention first, until no
muscle sits above its cap. Main lifts are never removed here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from strength_engine.config import DEFAULT_CONFIG, EngineConfig
from strength_engine.enforcement.retention import lowest_retention
from strength_engine.math.volume import project_weekly_sets, volume_cap
from strength_engine.models.volume import VolumeContext
from strength_engine.models.workout import WorkoutExercise

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapResult:
    kept: tuple[WorkoutExercise, ...]
    removed: tuple[str, ...] = field(default_factory=tuple)


def over_cap_muscles(
    exercises: Sequence[WorkoutExercise],
    context: VolumeContext,
    config: EngineConfig = DEFAULT_CONFIG,
) -> dict[str, tuple[float, float]]:
    """Muscle → (projected, cap) for every muscle currently above its cap."""
    projected = project_weekly_sets(context, ((e.exercise, len(e.sets)) for e in exercises))
    over: dict[str, tuple[float, float]] = {}
    for muscle, sets in projected.items():
        cap = volume_cap(muscle, context, config)
        if cap is not None and sets > cap:
            over[muscle] = (sets, cap)
    return over


def enforce_volume_caps(
    exercises: Sequence[WorkoutExercise],
    context: VolumeContext,
    config: EngineConfig = DEFAULT_CONFIG,
) -> CapResult:
    """Greedily remove accessories until every projected muscle is within its cap.

    Args:
        exercises: Prescribed main lifts and accessories, in session order.
        context: Weekly volume context for the projection and caps.
        config: Fallback cap multiplier and landmark table.

    Returns:
        CapResult with the surviving exercises (order preserved) and the
        removed ids in removal order.
    """
    mains = [e for e in exercises if e.is_main_lift]
    accessories = [e for e in exercises if not e.is_main_lift]
    removed: list[str] = []

    while accessories:
        over = over_cap_muscles(mains + accessories, context, config)
        if not over:
            break
        if not any(set(e.exercise.primary_muscles) & over.keys() for e in accessories):
            logger.info("Volume cap: over cap on %s from main lifts only", ", ".join(sorted(over)))
            break
        victim = lowest_retention(accessories, mains)
        accessories.remove(victim)
        removed.append(victim.exercise_id)
        logger.info(
            "Volume cap: removed %s (over cap: %s)",
            victim.exercise_id,
            ", ".join(f"{m} {s:.1f}>{c:.1f}" for m, (s, c) in sorted(over.items())),
        )

    kept_ids = {e.exercise_id for e in mains + accessories}
    return CapResult(
        kept=tuple(e for e in exercises if e.exercise_id in kept_ids),
        removed=tuple(removed),
    )
