"""Selection output: chosen ids, per-exercise set plan and rationale."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from strength_engine.models.enums import HardFilter, ScoreComponent, SelectionStep


@dataclass(frozen=True)
class RationaleEntry:
    """Why one exercise was chosen."""

    score: float
    components: Mapping[ScoreComponent, float]
    hard_filters: tuple[tuple[HardFilter, bool], ...]
    step: SelectionStep


@dataclass(frozen=True)
class MuscleVolumePlan:
    planned_sets: float
    target_sets: float | None = None


@dataclass(frozen=True)
class SelectionOutput:
    """Chosen exercises and their rationale.

    Every id in ``main_lift_ids`` and ``accessory_ids`` appears exactly once
    in ``selected_exercise_ids``; the two groups are disjoint.
    """

    selected_exercise_ids: tuple[str, ...] = field(default_factory=tuple)
    main_lift_ids: tuple[str, ...] = field(default_factory=tuple)
    accessory_ids: tuple[str, ...] = field(default_factory=tuple)
    per_exercise_set_targets: Mapping[str, int] = field(default_factory=dict)
    volume_plan_by_muscle: Mapping[str, MuscleVolumePlan] = field(default_factory=dict)
    rationale: Mapping[str, RationaleEntry] = field(default_factory=dict)
    rejected: Mapping[str, tuple[HardFilter, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        mains = set(self.main_lift_ids)
        accessories = set(self.accessory_ids)
        if mains & accessories:
            raise ValueError(f"ids selected as both main and accessory: {sorted(mains & accessories)}")
        if len(self.selected_exercise_ids) != len(set(self.selected_exercise_ids)):
            raise ValueError("selected_exercise_ids contains duplicates")
        if set(self.selected_exercise_ids) != mains | accessories:
            raise ValueError("selected_exercise_ids must equal main_lift_ids + accessory_ids")

    def without(self, removed_ids: frozenset[str] | set[str]) -> SelectionOutput:
        """Copy of this output with ``removed_ids`` dropped everywhere."""
        if not removed_ids:
            return self
        return SelectionOutput(
            selected_exercise_ids=tuple(i for i in self.selected_exercise_ids if i not in removed_ids),
            main_lift_ids=tuple(i for i in self.main_lift_ids if i not in removed_ids),
            accessory_ids=tuple(i for i in self.accessory_ids if i not in removed_ids),
            per_exercise_set_targets={
                k: v for k, v in self.per_exercise_set_targets.items() if k not in removed_ids
            },
            volume_plan_by_muscle=self.volume_plan_by_muscle,
            rationale={k: v for k, v in self.rationale.items() if k not in removed_ids},
            rejected=self.rejected,
        )
