"""Catalog exercise: immutable reference data read by every engine stage."""

from __future__ import annotations

from dataclasses import dataclass, field

from strength_engine.models.enums import (
    DEFAULT_FATIGUE_COST,
    PATTERN_BUCKETS,
    BodyPart,
    Equipment,
    JointStress,
    MovementBucket,
    MovementPattern,
    MuscleRole,
    SplitTag,
    StimulusBias,
)


@dataclass(frozen=True)
class Exercise:
    """A single catalog exercise.

    ``sfr_score`` and ``length_position_score`` are optional 1-5 efficiency
    proxies; ``None`` means the catalog has no data for them.
    """

    id: str
    name: str
    movement_patterns: tuple[MovementPattern, ...] = field(default_factory=tuple)
    split_tags: tuple[SplitTag, ...] = field(default_factory=tuple)
    equipment: tuple[Equipment, ...] = field(default_factory=tuple)
    primary_muscles: tuple[str, ...] = field(default_factory=tuple)
    secondary_muscles: tuple[str, ...] = field(default_factory=tuple)
    is_compound: bool = False
    is_main_lift_eligible: bool = False
    fatigue_cost: int = DEFAULT_FATIGUE_COST
    sfr_score: float | None = None
    length_position_score: float | None = None
    rep_range_min: int | None = None
    rep_range_max: int | None = None
    time_per_set_sec: int | None = None
    stimulus_bias: tuple[StimulusBias, ...] = field(default_factory=tuple)
    joint_stress: JointStress = JointStress.MEDIUM
    contraindications: frozenset[BodyPart] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not 1 <= self.fatigue_cost <= 5:
            raise ValueError(f"fatigue_cost must be 1-5, got {self.fatigue_cost}")
        if (
            self.rep_range_min is not None
            and self.rep_range_max is not None
            and self.rep_range_min > self.rep_range_max
        ):
            raise ValueError(
                f"rep range {self.rep_range_min}-{self.rep_range_max} is inverted"
            )

    @property
    def buckets(self) -> frozenset[MovementBucket]:
        """Movement buckets covered by this exercise's patterns."""
        return frozenset(PATTERN_BUCKETS[p] for p in self.movement_patterns)

    @property
    def is_isolation(self) -> bool:
        return not self.is_compound

    def muscle_roles(self) -> tuple[tuple[str, MuscleRole], ...]:
        """Every muscle this exercise trains, tagged PRIMARY or SECONDARY."""
        roles = [(m, MuscleRole.PRIMARY) for m in self.primary_muscles]
        roles.extend(
            (m, MuscleRole.SECONDARY)
            for m in self.secondary_muscles
            if m not in self.primary_muscles
        )
        return tuple(roles)

    def has_rep_bounds(self) -> bool:
        return self.rep_range_min is not None or self.rep_range_max is not None
