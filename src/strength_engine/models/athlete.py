"""User profile, goals, constraints and the derived per-call fatigue snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from strength_engine.models.enums import (
    BodyPart,
    Equipment,
    Goal,
    SecondaryGoal,
    SplitType,
    TrainingAge,
)


@dataclass(frozen=True)
class InjuryFlag:
    body_part: BodyPart
    severity: int  # 1-5
    is_active: bool = True


@dataclass(frozen=True)
class UserProfile:
    user_id: str
    training_age: TrainingAge = TrainingAge.INTERMEDIATE
    injuries: tuple[InjuryFlag, ...] = field(default_factory=tuple)

    def active_injury_parts(self) -> frozenset[BodyPart]:
        return frozenset(i.body_part for i in self.injuries if i.is_active)


@dataclass(frozen=True)
class Goals:
    primary: Goal = Goal.HYPERTROPHY
    secondary: SecondaryGoal = SecondaryGoal.NONE


@dataclass(frozen=True)
class Constraints:
    """Scheduling and equipment limits for generated sessions."""

    session_minutes: int = 60
    days_per_week: int = 3
    available_equipment: frozenset[Equipment] = field(default_factory=frozenset)
    split_type: SplitType = SplitType.PPL

    def __post_init__(self) -> None:
        if self.session_minutes <= 0:
            raise ValueError(f"session_minutes must be positive, got {self.session_minutes}")


@dataclass(frozen=True)
class FatigueState:
    """Readiness snapshot derived once per engine call.

    Pain flags map a body part to a 0-3 severity; any severity >= 1 makes a
    contraindicated exercise unsafe.
    """

    readiness: int = 3
    missed_last_session: bool = False
    pain_flags: Mapping[BodyPart, int] = field(default_factory=dict)
    soreness_notes: str = ""

    def __post_init__(self) -> None:
        if not 1 <= self.readiness <= 5:
            raise ValueError(f"readiness must be 1-5, got {self.readiness}")

    def flagged_parts(self) -> frozenset[BodyPart]:
        """Body parts currently flagged with pain (UNKNOWN never counts)."""
        return frozenset(
            part
            for part, severity in self.pain_flags.items()
            if severity >= 1 and part != BodyPart.UNKNOWN
        )
