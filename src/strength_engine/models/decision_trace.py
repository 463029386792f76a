"""Decision trace: audit trail of how the engine assembled a session."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import auto, IntEnum


class TraceStage(IntEnum):
    """Pipeline stage that emitted a trace event."""

    CONTEXT = auto()
    SELECTION = auto()
    PRESCRIPTION = auto()
    VOLUME_CAP = auto()
    TIME_BUDGET = auto()
    ADVISORY = auto()


@dataclass(frozen=True)
class TraceEvent:
    stage: TraceStage
    detail: str


@dataclass(frozen=True)
class DecisionTrace:
    """Complete audit trail for a single generation call.

    Removal lists keep the order in which accessories were trimmed so the
    greedy passes are reproducible and explainable.
    """

    events: tuple[TraceEvent, ...] = field(default_factory=tuple)
    volume_cap_removed: tuple[str, ...] = field(default_factory=tuple)
    time_budget_removed: tuple[str, ...] = field(default_factory=tuple)
    substituted: tuple[tuple[str, str], ...] = field(default_factory=tuple)

    def details(self, stage: TraceStage) -> tuple[str, ...]:
        return tuple(e.detail for e in self.events if e.stage == stage)
