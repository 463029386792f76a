"""Per-muscle weekly volume state and the landmark thresholds it is measured against."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from strength_engine.models.enums import VOLUME_LANDMARK_TABLE


@dataclass(frozen=True)
class VolumeLandmarks:
    """Weekly set thresholds for one muscle.

    mv: maintenance volume, mev: minimum effective volume,
    mav: maximum adaptive volume, mrv: maximum recoverable volume.
    sra_hours: typical hours to recover after a hard stimulus.
    """

    mv: float
    mev: float
    mav: float
    mrv: float
    sra_hours: float

    def __post_init__(self) -> None:
        if not self.mev <= self.mav <= self.mrv:
            raise ValueError(f"landmarks must satisfy MEV <= MAV <= MRV, got {self}")


DEFAULT_VOLUME_LANDMARKS: Mapping[str, VolumeLandmarks] = MappingProxyType({
    muscle: VolumeLandmarks(*values) for muscle, values in VOLUME_LANDMARK_TABLE.items()
})


@dataclass(frozen=True)
class MesocyclePosition:
    """Zero-indexed week within a mesocycle of ``length`` weeks."""

    week: int
    length: int

    def __post_init__(self) -> None:
        if self.length < 1:
            raise ValueError(f"mesocycle length must be >= 1, got {self.length}")
        if self.week < 0:
            raise ValueError(f"mesocycle week must be >= 0, got {self.week}")


@dataclass(frozen=True)
class MuscleVolumeState:
    muscle: str
    weekly_direct_sets: float
    weekly_indirect_sets: float
    landmarks: VolumeLandmarks

    @property
    def effective_sets(self) -> float:
        return self.weekly_direct_sets + self.weekly_indirect_sets


@dataclass(frozen=True)
class VolumeContext:
    """Recent (last 7 days) and previous (7-14 days ago) direct sets per muscle.

    ``muscle_volume`` is only populated when a mesocycle position was
    supplied; callers without periodization context get the bare maps.
    """

    recent: Mapping[str, float]
    previous: Mapping[str, float]
    muscle_volume: Mapping[str, MuscleVolumeState] | None = None
    mesocycle: MesocyclePosition | None = None

    @property
    def is_enhanced(self) -> bool:
        return self.muscle_volume is not None

    def recent_sets(self, muscle: str) -> float:
        return self.recent.get(muscle, 0.0)

    def previous_sets(self, muscle: str) -> float:
        return self.previous.get(muscle, 0.0)
