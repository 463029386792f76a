"""Periodization modifiers applied on top of the base set prescription."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RirBand:
    """Reps-in-reserve target band for a mesocycle week."""

    min: float
    max: float

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise ValueError(f"RIR band min {self.min} exceeds max {self.max}")

    @property
    def span(self) -> float:
        return self.max - self.min


@dataclass(frozen=True)
class PeriodizationModifiers:
    """Week-level adjustments to sets, effort and back-off intensity.

    ``back_off_multiplier`` of None means the goal's default ratio is used.
    """

    set_multiplier: float = 1.0
    rpe_offset: float = 0.0
    back_off_multiplier: float | None = None
    is_deload: bool = False
    lifecycle_rir_target: RirBand | None = None


NEUTRAL_MODIFIERS = PeriodizationModifiers()
