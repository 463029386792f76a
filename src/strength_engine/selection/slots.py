"""Main-lift and accessory slot budget for a session length."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from strength_engine.config import DEFAULT_CONFIG, EngineConfig
from strength_engine.math.rounding import round_half_up
from strength_engine.models.enums import SLOT_MINUTES_RANGE, SessionIntent


@dataclass(frozen=True)
class SlotBudget:
    main: int
    accessory: int

    @property
    def total(self) -> int:
        return self.main + self.accessory


def slot_budget(
    intent: SessionIntent,
    session_minutes: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> SlotBudget:
    """Slot counts interpolated linearly between the 35- and 80-minute bounds."""
    (main_lo, main_hi), (acc_lo, acc_hi) = config.slot_ranges[intent]
    main = round_half_up(float(np.interp(session_minutes, SLOT_MINUTES_RANGE, (main_lo, main_hi))))
    accessory = round_half_up(float(np.interp(session_minutes, SLOT_MINUTES_RANGE, (acc_lo, acc_hi))))
    return SlotBudget(main=min(main, config.max_main_lifts), accessory=accessory)
