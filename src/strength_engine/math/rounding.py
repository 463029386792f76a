"""Half-up rounding for set counts, rest seconds and minute estimates."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 always up (``round_half_up(2.5) == 3``)."""
    return int(math.floor(value + 0.5))
