"""Injectable pseudo-random source for deterministic tie-breaking.

The engine never touches a global RNG. Callers pass a zero-argument callable
returning floats in [0, 1); the same seed reproduces the same plan.
"""

from __future__ import annotations

from itertools import cycle
from typing import Callable, Iterable

import numpy as np

RandomSource = Callable[[], float]


def seeded_random_source(seed: int) -> RandomSource:
    """A RandomSource backed by a fresh numpy Generator seeded with ``seed``."""
    rng = np.random.default_rng(seed)

    def next_float() -> float:
        return float(rng.random())

    return next_float


def fixed_random_source(values: Iterable[float]) -> RandomSource:
    """A RandomSource replaying ``values`` in a loop.

    Raises:
        ValueError: If ``values`` is empty or any value lies outside [0, 1).
    """
    values = tuple(values)
    if not values:
        raise ValueError("fixed_random_source needs at least one value")
    for value in values:
        if not 0.0 <= value < 1.0:
            raise ValueError(f"random values must lie in [0, 1), got {value}")
    source = cycle(values)

    def next_float() -> float:
        return next(source)

    return next_float


def pick_index(random_source: RandomSource, size: int) -> int:
    """Draw an index in [0, size) from ``random_source``."""
    if size <= 0:
        raise ValueError(f"cannot pick from an empty collection (size={size})")
    return min(int(random_source() * size), size - 1)
