"""Injectable rule tables and thresholds.

Every constant table the engine consults is bundled here so an alternate
rule set can be swapped per deployment or per test. Defaults come from
``strength_engine.models.enums``; ``EngineConfig.from_env`` overlays the
handful of knobs that are tuned operationally.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

from strength_engine.models import enums
from strength_engine.models.enums import Goal, SessionIntent, TrainingAge
from strength_engine.models.volume import DEFAULT_VOLUME_LANDMARKS, VolumeLandmarks

logger = logging.getLogger(__name__)

ENV_PREFIX = "STRENGTH_ENGINE_"


@dataclass(frozen=True)
class EngineConfig:
    """Immutable rule configuration consumed by every engine stage."""

    landmarks: Mapping[str, VolumeLandmarks] = field(
        default_factory=lambda: DEFAULT_VOLUME_LANDMARKS
    )
    rep_ranges: Mapping[Goal, tuple[tuple[int, int], tuple[int, int]]] = field(
        default_factory=lambda: dict(enums.REP_RANGES_BY_GOAL)
    )
    target_rpe: Mapping[Goal, float] = field(
        default_factory=lambda: dict(enums.TARGET_RPE_BY_GOAL)
    )
    max_sets: Mapping[TrainingAge, int] = field(
        default_factory=lambda: dict(enums.MAX_SETS_BY_TRAINING_AGE)
    )
    slot_ranges: Mapping[SessionIntent, tuple[tuple[int, int], tuple[int, int]]] = field(
        default_factory=lambda: dict(enums.SLOT_RANGES_BY_INTENT)
    )
    recent_window_days: int = enums.RECENT_WINDOW_DAYS
    previous_window_days: int = enums.PREVIOUS_WINDOW_DAYS
    indirect_set_multiplier: float = enums.INDIRECT_SET_MULTIPLIER
    volume_cap_fallback_multiplier: float = enums.VOLUME_CAP_FALLBACK_MULTIPLIER
    bucket_imbalance_ratio: float = enums.BUCKET_IMBALANCE_RATIO
    max_main_lifts: int = enums.MAX_MAIN_LIFTS
    max_pinned: int = enums.MAX_PINNED_EXERCISES
    substitution_limit: int = enums.SUBSTITUTION_LIMIT
    default_seed: int = 0

    def __post_init__(self) -> None:
        if self.previous_window_days <= self.recent_window_days:
            raise ValueError("previous_window_days must exceed recent_window_days")
        if self.bucket_imbalance_ratio < 1.0:
            raise ValueError("bucket_imbalance_ratio must be >= 1")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> EngineConfig:
        """Build a config from ``STRENGTH_ENGINE_*`` environment variables.

        Recognised variables: ``DEFAULT_SEED``, ``RECENT_WINDOW_DAYS``,
        ``PREVIOUS_WINDOW_DAYS``, ``BUCKET_IMBALANCE_RATIO``,
        ``MAX_MAIN_LIFTS``. Unset variables keep their defaults.

        Raises:
            ValueError: If a variable is set but not numeric.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for name, cast in (
            ("default_seed", int),
            ("recent_window_days", int),
            ("previous_window_days", int),
            ("bucket_imbalance_ratio", float),
            ("max_main_lifts", int),
        ):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is None or raw == "":
                continue
            overrides[name] = cast(raw)
            logger.debug("Config override %s=%s", name, raw)
        return dataclasses.replace(cls(), **overrides)


def log_level_from_env(environ: Mapping[str, str] | None = None) -> int:
    """Resolve ``STRENGTH_ENGINE_LOG_LEVEL`` to a logging level (default INFO)."""
    env = os.environ if environ is None else environ
    name = env.get(ENV_PREFIX + "LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


DEFAULT_CONFIG = EngineConfig()
