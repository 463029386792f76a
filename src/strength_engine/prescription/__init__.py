"""Set & rest prescription: turns selected exercises into concrete sets."""

from strength_engine.prescription.prescriber import prescribe_exercise, resolve_role
from strength_engine.prescription.rest import resolve_rest_seconds
from strength_engine.prescription.sets import (
    can_be_main_lift,
    resolve_effort,
    resolve_rep_range,
    resolve_set_count,
)
from strength_engine.prescription.warmup import build_warmup_exercise, build_warmup_ramp

__all__ = [
    "build_warmup_exercise",
    "build_warmup_ramp",
    "can_be_main_lift",
    "prescribe_exercise",
    "resolve_effort",
    "resolve_rep_range",
    "resolve_rest_seconds",
    "resolve_role",
    "resolve_set_count",
]
