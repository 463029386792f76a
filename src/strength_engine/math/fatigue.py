"""Fatigue and readiness derivation from the latest check-in or history."""

from __future__ import annotations

from typing import Iterable

from strength_engine.models.athlete import FatigueState
from strength_engine.models.enums import NEUTRAL_READINESS, SessionStatus
from strength_engine.models.history import (
    SessionCheckIn,
    WorkoutHistoryEntry,
    most_recent_first,
)


def derive_fatigue_state(
    history: Iterable[WorkoutHistoryEntry],
    check_in: SessionCheckIn | None = None,
) -> FatigueState:
    """Build the per-call FatigueState.

    Readiness comes from the check-in, else the most recent history entry,
    else a neutral 3. ``missed_last_session`` is true only when the most
    recent entry was explicitly SKIPPED. Pain flags prefer the check-in and
    fall back to the most recent entry.
    """
    ordered = most_recent_first(history)
    last = ordered[0] if ordered else None

    if check_in is not None:
        readiness = check_in.readiness
    elif last is not None and last.readiness is not None:
        readiness = last.readiness
    else:
        readiness = NEUTRAL_READINESS

    if check_in is not None and check_in.pain_flags is not None:
        pain_flags = dict(check_in.pain_flags)
    elif last is not None:
        pain_flags = dict(last.pain_flags)
    else:
        pain_flags = {}

    return FatigueState(
        readiness=readiness,
        missed_last_session=last is not None and last.status == SessionStatus.SKIPPED,
        pain_flags=pain_flags,
        soreness_notes=last.soreness_notes if last is not None else "",
    )
