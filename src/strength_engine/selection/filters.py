"""Hard filters: reject candidates outright, independent of score."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from strength_engine.models.enums import (
    INTENT_SPLIT_TAGS,
    LOW_SFR_THRESHOLD,
    SFR_FILTERED_GOALS,
    BodyPart,
    Equipment,
    Goal,
    HardFilter,
    SessionIntent,
)
from strength_engine.models.exercise import Exercise


@dataclass(frozen=True)
class FilterContext:
    intent: SessionIntent
    goal: Goal
    available_equipment: frozenset[Equipment]
    avoid_ids: frozenset[str]
    flagged_parts: frozenset[BodyPart]
    body_part_targets: frozenset[str] = frozenset()


def equipment_available(exercise: Exercise, available: frozenset[Equipment]) -> bool:
    """Bodyweight is always available; everything else must be on hand."""
    required = set(exercise.equipment) - {Equipment.BODYWEIGHT}
    return required <= available


def is_pain_safe(exercise: Exercise, flagged_parts: frozenset[BodyPart]) -> bool:
    return not (exercise.contraindications & flagged_parts)


def passes_sfr_floor(exercise: Exercise, goal: Goal) -> bool:
    """Low-SFR isolation work is dropped for hypertrophy / fat loss; missing SFR never is."""
    if goal not in SFR_FILTERED_GOALS or exercise.is_compound or exercise.sfr_score is None:
        return True
    return exercise.sfr_score > LOW_SFR_THRESHOLD


def matches_intent(exercise: Exercise, ctx: FilterContext) -> bool:
    if ctx.intent == SessionIntent.BODY_PART:
        return True
    return bool(set(exercise.split_tags) & INTENT_SPLIT_TAGS[ctx.intent])


def evaluate_hard_filters(
    exercise: Exercise, ctx: FilterContext
) -> tuple[tuple[HardFilter, bool], ...]:
    """Run every static hard filter and record pass/fail for the rationale."""
    results = [
        (HardFilter.EQUIPMENT, equipment_available(exercise, ctx.available_equipment)),
        (HardFilter.AVOIDED, exercise.id not in ctx.avoid_ids),
        (HardFilter.PAIN_CONFLICT, is_pain_safe(exercise, ctx.flagged_parts)),
        (HardFilter.LOW_SFR, passes_sfr_floor(exercise, ctx.goal)),
        (HardFilter.SPLIT_MISMATCH, matches_intent(exercise, ctx)),
    ]
    if ctx.intent == SessionIntent.BODY_PART:
        results.append((
            HardFilter.BODY_PART_TARGET,
            bool(set(exercise.primary_muscles) & ctx.body_part_targets),
        ))
    return tuple(results)


def failed_filters(results: Iterable[tuple[HardFilter, bool]]) -> tuple[HardFilter, ...]:
    return tuple(f for f, passed in results if not passed)


def is_duplicate_accessory(exercise: Exercise, selected_accessories: Iterable[Exercise]) -> bool:
    """Shares both a primary muscle and a movement bucket with a chosen accessory."""
    muscles = set(exercise.primary_muscles)
    buckets = exercise.buckets
    for other in selected_accessories:
        if muscles & set(other.primary_muscles) and buckets & other.buckets:
            return True
    return False
