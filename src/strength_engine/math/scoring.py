"""Candidate soft scoring: weighted overlap, recency, novelty, fatigue and efficiency.

score = (4 * pattern overlap + 3 * muscle overlap + 2 * stimulus overlap)
        * recency * novelty - fatigue penalty + SFR bonus
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from strength_engine.models.enums import (
    FATIGUE_PENALTY_READINESS_FACTOR,
    FATIGUE_PENALTY_WEIGHT,
    GOAL_STIMULUS_BIAS,
    INTENT_PATTERNS,
    INTENT_SPLIT_TAGS,
    JOINT_SAFETY_SCORE,
    LENGTH_POSITION_BONUS_WEIGHT,
    MUSCLE_OVERLAP_WEIGHT,
    MUSCLE_SPLIT_MAP,
    NEUTRAL_EFFICIENCY_SCORE,
    NOVELTY_MULTIPLIER,
    PATTERN_OVERLAP_WEIGHT,
    RECENCY_MULTIPLIERS,
    SFR_BONUS_WEIGHT,
    STARTER_FATIGUE_WEIGHT,
    STARTER_JOINT_SAFETY_WEIGHT,
    STARTER_TARGET_WEIGHT,
    STIMULUS_OVERLAP_WEIGHT,
    Goal,
    MovementPattern,
    ScoreComponent,
    SessionIntent,
)
from strength_engine.models.exercise import Exercise
from strength_engine.models.history import WorkoutHistoryEntry, completed_most_recent_first
from strength_engine.models.volume import VolumeLandmarks


def intent_target_muscles(
    intent: SessionIntent,
    landmarks: Mapping[str, VolumeLandmarks],
    body_part_targets: Iterable[str] = (),
) -> frozenset[str]:
    """Muscles a session of ``intent`` is expected to train.

    FULL_BODY targets every muscle with a non-zero MEV; BODY_PART targets
    exactly the requested muscles.
    """
    if intent == SessionIntent.BODY_PART:
        return frozenset(body_part_targets)
    if intent == SessionIntent.FULL_BODY:
        return frozenset(m for m, lm in landmarks.items() if lm.mev > 0)
    splits = INTENT_SPLIT_TAGS[intent]
    return frozenset(m for m, tag in MUSCLE_SPLIT_MAP.items() if tag in splits)


def recency_index(history: Iterable[WorkoutHistoryEntry]) -> dict[str, int]:
    """Map exercise id → how many completed sessions ago it was last done (0 = latest)."""
    index: dict[str, int] = {}
    for position, entry in enumerate(completed_most_recent_first(history)):
        for exercise_id in entry.exercise_ids():
            index.setdefault(exercise_id, position)
    return index


@dataclass(frozen=True)
class ScoringContext:
    """Everything candidate scoring needs, computed once per selection call."""

    goal: Goal
    readiness: int
    target_patterns: frozenset[MovementPattern]
    target_muscles: frozenset[str]
    recency: Mapping[str, int]

    @classmethod
    def build(
        cls,
        intent: SessionIntent,
        goal: Goal,
        readiness: int,
        history: Iterable[WorkoutHistoryEntry],
        landmarks: Mapping[str, VolumeLandmarks],
        body_part_targets: Iterable[str] = (),
    ) -> ScoringContext:
        return cls(
            goal=goal,
            readiness=readiness,
            target_patterns=INTENT_PATTERNS[intent],
            target_muscles=intent_target_muscles(intent, landmarks, body_part_targets),
            recency=recency_index(history),
        )


def recency_multiplier(exercise_id: str, recency: Mapping[str, int]) -> float:
    sessions_ago = recency.get(exercise_id)
    if sessions_ago is None or sessions_ago >= len(RECENCY_MULTIPLIERS):
        return 1.0
    return RECENCY_MULTIPLIERS[sessions_ago]


def novelty_multiplier(exercise_id: str, recency: Mapping[str, int]) -> float:
    return NOVELTY_MULTIPLIER if exercise_id not in recency else 1.0


def fatigue_penalty(fatigue_cost: int, readiness: int) -> float:
    """Penalty growing with fatigue cost, weighted harder when readiness is low."""
    factor = FATIGUE_PENALTY_READINESS_FACTOR[readiness]
    return FATIGUE_PENALTY_WEIGHT * ((fatigue_cost - 1) / 4.0) * factor


def _centered(score: float | None) -> float:
    value = NEUTRAL_EFFICIENCY_SCORE if score is None else score
    return (value - NEUTRAL_EFFICIENCY_SCORE) / 2.0


def sfr_bonus(exercise: Exercise) -> float:
    """Efficiency bonus; missing scores sit at the neutral midpoint and add nothing."""
    return (
        SFR_BONUS_WEIGHT * _centered(exercise.sfr_score)
        + LENGTH_POSITION_BONUS_WEIGHT * _centered(exercise.length_position_score)
    )


def score_exercise(
    exercise: Exercise, ctx: ScoringContext
) -> tuple[float, dict[ScoreComponent, float]]:
    """Score one candidate.

    Returns:
        (score, components) where components records every weighted term.
    """
    pattern = PATTERN_OVERLAP_WEIGHT * sum(
        1 for p in exercise.movement_patterns if p in ctx.target_patterns
    )
    muscle = MUSCLE_OVERLAP_WEIGHT * sum(
        1 for m in exercise.primary_muscles if m in ctx.target_muscles
    )
    preferred = GOAL_STIMULUS_BIAS[ctx.goal]
    stimulus = STIMULUS_OVERLAP_WEIGHT * sum(1 for b in exercise.stimulus_bias if b in preferred)
    recency = recency_multiplier(exercise.id, ctx.recency)
    novelty = novelty_multiplier(exercise.id, ctx.recency)
    penalty = fatigue_penalty(exercise.fatigue_cost, ctx.readiness)
    bonus = sfr_bonus(exercise)

    score = (pattern + muscle + stimulus) * recency * novelty - penalty + bonus
    components = {
        ScoreComponent.PATTERN_OVERLAP: float(pattern),
        ScoreComponent.MUSCLE_OVERLAP: float(muscle),
        ScoreComponent.STIMULUS_OVERLAP: float(stimulus),
        ScoreComponent.RECENCY: recency,
        ScoreComponent.NOVELTY: novelty,
        ScoreComponent.FATIGUE_PENALTY: penalty,
        ScoreComponent.SFR_BONUS: bonus,
    }
    return score, components


def starter_score(exercise: Exercise, target_muscles: frozenset[str]) -> float:
    """Cold-start ranking: target coverage and joint friendliness over novelty."""
    hits = sum(1 for m in exercise.primary_muscles if m in target_muscles)
    return (
        STARTER_TARGET_WEIGHT * hits
        + STARTER_JOINT_SAFETY_WEIGHT * JOINT_SAFETY_SCORE[exercise.joint_stress]
        - STARTER_FATIGUE_WEIGHT * exercise.fatigue_cost
    )
