"""Pain-aware exercise substitution.

Alternatives must share a split tag with the original, avoid the flagged
body parts, use available equipment and carry no mobility / prehab / core
/ conditioning tag. They are ranked by how closely they reproduce the
original's pattern, muscles and stimulus, with credit for lower fatigue.
"""

from __future__ import annotations

import logging
from typing import Iterable

from strength_engine.models.advisory import SubstitutionCandidate, SubstitutionSuggestion
from strength_engine.models.enums import (
    BLOCKED_SUBSTITUTION_TAGS,
    MUSCLE_OVERLAP_WEIGHT,
    PATTERN_OVERLAP_WEIGHT,
    STIMULUS_OVERLAP_WEIGHT,
    SUBSTITUTION_LIMIT,
    BodyPart,
    Equipment,
)
from strength_engine.models.exercise import Exercise
from strength_engine.selection.filters import equipment_available, is_pain_safe

logger = logging.getLogger(__name__)


def has_blocked_tag(exercise: Exercise) -> bool:
    return bool(set(exercise.split_tags) & BLOCKED_SUBSTITUTION_TAGS)


def substitution_score(candidate: Exercise, target: Exercise) -> float:
    """4 x pattern overlap + 3 x muscle overlap + 2 x stimulus overlap + fatigue saved."""
    patterns = len(set(candidate.movement_patterns) & set(target.movement_patterns))
    muscles = len(set(candidate.primary_muscles) & set(target.primary_muscles))
    stimulus = len(set(candidate.stimulus_bias) & set(target.stimulus_bias))
    fatigue_delta = max(0, target.fatigue_cost - candidate.fatigue_cost)
    return (
        PATTERN_OVERLAP_WEIGHT * patterns
        + MUSCLE_OVERLAP_WEIGHT * muscles
        + STIMULUS_OVERLAP_WEIGHT * stimulus
        + fatigue_delta
    )


def suggest_substitutes(
    target: Exercise,
    catalog: Iterable[Exercise],
    flagged_parts: frozenset[BodyPart],
    available_equipment: frozenset[Equipment],
    exclude_ids: Iterable[str] = (),
    limit: int = SUBSTITUTION_LIMIT,
) -> tuple[SubstitutionCandidate, ...]:
    """Best ``limit`` replacements for ``target``, highest score first.

    Ties are broken by name then id so results are stable.
    """
    excluded = set(exclude_ids) | {target.id}
    target_tags = set(target.split_tags)
    candidates = [
        e
        for e in catalog
        if e.id not in excluded
        and set(e.split_tags) & target_tags
        and not has_blocked_tag(e)
        and is_pain_safe(e, flagged_parts)
        and equipment_available(e, available_equipment)
    ]
    ranked = sorted(
        ((e, substitution_score(e, target)) for e in candidates),
        key=lambda pair: (-pair[1], pair[0].name, pair[0].id),
    )
    return tuple(SubstitutionCandidate(exercise=e, score=s) for e, s in ranked[:limit])


def build_substitution_suggestions(
    selected: Iterable[Exercise],
    catalog: Iterable[Exercise],
    flagged_parts: frozenset[BodyPart],
    available_equipment: frozenset[Equipment],
    avoid_ids: Iterable[str] = (),
    limit: int = SUBSTITUTION_LIMIT,
) -> tuple[SubstitutionSuggestion, ...]:
    """One suggestion per selected exercise that conflicts with a flagged body part.

    Alternatives never include another selected exercise or one in ``avoid_ids``.
    """
    catalog = tuple(catalog)
    selected = tuple(selected)
    excluded = {e.id for e in selected} | set(avoid_ids)
    suggestions = []
    for exercise in selected:
        conflicts = exercise.contraindications & flagged_parts
        if not conflicts:
            continue
        alternatives = suggest_substitutes(
            exercise,
            catalog,
            flagged_parts,
            available_equipment,
            exclude_ids=excluded,
            limit=limit,
        )
        parts = ", ".join(sorted(p.value for p in conflicts))
        suggestions.append(
            SubstitutionSuggestion(
                exercise_id=exercise.id,
                reason=f"Conflicts with flagged pain: {parts}",
                alternatives=alternatives,
            )
        )
        logger.info("Suggested %d substitutes for %s", len(alternatives), exercise.id)
    return tuple(suggestions)
