"""ExerciseSelector: chooses main lifts and accessories for one session.

Candidates pass the hard filters, are soft-scored, then claimed by four
ordered steps (pin → anchor → main_pick → accessory_pick), each consuming
the remaining slot budget. Cold-start users fall back to a starter ranking.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from strength_engine.config import DEFAULT_CONFIG, EngineConfig
from strength_engine.math.scoring import ScoringContext, score_exercise, starter_score
from strength_engine.math.volume import project_weekly_sets, target_volume
from strength_engine.models.athlete import Constraints, FatigueState, Goals, UserProfile
from strength_engine.models.enums import (
    BALANCED_BUCKETS,
    MIN_COLD_START_SELECTION,
    ExerciseRole,
    HardFilter,
    ScoreComponent,
    SelectionStep,
    SessionIntent,
)
from strength_engine.models.exercise import Exercise
from strength_engine.models.history import WorkoutHistoryEntry
from strength_engine.models.periodization import NEUTRAL_MODIFIERS, PeriodizationModifiers
from strength_engine.models.selection import MuscleVolumePlan, RationaleEntry, SelectionOutput
from strength_engine.models.volume import VolumeContext
from strength_engine.prescription.sets import can_be_main_lift, resolve_set_count
from strength_engine.random_source import RandomSource, pick_index
from strength_engine.selection.filters import (
    FilterContext,
    evaluate_hard_filters,
    failed_filters,
    is_duplicate_accessory,
)
from strength_engine.selection.rebalance import rebalance_full_body
from strength_engine.selection.slots import slot_budget

logger = logging.getLogger(__name__)

# Scores closer than this are treated as ties for the seeded draw
_TIE_TOLERANCE = 1e-9

COLD_START_STARTER_ONLY = 0
COLD_START_ACCESSORY_ONLY = 1
ESTABLISHED_USER = 2


@dataclass(frozen=True)
class SelectionRequest:
    """Inputs to one selection call."""

    intent: SessionIntent
    profile: UserProfile
    goals: Goals
    constraints: Constraints
    fatigue: FatigueState
    context: VolumeContext
    history: tuple[WorkoutHistoryEntry, ...] = field(default_factory=tuple)
    modifiers: PeriodizationModifiers = NEUTRAL_MODIFIERS
    pinned_ids: tuple[str, ...] = field(default_factory=tuple)
    avoid_ids: frozenset[str] = field(default_factory=frozenset)
    body_part_targets: frozenset[str] = field(default_factory=frozenset)
    set_overrides: Mapping[str, int] = field(default_factory=dict)
    cold_start_stage: int = ESTABLISHED_USER

    def __post_init__(self) -> None:
        if self.cold_start_stage not in (
            COLD_START_STARTER_ONLY,
            COLD_START_ACCESSORY_ONLY,
            ESTABLISHED_USER,
        ):
            raise ValueError(f"cold_start_stage must be 0, 1 or 2, got {self.cold_start_stage}")
        if self.intent == SessionIntent.BODY_PART and not self.body_part_targets:
            raise ValueError("body_part intent requires body_part_targets")


@dataclass
class _SelectionState:
    """Mutable bookkeeping for a single select() call."""

    main_slots: int
    accessory_slots: int
    mains: list[Exercise] = field(default_factory=list)
    accessories: list[Exercise] = field(default_factory=list)
    steps: dict[str, SelectionStep] = field(default_factory=dict)
    duplicates: set[str] = field(default_factory=set)

    @property
    def selected(self) -> list[Exercise]:
        return self.mains + self.accessories

    def is_selected(self, exercise: Exercise) -> bool:
        return exercise.id in self.steps

    def add(self, exercise: Exercise, role: ExerciseRole, step: SelectionStep) -> None:
        if role == ExerciseRole.MAIN:
            self.mains.append(exercise)
            self.main_slots = max(0, self.main_slots - 1)
        else:
            self.accessories.append(exercise)
            self.accessory_slots = max(0, self.accessory_slots - 1)
        self.steps[exercise.id] = step


def build_volume_plan(
    planned: Iterable[tuple[Exercise, int]],
    context: VolumeContext,
    config: EngineConfig = DEFAULT_CONFIG,
) -> dict[str, MuscleVolumePlan]:
    """Projected weekly sets per muscle trained, with the mesocycle target when known."""
    plan: dict[str, MuscleVolumePlan] = {}
    for muscle, projected in project_weekly_sets(context, planned).items():
        target = None
        landmarks = config.landmarks.get(muscle)
        if context.mesocycle is not None and landmarks is not None:
            target = target_volume(landmarks, context.mesocycle.week, context.mesocycle.length)
        plan[muscle] = MuscleVolumePlan(planned_sets=projected, target_sets=target)
    return plan


class ExerciseSelector:
    """Ranks and selects exercises for a session intent.

    Usage::

        selector = ExerciseSelector()
        output = selector.select(request, catalog, seeded_random_source(7))
    """

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def select(
        self,
        request: SelectionRequest,
        catalog: Iterable[Exercise],
        random_source: RandomSource,
    ) -> SelectionOutput:
        """Select exercises and plan their set counts.

        Args:
            request: Intent, user context and per-call options.
            catalog: Read-only exercise catalog.
            random_source: Seeded tie-break source.

        Returns:
            SelectionOutput with ids, set plan, volume plan and rationale.
        """
        catalog = tuple(catalog)
        goal = request.goals.primary
        flagged = request.fatigue.flagged_parts() | request.profile.active_injury_parts()

        filter_ctx = FilterContext(
            intent=request.intent,
            goal=goal,
            available_equipment=request.constraints.available_equipment,
            avoid_ids=request.avoid_ids,
            flagged_parts=flagged,
            body_part_targets=request.body_part_targets,
        )
        filter_results = {e.id: evaluate_hard_filters(e, filter_ctx) for e in catalog}
        rejected: dict[str, tuple[HardFilter, ...]] = {}
        for exercise_id, results in filter_results.items():
            failed = failed_filters(results)
            if failed:
                rejected[exercise_id] = failed
        eligible = [e for e in catalog if e.id not in rejected]

        scoring_ctx = ScoringContext.build(
            intent=request.intent,
            goal=goal,
            readiness=request.fatigue.readiness,
            history=request.history,
            landmarks=self.config.landmarks,
            body_part_targets=request.body_part_targets,
        )
        scored = {e.id: score_exercise(e, scoring_ctx) for e in eligible}
        for exercise in eligible:
            logger.debug("Candidate %s scored %.3f", exercise.id, scored[exercise.id][0])

        budget = slot_budget(request.intent, request.constraints.session_minutes, self.config)
        stage = request.cold_start_stage
        state = _SelectionState(
            main_slots=budget.main if stage == ESTABLISHED_USER else 0,
            accessory_slots=budget.accessory,
        )
        if stage == COLD_START_STARTER_ONLY:
            state.main_slots = budget.main

        self._pin(state, request, catalog, rejected)
        if stage == COLD_START_STARTER_ONLY:
            self._fill_starters(state, eligible, scoring_ctx.target_muscles, budget.total, request)
        else:
            if request.intent == SessionIntent.FULL_BODY:
                self._anchor(state, eligible, scored, request)
            if stage == ESTABLISHED_USER:
                self._main_pick(state, eligible, scored, request)
            self._accessory_pick(state, eligible, scored, random_source)
            minimum = min(MIN_COLD_START_SELECTION, budget.total)
            if len(state.selected) < minimum:
                self._fill_starters(state, eligible, scoring_ctx.target_muscles, minimum, request)

        for exercise_id in state.duplicates:
            if exercise_id not in state.steps:
                rejected[exercise_id] = (HardFilter.DUPLICATE_ACCESSORY,)

        set_targets = self._plan_sets(state, request)
        by_id = {e.id: e for e in state.selected}
        rationale = {}
        for exercise in state.selected:
            score, components = scored.get(exercise.id, (0.0, {}))
            rationale[exercise.id] = RationaleEntry(
                score=score,
                components=dict(components) if components else _empty_components(),
                hard_filters=filter_results.get(exercise.id, ()),
                step=state.steps[exercise.id],
            )

        output = SelectionOutput(
            selected_exercise_ids=tuple(e.id for e in state.selected),
            main_lift_ids=tuple(e.id for e in state.mains),
            accessory_ids=tuple(e.id for e in state.accessories),
            per_exercise_set_targets=set_targets,
            volume_plan_by_muscle=build_volume_plan(
                ((by_id[i], s) for i, s in set_targets.items()), request.context, self.config
            ),
            rationale=rationale,
            rejected=rejected,
        )
        logger.info(
            "Selected %d exercises (%d main, %d accessory) for %s intent",
            len(output.selected_exercise_ids),
            len(output.main_lift_ids),
            len(output.accessory_ids),
            request.intent.value,
        )
        return output

    # ------------------------------------------------------------------
    # Selection steps
    # ------------------------------------------------------------------

    def _main_role_available(self, state: _SelectionState, exercise: Exercise, request: SelectionRequest) -> bool:
        return (
            state.main_slots > 0
            and request.cold_start_stage != COLD_START_ACCESSORY_ONLY
            and can_be_main_lift(exercise, request.goals.primary, self.config)
        )

    def _pin(
        self,
        state: _SelectionState,
        request: SelectionRequest,
        catalog: tuple[Exercise, ...],
        rejected: Mapping[str, tuple[HardFilter, ...]],
    ) -> None:
        by_id = {e.id: e for e in catalog}
        pinned = list(dict.fromkeys(request.pinned_ids))
        if len(pinned) > self.config.max_pinned:
            logger.info("Ignoring %d pinned exercises beyond the cap of %d",
                        len(pinned) - self.config.max_pinned, self.config.max_pinned)
        for exercise_id in pinned[: self.config.max_pinned]:
            exercise = by_id.get(exercise_id)
            if exercise is None:
                logger.warning("Pinned exercise %s is not in the catalog", exercise_id)
                continue
            if exercise_id in rejected:
                logger.info("Pinned exercise %s failed hard filters: %s", exercise_id,
                            ", ".join(f.name for f in rejected[exercise_id]))
                continue
            role = (
                ExerciseRole.MAIN
                if exercise.is_compound and self._main_role_available(state, exercise, request)
                else ExerciseRole.ACCESSORY
            )
            state.add(exercise, role, SelectionStep.PIN)

    def _anchor(
        self,
        state: _SelectionState,
        eligible: list[Exercise],
        scored: Mapping[str, tuple[float, dict]],
        request: SelectionRequest,
    ) -> None:
        for bucket in BALANCED_BUCKETS:
            if any(bucket in e.buckets for e in state.selected):
                continue
            candidates = [
                e
                for e in eligible
                if not state.is_selected(e)
                and e.is_compound
                and e.is_main_lift_eligible
                and bucket in e.buckets
            ]
            if not candidates:
                logger.debug("No anchor candidate for %s bucket", bucket.name)
                continue
            best = min(candidates, key=lambda e: _rank_key(e, scored))
            role = (
                ExerciseRole.MAIN
                if self._main_role_available(state, best, request)
                else ExerciseRole.ACCESSORY
            )
            state.add(best, role, SelectionStep.ANCHOR)

    def _main_pick(
        self,
        state: _SelectionState,
        eligible: list[Exercise],
        scored: Mapping[str, tuple[float, dict]],
        request: SelectionRequest,
    ) -> None:
        goal = request.goals.primary
        candidates = sorted(
            (
                e
                for e in eligible
                if not state.is_selected(e) and can_be_main_lift(e, goal, self.config)
            ),
            key=lambda e: _rank_key(e, scored),
        )
        for exercise in candidates:
            if state.main_slots <= 0:
                break
            state.add(exercise, ExerciseRole.MAIN, SelectionStep.MAIN_PICK)

    def _accessory_pick(
        self,
        state: _SelectionState,
        eligible: list[Exercise],
        scored: Mapping[str, tuple[float, dict]],
        random_source: RandomSource,
    ) -> None:
        while state.accessory_slots > 0:
            pool = []
            for exercise in eligible:
                if state.is_selected(exercise):
                    continue
                if is_duplicate_accessory(exercise, state.accessories):
                    state.duplicates.add(exercise.id)
                    continue
                pool.append(exercise)
            if not pool:
                break

            best = max(scored[e.id][0] for e in pool)
            ties = sorted(
                (e for e in pool if best - scored[e.id][0] <= _TIE_TOLERANCE),
                key=lambda e: (e.fatigue_cost, e.name, e.id),
            )
            choice = ties[pick_index(random_source, len(ties))] if len(ties) > 1 else ties[0]
            state.add(choice, ExerciseRole.ACCESSORY, SelectionStep.ACCESSORY_PICK)

    def _fill_starters(
        self,
        state: _SelectionState,
        eligible: list[Exercise],
        target_muscles: frozenset[str],
        target_count: int,
        request: SelectionRequest,
    ) -> None:
        ranked = sorted(
            (e for e in eligible if not state.is_selected(e)),
            key=lambda e: (-starter_score(e, target_muscles), e.fatigue_cost, e.name, e.id),
        )
        for exercise in ranked:
            if len(state.selected) >= target_count:
                break
            if exercise.is_compound and self._main_role_available(state, exercise, request):
                state.add(exercise, ExerciseRole.MAIN, SelectionStep.STARTER)
                continue
            if is_duplicate_accessory(exercise, state.accessories):
                state.duplicates.add(exercise.id)
                continue
            state.add(exercise, ExerciseRole.ACCESSORY, SelectionStep.STARTER)

    # ------------------------------------------------------------------
    # Set planning
    # ------------------------------------------------------------------

    def _plan_sets(self, state: _SelectionState, request: SelectionRequest) -> dict[str, int]:
        age = request.profile.training_age
        ceiling = self.config.max_sets[age]
        targets: dict[str, int] = {}
        for role, exercises in (
            (ExerciseRole.MAIN, state.mains),
            (ExerciseRole.ACCESSORY, state.accessories),
        ):
            for exercise in exercises:
                count = resolve_set_count(
                    role, age, request.fatigue, request.goals.primary, request.modifiers
                )
                targets[exercise.id] = min(count, ceiling)

        if request.intent == SessionIntent.FULL_BODY:
            targets = rebalance_full_body(
                targets,
                {e.id: e for e in state.selected},
                max_sets=ceiling,
                ratio=self.config.bucket_imbalance_ratio,
            )

        for exercise_id, count in request.set_overrides.items():
            if exercise_id in targets:
                targets[exercise_id] = max(1, count)
        return targets


def _rank_key(exercise: Exercise, scored: Mapping[str, tuple[float, dict]]) -> tuple:
    return (-scored[exercise.id][0], exercise.fatigue_cost, exercise.name, exercise.id)


def _empty_components() -> dict[ScoreComponent, float]:
    return {component: 0.0 for component in ScoreComponent}
