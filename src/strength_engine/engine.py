"""WorkoutEngine: the orchestrator that assembles one strength session."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Mapping, Sequence

from strength_engine.advisory.recovery import generate_sra_warnings, sra_note
from strength_engine.advisory.substitution import build_substitution_suggestions
from strength_engine.config import DEFAULT_CONFIG, EngineConfig
from strength_engine.enforcement.time_budget import enforce_time_budget, estimate_minutes
from strength_engine.enforcement.volume_caps import enforce_volume_caps
from strength_engine.exceptions import CatalogError
from strength_engine.math.fatigue import derive_fatigue_state
from strength_engine.math.periodization import periodization_for_week
from strength_engine.math.scoring import ScoringContext, score_exercise
from strength_engine.math.volume import build_volume_context
from strength_engine.models.advisory import SraWarning, SubstitutionSuggestion
from strength_engine.models.athlete import Constraints, FatigueState, Goals, UserProfile
from strength_engine.models.decision_trace import DecisionTrace, TraceEvent, TraceStage
from strength_engine.models.enums import (
    LOW_READINESS_THRESHOLD,
    MAX_WARMUP_EXERCISES,
    WARMUP_SPLIT_TAGS,
    ExerciseRole,
    GenerationMode,
    SelectionStep,
    SessionIntent,
)
from strength_engine.models.exercise import Exercise
from strength_engine.models.history import SessionCheckIn, WorkoutHistoryEntry
from strength_engine.models.periodization import NEUTRAL_MODIFIERS, PeriodizationModifiers
from strength_engine.models.selection import RationaleEntry, SelectionOutput
from strength_engine.models.volume import MesocyclePosition, VolumeContext
from strength_engine.models.workout import WorkoutExercise, WorkoutPlan
from strength_engine.prescription import (
    build_warmup_exercise,
    prescribe_exercise,
    resolve_role,
    resolve_set_count,
)
from strength_engine.random_source import RandomSource, seeded_random_source
from strength_engine.selection.filters import (
    FilterContext,
    equipment_available,
    evaluate_hard_filters,
    is_pain_safe,
)
from strength_engine.selection.selector import (
    ESTABLISHED_USER,
    ExerciseSelector,
    SelectionRequest,
    build_volume_plan,
)

logger = logging.getLogger(__name__)

EMPTY_TEMPLATE_NOTE = "Template has no exercises"
RECOVERY_NOTE = "Autoregulated for recovery"
DELOAD_NOTE = "Deload week: reduced sets and effort"


@dataclass(frozen=True)
class TemplateItem:
    """One fixed slot of a saved template."""

    exercise_id: str
    role: ExerciseRole = ExerciseRole.ACCESSORY
    superset_group: int | None = None


@dataclass(frozen=True)
class GenerationRequest:
    """Everything one generation call needs; treated as a read-only snapshot."""

    profile: UserProfile
    catalog: tuple[Exercise, ...]
    intent: SessionIntent = SessionIntent.FULL_BODY
    goals: Goals = field(default_factory=Goals)
    constraints: Constraints = field(default_factory=Constraints)
    history: tuple[WorkoutHistoryEntry, ...] = field(default_factory=tuple)
    check_in: SessionCheckIn | None = None
    modifiers: PeriodizationModifiers | None = None
    mesocycle: MesocyclePosition | None = None
    pinned_ids: tuple[str, ...] = field(default_factory=tuple)
    avoid_ids: frozenset[str] = field(default_factory=frozenset)
    set_overrides: Mapping[str, int] = field(default_factory=dict)
    body_part_targets: frozenset[str] = field(default_factory=frozenset)
    seed: int | None = None
    cold_start_stage: int = ESTABLISHED_USER
    mode: GenerationMode = GenerationMode.FLEXIBLE
    now: datetime | None = None  # naive UTC; defaults to the current UTC time


@dataclass(frozen=True)
class GenerationResult:
    plan: WorkoutPlan
    selection: SelectionOutput
    sra_warnings: tuple[SraWarning, ...] = field(default_factory=tuple)
    substitutions: tuple[SubstitutionSuggestion, ...] = field(default_factory=tuple)
    trace: DecisionTrace = field(default_factory=DecisionTrace)


@dataclass
class _CallState:
    """Per-call values shared by the intent and template paths."""

    now: datetime
    context: VolumeContext
    fatigue: FatigueState
    modifiers: PeriodizationModifiers
    flagged: frozenset
    events: list[TraceEvent] = field(default_factory=list)

    def log(self, stage: TraceStage, detail: str) -> None:
        self.events.append(TraceEvent(stage=stage, detail=detail))


class WorkoutEngine:
    """Builds a WorkoutPlan from a user's context and a session intent or template.

    Usage:
        engine = WorkoutEngine()
        result = engine.generate(GenerationRequest(profile=..., catalog=..., intent=SessionIntent.PUSH))
        result.plan.main_lifts
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        selector: ExerciseSelector | None = None,
        random_source_factory: Callable[[int], RandomSource] = seeded_random_source,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        self.selector = selector or ExerciseSelector(self.config)
        self.random_source_factory = random_source_factory

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """Select, prescribe and trim a session for ``request.intent``.

        Args:
            request: Frozen generation request.

        Returns:
            GenerationResult with the plan, selection rationale, recovery
            warnings, substitution suggestions and decision trace.
        """
        state = self._prepare(request)
        seed = request.seed if request.seed is not None else self.config.default_seed
        selection = self.selector.select(
            SelectionRequest(
                intent=request.intent,
                profile=request.profile,
                goals=request.goals,
                constraints=request.constraints,
                fatigue=state.fatigue,
                context=state.context,
                history=request.history,
                modifiers=state.modifiers,
                pinned_ids=request.pinned_ids,
                avoid_ids=request.avoid_ids,
                body_part_targets=request.body_part_targets,
                set_overrides=request.set_overrides,
                cold_start_stage=request.cold_start_stage,
            ),
            request.catalog,
            self.random_source_factory(seed),
        )
        state.log(
            TraceStage.SELECTION,
            f"{len(selection.main_lift_ids)} main / {len(selection.accessory_ids)} accessory "
            f"selected, {len(selection.rejected)} rejected",
        )

        warmup = self._warmup_exercises(request, state, selection)
        by_id = {e.id: e for e in request.catalog}
        order = len(warmup)
        prescribed: list[WorkoutExercise] = []
        for exercise_id in selection.main_lift_ids + selection.accessory_ids:
            role = (
                ExerciseRole.MAIN
                if exercise_id in selection.main_lift_ids
                else ExerciseRole.ACCESSORY
            )
            prescribed.append(
                prescribe_exercise(
                    by_id[exercise_id],
                    role,
                    order,
                    request.goals.primary,
                    request.profile.training_age,
                    state.fatigue,
                    state.modifiers,
                    set_count=selection.per_exercise_set_targets[exercise_id],
                    config=self.config,
                )
            )
            order += 1
        state.log(TraceStage.PRESCRIPTION, f"Prescribed {len(prescribed)} exercises")

        return self._finish(request, state, selection, warmup, prescribed, trim=True)

    def generate_from_template(
        self,
        request: GenerationRequest,
        template: Sequence[TemplateItem],
    ) -> GenerationResult:
        """Prescribe a fixed list of exercises.

        STRICT mode keeps every template exercise as given. FLEXIBLE mode
        swaps an exercise that conflicts with a flagged body part for its
        best pain-safe substitute. Templates are never trimmed; an estimate
        over the session budget is reported as a plan note.

        Raises:
            CatalogError: If the template names an exercise missing from
                the catalog.
        """
        state = self._prepare(request)
        if not template:
            logger.info("Empty template; returning an empty plan")
            state.log(TraceStage.SELECTION, EMPTY_TEMPLATE_NOTE)
            return GenerationResult(
                plan=WorkoutPlan(notes=(EMPTY_TEMPLATE_NOTE,)),
                selection=SelectionOutput(),
                trace=DecisionTrace(events=tuple(state.events)),
            )

        by_id = {e.id: e for e in request.catalog}
        missing = [item.exercise_id for item in template if item.exercise_id not in by_id]
        if missing:
            raise CatalogError(f"Template references unknown exercises: {', '.join(missing)}")

        template_ids = [item.exercise_id for item in template]
        flexible = request.mode == GenerationMode.FLEXIBLE
        substitutions: tuple[SubstitutionSuggestion, ...] = ()
        if flexible:
            substitutions = build_substitution_suggestions(
                (by_id[i] for i in template_ids),
                request.catalog,
                state.flagged,
                request.constraints.available_equipment,
                avoid_ids=request.avoid_ids,
                limit=self.config.substitution_limit,
            )
        best_swap = {
            s.exercise_id: s.alternatives[0].exercise for s in substitutions if s.alternatives
        }

        scoring_ctx = ScoringContext.build(
            intent=request.intent,
            goal=request.goals.primary,
            readiness=state.fatigue.readiness,
            history=request.history,
            landmarks=self.config.landmarks,
            body_part_targets=request.body_part_targets,
        )
        filter_ctx = FilterContext(
            intent=request.intent,
            goal=request.goals.primary,
            available_equipment=request.constraints.available_equipment,
            avoid_ids=request.avoid_ids,
            flagged_parts=state.flagged,
            body_part_targets=request.body_part_targets,
        )

        warmup: tuple[WorkoutExercise, ...] = ()
        prescribed: list[WorkoutExercise] = []
        rationale: dict[str, RationaleEntry] = {}
        substituted: list[tuple[str, str]] = []
        seen: set[str] = set()
        ceiling = self.config.max_sets[request.profile.training_age]
        for order, item in enumerate(template):
            exercise = by_id[item.exercise_id]
            if exercise.id in best_swap and best_swap[exercise.id].id not in seen:
                replacement = best_swap[exercise.id]
                substituted.append((exercise.id, replacement.id))
                state.log(TraceStage.ADVISORY, f"Substituted {exercise.id} with {replacement.id}")
                exercise = replacement
            if exercise.id in seen:
                logger.warning("Skipping duplicate template exercise %s", exercise.id)
                continue
            seen.add(exercise.id)

            role, _ = resolve_role(exercise, item.role, request.goals.primary, self.config)
            set_count = request.set_overrides.get(exercise.id)
            if set_count is None:
                set_count = min(
                    ceiling,
                    resolve_set_count(
                        role,
                        request.profile.training_age,
                        state.fatigue,
                        request.goals.primary,
                        state.modifiers,
                    ),
                )
            prescribed.append(
                prescribe_exercise(
                    exercise,
                    role,
                    order,
                    request.goals.primary,
                    request.profile.training_age,
                    state.fatigue,
                    state.modifiers,
                    set_count=max(1, set_count),
                    superset_group=item.superset_group,
                    config=self.config,
                )
            )
            score, components = score_exercise(exercise, scoring_ctx)
            rationale[exercise.id] = RationaleEntry(
                score=score,
                components=components,
                hard_filters=evaluate_hard_filters(exercise, filter_ctx),
                step=SelectionStep.PIN,
            )

        mains = tuple(e.exercise_id for e in prescribed if e.is_main_lift)
        accessories = tuple(e.exercise_id for e in prescribed if not e.is_main_lift)
        selection = SelectionOutput(
            selected_exercise_ids=mains + accessories,
            main_lift_ids=mains,
            accessory_ids=accessories,
            per_exercise_set_targets={e.exercise_id: len(e.sets) for e in prescribed},
            volume_plan_by_muscle={},
            rationale=rationale,
            rejected={},
        )
        state.log(TraceStage.PRESCRIPTION, f"Prescribed {len(prescribed)} template exercises")
        return self._finish(
            request,
            state,
            selection,
            warmup,
            prescribed,
            trim=False,
            substitutions=substitutions,
            substituted=tuple(substituted),
        )

    # ------------------------------------------------------------------
    # Pipeline helpers
    # ------------------------------------------------------------------

    def _prepare(self, request: GenerationRequest) -> _CallState:
        now = request.now or datetime.now(timezone.utc).replace(tzinfo=None)
        context = build_volume_context(
            request.history, request.catalog, now, request.mesocycle, self.config
        )
        fatigue = derive_fatigue_state(request.history, request.check_in)
        modifiers = request.modifiers or self._default_modifiers(request)
        flagged = fatigue.flagged_parts() | request.profile.active_injury_parts()
        state = _CallState(
            now=now,
            context=context,
            fatigue=fatigue,
            modifiers=modifiers,
            flagged=flagged,
        )
        state.log(
            TraceStage.CONTEXT,
            f"readiness={fatigue.readiness} missed_last={fatigue.missed_last_session} "
            f"flagged={sorted(p.value for p in flagged)} enhanced={context.is_enhanced}",
        )
        return state

    def _default_modifiers(self, request: GenerationRequest) -> PeriodizationModifiers:
        if request.mesocycle is None:
            return NEUTRAL_MODIFIERS
        return periodization_for_week(
            request.mesocycle.week,
            request.mesocycle.length,
            request.goals.primary,
            request.profile.training_age,
        )

    def _warmup_exercises(
        self,
        request: GenerationRequest,
        state: _CallState,
        selection: SelectionOutput,
    ) -> tuple[WorkoutExercise, ...]:
        """Up to two mobility / prehab drills, favouring today's muscles."""
        by_id = {e.id: e for e in request.catalog}
        targets = {m for i in selection.selected_exercise_ids for m in by_id[i].primary_muscles}
        candidates = [
            e
            for e in request.catalog
            if set(e.split_tags) & WARMUP_SPLIT_TAGS
            and e.id not in request.avoid_ids
            and e.id not in selection.selected_exercise_ids
            and is_pain_safe(e, state.flagged)
            and equipment_available(e, request.constraints.available_equipment)
        ]
        ranked = sorted(
            candidates,
            key=lambda e: (-len(set(e.primary_muscles) & targets), e.fatigue_cost, e.name, e.id),
        )
        return tuple(
            build_warmup_exercise(e, index)
            for index, e in enumerate(ranked[:MAX_WARMUP_EXERCISES])
        )

    def _finish(
        self,
        request: GenerationRequest,
        state: _CallState,
        selection: SelectionOutput,
        warmup: tuple[WorkoutExercise, ...],
        prescribed: list[WorkoutExercise],
        trim: bool,
        substitutions: tuple[SubstitutionSuggestion, ...] | None = None,
        substituted: tuple[tuple[str, str], ...] = (),
    ) -> GenerationResult:
        notes: list[str] = []
        cap_removed: tuple[str, ...] = ()
        budget_removed: tuple[str, ...] = ()
        kept: Sequence[WorkoutExercise] = prescribed

        if trim:
            capped = enforce_volume_caps(kept, state.context, self.config)
            cap_removed = capped.removed
            kept = capped.kept
            if cap_removed:
                state.log(TraceStage.VOLUME_CAP, f"Removed {', '.join(cap_removed)}")

            budget = enforce_time_budget(
                list(warmup) + list(kept), request.constraints.session_minutes
            )
            budget_removed = budget.removed
            kept = [e for e in budget.kept if e.role != ExerciseRole.WARMUP]
            estimated = budget.estimated_minutes
            if budget_removed:
                state.log(TraceStage.TIME_BUDGET, f"Removed {', '.join(budget_removed)}")
            if budget.note:
                notes.append(budget.note)
                state.log(TraceStage.TIME_BUDGET, budget.note)
        else:
            estimated = estimate_minutes(list(warmup) + list(kept))
            if estimated > request.constraints.session_minutes:
                note = (
                    f"Template needs about {estimated} minutes, over the "
                    f"{request.constraints.session_minutes}-minute budget"
                )
                notes.append(note)
                state.log(TraceStage.TIME_BUDGET, note)

        removed = set(cap_removed) | set(budget_removed)
        if removed:
            selection = selection.without(removed)
        kept_by_id = {e.exercise_id: e for e in kept}
        selection = dataclasses.replace(
            selection,
            volume_plan_by_muscle=build_volume_plan(
                ((e.exercise, len(e.sets)) for e in kept), state.context, self.config
            ),
        )

        main_lifts = tuple(kept_by_id[i] for i in selection.main_lift_ids)
        accessories = tuple(kept_by_id[i] for i in selection.accessory_ids)
        target_muscles = [m for e in main_lifts + accessories for m in e.exercise.primary_muscles]
        sra_warnings = generate_sra_warnings(
            request.history, request.catalog, target_muscles, state.now, self.config.landmarks
        )

        if substitutions is None:
            substitutions = ()
            if request.mode == GenerationMode.FLEXIBLE:
                substitutions = build_substitution_suggestions(
                    (e.exercise for e in main_lifts + accessories),
                    request.catalog,
                    state.flagged,
                    request.constraints.available_equipment,
                    avoid_ids=request.avoid_ids,
                    limit=self.config.substitution_limit,
                )
        for suggestion in substitutions:
            state.log(
                TraceStage.ADVISORY,
                f"{suggestion.exercise_id}: {len(suggestion.alternatives)} alternatives",
            )

        if state.fatigue.readiness <= LOW_READINESS_THRESHOLD:
            notes.append(RECOVERY_NOTE)
        if state.modifiers.is_deload:
            notes.append(DELOAD_NOTE)
        under_recovered = sra_note(sra_warnings)
        if under_recovered:
            notes.append(under_recovered)
            state.log(TraceStage.ADVISORY, under_recovered)

        plan = WorkoutPlan(
            warmup=warmup,
            main_lifts=main_lifts,
            accessories=accessories,
            estimated_minutes=estimated,
            notes=tuple(notes),
        )
        logger.info(
            "Generated %s plan: %d main, %d accessory, ~%d min",
            request.intent.value,
            len(main_lifts),
            len(accessories),
            estimated,
        )
        return GenerationResult(
            plan=plan,
            selection=selection,
            sra_warnings=sra_warnings,
            substitutions=substitutions,
            trace=DecisionTrace(
                events=tuple(state.events),
                volume_cap_removed=cap_removed,
                time_budget_removed=budget_removed,
                substituted=substituted,
            ),
        )
