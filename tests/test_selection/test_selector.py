"""Tests for ExerciseSelector: the pin, anchor, main and accessory pipeline."""

from dataclasses import replace

import pytest

from strength_engine.math.volume import build_volume_context
from strength_engine.models.athlete import Constraints, FatigueState, InjuryFlag
from strength_engine.models.enums import (
    BodyPart,
    HardFilter,
    MovementBucket,
    SelectionStep,
    SessionIntent,
)
from strength_engine.models.volume import MesocyclePosition, VolumeContext
from strength_engine.random_source import seeded_random_source
from strength_engine.selection.rebalance import bucket_totals
from strength_engine.selection.selector import (
    COLD_START_ACCESSORY_ONLY,
    COLD_START_STARTER_ONLY,
    ExerciseSelector,
    SelectionRequest,
)

EMPTY_CONTEXT = VolumeContext(recent={}, previous={})


@pytest.fixture
def make_request(intermediate_profile, hypertrophy_goals, gym_constraints, neutral_fatigue):
    """Factory for SelectionRequest with sensible defaults."""

    def _make(**overrides) -> SelectionRequest:
        values = dict(
            intent=SessionIntent.PUSH,
            profile=intermediate_profile,
            goals=hypertrophy_goals,
            constraints=gym_constraints,
            fatigue=neutral_fatigue,
            context=EMPTY_CONTEXT,
        )
        values.update(overrides)
        return SelectionRequest(**values)

    return _make


def _select(request, catalog, seed=7):
    return ExerciseSelector().select(request, catalog, seeded_random_source(seed))


class TestSelectionRequest:
    def test_body_part_intent_requires_targets(self, make_request) -> None:
        with pytest.raises(ValueError):
            make_request(intent=SessionIntent.BODY_PART)

    def test_invalid_cold_start_stage(self, make_request) -> None:
        with pytest.raises(ValueError):
            make_request(cold_start_stage=3)


class TestSelectionOutputShape:
    def test_every_selected_id_has_one_rationale(self, make_request, catalog) -> None:
        output = _select(make_request(), catalog)
        assert output.selected_exercise_ids
        assert set(output.rationale) == set(output.selected_exercise_ids)
        assert set(output.per_exercise_set_targets) == set(output.selected_exercise_ids)

    def test_mains_and_accessories_are_disjoint(self, make_request, catalog) -> None:
        output = _select(make_request(intent=SessionIntent.UPPER), catalog)
        assert not set(output.main_lift_ids) & set(output.accessory_ids)
        assert output.selected_exercise_ids == output.main_lift_ids + output.accessory_ids

    def test_only_intent_exercises_selected(self, make_request, catalog_by_id, catalog) -> None:
        output = _select(make_request(intent=SessionIntent.PULL), catalog)
        for exercise_id in output.selected_exercise_ids:
            assert "pull" in {t.value for t in catalog_by_id[exercise_id].split_tags}

    def test_same_seed_same_output(self, make_request, catalog, ppl_history) -> None:
        request = make_request(intent=SessionIntent.FULL_BODY, history=ppl_history)
        assert _select(request, catalog, seed=11) == _select(request, catalog, seed=11)

    def test_slot_budget_respected(self, make_request, catalog) -> None:
        output = _select(make_request(), catalog)
        assert len(output.main_lift_ids) <= 2
        assert len(output.selected_exercise_ids) <= 7


class TestHardFilterRejections:
    def test_pain_flag_excludes_contraindicated(self, make_request, catalog) -> None:
        fatigue = FatigueState(readiness=3, pain_flags={BodyPart.SHOULDER: 2})
        output = _select(make_request(fatigue=fatigue), catalog)
        for exercise_id in ("bench_press", "overhead_press", "incline_db_press"):
            assert exercise_id not in output.selected_exercise_ids
            assert HardFilter.PAIN_CONFLICT in output.rejected[exercise_id]

    def test_active_injury_counts_as_pain(self, make_request, catalog, intermediate_profile) -> None:
        profile = replace(intermediate_profile, injuries=(InjuryFlag(BodyPart.KNEE, severity=3),))
        output = _select(make_request(intent=SessionIntent.LEGS, profile=profile), catalog)
        assert not {"back_squat", "leg_press", "walking_lunge"} & set(output.selected_exercise_ids)

    def test_avoided_exercise_rejected(self, make_request, catalog) -> None:
        output = _select(make_request(avoid_ids=frozenset({"bench_press"})), catalog)
        assert "bench_press" not in output.selected_exercise_ids
        assert output.rejected["bench_press"] == (HardFilter.AVOIDED,)

    def test_missing_equipment_rejected(self, make_request, catalog) -> None:
        constraints = Constraints(session_minutes=60, available_equipment=frozenset())
        output = _select(make_request(intent=SessionIntent.PULL, constraints=constraints), catalog)
        assert output.selected_exercise_ids == ("pull_up",)


class TestPins:
    def test_pins_capped_at_three(self, make_request, catalog) -> None:
        pins = ("bench_press", "overhead_press", "incline_db_press", "machine_chest_press")
        output = _select(make_request(pinned_ids=pins), catalog)
        for exercise_id in pins[:3]:
            assert output.rationale[exercise_id].step == SelectionStep.PIN
        machine = output.rationale.get("machine_chest_press")
        assert machine is None or machine.step != SelectionStep.PIN

    def test_compound_pins_fill_main_slots_first(self, make_request, catalog) -> None:
        pins = ("bench_press", "overhead_press", "incline_db_press")
        output = _select(make_request(pinned_ids=pins), catalog)
        assert output.main_lift_ids == ("bench_press", "overhead_press")
        assert "incline_db_press" in output.accessory_ids

    def test_rejected_pin_is_dropped(self, make_request, catalog) -> None:
        output = _select(
            make_request(pinned_ids=("bench_press",), avoid_ids=frozenset({"bench_press"})), catalog
        )
        assert "bench_press" not in output.selected_exercise_ids

    def test_unknown_pin_ignored(self, make_request, catalog) -> None:
        output = _select(make_request(pinned_ids=("not_a_lift",)), catalog)
        assert "not_a_lift" not in output.selected_exercise_ids


class TestFullBody:
    def test_every_bucket_anchored(self, make_request, catalog_by_id, catalog) -> None:
        output = _select(make_request(intent=SessionIntent.FULL_BODY), catalog)
        buckets = set()
        for exercise_id in output.selected_exercise_ids:
            buckets |= catalog_by_id[exercise_id].buckets
        assert {MovementBucket.PUSH, MovementBucket.PULL, MovementBucket.LOWER} <= buckets

    def test_no_bucket_exceeds_three_times_smallest(
        self, make_request, catalog_by_id, catalog, ppl_history
    ) -> None:
        output = _select(make_request(intent=SessionIntent.FULL_BODY, history=ppl_history), catalog)
        totals = bucket_totals(output.per_exercise_set_targets, catalog_by_id)
        nonzero = [t for t in totals.values() if t > 0]
        assert max(nonzero) <= 3 * min(nonzero)


class TestSetPlanning:
    def test_intermediate_baseline_sets(self, make_request, catalog) -> None:
        output = _select(make_request(pinned_ids=("bench_press",)), catalog)
        assert output.per_exercise_set_targets["bench_press"] == 4
        for exercise_id in output.accessory_ids:
            assert output.per_exercise_set_targets[exercise_id] == 3

    def test_beginner_sets_never_exceed_ceiling(self, make_request, catalog, beginner_profile) -> None:
        constraints = Constraints(
            session_minutes=75,
            available_equipment=frozenset(e for ex in catalog for e in ex.equipment),
        )
        output = _select(
            make_request(intent=SessionIntent.LEGS, profile=beginner_profile, constraints=constraints),
            catalog,
        )
        assert output.selected_exercise_ids
        assert all(sets <= 4 for sets in output.per_exercise_set_targets.values())

    def test_overrides_floor_at_one(self, make_request, catalog) -> None:
        output = _select(
            make_request(pinned_ids=("bench_press",), set_overrides={"bench_press": 0, "ghost": 9}),
            catalog,
        )
        assert output.per_exercise_set_targets["bench_press"] == 1
        assert "ghost" not in output.per_exercise_set_targets

    def test_volume_plan_includes_mesocycle_target(
        self, make_request, catalog, ppl_history, now
    ) -> None:
        context = build_volume_context(
            ppl_history, catalog, now, mesocycle=MesocyclePosition(week=0, length=4)
        )
        output = _select(make_request(context=context, pinned_ids=("bench_press",)), catalog)
        chest = output.volume_plan_by_muscle["Chest"]
        assert chest.target_sets == pytest.approx(10.0)
        assert chest.planned_sets >= 4.0 + 4


class TestColdStart:
    def test_starter_only_stage_fills_session(self, make_request, catalog) -> None:
        output = _select(make_request(cold_start_stage=COLD_START_STARTER_ONLY), catalog)
        assert output.selected_exercise_ids
        assert {r.step for r in output.rationale.values()} == {SelectionStep.STARTER}

    def test_accessory_only_stage_has_no_mains(self, make_request, catalog) -> None:
        output = _select(
            make_request(intent=SessionIntent.FULL_BODY, cold_start_stage=COLD_START_ACCESSORY_ONLY),
            catalog,
        )
        assert output.main_lift_ids == ()
        assert len(output.accessory_ids) >= 3


class TestBodyPart:
    def test_only_target_muscle_exercises(self, make_request, catalog) -> None:
        output = _select(
            make_request(intent=SessionIntent.BODY_PART, body_part_targets=frozenset({"Biceps"})),
            catalog,
        )
        assert output.selected_exercise_ids == ("db_curl",)
        assert output.rationale["db_curl"].step == SelectionStep.ACCESSORY_PICK


class TestSteps:
    def test_main_and_accessory_steps(self, make_request, catalog) -> None:
        output = _select(make_request(intent=SessionIntent.LEGS), catalog)
        assert output.main_lift_ids
        for exercise_id in output.main_lift_ids:
            assert output.rationale[exercise_id].step == SelectionStep.MAIN_PICK
        for exercise_id in output.accessory_ids:
            assert output.rationale[exercise_id].step != SelectionStep.MAIN_PICK
