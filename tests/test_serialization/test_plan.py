"""Tests for JSON export of plans and generation results."""

import json

import pytest

from strength_engine.engine import GenerationRequest, WorkoutEngine
from strength_engine.models.enums import ExerciseRole, SessionIntent
from strength_engine.models.workout import WorkoutExercise, WorkoutPlan, WorkoutSet
from strength_engine.serialization.plan import (
    plan_to_dict,
    result_to_dict,
    result_to_json_string,
    selection_to_dict,
)


@pytest.fixture
def small_plan(catalog_by_id):
    bench = WorkoutExercise(
        exercise=catalog_by_id["bench_press"],
        order_index=0,
        role=ExerciseRole.MAIN,
        sets=(
            WorkoutSet(1, 5, target_rpe=8.0, rest_seconds=180, role=ExerciseRole.MAIN),
            WorkoutSet(2, 6, target_rpe=7.5, rest_seconds=180, role=ExerciseRole.MAIN, load_multiplier=0.9),
        ),
        warmup_sets=(WorkoutSet(1, 8, role=ExerciseRole.WARMUP, rest_seconds=60, load_multiplier=0.5),),
    )
    fly = WorkoutExercise(
        exercise=catalog_by_id["cable_fly"],
        order_index=1,
        role=ExerciseRole.ACCESSORY,
        sets=(WorkoutSet(1, 12, target_rep_range=(10, 15), target_rir=2.0, rest_seconds=60),),
        superset_group=1,
        notes="Slow eccentric",
    )
    return WorkoutPlan(main_lifts=(bench,), accessories=(fly,), estimated_minutes=14, notes=("Deload week",))


class TestPlanToDict:
    def test_top_level_keys(self, small_plan) -> None:
        result = plan_to_dict(small_plan)
        assert set(result) == {"warmup", "main_lifts", "accessories", "estimated_minutes", "notes"}
        assert result["warmup"] == []
        assert result["estimated_minutes"] == 14
        assert result["notes"] == ["Deload week"]

    def test_main_lift(self, small_plan) -> None:
        (bench,) = plan_to_dict(small_plan)["main_lifts"]
        assert bench["exercise_id"] == "bench_press"
        assert bench["name"] == "Barbell Bench Press"
        assert bench["role"] == "main"
        assert bench["sets"][1] == {
            "set_index": 2,
            "role": "main",
            "target_reps": 6,
            "target_rpe": 7.5,
            "rest_seconds": 180,
            "load_multiplier": 0.9,
        }
        assert bench["warmup_sets"][0]["role"] == "warmup"
        assert "superset_group" not in bench
        assert "notes" not in bench

    def test_optional_fields_emitted_when_set(self, small_plan) -> None:
        (fly,) = plan_to_dict(small_plan)["accessories"]
        assert fly["role"] == "accessory"
        assert fly["superset_group"] == 1
        assert fly["notes"] == "Slow eccentric"
        assert "warmup_sets" not in fly
        assert fly["sets"][0]["target_rep_range"] == [10, 15]
        assert fly["sets"][0]["target_rir"] == 2.0


class TestResultExport:
    @pytest.fixture
    def result(self, catalog, intermediate_profile, hypertrophy_goals, gym_constraints, ppl_history, now):
        request = GenerationRequest(
            profile=intermediate_profile,
            catalog=catalog,
            intent=SessionIntent.PUSH,
            goals=hypertrophy_goals,
            constraints=gym_constraints,
            history=ppl_history,
            seed=3,
            now=now,
        )
        return WorkoutEngine().generate(request)

    def test_result_sections(self, result) -> None:
        exported = result_to_dict(result)
        assert set(exported) == {"plan", "selection", "sra_warnings", "substitutions", "trace"}
        assert exported["trace"]["events"][0]["stage"] == "context"

    def test_selection_ids_match_plan(self, result) -> None:
        selection = selection_to_dict(result.selection)
        plan = plan_to_dict(result.plan)
        assert selection["main_lift_ids"] == [e["exercise_id"] for e in plan["main_lifts"]]
        assert selection["accessory_ids"] == [e["exercise_id"] for e in plan["accessories"]]
        for entry in selection["rationale"].values():
            assert entry["step"] in {"pin", "anchor", "main_pick", "accessory_pick", "starter"}

    def test_json_string_parses(self, result) -> None:
        decoded = json.loads(result_to_json_string(result))
        assert decoded == json.loads(json.dumps(result_to_dict(result)))
        assert decoded["plan"]["estimated_minutes"] == result.plan.estimated_minutes
