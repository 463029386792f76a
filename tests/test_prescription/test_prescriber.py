"""Tests for per-exercise prescription, warm-up ramps and main-lift demotion."""

import pytest

from strength_engine.models.athlete import FatigueState
from strength_engine.models.enums import ExerciseRole, Goal, TrainingAge
from strength_engine.models.periodization import PeriodizationModifiers
from strength_engine.prescription.prescriber import (
    DEMOTION_NOTE,
    prescribe_exercise,
    resolve_role,
)
from strength_engine.prescription.warmup import build_warmup_exercise, build_warmup_ramp

NEUTRAL = FatigueState(readiness=3)


class TestWarmup:
    def test_beginner_ramp(self) -> None:
        ramp = build_warmup_ramp(TrainingAge.BEGINNER)
        assert [s.load_multiplier for s in ramp] == [0.6, 0.8]
        assert [s.set_index for s in ramp] == [1, 2]
        assert all(s.role == ExerciseRole.WARMUP for s in ramp)

    def test_default_ramp(self) -> None:
        ramp = build_warmup_ramp(TrainingAge.ADVANCED)
        assert [s.target_reps for s in ramp] == [8, 5, 3]
        assert ramp[-1].rest_seconds == 90

    def test_warmup_exercise_single_set(self, catalog_by_id) -> None:
        warmup = build_warmup_exercise(catalog_by_id["hip_switch"], 0)
        assert warmup.role == ExerciseRole.WARMUP
        assert len(warmup.sets) == 1
        assert warmup.sets[0].target_reps == 10
        assert warmup.sets[0].rest_seconds == 45


class TestResolveRole:
    def test_fitting_main_kept(self, catalog_by_id) -> None:
        assert resolve_role(catalog_by_id["bench_press"], ExerciseRole.MAIN, Goal.STRENGTH) == (
            ExerciseRole.MAIN,
            False,
        )

    def test_out_of_band_main_demoted(self, catalog_by_id) -> None:
        assert resolve_role(catalog_by_id["leg_curl"], ExerciseRole.MAIN, Goal.STRENGTH) == (
            ExerciseRole.ACCESSORY,
            True,
        )

    def test_accessory_never_promoted(self, catalog_by_id) -> None:
        role, demoted = resolve_role(catalog_by_id["bench_press"], ExerciseRole.ACCESSORY, Goal.STRENGTH)
        assert role == ExerciseRole.ACCESSORY
        assert not demoted


class TestPrescribeExercise:
    def test_main_lift(self, catalog_by_id) -> None:
        prescribed = prescribe_exercise(
            catalog_by_id["bench_press"], ExerciseRole.MAIN, 2,
            Goal.HYPERTROPHY, TrainingAge.INTERMEDIATE, NEUTRAL,
        )
        assert prescribed.is_main_lift
        assert prescribed.order_index == 2
        assert len(prescribed.sets) == 4
        assert [s.load_multiplier for s in prescribed.sets] == [1.0, 0.88, 0.88, 0.88]
        first = prescribed.sets[0]
        assert first.target_reps == 6
        assert first.target_rep_range is None
        assert first.target_rpe == pytest.approx(8.0)
        assert first.rest_seconds == 180
        assert len(prescribed.warmup_sets) == 3
        assert prescribed.notes == "Primary movement"

    def test_isolation_accessory(self, catalog_by_id) -> None:
        prescribed = prescribe_exercise(
            catalog_by_id["cable_fly"], ExerciseRole.ACCESSORY, 5,
            Goal.HYPERTROPHY, TrainingAge.INTERMEDIATE, NEUTRAL, superset_group=1,
        )
        assert len(prescribed.sets) == 3
        assert prescribed.sets[0].target_rep_range == (10, 15)
        assert prescribed.sets[0].target_rpe == pytest.approx(8.5)
        assert prescribed.sets[0].rest_seconds == 75
        assert all(s.load_multiplier == 1.0 for s in prescribed.sets)
        assert prescribed.warmup_sets == ()
        assert prescribed.superset_group == 1

    def test_demoted_main_gets_accessory_treatment(self, catalog_by_id) -> None:
        prescribed = prescribe_exercise(
            catalog_by_id["leg_curl"], ExerciseRole.MAIN, 0,
            Goal.STRENGTH, TrainingAge.INTERMEDIATE, NEUTRAL,
        )
        assert prescribed.role == ExerciseRole.ACCESSORY
        assert len(prescribed.sets) == 3
        assert prescribed.sets[0].target_rep_range == (10, 12)
        assert prescribed.notes == DEMOTION_NOTE
        assert prescribed.warmup_sets == ()

    def test_explicit_set_count_wins(self, catalog_by_id) -> None:
        prescribed = prescribe_exercise(
            catalog_by_id["leg_curl"], ExerciseRole.MAIN, 0,
            Goal.STRENGTH, TrainingAge.INTERMEDIATE, NEUTRAL, set_count=2,
        )
        assert len(prescribed.sets) == 2

    def test_deload_uses_back_off_load_throughout(self, catalog_by_id) -> None:
        deload = PeriodizationModifiers(
            set_multiplier=0.5, rpe_offset=-2.0, back_off_multiplier=0.75, is_deload=True
        )
        prescribed = prescribe_exercise(
            catalog_by_id["back_squat"], ExerciseRole.MAIN, 0,
            Goal.STRENGTH, TrainingAge.INTERMEDIATE, NEUTRAL, deload,
        )
        assert len(prescribed.sets) == 2
        assert all(s.load_multiplier == 0.75 for s in prescribed.sets)
        assert all(s.target_rpe <= 6.0 for s in prescribed.sets)
