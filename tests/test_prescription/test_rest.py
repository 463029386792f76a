"""Tests for rest interval lookup."""

from strength_engine.models.exercise import Exercise
from strength_engine.prescription.rest import resolve_rest_seconds


class TestResolveRestSeconds:
    def test_heavy_main_lift(self, catalog_by_id) -> None:
        assert resolve_rest_seconds(catalog_by_id["bench_press"], True, 5) == 300
        assert resolve_rest_seconds(catalog_by_id["incline_db_press"], True, 4) == 240

    def test_moderate_main_lift(self, catalog_by_id) -> None:
        assert resolve_rest_seconds(catalog_by_id["bench_press"], True, 6) == 180
        assert resolve_rest_seconds(catalog_by_id["incline_db_press"], True, 8) == 150

    def test_compound_accessory(self, catalog_by_id) -> None:
        assert resolve_rest_seconds(catalog_by_id["machine_chest_press"], False, 8) == 150
        assert resolve_rest_seconds(catalog_by_id["machine_chest_press"], False, 12) == 120

    def test_isolation(self, catalog_by_id) -> None:
        assert resolve_rest_seconds(catalog_by_id["lateral_raise"], False, 12) == 75
        demanding = Exercise(id="d", name="Demanding Curl", fatigue_cost=3)
        assert resolve_rest_seconds(demanding, False, 12) == 90

    def test_missing_reps_assume_role_default(self, catalog_by_id) -> None:
        assert resolve_rest_seconds(catalog_by_id["bench_press"], True) == 300
        assert resolve_rest_seconds(catalog_by_id["machine_chest_press"], False) == 120
