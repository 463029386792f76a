"""Tests for accessory retention scoring."""

import pytest

from strength_engine.enforcement.retention import (
    accessory_muscle_counts,
    lowest_retention,
    main_covered_muscles,
    retention_score,
)
from strength_engine.models.enums import ExerciseRole


@pytest.fixture
def push_session(item_factory, catalog_by_id):
    main = item_factory(catalog_by_id["bench_press"], 0, ExerciseRole.MAIN, sets=4)
    accessories = [
        item_factory(catalog_by_id["cable_fly"], 1),
        item_factory(catalog_by_id["lateral_raise"], 2),
        item_factory(catalog_by_id["machine_chest_press"], 3),
    ]
    return [main], accessories


class TestRetentionScore:
    def test_score_terms(self, push_session) -> None:
        mains, accessories = push_session
        covered = main_covered_muscles(mains)
        counts = accessory_muscle_counts(accessories)
        assert covered == {"Chest"}
        assert counts["Chest"] == 2

        scores = {a.exercise_id: retention_score(a.exercise, covered, counts) for a in accessories}
        # fatigue 1, Chest covered by the main lift, one other Chest accessory
        assert scores["cable_fly"] == 0
        # fatigue 1, Side Delts uncovered
        assert scores["lateral_raise"] == 3
        assert scores["machine_chest_press"] == 1

    def test_sole_accessory_has_no_redundancy(self, item_factory, catalog_by_id) -> None:
        curl = item_factory(catalog_by_id["db_curl"], 0)
        counts = accessory_muscle_counts([curl])
        assert retention_score(curl.exercise, frozenset(), counts) == 3


class TestLowestRetention:
    def test_picks_lowest_score(self, push_session) -> None:
        mains, accessories = push_session
        assert lowest_retention(accessories, mains).exercise_id == "cable_fly"

    def test_tie_removes_later_exercise(self, item_factory, catalog_by_id) -> None:
        accessories = [
            item_factory(catalog_by_id["face_pull"], 1),
            item_factory(catalog_by_id["db_curl"], 2),
        ]
        assert lowest_retention(accessories, []).exercise_id == "db_curl"

    def test_empty_raises(self) -> None:
        with pytest.raises(ValueError):
            lowest_retention([], [])
