"""Shared test fixtures: a small gym catalog, training history and users."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

import pytest

from strength_engine.models.athlete import Constraints, FatigueState, Goals, UserProfile
from strength_engine.models.enums import (
    BodyPart,
    Equipment,
    Goal,
    JointStress,
    MovementPattern as MP,
    SessionStatus,
    SplitTag,
    StimulusBias,
    TrainingAge,
)
from strength_engine.models.exercise import Exercise
from strength_engine.models.history import PerformedExercise, SetLog, WorkoutHistoryEntry

NOW = datetime(2026, 3, 16, 18, 0)

FULL_GYM = frozenset({
    Equipment.BARBELL,
    Equipment.DUMBBELL,
    Equipment.MACHINE,
    Equipment.CABLE,
    Equipment.BENCH,
    Equipment.RACK,
    Equipment.BAND,
})


def _ex(exercise_id: str, name: str, **kwargs) -> Exercise:
    return Exercise(id=exercise_id, name=name, **kwargs)


def build_catalog() -> tuple[Exercise, ...]:
    """22 exercises covering push / pull / legs plus core and prep drills."""
    return (
        # Push
        _ex("bench_press", "Barbell Bench Press",
            movement_patterns=(MP.HORIZONTAL_PUSH,), split_tags=(SplitTag.PUSH,),
            equipment=(Equipment.BARBELL, Equipment.BENCH, Equipment.RACK),
            primary_muscles=("Chest",), secondary_muscles=("Triceps", "Front Delts"),
            is_compound=True, is_main_lift_eligible=True, fatigue_cost=4,
            sfr_score=3, rep_range_min=3, rep_range_max=10,
            stimulus_bias=(StimulusBias.MECHANICAL,), joint_stress=JointStress.MEDIUM,
            contraindications=frozenset({BodyPart.SHOULDER})),
        _ex("overhead_press", "Standing Overhead Press",
            movement_patterns=(MP.VERTICAL_PUSH,), split_tags=(SplitTag.PUSH,),
            equipment=(Equipment.BARBELL, Equipment.RACK),
            primary_muscles=("Front Delts",), secondary_muscles=("Triceps", "Side Delts"),
            is_compound=True, is_main_lift_eligible=True, fatigue_cost=4,
            sfr_score=2, rep_range_min=4, rep_range_max=10,
            stimulus_bias=(StimulusBias.MECHANICAL,), joint_stress=JointStress.HIGH,
            contraindications=frozenset({BodyPart.SHOULDER, BodyPart.LOW_BACK})),
        _ex("incline_db_press", "Incline Dumbbell Press",
            movement_patterns=(MP.HORIZONTAL_PUSH,), split_tags=(SplitTag.PUSH,),
            equipment=(Equipment.DUMBBELL, Equipment.BENCH),
            primary_muscles=("Chest", "Front Delts"), secondary_muscles=("Triceps",),
            is_compound=True, is_main_lift_eligible=True, fatigue_cost=3,
            sfr_score=4, rep_range_min=6, rep_range_max=12,
            stimulus_bias=(StimulusBias.MECHANICAL, StimulusBias.STRETCH),
            contraindications=frozenset({BodyPart.SHOULDER})),
        _ex("machine_chest_press", "Machine Chest Press",
            movement_patterns=(MP.HORIZONTAL_PUSH,), split_tags=(SplitTag.PUSH,),
            equipment=(Equipment.MACHINE,),
            primary_muscles=("Chest",), secondary_muscles=("Triceps",),
            is_compound=True, fatigue_cost=2, sfr_score=4,
            rep_range_min=8, rep_range_max=15,
            stimulus_bias=(StimulusBias.MECHANICAL,), joint_stress=JointStress.LOW),
        _ex("cable_fly", "Cable Fly",
            movement_patterns=(MP.ADDUCTION,), split_tags=(SplitTag.PUSH,),
            equipment=(Equipment.CABLE,), primary_muscles=("Chest",),
            fatigue_cost=1, sfr_score=4, length_position_score=5,
            rep_range_min=10, rep_range_max=20,
            stimulus_bias=(StimulusBias.STRETCH, StimulusBias.METABOLIC),
            joint_stress=JointStress.LOW),
        _ex("lateral_raise", "Dumbbell Lateral Raise",
            movement_patterns=(MP.ABDUCTION,), split_tags=(SplitTag.PUSH,),
            equipment=(Equipment.DUMBBELL,), primary_muscles=("Side Delts",),
            fatigue_cost=1, sfr_score=4, rep_range_min=12, rep_range_max=20,
            stimulus_bias=(StimulusBias.METABOLIC,), joint_stress=JointStress.LOW),
        _ex("triceps_pushdown", "Cable Triceps Pushdown",
            movement_patterns=(MP.EXTENSION,), split_tags=(SplitTag.PUSH,),
            equipment=(Equipment.CABLE,), primary_muscles=("Triceps",),
            fatigue_cost=1, sfr_score=4, rep_range_min=10, rep_range_max=15,
            stimulus_bias=(StimulusBias.METABOLIC,), joint_stress=JointStress.LOW,
            contraindications=frozenset({BodyPart.ELBOW})),
        # Pull
        _ex("barbell_row", "Barbell Row",
            movement_patterns=(MP.HORIZONTAL_PULL,), split_tags=(SplitTag.PULL,),
            equipment=(Equipment.BARBELL,),
            primary_muscles=("Upper Back", "Lats"), secondary_muscles=("Biceps", "Rear Delts"),
            is_compound=True, is_main_lift_eligible=True, fatigue_cost=4,
            sfr_score=3, rep_range_min=5, rep_range_max=10,
            stimulus_bias=(StimulusBias.MECHANICAL,), joint_stress=JointStress.MEDIUM,
            contraindications=frozenset({BodyPart.LOW_BACK})),
        _ex("pull_up", "Pull-Up",
            movement_patterns=(MP.VERTICAL_PULL,), split_tags=(SplitTag.PULL,),
            equipment=(Equipment.BODYWEIGHT,),
            primary_muscles=("Lats",), secondary_muscles=("Biceps",),
            is_compound=True, is_main_lift_eligible=True, fatigue_cost=3,
            sfr_score=4, rep_range_min=5, rep_range_max=12,
            stimulus_bias=(StimulusBias.MECHANICAL, StimulusBias.STRETCH),
            contraindications=frozenset({BodyPart.ELBOW})),
        _ex("lat_pulldown", "Lat Pulldown",
            movement_patterns=(MP.VERTICAL_PULL,), split_tags=(SplitTag.PULL,),
            equipment=(Equipment.CABLE,),
            primary_muscles=("Lats",), secondary_muscles=("Biceps",),
            is_compound=True, fatigue_cost=2, sfr_score=4,
            rep_range_min=8, rep_range_max=15,
            stimulus_bias=(StimulusBias.STRETCH,), joint_stress=JointStress.LOW),
        _ex("seated_cable_row", "Seated Cable Row",
            movement_patterns=(MP.HORIZONTAL_PULL,), split_tags=(SplitTag.PULL,),
            equipment=(Equipment.CABLE,),
            primary_muscles=("Upper Back",), secondary_muscles=("Lats", "Biceps"),
            is_compound=True, fatigue_cost=2, sfr_score=4,
            rep_range_min=8, rep_range_max=15,
            stimulus_bias=(StimulusBias.MECHANICAL,), joint_stress=JointStress.LOW),
        _ex("face_pull", "Cable Face Pull",
            movement_patterns=(MP.HORIZONTAL_PULL,), split_tags=(SplitTag.PULL,),
            equipment=(Equipment.CABLE,), primary_muscles=("Rear Delts",),
            fatigue_cost=1, sfr_score=4, rep_range_min=12, rep_range_max=20,
            stimulus_bias=(StimulusBias.STABILITY,), joint_stress=JointStress.LOW),
        _ex("db_curl", "Dumbbell Curl",
            movement_patterns=(MP.FLEXION,), split_tags=(SplitTag.PULL,),
            equipment=(Equipment.DUMBBELL,), primary_muscles=("Biceps",),
            fatigue_cost=1, sfr_score=4, rep_range_min=8, rep_range_max=15,
            stimulus_bias=(StimulusBias.METABOLIC,), joint_stress=JointStress.LOW),
        # Legs
        _ex("back_squat", "Barbell Back Squat",
            movement_patterns=(MP.SQUAT,), split_tags=(SplitTag.LEGS,),
            equipment=(Equipment.BARBELL, Equipment.RACK),
            primary_muscles=("Quads", "Glutes"), secondary_muscles=("Adductors", "Lower Back"),
            is_compound=True, is_main_lift_eligible=True, fatigue_cost=5,
            sfr_score=3, rep_range_min=3, rep_range_max=10,
            stimulus_bias=(StimulusBias.MECHANICAL,), joint_stress=JointStress.HIGH,
            contraindications=frozenset({BodyPart.KNEE, BodyPart.LOW_BACK})),
        _ex("romanian_deadlift", "Romanian Deadlift",
            movement_patterns=(MP.HINGE,), split_tags=(SplitTag.LEGS,),
            equipment=(Equipment.BARBELL,),
            primary_muscles=("Hamstrings", "Glutes"), secondary_muscles=("Lower Back",),
            is_compound=True, is_main_lift_eligible=True, fatigue_cost=4,
            sfr_score=3, rep_range_min=5, rep_range_max=10,
            stimulus_bias=(StimulusBias.MECHANICAL, StimulusBias.STRETCH),
            contraindications=frozenset({BodyPart.LOW_BACK})),
        _ex("leg_press", "Leg Press",
            movement_patterns=(MP.SQUAT,), split_tags=(SplitTag.LEGS,),
            equipment=(Equipment.MACHINE,),
            primary_muscles=("Quads",), secondary_muscles=("Glutes",),
            is_compound=True, fatigue_cost=3, sfr_score=4,
            rep_range_min=8, rep_range_max=15,
            stimulus_bias=(StimulusBias.MECHANICAL,), joint_stress=JointStress.LOW,
            contraindications=frozenset({BodyPart.KNEE})),
        _ex("walking_lunge", "Dumbbell Walking Lunge",
            movement_patterns=(MP.LUNGE,), split_tags=(SplitTag.LEGS,),
            equipment=(Equipment.DUMBBELL,),
            primary_muscles=("Quads", "Glutes"), secondary_muscles=("Adductors",),
            is_compound=True, fatigue_cost=3, sfr_score=3,
            rep_range_min=8, rep_range_max=12,
            stimulus_bias=(StimulusBias.STABILITY,),
            contraindications=frozenset({BodyPart.KNEE})),
        _ex("leg_curl", "Seated Leg Curl",
            movement_patterns=(MP.FLEXION,), split_tags=(SplitTag.LEGS,),
            equipment=(Equipment.MACHINE,), primary_muscles=("Hamstrings",),
            fatigue_cost=1, sfr_score=5, length_position_score=5,
            rep_range_min=10, rep_range_max=15,
            stimulus_bias=(StimulusBias.STRETCH,), joint_stress=JointStress.LOW),
        _ex("calf_raise", "Standing Calf Raise",
            movement_patterns=(MP.EXTENSION,), split_tags=(SplitTag.LEGS,),
            equipment=(Equipment.MACHINE,), primary_muscles=("Calves",),
            fatigue_cost=1, sfr_score=3, rep_range_min=10, rep_range_max=20,
            stimulus_bias=(StimulusBias.METABOLIC,), joint_stress=JointStress.LOW),
        # Core and prep
        _ex("plank", "Plank",
            movement_patterns=(MP.ANTI_ROTATION,), split_tags=(SplitTag.CORE,),
            equipment=(Equipment.BODYWEIGHT,), primary_muscles=("Core",),
            fatigue_cost=1, joint_stress=JointStress.LOW),
        _ex("band_pull_apart", "Band Pull-Apart",
            movement_patterns=(MP.HORIZONTAL_PULL,), split_tags=(SplitTag.PREHAB,),
            equipment=(Equipment.BAND,), primary_muscles=("Rear Delts",),
            fatigue_cost=1, joint_stress=JointStress.LOW),
        _ex("hip_switch", "90/90 Hip Switch",
            movement_patterns=(MP.ROTATION,), split_tags=(SplitTag.MOBILITY,),
            equipment=(Equipment.BODYWEIGHT,), primary_muscles=("Glutes",),
            fatigue_cost=1, joint_stress=JointStress.LOW),
    )


def make_session(
    days_ago: float,
    exercises: dict[str, int],
    status: SessionStatus = SessionStatus.COMPLETED,
    readiness: int | None = 4,
    reps: int = 8,
    pain_flags: dict[BodyPart, int] | None = None,
) -> WorkoutHistoryEntry:
    """A logged session ``days_ago`` before NOW with ``sets`` per exercise id."""
    return WorkoutHistoryEntry(
        date=NOW - timedelta(days=days_ago),
        status=status,
        exercises=tuple(
            PerformedExercise(exercise_id=i, sets=tuple(SetLog(reps=reps) for _ in range(n)))
            for i, n in exercises.items()
        ),
        readiness=readiness,
        pain_flags=pain_flags or {},
    )


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def catalog() -> tuple[Exercise, ...]:
    return build_catalog()


@pytest.fixture
def catalog_by_id(catalog: tuple[Exercise, ...]) -> dict[str, Exercise]:
    return {e.id: e for e in catalog}


@pytest.fixture
def full_gym() -> frozenset[Equipment]:
    return FULL_GYM


@pytest.fixture
def intermediate_profile() -> UserProfile:
    return UserProfile(user_id="sam", training_age=TrainingAge.INTERMEDIATE)


@pytest.fixture
def beginner_profile() -> UserProfile:
    return UserProfile(user_id="riley", training_age=TrainingAge.BEGINNER)


@pytest.fixture
def hypertrophy_goals() -> Goals:
    return Goals(primary=Goal.HYPERTROPHY)


@pytest.fixture
def gym_constraints() -> Constraints:
    return Constraints(session_minutes=60, days_per_week=4, available_equipment=FULL_GYM)


@pytest.fixture
def neutral_fatigue() -> FatigueState:
    return FatigueState(readiness=3)


@pytest.fixture
def ppl_history() -> tuple[WorkoutHistoryEntry, ...]:
    """Two weeks of push / pull / legs, most recent session a pull day 1 day ago."""
    return (
        make_session(1, {"barbell_row": 4, "lat_pulldown": 3, "db_curl": 3}),
        make_session(3, {"back_squat": 4, "leg_curl": 3, "calf_raise": 3}),
        make_session(5, {"bench_press": 4, "lateral_raise": 3, "triceps_pushdown": 3}),
        make_session(9, {"barbell_row": 3, "lat_pulldown": 3}),
        make_session(11, {"back_squat": 3, "leg_curl": 3}),
        make_session(13, {"bench_press": 3, "cable_fly": 3}),
    )


@pytest.fixture
def session_factory() -> Callable[..., WorkoutHistoryEntry]:
    """Factory fixture for logged sessions.

    Usage:
        entry = session_factory(2, {"bench_press": 4}, readiness=2)
    """
    return make_session
