"""JSON-ready export of generated plans and their diagnostics.

All functions are pure (no I/O).
"""

from __future__ import annotations

import json

from strength_engine.engine import GenerationResult
from strength_engine.models.selection import SelectionOutput
from strength_engine.models.workout import WorkoutExercise, WorkoutPlan, WorkoutSet


def _set_to_dict(workout_set: WorkoutSet) -> dict:
    result = {
        "set_index": workout_set.set_index,
        "role": workout_set.role.name.lower(),
        "target_reps": workout_set.target_reps,
        "target_rpe": workout_set.target_rpe,
        "rest_seconds": workout_set.rest_seconds,
        "load_multiplier": workout_set.load_multiplier,
    }
    if workout_set.target_rep_range is not None:
        result["target_rep_range"] = list(workout_set.target_rep_range)
    if workout_set.target_rir is not None:
        result["target_rir"] = workout_set.target_rir
    return result


def _exercise_to_dict(item: WorkoutExercise) -> dict:
    result = {
        "exercise_id": item.exercise_id,
        "name": item.exercise.name,
        "order_index": item.order_index,
        "role": item.role.name.lower(),
        "sets": [_set_to_dict(s) for s in item.sets],
    }
    if item.warmup_sets:
        result["warmup_sets"] = [_set_to_dict(s) for s in item.warmup_sets]
    if item.superset_group is not None:
        result["superset_group"] = item.superset_group
    if item.notes:
        result["notes"] = item.notes
    return result


def plan_to_dict(plan: WorkoutPlan) -> dict:
    """Convert a WorkoutPlan to plain dicts and lists."""
    return {
        "warmup": [_exercise_to_dict(e) for e in plan.warmup],
        "main_lifts": [_exercise_to_dict(e) for e in plan.main_lifts],
        "accessories": [_exercise_to_dict(e) for e in plan.accessories],
        "estimated_minutes": plan.estimated_minutes,
        "notes": list(plan.notes),
    }


def selection_to_dict(selection: SelectionOutput) -> dict:
    return {
        "main_lift_ids": list(selection.main_lift_ids),
        "accessory_ids": list(selection.accessory_ids),
        "set_targets": dict(selection.per_exercise_set_targets),
        "volume_plan": {
            muscle: {"planned_sets": p.planned_sets, "target_sets": p.target_sets}
            for muscle, p in sorted(selection.volume_plan_by_muscle.items())
        },
        "rationale": {
            exercise_id: {
                "score": round(entry.score, 3),
                "step": entry.step.name.lower(),
                "components": {c.name.lower(): round(v, 3) for c, v in entry.components.items()},
            }
            for exercise_id, entry in selection.rationale.items()
        },
        "rejected": {
            exercise_id: [f.name.lower() for f in filters]
            for exercise_id, filters in sorted(selection.rejected.items())
        },
    }


def result_to_dict(result: GenerationResult) -> dict:
    """Plan plus selection rationale, warnings, substitutions and trace."""
    return {
        "plan": plan_to_dict(result.plan),
        "selection": selection_to_dict(result.selection),
        "sra_warnings": [
            {
                "muscle": w.muscle,
                "hours_since": w.hours_since,
                "sra_hours": w.sra_hours,
                "recovery_percent": w.recovery_percent,
            }
            for w in result.sra_warnings
        ],
        "substitutions": [
            {
                "exercise_id": s.exercise_id,
                "reason": s.reason,
                "alternatives": [
                    {"exercise_id": c.exercise.id, "name": c.exercise.name, "score": c.score}
                    for c in s.alternatives
                ],
            }
            for s in result.substitutions
        ],
        "trace": {
            "events": [
                {"stage": e.stage.name.lower(), "detail": e.detail} for e in result.trace.events
            ],
            "volume_cap_removed": list(result.trace.volume_cap_removed),
            "time_budget_removed": list(result.trace.time_budget_removed),
            "substituted": [list(pair) for pair in result.trace.substituted],
        },
    }


def result_to_json_string(result: GenerationResult, indent: int = 2) -> str:
    return json.dumps(result_to_dict(result), indent=indent)
