"""Parsing of raw catalog, history, check-in and request records.

Upstream data arrives as JSON-style dicts with snake_case keys. Every
taxonomy string is parsed strictly: an unknown movement pattern, split
tag, equipment, goal or body part raises TaxonomyError rather than being
dropped. Structural problems (missing keys, wrong types, values the
models reject) raise CatalogError.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Mapping, TypeVar

from strength_engine.engine import TemplateItem
from strength_engine.exceptions import CatalogError, TaxonomyError
from strength_engine.models.athlete import Constraints, Goals, InjuryFlag, UserProfile
from strength_engine.models.enums import (
    BodyPart,
    Equipment,
    ExerciseRole,
    Goal,
    JointStress,
    MovementPattern,
    SecondaryGoal,
    SessionIntent,
    SessionStatus,
    SplitTag,
    SplitType,
    StimulusBias,
    TrainingAge,
)
from strength_engine.models.exercise import Exercise
from strength_engine.models.history import (
    PerformedExercise,
    SessionCheckIn,
    SetLog,
    WorkoutHistoryEntry,
)
from strength_engine.models.volume import MesocyclePosition
from strength_engine.selection.selector import COLD_START_STARTER_ONLY, ESTABLISHED_USER

E = TypeVar("E", bound=Enum)

_TEMPLATE_ROLES = {"main": ExerciseRole.MAIN, "accessory": ExerciseRole.ACCESSORY}


def parse_enum(enum_cls: type[E], value: Any, field_name: str, record_id: str | None = None) -> E:
    """Strictly map an upstream string onto ``enum_cls``.

    Raises:
        TaxonomyError: If ``value`` is not one of the enum's values.
    """
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        raise TaxonomyError(field_name, value, record_id) from None


def _enum_tuple(
    enum_cls: type[E], values: Iterable[Any] | None, field_name: str, record_id: str | None
) -> tuple[E, ...]:
    return tuple(parse_enum(enum_cls, v, field_name, record_id) for v in values or ())


def parse_body_parts(
    values: Iterable[Any] | None,
    record_id: str | None = None,
    allow_unknown: bool = False,
) -> frozenset[BodyPart]:
    """Parse body-part strings; unmapped names become UNKNOWN only when allowed."""
    parts = set()
    for value in values or ():
        try:
            parts.add(parse_enum(BodyPart, value, "body_part", record_id))
        except TaxonomyError:
            if not allow_unknown:
                raise
            parts.add(BodyPart.UNKNOWN)
    return frozenset(parts)


def parse_datetime(value: Any, field_name: str = "date", record_id: str | None = None) -> datetime:
    """ISO-8601 string → naive UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError as exc:
            where = f" on record {record_id!r}" if record_id else ""
            raise CatalogError(f"Invalid {field_name} {value!r}{where}") from exc
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _require(record: Mapping[str, Any], key: str, kind: str) -> Any:
    if not isinstance(record, Mapping):
        raise CatalogError(f"{kind} record must be an object, got {type(record).__name__}")
    if key not in record or record[key] in (None, ""):
        raise CatalogError(f"{kind} record is missing required field {key!r}")
    return record[key]


def _pain_flags(raw: Mapping[str, Any] | None, record_id: str | None) -> dict[BodyPart, int]:
    flags = {}
    for part, severity in (raw or {}).items():
        try:
            flags[parse_enum(BodyPart, part, "pain_flags", record_id)] = int(severity)
        except (TypeError, ValueError) as exc:
            raise CatalogError(f"Invalid pain severity {severity!r} for {part!r}") from exc
    return flags


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

def parse_exercise(record: Mapping[str, Any], allow_unknown_body_parts: bool = False) -> Exercise:
    exercise_id = str(_require(record, "id", "exercise"))
    try:
        return Exercise(
            id=exercise_id,
            name=str(record.get("name") or exercise_id),
            movement_patterns=_enum_tuple(
                MovementPattern, record.get("movement_patterns"), "movement_pattern", exercise_id
            ),
            split_tags=_enum_tuple(SplitTag, record.get("split_tags"), "split_tag", exercise_id),
            equipment=_enum_tuple(Equipment, record.get("equipment"), "equipment", exercise_id),
            primary_muscles=tuple(record.get("primary_muscles") or ()),
            secondary_muscles=tuple(record.get("secondary_muscles") or ()),
            is_compound=bool(record.get("is_compound", False)),
            is_main_lift_eligible=bool(record.get("is_main_lift_eligible", False)),
            fatigue_cost=int(record.get("fatigue_cost", 3)),
            sfr_score=record.get("sfr_score"),
            length_position_score=record.get("length_position_score"),
            rep_range_min=record.get("rep_range_min"),
            rep_range_max=record.get("rep_range_max"),
            time_per_set_sec=record.get("time_per_set_sec"),
            stimulus_bias=_enum_tuple(
                StimulusBias, record.get("stimulus_bias"), "stimulus_bias", exercise_id
            ),
            joint_stress=parse_enum(
                JointStress, record.get("joint_stress", "medium"), "joint_stress", exercise_id
            ),
            contraindications=parse_body_parts(
                record.get("contraindications"), exercise_id, allow_unknown_body_parts
            ),
        )
    except (TypeError, ValueError) as exc:
        raise CatalogError(f"Invalid exercise record {exercise_id!r}: {exc}") from exc


def parse_catalog(
    records: Iterable[Mapping[str, Any]],
    allow_unknown_body_parts: bool = False,
) -> tuple[Exercise, ...]:
    """Parse catalog records into Exercises.

    Raises:
        TaxonomyError: On an unknown taxonomy string.
        CatalogError: On malformed records or duplicate ids.
    """
    exercises = tuple(parse_exercise(r, allow_unknown_body_parts) for r in records)
    seen: set[str] = set()
    for exercise in exercises:
        if exercise.id in seen:
            raise CatalogError(f"Duplicate exercise id {exercise.id!r}")
        seen.add(exercise.id)
    return exercises


# ---------------------------------------------------------------------------
# History and check-ins
# ---------------------------------------------------------------------------

def parse_history_entry(record: Mapping[str, Any], index: int = 0) -> WorkoutHistoryEntry:
    record_id = str(record.get("id", index)) if isinstance(record, Mapping) else str(index)
    date = parse_datetime(_require(record, "date", "history"), record_id=record_id)
    exercises = []
    for performed in record.get("exercises") or ():
        exercise_id = str(_require(performed, "exercise_id", "performed exercise"))
        try:
            sets = tuple(
                SetLog(reps=int(s["reps"]), rpe=s.get("rpe"), load=s.get("load"))
                for s in performed.get("sets") or ()
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise CatalogError(f"Invalid set log for {exercise_id!r} on record {record_id!r}") from exc
        exercises.append(PerformedExercise(exercise_id=exercise_id, sets=sets))

    intent = record.get("intent")
    try:
        return WorkoutHistoryEntry(
            date=date,
            status=parse_enum(SessionStatus, record.get("status", "completed"), "status", record_id),
            exercises=tuple(exercises),
            readiness=record.get("readiness"),
            pain_flags=_pain_flags(record.get("pain_flags"), record_id),
            soreness_notes=str(record.get("soreness_notes") or ""),
            intent=parse_enum(SessionIntent, intent, "intent", record_id) if intent else None,
        )
    except ValueError as exc:
        raise CatalogError(f"Invalid history record {record_id!r}: {exc}") from exc


def parse_history(records: Iterable[Mapping[str, Any]]) -> tuple[WorkoutHistoryEntry, ...]:
    return tuple(parse_history_entry(r, i) for i, r in enumerate(records))


def parse_check_in(record: Mapping[str, Any] | None) -> SessionCheckIn | None:
    """Parse a pre-session check-in; a missing ``pain_flags`` key means "use history"."""
    if record is None:
        return None
    date = parse_datetime(_require(record, "date", "check-in"), record_id="check_in")
    raw_flags = record.get("pain_flags")
    try:
        return SessionCheckIn(
            date=date,
            readiness=int(_require(record, "readiness", "check-in")),
            pain_flags=None if raw_flags is None else _pain_flags(raw_flags, "check_in"),
            notes=str(record.get("notes") or ""),
        )
    except ValueError as exc:
        raise CatalogError(f"Invalid check-in: {exc}") from exc


# ---------------------------------------------------------------------------
# User context
# ---------------------------------------------------------------------------

def parse_profile(record: Mapping[str, Any] | None) -> UserProfile:
    record = record or {}
    user_id = str(record.get("user_id") or "anonymous")
    injuries = tuple(
        InjuryFlag(
            body_part=parse_enum(BodyPart, _require(i, "body_part", "injury"), "body_part", user_id),
            severity=int(i.get("severity", 1)),
            is_active=bool(i.get("is_active", True)),
        )
        for i in record.get("injuries") or ()
    )
    return UserProfile(
        user_id=user_id,
        training_age=parse_enum(
            TrainingAge, record.get("training_age", "intermediate"), "training_age", user_id
        ),
        injuries=injuries,
    )


def parse_goals(record: Mapping[str, Any] | None) -> Goals:
    record = record or {}
    return Goals(
        primary=parse_enum(Goal, record.get("primary", "hypertrophy"), "goal"),
        secondary=parse_enum(SecondaryGoal, record.get("secondary", "none"), "secondary_goal"),
    )


def parse_constraints(record: Mapping[str, Any] | None) -> Constraints:
    record = record or {}
    try:
        return Constraints(
            session_minutes=int(record.get("session_minutes", 60)),
            days_per_week=int(record.get("days_per_week", 3)),
            available_equipment=frozenset(
                _enum_tuple(Equipment, record.get("available_equipment"), "equipment", None)
            ),
            split_type=parse_enum(SplitType, record.get("split_type", "ppl"), "split_type"),
        )
    except ValueError as exc:
        raise CatalogError(f"Invalid constraints: {exc}") from exc


def parse_mesocycle(record: Mapping[str, Any] | None) -> MesocyclePosition | None:
    if not record:
        return None
    try:
        return MesocyclePosition(
            week=int(_require(record, "week", "mesocycle")),
            length=int(_require(record, "length", "mesocycle")),
        )
    except (TypeError, ValueError) as exc:
        raise CatalogError(f"Invalid mesocycle: {exc}") from exc


def parse_set_overrides(record: Mapping[str, Any] | None) -> dict[str, int]:
    """Exercise id to working-set count; every count must be at least 1."""
    if not record:
        return {}
    if not isinstance(record, Mapping):
        raise CatalogError(f"set_overrides must be an object, got {type(record).__name__}")
    overrides = {}
    for exercise_id, sets in record.items():
        try:
            count = int(sets)
        except (TypeError, ValueError) as exc:
            raise CatalogError(f"Invalid set override {sets!r} for {exercise_id!r}") from exc
        if count < 1:
            raise CatalogError(f"Set override for {exercise_id!r} must be >= 1, got {count}")
        overrides[str(exercise_id)] = count
    return overrides


def parse_cold_start_stage(value: Any) -> int:
    if value is None:
        return ESTABLISHED_USER
    try:
        stage = int(value)
    except (TypeError, ValueError) as exc:
        raise CatalogError(f"Invalid cold_start_stage {value!r}") from exc
    if not COLD_START_STARTER_ONLY <= stage <= ESTABLISHED_USER:
        raise CatalogError(
            f"cold_start_stage must be between {COLD_START_STARTER_ONLY} and {ESTABLISHED_USER}, got {stage}"
        )
    return stage


def parse_template(records: Iterable[Mapping[str, Any]]) -> tuple[TemplateItem, ...]:
    items = []
    for record in records:
        exercise_id = str(_require(record, "exercise_id", "template"))
        role_name = str(record.get("role", "accessory")).lower()
        if role_name not in _TEMPLATE_ROLES:
            raise TaxonomyError("role", role_name, exercise_id)
        group = record.get("superset_group")
        items.append(
            TemplateItem(
                exercise_id=exercise_id,
                role=_TEMPLATE_ROLES[role_name],
                superset_group=int(group) if group is not None else None,
            )
        )
    return tuple(items)
