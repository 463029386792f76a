"""Data models for the strength engine."""

from strength_engine.models.advisory import (
    SraWarning,
    SubstitutionCandidate,
    SubstitutionSuggestion,
)
from strength_engine.models.athlete import (
    Constraints,
    FatigueState,
    Goals,
    InjuryFlag,
    UserProfile,
)
from strength_engine.models.decision_trace import DecisionTrace, TraceEvent, TraceStage
from strength_engine.models.enums import (
    BodyPart,
    Equipment,
    ExerciseRole,
    GenerationMode,
    Goal,
    MovementPattern,
    SessionIntent,
    SessionStatus,
    SplitTag,
    TrainingAge,
)
from strength_engine.models.exercise import Exercise
from strength_engine.models.history import (
    PerformedExercise,
    SessionCheckIn,
    SetLog,
    WorkoutHistoryEntry,
)
from strength_engine.models.periodization import PeriodizationModifiers, RirBand
from strength_engine.models.selection import (
    MuscleVolumePlan,
    RationaleEntry,
    SelectionOutput,
)
from strength_engine.models.volume import (
    MesocyclePosition,
    MuscleVolumeState,
    VolumeContext,
    VolumeLandmarks,
)
from strength_engine.models.workout import WorkoutExercise, WorkoutPlan, WorkoutSet

__all__ = [
    "BodyPart",
    "Constraints",
    "DecisionTrace",
    "Equipment",
    "Exercise",
    "ExerciseRole",
    "FatigueState",
    "GenerationMode",
    "Goal",
    "Goals",
    "InjuryFlag",
    "MesocyclePosition",
    "MovementPattern",
    "MuscleVolumePlan",
    "MuscleVolumeState",
    "PerformedExercise",
    "PeriodizationModifiers",
    "RationaleEntry",
    "RirBand",
    "SelectionOutput",
    "SessionCheckIn",
    "SessionIntent",
    "SessionStatus",
    "SetLog",
    "SplitTag",
    "SraWarning",
    "SubstitutionCandidate",
    "SubstitutionSuggestion",
    "TraceEvent",
    "TraceStage",
    "TrainingAge",
    "UserProfile",
    "VolumeContext",
    "VolumeLandmarks",
    "WorkoutExercise",
    "WorkoutHistoryEntry",
    "WorkoutPlan",
    "WorkoutSet",
]
