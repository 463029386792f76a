"""Enumerations and rule constants for the strength engine.

Taxonomy enums carry the string values used by upstream catalog data so the
serialization boundary can parse them strictly. Thresholds cite their
published source where one exists.
"""

from enum import Enum, IntEnum, auto


# ---------------------------------------------------------------------------
# Catalog taxonomy (string-valued, parsed at the data-loading boundary)
# ---------------------------------------------------------------------------


class MovementPattern(str, Enum):
    """Movement pattern tags on catalog exercises."""

    HORIZONTAL_PUSH = "horizontal_push"
    VERTICAL_PUSH = "vertical_push"
    HORIZONTAL_PULL = "horizontal_pull"
    VERTICAL_PULL = "vertical_pull"
    SQUAT = "squat"
    HINGE = "hinge"
    LUNGE = "lunge"
    CARRY = "carry"
    ROTATION = "rotation"
    ANTI_ROTATION = "anti_rotation"
    FLEXION = "flexion"
    EXTENSION = "extension"
    ABDUCTION = "abduction"
    ADDUCTION = "adduction"
    ISOLATION = "isolation"


class SplitTag(str, Enum):
    """Split-day tags an exercise belongs to."""

    PUSH = "push"
    PULL = "pull"
    LEGS = "legs"
    CORE = "core"
    MOBILITY = "mobility"
    PREHAB = "prehab"
    CONDITIONING = "conditioning"


class Equipment(str, Enum):
    BARBELL = "barbell"
    DUMBBELL = "dumbbell"
    MACHINE = "machine"
    CABLE = "cable"
    BODYWEIGHT = "bodyweight"
    KETTLEBELL = "kettlebell"
    BAND = "band"
    SLED = "sled"
    BENCH = "bench"
    RACK = "rack"
    EZ_BAR = "ez_bar"
    TRAP_BAR = "trap_bar"
    OTHER = "other"


class StimulusBias(str, Enum):
    """Dominant hypertrophy stimulus an exercise emphasises."""

    MECHANICAL = "mechanical"
    METABOLIC = "metabolic"
    STRETCH = "stretch"
    STABILITY = "stability"


class JointStress(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BodyPart(str, Enum):
    """Body parts referenced by pain flags and contraindications.

    UNKNOWN is reserved for upstream body parts with no mapping; it never
    matches a pain flag.
    """

    NECK = "neck"
    SHOULDER = "shoulder"
    ELBOW = "elbow"
    WRIST = "wrist"
    UPPER_BACK = "upper_back"
    LOW_BACK = "low_back"
    HIP = "hip"
    KNEE = "knee"
    ANKLE = "ankle"
    UNKNOWN = "unknown"


class Goal(str, Enum):
    """Primary training goal."""

    HYPERTROPHY = "hypertrophy"
    STRENGTH = "strength"
    FAT_LOSS = "fat_loss"
    ATHLETICISM = "athleticism"
    GENERAL_HEALTH = "general_health"


class SecondaryGoal(str, Enum):
    POSTURE = "posture"
    CONDITIONING = "conditioning"
    INJURY_PREVENTION = "injury_prevention"
    STRENGTH = "strength"
    NONE = "none"


class TrainingAge(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SplitType(str, Enum):
    PPL = "ppl"
    UPPER_LOWER = "upper_lower"
    FULL_BODY = "full_body"
    CUSTOM = "custom"


class SessionIntent(str, Enum):
    """What the requested session should train."""

    PUSH = "push"
    PULL = "pull"
    LEGS = "legs"
    UPPER = "upper"
    LOWER = "lower"
    FULL_BODY = "full_body"
    BODY_PART = "body_part"


class SessionStatus(str, Enum):
    """Lifecycle status of a logged workout."""

    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"


# ---------------------------------------------------------------------------
# Engine-internal enums
# ---------------------------------------------------------------------------


class MuscleRole(IntEnum):
    PRIMARY = auto()
    SECONDARY = auto()


class ExerciseRole(IntEnum):
    """Position of an exercise inside a generated session."""

    WARMUP = auto()
    MAIN = auto()
    ACCESSORY = auto()


class MovementBucket(IntEnum):
    """Coarse grouping of movement patterns used for balance and redundancy."""

    PUSH = auto()
    PULL = auto()
    LOWER = auto()
    TRUNK = auto()
    SINGLE_JOINT = auto()


class SelectionStep(IntEnum):
    """Which selection step chose an exercise."""

    PIN = auto()
    ANCHOR = auto()
    MAIN_PICK = auto()
    ACCESSORY_PICK = auto()
    STARTER = auto()


class HardFilter(IntEnum):
    """Hard filters that reject a candidate outright."""

    EQUIPMENT = auto()
    AVOIDED = auto()
    PAIN_CONFLICT = auto()
    BODY_PART_TARGET = auto()
    LOW_SFR = auto()
    SPLIT_MISMATCH = auto()
    DUPLICATE_ACCESSORY = auto()


class ScoreComponent(IntEnum):
    """Named terms of the candidate soft score."""

    PATTERN_OVERLAP = auto()
    MUSCLE_OVERLAP = auto()
    STIMULUS_OVERLAP = auto()
    RECENCY = auto()
    NOVELTY = auto()
    FATIGUE_PENALTY = auto()
    SFR_BONUS = auto()


class GenerationMode(IntEnum):
    """FLEXIBLE may substitute pain-conflicting exercises; STRICT never does."""

    FLEXIBLE = auto()
    STRICT = auto()


# ---------------------------------------------------------------------------
# Movement taxonomy tables
# ---------------------------------------------------------------------------

PATTERN_BUCKETS = {
    MovementPattern.HORIZONTAL_PUSH: MovementBucket.PUSH,
    MovementPattern.VERTICAL_PUSH: MovementBucket.PUSH,
    MovementPattern.HORIZONTAL_PULL: MovementBucket.PULL,
    MovementPattern.VERTICAL_PULL: MovementBucket.PULL,
    MovementPattern.SQUAT: MovementBucket.LOWER,
    MovementPattern.HINGE: MovementBucket.LOWER,
    MovementPattern.LUNGE: MovementBucket.LOWER,
    MovementPattern.CARRY: MovementBucket.TRUNK,
    MovementPattern.ROTATION: MovementBucket.TRUNK,
    MovementPattern.ANTI_ROTATION: MovementBucket.TRUNK,
    MovementPattern.FLEXION: MovementBucket.SINGLE_JOINT,
    MovementPattern.EXTENSION: MovementBucket.SINGLE_JOINT,
    MovementPattern.ABDUCTION: MovementBucket.SINGLE_JOINT,
    MovementPattern.ADDUCTION: MovementBucket.SINGLE_JOINT,
    MovementPattern.ISOLATION: MovementBucket.SINGLE_JOINT,
}

# Buckets balanced by the full-body anchor step and rebalance pass
BALANCED_BUCKETS = (MovementBucket.PUSH, MovementBucket.PULL, MovementBucket.LOWER)

_PUSH_PATTERNS = frozenset({MovementPattern.HORIZONTAL_PUSH, MovementPattern.VERTICAL_PUSH})
_PULL_PATTERNS = frozenset({MovementPattern.HORIZONTAL_PULL, MovementPattern.VERTICAL_PULL})
_LEG_PATTERNS = frozenset({MovementPattern.SQUAT, MovementPattern.HINGE, MovementPattern.LUNGE})

INTENT_PATTERNS = {
    SessionIntent.PUSH: _PUSH_PATTERNS,
    SessionIntent.PULL: _PULL_PATTERNS,
    SessionIntent.LEGS: _LEG_PATTERNS,
    SessionIntent.UPPER: _PUSH_PATTERNS | _PULL_PATTERNS,
    SessionIntent.LOWER: _LEG_PATTERNS,
    SessionIntent.FULL_BODY: _PUSH_PATTERNS | _PULL_PATTERNS | _LEG_PATTERNS,
    SessionIntent.BODY_PART: frozenset(),
}

INTENT_SPLIT_TAGS = {
    SessionIntent.PUSH: frozenset({SplitTag.PUSH}),
    SessionIntent.PULL: frozenset({SplitTag.PULL}),
    SessionIntent.LEGS: frozenset({SplitTag.LEGS}),
    SessionIntent.UPPER: frozenset({SplitTag.PUSH, SplitTag.PULL}),
    SessionIntent.LOWER: frozenset({SplitTag.LEGS}),
    SessionIntent.FULL_BODY: frozenset({SplitTag.PUSH, SplitTag.PULL, SplitTag.LEGS}),
}

# Split tags never offered as substitutes or picked as session work
BLOCKED_SUBSTITUTION_TAGS = frozenset({
    SplitTag.CORE,
    SplitTag.MOBILITY,
    SplitTag.PREHAB,
    SplitTag.CONDITIONING,
})

WARMUP_SPLIT_TAGS = frozenset({SplitTag.MOBILITY, SplitTag.PREHAB})
MAX_WARMUP_EXERCISES = 2

# Preferred stimulus biases per goal for the stimulus-overlap score term
GOAL_STIMULUS_BIAS = {
    Goal.HYPERTROPHY: frozenset({StimulusBias.MECHANICAL, StimulusBias.METABOLIC, StimulusBias.STRETCH}),
    Goal.STRENGTH: frozenset({StimulusBias.MECHANICAL}),
    Goal.FAT_LOSS: frozenset({StimulusBias.METABOLIC}),
    Goal.ATHLETICISM: frozenset({StimulusBias.MECHANICAL, StimulusBias.STABILITY}),
    Goal.GENERAL_HEALTH: frozenset({StimulusBias.MECHANICAL, StimulusBias.STABILITY}),
}

# ---------------------------------------------------------------------------
# Volume landmarks: Israetel, Hoffmann & Smith (2019),
# Scientific Principles of Hypertrophy Training
# (MV, MEV, MAV, MRV weekly sets, SRA recovery hours)
# ---------------------------------------------------------------------------
VOLUME_LANDMARK_TABLE = {
    "Chest": (6, 10, 16, 22, 60),
    "Lats": (6, 8, 16, 24, 60),
    "Upper Back": (6, 6, 14, 22, 48),
    "Front Delts": (0, 0, 7, 14, 48),
    "Side Delts": (6, 8, 19, 26, 36),
    "Rear Delts": (6, 4, 12, 20, 36),
    "Quads": (6, 8, 18, 26, 72),
    "Hamstrings": (6, 6, 16, 24, 72),
    "Glutes": (0, 0, 8, 16, 72),
    "Biceps": (6, 8, 17, 26, 36),
    "Triceps": (4, 6, 12, 20, 48),
    "Calves": (6, 8, 14, 20, 36),
    "Core": (0, 0, 12, 20, 36),
    "Lower Back": (0, 0, 4, 10, 72),
    "Forearms": (0, 0, 6, 12, 36),
    "Adductors": (0, 0, 8, 16, 48),
    "Abductors": (0, 0, 6, 12, 36),
    "Abs": (0, 0, 10, 16, 36),
}

# Split day each canonical muscle is trained on
MUSCLE_SPLIT_MAP = {
    "Chest": SplitTag.PUSH,
    "Front Delts": SplitTag.PUSH,
    "Side Delts": SplitTag.PUSH,
    "Triceps": SplitTag.PUSH,
    "Lats": SplitTag.PULL,
    "Upper Back": SplitTag.PULL,
    "Rear Delts": SplitTag.PULL,
    "Biceps": SplitTag.PULL,
    "Forearms": SplitTag.PULL,
    "Quads": SplitTag.LEGS,
    "Hamstrings": SplitTag.LEGS,
    "Glutes": SplitTag.LEGS,
    "Calves": SplitTag.LEGS,
    "Core": SplitTag.LEGS,
    "Lower Back": SplitTag.LEGS,
    "Adductors": SplitTag.LEGS,
    "Abductors": SplitTag.LEGS,
    "Abs": SplitTag.LEGS,
}

# Secondary muscles count for half a set: Schoenfeld et al. (2017),
# J Sports Sci 35(11):1073-1082 fractional set counting
INDIRECT_SET_MULTIPLIER = 0.5

RECENT_WINDOW_DAYS = 7
PREVIOUS_WINDOW_DAYS = 14

# Without landmarks, a muscle may grow at most 20% over last week's sets
VOLUME_CAP_FALLBACK_MULTIPLIER = 1.2

# ---------------------------------------------------------------------------
# Readiness and neutral defaults
# ---------------------------------------------------------------------------
NEUTRAL_READINESS = 3
LOW_READINESS_THRESHOLD = 2
NEUTRAL_EFFICIENCY_SCORE = 3.0
DEFAULT_FATIGUE_COST = 3

# ---------------------------------------------------------------------------
# Candidate scoring weights
# ---------------------------------------------------------------------------
PATTERN_OVERLAP_WEIGHT = 4.0
MUSCLE_OVERLAP_WEIGHT = 3.0
STIMULUS_OVERLAP_WEIGHT = 2.0

# Index 0 = most recent completed session
RECENCY_MULTIPLIERS = (0.3, 0.5, 0.7)
NOVELTY_MULTIPLIER = 1.5

FATIGUE_PENALTY_WEIGHT = 1.3
SFR_BONUS_WEIGHT = 1.2
LENGTH_POSITION_BONUS_WEIGHT = 0.8

# Readiness → how strongly fatigue cost is penalised
FATIGUE_PENALTY_READINESS_FACTOR = {1: 1.0, 2: 1.0, 3: 0.5, 4: 0.2, 5: 0.2}

# Starter-pack score for cold-start users
STARTER_TARGET_WEIGHT = 3.0
STARTER_JOINT_SAFETY_WEIGHT = 2.0
STARTER_FATIGUE_WEIGHT = 0.5
JOINT_SAFETY_SCORE = {
    JointStress.LOW: 3,
    JointStress.MEDIUM: 2,
    JointStress.HIGH: 1,
}

# SFR at or below this is rejected for isolation accessories on
# hypertrophy / fat-loss goals
LOW_SFR_THRESHOLD = 1.0
SFR_FILTERED_GOALS = frozenset({Goal.HYPERTROPHY, Goal.FAT_LOSS})

# ---------------------------------------------------------------------------
# Slot budget
# ---------------------------------------------------------------------------
# (main min, main max), (accessory min, accessory max) interpolated over minutes
SLOT_RANGES_BY_INTENT = {
    SessionIntent.PUSH: ((1, 2), (3, 5)),
    SessionIntent.PULL: ((1, 2), (3, 5)),
    SessionIntent.LEGS: ((1, 2), (3, 5)),
    SessionIntent.LOWER: ((1, 2), (3, 5)),
    SessionIntent.UPPER: ((1, 2), (4, 6)),
    SessionIntent.FULL_BODY: ((1, 2), (4, 6)),
    SessionIntent.BODY_PART: ((0, 2), (4, 6)),
}
SLOT_MINUTES_RANGE = (35.0, 80.0)
MAX_MAIN_LIFTS = 2
MAX_PINNED_EXERCISES = 3
MIN_COLD_START_SELECTION = 3

# Full-body fairness: no bucket above this multiple of the smallest bucket
BUCKET_IMBALANCE_RATIO = 3.0
REBALANCE_MAX_ITERATIONS = 60

# ---------------------------------------------------------------------------
# Set prescription
# ---------------------------------------------------------------------------
BASE_SETS_MAIN = 4
BASE_SETS_ACCESSORY = 3
MIN_BASELINE_SETS = 2
MIN_WORKING_SETS = 1
DEMOTED_MAIN_SETS = 3
SET_MODIFIER_BY_TRAINING_AGE = {
    TrainingAge.BEGINNER: 0.85,
    TrainingAge.INTERMEDIATE: 1.0,
    TrainingAge.ADVANCED: 1.15,
}
# Volume trimmed during a caloric deficit: Roth et al. (2022)
GOAL_SET_MULTIPLIER = {
    Goal.FAT_LOSS: 0.75,
}
MAX_SETS_BY_TRAINING_AGE = {
    TrainingAge.BEGINNER: 4,
    TrainingAge.INTERMEDIATE: 5,
    TrainingAge.ADVANCED: 6,
}

# (main band, accessory band) reps
REP_RANGES_BY_GOAL = {
    Goal.HYPERTROPHY: ((6, 10), (10, 15)),
    Goal.STRENGTH: ((3, 6), (6, 10)),
    Goal.FAT_LOSS: ((6, 10), (12, 20)),
    Goal.ATHLETICISM: ((4, 8), (8, 12)),
    Goal.GENERAL_HEALTH: ((8, 12), (10, 15)),
}
MIN_ACCESSORY_REP_SPAN = 2

# RIR-based RPE scale: Zourdos et al. (2016), J Strength Cond Res 30(1):267-275
TARGET_RPE_BY_GOAL = {
    Goal.HYPERTROPHY: 7.5,
    Goal.STRENGTH: 8.0,
    Goal.FAT_LOSS: 7.5,
    Goal.ATHLETICISM: 7.5,
    Goal.GENERAL_HEALTH: 7.0,
}
HYPERTROPHY_RPE_BY_TRAINING_AGE = {
    TrainingAge.BEGINNER: 7.0,
    TrainingAge.INTERMEDIATE: 8.0,
    TrainingAge.ADVANCED: 8.5,
}
ISOLATION_RPE_BUMP = 0.5
DELOAD_RPE_CAP = 6.0
MIN_TARGET_RPE = 5.0
MAX_TARGET_RPE = 10.0

# Lifecycle RIR band allocation within [min, max]
COMPOUND_RIR_BAND_POSITION = 0.25
ACCESSORY_RIR_BAND_POSITION = 0.75

BACK_OFF_MULTIPLIER_BY_GOAL = {
    Goal.HYPERTROPHY: 0.88,
    Goal.STRENGTH: 0.90,
}
DEFAULT_BACK_OFF_MULTIPLIER = 0.85

# ---------------------------------------------------------------------------
# Rest intervals: de Salles et al. (2009), Sports Med 39(9):765-777
# ---------------------------------------------------------------------------
REST_MAIN_HEAVY_HIGH_FATIGUE = 300
REST_MAIN_HEAVY = 240
REST_MAIN_HIGH_FATIGUE = 180
REST_MAIN = 150
REST_COMPOUND_ACCESSORY_LOW_REP = 150
REST_COMPOUND_ACCESSORY = 120
REST_ISOLATION_HIGH_FATIGUE = 90
REST_ISOLATION = 75
REST_WARMUP = 45
HEAVY_REP_THRESHOLD = 5
COMPOUND_ACCESSORY_LOW_REP_THRESHOLD = 8
HIGH_FATIGUE_MAIN = 4
HIGH_FATIGUE_ISOLATION = 3

# ---------------------------------------------------------------------------
# Warm-up ramp for main lifts: (fraction of working load, reps, rest seconds)
# ---------------------------------------------------------------------------
WARMUP_RAMP_BEGINNER = ((0.6, 8, 60), (0.8, 3, 90))
WARMUP_RAMP_DEFAULT = ((0.5, 8, 60), (0.7, 5, 60), (0.85, 3, 90))
WARMUP_EXERCISE_REPS = 10

# ---------------------------------------------------------------------------
# Session timeboxing
# ---------------------------------------------------------------------------
SECONDS_PER_REP = 2
SET_SETUP_SECONDS = 10
MIN_WORK_SECONDS = 20
MAX_WORK_SECONDS = 90
FALLBACK_WORK_SECONDS_MAIN = 60
FALLBACK_WORK_SECONDS_ACCESSORY = 40
MAX_WARMUP_WORK_SECONDS = 30
SUPERSET_SHARED_REST_MULTIPLIER = 0.6
SUPERSET_SHARED_REST_FLOOR_SECONDS = 60

# ---------------------------------------------------------------------------
# Substitution and recovery advisory
# ---------------------------------------------------------------------------
SUBSTITUTION_LIMIT = 3
FULL_RECOVERY_PERCENT = 100

# ---------------------------------------------------------------------------
# Mesocycle periodization
# ---------------------------------------------------------------------------
MESOCYCLE_SET_RAMP = 0.3
DELOAD_SET_MULTIPLIER = 0.5
DELOAD_RPE_OFFSET = -2.0
DELOAD_BACK_OFF_MULTIPLIER = 0.75
BLOCK_LENGTH_WEEKS = 4

# (progress upper bound, RPE offset) for the generic ramp
GENERIC_RPE_OFFSETS = ((0.25, -1.5), (0.5, -0.5), (0.75, 0.5), (1.0, 1.0))

# (early, middle, late) RPE offsets by training age
RPE_OFFSETS_BY_TRAINING_AGE = {
    TrainingAge.BEGINNER: (-0.5, 0.0, 0.5),
    TrainingAge.INTERMEDIATE: (-1.0, -0.5, 0.5),
    TrainingAge.ADVANCED: (-1.5, -0.5, 1.0),
}

# Week-in-mesocycle → (RIR min, RIR max); final week is the deload
LIFECYCLE_RIR_BANDS = {
    1: (3.0, 4.0),
    2: (2.0, 3.0),
    3: (2.0, 3.0),
    4: (1.0, 2.0),
    5: (4.0, 6.0),
}
LIFECYCLE_DELOAD_WEEK = 5

# Deload triggers
LOW_READINESS_STREAK_FOR_DELOAD = 4
PLATEAU_SESSIONS_FOR_DELOAD = 5
