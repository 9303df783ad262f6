"""
Data models for strength-engine.

All core dataclasses representing logged training data, user profiles,
programs, and the structured results handed to the presentation layer.
Whether a negative weight is allowed depends on the exercise, so that rule
is enforced by the exercise catalog rather than by LoggedSet itself.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal

from .config import KG_TO_LB, LB_TO_KG, UNIT_SYSTEMS
from .errors import LiftNotFoundError, UnsupportedProgramTypeError

Sex = Literal["male", "female"]
Units = Literal["lbs", "kg"]


def _validate_date(date_str: str) -> None:
    """Validate date string is ISO format YYYY-MM-DD."""
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")
    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


@dataclass
class LoggedSet:
    """
    A single logged set.

    ``weight`` is signed: a negative value is the assistance load of an
    assisted exercise (e.g. assisted pull-up) and is only accepted for
    exercises whose catalog entry sets ``supports_negative_weight``.
    ``date`` is inherited from the parent workout.
    """

    exercise_id: str
    weight: float
    reps: int
    is_warmup: bool = False
    workout_id: int = 0
    set_number: int = 1
    date: str = ""

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.set_number < 1:
            raise ValueError("set_number must be positive")
        if self.date:
            _validate_date(self.date)

    @property
    def volume(self) -> float:
        """Weight × reps (negative for assisted sets)."""
        return self.weight * self.reps


@dataclass
class Workout:
    """
    A dated training session owning its sets.
    """

    workout_id: int
    user_id: int
    date: str  # ISO format: YYYY-MM-DD
    sets: list[LoggedSet] = field(default_factory=list)
    notes: str | None = None

    def __post_init__(self) -> None:
        """Validate workout data."""
        _validate_date(self.date)

    def ordered_sets(self) -> list[LoggedSet]:
        """Sets sorted by set number (stable for equal numbers)."""
        return sorted(self.sets, key=lambda s: s.set_number)

    def exercise_ids(self) -> list[str]:
        """Exercise ids in order of first appearance."""
        seen: list[str] = []
        for s in self.ordered_sets():
            if s.exercise_id not in seen:
                seen.append(s.exercise_id)
        return seen


@dataclass
class LiftEstimate:
    """A set together with its estimated 1RM. Derived, never stored."""

    exercise_id: str
    weight: float
    reps: int
    estimated_1rm: float
    date: str | None = None
    workout_id: int | None = None


@dataclass
class UserProfile:
    """
    Lifter profile used by classification and scoring.

    ``bodyweight`` is expressed in ``units``; the standards table is in
    pounds and the Wilks formula in kilograms, so both conversions are
    offered here.
    """

    bodyweight: float
    sex: Sex
    units: Units = "lbs"
    user_id: int = 1
    age: int | None = None

    def __post_init__(self) -> None:
        """Validate profile data."""
        if self.bodyweight <= 0:
            raise ValueError("bodyweight must be positive")
        if self.sex not in ("male", "female"):
            raise ValueError(f"Invalid sex: {self.sex}")
        if self.units not in UNIT_SYSTEMS:
            raise ValueError(f"Invalid units: {self.units!r}. Must be 'lbs' or 'kg'.")
        if self.age is not None and self.age <= 0:
            raise ValueError("age must be positive")

    @property
    def sex_code(self) -> str:
        """Single-letter code used by the standards and Wilks tables."""
        return "F" if self.sex == "female" else "M"

    @property
    def bodyweight_lbs(self) -> float:
        return to_lbs(self.bodyweight, self.units)

    @property
    def bodyweight_kg(self) -> float:
        return to_kg(self.bodyweight, self.units)


def to_lbs(value: float, units: str) -> float:
    """Convert a weight in ``units`` to pounds."""
    return value * KG_TO_LB if units == "kg" else value


def to_kg(value: float, units: str) -> float:
    """Convert a weight in ``units`` to kilograms."""
    return value if units == "kg" else value * LB_TO_KG


class ProgramType(str, Enum):
    """Program variants understood by the progression engine."""

    WAVE_LOADING = "wave-loading"
    LINEAR_PROGRESSION = "linear-progression"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: "str | ProgramType") -> "ProgramType":
        """
        Resolve a program type from its value or a legacy alias.

        Raises:
            UnsupportedProgramTypeError: If the value names no known variant
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        key = _PROGRAM_TYPE_ALIASES.get(key, key)
        for member in cls:
            if member.value == key:
                return member
        raise UnsupportedProgramTypeError(value)


_PROGRAM_TYPE_ALIASES: dict[str, str] = {
    "531": "wave-loading",
    "5/3/1": "wave-loading",
    "wave_loading": "wave-loading",
    "starting_strength": "linear-progression",
    "linear_progression": "linear-progression",
}


@dataclass
class ProgramLift:
    """
    One lift tracked by a program.

    For linear progression ``training_max`` holds the current working
    weight rather than a percentage base.
    """

    exercise_id: str
    training_max: float


@dataclass
class Program:
    """
    Persisted program state.

    For wave loading ``current_week`` is the 1–4 wave index; for linear
    progression it counts sessions and ``current_cycle`` toggles between
    1 (Session A) and 2 (Session B).
    """

    program_id: int
    user_id: int
    name: str
    program_type: ProgramType
    start_date: str
    current_week: int = 1
    current_cycle: int = 1
    is_active: bool = True
    units: Units = "lbs"
    lifts: list[ProgramLift] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate program state."""
        _validate_date(self.start_date)
        if self.current_week < 1:
            raise ValueError("current_week must be a positive integer")
        if self.current_cycle < 1:
            raise ValueError("current_cycle must be a positive integer")
        if self.units not in UNIT_SYSTEMS:
            raise ValueError(f"Invalid units: {self.units!r}. Must be 'lbs' or 'kg'.")

    def get_lift(self, exercise_id: str) -> ProgramLift:
        """Return the lift for ``exercise_id``; raise LiftNotFoundError if absent."""
        for lift in self.lifts:
            if lift.exercise_id == exercise_id:
                return lift
        raise LiftNotFoundError(self.program_id, exercise_id)

    def has_lift(self, exercise_id: str) -> bool:
        return any(lift.exercise_id == exercise_id for lift in self.lifts)


# =============================================================================
# Result records
# =============================================================================


@dataclass(frozen=True)
class Thresholds:
    """Standard thresholds (in pounds) for one bodyweight bracket."""

    beginner: float
    novice: float
    intermediate: float
    advanced: float
    elite: float

    def as_dict(self) -> dict[str, float]:
        return {
            "beginner": self.beginner,
            "novice": self.novice,
            "intermediate": self.intermediate,
            "advanced": self.advanced,
            "elite": self.elite,
        }


@dataclass
class NextLevel:
    """The next level up and the 1RM needed to reach it."""

    level: str
    weight: float


@dataclass
class StrengthStandard:
    """Classification of one estimated 1RM against the standards table."""

    level: str
    percentile: int
    next_level: NextLevel | None = None
    thresholds: Thresholds | None = None
    bracket: int | None = None


@dataclass
class MainLifts:
    """Best 1RM estimates of the four main barbell lifts (0 = not performed)."""

    squat: float = 0.0
    bench: float = 0.0
    deadlift: float = 0.0
    ohp: float = 0.0


@dataclass
class LiftRatios:
    """Pairwise ratios between main lifts (0 when an operand is missing)."""

    squat_to_deadlift: float = 0.0
    bench_to_squat: float = 0.0
    ohp_to_bench: float = 0.0
    deadlift_to_squat: float = 0.0
    bench_to_deadlift: float = 0.0
    ohp_to_deadlift: float = 0.0


@dataclass
class Imbalance:
    """A detected weakness or proportion issue."""

    type: Literal["weakness", "proportion"]
    severity: Literal["low", "medium", "high"]
    lift: str
    message: str
    suggestion: str
    ratio: float | None = None
    ideal: float | None = None
    percentage: float | None = None


@dataclass
class BalanceReport:
    """Output of the balance analyzer."""

    ratios: LiftRatios
    imbalances: list[Imbalance]
    score: int
    strategy: str
    interpretation: str


@dataclass
class AnnotatedSet:
    """A logged set annotated with its PR flags."""

    logged_set: LoggedSet
    volume: float
    estimated_1rm: float
    is_volume_pr: bool = False
    is_1rm_pr: bool = False


@dataclass
class PRRecord:
    """One PR set as shown to the user."""

    weight: float
    reps: int
    date: str
    volume: float
    estimated_1rm: float


@dataclass
class PRSummary:
    """PR sets of one exercise within a workout."""

    exercise: str
    volume_prs: list[PRRecord] = field(default_factory=list)
    one_rm_prs: list[PRRecord] = field(default_factory=list)


@dataclass
class PrescribedSet:
    """A set the lifter should perform next."""

    exercise_id: str
    set_number: int
    weight: float
    reps: int
    is_amrap: bool = False
    is_warmup: bool = False
    percentage: float | None = None  # Percent of training max, when derived from one


@dataclass
class PrescribedLift:
    """Warmup, main and accessory prescription for one program lift."""

    exercise_id: str
    exercise_name: str
    training_max: float
    warmup_sets: list[PrescribedSet] = field(default_factory=list)
    main_sets: list[PrescribedSet] = field(default_factory=list)
    accessory_sets: list[PrescribedSet] = field(default_factory=list)


@dataclass
class PrescribedWorkout:
    """The next workout generated from a program's state."""

    program_id: int
    program_type: ProgramType
    week: int
    cycle: int
    units: Units
    lifts: list[PrescribedLift] = field(default_factory=list)
    session_label: str | None = None


@dataclass
class PlateInventory:
    """A bar and the plates available to load on each side of it."""

    bar_weight: float
    plates: dict[float, int] = field(default_factory=dict)  # plate weight -> count per side


@dataclass
class PlateLoad:
    """How to load the bar for a target weight."""

    target: float
    bar_weight: float
    plates: list[float]  # One side, heaviest first
    per_side: float      # Weight each side needs to reach the target
    total: float         # Weight actually on the bar
    exact: bool


@dataclass
class MuscleGroupCount:
    """Weekly working-set count for one muscle group."""

    muscle_group: str
    set_count: int


@dataclass
class MuscleGroupWeek:
    """Working sets per muscle group in one Sunday–Saturday week."""

    week_start: str
    week_end: str
    muscle_groups: list[MuscleGroupCount] = field(default_factory=list)
    total_sets: int = 0


@dataclass
class ProgressionPoint:
    """Best set of one workout, scored, for progression charts."""

    date: str
    weight: float
    reps: int
    estimated_1rm: float
    wilks: float
    level: str
    percentile: int


@dataclass
class LiftSummary:
    """Current standing of one main lift."""

    lift: str  # "squat" | "bench" | "deadlift" | "ohp"
    exercise_id: str | None
    estimated_1rm: float
    level: str
    percentile: int
    next_level: NextLevel | None = None
    best_set: LiftEstimate | None = None


@dataclass
class StrengthSummary:
    """All main lifts plus the squat + bench + deadlift total."""

    lifts: dict[str, LiftSummary]
    total: float
    bodyweight: float
    units: Units
