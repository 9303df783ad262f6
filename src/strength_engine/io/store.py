"""
File-based storage for workouts, profiles and programs.

Handles reading, writing, and querying the training data directory:

    workouts.jsonl   one workout (with its sets) per line, sorted by date
    profiles.json    {user_id: profile}
    programs.json    list of programs with their lifts

Writes are plain read-modify-write of the whole file; a single writer is
assumed.
"""

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable

from ..core import programs as engine
from ..core.errors import ProfileNotFoundError, ProgramNotFoundError
from ..core.exercises import get_exercise, validate_set_for_exercise
from ..core.metrics import best_working_set
from ..core.models import (
    LiftEstimate,
    LoggedSet,
    Program,
    ProgramLift,
    ProgramType,
    UserProfile,
    Workout,
)
from .serializers import (
    ValidationError,
    dict_to_program,
    dict_to_user_profile,
    json_line_to_workout,
    program_to_dict,
    user_profile_to_dict,
    validate_date,
    validate_non_negative,
    workout_to_json_line,
)

logger = logging.getLogger(__name__)


class TrainingStore:
    """
    Data-access layer over a directory of JSON files.

    Query methods mirror what the analytics need: sets of one exercise in
    a date range, the best set before a date, a profile, a program with its
    lifts.
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding workouts.jsonl, profiles.json, programs.json
        """
        self.data_dir = Path(data_dir)
        self.workouts_path = self.data_dir / "workouts.jsonl"
        self.profiles_path = self.data_dir / "profiles.json"
        self.programs_path = self.data_dir / "programs.json"

    def exists(self) -> bool:
        """Check if the workouts file exists."""
        return self.workouts_path.exists()

    def init(self) -> None:
        """
        Create the data directory and empty data files if missing.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        if not self.workouts_path.exists():
            self.workouts_path.touch()
        if not self.profiles_path.exists():
            self._write_json(self.profiles_path, {})
        if not self.programs_path.exists():
            self._write_json(self.programs_path, [])

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def _read_json(self, path: Path, default: Any) -> Any:
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Error parsing {path}: {e}") from e

    def _write_json(self, path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    # ------------------------------------------------------------------
    # Profiles
    # ------------------------------------------------------------------

    def save_profile(self, profile: UserProfile) -> None:
        """Create or replace the profile of ``profile.user_id``."""
        profiles = self._read_json(self.profiles_path, {})
        profiles[str(profile.user_id)] = user_profile_to_dict(profile)
        self._write_json(self.profiles_path, profiles)
        logger.debug("Saved profile for user %d", profile.user_id)

    def fetch_user_profile(self, user_id: int = 1) -> UserProfile:
        """
        Load a user's profile.

        Raises:
            ProfileNotFoundError: If no profile is stored for the user
            ValidationError: If the stored profile is malformed
        """
        profiles = self._read_json(self.profiles_path, {})
        data = profiles.get(str(user_id))
        if data is None:
            raise ProfileNotFoundError(user_id)
        return dict_to_user_profile(data)

    def update_bodyweight(self, user_id: int, bodyweight: float) -> UserProfile:
        """
        Update current bodyweight (in the profile's units).

        Raises:
            ProfileNotFoundError: If no profile is stored for the user
        """
        profile = replace(self.fetch_user_profile(user_id), bodyweight=bodyweight)
        self.save_profile(profile)
        return profile

    # ------------------------------------------------------------------
    # Workouts
    # ------------------------------------------------------------------

    def load_workouts(self, user_id: int | None = None) -> list[Workout]:
        """
        Load all workouts, sorted by date then id.

        Args:
            user_id: Only this user's workouts when given

        Raises:
            FileNotFoundError: If the workouts file doesn't exist
            ValidationError: If a line cannot be parsed
        """
        if not self.workouts_path.exists():
            raise FileNotFoundError(
                f"Workouts file not found: {self.workouts_path}. Run 'init' first."
            )

        workouts: list[Workout] = []
        with open(self.workouts_path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    workout = json_line_to_workout(line)
                except ValidationError as e:
                    raise ValidationError(
                        f"Error parsing line {line_num} in {self.workouts_path}: {e}"
                    ) from e
                if user_id is None or workout.user_id == user_id:
                    workouts.append(workout)

        workouts.sort(key=lambda w: (w.date, w.workout_id))
        return workouts

    def _write_workouts(self, workouts: list[Workout]) -> None:
        with open(self.workouts_path, "w", encoding="utf-8") as f:
            for workout in sorted(workouts, key=lambda w: (w.date, w.workout_id)):
                f.write(workout_to_json_line(workout) + "\n")

    def fetch_workout(self, user_id: int, date: str) -> Workout | None:
        """The user's workout on ``date``, or None."""
        validate_date(date)
        for workout in self.load_workouts(user_id):
            if workout.date == date:
                return workout
        return None

    def log_sets(
        self,
        user_id: int,
        date: str,
        exercise_id: str,
        entries: Iterable[tuple[float, int, bool]],
        notes: str | None = None,
    ) -> Workout:
        """
        Record sets of one exercise, creating the day's workout if needed.

        Set numbers continue after the sets already in the workout.

        Args:
            user_id: Owner of the workout
            date: Workout date (YYYY-MM-DD)
            exercise_id: Catalog id of the exercise
            entries: (weight, reps, is_warmup) tuples

        Returns:
            The updated workout

        Raises:
            ExerciseNotFoundError: If exercise_id is not in the catalog
            ValidationError: If a date, rep count or weight is invalid
        """
        validate_date(date)
        entries = list(entries)
        if not entries:
            raise ValidationError("No sets to log")
        for weight, reps, _ in entries:
            validate_non_negative(reps, "reps")
            try:
                validate_set_for_exercise(exercise_id, weight)
            except ValueError as e:
                raise ValidationError(str(e)) from e

        workouts = self.load_workouts()
        workout = next((w for w in workouts if w.user_id == user_id and w.date == date), None)
        if workout is None:
            next_id = max((w.workout_id for w in workouts), default=0) + 1
            workout = Workout(workout_id=next_id, user_id=user_id, date=date, notes=notes)
            workouts.append(workout)
        elif notes:
            workout.notes = f"{workout.notes}; {notes}" if workout.notes else notes

        set_number = max((s.set_number for s in workout.sets), default=0)
        for weight, reps, is_warmup in entries:
            set_number += 1
            workout.sets.append(
                LoggedSet(
                    exercise_id=exercise_id,
                    weight=weight,
                    reps=reps,
                    is_warmup=is_warmup,
                    workout_id=workout.workout_id,
                    set_number=set_number,
                    date=date,
                )
            )

        self._write_workouts(workouts)
        logger.debug("Logged %d set(s) of %s on %s (workout %d)", len(entries), exercise_id, date, workout.workout_id)
        return workout

    def fetch_sets(
        self,
        exercise_id: str,
        user_id: int,
        start_date: str | None = None,
        end_date: str | None = None,
        include_warmups: bool = False,
    ) -> list[LoggedSet]:
        """
        Sets of one exercise, ordered by date, workout and set number.

        Both date bounds are inclusive.  Warmups are excluded unless asked for.
        """
        result: list[LoggedSet] = []
        for workout in self.load_workouts(user_id):
            if start_date is not None and workout.date < start_date:
                continue
            if end_date is not None and workout.date > end_date:
                continue
            for s in workout.ordered_sets():
                if s.exercise_id != exercise_id:
                    continue
                if s.is_warmup and not include_warmups:
                    continue
                result.append(s)
        return result

    def fetch_best_historical_set(
        self, exercise_id: str, user_id: int, before_date: str
    ) -> LiftEstimate | None:
        """Best working set by estimated 1RM strictly before ``before_date``, or None."""
        candidates = [
            s for s in self.fetch_sets(exercise_id, user_id) if s.date < before_date
        ]
        return best_working_set(candidates)

    # ------------------------------------------------------------------
    # Programs
    # ------------------------------------------------------------------

    def _load_programs(self) -> list[Program]:
        raw = self._read_json(self.programs_path, [])
        return [dict_to_program(p) for p in raw]

    def _write_programs(self, programs: list[Program]) -> None:
        self._write_json(self.programs_path, [program_to_dict(p) for p in programs])

    def list_programs(self, user_id: int) -> list[Program]:
        return [p for p in self._load_programs() if p.user_id == user_id]

    def fetch_program_with_lifts(self, program_id: int) -> Program:
        """
        Load a program with its lifts.

        Raises:
            ProgramNotFoundError: If the id does not exist
        """
        for program in self._load_programs():
            if program.program_id == program_id:
                return program
        raise ProgramNotFoundError(program_id)

    def get_active_program(self, user_id: int) -> Program | None:
        for program in self.list_programs(user_id):
            if program.is_active:
                return program
        return None

    def create_program(
        self,
        user_id: int,
        name: str,
        program_type: ProgramType | str,
        start_date: str,
        lifts: Iterable[tuple[str, float]],
        units: str = "lbs",
        activate: bool = True,
    ) -> Program:
        """
        Create a program; when ``activate`` it replaces the user's active program.

        Raises:
            UnsupportedProgramTypeError: If the type is not recognised
            ExerciseNotFoundError: If a lift is not in the catalog
            ValidationError: If a training max is negative
        """
        program_lifts: list[ProgramLift] = []
        for exercise_id, training_max in lifts:
            validate_non_negative(training_max, "training_max")
            get_exercise(exercise_id)
            program_lifts.append(ProgramLift(exercise_id=exercise_id, training_max=training_max))

        programs = self._load_programs()
        program = Program(
            program_id=max((p.program_id for p in programs), default=0) + 1,
            user_id=user_id,
            name=name,
            program_type=ProgramType.parse(program_type),
            start_date=start_date,
            is_active=activate,
            units=units,  # type: ignore[arg-type]
            lifts=program_lifts,
        )
        if activate:
            for other in programs:
                if other.user_id == user_id:
                    other.is_active = False
        programs.append(program)
        self._write_programs(programs)
        logger.debug("Created program %d (%s) for user %d", program.program_id, program.program_type.value, user_id)
        return program

    def save_program(self, program: Program) -> None:
        """
        Replace the stored state of an existing program.

        Raises:
            ProgramNotFoundError: If the id does not exist
        """
        programs = self._load_programs()
        for i, existing in enumerate(programs):
            if existing.program_id == program.program_id:
                programs[i] = program
                break
        else:
            raise ProgramNotFoundError(program.program_id)
        if program.is_active:
            for other in programs:
                if other.user_id == program.user_id and other.program_id != program.program_id:
                    other.is_active = False
        self._write_programs(programs)

    def activate_program(self, program_id: int) -> Program:
        """
        Make a program its user's only active program.

        Raises:
            ProgramNotFoundError: If the id does not exist
        """
        program = self.fetch_program_with_lifts(program_id)
        program.is_active = True
        self.save_program(program)
        return program

    def add_lift(self, program_id: int, exercise_id: str, training_max: float) -> Program:
        """
        Add a lift to a program.

        Raises:
            ProgramNotFoundError: If the id does not exist
            ExerciseNotFoundError: If the exercise is not in the catalog
            ValidationError: If the program already tracks the exercise, or
                the training max is negative
        """
        validate_non_negative(training_max, "training_max")
        get_exercise(exercise_id)
        program = self.fetch_program_with_lifts(program_id)
        if program.has_lift(exercise_id):
            raise ValidationError(
                f"Program {program_id} already has lift '{exercise_id}'; update it instead"
            )
        program.lifts.append(ProgramLift(exercise_id=exercise_id, training_max=training_max))
        self.save_program(program)
        logger.debug("Added %s (%g) to program %d", exercise_id, training_max, program_id)
        return program

    def update_lift(self, program_id: int, exercise_id: str, training_max: float) -> Program:
        """
        Set the training max (working weight for linear progression) of a lift.

        Raises:
            ProgramNotFoundError: If the id does not exist
            LiftNotFoundError: If the program does not track the exercise
            ValidationError: If the training max is negative
        """
        validate_non_negative(training_max, "training_max")
        program = self.fetch_program_with_lifts(program_id)
        lift = program.get_lift(exercise_id)
        logger.debug("Program %d: %s %g -> %g", program_id, exercise_id, lift.training_max, training_max)
        lift.training_max = training_max
        self.save_program(program)
        return program

    def remove_lift(self, program_id: int, exercise_id: str) -> Program:
        """
        Stop tracking a lift in a program.

        Raises:
            ProgramNotFoundError: If the id does not exist
            LiftNotFoundError: If the program does not track the exercise
        """
        program = self.fetch_program_with_lifts(program_id)
        lift = program.get_lift(exercise_id)
        program.lifts.remove(lift)
        self.save_program(program)
        logger.debug("Removed %s from program %d", exercise_id, program_id)
        return program

    def advance_program(self, program_id: int) -> Program:
        """
        Advance a stored program one step and persist the new state.

        Raises:
            ProgramNotFoundError: If the id does not exist
        """
        program = self.fetch_program_with_lifts(program_id)
        advanced = engine.advance_program(program)
        self.save_program(advanced)
        return advanced


def get_default_data_dir() -> Path:
    """Default data directory: ~/.strength-engine"""
    return Path.home() / ".strength-engine"


def get_default_store() -> TrainingStore:
    """
    Get a TrainingStore at the default location.
    """
    return TrainingStore(get_default_data_dir())
