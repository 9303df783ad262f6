"""
JSON serialization for training data models.

Handles conversion between dataclasses and JSON-compatible dicts, and
parsing of the compact sets strings typed on the command line.
"""

import json
import re
from dataclasses import asdict, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from ..core.models import (
    LoggedSet,
    Program,
    ProgramLift,
    ProgramType,
    UserProfile,
    Workout,
)
from ..core.errors import UnsupportedProgramTypeError


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate and normalize date string to ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        Normalized YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")

    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValidationError(f"Invalid date: {date_str}") from e

    return date_str


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def validate_units(units: str) -> str:
    if units not in ("lbs", "kg"):
        raise ValidationError(f"Invalid units: {units!r}. Must be 'lbs' or 'kg'")
    return units


# =============================================================================
# Workouts and sets
# =============================================================================


def logged_set_to_dict(s: LoggedSet) -> dict[str, Any]:
    """Compact set dict; workout_id and date live on the parent workout."""
    d: dict[str, Any] = {
        "exercise_id": s.exercise_id,
        "set_number": s.set_number,
        "weight": s.weight,
        "reps": s.reps,
    }
    if s.is_warmup:
        d["is_warmup"] = True
    return d


def dict_to_logged_set(data: dict[str, Any], workout_id: int = 0, date: str = "") -> LoggedSet:
    """
    Convert dict to LoggedSet, inheriting workout id and date from the parent.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        exercise_id = str(data["exercise_id"])
        reps = int(data["reps"])
        weight = float(data["weight"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid set record: {data!r}") from e
    validate_non_negative(reps, "reps")
    validate_positive(int(data.get("set_number", 1)), "set_number")

    return LoggedSet(
        exercise_id=exercise_id,
        weight=weight,
        reps=reps,
        is_warmup=bool(data.get("is_warmup", False)),
        workout_id=workout_id,
        set_number=int(data.get("set_number", 1)),
        date=date,
    )


def workout_to_dict(workout: Workout) -> dict[str, Any]:
    d: dict[str, Any] = {
        "workout_id": workout.workout_id,
        "user_id": workout.user_id,
        "date": workout.date,
        "sets": [logged_set_to_dict(s) for s in workout.ordered_sets()],
    }
    if workout.notes:
        d["notes"] = workout.notes
    return d


def dict_to_workout(data: dict[str, Any]) -> Workout:
    """
    Convert dict to Workout.

    Raises:
        ValidationError: If data is invalid
    """
    validate_date(data.get("date", ""))
    try:
        workout_id = int(data["workout_id"])
        user_id = int(data.get("user_id", 1))
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid workout record: {data!r}") from e

    return Workout(
        workout_id=workout_id,
        user_id=user_id,
        date=data["date"],
        sets=[dict_to_logged_set(s, workout_id, data["date"]) for s in data.get("sets", [])],
        notes=data.get("notes"),
    )


def workout_to_json_line(workout: Workout) -> str:
    """Serialize a workout to a single JSON line (no trailing newline)."""
    return json.dumps(workout_to_dict(workout), separators=(",", ":"))


def json_line_to_workout(line: str) -> Workout:
    """
    Deserialize a JSON line to a Workout.

    Raises:
        ValidationError: If JSON is invalid or data validation fails
    """
    try:
        data = json.loads(line.strip())
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError(f"Expected a JSON object, got {type(data).__name__}")
    return dict_to_workout(data)


# =============================================================================
# Profiles
# =============================================================================


def user_profile_to_dict(profile: UserProfile) -> dict[str, Any]:
    d: dict[str, Any] = {
        "user_id": profile.user_id,
        "bodyweight": profile.bodyweight,
        "units": profile.units,
        "sex": profile.sex,
    }
    if profile.age is not None:
        d["age"] = profile.age
    return d


def dict_to_user_profile(data: dict[str, Any]) -> UserProfile:
    """
    Convert dict to UserProfile.

    Raises:
        ValidationError: If data is invalid
    """
    try:
        bodyweight = float(data.get("bodyweight", 0))
        user_id = int(data.get("user_id", 1))
        age = int(data["age"]) if data.get("age") is not None else None
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid profile record: {data!r}") from e
    validate_positive(bodyweight, "bodyweight")
    if data.get("sex") not in ("male", "female"):
        raise ValidationError(f"Invalid sex: {data.get('sex')}. Must be 'male' or 'female'")
    validate_units(data.get("units", "lbs"))
    if age is not None:
        validate_positive(age, "age")

    return UserProfile(
        bodyweight=bodyweight,
        sex=data["sex"],
        units=data.get("units", "lbs"),
        user_id=user_id,
        age=age,
    )


# =============================================================================
# Programs
# =============================================================================


def program_to_dict(program: Program) -> dict[str, Any]:
    return {
        "program_id": program.program_id,
        "user_id": program.user_id,
        "name": program.name,
        "program_type": ProgramType.parse(program.program_type).value,
        "start_date": program.start_date,
        "current_week": program.current_week,
        "current_cycle": program.current_cycle,
        "is_active": program.is_active,
        "units": program.units,
        "lifts": [
            {"exercise_id": lift.exercise_id, "training_max": lift.training_max}
            for lift in program.lifts
        ],
    }


def dict_to_program(data: dict[str, Any]) -> Program:
    """
    Convert dict to Program.

    Legacy type names ("531", "starting_strength") are accepted.

    Raises:
        ValidationError: If data is invalid
    """
    validate_date(data.get("start_date", ""))
    validate_units(data.get("units", "lbs"))
    try:
        program_type = ProgramType.parse(data["program_type"])
    except KeyError as e:
        raise ValidationError(f"Program record without program_type: {data!r}") from e
    except UnsupportedProgramTypeError as e:
        raise ValidationError(str(e)) from e

    try:
        program_id = int(data["program_id"])
        user_id = int(data.get("user_id", 1))
        current_week = int(data.get("current_week", 1))
        current_cycle = int(data.get("current_cycle", 1))
        lifts = [
            ProgramLift(exercise_id=str(raw["exercise_id"]), training_max=float(raw["training_max"]))
            for raw in data.get("lifts", [])
        ]
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid program record: {data!r}") from e

    validate_positive(current_week, "current_week")
    validate_positive(current_cycle, "current_cycle")
    for lift in lifts:
        validate_non_negative(lift.training_max, "training_max")

    return Program(
        program_id=program_id,
        user_id=user_id,
        name=str(data.get("name", "")),
        program_type=program_type,
        start_date=data["start_date"],
        current_week=current_week,
        current_cycle=current_cycle,
        is_active=bool(data.get("is_active", False)),
        units=data.get("units", "lbs"),
        lifts=lifts,
    )


# =============================================================================
# Result records (presentation)
# =============================================================================


def _json_ready(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _json_ready(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_ready(v) for v in value]
    return value


def result_to_dict(result: Any) -> Any:
    """
    Convert a result record (or a list/dict of them) to JSON-compatible data.

    Enums are replaced by their values; nested dataclasses become dicts.
    """
    if is_dataclass(result) and not isinstance(result, type):
        return _json_ready(asdict(result))
    if isinstance(result, dict):
        return {k: result_to_dict(v) for k, v in result.items()}
    if isinstance(result, (list, tuple)):
        return [result_to_dict(v) for v in result]
    return _json_ready(result)


# =============================================================================
# Sets strings
# =============================================================================

_NUMBER = r"-?\d+(?:\.\d+)?"


def parse_sets_string(sets_str: str) -> list[tuple[float, int, bool]]:
    """
    Parse a sets string typed on the command line.

    Comma-separated groups, each one of:
        WxR        one set of R reps at weight W      e.g. "225x5"
        SxR@W      S sets of R reps at weight W       e.g. "3x5@225"

    A trailing "w" marks warmup sets ("135x5w", "2x5@95w").  Weights may be
    negative for assisted exercises ("-40x8").

    Args:
        sets_str: Sets string to parse

    Returns:
        List of (weight, reps, is_warmup) tuples in the order written

    Raises:
        ValidationError: If format is invalid
    """
    if not sets_str or not sets_str.strip():
        raise ValidationError("Sets string cannot be empty")

    sets: list[tuple[float, int, bool]] = []
    for part in (p.strip() for p in sets_str.split(",")):
        if not part:
            continue

        warmup = part.lower().endswith("w")
        body = part[:-1].strip() if warmup else part

        match_multi = re.fullmatch(rf"(\d+)\s*[xX×]\s*(\d+)\s*@\s*({_NUMBER})", body)
        match_single = re.fullmatch(rf"({_NUMBER})\s*[xX×]\s*(\d+)", body)

        if match_multi:
            n_sets = int(match_multi.group(1))
            reps = int(match_multi.group(2))
            weight = float(match_multi.group(3))
            if n_sets < 1:
                raise ValidationError(f"Set count must be positive: '{part}'")
            sets.extend((weight, reps, warmup) for _ in range(n_sets))
        elif match_single:
            sets.append((float(match_single.group(1)), int(match_single.group(2)), warmup))
        else:
            raise ValidationError(
                f"Invalid set format: '{part}'.\n"
                f"Use: weightxreps (e.g. 225x5), setsxreps@weight (e.g. 3x5@225),\n"
                f"     with a trailing 'w' for warmups (e.g. 135x5w)."
            )

    if not sets:
        raise ValidationError("No valid sets found in sets string")

    return sets
