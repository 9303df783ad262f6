"""
Exercise definitions for strength-engine.

Each exercise is described by an ExerciseDefinition object loaded from
the bundled YAML catalog.
"""

from .base import ExerciseDefinition
from .registry import (
    EXERCISE_REGISTRY,
    exercise_for_main_lift,
    find_exercise,
    get_exercise,
    validate_set_for_exercise,
)

__all__ = [
    "ExerciseDefinition",
    "EXERCISE_REGISTRY",
    "exercise_for_main_lift",
    "find_exercise",
    "get_exercise",
    "validate_set_for_exercise",
]
