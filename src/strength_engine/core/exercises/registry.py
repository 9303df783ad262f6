"""
Exercise registry.

All supported exercises are registered here.  Use get_exercise() to
look up an ExerciseDefinition by its exercise_id string, and
find_exercise() to resolve a free-text name through the synonym map.

Exercises are loaded from per-exercise YAML files in the bundled
``src/strength_engine/exercises/`` directory at import time.  If no
definition can be loaded a RuntimeError is raised: the engine cannot
run without an exercise catalog.

User overrides: place matching files in ``~/.strength-engine/exercises/``.
"""

from ..errors import ExerciseNotFoundError
from .base import ExerciseDefinition


def _build_registry() -> dict[str, ExerciseDefinition]:
    from .loader import load_exercises_from_yaml

    loaded = load_exercises_from_yaml()
    if not loaded:
        raise RuntimeError(
            "strength-engine: no exercise definitions could be loaded from YAML. "
            "Check that src/strength_engine/exercises/*.yaml files are present and valid."
        )
    return loaded


def _build_alias_index(registry: dict[str, ExerciseDefinition]) -> dict[str, str]:
    index: dict[str, str] = {}
    for exercise_id, ex in registry.items():
        for name in ex.names():
            index.setdefault(name, exercise_id)
    return index


EXERCISE_REGISTRY: dict[str, ExerciseDefinition] = _build_registry()
_ALIAS_INDEX: dict[str, str] = _build_alias_index(EXERCISE_REGISTRY)


def get_exercise(exercise_id: str) -> ExerciseDefinition:
    """
    Return the ExerciseDefinition for the given exercise_id.

    Raises:
        ExerciseNotFoundError: If exercise_id is not in the registry
    """
    if exercise_id not in EXERCISE_REGISTRY:
        raise ExerciseNotFoundError(exercise_id, list(EXERCISE_REGISTRY))
    return EXERCISE_REGISTRY[exercise_id]


def find_exercise(name: str) -> ExerciseDefinition | None:
    """
    Resolve a logged exercise name ("back squat", "OHP", "squat") to its definition.

    Matching is case-insensitive on the id, display name and aliases.
    Returns None for unrecognised names.
    """
    exercise_id = _ALIAS_INDEX.get(name.strip().lower())
    return EXERCISE_REGISTRY.get(exercise_id) if exercise_id else None


def validate_set_for_exercise(exercise_id: str, weight: float) -> ExerciseDefinition:
    """
    Check a logged weight against the exercise's capabilities.

    Raises:
        ExerciseNotFoundError: If exercise_id is not in the registry
        ValueError: If the weight is negative and the exercise has no assistance semantics
    """
    ex = get_exercise(exercise_id)
    if weight < 0 and not ex.supports_negative_weight:
        raise ValueError(
            f"{ex.display_name} does not accept negative weight ({weight:g})"
        )
    return ex


def exercise_for_main_lift(main_lift: str) -> ExerciseDefinition | None:
    """Return the exercise filling a main-lift slot ("squat", "bench", "deadlift", "ohp")."""
    for ex in EXERCISE_REGISTRY.values():
        if ex.main_lift == main_lift:
            return ex
    return None
