"""
Exercise catalog loader.

One YAML file per exercise lives in ``src/strength_engine/exercises/``
(squat.yaml, bench_press.yaml, ...).  Files in ``~/.strength-engine/exercises/``
override bundled entries key by key, or add new exercises when their stem
is not bundled.
"""

from __future__ import annotations

import warnings
from pathlib import Path

from ..config import DEFAULT_LINEAR_REPS, DEFAULT_LINEAR_SETS
from ..engine.config_loader import merge_overrides, read_yaml_mapping, user_config_dir
from .base import ExerciseDefinition

_REQUIRED_FIELDS = ("exercise_id", "display_name", "muscle_group", "increment_class")
_INCREMENT_CLASSES: frozenset[str] = frozenset({"lower", "upper"})
_MAIN_LIFTS: frozenset[str] = frozenset({"squat", "bench", "deadlift", "ohp"})


def exercise_from_dict(d: dict) -> ExerciseDefinition:
    """
    Validate one raw catalog entry and build its ExerciseDefinition.

    Raises:
        ValueError: If a required field is missing or a value is out of range
    """
    missing = [name for name in _REQUIRED_FIELDS if name not in d]
    if missing:
        raise ValueError(f"missing fields: {', '.join(missing)}")

    increment_class = str(d["increment_class"])
    if increment_class not in _INCREMENT_CLASSES:
        raise ValueError(
            f"increment_class must be one of {sorted(_INCREMENT_CLASSES)}, got {increment_class!r}"
        )

    main_lift = d.get("main_lift")
    if main_lift is not None and main_lift not in _MAIN_LIFTS:
        raise ValueError(f"main_lift must be one of {sorted(_MAIN_LIFTS)}, got {main_lift!r}")

    linear_sets = int(d.get("linear_sets", DEFAULT_LINEAR_SETS))
    linear_reps = int(d.get("linear_reps", DEFAULT_LINEAR_REPS))
    if linear_sets < 1 or linear_reps < 1:
        raise ValueError("linear_sets and linear_reps must be positive")

    return ExerciseDefinition(
        exercise_id=str(d["exercise_id"]),
        display_name=str(d["display_name"]),
        muscle_group=str(d["muscle_group"]),
        secondary_muscle_groups=tuple(str(m).strip() for m in d.get("secondary_muscle_groups") or ()),
        increment_class=increment_class,
        linear_sets=linear_sets,
        linear_reps=linear_reps,
        supports_negative_weight=bool(d.get("supports_negative_weight", False)),
        main_lift=main_lift,
        aliases=tuple(str(a).strip().lower() for a in d.get("aliases") or ()),
    )


def _bundled_exercises_dir() -> Path | None:
    """src/strength_engine/exercises/, three levels above this module."""
    candidate = Path(__file__).resolve().parents[2] / "exercises"
    return candidate if candidate.is_dir() else None


def _yaml_files(directory: Path | None) -> dict[str, Path]:
    if directory is None or not directory.is_dir():
        return {}
    return {p.stem: p for p in sorted(directory.glob("*.yaml"))}


def load_exercises_from_yaml() -> dict[str, ExerciseDefinition]:
    """
    Build {exercise_id: ExerciseDefinition} from the bundled and user YAML files.

    A user file with the same stem as a bundled one is merged over it; any
    other user file adds an exercise.  Files that fail validation are
    skipped with a warning.
    """
    bundled = _yaml_files(_bundled_exercises_dir())
    overrides = _yaml_files(user_config_dir() / "exercises")

    raw_by_stem: dict[str, dict] = {stem: read_yaml_mapping(p) for stem, p in bundled.items()}
    for stem, path in overrides.items():
        if stem in raw_by_stem and not raw_by_stem[stem]:
            continue
        raw_by_stem[stem] = merge_overrides(raw_by_stem.get(stem, {}), read_yaml_mapping(path))

    catalog: dict[str, ExerciseDefinition] = {}
    for stem, raw in raw_by_stem.items():
        if not raw:
            continue
        try:
            ex = exercise_from_dict(raw)
        except (ValueError, TypeError) as exc:
            warnings.warn(f"strength-engine: skipping exercise '{stem}' ({exc})", stacklevel=2)
            continue
        catalog[ex.exercise_id] = ex
    return catalog
