"""
Base type for exercise definitions.

ExerciseDefinition carries the per-exercise facts the analytics and
progression code needs: the synonyms used to recognise logged names, the
progression increment class, whether negative (assistance) weight is
meaningful, and the default linear-progression rep scheme.
"""

from dataclasses import dataclass, field

from ..config import DEFAULT_LINEAR_REPS, DEFAULT_LINEAR_SETS


@dataclass(frozen=True)
class ExerciseDefinition:
    """
    Full configuration for one exercise.
    """

    # Identity
    exercise_id: str          # e.g. "squat", "bench_press"
    display_name: str         # e.g. "Barbell Squat"; also the standards-table key
    muscle_group: str         # e.g. "legs", "chest"

    # Progression
    increment_class: str      # "lower" | "upper"
    linear_sets: int = DEFAULT_LINEAR_SETS
    linear_reps: int = DEFAULT_LINEAR_REPS

    # Negative weight = assistance load (assisted pull-up, assisted dip)
    supports_negative_weight: bool = False

    # Which main-lift slot this exercise fills for balance analysis, if any
    main_lift: str | None = None  # "squat" | "bench" | "deadlift" | "ohp"

    # Lower-case synonyms matched against logged exercise names
    aliases: tuple[str, ...] = field(default_factory=tuple)

    # Muscle groups worked less directly; each set counts half toward them
    secondary_muscle_groups: tuple[str, ...] = field(default_factory=tuple)

    def names(self) -> list[str]:
        """Every lower-case name this exercise answers to."""
        return [
            self.exercise_id.lower(),
            self.exercise_id.replace("_", " ").lower(),
            self.display_name.lower(),
            *(a.lower() for a in self.aliases),
        ]
