"""
Pure metric computation functions.

All functions are pure and typed for testability. Invalid numeric input
(zero or negative weight/reps, unknown sex codes) degrades to a neutral
value instead of raising, so one bad record cannot abort a batch.
"""

import logging
import math
from typing import Iterable, Sequence

from .config import (
    BLEND_END_REPS,
    BLEND_START_REPS,
    BRZYCKI_FALLBACK_FACTOR,
    BRZYCKI_UNSTABLE_REPS,
    WILKS_COEFFICIENTS,
    WILKS_NUMERATOR,
)
from .models import LiftEstimate, LoggedSet, Workout

logger = logging.getLogger(__name__)


def brzycki_1rm(weight: float, reps: int) -> float:
    """
    Brzycki 1RM estimate, most accurate for low rep ranges.

    1RM = w × 36 / (37 − reps)

    The denominator vanishes at 37 reps, so from there on the estimate
    falls back to 2 × weight.
    """
    if reps >= BRZYCKI_UNSTABLE_REPS:
        return weight * BRZYCKI_FALLBACK_FACTOR
    return weight * 36 / (37 - reps)


def epley_1rm(weight: float, reps: int) -> float:
    """
    Epley 1RM estimate, most accurate above 10 reps.

    1RM = w × (1 + reps / 30)
    """
    return weight * (1 + reps / 30)


def blended_1rm(weight: float, reps: int) -> float:
    """
    Linear blend of Brzycki and Epley for the 8–10 rep range.

    factor = (reps − 8) / 2 → 0 at 8 reps (pure Brzycki), 1 at 10 reps (pure Epley).
    """
    factor = (reps - BLEND_START_REPS) / (BLEND_END_REPS - BLEND_START_REPS)
    return brzycki_1rm(weight, reps) * (1 - factor) + epley_1rm(weight, reps) * factor


def estimate_1rm(weight: float, reps: int) -> float:
    """
    Estimate a one-rep max, choosing the formula by rep range.

    Args:
        weight: Weight lifted
        reps: Reps completed

    Returns:
        Estimated 1RM; 0 when weight or reps is not positive, the weight
        itself for a single.
    """
    if weight <= 0 or reps <= 0:
        return 0.0
    if reps == 1:
        return float(weight)
    if reps < BLEND_START_REPS:
        return brzycki_1rm(weight, reps)
    if reps > BLEND_END_REPS:
        return epley_1rm(weight, reps)
    return blended_1rm(weight, reps)


def normalize_sex_code(sex: str | None) -> str | None:
    """
    Map "male"/"M"/"female"/"F" (any case) to "M"/"F".

    Returns None for anything else.
    """
    if not sex:
        return None
    key = sex.strip().lower()
    if key in ("m", "male"):
        return "M"
    if key in ("f", "female"):
        return "F"
    return None


def wilks_coefficient(total_kg: float, bodyweight_kg: float, sex: str | None) -> float:
    """
    Wilks score for relative strength comparison.

    Wilks = total × 500 / (a + b·bw + c·bw² + d·bw³ + e·bw⁴ + f·bw⁵)

    Args:
        total_kg: Total lifted in kg
        bodyweight_kg: Bodyweight in kg
        sex: "male"/"female" or "M"/"F"; any other value uses the male
            coefficients

    Returns:
        Wilks score, 0 when either input is not positive
    """
    if total_kg <= 0 or bodyweight_kg <= 0:
        return 0.0

    code = normalize_sex_code(sex)
    if code is None:
        logger.debug("Unrecognised sex code %r; using male Wilks coefficients", sex)
        code = "M"

    denominator = sum(
        coef * bodyweight_kg ** power
        for power, coef in enumerate(WILKS_COEFFICIENTS[code])
    )
    return total_kg * WILKS_NUMERATOR / denominator


def round_to_increment(value: float, increment: float) -> float:
    """Round ``value`` to the nearest multiple of ``increment``, halves rounding up."""
    return math.floor(value / increment + 0.5) * increment


def set_volume(weight: float, reps: int) -> float:
    """Volume of one set: weight × reps."""
    return weight * reps


def working_sets(sets: Iterable[LoggedSet]) -> list[LoggedSet]:
    """Drop warmup sets."""
    return [s for s in sets if not s.is_warmup]


def best_working_set(sets: Sequence[LoggedSet]) -> LiftEstimate | None:
    """
    Select the set with the highest estimated 1RM.

    The first set wins ties. Returns None for an empty sequence.
    """
    best: LiftEstimate | None = None
    for s in sets:
        e1rm = estimate_1rm(s.weight, s.reps)
        if best is None or e1rm > best.estimated_1rm:
            best = LiftEstimate(
                exercise_id=s.exercise_id,
                weight=s.weight,
                reps=s.reps,
                estimated_1rm=e1rm,
                date=s.date or None,
                workout_id=s.workout_id,
            )
    return best


def best_sets_by_workout(workouts: Sequence[Workout], exercise_id: str) -> list[LiftEstimate]:
    """
    Best working set of ``exercise_id`` in each workout, in workout order.

    Workouts without a working set of the exercise are skipped.
    """
    result: list[LiftEstimate] = []
    for workout in workouts:
        candidates = [
            s for s in working_sets(workout.ordered_sets()) if s.exercise_id == exercise_id
        ]
        best = best_working_set(candidates)
        if best is None:
            continue
        best.date = workout.date
        best.workout_id = workout.workout_id
        result.append(best)
    return result
