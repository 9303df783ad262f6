"""
Analytics reports built from the estimator, classifier and Wilks scorer.

Logged weights are in the profile's units; the standards table is in
pounds and Wilks in kilograms, so every report converts at the boundary.
"""

import logging
import math
from datetime import date as date_cls
from datetime import timedelta
from typing import Iterable, Mapping, Sequence

from .balance import LIFT_LABELS
from .config import NO_DATA_LEVEL, PRIMARY_MUSCLE_CREDIT, SECONDARY_MUSCLE_CREDIT
from .exercises import EXERCISE_REGISTRY, exercise_for_main_lift, get_exercise
from .metrics import best_sets_by_workout, best_working_set, wilks_coefficient, working_sets
from .models import (
    LiftSummary,
    LoggedSet,
    MainLifts,
    MuscleGroupCount,
    MuscleGroupWeek,
    ProgressionPoint,
    StrengthSummary,
    UserProfile,
    Workout,
    to_kg,
    to_lbs,
)
from .standards import StrengthStandardTable, classify

logger = logging.getLogger(__name__)


def lift_progression(
    workouts: Sequence[Workout],
    exercise_id: str,
    profile: UserProfile,
    table: StrengthStandardTable | None = None,
) -> list[ProgressionPoint]:
    """
    Best set of ``exercise_id`` per workout, with estimate, Wilks and standard.

    Workouts are taken in the order given; those without a working set of the
    exercise are skipped.

    Raises:
        ExerciseNotFoundError: If exercise_id is not in the catalog
    """
    ex = get_exercise(exercise_id)
    points: list[ProgressionPoint] = []
    for best in best_sets_by_workout(workouts, exercise_id):
        e1rm = best.estimated_1rm
        standard = classify(
            ex.display_name, profile.bodyweight_lbs, profile.sex, to_lbs(e1rm, profile.units), table
        )
        points.append(
            ProgressionPoint(
                date=best.date or "",
                weight=best.weight,
                reps=best.reps,
                estimated_1rm=round(e1rm, 1),
                wilks=round(
                    wilks_coefficient(to_kg(e1rm, profile.units), profile.bodyweight_kg, profile.sex), 1
                ),
                level=standard.level,
                percentile=standard.percentile,
            )
        )
    return points


def main_lift_estimates(sets_by_lift: Mapping[str, Sequence[LoggedSet]]) -> MainLifts:
    """
    Best 1RM estimate per main lift ("squat", "bench", "deadlift", "ohp").

    Missing lifts and lifts without working sets are 0.
    """
    values: dict[str, float] = {}
    for lift in LIFT_LABELS:
        best = best_working_set(working_sets(sets_by_lift.get(lift, ())))
        values[lift] = best.estimated_1rm if best else 0.0
    return MainLifts(**values)


def strength_summary(
    sets_by_lift: Mapping[str, Sequence[LoggedSet]],
    profile: UserProfile,
    table: StrengthStandardTable | None = None,
) -> StrengthSummary:
    """
    Standing of each main lift and the squat + bench + deadlift total.

    A lift with no working sets is reported as "No Data".
    """
    summaries: dict[str, LiftSummary] = {}
    for lift in LIFT_LABELS:
        ex = exercise_for_main_lift(lift)
        best = best_working_set(working_sets(sets_by_lift.get(lift, ())))
        if ex is None or best is None or best.estimated_1rm <= 0:
            summaries[lift] = LiftSummary(
                lift=lift,
                exercise_id=ex.exercise_id if ex else None,
                estimated_1rm=0.0,
                level=NO_DATA_LEVEL,
                percentile=0,
            )
            continue

        standard = classify(
            ex.display_name,
            profile.bodyweight_lbs,
            profile.sex,
            to_lbs(best.estimated_1rm, profile.units),
            table,
        )
        summaries[lift] = LiftSummary(
            lift=lift,
            exercise_id=ex.exercise_id,
            estimated_1rm=round(best.estimated_1rm, 1),
            level=standard.level,
            percentile=standard.percentile,
            next_level=standard.next_level,
            best_set=best,
        )

    total = sum(summaries[lift].estimated_1rm for lift in ("squat", "bench", "deadlift"))
    return StrengthSummary(
        lifts=summaries,
        total=round(total, 1),
        bodyweight=profile.bodyweight,
        units=profile.units,
    )


def training_streak(dates: Iterable[str]) -> int:
    """
    Number of consecutive training days ending at the most recent date.

    Duplicate dates count once; 0 for no dates.
    """
    days = sorted({date_cls.fromisoformat(d) for d in dates}, reverse=True)
    if not days:
        return 0
    streak = 1
    for newer, older in zip(days, days[1:]):
        if (newer - older).days != 1:
            break
        streak += 1
    return streak


def week_bounds(day: str) -> tuple[str, str]:
    """Sunday and Saturday (ISO dates) of the week containing ``day``."""
    d = date_cls.fromisoformat(day)
    start = d - timedelta(days=(d.weekday() + 1) % 7)
    return start.isoformat(), (start + timedelta(days=6)).isoformat()


def weekly_muscle_groups(workouts: Iterable[Workout], day: str) -> MuscleGroupWeek:
    """
    Working sets per muscle group in the Sunday–Saturday week containing ``day``.

    Each working set counts once toward its exercise's muscle group and half
    toward each secondary group.  Counts are rounded (halves up) per group,
    and groups are listed by descending count, then name.  Sets of exercises
    missing from the catalog are skipped.
    """
    week_start, week_end = week_bounds(day)
    credit: dict[str, float] = {}
    for workout in workouts:
        if not week_start <= workout.date <= week_end:
            continue
        for s in working_sets(workout.sets):
            ex = EXERCISE_REGISTRY.get(s.exercise_id)
            if ex is None:
                logger.debug("Skipping uncatalogued exercise %s on %s", s.exercise_id, workout.date)
                continue
            credit[ex.muscle_group] = credit.get(ex.muscle_group, 0.0) + PRIMARY_MUSCLE_CREDIT
            for group in ex.secondary_muscle_groups:
                credit[group] = credit.get(group, 0.0) + SECONDARY_MUSCLE_CREDIT

    counts = [
        MuscleGroupCount(muscle_group=group, set_count=int(math.floor(value + 0.5)))
        for group, value in credit.items()
    ]
    counts.sort(key=lambda c: (-c.set_count, c.muscle_group))
    return MuscleGroupWeek(
        week_start=week_start,
        week_end=week_end,
        muscle_groups=counts,
        total_sets=sum(c.set_count for c in counts),
    )
