"""
Personal-record detection.

A set is a PR when the workout's best value for its exercise beats every
earlier workout, and the set itself reaches that best.  Volume PRs
(weight × reps) and estimated-1RM PRs are judged independently.
"""

import logging
from typing import Iterable, Mapping

from .exercises import EXERCISE_REGISTRY
from .metrics import estimate_1rm, set_volume
from .models import AnnotatedSet, LoggedSet, PRRecord, PRSummary, Workout

logger = logging.getLogger(__name__)

_NO_HISTORY = float("-inf")


def _best_by_exercise(sets: Iterable[LoggedSet]) -> tuple[dict[str, float], dict[str, float]]:
    """Best volume and best estimated 1RM per exercise over working sets."""
    best_volume: dict[str, float] = {}
    best_1rm: dict[str, float] = {}
    for s in sets:
        if s.is_warmup:
            continue
        volume = set_volume(s.weight, s.reps)
        e1rm = estimate_1rm(s.weight, s.reps)
        best_volume[s.exercise_id] = max(best_volume.get(s.exercise_id, _NO_HISTORY), volume)
        best_1rm[s.exercise_id] = max(best_1rm.get(s.exercise_id, _NO_HISTORY), e1rm)
    return best_volume, best_1rm


def detect_prs(workout: Workout, historical_sets: Iterable[LoggedSet]) -> list[AnnotatedSet]:
    """
    Annotate every set of ``workout`` with volume and 1RM PR flags.

    Args:
        workout: The workout being judged
        historical_sets: The user's sets for the same exercises.  Sets that
            belong to ``workout`` itself (same workout_id) are ignored, so the
            full history can be passed.

    Returns:
        One AnnotatedSet per set, in set-number order.  Warmups are never
        PRs and carry an estimated 1RM of 0.  An exercise with no history
        is a first-time PR.  Every set equal to the workout best is flagged.
    """
    sets = workout.ordered_sets()
    exercises = {s.exercise_id for s in sets}
    history = [
        s
        for s in historical_sets
        if s.workout_id != workout.workout_id and s.exercise_id in exercises
    ]

    workout_volume, workout_1rm = _best_by_exercise(sets)
    hist_volume, hist_1rm = _best_by_exercise(history)

    annotated: list[AnnotatedSet] = []
    for s in sets:
        volume = set_volume(s.weight, s.reps)
        if s.is_warmup:
            annotated.append(AnnotatedSet(logged_set=s, volume=volume, estimated_1rm=0.0))
            continue

        e1rm = estimate_1rm(s.weight, s.reps)
        ex = s.exercise_id
        volume_pr = workout_volume[ex] > hist_volume.get(ex, _NO_HISTORY) and volume == workout_volume[ex]
        one_rm_pr = workout_1rm[ex] > hist_1rm.get(ex, _NO_HISTORY) and e1rm == workout_1rm[ex]
        annotated.append(
            AnnotatedSet(
                logged_set=s,
                volume=volume,
                estimated_1rm=e1rm,
                is_volume_pr=volume_pr,
                is_1rm_pr=one_rm_pr,
            )
        )

    n_prs = sum(1 for a in annotated if a.is_volume_pr or a.is_1rm_pr)
    logger.debug("Workout %s on %s: %d PR set(s)", workout.workout_id, workout.date, n_prs)
    return annotated


def summarize_prs(
    annotated: Iterable[AnnotatedSet],
    date: str,
    names: Mapping[str, str] | None = None,
) -> list[PRSummary]:
    """
    Group flagged sets by exercise for display.

    ``names`` maps exercise_id to the label shown; catalog display names are
    used otherwise.  Exercises without a PR are omitted.
    """
    names = names or {}
    by_exercise: dict[str, PRSummary] = {}
    for a in annotated:
        if not (a.is_volume_pr or a.is_1rm_pr):
            continue
        ex_id = a.logged_set.exercise_id
        if ex_id not in by_exercise:
            ex = EXERCISE_REGISTRY.get(ex_id)
            label = names.get(ex_id) or (ex.display_name if ex else ex_id)
            by_exercise[ex_id] = PRSummary(exercise=label)
        record = PRRecord(
            weight=a.logged_set.weight,
            reps=a.logged_set.reps,
            date=date,
            volume=a.volume,
            estimated_1rm=a.estimated_1rm,
        )
        if a.is_volume_pr:
            by_exercise[ex_id].volume_prs.append(record)
        if a.is_1rm_pr:
            by_exercise[ex_id].one_rm_prs.append(record)
    return list(by_exercise.values())
