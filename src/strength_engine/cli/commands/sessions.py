"""Session commands: log, history, prs, and helpers."""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.errors import ExerciseNotFoundError
from ...core.models import AnnotatedSet, Workout
from ...core.records import detect_prs, summarize_prs
from ...core.reports import training_streak
from ...io.serializers import ValidationError, parse_sets_string, result_to_dict, workout_to_dict
from .. import views
from ..app import (
    DataDirOption,
    JsonOption,
    UserOption,
    app,
    get_store,
    load_profile,
    load_workouts,
    resolve_exercise,
)


def _history_before(workouts: list[Workout], workout: Workout) -> list:
    """Sets of every workout strictly earlier than ``workout``."""
    return [
        s
        for w in workouts
        if w.date < workout.date and w.workout_id != workout.workout_id
        for s in w.sets
    ]


def _annotate(workouts: list[Workout], workout: Workout) -> list[AnnotatedSet]:
    return detect_prs(workout, _history_before(workouts, workout))


@app.command("log")
def log_sets(
    exercise: Annotated[
        str,
        typer.Argument(help="Exercise id or name, e.g. squat, 'bench press', ohp"),
    ],
    sets: Annotated[
        str,
        typer.Argument(help="Sets: '225x5, 3x5@225, 135x5w' (trailing w = warmup)"),
    ],
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Workout date (YYYY-MM-DD, default today)"),
    ] = None,
    notes: Annotated[
        Optional[str],
        typer.Option("--notes", "-n", help="Workout notes"),
    ] = None,
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Log sets of one exercise to the day's workout and report any PRs.
    """
    store = get_store(data_dir)
    if not store.exists():
        views.print_error(f"Workouts file not found: {store.workouts_path}")
        views.print_info("Run 'init' first to create profile and history.")
        raise typer.Exit(1)

    profile = load_profile(store, user_id)
    ex = resolve_exercise(exercise)
    date = date or datetime.now().strftime("%Y-%m-%d")

    try:
        parsed = parse_sets_string(sets)
        workout = store.log_sets(user_id, date, ex.exercise_id, parsed, notes=notes)
    except (ValidationError, ExerciseNotFoundError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    annotated = _annotate(store.load_workouts(user_id), workout)
    logged = annotated[-len(parsed):]
    summaries = summarize_prs(logged, date)

    if json_out:
        print(json.dumps({
            "workout": workout_to_dict(workout),
            "sets": result_to_dict(logged),
            "prs": result_to_dict(summaries),
        }, indent=2))
        return

    views.print_success(f"Logged {len(parsed)} set(s) of {ex.display_name} on {date}")
    views.print_prs(summaries, date, profile.units)


@app.command("history")
def show_history(
    exercise: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Only this exercise"),
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Limit number of workouts to show"),
    ] = None,
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Display workout history as a table.
    """
    store = get_store(data_dir)
    profile = load_profile(store, user_id)
    workouts = load_workouts(store, user_id)

    if exercise is not None:
        ex_id = resolve_exercise(exercise).exercise_id
        workouts = [
            Workout(
                workout_id=w.workout_id,
                user_id=w.user_id,
                date=w.date,
                sets=[s for s in w.sets if s.exercise_id == ex_id],
                notes=w.notes,
            )
            for w in workouts
            if any(s.exercise_id == ex_id for s in w.sets)
        ]

    if limit is not None:
        workouts = workouts[-limit:]

    if json_out:
        print(json.dumps({
            "workouts": [workout_to_dict(w) for w in workouts],
            "streak": training_streak(w.date for w in workouts),
        }, indent=2))
        return

    views.print_history(workouts, profile.units)
    streak = training_streak(w.date for w in workouts)
    if streak > 1:
        views.print_info(f"Current streak: {streak} consecutive days")


@app.command("prs")
def show_prs(
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Workout date (YYYY-MM-DD, default latest workout)"),
    ] = None,
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the personal records set in one workout.

    A set is a PR when its workout's best volume or estimated 1RM for the
    exercise beats every earlier workout; sets tying that best all count.
    """
    store = get_store(data_dir)
    profile = load_profile(store, user_id)
    workouts = load_workouts(store, user_id)

    if not workouts:
        views.print_warning("No workouts recorded yet.")
        raise typer.Exit(0)

    if date is None:
        workout = workouts[-1]
    else:
        workout = next((w for w in workouts if w.date == date), None)
        if workout is None:
            views.print_error(f"No workout on {date}")
            raise typer.Exit(1)

    summaries = summarize_prs(_annotate(workouts, workout), workout.date)

    if json_out:
        print(json.dumps({"date": workout.date, "prs": result_to_dict(summaries)}, indent=2))
        return

    views.print_prs(summaries, workout.date, profile.units)
