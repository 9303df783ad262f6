"""Analysis commands: estimate, classify, balance, progression, strength, muscles."""

import json
import logging
from datetime import datetime, timedelta
from typing import Annotated, Optional

import typer

from ...core.balance import LIFT_LABELS, STRATEGIES, analyze
from ...core.exercises import exercise_for_main_lift
from ...core.metrics import estimate_1rm, wilks_coefficient
from ...core.models import LoggedSet, Workout, to_kg, to_lbs
from ...core.reports import (
    lift_progression,
    main_lift_estimates,
    strength_summary,
    training_streak,
    weekly_muscle_groups,
)
from ...core.standards import classify
from ...io.serializers import ValidationError, result_to_dict, validate_date
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

logger = logging.getLogger(__name__)

WeeksOption = Annotated[
    Optional[int],
    typer.Option("--weeks", "-w", help="Only the last N weeks of history (default: all)"),
]


def _start_date(weeks: int | None) -> str | None:
    if weeks is None:
        return None
    if weeks < 1:
        views.print_error("--weeks must be at least 1")
        raise typer.Exit(1)
    return (datetime.now() - timedelta(weeks=weeks)).strftime("%Y-%m-%d")


def _main_lift_sets(workouts: list[Workout], start_date: str | None) -> dict[str, list[LoggedSet]]:
    """Working sets per main lift ("squat", "bench", ...) since ``start_date``."""
    recent = [w for w in workouts if start_date is None or w.date >= start_date]
    sets_by_lift: dict[str, list[LoggedSet]] = {}
    for lift in LIFT_LABELS:
        ex = exercise_for_main_lift(lift)
        if ex is None:
            logger.debug("No catalog exercise for main lift %s", lift)
            continue
        sets_by_lift[lift] = [
            s
            for w in recent
            for s in w.ordered_sets()
            if s.exercise_id == ex.exercise_id and not s.is_warmup
        ]
    return sets_by_lift


@app.command()
def estimate(
    weight: Annotated[float, typer.Argument(help="Weight lifted")],
    reps: Annotated[int, typer.Argument(help="Reps completed")],
    bodyweight: Annotated[
        Optional[float],
        typer.Option("--bodyweight", "-b", help="Bodyweight, to also report the Wilks score"),
    ] = None,
    sex: Annotated[str, typer.Option("--sex", "-s", help="Sex for Wilks (male/female)")] = "male",
    units: Annotated[str, typer.Option("--units", help="Weight units (lbs/kg)")] = "lbs",
    json_out: JsonOption = False,
) -> None:
    """
    Estimate a one-rep max from a set.

    Brzycki below 8 reps, Epley above 10, a linear blend in between.
    """
    if reps < 0 or weight < 0:
        views.print_error("Weight and reps must be non-negative")
        raise typer.Exit(1)
    if units not in ("lbs", "kg"):
        views.print_error("Units must be 'lbs' or 'kg'")
        raise typer.Exit(1)

    e1rm = estimate_1rm(weight, reps)
    wilks = None
    if bodyweight is not None and bodyweight > 0:
        wilks = wilks_coefficient(to_kg(e1rm, units), to_kg(bodyweight, units), sex)

    if json_out:
        result = {"weight": weight, "reps": reps, "estimated_1rm": round(e1rm, 2), "units": units}
        if wilks is not None:
            result["wilks"] = round(wilks, 2)
        print(json.dumps(result, indent=2))
        return

    views.console.print(
        f"{weight:g}x{reps}  →  estimated 1RM [bold]{views.fmt_weight(round(e1rm, 1), units)}[/bold]"
    )
    if wilks is not None:
        views.console.print(f"Wilks: [bold]{wilks:.1f}[/bold]")


@app.command("classify")
def classify_lift(
    exercise: Annotated[str, typer.Argument(help="Exercise id or name")],
    estimated_1rm: Annotated[float, typer.Argument(help="Estimated 1RM in profile units")],
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Classify a 1RM against bodyweight strength standards.
    """
    store = get_store(data_dir)
    profile = load_profile(store, user_id)
    ex = resolve_exercise(exercise)

    standard = classify(
        ex.display_name, profile.bodyweight_lbs, profile.sex, to_lbs(estimated_1rm, profile.units)
    )

    if json_out:
        print(json.dumps({"exercise": ex.exercise_id, **result_to_dict(standard)}, indent=2))
        return

    views.print_standard(ex.display_name, estimated_1rm, standard, profile.units)


@app.command()
def balance(
    strategy: Annotated[
        str,
        typer.Option("--strategy", help=f"Scoring strategy ({'/'.join(STRATEGIES)})"),
    ] = "range",
    weeks: WeeksOption = None,
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Analyze balance between squat, bench, deadlift and overhead press.
    """
    store = get_store(data_dir)
    profile = load_profile(store, user_id)
    start = _start_date(weeks)
    workouts = load_workouts(store, user_id)

    lifts = main_lift_estimates(_main_lift_sets(workouts, start))
    try:
        report = analyze(lifts, strategy=strategy, profile=profile)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({"lifts": result_to_dict(lifts), **result_to_dict(report)}, indent=2))
        return

    views.print_balance(report, lifts, profile.units)


@app.command()
def progression(
    exercise: Annotated[str, typer.Argument(help="Exercise id or name")],
    weeks: WeeksOption = None,
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the best set, estimated 1RM, Wilks and level per workout for one lift.
    """
    store = get_store(data_dir)
    profile = load_profile(store, user_id)
    ex = resolve_exercise(exercise)
    start = _start_date(weeks)

    workouts = load_workouts(store, user_id)
    if start is not None:
        workouts = [w for w in workouts if w.date >= start]

    points = lift_progression(workouts, ex.exercise_id, profile)

    if json_out:
        print(json.dumps({"exercise": ex.exercise_id, "points": result_to_dict(points)}, indent=2))
        return

    views.print_progression(points, ex.display_name, profile.units)


@app.command()
def strength(
    weeks: WeeksOption = None,
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Summarize the standing of every main lift and the powerlifting total.
    """
    store = get_store(data_dir)
    profile = load_profile(store, user_id)
    start = _start_date(weeks)
    workouts = load_workouts(store, user_id)

    summary = strength_summary(_main_lift_sets(workouts, start), profile)
    streak = training_streak(w.date for w in workouts)

    if json_out:
        print(json.dumps({**result_to_dict(summary), "streak": streak}, indent=2))
        return

    views.print_strength_summary(summary)
    if streak > 0:
        views.print_info(f"Current streak: {streak} day(s)")


@app.command()
def muscles(
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Any day of the week to report (YYYY-MM-DD, default today)"),
    ] = None,
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Count working sets per muscle group for one Sunday–Saturday week.

    Secondary muscle groups get half a set each.
    """
    store = get_store(data_dir)
    day = date or datetime.now().strftime("%Y-%m-%d")
    try:
        validate_date(day)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    week = weekly_muscle_groups(load_workouts(store, user_id), day)

    if json_out:
        print(json.dumps(result_to_dict(week), indent=2))
        return

    views.print_muscle_groups(week)
