"""Program commands: program create/list/show/advance/set-lift/remove-lift/activate."""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.errors import LiftNotFoundError, NotFoundError, UnsupportedProgramTypeError
from ...core.models import Program
from ...core.programs import generate_workout
from ...io.serializers import ValidationError, program_to_dict, result_to_dict, validate_date
from ...io.store import TrainingStore
from .. import views
from ..app import (
    DataDirOption,
    JsonOption,
    UserOption,
    get_store,
    load_profile,
    program_app,
    resolve_exercise,
)

ProgramIdArgument = Annotated[
    Optional[int],
    typer.Argument(help="Program id (default: the active program)"),
]


def _parse_lift(spec: str) -> tuple[str, float]:
    """'squat=315' → ("squat", 315.0)"""
    name, sep, value = spec.partition("=")
    if not sep or not name.strip():
        raise ValidationError(f"Invalid lift '{spec}'. Use exercise=training_max, e.g. squat=315")
    try:
        training_max = float(value)
    except ValueError:
        raise ValidationError(f"Invalid training max in '{spec}'") from None
    return resolve_exercise(name.strip()).exercise_id, training_max


def _select_program(store: TrainingStore, program_id: int | None, user_id: int) -> Program:
    """The requested program, or the user's active one; exits with an error if missing."""
    try:
        if program_id is not None:
            return store.fetch_program_with_lifts(program_id)
        program = store.get_active_program(user_id)
    except (NotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if program is None:
        views.print_error("No active program. Create one with 'program create'.")
        raise typer.Exit(1)
    return program


@program_app.command("create")
def create_program(
    program_type: Annotated[
        str,
        typer.Option("--type", "-t", help="wave-loading (5/3/1), linear-progression or custom"),
    ],
    lifts: Annotated[
        Optional[list[str]],
        typer.Option("--lift", "-l", help="exercise=training_max; repeat for each lift"),
    ] = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Program name (default: the type)"),
    ] = None,
    units: Annotated[
        Optional[str],
        typer.Option("--units", help="Weight units (default: profile units)"),
    ] = None,
    start_date: Annotated[
        Optional[str],
        typer.Option("--start-date", help="Start date (YYYY-MM-DD, default today)"),
    ] = None,
    inactive: Annotated[
        bool,
        typer.Option("--inactive", help="Do not make this the active program"),
    ] = False,
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Create a training program.

    For wave loading the weight given per lift is the training max; for
    linear progression it is the current working weight.
    """
    store = get_store(data_dir)
    profile = load_profile(store, user_id)
    units = units or profile.units
    start_date = start_date or datetime.now().strftime("%Y-%m-%d")

    try:
        validate_date(start_date)
        if units not in ("lbs", "kg"):
            raise ValidationError("Units must be 'lbs' or 'kg'")
        parsed = [_parse_lift(spec) for spec in lifts or []]
        program = store.create_program(
            user_id,
            name or program_type,
            program_type,
            start_date,
            parsed,
            units=units,
            activate=not inactive,
        )
    except (UnsupportedProgramTypeError, NotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(program_to_dict(program), indent=2))
        return

    views.print_success(f"Created program {program.program_id}: {program.name} ({program.program_type.value})")
    if not program.lifts:
        views.print_warning("Program has no lifts; add them with --lift exercise=weight.")


@program_app.command("list")
def list_programs(
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List the user's programs.
    """
    store = get_store(data_dir)
    try:
        programs = store.list_programs(user_id)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps([program_to_dict(p) for p in programs], indent=2))
        return

    if not programs:
        views.print_warning("No programs yet. Create one with 'program create'.")
        return
    views.console.print(views.format_programs_table(programs))


@program_app.command("show")
def show_program(
    program_id: ProgramIdArgument = None,
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the prescribed workout for the program's current week or session.
    """
    store = get_store(data_dir)
    program = _select_program(store, program_id, user_id)

    try:
        workout = generate_workout(program)
    except (UnsupportedProgramTypeError, NotFoundError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps({"program": program_to_dict(program), "workout": result_to_dict(workout)}, indent=2))
        return

    views.print_workout(workout, program.name)


@program_app.command("advance")
def advance_program(
    program_id: ProgramIdArgument = None,
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Move the program to its next week or session.

    Linear progression also adds each lift's increment to its working weight.
    """
    store = get_store(data_dir)
    program = _select_program(store, program_id, user_id)

    try:
        advanced = store.advance_program(program.program_id)
    except (UnsupportedProgramTypeError, NotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(program_to_dict(advanced), indent=2))
        return

    views.print_success(
        f"{advanced.name}: week {program.current_week}, cycle {program.current_cycle} → "
        f"week {advanced.current_week}, cycle {advanced.current_cycle}"
    )
    for before, after in zip(program.lifts, advanced.lifts):
        if after.training_max != before.training_max:
            views.print_info(
                f"  {before.exercise_id}: {views.fmt_weight(before.training_max, program.units)} → "
                f"{views.fmt_weight(after.training_max, advanced.units)}"
            )


@program_app.command("set-lift")
def set_lift(
    lift: Annotated[str, typer.Argument(help="exercise=training_max, e.g. squat=325")],
    program_id: ProgramIdArgument = None,
    add: Annotated[
        bool,
        typer.Option("--add", "-a", help="Add the lift if the program does not track it yet"),
    ] = False,
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Change a lift's training max (working weight for linear progression).
    """
    store = get_store(data_dir)
    program = _select_program(store, program_id, user_id)

    try:
        exercise_id, training_max = _parse_lift(lift)
        if add and not program.has_lift(exercise_id):
            updated = store.add_lift(program.program_id, exercise_id, training_max)
        else:
            updated = store.update_lift(program.program_id, exercise_id, training_max)
    except LiftNotFoundError as e:
        views.print_error(f"{e}. Use --add to start tracking it.")
        raise typer.Exit(1)
    except (NotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(program_to_dict(updated), indent=2))
        return

    views.print_success(
        f"{updated.name}: {exercise_id} set to {views.fmt_weight(training_max, updated.units)}"
    )


@program_app.command("remove-lift")
def remove_lift(
    exercise: Annotated[str, typer.Argument(help="Exercise id or name")],
    program_id: ProgramIdArgument = None,
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
) -> None:
    """
    Stop tracking a lift in a program.
    """
    store = get_store(data_dir)
    program = _select_program(store, program_id, user_id)
    ex = resolve_exercise(exercise)

    try:
        updated = store.remove_lift(program.program_id, ex.exercise_id)
    except (NotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"{updated.name}: removed {ex.display_name}")


@program_app.command("activate")
def activate_program(
    program_id: Annotated[int, typer.Argument(help="Program id")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Make a program the active one for its user.
    """
    store = get_store(data_dir)
    try:
        program = store.activate_program(program_id)
    except (NotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Activated program {program.program_id}: {program.name}")
