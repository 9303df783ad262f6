"""Profile commands: init, update-weight."""

import json
from typing import Annotated, Optional

import typer

from ...core.errors import ProfileNotFoundError
from ...core.models import UserProfile
from ...io.serializers import ValidationError, user_profile_to_dict
from .. import views
from ..app import DataDirOption, JsonOption, UserOption, app, get_store


@app.command()
def init(
    bodyweight: Annotated[
        float,
        typer.Option("--bodyweight", "-w", help="Current bodyweight"),
    ],
    sex: Annotated[
        str,
        typer.Option("--sex", "-s", help="Sex (male/female)"),
    ] = "male",
    units: Annotated[
        str,
        typer.Option("--units", help="Weight units (lbs/kg)"),
    ] = "lbs",
    age: Annotated[
        Optional[int],
        typer.Option("--age", "-a", help="Age in years (optional, used by variance scoring)"),
    ] = None,
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Initialize the data directory and save the user profile.

    Running init again keeps logged workouts and programs and only
    replaces the profile.
    """
    store = get_store(data_dir)

    if sex not in ("male", "female"):
        views.print_error("Sex must be 'male' or 'female'")
        raise typer.Exit(1)
    if units not in ("lbs", "kg"):
        views.print_error("Units must be 'lbs' or 'kg'")
        raise typer.Exit(1)

    try:
        profile = UserProfile(bodyweight=bodyweight, sex=sex, units=units, user_id=user_id, age=age)  # type: ignore[arg-type]
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    try:
        store.init()
        store.save_profile(profile)
    except (OSError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(user_profile_to_dict(profile), indent=2))
        return

    views.print_success(f"Initialized profile in {store.data_dir}")
    views.print_info(
        f"User {profile.user_id}: {profile.sex}, {views.fmt_weight(profile.bodyweight, profile.units)}"
        + (f", age {profile.age}" if profile.age is not None else "")
    )


@app.command("update-weight")
def update_weight(
    bodyweight: Annotated[
        float,
        typer.Option("--bodyweight", "-w", help="New bodyweight (profile units)"),
    ],
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
) -> None:
    """
    Update current bodyweight in profile.
    """
    store = get_store(data_dir)

    if bodyweight <= 0:
        views.print_error("Bodyweight must be positive")
        raise typer.Exit(1)

    try:
        profile = store.update_bodyweight(user_id, bodyweight)
    except (ProfileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Updated bodyweight to {views.fmt_weight(profile.bodyweight, profile.units)}")
