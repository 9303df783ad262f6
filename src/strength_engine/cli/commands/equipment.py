"""Equipment commands: plates."""

import json
from typing import Annotated, Optional

import typer

from ...core.equipment import calculate_plates, load_plate_inventory
from ...core.errors import ProfileNotFoundError
from ...io.serializers import ValidationError, result_to_dict
from .. import views
from ..app import DataDirOption, JsonOption, UserOption, app, get_store


@app.command()
def plates(
    target: Annotated[float, typer.Argument(help="Weight to load, bar included")],
    units: Annotated[
        Optional[str],
        typer.Option("--units", help="Weight units (default: profile units, else lbs)"),
    ] = None,
    bar: Annotated[
        Optional[float],
        typer.Option("--bar", help="Bar weight (default: from plates.yaml or the standard bar)"),
    ] = None,
    user_id: UserOption = 1,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show which plates to put on each side of the bar.

    Uses ~/.strength-engine/plates.yaml when present, otherwise a standard
    gym inventory.
    """
    if units is None:
        try:
            units = get_store(data_dir).fetch_user_profile(user_id).units
        except (ProfileNotFoundError, ValidationError):
            units = "lbs"
    if units not in ("lbs", "kg"):
        views.print_error("Units must be 'lbs' or 'kg'")
        raise typer.Exit(1)
    if target <= 0 or (bar is not None and bar <= 0):
        views.print_error("Target and bar weight must be positive")
        raise typer.Exit(1)

    inventory = load_plate_inventory(units)
    if bar is not None:
        inventory.bar_weight = bar
    load = calculate_plates(target, inventory)

    if json_out:
        print(json.dumps({"units": units, **result_to_dict(load)}, indent=2))
        return

    views.print_plates(load, units)
