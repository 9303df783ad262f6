"""Shared Typer app objects, shared option types, and store utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.errors import ProfileNotFoundError
from ..core.exercises import EXERCISE_REGISTRY, ExerciseDefinition, find_exercise
from ..core.models import UserProfile, Workout
from ..io.serializers import ValidationError
from ..io.store import TrainingStore, get_default_data_dir
from . import views

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-d", help="Data directory (default: ~/.strength-engine)"),
]

# Shared --user option type
UserOption = Annotated[
    int,
    typer.Option("--user", "-u", help="User id"),
]

# Shared --json option type
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="strength-engine",
    help="Strength analytics and program progression for barbell training.",
    no_args_is_help=True,
)

program_app = typer.Typer(
    name="program",
    help="Create, inspect and advance training programs.",
    no_args_is_help=True,
)
app.add_typer(program_app, name="program")


def get_store(data_dir: Path | None) -> TrainingStore:
    """Get training store from path or default location."""
    return TrainingStore(data_dir if data_dir is not None else get_default_data_dir())


def resolve_exercise(name: str) -> ExerciseDefinition:
    """Look up an exercise by id, display name or alias; exit with an error if unknown."""
    ex = find_exercise(name)
    if ex is None:
        views.print_error(f"Unknown exercise '{name}'. Valid IDs: {', '.join(EXERCISE_REGISTRY)}")
        raise typer.Exit(1)
    return ex


def load_profile(store: TrainingStore, user_id: int) -> UserProfile:
    """Fetch the user's profile; exit with an error if it cannot be loaded."""
    try:
        return store.fetch_user_profile(user_id)
    except (ProfileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)


def load_workouts(store: TrainingStore, user_id: int) -> list[Workout]:
    """Load the user's workouts; exit with an error if the history is missing or corrupt."""
    try:
        return store.load_workouts(user_id)
    except (FileNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)
