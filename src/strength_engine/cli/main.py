"""
CLI entry point using Typer.

Provides commands for strength analytics and program management:
- init / update-weight: User profile
- log / history / prs: Logged training and personal records
- estimate / classify / balance / progression / strength / muscles: Analytics
- plates: Bar loading
- program create|list|show|advance|set-lift|remove-lift|activate: Training programs
"""

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from .app import app

# Importing the command modules registers their commands on the shared app.
from .commands import analysis, equipment, profile, programs, sessions  # noqa: F401


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging on stderr"),
    ] = False,
) -> None:
    """
    Strength analytics and program progression for barbell training.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


if __name__ == "__main__":
    app()
