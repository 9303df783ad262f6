"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of training data, analytics and
prescribed workouts.
"""

from rich.console import Console
from rich.table import Table

from ..core.balance import LIFT_LABELS
from ..core.exercises import EXERCISE_REGISTRY
from ..core.metrics import best_working_set, working_sets
from ..core.models import (
    BalanceReport,
    MainLifts,
    MuscleGroupWeek,
    PlateLoad,
    PrescribedSet,
    PrescribedWorkout,
    Program,
    ProgressionPoint,
    PRSummary,
    StrengthStandard,
    StrengthSummary,
    Workout,
)

console = Console()

_LEVEL_STYLES = {
    "Untrained": "dim",
    "Beginner": "white",
    "Novice": "cyan",
    "Intermediate": "green",
    "Advanced": "magenta",
    "Elite": "bold yellow",
}


def fmt_weight(weight: float, units: str | None = None) -> str:
    """225 → "225", 237.5 → "237.5", with optional unit suffix."""
    text = f"{weight:g}"
    return f"{text} {units}" if units else text


def _exercise_name(exercise_id: str) -> str:
    ex = EXERCISE_REGISTRY.get(exercise_id)
    return ex.display_name if ex else exercise_id


def _level_cell(level: str) -> str:
    style = _LEVEL_STYLES.get(level)
    return f"[{style}]{level}[/{style}]" if style else level


def _fmt_sets(sets: list) -> str:
    """Compact "135x5w, 225x5 ×3" rendering of consecutive identical sets."""
    parts: list[str] = []
    prev: str | None = None
    count = 0
    for s in sets:
        label = f"{s.weight:g}x{s.reps}" + ("w" if s.is_warmup else "")
        if label == prev:
            count += 1
            continue
        if prev is not None:
            parts.append(prev if count == 1 else f"{prev} ×{count}")
        prev, count = label, 1
    if prev is not None:
        parts.append(prev if count == 1 else f"{prev} ×{count}")
    return ", ".join(parts)


# =============================================================================
# History
# =============================================================================


def format_history_table(workouts: list[Workout], units: str) -> Table:
    """
    Create a Rich table displaying workout history, one row per exercise per workout.
    """
    table = Table(title="Training History")

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Date", style="cyan")
    table.add_column("Exercise", style="magenta")
    table.add_column("Sets")
    table.add_column(f"Best e1RM ({units})", justify="right", style="bold")

    for workout in workouts:
        for exercise_id in workout.exercise_ids():
            sets = [s for s in workout.ordered_sets() if s.exercise_id == exercise_id]
            best = best_working_set(working_sets(sets))
            table.add_row(
                str(workout.workout_id),
                workout.date,
                _exercise_name(exercise_id),
                _fmt_sets(sets),
                f"{best.estimated_1rm:.1f}" if best and best.estimated_1rm > 0 else "-",
            )

    return table


def print_history(workouts: list[Workout], units: str) -> None:
    if not workouts:
        console.print("[yellow]No workouts recorded yet.[/yellow]")
        return
    console.print(format_history_table(workouts, units))


# =============================================================================
# Analytics
# =============================================================================


def print_standard(exercise_name: str, estimated_1rm: float, standard: StrengthStandard, units: str) -> None:
    """Level, percentile and the bracket's thresholds (thresholds are in lbs)."""
    console.print(
        f"[bold]{exercise_name}[/bold]  e1RM {fmt_weight(round(estimated_1rm, 1), units)}  →  "
        f"{_level_cell(standard.level)}  ({standard.percentile}th percentile)"
    )
    if standard.next_level is not None:
        console.print(
            f"  Next: {standard.next_level.level} at {fmt_weight(standard.next_level.weight, 'lbs')}"
        )
    if standard.thresholds is not None:
        table = Table(title=f"Standards at {standard.bracket} lbs bodyweight", show_header=True)
        for level in ("Beginner", "Novice", "Intermediate", "Advanced", "Elite"):
            table.add_column(level, justify="right")
        table.add_row(*(fmt_weight(v) for v in standard.thresholds.as_dict().values()))
        console.print(table)


def print_balance(report: BalanceReport, lifts: MainLifts, units: str) -> None:
    table = Table(title="Main Lifts")
    table.add_column("Lift", style="magenta")
    table.add_column(f"e1RM ({units})", justify="right", style="bold")
    for key, label in LIFT_LABELS.items():
        value = getattr(lifts, key)
        table.add_row(label, f"{value:.1f}" if value > 0 else "-")
    console.print(table)

    ratios = Table(title="Ratios", show_header=True, header_style="dim")
    ratios.add_column("Ratio")
    ratios.add_column("Value", justify="right")
    for name, value in vars(report.ratios).items():
        ratios.add_row(name.replace("_", " "), f"{value:.2f}" if value > 0 else "-")
    console.print(ratios)

    console.print(f"[bold]Score:[/bold] {report.score}/100 ({report.strategy})  {report.interpretation}")
    for imbalance in report.imbalances:
        colour = {"high": "red", "medium": "yellow", "low": "blue"}[imbalance.severity]
        console.print(f"  [{colour}]• {imbalance.lift}[/{colour}]: {imbalance.message}")
        console.print(f"    [dim]{imbalance.suggestion}[/dim]")


def print_progression(points: list[ProgressionPoint], exercise_name: str, units: str) -> None:
    if not points:
        console.print(f"[yellow]No working sets of {exercise_name} recorded yet.[/yellow]")
        return

    table = Table(title=f"{exercise_name} Progression")
    table.add_column("Date", style="cyan")
    table.add_column("Best set")
    table.add_column(f"e1RM ({units})", justify="right", style="bold")
    table.add_column("Wilks", justify="right")
    table.add_column("Level")
    table.add_column("Pct", justify="right")
    for p in points:
        table.add_row(
            p.date,
            f"{p.weight:g}x{p.reps}",
            f"{p.estimated_1rm:.1f}",
            f"{p.wilks:.1f}",
            _level_cell(p.level),
            str(p.percentile),
        )
    console.print(table)


def print_strength_summary(summary: StrengthSummary) -> None:
    table = Table(title=f"Strength Summary (bodyweight {fmt_weight(summary.bodyweight, summary.units)})")
    table.add_column("Lift", style="magenta")
    table.add_column(f"e1RM ({summary.units})", justify="right", style="bold")
    table.add_column("Level")
    table.add_column("Pct", justify="right")
    table.add_column("Next level")
    table.add_column("Best set")

    for key, label in LIFT_LABELS.items():
        s = summary.lifts[key]
        table.add_row(
            label,
            f"{s.estimated_1rm:.1f}" if s.estimated_1rm > 0 else "-",
            _level_cell(s.level),
            str(s.percentile) if s.estimated_1rm > 0 else "-",
            f"{s.next_level.level} @ {s.next_level.weight:g} lbs" if s.next_level else "-",
            f"{s.best_set.weight:g}x{s.best_set.reps} ({s.best_set.date})" if s.best_set else "-",
        )
    console.print(table)
    console.print(f"[bold]Total (S+B+D):[/bold] {fmt_weight(summary.total, summary.units)}")


def print_muscle_groups(week: MuscleGroupWeek) -> None:
    if not week.muscle_groups:
        console.print(f"[yellow]No working sets between {week.week_start} and {week.week_end}.[/yellow]")
        return

    table = Table(title=f"Sets per Muscle Group ({week.week_start} to {week.week_end})")
    table.add_column("Muscle group", style="magenta")
    table.add_column("Sets", justify="right", style="bold")
    for c in week.muscle_groups:
        table.add_row(c.muscle_group.replace("_", " ").title(), str(c.set_count))
    console.print(table)
    console.print(f"[bold]Total:[/bold] {week.total_sets} sets")


def print_plates(load: PlateLoad, units: str) -> None:
    """Per-side plate breakdown, flagging targets the inventory cannot hit."""
    if load.plates:
        per_side = ", ".join(fmt_weight(p) for p in load.plates)
        console.print(f"Each side: [bold]{per_side}[/bold]  (bar {fmt_weight(load.bar_weight, units)})")
    else:
        console.print(f"Empty bar: {fmt_weight(load.bar_weight, units)}")
    if load.exact:
        console.print(f"[green]Total: {fmt_weight(load.total, units)}[/green]")
    else:
        console.print(
            f"[yellow]Closest load: {fmt_weight(load.total, units)} "
            f"(target {fmt_weight(load.target, units)})[/yellow]"
        )


def print_prs(summaries: list[PRSummary], date: str, units: str) -> None:
    if not summaries:
        console.print(f"[dim]No personal records on {date}.[/dim]")
        return
    console.print(f"[bold green]Personal records on {date}[/bold green]")
    for summary in summaries:
        console.print(f"  [bold]{summary.exercise}[/bold]")
        for pr in summary.volume_prs:
            console.print(f"    Volume PR: {pr.weight:g}x{pr.reps} = {fmt_weight(pr.volume, units)}")
        for pr in summary.one_rm_prs:
            console.print(
                f"    e1RM PR:   {pr.weight:g}x{pr.reps} → {fmt_weight(round(pr.estimated_1rm, 1), units)}"
            )


# =============================================================================
# Programs
# =============================================================================


def _sets_rows(table: Table, label: str, sets: list[PrescribedSet], units: str) -> None:
    for s in sets:
        reps = f"{s.reps}+" if s.is_amrap else str(s.reps)
        pct = f"{s.percentage:.0f}%" if s.percentage is not None else ""
        table.add_row(label if s.set_number == 1 else "", str(s.set_number), fmt_weight(s.weight, units), reps, pct)


def print_workout(workout: PrescribedWorkout, program_name: str) -> None:
    """Print each lift's warmup, main and accessory sets."""
    header = f"[bold cyan]{program_name}[/bold cyan]  week {workout.week}, cycle {workout.cycle}"
    if workout.session_label:
        header = f"[bold cyan]{program_name}[/bold cyan]  {workout.session_label} (session {workout.week})"
    console.print(header)

    if not workout.lifts:
        console.print("[yellow]No lifts configured for this session.[/yellow]")
        return

    for lift in workout.lifts:
        table = Table(title=f"{lift.exercise_name}  (TM {fmt_weight(lift.training_max, workout.units)})")
        table.add_column("Block", style="magenta")
        table.add_column("Set", justify="right", style="dim")
        table.add_column("Weight", justify="right", style="bold")
        table.add_column("Reps", justify="right")
        table.add_column("%TM", justify="right", style="dim")
        _sets_rows(table, "Warmup", lift.warmup_sets, workout.units)
        _sets_rows(table, "Main", lift.main_sets, workout.units)
        _sets_rows(table, "Accessory", lift.accessory_sets, workout.units)
        console.print(table)


def format_programs_table(programs: list[Program]) -> Table:
    table = Table(title="Programs")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Week", justify="right")
    table.add_column("Cycle", justify="right")
    table.add_column("Lifts")
    table.add_column("Active", justify="center")
    for p in programs:
        table.add_row(
            str(p.program_id),
            p.name,
            p.program_type.value,
            str(p.current_week),
            str(p.current_cycle),
            ", ".join(f"{_exercise_name(l.exercise_id)} {l.training_max:g}" for l in p.lifts),
            "[green]✓[/green]" if p.is_active else "",
        )
    return table


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
