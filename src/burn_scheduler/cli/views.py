"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of horizons, sessions, and history.
"""

from rich.console import Console
from rich.table import Table

from ..core.models import DayPlan, ExerciseDefinition, HistoryRecord, SessionKind, UserProfile
from ..core.targets import daily_target, days_remaining, determine_skill_level

console = Console()

_STATUS_STYLE = {
    "complete": "[green]done[/green]",
    "partial": "[yellow]partial[/yellow]",
    "not started": "[dim]-[/dim]",
}


def format_horizon_table(plans: list[DayPlan], today: str | None = None) -> Table:
    """
    Create a Rich table with one row per day of the horizon.

    Args:
        plans: Active day plans, in day order
        today: ISO date to mark with ">"

    Returns:
        Rich Table object
    """
    table = Table(title="Workout Horizon")

    table.add_column("", width=1)
    table.add_column("Day", justify="right", style="bold")
    table.add_column("Date", style="cyan")
    table.add_column("Focus", style="magenta")
    table.add_column("Target", justify="right")
    table.add_column("Facility", justify="right")
    table.add_column("Home", justify="right")
    table.add_column("Burned", justify="right")
    table.add_column("Done", justify="center")

    for plan in plans:
        table.add_row(
            ">" if plan.date == today else "",
            str(plan.day_number),
            plan.date,
            plan.focus,
            f"{plan.target_kcal:.0f}",
            f"{len(plan.facility.exercises)} ex / {plan.facility.total_kcal:.0f} kcal",
            f"{len(plan.home.exercises)} ex / {plan.home.total_kcal:.0f} kcal",
            f"{plan.actual_kcal():.0f}" if plan.actual_kcal() > 0 else "-",
            "[green]yes[/green]" if plan.completed else "",
        )

    return table


def print_horizon(plans: list[DayPlan], today: str | None = None) -> None:
    """Print the active horizon."""
    if not plans:
        console.print("[yellow]No days planned.[/yellow]")
        return
    console.print(format_horizon_table(plans, today))


def format_session_table(plan: DayPlan, kind: SessionKind) -> Table:
    """
    Create a Rich table listing the exercises of one session.

    Args:
        plan: Day plan
        kind: "facility" or "home"

    Returns:
        Rich Table object
    """
    session = plan.session(kind)
    table = Table(
        title=(
            f"Day {plan.day_number} ({plan.date}) · {plan.focus} · {kind} · "
            f"target {plan.target_kcal:.0f} kcal"
        )
    )

    table.add_column("ID", style="dim")
    table.add_column("Exercise", style="bold")
    table.add_column("Area", style="magenta")
    table.add_column("Equipment")
    table.add_column("Sets", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Min", justify="right")
    table.add_column("kcal", justify="right")
    table.add_column("Status", justify="center")

    for ex in session.exercises:
        sets = f"{ex.completed_sets}/{ex.sets}" if ex.status == "partial" else str(ex.sets)
        table.add_row(
            ex.instance_id,
            ex.name,
            ex.body_area,
            ex.equipment,
            sets,
            ex.reps,
            f"{ex.duration_minutes:.1f}",
            f"{ex.predicted_kcal:.1f}",
            _STATUS_STYLE.get(ex.status, ex.status),
        )

    table.caption = (
        f"{len(session.exercises)} exercises · {session.total_minutes:.1f} min · "
        f"{session.total_kcal:.1f} kcal planned"
    )
    return table


def print_session(plan: DayPlan, kind: SessionKind) -> None:
    """Print one session of a day plan."""
    console.print(format_session_table(plan, kind))


def print_options(options: list[ExerciseDefinition]) -> None:
    """Print replacement candidates."""
    if not options:
        console.print("[yellow]No replacement options available.[/yellow]")
        return

    table = Table(title="Replacement Options")
    table.add_column("Exercise", style="bold")
    table.add_column("Area", style="magenta")
    table.add_column("Equipment")
    table.add_column("Level")
    table.add_column("MET", justify="right")
    for ex in options:
        table.add_row(ex.name, ex.body_area, ex.equipment, ex.skill_level, f"{ex.met:.1f}")
    console.print(table)


def format_history_table(records: list[HistoryRecord]) -> Table:
    """
    Create a Rich table of archived days.

    Args:
        records: History records to display

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History")

    table.add_column("Day", justify="right", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Focus", style="magenta")
    table.add_column("Target", justify="right")
    table.add_column("Burned", justify="right", style="bold")
    table.add_column("Done", justify="center")

    for r in records:
        table.add_row(
            str(r.day_number),
            r.date,
            r.focus,
            f"{r.target_kcal:.0f}",
            f"{r.actual_kcal:.0f}",
            "[green]yes[/green]" if r.completed else "[red]no[/red]",
        )

    return table


def print_history(records: list[HistoryRecord]) -> None:
    """Print archived days."""
    if not records:
        console.print("[yellow]No archived days yet.[/yellow]")
        return
    console.print(format_history_table(records))


def format_status_display(profile: UserProfile, plans: list[DayPlan]) -> str:
    """
    Format profile and horizon status as a text block.

    Args:
        profile: Current profile
        plans: Active day plans

    Returns:
        Formatted string
    """
    last_day = plans[-1].day_number if plans else 0
    left = days_remaining(profile, last_day)

    lines = ["Current status"]
    lines.append(f"- Weight: {profile.weight_kg:.1f} kg")
    lines.append(f"- Goal: {profile.goal}")
    if profile.has_projection():
        lines.append(
            f"- Target: {profile.target_weight_kg:.1f} kg in {profile.target_duration_weeks} weeks"
        )
        if left is not None:
            lines.append(f"- Program days left after day {last_day}: {left}")
    lines.append(f"- Skill level: {determine_skill_level(profile)} ({profile.workout_xp} XP)")
    lines.append(f"- Next block target: {daily_target(profile, left)} kcal/day")
    lines.append(f"- Days in horizon: {len(plans)}")
    return "\n".join(lines)


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


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
