"""Planning commands: plan, regenerate, show-day."""

from typing import Annotated

import typer

from ...core.planner import format_block_summary
from ...core.tracker import DayNotFound
from .. import views
from ..app import (
    DEFAULT_USER,
    DataDirOption,
    ModeOption,
    SeedOption,
    TodayOption,
    UserOption,
    app,
    check_mode,
    open_sync,
    resolve_today,
)


@app.command()
def plan(
    today: TodayOption = None,
    seed: SeedOption = None,
    data_dir: DataDirOption = None,
    user: UserOption = DEFAULT_USER,
) -> None:
    """
    Roll the horizon forward and show it.

    Days before today move to history.  When fewer than three days are
    left, the next five are generated right after the last planned day.
    """
    today_str = resolve_today(today)
    sync = open_sync(data_dir, user, seed)

    try:
        update = sync.manage(today_str)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if update.archived:
        views.print_info(f"Archived {len(update.archived)} elapsed day(s).")
    if update.label is not None:
        views.print_info(update.label)
        views.console.print(format_block_summary(update.upserts))

    views.print_horizon(sync.plans, today_str)


@app.command()
def regenerate(
    today: TodayOption = None,
    seed: SeedOption = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation"),
    ] = False,
    data_dir: DataDirOption = None,
    user: UserOption = DEFAULT_USER,
) -> None:
    """
    Discard all planned days and start a fresh program at day 1 today.

    Progress on discarded days is lost; elapsed days are archived first.
    """
    today_str = resolve_today(today)
    sync = open_sync(data_dir, user, seed)

    if not yes and not views.confirm_action("Discard the current horizon and start over?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        update = sync.regenerate(today_str)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not update.generated:
        views.print_error("Could not generate a new horizon")
        raise typer.Exit(1)

    views.print_success(update.label or "Regenerated.")
    views.console.print(format_block_summary(update.upserts))
    views.print_horizon(sync.plans, today_str)


@app.command("show-day")
def show_day(
    day: Annotated[int, typer.Argument(help="Day number")],
    mode: ModeOption = "facility",
    data_dir: DataDirOption = None,
    user: UserOption = DEFAULT_USER,
) -> None:
    """Show the exercises of one day's facility or home session."""
    check_mode(mode)
    sync = open_sync(data_dir, user)

    try:
        day_plan = sync.day(day)
    except DayNotFound as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_session(day_plan, mode)  # type: ignore[arg-type]
