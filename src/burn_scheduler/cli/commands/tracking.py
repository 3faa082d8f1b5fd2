"""Tracking commands: complete, options, swap, history."""

from typing import Annotated, Optional

import typer

from ...core.tracker import SubstitutionNotAllowed, earned_xp
from ...io.horizon_store import StoreError
from .. import views
from ..app import (
    DEFAULT_USER,
    DataDirOption,
    ModeOption,
    UserOption,
    app,
    check_mode,
    get_store,
    open_sync,
)


@app.command()
def complete(
    day: Annotated[int, typer.Argument(help="Day number")],
    instance_id: Annotated[str, typer.Argument(help="Exercise id shown by show-day")],
    mode: ModeOption = "facility",
    sets: Annotated[
        Optional[int],
        typer.Option("--sets", "-s", help="Sets completed (omit to toggle done/not done)"),
    ] = None,
    kcal: Annotated[
        Optional[float],
        typer.Option("--kcal", help="Measured calories, e.g. from a timer or tracker"),
    ] = None,
    data_dir: DataDirOption = None,
    user: UserOption = DEFAULT_USER,
) -> None:
    """
    Mark an exercise done, partly done, or not done.

    Without --sets the exercise toggles between done and not started.
    """
    check_mode(mode)
    sync = open_sync(data_dir, user)

    try:
        day_plan = sync.complete(day, mode, instance_id, sets, kcal)  # type: ignore[arg-type]
    except (LookupError, ValueError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    session = day_plan.session(mode)  # type: ignore[arg-type]
    idx = session.find(instance_id)
    if idx is None:
        views.print_error(f"No exercise {instance_id} on day {day}")
        raise typer.Exit(1)
    ex = session.exercises[idx]
    views.print_success(f"{ex.name}: {ex.status} ({ex.actual_kcal:.1f} kcal)")
    if day_plan.completed:
        views.print_success(
            f"Day {day_plan.day_number} complete! +{earned_xp(day_plan)} XP"
        )


@app.command()
def options(
    day: Annotated[int, typer.Argument(help="Day number")],
    instance_id: Annotated[str, typer.Argument(help="Exercise id shown by show-day")],
    mode: ModeOption = "facility",
    data_dir: DataDirOption = None,
    user: UserOption = DEFAULT_USER,
) -> None:
    """List exercises that can replace one in the session."""
    check_mode(mode)
    sync = open_sync(data_dir, user)

    try:
        candidates = sync.options(day, mode, instance_id)  # type: ignore[arg-type]
    except LookupError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_options(candidates)


@app.command()
def swap(
    day: Annotated[int, typer.Argument(help="Day number")],
    instance_id: Annotated[str, typer.Argument(help="Exercise id shown by show-day")],
    name: Annotated[str, typer.Argument(help="Replacement exercise name")],
    mode: ModeOption = "facility",
    data_dir: DataDirOption = None,
    user: UserOption = DEFAULT_USER,
) -> None:
    """
    Replace an exercise with another from the same catalog.

    The slot keeps its duration, so the session length does not change.
    """
    check_mode(mode)
    sync = open_sync(data_dir, user)

    try:
        day_plan = sync.substitute(day, mode, instance_id, name)  # type: ignore[arg-type]
    except (LookupError, SubstitutionNotAllowed) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    session = day_plan.session(mode)  # type: ignore[arg-type]
    idx = session.find(instance_id)
    if idx is None:
        views.print_error(f"No exercise {instance_id} on day {day}")
        raise typer.Exit(1)
    ex = session.exercises[idx]
    views.print_success(
        f"Swapped in {ex.name}: {ex.duration_minutes:.1f} min, {ex.predicted_kcal:.1f} kcal"
    )


@app.command()
def history(
    data_dir: DataDirOption = None,
    user: UserOption = DEFAULT_USER,
) -> None:
    """Show archived days."""
    store = get_store(data_dir)
    try:
        records = store.list_history(user)
    except StoreError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_history(records)
