"""Profile management commands: init, update-weight, status."""

from dataclasses import replace
from typing import Annotated, Optional

import typer

from ...core.config import GOAL_BASE_BURN, SKILL_LEVELS
from ...core.models import UserProfile
from ...io.horizon_store import StoreError
from .. import views
from ..app import DEFAULT_USER, DataDirOption, UserOption, app, get_store, open_sync


@app.command()
def init(
    weight_kg: Annotated[
        float,
        typer.Option("--weight", "-w", help="Current body weight in kg"),
    ],
    goal: Annotated[
        str,
        typer.Option("--goal", "-g", help="Goal: " + ", ".join(GOAL_BASE_BURN)),
    ] = "maintain",
    activity_level: Annotated[
        str,
        typer.Option("--activity", help="Activity level (informational)"),
    ] = "moderate",
    target_weight: Annotated[
        Optional[float],
        typer.Option("--target-weight", help="Target body weight in kg"),
    ] = None,
    target_weeks: Annotated[
        Optional[int],
        typer.Option("--target-weeks", help="Weeks to reach the target weight"),
    ] = None,
    skill_level: Annotated[
        Optional[str],
        typer.Option("--skill", help="Skill level: Beginner, Intermediate or Pro"),
    ] = None,
    workout_xp: Annotated[
        int,
        typer.Option("--xp", help="Accumulated workout experience points"),
    ] = 0,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing profile without prompting"),
    ] = False,
    data_dir: DataDirOption = None,
    user: UserOption = DEFAULT_USER,
) -> None:
    """
    Create or replace a user profile.

    Setting both --target-weight and --target-weeks switches daily targets
    from the goal heuristic to a projection over the program length.
    """
    store = get_store(data_dir)

    if skill_level is not None and skill_level not in SKILL_LEVELS:
        views.print_error(f"Skill level must be one of {', '.join(SKILL_LEVELS)}")
        raise typer.Exit(1)

    if (target_weight is None) != (target_weeks is None):
        views.print_warning(
            "Both --target-weight and --target-weeks are needed for projected targets; "
            "using the goal heuristic."
        )

    try:
        profile = UserProfile(
            weight_kg=weight_kg,
            goal=goal,
            activity_level=activity_level,
            target_weight_kg=target_weight,
            target_duration_weeks=target_weeks,
            skill_level=skill_level,
            workout_xp=workout_xp,
        )
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    try:
        existing = store.load_profile(user)
    except StoreError:
        existing = None

    if existing is not None and not force:
        if not views.confirm_action(f"Profile for '{user}' exists. Overwrite?"):
            views.print_info("Cancelled.")
            raise typer.Exit(0)

    try:
        store.save_profile(user, profile)
    except StoreError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Profile saved for '{user}' in {store.data_dir}")
    views.print_info("Run 'plan' to build your first five days.")


@app.command("update-weight")
def update_weight(
    weight_kg: Annotated[float, typer.Argument(help="New body weight in kg")],
    data_dir: DataDirOption = None,
    user: UserOption = DEFAULT_USER,
) -> None:
    """
    Update current body weight.

    Plans already in the horizon keep their sizing; the next generated
    block uses the new weight.
    """
    store = get_store(data_dir)
    try:
        profile = store.load_profile(user)
    except StoreError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if profile is None:
        views.print_error(f"No profile for user '{user}'")
        views.print_info("Run 'init' first to create a profile.")
        raise typer.Exit(1)

    try:
        updated = replace(profile, weight_kg=weight_kg)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    try:
        store.save_profile(user, updated)
    except StoreError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Weight updated: {profile.weight_kg:.1f} → {weight_kg:.1f} kg")


@app.command()
def status(
    data_dir: DataDirOption = None,
    user: UserOption = DEFAULT_USER,
) -> None:
    """Show profile, skill level, and the target for the next block."""
    sync = open_sync(data_dir, user)
    if sync.profile is None:
        views.print_error(f"No profile for user '{user}'")
        raise typer.Exit(1)
    views.console.print(views.format_status_display(sync.profile, sync.plans))
