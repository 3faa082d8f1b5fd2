"""Shared Typer app object, shared option types, and store utilities."""

import random
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.catalog import load_catalogs
from ..core.engine.config_loader import load_settings
from ..core.models import SESSION_KINDS, validate_iso_date
from ..io.horizon_store import HorizonStore, StoreError, get_default_data_dir
from ..io.sync import ScheduleSync
from . import views

DEFAULT_USER = "default"

# Shared option types used across commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-d", help="Data directory (default: ~/.burn-scheduler)"),
]

UserOption = Annotated[
    str,
    typer.Option("--user", "-u", help="User id inside the data directory"),
]

ModeOption = Annotated[
    str,
    typer.Option("--mode", "-m", help="Session: facility (default) or home"),
]

TodayOption = Annotated[
    Optional[str],
    typer.Option("--today", help="Treat this ISO date (YYYY-MM-DD) as today"),
]

SeedOption = Annotated[
    Optional[int],
    typer.Option("--seed", help="Random seed for reproducible plans"),
]

app = typer.Typer(
    name="burn-scheduler",
    help="Calorie-targeted workout planner with a rolling five-day horizon.",
    no_args_is_help=True,
)


def get_store(data_dir: Path | None) -> HorizonStore:
    """Get store from path or default location."""
    return HorizonStore(data_dir if data_dir is not None else get_default_data_dir())


def resolve_today(today: str | None) -> str:
    """Return the injected date, or the real current date."""
    if today is None:
        return date.today().isoformat()
    try:
        validate_iso_date(today)
    except ValueError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    return today


def check_mode(mode: str) -> str:
    """Exit with an error unless mode is a session kind."""
    if mode not in SESSION_KINDS:
        views.print_error("Mode must be 'facility' or 'home'")
        raise typer.Exit(1)
    return mode


def open_sync(data_dir: Path | None, user: str, seed: int | None = None) -> ScheduleSync:
    """
    Load the user's horizon, exiting with an error if there is none to load.

    Args:
        data_dir: Data directory override
        user: User id
        seed: Optional random seed for generation

    Returns:
        ScheduleSync with profile and plans loaded
    """
    store = get_store(data_dir)
    if not store.exists():
        views.print_error(f"No data found in {store.data_dir}")
        views.print_info("Run 'init' first to create a profile.")
        raise typer.Exit(1)

    try:
        catalogs = load_catalogs()
    except RuntimeError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    sync = ScheduleSync(
        store,
        user,
        catalogs,
        settings=load_settings(),
        rng=random.Random(seed) if seed is not None else None,
    )
    try:
        sync.load()
    except StoreError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if sync.profile is None:
        views.print_error(f"No profile for user '{user}'")
        views.print_info("Run 'init' first to create a profile.")
        raise typer.Exit(1)
    return sync
