"""
CLI entry point using Typer.

Provides commands for workout horizon management:
- init / update-weight / status: profile
- plan / regenerate / show-day: the rolling horizon
- complete / options / swap / history: tracking
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from . import views
from .app import app
from .commands import planning, profile, tracking  # noqa: F401  (registers commands)


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Calorie-targeted workout planner with a rolling five-day horizon.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=views.console, show_path=False)],
        force=True,
    )


if __name__ == "__main__":
    app()
