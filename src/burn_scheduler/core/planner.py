"""
Block generation for burn-scheduler.

Generates a run of consecutive day plans, each with a facility session
and a home session sized towards the day's burn target.  The body focus
follows a fixed 5-day rotation keyed on the sequential day number, not
on the calendar weekday.
"""

import random
from datetime import datetime, timedelta

from .config import (
    DEFAULT_SETTINGS,
    HOME_SUPPLEMENT_AREAS,
    REST_FOCUS,
    ROTATION,
    SchedulerSettings,
)
from .models import DayPlan, ExerciseDefinition, UserProfile
from .selector import filter_pool, select_session
from .targets import daily_target, days_remaining, determine_skill_level


def focus_for_day(day_number: int) -> str:
    """
    Body focus for a sequential day number.

        focus = ROTATION[(day_number − 1) mod 5]

    Day 1 and day 6 always share a focus.
    """
    return ROTATION[(day_number - 1) % len(ROTATION)]


def calculate_block_days(
    start_date: str,
    start_day_number: int,
    number_of_days: int,
) -> list[tuple[str, int, str]]:
    """
    Calculate dates, day numbers, and focus for a block.

    Args:
        start_date: ISO date of the first day
        start_day_number: Sequential number of the first day (>= 1)
        number_of_days: Block length

    Returns:
        List of (date, day_number, focus) tuples, one per consecutive day
    """
    start = datetime.strptime(start_date, "%Y-%m-%d")
    days: list[tuple[str, int, str]] = []
    for i in range(number_of_days):
        day_number = start_day_number + i
        date_str = (start + timedelta(days=i)).strftime("%Y-%m-%d")
        days.append((date_str, day_number, focus_for_day(day_number)))
    return days


def build_home_pool(
    home_pool: list[ExerciseDefinition],
    focus: str,
    settings: SchedulerSettings = DEFAULT_SETTINGS,
) -> list[ExerciseDefinition]:
    """
    Focus-filtered home pool, topped up when it is thin.

    Home catalogs are small.  When fewer than ``min_exercises`` home
    candidates match a non-rest focus, Full Body and Cardio home exercises
    are added (deduplicated by name) up to ``max_exercises`` candidates.
    """
    filtered = filter_pool(home_pool, focus)
    if len(filtered) >= settings.min_exercises or focus == REST_FOCUS:
        return filtered

    names = {ex.name for ex in filtered}
    for ex in home_pool:
        if len(filtered) >= settings.max_exercises:
            break
        if ex.body_area in HOME_SUPPLEMENT_AREAS and ex.name not in names:
            filtered.append(ex)
            names.add(ex.name)
    return filtered


def generate_block(
    profile: UserProfile,
    facility_pool: list[ExerciseDefinition],
    home_pool: list[ExerciseDefinition],
    start_date: str,
    start_day_number: int,
    number_of_days: int,
    target_kcal: float | None = None,
    rng: random.Random | None = None,
    settings: SchedulerSettings = DEFAULT_SETTINGS,
) -> list[DayPlan]:
    """
    Generate ``number_of_days`` consecutive day plans.

    Day numbers run from ``start_day_number`` and dates from
    ``start_date`` without gaps.  Both sessions of a day share the same
    target.  When ``target_kcal`` is omitted it is derived from the
    profile with the days left after ``start_day_number − 1``.

    Args:
        profile: Read-only profile snapshot
        facility_pool: Normalized facility catalog
        home_pool: Normalized home catalog
        start_date: ISO date of the first day
        start_day_number: Sequential number of the first day
        number_of_days: Block length (>= 0)
        target_kcal: Burn target for every day of the block
        rng: Random source shared by all selections in the block
        settings: Selection tunables

    Returns:
        List of DayPlan in day-number order
    """
    if start_day_number < 1:
        raise ValueError("start_day_number must be >= 1")
    if number_of_days < 0:
        raise ValueError("number_of_days must be non-negative")
    if rng is None:
        rng = random.Random()
    if target_kcal is None:
        target_kcal = daily_target(profile, days_remaining(profile, start_day_number - 1))

    skill = determine_skill_level(profile)
    block: list[DayPlan] = []

    for date_str, day_number, focus in calculate_block_days(
        start_date, start_day_number, number_of_days
    ):
        facility = select_session(
            filter_pool(facility_pool, focus),
            target_kcal,
            profile.weight_kg,
            rng=rng,
            settings=settings,
        )
        home = select_session(
            build_home_pool(home_pool, focus, settings),
            target_kcal,
            profile.weight_kg,
            rng=rng,
            settings=settings,
        )
        block.append(
            DayPlan(
                day_number=day_number,
                date=date_str,
                focus=focus,
                target_kcal=target_kcal,
                facility=facility,
                home=home,
                completed=False,
                skill_level=skill,
            )
        )

    return block


def format_block_summary(plans: list[DayPlan]) -> str:
    """
    Format a block as one line per day.

    Args:
        plans: Day plans to summarize

    Returns:
        Multi-line summary string
    """
    if not plans:
        return "No days planned."

    lines = [f"{len(plans)} day(s): {plans[0].date} → {plans[-1].date}"]
    for p in plans:
        lines.append(
            f"  Day {p.day_number:>3}  {p.date}  {p.focus:<10}"
            f"  target {p.target_kcal:.0f} kcal"
            f"  facility {len(p.facility.exercises)} ex / {p.facility.total_kcal:.0f} kcal"
            f"  home {len(p.home.exercises)} ex / {p.home.total_kcal:.0f} kcal"
        )
    return "\n".join(lines)
