"""
Rolling horizon management.

Keeps a perpetually rolling window of future day plans:

1. Plans dated before ``today`` are archived into history records.
2. When fewer than ``horizon_threshold`` active plans remain, a new block
   is generated right after the latest active day, continuing the day
   number sequence.
3. New plans are merged by date so re-running never duplicates a date.

``today`` is always passed in; nothing here reads the clock.
"""

import random
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta

from .config import DEFAULT_SETTINGS, SchedulerSettings
from .models import DayPlan, ExerciseDefinition, HistoryRecord, UserProfile, validate_iso_date
from .planner import generate_block
from .targets import daily_target, days_remaining


@dataclass
class HorizonUpdate:
    """
    Result of one horizon pass.

    ``active`` is the live horizon after the pass.  ``archived``,
    ``deleted`` and ``upserts`` describe the writes the caller must issue.
    ``label`` describes the generation run, or is None when nothing was
    generated.
    """

    active: list[DayPlan]
    archived: list[HistoryRecord] = field(default_factory=list)
    deleted: list[DayPlan] = field(default_factory=list)
    upserts: list[DayPlan] = field(default_factory=list)
    label: str | None = None

    @property
    def generated(self) -> bool:
        return self.label is not None


def partition_horizon(
    plans: list[DayPlan],
    today: str,
) -> tuple[list[DayPlan], list[DayPlan]]:
    """
    Split plans into past (date < today) and active (date >= today).

    Both lists are sorted by day number.
    """
    validate_iso_date(today)
    past = sorted((p for p in plans if p.date < today), key=lambda p: p.day_number)
    active = sorted((p for p in plans if p.date >= today), key=lambda p: p.day_number)
    return past, active


def plan_snapshot(plan: DayPlan) -> dict:
    """Plain-dict copy of a plan for the history record."""
    snap = asdict(plan)
    snap["completed_ids"] = sorted(plan.completed_ids)
    return snap


def archive_plan(plan: DayPlan) -> HistoryRecord:
    """Convert an elapsed plan into an immutable history record."""
    return HistoryRecord(
        day_number=plan.day_number,
        date=plan.date,
        focus=plan.focus,
        target_kcal=plan.target_kcal,
        actual_kcal=plan.actual_kcal(),
        completed=plan.completed,
        snapshot=plan_snapshot(plan),
    )


def _has_progress(plan: DayPlan) -> bool:
    if plan.completed or plan.completed_ids:
        return True
    exercises = plan.facility.exercises + plan.home.exercises
    return any(e.status != "not started" for e in exercises)


def merge_by_date(
    existing: list[DayPlan],
    new_plans: list[DayPlan],
) -> tuple[list[DayPlan], list[DayPlan]]:
    """
    Upsert ``new_plans`` into ``existing`` keyed by date.

    A plan already present on a date keeps its day number, identifier,
    and any progress; if it has no progress its content is refreshed from
    the new plan.  Dates not present are inserted.

    Returns:
        (merged horizon sorted by day number, plans that must be written)
    """
    by_date = {p.date: p for p in existing}
    written: list[DayPlan] = []

    for new in new_plans:
        current = by_date.get(new.date)
        if current is None:
            by_date[new.date] = new
            written.append(new)
            continue
        if _has_progress(current):
            continue
        current.focus = new.focus
        current.target_kcal = new.target_kcal
        current.facility = new.facility
        current.home = new.home
        current.skill_level = new.skill_level
        written.append(current)

    merged = sorted(by_date.values(), key=lambda p: p.day_number)
    return merged, written


def _next_day(date_str: str) -> str:
    return (datetime.strptime(date_str, "%Y-%m-%d") + timedelta(days=1)).strftime("%Y-%m-%d")


def manage_horizon(
    profile: UserProfile,
    plans: list[DayPlan],
    today: str,
    facility_pool: list[ExerciseDefinition],
    home_pool: list[ExerciseDefinition],
    rng: random.Random | None = None,
    settings: SchedulerSettings = DEFAULT_SETTINGS,
) -> HorizonUpdate:
    """
    Archive elapsed plans and extend the horizon when it runs short.

    The new block starts the day after the latest active plan (or today
    when none is active) and continues from the highest day number seen.
    Its target is re-derived from the current profile weight and the
    days left in the program after that day number.

    Args:
        profile: Current profile snapshot
        plans: All non-archived plans for the user
        today: ISO date treated as "today"
        facility_pool: Normalized facility catalog
        home_pool: Normalized home catalog
        rng: Random source for selection
        settings: Threshold, block size, and selection tunables

    Returns:
        HorizonUpdate describing the new horizon and the writes to issue
    """
    past, active = partition_horizon(plans, today)
    update = HorizonUpdate(
        active=active,
        archived=[archive_plan(p) for p in past],
        deleted=list(past),
    )

    if len(active) >= settings.horizon_threshold:
        return update

    if active:
        last = active[-1]
        start_date = _next_day(last.date)
        last_day_number = last.day_number
    else:
        start_date = today
        last_day_number = max((p.day_number for p in past), default=0)

    start_day_number = last_day_number + 1
    target = daily_target(profile, days_remaining(profile, last_day_number))
    block = generate_block(
        profile,
        facility_pool,
        home_pool,
        start_date,
        start_day_number,
        settings.block_size_days,
        target_kcal=target,
        rng=rng,
        settings=settings,
    )

    update.active, update.upserts = merge_by_date(active, block)
    update.label = (
        f"extend: days {start_day_number}-{start_day_number + len(block) - 1}"
        f" from {start_date}, target {target} kcal"
    )
    return update


def regenerate_full_horizon(
    profile: UserProfile,
    plans: list[DayPlan],
    today: str,
    facility_pool: list[ExerciseDefinition],
    home_pool: list[ExerciseDefinition],
    rng: random.Random | None = None,
    settings: SchedulerSettings = DEFAULT_SETTINGS,
) -> HorizonUpdate:
    """
    Discard the whole active horizon and restart at day 1 today.

    Elapsed plans are still archived first.  The threshold check is
    skipped and the target is computed as for a fresh program.
    """
    past, active = partition_horizon(plans, today)
    target = daily_target(profile, days_remaining(profile, 0))
    block = generate_block(
        profile,
        facility_pool,
        home_pool,
        today,
        1,
        settings.block_size_days,
        target_kcal=target,
        rng=rng,
        settings=settings,
    )
    return HorizonUpdate(
        active=block,
        archived=[archive_plan(p) for p in past],
        deleted=list(past) + list(active),
        upserts=list(block),
        label=f"regenerate: days 1-{len(block)} from {today}, target {target} kcal",
    )
