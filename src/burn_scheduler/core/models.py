"""
Data models for burn-scheduler.

All core dataclasses representing the user profile, exercise catalog
entries, sized exercises, sessions, day plans, and archived history.
Dates are ISO strings (YYYY-MM-DD) validated on construction.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from .config import BODY_AREAS, GOAL_BASE_BURN, ROTATION

ExerciseKind = Literal["duration", "set-rep"]
SessionKind = Literal["facility", "home"]
ExerciseStatus = Literal["not started", "partial", "complete"]
JobStatus = Literal["success", "failed"]

EXERCISE_KINDS: tuple[str, ...] = ("duration", "set-rep")
SESSION_KINDS: tuple[str, ...] = ("facility", "home")
EXERCISE_STATUSES: tuple[str, ...] = ("not started", "partial", "complete")


def validate_iso_date(date_str: str) -> None:
    """Validate date string is ISO format YYYY-MM-DD."""
    if not isinstance(date_str, str) or not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValueError(f"Invalid date format: {date_str}. Expected YYYY-MM-DD")
    try:
        datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


@dataclass(frozen=True)
class UserProfile:
    """
    Read-only snapshot of the user's profile.

    The engine never mutates a profile; a weight update produces a new
    instance via ``dataclasses.replace``.  ``target_weight_kg`` and
    ``target_duration_weeks`` must both be set for projection-mode targets.
    """

    weight_kg: float
    goal: str = "maintain"
    activity_level: str = "moderate"
    target_weight_kg: float | None = None
    target_duration_weeks: int | None = None
    skill_level: str | None = None
    workout_xp: int = 0

    def __post_init__(self) -> None:
        """Validate profile data."""
        if self.weight_kg <= 0:
            raise ValueError("weight_kg must be positive")
        if self.goal not in GOAL_BASE_BURN:
            valid = ", ".join(GOAL_BASE_BURN)
            raise ValueError(f"Invalid goal: {self.goal!r}. Must be one of {valid}")
        if self.target_weight_kg is not None and self.target_weight_kg <= 0:
            raise ValueError("target_weight_kg must be positive")
        if self.target_duration_weeks is not None and self.target_duration_weeks <= 0:
            raise ValueError("target_duration_weeks must be positive")
        if self.workout_xp < 0:
            raise ValueError("workout_xp must be non-negative")

    def has_projection(self) -> bool:
        """Return True if both target weight and target duration are set."""
        return self.target_weight_kg is not None and self.target_duration_weeks is not None

    def total_program_days(self) -> int | None:
        """Length of the whole program in days, or None without a target duration."""
        if self.target_duration_weeks is None:
            return None
        return self.target_duration_weeks * 7


@dataclass(frozen=True)
class ExerciseDefinition:
    """
    One normalized catalog entry.

    Facility and home catalogs share this shape once normalized.
    ``baseline_duration_seconds`` only matters for duration-kind exercises;
    ``baseline_sets``/``baseline_reps`` only for set-rep ones.
    """

    name: str
    body_area: str             # Upper | Lower | Core | Cardio | Full Body
    equipment: str
    skill_level: str           # e.g. "Beginner"
    met: float
    kind: ExerciseKind = "set-rep"
    video: str | None = None
    baseline_sets: int | None = None
    baseline_reps: str | None = None   # rep range, e.g. "8-12"
    baseline_duration_seconds: float | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("name must be non-empty")
        if self.met <= 0:
            raise ValueError(f"met must be positive for {self.name!r}")
        if self.kind not in EXERCISE_KINDS:
            raise ValueError(f"Invalid kind: {self.kind!r}")
        if self.body_area not in BODY_AREAS:
            raise ValueError(f"Invalid body_area: {self.body_area!r}")


@dataclass
class SizedExercise:
    """
    A selected exercise instance inside a session.

    Invariant: predicted_kcal == predict_burn(met, weight, duration_minutes).
    """

    instance_id: str
    name: str
    body_area: str
    equipment: str
    skill_level: str
    met: float
    kind: ExerciseKind
    duration_minutes: float
    sets: int
    reps: str
    predicted_kcal: float
    video: str | None = None
    actual_kcal: float = 0.0
    status: ExerciseStatus = "not started"
    completed_sets: int = 0

    def __post_init__(self) -> None:
        if self.duration_minutes < 0:
            raise ValueError("duration_minutes must be non-negative")
        if self.sets < 0:
            raise ValueError("sets must be non-negative")
        if self.completed_sets < 0:
            raise ValueError("completed_sets must be non-negative")
        if self.status not in EXERCISE_STATUSES:
            raise ValueError(f"Invalid status: {self.status!r}")

    @property
    def is_complete(self) -> bool:
        return self.status == "complete"


@dataclass
class SessionPlan:
    """
    Ordered list of sized exercises for one variant of a day.

    Totals are derived; call recompute_totals() after changing ``exercises``.
    """

    exercises: list[SizedExercise] = field(default_factory=list)
    total_kcal: float = 0.0
    total_minutes: float = 0.0

    def recompute_totals(self) -> None:
        """Recompute total predicted kcal and total duration."""
        self.total_kcal = round(sum(e.predicted_kcal for e in self.exercises), 1)
        self.total_minutes = round(sum(e.duration_minutes for e in self.exercises), 1)

    def find(self, instance_id: str) -> int | None:
        """Return the index of the exercise with this instance id, or None."""
        for i, ex in enumerate(self.exercises):
            if ex.instance_id == instance_id:
                return i
        return None

    @property
    def all_complete(self) -> bool:
        """True if the session is non-empty and every exercise is complete."""
        return bool(self.exercises) and all(e.is_complete for e in self.exercises)


@dataclass
class DayPlan:
    """
    One calendar day of the rolling horizon.

    ``completed`` is true iff every exercise of the session last acted upon
    has status complete.  ``plan_id`` is assigned by the store on insert.
    """

    day_number: int
    date: str  # ISO format: YYYY-MM-DD
    focus: str
    target_kcal: float
    facility: SessionPlan = field(default_factory=SessionPlan)
    home: SessionPlan = field(default_factory=SessionPlan)
    completed_ids: set[str] = field(default_factory=set)
    completed: bool = False
    skill_level: str = "Beginner"
    plan_id: str | None = None

    def __post_init__(self) -> None:
        validate_iso_date(self.date)
        if self.day_number < 1:
            raise ValueError("day_number must be >= 1")
        if self.focus not in ROTATION:
            raise ValueError(f"Invalid focus: {self.focus!r}")

    def session(self, kind: SessionKind) -> SessionPlan:
        """Return the facility or home session."""
        if kind == "facility":
            return self.facility
        if kind == "home":
            return self.home
        raise ValueError(f"Invalid session kind: {kind!r}. Must be 'facility' or 'home'")

    def actual_kcal(self) -> float:
        """Sum of actual burn recorded across both sessions."""
        total = sum(e.actual_kcal for e in self.facility.exercises)
        total += sum(e.actual_kcal for e in self.home.exercises)
        return round(total, 1)


@dataclass(frozen=True)
class HistoryRecord:
    """Immutable summary of an elapsed day plan."""

    day_number: int
    date: str
    focus: str
    target_kcal: float
    actual_kcal: float
    completed: bool
    snapshot: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class JobLogEntry:
    """Outcome of one generation run, for observability only."""

    user_id: str
    status: JobStatus
    label: str
    created_at: str
    error_message: str | None = None
