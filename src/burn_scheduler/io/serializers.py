"""
JSON serialization for scheduling data models.

Handles conversion between dataclasses and JSON-compatible dicts.
"""

import json
from typing import Any

from ..core.models import (
    EXERCISE_KINDS,
    EXERCISE_STATUSES,
    DayPlan,
    HistoryRecord,
    JobLogEntry,
    SessionPlan,
    SizedExercise,
    UserProfile,
    validate_iso_date,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate an ISO date string.

    Raises:
        ValidationError: If date format is invalid
    """
    try:
        validate_iso_date(date_str)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    return date_str


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def user_profile_to_dict(profile: UserProfile) -> dict[str, Any]:
    """Convert UserProfile to JSON-compatible dict."""
    return {
        "weight_kg": profile.weight_kg,
        "goal": profile.goal,
        "activity_level": profile.activity_level,
        "target_weight_kg": profile.target_weight_kg,
        "target_duration_weeks": profile.target_duration_weeks,
        "skill_level": profile.skill_level,
        "workout_xp": profile.workout_xp,
    }


def dict_to_user_profile(data: dict[str, Any]) -> UserProfile:
    """
    Convert dict to UserProfile.

    Raises:
        ValidationError: If data is invalid
    """
    if "weight_kg" not in data:
        raise ValidationError("profile is missing weight_kg")
    target_weight = data.get("target_weight_kg")
    target_weeks = data.get("target_duration_weeks")
    try:
        return UserProfile(
            weight_kg=float(data["weight_kg"]),
            goal=str(data.get("goal", "maintain")),
            activity_level=str(data.get("activity_level", "moderate")),
            target_weight_kg=float(target_weight) if target_weight is not None else None,
            target_duration_weeks=int(target_weeks) if target_weeks is not None else None,
            skill_level=data.get("skill_level"),
            workout_xp=int(data.get("workout_xp", 0)),
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid profile: {e}") from e


def sized_exercise_to_dict(ex: SizedExercise) -> dict[str, Any]:
    """Convert SizedExercise to JSON-compatible dict."""
    return {
        "instance_id": ex.instance_id,
        "name": ex.name,
        "body_area": ex.body_area,
        "equipment": ex.equipment,
        "skill_level": ex.skill_level,
        "met": ex.met,
        "kind": ex.kind,
        "duration_minutes": ex.duration_minutes,
        "sets": ex.sets,
        "reps": ex.reps,
        "predicted_kcal": ex.predicted_kcal,
        "video": ex.video,
        "actual_kcal": ex.actual_kcal,
        "status": ex.status,
        "completed_sets": ex.completed_sets,
    }


def dict_to_sized_exercise(data: dict[str, Any]) -> SizedExercise:
    """
    Convert dict to SizedExercise.

    Raises:
        ValidationError: If data is invalid
    """
    validate_positive(data.get("met", 0), "met")
    validate_non_negative(data.get("duration_minutes", 0), "duration_minutes")
    kind = data.get("kind", "set-rep")
    if kind not in EXERCISE_KINDS:
        raise ValidationError(f"Invalid kind: {kind}. Must be one of {EXERCISE_KINDS}")
    status = data.get("status", "not started")
    if status not in EXERCISE_STATUSES:
        raise ValidationError(f"Invalid status: {status}. Must be one of {EXERCISE_STATUSES}")

    try:
        return SizedExercise(
            instance_id=str(data["instance_id"]),
            name=str(data["name"]),
            body_area=str(data.get("body_area", "Full Body")),
            equipment=str(data.get("equipment", "None")),
            skill_level=str(data.get("skill_level", "Beginner")),
            met=float(data["met"]),
            kind=kind,
            duration_minutes=float(data["duration_minutes"]),
            sets=int(data.get("sets", 1)),
            reps=str(data.get("reps", "")),
            predicted_kcal=float(data.get("predicted_kcal", 0.0)),
            video=data.get("video"),
            actual_kcal=float(data.get("actual_kcal", 0.0)),
            status=status,
            completed_sets=int(data.get("completed_sets", 0)),
        )
    except KeyError as e:
        raise ValidationError(f"exercise is missing field {e}") from e
    except ValueError as e:
        raise ValidationError(str(e)) from e


def session_plan_to_dict(session: SessionPlan) -> dict[str, Any]:
    """Convert SessionPlan to JSON-compatible dict."""
    return {
        "exercises": [sized_exercise_to_dict(e) for e in session.exercises],
        "total_kcal": session.total_kcal,
        "total_minutes": session.total_minutes,
    }


def dict_to_session_plan(data: dict[str, Any]) -> SessionPlan:
    """Convert dict to SessionPlan; totals are recomputed from the exercises."""
    session = SessionPlan(
        exercises=[dict_to_sized_exercise(e) for e in data.get("exercises", [])]
    )
    session.recompute_totals()
    return session


def day_plan_to_dict(plan: DayPlan) -> dict[str, Any]:
    """Convert DayPlan to JSON-compatible dict."""
    return {
        "plan_id": plan.plan_id,
        "day_number": plan.day_number,
        "date": plan.date,
        "focus": plan.focus,
        "target_kcal": plan.target_kcal,
        "skill_level": plan.skill_level,
        "facility": session_plan_to_dict(plan.facility),
        "home": session_plan_to_dict(plan.home),
        "completed_ids": sorted(plan.completed_ids),
        "completed": plan.completed,
    }


def dict_to_day_plan(data: dict[str, Any]) -> DayPlan:
    """
    Convert dict to DayPlan.

    Raises:
        ValidationError: If data is invalid
    """
    validate_date(data.get("date", ""))
    try:
        return DayPlan(
            day_number=int(data["day_number"]),
            date=data["date"],
            focus=str(data["focus"]),
            target_kcal=float(data["target_kcal"]),
            facility=dict_to_session_plan(data.get("facility", {})),
            home=dict_to_session_plan(data.get("home", {})),
            completed_ids=set(data.get("completed_ids", [])),
            completed=bool(data.get("completed", False)),
            skill_level=str(data.get("skill_level", "Beginner")),
            plan_id=data.get("plan_id"),
        )
    except KeyError as e:
        raise ValidationError(f"day plan is missing field {e}") from e
    except ValueError as e:
        raise ValidationError(str(e)) from e


def history_record_to_dict(record: HistoryRecord) -> dict[str, Any]:
    """Convert HistoryRecord to JSON-compatible dict."""
    return {
        "day_number": record.day_number,
        "date": record.date,
        "focus": record.focus,
        "target_kcal": record.target_kcal,
        "actual_kcal": record.actual_kcal,
        "completed": record.completed,
        "snapshot": record.snapshot,
    }


def dict_to_history_record(data: dict[str, Any]) -> HistoryRecord:
    """
    Convert dict to HistoryRecord.

    Raises:
        ValidationError: If data is invalid
    """
    validate_date(data.get("date", ""))
    try:
        return HistoryRecord(
            day_number=int(data["day_number"]),
            date=data["date"],
            focus=str(data["focus"]),
            target_kcal=float(data["target_kcal"]),
            actual_kcal=float(data.get("actual_kcal", 0.0)),
            completed=bool(data.get("completed", False)),
            snapshot=dict(data.get("snapshot", {})),
        )
    except KeyError as e:
        raise ValidationError(f"history record is missing field {e}") from e


def job_log_to_dict(entry: JobLogEntry) -> dict[str, Any]:
    """Convert JobLogEntry to JSON-compatible dict."""
    d: dict[str, Any] = {
        "user_id": entry.user_id,
        "status": entry.status,
        "label": entry.label,
        "created_at": entry.created_at,
    }
    if entry.error_message is not None:
        d["error_message"] = entry.error_message
    return d


def to_json_line(data: dict[str, Any]) -> str:
    """Serialize a dict as a single compact JSON line."""
    return json.dumps(data, separators=(",", ":"))
