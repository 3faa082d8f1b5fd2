"""
Raw catalog record → ExerciseDefinition normalization.

The facility and home catalogs come from different spreadsheets and use
different column names.  Both are mapped onto one ExerciseDefinition
shape here.
"""

from typing import Any

from ..models import ExerciseDefinition

AREA_KEYWORDS: tuple[str, ...] = ("Upper", "Lower", "Core", "Cardio")
DURATION_MARKERS: tuple[str, ...] = ("time", "duration", "hold", "sec", "timed")

FACILITY_FIELDS: dict[str, str] = {
    "name": "Exercise",
    "area": "Body Area",
    "equipment": "Equipment",
    "level": "Level",
    "met": "MET",
    "video": "Video",
    "format": "Type",
    "sets": "Sets",
    "reps": "Reps",
    "duration": "Duration (sec)",
}

HOME_FIELDS: dict[str, str] = {
    "name": "Exercise Name",
    "area": "Works (Upper/Lower/Cardio/Core/Full Body)",
    "equipment": "Equipment Needed",
    "level": "Level (Beginner/Intermediate)",
    "met": "MET (Metabolic Equivalent)",
    "video": "Video Link",
    "format": "Format",
    "sets": "Recommended Sets",
    "reps": "Recommended Reps",
    "duration": "Recommended Duration (sec)",
}


class CatalogError(ValueError):
    """Raised when a raw catalog record cannot be normalized."""


def area_from_text(text: str | None) -> str:
    """
    Map free text such as "Upper body, Core" to one body area.

    The first keyword found in the order Upper, Lower, Core, Cardio wins;
    anything else is Full Body.
    """
    if not text:
        return "Full Body"
    for area in AREA_KEYWORDS:
        if area.lower() in text.lower():
            return area
    return "Full Body"


def kind_from_text(text: str | None) -> str:
    """Duration-based when the format mentions time, else set/rep-based."""
    if text and any(marker in text.lower() for marker in DURATION_MARKERS):
        return "duration"
    return "set-rep"


def _optional_int(value: Any) -> int | None:
    if value in (None, ""):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _optional_float(value: Any) -> float | None:
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> str | None:
    if value in (None, ""):
        return None
    return str(value).strip() or None


def _normalize(record: dict[str, Any], columns: dict[str, str]) -> ExerciseDefinition:
    name = _optional_str(record.get(columns["name"]))
    if name is None:
        raise CatalogError(f"record has no {columns['name']!r}: {record!r}")

    met = _optional_float(record.get(columns["met"]))
    if met is None or met <= 0:
        raise CatalogError(f"{name!r}: MET must be a positive number, got {record.get(columns['met'])!r}")

    reps = record.get(columns["reps"])
    return ExerciseDefinition(
        name=name,
        body_area=area_from_text(_optional_str(record.get(columns["area"]))),
        equipment=_optional_str(record.get(columns["equipment"])) or "None",
        skill_level=_optional_str(record.get(columns["level"])) or "Beginner",
        met=met,
        kind=kind_from_text(_optional_str(record.get(columns["format"]))),  # type: ignore[arg-type]
        video=_optional_str(record.get(columns["video"])),
        baseline_sets=_optional_int(record.get(columns["sets"])),
        baseline_reps=_optional_str(reps),
        baseline_duration_seconds=_optional_float(record.get(columns["duration"])),
    )


def normalize_facility_record(record: dict[str, Any]) -> ExerciseDefinition:
    """Normalize one facility (gym equipment) catalog record."""
    return _normalize(record, FACILITY_FIELDS)


def normalize_home_record(record: dict[str, Any]) -> ExerciseDefinition:
    """Normalize one home (bodyweight) catalog record."""
    return _normalize(record, HOME_FIELDS)
