"""
Configuration constants for the workout scheduling model.

All adjustable parameters are centralized here for easy tuning.
Values can be overridden from model.yaml through SchedulerSettings.
"""

from dataclasses import dataclass, fields
from typing import Any, Final

# =============================================================================
# CALORIE MODEL
# =============================================================================

CALORIE_PRECISION: Final[int] = 1  # Decimal places for predicted kcal
KCAL_PER_KG: Final[float] = 7700.0  # Energy content of 1 kg body mass

# =============================================================================
# DAILY BURN TARGET
# =============================================================================

GOAL_BASE_BURN: Final[dict[str, int]] = {
    "lose_weight": 500,
    "lose_fat": 500,
    "build_muscle": 300,
    "gain_muscle": 300,
    "gain_weight": 250,
    "maintain": 300,
    "retain": 300,
    "improve": 300,
}
DEFAULT_BASE_BURN: Final[int] = 300

HEAVY_WEIGHT_KG: Final[float] = 90.0  # Above this: +HEAVY_ADJUSTMENT
HEAVY_ADJUSTMENT: Final[int] = 100
LIGHT_WEIGHT_KG: Final[float] = 60.0  # Below this: LIGHT_ADJUSTMENT
LIGHT_ADJUSTMENT: Final[int] = -50

TARGET_MIN_KCAL: Final[int] = 200  # Floor for weight-loss projection
TARGET_MAX_KCAL: Final[int] = 1000  # Ceiling for weight-loss projection
GAIN_PHASE_KCAL: Final[int] = 300  # Flat target whenever the projection gains weight
FALLBACK_TARGET_KCAL: Final[int] = 300  # Used when no days remain

# =============================================================================
# SKILL LEVEL
# =============================================================================

SKILL_LEVELS: Final[tuple[str, ...]] = ("Beginner", "Intermediate", "Pro")
XP_PRO: Final[int] = 5000
XP_INTERMEDIATE: Final[int] = 3500
XP_PER_EXERCISE: Final[int] = 10

# =============================================================================
# SESSION SELECTION
# =============================================================================

MIN_EXERCISES: Final[int] = 8
MAX_EXERCISES: Final[int] = 15
ASSUMED_SESSION_SIZE: Final[int] = 10  # Divides the day target into per-exercise sub-targets

REQUIRED_MINUTES_MIN: Final[float] = 2.0
REQUIRED_MINUTES_MAX: Final[float] = 20.0
DURATION_EXERCISE_MIN: Final[float] = 0.5  # Minutes, duration-kind exercises
DURATION_EXERCISE_MAX: Final[float] = 5.0

SECONDS_PER_REP: Final[int] = 3
REST_BETWEEN_SETS_SECONDS: Final[int] = 60
SETS_MIN: Final[int] = 2
SETS_MAX: Final[int] = 5
DEFAULT_AVG_REPS: Final[int] = 10

HOME_SUPPLEMENT_AREAS: Final[tuple[str, ...]] = ("Full Body", "Cardio")

# =============================================================================
# BODY FOCUS ROTATION
# =============================================================================

BODY_AREAS: Final[tuple[str, ...]] = ("Upper", "Lower", "Core", "Cardio", "Full Body")
REST_FOCUS: Final[str] = "Rest/Light"
ROTATION: Final[tuple[str, ...]] = ("Upper", "Lower", "Core", "Cardio", REST_FOCUS)

# =============================================================================
# ROLLING HORIZON
# =============================================================================

HORIZON_THRESHOLD: Final[int] = 3  # Extend when fewer active days remain
BLOCK_SIZE_DAYS: Final[int] = 5


@dataclass(frozen=True)
class SchedulerSettings:
    """Tunables for session selection and horizon management."""

    min_exercises: int = MIN_EXERCISES
    max_exercises: int = MAX_EXERCISES
    assumed_session_size: int = ASSUMED_SESSION_SIZE
    required_minutes_min: float = REQUIRED_MINUTES_MIN
    required_minutes_max: float = REQUIRED_MINUTES_MAX
    duration_exercise_min: float = DURATION_EXERCISE_MIN
    duration_exercise_max: float = DURATION_EXERCISE_MAX
    seconds_per_rep: int = SECONDS_PER_REP
    rest_between_sets_seconds: int = REST_BETWEEN_SETS_SECONDS
    sets_min: int = SETS_MIN
    sets_max: int = SETS_MAX
    horizon_threshold: int = HORIZON_THRESHOLD
    block_size_days: int = BLOCK_SIZE_DAYS

    def __post_init__(self) -> None:
        if self.min_exercises < 0 or self.max_exercises < self.min_exercises:
            raise ValueError("exercise count bounds must satisfy 0 <= min <= max")
        if self.assumed_session_size <= 0:
            raise ValueError("assumed_session_size must be positive")
        if self.sets_min < 1 or self.sets_max < self.sets_min:
            raise ValueError("set bounds must satisfy 1 <= min <= max")
        if self.block_size_days <= 0:
            raise ValueError("block_size_days must be positive")

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "SchedulerSettings":
        """
        Build settings from the ``selector`` and ``horizon`` YAML sections.

        Unknown keys are ignored; missing keys keep their defaults.
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Any] = {}
        for section in ("selector", "horizon"):
            raw = config.get(section) or {}
            for key, value in raw.items():
                if key in known:
                    values[key] = value
        defaults = cls()
        coerced = {
            k: type(getattr(defaults, k))(v) for k, v in values.items()
        }
        return cls(**coerced)


DEFAULT_SETTINGS: Final[SchedulerSettings] = SchedulerSettings()
