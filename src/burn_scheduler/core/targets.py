"""
Daily burn target calculation.

Two modes:

- Goal heuristic (no explicit target weight/duration): a base value keyed
  by goal, nudged by body weight.
- Projection: the energy gap to the target weight spread over the days
  left in the program, clamped for weight loss and flat for weight gain.
"""

from .config import (
    DEFAULT_BASE_BURN,
    FALLBACK_TARGET_KCAL,
    GAIN_PHASE_KCAL,
    GOAL_BASE_BURN,
    HEAVY_ADJUSTMENT,
    HEAVY_WEIGHT_KG,
    KCAL_PER_KG,
    LIGHT_ADJUSTMENT,
    LIGHT_WEIGHT_KG,
    SKILL_LEVELS,
    TARGET_MAX_KCAL,
    TARGET_MIN_KCAL,
    XP_INTERMEDIATE,
    XP_PRO,
)
from .models import UserProfile


def goal_heuristic_target(profile: UserProfile) -> int:
    """
    Daily burn target from the goal category alone.

    lose_weight/lose_fat → 500, build_muscle/gain_muscle → 300,
    gain_weight → 250, everything else → 300; then +100 above 90 kg
    and −50 below 60 kg.

    Args:
        profile: User profile snapshot

    Returns:
        Target kcal
    """
    base = GOAL_BASE_BURN.get(profile.goal, DEFAULT_BASE_BURN)
    if profile.weight_kg > HEAVY_WEIGHT_KG:
        base += HEAVY_ADJUSTMENT
    if profile.weight_kg < LIGHT_WEIGHT_KG:
        base += LIGHT_ADJUSTMENT
    return base


def projected_target(
    current_weight_kg: float,
    target_weight_kg: float,
    days_remaining: int | None,
) -> int:
    """
    Daily burn target from the remaining weight delta.

        target = |current − target| × 7700 / days_remaining

    Rounded to whole kcal, then clamped to [200, 1000] when losing weight.
    Gaining (or holding) weight is pinned to 300 regardless of the delta.
    A missing or non-positive ``days_remaining`` falls back to 300.

    Args:
        current_weight_kg: Current body weight
        target_weight_kg: Goal body weight
        days_remaining: Days left in the program

    Returns:
        Target kcal
    """
    if days_remaining is None or days_remaining <= 0:
        return FALLBACK_TARGET_KCAL

    weight_diff = current_weight_kg - target_weight_kg
    if weight_diff <= 0:
        # TODO: scale gain-phase burn with the surplus once a gain model exists
        return GAIN_PHASE_KCAL

    daily = round(abs(weight_diff) * KCAL_PER_KG / days_remaining)
    return max(TARGET_MIN_KCAL, min(TARGET_MAX_KCAL, daily))


def days_remaining(profile: UserProfile, last_day_number: int) -> int | None:
    """Days left in the program after ``last_day_number``, or None without a duration."""
    total = profile.total_program_days()
    if total is None:
        return None
    return total - last_day_number


def daily_target(profile: UserProfile, days_left: int | None = None) -> int:
    """
    Daily burn target for a profile.

    Uses projection mode when the profile has both a target weight and a
    target duration and the caller supplies ``days_left``; otherwise the
    goal heuristic.
    """
    target_weight = profile.target_weight_kg
    if profile.has_projection() and target_weight is not None and days_left is not None:
        return projected_target(profile.weight_kg, target_weight, days_left)
    return goal_heuristic_target(profile)


def determine_skill_level(profile: UserProfile) -> str:
    """
    Skill level label for a profile.

    An explicit level wins when it is a known label; otherwise the
    experience score decides (≥5000 Pro, ≥3500 Intermediate, else Beginner).
    """
    if profile.skill_level in SKILL_LEVELS:
        return profile.skill_level  # type: ignore[return-value]
    if profile.workout_xp >= XP_PRO:
        return "Pro"
    if profile.workout_xp >= XP_INTERMEDIATE:
        return "Intermediate"
    return "Beginner"
