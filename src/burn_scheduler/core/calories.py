"""
Calorie model.

One formula shared by session sizing, completion tracking, and
exercise substitution:

    kcal = MET × weight_kg × (duration_minutes / 60)
"""

from .config import CALORIE_PRECISION


def predict_burn(met: float, weight_kg: float, duration_minutes: float) -> float:
    """
    Predict kilocalories burned for one exercise.

    Callers validate MET and weight at their boundary; this function
    assumes well-formed input.

    Args:
        met: Metabolic equivalent of the exercise (> 0)
        weight_kg: Body weight in kg (> 0)
        duration_minutes: Working time in minutes (>= 0)

    Returns:
        Predicted kcal, rounded to CALORIE_PRECISION decimals
    """
    return round(met * weight_kg * (duration_minutes / 60), CALORIE_PRECISION)


def required_minutes(target_kcal: float, met: float, weight_kg: float) -> float:
    """
    Invert the calorie model: minutes needed to burn ``target_kcal``.

        minutes = target_kcal × 60 / (MET × weight_kg)
    """
    return (target_kcal * 60) / (met * weight_kg)
