"""
burn-scheduler: rolling workout plan generation driven by a calorie model.
"""

__version__ = "0.1.0"
