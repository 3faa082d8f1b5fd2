"""
Completion and substitution tracking on a single day plan.

Both operations mutate the plan in place and keep the ``completed`` flag
consistent with the session that was acted upon.
"""

from .calories import predict_burn
from .config import XP_PER_EXERCISE
from .models import DayPlan, ExerciseDefinition, SessionKind, SizedExercise


class ExerciseNotFound(LookupError):
    """Raised when an instance id is not part of the addressed session."""


class SubstitutionNotAllowed(ValueError):
    """Raised when replacing an exercise that is already complete."""


class DayNotFound(LookupError):
    """Raised when no plan in the horizon has the requested day number."""


def find_day(plans: list[DayPlan], day_number: int) -> DayPlan:
    """Return the plan with this day number from the horizon."""
    for plan in plans:
        if plan.day_number == day_number:
            return plan
    raise DayNotFound(f"Day {day_number} is not in the current horizon")


def _locate(plan: DayPlan, kind: SessionKind, instance_id: str) -> tuple[int, SizedExercise]:
    session = plan.session(kind)
    idx = session.find(instance_id)
    if idx is None:
        raise ExerciseNotFound(
            f"No exercise {instance_id!r} in the {kind} session of day {plan.day_number}"
        )
    return idx, session.exercises[idx]


def _refresh_day(plan: DayPlan, kind: SessionKind) -> None:
    session = plan.session(kind)
    session.recompute_totals()
    for ex in session.exercises:
        if ex.is_complete:
            plan.completed_ids.add(ex.instance_id)
        else:
            plan.completed_ids.discard(ex.instance_id)
    plan.completed = session.all_complete


def record_completion(
    plan: DayPlan,
    kind: SessionKind,
    instance_id: str,
    completed_sets: int | None = None,
    measured_kcal: float | None = None,
) -> DayPlan:
    """
    Record progress on one exercise.

    Without ``completed_sets`` the exercise toggles between not started
    and complete (completed sets 0 or the full set count).  With it, the
    status becomes complete when ``completed_sets >= sets``, partial when
    it is between 0 and ``sets``, and not started at 0.

    Actual burn is ``measured_kcal`` when supplied (e.g. from a live
    timer); otherwise predicted burn for a full completion, predicted burn
    scaled by the completed fraction for a partial one, and 0 when not
    started.

    Args:
        plan: Day plan to update
        kind: "facility" or "home"
        instance_id: Exercise instance to update
        completed_sets: Explicit completed-set count
        measured_kcal: Externally measured burn

    Returns:
        The same plan, updated

    Raises:
        ExerciseNotFound: If the instance id is not in the session
        ValueError: If completed_sets or measured_kcal is negative
    """
    _, ex = _locate(plan, kind, instance_id)

    if completed_sets is None:
        if ex.is_complete:
            ex.status = "not started"
            ex.completed_sets = 0
        else:
            ex.status = "complete"
            ex.completed_sets = ex.sets
    else:
        if completed_sets < 0:
            raise ValueError("completed_sets must be non-negative")
        ex.completed_sets = completed_sets
        if completed_sets >= ex.sets:
            ex.status = "complete"
        elif completed_sets > 0:
            ex.status = "partial"
        else:
            ex.status = "not started"

    if measured_kcal is not None:
        if measured_kcal < 0:
            raise ValueError("measured_kcal must be non-negative")
        ex.actual_kcal = round(measured_kcal, 1)
    elif ex.status == "complete":
        ex.actual_kcal = ex.predicted_kcal
    elif ex.status == "partial" and ex.sets > 0:
        ex.actual_kcal = round(ex.predicted_kcal * ex.completed_sets / ex.sets, 1)
    else:
        ex.actual_kcal = 0.0

    _refresh_day(plan, kind)
    return plan


def substitute_exercise(
    plan: DayPlan,
    kind: SessionKind,
    instance_id: str,
    replacement: ExerciseDefinition,
    weight_kg: float,
) -> DayPlan:
    """
    Replace one exercise with another at the same duration.

    The instance id and duration are preserved, so session duration is
    unchanged and anything keyed by instance id stays valid.  Predicted
    burn is recomputed for the replacement's MET.  Progress on the slot
    resets to not started.

    Raises:
        ExerciseNotFound: If the instance id is not in the session
        SubstitutionNotAllowed: If the exercise is already complete
        ValueError: If weight_kg is non-positive
    """
    if weight_kg <= 0:
        raise ValueError("weight_kg must be positive")

    idx, old = _locate(plan, kind, instance_id)
    if old.is_complete:
        raise SubstitutionNotAllowed(
            f"{old.name!r} is already complete on day {plan.day_number}"
        )

    if replacement.kind == "set-rep":
        reps = replacement.baseline_reps or old.reps
    else:
        reps = f"{round(old.duration_minutes * 60)}s"

    plan.session(kind).exercises[idx] = SizedExercise(
        instance_id=old.instance_id,
        name=replacement.name,
        body_area=replacement.body_area,
        equipment=replacement.equipment,
        skill_level=replacement.skill_level,
        met=replacement.met,
        kind=replacement.kind,
        duration_minutes=old.duration_minutes,
        sets=old.sets,
        reps=reps,
        predicted_kcal=predict_burn(replacement.met, weight_kg, old.duration_minutes),
        video=replacement.video,
    )

    _refresh_day(plan, kind)
    return plan


def replacement_options(
    plan: DayPlan,
    kind: SessionKind,
    instance_id: str,
    pool: list[ExerciseDefinition],
) -> list[ExerciseDefinition]:
    """
    Candidate replacements for one exercise.

    Same body area as the exercise being replaced, excluding any name
    already present in the session.
    """
    _, ex = _locate(plan, kind, instance_id)
    in_session = {e.name for e in plan.session(kind).exercises}
    return [
        cand for cand in pool
        if cand.body_area == ex.body_area and cand.name not in in_session
    ]


def earned_xp(plan: DayPlan) -> int:
    """Experience points earned on a day: a fixed amount per completed exercise."""
    return len(plan.completed_ids) * XP_PER_EXERCISE
