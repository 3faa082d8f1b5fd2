"""
Exercise session selection.

Assembles one session from a filtered candidate pool so that its exercise
count and cumulative predicted burn satisfy the configured bounds.
Randomness comes from a caller-supplied ``random.Random`` so a seeded
run is reproducible.
"""

import random
import re

from .calories import predict_burn, required_minutes
from .config import DEFAULT_AVG_REPS, DEFAULT_SETTINGS, REST_FOCUS, SchedulerSettings
from .models import ExerciseDefinition, SessionPlan, SizedExercise


def matches_focus(exercise: ExerciseDefinition, focus: str) -> bool:
    """
    Return True if the exercise belongs in a day with this focus.

    "Full Body" matches everything; "Rest/Light" matches Cardio-area or
    Beginner-level exercises; any other focus is an exact body-area match.
    """
    if focus == "Full Body":
        return True
    if focus == REST_FOCUS:
        return exercise.body_area == "Cardio" or exercise.skill_level == "Beginner"
    return exercise.body_area == focus


def filter_pool(pool: list[ExerciseDefinition], focus: str) -> list[ExerciseDefinition]:
    """Return the pool members matching ``focus``, preserving order."""
    return [ex for ex in pool if matches_focus(ex, focus)]


def average_reps(rep_range: str | None) -> int:
    """
    Average rep count of a rep-range string.

    "8-12" → 10, "12" → 12.  Anything unparseable → DEFAULT_AVG_REPS.
    """
    if not rep_range:
        return DEFAULT_AVG_REPS
    numbers = [int(n) for n in re.findall(r"\d+", rep_range)]
    if not numbers or re.search(r"\d\s*(s|sec|seconds)\b", rep_range.lower()):
        # "30s", "45 sec" are durations, not reps
        return DEFAULT_AVG_REPS
    if len(numbers) == 1:
        return max(1, numbers[0])
    return max(1, round((numbers[0] + numbers[1]) / 2))


def new_instance_id(rng: random.Random, prefix: str = "ex") -> str:
    """Instance id drawn from ``rng`` so seeded runs are reproducible."""
    return f"{prefix}_{rng.getrandbits(32):08x}"


def solve_sets(
    minutes: float,
    avg_reps: int,
    settings: SchedulerSettings = DEFAULT_SETTINGS,
) -> int:
    """
    Number of sets that fills ``minutes`` of work.

    Model: sets × (avg_reps × 3 s) + (sets − 1) × 60 s = required seconds,
    solved for sets and clamped to [sets_min, sets_max].
    """
    seconds = minutes * 60
    per_set = avg_reps * settings.seconds_per_rep + settings.rest_between_sets_seconds
    raw = (seconds + settings.rest_between_sets_seconds) / per_set
    return max(settings.sets_min, min(settings.sets_max, round(raw)))


def set_rep_minutes(
    sets: int,
    avg_reps: int,
    settings: SchedulerSettings = DEFAULT_SETTINGS,
) -> float:
    """Session minutes for ``sets`` sets of ``avg_reps`` reps, rest included."""
    seconds = sets * avg_reps * settings.seconds_per_rep
    seconds += (sets - 1) * settings.rest_between_sets_seconds
    return seconds / 60


def size_exercise(
    exercise: ExerciseDefinition,
    sub_target_kcal: float,
    weight_kg: float,
    rng: random.Random,
    settings: SchedulerSettings = DEFAULT_SETTINGS,
) -> SizedExercise:
    """
    Size one exercise towards a per-exercise kcal sub-target.

    Args:
        exercise: Catalog entry to size
        sub_target_kcal: Share of the day's target this exercise should burn
        weight_kg: User body weight
        rng: Random source for the instance id
        settings: Selection tunables

    Returns:
        SizedExercise with duration, sets, reps, and predicted burn
    """
    minutes = required_minutes(sub_target_kcal, exercise.met, weight_kg)
    minutes = max(settings.required_minutes_min, min(settings.required_minutes_max, minutes))

    if exercise.kind == "set-rep":
        avg = average_reps(exercise.baseline_reps)
        sets = solve_sets(minutes, avg, settings)
        duration = set_rep_minutes(sets, avg, settings)
        reps = exercise.baseline_reps or str(avg)
    else:
        if exercise.baseline_duration_seconds:
            duration = exercise.baseline_duration_seconds / 60
        else:
            duration = minutes
        duration = max(
            settings.duration_exercise_min,
            min(settings.duration_exercise_max, duration),
        )
        sets = exercise.baseline_sets or 1
        reps = f"{round(duration * 60)}s"

    duration = round(duration, 2)
    return SizedExercise(
        instance_id=new_instance_id(rng),
        name=exercise.name,
        body_area=exercise.body_area,
        equipment=exercise.equipment,
        skill_level=exercise.skill_level,
        met=exercise.met,
        kind=exercise.kind,
        duration_minutes=duration,
        sets=sets,
        reps=reps,
        predicted_kcal=predict_burn(exercise.met, weight_kg, duration),
        video=exercise.video,
    )


def select_session(
    pool: list[ExerciseDefinition],
    target_kcal: float,
    weight_kg: float,
    rng: random.Random | None = None,
    settings: SchedulerSettings = DEFAULT_SETTINGS,
    focus: str | None = None,
) -> SessionPlan:
    """
    Greedily assemble a session from ``pool``.

    Steps:
    1. Filter by focus (when given) and shuffle with ``rng``.
    2. Size each candidate against target/assumed_session_size and append
       until both the minimum count and the target burn are met, or the
       maximum count is reached.  Names already in the session are skipped.
    3. If the minimum count or target is still unmet, draw the skipped,
       unused pool members in random order until the minimum or maximum
       count is reached or the pool runs out.

    An empty filtered pool yields an empty session; a small pool yields a
    short session.  Neither is an error.

    Args:
        pool: Candidate exercises
        target_kcal: Day burn target (> 0)
        weight_kg: User body weight (> 0)
        rng: Random source; a fresh unseeded one when omitted
        settings: Selection tunables
        focus: Body focus used to filter the pool; None if already filtered

    Returns:
        SessionPlan with totals computed

    Raises:
        ValueError: If weight or target is non-positive
    """
    if weight_kg <= 0:
        raise ValueError("weight_kg must be positive")
    if target_kcal <= 0:
        raise ValueError("target_kcal must be positive")
    if rng is None:
        rng = random.Random()

    candidates = filter_pool(pool, focus) if focus is not None else list(pool)
    rng.shuffle(candidates)

    sub_target = target_kcal / settings.assumed_session_size
    session = SessionPlan()
    burned = 0.0
    used: set[int] = set()
    names: set[str] = set()

    def _done() -> bool:
        count = len(session.exercises)
        if count >= settings.max_exercises:
            return True
        return count >= settings.min_exercises and burned >= target_kcal

    for idx, ex in enumerate(candidates):
        if _done():
            break
        if ex.name in names:
            continue
        sized = size_exercise(ex, sub_target, weight_kg, rng, settings)
        session.exercises.append(sized)
        burned += sized.predicted_kcal
        used.add(idx)
        names.add(ex.name)

    unmet = len(session.exercises) < settings.min_exercises or burned < target_kcal
    if unmet:
        remaining = [i for i in range(len(candidates)) if i not in used]
        rng.shuffle(remaining)
        for idx in remaining:
            count = len(session.exercises)
            if count >= settings.min_exercises or count >= settings.max_exercises:
                break
            sized = size_exercise(candidates[idx], sub_target, weight_kg, rng, settings)
            session.exercises.append(sized)
            burned += sized.predicted_kcal

    session.recompute_totals()
    return session
