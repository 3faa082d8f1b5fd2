"""
Formula-focused unit tests for the core scheduling engine.

Each test verifies one formula or rule: the calorie model, daily burn
targets, skill levels, exercise sizing, session selection, the focus
rotation, settings, and catalog normalization.

Values are hand-computed from the formulas; the arithmetic is shown in
comments next to each assertion.
"""

import random

import pytest

from burn_scheduler.core.calories import predict_burn, required_minutes
from burn_scheduler.core.catalog import (
    CatalogError,
    load_catalog,
    load_catalogs,
    normalize_facility_record,
    normalize_home_record,
)
from burn_scheduler.core.catalog.normalize import area_from_text, kind_from_text
from burn_scheduler.core.config import (
    DEFAULT_SETTINGS,
    FALLBACK_TARGET_KCAL,
    GAIN_PHASE_KCAL,
    MAX_EXERCISES,
    MIN_EXERCISES,
    ROTATION,
    SchedulerSettings,
)
from burn_scheduler.core.engine.config_loader import load_settings
from burn_scheduler.core.models import ExerciseDefinition, UserProfile
from burn_scheduler.core.planner import focus_for_day
from burn_scheduler.core.selector import (
    average_reps,
    matches_focus,
    new_instance_id,
    select_session,
    set_rep_minutes,
    size_exercise,
    solve_sets,
)
from burn_scheduler.core.targets import (
    daily_target,
    days_remaining,
    determine_skill_level,
    goal_heuristic_target,
    projected_target,
)

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _ex(
    name: str,
    area: str = "Upper",
    met: float = 5.0,
    level: str = "Beginner",
    kind: str = "set-rep",
    reps: str | None = "10",
    duration_sec: float | None = None,
    sets: int | None = None,
) -> ExerciseDefinition:
    return ExerciseDefinition(
        name=name,
        body_area=area,
        equipment="None",
        skill_level=level,
        met=met,
        kind=kind,  # type: ignore[arg-type]
        baseline_sets=sets,
        baseline_reps=reps,
        baseline_duration_seconds=duration_sec,
    )


def _pool(n: int, met: float = 5.0, area: str = "Upper") -> list[ExerciseDefinition]:
    return [_ex(f"{area} move {i}", area=area, met=met) for i in range(n)]


# ===========================================================================
# Calorie model
# ===========================================================================

class TestCalorieModel:
    """kcal = MET × weight_kg × minutes / 60, rounded to 1 decimal."""

    def test_basic_prediction(self):
        # 8.0 × 70 × 30/60 = 280.0
        assert predict_burn(8.0, 70, 30) == 280.0

    def test_rounds_to_one_decimal(self):
        # 3.5 × 65 × 7/60 = 26.5416… → 26.5
        assert predict_burn(3.5, 65, 7) == 26.5

    def test_zero_duration_burns_nothing(self):
        assert predict_burn(6.0, 80, 0) == 0.0

    def test_required_minutes_inverts_prediction(self):
        # 280 × 60 / (8 × 70) = 30
        assert required_minutes(280, 8.0, 70) == pytest.approx(30.0)


# ===========================================================================
# Daily burn target
# ===========================================================================

class TestGoalHeuristic:
    """Base by goal, +100 above 90 kg, −50 below 60 kg."""

    @pytest.mark.parametrize(
        "goal, weight, expected",
        [
            ("lose_weight", 75, 500),
            ("lose_fat", 75, 500),
            ("build_muscle", 75, 300),
            ("gain_muscle", 75, 300),
            ("gain_weight", 75, 250),
            ("maintain", 75, 300),
            ("improve", 75, 300),
            ("lose_weight", 95, 600),   # 500 + 100
            ("maintain", 55, 250),      # 300 − 50
            ("gain_weight", 90, 250),   # exactly 90 is not "above"
            ("maintain", 60, 300),      # exactly 60 is not "below"
        ],
    )
    def test_targets(self, goal, weight, expected):
        profile = UserProfile(weight_kg=weight, goal=goal)
        assert goal_heuristic_target(profile) == expected

    def test_unknown_goal_rejected_by_profile(self):
        with pytest.raises(ValueError):
            UserProfile(weight_kg=70, goal="get_swole")


class TestProjection:
    """|current − target| × 7700 / days, clamped [200, 1000] when losing."""

    def test_large_deficit_clamped_to_ceiling(self):
        # 10 × 7700 / 56 = 1375 → 1000
        assert projected_target(110, 100, 56) == 1000

    def test_within_bounds_rounded_to_whole_kcal(self):
        # 5 × 7700 / 60 = 641.67 → 642
        assert projected_target(80, 75, 60) == 642

    def test_tiny_deficit_clamped_to_floor(self):
        # 0.1 × 7700 / 100 = 7.7 → 8 → 200
        assert projected_target(80, 79.9, 100) == 200

    def test_gain_phase_is_flat(self):
        assert projected_target(70, 75, 30) == GAIN_PHASE_KCAL == 300

    def test_equal_weights_follow_gain_branch(self):
        assert projected_target(70, 70, 30) == 300

    @pytest.mark.parametrize("days", [0, -3, None])
    def test_no_days_left_falls_back(self, days):
        assert projected_target(110, 100, days) == FALLBACK_TARGET_KCAL == 300


class TestDailyTarget:
    def test_projection_when_profile_has_targets(self):
        profile = UserProfile(
            weight_kg=110, goal="lose_weight", target_weight_kg=100, target_duration_weeks=8
        )
        # 8 weeks = 56 days; nothing done yet → 56 left → 1375 → 1000
        assert days_remaining(profile, 0) == 56
        assert daily_target(profile, days_remaining(profile, 0)) == 1000

    def test_heuristic_without_days(self):
        profile = UserProfile(
            weight_kg=110, goal="lose_weight", target_weight_kg=100, target_duration_weeks=8
        )
        assert daily_target(profile) == 600

    def test_heuristic_without_projection(self):
        profile = UserProfile(weight_kg=70, goal="lose_weight")
        assert days_remaining(profile, 5) is None
        assert daily_target(profile, days_remaining(profile, 5)) == 500

    def test_days_remaining_counts_from_last_day(self):
        profile = UserProfile(weight_kg=80, target_weight_kg=75, target_duration_weeks=8)
        # 56 − 5 = 51
        assert days_remaining(profile, 5) == 51

    def test_program_overrun_falls_back(self):
        profile = UserProfile(weight_kg=80, target_weight_kg=75, target_duration_weeks=1)
        # 7 − 10 = −3 → fallback 300
        assert daily_target(profile, days_remaining(profile, 10)) == 300


class TestSkillLevel:
    @pytest.mark.parametrize(
        "explicit, xp, expected",
        [
            ("Intermediate", 0, "Intermediate"),
            (None, 5000, "Pro"),
            (None, 3500, "Intermediate"),
            (None, 3499, "Beginner"),
            ("Expert", 6000, "Pro"),  # unknown label → score decides
        ],
    )
    def test_levels(self, explicit, xp, expected):
        profile = UserProfile(weight_kg=70, skill_level=explicit, workout_xp=xp)
        assert determine_skill_level(profile) == expected


# ===========================================================================
# Sizing
# ===========================================================================

class TestRepParsing:
    @pytest.mark.parametrize(
        "text, expected",
        [("8-12", 10), ("10-15", 12), ("12", 12), ("30s", 10), ("45 sec", 10), ("", 10), (None, 10)],
    )
    def test_average_reps(self, text, expected):
        assert average_reps(text) == expected


class TestSetSolver:
    """sets × (reps × 3 s) + (sets − 1) × 60 s = seconds, clamped [2, 5]."""

    def test_exact_solution(self):
        # (300 + 60) / (30 + 60) = 4
        assert solve_sets(5.0, 10) == 4

    def test_clamped_low(self):
        # (30 + 60) / 90 = 1 → 2
        assert solve_sets(0.5, 10) == 2

    def test_clamped_high(self):
        # (1200 + 60) / 90 = 14 → 5
        assert solve_sets(20.0, 10) == 5

    def test_minutes_for_sets(self):
        # 4 × 30 s + 3 × 60 s = 300 s = 5 min
        assert set_rep_minutes(4, 10) == 5.0


class TestSizeExercise:
    def test_set_rep_sizing(self):
        ex = _ex("Row", met=5.0, reps="8-12")
        sized = size_exercise(ex, 30, 60, random.Random(1))
        # minutes = 30 × 60 / (5 × 60) = 6.0
        # sets = round((360 + 60) / 90) = round(4.67) = 5
        # duration = (5 × 30 + 4 × 60) / 60 = 6.5
        assert sized.sets == 5
        assert sized.duration_minutes == 6.5
        assert sized.reps == "8-12"
        # 5 × 60 × 6.5 / 60 = 32.5
        assert sized.predicted_kcal == 32.5

    def test_duration_kind_uses_baseline_seconds(self):
        ex = _ex("Battle Ropes", area="Cardio", met=8.0, kind="duration", reps=None, duration_sec=40)
        sized = size_exercise(ex, 30, 70, random.Random(1))
        # 40 s → 0.67 min
        assert sized.duration_minutes == 0.67
        assert sized.reps == "40s"
        assert sized.sets == 1
        # 8 × 70 × 0.67 / 60 = 6.25 → 6.3
        assert sized.predicted_kcal == 6.3

    def test_duration_kind_without_baseline_uses_required_minutes(self):
        ex = _ex("Jog", area="Cardio", met=8.0, kind="duration", reps=None, sets=2)
        sized = size_exercise(ex, 30, 70, random.Random(1))
        # 30 × 60 / 560 = 3.214 → 3.21 (inside [0.5, 5])
        assert sized.duration_minutes == 3.21
        assert sized.sets == 2

    def test_duration_kind_clamped_to_five_minutes(self):
        ex = _ex("Walk", area="Cardio", met=2.0, kind="duration", reps=None)
        sized = size_exercise(ex, 100, 60, random.Random(1))
        # 100 × 60 / 120 = 50 → 20 (required clamp) → 5 (duration clamp)
        assert sized.duration_minutes == 5.0

    def test_prediction_matches_calorie_model(self):
        ex = _ex("Press", met=5.5, reps="8-10")
        sized = size_exercise(ex, 45, 82, random.Random(3))
        assert sized.predicted_kcal == predict_burn(5.5, 82, sized.duration_minutes)

    def test_instance_id_format(self):
        rid = new_instance_id(random.Random(0))
        assert rid.startswith("ex_")
        assert len(rid) == len("ex_") + 8
        int(rid[3:], 16)


# ===========================================================================
# Session selection
# ===========================================================================

class TestSelectSession:
    def test_stops_at_min_count_once_target_met(self):
        pool = _pool(20, met=10.0)
        session = select_session(pool, 200, 100, rng=random.Random(7))
        # each: 2 sets → 2.0 min → 10 × 100 × 2/60 = 33.3 kcal
        # 6 → 199.8 (short), 7 → 233.1 (count < 8), 8 → 266.4
        assert len(session.exercises) == 8
        assert session.total_kcal == 266.4
        assert session.total_minutes == 16.0

    def test_caps_at_max_count(self):
        pool = _pool(30, met=3.0)
        session = select_session(pool, 1000, 60, rng=random.Random(7))
        # each: 5 sets → 6.5 min → 19.5 kcal; 15 × 19.5 = 292.5 < 1000
        assert len(session.exercises) == MAX_EXERCISES
        assert session.total_kcal == 292.5

    def test_count_bounds_with_enough_candidates(self):
        for seed in range(10):
            session = select_session(_pool(25, met=4.0), 400, 75, rng=random.Random(seed))
            assert MIN_EXERCISES <= len(session.exercises) <= MAX_EXERCISES

    def test_small_pool_gives_short_session(self):
        session = select_session(_pool(3), 300, 70, rng=random.Random(1))
        assert len(session.exercises) == 3

    def test_empty_pool_gives_empty_session(self):
        session = select_session([], 300, 70, rng=random.Random(1))
        assert session.exercises == []
        assert session.total_kcal == 0.0

    def test_fill_pass_uses_skipped_duplicates(self):
        distinct = _pool(5, met=3.0)
        pool = distinct + list(distinct)
        session = select_session(pool, 1000, 60, rng=random.Random(2))
        # 5 distinct in the first pass, then skipped duplicates up to min 8
        assert len(session.exercises) == 8
        assert len({e.name for e in session.exercises}) == 5

    def test_no_duplicate_names_when_pool_is_large(self):
        session = select_session(_pool(30), 500, 70, rng=random.Random(4))
        names = [e.name for e in session.exercises]
        assert len(names) == len(set(names))

    def test_instance_ids_unique(self):
        session = select_session(_pool(30), 500, 70, rng=random.Random(4))
        ids = [e.instance_id for e in session.exercises]
        assert len(ids) == len(set(ids))

    def test_seeded_runs_are_reproducible(self):
        a = select_session(_pool(20), 300, 70, rng=random.Random(42))
        b = select_session(_pool(20), 300, 70, rng=random.Random(42))
        assert [e.name for e in a.exercises] == [e.name for e in b.exercises]
        assert [e.instance_id for e in a.exercises] == [e.instance_id for e in b.exercises]

    def test_totals_are_sums(self):
        session = select_session(_pool(20), 350, 80, rng=random.Random(9))
        assert session.total_kcal == round(sum(e.predicted_kcal for e in session.exercises), 1)
        assert session.total_minutes == round(sum(e.duration_minutes for e in session.exercises), 1)

    def test_focus_filters_pool(self):
        pool = _pool(10, area="Upper") + _pool(10, area="Lower")
        session = select_session(pool, 300, 70, rng=random.Random(1), focus="Lower")
        assert {e.body_area for e in session.exercises} == {"Lower"}

    @pytest.mark.parametrize("weight, target", [(0, 300), (-5, 300), (70, 0), (70, -1)])
    def test_rejects_non_positive_inputs(self, weight, target):
        with pytest.raises(ValueError):
            select_session(_pool(10), target, weight, rng=random.Random(1))


class TestFocusMatching:
    def test_full_body_matches_everything(self):
        assert matches_focus(_ex("a", area="Core", level="Pro"), "Full Body")

    def test_rest_day_matches_cardio_or_beginner(self):
        assert matches_focus(_ex("a", area="Cardio", level="Pro"), "Rest/Light")
        assert matches_focus(_ex("b", area="Upper", level="Beginner"), "Rest/Light")
        assert not matches_focus(_ex("c", area="Upper", level="Intermediate"), "Rest/Light")

    def test_area_focus_is_exact(self):
        assert matches_focus(_ex("a", area="Core"), "Core")
        assert not matches_focus(_ex("a", area="Full Body"), "Core")


class TestRotation:
    @pytest.mark.parametrize(
        "day, focus",
        [(1, "Upper"), (2, "Lower"), (3, "Core"), (4, "Cardio"), (5, "Rest/Light"),
         (6, "Upper"), (10, "Rest/Light"), (11, "Upper")],
    )
    def test_focus_by_day_number(self, day, focus):
        assert focus_for_day(day) == focus

    def test_day_and_day_plus_five_share_focus(self):
        for day in range(1, 30):
            assert focus_for_day(day) == focus_for_day(day + len(ROTATION))


# ===========================================================================
# Settings
# ===========================================================================

class TestSettings:
    def test_defaults(self):
        assert DEFAULT_SETTINGS.min_exercises == 8
        assert DEFAULT_SETTINGS.max_exercises == 15
        assert DEFAULT_SETTINGS.horizon_threshold == 3
        assert DEFAULT_SETTINGS.block_size_days == 5

    def test_from_config_overlays_known_keys(self):
        settings = SchedulerSettings.from_config(
            {"selector": {"min_exercises": 6, "bogus": 1}, "horizon": {"block_size_days": "7"}}
        )
        assert settings.min_exercises == 6
        assert settings.block_size_days == 7
        assert settings.max_exercises == 15

    def test_inconsistent_bounds_rejected(self):
        with pytest.raises(ValueError):
            SchedulerSettings.from_config({"selector": {"min_exercises": 20}})

    def test_user_yaml_overrides_bundled(self, tmp_path):
        user = tmp_path / "model.yaml"
        user.write_text("horizon:\n  horizon_threshold: 2\n", encoding="utf-8")
        settings = load_settings(user)
        assert settings.horizon_threshold == 2
        assert settings.min_exercises == 8

    def test_broken_user_yaml_is_ignored(self, tmp_path):
        user = tmp_path / "model.yaml"
        user.write_text("selector: [unclosed\n", encoding="utf-8")
        with pytest.warns(UserWarning):
            settings = load_settings(user)
        assert settings == SchedulerSettings()


# ===========================================================================
# Catalog normalization
# ===========================================================================

class TestCatalogNormalization:
    @pytest.mark.parametrize(
        "text, area",
        [
            ("Upper Body", "Upper"),
            ("Upper (triceps)", "Upper"),
            ("Lower (glutes)", "Lower"),
            ("Core, Cardio", "Core"),
            ("Cardio", "Cardio"),
            ("Full Body", "Full Body"),
            ("Mobility", "Full Body"),
            (None, "Full Body"),
        ],
    )
    def test_area_from_text(self, text, area):
        assert area_from_text(text) == area

    @pytest.mark.parametrize(
        "text, kind",
        [("Timed", "duration"), ("Hold", "duration"), ("Duration", "duration"),
         ("Time (sec)", "duration"), ("Reps", "set-rep"), ("Sets x Reps", "set-rep"), (None, "set-rep")],
    )
    def test_kind_from_text(self, text, kind):
        assert kind_from_text(text) == kind

    def test_facility_record(self):
        ex = normalize_facility_record({
            "Exercise": "Plank",
            "Body Area": "Core",
            "Equipment": "Mat",
            "Level": "Beginner",
            "MET": "3.8",
            "Type": "Hold",
            "Sets": 3,
            "Reps": "",
            "Duration (sec)": 45,
            "Video": "",
        })
        assert ex.name == "Plank"
        assert ex.body_area == "Core"
        assert ex.kind == "duration"
        assert ex.met == 3.8
        assert ex.baseline_sets == 3
        assert ex.baseline_reps is None
        assert ex.baseline_duration_seconds == 45.0
        assert ex.video is None

    def test_home_record(self):
        ex = normalize_home_record({
            "Exercise Name": "Glute Bridge",
            "Works (Upper/Lower/Cardio/Core/Full Body)": "Lower (glutes)",
            "Equipment Needed": "None",
            "Level (Beginner/Intermediate)": "Beginner",
            "MET (Metabolic Equivalent)": 3.0,
            "Format": "Reps",
            "Recommended Sets": 3,
            "Recommended Reps": "12-15",
        })
        assert ex.body_area == "Lower"
        assert ex.kind == "set-rep"
        assert ex.baseline_reps == "12-15"

    @pytest.mark.parametrize("met", [0, -2, None, "fast"])
    def test_bad_met_rejected(self, met):
        with pytest.raises(CatalogError):
            normalize_facility_record({"Exercise": "X", "Body Area": "Core", "MET": met})

    def test_missing_name_rejected(self):
        with pytest.raises(CatalogError):
            normalize_home_record({"MET (Metabolic Equivalent)": 3.0})

    def test_bundled_catalogs_cover_every_area(self, tmp_path):
        catalogs = load_catalogs(user_dir=tmp_path)
        for pool in (catalogs.facility, catalogs.home):
            assert {ex.body_area for ex in pool} == {"Upper", "Lower", "Core", "Cardio", "Full Body"}
            assert all(ex.met > 0 for ex in pool)

    def test_user_catalog_replaces_and_adds(self, tmp_path):
        (tmp_path / "home.yaml").write_text(
            "- Exercise Name: Push-Up\n"
            "  Works (Upper/Lower/Cardio/Core/Full Body): Upper\n"
            "  MET (Metabolic Equivalent): 4.5\n"
            "- Exercise Name: Towel Row\n"
            "  Works (Upper/Lower/Cardio/Core/Full Body): Upper (back)\n"
            "  MET (Metabolic Equivalent): 3.0\n"
            "- Exercise Name: Broken\n"
            "  MET (Metabolic Equivalent): 0\n",
            encoding="utf-8",
        )
        with pytest.warns(UserWarning, match="Broken"):
            home = load_catalog("home", user_dir=tmp_path)

        by_name = {ex.name: ex for ex in home}
        assert by_name["Push-Up"].met == 4.5
        assert by_name["Towel Row"].body_area == "Upper"
        assert "Broken" not in by_name

    def test_catalog_lookup_is_case_insensitive(self, tmp_path):
        catalogs = load_catalogs(user_dir=tmp_path)
        assert catalogs.find("home", "push-up") is not None
        assert catalogs.find("home", "no such move") is None
