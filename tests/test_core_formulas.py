"""
Formula-focused unit tests for the analytics core.

Covers 1RM estimation, Wilks scoring, strength-standard classification
and lift-balance scoring.  Values are hand-computed from the formulas so
the tests double as worked examples.
"""

import pytest

from strength_engine.core.balance import (
    analyze,
    compute_ratios,
    detect_imbalances,
    ratio_score,
    range_score,
    variance_score,
)
from strength_engine.core.metrics import (
    best_working_set,
    blended_1rm,
    brzycki_1rm,
    epley_1rm,
    estimate_1rm,
    normalize_sex_code,
    round_to_increment,
    wilks_coefficient,
)
from strength_engine.core.models import LiftRatios, LoggedSet, MainLifts, Thresholds, UserProfile
from strength_engine.core.standards import (
    StrengthStandardTable,
    classify,
    closest_bracket,
    interpolate_percentile,
)


# ---------------------------------------------------------------------------
# 1RM estimation
# ---------------------------------------------------------------------------

class TestEstimate1RM:
    """Brzycki below 8 reps, Epley above 10, a blend in between."""

    def test_brzycki_low_reps(self):
        # 225 × 36 / (37 − 5) = 253.125
        assert estimate_1rm(225, 5) == pytest.approx(253.125)

    def test_epley_high_reps(self):
        # 135 × (1 + 12/30) = 189
        assert estimate_1rm(135, 12) == pytest.approx(189.0)

    def test_single_is_the_weight(self):
        assert estimate_1rm(315, 1) == 315

    def test_zero_or_negative_inputs_give_zero(self):
        assert estimate_1rm(0, 5) == 0.0
        assert estimate_1rm(100, 0) == 0.0
        assert estimate_1rm(-40, 8) == 0.0

    def test_blend_endpoints(self):
        assert blended_1rm(100, 8) == pytest.approx(brzycki_1rm(100, 8))
        assert blended_1rm(100, 10) == pytest.approx(epley_1rm(100, 10))

    def test_formula_boundaries(self):
        assert estimate_1rm(100, 7) == pytest.approx(brzycki_1rm(100, 7))
        assert estimate_1rm(100, 8) == pytest.approx(brzycki_1rm(100, 8))
        assert estimate_1rm(100, 10) == pytest.approx(epley_1rm(100, 10))
        assert estimate_1rm(100, 11) == pytest.approx(epley_1rm(100, 11))

    def test_blend_midpoint(self):
        # 0.5 × 100·36/28 + 0.5 × 100·(1 + 9/30)
        expected = 0.5 * (3600 / 28) + 0.5 * 130.0
        assert estimate_1rm(100, 9) == pytest.approx(expected)

    def test_brzycki_fallback_at_37_reps(self):
        assert brzycki_1rm(100, 37) == pytest.approx(200.0)
        assert brzycki_1rm(100, 40) == pytest.approx(200.0)

    def test_estimate_increases_with_reps(self):
        values = [estimate_1rm(100, r) for r in range(1, 16)]
        assert values == sorted(values)


class TestRounding:
    def test_halves_round_up(self):
        assert round_to_increment(236.25, 2.5) == pytest.approx(237.5)
        assert round_to_increment(126.0, 5.0) == pytest.approx(125.0)
        assert round_to_increment(189.0, 5.0) == pytest.approx(190.0)

    def test_exact_multiple_unchanged(self):
        assert round_to_increment(157.5, 2.5) == pytest.approx(157.5)


class TestBestWorkingSet:
    def test_highest_estimate_wins(self):
        sets = [
            LoggedSet(exercise_id="squat", weight=225, reps=5),
            LoggedSet(exercise_id="squat", weight=245, reps=3),
            LoggedSet(exercise_id="squat", weight=205, reps=8),
        ]
        best = best_working_set(sets)
        assert best is not None
        assert best.weight == 225
        assert best.estimated_1rm == pytest.approx(253.125)

    def test_first_set_wins_ties(self):
        sets = [
            LoggedSet(exercise_id="squat", weight=200, reps=5, workout_id=1),
            LoggedSet(exercise_id="squat", weight=200, reps=5, workout_id=2),
        ]
        assert best_working_set(sets).workout_id == 1

    def test_empty(self):
        assert best_working_set([]) is None


# ---------------------------------------------------------------------------
# Wilks
# ---------------------------------------------------------------------------

class TestWilks:
    def test_male_reference_value(self):
        # Denominator at 100 kg ≈ 821.57 → coefficient ≈ 0.6086
        assert wilks_coefficient(500, 100, "male") == pytest.approx(304.3, abs=0.1)

    def test_accepts_short_codes(self):
        assert wilks_coefficient(500, 100, "M") == wilks_coefficient(500, 100, "male")
        assert wilks_coefficient(300, 60, "F") == wilks_coefficient(300, 60, "female")

    def test_unknown_sex_uses_male_coefficients(self):
        assert wilks_coefficient(500, 100, "x") == wilks_coefficient(500, 100, "male")
        assert wilks_coefficient(500, 100, None) == wilks_coefficient(500, 100, "male")

    def test_female_scores_higher_for_same_lift(self):
        assert wilks_coefficient(300, 60, "female") > wilks_coefficient(300, 60, "male")

    def test_non_positive_inputs(self):
        assert wilks_coefficient(0, 80, "male") == 0.0
        assert wilks_coefficient(400, 0, "male") == 0.0

    def test_linear_in_total(self):
        assert wilks_coefficient(600, 90, "male") == pytest.approx(2 * wilks_coefficient(300, 90, "male"))

    def test_normalize_sex_code(self):
        assert normalize_sex_code("Male") == "M"
        assert normalize_sex_code(" f ") == "F"
        assert normalize_sex_code("other") is None
        assert normalize_sex_code("") is None


# ---------------------------------------------------------------------------
# Strength standards
# ---------------------------------------------------------------------------

class TestClassify:
    def test_intermediate_squat(self):
        # 200 lb bracket: intermediate 323, advanced 408
        result = classify("squat", 200, "male", 360)
        assert result.level == "Intermediate"
        assert result.bracket == 200
        # 50 + (360 − 323) / (408 − 323) × 30 = 63.06
        assert result.percentile == 63
        assert result.next_level is not None
        assert result.next_level.level == "Advanced"
        assert result.next_level.weight == 408

    def test_exact_threshold_reaches_level(self):
        result = classify("squat", 200, "male", 323)
        assert result.level == "Intermediate"
        assert result.percentile == 50

    def test_below_beginner(self):
        result = classify("squat", 200, "male", 150)
        assert result.level == "Untrained"
        assert result.percentile == 5
        assert result.next_level.level == "Beginner"
        assert result.next_level.weight == 186

    def test_elite_has_no_next_level(self):
        result = classify("squat", 200, "male", 520)
        assert result.level == "Elite"
        assert result.percentile == 95
        assert result.next_level is None

    @pytest.mark.parametrize("sex", ["male", "female"])
    @pytest.mark.parametrize("exercise", ["squat", "bench_press", "deadlift", "overhead_press"])
    def test_percentile_never_decreases(self, exercise, sex):
        percentiles = [classify(exercise, 180, sex, w).percentile for w in range(20, 800, 5)]
        assert percentiles == sorted(percentiles)
        assert percentiles[0] == 5
        assert percentiles[-1] == 95

    def test_names_and_aliases_resolve(self):
        by_id = classify("squat", 200, "male", 360)
        assert classify("Back Squat", 200, "male", 360) == by_id
        assert classify("Barbell Squat", 200, "M", 360) == by_id

    def test_unknown_exercise(self):
        result = classify("bicep curl", 200, "male", 100)
        assert result.level == "Unknown"
        assert result.percentile == 0
        assert result.next_level is None

    def test_catalog_exercise_without_standards(self):
        assert classify("barbell_row", 200, "male", 225).level == "Unknown"

    def test_unknown_sex(self):
        assert classify("squat", 200, "other", 360).level == "Unknown"

    def test_female_table_is_used(self):
        male = classify("bench", 150, "male", 135)
        female = classify("bench", 150, "female", 135)
        assert female.percentile > male.percentile

    def test_custom_table(self):
        table = StrengthStandardTable(
            version=99,
            standards={
                "Sled Push": {
                    "M": {
                        150: {"beginner": 100, "novice": 200, "intermediate": 300, "advanced": 400, "elite": 500},
                    }
                }
            },
        )
        result = classify("sled push", 180, "male", 300, table=table)
        assert result.level == "Intermediate"
        assert result.bracket == 150


class TestBrackets:
    def test_nearest_bracket(self):
        assert closest_bracket(183, [130, 180, 190]) == 180
        assert closest_bracket(187, [130, 180, 190]) == 190

    def test_tie_goes_to_lower_bracket(self):
        assert closest_bracket(185, [190, 180, 130]) == 180

    def test_outside_range_clamps(self):
        assert closest_bracket(90, [130, 140]) == 130
        assert closest_bracket(400, [130, 140]) == 140


class TestPercentile:
    thresholds = Thresholds(beginner=100, novice=200, intermediate=300, advanced=400, elite=500)

    def test_anchors(self):
        assert interpolate_percentile(100, self.thresholds) == 5
        assert interpolate_percentile(200, self.thresholds) == 20
        assert interpolate_percentile(300, self.thresholds) == 50
        assert interpolate_percentile(400, self.thresholds) == 80
        assert interpolate_percentile(500, self.thresholds) == 95

    def test_clamped_outside_anchors(self):
        assert interpolate_percentile(10, self.thresholds) == 5
        assert interpolate_percentile(900, self.thresholds) == 95

    def test_half_rounds_up(self):
        # 5 + 0.5 × 15 = 12.5 → 13
        assert interpolate_percentile(150, self.thresholds) == 13


# ---------------------------------------------------------------------------
# Balance
# ---------------------------------------------------------------------------

BALANCED = MainLifts(squat=340, bench=240, deadlift=400, ohp=150)
WEAK_SQUAT = MainLifts(squat=250, bench=175, deadlift=400, ohp=115)


class TestRatios:
    def test_ratios(self):
        r = compute_ratios(BALANCED)
        assert r.squat_to_deadlift == pytest.approx(0.85)
        assert r.bench_to_squat == pytest.approx(240 / 340)
        assert r.ohp_to_bench == pytest.approx(0.625)
        assert r.deadlift_to_squat == pytest.approx(400 / 340)

    def test_missing_lift_gives_zero_ratio(self):
        r = compute_ratios({"squat": 300, "deadlift": 400})
        assert r.squat_to_deadlift == pytest.approx(0.75)
        assert r.bench_to_squat == 0.0
        assert r.ohp_to_bench == 0.0


class TestRatioScore:
    def test_ideal_is_100(self):
        assert ratio_score(0.85, 0.75, 0.95, 0.85) == pytest.approx(100.0)

    def test_halfway_to_edge(self):
        assert ratio_score(0.80, 0.75, 0.95, 0.85) == pytest.approx(75.0)

    def test_band_edge(self):
        assert ratio_score(0.75, 0.75, 0.95, 0.85) == pytest.approx(50.0)
        assert ratio_score(0.95, 0.75, 0.95, 0.85) == pytest.approx(50.0)

    def test_clamped_outside_band(self):
        # How far out does not matter
        assert ratio_score(0.70, 0.75, 0.95, 0.85) == pytest.approx(50.0)
        assert ratio_score(0.20, 0.75, 0.95, 0.85) == pytest.approx(50.0)
        assert ratio_score(1.60, 0.75, 0.95, 0.85) == pytest.approx(50.0)

    def test_range_score_without_ratios(self):
        assert range_score(LiftRatios()) == 0


class TestImbalances:
    def test_balanced_lifts_have_none(self):
        assert detect_imbalances(compute_ratios(BALANCED), BALANCED) == []

    def test_weak_squat(self):
        imbalances = detect_imbalances(compute_ratios(WEAK_SQUAT), WEAK_SQUAT)
        kinds = [(i.type, i.lift) for i in imbalances]
        assert kinds == [("weakness", "Squat"), ("proportion", "Squat")]

        weakness = imbalances[0]
        assert weakness.severity == "medium"
        assert weakness.ratio == pytest.approx(0.625)
        assert weakness.ideal == pytest.approx(0.85)

        proportion = imbalances[1]
        # 250 / 825 = 30.3%
        assert proportion.percentage == pytest.approx(250 / 825 * 100)
        assert "30.3%" in proportion.message

    def test_weak_ohp_is_low_severity(self):
        lifts = MainLifts(squat=340, bench=240, deadlift=400, ohp=100)
        imbalances = detect_imbalances(compute_ratios(lifts), lifts)
        assert [(i.lift, i.severity) for i in imbalances] == [("Overhead Press", "low")]

    def test_proportions_need_all_three_lifts(self):
        lifts = {"squat": 100, "bench": 300}
        assert all(i.type != "proportion" for i in detect_imbalances(compute_ratios(lifts), lifts))


class TestAnalyze:
    profile = UserProfile(bodyweight=200, sex="male")

    def test_balanced_range_score(self):
        report = analyze(BALANCED)
        assert report.strategy == "range"
        assert report.score >= 95
        assert report.interpretation == "Excellent balance"
        assert report.imbalances == []

    def test_no_lifts(self):
        report = analyze({})
        assert report.score == 0
        assert report.imbalances == []
        assert report.interpretation == "Significant imbalances detected"

    def test_weak_squat_scores_lower(self):
        assert analyze(WEAK_SQUAT).score < analyze(BALANCED).score

    def test_variance_strategy(self):
        report = analyze(BALANCED, strategy="variance", profile=self.profile)
        assert report.strategy == "variance"
        assert 0 <= report.score <= 100

    def test_variance_without_lifts(self):
        assert variance_score(MainLifts(), self.profile) == 0

    def test_variance_requires_profile(self):
        with pytest.raises(ValueError):
            analyze(BALANCED, strategy="variance")

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            analyze(BALANCED, strategy="median")
