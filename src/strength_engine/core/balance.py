"""
Inter-lift balance analysis.

Compares the best 1RM estimates of squat, bench press, deadlift and
overhead press against each other.  Produces pairwise ratios, a list of
imbalances with corrective suggestions, and a 0–100 symmetry score.

Two scoring strategies exist and give materially different numbers for the
same lifts, so the caller chooses one explicitly:

    "range"     closeness of each tracked ratio to its ideal (default)
    "variance"  spread of per-lift strength scores derived from Wilks;
                needs the lifter's profile
"""

import logging
import math
from typing import Mapping

from .config import (
    BALANCE_INTERPRETATIONS,
    DEADLIFT_SHARE_OF_TOTAL,
    IDEAL_RATIOS,
    LB_TO_KG,
    LIFT_TO_DEADLIFT_RATIO,
    MASTERS_LIFTER_AGE,
    OHP_TO_BENCH_SHARE,
    PROPORTION_FLOORS,
    PROPORTION_IDEALS,
    RANGE_SCORE_AT_EDGE,
    STRENGTH_SCORE_DIVISOR,
    YOUNG_LIFTER_AGE,
)
from .metrics import normalize_sex_code, wilks_coefficient
from .models import BalanceReport, Imbalance, LiftRatios, MainLifts, UserProfile, to_lbs

logger = logging.getLogger(__name__)

STRATEGIES = ("range", "variance")

LIFT_LABELS: dict[str, str] = {
    "squat": "Squat",
    "bench": "Bench Press",
    "deadlift": "Deadlift",
    "ohp": "Overhead Press",
}

# (ratio, side) -> (severity, weak lift, message, suggestion)
_WEAKNESS_RULES: dict[tuple[str, str], tuple[str, str, str, str]] = {
    ("squat_to_deadlift", "low"): (
        "medium",
        "squat",
        "Your squat is relatively weak compared to your deadlift.",
        "Focus on squat volume and technique. Consider adding pause squats and front squats.",
    ),
    ("squat_to_deadlift", "high"): (
        "medium",
        "deadlift",
        "Your deadlift is relatively weak compared to your squat.",
        "Increase deadlift frequency. Add deficit deadlifts and Romanian deadlifts.",
    ),
    ("bench_to_squat", "low"): (
        "medium",
        "bench",
        "Your bench press is weak relative to your squat.",
        "Increase upper body pressing volume. Add close-grip bench and dips.",
    ),
    ("bench_to_squat", "high"): (
        "low",
        "squat",
        "Your squat is relatively weak compared to your bench.",
        "Prioritize leg training. Your upper body is strong relative to lower body.",
    ),
    ("ohp_to_bench", "low"): (
        "low",
        "ohp",
        "Your overhead press is weak compared to bench press.",
        "Add more overhead pressing volume. Include push press and Z-press.",
    ),
}

_PROPORTION_SUGGESTIONS: dict[str, str] = {
    "squat": "Your squat needs more focus compared to other lifts.",
    "bench": "Increase bench press training frequency and volume.",
    "deadlift": "Your deadlift needs significant work.",
}


def _as_main_lifts(lifts: MainLifts | Mapping[str, float | None]) -> MainLifts:
    if isinstance(lifts, MainLifts):
        return lifts
    return MainLifts(**{k: float(lifts.get(k) or 0.0) for k in ("squat", "bench", "deadlift", "ohp")})


def _ratio(numerator: float, denominator: float) -> float:
    return numerator / denominator if numerator > 0 and denominator > 0 else 0.0


def compute_ratios(lifts: MainLifts | Mapping[str, float | None]) -> LiftRatios:
    """Pairwise ratios; 0 for any pair with a missing or non-positive operand."""
    m = _as_main_lifts(lifts)
    return LiftRatios(
        squat_to_deadlift=_ratio(m.squat, m.deadlift),
        bench_to_squat=_ratio(m.bench, m.squat),
        ohp_to_bench=_ratio(m.ohp, m.bench),
        deadlift_to_squat=_ratio(m.deadlift, m.squat),
        bench_to_deadlift=_ratio(m.bench, m.deadlift),
        ohp_to_deadlift=_ratio(m.ohp, m.deadlift),
    )


def detect_imbalances(ratios: LiftRatios, lifts: MainLifts | Mapping[str, float | None]) -> list[Imbalance]:
    """
    Weakness imbalances from out-of-range ratios, then proportion imbalances.

    deadlift_to_squat is the reciprocal of squat_to_deadlift and is scored
    but not reported separately.
    """
    imbalances: list[Imbalance] = []

    for (name, side), (severity, lift, message, suggestion) in _WEAKNESS_RULES.items():
        value = getattr(ratios, name)
        if value <= 0:
            continue
        lo, hi, ideal = IDEAL_RATIOS[name]
        if (side == "low" and value < lo) or (side == "high" and value > hi):
            imbalances.append(
                Imbalance(
                    type="weakness",
                    severity=severity,
                    lift=LIFT_LABELS[lift],
                    message=message,
                    suggestion=suggestion,
                    ratio=value,
                    ideal=ideal,
                )
            )

    m = _as_main_lifts(lifts)
    if m.squat > 0 and m.bench > 0 and m.deadlift > 0:
        total = m.squat + m.bench + m.deadlift
        for lift in ("squat", "bench", "deadlift"):
            share = getattr(m, lift) / total * 100
            if share < PROPORTION_FLOORS[lift]:
                label = LIFT_LABELS[lift] if lift != "bench" else "Bench"
                imbalances.append(
                    Imbalance(
                        type="proportion",
                        severity="medium",
                        lift=LIFT_LABELS[lift],
                        message=(
                            f"{label} represents only {share:.1f}% of your total "
                            f"(ideal: ~{PROPORTION_IDEALS[lift]:.0f}%)."
                        ),
                        suggestion=_PROPORTION_SUGGESTIONS[lift],
                        percentage=share,
                    )
                )

    return imbalances


def ratio_score(value: float, lo: float, hi: float, ideal: float) -> float:
    """
    Score one ratio against its band.

    100 at the ideal, falling linearly to 50 at the band edge on that side.
    Anything outside the band is clamped to the edge score.
    """
    edge = lo if value < ideal else hi
    half_band = abs(edge - ideal)
    if half_band == 0:
        return 100.0 if value == ideal else RANGE_SCORE_AT_EDGE
    distance = min(abs(value - ideal), half_band)
    return 100.0 - (100.0 - RANGE_SCORE_AT_EDGE) * distance / half_band


def range_score(ratios: LiftRatios) -> int:
    """Average ratio_score over the tracked ratios that could be computed; 0 if none."""
    scores = [
        ratio_score(getattr(ratios, name), lo, hi, ideal)
        for name, (lo, hi, ideal) in IDEAL_RATIOS.items()
        if getattr(ratios, name) > 0
    ]
    if not scores:
        return 0
    return int(math.floor(sum(scores) / len(scores) + 0.5))


def percent_of_total(sex_code: str, lift: str) -> float:
    """Expected share of a powerlifting total that one lift represents."""
    dl_share = DEADLIFT_SHARE_OF_TOTAL[sex_code]
    if lift == "ohp":
        return OHP_TO_BENCH_SHARE * LIFT_TO_DEADLIFT_RATIO["bench"][sex_code] * dl_share
    return LIFT_TO_DEADLIFT_RATIO[lift][sex_code] * dl_share


def age_multiplier(age: int | None) -> float:
    """Age adjustment applied to lifters younger than 23 or older than 40."""
    if age is None:
        return 1.0
    if age < YOUNG_LIFTER_AGE:
        return 0.0038961 * age ** 2 - 0.166926 * age + 2.80303
    if age > MASTERS_LIFTER_AGE:
        return 0.000467683 * age ** 2 - 0.0299717 * age + 1.45454
    return 1.0


def single_lift_strength_score(
    sex: str | None,
    bodyweight_lbs: float,
    lift_lbs: float,
    lift: str,
    age: int | None = None,
) -> float:
    """
    Strength score implied by a single lift.

    The lift is extrapolated to a full powerlifting total through its
    expected share of that total, scored with Wilks, age-adjusted and
    divided by 4.
    """
    if lift_lbs <= 0 or bodyweight_lbs <= 0:
        return 0.0
    code = normalize_sex_code(sex) or "M"
    total_lbs = lift_lbs / percent_of_total(code, lift)
    wilks = wilks_coefficient(total_lbs * LB_TO_KG, bodyweight_lbs * LB_TO_KG, code)
    return wilks * age_multiplier(age) / STRENGTH_SCORE_DIVISOR


def variance_score(lifts: MainLifts | Mapping[str, float | None], profile: UserProfile) -> int:
    """
    100 minus the population variance of per-lift strength scores.

    Lifts are in the profile's units.  0 when no lift is present; the
    result is clamped to 0–100.
    """
    m = _as_main_lifts(lifts)
    scores = [
        single_lift_strength_score(
            profile.sex, profile.bodyweight_lbs, to_lbs(getattr(m, lift), profile.units), lift, profile.age
        )
        for lift in LIFT_LABELS
        if getattr(m, lift) > 0
    ]
    if not scores:
        return 0
    mean = sum(scores) / len(scores)
    variance = sum((s - mean) ** 2 for s in scores) / len(scores)
    return int(min(100, max(0, math.floor(100 - variance + 0.5))))


def interpret_score(score: float) -> str:
    for threshold, text in BALANCE_INTERPRETATIONS:
        if score >= threshold:
            return text
    return BALANCE_INTERPRETATIONS[-1][1]


def analyze(
    lifts: MainLifts | Mapping[str, float | None],
    strategy: str = "range",
    profile: UserProfile | None = None,
) -> BalanceReport:
    """
    Full balance report for up to four main-lift 1RM estimates.

    Args:
        lifts: MainLifts or a mapping with any of squat/bench/deadlift/ohp
        strategy: "range" or "variance"
        profile: Lifter profile, required by the "variance" strategy

    Raises:
        ValueError: Unknown strategy, or "variance" without a profile
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown balance strategy {strategy!r}. Use one of {STRATEGIES}.")

    m = _as_main_lifts(lifts)
    ratios = compute_ratios(m)
    imbalances = detect_imbalances(ratios, m)

    if strategy == "variance":
        if profile is None:
            raise ValueError("The variance strategy needs a user profile (sex and bodyweight).")
        score = variance_score(m, profile)
    else:
        score = range_score(ratios)

    logger.debug("Balance score %d (%s), %d imbalance(s)", score, strategy, len(imbalances))
    return BalanceReport(
        ratios=ratios,
        imbalances=imbalances,
        score=score,
        strategy=strategy,
        interpretation=interpret_score(score),
    )
