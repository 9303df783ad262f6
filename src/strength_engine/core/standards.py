"""
Strength-standard classification.

Places an estimated 1RM on the Beginner → Elite scale for the lifter's
sex and bodyweight, and interpolates a population percentile between the
level anchors.  The threshold table itself is data (standards.yaml); this
module only knows how to read it.
"""

import logging
import math
from dataclasses import dataclass, field
from functools import lru_cache

from .config import BELOW_BEGINNER_LEVEL, LEVEL_PERCENTILES, LEVELS, UNKNOWN_LEVEL
from .engine.config_loader import load_standards_config
from .exercises import find_exercise
from .metrics import normalize_sex_code
from .models import NextLevel, StrengthStandard, Thresholds

logger = logging.getLogger(__name__)


@dataclass
class StrengthStandardTable:
    """
    Versioned threshold table.

    ``standards`` maps exercise display name → sex code ("M"/"F") →
    bodyweight bracket in lbs → {level: threshold in lbs}.
    """

    version: int | None = None
    standards: dict[str, dict[str, dict[int, dict[str, float]]]] = field(default_factory=dict)

    def brackets_for(self, exercise_name: str, sex_code: str) -> dict[int, dict[str, float]]:
        return self.standards.get(exercise_name, {}).get(sex_code, {})

    def exercises(self) -> list[str]:
        return list(self.standards)


@lru_cache(maxsize=1)
def default_table() -> StrengthStandardTable:
    """The bundled table merged with the user override, loaded once per process."""
    cfg = load_standards_config()
    table = StrengthStandardTable(version=cfg["version"], standards=cfg["standards"])
    logger.debug(
        "Loaded strength standards v%s for %d exercises", table.version, len(table.standards)
    )
    return table


def resolve_standards_name(exercise_name: str, table: StrengthStandardTable) -> str | None:
    """
    Map a logged exercise name to its key in the standards table.

    Catalog synonyms are tried first ("ohp" → "Barbell Overhead Press");
    otherwise a case-insensitive match against the table's own keys lets a
    user-supplied table cover exercises outside the catalog.
    """
    ex = find_exercise(exercise_name)
    if ex is not None and ex.display_name in table.standards:
        return ex.display_name
    wanted = exercise_name.strip().lower()
    for name in table.standards:
        if name.lower() == wanted:
            return name
    return None


def closest_bracket(bodyweight_lbs: float, brackets: list[int]) -> int:
    """
    Nearest bodyweight bracket by absolute distance.

    Brackets are scanned in ascending order and only a strictly smaller
    distance replaces the current pick, so a tie goes to the lower bracket.
    """
    ordered = sorted(brackets)
    closest = ordered[0]
    min_diff = abs(bodyweight_lbs - closest)
    for weight in ordered:
        diff = abs(bodyweight_lbs - weight)
        if diff < min_diff:
            min_diff = diff
            closest = weight
    return closest


def interpolate_percentile(estimated_1rm: float, thresholds: Thresholds) -> int:
    """
    Population percentile by piecewise-linear interpolation over the level anchors.

    Clamped to the lowest anchor below Beginner and to the highest above
    Elite.  Rounded to a whole percentile, halves up.
    """
    values = thresholds.as_dict()
    points = sorted(
        ((values[level], LEVEL_PERCENTILES[level]) for level in LEVELS),
        key=lambda pt: pt[0],
    )

    if estimated_1rm <= points[0][0]:
        fraction = points[0][1]
    elif estimated_1rm >= points[-1][0]:
        fraction = points[-1][1]
    else:
        fraction = points[0][1]
        for (v_a, p_a), (v_b, p_b) in zip(points, points[1:]):
            if v_a <= estimated_1rm <= v_b and v_b > v_a:
                t = (estimated_1rm - v_a) / (v_b - v_a)
                fraction = p_a + t * (p_b - p_a)
    return int(math.floor(fraction * 100 + 0.5))


def _level_for(estimated_1rm: float, thresholds: Thresholds) -> tuple[str, NextLevel | None]:
    values = thresholds.as_dict()
    achieved = None
    for level in LEVELS:
        if estimated_1rm >= values[level]:
            achieved = level

    if achieved is None:
        return BELOW_BEGINNER_LEVEL, NextLevel(LEVELS[0].capitalize(), values[LEVELS[0]])

    idx = LEVELS.index(achieved)
    if idx == len(LEVELS) - 1:
        return achieved.capitalize(), None
    nxt = LEVELS[idx + 1]
    return achieved.capitalize(), NextLevel(nxt.capitalize(), values[nxt])


def classify(
    exercise_name: str,
    bodyweight_lbs: float,
    sex: str | None,
    estimated_1rm: float,
    table: StrengthStandardTable | None = None,
) -> StrengthStandard:
    """
    Classify an estimated 1RM against the strength standards.

    Args:
        exercise_name: Logged name or catalog id ("squat", "Back Squat", "bench_press")
        bodyweight_lbs: Lifter bodyweight in pounds
        sex: "male"/"female" or "M"/"F"
        estimated_1rm: Estimated 1RM in pounds
        table: Threshold table; the bundled table when omitted

    Returns:
        StrengthStandard; level "Unknown" with percentile 0 when the exercise
        has no standards or the sex code is not recognised.
    """
    table = table or default_table()
    unknown = StrengthStandard(level=UNKNOWN_LEVEL, percentile=0)

    name = resolve_standards_name(exercise_name, table)
    code = normalize_sex_code(sex)
    if name is None or code is None:
        return unknown

    brackets = table.brackets_for(name, code)
    if not brackets:
        return unknown

    bracket = closest_bracket(bodyweight_lbs, list(brackets))
    thresholds = Thresholds(**{level: brackets[bracket][level] for level in LEVELS})

    level, next_level = _level_for(estimated_1rm, thresholds)
    return StrengthStandard(
        level=level,
        percentile=interpolate_percentile(estimated_1rm, thresholds),
        next_level=next_level,
        thresholds=thresholds,
        bracket=bracket,
    )
