"""
Configuration constants for the strength analytics and progression engine.

All adjustable parameters are centralized here for easy tuning.
Weights are in pounds unless a table is keyed by unit system.
"""

from typing import Final

# =============================================================================
# UNIT CONVERSION
# =============================================================================

LB_TO_KG: Final[float] = 0.453592
KG_TO_LB: Final[float] = 2.20462

UNIT_SYSTEMS: Final[tuple[str, ...]] = ("lbs", "kg")

# =============================================================================
# 1RM ESTIMATION
# =============================================================================

BLEND_START_REPS: Final[int] = 8  # 100% Brzycki
BLEND_END_REPS: Final[int] = 10  # 100% Epley
BRZYCKI_UNSTABLE_REPS: Final[int] = 37  # Denominator hits zero here
BRZYCKI_FALLBACK_FACTOR: Final[float] = 2.0

# =============================================================================
# WILKS COEFFICIENTS
# =============================================================================

# Denominator: a + b·bw + c·bw² + d·bw³ + e·bw⁴ + f·bw⁵ (bw in kg)
WILKS_COEFFICIENTS: Final[dict[str, tuple[float, ...]]] = {
    "M": (
        -216.0475144,
        16.2606339,
        -0.002388645,
        -0.00113732,
        7.01863e-6,
        -1.291e-8,
    ),
    "F": (
        594.31747775582,
        -27.23842536447,
        0.82112226871,
        -0.00930733913,
        0.00004731582,
        -0.00000009054,
    ),
}
WILKS_NUMERATOR: Final[float] = 500.0

# =============================================================================
# STRENGTH STANDARDS
# =============================================================================

LEVELS: Final[tuple[str, ...]] = ("beginner", "novice", "intermediate", "advanced", "elite")

LEVEL_PERCENTILES: Final[dict[str, float]] = {
    "beginner": 0.05,
    "novice": 0.20,
    "intermediate": 0.50,
    "advanced": 0.80,
    "elite": 0.95,
}

BELOW_BEGINNER_LEVEL: Final[str] = "Untrained"
UNKNOWN_LEVEL: Final[str] = "Unknown"
NO_DATA_LEVEL: Final[str] = "No Data"

# =============================================================================
# BALANCE / SYMMETRY
# =============================================================================

# ratio name -> (min, max, ideal)
IDEAL_RATIOS: Final[dict[str, tuple[float, float, float]]] = {
    "squat_to_deadlift": (0.75, 0.95, 0.85),
    "bench_to_squat": (0.60, 0.80, 0.70),
    "ohp_to_bench": (0.55, 0.70, 0.625),
    "deadlift_to_squat": (1.05, 1.35, 1.20),
}

# Share of squat+bench+deadlift below which a proportion imbalance is raised
PROPORTION_FLOORS: Final[dict[str, float]] = {
    "squat": 33.0,
    "bench": 20.0,
    "deadlift": 34.0,
}
PROPORTION_IDEALS: Final[dict[str, float]] = {
    "squat": 37.0,
    "bench": 25.0,
    "deadlift": 38.0,
}

RANGE_SCORE_AT_EDGE: Final[float] = 50.0  # Score at the min/max of a band

# Deadlift share of a powerlifting total; other lifts are fractions of it
DEADLIFT_SHARE_OF_TOTAL: Final[dict[str, float]] = {"M": 0.396825, "F": 0.414938}
LIFT_TO_DEADLIFT_RATIO: Final[dict[str, dict[str, float]]] = {
    "squat": {"M": 0.87, "F": 0.84},
    "bench": {"M": 0.65, "F": 0.57},
    "deadlift": {"M": 1.0, "F": 1.0},
}
OHP_TO_BENCH_SHARE: Final[float] = 0.65

YOUNG_LIFTER_AGE: Final[int] = 23
MASTERS_LIFTER_AGE: Final[int] = 40
STRENGTH_SCORE_DIVISOR: Final[float] = 4.0

BALANCE_INTERPRETATIONS: Final[list[tuple[float, str]]] = [
    (85.0, "Excellent balance"),
    (70.0, "Good balance"),
    (50.0, "Fair balance - some work needed"),
    (float("-inf"), "Significant imbalances detected"),
]

# =============================================================================
# WAVE LOADING (4-week wave)
# =============================================================================

# week -> [(fraction of training max, reps, is_amrap)]
WAVE_SCHEMES: Final[dict[int, list[tuple[float, int, bool]]]] = {
    1: [(0.65, 5, False), (0.75, 5, False), (0.85, 5, True)],
    2: [(0.70, 3, False), (0.80, 3, False), (0.90, 3, True)],
    3: [(0.75, 5, False), (0.85, 3, False), (0.95, 1, True)],
    4: [(0.40, 5, False), (0.50, 5, False), (0.60, 5, False)],  # Deload
}
WAVE_WEEKS: Final[int] = 4
WAVE_ROUNDING: Final[float] = 2.5

ACCESSORY_FRACTION: Final[float] = 0.50  # "Boring But Big"
ACCESSORY_SETS: Final[int] = 5
ACCESSORY_REPS: Final[int] = 10

# =============================================================================
# LINEAR PROGRESSION (alternating A/B sessions)
# =============================================================================

SESSION_A: Final[int] = 1
SESSION_B: Final[int] = 2
SESSION_LABELS: Final[dict[int, str]] = {SESSION_A: "Session A", SESSION_B: "Session B"}

# Each slot lists candidate exercise ids; the first one configured on the program is used
LINEAR_SESSIONS: Final[dict[int, list[tuple[str, ...]]]] = {
    SESSION_A: [("squat",), ("bench_press",), ("deadlift",)],
    SESSION_B: [("squat",), ("overhead_press",), ("power_clean", "deadlift")],
}

DEFAULT_LINEAR_SETS: Final[int] = 3
DEFAULT_LINEAR_REPS: Final[int] = 5

# increment class -> unit system -> step added on every advance
PROGRESSION_INCREMENTS: Final[dict[str, dict[str, float]]] = {
    "lower": {"lbs": 10.0, "kg": 5.0},
    "upper": {"lbs": 5.0, "kg": 2.5},
}

# =============================================================================
# WARMUPS
# =============================================================================

BAR_WEIGHT: Final[dict[str, float]] = {"lbs": 45.0, "kg": 20.0}
BAR_WARMUP_REPS: Final[int] = 5

# (fraction of working weight, reps, working weight must exceed)
WARMUP_STEPS: Final[dict[str, list[tuple[float, int, float]]]] = {
    "lbs": [(0.40, 5, 95.0), (0.60, 3, 135.0)],
    "kg": [(0.40, 5, 40.0), (0.60, 3, 60.0)],
}
WARMUP_ROUNDING: Final[dict[str, float]] = {"lbs": 5.0, "kg": 2.5}

# =============================================================================
# PLATE LOADING
# =============================================================================

# unit system -> plate weight -> plates available per side
DEFAULT_PLATES: Final[dict[str, dict[float, int]]] = {
    "lbs": {45.0: 4, 25.0: 4, 10.0: 4, 5.0: 4, 2.5: 4, 1.0: 2, 0.75: 2, 0.5: 2, 0.25: 2},
    "kg": {25.0: 4, 20.0: 4, 15.0: 2, 10.0: 4, 5.0: 4, 2.5: 4, 1.25: 4, 0.5: 2, 0.25: 2},
}
PLATE_REMAINDER_STEP: Final[float] = 0.25
PLATE_EXACT_TOLERANCE: Final[float] = 0.01

# =============================================================================
# MUSCLE GROUP VOLUME
# =============================================================================

PRIMARY_MUSCLE_CREDIT: Final[float] = 1.0
SECONDARY_MUSCLE_CREDIT: Final[float] = 0.5
