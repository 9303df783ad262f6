"""
Program progression engine.

Turns persisted program state into the next prescribed workout and moves
that state forward.  Each ProgramType has exactly one generate function
and one advance function, looked up in PROGRAM_HANDLERS.

    wave-loading        4-week 5/3/1-style wave + 5×10 accessory work
    linear-progression  alternating A/B sessions, fixed increments every session
    custom              user-managed lifts; only the week counter moves

Both entry points are pure: advance_program() returns a new Program and
never mutates its argument.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable

from .config import (
    ACCESSORY_FRACTION,
    ACCESSORY_REPS,
    ACCESSORY_SETS,
    BAR_WARMUP_REPS,
    BAR_WEIGHT,
    LINEAR_SESSIONS,
    PROGRESSION_INCREMENTS,
    SESSION_A,
    SESSION_B,
    SESSION_LABELS,
    WARMUP_ROUNDING,
    WARMUP_STEPS,
    WAVE_ROUNDING,
    WAVE_SCHEMES,
    WAVE_WEEKS,
)
from .exercises import get_exercise
from .metrics import round_to_increment
from .models import (
    PrescribedLift,
    PrescribedSet,
    PrescribedWorkout,
    Program,
    ProgramLift,
    ProgramType,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Shared set builders
# =============================================================================


def warmup_sets(exercise_id: str, working_weight: float, units: str = "lbs") -> list[PrescribedSet]:
    """
    Warmup ramp for a working weight.

    Always an empty-bar set of 5, then 40% × 5 above the lower threshold and
    60% × 3 above the higher one (95/135 lbs or 40/60 kg).  Percentage
    weights round to the nearest 5 lbs or 2.5 kg.
    """
    sets = [
        PrescribedSet(
            exercise_id=exercise_id,
            set_number=1,
            weight=BAR_WEIGHT[units],
            reps=BAR_WARMUP_REPS,
            is_warmup=True,
        )
    ]
    for fraction, reps, above in WARMUP_STEPS[units]:
        if working_weight > above:
            sets.append(
                PrescribedSet(
                    exercise_id=exercise_id,
                    set_number=len(sets) + 1,
                    weight=round_to_increment(working_weight * fraction, WARMUP_ROUNDING[units]),
                    reps=reps,
                    is_warmup=True,
                    percentage=fraction * 100,
                )
            )
    return sets


def wave_sets(exercise_id: str, week: int, training_max: float) -> list[PrescribedSet]:
    """
    Main sets for one week of the wave.

    Raises:
        ValueError: If week is outside 1–4
    """
    if week not in WAVE_SCHEMES:
        raise ValueError(f"Wave week must be 1-{WAVE_WEEKS}, got {week}")
    return [
        PrescribedSet(
            exercise_id=exercise_id,
            set_number=i,
            weight=round_to_increment(training_max * fraction, WAVE_ROUNDING),
            reps=reps,
            is_amrap=amrap,
            percentage=fraction * 100,
        )
        for i, (fraction, reps, amrap) in enumerate(WAVE_SCHEMES[week], start=1)
    ]


def accessory_sets(exercise_id: str, training_max: float) -> list[PrescribedSet]:
    """Boring-But-Big block: 5 × 10 at 50% of training max."""
    weight = round_to_increment(training_max * ACCESSORY_FRACTION, WAVE_ROUNDING)
    return [
        PrescribedSet(
            exercise_id=exercise_id,
            set_number=i,
            weight=weight,
            reps=ACCESSORY_REPS,
            percentage=ACCESSORY_FRACTION * 100,
        )
        for i in range(1, ACCESSORY_SETS + 1)
    ]


def linear_sets(exercise_id: str, working_weight: float) -> list[PrescribedSet]:
    """Straight sets at the working weight, sets × reps from the exercise catalog."""
    ex = get_exercise(exercise_id)
    return [
        PrescribedSet(exercise_id=exercise_id, set_number=i, weight=working_weight, reps=ex.linear_reps)
        for i in range(1, ex.linear_sets + 1)
    ]


def session_lifts(program: Program, session: int) -> list[ProgramLift]:
    """
    Lifts trained in a linear-progression session, in slot order.

    Each slot takes the first candidate exercise the program tracks (power
    clean, else deadlift); slots with no tracked candidate are skipped.
    """
    lifts: list[ProgramLift] = []
    for candidates in LINEAR_SESSIONS[session]:
        for exercise_id in candidates:
            if program.has_lift(exercise_id):
                lifts.append(program.get_lift(exercise_id))
                break
    return lifts


def _copy_lifts(program: Program) -> list[ProgramLift]:
    return [replace(lift) for lift in program.lifts]


def _empty_workout(program: Program, program_type: ProgramType) -> PrescribedWorkout:
    return PrescribedWorkout(
        program_id=program.program_id,
        program_type=program_type,
        week=program.current_week,
        cycle=program.current_cycle,
        units=program.units,
    )


# =============================================================================
# Wave loading
# =============================================================================


def generate_wave_workout(program: Program) -> PrescribedWorkout:
    workout = _empty_workout(program, ProgramType.WAVE_LOADING)
    for lift in program.lifts:
        ex = get_exercise(lift.exercise_id)
        main = wave_sets(lift.exercise_id, program.current_week, lift.training_max)
        heaviest = max(s.weight for s in main)
        workout.lifts.append(
            PrescribedLift(
                exercise_id=lift.exercise_id,
                exercise_name=ex.display_name,
                training_max=lift.training_max,
                warmup_sets=warmup_sets(lift.exercise_id, heaviest, program.units),
                main_sets=main,
                accessory_sets=accessory_sets(lift.exercise_id, lift.training_max),
            )
        )
    return workout


def advance_wave(program: Program) -> Program:
    """Week 1→2→3→4→1; the cycle moves on wrap.  Training maxes are left alone."""
    if program.current_week >= WAVE_WEEKS:
        return replace(
            program, current_week=1, current_cycle=program.current_cycle + 1, lifts=_copy_lifts(program)
        )
    return replace(program, current_week=program.current_week + 1, lifts=_copy_lifts(program))


# =============================================================================
# Linear progression
# =============================================================================


def generate_linear_workout(program: Program) -> PrescribedWorkout:
    workout = _empty_workout(program, ProgramType.LINEAR_PROGRESSION)
    session = SESSION_B if program.current_cycle == SESSION_B else SESSION_A
    workout.session_label = SESSION_LABELS[session]
    for lift in session_lifts(program, session):
        ex = get_exercise(lift.exercise_id)
        workout.lifts.append(
            PrescribedLift(
                exercise_id=lift.exercise_id,
                exercise_name=ex.display_name,
                training_max=lift.training_max,
                warmup_sets=warmup_sets(lift.exercise_id, lift.training_max, program.units),
                main_sets=linear_sets(lift.exercise_id, lift.training_max),
            )
        )
    return workout


def advance_linear(program: Program) -> Program:
    """
    Toggle Session A/B, count the session, and add the fixed increment to every lift.

    Lower-body lifts move by 10 lbs / 5 kg, everything else by 5 lbs / 2.5 kg.
    There is no failure or deload branch.
    """
    new_lifts: list[ProgramLift] = []
    for lift in program.lifts:
        ex = get_exercise(lift.exercise_id)
        step = PROGRESSION_INCREMENTS[ex.increment_class][program.units]
        new_weight = lift.training_max + step
        logger.info("Progressing %s: %g -> %g", ex.display_name, lift.training_max, new_weight)
        new_lifts.append(ProgramLift(exercise_id=lift.exercise_id, training_max=new_weight))

    next_session = SESSION_A if program.current_cycle == SESSION_B else SESSION_B
    return replace(
        program,
        current_week=program.current_week + 1,
        current_cycle=next_session,
        lifts=new_lifts,
    )


# =============================================================================
# Custom
# =============================================================================


def generate_custom_workout(program: Program) -> PrescribedWorkout:
    """Custom programs list their lifts without prescribing sets."""
    workout = _empty_workout(program, ProgramType.CUSTOM)
    for lift in program.lifts:
        ex = get_exercise(lift.exercise_id)
        workout.lifts.append(
            PrescribedLift(
                exercise_id=lift.exercise_id,
                exercise_name=ex.display_name,
                training_max=lift.training_max,
            )
        )
    return workout


def advance_custom(program: Program) -> Program:
    return replace(program, current_week=program.current_week + 1, lifts=_copy_lifts(program))


# =============================================================================
# Dispatch
# =============================================================================


@dataclass(frozen=True)
class ProgramHandler:
    """Generate/advance pair for one program type."""

    generate: Callable[[Program], PrescribedWorkout]
    advance: Callable[[Program], Program]


PROGRAM_HANDLERS: dict[ProgramType, ProgramHandler] = {
    ProgramType.WAVE_LOADING: ProgramHandler(generate_wave_workout, advance_wave),
    ProgramType.LINEAR_PROGRESSION: ProgramHandler(generate_linear_workout, advance_linear),
    ProgramType.CUSTOM: ProgramHandler(generate_custom_workout, advance_custom),
}


def _handler_for(program: Program) -> ProgramHandler:
    return PROGRAM_HANDLERS[ProgramType.parse(program.program_type)]


def generate_workout(program: Program) -> PrescribedWorkout:
    """
    Prescribed workout for the program's current week/session.

    Raises:
        UnsupportedProgramTypeError: If the program type has no handler
        ExerciseNotFoundError: If a program lift is not in the exercise catalog
    """
    return _handler_for(program).generate(program)


def advance_program(program: Program) -> Program:
    """
    Next program state.  The input is not modified.

    A program without lifts still advances its week/cycle counters.

    Raises:
        UnsupportedProgramTypeError: If the program type has no handler
        ExerciseNotFoundError: If a program lift is not in the exercise catalog
    """
    handler = _handler_for(program)
    advanced = handler.advance(program)
    logger.debug(
        "Program %s advanced: week %d cycle %d -> week %d cycle %d",
        program.program_id,
        program.current_week,
        program.current_cycle,
        advanced.current_week,
        advanced.current_cycle,
    )
    return advanced
