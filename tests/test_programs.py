"""
Tests for the program progression engine.

Wave loading, linear progression and custom programs: prescribed sets,
warmups, and how advancing moves the persisted state.
"""

import logging

import pytest

from strength_engine.core.errors import ExerciseNotFoundError, UnsupportedProgramTypeError
from strength_engine.core.models import Program, ProgramLift, ProgramType
from strength_engine.core.programs import (
    PROGRAM_HANDLERS,
    accessory_sets,
    advance_program,
    generate_workout,
    warmup_sets,
    wave_sets,
)


def _program(program_type: ProgramType, lifts: dict[str, float], week: int = 1, cycle: int = 1, units: str = "lbs") -> Program:
    return Program(
        program_id=1,
        user_id=1,
        name="test",
        program_type=program_type,
        start_date="2026-01-05",
        current_week=week,
        current_cycle=cycle,
        units=units,  # type: ignore[arg-type]
        lifts=[ProgramLift(exercise_id=k, training_max=v) for k, v in lifts.items()],
    )


def _weights(sets) -> list[float]:
    return [s.weight for s in sets]


# ---------------------------------------------------------------------------
# Set builders
# ---------------------------------------------------------------------------

class TestWaveSets:
    def test_week_one(self):
        sets = wave_sets("squat", 1, 315)
        # 204.75 → 205, 236.25 → 237.5, 267.75 → 267.5
        assert _weights(sets) == [205.0, 237.5, 267.5]
        assert [s.reps for s in sets] == [5, 5, 5]
        assert [s.is_amrap for s in sets] == [False, False, True]
        assert [s.percentage for s in sets] == pytest.approx([65, 75, 85])

    def test_week_three_peaks_at_single(self):
        sets = wave_sets("squat", 3, 300)
        assert _weights(sets) == [225.0, 255.0, 285.0]
        assert [s.reps for s in sets] == [5, 3, 1]

    def test_deload_week_has_no_amrap(self):
        sets = wave_sets("bench_press", 4, 200)
        assert _weights(sets) == [80.0, 100.0, 120.0]
        assert not any(s.is_amrap for s in sets)

    def test_invalid_week(self):
        with pytest.raises(ValueError):
            wave_sets("squat", 5, 315)

    def test_accessory_block(self):
        sets = accessory_sets("squat", 315)
        assert len(sets) == 5
        assert all(s.reps == 10 and s.weight == 157.5 for s in sets)


class TestWarmups:
    def test_full_ramp_in_lbs(self):
        sets = warmup_sets("squat", 315)
        # 126 → 125, 189 → 190
        assert [(s.weight, s.reps) for s in sets] == [(45.0, 5), (125.0, 5), (190.0, 3)]
        assert all(s.is_warmup for s in sets)
        assert [s.set_number for s in sets] == [1, 2, 3]

    def test_light_weight_only_the_bar(self):
        assert [(s.weight, s.reps) for s in warmup_sets("bench_press", 95)] == [(45.0, 5)]

    def test_middle_weight_skips_heavy_step(self):
        assert _weights(warmup_sets("bench_press", 135)) == [45.0, 55.0]

    def test_kilograms(self):
        sets = warmup_sets("squat", 100, "kg")
        assert [(s.weight, s.reps) for s in sets] == [(20.0, 5), (40.0, 5), (60.0, 3)]


# ---------------------------------------------------------------------------
# Wave loading
# ---------------------------------------------------------------------------

class TestWaveLoading:
    def test_generate(self):
        program = _program(ProgramType.WAVE_LOADING, {"squat": 315, "bench_press": 225})
        workout = generate_workout(program)

        assert workout.program_type == ProgramType.WAVE_LOADING
        assert workout.week == 1 and workout.cycle == 1
        assert [l.exercise_id for l in workout.lifts] == ["squat", "bench_press"]

        squat = workout.lifts[0]
        assert squat.exercise_name == "Barbell Squat"
        assert _weights(squat.main_sets) == [205.0, 237.5, 267.5]
        # Warmups ramp to the heaviest main set: 107 → 105, 160.5 → 160
        assert _weights(squat.warmup_sets) == [45.0, 105.0, 160.0]
        assert len(squat.accessory_sets) == 5

    def test_advance_through_cycle(self):
        program = _program(ProgramType.WAVE_LOADING, {"squat": 315})
        states = []
        for _ in range(5):
            program = advance_program(program)
            states.append((program.current_week, program.current_cycle))
        assert states == [(2, 1), (3, 1), (4, 1), (1, 2), (2, 2)]

    def test_advance_keeps_training_max(self):
        program = _program(ProgramType.WAVE_LOADING, {"squat": 315}, week=4)
        advanced = advance_program(program)
        assert advanced.lifts[0].training_max == 315

    def test_advance_does_not_mutate_input(self):
        program = _program(ProgramType.WAVE_LOADING, {"squat": 315}, week=2)
        advanced = advance_program(program)
        assert program.current_week == 2
        assert advanced.lifts is not program.lifts
        assert advanced.lifts[0] is not program.lifts[0]


# ---------------------------------------------------------------------------
# Linear progression
# ---------------------------------------------------------------------------

ALL_LIFTS = {"squat": 200, "bench_press": 150, "deadlift": 250, "overhead_press": 100}


class TestLinearProgression:
    def test_session_a(self):
        workout = generate_workout(_program(ProgramType.LINEAR_PROGRESSION, ALL_LIFTS))
        assert workout.session_label == "Session A"
        assert [l.exercise_id for l in workout.lifts] == ["squat", "bench_press", "deadlift"]

        squat, _, deadlift = workout.lifts
        assert [(s.weight, s.reps) for s in squat.main_sets] == [(200, 5)] * 3
        assert [(s.weight, s.reps) for s in deadlift.main_sets] == [(250, 5)]
        assert squat.accessory_sets == []
        assert _weights(squat.warmup_sets) == [45.0, 80.0, 120.0]

    def test_session_b_uses_deadlift_without_power_clean(self):
        workout = generate_workout(_program(ProgramType.LINEAR_PROGRESSION, ALL_LIFTS, cycle=2))
        assert workout.session_label == "Session B"
        assert [l.exercise_id for l in workout.lifts] == ["squat", "overhead_press", "deadlift"]

    def test_session_b_prefers_power_clean(self):
        lifts = {**ALL_LIFTS, "power_clean": 135}
        workout = generate_workout(_program(ProgramType.LINEAR_PROGRESSION, lifts, cycle=2))
        assert [l.exercise_id for l in workout.lifts] == ["squat", "overhead_press", "power_clean"]
        clean = workout.lifts[2]
        assert [(s.weight, s.reps) for s in clean.main_sets] == [(135, 3)] * 5

    def test_missing_slots_are_skipped(self):
        workout = generate_workout(_program(ProgramType.LINEAR_PROGRESSION, {"bench_press": 150}))
        assert [l.exercise_id for l in workout.lifts] == ["bench_press"]

    def test_advance_adds_increments_and_toggles_session(self):
        program = _program(ProgramType.LINEAR_PROGRESSION, ALL_LIFTS)
        advanced = advance_program(program)

        assert advanced.current_cycle == 2
        assert advanced.current_week == 2
        assert {l.exercise_id: l.training_max for l in advanced.lifts} == {
            "squat": 210,
            "bench_press": 155,
            "deadlift": 260,
            "overhead_press": 105,
        }
        assert advance_program(advanced).current_cycle == 1
        assert program.lifts[0].training_max == 200

    def test_advance_in_kilograms(self):
        program = _program(ProgramType.LINEAR_PROGRESSION, {"squat": 100, "bench_press": 60}, units="kg")
        advanced = advance_program(program)
        assert [l.training_max for l in advanced.lifts] == [105, 62.5]

    def test_advance_logs_each_lift(self, caplog):
        program = _program(ProgramType.LINEAR_PROGRESSION, {"squat": 200})
        with caplog.at_level(logging.INFO, logger="strength_engine.core.programs"):
            advance_program(program)
        assert "Progressing Barbell Squat: 200 -> 210" in caplog.text

    def test_unknown_lift_raises(self):
        program = _program(ProgramType.LINEAR_PROGRESSION, {"zercher_squat": 200})
        with pytest.raises(ExerciseNotFoundError):
            advance_program(program)


# ---------------------------------------------------------------------------
# Custom and dispatch
# ---------------------------------------------------------------------------

class TestCustomAndDispatch:
    def test_custom_lists_lifts_without_sets(self):
        workout = generate_workout(_program(ProgramType.CUSTOM, {"barbell_row": 135}))
        (row,) = workout.lifts
        assert row.exercise_name == "Barbell Row"
        assert row.main_sets == [] and row.warmup_sets == []

    def test_custom_advance_counts_weeks(self):
        advanced = advance_program(_program(ProgramType.CUSTOM, {"barbell_row": 135}, week=7))
        assert advanced.current_week == 8
        assert advanced.current_cycle == 1
        assert advanced.lifts[0].training_max == 135

    def test_every_type_has_a_handler(self):
        assert set(PROGRAM_HANDLERS) == set(ProgramType)

    def test_empty_program_still_advances(self):
        advanced = advance_program(_program(ProgramType.WAVE_LOADING, {}))
        assert advanced.current_week == 2
        assert generate_workout(advanced).lifts == []

    def test_legacy_type_names(self):
        assert ProgramType.parse("531") is ProgramType.WAVE_LOADING
        assert ProgramType.parse("starting_strength") is ProgramType.LINEAR_PROGRESSION
        assert ProgramType.parse("Custom") is ProgramType.CUSTOM

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedProgramTypeError):
            ProgramType.parse("conjugate")
