"""
Smoke tests for the strength-engine CLI.

Tests basic functionality:
- App runs and shows help
- init creates the data directory
- Sets can be logged and PRs reported
- Analytics commands produce JSON
- Programs can be created, shown and advanced
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from strength_engine.cli.main import app


runner = CliRunner()


@pytest.fixture
def data_dir(tmp_path) -> Path:
    """An initialized data directory for a 200 lb male lifter."""
    d = tmp_path / "data"
    result = runner.invoke(app, ["init", "--data-dir", str(d), "--bodyweight", "200", "--sex", "male"])
    assert result.exit_code == 0, result.output
    return d


def _invoke(data_dir: Path, *args: str):
    return runner.invoke(app, [*args, "--data-dir", str(data_dir)])


def _json(data_dir: Path, *args: str):
    result = _invoke(data_dir, *args, "--json")
    assert result.exit_code == 0, result.output
    return json.loads(result.output)


class TestCLISmoke:
    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "strength" in result.output.lower()

    def test_init_creates_files(self, data_dir):
        assert (data_dir / "workouts.jsonl").exists()
        assert (data_dir / "profiles.json").exists()
        assert (data_dir / "programs.json").exists()

    def test_init_rejects_bad_sex(self, tmp_path):
        result = runner.invoke(app, ["init", "--data-dir", str(tmp_path), "--bodyweight", "200", "--sex", "x"])
        assert result.exit_code == 1

    def test_update_weight(self, data_dir):
        result = _invoke(data_dir, "update-weight", "--bodyweight", "195")
        assert result.exit_code == 0
        profile = json.loads((data_dir / "profiles.json").read_text())
        assert profile["1"]["bodyweight"] == 195

    def test_commands_before_init_fail(self, tmp_path):
        assert _invoke(tmp_path, "log", "squat", "225x5").exit_code == 1
        assert _invoke(tmp_path, "history").exit_code == 1
        assert _invoke(tmp_path, "strength").exit_code == 1


class TestLogging:
    def test_log_reports_first_time_prs(self, data_dir):
        out = _json(data_dir, "log", "squat", "135x5w, 3x5@235", "--date", "2026-01-05")
        assert len(out["workout"]["sets"]) == 4
        (squat,) = out["prs"]
        assert squat["exercise"] == "Barbell Squat"
        assert len(squat["volume_prs"]) == 3
        assert squat["volume_prs"][0]["volume"] == 1175

    def test_second_session_compares_to_history(self, data_dir):
        _json(data_dir, "log", "squat", "3x5@235", "--date", "2026-01-05")
        out = _json(data_dir, "log", "squat", "235x5", "--date", "2026-01-08")
        assert out["prs"] == []
        out = _json(data_dir, "log", "squat", "245x5", "--date", "2026-01-08")
        assert len(out["prs"]) == 1

    def test_log_accepts_aliases(self, data_dir):
        out = _json(data_dir, "log", "ohp", "95x5", "--date", "2026-01-05")
        assert out["workout"]["sets"][0]["exercise_id"] == "overhead_press"

    def test_log_errors(self, data_dir):
        assert _invoke(data_dir, "log", "curls", "50x10").exit_code == 1
        assert _invoke(data_dir, "log", "squat", "heavy").exit_code == 1
        assert _invoke(data_dir, "log", "squat", "225x5", "--date", "2026-13-01").exit_code == 1

    def test_history_and_prs(self, data_dir):
        _invoke(data_dir, "log", "squat", "225x5", "--date", "2026-01-05")
        _invoke(data_dir, "log", "bench", "185x5", "--date", "2026-01-06")

        history = _json(data_dir, "history")
        assert [w["date"] for w in history["workouts"]] == ["2026-01-05", "2026-01-06"]
        assert history["streak"] == 2

        squat_only = _json(data_dir, "history", "--exercise", "squat")
        assert len(squat_only["workouts"]) == 1

        prs = _json(data_dir, "prs", "--date", "2026-01-05")
        assert prs["prs"][0]["exercise"] == "Barbell Squat"
        assert _invoke(data_dir, "prs", "--date", "2026-02-01").exit_code == 1

        result = _invoke(data_dir, "history")
        assert result.exit_code == 0
        assert "Training History" in result.output


class TestAnalytics:
    def test_estimate(self):
        result = runner.invoke(app, ["estimate", "225", "5", "--json"])
        assert result.exit_code == 0
        out = json.loads(result.output)
        assert out["estimated_1rm"] == pytest.approx(253.125, abs=0.01)

    def test_estimate_with_wilks(self):
        result = runner.invoke(app, ["estimate", "500", "1", "--bodyweight", "100", "--units", "kg", "--json"])
        assert json.loads(result.output)["wilks"] == pytest.approx(304.3, abs=0.1)

    def test_classify(self, data_dir):
        out = _json(data_dir, "classify", "squat", "360")
        assert out["level"] == "Intermediate"
        assert out["percentile"] == 63
        assert out["next_level"] == {"level": "Advanced", "weight": 408}

    def test_classify_unknown_exercise(self, data_dir):
        assert _invoke(data_dir, "classify", "curls", "100").exit_code == 1

    def test_balance(self, data_dir):
        for exercise, sets in [("squat", "340x1"), ("bench", "240x1"), ("deadlift", "400x1"), ("ohp", "150x1")]:
            _invoke(data_dir, "log", exercise, sets, "--date", "2026-01-05")
        out = _json(data_dir, "balance")
        assert out["strategy"] == "range"
        assert out["score"] >= 95
        assert out["lifts"]["squat"] == 340
        assert out["imbalances"] == []

        out = _json(data_dir, "balance", "--strategy", "variance")
        assert out["strategy"] == "variance"

        assert _invoke(data_dir, "balance", "--strategy", "median").exit_code == 1

    def test_progression_and_strength(self, data_dir):
        _invoke(data_dir, "log", "squat", "300x5", "--date", "2026-01-05")
        _invoke(data_dir, "log", "squat", "320x3", "--date", "2026-01-08")

        out = _json(data_dir, "progression", "squat")
        assert [p["date"] for p in out["points"]] == ["2026-01-05", "2026-01-08"]

        out = _json(data_dir, "strength")
        assert out["lifts"]["squat"]["level"] == "Intermediate"
        assert out["lifts"]["bench"]["level"] == "No Data"


class TestPrograms:
    def test_wave_loading_lifecycle(self, data_dir):
        created = _json(
            data_dir, "program", "create", "--type", "531", "--name", "BBB",
            "--lift", "squat=315", "--lift", "bench=225", "--start-date", "2026-01-05",
        )
        assert created["program_type"] == "wave-loading"
        assert created["is_active"]

        shown = _json(data_dir, "program", "show")
        squat = shown["workout"]["lifts"][0]
        assert [s["weight"] for s in squat["main_sets"]] == [205.0, 237.5, 267.5]
        assert squat["main_sets"][-1]["is_amrap"]

        advanced = _json(data_dir, "program", "advance")
        assert advanced["current_week"] == 2

        listed = _json(data_dir, "program", "list")
        assert len(listed) == 1

    def test_linear_progression_advance(self, data_dir):
        _json(data_dir, "program", "create", "--type", "linear-progression", "--lift", "squat=200")
        advanced = _json(data_dir, "program", "advance")
        assert advanced["lifts"][0]["training_max"] == 210
        assert advanced["current_cycle"] == 2

    def test_activate(self, data_dir):
        first = _json(data_dir, "program", "create", "--type", "custom", "--lift", "barbell row=135")
        _json(data_dir, "program", "create", "--type", "custom")
        result = _invoke(data_dir, "program", "activate", str(first["program_id"]))
        assert result.exit_code == 0
        shown = _json(data_dir, "program", "show")
        assert shown["program"]["program_id"] == first["program_id"]

    def test_program_errors(self, data_dir):
        assert _invoke(data_dir, "program", "show").exit_code == 1
        assert _invoke(data_dir, "program", "create", "--type", "conjugate").exit_code == 1
        assert _invoke(data_dir, "program", "create", "--type", "custom", "--lift", "squat").exit_code == 1
        assert _invoke(data_dir, "program", "advance", "42").exit_code == 1
        assert _invoke(data_dir, "program", "activate", "42").exit_code == 1

    def test_advance_shows_units(self, data_dir):
        _json(data_dir, "program", "create", "--type", "linear-progression", "--lift", "squat=200")
        result = _invoke(data_dir, "program", "advance")
        assert result.exit_code == 0, result.output
        assert "200 lbs → 210 lbs" in result.output

    def test_set_lift(self, data_dir):
        _json(data_dir, "program", "create", "--type", "531", "--lift", "squat=315")

        updated = _json(data_dir, "program", "set-lift", "squat=325")
        assert updated["lifts"] == [{"exercise_id": "squat", "training_max": 325}]

        assert _invoke(data_dir, "program", "set-lift", "bench=225").exit_code == 1
        added = _json(data_dir, "program", "set-lift", "bench=225", "--add")
        assert [lift["exercise_id"] for lift in added["lifts"]] == ["squat", "bench_press"]

    def test_remove_lift(self, data_dir):
        _json(data_dir, "program", "create", "--type", "531", "--lift", "squat=315", "--lift", "bench=225")
        assert _invoke(data_dir, "program", "remove-lift", "squat").exit_code == 0
        shown = _json(data_dir, "program", "list")
        assert [lift["exercise_id"] for lift in shown[0]["lifts"]] == ["bench_press"]
        assert _invoke(data_dir, "program", "remove-lift", "squat").exit_code == 1


class TestReportsAndEquipment:
    def test_muscles(self, data_dir):
        _invoke(data_dir, "log", "squat", "135x5w, 3x5@225", "--date", "2026-01-05")
        _invoke(data_dir, "log", "bench", "2x5@185", "--date", "2026-01-08")
        out = _json(data_dir, "muscles", "--date", "2026-01-07")
        assert out["week_start"] == "2026-01-04"
        assert out["week_end"] == "2026-01-10"
        assert out["muscle_groups"] == [
            {"muscle_group": "legs", "set_count": 3},
            {"muscle_group": "chest", "set_count": 2},
            {"muscle_group": "arms", "set_count": 1},
            {"muscle_group": "shoulders", "set_count": 1},
        ]
        assert out["total_sets"] == 7

        assert _invoke(data_dir, "muscles", "--date", "2026-13-01").exit_code == 1

    def test_plates(self, data_dir, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        out = _json(data_dir, "plates", "315")
        assert out["units"] == "lbs"
        assert out["plates"] == [45, 45, 45]
        assert out["exact"]

        out = _json(data_dir, "plates", "100", "--units", "kg")
        assert out["plates"] == [25, 15]

        assert _invoke(data_dir, "plates", "315", "--units", "stone").exit_code == 1
        assert _invoke(data_dir, "plates", "315", "--bar", "0").exit_code == 1

    def test_plates_text(self, data_dir, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        result = _invoke(data_dir, "plates", "315")
        assert result.exit_code == 0, result.output
        assert "Each side" in result.output

    def test_corrupt_profile_is_reported(self, data_dir):
        path = data_dir / "profiles.json"
        profiles = json.loads(path.read_text())
        profiles["1"]["bodyweight"] = "heavy"
        path.write_text(json.dumps(profiles))
        result = _invoke(data_dir, "strength")
        assert result.exit_code == 1
        assert "Invalid profile record" in result.output
