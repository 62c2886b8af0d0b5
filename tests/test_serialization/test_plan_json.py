"""Tests for loading plan and settings JSON documents."""

from __future__ import annotations

import json
from datetime import date

import pytest

from workout_codec.exceptions import InvalidWorkoutError
from workout_codec.models.enums import DurationUnit, IntensityUnit, Sport, StepKind, WorkoutType
from workout_codec.models.structured_workout import IntervalSet
from workout_codec.serialization.plan_json import (
    load_plan,
    load_settings,
    plan_from_dict,
    settings_from_dict,
    workout_from_dict,
)


def _make_plan_dict(**workout_overrides) -> dict:
    workout = {
        "id": "w1-tue-bike",
        "sport": "bike",
        "type": "threshold",
        "name": "Threshold Intervals",
        "durationMinutes": 50,
        "structure": {
            "warmup": [
                {
                    "type": "warmup",
                    "duration": {"value": 10, "unit": "minutes"},
                    "intensity": {"unit": "percent_ftp", "valueLow": 50, "valueHigh": 65},
                },
            ],
            "main": [
                {
                    "repeats": 3,
                    "name": "Threshold",
                    "steps": [
                        {
                            "type": "work",
                            "duration": {"value": 5, "unit": "minutes"},
                            "intensity": {"unit": "percent_ftp", "value": 100},
                            "cadence": {"low": 90, "high": 95},
                        },
                        {
                            "type": "recovery",
                            "duration": {"value": 300, "unit": "seconds"},
                            "intensity": {"unit": "percent_ftp", "value": 50},
                        },
                    ],
                },
            ],
        },
    }
    workout.update(workout_overrides)
    return {
        "meta": {"id": "plan-1", "event": "Gran Fondo", "eventDate": "2025-06-15T00:00:00Z"},
        "weeks": [
            {
                "weekNumber": 1,
                "phase": "Base",
                "days": [{"date": "2025-01-07", "workouts": [workout]}],
            },
        ],
    }


class TestPlanFromDict:
    def test_meta(self) -> None:
        plan = plan_from_dict(_make_plan_dict())
        assert plan.meta.id == "plan-1"
        assert plan.meta.event == "Gran Fondo"
        assert plan.meta.event_date == date(2025, 6, 15)

    def test_weeks_and_days(self) -> None:
        plan = plan_from_dict(_make_plan_dict())
        assert plan.weeks[0].week_number == 1
        assert plan.weeks[0].phase == "Base"
        assert plan.weeks[0].days[0].date == date(2025, 1, 7)
        assert plan.workout_count == 1

    def test_workout_fields(self) -> None:
        workout = plan_from_dict(_make_plan_dict()).find_workout("w1-tue-bike")
        assert workout.sport == Sport.BIKE
        assert workout.type == WorkoutType.THRESHOLD
        assert workout.duration_minutes == 50

    def test_structure(self) -> None:
        structure = plan_from_dict(_make_plan_dict()).find_workout("w1-tue-bike").structure
        warmup = structure.warmup[0]
        assert warmup.kind == StepKind.WARMUP
        assert warmup.intensity.value == 65
        assert (warmup.intensity.low, warmup.intensity.high) == (50, 65)

        interval_set = structure.main[0]
        assert isinstance(interval_set, IntervalSet)
        assert interval_set.repeats == 3
        work, recovery = interval_set.steps
        assert work.cadence.low == 90
        assert recovery.duration.unit == DurationUnit.SECONDS
        assert structure.cooldown == ()

    def test_unknown_workout_type_is_other(self) -> None:
        workout = plan_from_dict(_make_plan_dict(type="brick_sim")).find_workout("w1-tue-bike")
        assert workout.type == WorkoutType.OTHER

    def test_no_structure(self) -> None:
        workout = plan_from_dict(_make_plan_dict(structure=None)).find_workout("w1-tue-bike")
        assert workout.structure is None

    def test_missing_id_names_path(self) -> None:
        data = _make_plan_dict()
        del data["weeks"][0]["days"][0]["workouts"][0]["id"]
        with pytest.raises(InvalidWorkoutError, match=r"weeks\[0\]\.days\[0\]\.workouts\[0\]"):
            plan_from_dict(data)

    def test_unknown_sport(self) -> None:
        with pytest.raises(InvalidWorkoutError, match="unknown value 'kayak'"):
            plan_from_dict(_make_plan_dict(sport="kayak"))

    def test_bad_date(self) -> None:
        data = _make_plan_dict()
        data["weeks"][0]["days"][0]["date"] = "not-a-date"
        with pytest.raises(InvalidWorkoutError, match="invalid date"):
            plan_from_dict(data)

    def test_zero_repeats_rejected(self) -> None:
        data = _make_plan_dict()
        data["weeks"][0]["days"][0]["workouts"][0]["structure"]["main"][0]["repeats"] = 0
        with pytest.raises(InvalidWorkoutError):
            plan_from_dict(data)

    def test_missing_meta(self) -> None:
        with pytest.raises(InvalidWorkoutError, match="missing required key 'meta'"):
            plan_from_dict({"weeks": []})

    def test_non_numeric_repeats(self) -> None:
        data = _make_plan_dict()
        data["weeks"][0]["days"][0]["workouts"][0]["structure"]["main"][0]["repeats"] = "three"
        with pytest.raises(InvalidWorkoutError, match=r"main\[0\]\.repeats: expected a number"):
            plan_from_dict(data)

    def test_non_numeric_duration_value(self) -> None:
        data = _make_plan_dict()
        data["weeks"][0]["days"][0]["workouts"][0]["structure"]["warmup"][0]["duration"]["value"] = "five"
        with pytest.raises(InvalidWorkoutError, match=r"warmup\[0\]\.duration\.value"):
            plan_from_dict(data)

    def test_non_numeric_intensity_value(self) -> None:
        data = _make_plan_dict()
        step = data["weeks"][0]["days"][0]["workouts"][0]["structure"]["main"][0]["steps"][0]
        step["intensity"]["value"] = "hard"
        with pytest.raises(InvalidWorkoutError, match=r"steps\[0\]\.intensity\.value"):
            plan_from_dict(data)

    def test_unknown_step_type(self) -> None:
        data = _make_plan_dict()
        data["weeks"][0]["days"][0]["workouts"][0]["structure"]["warmup"][0]["type"] = "sprint"
        with pytest.raises(InvalidWorkoutError, match=r"warmup\[0\]\.type"):
            plan_from_dict(data)


class TestWorkoutFromDict:
    def test_minimal(self) -> None:
        workout = workout_from_dict({"id": "r", "sport": "rest"})
        assert workout.sport == Sport.REST
        assert workout.name == ""
        assert workout.duration_minutes is None

    def test_intensity_without_value_or_bounds(self) -> None:
        data = {
            "id": "x",
            "sport": "run",
            "structure": {
                "main": [{"duration": {"value": 10}, "intensity": {"unit": "hr_zone"}}],
            },
        }
        with pytest.raises(InvalidWorkoutError, match="needs a value or bounds"):
            workout_from_dict(data)

    def test_low_only_intensity(self) -> None:
        data = {
            "id": "x",
            "sport": "run",
            "structure": {
                "main": [{"duration": {"value": 10}, "intensity": {"unit": "hr_zone", "valueLow": 2}}],
            },
        }
        step = workout_from_dict(data).structure.main[0]
        assert step.intensity.unit == IntensityUnit.HR_ZONE
        assert step.intensity.value == 2
        assert step.duration.unit == DurationUnit.MINUTES
        assert step.kind == StepKind.ACTIVE


class TestSettings:
    def test_full_document(self) -> None:
        settings = settings_from_dict({
            "bike": {
                "ftp": 250,
                "lthr": 160,
                "hrZones": [{"zone": 1, "low": 0, "high": 130, "name": "Recovery"}],
            },
            "run": {"lthr": 168},
            "assumedSpeedKmh": {"run": 12},
        })
        assert settings.ftp_watts == 250
        assert settings.threshold_hr(Sport.BIKE) == 160
        assert settings.threshold_hr(Sport.RUN) == 168
        assert settings.hr_zones(Sport.BIKE)[0].high == 130
        assert settings.hr_zones(Sport.RUN) == ()
        assert settings.speed_kmh(Sport.RUN) == 12.0
        assert settings.speed_kmh(Sport.BIKE) == 30.0

    def test_empty_document(self) -> None:
        settings = settings_from_dict({})
        assert settings.ftp_watts is None
        assert settings.threshold_hr(Sport.SWIM) is None

    def test_zero_ftp_means_unset(self) -> None:
        assert settings_from_dict({"bike": {"ftp": 0}}).ftp_watts is None

    def test_zone_missing_high(self) -> None:
        data = {"run": {"hrZones": [{"zone": 1, "low": 0}]}}
        with pytest.raises(InvalidWorkoutError, match=r"run\.hrZones\[0\]: missing required key 'high'"):
            settings_from_dict(data)

    def test_non_numeric_zone_bound(self) -> None:
        data = {"bike": {"hrZones": [{"zone": 1, "low": "low", "high": 130}]}}
        with pytest.raises(InvalidWorkoutError, match=r"bike\.hrZones\[0\]\.low"):
            settings_from_dict(data)

    def test_non_numeric_ftp(self) -> None:
        with pytest.raises(InvalidWorkoutError, match=r"bike\.ftp"):
            settings_from_dict({"bike": {"ftp": "strong"}})


class TestFiles:
    def test_load_plan(self, tmp_path) -> None:
        path = tmp_path / "plan.json"
        path.write_text(json.dumps(_make_plan_dict()), encoding="utf-8")
        assert load_plan(path).meta.id == "plan-1"

    def test_load_settings(self, tmp_path) -> None:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"bike": {"ftp": 300}}), encoding="utf-8")
        assert load_settings(path).ftp_watts == 300

    def test_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "plan.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(InvalidWorkoutError, match="invalid JSON"):
            load_plan(path)

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_plan(tmp_path / "missing.json")
