"""Load training plans and athlete settings from their JSON documents.

The plan document uses camelCase keys (``durationMinutes``, ``valueLow``,
``humanReadable``, ``eventDate``, ...). Main-set entries carrying a
``repeats`` key are interval sets, everything else is a single step.
Unknown keys are ignored; missing required keys or impossible values
raise InvalidWorkoutError naming the offending path.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

from workout_codec.exceptions import InvalidWorkoutError
from workout_codec.models.enums import (
    DEFAULT_ASSUMED_SPEED_KMH,
    DurationUnit,
    IntensityUnit,
    Sport,
    StepKind,
    WorkoutType,
)
from workout_codec.models.settings import AthleteSettings, HrZone
from workout_codec.models.structured_workout import (
    CadenceRange,
    Duration,
    Intensity,
    IntervalSet,
    MainItem,
    StructuredWorkout,
    WorkoutStep,
)
from workout_codec.models.training_plan import PlanMeta, PlanWeek, TrainingDay, TrainingPlan
from workout_codec.models.workout import Workout


# ---------------------------------------------------------------------------
# Plans
# ---------------------------------------------------------------------------


def plan_from_dict(data: dict[str, Any]) -> TrainingPlan:
    """Build a TrainingPlan from a parsed plan document."""
    meta = _require(data, "meta", "plan")
    plan_meta = PlanMeta(
        id=str(_require(meta, "id", "meta")),
        event=meta.get("event") or "",
        event_date=_parse_date(meta.get("eventDate"), "meta.eventDate"),
        athlete=meta.get("athlete") or "",
    )
    weeks = tuple(
        _week_from_dict(week, f"weeks[{i}]") for i, week in enumerate(data.get("weeks") or [])
    )
    return TrainingPlan(meta=plan_meta, weeks=weeks)


def load_plan(path: str | Path) -> TrainingPlan:
    """Read and parse a plan JSON file."""
    return plan_from_dict(_read_json(path))


def workout_from_dict(data: dict[str, Any], path: str = "workout") -> Workout:
    structure = data.get("structure")
    return Workout(
        id=str(_require(data, "id", path)),
        sport=_enum(Sport, _require(data, "sport", path), f"{path}.sport"),
        type=WorkoutType(data.get("type") or "other"),
        name=data.get("name") or "",
        description=data.get("description") or "",
        duration_minutes=data.get("durationMinutes"),
        distance_meters=data.get("distanceMeters"),
        structure=_structure_from_dict(structure, f"{path}.structure") if structure else None,
        primary_zone=data.get("primaryZone") or "",
        human_readable=data.get("humanReadable") or "",
        completed=bool(data.get("completed", False)),
    )


def _week_from_dict(data: dict[str, Any], path: str) -> PlanWeek:
    days = tuple(
        _day_from_dict(day, f"{path}.days[{i}]") for i, day in enumerate(data.get("days") or [])
    )
    return PlanWeek(
        week_number=_number(data.get("weekNumber") or 0, f"{path}.weekNumber", int),
        days=days,
        phase=data.get("phase") or "",
        focus=data.get("focus") or "",
    )


def _day_from_dict(data: dict[str, Any], path: str) -> TrainingDay:
    day = _parse_date(_require(data, "date", path), f"{path}.date")
    workouts = tuple(
        workout_from_dict(w, f"{path}.workouts[{i}]")
        for i, w in enumerate(data.get("workouts") or [])
    )
    return TrainingDay(date=day, workouts=workouts)


def _structure_from_dict(data: dict[str, Any], path: str) -> StructuredWorkout:
    main: list[MainItem] = []
    for i, item in enumerate(data.get("main") or []):
        item_path = f"{path}.main[{i}]"
        if "repeats" in item:
            main.append(_interval_set_from_dict(item, item_path))
        else:
            main.append(_step_from_dict(item, item_path))

    return StructuredWorkout(
        warmup=tuple(
            _step_from_dict(s, f"{path}.warmup[{i}]") for i, s in enumerate(data.get("warmup") or [])
        ),
        main=tuple(main),
        cooldown=tuple(
            _step_from_dict(s, f"{path}.cooldown[{i}]") for i, s in enumerate(data.get("cooldown") or [])
        ),
    )


def _interval_set_from_dict(data: dict[str, Any], path: str) -> IntervalSet:
    steps = tuple(
        _step_from_dict(s, f"{path}.steps[{i}]") for i, s in enumerate(data.get("steps") or [])
    )
    return IntervalSet(
        repeats=_number(data["repeats"], f"{path}.repeats", int),
        steps=steps,
        name=data.get("name") or "",
    )


def _step_from_dict(data: dict[str, Any], path: str) -> WorkoutStep:
    duration = _require(data, "duration", path)
    intensity = data.get("intensity")
    cadence = data.get("cadence")
    return WorkoutStep(
        kind=_enum(StepKind, data.get("type") or "active", f"{path}.type"),
        duration=Duration(
            value=_number(_require(duration, "value", f"{path}.duration"), f"{path}.duration.value"),
            unit=_enum(DurationUnit, duration.get("unit") or "minutes", f"{path}.duration.unit"),
        ),
        intensity=_intensity_from_dict(intensity, f"{path}.intensity") if intensity else None,
        cadence=CadenceRange(low=cadence.get("low"), high=cadence.get("high")) if cadence else None,
        name=data.get("name") or "",
        notes=data.get("notes") or "",
    )


def _intensity_from_dict(data: dict[str, Any], path: str) -> Intensity:
    low = data.get("valueLow")
    high = data.get("valueHigh")
    value = data.get("value")
    if value is None:
        if low is None and high is None:
            raise InvalidWorkoutError(f"{path}: intensity needs a value or bounds")
        value = high if high is not None else low
    return Intensity(
        unit=_enum(IntensityUnit, _require(data, "unit", path), f"{path}.unit"),
        value=_number(value, f"{path}.value"),
        low=_number(low, f"{path}.valueLow") if low is not None else None,
        high=_number(high, f"{path}.valueHigh") if high is not None else None,
    )


# ---------------------------------------------------------------------------
# Athlete settings
# ---------------------------------------------------------------------------


def settings_from_dict(data: dict[str, Any]) -> AthleteSettings:
    """Build AthleteSettings from the viewer's settings document.

    Reads ``bike.ftp``, ``bike.lthr``, ``run.lthr``, ``bike.hrZones`` and
    ``run.hrZones``. An optional ``assumedSpeedKmh`` object keyed by sport
    overrides the default speeds used for distance steps.
    """
    bike = data.get("bike") or {}
    run = data.get("run") or {}

    speeds = dict(DEFAULT_ASSUMED_SPEED_KMH)
    for key, value in (data.get("assumedSpeedKmh") or {}).items():
        speeds[_enum(Sport, key, f"assumedSpeedKmh.{key}")] = _number(value, f"assumedSpeedKmh.{key}")

    return AthleteSettings(
        ftp_watts=_optional_number(bike.get("ftp"), "bike.ftp"),
        bike_lthr_bpm=_optional_number(bike.get("lthr"), "bike.lthr"),
        run_lthr_bpm=_optional_number(run.get("lthr"), "run.lthr"),
        bike_hr_zones=_zones_from_list(bike.get("hrZones"), "bike.hrZones"),
        run_hr_zones=_zones_from_list(run.get("hrZones"), "run.hrZones"),
        assumed_speed_kmh=speeds,
    )


def load_settings(path: str | Path) -> AthleteSettings:
    """Read and parse an athlete settings JSON file."""
    return settings_from_dict(_read_json(path))


def _zones_from_list(raw: list[dict[str, Any]] | None, path: str) -> tuple[HrZone, ...]:
    if not raw:
        return ()
    zones = []
    for i, z in enumerate(raw):
        zone_path = f"{path}[{i}]"
        zones.append(
            HrZone(
                zone=_number(_require(z, "zone", zone_path), f"{zone_path}.zone", int),
                low=_number(_require(z, "low", zone_path), f"{zone_path}.low", int),
                high=_number(_require(z, "high", zone_path), f"{zone_path}.high", int),
                name=z.get("name") or "",
            )
        )
    return tuple(zones)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _read_json(path: str | Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise InvalidWorkoutError(f"{path}: invalid JSON ({exc})") from exc


def _require(data: dict[str, Any], key: str, path: str) -> Any:
    if not isinstance(data, dict) or data.get(key) is None:
        raise InvalidWorkoutError(f"{path}: missing required key '{key}'")
    return data[key]


def _number(value: Any, path: str, cast=float):
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        raise InvalidWorkoutError(f"{path}: expected a number, got {value!r}") from exc


def _optional_number(value: Any, path: str) -> float | None:
    """Zero, empty and missing all mean unset. Numeric JSON values keep their type."""
    if not value:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return _number(value, path) or None


def _enum(enum_cls, value: Any, path: str):
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise InvalidWorkoutError(f"{path}: unknown value {value!r}") from exc


def _parse_date(value: Any, path: str) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as exc:
        raise InvalidWorkoutError(f"{path}: invalid date {value!r}") from exc
