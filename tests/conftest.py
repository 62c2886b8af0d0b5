"""Shared test fixtures: athlete settings, sample workouts and a small plan."""

from __future__ import annotations

from datetime import date

import pytest

from workout_codec.models.enums import DurationUnit, IntensityUnit, Sport, StepKind, WorkoutType
from workout_codec.models.settings import AthleteSettings, HrZone
from workout_codec.models.structured_workout import (
    CadenceRange,
    Duration,
    Intensity,
    IntervalSet,
    StructuredWorkout,
    WorkoutStep,
)
from workout_codec.models.training_plan import PlanMeta, PlanWeek, TrainingDay, TrainingPlan
from workout_codec.models.workout import Workout

RUN_ZONES = (
    HrZone(zone=1, low=0, high=134, name="Recovery"),
    HrZone(zone=2, low=134, high=147, name="Aerobic"),
    HrZone(zone=3, low=147, high=156, name="Tempo"),
    HrZone(zone=4, low=156, high=165, name="Threshold"),
    HrZone(zone=5, low=165, high=180, name="VO2max"),
)

BIKE_ZONES = (
    HrZone(zone=1, low=0, high=130, name="Recovery"),
    HrZone(zone=2, low=130, high=142, name="Aerobic"),
    HrZone(zone=3, low=142, high=151, name="Tempo"),
    HrZone(zone=4, low=151, high=160, name="Threshold"),
    HrZone(zone=5, low=160, high=175, name="VO2max"),
)


@pytest.fixture
def athlete_settings() -> AthleteSettings:
    """FTP 250 W, bike LTHR 160, run LTHR 165, full zone tables."""
    return AthleteSettings(
        ftp_watts=250,
        bike_lthr_bpm=160,
        run_lthr_bpm=165,
        bike_hr_zones=BIKE_ZONES,
        run_hr_zones=RUN_ZONES,
    )


@pytest.fixture
def empty_settings() -> AthleteSettings:
    """No thresholds at all."""
    return AthleteSettings()


@pytest.fixture
def endurance_ride() -> Workout:
    """60-minute endurance ride with no structure."""
    return Workout(
        id="w1-sat-bike",
        sport=Sport.BIKE,
        type=WorkoutType.ENDURANCE,
        name="Endurance Ride",
        description="Steady zone 2 ride",
        duration_minutes=60,
    )


@pytest.fixture
def interval_structure() -> StructuredWorkout:
    """10 min ramp 50-65%, 3 x (5 min @100% / 5 min @50%), 10 min ramp 60-40%."""
    return StructuredWorkout(
        warmup=(
            WorkoutStep(
                kind=StepKind.WARMUP,
                duration=Duration(10, DurationUnit.MINUTES),
                intensity=Intensity(IntensityUnit.PERCENT_FTP, 65, low=50, high=65),
                name="Warm Up",
            ),
        ),
        main=(
            IntervalSet(
                repeats=3,
                name="Threshold Intervals",
                steps=(
                    WorkoutStep(
                        kind=StepKind.WORK,
                        duration=Duration(5, DurationUnit.MINUTES),
                        intensity=Intensity(IntensityUnit.PERCENT_FTP, 100),
                        cadence=CadenceRange(low=95, high=95),
                        name="Hard",
                    ),
                    WorkoutStep(
                        kind=StepKind.RECOVERY,
                        duration=Duration(5, DurationUnit.MINUTES),
                        intensity=Intensity(IntensityUnit.PERCENT_FTP, 50),
                        name="Easy",
                    ),
                ),
            ),
        ),
        cooldown=(
            WorkoutStep(
                kind=StepKind.COOLDOWN,
                duration=Duration(10, DurationUnit.MINUTES),
                intensity=Intensity(IntensityUnit.PERCENT_FTP, 60, low=40, high=60),
                name="Cool Down",
            ),
        ),
    )


@pytest.fixture
def interval_ride(interval_structure: StructuredWorkout) -> Workout:
    """The 50-minute interval structure as a bike workout."""
    return Workout(
        id="w2-tue-bike",
        sport=Sport.BIKE,
        type=WorkoutType.THRESHOLD,
        name="Threshold Intervals",
        description="3x5 at threshold",
        duration_minutes=50,
        structure=interval_structure,
    )


@pytest.fixture
def sample_plan() -> TrainingPlan:
    """Two weeks: run, swim, bike, an unnamed rest day, strength; race on 2025-06-15."""
    easy_run = Workout(
        id="w1-mon-run", sport=Sport.RUN, type=WorkoutType.ENDURANCE, name="Easy Run",
        description="Zone 2 easy run", duration_minutes=45, primary_zone="Zone 2",
    )
    swim = Workout(
        id="w1-tue-swim", sport=Sport.SWIM, type=WorkoutType.TECHNIQUE, name="Technique Swim",
        description="Focus on form", duration_minutes=60,
    )
    ride = Workout(
        id="w1-wed-bike", sport=Sport.BIKE, type=WorkoutType.TEMPO, name="Tempo Ride",
        description="Sweet spot, steady", duration_minutes=75,
    )
    rest = Workout(id="w1-thu-rest", sport=Sport.REST, type=WorkoutType.REST, name="")
    strength = Workout(
        id="w2-mon-strength", sport=Sport.STRENGTH, type=WorkoutType.STRENGTH,
        name="Core & Hips", duration_minutes=30,
    )
    long_run = Workout(
        id="w2-sun-run", sport=Sport.RUN, type=WorkoutType.LONG, name="Long Run",
        duration_minutes=120, human_readable="Warm-up: 15min easy\\nMain: 90min Z2",
    )
    return TrainingPlan(
        meta=PlanMeta(id="plan-1", event="Test Marathon", event_date=date(2025, 6, 15)),
        weeks=(
            PlanWeek(
                week_number=1,
                phase="Base",
                days=(
                    TrainingDay(date=date(2025, 1, 6), workouts=(easy_run,)),
                    TrainingDay(date=date(2025, 1, 7), workouts=(swim,)),
                    TrainingDay(date=date(2025, 1, 8), workouts=(ride,)),
                    TrainingDay(date=date(2025, 1, 9), workouts=(rest,)),
                ),
            ),
            PlanWeek(
                week_number=2,
                phase="Base",
                days=(
                    TrainingDay(date=date(2025, 1, 13), workouts=(strength,)),
                    TrainingDay(date=date(2025, 1, 19), workouts=(long_run,)),
                ),
            ),
        ),
    )
