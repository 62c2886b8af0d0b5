"""Data models for the workout codec."""

from workout_codec.models.artifact import BatchExportResult, EncodedArtifact, ExportResult
from workout_codec.models.enums import (
    DurationUnit,
    ExportFormat,
    IntensityUnit,
    Phase,
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

__all__ = [
    "AthleteSettings",
    "BatchExportResult",
    "CadenceRange",
    "Duration",
    "DurationUnit",
    "EncodedArtifact",
    "ExportFormat",
    "ExportResult",
    "HrZone",
    "Intensity",
    "IntensityUnit",
    "IntervalSet",
    "MainItem",
    "Phase",
    "PlanMeta",
    "PlanWeek",
    "Sport",
    "StepKind",
    "StructuredWorkout",
    "TrainingDay",
    "TrainingPlan",
    "Workout",
    "WorkoutStep",
    "WorkoutType",
]
