"""Garmin FIT workout serialization.

Builds the ordered record list of a FIT workout file: one file-id record,
one workout record, then one step record per workout step and one repeat
record per interval set. Byte framing is delegated to a MessageSink so the
record logic can be tested without the binary encoder.

Value conventions follow the FIT profile:
    - time durations in milliseconds, distance durations in centimeters
    - custom power targets: 0-1000 is %FTP, above 1000 is watts + 1000
    - custom heart-rate targets: 0-100 is %max HR, above 100 is bpm + 100
    - a repeat record follows its child steps; its duration_value is the
      message index of the first child, its target_value the repeat count
"""

from __future__ import annotations

import logging
import zlib
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import IntEnum
from typing import Callable, Protocol, Union

from workout_codec.exceptions import UnsupportedSportError
from workout_codec.math.units import (
    distance_to_meters,
    duration_to_seconds,
    fraction_to_watts,
    intensity_to_fraction,
    is_time_unit,
    percent_to_bpm,
    round_half_up,
)
from workout_codec.math.zones import zone_bpm_range
from workout_codec.models.artifact import EncodedArtifact
from workout_codec.models.enums import (
    FIT_TARGET_BAND_PERCENT,
    ExportFormat,
    IntensityUnit,
    Sport,
    StepKind,
)
from workout_codec.models.settings import AthleteSettings
from workout_codec.models.structured_workout import CadenceRange, IntervalSet, WorkoutStep
from workout_codec.models.workout import Workout
from workout_codec.workout_builder.simple_profile import structure_for

logger = logging.getLogger(__name__)

FIT_MEDIA_TYPE = "application/vnd.ant.fit"

_POWER_WATTS_OFFSET = 1000
_HEART_RATE_BPM_OFFSET = 100


# ---------------------------------------------------------------------------
# FIT profile codes
# ---------------------------------------------------------------------------
class FitSport(IntEnum):
    GENERIC = 0
    RUNNING = 1
    CYCLING = 2
    SWIMMING = 5
    TRAINING = 10
    MULTISPORT = 18


class FitSubSport(IntEnum):
    GENERIC = 0
    ROAD = 7
    LAP_SWIMMING = 17
    STRENGTH_TRAINING = 20
    TRIATHLON = 78


class FitIntensity(IntEnum):
    ACTIVE = 0
    REST = 1
    WARMUP = 2
    COOLDOWN = 3
    RECOVERY = 4


class FitDurationType(IntEnum):
    TIME = 0
    DISTANCE = 1
    OPEN = 5
    REPEAT_UNTIL_STEPS_CMPLT = 6


class FitTargetType(IntEnum):
    SPEED = 0
    HEART_RATE = 1
    OPEN = 2
    CADENCE = 3
    POWER = 4


FIT_FILE_TYPE_WORKOUT = 5
FIT_MANUFACTURER_DEVELOPMENT = 255
FIT_PRODUCT_ID = 1

_SPORT_MAP: dict[Sport, tuple[FitSport, FitSubSport]] = {
    Sport.SWIM: (FitSport.SWIMMING, FitSubSport.LAP_SWIMMING),
    Sport.BIKE: (FitSport.CYCLING, FitSubSport.ROAD),
    Sport.RUN: (FitSport.RUNNING, FitSubSport.ROAD),
    Sport.STRENGTH: (FitSport.TRAINING, FitSubSport.STRENGTH_TRAINING),
    Sport.BRICK: (FitSport.MULTISPORT, FitSubSport.TRIATHLON),
}

_INTENSITY_MAP: dict[StepKind, FitIntensity] = {
    StepKind.WARMUP: FitIntensity.WARMUP,
    StepKind.COOLDOWN: FitIntensity.COOLDOWN,
    StepKind.REST: FitIntensity.REST,
    StepKind.RECOVERY: FitIntensity.RECOVERY,
    StepKind.WORK: FitIntensity.ACTIVE,
    StepKind.ACTIVE: FitIntensity.ACTIVE,
}


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class FileIdRecord:
    serial_number: int
    time_created: datetime
    type: int = FIT_FILE_TYPE_WORKOUT
    manufacturer: int = FIT_MANUFACTURER_DEVELOPMENT
    product: int = FIT_PRODUCT_ID


@dataclass(frozen=True)
class WorkoutRecord:
    name: str
    sport: FitSport
    sub_sport: FitSubSport
    num_valid_steps: int


@dataclass(frozen=True)
class WorkoutStepRecord:
    """One workout_step message.

    ``intensity`` is None for repeat records. ``cadence_low``/``cadence_high``
    carry the step's cadence even when the target slot holds power or
    heart rate; sinks write them as the secondary target.
    """

    message_index: int
    duration_type: FitDurationType
    duration_value: int
    target_type: FitTargetType = FitTargetType.OPEN
    target_value: int = 0
    custom_target_value_low: int | None = None
    custom_target_value_high: int | None = None
    intensity: FitIntensity | None = FitIntensity.ACTIVE
    name: str = ""
    notes: str = ""
    cadence_low: int | None = None
    cadence_high: int | None = None

    @property
    def is_repeat(self) -> bool:
        return self.duration_type == FitDurationType.REPEAT_UNTIL_STEPS_CMPLT


FitRecord = Union[FileIdRecord, WorkoutRecord, WorkoutStepRecord]


class MessageSink(Protocol):
    """Accepts FIT records in order and frames them into a binary file."""

    def add(self, record: FitRecord) -> None:
        ...

    def to_bytes(self) -> bytes:
        ...


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def is_fit_supported(sport: Sport) -> bool:
    """FIT covers every sport except rest days and race placeholders."""
    return sport in _SPORT_MAP


def build_fit_records(
    workout: Workout,
    settings: AthleteSettings,
    created_at: datetime | None = None,
) -> list[FitRecord]:
    """Ordered FIT records for *workout*.

    Structured workouts get targets from their intensities; unstructured
    workouts use the synthesized three-phase profile with open targets.

    Args:
        workout: Workout to encode.
        settings: Athlete thresholds for absolute power and HR targets.
        created_at: Timestamp for the file-id record (defaults to now, UTC).

    Raises:
        UnsupportedSportError: If the sport has no FIT mapping.
    """
    if not is_fit_supported(workout.sport):
        raise UnsupportedSportError(workout.sport.value, ExportFormat.FIT.value)

    steps = _step_records(workout, settings)
    fit_sport, fit_sub_sport = _SPORT_MAP[workout.sport]

    file_id = FileIdRecord(
        serial_number=zlib.crc32(workout.id.encode("utf-8")),
        time_created=created_at or datetime.now(timezone.utc),
    )
    header = WorkoutRecord(
        name=workout.name,
        sport=fit_sport,
        sub_sport=fit_sub_sport,
        num_valid_steps=len(steps),
    )
    return [file_id, header, *steps]


def encode_fit(
    workout: Workout,
    settings: AthleteSettings,
    filename: str,
    sink_factory: Callable[[], MessageSink] | None = None,
    created_at: datetime | None = None,
) -> EncodedArtifact:
    """Build the records and frame them through a fresh sink.

    *sink_factory* defaults to FitToolSink.
    """
    records = build_fit_records(workout, settings, created_at=created_at)

    if sink_factory is None:
        from workout_codec.serialization.fit_sink import FitToolSink
        sink_factory = FitToolSink

    sink = sink_factory()
    for record in records:
        sink.add(record)
    payload = sink.to_bytes()
    logger.debug("FIT %r: %d records, %d bytes", workout.name, len(records), len(payload))

    return EncodedArtifact(filename=filename, content=payload, media_type=FIT_MEDIA_TYPE)


# ---------------------------------------------------------------------------
# Step records
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class _Target:
    type: FitTargetType = FitTargetType.OPEN
    value: int = 0
    low: int | None = None
    high: int | None = None


_OPEN = _Target()


def _step_records(workout: Workout, settings: AthleteSettings) -> list[WorkoutStepRecord]:
    structure = structure_for(workout)
    open_targets = workout.structure is None
    records: list[WorkoutStepRecord] = []

    def add_step(step: WorkoutStep) -> None:
        target = _OPEN if open_targets else _target(step, workout.sport, settings)
        if target.type == FitTargetType.OPEN:
            target = _cadence_target(step.cadence)
        duration_type, duration_value = _duration(step)
        cadence_low, cadence_high = _cadence_bounds(step.cadence)
        records.append(WorkoutStepRecord(
            message_index=len(records),
            name=step.name,
            notes=step.notes,
            intensity=_INTENSITY_MAP.get(step.kind, FitIntensity.ACTIVE),
            duration_type=duration_type,
            duration_value=duration_value,
            target_type=target.type,
            target_value=target.value,
            custom_target_value_low=target.low,
            custom_target_value_high=target.high,
            cadence_low=cadence_low,
            cadence_high=cadence_high,
        ))

    def add_interval_set(interval_set: IntervalSet) -> None:
        first_child = len(records)
        for step in interval_set.steps:
            add_step(step)
        records.append(WorkoutStepRecord(
            message_index=len(records),
            name=interval_set.name or "Intervals",
            intensity=None,
            duration_type=FitDurationType.REPEAT_UNTIL_STEPS_CMPLT,
            duration_value=first_child,
            target_type=FitTargetType.OPEN,
            target_value=interval_set.repeats,
        ))

    for step in structure.warmup:
        add_step(step)
    for item in structure.main:
        if isinstance(item, IntervalSet):
            add_interval_set(item)
        else:
            add_step(item)
    for step in structure.cooldown:
        add_step(step)

    return records


def _duration(step: WorkoutStep) -> tuple[FitDurationType, int]:
    value, unit = step.duration.value, step.duration.unit
    if value <= 0:
        return FitDurationType.OPEN, 0
    if is_time_unit(unit):
        return FitDurationType.TIME, round_half_up(duration_to_seconds(value, unit) * 1000)
    return FitDurationType.DISTANCE, round_half_up(distance_to_meters(value, unit) * 100)


def _cadence_bounds(cadence: CadenceRange | None) -> tuple[int | None, int | None]:
    if cadence is None:
        return None, None
    low = cadence.low if cadence.low is not None else cadence.high
    high = cadence.high if cadence.high is not None else cadence.low
    return low, high


def _cadence_target(cadence: CadenceRange | None) -> _Target:
    low, high = _cadence_bounds(cadence)
    if low is None:
        return _OPEN
    return _Target(type=FitTargetType.CADENCE, low=low, high=high)


def _percent_bounds(step: WorkoutStep) -> tuple[float, float]:
    intensity = step.intensity
    if intensity.has_bounds:
        return intensity.low, intensity.high
    return intensity.value - FIT_TARGET_BAND_PERCENT, intensity.value + FIT_TARGET_BAND_PERCENT


def _power_watts(percent: float, ftp: float) -> int:
    """Offset FIT power value for a %FTP bound, floored at 0 W."""
    return max(round_half_up(fraction_to_watts(intensity_to_fraction(percent), ftp)), 0) + _POWER_WATTS_OFFSET


def _target(step: WorkoutStep, sport: Sport, settings: AthleteSettings) -> _Target:
    """FIT target slot for a structured step's intensity."""
    intensity = step.intensity
    if intensity is None or intensity.unit == IntensityUnit.RPE:
        return _OPEN

    if intensity.unit == IntensityUnit.PERCENT_FTP:
        low, high = _percent_bounds(step)
        if settings.ftp_watts:
            ftp = settings.ftp_watts
            return _Target(
                type=FitTargetType.POWER,
                low=_power_watts(low, ftp),
                high=_power_watts(high, ftp),
            )
        return _Target(
            type=FitTargetType.POWER,
            low=round_half_up(max(low, 0.0)),
            high=round_half_up(high),
        )

    if intensity.unit == IntensityUnit.PERCENT_LTHR:
        lthr = settings.threshold_hr(sport)
        if not lthr:
            logger.warning(
                "No threshold HR for %s; step %r exported with an open target",
                sport.value, step.name,
            )
            return _OPEN
        low, high = _percent_bounds(step)
        return _Target(
            type=FitTargetType.HEART_RATE,
            low=round_half_up(percent_to_bpm(low, lthr)) + _HEART_RATE_BPM_OFFSET,
            high=round_half_up(percent_to_bpm(high, lthr)) + _HEART_RATE_BPM_OFFSET,
        )

    # HR zone: explicit bpm range when the zone table covers the bounds
    if intensity.has_bounds:
        bpm = zone_bpm_range(settings.hr_zones(sport), intensity.low, intensity.high)
        if bpm is not None:
            return _Target(
                type=FitTargetType.HEART_RATE,
                low=bpm[0] + _HEART_RATE_BPM_OFFSET,
                high=bpm[1] + _HEART_RATE_BPM_OFFSET,
            )
    return _Target(type=FitTargetType.HEART_RATE, value=round_half_up(intensity.value))
