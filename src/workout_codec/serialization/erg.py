"""ERG / MRC course-file serialization for indoor trainers.

Both formats share one header block and a list of (minutes, value)
breakpoints. MRC values are percent of FTP and scale to whoever rides the
file; ERG values are absolute watts for one FTP. Bike only.

Breakpoints come from the walker's timeline: a ramp contributes its start
and end intensity, a steady step the same value at both ends, so adjacent
steps share a timestamp and the trainer sees a step change.
"""

from __future__ import annotations

import logging

from workout_codec.exceptions import UnsupportedSportError
from workout_codec.math.units import fraction_to_watts, intensity_to_fraction, round_half_up
from workout_codec.math.zones import step_power_percent, to_power_percent
from workout_codec.models.artifact import EncodedArtifact
from workout_codec.models.enums import DEFAULT_FTP_WATTS, ExportFormat, Sport
from workout_codec.models.settings import AthleteSettings
from workout_codec.models.workout import Workout
from workout_codec.workout_builder.simple_profile import structure_for
from workout_codec.workout_builder.walker import TimedStep, walk_structure

logger = logging.getLogger(__name__)

ERG_MEDIA_TYPE = "text/plain"

DataPoint = tuple[float, float]


def is_erg_supported(sport: Sport) -> bool:
    """Trainer course files only make sense for cycling."""
    return sport == Sport.BIKE


def _check_sport(workout: Workout, fmt: ExportFormat) -> None:
    if not is_erg_supported(workout.sport):
        raise UnsupportedSportError(
            workout.sport.value, fmt.value,
            "ERG/MRC export only supports bike workouts",
        )


def _boundary_percents(timed: TimedStep) -> tuple[float, float]:
    intensity = timed.step.intensity
    if intensity is None:
        point = step_power_percent(None)
        return point, point
    return (
        to_power_percent(intensity.unit, timed.start_value),
        to_power_percent(intensity.unit, timed.end_value),
    )


def generate_data_points(workout: Workout, settings: AthleteSettings) -> list[DataPoint]:
    """(elapsed minutes, %FTP) breakpoints for *workout*.

    Two points per flattened step, at its start and end. Unstructured
    workouts go through the simple-workout synthesizer first.

    Raises:
        UnsupportedSportError: If the workout is not a bike workout.
    """
    _check_sport(workout, ExportFormat.MRC)
    timeline = walk_structure(structure_for(workout), settings.speed_kmh(workout.sport))

    points: list[DataPoint] = []
    for timed in timeline:
        start, end = _boundary_percents(timed)
        points.append((timed.start_minutes, start))
        points.append((timed.end_minutes, end))
    return points


def _header(workout: Workout, columns: str, ftp: int | None = None) -> list[str]:
    description = workout.name
    if workout.description:
        description += f" - {workout.description}"
    description = description.replace("\r", " ").replace("\n", " ")

    lines = [
        "[COURSE HEADER]",
        "VERSION = 2",
        "UNITS = ENGLISH",
        f"DESCRIPTION = {description}",
        f"FILE NAME = {workout.name}",
    ]
    if ftp is not None:
        lines.append(f"FTP = {ftp}")
    lines.append(columns)
    lines.append("[END COURSE HEADER]")
    return lines


def _course(header: list[str], rows: list[tuple[float, int]]) -> str:
    lines = [*header, "[COURSE DATA]"]
    lines.extend(f"{minutes:.2f}\t{value}" for minutes, value in rows)
    lines.append("[END COURSE DATA]")
    return "\n".join(lines)


def generate_mrc(workout: Workout, settings: AthleteSettings) -> str:
    """Percent-of-FTP course file."""
    _check_sport(workout, ExportFormat.MRC)
    points = generate_data_points(workout, settings)
    rows = [(minutes, round_half_up(percent)) for minutes, percent in points]
    return _course(_header(workout, "MINUTES PERCENT"), rows)


def generate_erg(workout: Workout, settings: AthleteSettings) -> str:
    """Absolute-watts course file at the athlete's FTP.

    Falls back to DEFAULT_FTP_WATTS when the athlete has no FTP set.
    """
    _check_sport(workout, ExportFormat.ERG)
    ftp = settings.ftp_watts
    if not ftp:
        logger.warning(
            "No FTP set for %r; ERG export assumes %d W", workout.name, DEFAULT_FTP_WATTS,
        )
        ftp = DEFAULT_FTP_WATTS

    points = generate_data_points(workout, settings)
    rows = [
        (minutes, round_half_up(fraction_to_watts(intensity_to_fraction(percent), ftp)))
        for minutes, percent in points
    ]
    return _course(_header(workout, "MINUTES WATTS", ftp=ftp), rows)


def encode_mrc(workout: Workout, settings: AthleteSettings, filename: str) -> EncodedArtifact:
    return EncodedArtifact(
        filename=filename,
        content=generate_mrc(workout, settings),
        media_type=ERG_MEDIA_TYPE,
    )


def encode_erg(workout: Workout, settings: AthleteSettings, filename: str) -> EncodedArtifact:
    return EncodedArtifact(
        filename=filename,
        content=generate_erg(workout, settings),
        media_type=ERG_MEDIA_TYPE,
    )
