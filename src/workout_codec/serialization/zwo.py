"""Zwift workout (ZWO) XML serialization.

Converts a Workout into the ``<workout_file>`` XML Zwift imports from
``Documents/Zwift/Workouts/<userID>/``. Bike and run only.

Power values are decimal fractions of FTP with two decimals; durations are
whole seconds. Distance-based steps are timed with the athlete's assumed
speed for the sport.

All functions are pure (no I/O).
"""

from __future__ import annotations

import logging

from workout_codec.exceptions import UnsupportedSportError
from workout_codec.math.units import duration_to_seconds, intensity_to_fraction, round_half_up
from workout_codec.math.zones import step_power_percent, to_power_percent
from workout_codec.models.artifact import EncodedArtifact
from workout_codec.models.enums import EXPORT_AUTHOR, ExportFormat, Sport, StepKind
from workout_codec.models.settings import AthleteSettings
from workout_codec.models.structured_workout import (
    CadenceRange,
    IntervalSet,
    StructuredWorkout,
    WorkoutStep,
)
from workout_codec.models.workout import Workout
from workout_codec.workout_builder.description_builder import build_file_description
from workout_codec.workout_builder.simple_profile import structure_for
from workout_codec.workout_builder.walker import expand_interval_set, step_boundaries

logger = logging.getLogger(__name__)

ZWO_MEDIA_TYPE = "application/xml"

_SUPPORTED_SPORTS = frozenset({Sport.BIKE, Sport.RUN})

# Warm-up / cool-down steps given as a single value still ramp
_WARMUP_START_SCALE = 0.6
_COOLDOWN_END_SCALE = 0.5

_INDENT = "    "


def is_zwo_supported(sport: Sport) -> bool:
    """Zwift only runs bike and run workouts."""
    return sport in _SUPPORTED_SPORTS


def escape_xml(text: str) -> str:
    """Escape the five predefined XML entities."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def generate_zwo(workout: Workout, settings: AthleteSettings) -> str:
    """Render *workout* as a ZWO document.

    Raises:
        UnsupportedSportError: If the sport is not bike or run.
    """
    if not is_zwo_supported(workout.sport):
        raise UnsupportedSportError(
            workout.sport.value, ExportFormat.ZWO.value,
            f"ZWO export not supported for {workout.sport.value} workouts",
        )

    speed = settings.speed_kmh(workout.sport)
    segments = _segments(structure_for(workout), speed)
    sport_type = "run" if workout.sport == Sport.RUN else "bike"

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        "<workout_file>",
        f"  <author>{escape_xml(EXPORT_AUTHOR)}</author>",
        f"  <name>{escape_xml(workout.name)}</name>",
        f"  <description>{escape_xml(build_file_description(workout))}</description>",
        f"  <sportType>{sport_type}</sportType>",
        "  <workout>",
        *segments,
        "  </workout>",
        "</workout_file>",
    ]
    return "\n".join(lines)


def encode_zwo(workout: Workout, settings: AthleteSettings, filename: str) -> EncodedArtifact:
    """Wrap generate_zwo output as an artifact named *filename*."""
    return EncodedArtifact(
        filename=filename,
        content=generate_zwo(workout, settings),
        media_type=ZWO_MEDIA_TYPE,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _segments(structure: StructuredWorkout, speed_kmh: float) -> list[str]:
    """One indented element per warm-up step, main item and cool-down step."""
    segments = [_step_element(step, speed_kmh) for step in structure.warmup]

    for item in structure.main:
        if isinstance(item, IntervalSet):
            segments.extend(_interval_set_elements(item, speed_kmh))
        else:
            segments.append(_step_element(item, speed_kmh))

    segments.extend(_step_element(step, speed_kmh) for step in structure.cooldown)
    return segments


def _seconds(step: WorkoutStep, speed_kmh: float) -> int:
    return round_half_up(duration_to_seconds(step.duration.value, step.duration.unit, speed_kmh))


def _power(percent: float) -> str:
    return f"{intensity_to_fraction(percent):.2f}"


def _cadence_attrs(cadence: CadenceRange | None) -> str:
    if cadence is None or (cadence.low is None and cadence.high is None):
        return ""
    low = cadence.low if cadence.low is not None else cadence.high
    high = cadence.high if cadence.high is not None else cadence.low
    if low == high:
        return f' Cadence="{low}"'
    return f' CadenceLow="{low}" CadenceHigh="{high}"'


def _boundary_percents(step: WorkoutStep) -> tuple[float, float]:
    """Start/end power of *step* as %FTP."""
    if step.intensity is None:
        point = step_power_percent(None)
        start, end = point, point
    else:
        unit = step.intensity.unit
        start_value, end_value = step_boundaries(step)
        start = to_power_percent(unit, start_value)
        end = to_power_percent(unit, end_value)

    if start == end and step.kind == StepKind.WARMUP:
        start = end * _WARMUP_START_SCALE
    elif start == end and step.kind == StepKind.COOLDOWN:
        end = start * _COOLDOWN_END_SCALE
    return start, end


def _step_element(step: WorkoutStep, speed_kmh: float) -> str:
    """Pick the ZWO primitive for a single step.

    Warm-up and cool-down kinds map to their own ramp elements, with
    PowerLow as the starting power and PowerHigh as the ending power.
    Other ramps become ``<Ramp>``, everything else ``<SteadyState>``.
    """
    duration = _seconds(step, speed_kmh)
    start, end = _boundary_percents(step)
    cadence = _cadence_attrs(step.cadence)

    if step.kind == StepKind.WARMUP:
        tag = "Warmup"
    elif step.kind == StepKind.COOLDOWN:
        tag = "Cooldown"
    elif start != end:
        tag = "Ramp"
    else:
        return f'{_INDENT}<SteadyState Duration="{duration}" Power="{_power(start)}"{cadence}/>'

    return (
        f'{_INDENT}<{tag} Duration="{duration}" '
        f'PowerLow="{_power(start)}" PowerHigh="{_power(end)}"{cadence}/>'
    )


def _is_on_off_pair(interval_set: IntervalSet) -> bool:
    """True when the set is exactly one steady work step then one steady recovery."""
    if len(interval_set.steps) != 2:
        return False
    work, recovery = interval_set.steps
    if work.kind != StepKind.WORK:
        return False
    if recovery.kind not in (StepKind.RECOVERY, StepKind.REST):
        return False
    return not any(s.intensity is not None and s.intensity.is_ramp for s in interval_set.steps)


def _interval_set_elements(interval_set: IntervalSet, speed_kmh: float) -> list[str]:
    """``<IntervalsT>`` for on/off sets, expanded step elements otherwise."""
    if not _is_on_off_pair(interval_set):
        logger.debug(
            "Interval set %r is not a work/recovery pair; expanding %d repeats",
            interval_set.name, interval_set.repeats,
        )
        return [_step_element(step, speed_kmh) for _, step in expand_interval_set(interval_set)]

    work, recovery = interval_set.steps
    attrs = (
        f'Repeat="{interval_set.repeats}" '
        f'OnDuration="{_seconds(work, speed_kmh)}" '
        f'OffDuration="{_seconds(recovery, speed_kmh)}" '
        f'OnPower="{_power(step_power_percent(work.intensity))}" '
        f'OffPower="{_power(step_power_percent(recovery.intensity))}"'
    )
    if work.cadence is not None and work.cadence.low is not None:
        attrs += f' Cadence="{work.cadence.low}"'
    if recovery.cadence is not None and recovery.cadence.low is not None:
        attrs += f' CadenceResting="{recovery.cadence.low}"'
    return [f"{_INDENT}<IntervalsT {attrs}/>"]
