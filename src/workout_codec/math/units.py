"""Unit normalization for step durations and intensities.

Time units convert exactly. Distance units only reach a time axis through
an assumed average speed (elapsed = distance / speed), a modeled
approximation used by the formats that need elapsed time (ZWO, ERG/MRC).

All functions keep full float precision; rounding is left to the encoders.
"""

from __future__ import annotations

from workout_codec.exceptions import UnsupportedOperationError
from workout_codec.models.enums import METERS_PER_UNIT, SECONDS_PER_UNIT, DurationUnit


def is_time_unit(unit: DurationUnit) -> bool:
    return unit in SECONDS_PER_UNIT


def is_distance_unit(unit: DurationUnit) -> bool:
    return unit in METERS_PER_UNIT


def distance_to_meters(value: float, unit: DurationUnit) -> float:
    """Convert a distance duration to meters.

    Raises:
        UnsupportedOperationError: If *unit* is a time unit.
    """
    if not is_distance_unit(unit):
        raise UnsupportedOperationError(f"{unit.value} is not a distance unit")
    return value * METERS_PER_UNIT[unit]


def duration_to_seconds(
    value: float,
    unit: DurationUnit,
    assumed_speed_kmh: float | None = None,
) -> float:
    """Convert a (value, unit) duration to seconds.

    Example: (10, MINUTES) → 600.0; (15, KILOMETERS) at 30 km/h → 1800.0

    Args:
        value: Duration magnitude.
        unit: Time or distance unit.
        assumed_speed_kmh: Average speed used for distance units.

    Raises:
        UnsupportedOperationError: Distance unit without an assumed speed.
    """
    if is_time_unit(unit):
        return value * SECONDS_PER_UNIT[unit]
    if assumed_speed_kmh is None or assumed_speed_kmh <= 0:
        raise UnsupportedOperationError(
            f"Cannot convert {unit.value} to time without an assumed speed"
        )
    meters = distance_to_meters(value, unit)
    return meters / (assumed_speed_kmh * 1000.0 / 3600.0)


def duration_to_minutes(
    value: float,
    unit: DurationUnit,
    assumed_speed_kmh: float | None = None,
) -> float:
    """Convert a (value, unit) duration to minutes. See duration_to_seconds."""
    return duration_to_seconds(value, unit, assumed_speed_kmh) / 60.0


def intensity_to_fraction(value: float) -> float:
    """Convert a percent intensity to a decimal fraction (75 → 0.75).

    Supra-threshold values stay above 1.0.
    """
    return value / 100.0


def fraction_to_watts(fraction: float, ftp_watts: float) -> float:
    """Absolute power for a fraction of FTP (0.75 at 280 W → 210.0)."""
    return fraction * ftp_watts


def percent_to_bpm(percent: float, lthr_bpm: float) -> float:
    """Absolute heart rate for a percentage of LTHR (90 at 170 → 153.0)."""
    return percent / 100.0 * lthr_bpm


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (12.5 → 13, not 12)."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)
