"""Intensity translation between heart-rate zones, RPE and power.

Power-only formats (ZWO, ERG/MRC) need every step as a percentage of FTP.
Heart-rate zones map to the midpoint of the matching Coggan power zone;
RPE maps linearly onto the same scale. %LTHR passes through unchanged,
since threshold heart rate and threshold power anchor the same effort.

Reference: Coggan & Allen (2010), Training and Racing with a Power Meter.
"""

from __future__ import annotations

from workout_codec.models.enums import DEFAULT_STEP_PERCENT, IntensityUnit
from workout_codec.models.settings import HrZone
from workout_codec.models.structured_workout import Intensity

# Coggan power zone midpoints (%FTP) for HR zones 1-5
HR_ZONE_POWER_PERCENT = {
    1: 50.0,
    2: 65.0,
    3: 83.0,
    4: 98.0,
    5: 113.0,
}

# RPE 1-10 → %FTP
RPE_POWER_PERCENT = {
    1: 40.0,
    2: 50.0,
    3: 60.0,
    4: 70.0,
    5: 80.0,
    6: 90.0,
    7: 100.0,
    8: 110.0,
    9: 120.0,
    10: 130.0,
}


def _interpolate(table: dict[int, float], key: float) -> float:
    """Linear interpolation over an integer-keyed table, clamped at the ends."""
    keys = sorted(table)
    if key <= keys[0]:
        return table[keys[0]]
    if key >= keys[-1]:
        return table[keys[-1]]
    lower = int(key)
    upper = lower + 1
    weight = key - lower
    return table[lower] + (table[upper] - table[lower]) * weight


def to_power_percent(unit: IntensityUnit, value: float) -> float:
    """Translate one intensity value into a percentage of FTP.

    Example: (HR_ZONE, 2) → 65.0; (RPE, 7) → 100.0; (PERCENT_FTP, 88) → 88.0
    """
    if unit == IntensityUnit.HR_ZONE:
        return _interpolate(HR_ZONE_POWER_PERCENT, value)
    if unit == IntensityUnit.RPE:
        return _interpolate(RPE_POWER_PERCENT, value)
    return value


def step_power_percent(intensity: Intensity | None) -> float:
    """Point target of a step as %FTP; steps without intensity get 50%."""
    if intensity is None:
        return DEFAULT_STEP_PERCENT
    return to_power_percent(intensity.unit, intensity.value)


def zone_bpm_range(
    zones: tuple[HrZone, ...],
    low_zone: float,
    high_zone: float,
) -> tuple[int, int] | None:
    """BPM bounds spanning zones *low_zone* to *high_zone* inclusive.

    Returns None when either zone is missing from the athlete's table.
    """
    by_number = {z.zone: z for z in zones}
    low = by_number.get(int(low_zone))
    high = by_number.get(int(high_zone))
    if low is None or high is None:
        return None
    return low.low, high.high
