"""Power-profile frames for previewing a workout before export.

Turns the walker's timeline into a pandas DataFrame of breakpoints
(elapsed minutes vs %FTP), the same shape the ERG/MRC encoders write, plus
a couple of time-weighted summaries used by the download page.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from workout_codec.math.zones import step_power_percent, to_power_percent
from workout_codec.workout_builder.walker import TimedStep

PROFILE_COLUMNS = ["minute", "percent_ftp", "phase", "kind", "step"]


def _step_percents(timed: TimedStep) -> tuple[float, float]:
    intensity = timed.step.intensity
    if intensity is None:
        point = step_power_percent(None)
        return point, point
    return (
        to_power_percent(intensity.unit, timed.start_value),
        to_power_percent(intensity.unit, timed.end_value),
    )


def power_profile(timeline: tuple[TimedStep, ...]) -> pd.DataFrame:
    """Two rows per step (start and end) with the target as %FTP.

    Args:
        timeline: Output of walk_structure.

    Returns:
        DataFrame with columns minute, percent_ftp, phase, kind, step.
        Empty (with those columns) for an empty timeline.
    """
    rows = []
    for timed in timeline:
        start, end = _step_percents(timed)
        label = timed.step.name or timed.step.kind.value
        rows.append((timed.start_minutes, start, timed.phase.value, timed.step.kind.value, label))
        rows.append((timed.end_minutes, end, timed.phase.value, timed.step.kind.value, label))
    frame = pd.DataFrame(rows, columns=PROFILE_COLUMNS)
    return frame.astype({"minute": np.float64, "percent_ftp": np.float64})


def average_intensity(timeline: tuple[TimedStep, ...]) -> float:
    """Time-weighted mean target as %FTP (ramps count at their midpoint).

    Returns 0.0 for an empty or zero-length timeline.
    """
    if not timeline:
        return 0.0
    durations = np.array([t.duration_minutes for t in timeline], dtype=np.float64)
    total = float(np.sum(durations))
    if total <= 0:
        return 0.0
    midpoints = np.array([np.mean(_step_percents(t)) for t in timeline], dtype=np.float64)
    return float(np.sum(durations * midpoints) / total)


def minutes_by_phase(timeline: tuple[TimedStep, ...]) -> pd.Series:
    """Total minutes spent in each phase, indexed by phase name."""
    if not timeline:
        return pd.Series(dtype=np.float64)
    frame = pd.DataFrame(
        {
            "phase": [t.phase.value for t in timeline],
            "minutes": [t.duration_minutes for t in timeline],
        }
    )
    return frame.groupby("phase", sort=False)["minutes"].sum()
