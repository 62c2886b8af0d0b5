"""Utility helpers bridging the Streamlit UI and the workout codec.

Pure functions for formatting steps, building preview tables and
parsing uploaded plan / settings documents.
"""

from __future__ import annotations

import dataclasses
import json
from typing import Any, Optional

import pandas as pd

from workout_codec.models.enums import IntensityUnit, StepKind
from workout_codec.models.settings import AthleteSettings
from workout_codec.models.structured_workout import Intensity
from workout_codec.models.training_plan import TrainingPlan
from workout_codec.serialization.plan_json import plan_from_dict, settings_from_dict
from workout_codec.workout_builder.description_builder import format_duration
from workout_codec.workout_builder.walker import TimedStep

# ---------------------------------------------------------------------------
# Color maps
# ---------------------------------------------------------------------------

STEP_COLORS: dict[StepKind, str] = {
    StepKind.WARMUP: "#FF8C00",     # orange
    StepKind.COOLDOWN: "#4A90D9",   # blue
    StepKind.WORK: "#E74C3C",       # red
    StepKind.ACTIVE: "#2ECC71",     # green
    StepKind.RECOVERY: "#AED6F1",   # pastel blue
    StepKind.REST: "#D5DBDB",       # grey
}

FORMAT_LABELS: dict[str, str] = {
    "zwo": "Zwift (.zwo)",
    "fit": "Garmin (.fit)",
    "mrc": "Trainer % FTP (.mrc)",
    "erg": "Trainer watts (.erg)",
}

_UNIT_SUFFIX: dict[IntensityUnit, str] = {
    IntensityUnit.PERCENT_FTP: "% FTP",
    IntensityUnit.PERCENT_LTHR: "% LTHR",
}


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_intensity(intensity: Optional[Intensity]) -> str:
    """Human label for a step target. e.g. ramp 40-65 -> '40-65% FTP', zone 2 -> 'Z2'."""
    if intensity is None:
        return "--"
    if intensity.unit == IntensityUnit.HR_ZONE:
        if intensity.is_ramp:
            return f"Z{intensity.low:g}-Z{intensity.high:g}"
        return f"Z{intensity.value:g}"
    if intensity.unit == IntensityUnit.RPE:
        return f"RPE {intensity.value:g}"
    suffix = _UNIT_SUFFIX[intensity.unit]
    if intensity.is_ramp:
        return f"{intensity.low:g}-{intensity.high:g}{suffix}"
    return f"{intensity.value:g}{suffix}"


def steps_table(timeline: tuple[TimedStep, ...]) -> pd.DataFrame:
    """One row per flattened step for ``st.dataframe``."""
    rows = []
    for timed in timeline:
        rows.append({
            "Start": format_duration(timed.start_minutes) or "0m",
            "Step": timed.step.name or timed.step.kind.value.title(),
            "Kind": timed.step.kind.value,
            "Duration": format_duration(timed.duration_minutes) or f"{timed.duration_minutes * 60:.0f}s",
            "Target": format_intensity(timed.step.intensity),
            "Repeat": "" if timed.repeat_index is None else str(timed.repeat_index + 1),
        })
    return pd.DataFrame(rows, columns=["Start", "Step", "Kind", "Duration", "Target", "Repeat"])


# ---------------------------------------------------------------------------
# Uploaded documents
# ---------------------------------------------------------------------------


def parse_plan(raw: bytes) -> TrainingPlan:
    """Parse an uploaded plan JSON document."""
    return plan_from_dict(json.loads(raw.decode("utf-8")))


def parse_settings(raw: Optional[bytes]) -> AthleteSettings:
    """Parse an uploaded settings document; no upload means defaults."""
    if not raw:
        return AthleteSettings()
    return settings_from_dict(json.loads(raw.decode("utf-8")))


def settings_with_overrides(
    settings: AthleteSettings,
    ftp_watts: Optional[int],
    bike_lthr: Optional[int],
    run_lthr: Optional[int],
) -> AthleteSettings:
    """Copy of *settings* with sidebar values applied (0 or None keeps the file value)."""
    overrides: dict[str, Any] = {}
    if ftp_watts:
        overrides["ftp_watts"] = ftp_watts
    if bike_lthr:
        overrides["bike_lthr_bpm"] = bike_lthr
    if run_lthr:
        overrides["run_lthr_bpm"] = run_lthr
    if not overrides:
        return settings
    return dataclasses.replace(settings, **overrides)
