"""Description builder — human-readable text for calendar events and files.

Produces event summaries (sport icon, sport label, workout name) and
multi-line event descriptions. Output is plain text; format-specific
escaping belongs to the encoders.
"""

from __future__ import annotations

from workout_codec.models.enums import Sport
from workout_codec.models.workout import Workout

_SPORT_ICONS: dict[Sport, str] = {
    Sport.SWIM: "\U0001F3CA",
    Sport.BIKE: "\U0001F6B4",
    Sport.RUN: "\U0001F3C3",
    Sport.STRENGTH: "\U0001F4AA",
    Sport.BRICK: "\U0001F525",
    Sport.RACE: "\U0001F3C6",
    Sport.REST: "\U0001F6CC",
}

RACE_DAY_ICON = _SPORT_ICONS[Sport.RACE]


def format_duration(minutes: float | None) -> str:
    """Convert minutes to a short human string. e.g. 90 -> '1h 30m', 0 -> ''."""
    if not minutes:
        return ""
    total = int(round(minutes))
    h = total // 60
    m = total % 60
    if h > 0:
        return f"{h}h {m}m" if m > 0 else f"{h}h"
    return f"{m}m"


def sport_icon(sport: Sport) -> str:
    return _SPORT_ICONS.get(sport, "")


def normalize_line_endings(text: str) -> str:
    """Turn CRLF and lone CR into LF. Backslashes are left alone."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def normalize_newlines(text: str) -> str:
    """Turn CRLF/CR and literal backslash-n sequences into real newlines.

    Plans store ``humanReadable`` with escaped ``\\n`` markers. Only use
    this on that field; free text may contain real backslashes.
    """
    return normalize_line_endings(text).replace("\\n", "\n")


def build_event_summary(workout: Workout) -> str:
    """Summary line: icon, capitalized sport, workout name."""
    label = workout.sport.value.capitalize()
    return f"{sport_icon(workout.sport)} {label}: {workout.name}"


def build_event_description(workout: Workout) -> str:
    """Multi-line description with duration, target zone and structure."""
    sections: list[str] = []
    if workout.description:
        sections.append(normalize_line_endings(workout.description))

    details: list[str] = []
    duration = format_duration(workout.duration_minutes)
    if duration:
        details.append(f"Duration: {duration}")
    if workout.primary_zone:
        details.append(f"Target Zone: {workout.primary_zone}")
    if details:
        sections.append("\n".join(details))

    if workout.human_readable:
        sections.append("Workout Structure:\n" + normalize_newlines(workout.human_readable))

    return "\n\n".join(sections).strip()


def build_file_description(workout: Workout) -> str:
    """Description embedded in workout files: description plus structure text."""
    text = workout.description or ""
    if workout.human_readable:
        text += "\n\n" + normalize_newlines(workout.human_readable)
    return text
