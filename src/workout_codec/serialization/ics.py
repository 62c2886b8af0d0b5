"""iCalendar (RFC 5545) serialization of a whole training plan.

Every workout becomes an all-day, free (TRANSPARENT) event on its day; the
target event date gets one busy (OPAQUE) race-day event. Text values are
escaped once, after the plain text is assembled, and every content line is
folded to 75 octets.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from workout_codec.models.artifact import EncodedArtifact
from workout_codec.models.enums import ICS_PRODID, ICS_UID_DOMAIN, Sport
from workout_codec.models.training_plan import TrainingDay, TrainingPlan
from workout_codec.models.workout import Workout
from workout_codec.workout_builder.description_builder import (
    RACE_DAY_ICON,
    build_event_description,
    build_event_summary,
)

ICS_MEDIA_TYPE = "text/calendar"

MAX_LINE_OCTETS = 75
CRLF = "\r\n"

_ESCAPES = {"\\": "\\", ";": ";", ",": ",", "n": "\n", "N": "\n"}


def escape_text(text: str) -> str:
    """Escape a TEXT value: backslash, semicolon, comma and newline.

    CRLF and lone CR are normalized to a single newline first.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return (
        text.replace("\\", "\\\\")
        .replace(";", "\\;")
        .replace(",", "\\,")
        .replace("\n", "\\n")
    )


def unescape_text(text: str) -> str:
    """Inverse of escape_text, as a compliant calendar client reads it."""
    out: list[str] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text) and text[i + 1] in _ESCAPES:
            out.append(_ESCAPES[text[i + 1]])
            i += 2
        else:
            out.append(char)
            i += 1
    return "".join(out)


def _fold_units(line: str) -> list[str]:
    """Split *line* into indivisible pieces: escape pairs or single characters."""
    units: list[str] = []
    i = 0
    while i < len(line):
        if line[i] == "\\" and i + 1 < len(line):
            units.append(line[i:i + 2])
            i += 2
        else:
            units.append(line[i])
            i += 1
    return units


def fold_line(line: str) -> str:
    """Fold a content line so no physical line exceeds 75 octets.

    Continuation lines start with a single space, which counts towards
    their 75 octets. Multi-byte characters and backslash escapes are never
    split across lines.
    """
    if len(line.encode("utf-8")) <= MAX_LINE_OCTETS:
        return line

    physical: list[str] = []
    current = ""
    size = 0
    for unit in _fold_units(line):
        unit_size = len(unit.encode("utf-8"))
        if size + unit_size > MAX_LINE_OCTETS:
            physical.append(current)
            current = " "
            size = 1
        current += unit
        size += unit_size
    physical.append(current)
    return CRLF.join(physical)


def _ics_date(day: date) -> str:
    return day.strftime("%Y%m%d")


def _ics_timestamp(moment: datetime) -> str:
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y%m%dT%H%M%SZ")


def _all_day_event(
    uid: str,
    stamp: str,
    day: date,
    summary: str,
    description: str,
    categories: list[str],
    transparency: str,
) -> list[str]:
    return [
        "BEGIN:VEVENT",
        f"UID:{uid}",
        f"DTSTAMP:{stamp}",
        f"DTSTART;VALUE=DATE:{_ics_date(day)}",
        # DTEND is exclusive for all-day events
        f"DTEND;VALUE=DATE:{_ics_date(day + timedelta(days=1))}",
        f"SUMMARY:{escape_text(summary)}",
        f"DESCRIPTION:{escape_text(description)}",
        "CATEGORIES:" + ",".join(escape_text(c) for c in categories if c),
        f"TRANSP:{transparency}",
        "END:VEVENT",
    ]


def _workout_event(workout: Workout, day: TrainingDay, event_name: str, stamp: str) -> list[str]:
    return _all_day_event(
        uid=f"{workout.id}-{day.date.isoformat()}@{ICS_UID_DOMAIN}",
        stamp=stamp,
        day=day.date,
        summary=build_event_summary(workout),
        description=build_event_description(workout),
        categories=[workout.sport.value, workout.type.value, event_name],
        transparency="TRANSPARENT",
    )


def _race_day_event(plan: TrainingPlan, event_name: str, stamp: str) -> list[str]:
    event_date = plan.meta.event_date
    return _all_day_event(
        uid=f"{plan.meta.id}-race-day-{event_date.isoformat()}@{ICS_UID_DOMAIN}",
        stamp=stamp,
        day=event_date,
        summary=f"{RACE_DAY_ICON} RACE DAY: {event_name}",
        description=f"Race day for {event_name}!",
        categories=["race", event_name],
        transparency="OPAQUE",
    )


def _is_calendar_entry(workout: Workout) -> bool:
    # Unnamed rest entries are placeholders, not events
    return not (workout.sport == Sport.REST and not workout.name)


def generate_ics(plan: TrainingPlan, generated_at: datetime | None = None) -> str:
    """Render *plan* as an iCalendar document with CRLF line endings.

    Args:
        plan: The plan to export; weeks and days are emitted in plan order.
        generated_at: DTSTAMP for every event (defaults to now, UTC).
    """
    stamp = _ics_timestamp(generated_at or datetime.now(timezone.utc))
    event_name = plan.meta.event or "Training Plan"
    event_date = plan.meta.event_date.isoformat() if plan.meta.event_date else ""

    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{ICS_PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"X-WR-CALNAME:{escape_text(event_name)} Training",
        f"X-WR-CALDESC:{escape_text(f'Training plan for {event_name} on {event_date}')}",
    ]

    for day, workout in plan.iter_workouts():
        if _is_calendar_entry(workout):
            lines.extend(_workout_event(workout, day, event_name, stamp))

    if plan.meta.event_date is not None:
        lines.extend(_race_day_event(plan, event_name, stamp))

    lines.append("END:VCALENDAR")
    return CRLF.join(fold_line(line) for line in lines) + CRLF


def encode_ics(plan: TrainingPlan, filename: str, generated_at: datetime | None = None) -> EncodedArtifact:
    return EncodedArtifact(
        filename=filename,
        content=generate_ics(plan, generated_at=generated_at),
        media_type=ICS_MEDIA_TYPE,
    )
