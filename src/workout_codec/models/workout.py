"""Planned workout — one training session as supplied by the plan."""

from __future__ import annotations

from dataclasses import dataclass

from workout_codec.models.enums import Sport, WorkoutType
from workout_codec.models.structured_workout import StructuredWorkout


@dataclass(frozen=True)
class Workout:
    """A single planned session.

    ``structure`` is optional; without it, exporters synthesize a
    warm-up / main / cool-down profile from ``duration_minutes`` and ``type``.
    """

    id: str
    sport: Sport
    type: WorkoutType
    name: str
    description: str = ""
    duration_minutes: float | None = None
    distance_meters: float | None = None
    structure: StructuredWorkout | None = None
    primary_zone: str = ""
    human_readable: str = ""
    completed: bool = False
