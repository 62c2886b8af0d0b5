"""Training plan models: the multi-week container the calendar export walks."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterator

from workout_codec.models.workout import Workout


@dataclass(frozen=True)
class TrainingDay:
    """A calendar day and the workouts scheduled on it."""

    date: date
    workouts: tuple[Workout, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PlanWeek:
    """One week of the plan."""

    week_number: int
    days: tuple[TrainingDay, ...] = field(default_factory=tuple)
    phase: str = ""
    focus: str = ""


@dataclass(frozen=True)
class PlanMeta:
    """Plan identity and the target event it builds towards."""

    id: str
    event: str
    event_date: date | None = None
    athlete: str = ""


@dataclass(frozen=True)
class TrainingPlan:
    """Frozen multi-week training plan.

    Weeks and days are kept in the order the plan supplies them; exporters
    rely on that order for deterministic output.
    """

    meta: PlanMeta
    weeks: tuple[PlanWeek, ...] = field(default_factory=tuple)

    # -- Query helpers ----------------------------------------------------

    def iter_workouts(self) -> Iterator[tuple[TrainingDay, Workout]]:
        """Yield every (day, workout) pair in plan order."""
        for week in self.weeks:
            for day in week.days:
                for workout in day.workouts:
                    yield day, workout

    def find_workout(self, workout_id: str) -> Workout | None:
        """Return the first workout with *workout_id*, or None."""
        for _, workout in self.iter_workouts():
            if workout.id == workout_id:
                return workout
        return None

    @property
    def workout_count(self) -> int:
        return sum(1 for _ in self.iter_workouts())
