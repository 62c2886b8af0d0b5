"""Structured workout models — step-by-step workout decomposition."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from workout_codec.exceptions import InvalidWorkoutError
from workout_codec.models.enums import DurationUnit, IntensityUnit, StepKind


@dataclass(frozen=True)
class Duration:
    """How long a step lasts, in time or distance units."""

    value: float
    unit: DurationUnit = DurationUnit.MINUTES


@dataclass(frozen=True)
class Intensity:
    """Target effort of a step.

    ``value`` is the point target. ``low``/``high`` are optional bounds; when
    both are present and differ, the step is a ramp rather than a steady
    effort. Percent units are stored as percentages (75 means 75%).
    """

    unit: IntensityUnit
    value: float
    low: float | None = None
    high: float | None = None

    @property
    def has_bounds(self) -> bool:
        return self.low is not None and self.high is not None

    @property
    def is_ramp(self) -> bool:
        return self.has_bounds and self.low != self.high


@dataclass(frozen=True)
class CadenceRange:
    """Cadence target in revolutions (or steps) per minute."""

    low: int | None = None
    high: int | None = None


@dataclass(frozen=True)
class WorkoutStep:
    """A single atomic instruction within a structured workout."""

    kind: StepKind
    duration: Duration
    intensity: Intensity | None = None
    cadence: CadenceRange | None = None
    name: str = ""
    notes: str = ""


@dataclass(frozen=True)
class IntervalSet:
    """A block of steps replayed ``repeats`` times in sequence."""

    repeats: int
    steps: tuple[WorkoutStep, ...]
    name: str = ""

    def __post_init__(self) -> None:
        if self.repeats < 1:
            raise InvalidWorkoutError(f"Interval set repeats must be >= 1, got {self.repeats}")
        if not self.steps:
            raise InvalidWorkoutError("Interval set must contain at least one step")


MainItem = Union[WorkoutStep, IntervalSet]


@dataclass(frozen=True)
class StructuredWorkout:
    """Detailed body of a workout: warm-up, main set, cool-down."""

    main: tuple[MainItem, ...]
    warmup: tuple[WorkoutStep, ...] = field(default_factory=tuple)
    cooldown: tuple[WorkoutStep, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.main:
            raise InvalidWorkoutError("Structured workout main set must not be empty")
