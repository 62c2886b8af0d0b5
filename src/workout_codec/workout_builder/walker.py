"""Structure walker — flattens a StructuredWorkout onto a time axis.

Interval sets are expanded block by block: every step of repeat 1 is
emitted before any step of repeat 2. Elapsed minutes accumulate at full
precision so long interval expansions do not drift.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from workout_codec.math.units import duration_to_minutes
from workout_codec.models.enums import Phase, StepKind
from workout_codec.models.structured_workout import (
    IntervalSet,
    StructuredWorkout,
    WorkoutStep,
)


@dataclass(frozen=True)
class TimedStep:
    """One step placed on the workout's elapsed-time axis.

    ``start_value``/``end_value`` are the intensity at the step boundaries,
    in the step's own intensity unit (None if the step has no intensity).
    They differ only for ramps. ``repeat_index`` (0-based) and
    ``set_index`` (position in the main set) are set for interval steps.
    """

    phase: Phase
    start_minutes: float
    end_minutes: float
    step: WorkoutStep
    start_value: float | None = None
    end_value: float | None = None
    repeat_index: int | None = None
    set_index: int | None = None

    @property
    def duration_minutes(self) -> float:
        return self.end_minutes - self.start_minutes

    @property
    def is_ramp(self) -> bool:
        return self.start_value != self.end_value


def step_boundaries(step: WorkoutStep) -> tuple[float | None, float | None]:
    """Intensity at the start and end of *step*.

    Ramps run low → high, except cool-down steps which run high → low.
    """
    intensity = step.intensity
    if intensity is None:
        return None, None
    if not intensity.has_bounds:
        return intensity.value, intensity.value
    if step.kind == StepKind.COOLDOWN:
        return intensity.high, intensity.low
    return intensity.low, intensity.high


def expand_interval_set(interval_set: IntervalSet) -> Iterator[tuple[int, WorkoutStep]]:
    """Yield (repeat_index, step) for ``repeats x len(steps)`` steps in block order."""
    for repeat_index in range(interval_set.repeats):
        for step in interval_set.steps:
            yield repeat_index, step


def iter_main_steps(structure: StructuredWorkout) -> Iterator[WorkoutStep]:
    """Flatten only the main set, expanding interval sets."""
    for item in structure.main:
        if isinstance(item, IntervalSet):
            for _, step in expand_interval_set(item):
                yield step
        else:
            yield item


def walk_structure(
    structure: StructuredWorkout,
    assumed_speed_kmh: float | None = None,
) -> tuple[TimedStep, ...]:
    """Flatten *structure* into time-ordered TimedSteps.

    Args:
        structure: The workout body to walk.
        assumed_speed_kmh: Average speed for distance-based steps. Without
            it, distance steps raise UnsupportedOperationError.

    Returns:
        Warm-up steps, then main items (interval sets expanded), then
        cool-down steps, each with start/end elapsed minutes.
    """
    timeline: list[TimedStep] = []
    elapsed = 0.0

    def emit(
        phase: Phase,
        step: WorkoutStep,
        repeat_index: int | None = None,
        set_index: int | None = None,
    ) -> None:
        nonlocal elapsed
        minutes = duration_to_minutes(
            step.duration.value, step.duration.unit, assumed_speed_kmh,
        )
        start_value, end_value = step_boundaries(step)
        timeline.append(TimedStep(
            phase=phase,
            start_minutes=elapsed,
            end_minutes=elapsed + minutes,
            step=step,
            start_value=start_value,
            end_value=end_value,
            repeat_index=repeat_index,
            set_index=set_index,
        ))
        elapsed += minutes

    for step in structure.warmup:
        emit(Phase.WARMUP, step)

    for set_index, item in enumerate(structure.main):
        if isinstance(item, IntervalSet):
            for repeat_index, step in expand_interval_set(item):
                emit(Phase.MAIN, step, repeat_index, set_index)
        else:
            emit(Phase.MAIN, item)

    for step in structure.cooldown:
        emit(Phase.COOLDOWN, step)

    return tuple(timeline)


def total_minutes(timeline: tuple[TimedStep, ...]) -> float:
    """Elapsed time at the end of *timeline* (0.0 when empty)."""
    if not timeline:
        return 0.0
    return timeline[-1].end_minutes
