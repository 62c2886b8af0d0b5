"""Simple-workout synthesizer — three-phase profile for unstructured workouts.

Used whenever a workout carries only a total duration and a type. The
profile is a regular StructuredWorkout so every encoder takes the same
path for structured and unstructured sessions.
"""

from __future__ import annotations

from dataclasses import dataclass

from workout_codec.exceptions import InvalidWorkoutError
from workout_codec.math.units import round_half_up
from workout_codec.models.enums import (
    COOLDOWN_END_FRACTION,
    COOLDOWN_FRACTION,
    COOLDOWN_MAX_MINUTES,
    COOLDOWN_MIN_MINUTES,
    COOLDOWN_START_FRACTION,
    DEFAULT_MAIN_INTENSITY,
    DEFAULT_WORKOUT_MINUTES,
    MAIN_INTENSITY_BY_TYPE,
    WARMUP_END_FRACTION,
    WARMUP_FRACTION,
    WARMUP_MAX_MINUTES,
    WARMUP_MIN_MINUTES,
    WARMUP_START_FRACTION,
    DurationUnit,
    IntensityUnit,
    StepKind,
    WorkoutType,
)
from workout_codec.models.structured_workout import (
    Duration,
    Intensity,
    StructuredWorkout,
    WorkoutStep,
)
from workout_codec.models.workout import Workout


@dataclass(frozen=True)
class PhaseSplit:
    """Minutes allotted to each phase of a synthesized workout."""

    warmup_min: float
    main_min: float
    cooldown_min: float

    @property
    def total_min(self) -> float:
        return self.warmup_min + self.main_min + self.cooldown_min


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def split_phases(total_minutes: float | None) -> PhaseSplit:
    """Split a total duration into warm-up, main and cool-down minutes.

    Algorithm:
    1. Missing or zero total → DEFAULT_WORKOUT_MINUTES
    2. warm-up = clamp(round(10% total), 5, 15)
    3. cool-down = clamp(round(10% total), 5, 10)
    4. main = total - warm-up - cool-down
    5. If main would be negative (total < 10 min), warm-up and cool-down
       get a quarter each and main the remaining half

    Raises:
        InvalidWorkoutError: If *total_minutes* is negative.
    """
    if total_minutes is not None and total_minutes < 0:
        raise InvalidWorkoutError(f"Workout duration must not be negative, got {total_minutes}")
    total = total_minutes or DEFAULT_WORKOUT_MINUTES

    warmup = _clamp(
        round_half_up(total * WARMUP_FRACTION), WARMUP_MIN_MINUTES, WARMUP_MAX_MINUTES,
    )
    cooldown = _clamp(
        round_half_up(total * COOLDOWN_FRACTION), COOLDOWN_MIN_MINUTES, COOLDOWN_MAX_MINUTES,
    )
    main = total - warmup - cooldown

    if main < 0:
        warmup = total / 4
        cooldown = total / 4
        main = total - warmup - cooldown

    return PhaseSplit(warmup_min=warmup, main_min=main, cooldown_min=cooldown)


def main_intensity_for(workout_type: WorkoutType) -> float:
    """Main-set target as a fraction of FTP for *workout_type*."""
    return MAIN_INTENSITY_BY_TYPE.get(workout_type, DEFAULT_MAIN_INTENSITY)


def _main_kind(workout_type: WorkoutType) -> StepKind:
    if workout_type == WorkoutType.RECOVERY:
        return StepKind.RECOVERY
    if workout_type in (WorkoutType.INTERVALS, WorkoutType.VO2MAX):
        return StepKind.WORK
    if workout_type == WorkoutType.REST:
        return StepKind.REST
    return StepKind.ACTIVE


def _to_percent(fraction: float) -> float:
    # 0.55 * 100 is 55.00000000000001 in binary floating point
    return round(fraction * 100, 6)


def _ramp(start: float, end: float) -> Intensity:
    start_pct = _to_percent(start)
    end_pct = _to_percent(end)
    return Intensity(
        unit=IntensityUnit.PERCENT_FTP,
        value=max(start_pct, end_pct),
        low=min(start_pct, end_pct),
        high=max(start_pct, end_pct),
    )


def synthesize_simple_workout(
    total_minutes: float | None,
    workout_type: WorkoutType,
    notes: str = "",
) -> StructuredWorkout:
    """Build the canonical warm-up / main / cool-down profile.

    Warm-up ramps 40% → 65% FTP, the main set holds the type's intensity,
    cool-down ramps 60% → 40% FTP.

    Args:
        total_minutes: Planned duration; None or 0 means 60 minutes.
        workout_type: Selects the main-set intensity.
        notes: Attached to the main-set step (usually the workout description).
    """
    split = split_phases(total_minutes)
    main_pct = _to_percent(main_intensity_for(workout_type))

    warmup = WorkoutStep(
        kind=StepKind.WARMUP,
        duration=Duration(split.warmup_min, DurationUnit.MINUTES),
        intensity=_ramp(WARMUP_START_FRACTION, WARMUP_END_FRACTION),
        name="Warm Up",
    )
    main = WorkoutStep(
        kind=_main_kind(workout_type),
        duration=Duration(split.main_min, DurationUnit.MINUTES),
        intensity=Intensity(unit=IntensityUnit.PERCENT_FTP, value=main_pct),
        name="Main Set",
        notes=notes,
    )
    cooldown = WorkoutStep(
        kind=StepKind.COOLDOWN,
        duration=Duration(split.cooldown_min, DurationUnit.MINUTES),
        intensity=_ramp(COOLDOWN_START_FRACTION, COOLDOWN_END_FRACTION),
        name="Cool Down",
    )
    return StructuredWorkout(warmup=(warmup,), main=(main,), cooldown=(cooldown,))


def structure_for(workout: Workout) -> StructuredWorkout:
    """The workout's own structure, or a synthesized profile when it has none."""
    if workout.structure is not None:
        return workout.structure
    return synthesize_simple_workout(
        workout.duration_minutes, workout.type, notes=workout.description,
    )
