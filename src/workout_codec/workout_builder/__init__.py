"""Workout builder — synthesizes simple profiles and flattens structured workouts."""

from workout_codec.workout_builder.simple_profile import (
    main_intensity_for,
    split_phases,
    structure_for,
    synthesize_simple_workout,
)
from workout_codec.workout_builder.walker import (
    TimedStep,
    expand_interval_set,
    total_minutes,
    walk_structure,
)

__all__ = [
    "TimedStep",
    "expand_interval_set",
    "main_intensity_for",
    "split_phases",
    "structure_for",
    "synthesize_simple_workout",
    "total_minutes",
    "walk_structure",
]
