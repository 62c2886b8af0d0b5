"""Custom exception hierarchy for the workout codec."""

from __future__ import annotations


class WorkoutExportError(Exception):
    """Base exception for all workout_codec errors."""


class UnsupportedOperationError(WorkoutExportError):
    """A format, sport or unit combination the codec cannot express."""


class UnsupportedSportError(UnsupportedOperationError):
    """An encoder was asked to export a sport it does not support."""

    def __init__(self, sport: str, fmt: str, message: str | None = None) -> None:
        super().__init__(message or f"{fmt.upper()} export not supported for {sport} workouts")
        self.sport = sport
        self.fmt = fmt


class UnsupportedFormatError(UnsupportedOperationError):
    """The requested export format is unknown or not valid in this context."""

    def __init__(self, fmt: str) -> None:
        super().__init__(f"Unknown format: {fmt}")
        self.fmt = fmt


class InvalidWorkoutError(WorkoutExportError):
    """Workout or plan data is malformed (bad shape, impossible values)."""
