"""Tests for description builder — event summaries and descriptions."""

from __future__ import annotations

from workout_codec.models.enums import Sport, WorkoutType
from workout_codec.models.workout import Workout
from workout_codec.workout_builder.description_builder import (
    build_event_description,
    build_event_summary,
    build_file_description,
    format_duration,
    normalize_line_endings,
    normalize_newlines,
    sport_icon,
)


def _make_workout(**overrides) -> Workout:
    defaults = dict(
        id="w1",
        sport=Sport.RUN,
        type=WorkoutType.ENDURANCE,
        name="Easy Run",
    )
    defaults.update(overrides)
    return Workout(**defaults)


class TestFormatDuration:
    def test_hours_and_minutes(self) -> None:
        assert format_duration(90) == "1h 30m"

    def test_whole_hours(self) -> None:
        assert format_duration(120) == "2h"

    def test_minutes_only(self) -> None:
        assert format_duration(45) == "45m"

    def test_missing(self) -> None:
        assert format_duration(None) == ""
        assert format_duration(0) == ""


class TestSummary:
    def test_summary_has_icon_sport_and_name(self) -> None:
        summary = build_event_summary(_make_workout())
        assert summary == f"{sport_icon(Sport.RUN)} Run: Easy Run"

    def test_every_sport_has_icon(self) -> None:
        for sport in Sport:
            assert sport_icon(sport)


class TestEventDescription:
    def test_full_description(self) -> None:
        workout = _make_workout(
            description="Zone 2 easy run",
            duration_minutes=45,
            primary_zone="Zone 2",
            human_readable="Warm-up: 10min\\nMain: 30min",
        )
        text = build_event_description(workout)
        assert text == (
            "Zone 2 easy run\n\n"
            "Duration: 45m\nTarget Zone: Zone 2\n\n"
            "Workout Structure:\nWarm-up: 10min\nMain: 30min"
        )

    def test_empty_workout_gives_empty_description(self) -> None:
        assert build_event_description(_make_workout()) == ""

    def test_duration_only(self) -> None:
        assert build_event_description(_make_workout(duration_minutes=90)) == "Duration: 1h 30m"

    def test_description_backslashes_kept(self) -> None:
        text = build_event_description(_make_workout(description="Save to C:\\new\\plans"))
        assert text == "Save to C:\\new\\plans"


class TestNewlines:
    def test_literal_backslash_n(self) -> None:
        assert normalize_newlines("a\\nb") == "a\nb"

    def test_crlf(self) -> None:
        assert normalize_newlines("a\r\nb\rc") == "a\nb\nc"

    def test_line_endings_keep_backslash_n(self) -> None:
        assert normalize_line_endings("a\\nb\r\nc") == "a\\nb\nc"


class TestFileDescription:
    def test_description_only(self) -> None:
        assert build_file_description(_make_workout(description="Steady")) == "Steady"

    def test_appends_structure(self) -> None:
        workout = _make_workout(description="Steady", human_readable="5x1k\\nrest 2min")
        assert build_file_description(workout) == "Steady\n\n5x1k\nrest 2min"
