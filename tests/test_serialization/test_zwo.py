"""Tests for Zwift ZWO serialization."""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from workout_codec.exceptions import UnsupportedSportError
from workout_codec.models.enums import DurationUnit, IntensityUnit, Sport, StepKind, WorkoutType
from workout_codec.models.structured_workout import (
    Duration,
    Intensity,
    IntervalSet,
    StructuredWorkout,
    WorkoutStep,
)
from workout_codec.models.workout import Workout
from workout_codec.serialization.zwo import (
    ZWO_MEDIA_TYPE,
    encode_zwo,
    escape_xml,
    generate_zwo,
    is_zwo_supported,
)


def _make_workout(**overrides) -> Workout:
    defaults = dict(
        id="w1",
        sport=Sport.BIKE,
        type=WorkoutType.ENDURANCE,
        name="Ride",
        duration_minutes=60,
    )
    defaults.update(overrides)
    return Workout(**defaults)


def _segments(xml: str) -> list[ET.Element]:
    return list(ET.fromstring(xml).find("workout"))


class TestSupport:
    def test_bike_and_run_only(self) -> None:
        assert is_zwo_supported(Sport.BIKE)
        assert is_zwo_supported(Sport.RUN)
        assert not is_zwo_supported(Sport.SWIM)
        assert not is_zwo_supported(Sport.STRENGTH)

    def test_swim_rejected(self, athlete_settings) -> None:
        with pytest.raises(UnsupportedSportError, match="ZWO export not supported for swim"):
            generate_zwo(_make_workout(sport=Sport.SWIM), athlete_settings)


class TestEscapeXml:
    def test_all_entities(self) -> None:
        assert escape_xml("""<a & 'b' "c">""") == "&lt;a &amp; &apos;b&apos; &quot;c&quot;&gt;"

    def test_ampersand_escaped_first(self) -> None:
        assert escape_xml("&lt;") == "&amp;lt;"

    def test_round_trip_through_parser(self, athlete_settings) -> None:
        name = 'Tom & Jerry\'s "Big" <Ride>'
        xml = generate_zwo(_make_workout(name=name), athlete_settings)
        assert ET.fromstring(xml).findtext("name") == name


class TestDocument:
    def test_header_fields(self, endurance_ride, athlete_settings) -> None:
        xml = generate_zwo(endurance_ride, athlete_settings)
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<workout_file>')
        root = ET.fromstring(xml)
        assert root.findtext("author") == "Training Plan Export"
        assert root.findtext("name") == "Endurance Ride"
        assert root.findtext("description") == "Steady zone 2 ride"
        assert root.findtext("sportType") == "bike"

    def test_run_sport_type(self, athlete_settings) -> None:
        xml = generate_zwo(_make_workout(sport=Sport.RUN), athlete_settings)
        assert ET.fromstring(xml).findtext("sportType") == "run"

    def test_simple_profile_segments(self, endurance_ride, athlete_settings) -> None:
        segments = _segments(generate_zwo(endurance_ride, athlete_settings))
        assert [s.tag for s in segments] == ["Warmup", "SteadyState", "Cooldown"]
        warmup, main, cooldown = segments
        assert warmup.attrib == {"Duration": "360", "PowerLow": "0.40", "PowerHigh": "0.65"}
        assert main.attrib == {"Duration": "2880", "Power": "0.65"}
        assert cooldown.attrib == {"Duration": "360", "PowerLow": "0.60", "PowerHigh": "0.40"}

    def test_segment_durations_sum_to_total(self, endurance_ride, athlete_settings) -> None:
        segments = _segments(generate_zwo(endurance_ride, athlete_settings))
        assert sum(int(s.get("Duration")) for s in segments) == 3600

    def test_encode_artifact(self, endurance_ride, athlete_settings) -> None:
        artifact = encode_zwo(endurance_ride, athlete_settings, "Endurance_Ride.zwo")
        assert artifact.filename == "Endurance_Ride.zwo"
        assert artifact.media_type == ZWO_MEDIA_TYPE
        assert not artifact.is_binary


class TestIntervals:
    def test_on_off_pair_becomes_intervals_t(self, interval_ride, athlete_settings) -> None:
        segments = _segments(generate_zwo(interval_ride, athlete_settings))
        assert [s.tag for s in segments] == ["Warmup", "IntervalsT", "Cooldown"]
        intervals = segments[1]
        assert intervals.attrib == {
            "Repeat": "3",
            "OnDuration": "300",
            "OffDuration": "300",
            "OnPower": "1.00",
            "OffPower": "0.50",
            "Cadence": "95",
        }

    def test_ramps_keep_direction(self, interval_ride, athlete_settings) -> None:
        warmup, _, cooldown = _segments(generate_zwo(interval_ride, athlete_settings))
        assert (warmup.get("PowerLow"), warmup.get("PowerHigh")) == ("0.50", "0.65")
        assert (cooldown.get("PowerLow"), cooldown.get("PowerHigh")) == ("0.60", "0.40")

    def test_other_sets_are_expanded(self, athlete_settings) -> None:
        step = WorkoutStep(
            kind=StepKind.WORK,
            duration=Duration(1, DurationUnit.MINUTES),
            intensity=Intensity(IntensityUnit.PERCENT_FTP, 120),
        )
        structure = StructuredWorkout(main=(IntervalSet(repeats=4, steps=(step,)),))
        segments = _segments(generate_zwo(_make_workout(structure=structure), athlete_settings))
        assert [s.tag for s in segments] == ["SteadyState"] * 4
        assert all(s.get("Power") == "1.20" for s in segments)


class TestSteps:
    def _single(self, step: WorkoutStep, settings) -> ET.Element:
        workout = _make_workout(structure=StructuredWorkout(main=(step,)))
        (segment,) = _segments(generate_zwo(workout, settings))
        return segment

    def test_main_ramp(self, athlete_settings) -> None:
        segment = self._single(WorkoutStep(
            kind=StepKind.ACTIVE,
            duration=Duration(10, DurationUnit.MINUTES),
            intensity=Intensity(IntensityUnit.PERCENT_FTP, 90, low=70, high=90),
        ), athlete_settings)
        assert segment.tag == "Ramp"
        assert (segment.get("PowerLow"), segment.get("PowerHigh")) == ("0.70", "0.90")

    def test_single_value_warmup_still_ramps(self, athlete_settings) -> None:
        segment = self._single(WorkoutStep(
            kind=StepKind.WARMUP,
            duration=Duration(10, DurationUnit.MINUTES),
            intensity=Intensity(IntensityUnit.PERCENT_FTP, 70),
        ), athlete_settings)
        assert segment.tag == "Warmup"
        assert (segment.get("PowerLow"), segment.get("PowerHigh")) == ("0.42", "0.70")

    def test_hr_zone_translated_to_power(self, athlete_settings) -> None:
        segment = self._single(WorkoutStep(
            kind=StepKind.ACTIVE,
            duration=Duration(20, DurationUnit.MINUTES),
            intensity=Intensity(IntensityUnit.HR_ZONE, 2),
        ), athlete_settings)
        assert segment.get("Power") == "0.65"

    def test_missing_intensity_defaults_to_half(self, athlete_settings) -> None:
        segment = self._single(WorkoutStep(
            kind=StepKind.ACTIVE,
            duration=Duration(20, DurationUnit.MINUTES),
        ), athlete_settings)
        assert segment.get("Power") == "0.50"

    def test_distance_step_timed_at_assumed_speed(self, athlete_settings) -> None:
        """15 km at the default 30 km/h bike speed is 30 minutes."""
        segment = self._single(WorkoutStep(
            kind=StepKind.ACTIVE,
            duration=Duration(15, DurationUnit.KILOMETERS),
            intensity=Intensity(IntensityUnit.PERCENT_FTP, 70),
        ), athlete_settings)
        assert segment.get("Duration") == "1800"
