"""Athlete settings — thresholds the encoders need for absolute targets."""

from __future__ import annotations

from dataclasses import dataclass, field

from workout_codec.models.enums import (
    DEFAULT_ASSUMED_SPEED_KMH,
    FALLBACK_ASSUMED_SPEED_KMH,
    Sport,
)


@dataclass(frozen=True)
class HrZone:
    """A heart-rate zone with absolute BPM bounds."""

    zone: int
    low: int
    high: int
    name: str = ""


@dataclass(frozen=True)
class AthleteSettings:
    """Immutable snapshot of the athlete settings used by one export call.

    Passed explicitly to every encoder; nothing in the codec reads
    settings from module state. Bike values apply to bike workouts, run
    values to every other sport.
    """

    ftp_watts: int | None = None
    bike_lthr_bpm: int | None = None
    run_lthr_bpm: int | None = None
    bike_hr_zones: tuple[HrZone, ...] = field(default_factory=tuple)
    run_hr_zones: tuple[HrZone, ...] = field(default_factory=tuple)
    assumed_speed_kmh: dict[Sport, float] = field(
        default_factory=lambda: dict(DEFAULT_ASSUMED_SPEED_KMH)
    )

    def threshold_hr(self, sport: Sport) -> int | None:
        """LTHR in bpm for *sport*, or None if unknown."""
        if sport == Sport.BIKE:
            return self.bike_lthr_bpm
        return self.run_lthr_bpm

    def hr_zones(self, sport: Sport) -> tuple[HrZone, ...]:
        if sport == Sport.BIKE:
            return self.bike_hr_zones
        return self.run_hr_zones

    def speed_kmh(self, sport: Sport) -> float:
        """Assumed average speed used to time distance-based steps."""
        return self.assumed_speed_kmh.get(sport, FALLBACK_ASSUMED_SPEED_KMH)
