"""Enumerations and export constants for the workout codec.

String-valued enums mirror the keys used by the training-plan JSON document,
so ``Sport("bike")`` round-trips with the stored data.
"""

from enum import Enum


class Sport(str, Enum):
    """Sports a planned workout can belong to."""

    SWIM = "swim"
    BIKE = "bike"
    RUN = "run"
    STRENGTH = "strength"
    BRICK = "brick"
    RACE = "race"
    REST = "rest"


class WorkoutType(str, Enum):
    """Session flavour; only drives intensity defaults for unstructured workouts."""

    RECOVERY = "recovery"
    ENDURANCE = "endurance"
    TEMPO = "tempo"
    THRESHOLD = "threshold"
    INTERVALS = "intervals"
    VO2MAX = "vo2max"
    LONG = "long"
    TECHNIQUE = "technique"
    RACE = "race"
    REST = "rest"
    STRENGTH = "strength"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value):
        # Plans carry free-form types ("marathon", "brick_sim", ...)
        return cls.OTHER


class StepKind(str, Enum):
    """Role of a single step inside a structured workout."""

    WARMUP = "warmup"
    COOLDOWN = "cooldown"
    WORK = "work"
    RECOVERY = "recovery"
    REST = "rest"
    ACTIVE = "active"     # Unspecified steady effort

    @classmethod
    def _missing_(cls, value):
        return cls.ACTIVE


class Phase(str, Enum):
    """Section of a structured workout a step belongs to."""

    WARMUP = "warmup"
    MAIN = "main"
    COOLDOWN = "cooldown"


class DurationUnit(str, Enum):
    """Units a step duration can be expressed in."""

    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    METERS = "meters"
    KILOMETERS = "kilometers"
    MILES = "miles"


class IntensityUnit(str, Enum):
    """Reference an intensity value is expressed against."""

    PERCENT_FTP = "percent_ftp"
    PERCENT_LTHR = "percent_lthr"
    HR_ZONE = "hr_zone"
    RPE = "rpe"


class ExportFormat(str, Enum):
    """Target file formats."""

    ZWO = "zwo"      # Zwift XML interval-trainer
    FIT = "fit"      # Garmin binary workout
    MRC = "mrc"      # Text course, percent of FTP
    ERG = "erg"      # Text course, absolute watts
    ICS = "ics"      # iCalendar, whole plan only


# ---------------------------------------------------------------------------
# Unit conversion
# ---------------------------------------------------------------------------
SECONDS_PER_UNIT = {
    DurationUnit.SECONDS: 1.0,
    DurationUnit.MINUTES: 60.0,
    DurationUnit.HOURS: 3600.0,
}

METERS_PER_UNIT = {
    DurationUnit.METERS: 1.0,
    DurationUnit.KILOMETERS: 1000.0,
    DurationUnit.MILES: 1609.344,
}

# Average speeds used to put distance-based steps on a time axis.
# Modeled assumption, not athlete specific; override via AthleteSettings.
DEFAULT_ASSUMED_SPEED_KMH = {
    Sport.BIKE: 30.0,
    Sport.RUN: 10.0,
    Sport.SWIM: 3.0,
}
FALLBACK_ASSUMED_SPEED_KMH = 30.0

# ---------------------------------------------------------------------------
# Simple-workout synthesis
# ---------------------------------------------------------------------------
DEFAULT_WORKOUT_MINUTES = 60
WARMUP_FRACTION = 0.10
WARMUP_MIN_MINUTES = 5
WARMUP_MAX_MINUTES = 15
COOLDOWN_FRACTION = 0.10
COOLDOWN_MIN_MINUTES = 5
COOLDOWN_MAX_MINUTES = 10

# Main-set intensity as fraction of FTP, strictly increasing with effort
MAIN_INTENSITY_BY_TYPE = {
    WorkoutType.RECOVERY: 0.55,
    WorkoutType.ENDURANCE: 0.65,
    WorkoutType.TEMPO: 0.80,
    WorkoutType.THRESHOLD: 0.95,
    WorkoutType.INTERVALS: 1.00,
    WorkoutType.VO2MAX: 1.10,
}
DEFAULT_MAIN_INTENSITY = 0.65

WARMUP_START_FRACTION = 0.40
WARMUP_END_FRACTION = 0.65
COOLDOWN_START_FRACTION = 0.60
COOLDOWN_END_FRACTION = 0.40

# ---------------------------------------------------------------------------
# Format defaults
# ---------------------------------------------------------------------------
DEFAULT_STEP_PERCENT = 50.0       # Step without an intensity
DEFAULT_FTP_WATTS = 200           # ERG fallback when the athlete has no FTP
FIT_TARGET_BAND_PERCENT = 5.0     # +/- band around a point power or HR target
FILENAME_MAX_LENGTH = 100

# Branding written into exported files
EXPORT_AUTHOR = "Training Plan Export"
ICS_PRODID = "-//Training Plan Export//Training Plan//EN"
ICS_UID_DOMAIN = "training-plan-export"
