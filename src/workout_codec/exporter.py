"""Export orchestrator — picks the encoder, names the file, reports the outcome.

Encoders raise on contract violations (unsupported sport, malformed
input). This module is the one boundary that turns every failure into an
ExportResult / BatchExportResult, so a plan-wide export keeps going past
individual bad workouts.

Usage:
    result = export_workout(workout, "zwo", settings, materialize=DirectoryWriter("out"))
    batch = export_all_workouts(plan, ExportFormat.FIT, settings)
"""

from __future__ import annotations

import io
import logging
import re
import zipfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Union

from workout_codec.exceptions import (
    UnsupportedFormatError,
    UnsupportedOperationError,
    UnsupportedSportError,
)
from workout_codec.models.artifact import BatchExportResult, EncodedArtifact, ExportResult
from workout_codec.models.enums import FILENAME_MAX_LENGTH, ExportFormat, Sport
from workout_codec.models.settings import AthleteSettings
from workout_codec.models.training_plan import TrainingPlan
from workout_codec.models.workout import Workout
from workout_codec.serialization.erg import encode_erg, encode_mrc, is_erg_supported
from workout_codec.serialization.fit import encode_fit, is_fit_supported
from workout_codec.serialization.ics import encode_ics
from workout_codec.serialization.zwo import encode_zwo, is_zwo_supported

logger = logging.getLogger(__name__)

ZIP_MEDIA_TYPE = "application/zip"

Materializer = Callable[[EncodedArtifact], object]
FormatLike = Union[ExportFormat, str]

# Per-workout formats, in the order they are offered
_WORKOUT_FORMATS: tuple[ExportFormat, ...] = (
    ExportFormat.ZWO,
    ExportFormat.FIT,
    ExportFormat.MRC,
    ExportFormat.ERG,
)

_SUPPORT_CHECKS: dict[ExportFormat, Callable[[Sport], bool]] = {
    ExportFormat.ZWO: is_zwo_supported,
    ExportFormat.FIT: is_fit_supported,
    ExportFormat.MRC: is_erg_supported,
    ExportFormat.ERG: is_erg_supported,
}

_ENCODERS: dict[ExportFormat, Callable[[Workout, AthleteSettings, str], EncodedArtifact]] = {
    ExportFormat.ZWO: encode_zwo,
    ExportFormat.FIT: encode_fit,
    ExportFormat.MRC: encode_mrc,
    ExportFormat.ERG: encode_erg,
}

_FORBIDDEN_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE_RUN = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Format selection and naming
# ---------------------------------------------------------------------------


def supported_formats(sport: Sport) -> list[ExportFormat]:
    """Per-workout formats available for *sport*.

    iCalendar is plan-level and never listed here.
    """
    return [fmt for fmt in _WORKOUT_FORMATS if _SUPPORT_CHECKS[fmt](sport)]


def sanitize_filename(name: str) -> str:
    """Make *name* safe as a filename on every common filesystem.

    Strips ``<>:"/\\|?*``, turns whitespace runs into ``_`` and caps the
    length. A name with nothing left becomes ``workout``.
    """
    cleaned = _FORBIDDEN_FILENAME_CHARS.sub("", name)
    cleaned = _WHITESPACE_RUN.sub("_", cleaned)[:FILENAME_MAX_LENGTH]
    return cleaned or "workout"


def _coerce_format(fmt: FormatLike) -> ExportFormat:
    try:
        return ExportFormat(fmt)
    except ValueError:
        raise UnsupportedFormatError(str(fmt)) from None


def _workout_format(fmt: FormatLike) -> ExportFormat:
    export_format = _coerce_format(fmt)
    if export_format not in _ENCODERS:
        raise UnsupportedOperationError(
            f"{export_format.value.upper()} export applies to whole plans, not single workouts"
        )
    return export_format


# ---------------------------------------------------------------------------
# Single workout
# ---------------------------------------------------------------------------


def encode_workout(workout: Workout, fmt: FormatLike, settings: AthleteSettings) -> EncodedArtifact:
    """Encode *workout* into *fmt*. Raises on any failure.

    Raises:
        UnsupportedFormatError: Unknown format name.
        UnsupportedOperationError: Plan-level format requested for one workout.
        UnsupportedSportError: Format does not support the workout's sport.
    """
    export_format = _workout_format(fmt)
    if not _SUPPORT_CHECKS[export_format](workout.sport):
        raise UnsupportedSportError(workout.sport.value, export_format.value)
    filename = f"{sanitize_filename(workout.name)}.{export_format.value}"
    return _ENCODERS[export_format](workout, settings, filename)


def export_workout(
    workout: Workout,
    fmt: FormatLike,
    settings: AthleteSettings,
    materialize: Optional[Materializer] = None,
) -> ExportResult:
    """Encode one workout and hand the artifact to *materialize*.

    Never raises: unsupported combinations and unexpected encoder errors
    come back as ``ExportResult(success=False, error=...)``.
    """
    try:
        artifact = encode_workout(workout, fmt, settings)
        if materialize is not None:
            materialize(artifact)
    except UnsupportedOperationError as exc:
        return ExportResult(success=False, error=str(exc))
    except Exception as exc:
        logger.exception("Export of %r to %s failed", workout.name, fmt)
        return ExportResult(success=False, error=f"Export failed: {exc}")

    logger.info("Exported %r as %s", workout.name, artifact.filename)
    return ExportResult(success=True, filename=artifact.filename, artifact=artifact)


# ---------------------------------------------------------------------------
# Whole plan
# ---------------------------------------------------------------------------


def _plan_stem(plan: TrainingPlan) -> str:
    return sanitize_filename(plan.meta.event or "training")


def export_plan_calendar(
    plan: TrainingPlan,
    materialize: Optional[Materializer] = None,
    generated_at: Optional[datetime] = None,
) -> ExportResult:
    """Encode the whole plan as one iCalendar file. Never raises."""
    filename = f"{_plan_stem(plan)}_training_plan.ics"
    try:
        artifact = encode_ics(plan, filename, generated_at=generated_at)
        if materialize is not None:
            materialize(artifact)
    except Exception as exc:
        logger.exception("Calendar export of plan %s failed", plan.meta.id)
        return ExportResult(success=False, filename=filename, error=f"Export failed: {exc}")

    logger.info("Exported calendar %s (%d workouts)", filename, plan.workout_count)
    return ExportResult(success=True, filename=filename, artifact=artifact)


def _unique_member_name(filename: str, used: set[str]) -> str:
    """Append _2, _3, ... before the extension until *filename* is unused."""
    if filename not in used:
        used.add(filename)
        return filename
    stem, dot, ext = filename.rpartition(".")
    if not dot:
        stem, ext = filename, ""
    counter = 2
    while True:
        candidate = f"{stem}_{counter}.{ext}" if ext else f"{stem}_{counter}"
        if candidate not in used:
            used.add(candidate)
            return candidate
        counter += 1


def build_archive(artifacts: list[EncodedArtifact], filename: str) -> EncodedArtifact:
    """Pack *artifacts* into one deflated ZIP; clashing names get numeric suffixes."""
    used: set[str] = set()
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
        for artifact in artifacts:
            zf.writestr(_unique_member_name(artifact.filename, used), artifact.as_bytes())
    return EncodedArtifact(filename=filename, content=buffer.getvalue(), media_type=ZIP_MEDIA_TYPE)


def export_all_workouts(
    plan: TrainingPlan,
    fmt: FormatLike,
    settings: AthleteSettings,
    materialize: Optional[Materializer] = None,
) -> BatchExportResult:
    """Encode every exportable workout of *plan* into a single ZIP archive.

    Rest workouts and sports the format does not support are counted as
    skipped. Per-workout failures are collected as ``"{name}: {message}"``
    and do not stop the batch. The archive is built and materialized only
    when at least one workout was encoded.
    """
    try:
        export_format = _workout_format(fmt)
    except UnsupportedOperationError as exc:
        return BatchExportResult(errors=(str(exc),))

    artifacts: list[EncodedArtifact] = []
    errors: list[str] = []
    skipped = 0

    for _, workout in plan.iter_workouts():
        if workout.sport == Sport.REST or not _SUPPORT_CHECKS[export_format](workout.sport):
            skipped += 1
            continue
        try:
            artifacts.append(encode_workout(workout, export_format, settings))
        except Exception as exc:
            logger.warning("Skipping %r in batch export: %s", workout.name, exc)
            errors.append(f"{workout.name}: {exc}")

    archive = None
    if artifacts:
        archive_name = f"{_plan_stem(plan)}_workouts_{export_format.value}.zip"
        archive = build_archive(artifacts, archive_name)
        if materialize is not None:
            try:
                materialize(archive)
            except Exception as exc:
                logger.exception("Could not materialize %s", archive_name)
                errors.append(f"{archive_name}: {exc}")

    logger.info(
        "Batch %s export: %d exported, %d skipped, %d errors",
        export_format.value, len(artifacts), skipped, len(errors),
    )
    return BatchExportResult(
        exported=len(artifacts),
        skipped=skipped,
        errors=tuple(errors),
        archive=archive,
    )


# ---------------------------------------------------------------------------
# Materializers
# ---------------------------------------------------------------------------


class DirectoryWriter:
    """Materializer that writes each artifact into a directory.

    The directory is created on first write.
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    def __call__(self, artifact: EncodedArtifact) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / artifact.filename
        path.write_bytes(artifact.as_bytes())
        logger.info("Wrote %s (%d bytes)", path, path.stat().st_size)
        return path
