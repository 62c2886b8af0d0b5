"""Export CLI — writes workout files and calendars from a training-plan JSON.

Usage:
    python -m export_cli.main plan.json --format zwo                 # every bike/run workout, zipped
    python -m export_cli.main plan.json --format fit --workout w1-mon-run
    python -m export_cli.main plan.json --format ics --out ~/calendar
    python -m export_cli.main plan.json --list                       # workouts and their formats
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from workout_codec.exceptions import WorkoutExportError
from workout_codec.exporter import (
    DirectoryWriter,
    export_all_workouts,
    export_plan_calendar,
    export_workout,
    supported_formats,
)
from workout_codec.models.enums import ExportFormat
from workout_codec.models.settings import AthleteSettings
from workout_codec.models.training_plan import TrainingPlan
from workout_codec.serialization.plan_json import load_plan, load_settings

from export_cli.config import ATHLETE_SETTINGS_PATH, LOG_LEVEL, OUTPUT_DIR

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _load_settings(path: Optional[Path]) -> AthleteSettings:
    """Athlete settings from *path*, or defaults when no file is configured."""
    if path is None:
        logger.info("No athlete settings file; using defaults")
        return AthleteSettings()
    return load_settings(path)


def _list_workouts(plan: TrainingPlan) -> None:
    for day, workout in plan.iter_workouts():
        formats = ", ".join(f.value for f in supported_formats(workout.sport)) or "-"
        print(f"{day.date.isoformat()}  {workout.id:<20} {workout.sport.value:<8} {workout.name}  [{formats}]")


def run_export(
    plan: TrainingPlan,
    fmt: ExportFormat,
    settings: AthleteSettings,
    out_dir: Path,
    workout_id: Optional[str] = None,
) -> bool:
    """Run one export into *out_dir*; return True when something was written."""
    writer = DirectoryWriter(out_dir)

    if fmt == ExportFormat.ICS:
        result = export_plan_calendar(plan, materialize=writer)
        if not result.success:
            logger.error("Calendar export failed: %s", result.error)
        return result.success

    if workout_id:
        workout = plan.find_workout(workout_id)
        if workout is None:
            logger.error("Workout %s not found in plan %s", workout_id, plan.meta.id)
            return False
        result = export_workout(workout, fmt, settings, materialize=writer)
        if not result.success:
            logger.error("Export failed: %s", result.error)
        return result.success

    batch = export_all_workouts(plan, fmt, settings, materialize=writer)
    for error in batch.errors:
        logger.warning("Export error: %s", error)
    if batch.archive is None:
        logger.error("Nothing exported (%d skipped)", batch.skipped)
        return False
    return True


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Export training-plan workouts to device and calendar files")
    parser.add_argument("plan", type=Path, help="Training plan JSON file")
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument(
        "--format", dest="fmt", choices=[f.value for f in ExportFormat], help="Target file format",
    )
    action.add_argument("--list", action="store_true", help="List workouts and their export formats")
    parser.add_argument(
        "--settings", type=Path, default=ATHLETE_SETTINGS_PATH,
        help="Athlete settings JSON (default: $ATHLETE_SETTINGS)",
    )
    parser.add_argument("--workout", dest="workout_id", help="Export only this workout id")
    parser.add_argument(
        "--out", type=Path, default=OUTPUT_DIR, help="Output directory (default: $EXPORT_OUTPUT_DIR)",
    )
    args = parser.parse_args(argv)

    try:
        plan = load_plan(args.plan)
        if args.list:
            _list_workouts(plan)
            return 0
        settings = _load_settings(args.settings)
    except FileNotFoundError as exc:
        logger.error("File not found: %s", exc.filename)
        return 1
    except WorkoutExportError as exc:
        logger.error("Could not load input: %s", exc)
        return 1

    ok = run_export(plan, ExportFormat(args.fmt), settings, args.out, args.workout_id)
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
