"""Environment-variable-based configuration for the export CLI."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

OUTPUT_DIR: Path = Path(os.environ.get("EXPORT_OUTPUT_DIR", "exports")).expanduser()
LOG_LEVEL: str = os.environ.get("EXPORT_LOG_LEVEL", "INFO").upper()


def _optional_path(name: str) -> Optional[Path]:
    value = os.environ.get(name, "")
    return Path(value).expanduser() if value else None


ATHLETE_SETTINGS_PATH: Optional[Path] = _optional_path("ATHLETE_SETTINGS")
