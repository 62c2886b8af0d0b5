"""Serialization module — encode workouts and plans into device and calendar formats."""

from workout_codec.serialization.erg import (
    encode_erg,
    encode_mrc,
    generate_data_points,
    generate_erg,
    generate_mrc,
    is_erg_supported,
)
from workout_codec.serialization.fit import (
    MessageSink,
    build_fit_records,
    encode_fit,
    is_fit_supported,
)
from workout_codec.serialization.ics import encode_ics, escape_text, fold_line, generate_ics, unescape_text
from workout_codec.serialization.plan_json import load_plan, load_settings, plan_from_dict, settings_from_dict
from workout_codec.serialization.zwo import encode_zwo, generate_zwo, is_zwo_supported

__all__ = [
    "MessageSink",
    "build_fit_records",
    "encode_erg",
    "encode_fit",
    "encode_ics",
    "encode_mrc",
    "encode_zwo",
    "escape_text",
    "fold_line",
    "generate_data_points",
    "generate_erg",
    "generate_ics",
    "generate_mrc",
    "generate_zwo",
    "is_erg_supported",
    "is_fit_supported",
    "is_zwo_supported",
    "load_plan",
    "load_settings",
    "plan_from_dict",
    "settings_from_dict",
    "unescape_text",
]
