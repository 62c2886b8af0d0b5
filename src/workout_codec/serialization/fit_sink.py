"""fit_tool-backed MessageSink: turns FIT records into a binary .fit file."""

from __future__ import annotations

import logging

from fit_tool.fit_file_builder import FitFileBuilder
from fit_tool.profile.messages.file_id_message import FileIdMessage
from fit_tool.profile.messages.workout_message import WorkoutMessage
from fit_tool.profile.messages.workout_step_message import WorkoutStepMessage
from fit_tool.profile.profile_type import (
    FileType,
    Intensity,
    Sport,
    SubSport,
    WorkoutStepDuration,
    WorkoutStepTarget,
)

from workout_codec.serialization.fit import (
    FileIdRecord,
    FitDurationType,
    FitRecord,
    FitTargetType,
    WorkoutRecord,
    WorkoutStepRecord,
)

logger = logging.getLogger(__name__)

# FIT string fields are padded to at least this many bytes
_MIN_STRING_SIZE = 50


class FitToolSink:
    """MessageSink over ``fit_tool.FitFileBuilder``.

    Records are translated into fit_tool messages as they arrive; the
    builder frames the file (header, definitions, CRC) on ``to_bytes``.
    A step's cadence range rides in the secondary target slot unless
    cadence is already the primary target.
    """

    def __init__(self) -> None:
        self._builder = FitFileBuilder(auto_define=True, min_string_size=_MIN_STRING_SIZE)
        self._count = 0

    def add(self, record: FitRecord) -> None:
        if isinstance(record, FileIdRecord):
            message = self._file_id(record)
        elif isinstance(record, WorkoutRecord):
            message = self._workout(record)
        elif isinstance(record, WorkoutStepRecord):
            message = self._step(record)
        else:
            raise TypeError(f"Unsupported FIT record: {type(record).__name__}")
        self._builder.add(message)
        self._count += 1

    def to_bytes(self) -> bytes:
        payload = self._builder.build().to_bytes()
        logger.debug("Framed %d FIT messages into %d bytes", self._count, len(payload))
        return payload

    @staticmethod
    def _file_id(record: FileIdRecord) -> FileIdMessage:
        message = FileIdMessage()
        message.type = FileType(record.type)
        message.manufacturer = record.manufacturer
        message.product = record.product
        message.serial_number = record.serial_number
        # fit_tool takes milliseconds since the Unix epoch
        message.time_created = round(record.time_created.timestamp() * 1000)
        return message

    @staticmethod
    def _workout(record: WorkoutRecord) -> WorkoutMessage:
        message = WorkoutMessage()
        message.workout_name = record.name[:_MIN_STRING_SIZE]
        message.sport = Sport(int(record.sport))
        message.sub_sport = SubSport(int(record.sub_sport))
        message.num_valid_steps = record.num_valid_steps
        return message

    @staticmethod
    def _step(record: WorkoutStepRecord) -> WorkoutStepMessage:
        message = WorkoutStepMessage()
        message.message_index = record.message_index
        if record.name:
            message.workout_step_name = record.name[:_MIN_STRING_SIZE]
        if record.notes:
            message.notes = record.notes[:255]
        if record.intensity is not None:
            message.intensity = Intensity(int(record.intensity))

        message.duration_type = WorkoutStepDuration(int(record.duration_type))
        if record.duration_type == FitDurationType.TIME:
            message.duration_time = record.duration_value / 1000.0
        elif record.duration_type == FitDurationType.DISTANCE:
            message.duration_distance = record.duration_value / 100.0
        elif record.is_repeat:
            message.duration_step = record.duration_value

        message.target_type = WorkoutStepTarget(int(record.target_type))
        if record.target_value:
            message.target_value = record.target_value
        if record.custom_target_value_low is not None:
            message.custom_target_value_low = record.custom_target_value_low
        if record.custom_target_value_high is not None:
            message.custom_target_value_high = record.custom_target_value_high
        if record.cadence_low is not None and record.target_type != FitTargetType.CADENCE:
            message.secondary_target_type = WorkoutStepTarget.CADENCE
            message.secondary_custom_target_value_low = record.cadence_low
            message.secondary_custom_target_value_high = record.cadence_high
        return message
