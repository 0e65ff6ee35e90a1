"""
Beat grid decoding for Mixxx tracks.

Mixxx keeps the beat grid of each track in ``library.beats`` as a protocol
buffer message, tagged by ``library.beats_version``. Only the constant-tempo
``BeatGrid-2.0`` variant is understood; ``BeatMap-1.0`` stores every beat
individually and is reported as unsupported.

The message types are registered in a private descriptor pool when this
module is imported, equivalent to compiling::

    syntax = "proto2";
    package beats;

    message Beat {
      optional int32 frame_position = 1;
      optional bool enabled = 2 [default = true];
      optional Source source = 3 [default = ANALYZER];
    }
    message Bpm {
      optional double bpm = 1;
      optional Source source = 2 [default = ANALYZER];
    }
    message BeatMap { repeated Beat beat = 1; }
    message BeatGrid {
      optional Bpm bpm = 1;
      optional Beat first_beat = 2;
    }
    enum Source { ANALYZER = 0; FILE_METADATA = 1; USER = 2; }
"""

import math
from typing import Optional, Any

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError

from ..core.models import BeatGrid
from ..utils.logging_config import get_logger

BEAT_GRID_VERSION = "BeatGrid-2.0"
BEAT_MAP_VERSION = "BeatMap-1.0"

SOURCES = {
    0: "ANALYZER",
    1: "FILE_METADATA",
    2: "USER",
}

_PACKAGE = "beats"
_FieldProto = descriptor_pb2.FieldDescriptorProto

logger = get_logger('beatgrid')


def _add_field(message, name: str, number: int, field_type: int,
               type_name: str = None, default: str = None,
               label: int = _FieldProto.LABEL_OPTIONAL):
    field = message.field.add()
    field.name = name
    field.number = number
    field.type = field_type
    field.label = label
    if type_name:
        field.type_name = f".{_PACKAGE}.{type_name}"
    if default is not None:
        field.default_value = default
    return field


def _build_schema() -> descriptor_pb2.FileDescriptorProto:
    """Describe the Mixxx beats.proto file"""
    file_proto = descriptor_pb2.FileDescriptorProto()
    file_proto.name = "mixxx2rekordbox/beats.proto"
    file_proto.package = _PACKAGE
    file_proto.syntax = "proto2"

    source = file_proto.enum_type.add()
    source.name = "Source"
    for number, name in SOURCES.items():
        value = source.value.add()
        value.name = name
        value.number = number

    beat = file_proto.message_type.add()
    beat.name = "Beat"
    _add_field(beat, "frame_position", 1, _FieldProto.TYPE_INT32)
    _add_field(beat, "enabled", 2, _FieldProto.TYPE_BOOL, default="true")
    _add_field(beat, "source", 3, _FieldProto.TYPE_ENUM, "Source", default="ANALYZER")

    bpm = file_proto.message_type.add()
    bpm.name = "Bpm"
    _add_field(bpm, "bpm", 1, _FieldProto.TYPE_DOUBLE)
    _add_field(bpm, "source", 2, _FieldProto.TYPE_ENUM, "Source", default="ANALYZER")

    beat_map = file_proto.message_type.add()
    beat_map.name = "BeatMap"
    _add_field(beat_map, "beat", 1, _FieldProto.TYPE_MESSAGE, "Beat",
               label=_FieldProto.LABEL_REPEATED)

    beat_grid = file_proto.message_type.add()
    beat_grid.name = "BeatGrid"
    _add_field(beat_grid, "bpm", 1, _FieldProto.TYPE_MESSAGE, "Bpm")
    _add_field(beat_grid, "first_beat", 2, _FieldProto.TYPE_MESSAGE, "Beat")

    return file_proto


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_schema().SerializeToString())

BeatGridMessage = message_factory.GetMessageClass(_POOL.FindMessageTypeByName(f"{_PACKAGE}.BeatGrid"))


def decode_beat_grid(blob: Optional[bytes]) -> Optional[BeatGrid]:
    """
    Parse a BeatGrid-2.0 blob

    Args:
        blob: Raw ``library.beats`` value

    Returns:
        BeatGrid with whatever fields were present, or None when the blob is
        empty or not a valid message
    """
    if not blob:
        return None

    message = BeatGridMessage()
    try:
        message.ParseFromString(bytes(blob))
    except (DecodeError, TypeError, ValueError) as e:
        logger.warning(f"Could not decode beat grid blob: {e}")
        return None

    grid = BeatGrid()
    if message.HasField("bpm"):
        if message.bpm.HasField("bpm"):
            grid.bpm = message.bpm.bpm
        grid.bpm_source = SOURCES.get(message.bpm.source, "ANALYZER")
    if message.HasField("first_beat"):
        if message.first_beat.HasField("frame_position"):
            grid.first_beat_frame = message.first_beat.frame_position
        grid.first_beat_enabled = message.first_beat.enabled
        grid.first_beat_source = SOURCES.get(message.first_beat.source, "ANALYZER")
    return grid


def normalize_beat_offset(position: float, beat_length: float) -> float:
    """Fold a first-beat position into ``[0, beat_length)``"""
    position = position % beat_length
    if position >= beat_length:
        # Float rounding of tiny negative positions
        position = 0.0
    return position


def calculate_beat_position(blob: Optional[bytes], sample_rate: Any,
                            beats_version: Optional[str] = BEAT_GRID_VERSION) -> Optional[float]:
    """
    Offset of the first beat in seconds, folded into one beat period

    Args:
        blob: Raw ``library.beats`` value (may be None)
        sample_rate: Track sample rate in Hz
        beats_version: Value of ``library.beats_version``

    Returns:
        Offset in seconds, or None when it cannot be determined
    """
    if not blob or not sample_rate:
        return None

    if beats_version != BEAT_GRID_VERSION:
        if beats_version == BEAT_MAP_VERSION:
            logger.debug("BeatMap-1.0 beat data is not supported, using default grid start")
        else:
            logger.debug(f"Unknown beats version {beats_version!r}, using default grid start")
        return None

    try:
        sample_rate = float(sample_rate)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(sample_rate) or sample_rate <= 0:
        return None

    grid = decode_beat_grid(blob)
    if grid is None or not grid.is_complete():
        logger.debug("Beat grid has no first beat or no bpm")
        return None
    if not math.isfinite(grid.bpm) or grid.bpm <= 0:
        logger.debug(f"Beat grid has invalid bpm {grid.bpm}")
        return None

    beat_length = 60.0 / grid.bpm
    position = grid.first_beat_frame / sample_rate
    return normalize_beat_offset(position, beat_length)
