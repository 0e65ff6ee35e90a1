"""
Mixxx library access.

Loads a Mixxx database in memory, extracts its records and decodes the
protobuf beat grids stored with each track.
"""

from .database import MixxxDatabase, QueryResult
from .extractor import RecordExtractor
from .beatgrid import decode_beat_grid, calculate_beat_position

__all__ = [
    'MixxxDatabase',
    'QueryResult',
    'RecordExtractor',
    'decode_beat_grid',
    'calculate_beat_position',
]
