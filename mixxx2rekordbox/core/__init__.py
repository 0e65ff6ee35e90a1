"""
Mixxx to Rekordbox Core Package

This package contains the record models and exceptions shared by the
extraction, generation and command line layers. The export pipeline itself
lives in core.engine.
"""

from .models import Track, PositionMark, Playlist, BeatGrid, ExtractedLibrary, ExportResult
from .exceptions import (
    Mixxx2RekordboxError, ServiceError, DatabaseError, ExtractionError,
    GenerationError, ValidationError, ExportError,
)

__all__ = [
    'Track',
    'PositionMark',
    'Playlist',
    'BeatGrid',
    'ExtractedLibrary',
    'ExportResult',
    'Mixxx2RekordboxError',
    'ServiceError',
    'DatabaseError',
    'ExtractionError',
    'GenerationError',
    'ValidationError',
    'ExportError',
]
