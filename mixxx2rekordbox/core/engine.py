"""
Mixxx to Rekordbox - Core Export Engine

This module runs one complete export: load the Mixxx database in memory,
extract tracks, position marks and playlists, and turn them into a Rekordbox
XML document. Each call owns its own database handle and releases it before
returning, whether the export succeeded or not.
"""

import time
from typing import Callable, Optional

from ..mixxx.database import MixxxDatabase
from ..mixxx.extractor import RecordExtractor
from ..rekordbox.xml_generator import RekordboxXmlGenerator
from ..utils.logging_config import get_logger
from .exceptions import DatabaseError, ExtractionError, GenerationError, Mixxx2RekordboxError
from .models import ExportResult

ProgressCallback = Callable[[int, str], None]


class ExportEngine:
    """
    Export pipeline for one Mixxx database

    Progress is reported as (percent, message) pairs to an optional callback
    and logged at INFO level, in the order:
    reading, loading, querying, tracks, position marks, playlists,
    generating, done.
    """

    def __init__(self, progress_callback: Optional[ProgressCallback] = None):
        self.progress_callback = progress_callback
        self.logger = get_logger('engine')

    def _report(self, percent: int, message: str):
        self.logger.info(message)
        if self.progress_callback:
            self.progress_callback(percent, message)

    def export(self, database_bytes: bytes, old_base: str, new_base: str,
               include_playlists: bool = True, include_crates: bool = True,
               source: Optional[str] = None) -> ExportResult:
        """
        Export a Mixxx library as a Rekordbox XML document

        Args:
            database_bytes: Contents of a mixxxdb.sqlite file
            old_base: Path prefix of the tracks on the Mixxx machine
            new_base: Path prefix to use in the Rekordbox document
            include_playlists: Export Mixxx playlists
            include_crates: Export Mixxx crates
            source: Database file name for error messages

        Returns:
            ExportResult with the document and counters

        Raises:
            ExtractionError: If the database cannot be loaded or queried
            GenerationError: If the document cannot be assembled
        """
        start_time = time.time()
        self._report(10, "Reading database...")

        try:
            self._report(20, "Loading SQLite...")
            database = MixxxDatabase.from_bytes(database_bytes, source=source)
        except DatabaseError as e:
            self.logger.error(f"Could not open database: {e}")
            raise ExtractionError("Could not open Mixxx database", details=str(e), filepath=source)

        with database:
            self._report(30, "Executing SQL queries...")
            library = RecordExtractor(database).extract(include_playlists, include_crates)

            self._report(50, f"Found {len(library.tracks)} tracks")
            self._report(70, f"Found {library.position_mark_count} position marks")
            self._report(85, f"Found {len(library.playlists)} playlists/crates")

            self._report(90, "Generating XML...")
            try:
                xml = RekordboxXmlGenerator(old_base, new_base).generate(
                    library.tracks, library.position_marks, library.playlists)
            except Mixxx2RekordboxError:
                raise
            except (TypeError, ValueError, AttributeError) as e:
                self.logger.error(f"XML generation failed: {e}")
                raise GenerationError("Could not generate Rekordbox XML", details=str(e), filepath=source)

        result = ExportResult(
            xml=xml,
            tracks_exported=len(library.tracks),
            position_marks_exported=library.position_mark_count,
            playlists_exported=len(library.playlists),
            processing_time=time.time() - start_time,
        )
        self._report(100, "XML generated successfully!")
        return result


def export_library(database_bytes: bytes, old_base: str, new_base: str,
                   include_playlists: bool = True, include_crates: bool = True,
                   progress_callback: Optional[ProgressCallback] = None,
                   source: Optional[str] = None) -> ExportResult:
    """Export a Mixxx database image (see ExportEngine.export)"""
    engine = ExportEngine(progress_callback)
    return engine.export(database_bytes, old_base, new_base,
                         include_playlists, include_crates, source)


def export_library_file(db_path: str, old_base: str, new_base: str,
                        include_playlists: bool = True, include_crates: bool = True,
                        progress_callback: Optional[ProgressCallback] = None) -> ExportResult:
    """Read a mixxxdb.sqlite file from disk and export it"""
    try:
        with open(db_path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise ExtractionError("Could not read database file", details=str(e), filepath=db_path)

    return export_library(data, old_base, new_base, include_playlists, include_crates,
                          progress_callback, source=db_path)
