"""
Record extraction from a Mixxx library database.

Runs the track, position mark and playlist/crate queries and turns the rows
into typed records. Missing values are replaced by Rekordbox-friendly
defaults inside the SQL itself, so records never carry NULLs except for the
beat grid blob and marker positions of tracks without a sample rate.
"""

import sqlite3
from typing import Any, Dict, List, Optional

from ..core.exceptions import ExtractionError
from ..core.models import (
    Track, PositionMark, Playlist, ExtractedLibrary,
    MARK_KIND_HOTCUE, MARK_KIND_CUEPOINT, CUE_TYPE_POINT, CUE_TYPE_LOOP,
    PLAYLIST_ORIGIN, CRATE_ORIGIN,
)
from ..utils.logging_config import get_logger
from .database import MixxxDatabase

TRACKS_QUERY = """
    SELECT
        T0.id AS TrackID,
        IFNULL(T0.artist, '') AS Artist,
        IFNULL(T0.title, '') AS Name,
        IFNULL(T0.album, '') AS Album,
        IFNULL(T0.year, '') AS Year,
        IFNULL(T0.genre, '') AS Genre,
        IFNULL(T0.tracknumber, '') AS TrackNumber,
        IFNULL(T0.comment, '') AS Comments,
        IFNULL(T0.duration, '') AS TotalTime,
        IFNULL(T0.samplerate, '') AS SampleRate,
        IFNULL(T0.bitrate, '') AS BitRate,
        IFNULL(T0.bpm, '') AS AverageBpm,
        IFNULL(T0.timesplayed, '') AS PlayCount,
        IFNULL(T0.filetype, '') AS Kind,
        IFNULL(T0.key, '') AS Tonality,
        IFNULL(T0.composer, '') AS Composer,
        'file://localhost/' || IFNULL(T1.location, '') AS Location,
        IFNULL(T1.filesize, '') AS Size,
        IFNULL(T0.rating, 0) AS Rating,
        IFNULL(T0.color, 0) AS Color,
        T0.beats AS Beats,
        IFNULL(T0.beats_version, '') AS BeatsVersion
    FROM library T0
    INNER JOIN track_locations T1 ON T0.id = T1.id
    WHERE T0.mixxx_deleted = 0
    ORDER BY T0.id
"""

# Mixxx counts cue positions in interleaved stereo samples, hence 2.0 * samplerate.
# Hotcues (type 1) and loops (type 4) come first, then the main cue of each track.
POSITION_MARKS_QUERY = """
    SELECT
        T0.track_id AS TrackID,
        IFNULL(T0.label, '') AS Name,
        T0.type AS Type,
        'hotcue' AS InternalType,
        0 AS SortGroup,
        ROUND(T0.position / (2.0 * T1.samplerate), 3) AS Start,
        ROUND(T0.length / (2.0 * T1.samplerate), 3) AS Stop,
        IFNULL(T0.hotcue, -1) AS Num,
        ((IFNULL(T0.color, 0) >> 16) & 255) AS Red,
        ((IFNULL(T0.color, 0) >> 8) & 255) AS Green,
        (IFNULL(T0.color, 0) & 255) AS Blue
    FROM cues T0
    INNER JOIN library T1 ON T0.track_id = T1.id
    WHERE T0.type IN (1, 4) AND T1.mixxx_deleted = 0

    UNION ALL

    SELECT
        T1.id AS TrackID,
        'Cuepoint' AS Name,
        0 AS Type,
        'cuepoint' AS InternalType,
        1 AS SortGroup,
        ROUND(T1.cuepoint / (2.0 * T1.samplerate), 3) AS Start,
        0 AS Stop,
        -1 AS Num,
        0 AS Red,
        0 AS Green,
        0 AS Blue
    FROM library T1
    WHERE T1.mixxx_deleted = 0 AND T1.cuepoint IS NOT NULL AND T1.cuepoint > 0

    ORDER BY TrackID, SortGroup, Num, Start
"""

PLAYLISTS_SUBQUERY = """
    SELECT '1' || T0.id AS PlaylistID, '[P]' || IFNULL(T0.name, '') AS Name,
           'playlist' AS Origin, T1.track_id AS TrackID, T1.position AS Position
    FROM Playlists T0
    INNER JOIN PlaylistTracks T1 ON T0.id = T1.playlist_id
    INNER JOIN library T2 ON T1.track_id = T2.id
    INNER JOIN track_locations T3 ON T2.id = T3.id
    WHERE T0.hidden = 0 AND T2.mixxx_deleted = 0
"""

# Crates are unordered in Mixxx; the track id gives them a stable order.
# Both sources keep only tracks that appear in the collection.
CRATES_SUBQUERY = """
    SELECT '2' || T0.id AS PlaylistID, '[C]' || IFNULL(T0.name, '') AS Name,
           'crate' AS Origin, T1.track_id AS TrackID, T1.track_id AS Position
    FROM crates T0
    INNER JOIN crate_tracks T1 ON T0.id = T1.crate_id
    INNER JOIN library T2 ON T1.track_id = T2.id
    INNER JOIN track_locations T3 ON T2.id = T3.id
    WHERE T2.mixxx_deleted = 0
"""


def build_playlists_query(include_playlists: bool, include_crates: bool) -> Optional[str]:
    """Compose the grouping query for the selected sources (None if nothing selected)"""
    parts = []
    if include_playlists:
        parts.append(PLAYLISTS_SUBQUERY)
    if include_crates:
        parts.append(CRATES_SUBQUERY)
    if not parts:
        return None
    return "\n    UNION ALL\n".join(parts) + "\n    ORDER BY PlaylistID, Position ASC\n"


def _as_float(value: Any) -> Optional[float]:
    if value is None or value == '':
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_blob(value: Any) -> Optional[bytes]:
    """Binary columns may arrive as bytes, bytearray or memoryview"""
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    return None


class RecordExtractor:
    """Materialises tracks, position marks and playlists from a Mixxx database"""

    def __init__(self, database: MixxxDatabase):
        self.database = database
        self.logger = get_logger('extractor')

    def extract(self, include_playlists: bool = True, include_crates: bool = True) -> ExtractedLibrary:
        """
        Run all three queries

        Args:
            include_playlists: Export Mixxx playlists
            include_crates: Export Mixxx crates

        Returns:
            ExtractedLibrary with every record set

        Raises:
            ExtractionError: If any query fails
        """
        return ExtractedLibrary(
            tracks=self.extract_tracks(),
            position_marks=self.extract_position_marks(),
            playlists=self.extract_playlists(include_playlists, include_crates),
        )

    def extract_tracks(self) -> List[Track]:
        """Visible tracks joined with their file location"""
        result = self._run(TRACKS_QUERY, "tracks")
        tracks = [self._build_track(record) for record in result.records()]
        self.logger.info(f"Found {len(tracks)} tracks")
        return tracks

    def extract_position_marks(self) -> Dict[int, List[PositionMark]]:
        """Hotcues, loops and main cues grouped by track id"""
        result = self._run(POSITION_MARKS_QUERY, "position marks")

        grouped: Dict[int, List[PositionMark]] = {}
        for record in result.records():
            mark = self._build_position_mark(record)
            grouped.setdefault(mark.track_id, []).append(mark)

        self.logger.info(f"Found {len(result)} position marks")
        return grouped

    def extract_playlists(self, include_playlists: bool = True,
                          include_crates: bool = True) -> Dict[str, Playlist]:
        """Playlists and/or crates keyed by their prefixed id"""
        query = build_playlists_query(include_playlists, include_crates)
        if query is None:
            self.logger.warning("Neither playlists nor crates selected, skipping grouping query")
            return {}

        result = self._run(query, "playlists")

        playlists: Dict[str, Playlist] = {}
        for record in result.records():
            playlist_id = str(record['PlaylistID'])
            playlist = playlists.get(playlist_id)
            if playlist is None:
                origin = CRATE_ORIGIN if record['Origin'] == 'crate' else PLAYLIST_ORIGIN
                playlist = Playlist(playlist_id=playlist_id, name=record['Name'], origin=origin)
                playlists[playlist_id] = playlist
            playlist.track_ids.append(record['TrackID'])

        self.logger.info(f"Found {len(playlists)} playlists/crates")
        return playlists

    def _run(self, query: str, label: str):
        try:
            return self.database.execute(query)
        except sqlite3.Error as e:
            self.logger.error(f"Query for {label} failed: {e}")
            raise ExtractionError(f"Failed to read {label} from Mixxx database",
                                  details=str(e), filepath=self.database.source)

    def _build_track(self, record: Dict[str, Any]) -> Track:
        return Track(
            track_id=record['TrackID'],
            title=record['Name'],
            artist=record['Artist'],
            album=record['Album'],
            year=record['Year'],
            genre=record['Genre'],
            composer=record['Composer'],
            comment=record['Comments'],
            duration=record['TotalTime'],
            sample_rate=record['SampleRate'],
            bit_rate=record['BitRate'],
            average_bpm=record['AverageBpm'],
            track_number=record['TrackNumber'],
            rating=_as_int(record['Rating']),
            play_count=record['PlayCount'],
            file_size=record['Size'],
            color=_as_int(record['Color']),
            tonality=record['Tonality'],
            file_type=record['Kind'],
            location=record['Location'] or '',
            beats=_as_blob(record['Beats']),
            beats_version=record['BeatsVersion'],
        )

    def _build_position_mark(self, record: Dict[str, Any]) -> PositionMark:
        if record['InternalType'] == MARK_KIND_CUEPOINT:
            return PositionMark(
                track_id=record['TrackID'],
                kind=MARK_KIND_CUEPOINT,
                name=record['Name'],
                cue_type=0,
                start=_as_float(record['Start']),
            )

        cue_type = _as_int(record['Type'], CUE_TYPE_POINT)
        return PositionMark(
            track_id=record['TrackID'],
            kind=MARK_KIND_HOTCUE,
            name=record['Name'],
            cue_type=cue_type,
            start=_as_float(record['Start']),
            length=_as_float(record['Stop']) if cue_type == CUE_TYPE_LOOP else None,
            num=_as_int(record['Num'], -1),
            red=_as_int(record['Red']),
            green=_as_int(record['Green']),
            blue=_as_int(record['Blue']),
        )
