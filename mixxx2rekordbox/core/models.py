"""
Data models for Mixxx to Rekordbox

This module defines the typed records materialised from the Mixxx database
and the result object handed back to callers once an export completes.
Nullable source columns are defaulted once, when the records are built, so
every field here already holds a value the Rekordbox XML can represent.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Union

# Mixxx stores audio properties as numbers; a blank string marks a missing value
FieldValue = Union[int, float, str]

MARK_KIND_HOTCUE = "hotcue"
MARK_KIND_CUEPOINT = "cuepoint"

# Mixxx cue types carried over to Rekordbox
CUE_TYPE_POINT = 1
CUE_TYPE_LOOP = 4

PLAYLIST_ORIGIN = "playlist"
CRATE_ORIGIN = "crate"

EXPORT_FILENAME = "rekordbox_export.xml"
EXPORT_MIME_TYPE = "application/xml"


@dataclass
class Track:
    """A visible (not deleted) track from the Mixxx library"""

    track_id: int

    # Basic metadata
    title: str = ""
    artist: str = ""
    album: str = ""
    year: str = ""
    genre: str = ""
    composer: str = ""
    comment: str = ""

    # Audio properties
    duration: FieldValue = ""
    sample_rate: FieldValue = ""
    bit_rate: FieldValue = ""
    average_bpm: FieldValue = ""

    # Descriptive fields
    track_number: FieldValue = ""
    rating: int = 0          # Raw Mixxx stars (0-5)
    play_count: FieldValue = ""
    file_size: FieldValue = ""
    color: int = 0           # Mixxx colour id
    tonality: str = ""
    file_type: str = ""      # Extension token (mp3, m4a, ...)

    # Location and beat grid
    location: str = ""
    beats: Optional[bytes] = None
    beats_version: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            field.name: getattr(self, field.name)
            for field in self.__dataclass_fields__.values()
        }


@dataclass
class PositionMark:
    """Hotcue, loop or main cue belonging to one track"""

    track_id: int
    kind: str = MARK_KIND_HOTCUE
    name: str = ""
    cue_type: int = CUE_TYPE_POINT
    start: Optional[float] = None    # Seconds
    length: Optional[float] = None   # Seconds, loops only
    num: int = -1
    red: int = 0
    green: int = 0
    blue: int = 0

    @property
    def is_loop(self) -> bool:
        return self.kind == MARK_KIND_HOTCUE and self.cue_type == CUE_TYPE_LOOP

    @property
    def end(self) -> Optional[float]:
        """Loop end position in seconds"""
        if self.start is None or self.length is None:
            return None
        return self.start + self.length


@dataclass
class Playlist:
    """A Mixxx playlist or crate with its member track ids"""

    playlist_id: str
    name: str
    origin: str = PLAYLIST_ORIGIN
    track_ids: List[int] = field(default_factory=list)


@dataclass
class BeatGrid:
    """Decoded contents of a Mixxx BeatGrid-2.0 blob"""

    bpm: Optional[float] = None
    bpm_source: str = "ANALYZER"
    first_beat_frame: Optional[int] = None
    first_beat_enabled: bool = True
    first_beat_source: str = "ANALYZER"

    def is_complete(self) -> bool:
        """Check if both the tempo and the first beat are known"""
        return self.bpm is not None and self.first_beat_frame is not None


@dataclass
class ExtractedLibrary:
    """The three record sets pulled from one Mixxx database"""

    tracks: List[Track] = field(default_factory=list)
    position_marks: Dict[int, List[PositionMark]] = field(default_factory=dict)
    playlists: Dict[str, Playlist] = field(default_factory=dict)

    @property
    def position_mark_count(self) -> int:
        return sum(len(marks) for marks in self.position_marks.values())


@dataclass
class ExportResult:
    """Finished Rekordbox document offered to the caller as an attachment"""

    xml: str
    filename: str = EXPORT_FILENAME
    mime_type: str = EXPORT_MIME_TYPE

    tracks_exported: int = 0
    position_marks_exported: int = 0
    playlists_exported: int = 0
    processing_time: float = 0.0

    def to_bytes(self) -> bytes:
        """Serialize the document as UTF-8"""
        return self.xml.encode("utf-8")

    def to_dict(self) -> Dict[str, Any]:
        """Summary without the document body"""
        return {
            'filename': self.filename,
            'mime_type': self.mime_type,
            'tracks_exported': self.tracks_exported,
            'position_marks_exported': self.position_marks_exported,
            'playlists_exported': self.playlists_exported,
            'processing_time': self.processing_time,
        }
