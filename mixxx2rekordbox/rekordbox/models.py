"""
Models for reading exported Rekordbox documents back.

These mirror what the exporter writes: a TRACK element with its attributes,
its TEMPO entries and its POSITION_MARK entries, plus the playlist nodes
that reference tracks by key.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


def _to_float(value: Optional[str]) -> Optional[float]:
    if value is None or value == '':
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _to_int(value: Optional[str], default: int = 0) -> int:
    if value is None or value == '':
        return default
    try:
        return int(float(value))
    except ValueError:
        return default


@dataclass
class TempoData:
    """Beat grid entry with timing data"""
    inizio: Optional[float] = None  # Start time in seconds
    bpm: Optional[float] = None
    metro: str = "4/4"              # Time signature
    battito: int = 1                # Beat number

    @classmethod
    def from_xml_node(cls, node) -> 'TempoData':
        return cls(
            inizio=_to_float(node.attrib.get('Inizio')),
            bpm=_to_float(node.attrib.get('Bpm')),
            metro=node.attrib.get('Metro', '4/4'),
            battito=_to_int(node.attrib.get('Battito'), 1),
        )


@dataclass
class MarkData:
    """Cue point, loop or main cue read from a POSITION_MARK"""
    name: str = ""
    type: int = 0        # 0 = cue, 4 = loop
    start: Optional[float] = None
    end: Optional[float] = None
    num: int = -1        # Hot cue slot, -1 for memory cues and loops
    red: Optional[int] = None
    green: Optional[int] = None
    blue: Optional[int] = None

    @property
    def is_hotcue(self) -> bool:
        return self.type == 0 and self.num >= 0

    @property
    def is_loop(self) -> bool:
        return self.type == 4

    @classmethod
    def from_xml_node(cls, node) -> 'MarkData':
        attrib = node.attrib
        colour = {}
        for channel in ('Red', 'Green', 'Blue'):
            if channel in attrib:
                colour[channel.lower()] = _to_int(attrib[channel])
        return cls(
            name=attrib.get('Name', ''),
            type=_to_int(attrib.get('Type'), 0),
            start=_to_float(attrib.get('Start')),
            end=_to_float(attrib.get('End')),
            num=_to_int(attrib.get('Num'), -1),
            **colour
        )


@dataclass
class RekordboxTrack:
    """Track entry of an exported COLLECTION"""
    track_id: str = ""
    location: str = ""

    title: str = ""
    artist: str = ""
    album: str = ""
    genre: str = ""
    comment: str = ""
    year: str = ""

    key: str = ""        # Tonality
    rating: int = 0      # 0-255 Rekordbox scale
    colour: str = ""     # Hex colour
    grouping: str = ""   # Colour name
    kind: str = ""
    play_count: str = ""

    tempo_data: List[TempoData] = field(default_factory=list)
    position_marks: List[MarkData] = field(default_factory=list)

    # Every attribute exactly as written, in document order
    attributes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_xml_node(cls, node) -> 'RekordboxTrack':
        """Build a track from a TRACK element"""
        attrib = node.attrib
        return cls(
            track_id=attrib.get('TrackID', ''),
            location=attrib.get('Location', ''),
            title=attrib.get('Name', ''),
            artist=attrib.get('Artist', ''),
            album=attrib.get('Album', ''),
            genre=attrib.get('Genre', ''),
            comment=attrib.get('Comments', ''),
            year=attrib.get('Year', ''),
            key=attrib.get('Tonality', ''),
            rating=_to_int(attrib.get('Rating'), 0),
            colour=attrib.get('Colour', ''),
            grouping=attrib.get('Grouping', ''),
            kind=attrib.get('Kind', ''),
            play_count=attrib.get('PlayCount', ''),
            tempo_data=[TempoData.from_xml_node(tempo) for tempo in node.findall('./TEMPO')],
            position_marks=[MarkData.from_xml_node(mark) for mark in node.findall('./POSITION_MARK')],
            attributes=dict(attrib),
        )


@dataclass
class RekordboxPlaylist:
    """Playlist node under the PLAYLISTS root"""
    name: str
    entries: int = 0
    track_keys: List[str] = field(default_factory=list)
