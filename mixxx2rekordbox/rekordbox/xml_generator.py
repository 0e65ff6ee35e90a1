"""
Rekordbox XML document generation.

The document is assembled as text rather than through ElementTree because
Rekordbox and other strict readers expect the exact attribute order and the
single-quoted declaration written here. Element names are fixed template
strings; every attribute value goes through escape_xml().
"""

import math
import unicodedata
from typing import Any, Iterable, List, Mapping, Optional, Union
from xml.sax.saxutils import escape, unescape

from ..core.models import Track, PositionMark, Playlist, MARK_KIND_CUEPOINT, CUE_TYPE_POINT
from ..mixxx.beatgrid import calculate_beat_position
from ..utils.logging_config import get_logger
from .fields import color_to_hex, color_to_name, rating_to_rekordbox, file_type_label
from .paths import convert_location

XML_DECLARATION = "<?xml version='1.0' encoding='UTF-8'?>"
SCHEMA_VERSION = "1.0.0"
PRODUCT_NAME = "rekordbox"
PRODUCT_VERSION = "6.7.7"
PRODUCT_COMPANY = "AlphaTheta"

DEFAULT_BEAT_START = "0.000"

_ATTRIBUTE_ENTITIES = {'"': '&quot;', "'": '&apos;'}
_ATTRIBUTE_UNESCAPES = {'&quot;': '"', '&apos;': "'"}


def format_number(value: Any) -> str:
    """Render a value the way Rekordbox exports do (``128.0`` -> ``128``)"""
    if value is None:
        return ''
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def format_seconds(value: Optional[float]) -> str:
    """Three-decimal seconds, blank if unknown"""
    if value is None:
        return ''
    return f"{value:.3f}"


def escape_xml(value: Any) -> str:
    """Escape ``& < > " '`` in an attribute value"""
    if value is None:
        return ''
    return escape(format_number(value), _ATTRIBUTE_ENTITIES)


def unescape_xml(value: str) -> str:
    """Inverse of escape_xml for string input"""
    return unescape(value, _ATTRIBUTE_UNESCAPES)


def playlist_sort_key(name: Optional[str]) -> tuple:
    """Alphabetical order ignoring case and accents (``Éclair`` before ``Zed``)"""
    name = name or ''
    decomposed = unicodedata.normalize('NFKD', name)
    folded = ''.join(char for char in decomposed if not unicodedata.combining(char)).casefold()
    return folded, name


def _attributes(pairs: Iterable[tuple]) -> str:
    return ' '.join(f'{name}="{escape_xml(value)}"' for name, value in pairs)


class RekordboxXmlGenerator:
    """Builds a DJ_PLAYLISTS document from extracted Mixxx records"""

    def __init__(self, old_base: str, new_base: str):
        self.old_base = old_base
        self.new_base = new_base
        self.logger = get_logger('xml_generator')

    def generate(self, tracks: List[Track],
                 position_marks: Mapping[int, List[PositionMark]],
                 playlists: Union[Mapping[str, Playlist], Iterable[Playlist]]) -> str:
        """
        Build the complete document

        Args:
            tracks: Tracks for the COLLECTION
            position_marks: Marks grouped by track id, in output order
            playlists: Playlist groups (mapping or iterable)

        Returns:
            XML document text
        """
        lines = [
            XML_DECLARATION,
            f'<DJ_PLAYLISTS Version="{SCHEMA_VERSION}">',
            f'  <PRODUCT Name="{PRODUCT_NAME}" Version="{PRODUCT_VERSION}" Company="{PRODUCT_COMPANY}"/>',
            f'  <COLLECTION Entries="{len(tracks)}">',
        ]

        for track in tracks:
            self._add_track(lines, track, position_marks.get(track.track_id, ()))

        lines.append('  </COLLECTION>')

        groups = list(playlists.values()) if isinstance(playlists, Mapping) else list(playlists)
        if groups:
            self._add_playlists(lines, groups)

        lines.append('</DJ_PLAYLISTS>')
        return '\n'.join(lines)

    def _add_track(self, lines: List[str], track: Track, marks: Iterable[PositionMark]):
        location = convert_location(track.location, self.old_base, self.new_base)
        attributes = _attributes([
            ('TrackID', track.track_id),
            ('Name', track.title),
            ('Artist', track.artist),
            ('Composer', track.composer),
            ('Album', track.album),
            ('Grouping', color_to_name(track.color)),
            ('Genre', track.genre),
            ('Kind', file_type_label(track.file_type)),
            ('Size', track.file_size),
            ('TotalTime', track.duration),
            ('DiscNumber', ''),
            ('TrackNumber', track.track_number),
            ('Year', track.year),
            ('AverageBpm', track.average_bpm),
            ('DateAdded', ''),
            ('BitRate', track.bit_rate),
            ('SampleRate', track.sample_rate),
            ('Comments', track.comment),
            ('PlayCount', track.play_count),
            ('Rating', rating_to_rekordbox(track.rating)),
            ('Location', location),
            ('Remixer', ''),
            ('Tonality', track.tonality),
            ('Label', ''),
            ('Mix', ''),
            ('Colour', color_to_hex(track.color)),
        ])
        lines.append(f'    <TRACK {attributes}>')

        if track.average_bpm and track.sample_rate:
            lines.append(f'      <TEMPO {self._tempo_attributes(track)}/>')

        for mark in marks:
            lines.append(f'      <POSITION_MARK {self._position_mark_attributes(mark)}/>')

        lines.append('    </TRACK>')

    def _tempo_attributes(self, track: Track) -> str:
        beat_position = None
        if track.beats:
            beat_position = calculate_beat_position(track.beats, track.sample_rate, track.beats_version)
            if beat_position is None:
                self.logger.debug(f"Track {track.track_id}: beat grid start unknown, using {DEFAULT_BEAT_START}")

        inizio = format_seconds(beat_position) if beat_position is not None else DEFAULT_BEAT_START
        return _attributes([
            ('Inizio', inizio),
            ('Bpm', track.average_bpm),
            ('Metro', '4/4'),
            ('Battito', '1'),
        ])

    def _position_mark_attributes(self, mark: PositionMark) -> str:
        pairs = [('Name', mark.name)]

        if mark.kind == MARK_KIND_CUEPOINT:
            pairs += [
                ('Type', '0'),
                ('Start', format_seconds(mark.start)),
                ('Num', '-1'),
            ]
        elif mark.is_loop:
            pairs += [
                ('Type', '4'),
                ('Start', format_seconds(mark.start)),
                ('End', format_seconds(mark.end)),
                ('Num', '-1'),
            ]
        else:
            if mark.cue_type != CUE_TYPE_POINT:
                self.logger.debug(f"Track {mark.track_id}: cue type {mark.cue_type} exported as hotcue")
            pairs += [
                ('Type', '0'),
                ('Start', format_seconds(mark.start)),
                ('Num', mark.num),
                ('Red', mark.red),
                ('Green', mark.green),
                ('Blue', mark.blue),
            ]

        return _attributes(pairs)

    def _add_playlists(self, lines: List[str], groups: List[Playlist]):
        lines.append('  <PLAYLISTS>')
        lines.append(f'    <NODE Name="ROOT" Type="0" Count="{len(groups)}">')

        for playlist in sorted(groups, key=lambda p: playlist_sort_key(p.name)):
            node = _attributes([
                ('Name', playlist.name),
                ('Type', '1'),
                ('KeyType', '0'),
                ('Entries', len(playlist.track_ids)),
            ])
            lines.append(f'      <NODE {node}>')
            for track_id in playlist.track_ids:
                lines.append(f'        <TRACK Key="{escape_xml(track_id)}"/>')
            lines.append('      </NODE>')

        lines.append('    </NODE>')
        lines.append('  </PLAYLISTS>')


def generate_xml(tracks: List[Track],
                 position_marks: Mapping[int, List[PositionMark]],
                 playlists: Union[Mapping[str, Playlist], Iterable[Playlist]],
                 old_base: str, new_base: str) -> str:
    """Build a Rekordbox XML document (see RekordboxXmlGenerator.generate)"""
    return RekordboxXmlGenerator(old_base, new_base).generate(tracks, position_marks, playlists)
