"""
Parser for exported Rekordbox XML files.

Reads a DJ_PLAYLISTS document back into RekordboxTrack and RekordboxPlaylist
objects so an export can be verified after it has been written.
"""

import os
import xml.etree.ElementTree as ET
from typing import Dict, List, Optional

from ..core.exceptions import ValidationError
from ..utils.logging_config import get_logger
from .models import RekordboxTrack, RekordboxPlaylist


class RekordboxXMLParser:
    """Parser for Rekordbox XML collection files"""

    def __init__(self):
        self.tracks: Dict[str, RekordboxTrack] = {}
        self.playlists: List[RekordboxPlaylist] = []
        self.collection_entries: Optional[int] = None
        self.product: Dict[str, str] = {}
        self.logger = get_logger('xml_parser')

    def parse(self, xml_path: str) -> 'RekordboxXMLParser':
        """Parse a Rekordbox XML file and build the track collection"""
        if not os.path.exists(xml_path):
            raise ValidationError("XML file not found", filepath=xml_path)

        try:
            tree = ET.parse(xml_path)
        except ET.ParseError as e:
            raise ValidationError("Invalid Rekordbox XML", details=str(e), filepath=xml_path)

        self._parse_root(tree.getroot())
        self.logger.info(f"Parsed {len(self.tracks)} tracks from {xml_path}")
        return self

    def parse_string(self, xml_text: str) -> 'RekordboxXMLParser':
        """Parse a document held in memory"""
        try:
            # ElementTree refuses str input that carries an encoding declaration
            root = ET.fromstring(xml_text.encode('utf-8'))
        except ET.ParseError as e:
            raise ValidationError("Invalid Rekordbox XML", details=str(e))

        self._parse_root(root)
        return self

    def _parse_root(self, root):
        if root.tag != 'DJ_PLAYLISTS':
            raise ValidationError(f"Unexpected root element {root.tag}")

        self.tracks = {}
        self.playlists = []

        product = root.find('./PRODUCT')
        self.product = dict(product.attrib) if product is not None else {}

        # Parse all tracks first
        self._parse_tracks(root)

        # Then parse playlists which reference track IDs
        self._parse_playlists(root)

    def _parse_tracks(self, root):
        """Extract all track data from COLLECTION node"""
        collection = root.find('./COLLECTION')
        if collection is None:
            self.logger.warning("No COLLECTION node found in XML")
            return

        entries = collection.attrib.get('Entries')
        self.collection_entries = int(entries) if entries and entries.isdigit() else None

        for track_node in collection.findall('./TRACK'):
            track = RekordboxTrack.from_xml_node(track_node)
            self.tracks[track.track_id] = track

    def _parse_playlists(self, root):
        """Extract playlist nodes with their track references"""
        root_node = root.find('./PLAYLISTS/NODE')
        if root_node is None:
            self.logger.debug("No PLAYLISTS node found in XML")
            return

        for node in root_node.findall('./NODE'):
            entries = node.attrib.get('Entries', '0')
            self.playlists.append(RekordboxPlaylist(
                name=node.attrib.get('Name', ''),
                entries=int(entries) if entries.isdigit() else 0,
                track_keys=[track.attrib.get('Key', '') for track in node.findall('./TRACK')],
            ))

    @property
    def position_mark_count(self) -> int:
        return sum(len(track.position_marks) for track in self.tracks.values())

    def get_playlist(self, name: str) -> Optional[RekordboxPlaylist]:
        """Find a playlist node by its exact name"""
        for playlist in self.playlists:
            if playlist.name == name:
                return playlist
        return None

    def dangling_keys(self) -> List[str]:
        """Playlist keys that reference no track of the collection"""
        return [
            key
            for playlist in self.playlists
            for key in playlist.track_keys
            if key not in self.tracks
        ]
