"""
Rekordbox XML output for Mixxx libraries.

Field mapping, location remapping, document generation and a parser to
read exported documents back.
"""

from .models import RekordboxTrack, RekordboxPlaylist, TempoData, MarkData
from .xml_generator import RekordboxXmlGenerator, generate_xml, escape_xml
from .xml_parser import RekordboxXMLParser

__all__ = [
    'RekordboxTrack',
    'RekordboxPlaylist',
    'TempoData',
    'MarkData',
    'RekordboxXmlGenerator',
    'generate_xml',
    'escape_xml',
    'RekordboxXMLParser',
]
