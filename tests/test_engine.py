import xml.etree.ElementTree as ET

import pytest

from mixxx2rekordbox.core import engine as engine_module
from mixxx2rekordbox.core.engine import export_library, export_library_file
from mixxx2rekordbox.core.exceptions import ExtractionError, GenerationError, Mixxx2RekordboxError
from mixxx2rekordbox.mixxx.database import MixxxDatabase

OLD_BASE = '/home/user/music'
NEW_BASE = 'D:/music'


@pytest.fixture
def opened_databases(monkeypatch):
    """Record every database handle an export opens"""
    opened = []
    real_from_bytes = MixxxDatabase.from_bytes

    def tracking_from_bytes(data, source=None):
        database = real_from_bytes(data, source)
        opened.append(database)
        return database

    monkeypatch.setattr(engine_module.MixxxDatabase, 'from_bytes', staticmethod(tracking_from_bytes))
    return opened


def test_export_counts(sample_database_bytes):
    result = export_library(sample_database_bytes, OLD_BASE, NEW_BASE)

    assert result.tracks_exported == 2
    assert result.position_marks_exported == 3
    assert result.playlists_exported == 3
    assert result.filename == 'rekordbox_export.xml'
    assert result.mime_type == 'application/xml'
    assert result.processing_time >= 0


def test_export_document(sample_database_bytes):
    result = export_library(sample_database_bytes, OLD_BASE, NEW_BASE)
    root = ET.fromstring(result.to_bytes())

    tracks = root.findall('./COLLECTION/TRACK')
    assert root.find('./COLLECTION').get('Entries') == '2'
    assert [track.get('TrackID') for track in tracks] == ['1', '2']

    first = tracks[0]
    assert first.get('Location') == 'file://localhost/D:/music/song1.mp3'
    assert first.get('Rating') == '153'
    assert first.get('Kind') == 'MP3 File'
    assert first.find('./TEMPO').get('Inizio') == '0.100'
    assert [mark.get('Name') for mark in first.findall('./POSITION_MARK')] == ['Loop', 'Drop', 'Cuepoint']

    second = tracks[1]
    assert second.get('Artist') == 'Tom & "Jerry"'
    assert second.get('Location') == 'file://localhost//other/path/tune.flac'
    assert second.find('./TEMPO') is None

    nodes = root.findall('./PLAYLISTS/NODE/NODE')
    assert [node.get('Name') for node in nodes] == ['[C]Techno', '[P]Alpha', '[P]Beach']
    assert [key.get('Key') for key in nodes[2].findall('./TRACK')] == ['2', '1']


def test_export_without_groups_has_no_playlists(sample_database_bytes):
    result = export_library(sample_database_bytes, OLD_BASE, NEW_BASE,
                            include_playlists=False, include_crates=False)

    assert result.playlists_exported == 0
    assert '<PLAYLISTS>' not in result.xml


def test_progress_messages(sample_database_bytes):
    events = []
    export_library(sample_database_bytes, OLD_BASE, NEW_BASE,
                   progress_callback=lambda percent, message: events.append((percent, message)))

    messages = [message for _, message in events]
    assert messages == [
        "Reading database...",
        "Loading SQLite...",
        "Executing SQL queries...",
        "Found 2 tracks",
        "Found 3 position marks",
        "Found 3 playlists/crates",
        "Generating XML...",
        "XML generated successfully!",
    ]
    percents = [percent for percent, _ in events]
    assert percents == sorted(percents)
    assert percents[-1] == 100


def test_database_released_after_export(sample_database_bytes, opened_databases):
    export_library(sample_database_bytes, OLD_BASE, NEW_BASE)

    assert len(opened_databases) == 1
    assert not opened_databases[0].is_open


def test_database_released_after_failed_query(library_builder, opened_databases):
    library_builder.connection.execute("DROP TABLE cues")
    data = library_builder.to_bytes()

    with pytest.raises(ExtractionError):
        export_library(data, OLD_BASE, NEW_BASE)

    assert len(opened_databases) == 1
    assert not opened_databases[0].is_open


def test_database_released_after_failed_generation(sample_database_bytes, opened_databases, monkeypatch):
    def broken_generate(self, tracks, position_marks, playlists):
        raise ValueError("bad value")

    monkeypatch.setattr(engine_module.RekordboxXmlGenerator, 'generate', broken_generate)

    with pytest.raises(GenerationError) as excinfo:
        export_library(sample_database_bytes, OLD_BASE, NEW_BASE)

    assert 'bad value' in str(excinfo.value)
    assert len(opened_databases) == 1
    assert not opened_databases[0].is_open


@pytest.mark.parametrize("data", [b'', b'this is not an sqlite database at all'])
def test_invalid_database_raises_extraction_error(data):
    with pytest.raises(ExtractionError):
        export_library(data, OLD_BASE, NEW_BASE)


def test_errors_share_one_base_type():
    with pytest.raises(Mixxx2RekordboxError):
        export_library(b'', OLD_BASE, NEW_BASE)


def test_export_library_file(sample_database_file):
    result = export_library_file(str(sample_database_file), OLD_BASE, NEW_BASE)
    assert result.tracks_exported == 2


def test_export_library_file_missing(tmp_path):
    with pytest.raises(ExtractionError):
        export_library_file(str(tmp_path / 'missing.sqlite'), OLD_BASE, NEW_BASE)


def test_independent_exports(sample_database_bytes, library_builder):
    library_builder.add_track(5, location='/home/user/music/x.mp3', title='Only')
    small = library_builder.to_bytes()

    first = export_library(sample_database_bytes, OLD_BASE, NEW_BASE)
    second = export_library(small, OLD_BASE, NEW_BASE)
    third = export_library(sample_database_bytes, OLD_BASE, NEW_BASE)

    assert second.tracks_exported == 1
    assert first.xml == third.xml
