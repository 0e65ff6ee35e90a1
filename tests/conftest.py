"""
Shared fixtures: a small Mixxx library database built in memory.

The sample library holds two visible tracks, one deleted track, three
playlists (one hidden) and one crate. Positions in ``cues`` are stored in
interleaved stereo samples, like Mixxx does.
"""

import sqlite3

import pytest

from mixxx2rekordbox.mixxx.beatgrid import BeatGridMessage

MIXXX_SCHEMA = """
CREATE TABLE library (
    id INTEGER PRIMARY KEY,
    artist TEXT, title TEXT, album TEXT, year TEXT, genre TEXT,
    tracknumber TEXT, comment TEXT, duration REAL, samplerate INTEGER,
    bitrate INTEGER, bpm REAL, timesplayed INTEGER, filetype TEXT,
    key TEXT, composer TEXT, rating INTEGER, color INTEGER,
    beats BLOB, beats_version TEXT, cuepoint REAL,
    mixxx_deleted INTEGER DEFAULT 0
);
CREATE TABLE track_locations (
    id INTEGER PRIMARY KEY, location TEXT, filesize INTEGER
);
CREATE TABLE cues (
    id INTEGER PRIMARY KEY, track_id INTEGER, type INTEGER,
    position INTEGER, length INTEGER, hotcue INTEGER, label TEXT, color INTEGER
);
CREATE TABLE Playlists (
    id INTEGER PRIMARY KEY, name TEXT, hidden INTEGER DEFAULT 0
);
CREATE TABLE PlaylistTracks (
    id INTEGER PRIMARY KEY, playlist_id INTEGER, track_id INTEGER, position INTEGER
);
CREATE TABLE crates (
    id INTEGER PRIMARY KEY, name TEXT
);
CREATE TABLE crate_tracks (
    crate_id INTEGER, track_id INTEGER
);
"""

TRACK_COLUMNS = (
    'id', 'artist', 'title', 'album', 'year', 'genre', 'tracknumber', 'comment',
    'duration', 'samplerate', 'bitrate', 'bpm', 'timesplayed', 'filetype', 'key',
    'composer', 'rating', 'color', 'beats', 'beats_version', 'cuepoint', 'mixxx_deleted',
)

OLD_BASE = '/home/user/music'
NEW_BASE = 'D:/music'


def beat_grid_blob(bpm=None, first_beat_frame=None):
    """Serialized BeatGrid-2.0 message"""
    message = BeatGridMessage()
    if bpm is not None:
        message.bpm.bpm = bpm
    if first_beat_frame is not None:
        message.first_beat.frame_position = first_beat_frame
    return message.SerializeToString()


class MixxxLibraryBuilder:
    """Builds a Mixxx database and returns it as file bytes"""

    def __init__(self, schema: str = MIXXX_SCHEMA):
        self.connection = sqlite3.connect(':memory:')
        self.connection.executescript(schema)

    def add_track(self, track_id, location=None, filesize=None, **columns):
        values = {'id': track_id, 'mixxx_deleted': 0}
        values.update(columns)
        names = [name for name in TRACK_COLUMNS if name in values]
        # "key" is quoted only to keep the column list readable
        column_sql = ', '.join(f'"{name}"' for name in names)
        placeholders = ', '.join('?' for _ in names)
        self.connection.execute(
            f"INSERT INTO library ({column_sql}) VALUES ({placeholders})",
            [values[name] for name in names],
        )
        if location is not None:
            self.connection.execute(
                "INSERT INTO track_locations (id, location, filesize) VALUES (?, ?, ?)",
                (track_id, location, filesize),
            )
        return self

    def add_cue(self, track_id, cue_type, position, length=0, hotcue=None, label=None, color=None):
        self.connection.execute(
            "INSERT INTO cues (track_id, type, position, length, hotcue, label, color) "
            "VALUES (?, ?, ?, ?, ?, ?, ?)",
            (track_id, cue_type, position, length, hotcue, label, color),
        )
        return self

    def add_playlist(self, playlist_id, name, track_ids, hidden=0):
        self.connection.execute(
            "INSERT INTO Playlists (id, name, hidden) VALUES (?, ?, ?)",
            (playlist_id, name, hidden),
        )
        for position, track_id in enumerate(track_ids, start=1):
            self.connection.execute(
                "INSERT INTO PlaylistTracks (playlist_id, track_id, position) VALUES (?, ?, ?)",
                (playlist_id, track_id, position),
            )
        return self

    def add_crate(self, crate_id, name, track_ids):
        self.connection.execute("INSERT INTO crates (id, name) VALUES (?, ?)", (crate_id, name))
        for track_id in track_ids:
            self.connection.execute(
                "INSERT INTO crate_tracks (crate_id, track_id) VALUES (?, ?)",
                (crate_id, track_id),
            )
        return self

    def to_bytes(self) -> bytes:
        self.connection.commit()
        data = self.connection.serialize()
        self.connection.close()
        return data


def build_sample_library() -> bytes:
    builder = MixxxLibraryBuilder()
    builder.add_track(
        1, location='/home/user/music/song1.mp3', filesize=9876543,
        artist='Artist A', title='Song One', album='First Album', year='2020',
        genre='House', tracknumber='3', comment='warm up', duration=240.0,
        samplerate=44100, bitrate=320, bpm=128.0, timesplayed=5, filetype='mp3',
        key='8A', composer='Composer A', rating=3, color=8849664,
        beats=beat_grid_blob(128.0, 4410), beats_version='BeatGrid-2.0',
        cuepoint=44100,
    )
    builder.add_track(
        2, location='/other/path/tune.flac', filesize=123,
        artist='Tom & "Jerry"', title="<Beach> 'Tune'", samplerate=48000,
        filetype='flac',
    )
    builder.add_track(
        3, location='/home/user/music/deleted.mp3', filesize=1,
        title='Deleted', samplerate=44100, bpm=120.0, cuepoint=44100, mixxx_deleted=1,
    )

    # Hotcue at 1s, loop from 10s lasting 5s, an intro marker (type 2) that is not exported
    builder.add_cue(1, 1, 88200, hotcue=0, label='Drop', color=0xFF8000)
    builder.add_cue(1, 4, 882000, length=441000, hotcue=-1, label='Loop')
    builder.add_cue(1, 2, 0, label='Intro')
    builder.add_cue(3, 1, 88200, hotcue=0, label='Gone')

    builder.add_playlist(1, 'Beach', [2, 1, 3])
    builder.add_playlist(2, 'Alpha', [1])
    builder.add_playlist(3, 'Auto DJ', [1], hidden=1)
    builder.add_crate(1, 'Techno', [2, 1, 3])
    return builder.to_bytes()


@pytest.fixture
def library_builder():
    """Empty Mixxx database with the full schema"""
    return MixxxLibraryBuilder()


@pytest.fixture
def sample_database_bytes():
    return build_sample_library()


@pytest.fixture
def sample_database_file(tmp_path, sample_database_bytes):
    path = tmp_path / 'mixxxdb.sqlite'
    path.write_bytes(sample_database_bytes)
    return path


@pytest.fixture
def clean_environment(monkeypatch, tmp_path):
    """No M2R_* variables and no .env file above the working directory"""
    for name in ('M2R_OLD_BASE', 'M2R_NEW_BASE', 'M2R_INCLUDE_PLAYLISTS', 'M2R_INCLUDE_CRATES',
                 'M2R_OUTPUT', 'M2R_LOG_LEVEL', 'M2R_LOG_DIR', 'M2R_DEBUG'):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
