import pytest

from mixxx2rekordbox.rekordbox.paths import convert_location, normalize_path


@pytest.mark.parametrize(
    "location,old_base,new_base,expected",
    [
        # Linux library moved to a Windows drive
        ('file://localhost//home/user/music/song.mp3', '/home/user/music', 'D:/music',
         'file://localhost/D:/music/song.mp3'),
        # Subfolders are kept
        ('file://localhost//home/user/music/house/a b.mp3', '/home/user/music', '/Volumes/USB',
         'file://localhost/Volumes/USB/house/a b.mp3'),
        # Backslashes in the bases are normalised
        ('file://localhost//home/user/music/song.mp3', '\\home\\user\\music', 'D:\\music',
         'file://localhost/D:/music/song.mp3'),
        # Backslashes in the stored location are normalised before matching
        ('file://localhost//home\\user\\music\\a.mp3', '/home/user/music', 'D:/music',
         'file://localhost/D:/music/a.mp3'),
        # Trailing separators on both bases
        ('file://localhost//home/user/music/song.mp3', '/home/user/music/', 'D:/music/',
         'file://localhost/D:/music/song.mp3'),
    ],
)
def test_convert_location(location, old_base, new_base, expected):
    assert convert_location(location, old_base, new_base) == expected


@pytest.mark.parametrize(
    "location",
    [
        'file://localhost/C:/Music/song.mp3',
        'file:///home/user/music/song.mp3',
        '/home/user/music/song.mp3',
        'file://localhost//srv/other/song.mp3',
        '',
    ],
)
def test_non_matching_locations_pass_through(location):
    assert convert_location(location, '/home/user/music', 'D:/music') == location


def test_normalize_path():
    assert normalize_path('C:\\Users\\dj\\Music') == 'C:/Users/dj/Music'
    assert normalize_path('/already/forward') == '/already/forward'
    assert normalize_path('') == ''
