import pytest

from mixxx2rekordbox.rekordbox.fields import (
    COLOR_HEX, COLOR_NAMES, RATING_SCALE,
    color_to_hex, color_to_name, rating_to_rekordbox, file_type_label,
)


def test_colour_tables_share_keys():
    assert set(COLOR_HEX) == set(COLOR_NAMES)


def test_colour_hex_values_are_prefixed_six_digit_hex():
    for value in COLOR_HEX.values():
        assert value.startswith('0x')
        assert len(value) == 8
        int(value, 16)


@pytest.mark.parametrize(
    "color,expected_hex,expected_name",
    [
        (8849664, '0xFF0000', 'Red'),
        (86264, '0x0000FF', 'Blue'),
        (16281848, '0xFF007F', 'Pink'),
        (8849664.0, '0xFF0000', 'Red'),
        (0, '', ''),
        (123, '', ''),
        (None, '', ''),
        ('8849664', '', ''),
        (True, '', ''),
    ],
)
def test_colour_mapping(color, expected_hex, expected_name):
    assert color_to_hex(color) == expected_hex
    assert color_to_name(color) == expected_name


@pytest.mark.parametrize(
    "rating,expected",
    [
        (0, 0),
        (1, 51),
        (2, 102),
        (3, 153),
        (4, 204),
        (5, 255),
        (6, 255),
        (100, 255),
        (-1, 0),
        (2.5, 0),
        ('4', 204),
        ('', 0),
        (None, 0),
    ],
)
def test_rating_scale(rating, expected):
    assert rating_to_rekordbox(rating) == expected


def test_rating_scale_is_linear():
    assert [RATING_SCALE[stars] for stars in range(6)] == [stars * 51 for stars in range(6)]


@pytest.mark.parametrize(
    "file_type,expected",
    [
        ('mp3', 'MP3 File'),
        ('m4a', 'M4A File'),
        ('flac', 'flac'),
        ('', ''),
        (None, ''),
    ],
)
def test_file_type_label(file_type, expected):
    assert file_type_label(file_type) == expected
