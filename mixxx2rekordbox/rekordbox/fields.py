"""
Field mapping from Mixxx codes to Rekordbox attribute values.

All functions are total: an unknown code maps to a blank or default value
instead of raising.
"""

from typing import Any

# Mixxx track colour id -> Rekordbox Colour attribute
COLOR_HEX = {
    86264: '0x0000FF',      # Blue
    2023424: '0x00FF00',    # Green
    8849664: '0xFF0000',    # Red
    9963768: '0x660099',    # Purple
    16281848: '0xFF007F',   # Rose/Pink
    16293936: '0xFFA500',   # Orange
    16311089: '0xFFFF00',   # Yellow
}

# Mixxx track colour id -> Rekordbox Grouping attribute
COLOR_NAMES = {
    86264: 'Blue',
    2023424: 'Green',
    8849664: 'Red',
    9963768: 'Purple',
    16281848: 'Pink',
    16293936: 'Orange',
    16311089: 'Yellow',
}

# Mixxx stars -> Rekordbox 0-255 rating
RATING_SCALE = {
    0: 0,
    1: 51,
    2: 102,
    3: 153,
    4: 204,
    5: 255,
}

FILE_TYPE_LABELS = {
    'm4a': 'M4A File',
    'mp3': 'MP3 File',
}


def _color_key(color: Any):
    if isinstance(color, bool):
        return None
    if isinstance(color, int):
        return color
    if isinstance(color, float) and color.is_integer():
        return int(color)
    return None


def color_to_hex(color: Any) -> str:
    """Rekordbox hex colour (``0xRRGGBB``) for a Mixxx colour id"""
    return COLOR_HEX.get(_color_key(color), '')


def color_to_name(color: Any) -> str:
    """Colour family name for a Mixxx colour id"""
    return COLOR_NAMES.get(_color_key(color), '')


def rating_to_rekordbox(rating: Any) -> int:
    """Scale a 0-5 star rating to Rekordbox's 0-255 range"""
    try:
        value = float(rating)
    except (TypeError, ValueError):
        return 0

    if value >= 5:
        return 255
    if value.is_integer():
        return RATING_SCALE.get(int(value), 0)
    return 0


def file_type_label(file_type: Any) -> str:
    """Rekordbox Kind label for a file extension token"""
    if file_type is None:
        return ''
    return FILE_TYPE_LABELS.get(file_type, str(file_type))
