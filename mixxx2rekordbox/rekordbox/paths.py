"""
Location remapping between the Mixxx host and the Rekordbox host.

Mixxx stores absolute paths; the extractor turns them into
``file://localhost/`` URIs, so a Linux path ends up with a doubled slash
(``file://localhost//home/...``). Only that form is rewritten.
"""

SOURCE_PREFIX = "file://localhost//"
TARGET_PREFIX = "file://localhost"

# Length of "file://localhost/"; the remainder keeps its leading slash
_STRIP_LENGTH = 17


def normalize_path(path: str) -> str:
    """Convert every backslash to a forward slash"""
    if not path:
        return path
    return path.replace('\\', '/')


def convert_location(location: str, old_base: str, new_base: str) -> str:
    """
    Rewrite a Mixxx track URI so it points below the new base path

    Args:
        location: URI produced by the track query
        old_base: Base folder of the music on the Mixxx machine
        new_base: Base folder of the music on the Rekordbox machine

    Returns:
        The remapped URI, or ``location`` unchanged when it is not a
        ``file://localhost//`` URI or does not live below ``old_base``
    """
    if not location or not location.startswith(SOURCE_PREFIX):
        return location

    source_path = normalize_path(location[_STRIP_LENGTH:])
    normalized_old_base = normalize_path(old_base or '')
    normalized_new_base = normalize_path(new_base or '')

    if not source_path.startswith(normalized_old_base):
        return location

    target_path = normalized_new_base + source_path[len(normalized_old_base):]
    return f"{TARGET_PREFIX}/{target_path.lstrip('/')}"
