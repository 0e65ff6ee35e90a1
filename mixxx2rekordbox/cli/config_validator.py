"""
Export Request Validator

Checks the inputs of an export before the engine runs and normalizes the
path fields the same way for every entry point.
"""

import os
from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import ValidationError
from ..rekordbox.paths import normalize_path
from ..utils.logging_config import get_logger

logger = get_logger('cli')

MISSING_DATABASE = "Please select a database file"
MISSING_PATHS = "Please complete both path fields"
NOTHING_SELECTED = "At least one option must be selected (playlists or crates)"


@dataclass
class ExportRequest:
    """Validated parameters of one export"""
    database_path: str
    old_base: str
    new_base: str
    include_playlists: bool = True
    include_crates: bool = True


def clean_path_field(value: Optional[str]) -> str:
    """Trim a path entered by the user and use forward slashes"""
    if value is None:
        return ''
    return normalize_path(value.strip())


def validate_export_request(database_path: Optional[str], old_base: Optional[str],
                            new_base: Optional[str], include_playlists: bool = True,
                            include_crates: bool = True) -> ExportRequest:
    """
    Validate export inputs

    Args:
        database_path: Path of the mixxxdb.sqlite file
        old_base: Music folder prefix on the Mixxx machine
        new_base: Music folder prefix for Rekordbox
        include_playlists: Export playlists
        include_crates: Export crates

    Returns:
        ExportRequest with cleaned path fields

    Raises:
        ValidationError: On the first failed check
    """
    if not database_path or not database_path.strip():
        raise ValidationError(MISSING_DATABASE)

    database_path = database_path.strip()
    if not os.path.isfile(database_path):
        raise ValidationError(MISSING_DATABASE, details="File not found", filepath=database_path)

    old_base = clean_path_field(old_base)
    new_base = clean_path_field(new_base)
    if not old_base or not new_base:
        raise ValidationError(MISSING_PATHS)

    if not include_playlists and not include_crates:
        raise ValidationError(NOTHING_SELECTED)

    logger.debug(f"Export request validated: {database_path} ({old_base} -> {new_base})")
    return ExportRequest(
        database_path=database_path,
        old_base=old_base,
        new_base=new_base,
        include_playlists=include_playlists,
        include_crates=include_crates,
    )
