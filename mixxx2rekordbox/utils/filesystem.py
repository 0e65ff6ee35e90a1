"""
Filesystem utilities for Mixxx to Rekordbox

Directory handling and writing of the finished export document.
"""

import os
from pathlib import Path

from ..core.exceptions import ExportError
from ..core.models import ExportResult


def ensure_directory(path: str, create: bool = True) -> bool:
    """
    Ensure a directory exists, optionally creating it

    Args:
        path: Directory path to check/create
        create: Whether to create the directory if it doesn't exist

    Returns:
        True if directory exists or was created successfully

    Raises:
        ExportError: If the path is not a directory or cannot be created
    """
    path_obj = Path(path)

    if path_obj.exists():
        if path_obj.is_dir():
            return True
        raise ExportError(f"Path exists but is not a directory: {path}", filepath=path)

    if not create:
        return False

    try:
        path_obj.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExportError("Failed to create directory", details=str(e), filepath=path)
    return True


def resolve_output_path(output_path: str, filename: str) -> str:
    """A directory (existing, or given with a trailing separator) receives the default filename"""
    if os.path.isdir(output_path) or output_path.endswith(('/', os.sep)):
        return os.path.join(output_path, filename)
    return output_path


def write_export_file(result: ExportResult, output_path: str) -> str:
    """
    Write an export document to disk

    Args:
        result: Finished export
        output_path: Target file, or directory to place result.filename in

    Returns:
        Path of the written file

    Raises:
        ExportError: If the file cannot be written
    """
    target = resolve_output_path(output_path, result.filename)

    parent = os.path.dirname(target)
    if parent:
        ensure_directory(parent)

    try:
        with open(target, 'wb') as f:
            f.write(result.to_bytes())
    except OSError as e:
        raise ExportError("Failed to write export file", details=str(e), filepath=target)

    return target
