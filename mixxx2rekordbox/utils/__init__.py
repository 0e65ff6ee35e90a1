"""
Mixxx to Rekordbox Utilities Package

This package contains utility functions used throughout the application.
"""

from .filesystem import ensure_directory, write_export_file
from .logging_config import setup_logging, get_logger

__all__ = [
    'ensure_directory',
    'write_export_file',
    'setup_logging',
    'get_logger',
]
