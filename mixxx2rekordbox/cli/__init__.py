"""
Mixxx to Rekordbox CLI Package

Command-line interface for exporting a Mixxx library.
"""

from .main import main as cli_main

__all__ = ['cli_main']
