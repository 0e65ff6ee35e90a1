"""Mixxx to Rekordbox library exporter.

Converts a Mixxx library database (tracks, hotcues, loops, beat grids,
playlists and crates) into a Rekordbox XML collection.
"""

__all__ = ["core", "mixxx", "rekordbox", "cli"]
__version__ = "1.0.0"
