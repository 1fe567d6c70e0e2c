"""
Library module for lyrics-fetch.

Everything that touches the local music library:
    - scanner: Directory walk with extension and sidecar filtering
    - metadata: Tag and duration reading with mutagen
    - processor: Per-file processing and the run loop
"""

from lyrics_fetch.library.metadata import TrackMetadata, read_track_metadata
from lyrics_fetch.library.processor import LibraryProcessor, RunStats, fetch_library
from lyrics_fetch.library.scanner import LibraryEntry, scan_library, sidecar_path

__all__ = [
    "TrackMetadata",
    "read_track_metadata",
    "LibraryEntry",
    "scan_library",
    "sidecar_path",
    "LibraryProcessor",
    "RunStats",
    "fetch_library",
]
