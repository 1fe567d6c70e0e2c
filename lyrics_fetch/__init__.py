"""
lyrics-fetch: Fetch time-synced lyrics for a local music library.

This package walks a directory tree of audio files, reads each file's
artist, album, title and duration, asks the LRCLIB lyrics database for
matching synced lyrics and writes them to a ".lrc" file next to the song.

Architecture:
    Files are processed strictly one at a time, in lexical traversal order:

    WALK (library/scanner.py): Enumerate audio files
        - Filter by extension
        - Skip files that already have a lyrics file

    READ (library/metadata.py): Read tags and duration with mutagen

    RETRIEVE (lyrics/): Query LRCLIB with a bounded retry policy
        - 404 means no lyrics, never retried
        - Transient failures are retried after a fixed delay
        - Instrumental songs get an empty lyrics file

    WRITE (library/processor.py): Write the sidecar, update run counters

Modules:
    core/       - Configuration, logging, exceptions, progress bar
    lyrics/     - LRCLIB client, response models and retry policy
    library/    - Directory walk, metadata reading, per-file processing
    cli.py      - Command-line interface

Usage:
    Command Line:
        lyrics-fetch -i ~/Music
        lyrics-fetch -i ~/Music --debug --log-dir ./logs

    Python API:
        from lyrics_fetch.core import load_config
        from lyrics_fetch.lyrics import LrclibClient, LyricsRetriever
        from lyrics_fetch.library import LibraryProcessor, RunStats, fetch_library

        config = load_config()
        with LrclibClient(config.lookup.endpoint) as client:
            processor = LibraryProcessor(LyricsRetriever(client))
            stats = RunStats()
            fetch_library(
                Path("~/Music").expanduser(), processor, stats,
                extensions=config.library.extensions,
                sidecar_extension=config.library.sidecar_extension,
            )

Dependencies:
    - mutagen: Audio metadata reading
    - requests: HTTP client for LRCLIB
    - click / rich-click: CLI framework and colors
    - rich: Progress bar
    - tqdm / colorama: Progress-safe, colored console logging
    - pyyaml / python-dotenv: Configuration
"""

__version__ = "0.1.0"
__author__ = "lyrics-fetch"
__license__ = "MIT"

# Convenience imports for common usage
from lyrics_fetch.core import (
    Config,
    ConfigError,
    LibraryError,
    LyricsError,
    LyricsFetchError,
    MetadataError,
    get_logger,
    load_config,
    setup_logging,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "LyricsFetchError",
    "ConfigError",
    "LibraryError",
    "MetadataError",
    "LyricsError",
]
