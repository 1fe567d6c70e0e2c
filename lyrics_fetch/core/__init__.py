"""
Core module for lyrics-fetch.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with multiple outputs
    - progress: Rich progress bar for a run

Usage:
    from lyrics_fetch.core import (
        Config, load_config,
        setup_logging, get_logger,
        LyricsFetchError, ConfigError, LibraryError
    )
"""

from lyrics_fetch.core.config import (
    Config,
    LibraryConfig,
    LoggingConfig,
    LookupConfig,
    load_config,
)
from lyrics_fetch.core.exceptions import (
    ConfigError,
    ExhaustedError,
    IncompleteLyricsError,
    LibraryError,
    LyricsError,
    LyricsFetchError,
    MetadataError,
    NotFoundError,
    SidecarWriteError,
    TransportError,
    UnsupportedFormatError,
    UpstreamError,
)
from lyrics_fetch.core.logger import (
    get_logger,
    log_lyrics_failure,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "LookupConfig",
    "LibraryConfig",
    "LoggingConfig",
    "load_config",
    # Exceptions
    "LyricsFetchError",
    "ConfigError",
    "LibraryError",
    "MetadataError",
    "UnsupportedFormatError",
    "LyricsError",
    "TransportError",
    "UpstreamError",
    "NotFoundError",
    "IncompleteLyricsError",
    "ExhaustedError",
    "SidecarWriteError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_lyrics_failure",
    "shutdown_logging",
]
