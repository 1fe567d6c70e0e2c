"""
Exception classes for lyrics-fetch.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message and an optional details
dictionary, and the hierarchy separates fatal failures (configuration,
traversal) from per-file failures that must never stop a run.

Exception Hierarchy:
    LyricsFetchError (base)
        ConfigError - Configuration file issues (fatal)
        LibraryError - Directory traversal issues (fatal)
        MetadataError - Tag or duration reading issues (per-file)
            UnsupportedFormatError - Audio container not recognized
        LyricsError - Lyrics lookup issues (per-file)
            TransportError - Network, timeout or malformed body
            UpstreamError - Non-2xx, non-404 status code
            NotFoundError - No catalog entry (HTTP 404)
            IncompleteLyricsError - Success response without synced lyrics
            ExhaustedError - All attempts used without a conclusive result
        SidecarWriteError - Lyrics file could not be written (per-file)
"""


class LyricsFetchError(Exception):
    """
    Base exception for all lyrics-fetch errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (file path,
                 status code, query parameters...).

    Example:
        try:
            outcome = retriever.retrieve(artist, album, title, duration)
        except LyricsFetchError as e:
            logger.error(f"Operation failed: {e.message}")
            logger.debug(f"Details: {e.details}")
    """

    #: Short identifier used in structured log lines.
    kind = "error"

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description shown to the user.
            details: Optional dictionary containing additional context.
                     Common keys include 'file', 'status_code', 'url'
                     and 'original_error'.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(LyricsFetchError):
    """
    Raised when there's an issue with the configuration file.

    This is a CRITICAL error that stops program execution.

    Common causes:
        - Explicitly given config file not found
        - Invalid YAML syntax
        - Invalid field values (e.g. zero max_attempts)
    """

    kind = "config"


class LibraryError(LyricsFetchError):
    """
    Raised when the music directory itself cannot be traversed.

    This is a CRITICAL error: without a readable root there is nothing
    to process. Unreadable subdirectories are logged instead.
    """

    kind = "library"


class MetadataError(LyricsFetchError):
    """
    Raised when tags or duration cannot be read from an audio file.

    NON-CRITICAL: the file is reported and the walk continues.

    Common causes:
        - Corrupted audio file
        - Missing title or artist tag
        - Container without duration information
    """

    kind = "metadata"


class UnsupportedFormatError(MetadataError):
    """
    Raised when the audio container is not one of the supported formats.

    Supported formats are mp3, aac, mp4, flac, ogg/vorbis and dsf/dsd.
    The file is skipped as a whole, nothing is retried.
    """

    kind = "unsupported_format"


class LyricsError(LyricsFetchError):
    """
    Base class for failures while looking up lyrics.

    NON-CRITICAL: a lyrics failure is logged for the file and never
    stops the directory walk.
    """

    kind = "lyrics"


class TransportError(LyricsError):
    """
    Raised when the lookup endpoint could not be reached or its response
    could not be read (DNS, connection, timeout, malformed body).

    Carries no status code. Treated as transient and retried.
    """

    kind = "transport"


class UpstreamError(LyricsError):
    """
    Raised when the endpoint answers with a non-2xx status other than 404.

    Treated as transient (service unavailable, rate limited) and retried.

    Attributes:
        status_code: HTTP status code returned by the endpoint.
    """

    kind = "upstream"

    def __init__(self, message: str, status_code: int, details: dict | None = None) -> None:
        details = dict(details or {})
        details.setdefault("status_code", status_code)
        super().__init__(message, details)
        self.status_code = status_code


class NotFoundError(LyricsError):
    """
    Raised when the catalog has no entry for the (artist, album, track,
    duration) tuple (HTTP 404).

    Terminal: retrying would return the same answer.
    """

    kind = "not_found"


class IncompleteLyricsError(LyricsError):
    """
    Raised when a success response is neither instrumental nor carries
    synced lyrics. Treated as an incomplete answer and retried.
    """

    kind = "incomplete"


class ExhaustedError(LyricsError):
    """
    Raised when every attempt was used without a conclusive result.

    Attributes:
        last_error: The last underlying error observed, for diagnostics.
        attempts: Number of attempts made.
    """

    kind = "exhausted"

    def __init__(
        self,
        message: str,
        last_error: LyricsError | None,
        attempts: int,
        details: dict | None = None
    ) -> None:
        details = dict(details or {})
        details.setdefault("attempts", attempts)
        if last_error is not None:
            details.setdefault("last_error", str(last_error))
        super().__init__(message, details)
        self.last_error = last_error
        self.attempts = attempts


class SidecarWriteError(LyricsFetchError):
    """
    Raised when the lyrics sidecar file cannot be created or written.

    NON-CRITICAL: reported for the file, the walk continues.
    """

    kind = "write"
