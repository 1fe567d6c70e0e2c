"""
Per-file processing and the library run loop.

For each audio file:
    1. Read artist, album, title and duration
    2. Retrieve synced lyrics (see lyrics_fetch.lyrics.retrieval)
    3. Write the lyrics file next to the song
    4. Update the run counters

No per-file failure ever stops the run: each one is logged with
log_lyrics_failure() and counted in RunStats.errors.

Usage:
    from lyrics_fetch.library.processor import LibraryProcessor, RunStats, fetch_library

    stats = RunStats()
    processor = LibraryProcessor(retriever)
    fetch_library(Path("~/Music").expanduser(), processor, stats)
    print(stats.summary())
"""

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

from lyrics_fetch.core.config import DEFAULT_EXTENSIONS, DEFAULT_SIDECAR_EXTENSION
from lyrics_fetch.core.exceptions import (
    LyricsFetchError,
    MetadataError,
    SidecarWriteError,
    UnsupportedFormatError,
)
from lyrics_fetch.core.logger import get_logger, log_lyrics_failure
from lyrics_fetch.core.progress import (
    RESULT_FAILED,
    RESULT_FETCHED,
    RESULT_INSTRUMENTAL,
    RESULT_SKIPPED,
    LyricsProgressBar,
)
from lyrics_fetch.library.metadata import TrackMetadata, read_track_metadata
from lyrics_fetch.library.scanner import SKIP_SIDECAR_EXISTS, LibraryEntry, scan_library
from lyrics_fetch.lyrics.models import Found, Instrumental
from lyrics_fetch.lyrics.retrieval import LyricsRetriever

logger = get_logger(__name__)


@dataclass
class RunStats:
    """
    Counters for one run.

    Attributes:
        fetched: Lyrics files written (instrumental ones included).
        instrumental: Lyrics files written empty for instrumental songs.
        skipped: Audio files not processed (existing lyrics file or
                 unsupported format).
        errors: Files that failed.
    """

    fetched: int = 0
    instrumental: int = 0
    skipped: int = 0
    errors: int = 0

    @property
    def total(self) -> int:
        """Number of audio files accounted for."""
        return self.fetched + self.skipped + self.errors

    def summary(self) -> str:
        return (
            f"fetched={self.fetched} instrumental={self.instrumental} "
            f"skipped={self.skipped} errors={self.errors}"
        )


class LibraryProcessor:
    """
    Processes one library entry at a time.

    Attributes:
        retriever: The lyrics retrieval policy.
    """

    def __init__(
        self,
        retriever: LyricsRetriever,
        read_metadata: Callable[[Path], TrackMetadata] | None = None
    ) -> None:
        """
        Args:
            retriever: The lyrics retrieval policy.
            read_metadata: Metadata reader, read_track_metadata() by default.
        """
        self.retriever = retriever
        self._read_metadata = read_metadata or read_track_metadata

    def process(self, entry: LibraryEntry, stats: RunStats) -> str:
        """
        Fetch and write the lyrics of one audio file.

        Args:
            entry: The file to process.
            stats: Run counters, updated in place.

        Returns:
            The progress result for the file (RESULT_FETCHED,
            RESULT_INSTRUMENTAL, RESULT_SKIPPED or RESULT_FAILED).
        """
        if entry.skip_reason is not None:
            logger.warning(f"skipping {entry.path}: {entry.skip_reason}")
            stats.skipped += 1
            return RESULT_SKIPPED

        # Another song with the same stem may have written it since the walk.
        if entry.sidecar.exists():
            logger.warning(f"skipping {entry.path}: {SKIP_SIDECAR_EXISTS}")
            stats.skipped += 1
            return RESULT_SKIPPED

        try:
            return self._process(entry, stats)
        except UnsupportedFormatError as e:
            logger.warning(f"skipping {entry.path} [{e.kind}]: {e.message}")
            stats.skipped += 1
            return RESULT_SKIPPED
        except LyricsFetchError as e:
            log_lyrics_failure(logger, entry.path, e.kind, e.message)
            stats.errors += 1
            return RESULT_FAILED

    def _process(self, entry: LibraryEntry, stats: RunStats) -> str:
        metadata = self._load_metadata(entry.path)
        logger.debug(
            f"looking up lyrics for {entry.path} "
            f"(artist={metadata.artist!r}, album={metadata.album!r}, "
            f"title={metadata.title!r}, duration={metadata.duration:.2f}s)"
        )

        outcome = self.retriever.retrieve(
            metadata.artist, metadata.album, metadata.title, metadata.duration
        )

        if isinstance(outcome, Found):
            _write_sidecar(entry.sidecar, outcome.lyrics)
            stats.fetched += 1
            logger.info(f"fetched lyrics for '{metadata.artist} - {metadata.title}'")
            return RESULT_FETCHED

        if isinstance(outcome, Instrumental):
            _write_sidecar(entry.sidecar, "")
            stats.fetched += 1
            stats.instrumental += 1
            logger.warning(
                f"song '{metadata.artist} - {metadata.title}' is instrumental, "
                f"wrote empty lyrics file"
            )
            return RESULT_INSTRUMENTAL

        # NotFound or Exhausted
        raise outcome.error

    def _load_metadata(self, path: Path) -> TrackMetadata:
        try:
            return self._read_metadata(path)
        except LyricsFetchError:
            raise
        except Exception as e:
            # mutagen lets struct.error, ValueError and friends escape on
            # truncated files
            raise MetadataError(
                f"cannot read audio file: {e}",
                details={"file": str(path), "original_error": repr(e)}
            ) from e


def _write_sidecar(sidecar: Path, lyrics: str) -> None:
    try:
        sidecar.write_text(lyrics, encoding="utf-8")
    except OSError as e:
        raise SidecarWriteError(
            f"cannot write lyrics file {sidecar}: {e}",
            details={"file": str(sidecar), "original_error": str(e)}
        ) from e


def fetch_library(
    root: Path,
    processor: LibraryProcessor,
    stats: RunStats,
    *,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    sidecar_extension: str = DEFAULT_SIDECAR_EXTENSION,
    progress: LyricsProgressBar | None = None,
    stop_event: threading.Event | None = None
) -> RunStats:
    """
    Process every audio file under root, one at a time.

    The library is walked completely before processing so the progress bar
    knows its total.

    Args:
        root: Root music directory.
        processor: Per-file processor.
        stats: Run counters, updated in place.
        extensions: Audio extensions to consider.
        sidecar_extension: Extension of the lyrics files.
        progress: Optional progress bar; its total is set from the walk.
        stop_event: When set, the run stops before the next file.

    Returns:
        The same stats object.

    Raises:
        LibraryError: If root cannot be traversed.
    """
    entries = list(scan_library(root, extensions, sidecar_extension))
    logger.debug(f"found {len(entries)} audio files under {root}")

    if progress is not None:
        progress.total = len(entries)
        progress.start()

    try:
        for entry in entries:
            if stop_event is not None and stop_event.is_set():
                logger.warning("stop requested, not processing remaining files")
                break
            result = processor.process(entry, stats)
            if progress is not None:
                progress.update(result)
    finally:
        if progress is not None:
            progress.stop()

    return stats
