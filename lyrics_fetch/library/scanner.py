"""
Music library traversal.

scan_library() walks a directory tree in lexical order and yields one
LibraryEntry per audio file. Files with other extensions are ignored; audio
files that already have a lyrics sidecar are yielded with a skip reason so
the caller can count them.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from lyrics_fetch.core.config import DEFAULT_EXTENSIONS, DEFAULT_SIDECAR_EXTENSION
from lyrics_fetch.core.exceptions import LibraryError
from lyrics_fetch.core.logger import get_logger

logger = get_logger(__name__)

SKIP_SIDECAR_EXISTS = "lyrics file already exists"


@dataclass(frozen=True)
class LibraryEntry:
    """
    One audio file found in the library.

    Attributes:
        path: The audio file.
        sidecar: Where its lyrics file goes (same directory and base name).
        skip_reason: Why the file should not be processed, or None.
    """

    path: Path
    sidecar: Path
    skip_reason: str | None = None

    @property
    def skipped(self) -> bool:
        return self.skip_reason is not None


def sidecar_path(audio_path: Path, sidecar_extension: str = DEFAULT_SIDECAR_EXTENSION) -> Path:
    """
    Path of the lyrics file for an audio file.

    Example:
        >>> sidecar_path(Path("/music/01 Yesterday.flac"))
        PosixPath('/music/01 Yesterday.lrc')
    """
    return audio_path.with_suffix(sidecar_extension)


def scan_library(
    root: Path,
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
    sidecar_extension: str = DEFAULT_SIDECAR_EXTENSION
) -> Iterator[LibraryEntry]:
    """
    Walk the library and yield its audio files in lexical order.

    Args:
        root: Root music directory.
        extensions: Lowercase audio extensions including the dot.
        sidecar_extension: Extension of the lyrics files.

    Yields:
        LibraryEntry for each audio file.

    Raises:
        LibraryError: If root does not exist, is not a directory or
                      cannot be listed. Unreadable subdirectories are
                      logged and skipped.
    """
    if not root.exists():
        raise LibraryError(
            f"music directory does not exist: {root}",
            details={"path": str(root)}
        )
    if not root.is_dir():
        raise LibraryError(
            f"music path is not a directory: {root}",
            details={"path": str(root)}
        )

    # os.walk reports listing failures through onerror instead of raising
    try:
        os.listdir(root)
    except OSError as e:
        raise LibraryError(
            f"cannot read music directory {root}: {e}",
            details={"path": str(root), "original_error": str(e)}
        ) from e

    wanted = {ext.lower() for ext in extensions}

    def on_walk_error(error: OSError) -> None:
        logger.error(f"cannot read directory {error.filename}: {error.strerror}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=on_walk_error):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if path.suffix.lower() not in wanted:
                continue

            sidecar = sidecar_path(path, sidecar_extension)
            if sidecar.exists():
                yield LibraryEntry(path, sidecar, SKIP_SIDECAR_EXISTS)
            else:
                yield LibraryEntry(path, sidecar)
