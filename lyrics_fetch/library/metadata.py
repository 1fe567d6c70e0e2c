"""
Audio metadata reading for lyrics-fetch.

Reads the tags needed for a lyrics lookup (artist, album, title) and the
duration of a local audio file using mutagen.

Supported containers:
    mp3, aac (ADTS), mp4/m4a, flac, ogg (Vorbis), dsf, dsd (DSDIFF)

Tags are read through mutagen's "easy" keys first. DSF and DSDIFF files
carry raw ID3 tags without an easy interface, so for ID3 tags the
TPE1/TALB/TIT2 frames are used as a fallback.
"""

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mutagen import File as MutagenFile
from mutagen import MutagenError
from mutagen.aac import AAC
from mutagen.dsdiff import DSDIFF
from mutagen.dsf import DSF
from mutagen.flac import FLAC
from mutagen.id3 import ID3
from mutagen.mp3 import MP3
from mutagen.mp4 import MP4
from mutagen.oggvorbis import OggVorbis

from lyrics_fetch.core.exceptions import MetadataError, UnsupportedFormatError

# mutagen type -> format name (EasyMP3/EasyMP4 are subclasses of MP3/MP4)
SUPPORTED_FORMATS = (
    (MP3, "mp3"),
    (AAC, "aac"),
    (MP4, "mp4"),
    (FLAC, "flac"),
    (OggVorbis, "ogg"),
    (DSF, "dsf"),
    (DSDIFF, "dsd"),
)

# easy key -> ID3 frame
ID3_FALLBACK_FRAMES = {
    "artist": "TPE1",
    "album": "TALB",
    "title": "TIT2",
}


@dataclass(frozen=True)
class TrackMetadata:
    """
    Tags and duration of one audio file.

    Attributes:
        path: The audio file.
        format: Container name, e.g. "flac".
        artist: Artist tag.
        album: Album tag ("" when missing).
        title: Title tag.
        duration: Length in seconds.
    """

    path: Path
    format: str
    artist: str
    album: str
    title: str
    duration: float


def read_track_metadata(path: Path) -> TrackMetadata:
    """
    Read the lookup metadata of an audio file.

    Args:
        path: Path to the audio file.

    Returns:
        TrackMetadata for the file.

    Raises:
        UnsupportedFormatError: If the container is not supported.
        MetadataError: If the file cannot be parsed, has no title or
                       artist tag, or has no valid duration.
    """
    try:
        audio = MutagenFile(path, easy=True)
    except (MutagenError, OSError) as e:
        raise MetadataError(
            f"cannot read audio file: {e}",
            details={"file": str(path), "original_error": str(e)}
        ) from e

    if audio is None:
        raise UnsupportedFormatError(
            "unrecognized audio format",
            details={"file": str(path)}
        )

    audio_format = _detect_format(audio)
    if audio_format is None:
        raise UnsupportedFormatError(
            f"unsupported audio format: {type(audio).__name__}",
            details={"file": str(path), "type": type(audio).__name__}
        )

    artist = _first_tag(audio, "artist")
    album = _first_tag(audio, "album")
    title = _first_tag(audio, "title")

    if not title or not artist:
        missing = [name for name, value in (("title", title), ("artist", artist)) if not value]
        raise MetadataError(
            f"missing {' and '.join(missing)} tag",
            details={"file": str(path), "missing": missing}
        )

    length = getattr(getattr(audio, "info", None), "length", None)
    if (
        isinstance(length, bool)
        or not isinstance(length, (int, float))
        or not math.isfinite(length)
        or length < 0
    ):
        raise MetadataError(
            "cannot determine duration",
            details={"file": str(path), "length": length}
        )

    return TrackMetadata(
        path=path,
        format=audio_format,
        artist=artist,
        album=album,
        title=title,
        duration=float(length),
    )


def _detect_format(audio: Any) -> str | None:
    for audio_type, name in SUPPORTED_FORMATS:
        if isinstance(audio, audio_type):
            return name
    return None


def _first_tag(audio: Any, key: str) -> str:
    """First value of an easy tag, falling back to the ID3 frame."""
    value = audio.get(key)
    if value:
        first = value[0] if isinstance(value, list) else value
        text = str(first).strip()
        if text:
            return text

    tags = getattr(audio, "tags", None)
    if isinstance(tags, ID3):
        frame = tags.get(ID3_FALLBACK_FRAMES[key])
        if frame is not None and frame.text:
            return str(frame.text[0]).strip()

    return ""
