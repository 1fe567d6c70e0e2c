"""
Data models for LRCLIB lookups.

This module defines the immutable values exchanged by the lookup client and
the retrieval policy:

    LookupQuery       - What is asked (built once per file, retried verbatim)
    LookupResult      - What one HTTP round-trip answered
    RetrievalOutcome  - What the retrieval policy concluded:
                        Found | Instrumental | NotFound | Exhausted

The LRCLIB "get" endpoint answers with a JSON object like:

    {
        "id": 3396226,
        "trackName": "I Want to Live",
        "artistName": "Borislav Slavov",
        "albumName": "Baldur's Gate 3 (Original Game Soundtrack)",
        "duration": 233,
        "instrumental": false,
        "plainLyrics": "I feel your breath upon my neck...",
        "syncedLyrics": "[00:17.12] I feel your breath upon my neck..."
    }
"""

import math
from dataclasses import dataclass
from typing import Any, Union

from lyrics_fetch.core.exceptions import ExhaustedError, NotFoundError


def _as_text(value: Any) -> str:
    """Map JSON null (or any non-string) to an empty string."""
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class LookupQuery:
    """
    Parameters of one lyrics lookup.

    Attributes:
        track_name: Song title.
        artist_name: Song artist.
        album_name: Album title (may be empty).
        duration_seconds: Song length in whole seconds, never negative.
    """

    track_name: str
    artist_name: str
    album_name: str
    duration_seconds: int

    @classmethod
    def create(cls, artist: str, album: str, track: str, duration: float) -> "LookupQuery":
        """
        Build a query from raw metadata.

        The duration is rounded to the nearest second (half rounds up) and
        clamped at zero.

        Example:
            >>> LookupQuery.create("The Beatles", "Help!", "Yesterday", 125.6).duration_seconds
            126
        """
        return cls(
            track_name=track,
            artist_name=artist,
            album_name=album,
            duration_seconds=max(0, math.floor(duration + 0.5)),
        )

    def to_params(self) -> dict[str, str]:
        """Query string parameters for the LRCLIB "get" endpoint."""
        return {
            "track_name": self.track_name,
            "artist_name": self.artist_name,
            "album_name": self.album_name,
            "duration": str(self.duration_seconds),
        }

    def __str__(self) -> str:
        album = f" ({self.album_name})" if self.album_name else ""
        return f"{self.artist_name} - {self.track_name}{album}"


@dataclass(frozen=True)
class LookupResult:
    """
    One decoded LRCLIB response.

    Attributes:
        id: LRCLIB record id (0 when absent).
        track_name: Matched track title.
        artist_name: Matched artist.
        album_name: Matched album.
        duration: Matched duration in seconds.
        instrumental: True if the catalog marks the song as instrumental.
        plain_lyrics: Untimed lyrics, "" when missing.
        synced_lyrics: LRC lyrics, "" when missing. Empty synced lyrics
                       are not the same as an instrumental song.
    """

    id: int = 0
    track_name: str = ""
    artist_name: str = ""
    album_name: str = ""
    duration: float = 0.0
    instrumental: bool = False
    plain_lyrics: str = ""
    synced_lyrics: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "LookupResult":
        """
        Create a LookupResult from a decoded LRCLIB JSON object.

        Missing keys and nulls fall back to the field defaults.
        """
        raw_id = data.get("id")
        raw_duration = data.get("duration")
        return cls(
            id=raw_id if isinstance(raw_id, int) and not isinstance(raw_id, bool) else 0,
            track_name=_as_text(data.get("trackName")),
            artist_name=_as_text(data.get("artistName")),
            album_name=_as_text(data.get("albumName")),
            duration=(
                float(raw_duration)
                if isinstance(raw_duration, (int, float)) and not isinstance(raw_duration, bool)
                else 0.0
            ),
            instrumental=data.get("instrumental") is True,
            plain_lyrics=_as_text(data.get("plainLyrics")),
            synced_lyrics=_as_text(data.get("syncedLyrics")),
        )

    @classmethod
    def empty(cls) -> "LookupResult":
        """Result used when a response carries no usable payload."""
        return cls()

    @property
    def has_synced_lyrics(self) -> bool:
        return bool(self.synced_lyrics)


@dataclass(frozen=True)
class Found:
    """Synced lyrics were retrieved."""

    lyrics: str


@dataclass(frozen=True)
class Instrumental:
    """The song has no lyrics; an empty lyrics file should be written."""


@dataclass(frozen=True)
class NotFound:
    """The catalog has no entry for the song."""

    error: NotFoundError


@dataclass(frozen=True)
class Exhausted:
    """Every attempt was used without a conclusive answer."""

    error: ExhaustedError


RetrievalOutcome = Union[Found, Instrumental, NotFound, Exhausted]
