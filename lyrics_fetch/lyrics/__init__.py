"""
Lyrics module for lyrics-fetch.

Looks up time-synced lyrics on LRCLIB:
    - client: One HTTP GET per call against the "get" endpoint
    - retrieval: Bounded retry policy producing a RetrievalOutcome
    - models: LookupQuery, LookupResult and the outcome variants
"""

from lyrics_fetch.lyrics.client import LrclibClient
from lyrics_fetch.lyrics.models import (
    Exhausted,
    Found,
    Instrumental,
    LookupQuery,
    LookupResult,
    NotFound,
    RetrievalOutcome,
)
from lyrics_fetch.lyrics.retrieval import LyricsRetriever

__all__ = [
    "LrclibClient",
    "LyricsRetriever",
    "LookupQuery",
    "LookupResult",
    "RetrievalOutcome",
    "Found",
    "Instrumental",
    "NotFound",
    "Exhausted",
]
