"""
Bounded-retry lyrics retrieval.

LyricsRetriever turns the raw answers of LrclibClient into one
RetrievalOutcome per song:

    Status 404                          -> NotFound (no further attempts)
    2xx, instrumental                   -> Instrumental
    2xx, synced lyrics present          -> Found
    2xx, no synced lyrics               -> retried (IncompleteLyricsError)
    Other status codes                  -> retried (UpstreamError)
    Network / timeout / malformed body  -> retried (TransportError)
    Attempts used up                    -> Exhausted (carries the last error)

A fixed delay is slept before every attempt after the first, so a song that
fails every time costs max_attempts requests and max_attempts - 1 delays.
"""

import time
from typing import Callable

from lyrics_fetch.core.config import DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_DELAY
from lyrics_fetch.core.exceptions import (
    ExhaustedError,
    IncompleteLyricsError,
    LyricsError,
    NotFoundError,
    TransportError,
    UpstreamError,
)
from lyrics_fetch.core.logger import get_logger
from lyrics_fetch.lyrics.client import LrclibClient, is_success
from lyrics_fetch.lyrics.models import (
    Exhausted,
    Found,
    Instrumental,
    LookupQuery,
    NotFound,
    RetrievalOutcome,
)

logger = get_logger(__name__)

HTTP_NOT_FOUND = 404


class LyricsRetriever:
    """
    Applies the retry policy around a lookup client.

    Holds no per-song state: every call to retrieve() starts fresh.

    Example:
        retriever = LyricsRetriever(LrclibClient(), max_attempts=3, retry_delay=1.0)
        outcome = retriever.retrieve("The Beatles", "Help!", "Yesterday", 125.6)

        if isinstance(outcome, Found):
            sidecar.write_text(outcome.lyrics, encoding="utf-8")
    """

    def __init__(
        self,
        client: LrclibClient,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Args:
            client: Anything with a get(query) -> (LookupResult, status) method.
            max_attempts: Total attempts per song, at least 1.
            retry_delay: Seconds slept before each attempt after the first.
            sleep: Sleep function, replaceable in tests.

        Raises:
            ValueError: If max_attempts < 1 or retry_delay < 0.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if retry_delay < 0:
            raise ValueError("retry_delay must not be negative")
        self.client = client
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self._sleep = sleep

    def retrieve(
        self,
        artist: str,
        album: str,
        track: str,
        duration_seconds: float
    ) -> RetrievalOutcome:
        """
        Retrieve synced lyrics for one song.

        Never raises for lookup failures: every failure mode is expressed
        as a NotFound or Exhausted outcome.
        """
        query = LookupQuery.create(artist, album, track, duration_seconds)
        last_error: LyricsError | None = None

        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                self._sleep(self.retry_delay)

            try:
                result, status_code = self.client.get(query)
            except TransportError as e:
                logger.warning(f"attempt {attempt}/{self.max_attempts} for '{query}' failed: {e}")
                last_error = e
                continue

            if status_code == HTTP_NOT_FOUND:
                logger.debug(f"no lyrics found for '{query}'")
                return NotFound(NotFoundError(
                    f"no lyrics found for song '{query}'",
                    details={"query": query.to_params(), "status_code": status_code}
                ))

            if not is_success(status_code):
                last_error = UpstreamError(
                    f"lyrics service returned status {status_code} for song '{query}'",
                    status_code=status_code,
                    details={"query": query.to_params()}
                )
                logger.warning(f"attempt {attempt}/{self.max_attempts}: {last_error}")
                continue

            if result.instrumental:
                return Instrumental()

            if result.has_synced_lyrics:
                return Found(result.synced_lyrics)

            last_error = IncompleteLyricsError(
                f"no synced lyrics in response for song '{query}'",
                details={"query": query.to_params(), "status_code": status_code}
            )
            logger.debug(f"attempt {attempt}/{self.max_attempts}: {last_error}")

        return Exhausted(ExhaustedError(
            f"no lyrics for song '{query}' after {self.max_attempts} attempts: {last_error}",
            last_error=last_error,
            attempts=self.max_attempts,
            details={"query": query.to_params()}
        ))
