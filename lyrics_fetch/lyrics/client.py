"""
HTTP client for the LRCLIB "get" endpoint.

One call to LrclibClient.get() is exactly one HTTP GET. The client does not
retry, sleep or interpret the answer beyond decoding it: deciding what a
status code or an empty payload means is the job of the retrieval policy
(see lyrics_fetch.lyrics.retrieval).

Timeout:
    The configured timeout bounds the whole request. Connecting and waiting
    for the response headers share one urllib3 total timeout; the body is
    streamed and a deadline is checked once the headers arrive and before
    every further chunk read. A stalled socket read can still overrun the
    deadline by at most the time left when the headers arrived.

Usage:
    from lyrics_fetch.lyrics.client import LrclibClient
    from lyrics_fetch.lyrics.models import LookupQuery

    with LrclibClient() as client:
        query = LookupQuery.create("The Beatles", "Help!", "Yesterday", 125.6)
        result, status = client.get(query)
"""

import json
import time
from typing import Any, Callable

import requests
from urllib3.util import Timeout

from lyrics_fetch.core.config import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from lyrics_fetch.core.exceptions import TransportError
from lyrics_fetch.core.logger import get_logger
from lyrics_fetch.lyrics.models import LookupQuery, LookupResult

logger = get_logger(__name__)

CHUNK_SIZE = 8192


def is_success(status_code: int) -> bool:
    """True for any 2xx status code."""
    return 200 <= status_code < 300


class LrclibClient:
    """
    Thin wrapper around a requests.Session for LRCLIB lookups.

    Attributes:
        endpoint: Full URL of the "get" endpoint.
        timeout: Default seconds allowed for one whole request.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: requests.Session | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            endpoint: Full URL of the "get" endpoint.
            timeout: Default timeout in seconds for each call.
            user_agent: User-Agent header sent with every request.
            session: Session to reuse. A new one is created when None.
            clock: Monotonic clock used for the body read deadline.
        """
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._session.headers.update({"User-Agent": user_agent})
        self._clock = clock

    def __enter__(self) -> "LrclibClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying session and its pooled connections."""
        self._session.close()

    def get(self, query: LookupQuery, timeout: float | None = None) -> tuple[LookupResult, int]:
        """
        Perform one lookup.

        Args:
            query: What to look up. Sent as query string parameters.
            timeout: Override of the default timeout for this call.

        Returns:
            (result, status_code) for any response received. For a non-2xx
            status without a JSON object body, result is LookupResult.empty().

        Raises:
            TransportError: If the endpoint could not be reached, the
                            deadline passed, or a 2xx body is not a JSON
                            object.
        """
        timeout = self.timeout if timeout is None else timeout
        deadline = self._clock() + timeout

        logger.debug(f"GET {self.endpoint} {query.to_params()}")
        try:
            response = self._session.get(
                self.endpoint,
                params=query.to_params(),
                timeout=Timeout(total=timeout),
                stream=True,
            )
        except requests.RequestException as e:
            raise TransportError(
                f"request to {self.endpoint} failed: {e}",
                details={"url": self.endpoint, "original_error": str(e)}
            ) from e

        try:
            status_code = response.status_code
            self._check_deadline(deadline)
            body = self._read_body(response, deadline)
        finally:
            response.close()

        logger.debug(f"LRCLIB answered {status_code} ({len(body)} bytes) for '{query}'")

        if not is_success(status_code):
            data = _decode_json(body)
            if isinstance(data, dict):
                return LookupResult.from_api(data), status_code
            return LookupResult.empty(), status_code

        try:
            data = json.loads(body)
        except ValueError as e:
            raise TransportError(
                f"invalid JSON in response from {self.endpoint}: {e}",
                details={"url": self.endpoint, "status_code": status_code}
            ) from e

        if not isinstance(data, dict):
            raise TransportError(
                f"unexpected response from {self.endpoint}: expected a JSON object",
                details={"url": self.endpoint, "status_code": status_code}
            )

        return LookupResult.from_api(data), status_code

    def _check_deadline(self, deadline: float) -> None:
        if self._clock() > deadline:
            raise TransportError(
                f"timed out reading response from {self.endpoint}",
                details={"url": self.endpoint}
            )

    def _read_body(self, response: requests.Response, deadline: float) -> bytes:
        """Read the whole body, checking the deadline before each chunk read."""
        chunks = []
        try:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                chunks.append(chunk)
                self._check_deadline(deadline)
        except requests.RequestException as e:
            raise TransportError(
                f"failed reading response from {self.endpoint}: {e}",
                details={"url": self.endpoint, "original_error": str(e)}
            ) from e
        return b"".join(chunks)


def _decode_json(body: bytes) -> Any:
    """Decode a JSON body, returning None if it is not valid JSON."""
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None
