"""Test the LRCLIB HTTP client"""

from unittest.mock import MagicMock, Mock

import pytest
import requests
from urllib3.util import Timeout

from lyrics_fetch.core.config import DEFAULT_ENDPOINT
from lyrics_fetch.core.exceptions import TransportError
from lyrics_fetch.lyrics.client import LrclibClient, is_success
from lyrics_fetch.lyrics.models import LookupQuery, LookupResult


@pytest.fixture
def query():
    return LookupQuery.create("The Beatles", "Help!", "Yesterday", 125)


@pytest.fixture
def session():
    """Real session (for headers) with a mocked get()"""
    session = requests.Session()
    session.get = MagicMock()
    session.close = MagicMock()
    return session


def make_client(session, **kwargs):
    return LrclibClient(user_agent="lyrics-fetch-tests/1.0", session=session, **kwargs)


class TestIsSuccess:
    """Test status code classification"""

    def test_2xx(self):
        assert is_success(200)
        assert is_success(204)
        assert is_success(299)

    def test_non_2xx(self):
        assert not is_success(199)
        assert not is_success(301)
        assert not is_success(404)
        assert not is_success(503)


class TestLrclibClient:
    """Test one lookup per call"""

    def test_request(self, session, query, make_response, yesterday_payload):
        """Test endpoint, parameters, timeout and User-Agent"""
        session.get.return_value = make_response(200, yesterday_payload)
        client = make_client(session)

        client.get(query)

        session.get.assert_called_once()
        args, kwargs = session.get.call_args
        assert args == (DEFAULT_ENDPOINT,)
        assert kwargs["params"] == query.to_params()
        assert kwargs["stream"] is True
        assert isinstance(kwargs["timeout"], Timeout)
        assert kwargs["timeout"].total == 30.0
        assert session.headers["User-Agent"] == "lyrics-fetch-tests/1.0"

    def test_success(self, session, query, make_response, yesterday_payload):
        """Test a 200 response is decoded"""
        response = make_response(200, yesterday_payload)
        session.get.return_value = response

        result, status = make_client(session).get(query)

        assert status == 200
        assert result == LookupResult.from_api(yesterday_payload)
        response.close.assert_called_once()

    def test_chunked_body(self, session, query, make_response):
        """Test a body split over several chunks is joined"""
        session.get.return_value = make_response(
            200, chunks=[b'{"id": 5, "syncedLy', b'rics": "[00:01.00] hi"}']
        )

        result, _ = make_client(session).get(query)

        assert result.id == 5
        assert result.synced_lyrics == "[00:01.00] hi"

    def test_timeout_override(self, session, query, make_response):
        """Test a per-call timeout replaces the default"""
        session.get.return_value = make_response(200, {"id": 1})

        make_client(session, timeout=12.0).get(query, timeout=5.0)

        assert session.get.call_args.kwargs["timeout"].total == 5.0

    def test_not_found_is_not_an_error(self, session, query, make_response):
        """Test a 404 is returned with its status"""
        session.get.return_value = make_response(404, {
            "code": 404,
            "name": "TrackNotFound",
            "message": "Failed to find specified track",
        })

        result, status = make_client(session).get(query)

        assert status == 404
        assert result == LookupResult.empty()

    def test_non_json_error_body(self, session, query, make_response):
        """Test a non-2xx HTML body gives an empty result"""
        session.get.return_value = make_response(503, b"<html>Service Unavailable</html>")

        result, status = make_client(session).get(query)

        assert status == 503
        assert result == LookupResult.empty()

    def test_invalid_json_success_body(self, session, query, make_response):
        """Test a malformed 2xx body is a transport error"""
        session.get.return_value = make_response(200, b"{not json")

        with pytest.raises(TransportError):
            make_client(session).get(query)

    def test_empty_success_body(self, session, query, make_response):
        session.get.return_value = make_response(200, b"")

        with pytest.raises(TransportError):
            make_client(session).get(query)

    def test_non_object_success_body(self, session, query, make_response):
        """Test a 2xx JSON array is a transport error"""
        session.get.return_value = make_response(200, [{"id": 1}])

        with pytest.raises(TransportError) as exc_info:
            make_client(session).get(query)
        assert exc_info.value.details["status_code"] == 200

    @pytest.mark.parametrize("error", [
        requests.ConnectionError("Name or service not known"),
        requests.Timeout("read timed out"),
    ])
    def test_request_failure(self, session, query, error):
        """Test connection failures carry no status code"""
        session.get.side_effect = error

        with pytest.raises(TransportError) as exc_info:
            make_client(session).get(query)
        assert "status_code" not in exc_info.value.details
        assert exc_info.value.__cause__ is error

    def test_body_read_failure(self, session, query, make_response):
        """Test a broken stream is a transport error and the response is closed"""
        response = make_response(200)
        response.iter_content.side_effect = requests.exceptions.ChunkedEncodingError("broken")
        session.get.return_value = response

        with pytest.raises(TransportError):
            make_client(session).get(query)
        response.close.assert_called_once()

    def test_deadline_covers_body(self, session, query, make_response):
        """Test a slow body fails once the whole-request timeout has passed"""
        response = make_response(200, chunks=[b'{"id"', b': 1}'])
        session.get.return_value = response
        clock = Mock(side_effect=[0.0, 1.0, 10.0, 31.0])

        with pytest.raises(TransportError, match="timed out"):
            make_client(session, timeout=30.0, clock=clock).get(query)
        response.close.assert_called_once()

    def test_deadline_passed_before_body(self, session, query, make_response):
        """Test headers arriving after the timeout fail before the body is read"""
        response = make_response(200, {"id": 1})
        session.get.return_value = response
        clock = Mock(side_effect=[0.0, 31.0])

        with pytest.raises(TransportError, match="timed out"):
            make_client(session, timeout=30.0, clock=clock).get(query)
        response.iter_content.assert_not_called()
        response.close.assert_called_once()

    def test_context_manager_closes_session(self, session):
        with make_client(session):
            pass
        session.close.assert_called_once()
