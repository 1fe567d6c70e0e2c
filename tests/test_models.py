"""Test LRCLIB lookup models"""

from dataclasses import FrozenInstanceError

import pytest

from lyrics_fetch.core.exceptions import ExhaustedError, NotFoundError
from lyrics_fetch.lyrics.models import (
    Exhausted,
    Found,
    Instrumental,
    LookupQuery,
    LookupResult,
    NotFound,
)


class TestLookupQuery:
    """Test query construction and serialization"""

    @pytest.mark.parametrize("duration, expected", [
        (125.0, 125),
        (125.4, 125),
        (125.5, 126),
        (125.6, 126),
        (0.5, 1),
        (0.0, 0),
        (-3.2, 0),
    ])
    def test_duration_rounds_to_nearest_second(self, duration, expected):
        """Test duration is rounded (half up), never truncated, never negative"""
        query = LookupQuery.create("Artist", "Album", "Track", duration)
        assert query.duration_seconds == expected
        assert query.to_params()["duration"] == str(expected)

    def test_duration_serialized_without_decimals(self):
        """Test duration string is a plain integer"""
        params = LookupQuery.create("Artist", "Album", "Track", 211.999).to_params()
        assert params["duration"] == "212"
        assert "." not in params["duration"]

    def test_to_params(self):
        """Test all four query parameters are sent"""
        query = LookupQuery.create("The Beatles", "Help!", "Yesterday", 125)
        assert query.to_params() == {
            "track_name": "Yesterday",
            "artist_name": "The Beatles",
            "album_name": "Help!",
            "duration": "125",
        }

    def test_is_immutable(self):
        """Test a query cannot be changed between attempts"""
        query = LookupQuery.create("Artist", "Album", "Track", 100)
        with pytest.raises(FrozenInstanceError):
            query.track_name = "Other"

    def test_str(self):
        """Test human readable form used in log lines"""
        assert str(LookupQuery.create("Queen", "", "Bohemian Rhapsody", 354)) == "Queen - Bohemian Rhapsody"
        assert str(LookupQuery.create("The Beatles", "Help!", "Yesterday", 125)) == "The Beatles - Yesterday (Help!)"


class TestLookupResult:
    """Test decoding of LRCLIB responses"""

    def test_from_api(self, yesterday_payload):
        """Test a complete response is mapped field by field"""
        result = LookupResult.from_api(yesterday_payload)
        assert result.id == 101
        assert result.track_name == "Yesterday"
        assert result.artist_name == "The Beatles"
        assert result.album_name == "Help!"
        assert result.duration == 125.0
        assert result.instrumental is False
        assert result.plain_lyrics.startswith("Yesterday")
        assert result.synced_lyrics.startswith("[00:01.00]")
        assert result.has_synced_lyrics

    def test_null_lyrics_become_empty(self):
        """Test JSON null lyrics map to empty strings"""
        result = LookupResult.from_api({
            "id": 7,
            "instrumental": True,
            "plainLyrics": None,
            "syncedLyrics": None,
        })
        assert result.instrumental is True
        assert result.plain_lyrics == ""
        assert result.synced_lyrics == ""
        assert not result.has_synced_lyrics

    def test_missing_fields_use_defaults(self):
        """Test an error body without lyrics fields decodes to defaults"""
        result = LookupResult.from_api({
            "code": 404,
            "name": "TrackNotFound",
            "message": "Failed to find specified track",
        })
        assert result == LookupResult.empty()

    def test_instrumental_requires_true(self):
        """Test only a JSON true marks a song as instrumental"""
        assert LookupResult.from_api({"instrumental": "yes"}).instrumental is False
        assert LookupResult.from_api({"instrumental": 1}).instrumental is False

    def test_empty(self):
        """Test the empty result has no lyrics and is not instrumental"""
        result = LookupResult.empty()
        assert result.id == 0
        assert result.instrumental is False
        assert result.synced_lyrics == ""


class TestOutcomes:
    """Test retrieval outcome variants"""

    def test_found_carries_lyrics(self):
        assert Found("[00:01.00] la").lyrics == "[00:01.00] la"

    def test_instrumental_is_distinct_from_empty_lyrics(self):
        assert Instrumental() != Found("")

    def test_error_outcomes_carry_errors(self):
        not_found = NotFound(NotFoundError("no lyrics"))
        exhausted = Exhausted(ExhaustedError("gave up", last_error=None, attempts=3))
        assert not_found.error.kind == "not_found"
        assert exhausted.error.attempts == 3
