"""Test configuration and fixtures"""

import json
import logging
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from lyrics_fetch.core.config import ENV_ENDPOINT, ENV_LOG_DIR, ENV_USER_AGENT
from lyrics_fetch.core.logger import LyricsFailureReportHandler, TqdmLoggingHandler


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep configuration overrides from the host environment out of tests"""
    for name in (ENV_ENDPOINT, ENV_USER_AGENT, ENV_LOG_DIR):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Remove handlers installed by setup_logging()"""
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if isinstance(handler, (TqdmLoggingHandler, LyricsFailureReportHandler, logging.FileHandler)):
            handler.close()
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)


@pytest.fixture
def yesterday_payload():
    """LRCLIB response body for The Beatles - Yesterday"""
    return {
        "id": 101,
        "trackName": "Yesterday",
        "artistName": "The Beatles",
        "albumName": "Help!",
        "duration": 125.0,
        "instrumental": False,
        "plainLyrics": "Yesterday\nAll my troubles seemed so far away",
        "syncedLyrics": "[00:01.00] Yesterday\n[00:04.50] All my troubles seemed so far away",
    }


@pytest.fixture
def make_response():
    """Build a mock streamed requests.Response"""
    def _make(status_code=200, body=b"", chunks=None):
        if isinstance(body, (dict, list)):
            body = json.dumps(body).encode("utf-8")
        response = MagicMock()
        response.status_code = status_code
        response.iter_content.return_value = chunks if chunks is not None else [body]
        return response
    return _make
