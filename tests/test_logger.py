"""Test logging setup and failure reporting"""

import io
import logging

from lyrics_fetch.core.logger import (
    ColoredConsoleFormatter,
    ErrorOnlyFilter,
    LyricsFailureReportHandler,
    TqdmLoggingHandler,
    get_logger,
    log_lyrics_failure,
    setup_logging,
    shutdown_logging,
)


def make_record(level=logging.INFO, msg="hello", **extra):
    record = logging.LogRecord("test", level, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatterAndFilter:
    """Test console formatting and error filtering"""

    def test_plain_format(self):
        formatter = ColoredConsoleFormatter(use_colors=False)
        assert formatter.format(make_record(logging.WARNING, "careful")) == "WARNING: careful"

    def test_colored_format(self):
        formatter = ColoredConsoleFormatter(use_colors=True)
        output = formatter.format(make_record(logging.ERROR, "broken"))
        assert "\x1b[" in output
        assert output.endswith(": broken")

    def test_error_only_filter(self):
        error_filter = ErrorOnlyFilter()
        assert error_filter.filter(make_record(logging.ERROR))
        assert error_filter.filter(make_record(logging.CRITICAL))
        assert not error_filter.filter(make_record(logging.WARNING))


class TestTqdmLoggingHandler:
    """Test console output"""

    def test_writes_to_stream(self):
        stream = io.StringIO()
        handler = TqdmLoggingHandler(stream)
        handler.setFormatter(ColoredConsoleFormatter(use_colors=False))

        handler.emit(make_record(msg="starting music lyrics fetcher"))

        assert stream.getvalue() == "INFO: starting music lyrics fetcher\n"


class TestLyricsFailureReportHandler:
    """Test the failures report"""

    def test_writes_only_failure_records(self, temp_dir):
        handler = LyricsFailureReportHandler(temp_dir / "report.log")
        handler.open()

        handler.emit(make_record(msg="unrelated"))
        handler.emit(make_record(
            logging.ERROR,
            lyrics_failed_file="/music/song.flac",
            lyrics_failed_kind="not_found",
            lyrics_failed_reason="no lyrics found for song 'A - B'",
        ))
        handler.close()
        handler.close()

        assert (temp_dir / "report.log").read_text(encoding="utf-8") == (
            "/music/song.flac\n"
            "not_found: no lyrics found for song 'A - B'\n\n"
        )

    def test_ignores_records_before_open(self, temp_dir):
        handler = LyricsFailureReportHandler(temp_dir / "report.log")
        handler.emit(make_record(logging.ERROR, lyrics_failed_file="/music/song.flac"))
        assert not (temp_dir / "report.log").exists()


class TestSetupLogging:
    """Test handler installation"""

    def test_console_only(self, temp_dir):
        setup_logging(None, debug=False, colored=False)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], TqdmLoggingHandler)
        assert handlers[0].level == logging.INFO
        assert list(temp_dir.iterdir()) == []

    def test_debug_level(self):
        setup_logging(None, debug=True, colored=False)
        assert logging.getLogger().handlers[0].level == logging.DEBUG

    def test_quiets_http_loggers(self):
        setup_logging(None, colored=False)
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_log_files(self, temp_dir):
        """Test full log, error log and failures report in the log directory"""
        log_dir = temp_dir / "logs"
        setup_logging(log_dir, debug=False, colored=False)
        logger = get_logger("lyrics_fetch.tests")

        logger.debug("looking up lyrics")
        log_lyrics_failure(logger, temp_dir / "song.flac", "exhausted", "gave up after 3 attempts")
        shutdown_logging()

        assert logging.getLogger().handlers == []
        full_log = next(log_dir.glob("log_full_*.log")).read_text(encoding="utf-8")
        error_log = next(log_dir.glob("log_errors_*.log")).read_text(encoding="utf-8")
        report = next(log_dir.glob("lyrics_failures_*.log")).read_text(encoding="utf-8")

        assert "looking up lyrics" in full_log
        assert "failed to fetch lyrics [exhausted]" in full_log
        assert "looking up lyrics" not in error_log
        assert "failed to fetch lyrics [exhausted]" in error_log
        assert report == f"{temp_dir / 'song.flac'}\nexhausted: gave up after 3 attempts\n\n"

    def test_replaces_previous_handlers(self):
        setup_logging(None, colored=False)
        setup_logging(None, colored=False)
        assert len(logging.getLogger().handlers) == 1
