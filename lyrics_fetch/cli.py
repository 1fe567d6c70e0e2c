"""
Command-line interface for lyrics-fetch.

This module implements the CLI using Click.
rich-click is used for the output colors.

Usage:
    # Fetch lyrics for every song under ~/Music
    lyrics-fetch -i ~/Music

    # Debug output, and keep run logs (including a failures report)
    lyrics-fetch -i ~/Music --debug --log-dir ./logs

    # Use a specific config file, no progress bar
    lyrics-fetch -i ~/Music -c ~/lyrics-fetch.yaml --no-progress

Exit codes:
    0    Run completed (individual files may still have failed)
    1    Configuration error or unexpected error
    2    The music directory could not be traversed
    130  Interrupted by the user

Interrupting:
    The first Ctrl-C lets the current file finish and then stops the run.
    A second Ctrl-C aborts immediately. In both cases the final counts
    are logged.
"""

import signal
import sys
import threading
from pathlib import Path
from typing import Optional

import rich_click as click

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.OPTION_GROUPS = {
    "cli": [
        {
            "name": "Input",
            "options": ["--input", "--config"],
        },
        {
            "name": "Output",
            "options": ["--debug", "--log-dir", "--no-progress"],
        },
        {
            "name": "Info",
            "options": ["--version", "--help"],
        },
    ],
}

from lyrics_fetch import __version__
from lyrics_fetch.core import (
    ConfigError,
    LibraryError,
    LyricsFetchError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from lyrics_fetch.core.progress import LyricsProgressBar
from lyrics_fetch.library import LibraryProcessor, RunStats, fetch_library
from lyrics_fetch.lyrics import LrclibClient, LyricsRetriever

logger = get_logger(__name__)

EXIT_CONFIG_ERROR = 1
EXIT_LIBRARY_ERROR = 2
EXIT_INTERRUPTED = 130


@click.command()
@click.option(
    "-i", "--input", "input_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    metavar="<music-dir>",
    help="Root directory of the music library"
)
@click.option(
    "-d", "--debug",
    is_flag=True,
    help="Show debug messages"
)
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml if present)"
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="<dir>",
    help="Also write run logs and a failures report to this directory"
)
@click.option(
    "--no-progress",
    is_flag=True,
    help="Disable the progress bar"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(
    ctx: click.Context,
    input_dir: Optional[Path],
    debug: bool,
    config_path: Optional[Path],
    log_dir: Optional[Path],
    no_progress: bool,
    version: bool
) -> None:
    """
    lyrics-fetch: Fetch time-synced lyrics for a local music library.

    Walks the music directory, looks up every song on LRCLIB and writes the
    synced lyrics to a .lrc file next to it. Songs that already have a .lrc
    file are skipped; instrumental songs get an empty one.

    \b
    USAGE:
        lyrics-fetch -i ~/Music
        lyrics-fetch -i ~/Music --debug --log-dir ./logs
    """
    if version:
        click.echo(f"lyrics-fetch {__version__}")
        ctx.exit(0)

    if input_dir is None:
        raise click.UsageError("Missing option '-i' / '--input'.")

    _run_fetch(
        input_dir=input_dir,
        debug=debug,
        config_path=config_path,
        log_dir=log_dir,
        show_progress=not no_progress,
    )


def _run_fetch(
    input_dir: Path,
    debug: bool,
    config_path: Path | None,
    log_dir: Path | None,
    show_progress: bool
) -> None:
    """
    Execute a lyrics fetching run.

    1. Loads configuration (CLI flags win over config file values)
    2. Sets up logging
    3. Walks the library and processes every file
    4. Logs the final counts

    Raises:
        SystemExit: On fatal errors (with appropriate exit code).
    """
    stats = RunStats()
    stop_event = threading.Event()
    previous_handler = None

    try:
        config = load_config(config_path)

        setup_logging(
            log_dir or config.logging.directory,
            debug=debug or config.logging.debug,
        )
        logger.info(f"starting music lyrics fetcher (directory: {input_dir})")

        previous_handler = _install_interrupt_handler(stop_event)

        with LrclibClient(
            endpoint=config.lookup.endpoint,
            timeout=config.lookup.timeout,
            user_agent=config.lookup.user_agent,
        ) as client:
            retriever = LyricsRetriever(
                client,
                max_attempts=config.lookup.max_attempts,
                retry_delay=config.lookup.retry_delay,
            )
            fetch_library(
                input_dir,
                LibraryProcessor(retriever),
                stats,
                extensions=config.library.extensions,
                sidecar_extension=config.library.sidecar_extension,
                progress=LyricsProgressBar(total=0) if show_progress else None,
                stop_event=stop_event,
            )

        _log_finished(stats)
        if stop_event.is_set():
            sys.exit(EXIT_INTERRUPTED)

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    except LibraryError as e:
        click.echo(f"Library error: {e.message}", err=True)
        logger.error(f"Library error: {e.message}")
        sys.exit(EXIT_LIBRARY_ERROR)

    except LyricsFetchError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(1)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        _log_finished(stats)
        sys.exit(EXIT_INTERRUPTED)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)
        shutdown_logging()


def _install_interrupt_handler(stop_event: threading.Event):
    """
    Make the first Ctrl-C request a graceful stop.

    Returns:
        The previous SIGINT handler, or None when not running in the main
        thread (signals cannot be installed there).
    """
    if threading.current_thread() is not threading.main_thread():
        return None

    def handle_interrupt(signum, frame):
        if stop_event.is_set():
            raise KeyboardInterrupt
        stop_event.set()
        logger.warning("stopping after the current file, press Ctrl-C again to abort")

    return signal.signal(signal.SIGINT, handle_interrupt)


def _log_finished(stats: RunStats) -> None:
    logger.info(
        f"finished music lyrics fetcher: fetched={stats.fetched} "
        f"instrumental={stats.instrumental} skipped={stats.skipped} errors={stats.errors}"
    )


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `lyrics-fetch` from the command line.
    """
    cli()


if __name__ == "__main__":
    main()
